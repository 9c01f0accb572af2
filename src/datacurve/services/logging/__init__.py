"""Logging utilities shared by the engine and any UI built on it."""

from .log_service import LogEvent, LogService, get_log_service
from .logging_setup import configure_logging, install_global_exception_hooks
from .storage import (
    append_text_log,
    crash_log_path,
    default_log_directory,
    error_log_path,
    read_text_log,
    set_log_directory,
    warning_log_path,
)

__all__ = [
    "LogEvent",
    "LogService",
    "append_text_log",
    "configure_logging",
    "crash_log_path",
    "default_log_directory",
    "error_log_path",
    "get_log_service",
    "install_global_exception_hooks",
    "read_text_log",
    "set_log_directory",
    "warning_log_path",
]
