import logging
import sys
import threading
import traceback

from .log_service import get_log_service
from .storage import append_text_log, crash_log_path, set_log_directory


def configure_logging(level: int = logging.INFO, *, name: str = "DataCurve", log_dir=None) -> logging.Logger:
    """Create or fetch the library logger and route it through the LogService.

    The LogService handler formats and persists records itself, so no extra
    StreamHandler is added.
    """

    if log_dir:
        set_log_directory(log_dir)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    service = get_log_service()
    service.install_on_logger(logger)
    # Module loggers live under the package name.
    package_logger = logging.getLogger("datacurve")
    package_logger.setLevel(level)
    service.install_on_logger(package_logger)
    return logger


def install_global_exception_hooks() -> None:
    """Install process-wide hooks so uncaught exceptions are always persisted."""

    def _handle_exception(exc_type, exc_value, exc_tb) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return
        logging.getLogger("DataCurve.unhandled").critical(
            "Unhandled exception",
            exc_info=(exc_type, exc_value, exc_tb),
        )
        text = "".join(traceback.format_exception(exc_type, exc_value, exc_tb)).rstrip("\n")
        try:
            append_text_log(crash_log_path(), text)
        except OSError:
            sys.__excepthook__(exc_type, exc_value, exc_tb)

    def _handle_thread_exception(args: threading.ExceptHookArgs) -> None:
        _handle_exception(args.exc_type, args.exc_value, args.exc_traceback)

    sys.excepthook = _handle_exception
    threading.excepthook = _handle_thread_exception


__all__ = ["configure_logging", "install_global_exception_hooks"]
