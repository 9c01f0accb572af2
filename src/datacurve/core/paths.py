"""
Centralized path resolution for the DataCurve library.

This module provides a single source of truth for resolving the per-user
directories the library writes to: the settings file and the text logs.
"""

import os
import sys
from pathlib import Path
from typing import Optional

APP_DIR_NAME = "DataCurve"

# Overrides the user data directory (tests, portable installs).
DATA_DIR_ENV = "DATACURVE_DATA_DIR"


def _get_user_data_path() -> Path:
    """
    Get the user data directory for application settings and logs.

    On Windows: %LOCALAPPDATA%/DataCurve
    On macOS: ~/Library/Application Support/DataCurve
    On Linux: ~/.local/share/DataCurve

    Returns:
        The user data path as a Path object.
    """
    override = os.getenv(DATA_DIR_ENV)
    if override:
        return Path(override)

    if os.name == "nt":  # Windows
        base = Path(os.getenv("LOCALAPPDATA", Path.home()))
    elif sys.platform == "darwin":  # macOS
        base = Path.home() / "Library" / "Application Support"
    else:  # Linux and others
        base = Path.home() / ".local" / "share"

    return base / APP_DIR_NAME


# ============================================================================
# PUBLIC API - Path Resolution Functions
# ============================================================================


def get_user_data_directory() -> Path:
    """
    Get the user data directory for application data.

    Creates the directory if it doesn't exist.

    Returns:
        The user data directory path as a Path object.
    """
    directory = _get_user_data_path()
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def get_default_log_directory() -> Path:
    """
    Get the default folder for the warning, error and crash text logs.

    Creates the directory if it doesn't exist.

    Returns:
        Absolute path to the log folder as a Path object.
    """
    folder = _get_user_data_path() / "logs"
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def get_default_settings_path() -> Path:
    """
    Get the default INI file used by the settings manager.

    Returns:
        Absolute path to ``settings.ini`` inside the user data directory.
    """
    return get_user_data_directory() / "settings.ini"


def resolve_directory(path: Optional[os.PathLike | str]) -> Path:
    """Return ``path`` as a created directory, or the default log folder when empty."""
    if not path:
        return get_default_log_directory()
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory
