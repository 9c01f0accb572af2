from __future__ import annotations
import os
import threading
from pathlib import Path
from typing import Optional

from ...core.paths import get_default_log_directory, resolve_directory

_dir_lock = threading.RLock()
_log_directory: Optional[Path] = None
_text_log_lock = threading.RLock()


def default_log_directory() -> Path:
    """Return the folder holding the text logs (configured or per-user default)."""
    with _dir_lock:
        if _log_directory is not None:
            _log_directory.mkdir(parents=True, exist_ok=True)
            return _log_directory
    return get_default_log_directory()


def set_log_directory(path: Optional[os.PathLike | str]) -> Path:
    """Redirect text logs to ``path``; an empty value restores the default."""
    global _log_directory
    with _dir_lock:
        _log_directory = resolve_directory(path) if path else None
    return default_log_directory()


def warning_log_path() -> Path:
    return default_log_directory() / "warnings.log"


def error_log_path() -> Path:
    return default_log_directory() / "errors.log"


def crash_log_path() -> Path:
    return default_log_directory() / "crash.log"


def append_text_log(path: Path, line: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with _text_log_lock:
        with path.open("a", encoding="utf-8") as handle:
            handle.write(line.rstrip("\n") + "\n")


def read_text_log(path: Path) -> list[str]:
    """Lines of a text log; a missing file reads as empty."""
    if not path.exists():
        return []
    with _text_log_lock:
        return path.read_text(encoding="utf-8").splitlines()


__all__ = [
    "append_text_log",
    "crash_log_path",
    "default_log_directory",
    "error_log_path",
    "read_text_log",
    "set_log_directory",
    "warning_log_path",
]
