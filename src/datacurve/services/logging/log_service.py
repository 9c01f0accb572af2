from __future__ import annotations
import logging
import sys
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional, Sequence

from .storage import append_text_log, error_log_path, warning_log_path

logger = logging.getLogger(__name__)

# Events kept in memory for listeners that attach late (e.g. a log panel).
HISTORY_SIZE = 1000


@dataclass(frozen=True)
class LogEvent:
    """Container describing a single log entry destined for the UI."""

    message: str
    level: int
    logger_name: str
    created: float
    origin: str
    formatted: str


Listener = Callable[[LogEvent], None]
LoggerListener = Callable[[Sequence[str]], None]


class LogService(logging.Handler):
    """Central logging handler that relays log messages to registered listeners."""

    def __init__(self, *, persist: bool = True, history_size: int = HISTORY_SIZE) -> None:
        super().__init__(level=logging.NOTSET)
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()
        self._formatter = logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s", "%Y-%m-%d %H:%M:%S"
        )
        self._installed = False
        self._persist = persist
        self._history: Deque[LogEvent] = deque(maxlen=history_size)
        self._logger_names: set[str] = set()
        self._logger_listeners: List[LoggerListener] = []
        self._shutdown = False  # Flag to prevent notifications after shutdown

    # ------------------------------------------------------------------
    def emit(self, record: logging.LogRecord) -> None:
        try:
            formatted = self._formatter.format(record)
        except Exception:  # pragma: no cover - mirrors logging.Handler
            self.handleError(record)
            return
        self._register_logger_name(record.name)
        event = LogEvent(
            message=record.getMessage(),
            level=record.levelno,
            logger_name=record.name,
            created=record.created,
            origin="logging",
            formatted=formatted,
        )
        self._record(event)

    # ------------------------------------------------------------------
    def log_text(self, message: str, *, level: int = logging.INFO, origin: str = "app") -> None:
        """Record a free-form message that did not go through a logger."""

        created = time.time()
        clean_message = message.rstrip("\n")
        if not clean_message.strip():
            return
        self._register_logger_name(origin)
        record = logging.LogRecord(
            name=origin,
            level=level,
            pathname="",
            lineno=0,
            msg=clean_message,
            args=(),
            exc_info=None,
        )
        record.created = created
        event = LogEvent(
            message=clean_message,
            level=level,
            logger_name=origin,
            created=created,
            origin=origin,
            formatted=self._formatter.format(record),
        )
        self._record(event)

    # ------------------------------------------------------------------
    def add_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def recent_events(self, *, min_level: int = logging.NOTSET, keyword: Optional[str] = None) -> List[LogEvent]:
        with self._lock:
            events = list(self._history)
        needle = (keyword or "").lower()
        return [
            e
            for e in events
            if e.level >= min_level and (not needle or needle in e.formatted.lower())
        ]

    # ------------------------------------------------------------------
    def ensure_installed(self) -> None:
        """Attach the handler to the root logger once."""

        with self._lock:
            if self._installed:
                return
            root = logging.getLogger()
            if self not in root.handlers:
                root.addHandler(self)
            root.setLevel(min(root.level, logging.INFO))
            self._installed = True
            self._register_logger_name(root.name)

    def install_on_logger(self, logger: logging.Logger) -> None:
        """Attach the handler to the provided logger if not already present."""

        with self._lock:
            if self not in logger.handlers:
                logger.addHandler(self)
            logger.propagate = False
        self._register_logger_name(logger.name)
        self.ensure_installed()

    # ------------------------------------------------------------------
    def add_logger_listener(self, listener: LoggerListener) -> None:
        with self._lock:
            if listener not in self._logger_listeners:
                self._logger_listeners.append(listener)
            names = sorted(self._logger_names)
        try:
            listener(names)
        except Exception:
            _safe_print_exception()

    def remove_logger_listener(self, listener: LoggerListener) -> None:
        with self._lock:
            if listener in self._logger_listeners:
                self._logger_listeners.remove(listener)

    def shutdown(self) -> None:
        """Stop notifying listeners; records are still written to the text logs."""
        with self._lock:
            self._shutdown = True
            self._listeners.clear()
            self._logger_listeners.clear()

    def get_logger_names(self) -> List[str]:
        with self._lock:
            return sorted(self._logger_names)

    # ------------------------------------------------------------------
    def _record(self, event: LogEvent) -> None:
        with self._lock:
            self._history.append(event)
        self._persist_event(event)
        self._notify(event)

    def _notify(self, event: LogEvent) -> None:
        if self._shutdown:
            return
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                _safe_print_exception()

    def _register_logger_name(self, name: str) -> None:
        if not name:
            return
        with self._lock:
            if name in self._logger_names:
                return
            self._logger_names.add(name)
            listeners = list(self._logger_listeners)
            names = sorted(self._logger_names)
        for listener in listeners:
            try:
                listener(names)
            except Exception:
                _safe_print_exception()

    def _persist_event(self, event: LogEvent) -> None:
        if not self._persist:
            return
        try:
            if int(event.level) >= int(logging.WARNING):
                append_text_log(warning_log_path(), event.formatted)
            if int(event.level) >= int(logging.ERROR):
                append_text_log(error_log_path(), event.formatted)
        except OSError:
            _safe_print_exception()


def _safe_print_exception() -> None:  # pragma: no cover - best effort
    import traceback

    stream = getattr(sys, "__stderr__", None)
    if stream is None:
        stream = getattr(sys, "__stdout__", None)
    if stream is not None:
        traceback.print_exc(file=stream)


_service = LogService()


def get_log_service() -> LogService:
    return _service


__all__ = ["LogEvent", "LogService", "get_log_service"]
