"""Structured logging, timing and metric hooks for lazymethod connections.

Each connection owns a :class:`StructuredLogger` bound to its id. Code that
works on behalf of one accessor method runs inside :func:`invocation_scope`,
so every record it logs names the method without passing it around.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterator

# Accessor method being validated, invoked or finalized
method_var: ContextVar[str | None] = ContextVar("method", default=None)


class LogLevel(str, Enum):
    """Log levels matching Python's logging module."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@contextmanager
def invocation_scope(method: str) -> Iterator[None]:
    """Tag records logged inside the block with ``method``."""
    token = method_var.set(method)
    try:
        yield
    finally:
        method_var.reset(token)


class StructuredFormatter(logging.Formatter):
    """Formats a record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "logger": record.name,
        }
        context = getattr(record, "context", None)
        if context:
            data["context"] = context
        if record.exc_info and record.exc_info[1] is not None:
            error = record.exc_info[1]
            data["error"] = {"type": type(error).__name__, "message": str(error)}
        duration_ms = getattr(record, "duration_ms", None)
        if duration_ms is not None:
            data["duration_ms"] = duration_ms
        return json.dumps(data, default=str)


class StructuredLogger:
    """Logger bound to one connection.

    Every record carries the connection id and, inside
    :func:`invocation_scope`, the accessor method in its ``context``.

    Example:
        logger = StructuredLogger("lazymethod.connection", connection_id="3f2a9c")
        with invocation_scope("get_person"):
            logger.warning('Useless argument "colour"', context={"argument": "colour"})
    """

    def __init__(
        self,
        name: str,
        level: LogLevel = LogLevel.INFO,
        connection_id: str | None = None,
    ) -> None:
        self.connection_id = connection_id
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.value)

        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)

    def _context(self, context: dict[str, Any] | None) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        if self.connection_id:
            merged["connection_id"] = self.connection_id
        method = method_var.get()
        if method:
            merged["method"] = method
        if context:
            merged.update(context)
        return merged

    def _log(
        self,
        level: int,
        message: str,
        context: dict[str, Any] | None = None,
        error: Exception | None = None,
        duration_ms: float | None = None,
    ) -> None:
        extra: dict[str, Any] = {"context": self._context(context)}
        if duration_ms is not None:
            extra["duration_ms"] = duration_ms
        exc_info = (type(error), error, error.__traceback__) if error else None
        self.logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        duration_ms: float | None = None,
    ) -> None:
        self._log(logging.DEBUG, message, context, duration_ms=duration_ms)

    def warning(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._log(logging.WARNING, message, context, error)

    def error(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._log(logging.ERROR, message, context, error)


class Timer:
    """Context manager measuring wall time in milliseconds."""

    def __init__(self) -> None:
        self.start_time: float = 0
        self.end_time: float = 0

    @property
    def duration_ms(self) -> float:
        return (self.end_time - self.start_time) * 1000

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end_time = time.perf_counter()


# Function(name, value, labels)
MetricCallback = Callable[[str, float, dict[str, Any]], None]

_metric_callbacks: list[MetricCallback] = []


def register_metric_callback(callback: MetricCallback) -> None:
    """Receive ``lazymethod.invoke.duration_ms`` timers and ``lazymethod.invoke.errors`` counters.

    Labels always hold ``method`` and ``connection_id``.
    """
    _metric_callbacks.append(callback)


def emit_metric(name: str, value: float, labels: dict[str, Any]) -> None:
    """Send a metric to every registered callback.

    A failing callback is logged and skipped; it never fails the invocation.
    """
    for callback in _metric_callbacks:
        try:
            callback(name, value, labels)
        except Exception:
            logging.getLogger(__name__).warning(
                "Metric callback %r failed for %s", callback, name, exc_info=True
            )


def emit_counter(name: str, labels: dict[str, Any]) -> None:
    emit_metric(name, 1.0, labels)


def emit_timer(name: str, duration_ms: float, labels: dict[str, Any]) -> None:
    emit_metric(name, duration_ms, labels)


def get_logger(
    name: str,
    level: LogLevel = LogLevel.INFO,
    connection_id: str | None = None,
) -> StructuredLogger:
    """Get a structured logger, optionally bound to a connection."""
    return StructuredLogger(name, level, connection_id)
