"""Structured logging for decimalnotation.

A log event is a message plus key-value fields. Fields pushed with
:func:`log_context` are merged under the fields given at the call site, and
the record is rendered by one of the ``LOG_FORMATS``.

Output goes to stderr so it never mixes with formatted values written to
stdout by the command-line interface.

Usage:
    from decimalnotation.logging import configure_logging, get_logger

    configure_logging(level="debug", format="logfmt")
    logger = get_logger(__name__)
    logger.debug("Lossy float fallback", spec="R", reason="round-trip style")
"""

from __future__ import annotations

import json
import sys
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Iterator, TextIO

LOG_FORMATS = ("console", "json", "logfmt")


class LogLevel(IntEnum):
    """Thresholds accepted by the ``logging.level`` setting."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def from_string(cls, level: str) -> "LogLevel":
        """Parse a level name. ``warn`` is accepted; unknown names mean INFO."""
        name = level.strip().upper()
        if name == "WARN":
            name = "WARNING"
        return cls.__members__.get(name, cls.INFO)


@dataclass(frozen=True)
class LogRecord:
    """A single log event."""

    level: LogLevel
    message: str
    logger_name: str
    fields: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        """Flatten the record; fields sit next to the fixed keys."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name.lower(),
            "message": self.message,
            "logger": self.logger_name,
            **self.fields,
        }


# =============================================================================
# Context Fields
# =============================================================================

_context_fields: ContextVar[dict[str, Any] | None] = ContextVar("log_context_fields", default=None)


def current_fields() -> dict[str, Any]:
    """Fields added by the enclosing :func:`log_context` blocks."""
    return dict(_context_fields.get() or {})


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Add fields to every log emitted inside the block.

    Example:
        >>> with log_context(command="format", spec="N2"):
        ...     logger.debug("Formatting")  # carries command and spec
    """
    token = _context_fields.set({**current_fields(), **fields})
    try:
        yield
    finally:
        _context_fields.reset(token)


# =============================================================================
# Formatters
# =============================================================================


class LogFormatter(ABC):
    """Renders a LogRecord as one line of text."""

    @abstractmethod
    def format(self, record: LogRecord) -> str:
        pass


class JSONFormatter(LogFormatter):
    """One JSON object per line."""

    def format(self, record: LogRecord) -> str:
        return json.dumps(record.to_dict(), ensure_ascii=False, default=str)


class LogfmtFormatter(LogFormatter):
    """``key=value`` pairs, quoting values that contain spaces."""

    def format(self, record: LogRecord) -> str:
        pairs = {
            "ts": record.timestamp.isoformat(),
            "level": record.level.name.lower(),
            "msg": record.message,
            "logger": record.logger_name,
            **record.fields,
        }
        return " ".join(f"{key}={self._value(value)}" for key, value in pairs.items())

    @staticmethod
    def _value(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        text = str(value)
        if not text or any(char in text for char in ' "='):
            escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
            return f'"{escaped}"'
        return text


class ConsoleFormatter(LogFormatter):
    """Human-readable output.

    Example output:
        2026-01-15 10:30:00 DEBUG [decimalnotation.formatter] Lossy float fallback spec=R
    """

    def __init__(self, *, show_timestamp: bool = True) -> None:
        self._show_timestamp = show_timestamp

    def format(self, record: LogRecord) -> str:
        parts = [record.level.name, f"[{record.logger_name}]", record.message]
        if self._show_timestamp:
            parts.insert(0, record.timestamp.strftime("%Y-%m-%d %H:%M:%S"))
        parts.extend(f"{key}={value}" for key, value in record.fields.items())
        return " ".join(parts)


def create_formatter(format: str) -> LogFormatter:
    """Create the formatter for one of ``LOG_FORMATS``."""
    if format == "json":
        return JSONFormatter()
    if format == "logfmt":
        return LogfmtFormatter()
    return ConsoleFormatter()


# =============================================================================
# Handler & Logger
# =============================================================================


class ConsoleHandler:
    """Writes formatted records to a stream, stderr unless one is given."""

    def __init__(self, formatter: LogFormatter | None = None, stream: TextIO | None = None) -> None:
        self.formatter = formatter or ConsoleFormatter()
        self._stream = stream
        self._lock = threading.Lock()

    def handle(self, record: LogRecord) -> None:
        # Resolved per call so a replaced sys.stderr is honoured.
        stream = self._stream or sys.stderr
        with self._lock:
            stream.write(self.formatter.format(record) + "\n")
            stream.flush()


class StructuredLogger:
    """Logger passing key-value records at or above ``level`` to its handlers.

    Example:
        >>> logger = StructuredLogger("decimalnotation.cli", handlers=[ConsoleHandler()])
        >>> logger.info("Formatted value", spec="N2", locale="de-DE")
    """

    def __init__(
        self,
        name: str,
        *,
        level: LogLevel = LogLevel.INFO,
        handlers: list[ConsoleHandler] | None = None,
    ) -> None:
        self.name = name
        self.level = level
        self.handlers: list[ConsoleHandler] = handlers if handlers is not None else []

    def _log(self, level: LogLevel, message: str, fields: dict[str, Any]) -> None:
        if level < self.level:
            return
        record = LogRecord(level, message, self.name, {**current_fields(), **fields})
        for handler in self.handlers:
            handler.handle(record)

    def debug(self, message: str, **fields: Any) -> None:
        self._log(LogLevel.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._log(LogLevel.INFO, message, fields)


# =============================================================================
# Global Logger Management
# =============================================================================

_loggers: dict[str, StructuredLogger] = {}
_default_handlers: list[ConsoleHandler] = []
_default_level = LogLevel.INFO
_lock = threading.Lock()


def configure_logging(
    *,
    level: LogLevel | str = LogLevel.INFO,
    format: str = "console",
    stream: TextIO | None = None,
) -> None:
    """Configure every existing and future logger.

    Args:
        level: Minimum log level.
        format: One of ``LOG_FORMATS``.
        stream: Output stream (stderr when omitted).
    """
    global _default_handlers, _default_level

    if isinstance(level, str):
        level = LogLevel.from_string(level)

    with _lock:
        _default_level = level
        _default_handlers = [ConsoleHandler(create_formatter(format), stream)]
        for logger in _loggers.values():
            logger.level = level
            logger.handlers = list(_default_handlers)


def get_logger(name: str) -> StructuredLogger:
    """Get or create a logger (usually ``get_logger(__name__)``)."""
    with _lock:
        if name not in _loggers:
            _loggers[name] = StructuredLogger(
                name, level=_default_level, handlers=list(_default_handlers)
            )
        return _loggers[name]


configure_logging()
