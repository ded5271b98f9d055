"""Circular log buffer for diagnostics.

Captures INFO+ records from the meetstream_bridge loggers into a fixed-size
buffer that diagnostics can read regardless of how the host application
configures logging. Oldest entries are dropped when the buffer is full.

Usage:
    from meetstream_bridge.core.log_buffer import setup_log_buffer
    buffer = setup_log_buffer()
    ...
    entries = buffer.get_entries()
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field

MAX_LOG_ENTRIES = 200

PACKAGE_LOGGER = "meetstream_bridge"


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: float
    level: str
    logger: str
    message: str

    def to_dict(self) -> dict:
        """Convert to dictionary for diagnostics output."""
        return {
            "timestamp": self.timestamp,
            "level": self.level,
            "logger": self.logger,
            "message": self.message,
        }


@dataclass
class LogBuffer:
    """Fixed-size circular buffer using deque. Drops oldest when full."""

    entries: deque[LogEntry] = field(default_factory=lambda: deque(maxlen=MAX_LOG_ENTRIES))

    def add(self, level: str, logger: str, message: str) -> None:
        """Add a log entry to the buffer."""
        self.entries.append(
            LogEntry(
                timestamp=time.time(),
                level=level,
                logger=logger.removeprefix(f"{PACKAGE_LOGGER}."),
                message=message,
            )
        )

    def get_entries(self) -> list[dict]:
        """Get all entries as list of dicts."""
        return [entry.to_dict() for entry in self.entries]

    def clear(self) -> None:
        """Clear all entries."""
        self.entries.clear()


class BufferingHandler(logging.Handler):
    """Log handler that copies records into a LogBuffer.

    Records still propagate to the application's own handlers.
    """

    def __init__(self, buffer: LogBuffer, level: int = logging.INFO) -> None:
        """Initialize the handler."""
        super().__init__(level)
        self.buffer = buffer

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the buffer."""
        try:
            message = self.format(record)
            self.buffer.add(record.levelname, record.name, message)
        except Exception:
            self.handleError(record)


def get_log_buffer() -> LogBuffer | None:
    """Return the buffer installed on the package logger, if any."""
    for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
        if isinstance(handler, BufferingHandler):
            return handler.buffer
    return None


def setup_log_buffer() -> LogBuffer:
    """Install the buffering handler on the package logger.

    Idempotent: a second call returns the already-installed buffer.
    """
    existing = get_log_buffer()
    if existing is not None:
        return existing

    buffer = LogBuffer()
    handler = BufferingHandler(buffer, level=logging.INFO)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.addHandler(handler)
    # Handler levels only filter what reaches them
    if logger.getEffectiveLevel() > logging.INFO:
        logger.setLevel(logging.INFO)
    return buffer


def teardown_log_buffer() -> None:
    """Remove the buffering handler (used by tests and the CLI)."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, BufferingHandler):
            logger.removeHandler(handler)


def get_log_entries() -> list[dict]:
    """Get log entries for diagnostics, or an empty list if not set up."""
    buffer = get_log_buffer()
    if buffer is None:
        return []
    return buffer.get_entries()
