"""Diagnostics snapshot for troubleshooting.

Combines the redacted configuration, connection status, the last discovery
report and recent log lines into one JSON-friendly dict. Log messages are
sanitized so credentials never leave the process.
"""

from __future__ import annotations

import logging
import re
import time
from typing import TYPE_CHECKING, Any

from .const import VERSION
from .core.log_buffer import LogBuffer, get_log_buffer

if TYPE_CHECKING:
    from .orchestrator import Orchestrator

_LOGGER = logging.getLogger(__name__)

MAX_LOG_RECORDS = 150


def _sanitize_log_message(message: str) -> str:
    """Sanitize log message to remove sensitive information.

    Args:
        message: Raw log message

    Returns:
        Sanitized message with credentials and home paths redacted
    """
    # Authorization header values
    message = re.sub(
        r"\b(Token|Bearer|Basic)\s+[A-Za-z0-9._~+/=-]+",
        r"\1 ***REDACTED***",
        message,
    )
    # Raw platform keys
    message = re.sub(r"\bms_[A-Za-z0-9_-]+", "ms_***REDACTED***", message)
    # key=value / key: value pairs that look like credentials
    message = re.sub(
        r"(password|passwd|secret|api[_-]?key|x-api-key|token|authorization)[\s]*[=:]\s*[^\s,}\]]+",
        r"\1=***REDACTED***",
        message,
        flags=re.IGNORECASE,
    )
    message = re.sub(r"/home/[^\s,}\]]+", "/home/***PATH***", message)
    return message


def _get_recent_logs(log_buffer: LogBuffer | None, max_records: int = MAX_LOG_RECORDS) -> list[dict[str, Any]]:
    """Sanitized log entries from the buffer, newest last."""
    if log_buffer is None:
        return []
    entries = log_buffer.get_entries()[-max_records:]
    for entry in entries:
        entry["message"] = _sanitize_log_message(entry["message"])
    return entries


def build_diagnostics(orchestrator: Orchestrator, log_buffer: LogBuffer | None = None) -> dict[str, Any]:
    """Build a diagnostics snapshot.

    Args:
        orchestrator: Orchestrator to describe
        log_buffer: Buffer to read logs from (defaults to the installed one)

    Returns:
        JSON-friendly dict
    """
    buffer = log_buffer if log_buffer is not None else get_log_buffer()
    report = orchestrator.discovery_report

    diagnostics: dict[str, Any] = {
        "version": VERSION,
        "generated_at": time.time(),
        "config": orchestrator.config.to_dict(),
        "connection_status": orchestrator.get_connection_status().value,
        "generation": orchestrator.generation,
        "serving_synthetic_data": orchestrator.is_synthetic,
        "discovery": report.to_dict() if report is not None else None,
        "recent_logs": _get_recent_logs(buffer),
    }
    _LOGGER.debug("Built diagnostics with %d log entries", len(diagnostics["recent_logs"]))
    return diagnostics
