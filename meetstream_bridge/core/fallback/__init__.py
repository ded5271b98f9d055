"""Synthetic fallback dataset."""

from __future__ import annotations

from .dataset import (
    SYNTHETIC_ID_PREFIX,
    all_synthetic_sessions,
    is_synthetic_id,
    synthetic_sessions,
    synthetic_transcript,
)

__all__ = [
    "SYNTHETIC_ID_PREFIX",
    "all_synthetic_sessions",
    "is_synthetic_id",
    "synthetic_sessions",
    "synthetic_transcript",
]
