"""Transcript resolution, parsing and rendering."""

from __future__ import annotations

from .formatter import format_transcript, parse_transcript
from .resolver import TranscriptResolver

__all__ = [
    "TranscriptResolver",
    "format_transcript",
    "parse_transcript",
]
