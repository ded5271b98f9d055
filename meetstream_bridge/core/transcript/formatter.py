"""Transcript parsing and text rendering.

Upstream transcripts arrive in several shapes:

    [{"speaker": "Ann", "text": "Hi", "start": 0.0}, ...]   segment list
    ["Hi", "Hello"]                                          list of strings
    "Hi everyone"                                            flat string
    {"segments": [...]} / {"transcript": "..."} / ...         wrapped

parse_transcript() turns any of these into TranscriptLine objects;
format_transcript() renders them as display text.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from ...models import TranscriptLine

SPEAKER_FIELDS = ("speaker", "speaker_name", "name", "participant")
TEXT_FIELDS = ("text", "content", "transcript", "words")
OFFSET_FIELDS = ("start", "offset", "start_time")
# Alternate fields a wrapped transcript may live under, in lookup order
WRAPPER_FIELDS = ("segments", "utterances", "transcript", "text", "content", "data", "results")

_MAX_DEPTH = 4


def _clean_text(value: Any, allow_words: bool = False) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if allow_words and isinstance(value, list):
        # Word-level payloads: ["Hi", "there"] or [{"word": "Hi"}, ...]
        words = []
        for item in value:
            if isinstance(item, str):
                words.append(item.strip())
            elif isinstance(item, Mapping):
                word = item.get("word") or item.get("text")
                if isinstance(word, str):
                    words.append(word.strip())
        return " ".join(w for w in words if w) or None
    return None


def _segment_text(segment: Mapping[str, Any]) -> str | None:
    for key in TEXT_FIELDS:
        text = _clean_text(segment.get(key), allow_words=key == "words")
        if text:
            return text
    return None


def _speaker(segment: Mapping[str, Any]) -> str | None:
    for key in SPEAKER_FIELDS:
        value = segment.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
        if isinstance(value, Mapping):
            name = value.get("name")
            if isinstance(name, str) and name.strip():
                return name.strip()
    return None


def _numeric_offset(segment: Mapping[str, Any]) -> float | None:
    for key in OFFSET_FIELDS:
        value = segment.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    return None


def _timestamp(segment: Mapping[str, Any]) -> datetime | None:
    value = segment.get("timestamp")
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _is_segment(item: Mapping[str, Any]) -> bool:
    """A mapping carrying an utterance directly rather than wrapping one."""
    if _segment_text(item) is None:
        return False
    return _speaker(item) is not None or _numeric_offset(item) is not None or "timestamp" in item


def _parse_segments(items: list[Any]) -> list[TranscriptLine]:
    lines: list[TranscriptLine] = []
    first_ts: datetime | None = None

    for item in items:
        if isinstance(item, TranscriptLine):
            lines.append(item)
            continue
        if isinstance(item, str):
            if item.strip():
                lines.append(TranscriptLine(text=item.strip()))
            continue
        if not isinstance(item, Mapping):
            continue

        text = _segment_text(item)
        if not text:
            continue

        offset = _numeric_offset(item)
        if offset is None:
            ts = _timestamp(item)
            if ts is not None:
                if first_ts is None:
                    first_ts = ts
                try:
                    offset = (ts - first_ts).total_seconds()
                except TypeError:
                    # Mixed naive/aware timestamps
                    offset = None

        lines.append(TranscriptLine(text=text, speaker=_speaker(item), offset_seconds=offset))

    return lines


def parse_transcript(data: Any, _depth: int = 0) -> list[TranscriptLine]:
    """Parse any supported transcript shape into lines.

    Returns an empty list for shapes that carry no utterances.
    """
    if data is None or _depth > _MAX_DEPTH:
        return []

    if isinstance(data, TranscriptLine):
        return [data]

    if isinstance(data, str):
        text = data.strip()
        return [TranscriptLine(text=text)] if text else []

    if isinstance(data, list):
        return _parse_segments(data)

    if isinstance(data, Mapping):
        if _is_segment(data):
            return _parse_segments([data])
        for key in WRAPPER_FIELDS:
            if key in data:
                lines = parse_transcript(data[key], _depth + 1)
                if lines:
                    return lines

    return []


def format_transcript(data: Any) -> str:
    """Render a transcript as display text.

    Segment lists become one quoted utterance per line, separated by blank
    lines. A single speakerless line is returned as its bare text. Shapes
    that carry no utterances are dumped as indented JSON.
    """
    if data is None:
        return ""
    if isinstance(data, str):
        return data

    lines = parse_transcript(data)
    if len(lines) == 1 and lines[0].speaker is None:
        return lines[0].text
    if lines:
        return "\n\n".join(f'"{line.text}"' for line in lines)

    try:
        return json.dumps(data, indent=2, default=str)
    except (TypeError, ValueError):
        return str(data)
