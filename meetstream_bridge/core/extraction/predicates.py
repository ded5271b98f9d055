"""Field alias tables and the session-record predicate.

Upstream revisions disagree on field names. Each canonical field has an
ordered alias list; the first non-empty value wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

ID_FIELDS = ("id", "bot_id", "uuid", "meeting_id")
# Fields naming the record itself; meeting_id may reference another resource
OWN_ID_FIELDS = ("id", "bot_id", "uuid")
NAME_FIELDS = ("name", "title", "bot_name", "meeting_title")
STATUS_FIELDS = ("status", "state", "bot_status")
CREATED_FIELDS = ("created_at", "start_time", "timestamp", "started_at", "createdAt")
END_FIELDS = ("end_time", "ended_at", "endedAt")
DURATION_FIELDS = ("duration", "duration_seconds", "length")
PARTICIPANT_FIELDS = ("participants", "attendees")
PARTICIPANT_NAME_FIELDS = ("name", "display_name", "full_name")
TRANSCRIPT_REF_FIELDS = ("transcript_id", "recording_id", "transcript_url")
LINK_FIELDS = ("meeting_link", "join_url", "url")

# Envelope keys a detail response may wrap its record in
DETAIL_ENVELOPE_FIELDS = ("data", "bot", "meeting", "result")

# A mapping holding any of these is treated as a session record
SESSION_MARKER_FIELDS = (
    "id",
    "bot_id",
    "uuid",
    "meeting_id",
    "status",
    "state",
    "created_at",
    "start_time",
    "timestamp",
)


def is_present(value: Any) -> bool:
    """Return True for values worth normalizing (not None, not blank)."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict)):
        return bool(value)
    return True


def first_present(record: Mapping[str, Any], aliases: tuple[str, ...]) -> Any:
    """Return the first present value across an alias list, else None."""
    for key in aliases:
        value = record.get(key)
        if is_present(value):
            return value
    return None


def looks_like_session(record: Any) -> bool:
    """Return True if a payload element looks like a session record."""
    if not isinstance(record, Mapping):
        return False
    return any(is_present(record.get(key)) for key in SESSION_MARKER_FIELDS)


def unwrap_detail(body: Any) -> Mapping[str, Any] | None:
    """Return the record inside a detail response.

    Detail endpoints answer either with the record itself or with the record
    wrapped under one of DETAIL_ENVELOPE_FIELDS. Returns None when the body
    is not a non-empty object.
    """
    if not isinstance(body, Mapping) or not body:
        return None
    for key in DETAIL_ENVELOPE_FIELDS:
        if isinstance(body.get(key), Mapping):
            return body[key]
    return body
