"""Canonical data model shared by the discovery pipeline and its callers.

Session and TranscriptLine are immutable. A discovery cycle creates a fresh
set of sessions and the next cycle replaces the whole set.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class SessionStatus(str, Enum):
    """Normalized lifecycle status of a meeting/bot instance."""

    LIVE = "live"
    COMPLETED = "completed"
    UNKNOWN = "unknown"


class SessionKind(str, Enum):
    """Which listing a caller asks for."""

    RECENT = "recent"
    LIVE = "live"


class SessionOrigin(str, Enum):
    """What kind of upstream resource a session was extracted from.

    Bot-like sessions expose a detail record that may reference the
    transcript, so the transcript resolver fetches it first.
    """

    BOT = "bot"
    MEETING = "meeting"
    SESSION = "session"
    RECORD = "record"


class ConnectionStatus(str, Enum):
    """Orchestrator state, informational only."""

    CHECKING = "checking"
    CONNECTED_REAL = "connected_real"
    CONNECTED_EMPTY = "connected_empty"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class Participant:
    """A meeting participant."""

    name: str
    email: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        return {"name": self.name, "email": self.email}


@dataclass(frozen=True)
class Session:
    """Canonical record for a meeting/bot instance.

    Attributes:
        id: Canonical id, unique within a discovery cycle
        display_name: Human-readable title
        status: Normalized status
        created_at: Timezone-aware creation/start time
        duration_seconds: Duration if the upstream reported one
        participants: Participants in upstream order
        transcript_ref: Transcript id or URL, if the record carried one
        source_endpoint: Sweep path the record was found at
        is_synthetic: True for fallback data, never for upstream records
        meeting_link: Join URL, if present
        origin: Kind of upstream resource (drives transcript lookup)
        raw_status: Upstream status text before normalization
    """

    id: str
    display_name: str
    status: SessionStatus
    created_at: datetime
    source_endpoint: str
    is_synthetic: bool = False
    duration_seconds: float | None = None
    participants: tuple[Participant, ...] = ()
    transcript_ref: str | None = None
    meeting_link: str | None = None
    origin: SessionOrigin = SessionOrigin.RECORD
    raw_status: str | None = None

    @property
    def is_live(self) -> bool:
        """Return True if the session is currently in progress."""
        return self.status is SessionStatus.LIVE

    def matches(self, query: str) -> bool:
        """Case-insensitive match on title and participant names/emails."""
        needle = query.strip().lower()
        if not needle:
            return True
        if needle in self.display_name.lower():
            return True
        return any(needle in p.name.lower() or needle in (p.email or "").lower() for p in self.participants)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        return {
            "id": self.id,
            "display_name": self.display_name,
            "status": self.status.value,
            "raw_status": self.raw_status,
            "created_at": self.created_at.isoformat(),
            "duration_seconds": self.duration_seconds,
            "participants": [p.to_dict() for p in self.participants],
            "transcript_ref": self.transcript_ref,
            "meeting_link": self.meeting_link,
            "source_endpoint": self.source_endpoint,
            "origin": self.origin.value,
            "is_synthetic": self.is_synthetic,
        }


@dataclass(frozen=True)
class TranscriptLine:
    """One utterance of a transcript."""

    text: str
    speaker: str | None = None
    offset_seconds: float | None = None
