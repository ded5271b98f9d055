"""Synthetic demonstration data.

Published whenever discovery yields no real sessions, so callers always get
something to render. Pure and deterministic: fixed timestamps, no network,
every session flagged is_synthetic and id-prefixed with "synthetic_".
"""

from __future__ import annotations

from datetime import UTC, datetime

from ...models import (
    Participant,
    Session,
    SessionKind,
    SessionOrigin,
    SessionStatus,
    TranscriptLine,
)

SYNTHETIC_ID_PREFIX = "synthetic_"
SYNTHETIC_SOURCE = "synthetic"

_ALICE = Participant("Alice Johnson", "alice@company.com")
_BOB = Participant("Bob Smith", "bob@company.com")
_CAROL = Participant("Carol Davis", "carol@company.com")


def is_synthetic_id(session_id: str) -> bool:
    """Return True for ids issued by the synthetic dataset."""
    return session_id.startswith(SYNTHETIC_ID_PREFIX)


def _recent_sessions() -> list[Session]:
    return [
        Session(
            id=f"{SYNTHETIC_ID_PREFIX}standup_001",
            display_name="Weekly Team Standup (Demo)",
            status=SessionStatus.COMPLETED,
            created_at=datetime(2024, 1, 15, 10, 0, tzinfo=UTC),
            source_endpoint=SYNTHETIC_SOURCE,
            is_synthetic=True,
            duration_seconds=1800.0,
            participants=(_ALICE, _BOB, _CAROL),
            transcript_ref=f"{SYNTHETIC_ID_PREFIX}transcript_001",
            origin=SessionOrigin.BOT,
            raw_status="completed",
        ),
        Session(
            id=f"{SYNTHETIC_ID_PREFIX}strategy_002",
            display_name="Product Strategy Review (Demo)",
            status=SessionStatus.COMPLETED,
            created_at=datetime(2024, 1, 14, 15, 0, tzinfo=UTC),
            source_endpoint=SYNTHETIC_SOURCE,
            is_synthetic=True,
            duration_seconds=3600.0,
            participants=(
                Participant("David Wilson", "david@company.com"),
                Participant("Emma Brown", "emma@company.com"),
                Participant("Frank Miller", "frank@company.com"),
            ),
            transcript_ref=f"{SYNTHETIC_ID_PREFIX}transcript_002",
            origin=SessionOrigin.BOT,
            raw_status="completed",
        ),
    ]


def _live_sessions() -> list[Session]:
    return [
        Session(
            id=f"{SYNTHETIC_ID_PREFIX}live_001",
            display_name="Daily Standup - Live (Demo)",
            status=SessionStatus.LIVE,
            created_at=datetime(2024, 1, 16, 9, 30, tzinfo=UTC),
            source_endpoint=SYNTHETIC_SOURCE,
            is_synthetic=True,
            participants=(_ALICE, _BOB),
            meeting_link="https://zoom.us/j/987654321",
            origin=SessionOrigin.BOT,
            raw_status="live",
        ),
    ]


def synthetic_sessions(kind: SessionKind = SessionKind.RECENT) -> list[Session]:
    """Return the synthetic listing for a kind (two recent, one live)."""
    if kind is SessionKind.LIVE:
        return _live_sessions()
    return _recent_sessions()


def all_synthetic_sessions() -> list[Session]:
    """Every synthetic session, recent first."""
    return _recent_sessions() + _live_sessions()


# (speaker, offset in seconds, text)
_UTTERANCES = (
    (
        "Alice Johnson",
        0,
        "Good morning everyone, let's start with our weekly standup. How did everyone's tasks go this week?",
    ),
    (
        "Bob Smith",
        90,
        "I completed the user authentication feature and started working on the dashboard components. "
        "No blockers so far.",
    ),
    (
        "Carol Davis",
        180,
        "I finished the API integration for the payment system. We should be ready for testing by tomorrow.",
    ),
    (
        "Alice Johnson",
        270,
        "Great work everyone. Let's discuss the priorities for next week and any potential challenges we might face.",
    ),
    (
        "Bob Smith",
        300,
        "I think we should focus on the mobile responsiveness next. "
        "The dashboard looks great on desktop but needs work on mobile.",
    ),
    (
        "Carol Davis",
        375,
        "Agreed. I can help with the CSS media queries once the payment testing is complete. "
        "What if we gamify the user onboarding process?",
    ),
    (
        "Alice Johnson",
        450,
        "That's an interesting idea! We could use AI to recommend learning paths "
        "based on how users interact with the interface.",
    ),
    (
        "Bob Smith",
        525,
        "We could tie that into our feedback system and see which flows work best for different user types.",
    ),
    (
        "Carol Davis",
        600,
        "What about creating a community aspect where users can share their progress and help each other?",
    ),
    (
        "Alice Johnson",
        675,
        "We could also use voice interfaces for accessibility, like having users speak their preferences "
        "instead of clicking through menus.",
    ),
)


def synthetic_transcript() -> list[TranscriptLine]:
    """Return the fixed ten-utterance demonstration transcript."""
    return [
        TranscriptLine(text=text, speaker=speaker, offset_seconds=float(offset))
        for speaker, offset, text in _UTTERANCES
    ]
