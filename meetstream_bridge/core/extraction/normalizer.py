"""Session extraction and normalization.

Walks successful sweep outcomes, finds record-like elements and normalizes
each into a canonical Session. Extraction is total: any input, however
malformed, yields a (possibly empty) list.

Walk rules:
    - Arrays: every element passing looks_like_session() is a candidate
    - Objects: tested as a single record, then each container key is
      probed; nested arrays are walked as above and nested objects
      recursively, up to MAX_EXTRACTION_DEPTH
    - Shapes in NON_DATA_SHAPES are never opened

Deduplication is by identity: a candidate is dropped when its canonical id,
or the value of one of its own identity fields (id, bot_id, uuid) under the
same field name, was already seen. Reference fields such as meeting_id never
take part, so two bots in one meeting stay distinct. First occurrence wins,
and the sweep result mapping is in catalog order, so the result does not
depend on request completion order.

Usage:
    sessions = extract_sessions(outcomes)
    for session in sessions:
        print(session.id, session.display_name, session.status)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from ...const import (
    COMPLETED_STATUSES,
    DEFAULT_CONTAINER_KEYS,
    LIVE_STATUSES,
    MAX_EXTRACTION_DEPTH,
)
from ...exceptions import MalformedRecord
from ...models import Participant, Session, SessionOrigin, SessionStatus
from ..discovery.types import NON_DATA_SHAPES, EndpointOutcome
from .predicates import (
    CREATED_FIELDS,
    DURATION_FIELDS,
    END_FIELDS,
    ID_FIELDS,
    LINK_FIELDS,
    NAME_FIELDS,
    OWN_ID_FIELDS,
    PARTICIPANT_FIELDS,
    PARTICIPANT_NAME_FIELDS,
    STATUS_FIELDS,
    TRANSCRIPT_REF_FIELDS,
    first_present,
    is_present,
    looks_like_session,
)

_LOGGER = logging.getLogger(__name__)

# Epoch values above this are milliseconds (year 5138 in seconds)
_EPOCH_MS_THRESHOLD = 100_000_000_000


def parse_timestamp(value: Any) -> datetime | None:
    """Parse ISO-8601 strings or epoch seconds/milliseconds.

    Naive values are taken as UTC. Returns None for anything unparseable.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                return None
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

    if isinstance(value, (int, float)):
        seconds = float(value)
        if abs(seconds) >= _EPOCH_MS_THRESHOLD:
            seconds /= 1000
        try:
            return datetime.fromtimestamp(seconds, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None

    return None


def normalize_status(raw: Any) -> SessionStatus:
    """Map an upstream status string onto SessionStatus."""
    if not isinstance(raw, str):
        return SessionStatus.UNKNOWN
    key = raw.strip().lower().replace("-", "_").replace(" ", "_")
    if key in LIVE_STATUSES:
        return SessionStatus.LIVE
    if key in COMPLETED_STATUSES:
        return SessionStatus.COMPLETED
    return SessionStatus.UNKNOWN


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def parse_duration(record: Mapping[str, Any], created: datetime | None, ended: datetime | None) -> float | None:
    """Duration in seconds from a duration field, else end minus start."""
    duration = _as_number(first_present(record, DURATION_FIELDS))
    if duration is not None and duration >= 0:
        return duration
    if created is not None and ended is not None and ended >= created:
        return (ended - created).total_seconds()
    return None


def parse_participants(value: Any) -> tuple[Participant, ...]:
    """Participants from a list of names or participant objects."""
    if not isinstance(value, list):
        return ()

    participants = []
    for item in value:
        if isinstance(item, str) and item.strip():
            participants.append(Participant(name=item.strip()))
        elif isinstance(item, Mapping):
            name = first_present(item, PARTICIPANT_NAME_FIELDS)
            email = item.get("email")
            email = email.strip() if isinstance(email, str) and email.strip() else None
            if isinstance(name, str):
                participants.append(Participant(name=name.strip(), email=email))
            elif email:
                participants.append(Participant(name=email, email=email))
    return tuple(participants)


def _scalar_id(value: Any) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def canonical_id(record: Mapping[str, Any]) -> str:
    """First usable id across the id aliases.

    Raises:
        MalformedRecord: If no alias holds a string or integer id
    """
    for key in ID_FIELDS:
        found = _scalar_id(record.get(key))
        if found is not None:
            return found
    raw = next((record.get(key) for key in ID_FIELDS if key in record), None)
    raise MalformedRecord("Record has no usable id", field="id", raw_value=raw)


def identity_keys(record: Mapping[str, Any]) -> set[tuple[str, str]]:
    """(field, value) pairs a record can be recognized by.

    Holds the canonical id plus every own identity field. Values only match
    under the same field name, so an id never collides with a bot_id.
    """
    keys = {("", canonical_id(record))}
    for key in OWN_ID_FIELDS:
        found = _scalar_id(record.get(key))
        if found is not None:
            keys.add((key, found))
    return keys


def detect_origin(record: Mapping[str, Any], source_endpoint: str, container_key: str | None = None) -> SessionOrigin:
    """Guess which kind of upstream resource a record came from."""
    path = source_endpoint.lower()
    if is_present(record.get("bot_id")) or is_present(record.get("bot_name")):
        return SessionOrigin.BOT
    if container_key == "bots" or "/bot" in path:
        return SessionOrigin.BOT
    if container_key == "meetings" or "/meeting" in path:
        return SessionOrigin.MEETING
    if container_key == "sessions" or "/session" in path:
        return SessionOrigin.SESSION
    return SessionOrigin.RECORD


def normalize_record(
    record: Mapping[str, Any],
    source_endpoint: str,
    *,
    observed_at: datetime | None = None,
    container_key: str | None = None,
) -> Session:
    """Normalize one raw record into a Session.

    Args:
        record: Raw upstream record
        source_endpoint: Sweep path the record was found at
        observed_at: Fallback creation time (defaults to now)
        container_key: Container key the record was nested under

    Raises:
        MalformedRecord: If the record has no usable id
    """
    session_id = canonical_id(record)

    name = first_present(record, NAME_FIELDS)
    display_name = name.strip() if isinstance(name, str) else f"Meeting {session_id}"

    raw_status = first_present(record, STATUS_FIELDS)
    raw_status = raw_status.strip() if isinstance(raw_status, str) else None

    created = parse_timestamp(first_present(record, CREATED_FIELDS))
    ended = parse_timestamp(first_present(record, END_FIELDS))

    transcript_ref = _scalar_id(first_present(record, TRANSCRIPT_REF_FIELDS))
    link = first_present(record, LINK_FIELDS)

    return Session(
        id=session_id,
        display_name=display_name,
        status=normalize_status(raw_status),
        created_at=created or observed_at or datetime.now(UTC),
        source_endpoint=source_endpoint,
        is_synthetic=False,
        duration_seconds=parse_duration(record, created, ended),
        participants=parse_participants(first_present(record, PARTICIPANT_FIELDS)),
        transcript_ref=transcript_ref,
        meeting_link=link.strip() if isinstance(link, str) else None,
        origin=detect_origin(record, source_endpoint, container_key),
        raw_status=raw_status,
    )


def iter_candidates(
    payload: Any,
    container_keys: Iterable[str] = DEFAULT_CONTAINER_KEYS,
    container_key: str | None = None,
    depth: int = 0,
) -> Iterator[tuple[Mapping[str, Any], str | None]]:
    """Yield (record, container_key) for every record-like element."""
    keys = tuple(container_keys)

    if isinstance(payload, list):
        for item in payload:
            if looks_like_session(item):
                yield item, container_key
        return

    if not isinstance(payload, Mapping):
        return

    if looks_like_session(payload):
        yield payload, container_key

    if depth >= MAX_EXTRACTION_DEPTH:
        return

    for key in keys:
        value = payload.get(key)
        if isinstance(value, (list, Mapping)):
            yield from iter_candidates(value, keys, key, depth + 1)


@dataclass(frozen=True)
class ExtractedRecord:
    """A normalized session together with the raw record it came from.

    Kept so later passes (detail enrichment) can re-normalize from the raw
    fields instead of mutating the immutable Session.
    """

    session: Session
    record: Mapping[str, Any]
    source_endpoint: str
    container_key: str | None = None


def extract_records(
    sweep_results: Mapping[str, EndpointOutcome],
    observed_at: datetime | None = None,
    container_keys: Iterable[str] = DEFAULT_CONTAINER_KEYS,
) -> list[ExtractedRecord]:
    """Extract deduplicated records from sweep outcomes. Never raises.

    Args:
        sweep_results: path -> outcome, in catalog order
        observed_at: Fallback creation time for records without one
        container_keys: Keys probed for nested records

    Returns:
        Extracted records in discovery order
    """
    observed_at = observed_at or datetime.now(UTC)
    keys = tuple(container_keys)
    seen: set[tuple[str, str]] = set()
    extracted: list[ExtractedRecord] = []
    dropped = 0

    for path, outcome in sweep_results.items():
        if not isinstance(outcome, EndpointOutcome) or not outcome.ok or outcome.shape in NON_DATA_SHAPES:
            continue
        try:
            for record, container_key in iter_candidates(outcome.payload, keys):
                try:
                    session = normalize_record(record, path, observed_at=observed_at, container_key=container_key)
                except MalformedRecord as e:
                    _LOGGER.debug("Skipping record from %s: %s", path, e)
                    dropped += 1
                    continue

                identities = identity_keys(record)
                if identities & seen:
                    continue
                seen.update(identities)
                extracted.append(ExtractedRecord(session, record, path, container_key))
        except Exception as e:  # noqa: BLE001
            _LOGGER.warning("Extraction from %s aborted: %s", path, e)

    _LOGGER.debug("Extracted %d sessions (%d malformed records dropped)", len(extracted), dropped)
    return extracted


def extract_sessions(
    sweep_results: Mapping[str, EndpointOutcome],
    observed_at: datetime | None = None,
    container_keys: Iterable[str] = DEFAULT_CONTAINER_KEYS,
) -> list[Session]:
    """Extract deduplicated Sessions from sweep outcomes. Never raises."""
    return [item.session for item in extract_records(sweep_results, observed_at, container_keys)]
