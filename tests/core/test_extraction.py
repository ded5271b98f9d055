"""Tests for core/extraction (predicates and normalizer)."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from meetstream_bridge.core.discovery import EndpointOutcome, ShapeTag, classify_shape
from meetstream_bridge.core.extraction import (
    extract_records,
    extract_sessions,
    looks_like_session,
    normalize_record,
    normalize_status,
    parse_timestamp,
)
from meetstream_bridge.exceptions import MalformedRecord
from meetstream_bridge.models import Participant, SessionOrigin, SessionStatus

OBSERVED = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _success(payload) -> EndpointOutcome:
    shape, key = classify_shape(payload)
    return EndpointOutcome.success(payload, shape, http_status=200, container_key=key)


class TestLooksLikeSession:
    """Tests for the record predicate."""

    # fmt: off
    CASES = [
        # (record,                                expected)
        ({"id": "b1"},                            True),
        ({"bot_id": 7},                           True),
        ({"status": "done"},                      True),
        ({"start_time": "2024-01-01T00:00:00Z"},  True),
        ({"id": ""},                              False),
        ({"name": "only a name"},                 False),
        (["id"],                                  False),
        ("id",                                    False),
        (None,                                    False),
    ]
    # fmt: on

    @pytest.mark.parametrize("record,expected", CASES)
    def test_predicate(self, record, expected):
        """Table-driven record detection."""
        assert looks_like_session(record) is expected


class TestNormalizeStatus:
    """Tests for status mapping."""

    @pytest.mark.parametrize("raw", ["active", "LIVE", "in-progress", "In Call", "recording"])
    def test_live(self, raw):
        """Test live vocabulary."""
        assert normalize_status(raw) is SessionStatus.LIVE

    @pytest.mark.parametrize("raw", ["done", "Completed", "ended", "left"])
    def test_completed(self, raw):
        """Test completed vocabulary."""
        assert normalize_status(raw) is SessionStatus.COMPLETED

    @pytest.mark.parametrize("raw", ["queued", "", None, 3])
    def test_unknown(self, raw):
        """Test anything else is unknown."""
        assert normalize_status(raw) is SessionStatus.UNKNOWN


class TestParseTimestamp:
    """Tests for timestamp parsing."""

    # fmt: off
    CASES = [
        # (value,                         expected)
        ("2024-01-15T10:00:00Z",          datetime(2024, 1, 15, 10, 0, tzinfo=UTC)),
        ("2024-01-15T10:00:00",           datetime(2024, 1, 15, 10, 0, tzinfo=UTC)),
        (1705312800,                      datetime(2024, 1, 15, 10, 0, tzinfo=UTC)),
        (1705312800000,                   datetime(2024, 1, 15, 10, 0, tzinfo=UTC)),
        ("1705312800",                    datetime(2024, 1, 15, 10, 0, tzinfo=UTC)),
        ("yesterday",                     None),
        (True,                            None),
        ({"ts": 1},                       None),
    ]
    # fmt: on

    @pytest.mark.parametrize("value,expected", CASES)
    def test_parse(self, value, expected):
        """Table-driven timestamp parsing."""
        assert parse_timestamp(value) == expected


class TestNormalizeRecord:
    """Tests for single-record normalization."""

    def test_aliases(self):
        """Test alias fields populate canonical fields."""
        session = normalize_record(
            {
                "uuid": "u-1",
                "meeting_title": "Planning",
                "state": "running",
                "started_at": "2024-01-15T10:00:00Z",
                "ended_at": "2024-01-15T10:30:00Z",
                "attendees": ["Ann", {"display_name": "Bo", "email": "bo@example.test"}, {"email": "x@example.test"}],
                "recording_id": 99,
                "join_url": "https://meet.example.test/abc",
            },
            "/api/v1/meetings",
            observed_at=OBSERVED,
        )

        assert session.id == "u-1"
        assert session.display_name == "Planning"
        assert session.status is SessionStatus.LIVE
        assert session.raw_status == "running"
        assert session.created_at == datetime(2024, 1, 15, 10, 0, tzinfo=UTC)
        assert session.duration_seconds == 1800.0
        assert session.participants == (
            Participant("Ann"),
            Participant("Bo", "bo@example.test"),
            Participant("x@example.test", "x@example.test"),
        )
        assert session.transcript_ref == "99"
        assert session.meeting_link == "https://meet.example.test/abc"
        assert session.origin is SessionOrigin.MEETING
        assert session.is_synthetic is False

    def test_defaults(self):
        """Test default name and creation time."""
        session = normalize_record({"id": 42}, "/api/v1/sessions", observed_at=OBSERVED)
        assert session.id == "42"
        assert session.display_name == "Meeting 42"
        assert session.created_at == OBSERVED
        assert session.status is SessionStatus.UNKNOWN
        assert session.origin is SessionOrigin.SESSION

    def test_bot_origin_from_fields(self):
        """Test bot fields mark the record as bot-like on any path."""
        session = normalize_record({"bot_id": "b1"}, "/api/v1/meetings", observed_at=OBSERVED)
        assert session.origin is SessionOrigin.BOT

    def test_duration_field_wins(self):
        """Test an explicit duration beats start/end arithmetic."""
        session = normalize_record(
            {"id": "a", "duration": "90", "start_time": 0, "end_time": 3600},
            "/x",
            observed_at=OBSERVED,
        )
        assert session.duration_seconds == 90.0

    def test_missing_id(self):
        """Test a record without a usable id is malformed."""
        with pytest.raises(MalformedRecord) as exc_info:
            normalize_record({"id": {"nested": True}, "status": "done"}, "/x", observed_at=OBSERVED)
        assert exc_info.value.field == "id"


class TestExtractSessions:
    """Tests for extract_sessions."""

    def test_bot_listing_scenario(self):
        """Test the canonical bot listing normalizes as expected."""
        outcomes = {"/a/bots": _success([{"bot_id": "x1", "bot_name": "Standup", "status": "done"}])}

        sessions = extract_sessions(outcomes, observed_at=OBSERVED)

        assert len(sessions) == 1
        session = sessions[0]
        assert session.id == "x1"
        assert session.display_name == "Standup"
        assert session.status is SessionStatus.COMPLETED
        assert session.is_synthetic is False
        assert session.source_endpoint == "/a/bots"
        assert session.origin is SessionOrigin.BOT

    def test_dedup_across_endpoints_by_alias(self):
        """Test the same bot seen under different id aliases is kept once."""
        outcomes = {
            "/api/v1/bots": _success({"bots": [{"id": "b1", "bot_id": "bot_777", "name": "First"}]}),
            "/api/v2/bots": _success([{"bot_id": "bot_777", "name": "Second"}]),
            "/api/v1/meetings": _success([{"id": "b1", "title": "Third"}]),
        }

        sessions = extract_sessions(outcomes, observed_at=OBSERVED)

        assert [s.display_name for s in sessions] == ["First"]

    def test_reference_field_does_not_collide_with_id(self):
        """Test a meeting_id reference never drops a record with that id."""
        outcomes = {
            "/a/bots": _success(
                [
                    {"id": "1", "meeting_id": "2", "title": "Standup"},
                    {"id": "2", "title": "Retro"},
                ]
            )
        }

        sessions = extract_sessions(outcomes, observed_at=OBSERVED)

        assert [s.id for s in sessions] == ["1", "2"]

    def test_bots_sharing_a_meeting_stay_distinct(self):
        """Test two bots in the same meeting are both kept."""
        outcomes = {
            "/a/bots": _success([{"id": "b1", "meeting_id": "m1"}, {"id": "b2", "meeting_id": "m1"}]),
        }
        assert [s.id for s in extract_sessions(outcomes, observed_at=OBSERVED)] == ["b1", "b2"]

    def test_values_only_match_under_same_field(self):
        """Test an id equal to another record's bot_id is not a duplicate."""
        outcomes = {
            "/a/bots": _success([{"id": "x", "bot_id": "shared"}, {"id": "shared", "title": "Other"}]),
        }
        assert [s.id for s in extract_sessions(outcomes, observed_at=OBSERVED)] == ["x", "shared"]

    def test_same_canonical_id_is_duplicate(self):
        """Test records resolving to one canonical id are kept once."""
        outcomes = {
            "/a/bots": _success([{"bot_id": "b9", "title": "Listing"}]),
            "/a/meetings": _success([{"id": "b9", "title": "Meeting view"}]),
        }
        assert [s.display_name for s in extract_sessions(outcomes, observed_at=OBSERVED)] == ["Listing"]

    def test_extract_records_keeps_raw_record(self):
        """Test raw records and container keys travel with each session."""
        record = {"id": "m1", "title": "Kickoff"}
        extracted = extract_records({"/a/meetings": _success({"meetings": [record]})}, observed_at=OBSERVED)

        assert len(extracted) == 1
        assert extracted[0].record == record
        assert extracted[0].source_endpoint == "/a/meetings"
        assert extracted[0].container_key == "meetings"
        assert extracted[0].session.id == "m1"

    def test_nested_containers(self):
        """Test nested objects are walked through container keys."""
        payload = {"data": {"results": {"items": [{"id": "deep", "status": "live"}]}}}
        sessions = extract_sessions({"/x": _success(payload)}, observed_at=OBSERVED)
        assert [s.id for s in sessions] == ["deep"]

    def test_depth_is_bounded(self):
        """Test records nested beyond the walk depth are not reached."""
        payload = {"data": {"data": {"data": {"data": {"data": [{"id": "too_deep"}]}}}}}
        assert extract_sessions({"/x": _success(payload)}, observed_at=OBSERVED) == []

    def test_skips_non_data_and_errors(self):
        """Test error outcomes and non-data shapes contribute nothing."""
        outcomes = {
            "/err": EndpointOutcome.failure("Not Found", http_status=404),
            "/html": EndpointOutcome.failure("HTML page", shape=ShapeTag.HTML),
            "/text": _success("hello"),
            "/scalars": _success([1, 2, 3]),
            "/empty": _success([]),
        }
        assert extract_sessions(outcomes, observed_at=OBSERVED) == []

    def test_mixed_elements(self):
        """Test non-record elements are skipped silently and bad ids dropped."""
        payload = [
            {"id": "ok1"},
            "junk",
            7,
            None,
            {"name": "no markers"},
            {"status": "done"},
            {"id": True, "uuid": "ok2"},
        ]
        sessions = extract_sessions({"/x": _success(payload)}, observed_at=OBSERVED)
        assert [s.id for s in sessions] == ["ok1", "ok2"]

    @pytest.mark.parametrize(
        "outcomes",
        [
            {},
            {"/x": None},
            {"/x": "garbage"},
            {"/x": EndpointOutcome.success({"bots": "not a list"}, ShapeTag.CONTAINER)},
            {"/x": EndpointOutcome.success(object(), ShapeTag.RECORD_ARRAY)},
            {"/x": EndpointOutcome.success([{"id": "a", "participants": 5, "duration": "long"}], ShapeTag.RECORD_ARRAY)},
        ],
    )
    def test_total(self, outcomes):
        """Test extraction never raises on arbitrary input."""
        sessions = extract_sessions(outcomes, observed_at=OBSERVED)
        assert isinstance(sessions, list)
