"""Tests for core/transcript/resolver.py."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from meetstream_bridge.core.auth.types import AuthScheme
from meetstream_bridge.core.transcript import TranscriptResolver, format_transcript
from meetstream_bridge.exceptions import TranscriptUnavailable
from meetstream_bridge.models import Session, SessionOrigin, SessionStatus


def _session(session_id: str = "s1", origin: SessionOrigin = SessionOrigin.RECORD, ref: str | None = None) -> Session:
    return Session(
        id=session_id,
        display_name="Test",
        status=SessionStatus.COMPLETED,
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
        source_endpoint="/a/meetings",
        transcript_ref=ref,
        origin=origin,
    )


@pytest.fixture
def resolver(fake_transport, small_catalog) -> TranscriptResolver:
    """Resolver over the fake transport and compact catalog."""
    return TranscriptResolver(fake_transport, small_catalog, AuthScheme.BEARER, request_timeout=0.05)


class TestGuessedPaths:
    """Tests for the session-scoped guessed paths."""

    @pytest.mark.asyncio
    async def test_third_path_wins(self, fake_transport, resolver):
        """Test two 404s then a text payload yields a single 'hello' line."""
        fake_transport.ok("/a/meetings/s1/transcript", {"text": "hello"})

        lines = await resolver.resolve_transcript(_session())

        assert format_transcript(lines) == "hello"
        assert fake_transport.paths_called() == [
            "/a/bots/s1/transcript",
            "/a/bots/s1/get_transcript",
            "/a/meetings/s1/transcript",
        ]
        assert {scheme for _, scheme in fake_transport.calls} == {AuthScheme.BEARER}

    @pytest.mark.asyncio
    async def test_empty_payload_does_not_count(self, fake_transport, resolver):
        """Test a payload with no utterances moves on to the next path."""
        fake_transport.ok("/a/bots/s1/transcript", {"status": "processing"})
        fake_transport.ok("/a/bots/s1/get_transcript", [{"speaker": "A", "text": "real"}])

        lines = await resolver.resolve_transcript(_session())

        assert [line.text for line in lines] == ["real"]

    @pytest.mark.asyncio
    async def test_exhaustion(self, fake_transport, resolver):
        """Test every failure leads to TranscriptUnavailable with the attempts."""
        fake_transport.stall("/a/bots/s1/transcript")
        fake_transport.html("/a/bots/s1/get_transcript", "<html></html>")

        with pytest.raises(TranscriptUnavailable) as exc_info:
            await resolver.resolve_transcript(_session())

        assert exc_info.value.session_id == "s1"
        assert exc_info.value.attempts == [
            "/a/bots/s1/transcript",
            "/a/bots/s1/get_transcript",
            "/a/meetings/s1/transcript",
        ]
        assert "after 3 attempts" in str(exc_info.value)


class TestTranscriptReference:
    """Tests for transcript_ref lookups."""

    @pytest.mark.asyncio
    async def test_ref_template(self, fake_transport, resolver):
        """Test a bare reference is fetched through the ref templates first."""
        fake_transport.ok("/a/transcript/t-42", {"segments": [{"speaker": "A", "text": "via ref"}]})

        lines = await resolver.resolve_transcript(_session(ref="t-42"))

        assert [line.text for line in lines] == ["via ref"]
        assert fake_transport.paths_called() == ["/a/transcript/t-42"]

    @pytest.mark.asyncio
    async def test_absolute_url_ref(self, fake_transport, resolver):
        """Test an absolute URL reference is fetched as-is."""
        url = "https://files.example.test/t/1.json"
        fake_transport.ok(url, ["line one"])

        lines = await resolver.resolve_transcript(_session(ref=url))

        assert [line.text for line in lines] == ["line one"]
        assert fake_transport.paths_called() == [url]


class TestBotDetail:
    """Tests for the bot-detail strategy."""

    @pytest.mark.asyncio
    async def test_detail_reference_followed(self, fake_transport, resolver):
        """Test a bot detail record's transcript id is followed."""
        fake_transport.ok("/a/bots/b1", {"data": {"bot_id": "b1", "transcript_id": "t9"}})
        fake_transport.ok("/a/transcript/t9", {"transcript": "from detail"})

        lines = await resolver.resolve_transcript(_session("b1", SessionOrigin.BOT))

        assert [line.text for line in lines] == ["from detail"]
        assert fake_transport.paths_called() == ["/a/bots/b1", "/a/transcript/t9"]

    @pytest.mark.asyncio
    async def test_inline_transcript(self, fake_transport, resolver):
        """Test an inline transcript in the detail is used directly."""
        fake_transport.ok("/a/bots/b1", {"id": "b1", "transcript": [{"speaker": "A", "text": "inline"}]})

        lines = await resolver.resolve_transcript(_session("b1", SessionOrigin.BOT))

        assert [line.text for line in lines] == ["inline"]

    @pytest.mark.asyncio
    async def test_detail_without_transcript_falls_through(self, fake_transport, resolver):
        """Test a detail record without a transcript continues to guessed paths."""
        fake_transport.ok("/a/bots/b1", {"id": "b1", "status": "done"})
        fake_transport.ok("/a/bots/b1/transcript", "plain text transcript")

        lines = await resolver.resolve_transcript(_session("b1", SessionOrigin.BOT))

        assert [line.text for line in lines] == ["plain text transcript"]
        assert fake_transport.paths_called() == ["/a/bots/b1", "/a/bots/b1/transcript"]

    @pytest.mark.asyncio
    async def test_non_bot_skips_detail(self, fake_transport, resolver):
        """Test meeting sessions never fetch bot detail."""
        with pytest.raises(TranscriptUnavailable):
            await resolver.resolve_transcript(_session("m1", SessionOrigin.MEETING))
        assert "/a/bots/m1" not in fake_transport.paths_called()
