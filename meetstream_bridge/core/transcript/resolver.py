"""Transcript resolution.

Transcript location is not fixed across API revisions. Strategies are tried
in order, each attempt bounded by the request timeout:

    1. transcript_ref  - absolute URL as-is, else the transcript_ref_paths
    2. bot detail      - (bot sessions only) fetch detail_paths until one
                         returns a record, then use its inline transcript
                         or follow its transcript reference
    3. guessed paths   - transcript_paths scoped to the session id

A payload only counts when it parses into at least one line. Every failure
is logged and the next attempt is tried; exhausting all of them raises
TranscriptUnavailable with the attempted locations.

Usage:
    resolver = TranscriptResolver(transport, catalog, AuthScheme.TOKEN)
    try:
        lines = await resolver.resolve_transcript(session)
    except TranscriptUnavailable as e:
        print(e.attempts)
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from ...const import DEFAULT_REQUEST_TIMEOUT
from ...exceptions import EndpointUnavailable, TranscriptUnavailable
from ...models import Session, SessionOrigin, TranscriptLine
from ..extraction.predicates import TRANSCRIPT_REF_FIELDS, first_present, unwrap_detail
from .formatter import parse_transcript

if TYPE_CHECKING:
    from ...catalog.schema import ProbeCatalog
    from ..auth.types import AuthScheme
    from ..http import ApiTransport

_LOGGER = logging.getLogger(__name__)

# Fields a detail record may carry the transcript under
INLINE_TRANSCRIPT_FIELDS = ("transcript", "segments", "utterances")


class TranscriptResolver:
    """Locates and parses the transcript for a session."""

    def __init__(
        self,
        transport: ApiTransport,
        catalog: ProbeCatalog,
        scheme: AuthScheme,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """Initialize resolver.

        Args:
            transport: HTTP transport
            catalog: Probe catalog with detail and transcript templates
            scheme: Auth scheme resolved for this discovery cycle
            request_timeout: Per-request timeout in seconds
        """
        self._transport = transport
        self._catalog = catalog
        self._scheme = scheme
        self._request_timeout = request_timeout

    async def resolve_transcript(self, session: Session) -> list[TranscriptLine]:
        """Resolve a session's transcript.

        Raises:
            TranscriptUnavailable: If every strategy was exhausted
        """
        attempts: list[str] = []

        if session.transcript_ref:
            lines = await self._from_ref(session.transcript_ref, attempts)
            if lines:
                return lines

        if session.origin is SessionOrigin.BOT:
            lines = await self._from_detail(session, attempts)
            if lines:
                return lines

        for template in self._catalog.transcript_paths:
            lines = await self._try(self._catalog.expand(template, id=session.id), attempts)
            if lines:
                return lines

        _LOGGER.info("No transcript for session %s after %d attempts", session.id, len(attempts))
        raise TranscriptUnavailable(session.id, attempts)

    async def _fetch(self, path: str, attempts: list[str]) -> Any:
        """GET one location. Returns the decoded body, or None on any failure."""
        attempts.append(path)
        try:
            response = await asyncio.wait_for(
                self._transport.get(path, self._scheme),
                timeout=self._request_timeout,
            )
        except TimeoutError:
            _LOGGER.debug("Transcript %s: timed out", path)
            return None
        except EndpointUnavailable as e:
            _LOGGER.debug("Transcript %s: %s", path, e)
            return None
        except Exception as e:  # noqa: BLE001
            _LOGGER.debug("Transcript %s: unexpected error: %s", path, e)
            return None

        if response.is_html:
            _LOGGER.debug("Transcript %s: HTML response ignored", path)
            return None
        return response.body

    async def _try(self, path: str, attempts: list[str]) -> list[TranscriptLine]:
        body = await self._fetch(path, attempts)
        lines = parse_transcript(body)
        if lines:
            _LOGGER.debug("Transcript found at %s (%d lines)", path, len(lines))
        return lines

    async def _from_ref(self, ref: str, attempts: list[str]) -> list[TranscriptLine]:
        if ref.startswith(("http://", "https://")):
            return await self._try(ref, attempts)

        for template in self._catalog.transcript_ref_paths:
            lines = await self._try(self._catalog.expand(template, ref=ref), attempts)
            if lines:
                return lines
        return []

    async def _from_detail(self, session: Session, attempts: list[str]) -> list[TranscriptLine]:
        for template in self._catalog.detail_paths:
            body = await self._fetch(self._catalog.expand(template, id=session.id), attempts)
            record = unwrap_detail(body)
            if record is None:
                continue

            inline = first_present(record, INLINE_TRANSCRIPT_FIELDS)
            lines = parse_transcript(inline)
            if lines:
                return lines

            ref = first_present(record, TRANSCRIPT_REF_FIELDS)
            if isinstance(ref, (str, int)) and not isinstance(ref, bool) and str(ref) != session.transcript_ref:
                return await self._from_ref(str(ref), attempts)

            # First detail record wins even without a transcript
            return []
        return []
