"""Detail enrichment for extracted sessions.

Listing endpoints often return a trimmed view of each record. After
extraction, every session is refined from the first detail path that
answers with a record:

    ExtractedRecord ──► detail_paths ({id}) in catalog order
                            │  first non-empty object wins
                            ▼
                 raw record + detail fields ──► normalize_record() ──► Session

Detail fields override listing fields, except that blank detail values
never erase listing data and the session id is pinned. Sessions run in
parallel under a semaphore; detail paths for one session are tried in
order, each bounded by the request timeout. Any failure keeps the base
session unchanged.

Usage:
    enricher = SessionEnricher(transport, catalog, max_concurrency=5)
    sessions = await enricher.enrich(extract_records(outcomes), AuthScheme.TOKEN)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ...const import DEFAULT_MAX_CONCURRENCY, DEFAULT_REQUEST_TIMEOUT
from ...exceptions import EndpointUnavailable
from ...models import Session
from .normalizer import ExtractedRecord, normalize_record
from .predicates import is_present, unwrap_detail

if TYPE_CHECKING:
    from ...catalog.schema import ProbeCatalog
    from ..auth.types import AuthScheme
    from ..http import ApiTransport

_LOGGER = logging.getLogger(__name__)


def merge_detail(record: Mapping[str, Any], detail: Mapping[str, Any], session_id: str) -> dict[str, Any]:
    """Overlay present detail fields on a raw record, keeping its id."""
    merged = dict(record)
    merged.update({key: value for key, value in detail.items() if is_present(value)})
    merged["id"] = session_id
    return merged


class SessionEnricher:
    """Refines extracted sessions from per-session detail endpoints."""

    def __init__(
        self,
        transport: ApiTransport,
        catalog: ProbeCatalog,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """Initialize enricher.

        Args:
            transport: HTTP transport
            catalog: Probe catalog with the detail path templates
            max_concurrency: Maximum sessions enriched at once
            request_timeout: Per-request timeout in seconds
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._transport = transport
        self._catalog = catalog
        self._max_concurrency = max_concurrency
        self._request_timeout = request_timeout

    async def enrich(self, extracted: list[ExtractedRecord], scheme: AuthScheme) -> list[Session]:
        """Enrich every extracted session. Never raises except on cancellation.

        Returns:
            Sessions in extraction order; a session that could not be
            enriched is returned as extracted (the same object)
        """
        if not extracted or not self._catalog.detail_paths:
            return [item.session for item in extracted]

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def bounded(item: ExtractedRecord) -> Session:
            async with semaphore:
                return await self.enrich_one(item, scheme)

        sessions = await asyncio.gather(*(bounded(item) for item in extracted))
        enriched = sum(1 for item, session in zip(extracted, sessions) if session is not item.session)
        _LOGGER.info("Enriched %d/%d sessions from detail paths", enriched, len(extracted))
        return list(sessions)

    async def enrich_one(self, item: ExtractedRecord, scheme: AuthScheme) -> Session:
        """Enrich one session from the first detail path that answers."""
        session = item.session
        try:
            found = await self.fetch_detail(session.id, scheme)
            if found is None:
                return session
            path, detail = found
            merged = merge_detail(item.record, detail, session.id)
            enriched = normalize_record(
                merged,
                item.source_endpoint,
                observed_at=session.created_at,
                container_key=item.container_key,
            )
        except Exception as e:  # noqa: BLE001
            _LOGGER.warning("Could not enrich session %s: %s", session.id, e)
            return session

        _LOGGER.debug("Enriched session %s from %s", session.id, path)
        return enriched

    async def fetch_detail(self, session_id: str, scheme: AuthScheme) -> tuple[str, Mapping[str, Any]] | None:
        """Return (path, record) from the first detail path with a record."""
        for template in self._catalog.detail_paths:
            path = self._catalog.expand(template, id=session_id)
            try:
                response = await asyncio.wait_for(
                    self._transport.get(path, scheme),
                    timeout=self._request_timeout,
                )
            except TimeoutError:
                _LOGGER.debug("Detail %s: timed out after %.1fs", path, self._request_timeout)
                continue
            except EndpointUnavailable as e:
                _LOGGER.debug("Detail %s: %s", path, e)
                continue
            except Exception as e:  # noqa: BLE001
                _LOGGER.debug("Detail %s: unexpected error: %s", path, e)
                continue

            if response.is_html:
                _LOGGER.debug("Detail %s: HTML response ignored", path)
                continue
            record = unwrap_detail(response.body)
            if record is not None:
                return path, record
        return None
