"""Discovery orchestrator and public entry point.

Sequences one discovery cycle and publishes its result:

    refresh()
      ├── probe_auth()          one GET per scheme until one is accepted
      ├── EndpointDiscoverer    bounded-parallel sweep of candidate paths
      ├── extract_records()     normalize + dedupe records
      ├── SessionEnricher       refine each session from its detail path
      └── publish               real sessions, or the synthetic dataset

Connection status is informational only:

    checking ──► connected_real    at least one real session
             ├─► connected_empty   upstream reachable but nothing extracted
             └─► disconnected      auth failed and no path returned data

Real and synthetic sessions are never mixed: a cycle publishes one or the
other. Every refresh bumps a generation counter and only the most recently
started generation may publish, so an older, slower cycle cannot overwrite
a newer one. The public methods never raise on upstream failure.

Usage:
    config = ClientConfig.from_env()
    async with Orchestrator(config) as orchestrator:
        sessions = await orchestrator.list_sessions(SessionKind.RECENT)
        text = await orchestrator.load_transcript(sessions[0].id)
        print(orchestrator.get_connection_status())
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from .catalog import load_catalog
from .catalog.schema import ProbeCatalog
from .config import ClientConfig
from .core.auth import AuthScheme, probe_auth
from .core.discovery import DiscoveryReport, EndpointDiscoverer
from .core.extraction import SessionEnricher, extract_records
from .core.fallback import (
    all_synthetic_sessions,
    is_synthetic_id,
    synthetic_sessions,
    synthetic_transcript,
)
from .core.http import ApiTransport
from .core.transcript import TranscriptResolver, format_transcript
from .exceptions import AuthResolutionFailed, TranscriptUnavailable
from .models import ConnectionStatus, Session, SessionKind, SessionOrigin, SessionStatus

_LOGGER = logging.getLogger(__name__)


class Orchestrator:
    """Adaptive client for the meeting-bot API.

    Attributes exposed read-only: connection status, the last discovery
    report and the current generation.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: ApiTransport | None = None,
        catalog: ProbeCatalog | None = None,
    ):
        """Initialize orchestrator.

        Args:
            config: Client configuration
            transport: Optional transport (defaults to an ApiTransport
                owned and closed by this orchestrator)
            catalog: Optional probe catalog (defaults to the bundled one,
                or config.catalog_path when set)

        Raises:
            CatalogError: If the catalog cannot be loaded
        """
        self._config = config
        self._catalog = catalog if catalog is not None else load_catalog(config.catalog_path)
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else ApiTransport(config)

        self._generation = 0
        self._status = ConnectionStatus.CHECKING
        self._sessions: list[Session] = []
        self._synthetic = True
        self._scheme: AuthScheme = self._catalog.default_scheme
        self._report: DiscoveryReport | None = None

    @property
    def config(self) -> ClientConfig:
        """Client configuration."""
        return self._config

    @property
    def catalog(self) -> ProbeCatalog:
        """Probe catalog in use."""
        return self._catalog

    @property
    def generation(self) -> int:
        """Most recently started discovery generation."""
        return self._generation

    @property
    def discovery_report(self) -> DiscoveryReport | None:
        """Report of the last published discovery cycle."""
        return self._report

    @property
    def is_synthetic(self) -> bool:
        """True when the published listing is the synthetic dataset."""
        return self._synthetic

    def get_connection_status(self) -> ConnectionStatus:
        """Return the current connection status."""
        return self._status

    async def refresh(self) -> DiscoveryReport:
        """Run one discovery cycle and publish its result. Never raises.

        Returns:
            The cycle's report (even if a newer cycle superseded it)
        """
        self._generation += 1
        generation = self._generation
        self._status = ConnectionStatus.CHECKING

        report = DiscoveryReport(generation=generation, started_at=datetime.now(UTC))
        _LOGGER.info("Discovery cycle %d starting against %s", generation, self._config.base_url)

        try:
            status, sessions, scheme = await self._discover(report)
        except Exception as e:  # noqa: BLE001
            _LOGGER.warning("Discovery cycle %d failed: %s", generation, e)
            report.error = f"{type(e).__name__}: {e}"
            status, sessions = ConnectionStatus.DISCONNECTED, []
            scheme = report.auth_scheme or self._catalog.default_scheme

        report.finished_at = datetime.now(UTC)
        report.connection_status = status.value

        if generation != self._generation:
            _LOGGER.debug("Discarding superseded discovery cycle %d (current %d)", generation, self._generation)
            return report

        self._status = status
        self._sessions = sessions
        self._synthetic = not sessions
        self._scheme = scheme
        self._report = report

        if sessions:
            _LOGGER.info("Discovery cycle %d: %d real sessions (%s)", generation, len(sessions), status.value)
        else:
            _LOGGER.warning(
                "Discovery cycle %d: no real sessions, serving synthetic data (%s)",
                generation,
                status.value,
            )
        return report

    async def _discover(self, report: DiscoveryReport) -> tuple[ConnectionStatus, list[Session], AuthScheme]:
        catalog = self._catalog
        probe = await probe_auth(
            self._transport,
            catalog.auth.schemes,
            catalog.auth.probe_target,
            self._config.request_timeout,
        )
        scheme = probe.scheme or catalog.default_scheme
        report.auth_scheme = scheme
        report.auth_resolved = probe.resolved

        if not probe.resolved:
            error = AuthResolutionFailed(f"No scheme accepted at {catalog.auth.probe_target}")
            _LOGGER.warning("%s; continuing with default scheme %s", error, scheme.value)

        discoverer = EndpointDiscoverer(
            self._transport,
            catalog,
            max_concurrency=self._config.max_concurrency,
            request_timeout=self._config.request_timeout,
        )
        outcomes = await discoverer.sweep(scheme)
        report.endpoints = {path: outcome.summary() for path, outcome in outcomes.items()}

        minable = {path: outcome for path, outcome in outcomes.items() if catalog.extracts(path)}
        extracted = extract_records(minable, observed_at=report.started_at, container_keys=catalog.container_keys)
        if self._config.enrich_sessions and extracted:
            enricher = SessionEnricher(
                self._transport,
                catalog,
                max_concurrency=self._config.max_concurrency,
                request_timeout=self._config.request_timeout,
            )
            sessions = await enricher.enrich(extracted, scheme)
            report.enriched_count = sum(
                1 for item, session in zip(extracted, sessions) if session is not item.session
            )
        else:
            sessions = [item.session for item in extracted]
        report.session_count = len(sessions)

        if sessions:
            status = ConnectionStatus.CONNECTED_REAL
        elif probe.resolved or any(outcome.ok for outcome in outcomes.values()):
            status = ConnectionStatus.CONNECTED_EMPTY
        else:
            status = ConnectionStatus.DISCONNECTED
        return status, sessions, scheme

    async def _ensure_refreshed(self) -> None:
        if self._report is None:
            await self.refresh()

    async def list_sessions(
        self,
        kind: SessionKind | str = SessionKind.RECENT,
        limit: int | None = None,
    ) -> list[Session]:
        """List sessions, refreshing on first use.

        Args:
            kind: recent (newest first, capped at recent_limit) or live
            limit: Optional cap overriding recent_limit

        Returns:
            Real sessions when any were discovered, else the synthetic
            listing for this kind
        """
        kind = SessionKind(kind)
        await self._ensure_refreshed()

        if self._synthetic:
            sessions = synthetic_sessions(kind)
        elif kind is SessionKind.LIVE:
            sessions = [session for session in self._sessions if session.is_live]
        else:
            sessions = sorted(self._sessions, key=lambda session: session.created_at, reverse=True)

        cap = limit if limit is not None else (self._config.recent_limit if kind is SessionKind.RECENT else None)
        if cap is not None:
            sessions = sessions[: max(cap, 0)]
        return sessions

    def get_session(self, session_id: str) -> Session | None:
        """Look up a session in the published set."""
        pool = all_synthetic_sessions() if self._synthetic else self._sessions
        for session in pool:
            if session.id == session_id:
                return session
        return None

    async def search_sessions(self, query: str) -> list[Session]:
        """Case-insensitive search on titles and participant names/emails."""
        await self._ensure_refreshed()
        pool = all_synthetic_sessions() if self._synthetic else self._sessions
        return [session for session in pool if session.matches(query)]

    async def load_transcript(self, session_id: str) -> str:
        """Return a session's transcript as display text. Never raises.

        Falls back to the synthetic transcript when the session is
        synthetic or no transcript can be located.
        """
        fallback = format_transcript(synthetic_transcript())
        if is_synthetic_id(session_id):
            return fallback

        try:
            await self._ensure_refreshed()
            if self._synthetic:
                return fallback

            session = self.get_session(session_id) or Session(
                id=session_id,
                display_name=f"Meeting {session_id}",
                status=SessionStatus.UNKNOWN,
                created_at=datetime.now(UTC),
                source_endpoint="",
                origin=SessionOrigin.RECORD,
            )
            resolver = TranscriptResolver(
                self._transport,
                self._catalog,
                self._scheme,
                request_timeout=self._config.request_timeout,
            )
            lines = await resolver.resolve_transcript(session)
        except TranscriptUnavailable as e:
            _LOGGER.warning("%s; serving synthetic transcript", e)
            return fallback
        except Exception as e:  # noqa: BLE001
            _LOGGER.warning("Transcript lookup for %s failed: %s; serving synthetic transcript", session_id, e)
            return fallback

        return format_transcript(lines)

    async def close(self) -> None:
        """Close the transport if this orchestrator created it."""
        if self._owns_transport:
            await self._transport.close()

    async def __aenter__(self) -> Orchestrator:
        """Enter async context."""
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close on exit."""
        await self.close()
