"""Endpoint discovery sweep.

Probes every candidate path in the catalog with the resolved auth scheme,
in bounded-parallel batches, and records one outcome per path:

    catalog.sweep ──► Semaphore(max_concurrency) ──► wait_for(timeout)
                                                        │
                      {path: EndpointOutcome} ◄─────────┘  (catalog order)

Each request is isolated. A timeout, HTTP error, malformed body, HTML page
or unexpected exception becomes an error outcome for that path only.
Cancellation is not absorbed.

Usage:
    discoverer = EndpointDiscoverer(transport, catalog, max_concurrency=5)
    outcomes = await discoverer.sweep(AuthScheme.TOKEN)
    for path, outcome in outcomes.items():
        print(path, outcome.status, outcome.shape)
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from ...const import DEFAULT_MAX_CONCURRENCY, DEFAULT_REQUEST_TIMEOUT
from ...exceptions import EndpointUnavailable
from ..detection import describe_html
from .shapes import classify_shape
from .types import EndpointOutcome, ShapeTag

if TYPE_CHECKING:
    from ...catalog.schema import ProbeCatalog
    from ..auth.types import AuthScheme
    from ..http import ApiTransport

_LOGGER = logging.getLogger(__name__)


class EndpointDiscoverer:
    """Sweeps the catalog's candidate paths and classifies responses."""

    def __init__(
        self,
        transport: ApiTransport,
        catalog: ProbeCatalog,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """Initialize discoverer.

        Args:
            transport: HTTP transport
            catalog: Probe catalog with the candidate paths
            max_concurrency: Maximum requests in flight
            request_timeout: Per-request timeout in seconds
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._transport = transport
        self._catalog = catalog
        self._max_concurrency = max_concurrency
        self._request_timeout = request_timeout

    async def sweep(self, scheme: AuthScheme) -> dict[str, EndpointOutcome]:
        """Probe every candidate path.

        Returns:
            path -> outcome, ordered by catalog order
        """
        paths = self._catalog.sweep_paths
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def bounded(path: str) -> EndpointOutcome:
            async with semaphore:
                return await self.probe(path, scheme)

        _LOGGER.debug(
            "Sweeping %d paths (scheme=%s, concurrency=%d)",
            len(paths),
            scheme.value,
            self._max_concurrency,
        )
        results = await asyncio.gather(*(bounded(path) for path in paths))
        outcomes = dict(zip(paths, results))

        succeeded = sum(1 for outcome in outcomes.values() if outcome.ok)
        _LOGGER.info("Sweep complete: %d/%d paths returned data", succeeded, len(outcomes))
        return outcomes

    async def probe(self, path: str, scheme: AuthScheme) -> EndpointOutcome:
        """Probe one path. Never raises except on cancellation."""
        expected = self._catalog.expected_shape(path)
        start = time.monotonic()

        def elapsed() -> float:
            return (time.monotonic() - start) * 1000

        try:
            response = await asyncio.wait_for(
                self._transport.get(path, scheme),
                timeout=self._request_timeout,
            )
        except TimeoutError:
            _LOGGER.debug("Sweep %s: timed out after %.1fs", path, self._request_timeout)
            return EndpointOutcome.failure(
                f"timeout after {self._request_timeout}s",
                expected_shape=expected,
                elapsed_ms=elapsed(),
            )
        except EndpointUnavailable as e:
            _LOGGER.debug("Sweep %s: %s", path, e)
            return EndpointOutcome.failure(
                str(e),
                http_status=e.status_code,
                expected_shape=expected,
                elapsed_ms=elapsed(),
            )
        except Exception as e:  # noqa: BLE001
            _LOGGER.warning("Sweep %s: unexpected error: %s", path, e)
            return EndpointOutcome.failure(
                f"unexpected: {type(e).__name__}: {e}",
                expected_shape=expected,
                elapsed_ms=elapsed(),
            )

        if response.is_html:
            return EndpointOutcome.failure(
                describe_html(response.body),
                http_status=response.status_code,
                shape=ShapeTag.HTML,
                expected_shape=expected,
                elapsed_ms=elapsed(),
            )

        shape, container_key = classify_shape(response.body, self._catalog.container_keys)
        _LOGGER.debug("Sweep %s: HTTP %d, shape=%s", path, response.status_code, shape.value)
        return EndpointOutcome.success(
            response.body,
            shape,
            http_status=response.status_code,
            container_key=container_key,
            expected_shape=expected,
            elapsed_ms=elapsed(),
        )
