"""Auth scheme probing.

Tries each credential-presentation scheme against one low-risk resource,
in declared priority order, and stops at the first accepted scheme:

    token ──► 401 ──► bearer ──► 200 ✓  (api_key and basic never tried)

No retries: total attempts are bounded by the number of schemes. When no
scheme is accepted the caller proceeds with the default scheme and expects
later discovery calls to fail into the fallback dataset.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ...exceptions import EndpointUnavailable
from .types import AuthScheme

if TYPE_CHECKING:
    from ..http import ApiTransport

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeAttempt:
    """One scheme tried against the probe target."""

    scheme: AuthScheme
    success: bool
    http_status: int | None = None
    error: str | None = None


@dataclass
class AuthProbeResult:
    """Outcome of auth probing.

    Attributes:
        scheme: First accepted scheme, or None if every scheme failed
        attempts: Attempts in the order they were made
    """

    scheme: AuthScheme | None = None
    attempts: list[ProbeAttempt] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        """Return True if a scheme was accepted."""
        return self.scheme is not None


async def _try_scheme(
    transport: ApiTransport,
    scheme: AuthScheme,
    probe_target: str,
    request_timeout: float | None,
) -> ProbeAttempt:
    try:
        request = transport.get(probe_target, scheme)
        if request_timeout is not None:
            response = await asyncio.wait_for(request, timeout=request_timeout)
        else:
            response = await request
    except TimeoutError:
        return ProbeAttempt(scheme, success=False, error="timeout")
    except EndpointUnavailable as e:
        return ProbeAttempt(scheme, success=False, http_status=e.status_code, error=str(e))
    except Exception as e:  # noqa: BLE001
        _LOGGER.debug("Unexpected error probing scheme %s: %s", scheme.value, e)
        return ProbeAttempt(scheme, success=False, error=f"unexpected: {e}")

    if response.is_html:
        # Catch-all web page, the API did not actually accept us
        return ProbeAttempt(scheme, success=False, http_status=response.status_code, error="html response")
    return ProbeAttempt(scheme, success=True, http_status=response.status_code)


async def probe_auth(
    transport: ApiTransport,
    schemes: Sequence[AuthScheme],
    probe_target: str,
    request_timeout: float | None = None,
) -> AuthProbeResult:
    """Probe schemes in priority order and record every attempt.

    Args:
        transport: HTTP transport
        schemes: Schemes in priority order
        probe_target: Low-risk resource path
        request_timeout: Optional per-attempt timeout in seconds

    Returns:
        AuthProbeResult with the first accepted scheme (or None)
    """
    result = AuthProbeResult()

    for scheme in schemes:
        _LOGGER.debug("Auth probe: trying %s against %s", scheme.value, probe_target)
        attempt = await _try_scheme(transport, scheme, probe_target, request_timeout)
        result.attempts.append(attempt)

        if attempt.success:
            _LOGGER.info("Auth probe: %s accepted (HTTP %s)", scheme.value, attempt.http_status)
            result.scheme = scheme
            return result

        _LOGGER.debug("Auth probe: %s rejected (%s)", scheme.value, attempt.error)

    _LOGGER.warning("Auth probe: none of %d schemes accepted", len(result.attempts))
    return result


async def resolve_auth_scheme(
    transport: ApiTransport,
    schemes: Sequence[AuthScheme],
    probe_target: str,
    request_timeout: float | None = None,
) -> AuthScheme | None:
    """Return the first scheme the upstream accepts, or None."""
    result = await probe_auth(transport, schemes, probe_target, request_timeout)
    return result.scheme
