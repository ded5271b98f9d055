"""Credential-presentation schemes and auth probing.

Usage:
    from meetstream_bridge.core.auth import AuthScheme, resolve_auth_scheme

    scheme = await resolve_auth_scheme(transport, catalog.auth.schemes, catalog.auth.probe_target)
    if scheme is None:
        scheme = catalog.default_scheme
"""

from __future__ import annotations

from .headers import base_headers, build_auth_headers, credential_headers
from .probe import AuthProbeResult, ProbeAttempt, probe_auth, resolve_auth_scheme
from .types import AuthScheme

__all__ = [
    "AuthProbeResult",
    "AuthScheme",
    "ProbeAttempt",
    "base_headers",
    "build_auth_headers",
    "credential_headers",
    "probe_auth",
    "resolve_auth_scheme",
]
