"""Adaptive client for the MeetStream meeting-bot API.

The upstream API's authentication scheme and resource paths are not known
in advance. The client probes for a working auth scheme, sweeps a catalog of
candidate paths, normalizes whatever session records it finds and locates
transcripts by trying known conventions. When nothing usable is found it
serves a synthetic dataset so callers always have something to render.

Usage:
    from meetstream_bridge import ClientConfig, Orchestrator, SessionKind

    async with Orchestrator(ClientConfig(api_key="ms_...")) as client:
        for session in await client.list_sessions(SessionKind.RECENT):
            print(session.display_name)
"""

from __future__ import annotations

from .config import ClientConfig
from .const import VERSION
from .diagnostics import build_diagnostics
from .exceptions import (
    AuthResolutionFailed,
    CatalogError,
    ConfigError,
    EndpointUnavailable,
    MalformedRecord,
    MeetStreamBridgeError,
    NetworkTimeout,
    TranscriptUnavailable,
)
from .models import (
    ConnectionStatus,
    Participant,
    Session,
    SessionKind,
    SessionOrigin,
    SessionStatus,
    TranscriptLine,
)
from .orchestrator import Orchestrator

__version__ = VERSION

__all__ = [
    "AuthResolutionFailed",
    "CatalogError",
    "ClientConfig",
    "ConfigError",
    "ConnectionStatus",
    "EndpointUnavailable",
    "MalformedRecord",
    "MeetStreamBridgeError",
    "NetworkTimeout",
    "Orchestrator",
    "Participant",
    "Session",
    "SessionKind",
    "SessionOrigin",
    "SessionStatus",
    "TranscriptLine",
    "TranscriptUnavailable",
    "build_diagnostics",
]
