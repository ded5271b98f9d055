"""Credential-presentation scheme enumeration."""

from __future__ import annotations

from enum import Enum


class AuthScheme(str, Enum):
    """Ways a static API key can be presented to the upstream.

    Exactly one scheme is used per request. Declared priority order comes
    from the probe catalog, not from this enum.
    """

    TOKEN = "token"
    """Authorization: Token <key>"""

    BEARER = "bearer"
    """Authorization: Bearer <key>"""

    API_KEY = "api_key"
    """X-API-Key: <key>"""

    BASIC = "basic"
    """Authorization: Basic base64(<key>:)"""
