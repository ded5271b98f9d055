"""Request header construction for each auth scheme."""

from __future__ import annotations

import base64

from ...const import DEFAULT_USER_AGENT
from .types import AuthScheme


def base_headers(user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    """Headers sent with every request, with or without credentials."""
    return {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "User-Agent": user_agent,
    }


def credential_headers(scheme: AuthScheme, api_key: str) -> dict[str, str]:
    """Return the single header that presents the API key.

    Raises:
        ValueError: If the scheme is not supported
    """
    if scheme is AuthScheme.TOKEN:
        return {"Authorization": f"Token {api_key}"}
    if scheme is AuthScheme.BEARER:
        return {"Authorization": f"Bearer {api_key}"}
    if scheme is AuthScheme.API_KEY:
        return {"X-API-Key": api_key}
    if scheme is AuthScheme.BASIC:
        # Key as username, empty password
        encoded = base64.b64encode(f"{api_key}:".encode()).decode("ascii")
        return {"Authorization": f"Basic {encoded}"}
    raise ValueError(f"Unsupported auth scheme: {scheme}")


def build_auth_headers(
    scheme: AuthScheme,
    api_key: str,
    user_agent: str = DEFAULT_USER_AGENT,
) -> dict[str, str]:
    """Full header set for an authenticated request."""
    headers = base_headers(user_agent)
    headers.update(credential_headers(scheme, api_key))
    return headers
