"""Async HTTP transport for the upstream API.

Uses aiohttp with a bounded ClientTimeout on every request. The transport
only knows how to issue one authenticated GET and decode the body; deciding
what a response means (success, shape, fallback) is the caller's job.

Error mapping:
    - Timeout                 -> NetworkTimeout
    - Connection/client error -> EndpointUnavailable
    - HTTP status >= 400      -> EndpointUnavailable (status_code set)
    - Malformed JSON body     -> EndpointUnavailable (status_code set)

Usage:
    async with ApiTransport(config) as transport:
        response = await transport.get("/api/v1/bots", AuthScheme.TOKEN)
        print(response.status_code, response.body)
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import aiohttp

from ..config import ClientConfig
from ..exceptions import EndpointUnavailable, NetworkTimeout
from .auth.headers import base_headers, build_auth_headers
from .auth.types import AuthScheme
from .detection import looks_like_html

_LOGGER = logging.getLogger(__name__)

# Fields commonly used by REST APIs to carry an error description
ERROR_MESSAGE_FIELDS = ("message", "detail", "error", "error_description")

MAX_ERROR_TEXT = 200


@dataclass(frozen=True)
class ApiResponse:
    """A successful (status < 400) upstream response.

    Attributes:
        url: Final request URL
        status_code: HTTP status
        content_type: Content-Type header, if any
        body: Decoded JSON, raw text for non-JSON bodies, or None if empty
        is_json: True if body was decoded from JSON
        is_html: True if body is an HTML page
        elapsed_ms: Request duration
    """

    url: str
    status_code: int
    content_type: str | None
    body: Any
    is_json: bool = False
    is_html: bool = False
    elapsed_ms: float = 0.0


def extract_error_message(text: str | None) -> str | None:
    """Pull a human-readable message out of an error body."""
    if not text:
        return None
    try:
        data = json.loads(text)
    except ValueError:
        return text.strip()[:MAX_ERROR_TEXT] or None

    if isinstance(data, dict):
        for key in ERROR_MESSAGE_FIELDS:
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()[:MAX_ERROR_TEXT]
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"][:MAX_ERROR_TEXT]
    return text.strip()[:MAX_ERROR_TEXT] or None


def decode_body(text: str, content_type: str | None) -> tuple[Any, bool, bool]:
    """Decode a response body.

    Returns:
        (body, is_json, is_html)

    Raises:
        ValueError: If the body claims to be JSON but does not parse
    """
    if not text.strip():
        return None, False, False

    if looks_like_html(text, content_type):
        return text, False, True

    stripped = text.lstrip()
    claims_json = bool(content_type and "json" in content_type.lower())
    if claims_json or stripped.startswith(("{", "[")):
        return json.loads(text), True, False

    return text, False, False


class ApiTransport:
    """Issues authenticated GET requests against the configured base URL."""

    def __init__(self, config: ClientConfig, session: aiohttp.ClientSession | None = None):
        """Initialize transport.

        Args:
            config: Client configuration (base URL, key, timeout)
            session: Optional externally managed aiohttp session; when
                omitted one is created lazily and closed by close()
        """
        self._config = config
        self._session = session
        self._owns_session = session is None
        self._base_host = urlparse(config.base_url).netloc.lower()

    @property
    def config(self) -> ClientConfig:
        """Client configuration."""
        return self._config

    def build_url(self, path: str) -> str:
        """Resolve a catalog path (or absolute URL) to a request URL."""
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self._config.base_url}{path}"

    def headers_for(self, url: str, scheme: AuthScheme) -> dict[str, str]:
        """Headers for a request; credentials only go to the API's own host."""
        if urlparse(url).netloc.lower() != self._base_host:
            return base_headers(self._config.user_agent)
        return build_auth_headers(scheme, self._config.api_key, self._config.user_agent)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def get(self, path: str, scheme: AuthScheme) -> ApiResponse:
        """Issue one GET request.

        Args:
            path: Catalog path (joined onto base URL) or absolute URL
            scheme: Credential-presentation scheme

        Returns:
            ApiResponse for status < 400

        Raises:
            NetworkTimeout: If the request timed out
            EndpointUnavailable: On connection errors, HTTP errors or
                malformed JSON
        """
        url = self.build_url(path)
        headers = self.headers_for(url, scheme)
        session = self._get_session()
        start = time.monotonic()

        try:
            async with session.get(url, headers=headers) as response:
                status = response.status
                content_type = response.headers.get("Content-Type")
                text = await response.text(errors="replace")
        except TimeoutError as e:
            raise NetworkTimeout(f"Timed out after {self._config.request_timeout}s", url=url) from e
        except aiohttp.ClientError as e:
            raise EndpointUnavailable(f"Request failed: {e}", url=url) from e

        elapsed_ms = (time.monotonic() - start) * 1000
        _LOGGER.debug("GET %s -> %d (%.0f ms, scheme=%s)", path, status, elapsed_ms, scheme.value)

        if status >= 400:
            message = extract_error_message(text) or response.reason or "HTTP error"
            raise EndpointUnavailable(message, url=url, status_code=status)

        try:
            body, is_json, is_html = decode_body(text, content_type)
        except ValueError as e:
            raise EndpointUnavailable(f"Malformed JSON body: {e}", url=url, status_code=status) from e

        return ApiResponse(
            url=url,
            status_code=status,
            content_type=content_type,
            body=body,
            is_json=is_json,
            is_html=is_html,
            elapsed_ms=elapsed_ms,
        )

    async def close(self) -> None:
        """Close the underlying session if this transport created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> ApiTransport:
        """Enter async context."""
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close on exit."""
        await self.close()
