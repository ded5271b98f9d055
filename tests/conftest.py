"""Pytest configuration and fixtures for meetstream_bridge tests."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import pytest

from meetstream_bridge.catalog import clear_cache, load_catalog
from meetstream_bridge.catalog.schema import ProbeCatalog
from meetstream_bridge.config import ClientConfig
from meetstream_bridge.core.auth.types import AuthScheme
from meetstream_bridge.core.http import ApiResponse
from meetstream_bridge.exceptions import EndpointUnavailable

BASE_URL = "https://api.example.test"
TEST_API_KEY = "ms_test_key_0123456789"

Handler = Callable[[str, AuthScheme], Awaitable[ApiResponse]]


class FakeTransport:
    """In-memory stand-in for ApiTransport.

    Routes are keyed by (path, scheme); a scheme of None matches any scheme.
    Unrouted paths answer 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, AuthScheme | None], Any] = {}
        self.calls: list[tuple[str, AuthScheme]] = []
        self.closed = False

    def ok(self, path: str, body: Any, *, scheme: AuthScheme | None = None, status: int = 200) -> None:
        """Route a JSON (or text) body."""
        self.routes[(path, scheme)] = ApiResponse(
            url=f"{BASE_URL}{path}",
            status_code=status,
            content_type="application/json",
            body=body,
            is_json=not isinstance(body, str),
        )

    def html(self, path: str, text: str, *, scheme: AuthScheme | None = None) -> None:
        """Route an HTML page."""
        self.routes[(path, scheme)] = ApiResponse(
            url=f"{BASE_URL}{path}",
            status_code=200,
            content_type="text/html",
            body=text,
            is_html=True,
        )

    def fail(self, path: str, error: BaseException, *, scheme: AuthScheme | None = None) -> None:
        """Route an exception."""
        self.routes[(path, scheme)] = error

    def handle(self, path: str, handler: Handler, *, scheme: AuthScheme | None = None) -> None:
        """Route a coroutine function called with (path, scheme)."""
        self.routes[(path, scheme)] = handler

    def stall(self, path: str) -> None:
        """Route a request that never completes."""

        async def never(_path: str, _scheme: AuthScheme) -> ApiResponse:
            await asyncio.Event().wait()
            raise AssertionError("unreachable")

        self.handle(path, never)

    def paths_called(self) -> list[str]:
        """Paths requested, in call order."""
        return [path for path, _ in self.calls]

    async def get(self, path: str, scheme: AuthScheme) -> ApiResponse:
        self.calls.append((path, scheme))
        route = self.routes.get((path, scheme), self.routes.get((path, None)))
        if route is None:
            raise EndpointUnavailable("Not Found", url=f"{BASE_URL}{path}", status_code=404)
        if isinstance(route, BaseException):
            raise route
        if isinstance(route, ApiResponse):
            return route
        return await route(path, scheme)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Empty fake transport (every path 404s)."""
    return FakeTransport()


@pytest.fixture
def config() -> ClientConfig:
    """Valid client configuration."""
    return ClientConfig(api_key=TEST_API_KEY, base_url=BASE_URL, request_timeout=5.0)


@pytest.fixture
def catalog() -> ProbeCatalog:
    """The bundled probe catalog."""
    clear_cache()
    return load_catalog()


@pytest.fixture
def small_catalog() -> ProbeCatalog:
    """A compact catalog for sweep and orchestrator tests."""
    return ProbeCatalog(
        auth={"probe_target": "/me", "schemes": ["token", "bearer", "api_key", "basic"]},
        sweep=[
            {"path": "/me", "group": "account", "expect": "single_record", "extract": False},
            {"path": "/a/bots", "group": "bots", "expect": "record_array"},
            {"path": "/a/meetings", "group": "meetings", "expect": "container"},
            {"path": "/a/sessions", "group": "sessions"},
        ],
        detail_paths=["/a/bots/{id}"],
        transcript_ref_paths=["/a/transcript/{ref}"],
        transcript_paths=[
            "/a/bots/{id}/transcript",
            "/a/bots/{id}/get_transcript",
            "/a/meetings/{id}/transcript",
        ],
    )
