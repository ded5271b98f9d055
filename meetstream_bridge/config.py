"""Client configuration.

The API key and base URL are opaque values injected at construction. There
is no process-wide mutable configuration: every Orchestrator owns its
ClientConfig.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .const import (
    API_KEY_PREFIX,
    API_KEY_VISIBLE_CHARS,
    DEFAULT_BASE_URL,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_RECENT_LIMIT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_USER_AGENT,
    ENV_API_KEY,
    ENV_BASE_URL,
    ENV_CONCURRENCY,
    ENV_TIMEOUT,
    MAX_CONCURRENCY_LIMIT,
    MAX_REQUEST_TIMEOUT,
    MIN_REQUEST_TIMEOUT,
)
from .exceptions import ConfigError

_LOGGER = logging.getLogger(__name__)


def redact_key(api_key: str | None) -> str:
    """Return a log-safe form of an API key (prefix only)."""
    if not api_key:
        return "<none>"
    return f"{api_key[:API_KEY_VISIBLE_CHARS]}..."


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for the upstream meeting-bot API.

    Attributes:
        api_key: Static API key presented with every request
        base_url: API root, without trailing slash
        request_timeout: Per-request timeout in seconds (5-10)
        max_concurrency: Parallel requests during an endpoint sweep
        recent_limit: Maximum sessions in the "recent" listing
        user_agent: User-Agent header value
        catalog_path: Optional probe catalog overriding the bundled one
        enrich_sessions: Refine each extracted session from its detail
            endpoint after the sweep
    """

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    recent_limit: int = DEFAULT_RECENT_LIMIT
    user_agent: str = DEFAULT_USER_AGENT
    catalog_path: Path | None = None
    enrich_sessions: bool = True

    def __post_init__(self) -> None:
        """Validate and normalize fields."""
        if not self.api_key or not self.api_key.strip():
            raise ConfigError("API key is required", key="api_key")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigError(f"Base URL must include http:// or https:// (got {self.base_url!r})", key="base_url")
        if not MIN_REQUEST_TIMEOUT <= self.request_timeout <= MAX_REQUEST_TIMEOUT:
            raise ConfigError(
                f"Timeout must be between {MIN_REQUEST_TIMEOUT} and {MAX_REQUEST_TIMEOUT} seconds",
                key="request_timeout",
            )
        if not 1 <= self.max_concurrency <= MAX_CONCURRENCY_LIMIT:
            raise ConfigError(f"Concurrency must be between 1 and {MAX_CONCURRENCY_LIMIT}", key="max_concurrency")
        if self.recent_limit < 1:
            raise ConfigError("Recent limit must be positive", key="recent_limit")

        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "api_key", self.api_key.strip())
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

        if not self.api_key.startswith(API_KEY_PREFIX):
            _LOGGER.warning(
                "API key %s does not start with %r; the upstream may reject it",
                redact_key(self.api_key),
                API_KEY_PREFIX,
            )

    @property
    def redacted_key(self) -> str:
        """API key prefix safe for logs and diagnostics."""
        return redact_key(self.api_key)

    def to_dict(self) -> dict[str, object]:
        """Serialize for diagnostics (API key redacted)."""
        return {
            "api_key": self.redacted_key,
            "base_url": self.base_url,
            "request_timeout": self.request_timeout,
            "max_concurrency": self.max_concurrency,
            "recent_limit": self.recent_limit,
            "user_agent": self.user_agent,
            "catalog_path": str(self.catalog_path) if self.catalog_path else None,
            "enrich_sessions": self.enrich_sessions,
        }

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> ClientConfig:
        """Build a config from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            overrides: Explicit values that win over the environment;
                None values are ignored

        Raises:
            ConfigError: If the key is missing or a value is invalid
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        if env.get(ENV_API_KEY):
            values["api_key"] = env[ENV_API_KEY]
        if env.get(ENV_BASE_URL):
            values["base_url"] = env[ENV_BASE_URL]
        if env.get(ENV_TIMEOUT):
            values["request_timeout"] = _parse_number(env[ENV_TIMEOUT], float, ENV_TIMEOUT)
        if env.get(ENV_CONCURRENCY):
            values["max_concurrency"] = _parse_number(env[ENV_CONCURRENCY], int, ENV_CONCURRENCY)

        values.update({k: v for k, v in overrides.items() if v is not None})

        if not values.get("api_key"):
            raise ConfigError(f"Missing API key. Pass --api-key or set {ENV_API_KEY}.", key="api_key")
        return cls(**values)  # type: ignore[arg-type]


def _parse_number(raw: str, kind: type, key: str) -> float | int:
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigError(f"Not a valid number: {raw!r}", key=key) from e
