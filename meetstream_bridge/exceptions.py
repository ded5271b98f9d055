"""Exceptions for the MeetStream bridge client.

Only ConfigError and CatalogError reach callers of the public API. The
remaining errors are raised inside the discovery and transcript pipeline,
where they are recorded, logged and absorbed by the fallback dataset.
"""

from __future__ import annotations


class MeetStreamBridgeError(Exception):
    """Base exception for this project."""


class ConfigError(MeetStreamBridgeError):
    """Raised when client configuration is invalid or incomplete."""

    def __init__(self, message: str, *, key: str | None = None):
        """Initialize error with the offending configuration key."""
        super().__init__(f"{key}: {message}" if key else message)
        self.key = key


class CatalogError(MeetStreamBridgeError):
    """Raised when the probe catalog cannot be loaded or validated."""


class AuthResolutionFailed(MeetStreamBridgeError):
    """No credential-presentation scheme was accepted by the upstream.

    Non-fatal: discovery continues with the default scheme.
    """


class EndpointUnavailable(MeetStreamBridgeError):
    """Error for a single failed request, with URL/status context.

    Attributes:
        url: The URL that failed to fetch
        status_code: HTTP status code (if a response was received)
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ):
        """Initialize fetch error with context.

        Args:
            message: Human-readable error description
            url: The URL that failed to fetch
            status_code: HTTP status code if available
        """
        super().__init__(message)
        self.url = url
        self.status_code = status_code

    def __str__(self) -> str:
        """Format error with context."""
        parts = [super().__str__()]
        if self.url:
            parts.append(f"url={self.url}")
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        return " | ".join(parts)


class NetworkTimeout(EndpointUnavailable):
    """A request exceeded its timeout. Treated as an unavailable endpoint."""


class MalformedRecord(MeetStreamBridgeError):
    """A raw record could not be normalized into a Session.

    Attributes:
        field: Name of the canonical field being normalized
        raw_value: The raw value that failed to normalize
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        raw_value: object | None = None,
    ):
        """Initialize record error with context."""
        super().__init__(message)
        self.field = field
        self.raw_value = raw_value

    def __str__(self) -> str:
        """Format error with context."""
        parts = [super().__str__()]
        if self.field:
            parts.append(f"field={self.field}")
        if self.raw_value is not None:
            display_value = repr(self.raw_value)
            if len(display_value) > 50:
                display_value = display_value[:50] + "..."
            parts.append(f"raw_value={display_value}")
        return " | ".join(parts)


class TranscriptUnavailable(MeetStreamBridgeError):
    """Every transcript strategy was exhausted for a session.

    Attributes:
        session_id: The session whose transcript could not be resolved
        attempts: URLs or paths that were tried, in order
    """

    def __init__(self, session_id: str, attempts: list[str] | None = None):
        """Initialize with the session id and the attempted locations."""
        self.session_id = session_id
        self.attempts = list(attempts or [])
        super().__init__(f"No transcript available for session {session_id} after {len(self.attempts)} attempts")
