"""Data structures for endpoint discovery.

Classes:
    ShapeTag: Classification of a response payload
    OutcomeStatus: success/error marker for one probed path
    EndpointOutcome: Result of probing one candidate path
    DiscoveryReport: Diagnostic summary of one discovery cycle

Every outcome carries a status; failures are recorded, never raised, so a
sweep always produces one outcome per candidate path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..auth.types import AuthScheme


class ShapeTag(str, Enum):
    """Structural classification of a response payload.

    The extractor uses the tag to decide how to walk a payload.
    """

    EMPTY = "empty"
    EMPTY_ARRAY = "empty_array"
    RECORD_ARRAY = "record_array"
    """Array whose elements are objects"""
    SCALAR_ARRAY = "scalar_array"
    CONTAINER = "container"
    """Object holding a named array (or object) under a well-known key"""
    SINGLE_RECORD = "single_record"
    """Object that itself looks like a session record"""
    OBJECT = "object"
    TEXT = "text"
    HTML = "html"
    """HTML page (SPA catch-all or login page), never data"""
    UNKNOWN = "unknown"


# Shapes the extractor never looks inside
NON_DATA_SHAPES = frozenset(
    {
        ShapeTag.EMPTY,
        ShapeTag.EMPTY_ARRAY,
        ShapeTag.SCALAR_ARRAY,
        ShapeTag.TEXT,
        ShapeTag.HTML,
        ShapeTag.UNKNOWN,
    }
)


class OutcomeStatus(str, Enum):
    """Whether a probed path produced usable data."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class EndpointOutcome:
    """Result of probing one candidate path.

    Attributes:
        status: success or error
        shape: Payload classification (UNKNOWN for errors without a body)
        payload: Decoded body for successful outcomes
        http_status: HTTP status code if a response was received
        error: Error description for failed outcomes
        container_key: Key holding the nested array for CONTAINER shapes
        expected_shape: Shape the catalog expected at this path
        elapsed_ms: Request duration
    """

    status: OutcomeStatus
    shape: ShapeTag = ShapeTag.UNKNOWN
    payload: Any = None
    http_status: int | None = None
    error: str | None = None
    container_key: str | None = None
    expected_shape: ShapeTag | None = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """Return True for successful outcomes."""
        return self.status is OutcomeStatus.SUCCESS

    @classmethod
    def success(
        cls,
        payload: Any,
        shape: ShapeTag,
        *,
        http_status: int | None = None,
        container_key: str | None = None,
        expected_shape: ShapeTag | None = None,
        elapsed_ms: float = 0.0,
    ) -> EndpointOutcome:
        """Create successful outcome."""
        return cls(
            status=OutcomeStatus.SUCCESS,
            shape=shape,
            payload=payload,
            http_status=http_status,
            container_key=container_key,
            expected_shape=expected_shape,
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def failure(
        cls,
        error: str,
        *,
        http_status: int | None = None,
        shape: ShapeTag = ShapeTag.UNKNOWN,
        expected_shape: ShapeTag | None = None,
        elapsed_ms: float = 0.0,
    ) -> EndpointOutcome:
        """Create failed outcome with error description."""
        return cls(
            status=OutcomeStatus.ERROR,
            shape=shape,
            http_status=http_status,
            error=error,
            expected_shape=expected_shape,
            elapsed_ms=elapsed_ms,
        )

    def summary(self) -> dict[str, Any]:
        """Diagnostic view without the payload."""
        data: dict[str, Any] = {"status": self.status.value, "shape": self.shape.value}
        if self.container_key:
            data["container_key"] = self.container_key
        if self.http_status is not None:
            data["http_status"] = self.http_status
        if self.error:
            data["error"] = self.error
        if self.expected_shape is not None:
            data["expected_shape"] = self.expected_shape.value
        data["elapsed_ms"] = round(self.elapsed_ms, 1)
        return data


@dataclass
class DiscoveryReport:
    """Diagnostic summary of one discovery cycle. Not persisted.

    Attributes:
        generation: Discovery generation that produced this report
        auth_scheme: Scheme used for the sweep
        auth_resolved: False when no scheme passed the probe and the
            default scheme was used
        endpoints: path -> outcome summary, in sweep order
        session_count: Real sessions extracted
        enriched_count: Sessions refined from a detail path
        connection_status: Resulting orchestrator state
        started_at / finished_at: Cycle timestamps
        error: Unexpected failure that aborted the cycle, if any
    """

    generation: int
    auth_scheme: AuthScheme | None = None
    auth_resolved: bool = False
    endpoints: dict[str, dict[str, Any]] = field(default_factory=dict)
    session_count: int = 0
    enriched_count: int = 0
    connection_status: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    error: str | None = None

    @property
    def successful_paths(self) -> list[str]:
        """Paths that returned usable data."""
        return [path for path, info in self.endpoints.items() if info.get("status") == OutcomeStatus.SUCCESS.value]

    def to_dict(self) -> dict[str, Any]:
        """Serialize for diagnostics/CLI output."""
        return {
            "generation": self.generation,
            "auth_scheme": self.auth_scheme.value if self.auth_scheme else None,
            "auth_resolved": self.auth_resolved,
            "endpoints": {path: dict(info) for path, info in self.endpoints.items()},
            "session_count": self.session_count,
            "enriched_count": self.enriched_count,
            "connection_status": self.connection_status,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "error": self.error,
        }
