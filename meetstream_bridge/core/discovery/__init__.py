"""Endpoint discovery: candidate sweep and shape classification."""

from __future__ import annotations

from .shapes import classify_shape
from .sweep import EndpointDiscoverer
from .types import (
    NON_DATA_SHAPES,
    DiscoveryReport,
    EndpointOutcome,
    OutcomeStatus,
    ShapeTag,
)

__all__ = [
    "NON_DATA_SHAPES",
    "DiscoveryReport",
    "EndpointDiscoverer",
    "EndpointOutcome",
    "OutcomeStatus",
    "ShapeTag",
    "classify_shape",
]
