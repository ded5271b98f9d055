"""Response shape classification.

    None / ""                      -> empty
    []                             -> empty_array
    [{...}, ...]                   -> record_array
    [1, "a", ...]                  -> scalar_array
    {"bots": [...]}                -> container (key reported)
    {"id": ..., "status": ...}     -> single_record
    {"version": "1.2"}             -> object
    "plain text"                   -> text
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ...const import DEFAULT_CONTAINER_KEYS
from ..extraction.predicates import looks_like_session
from .types import ShapeTag


def classify_shape(
    payload: Any,
    container_keys: Iterable[str] = DEFAULT_CONTAINER_KEYS,
) -> tuple[ShapeTag, str | None]:
    """Classify a decoded payload.

    Args:
        payload: Decoded JSON body or raw text
        container_keys: Keys that may hold nested records

    Returns:
        (shape, container_key) where container_key is set only for
        CONTAINER shapes
    """
    if payload is None:
        return ShapeTag.EMPTY, None

    if isinstance(payload, str):
        return (ShapeTag.TEXT, None) if payload.strip() else (ShapeTag.EMPTY, None)

    if isinstance(payload, list):
        if not payload:
            return ShapeTag.EMPTY_ARRAY, None
        if any(isinstance(item, dict) for item in payload):
            return ShapeTag.RECORD_ARRAY, None
        return ShapeTag.SCALAR_ARRAY, None

    if isinstance(payload, dict):
        if not payload:
            return ShapeTag.EMPTY, None
        for key in container_keys:
            value = payload.get(key)
            if isinstance(value, (list, dict)) and value:
                return ShapeTag.CONTAINER, key
        if looks_like_session(payload):
            return ShapeTag.SINGLE_RECORD, None
        return ShapeTag.OBJECT, None

    return ShapeTag.UNKNOWN, None
