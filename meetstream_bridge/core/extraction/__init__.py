"""Record extraction, normalization and detail enrichment."""

from __future__ import annotations

from .enrichment import SessionEnricher, merge_detail
from .normalizer import (
    ExtractedRecord,
    canonical_id,
    detect_origin,
    extract_records,
    extract_sessions,
    identity_keys,
    iter_candidates,
    normalize_record,
    normalize_status,
    parse_duration,
    parse_participants,
    parse_timestamp,
)
from .predicates import first_present, looks_like_session, unwrap_detail

__all__ = [
    "ExtractedRecord",
    "SessionEnricher",
    "canonical_id",
    "detect_origin",
    "extract_records",
    "extract_sessions",
    "first_present",
    "identity_keys",
    "iter_candidates",
    "looks_like_session",
    "merge_detail",
    "normalize_record",
    "normalize_status",
    "parse_duration",
    "parse_participants",
    "parse_timestamp",
    "unwrap_detail",
]
