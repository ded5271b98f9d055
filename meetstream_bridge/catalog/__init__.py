"""Declarative probe catalog: schemes, candidate paths and templates."""

from __future__ import annotations

from .loader import clear_cache, get_default_catalog_path, load_catalog, parse_catalog
from .schema import AuthCatalog, ProbeCatalog, SweepEntry

__all__ = [
    "AuthCatalog",
    "ProbeCatalog",
    "SweepEntry",
    "clear_cache",
    "get_default_catalog_path",
    "load_catalog",
    "parse_catalog",
]
