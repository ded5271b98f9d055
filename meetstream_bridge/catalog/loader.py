"""Probe catalog loader.

Loads endpoints.yaml (bundled with the package, or a caller-supplied file)
and validates it against ProbeCatalog. Loaded catalogs are cached by path;
clear_cache() drops the cache.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from ..exceptions import CatalogError
from .schema import ProbeCatalog

_LOGGER = logging.getLogger(__name__)

CATALOG_FILENAME = "endpoints.yaml"

_catalog_cache: dict[Path, ProbeCatalog] = {}


def get_default_catalog_path() -> Path:
    """Path of the catalog bundled with the package."""
    return Path(__file__).parent / CATALOG_FILENAME


def parse_catalog(content: str, source: str = "<string>") -> ProbeCatalog:
    """Parse and validate catalog YAML.

    Raises:
        CatalogError: If the YAML is malformed or fails validation
    """
    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise CatalogError(f"{source}: YAML parse failed: {e}") from e

    if not isinstance(raw, dict):
        raise CatalogError(f"{source}: expected a mapping at the top level")

    try:
        return ProbeCatalog(**raw)
    except ValidationError as e:
        raise CatalogError(f"{source}: invalid probe catalog: {e}") from e


def load_catalog(path: str | Path | None = None) -> ProbeCatalog:
    """Load a probe catalog, using the cache when possible.

    Args:
        path: Catalog file; defaults to the bundled endpoints.yaml

    Raises:
        CatalogError: If the file is missing or invalid
    """
    catalog_path = Path(path) if path is not None else get_default_catalog_path()
    catalog_path = catalog_path.resolve()

    cached = _catalog_cache.get(catalog_path)
    if cached is not None:
        return cached

    if not catalog_path.exists():
        raise CatalogError(f"Probe catalog not found: {catalog_path}")

    catalog = parse_catalog(catalog_path.read_text(encoding="utf-8"), source=str(catalog_path))
    _LOGGER.debug(
        "Loaded probe catalog %s: %d schemes, %d sweep paths",
        catalog_path.name,
        len(catalog.auth.schemes),
        len(catalog.sweep),
    )
    _catalog_cache[catalog_path] = catalog
    return catalog


def clear_cache() -> None:
    """Clear the catalog cache."""
    _catalog_cache.clear()
