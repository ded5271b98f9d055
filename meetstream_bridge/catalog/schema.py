"""Pydantic schema for the probe catalog (endpoints.yaml).

The catalog is the single declarative table that drives the generic prober:

    ProbeCatalog (root)
    ├── AuthCatalog        - scheme priority order + probe target
    ├── sweep[]            - candidate listing paths with expected shape
    ├── detail_paths       - session detail templates ({id})
    ├── transcript_ref_paths - transcript-by-reference templates ({ref})
    ├── transcript_paths   - guessed transcript subresources ({id})
    └── container_keys     - object keys probed for nested records

Adding a new path convention means editing YAML, not code.

Usage:
    from meetstream_bridge.catalog.schema import ProbeCatalog
    catalog = ProbeCatalog(**yaml.safe_load(content))
"""

from __future__ import annotations

from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..const import DEFAULT_CONTAINER_KEYS
from ..core.auth.types import AuthScheme
from ..core.discovery.types import ShapeTag


def _require_leading_slash(value: str) -> str:
    if not value.startswith("/"):
        raise ValueError(f"path must start with '/': {value!r}")
    return value


class AuthCatalog(BaseModel):
    """Auth probing configuration."""

    model_config = ConfigDict(extra="forbid")

    probe_target: str = Field(description="Low-risk resource fetched once per scheme")
    schemes: list[AuthScheme] = Field(
        min_length=1,
        description="Schemes in priority order; the first is the default",
    )

    @field_validator("probe_target")
    @classmethod
    def _check_probe_target(cls, value: str) -> str:
        return _require_leading_slash(value)

    @field_validator("schemes")
    @classmethod
    def _check_unique_schemes(cls, value: list[AuthScheme]) -> list[AuthScheme]:
        if len(set(value)) != len(value):
            raise ValueError("schemes must not repeat")
        return value


class SweepEntry(BaseModel):
    """One candidate resource path."""

    model_config = ConfigDict(extra="forbid")

    path: str
    group: str = Field(default="other", description="Naming convention family (account, bots, ...)")
    expect: ShapeTag | None = Field(default=None, description="Expected shape, for diagnostics only")
    extract: bool = Field(default=True, description="Mine the response for session records")

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        return _require_leading_slash(value)


class ProbeCatalog(BaseModel):
    """Root model for endpoints.yaml."""

    model_config = ConfigDict(extra="forbid")

    auth: AuthCatalog
    sweep: list[SweepEntry] = Field(min_length=1)
    detail_paths: list[str] = Field(default_factory=list)
    transcript_ref_paths: list[str] = Field(default_factory=list)
    transcript_paths: list[str] = Field(default_factory=list)
    container_keys: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CONTAINER_KEYS),
    )

    @model_validator(mode="after")
    def _check_templates(self) -> ProbeCatalog:
        paths = [entry.path for entry in self.sweep]
        duplicates = sorted({p for p in paths if paths.count(p) > 1})
        if duplicates:
            raise ValueError(f"duplicate sweep paths: {duplicates}")

        for name, placeholder in (
            ("detail_paths", "{id}"),
            ("transcript_ref_paths", "{ref}"),
            ("transcript_paths", "{id}"),
        ):
            for template in getattr(self, name):
                _require_leading_slash(template)
                if placeholder not in template:
                    raise ValueError(f"{name} entry {template!r} is missing {placeholder}")
        return self

    @property
    def sweep_paths(self) -> list[str]:
        """Candidate paths in sweep order."""
        return [entry.path for entry in self.sweep]

    @property
    def default_scheme(self) -> AuthScheme:
        """Scheme used when none passes the probe."""
        return self.auth.schemes[0]

    def expected_shape(self, path: str) -> ShapeTag | None:
        """Return the declared shape for a sweep path."""
        for entry in self.sweep:
            if entry.path == path:
                return entry.expect
        return None

    def extracts(self, path: str) -> bool:
        """Return False for sweep paths that are never mined for sessions."""
        for entry in self.sweep:
            if entry.path == path:
                return entry.extract
        return True

    @staticmethod
    def expand(template: str, **values: str) -> str:
        """Fill a path template, URL-quoting each value."""
        return template.format(**{k: quote(str(v), safe="") for k, v in values.items()})
