"""Canonical Pydantic models shared across all specsubset modules.

This is the single source of truth for data shapes in the project. The
OpenAPI documents themselves stay plain parsed JSON values (``dict`` /
``list`` / scalars) so that unknown keys survive untouched; the models here
describe everything *around* a document:

**Configuration models** -- serialised as JSON in the user's config
directory or the project-local ``specsubset.json``:
    :class:`ServerInfo` and :class:`ExtractionOptions`.

**Result models** -- produced by the extraction engine:
    :class:`SecurityAction`, :class:`SecurityReconciliation`,
    :class:`ExtractionReport` and :class:`ExtractionResult`.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


JsonDict = dict[str, Any]


# --- Configuration ---


class ServerInfo(BaseModel):
    """A server entry stamped into the ``servers`` array of the output spec."""

    url: str
    description: Optional[str] = None

    def to_spec(self) -> JsonDict:
        """Return the entry as an OpenAPI *Server Object*."""
        entry: JsonDict = {"url": self.url}
        if self.description is not None:
            entry["description"] = self.description
        return entry


def _default_servers() -> list[ServerInfo]:
    return [ServerInfo(url="https://api.example.com", description="Production server")]


class ExtractionOptions(BaseModel):
    """Every knob of the extraction engine.

    Loaded from the layered configuration (see
    :func:`~specsubset.config.resolve_options`) or built directly when the
    engine is used as a library. None of these values is hard-coded inside
    the engine itself.

    Example::

        ExtractionOptions(
            path_marker="/public/",
            header_marker="api-key",
            api_key_scheme="ApiKeyAuth",
            servers=[ServerInfo(url="https://api.acme.io")],
        )
    """

    model_config = ConfigDict(extra="forbid")

    path_marker: str = Field(
        default="/external/",
        description="Substring a path key must contain to be published",
    )
    ref_prefix: str = Field(
        default="#/components/schemas/",
        description="Prefix that turns a $ref value into a schema name",
    )
    header_marker: str = Field(
        default="api-key",
        description="Case-insensitive substring identifying API-key headers",
    )
    api_key_scheme: str = Field(
        default="APIKeyHeader",
        description="Security scheme whose header name is kept in sync",
    )
    servers: list[ServerInfo] = Field(
        default_factory=_default_servers,
        description="Production servers written into the output spec",
    )
    title_suffix: str = Field(
        default=" - External API",
        description="Appended to info.title to mark the filtered subset",
    )
    description: Optional[str] = Field(
        default="External API endpoints only",
        description="Replaces info.description; None keeps the original",
    )


# --- Results ---


class SecurityAction(str, enum.Enum):
    """What the security reconciler did with the global scheme block."""

    UNCHANGED = "unchanged"
    """No API-key header parameters were found; schemes kept as declared."""

    ALREADY_CORRECT = "already_correct"
    """One header found and the designated scheme already names it."""

    RENAMED = "renamed"
    """One header found; the designated scheme's header name was rewritten."""

    SCHEME_MISSING = "scheme_missing"
    """One header found but the designated scheme is not declared."""

    REMOVED = "removed"
    """Several distinct headers found; the global scheme block was dropped."""


class SecurityReconciliation(BaseModel):
    """Outcome of :func:`~specsubset.extraction.security.reconcile_security`.

    ``security_schemes`` is ``None`` when the block must not be emitted:
    either the input declared none, or the reconciler removed it.
    """

    security_schemes: Optional[JsonDict] = None
    detected_headers: tuple[str, ...] = ()
    action: SecurityAction = SecurityAction.UNCHANGED
    scheme_name: Optional[str] = None
    previous_header: Optional[str] = None
    current_header: Optional[str] = None


class ExtractionReport(BaseModel):
    """Diagnostic counts for one extraction run.

    Every value is derived from the input and output documents and can be
    recomputed independently of the engine.
    """

    selected_paths: list[str] = Field(default_factory=list)
    operation_count: int = 0
    schema_count: int = 0
    dangling_refs: list[str] = Field(default_factory=list)
    detected_headers: list[str] = Field(default_factory=list)
    security_action: SecurityAction = SecurityAction.UNCHANGED
    security_scheme: Optional[str] = None
    previous_header: Optional[str] = None
    current_header: Optional[str] = None
    original_size: int = Field(default=0, description="Compact JSON bytes of the input")
    subset_size: int = Field(default=0, description="Compact JSON bytes of the output")

    @property
    def path_count(self) -> int:
        """Number of selected path keys."""
        return len(self.selected_paths)

    @property
    def reduction_percent(self) -> float:
        """Size reduction of the output relative to the input, in percent."""
        if self.original_size == 0:
            return 0.0
        return (1 - self.subset_size / self.original_size) * 100


class ExtractionResult(BaseModel):
    """The reduced document plus the report describing how it was produced."""

    document: JsonDict
    report: ExtractionReport
