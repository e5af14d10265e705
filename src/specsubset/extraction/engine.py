"""Run the full extraction pipeline over one parsed document.

Selector -> reference scanner -> closure resolver -> security reconciler ->
document assembler. :func:`extract_subset` is a pure function: it performs
no I/O, never mutates its input, and keeps no state between calls, so it is
safe to call repeatedly or from several threads on independent documents.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional

from specsubset.extraction.assembler import assemble_document
from specsubset.extraction.closure import dangling_refs, resolve_closure
from specsubset.extraction.scanner import collect_refs
from specsubset.extraction.security import reconcile_security
from specsubset.extraction.selector import (
    PathPredicate,
    count_operations,
    marker_predicate,
    select_paths,
)
from specsubset.models import (
    ExtractionOptions,
    ExtractionReport,
    ExtractionResult,
)

logger = logging.getLogger(__name__)


def extract_subset(
    document: Mapping[str, Any],
    options: Optional[ExtractionOptions] = None,
    predicate: Optional[PathPredicate] = None,
) -> ExtractionResult:
    """Extract the publishable subset of *document*.

    Args:
        document: The full parsed OpenAPI document.
        options: Engine settings; defaults to :class:`ExtractionOptions()`.
        predicate: Custom path inclusion test. When omitted, paths
            containing ``options.path_marker`` are selected.

    Returns:
        An :class:`~specsubset.models.ExtractionResult` holding the new
        document and its :class:`~specsubset.models.ExtractionReport`.

    Example::

        result = extract_subset(load_spec("openapi.json"))
        print(result.report.operation_count, result.report.schema_count)
    """
    if options is None:
        options = ExtractionOptions()
    if predicate is None:
        predicate = marker_predicate(options.path_marker)
    if not isinstance(document, Mapping):
        document = {}

    paths = select_paths(document.get("paths"), predicate)
    logger.debug("Selected %d of %d paths", len(paths), _size(document.get("paths")))

    components = document.get("components")
    if not isinstance(components, Mapping):
        components = {}
    schemas = components.get("schemas")
    if not isinstance(schemas, Mapping):
        schemas = {}

    seeds = collect_refs(paths, options.ref_prefix)
    closure = resolve_closure(seeds, schemas, options.ref_prefix)
    missing = dangling_refs(closure, schemas)
    logger.debug(
        "Closure: %d direct refs, %d total, %d dangling",
        len(seeds), len(closure), len(missing),
    )

    security = reconcile_security(
        paths,
        components.get("securitySchemes"),
        options.header_marker,
        options.api_key_scheme,
    )
    logger.debug(
        "Security: %s (headers: %s)",
        security.action.value, ", ".join(security.detected_headers) or "none",
    )

    subset = assemble_document(document, paths, closure, security, options)

    report = ExtractionReport(
        selected_paths=list(paths),
        operation_count=count_operations(paths),
        schema_count=len(subset["components"]["schemas"]),
        dangling_refs=missing,
        detected_headers=list(security.detected_headers),
        security_action=security.action,
        security_scheme=security.scheme_name,
        previous_header=security.previous_header,
        current_header=security.current_header,
        original_size=serialized_size(document),
        subset_size=serialized_size(subset),
    )
    return ExtractionResult(document=subset, report=report)


def serialized_size(document: Any) -> int:
    """Return the size in bytes of *document* as compact UTF-8 JSON."""
    text = json.dumps(document, separators=(",", ":"), ensure_ascii=False, default=str)
    return len(text.encode("utf-8"))


def _size(value: Any) -> int:
    return len(value) if isinstance(value, Mapping) else 0
