"""Compose the reduced OpenAPI document.

The assembler only ever builds new containers: the input document is read,
never written. Path item and schema bodies are shared with the input, which
is safe because nothing after assembly mutates them.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from specsubset.extraction.selector import iter_operations
from specsubset.models import ExtractionOptions, JsonDict, SecurityReconciliation


def assemble_document(
    source: Mapping[str, Any],
    paths: dict[str, Any],
    closure: frozenset[str],
    security: SecurityReconciliation,
    options: ExtractionOptions,
) -> JsonDict:
    """Build the output document from the extraction results.

    Args:
        source: The full input document.
        paths: Selected path items.
        closure: Schema names reachable from *paths*.
        security: Outcome of the security reconciler.
        options: Presentation settings (title suffix, description, servers).

    Returns:
        A new document with ``openapi``, ``info``, ``servers``, ``paths``
        and ``components``, plus ``tags`` and ``security`` when they still
        apply to the subset.
    """
    document: JsonDict = {}
    if "openapi" in source:
        document["openapi"] = source["openapi"]
    document["info"] = _derive_info(source.get("info"), options)

    servers = [server.to_spec() for server in options.servers]
    if servers:
        document["servers"] = servers
    elif isinstance(source.get("servers"), list):
        document["servers"] = source["servers"]

    tags = _used_tags(source.get("tags"), paths)
    if tags:
        document["tags"] = tags

    # Global requirements name schemes; they go when the schemes go
    if security.security_schemes is not None and "security" in source:
        document["security"] = source["security"]

    document["paths"] = paths

    components = source.get("components")
    schemas = components.get("schemas") if isinstance(components, Mapping) else None
    if not isinstance(schemas, Mapping):
        schemas = {}
    document["components"] = {
        "schemas": {name: body for name, body in schemas.items() if name in closure}
    }
    if security.security_schemes is not None:
        document["components"]["securitySchemes"] = security.security_schemes

    return document


def _derive_info(info: Any, options: ExtractionOptions) -> JsonDict:
    """Copy the info block, marking it as a filtered subset.

    The suffix is not appended twice, so extracting from an already
    extracted document leaves the title alone.
    """
    derived: JsonDict = dict(info) if isinstance(info, Mapping) else {}
    title = derived.get("title")
    if isinstance(title, str) and options.title_suffix and not title.endswith(options.title_suffix):
        derived["title"] = title + options.title_suffix
    if options.description is not None:
        derived["description"] = options.description
    return derived


def _used_tags(tags: Any, paths: Mapping[str, Any]) -> list[Any]:
    """Keep only the top-level tag objects some selected operation uses."""
    if not isinstance(tags, list):
        return []
    used: set[str] = set()
    for _path, _method, operation in iter_operations(paths):
        op_tags = operation.get("tags")
        if isinstance(op_tags, list):
            used.update(tag for tag in op_tags if isinstance(tag, str))
    return [
        tag for tag in tags
        if isinstance(tag, Mapping) and tag.get("name") in used
    ]
