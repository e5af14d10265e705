"""Collect schema reference names from arbitrary OpenAPI fragments.

References can sit at any depth of an operation or schema body -- inside
``responses``, ``requestBody``, ``allOf`` lists, ``additionalProperties``,
vendor extensions -- so the scanner makes no assumption about where they
live. It walks every mapping value and every sequence element, and for each
mapping whose ``$ref`` is a string starting with the configured prefix
records the schema name that follows the prefix. A reference into a schema
(``#/components/schemas/Pet/properties/id``) counts as a reference to
the whole schema.

References with a different prefix (``#/components/parameters/...``,
external files) are not schema references and are skipped.

The public functions are :func:`collect_refs` and :func:`schema_name`.
"""

from __future__ import annotations

from typing import Any

REF_KEY = "$ref"


def collect_refs(value: Any, prefix: str) -> frozenset[str]:
    """Return every schema name referenced anywhere inside *value*.

    Args:
        value: Any parsed JSON value (mapping, sequence, or scalar).
        prefix: Reference prefix, e.g. ``"#/components/schemas/"``.

    Returns:
        The referenced names with *prefix* stripped. Empty for scalars.

    Example::

        collect_refs(
            {"items": {"$ref": "#/components/schemas/Pet"}},
            "#/components/schemas/",
        )
        # frozenset({"Pet"})
    """
    found: set[str] = set()
    _walk(value, prefix, found)
    return frozenset(found)


def _walk(node: Any, prefix: str, found: set[str]) -> None:
    """Depth-first walk adding referenced names to *found*."""
    if isinstance(node, dict):
        ref = node.get(REF_KEY)
        if isinstance(ref, str) and ref.startswith(prefix):
            name = schema_name(ref[len(prefix):])
            if name:
                found.add(name)
        for child in node.values():
            _walk(child, prefix, found)
    elif isinstance(node, list):
        for item in node:
            _walk(item, prefix, found)
    # Scalars carry no references


def schema_name(pointer_tail: str) -> str:
    """Return the schema name at the head of a JSON-pointer tail.

    ``Pet/properties/id`` points inside ``Pet``; the name is the first
    segment with ``~1`` and ``~0`` unescaped.
    """
    head = pointer_tail.split("/", 1)[0]
    return head.replace("~1", "/").replace("~0", "~")
