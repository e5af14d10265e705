"""Transitive closure of schema references.

Given the names referenced directly by the selected operations, the closure
adds every schema those schemas reference, and so on until nothing new
appears. The walk keeps an explicit frontier of names discovered in the
previous step, so each definition is scanned exactly once no matter how many
times it is referenced and self-referencing or mutually recursive schemas
terminate naturally.

Names without a definition (*dangling* references) stay in the closure but
are never scanned. They may point at schemas hosted elsewhere; the assembler
simply does not emit them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from specsubset.extraction.scanner import collect_refs


def resolve_closure(
    seeds: Iterable[str],
    schemas: Mapping[str, Any],
    prefix: str,
) -> frozenset[str]:
    """Compute the smallest reference-closed superset of *seeds*.

    Args:
        seeds: Schema names referenced directly by the selected operations.
        schemas: The input ``components.schemas`` mapping.
        prefix: Reference prefix used by :func:`collect_refs`.

    Returns:
        Every name reachable from *seeds*, dangling names included.

    Example::

        schemas = {
            "PetList": {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}},
            "Pet": {"type": "object"},
            "Internal": {"type": "object"},
        }
        resolve_closure({"PetList"}, schemas, "#/components/schemas/")
        # frozenset({"PetList", "Pet"})
    """
    closure: set[str] = set(seeds)
    frontier = set(closure)

    while frontier:
        discovered: set[str] = set()
        for name in frontier:
            definition = schemas.get(name)
            if definition is None:
                continue
            discovered |= collect_refs(definition, prefix)
        frontier = discovered - closure
        closure |= frontier

    return frozenset(closure)


def dangling_refs(closure: Iterable[str], schemas: Mapping[str, Any]) -> list[str]:
    """Return the closure names with no definition in *schemas*, sorted."""
    return sorted(name for name in closure if name not in schemas)
