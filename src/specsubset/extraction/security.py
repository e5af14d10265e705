"""Reconcile the global API-key security scheme with the published operations.

A hand-maintained ``components.securitySchemes`` entry easily drifts from
the header parameters the operations actually declare, and an internal spec
may mix several API-key headers that only make sense for internal callers.
After filtering, the reconciler inspects the header parameters of the
selected operations and applies a three-way policy:

* **no API-key headers** -- keep the scheme block exactly as declared;
* **one distinct header** -- make the designated API-key scheme name that
  header, rewriting a copy if it differs;
* **several distinct headers** -- drop the global block entirely. One global
  declaration cannot describe operations needing different headers, and
  each operation still declares its own header parameter.

API-key headers are recognised by name: a header parameter whose name
contains the configured marker (``api-key`` by default), compared
case-insensitively. This is a heuristic, never a validator, so ambiguity is
resolved by omission rather than by raising.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from specsubset.extraction.selector import iter_operations
from specsubset.models import SecurityAction, SecurityReconciliation


def detect_api_key_headers(paths: Mapping[str, Any], marker: str) -> tuple[str, ...]:
    """Return the distinct API-key header names used by *paths*.

    Both operation-level and path-level ``parameters`` are inspected.
    Parameters given as ``$ref`` objects carry no ``in``/``name`` and are
    ignored.

    Args:
        paths: Selected path items.
        marker: Case-insensitive substring identifying API-key headers.

    Returns:
        Header names in first-seen order, without duplicates.
    """
    needle = marker.lower()
    seen: dict[str, None] = {}

    for path_item in paths.values():
        if isinstance(path_item, Mapping):
            _collect_headers(path_item.get("parameters"), needle, seen)
    for _path, _method, operation in iter_operations(paths):
        _collect_headers(operation.get("parameters"), needle, seen)

    return tuple(seen)


def _collect_headers(parameters: Any, needle: str, seen: dict[str, None]) -> None:
    if not isinstance(parameters, list):
        return
    for param in parameters:
        if not isinstance(param, Mapping) or param.get("in") != "header":
            continue
        name = param.get("name")
        if isinstance(name, str) and needle in name.lower():
            seen.setdefault(name, None)


def reconcile_security(
    paths: Mapping[str, Any],
    security_schemes: Any,
    header_marker: str,
    scheme_name: str,
) -> SecurityReconciliation:
    """Decide which security-scheme block the output document carries.

    The input block is never modified; a rename produces a new block with a
    new scheme entry.

    Args:
        paths: Selected path items.
        security_schemes: The input ``components.securitySchemes`` value,
            or ``None`` when the input declares none.
        header_marker: Substring identifying API-key headers.
        scheme_name: Key of the API-key scheme to keep in sync.

    Returns:
        A :class:`~specsubset.models.SecurityReconciliation` describing the
        block to emit (``None`` for no block) and the action taken.
    """
    schemes: Optional[dict[str, Any]] = (
        dict(security_schemes) if isinstance(security_schemes, Mapping) else None
    )
    headers = detect_api_key_headers(paths, header_marker)

    if not headers:
        return SecurityReconciliation(
            security_schemes=schemes,
            detected_headers=headers,
            action=SecurityAction.UNCHANGED,
        )

    if len(headers) > 1:
        return SecurityReconciliation(
            security_schemes=None,
            detected_headers=headers,
            action=SecurityAction.REMOVED,
        )

    header = headers[0]
    scheme = schemes.get(scheme_name) if schemes is not None else None
    if not isinstance(scheme, Mapping):
        return SecurityReconciliation(
            security_schemes=schemes,
            detected_headers=headers,
            action=SecurityAction.SCHEME_MISSING,
            scheme_name=scheme_name,
            current_header=header,
        )

    previous = scheme.get("name")
    if not isinstance(previous, str):
        previous = None
    if previous == header:
        return SecurityReconciliation(
            security_schemes=schemes,
            detected_headers=headers,
            action=SecurityAction.ALREADY_CORRECT,
            scheme_name=scheme_name,
            previous_header=previous,
            current_header=header,
        )

    schemes[scheme_name] = {**scheme, "name": header}
    return SecurityReconciliation(
        security_schemes=schemes,
        detected_headers=headers,
        action=SecurityAction.RENAMED,
        scheme_name=scheme_name,
        previous_header=previous,
        current_header=header,
    )
