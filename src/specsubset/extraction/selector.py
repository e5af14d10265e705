"""Select the path items to publish.

The inclusion rule is a pure string test over path keys. The default,
built by :func:`marker_predicate`, keeps every path containing a designated
segment marker such as ``/external/``. Selected path items are shared with
the input rather than copied: nothing downstream mutates them.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

PathPredicate = Callable[[str], bool]

# Keys of a Path Item Object that hold operations
HTTP_METHODS = frozenset(
    {"get", "put", "post", "delete", "options", "head", "patch", "trace"}
)


def marker_predicate(marker: str) -> PathPredicate:
    """Build a predicate accepting path keys that contain *marker*.

    Args:
        marker: Substring to look for, e.g. ``"/external/"``.

    Returns:
        A callable ``(path) -> bool``.
    """

    def _contains_marker(path: str) -> bool:
        return marker in path

    return _contains_marker


def select_paths(paths: Any, predicate: PathPredicate) -> dict[str, Any]:
    """Return the entries of *paths* whose key satisfies *predicate*.

    A missing or non-mapping ``paths`` value selects nothing. An empty result
    is a valid outcome; callers report the count rather than fail.

    Args:
        paths: The input document's ``paths`` value.
        predicate: Pure string test over path keys.

    Returns:
        A new dict in input order with the original path item bodies.
    """
    if not isinstance(paths, Mapping):
        return {}
    return {
        key: item
        for key, item in paths.items()
        if isinstance(key, str) and predicate(key)
    }


def iter_operations(paths: Mapping[str, Any]):
    """Yield ``(path, method, operation)`` for every operation in *paths*.

    Non-operation keys of a path item (``parameters``, ``summary``,
    ``servers``, extensions) are skipped.
    """
    for path, item in paths.items():
        if not isinstance(item, Mapping):
            continue
        for method, operation in item.items():
            if method in HTTP_METHODS and isinstance(operation, Mapping):
                yield path, method, operation


def count_operations(paths: Mapping[str, Any]) -> int:
    """Count the HTTP operations across *paths*."""
    return sum(1 for _ in iter_operations(paths))
