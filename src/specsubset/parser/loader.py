"""Read the internal OpenAPI document from a file, a URL or stdin.

A source is first read to text together with a format hint, then parsed.
Hints come from the same extension rules the writer uses
(:func:`~specsubset.parser.writer.format_for_path`) or from the response
content type; without a hint JSON is tried before YAML.

YAML is parsed with a safe loader that keeps timestamps as strings, so an
``example: 2024-01-01`` reaches the output exactly as it was written
whatever format the subset is published in.

The engine in :mod:`specsubset.extraction` only ever sees the parsed
mapping. :func:`validate_openapi_version` gates it to OpenAPI 3.x, the
versions whose schema references use ``#/components/schemas/``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from specsubset.exceptions import ConnectionError_, SpecParseError
from specsubset.parser.writer import format_for_path

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _SpecYamlLoader(yaml.SafeLoader):
    """Safe YAML loader without implicit timestamp conversion."""


_SpecYamlLoader.yaml_implicit_resolvers = {
    first: [(tag, pattern) for tag, pattern in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_spec(source: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load the internal document from *source*.

    Args:
        source: ``-`` for stdin, an ``http(s)://`` URL, or a file path.
        timeout: Network timeout in seconds for URL sources.

    Returns:
        The parsed document.

    Raises:
        SpecParseError: If the source is missing, empty or unparsable.
        ConnectionError_: If a URL source cannot be reached.
    """
    if source == "-":
        text, hint = sys.stdin.read(), None
        origin = "stdin"
    elif source.startswith(("http://", "https://")):
        text, hint = _fetch(source, timeout)
        origin = source
    else:
        text, hint = _read_file(Path(source)), format_for_path(source, default="")
        origin = source

    if not text.strip():
        raise SpecParseError(f"No content in {origin}")
    return parse_document(text, hint or None)


def _fetch(url: str, timeout: float) -> tuple[str, Optional[str]]:
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ConnectionError_(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "").lower()
    if "json" in content_type:
        return response.text, "json"
    if "yaml" in content_type or "yml" in content_type:
        return response.text, "yaml"
    return response.text, format_for_path(httpx.URL(url).path, default="") or None


def _read_file(path: Path) -> str:
    if not path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc


def parse_document(text: str, fmt: Optional[str] = None) -> dict[str, Any]:
    """Parse *text* as a JSON or YAML mapping.

    Args:
        text: The raw document.
        fmt: ``"json"`` or ``"yaml"`` to parse strictly in that format;
            ``None`` tries JSON, then YAML.

    Raises:
        SpecParseError: If the text does not parse to a mapping.
    """
    if fmt != "yaml":
        try:
            return _as_mapping(json.loads(text))
        except json.JSONDecodeError as exc:
            if fmt == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc

    try:
        data = yaml.load(text, Loader=_SpecYamlLoader)
    except yaml.YAMLError as exc:
        raise SpecParseError(f"Invalid YAML: {exc}") from exc
    return _as_mapping(data)


def _as_mapping(data: Any) -> dict[str, Any]:
    if isinstance(data, dict):
        return data
    kind = "nothing" if data is None else type(data).__name__
    raise SpecParseError(f"Expected an OpenAPI object at the top level, got {kind}")


def validate_openapi_version(document: dict[str, Any]) -> str:
    """Return the document's OpenAPI version, accepting only ``3.x``.

    Swagger 2.0 keeps its schemas under ``#/definitions/``; filtering one
    with the default reference prefix would silently drop every schema, so
    it is rejected here.

    Raises:
        SpecParseError: For Swagger documents, a missing ``openapi`` field,
            or a version outside 3.x.
    """
    if "swagger" in document:
        raise SpecParseError(
            f"Swagger {document['swagger']} is not supported; "
            "convert it to OpenAPI 3.x first"
        )
    version = document.get("openapi")
    if version is None:
        raise SpecParseError("Missing 'openapi' field; not an OpenAPI 3.x document")
    version = str(version)
    if not version.startswith("3."):
        raise SpecParseError(f"Unsupported OpenAPI version: {version}")
    return version
