"""Spec I/O -- load the internal document, write the published subset.

Typical usage::

    from specsubset.parser import load_spec, validate_openapi_version, write_spec

    raw = load_spec("openapi.yaml")
    validate_openapi_version(raw)
    ...
    write_spec(result.document, "external-openapi.json")

Sub-modules:

* :mod:`~specsubset.parser.loader` -- URL, file and stdin input with
  JSON/YAML detection and OpenAPI version validation.
* :mod:`~specsubset.parser.writer` -- JSON/YAML serialisation and atomic
  file writes.
"""

from specsubset.parser.loader import load_spec, parse_document, validate_openapi_version
from specsubset.parser.writer import dump_spec, write_spec

__all__ = ["load_spec", "parse_document", "validate_openapi_version", "dump_spec", "write_spec"]
