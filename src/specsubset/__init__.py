"""specsubset -- Publish a minimal, self-contained subset of an OpenAPI spec.

An API owner keeps one authoritative internal OpenAPI document. This package
selects the operations meant for outside consumers, carries over exactly the
schema definitions they depend on, reconciles the API-key security scheme
with the headers those operations really declare, and emits the result as a
new document ready for third parties or SDK generators.

Typical workflow::

    specsubset extract openapi.json -o external-openapi.json
    specsubset extract openapi.yaml --marker /public/ --format yaml

Library usage::

    from specsubset import extract_subset

    result = extract_subset(document)
    result.document          # the reduced spec
    result.report            # counts, detected headers, size reduction

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for options, reports and results.
    config: Layered configuration resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    extraction: The pure extraction engine.
    parser: Spec loading and writing.
"""

__version__ = "0.1.0"

from specsubset.extraction import extract_subset  # noqa: E402

__all__ = ["__version__", "extract_subset"]
