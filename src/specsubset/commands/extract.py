"""Extract command -- publish the external subset of an internal spec.

Implements ``specsubset extract``: loads the internal OpenAPI document
(file, URL, or stdin), resolves the effective
:class:`~specsubset.models.ExtractionOptions`, runs the extraction engine,
and writes the reduced document to a file or stdout. A summary of the run
(selected paths, schema count, security changes, size reduction) goes to
stderr.
"""

from __future__ import annotations

from typing import Optional

import typer

from specsubset.exceptions import SpecsubsetError
from specsubset.output import debug, error, get_output, success


def extract_command(
    source: str = typer.Argument(
        ..., help="Internal spec: file path, URL, or '-' for stdin."
    ),
    output_path: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the subset here instead of stdout."
    ),
    fmt: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: json or yaml (default: from --output extension, else json).",
    ),
    marker: Optional[str] = typer.Option(
        None, "--marker", "-m", help="Publish paths containing this substring."
    ),
    ref_prefix: Optional[str] = typer.Option(
        None, "--ref-prefix", help="Schema reference prefix."
    ),
    header_marker: Optional[str] = typer.Option(
        None, "--header-marker", help="Substring identifying API-key headers."
    ),
    scheme: Optional[str] = typer.Option(
        None, "--scheme", help="API-key security scheme to keep in sync."
    ),
    server_url: Optional[str] = typer.Option(
        None, "--server-url", help="Production server URL for the subset."
    ),
    server_description: Optional[str] = typer.Option(
        None, "--server-description", help="Production server description."
    ),
    report_only: bool = typer.Option(
        False, "--report-only", help="Print the report to stdout; write no spec."
    ),
    skip_version_check: bool = typer.Option(
        False, "--skip-version-check", help="Do not require an OpenAPI 3.x document."
    ),
) -> None:
    """Extract the publishable subset of an OpenAPI spec.

    Selects the paths containing the marker, keeps every schema they
    reference directly or transitively, reconciles the API-key security
    scheme with the header parameters actually used, and stamps the
    production servers into the result.

    Raises:
        typer.Exit: With the error's exit code when loading, configuration,
            or writing fails.

    Example::

        specsubset extract openapi.json -o external-openapi.json
        specsubset extract https://internal/openapi.yaml --marker /public/ -f yaml
        cat openapi.json | specsubset extract - --report-only --json
    """
    from specsubset.config import resolve_options
    from specsubset.extraction import extract_subset
    from specsubset.parser import dump_spec, load_spec, validate_openapi_version
    from specsubset.parser.writer import write_spec

    try:
        options = resolve_options(
            cli_overrides={
                "path_marker": marker,
                "ref_prefix": ref_prefix,
                "header_marker": header_marker,
                "api_key_scheme": scheme,
            },
            cli_server_url=server_url,
            cli_server_description=server_description,
        )
        debug(f"Loading spec from: {source}")
        raw = load_spec(source)
        if not skip_version_check:
            version = validate_openapi_version(raw)
            debug(f"OpenAPI version: {version}")

        result = extract_subset(raw, options)
        output = get_output()
        output.summarize(result.report)

        if report_only:
            output.print_report(result.report)
        elif output_path:
            written = write_spec(result.document, output_path, fmt)
            success(f"Subset spec written to: {written}")
        else:
            fmt = fmt or "json"
            output.print_spec(dump_spec(result.document, fmt), fmt)
    except SpecsubsetError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
