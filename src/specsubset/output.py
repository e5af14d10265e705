"""Output formatting system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only: the reduced spec, or the extraction
  report when ``--report-only`` is used. This is what pipelines redirect.
* **stderr** -- all diagnostics (progress, detected headers, security
  changes, size comparison, warnings, errors).
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped to another process.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding format preferences,
   Rich consoles, and quiet/verbose flags. Created once in
   :func:`~specsubset.app.main_callback` and installed via :func:`set_output`.
2. Module-level convenience functions (:func:`info`, :func:`error`,
   :func:`debug`, etc.) that delegate to the global ``OutputManager``.

Library modules log through :mod:`logging`; :func:`configure_logging` routes
those records to the diagnostics console when ``--verbose`` is set.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from specsubset.models import ExtractionReport, SecurityAction


class OutputFormat(str, Enum):
    """Enumeration of supported output formats.

    ``AUTO`` resolves to ``RICH`` when stdout is an interactive TTY and colour
    is not disabled, or to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential informational messages on stderr.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    @property
    def is_quiet(self) -> bool:
        """Whether quiet mode is enabled."""
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        """Whether verbose mode is enabled."""
        return self._verbose

    @property
    def stderr_console(self) -> Console:
        """The Rich console used for diagnostics."""
        return self._stderr

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout, without any markup interpretation."""
        sys.stdout.write(text if text.endswith("\n") else text + "\n")
        sys.stdout.flush()

    def print_spec(self, text: str, fmt: str = "json") -> None:
        """Print a serialised spec to stdout.

        Highlighted in Rich mode, verbatim otherwise so it can be piped.

        Args:
            text: The serialised document.
            fmt: ``"json"`` or ``"yaml"``, used for syntax highlighting.
        """
        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(text, fmt, theme="monokai", word_wrap=True))
        else:
            self.print_data(text)

    def format_response(self, data: Any) -> None:
        """Output structured data (a dict or list) to stdout in the active format."""
        if self._format == OutputFormat.JSON:
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        elif self._format == OutputFormat.PLAIN:
            if isinstance(data, dict):
                for key, value in data.items():
                    self.print_data(f"{key}\t{_plain_value(value)}")
            elif isinstance(data, list):
                for item in data:
                    self.print_data(_plain_value(item))
            else:
                self.print_data(str(data))
        else:
            json_str = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(json_str, "json", theme="monokai", word_wrap=True))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print tabular data to stdout in the active format.

        * **Rich mode** -- styled :class:`~rich.table.Table`.
        * **JSON mode** -- array of objects keyed by header names.
        * **Plain mode** -- tab-separated values, one row per line.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            self.print_data("\t".join(headers))
            for row in rows:
                self.print_data("\t".join(row))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for h in headers:
                table.add_column(h)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    def print_report(self, report: ExtractionReport) -> None:
        """Print an extraction report to stdout as data."""
        if self._format == OutputFormat.JSON:
            data = report.model_dump(mode="json")
            data["path_count"] = report.path_count
            data["reduction_percent"] = round(report.reduction_percent, 1)
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False))
            return
        self.print_table(
            ["Metric", "Value"],
            report_rows(report),
            title="Extraction report",
        )

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(message)

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. NOT suppressed by ``--quiet``."""
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {message}")

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown with ``--verbose``."""
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim][debug] {message}[/dim]")

    def summarize(self, report: ExtractionReport) -> None:
        """Print the human-readable run summary to stderr.

        Lists the selected paths, the detected API-key headers and what
        happened to the security scheme, then the size comparison.
        """
        if report.path_count == 0:
            self.warning("No paths matched the inclusion rule; the subset is empty.")
        else:
            self.success(
                f"Selected {report.path_count} paths "
                f"({report.operation_count} operations):"
            )
            for path in report.selected_paths:
                self.info(f"   - {path}")

        self.success(f"Collected {report.schema_count} schemas")
        if report.dangling_refs:
            self.debug(
                "Skipped undefined schema refs: " + ", ".join(report.dangling_refs)
            )

        for line, is_warning in security_lines(report):
            if is_warning:
                self.warning(line)
            else:
                self.info(line)

        self.info(
            f"Size: {report.original_size / 1024:.2f} KB -> "
            f"{report.subset_size / 1024:.2f} KB "
            f"({report.reduction_percent:.1f}% smaller)"
        )


# ------------------------------------------------------------------ #
# Report helpers
# ------------------------------------------------------------------ #


def security_lines(report: ExtractionReport) -> list[tuple[str, bool]]:
    """Describe the security reconciliation as ``(message, is_warning)`` lines."""
    headers = ", ".join(report.detected_headers)
    action = report.security_action
    if action == SecurityAction.UNCHANGED:
        return [("No API key headers found in selected operations.", False)]

    lines = [(f"Detected API key headers: {headers}", False)]
    if action == SecurityAction.RENAMED:
        lines.append((
            f"Fixed security scheme {report.security_scheme} header: "
            f"{report.previous_header} -> {report.current_header}",
            False,
        ))
    elif action == SecurityAction.ALREADY_CORRECT:
        lines.append((
            f"Security scheme {report.security_scheme} already uses {report.current_header}",
            False,
        ))
    elif action == SecurityAction.SCHEME_MISSING:
        lines.append((
            f"Security scheme {report.security_scheme} is not declared; nothing to update.",
            True,
        ))
    elif action == SecurityAction.REMOVED:
        lines.append((
            "Multiple API key headers detected. Removed the global security "
            "schemes; each operation keeps its own header parameter.",
            True,
        ))
    return lines


def report_rows(report: ExtractionReport) -> list[list[str]]:
    """Flatten a report into ``[metric, value]`` table rows."""
    return [
        ["Paths", str(report.path_count)],
        ["Operations", str(report.operation_count)],
        ["Schemas", str(report.schema_count)],
        ["Dangling refs", ", ".join(report.dangling_refs) or "-"],
        ["API key headers", ", ".join(report.detected_headers) or "-"],
        ["Security", report.security_action.value],
        ["Original size", str(report.original_size)],
        ["Subset size", str(report.subset_size)],
        ["Reduction", f"{report.reduction_percent:.1f}%"],
    ]


def _plain_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


def configure_logging(output: OutputManager) -> None:
    """Route ``specsubset.*`` log records to the diagnostics console.

    Debug records are shown only in verbose mode; otherwise warnings and
    above still reach stderr.
    """
    logger = logging.getLogger("specsubset")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=output.stderr_console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if output.is_verbose else logging.WARNING)
    logger.propagate = False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def format_response(data: Any) -> None:
    """Output structured data to stdout via the global OutputManager."""
    get_output().format_response(data)


def info(message: str) -> None:
    """Print info message to stderr via the global OutputManager."""
    get_output().info(message)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def success(message: str) -> None:
    """Print success message to stderr via the global OutputManager."""
    get_output().success(message)


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)
