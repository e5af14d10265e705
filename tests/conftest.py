"""Shared test fixtures for specsubset.

Provides reusable fixtures for loading the internal spec fixture, building
small specs inline, isolating configuration and resetting global output
state between tests.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

import pytest

from specsubset.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_package_logger() -> None:
    """Undo :func:`~specsubset.output.configure_logging` after CLI tests."""
    yield
    logger = logging.getLogger("specsubset")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def internal_spec() -> dict[str, Any]:
    """Load the raw internal Acme spec."""
    with open(FIXTURES_DIR / "internal_api.json") as f:
        return json.load(f)


@pytest.fixture
def internal_spec_pristine(internal_spec: dict[str, Any]) -> dict[str, Any]:
    """An untouched deep copy, for asserting the input was not mutated."""
    return copy.deepcopy(internal_spec)


@pytest.fixture
def internal_spec_file(tmp_path: Path) -> Path:
    """Copy the internal spec fixture into tmp_path and return its path."""
    dest = tmp_path / "openapi.json"
    dest.write_text((FIXTURES_DIR / "internal_api.json").read_text())
    return dest


def _make_operation(
    ref: str | None = None,
    headers: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Build a minimal operation with optional response ``$ref`` and header params."""
    operation: dict[str, Any] = {
        "parameters": [
            {"name": header, "in": "header", "required": True, "schema": {"type": "string"}}
            for header in headers
        ],
        "responses": {"200": {"description": "OK"}},
    }
    if ref is not None:
        operation["responses"]["200"]["content"] = {
            "application/json": {"schema": {"$ref": f"#/components/schemas/{ref}"}}
        }
    return operation


def _make_spec(
    paths: dict[str, Any],
    schemas: dict[str, Any] | None = None,
    security_schemes: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a minimal OpenAPI 3.0 document."""
    components: dict[str, Any] = {"schemas": schemas or {}}
    if security_schemes is not None:
        components["securitySchemes"] = security_schemes
    return {
        "openapi": "3.0.3",
        "info": {"title": "Test API", "version": "1.0.0"},
        "paths": paths,
        "components": components,
    }


@pytest.fixture
def make_operation():
    """Factory for minimal operations, see :func:`_make_operation`."""
    return _make_operation


@pytest.fixture
def make_spec():
    """Factory for minimal documents, see :func:`_make_spec`."""
    return _make_spec


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path,
    clears all SPECSUBSET_* environment variables and changes the working
    directory to tmp_path.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("specsubset.config._is_xdg_platform", lambda: True)

    for var in [
        "SPECSUBSET_PATH_MARKER",
        "SPECSUBSET_REF_PREFIX",
        "SPECSUBSET_HEADER_MARKER",
        "SPECSUBSET_API_KEY_SCHEME",
        "SPECSUBSET_SERVER_URL",
        "SPECSUBSET_SERVER_DESCRIPTION",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
