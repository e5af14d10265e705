"""Configuration management with XDG paths and precedence resolution.

This module resolves the :class:`~specsubset.models.ExtractionOptions` a run
uses:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specsubset/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **User config** -- ``<config_dir>/config.json`` holding personal defaults.
* **Project config** -- ``./specsubset.json`` committed next to the
  internal spec, usually pinning the path marker and production servers.
* **Precedence resolution** -- :func:`resolve_options` merges CLI flags,
  environment variables, project config and user config into the final
  options.

Writes go through :func:`~specsubset.parser.writer.atomic_write`.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specsubset.exceptions import ConfigError
from specsubset.models import ExtractionOptions
from specsubset.parser.writer import atomic_write

_APP_NAME = "specsubset"
_CONFIG_FILENAME = "config.json"
PROJECT_CONFIG_FILENAME = "specsubset.json"

_ENV_PREFIX = "SPECSUBSET_"
_ENV_FIELDS = {
    "PATH_MARKER": "path_marker",
    "REF_PREFIX": "ref_prefix",
    "HEADER_MARKER": "header_marker",
    "API_KEY_SCHEME": "api_key_scheme",
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory (not created).

    On Linux/BSD: ``$XDG_CONFIG_HOME/specsubset/`` (default
    ``~/.config/specsubset/``). On macOS/Windows: ``~/.specsubset/``.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specsubset/`` (default
    ``~/.local/share/specsubset/``). On macOS/Windows: ``~/.specsubset/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Config files ---


def _read_json_config(path: Path, label: str) -> Optional[dict[str, Any]]:
    """Read a JSON object from *path*, or ``None`` if the file is absent."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} config at {path}: expected a JSON object")
    return data


def user_config_path() -> Path:
    """Path to the user-wide config file."""
    return get_config_dir() / _CONFIG_FILENAME


def project_config_path() -> Path:
    """Path to the project-local config file in the working directory."""
    return Path.cwd() / PROJECT_CONFIG_FILENAME


def load_user_config() -> Optional[dict[str, Any]]:
    """Load ``<config_dir>/config.json``.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    return _read_json_config(user_config_path(), "user")


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./specsubset.json``.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    return _read_json_config(project_config_path(), "project")


def save_project_config(options: ExtractionOptions, force: bool = False) -> Path:
    """Persist *options* to ``./specsubset.json``.

    Args:
        options: The options to save.
        force: Overwrite an existing file.

    Returns:
        The written path.

    Raises:
        ConfigError: If the file exists and *force* is not set.
    """
    path = project_config_path()
    if path.exists() and not force:
        raise ConfigError(f"{path} already exists (use --force to overwrite)")
    data = options.model_dump(mode="json")
    try:
        atomic_write(path, json.dumps(data, indent=2) + "\n")
    except OSError as exc:
        raise ConfigError(f"Cannot write {path}: {exc}") from exc
    return path


# --- Precedence resolution ---


def _env_overrides() -> dict[str, Any]:
    """Collect ``SPECSUBSET_*`` environment overrides."""
    overrides: dict[str, Any] = {}
    for suffix, field_name in _ENV_FIELDS.items():
        value = os.environ.get(_ENV_PREFIX + suffix)
        if value:
            overrides[field_name] = value
    return overrides


def _server_override(
    url: Optional[str],
    description: Optional[str],
    current: Any,
) -> Optional[list[dict[str, Any]]]:
    """Build a one-entry ``servers`` list from a URL and/or description.

    A description on its own relabels the first server already configured.
    """
    if url is None and description is None:
        return None
    if url is None:
        if not isinstance(current, list) or not current:
            return None
        first = current[0]
        url = first.get("url") if isinstance(first, dict) else getattr(first, "url", None)
        if url is None:
            return None
    entry: dict[str, Any] = {"url": url}
    if description is not None:
        entry["description"] = description
    return [entry]


def resolve_options(
    cli_overrides: Optional[dict[str, Any]] = None,
    cli_server_url: Optional[str] = None,
    cli_server_description: Optional[str] = None,
) -> ExtractionOptions:
    """Resolve extraction options with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_overrides`` entries that are not ``None``,
           ``cli_server_url``, ``cli_server_description``)
        2. Environment variables (``SPECSUBSET_PATH_MARKER``,
           ``SPECSUBSET_REF_PREFIX``, ``SPECSUBSET_HEADER_MARKER``,
           ``SPECSUBSET_API_KEY_SCHEME``, ``SPECSUBSET_SERVER_URL``,
           ``SPECSUBSET_SERVER_DESCRIPTION``)
        3. Project config (``./specsubset.json``)
        4. User config (``~/.config/specsubset/config.json``)
        5. Model defaults

    Raises:
        ConfigError: If a config file is invalid or the merged values fail
            validation.
    """
    merged: dict[str, Any] = {}

    # 4. User config
    user = load_user_config()
    if user:
        merged.update(user)

    # 3. Project config
    project = load_project_config()
    if project:
        merged.update(project)

    # 2. Environment
    merged.update(_env_overrides())
    servers = _server_override(
        os.environ.get(_ENV_PREFIX + "SERVER_URL") or None,
        os.environ.get(_ENV_PREFIX + "SERVER_DESCRIPTION") or None,
        merged.get("servers", ExtractionOptions().servers),
    )
    if servers is not None:
        merged["servers"] = servers

    # 1. CLI flags
    if cli_overrides:
        merged.update({k: v for k, v in cli_overrides.items() if v is not None})
    servers = _server_override(
        cli_server_url,
        cli_server_description,
        merged.get("servers", ExtractionOptions().servers),
    )
    if servers is not None:
        merged["servers"] = servers

    try:
        return ExtractionOptions.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
