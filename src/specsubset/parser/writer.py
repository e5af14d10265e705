"""Serialise and write the reduced spec.

The output format follows the destination's extension (``.json``,
``.yaml``/``.yml``) unless given explicitly. File writes go through a temp
file in the destination directory followed by :func:`os.replace`, so a
published spec is never left half-written.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import yaml

from specsubset.exceptions import InvalidUsageError, OutputWriteError

FORMATS = ("json", "yaml")


def format_for_path(path: str | Path, default: str = "json") -> str:
    """Infer the output format from *path*'s extension."""
    suffix = Path(path).suffix.lower()
    if suffix in (".yaml", ".yml"):
        return "yaml"
    if suffix == ".json":
        return "json"
    return default


def dump_spec(document: Any, fmt: str = "json") -> str:
    """Serialise *document* as indented JSON or block-style YAML.

    Key order is preserved in both formats.

    Raises:
        InvalidUsageError: If *fmt* is not a supported format.
        OutputWriteError: If the document cannot be serialised.
    """
    if fmt not in FORMATS:
        raise InvalidUsageError(
            f"Unknown output format '{fmt}'. Choose from: {', '.join(FORMATS)}"
        )
    try:
        if fmt == "yaml":
            return yaml.safe_dump(
                document, sort_keys=False, allow_unicode=True, default_flow_style=False
            )
        return json.dumps(document, indent=2, ensure_ascii=False, default=str) + "\n"
    except (TypeError, ValueError, yaml.YAMLError) as exc:
        raise OutputWriteError(f"Cannot serialise spec as {fmt}: {exc}") from exc


def write_spec(document: Any, path: str | Path, fmt: Optional[str] = None) -> Path:
    """Write *document* to *path* atomically.

    Args:
        document: The spec to write.
        path: Destination file; parent directories are created.
        fmt: ``"json"`` or ``"yaml"``; inferred from the extension when
            omitted.

    Returns:
        The destination path.

    Raises:
        OutputWriteError: If serialisation or the file write fails.
    """
    dest = Path(path)
    text = dump_spec(document, fmt or format_for_path(dest))
    try:
        atomic_write(dest, text)
    except OSError as exc:
        raise OutputWriteError(f"Failed to write {dest}: {exc}") from exc
    return dest


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the error re-raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise
