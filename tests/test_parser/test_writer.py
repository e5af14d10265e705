"""Tests for specsubset.parser.writer."""

from __future__ import annotations

import datetime
import json
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from specsubset.exceptions import InvalidUsageError, OutputWriteError
from specsubset.parser.writer import atomic_write, dump_spec, format_for_path, write_spec

DOC = {
    "openapi": "3.0.3",
    "info": {"title": "Zebra first", "version": "1"},
    "paths": {"/external/é": {"get": {}}},
}


class TestFormatForPath:
    def test_extensions(self) -> None:
        assert format_for_path("out.json") == "json"
        assert format_for_path("out.YAML") == "yaml"
        assert format_for_path("out.yml") == "yaml"

    def test_unknown_extension_uses_default(self) -> None:
        assert format_for_path("out.txt") == "json"
        assert format_for_path("out", default="yaml") == "yaml"


class TestDumpSpec:
    def test_json_is_indented_and_ordered(self) -> None:
        text = dump_spec(DOC)
        assert text.startswith('{\n  "openapi"')
        assert text.endswith("\n")
        assert "/external/é" in text
        assert json.loads(text) == DOC

    def test_yaml_preserves_key_order(self) -> None:
        text = dump_spec(DOC, "yaml")
        assert text.index("openapi") < text.index("info") < text.index("paths")
        assert yaml.safe_load(text) == DOC

    def test_unknown_format(self) -> None:
        with pytest.raises(InvalidUsageError, match="Unknown output format"):
            dump_spec(DOC, "xml")

    def test_dates_are_written_as_strings(self) -> None:
        document = {"components": {"schemas": {"Day": {"example": datetime.date(2024, 1, 1)}}}}
        text = dump_spec(document)
        assert json.loads(text)["components"]["schemas"]["Day"]["example"] == "2024-01-01"

    def test_circular_document(self) -> None:
        document: dict = {}
        document["self"] = document
        with pytest.raises(OutputWriteError, match="Cannot serialise"):
            dump_spec(document)


class TestWriteSpec:
    def test_writes_json_by_extension(self, tmp_path: Path) -> None:
        dest = write_spec(DOC, tmp_path / "nested" / "external.json")
        assert json.loads(dest.read_text(encoding="utf-8")) == DOC

    def test_writes_yaml_by_extension(self, tmp_path: Path) -> None:
        dest = write_spec(DOC, tmp_path / "external.yaml")
        assert yaml.safe_load(dest.read_text(encoding="utf-8")) == DOC

    def test_explicit_format_wins(self, tmp_path: Path) -> None:
        dest = write_spec(DOC, tmp_path / "external.json", fmt="yaml")
        assert dest.read_text(encoding="utf-8").startswith("openapi:")

    def test_os_error_is_wrapped(self, tmp_path: Path) -> None:
        with patch("specsubset.parser.writer.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OutputWriteError, match="disk full"):
                write_spec(DOC, tmp_path / "external.json")
        assert list(tmp_path.iterdir()) == []


class TestAtomicWrite:
    def test_replaces_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "spec.json"
        target.write_text("old", encoding="utf-8")
        atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["spec.json"]
