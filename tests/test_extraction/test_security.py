"""Tests for specsubset.extraction.security."""

from __future__ import annotations

import copy
from typing import Any

from specsubset.extraction.security import detect_api_key_headers, reconcile_security
from specsubset.models import SecurityAction


def _paths(*header_sets: tuple[str, ...], make_operation) -> dict[str, Any]:
    return {
        f"/external/op{i}": {"get": make_operation(headers=headers)}
        for i, headers in enumerate(header_sets)
    }


SCHEMES = {
    "APIKeyHeader": {"type": "apiKey", "in": "header", "name": "X-Api-Key"},
    "Bearer": {"type": "http", "scheme": "bearer"},
}


class TestDetectApiKeyHeaders:
    def test_case_insensitive_marker(self, make_operation) -> None:
        paths = _paths(("X-API-KEY",), ("x-partner-api-key",), make_operation=make_operation)
        assert detect_api_key_headers(paths, "api-key") == ("X-API-KEY", "x-partner-api-key")

    def test_marker_itself_case_insensitive(self, make_operation) -> None:
        paths = _paths(("X-Api-Key",), make_operation=make_operation)
        assert detect_api_key_headers(paths, "API-KEY") == ("X-Api-Key",)

    def test_distinct_names_deduplicated(self, make_operation) -> None:
        paths = _paths(("X-Api-Key",), ("X-Api-Key",), make_operation=make_operation)
        assert detect_api_key_headers(paths, "api-key") == ("X-Api-Key",)

    def test_names_differing_only_in_case_are_distinct(self, make_operation) -> None:
        paths = _paths(("X-Api-Key",), ("x-api-key",), make_operation=make_operation)
        assert len(detect_api_key_headers(paths, "api-key")) == 2

    def test_non_header_parameters_ignored(self) -> None:
        paths = {
            "/external/x": {
                "get": {
                    "parameters": [
                        {"name": "api-key", "in": "query"},
                        {"name": "api-key", "in": "cookie"},
                        {"name": "X-Request-Id", "in": "header"},
                    ]
                }
            }
        }
        assert detect_api_key_headers(paths, "api-key") == ()

    def test_path_level_parameters_count(self) -> None:
        paths = {
            "/external/x": {
                "parameters": [{"name": "X-Api-Key", "in": "header"}],
                "get": {"responses": {}},
            }
        }
        assert detect_api_key_headers(paths, "api-key") == ("X-Api-Key",)

    def test_ref_and_malformed_parameters_skipped(self) -> None:
        paths = {
            "/external/x": {
                "get": {
                    "parameters": [
                        {"$ref": "#/components/parameters/ApiKey"},
                        "X-Api-Key",
                        {"in": "header"},
                        {"name": 42, "in": "header"},
                    ]
                },
                "post": {"parameters": "not-a-list"},
            }
        }
        assert detect_api_key_headers(paths, "api-key") == ()


class TestReconcileSecurity:
    def test_no_headers_keeps_schemes(self, make_operation) -> None:
        paths = _paths((), make_operation=make_operation)
        result = reconcile_security(paths, SCHEMES, "api-key", "APIKeyHeader")
        assert result.action == SecurityAction.UNCHANGED
        assert result.security_schemes == SCHEMES
        assert result.detected_headers == ()

    def test_no_headers_and_no_schemes(self, make_operation) -> None:
        paths = _paths((), make_operation=make_operation)
        result = reconcile_security(paths, None, "api-key", "APIKeyHeader")
        assert result.action == SecurityAction.UNCHANGED
        assert result.security_schemes is None

    def test_single_header_renames_scheme(self, make_operation) -> None:
        paths = _paths(("X-Custom-Key",), make_operation=make_operation)
        schemes = {"APIKeyHeader": {"type": "apiKey", "in": "header", "name": "X-Api-Key"}}
        result = reconcile_security(paths, schemes, "key", "APIKeyHeader")
        assert result.action == SecurityAction.RENAMED
        assert result.security_schemes["APIKeyHeader"]["name"] == "X-Custom-Key"
        assert result.security_schemes["APIKeyHeader"]["type"] == "apiKey"
        assert result.previous_header == "X-Api-Key"
        assert result.current_header == "X-Custom-Key"

    def test_rename_does_not_mutate_input(self, make_operation) -> None:
        paths = _paths(("X-Partner-Api-Key",), make_operation=make_operation)
        schemes = copy.deepcopy(SCHEMES)
        result = reconcile_security(paths, schemes, "api-key", "APIKeyHeader")
        assert result.action == SecurityAction.RENAMED
        assert schemes == SCHEMES
        assert result.security_schemes is not schemes

    def test_rename_keeps_other_schemes(self, make_operation) -> None:
        paths = _paths(("X-Partner-Api-Key",), make_operation=make_operation)
        result = reconcile_security(paths, SCHEMES, "api-key", "APIKeyHeader")
        assert result.security_schemes["Bearer"] == SCHEMES["Bearer"]

    def test_single_header_already_correct(self, make_operation) -> None:
        paths = _paths(("X-Api-Key",), ("X-Api-Key",), make_operation=make_operation)
        result = reconcile_security(paths, SCHEMES, "api-key", "APIKeyHeader")
        assert result.action == SecurityAction.ALREADY_CORRECT
        assert result.security_schemes == SCHEMES

    def test_single_header_without_designated_scheme(self, make_operation) -> None:
        paths = _paths(("X-Api-Key",), make_operation=make_operation)
        schemes = {"Bearer": SCHEMES["Bearer"]}
        result = reconcile_security(paths, schemes, "api-key", "APIKeyHeader")
        assert result.action == SecurityAction.SCHEME_MISSING
        assert result.security_schemes == schemes

    def test_single_header_and_no_schemes_at_all(self, make_operation) -> None:
        paths = _paths(("X-Api-Key",), make_operation=make_operation)
        result = reconcile_security(paths, None, "api-key", "APIKeyHeader")
        assert result.action == SecurityAction.SCHEME_MISSING
        assert result.security_schemes is None

    def test_multiple_headers_remove_block(self, make_operation) -> None:
        paths = _paths(("X-Key-A",), ("X-Key-B",), make_operation=make_operation)
        result = reconcile_security(paths, SCHEMES, "key", "APIKeyHeader")
        assert result.action == SecurityAction.REMOVED
        assert result.security_schemes is None
        assert result.detected_headers == ("X-Key-A", "X-Key-B")

    def test_custom_scheme_name(self, make_operation) -> None:
        paths = _paths(("X-Tenant-Api-Key",), make_operation=make_operation)
        schemes = {"TenantKey": {"type": "apiKey", "in": "header", "name": "X-Api-Key"}}
        result = reconcile_security(paths, schemes, "api-key", "TenantKey")
        assert result.action == SecurityAction.RENAMED
        assert result.security_schemes["TenantKey"]["name"] == "X-Tenant-Api-Key"
