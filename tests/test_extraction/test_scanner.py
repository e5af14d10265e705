"""Tests for specsubset.extraction.scanner."""

from __future__ import annotations

from specsubset.extraction.scanner import collect_refs, schema_name

PREFIX = "#/components/schemas/"


class TestCollectRefs:
    """Reference collection over arbitrary nested values."""

    def test_finds_top_level_ref(self) -> None:
        assert collect_refs({"$ref": PREFIX + "Pet"}, PREFIX) == {"Pet"}

    def test_finds_refs_at_any_depth(self) -> None:
        value = {
            "responses": {
                "200": {
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "array",
                                "items": {"$ref": PREFIX + "Pet"},
                            }
                        }
                    }
                }
            },
            "requestBody": {
                "content": {
                    "application/json": {
                        "schema": {"oneOf": [{"$ref": PREFIX + "Cat"}, {"$ref": PREFIX + "Dog"}]}
                    }
                }
            },
        }
        assert collect_refs(value, PREFIX) == {"Pet", "Cat", "Dog"}

    def test_recurses_into_siblings_of_ref(self) -> None:
        """A mapping holding a $ref is still walked for nested content."""
        value = {
            "$ref": PREFIX + "Base",
            "x-extra": {"items": {"$ref": PREFIX + "Extra"}},
        }
        assert collect_refs(value, PREFIX) == {"Base", "Extra"}

    def test_walks_top_level_list(self) -> None:
        value = [{"$ref": PREFIX + "A"}, [{"$ref": PREFIX + "B"}], "text", 3]
        assert collect_refs(value, PREFIX) == {"A", "B"}

    def test_duplicates_collapse(self) -> None:
        value = {"a": {"$ref": PREFIX + "Pet"}, "b": {"$ref": PREFIX + "Pet"}}
        assert collect_refs(value, PREFIX) == {"Pet"}

    def test_ignores_other_component_sections(self) -> None:
        value = {
            "parameters": [{"$ref": "#/components/parameters/Limit"}],
            "schema": {"$ref": "other.json#/Pet"},
        }
        assert collect_refs(value, PREFIX) == frozenset()

    def test_ignores_non_string_ref(self) -> None:
        """A property literally named $ref is a schema, not a reference."""
        value = {"properties": {"$ref": {"type": "string"}}}
        assert collect_refs(value, PREFIX) == frozenset()

    def test_ignores_bare_prefix(self) -> None:
        assert collect_refs({"$ref": PREFIX}, PREFIX) == frozenset()

    def test_scalars_yield_nothing(self) -> None:
        for value in (None, 1, 2.5, True, "#/components/schemas/Pet"):
            assert collect_refs(value, PREFIX) == frozenset()

    def test_custom_prefix(self) -> None:
        value = {"schema": {"$ref": "#/definitions/Pet"}}
        assert collect_refs(value, "#/definitions/") == {"Pet"}

    def test_does_not_mutate_input(self) -> None:
        value = {"items": {"$ref": PREFIX + "Pet"}}
        collect_refs(value, PREFIX)
        assert value == {"items": {"$ref": PREFIX + "Pet"}}

    def test_pointer_into_schema_counts_as_schema(self) -> None:
        value = {"schema": {"$ref": PREFIX + "Pet/properties/id"}}
        assert collect_refs(value, PREFIX) == {"Pet"}


class TestSchemaName:
    def test_plain_name(self) -> None:
        assert schema_name("Pet") == "Pet"

    def test_unescapes_pointer_tokens(self) -> None:
        assert schema_name("a~1b~0c/properties") == "a/b~c"

    def test_empty_head(self) -> None:
        assert schema_name("/properties") == ""
