import json
from pathlib import Path

import pytest

from typeshape.config import CodecConfig
from typeshape.errors import UnsupportedSchemaError
from typeshape.json_schema import ast_to_json_schema, json_schema_to_ast


def load_test_data():
    """Load AST / JSON Schema pairs from JSON file"""
    test_data_path = Path(__file__).parent / "test_data" / "json_schema_cases.json"
    with open(test_data_path) as f:
        return json.load(f)


TEST_CASES = load_test_data()


@pytest.mark.parametrize("test_case", TEST_CASES, ids=lambda case: case["name"])
def test_ast_to_json_schema(test_case):
    assert ast_to_json_schema(test_case["ast"]) == test_case["json_schema"]


@pytest.mark.parametrize(
    "test_case",
    [case for case in TEST_CASES if case["reversible"]],
    ids=lambda case: case["name"],
)
def test_json_schema_to_ast(test_case):
    assert json_schema_to_ast(test_case["json_schema"]) == test_case["ast"]


def test_emitter_does_not_share_defaults():
    ast = {"_type": "optional", "inner_type": {"_type": "array", "item_type": {"_type": "null"}, "constraints": {}}, "default_value": []}
    schema = ast_to_json_schema(ast)
    schema["default"].append(None)
    assert ast["default_value"] == []


def test_emitter_rejects_unknown_kind():
    with pytest.raises(UnsupportedSchemaError, match="Unsupported AST kind: 'bogus'"):
        ast_to_json_schema({"_type": "bogus"})


class TestParserLeniency:
    def test_array_without_items_defaults_to_string(self):
        assert json_schema_to_ast({"type": "array"}) == {
            "_type": "array",
            "item_type": {"_type": "string", "constraints": {}},
            "constraints": {},
        }

    def test_default_item_type_is_configurable(self):
        ast = json_schema_to_ast({"type": "array"}, CodecConfig(default_item_type="integer"))
        assert ast["item_type"] == {"_type": "integer", "constraints": {}}

    def test_additional_properties_true_is_string_record(self):
        assert json_schema_to_ast({"type": "object", "additionalProperties": True}) == {
            "_type": "record",
            "key_type": {"_type": "string", "constraints": {}},
            "value_type": {"_type": "string", "constraints": {}},
        }

    def test_properties_without_type(self):
        ast = json_schema_to_ast({"properties": {"a": {"type": "boolean"}}, "required": ["a"]})
        assert ast == {"_type": "struct", "fields": {"a": {"_type": "boolean"}}, "required": ["a"]}

    def test_single_type_list(self):
        assert json_schema_to_ast({"type": ["boolean"]}) == {"_type": "boolean"}

    def test_draft_04_exclusive_bounds(self):
        ast = json_schema_to_ast({"type": "number", "minimum": 0, "exclusiveMinimum": True, "maximum": 1, "exclusiveMaximum": False})
        assert ast == {"_type": "number", "constraints": {"greater_than": 0, "max": 1}}

    def test_required_property_with_default_stays_plain(self):
        ast = json_schema_to_ast(
            {"type": "object", "properties": {"a": {"type": "integer", "default": 1}}, "required": ["a"]}
        )
        assert ast["fields"]["a"] == {"_type": "integer", "constraints": {}}

    def test_document_metadata_is_ignored(self):
        ast = json_schema_to_ast({"$schema": "x", "$id": "y", "title": "T", "description": "D", "type": "null"})
        assert ast == {"_type": "null"}

    def test_const_takes_priority_over_type(self):
        assert json_schema_to_ast({"type": "string", "const": "a"}) == {"_type": "literal", "values": ["a"]}


class TestOneOf:
    def test_alternatives_without_const_get_positional_tags(self):
        ast = json_schema_to_ast({"oneOf": [{"type": "string"}, {"type": "integer"}]})
        assert ast == {
            "_type": "discriminated_union",
            "discriminator": "type",
            "variants": {
                "variant_0": {"_type": "string", "constraints": {}},
                "variant_1": {"_type": "integer", "constraints": {}},
            },
        }

    def test_default_discriminator_is_configurable(self):
        ast = json_schema_to_ast({"oneOf": [{"type": "string"}]}, CodecConfig(default_discriminator="kind"))
        assert ast["discriminator"] == "kind"

    def test_mixed_alternatives(self):
        ast = json_schema_to_ast(
            {
                "oneOf": [
                    {"type": "object", "properties": {"kind": {"const": "a"}}},
                    {"type": "object", "properties": {"other": {"type": "string"}}},
                ]
            }
        )
        assert ast["discriminator"] == "kind"
        assert list(ast["variants"]) == ["a", "variant_1"]

    def test_non_string_tags_are_stringified(self):
        ast = json_schema_to_ast({"oneOf": [{"type": "object", "properties": {"v": {"const": 1}}}]})
        assert list(ast["variants"]) == ["1"]

    def test_disagreeing_discriminators(self):
        with pytest.raises(UnsupportedSchemaError, match="disagree on the discriminator"):
            json_schema_to_ast(
                {
                    "oneOf": [
                        {"type": "object", "properties": {"kind": {"const": "a"}}},
                        {"type": "object", "properties": {"type": {"const": "b"}}},
                    ]
                }
            )

    def test_duplicate_tags(self):
        with pytest.raises(UnsupportedSchemaError, match="Duplicate discriminator value 'a'"):
            json_schema_to_ast(
                {
                    "oneOf": [
                        {"type": "object", "properties": {"kind": {"const": "a"}}},
                        {"type": "object", "properties": {"kind": {"const": "a"}}},
                    ]
                }
            )


@pytest.mark.parametrize(
    "schema, message",
    [
        ({"$ref": "#/$defs/Node"}, "$ref is not supported"),
        ({"type": "foo"}, "Unsupported type 'foo' at #"),
        ({"type": ["string", "integer"]}, "Unsupported type ['string', 'integer'] at #"),
        ({"type": "object", "properties": {"a": {"type": "bar"}}}, "Unsupported type 'bar' at #/properties/a"),
        ({"type": "array", "items": {"$ref": "#"}}, "$ref is not supported (at #/items"),
        ({}, "Unsupported schema at #"),
    ],
)
def test_unsupported_schemas(schema, message):
    with pytest.raises(UnsupportedSchemaError) as exc_info:
        json_schema_to_ast(schema)
    assert str(exc_info.value).startswith(message)


def test_invalid_default_item_type():
    with pytest.raises(UnsupportedSchemaError):
        json_schema_to_ast({"type": "array"}, CodecConfig(default_item_type="object"))


if __name__ == "__main__":
    pytest.main([__file__])
