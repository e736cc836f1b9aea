import pytest

from typeshape.builder import Schema, array, discriminated_union, lazy, literal, nullable, number, optional, string, struct
from typeshape.errors import UnsupportedSchemaError
from typeshape.schema_ast import AST_SCHEMA, ast_to_type, type_to_ast, validate_ast


class TreeNode(Schema):
    schema_type = struct(
        {
            "value": number(),
            "children": array(lazy(lambda: TreeNode)),
            "label": optional(nullable(string()), default=None),
        }
    )


def test_introspected_asts_are_valid():
    validate_ast(type_to_ast(TreeNode))
    validate_ast(
        type_to_ast(discriminated_union("type", {"a": struct({"type": literal("a"), "tags": optional(array(string()), default=[])})}))
    )


@pytest.mark.parametrize(
    "ast, message",
    [
        ({"_type": "bogus"}, "Invalid AST: Unknown discriminator value 'bogus', expected one of: string,"),
        ({"constraints": {}}, "Invalid AST: Missing discriminator field '_type'"),
        ({"_type": "array", "constraints": {}}, "Invalid AST: Field 'item_type' is required"),
        (
            {"_type": "string", "constraints": {"min": -1}},
            "Invalid AST: Field 'constraints': Field 'min': Number must be at least 0",
        ),
        ({"_type": "literal", "values": []}, "Invalid AST: Field 'values': Array length must be at least 1"),
        ({"_type": "boolean", "extra": 1}, "Invalid AST: Unexpected keys: ['extra']"),
    ],
)
def test_invalid_asts(ast, message):
    with pytest.raises(UnsupportedSchemaError) as exc_info:
        validate_ast(ast)
    assert str(exc_info.value).startswith(message)


def test_constraints_default_to_empty():
    assert AST_SCHEMA.decode({"_type": "string"}) == {"_type": "string", "constraints": {}}


def test_back_reference_stub_is_valid():
    validate_ast({"_type": "lazy", "inner_type": {"_type": "struct"}, "ancestor": 2})
    with pytest.raises(UnsupportedSchemaError):
        validate_ast({"_type": "lazy", "inner_type": {"_type": "struct"}, "ancestor": -1})


def test_ast_schema_describes_itself():
    ast = type_to_ast(AST_SCHEMA)
    validate_ast(ast)

    rebuilt = ast_to_type(ast)
    assert rebuilt.validate(type_to_ast(TreeNode)) is None
    assert rebuilt.validate({"_type": "bogus"}) is not None


if __name__ == "__main__":
    pytest.main([__file__])
