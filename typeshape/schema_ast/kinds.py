"""
AST kind tags and wire field names.

An AST value is a plain dict discriminated by ``_type``. These names are the
interchange contract between the type node layer and the JSON Schema codec.
"""

from __future__ import annotations

# Discriminator key
TYPE = "_type"

# Field names
CONSTRAINTS = "constraints"
VALUES = "values"
ITEM_TYPE = "item_type"
ELEMENTS = "elements"
FIELDS = "fields"
REQUIRED = "required"
KEY_TYPE = "key_type"
VALUE_TYPE = "value_type"
MEMBERS = "members"
DISCRIMINATOR = "discriminator"
VARIANTS = "variants"
INNER_TYPE = "inner_type"
DEFAULT_VALUE = "default_value"

# Back-reference stubs only: which enclosing node of the referenced kind the
# stub points to, counting outwards from the innermost (0)
ANCESTOR = "ancestor"

# Kind tags
STRING = "string"
NUMBER = "number"
INTEGER = "integer"
BOOLEAN = "boolean"
NULL = "null"
SYMBOL = "symbol"
LITERAL = "literal"
ARRAY = "array"
TUPLE = "tuple"
STRUCT = "struct"
RECORD = "record"
UNION = "union"
DISCRIMINATED_UNION = "discriminated_union"
OPTIONAL = "optional"
TRANSFORM = "transform"
LAZY = "lazy"

ALL_KINDS = (
    STRING,
    NUMBER,
    INTEGER,
    BOOLEAN,
    NULL,
    SYMBOL,
    LITERAL,
    ARRAY,
    TUPLE,
    STRUCT,
    RECORD,
    UNION,
    DISCRIMINATED_UNION,
    OPTIONAL,
    TRANSFORM,
    LAZY,
)

# Constraint keys each kind carries in its "constraints" dict
STRING_CONSTRAINTS = ("min", "max", "format")
NUMBER_CONSTRAINTS = ("min", "max", "greater_than", "less_than")
ARRAY_CONSTRAINTS = ("min", "max", "length", "unique")


# Kinds that can enclose another node, hence the only possible cycle targets
CONTAINER_KINDS = (
    ARRAY,
    TUPLE,
    STRUCT,
    RECORD,
    UNION,
    DISCRIMINATED_UNION,
    OPTIONAL,
    TRANSFORM,
    LAZY,
)


def is_back_reference(ast: dict) -> bool:
    """Whether ``ast`` is the stub a lazy node carries when it closes a cycle.

    A back-reference names only the kind of the node it points back to:
    ``{"_type": "lazy", "inner_type": {"_type": "struct"}, "ancestor": 0}``.
    """
    if ast.get(TYPE) != LAZY:
        return False
    inner = ast.get(INNER_TYPE)
    return isinstance(inner, dict) and set(inner) == {TYPE} and inner[TYPE] in CONTAINER_KINDS
