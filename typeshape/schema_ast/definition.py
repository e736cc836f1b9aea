"""
The AST shape, declared with the builder.

``AST_SCHEMA`` is an ordinary typeshape schema: a discriminated union on
``_type`` that refers back to itself through ``lazy``. Generated ASTs are
decoded against it before they are converted to JSON Schema.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from ..builder import (
    array,
    boolean,
    discriminated_union,
    integer,
    lazy,
    literal,
    null,
    number,
    optional,
    record,
    string,
    struct,
    union,
)
from ..config import DEFAULT_CONFIG, CodecConfig
from ..errors import UnsupportedSchemaError
from . import kinds as k

_ast = lazy(lambda: AST_SCHEMA)

# Any JSON value, for default_value
JSON_VALUE = lazy(lambda: _JSON_VALUE)
_JSON_VALUE = union(string(), number(), boolean(), null(), array(JSON_VALUE), record(string(), JSON_VALUE))

_scalar = union(string(), number(), boolean(), null())
_count = integer(min=0)


def _kind(tag: str, fields: dict[str, Any] | None = None):
    return struct({k.TYPE: literal(tag), **(fields or {})})


def _constraints(**fields: Any):
    return optional(struct({name: optional(node) for name, node in fields.items()}), default={})


STRING_AST = _kind(k.STRING, {k.CONSTRAINTS: _constraints(min=_count, max=_count, format=string())})
NUMBER_AST = _kind(
    k.NUMBER,
    {k.CONSTRAINTS: _constraints(min=number(), max=number(), greater_than=number(), less_than=number())},
)
INTEGER_AST = _kind(
    k.INTEGER,
    {k.CONSTRAINTS: _constraints(min=number(), max=number(), greater_than=number(), less_than=number())},
)
ARRAY_AST = _kind(
    k.ARRAY,
    {
        k.ITEM_TYPE: _ast,
        k.CONSTRAINTS: _constraints(min=_count, max=_count, length=_count, unique=boolean()),
    },
)
STRUCT_AST = _kind(
    k.STRUCT,
    {k.FIELDS: record(string(), _ast), k.REQUIRED: optional(array(string()), default=[])},
)

# A lazy node holds either a full AST or a back-reference stub naming a kind
BACK_REFERENCE_AST = struct({k.TYPE: literal(*k.CONTAINER_KINDS)})
LAZY_AST = _kind(k.LAZY, {k.INNER_TYPE: union(_ast, BACK_REFERENCE_AST), k.ANCESTOR: optional(_count)})

AST_SCHEMA = discriminated_union(
    k.TYPE,
    {
        k.STRING: STRING_AST,
        k.NUMBER: NUMBER_AST,
        k.INTEGER: INTEGER_AST,
        k.BOOLEAN: _kind(k.BOOLEAN),
        k.NULL: _kind(k.NULL),
        k.SYMBOL: _kind(k.SYMBOL),
        k.LITERAL: _kind(k.LITERAL, {k.VALUES: array(_scalar, min=1)}),
        k.ARRAY: ARRAY_AST,
        k.TUPLE: _kind(k.TUPLE, {k.ELEMENTS: array(_ast)}),
        k.STRUCT: STRUCT_AST,
        k.RECORD: _kind(k.RECORD, {k.KEY_TYPE: _ast, k.VALUE_TYPE: _ast}),
        k.UNION: _kind(k.UNION, {k.MEMBERS: array(_ast, min=1)}),
        k.DISCRIMINATED_UNION: _kind(
            k.DISCRIMINATED_UNION,
            {k.DISCRIMINATOR: string(), k.VARIANTS: record(string(), _ast)},
        ),
        k.OPTIONAL: _kind(k.OPTIONAL, {k.INNER_TYPE: _ast, k.DEFAULT_VALUE: optional(JSON_VALUE)}),
        k.TRANSFORM: _kind(k.TRANSFORM, {k.INNER_TYPE: _ast}),
        k.LAZY: LAZY_AST,
    },
)


# Most decode levels AST_SCHEMA spends on one level of value nesting
_DECODE_LEVELS_PER_NESTING = 5


def _nesting_depth(value: Any) -> int:
    """Deepest dict/list nesting in a JSON-like value, counted without recursion."""
    deepest = 0
    stack = [(value, 0)]
    while stack:
        current, depth = stack.pop()
        deepest = max(deepest, depth)
        if isinstance(current, dict):
            stack.extend((child, depth + 1) for child in current.values())
        elif isinstance(current, (list, tuple)):
            stack.extend((child, depth + 1) for child in current)
    return deepest


def validate_ast(ast: Any, config: CodecConfig | None = None) -> None:
    """
    Check that ``ast`` is a well-formed AST.

    The data depth limit of ``config`` is raised to fit the AST, so a deeply
    nested schema is never rejected for its nesting alone.

    Args:
        ast: Candidate AST value
        config: Codec configuration

    Raises:
        UnsupportedSchemaError: If the value does not match AST_SCHEMA
    """
    config = config or DEFAULT_CONFIG
    limit = _DECODE_LEVELS_PER_NESTING * (_nesting_depth(ast) + 1)
    if limit > config.max_depth:
        config = replace(config, max_depth=limit)
    error = AST_SCHEMA.validate(ast, config)
    if error is not None:
        raise UnsupportedSchemaError(f"Invalid AST: {error.message}")
