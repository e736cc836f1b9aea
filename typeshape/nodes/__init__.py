"""
Type nodes: the runtime schema tree.

Every schema is a tree of TypeNode instances. Leaves live in ``primitive``,
nodes holding children in ``composite``.
"""

from __future__ import annotations

from .base import DecodeContext, TypeNode, key_name
from .composite import (
    MISSING,
    ArrayType,
    DiscriminatedUnionType,
    ExtraKeys,
    LazyType,
    OptionalType,
    RecordType,
    StructType,
    TransformType,
    TupleType,
    UnionType,
    as_node,
)
from .primitive import (
    BooleanType,
    IntegerType,
    LiteralType,
    NullType,
    NumberType,
    StringType,
    SymbolType,
)

__all__ = [
    "TypeNode",
    "DecodeContext",
    "key_name",
    "as_node",
    "MISSING",
    "StringType",
    "NumberType",
    "IntegerType",
    "BooleanType",
    "NullType",
    "SymbolType",
    "LiteralType",
    "ArrayType",
    "TupleType",
    "StructType",
    "ExtraKeys",
    "RecordType",
    "UnionType",
    "DiscriminatedUnionType",
    "OptionalType",
    "TransformType",
    "LazyType",
]
