"""
Declaration facade.

Thin constructor functions that build TypeNode trees, plus a ``Schema`` base
class for naming a schema and referring to it (including from itself):

    class TreeNode(Schema):
        schema_type = struct({
            "value": number(),
            "children": array(lazy(lambda: TreeNode)),
        })

    TreeNode.decode({"value": 1, "children": []})
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from .config import CodecConfig
from .errors import SchemaDefinitionError, ValidationError
from .nodes import (
    MISSING,
    ArrayType,
    BooleanType,
    DiscriminatedUnionType,
    ExtraKeys,
    IntegerType,
    LazyType,
    LiteralType,
    NullType,
    NumberType,
    OptionalType,
    RecordType,
    StringType,
    StructType,
    SymbolType,
    TransformType,
    TupleType,
    TypeNode,
    UnionType,
)


def string(**constraints: Any) -> StringType:
    """String; constraints ``min``, ``max``, ``format``."""
    return StringType(**constraints)


def number(**constraints: Any) -> NumberType:
    """Number; constraints ``min``, ``max``, ``greater_than``, ``less_than``."""
    return NumberType(**constraints)


def integer(**constraints: Any) -> IntegerType:
    return IntegerType(**constraints)


def boolean() -> BooleanType:
    return BooleanType()


def null() -> NullType:
    return NullType()


def symbol() -> SymbolType:
    return SymbolType()


def literal(*values: Any) -> LiteralType:
    """Literal of the given values; a single list argument is spread."""
    if len(values) == 1 and isinstance(values[0], (list, tuple)):
        values = tuple(values[0])
    return LiteralType(*values)


def array(item_type: Any, **constraints: Any) -> ArrayType:
    """Array; constraints ``min``, ``max``, ``length``, ``unique``."""
    return ArrayType(item_type, **constraints)


def tuple_(*elements: Any) -> TupleType:
    return TupleType(*elements)


def struct(fields: Mapping[str, Any], extra_keys: ExtraKeys | str = ExtraKeys.REJECT) -> StructType:
    """Struct; ``extra_keys`` is one of "reject", "allow", "include"."""
    return StructType(fields, extra_keys=extra_keys)


def record(key: Any, value: Any) -> RecordType:
    return RecordType(key, value)


def union(*members: Any) -> UnionType:
    return UnionType(*members)


def discriminated_union(discriminator: str, variants: Mapping[str, Any] | None = None, **kwargs: Any) -> DiscriminatedUnionType:
    """Discriminated union; variants as a mapping, keyword arguments, or both."""
    all_variants = dict(variants or {})
    all_variants.update(kwargs)
    return DiscriminatedUnionType(discriminator, all_variants)


def optional(inner_type: Any, default: Any = MISSING) -> OptionalType:
    """Mark a struct field optional; ``default`` fills it when absent."""
    return OptionalType(inner_type, default)


def nullable(inner_type: Any) -> UnionType:
    """Value or null: ``union(inner_type, null())``."""
    return UnionType(inner_type, NullType())


def transform(source: Any, target: Any, decode: Callable[[Any], Any], encode: Callable[[Any], Any]) -> TransformType:
    return TransformType(source, target, decode=decode, encode=encode)


def lazy(target: Any) -> LazyType:
    """Deferred reference to a node, a Schema class, or a callable returning either."""
    return LazyType(target)


class Schema:
    """Base class for named schemas.

    Subclasses assign ``schema_type``; the class then decodes, encodes and
    validates through it and can be used anywhere a node is expected.
    """

    schema_type: ClassVar[TypeNode | None] = None

    @classmethod
    def node(cls) -> TypeNode:
        if not isinstance(cls.schema_type, TypeNode):
            raise SchemaDefinitionError(f"Schema {cls.__name__} does not define schema_type")
        return cls.schema_type

    @classmethod
    def decode(cls, value: Any, config: CodecConfig | None = None) -> Any:
        return cls.node().decode(value, config)

    @classmethod
    def encode(cls, value: Any) -> Any:
        return cls.node().encode(value)

    @classmethod
    def validate(cls, value: Any, config: CodecConfig | None = None) -> ValidationError | None:
        return cls.node().validate(value, config)
