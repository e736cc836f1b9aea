"""
Introspection: convert a TypeNode tree into its AST.

The walk is depth-first and total over the node kinds. Lazy nodes are
resolved and converted in place; when a lazy node resolves to a node that is
still being converted higher up the walk, a back-reference stub is emitted
instead of recursing again.
"""

from __future__ import annotations

import copy
from typing import Any

from ..errors import UnsupportedSchemaError
from ..nodes import (
    ArrayType,
    BooleanType,
    DiscriminatedUnionType,
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
    as_node,
)
from . import kinds as k


class Introspector:
    """Walks a TypeNode tree once and builds the AST dict."""

    def __init__(self) -> None:
        # (node id, kind) of every node currently being converted, outermost first
        self._path: list[tuple[int, str]] = []

    def to_ast(self, node: TypeNode) -> dict[str, Any]:
        """
        Convert one node (and its subtree) to an AST dict.

        Args:
            node: The node to convert

        Returns:
            Plain AST dict discriminated by "_type"
        """
        if isinstance(node, LazyType):
            target = node.resolve()
            back_reference = self._back_reference(target)
            if back_reference is not None:
                return back_reference

        self._path.append((id(node), node.kind))
        try:
            return self._convert(node)
        finally:
            self._path.pop()

    def _back_reference(self, target: TypeNode) -> dict[str, Any] | None:
        ids = [node_id for node_id, _ in self._path]
        if id(target) not in ids:
            return None
        position = len(ids) - 1 - ids[::-1].index(id(target))
        ancestor = sum(1 for _, kind in self._path[position + 1 :] if kind == target.kind)
        return {k.TYPE: k.LAZY, k.INNER_TYPE: {k.TYPE: target.kind}, k.ANCESTOR: ancestor}

    def _convert(self, node: TypeNode) -> dict[str, Any]:
        if isinstance(node, StringType):
            constraints = _extract_constraints(node, k.STRING_CONSTRAINTS)
            if "format" in constraints:
                constraints["format"] = node.pattern_source
            return {k.TYPE: k.STRING, k.CONSTRAINTS: constraints}

        # IntegerType first: it is a NumberType subclass
        if isinstance(node, IntegerType):
            return {k.TYPE: k.INTEGER, k.CONSTRAINTS: _extract_constraints(node, k.NUMBER_CONSTRAINTS)}

        if isinstance(node, NumberType):
            return {k.TYPE: k.NUMBER, k.CONSTRAINTS: _extract_constraints(node, k.NUMBER_CONSTRAINTS)}

        if isinstance(node, BooleanType):
            return {k.TYPE: k.BOOLEAN}

        if isinstance(node, NullType):
            return {k.TYPE: k.NULL}

        if isinstance(node, SymbolType):
            return {k.TYPE: k.SYMBOL}

        if isinstance(node, LiteralType):
            return {k.TYPE: k.LITERAL, k.VALUES: list(node.values)}

        if isinstance(node, ArrayType):
            return {
                k.TYPE: k.ARRAY,
                k.ITEM_TYPE: self.to_ast(node.item_type),
                k.CONSTRAINTS: _extract_constraints(node, k.ARRAY_CONSTRAINTS),
            }

        if isinstance(node, TupleType):
            return {k.TYPE: k.TUPLE, k.ELEMENTS: [self.to_ast(element) for element in node.elements]}

        if isinstance(node, StructType):
            return {
                k.TYPE: k.STRUCT,
                k.FIELDS: {str(name): self.to_ast(field) for name, field in node.fields.items()},
                k.REQUIRED: [str(name) for name in node.required],
            }

        if isinstance(node, RecordType):
            return {
                k.TYPE: k.RECORD,
                k.KEY_TYPE: self.to_ast(node.key_type),
                k.VALUE_TYPE: self.to_ast(node.value_type),
            }

        if isinstance(node, UnionType):
            return {k.TYPE: k.UNION, k.MEMBERS: [self.to_ast(member) for member in node.members]}

        if isinstance(node, DiscriminatedUnionType):
            return {
                k.TYPE: k.DISCRIMINATED_UNION,
                k.DISCRIMINATOR: str(node.discriminator),
                k.VARIANTS: {str(tag): self.to_ast(variant) for tag, variant in node.variants.items()},
            }

        if isinstance(node, OptionalType):
            result = {k.TYPE: k.OPTIONAL, k.INNER_TYPE: self.to_ast(node.inner_type)}
            if node.has_default:
                result[k.DEFAULT_VALUE] = copy.deepcopy(node.default_value)
            return result

        if isinstance(node, TransformType):
            return {k.TYPE: k.TRANSFORM, k.INNER_TYPE: self.to_ast(node.source)}

        if isinstance(node, LazyType):
            return {k.TYPE: k.LAZY, k.INNER_TYPE: self.to_ast(node.resolve())}

        raise UnsupportedSchemaError(f"Unsupported type node: {type(node).__name__}")


def _extract_constraints(node: TypeNode, keys: tuple[str, ...]) -> dict[str, Any]:
    return {key: node.constraints[key] for key in keys if node.constraints.get(key) is not None}


def type_to_ast(schema: Any) -> dict[str, Any]:
    """Convert a TypeNode, or a Schema class exposing ``schema_type``, to its AST."""
    return Introspector().to_ast(as_node(schema))
