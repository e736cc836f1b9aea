"""
Reconstruction: build a TypeNode tree back from an AST.

Back-reference stubs become LazyType nodes bound to the enclosing node they
name, so a recursive AST reconstructs into a working recursive schema.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import DEFAULT_CONFIG, CodecConfig
from ..errors import SchemaDefinitionError, UnsupportedSchemaError
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
    TupleType,
    TypeNode,
    UnionType,
)
from . import kinds as k

logger = logging.getLogger(__name__)


class _Cell:
    """Holds a node once it has been built; back-references read it lazily."""

    def __init__(self, kind: str):
        self.kind = kind
        self.node: TypeNode | None = None

    def get(self) -> TypeNode:
        if self.node is None:
            raise SchemaDefinitionError(f"Back-reference to a {self.kind} node used before it was built")
        return self.node


class TypeBuilder:
    """Turns one AST into a TypeNode tree.

    The builder keeps the chain of AST nodes being built, mirroring the walk
    that produced the AST, so that back-references can be bound by kind and
    ancestor count.
    """

    def __init__(self, config: CodecConfig | None = None):
        self.config = config or DEFAULT_CONFIG
        self._stack: list[_Cell] = []
        self._optionals: list[OptionalType] = []

    def build(self, ast: dict[str, Any]) -> TypeNode:
        """
        Build the TypeNode tree for ``ast``.

        Args:
            ast: AST dict

        Returns:
            Root TypeNode

        Raises:
            UnsupportedSchemaError: If the AST contains an unknown kind or a dangling back-reference
            InvalidDefaultError: If an optional default does not match its type
        """
        node = self._build(ast)
        # Defaults may reach back-references, so they are checked once every node exists
        for optional_node in self._optionals:
            optional_node.check_default(self.config)
        return node

    def _build(self, ast: Any) -> TypeNode:
        if not isinstance(ast, dict) or k.TYPE not in ast:
            raise UnsupportedSchemaError(f"Invalid AST node: {ast!r}")

        if k.is_back_reference(ast):
            return self._back_reference(ast[k.INNER_TYPE][k.TYPE], ast.get(k.ANCESTOR, 0))

        cell = _Cell(ast[k.TYPE])
        self._stack.append(cell)
        try:
            cell.node = self._convert(ast)
        finally:
            self._stack.pop()
        return cell.node

    def _back_reference(self, kind: str, ancestor: int) -> LazyType:
        matches = [cell for cell in reversed(self._stack) if cell.kind == kind]
        if ancestor >= len(matches):
            raise UnsupportedSchemaError(f"Back-reference to {kind} (ancestor {ancestor}) has no enclosing node")
        cell = matches[ancestor]
        logger.debug("Binding back-reference to enclosing %s node", kind)
        return LazyType(cell.get)

    def _convert(self, ast: dict[str, Any]) -> TypeNode:
        kind = ast[k.TYPE]

        if kind == k.STRING:
            return StringType(**_constraints(ast, k.STRING_CONSTRAINTS))
        if kind == k.NUMBER:
            return NumberType(**_constraints(ast, k.NUMBER_CONSTRAINTS))
        if kind == k.INTEGER:
            return IntegerType(**_constraints(ast, k.NUMBER_CONSTRAINTS))
        if kind == k.BOOLEAN:
            return BooleanType()
        if kind == k.NULL:
            return NullType()
        if kind == k.SYMBOL:
            return SymbolType()
        if kind == k.LITERAL:
            return LiteralType(*ast[k.VALUES])
        if kind == k.ARRAY:
            return ArrayType(self._build(ast[k.ITEM_TYPE]), **_constraints(ast, k.ARRAY_CONSTRAINTS))
        if kind == k.TUPLE:
            return TupleType(*(self._build(element) for element in ast[k.ELEMENTS]))
        if kind == k.STRUCT:
            return self._build_struct(ast)
        if kind == k.RECORD:
            return RecordType(self._build(ast[k.KEY_TYPE]), self._build(ast[k.VALUE_TYPE]))
        if kind == k.UNION:
            return UnionType(*(self._build(member) for member in ast[k.MEMBERS]))
        if kind == k.DISCRIMINATED_UNION:
            return self._build_discriminated_union(ast)
        if kind == k.OPTIONAL:
            return self._optional(self._build(ast[k.INNER_TYPE]), ast)
        if kind == k.TRANSFORM:
            # The conversion functions are not part of the AST; only the source survives
            return self._build(ast[k.INNER_TYPE])
        if kind == k.LAZY:
            return LazyType(self._build(ast[k.INNER_TYPE]))

        raise UnsupportedSchemaError(f"Unsupported AST kind: {kind!r}")

    def _optional(self, inner: TypeNode, ast: dict[str, Any]) -> OptionalType:
        if k.DEFAULT_VALUE in ast:
            node = OptionalType(inner, ast[k.DEFAULT_VALUE], check_default=False)
            self._optionals.append(node)
            return node
        return OptionalType(inner)

    def _build_struct(self, ast: dict[str, Any]) -> StructType:
        required = set(ast.get(k.REQUIRED, ()))
        fields = {}
        for name, field_ast in ast.get(k.FIELDS, {}).items():
            node = self._build(field_ast)
            if name not in required and not isinstance(node, OptionalType):
                node = OptionalType(node)
            fields[name] = node
        return StructType(fields)

    def _build_discriminated_union(self, ast: dict[str, Any]) -> TypeNode:
        variants = {tag: self._build(variant) for tag, variant in ast[k.VARIANTS].items()}
        try:
            return DiscriminatedUnionType(ast[k.DISCRIMINATOR], variants)
        except SchemaDefinitionError as e:
            logger.warning("Rebuilding discriminated union as a plain union: %s", e)
            return UnionType(*variants.values())


def _constraints(ast: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    constraints = ast.get(k.CONSTRAINTS) or {}
    return {key: constraints[key] for key in keys if key in constraints}


def ast_to_type(ast: dict[str, Any], config: CodecConfig | None = None) -> TypeNode:
    """Reconstruct a TypeNode tree from an AST."""
    return TypeBuilder(config).build(ast)
