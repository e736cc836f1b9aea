"""
AST layer: a plain-dict description of a TypeNode tree.

- introspection: TypeNode -> AST
- definition: AST_SCHEMA, the AST shape declared as a schema
- reconstruct: AST -> TypeNode
"""

from __future__ import annotations

from .definition import AST_SCHEMA, validate_ast
from .introspection import Introspector, type_to_ast
from .kinds import ALL_KINDS, is_back_reference
from .reconstruct import TypeBuilder, ast_to_type

__all__ = [
    "AST_SCHEMA",
    "ALL_KINDS",
    "Introspector",
    "TypeBuilder",
    "ast_to_type",
    "is_back_reference",
    "type_to_ast",
    "validate_ast",
]
