"""
JSON Schema (draft 2020-12) codec for the AST.

- emitter: AST -> JSON Schema (total)
- parser: JSON Schema -> AST (partial)
- generator: schema-level entry points
"""

from __future__ import annotations

from .emitter import JsonSchemaEmitter, ast_to_json_schema
from .generator import generate, generate_from_ast, parse
from .parser import JsonSchemaParser, json_schema_to_ast

__all__ = [
    "JsonSchemaEmitter",
    "JsonSchemaParser",
    "ast_to_json_schema",
    "generate",
    "generate_from_ast",
    "json_schema_to_ast",
    "parse",
]
