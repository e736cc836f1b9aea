"""
Top-level conversions between schemas and JSON Schema documents.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import DEFAULT_CONFIG, CodecConfig
from ..nodes import TypeNode
from ..schema_ast import ast_to_type, type_to_ast, validate_ast
from .emitter import ast_to_json_schema
from .parser import json_schema_to_ast

logger = logging.getLogger(__name__)


def generate(
    schema: Any,
    id: str | None = None,
    title: str | None = None,
    description: str | None = None,
    config: CodecConfig | None = None,
) -> dict[str, Any]:
    """
    Generate a JSON Schema document for a schema.

    Args:
        schema: A TypeNode, or a Schema subclass exposing ``schema_type``
        id: Value for ``$id``; when given, ``$schema`` is emitted as well
        title: Value for ``title``
        description: Value for ``description``
        config: Codec configuration

    Returns:
        JSON Schema document

    Raises:
        UnsupportedSchemaError: If AST validation is enabled and the AST is malformed
    """
    config = config or DEFAULT_CONFIG
    ast = type_to_ast(schema)
    return generate_from_ast(ast, id=id, title=title, description=description, config=config)


def generate_from_ast(
    ast: dict[str, Any],
    id: str | None = None,
    title: str | None = None,
    description: str | None = None,
    config: CodecConfig | None = None,
) -> dict[str, Any]:
    """Like ``generate``, starting from an AST instead of a schema."""
    config = config or DEFAULT_CONFIG
    if config.validate_ast:
        validate_ast(ast, config)

    body = ast_to_json_schema(ast)

    document: dict[str, Any] = {}
    if id is not None:
        document["$schema"] = config.draft_uri
        document["$id"] = id
    if title is not None:
        document["title"] = title
    if description is not None:
        document["description"] = description
    document.update(body)

    logger.debug("Generated JSON Schema with %d top-level keys", len(document))
    return document


def parse(document: dict[str, Any], config: CodecConfig | None = None) -> TypeNode:
    """
    Build a TypeNode from a JSON Schema document.

    Raises:
        UnsupportedSchemaError: If the document uses constructs with no schema counterpart
    """
    ast = json_schema_to_ast(document, config)
    return ast_to_type(ast, config)
