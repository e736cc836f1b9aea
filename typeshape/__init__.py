"""typeshape

Runtime schemas for untrusted data. Declare a schema once as a tree of type
nodes, then decode, validate and encode values against it, inspect it as a
plain-dict AST, and convert it to and from JSON Schema (draft 2020-12).
"""

__version__ = "1.0.0"

from .builder import (
    Schema,
    array,
    boolean,
    discriminated_union,
    integer,
    lazy,
    literal,
    null,
    nullable,
    number,
    optional,
    record,
    string,
    struct,
    symbol,
    transform,
    tuple_,
    union,
)
from .config import CodecConfig
from .errors import (
    AggregateUnionError,
    ConstraintViolationError,
    InvalidDefaultError,
    MissingDiscriminatorError,
    RecursionLimitError,
    RequiredValueError,
    SchemaDefinitionError,
    SchemaError,
    TypeMismatchError,
    UnexpectedKeysError,
    UnknownDiscriminatorError,
    UnsupportedSchemaError,
    ValidationError,
)
from .json_schema import ast_to_json_schema, generate, json_schema_to_ast, parse
from .nodes import ExtraKeys, TypeNode
from .result import Err, Ok
from .schema_ast import AST_SCHEMA, ast_to_type, type_to_ast, validate_ast

__all__ = [
    # Declaration
    "Schema",
    "TypeNode",
    "ExtraKeys",
    "string",
    "number",
    "integer",
    "boolean",
    "null",
    "symbol",
    "literal",
    "array",
    "tuple_",
    "struct",
    "record",
    "union",
    "discriminated_union",
    "optional",
    "nullable",
    "transform",
    "lazy",
    # Results and configuration
    "Ok",
    "Err",
    "CodecConfig",
    # AST and JSON Schema
    "AST_SCHEMA",
    "type_to_ast",
    "ast_to_type",
    "validate_ast",
    "ast_to_json_schema",
    "json_schema_to_ast",
    "generate",
    "parse",
    # Errors
    "SchemaError",
    "ValidationError",
    "TypeMismatchError",
    "ConstraintViolationError",
    "RequiredValueError",
    "UnknownDiscriminatorError",
    "MissingDiscriminatorError",
    "UnexpectedKeysError",
    "AggregateUnionError",
    "RecursionLimitError",
    "SchemaDefinitionError",
    "InvalidDefaultError",
    "UnsupportedSchemaError",
]
