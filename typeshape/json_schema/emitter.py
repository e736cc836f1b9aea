"""
AST -> JSON Schema (draft 2020-12).

The mapping is structural and total: every AST kind has exactly one
encoding. Discriminator metadata, lazy references and transforms have no
JSON Schema counterpart and are flattened.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from ..errors import UnsupportedSchemaError
from ..schema_ast import kinds as k

logger = logging.getLogger(__name__)

# JSON type emitted for a back-reference stub, by the kind it points to
BACK_REFERENCE_TYPES = {
    k.ARRAY: "array",
    k.TUPLE: "array",
    k.STRUCT: "object",
    k.RECORD: "object",
}

# AST constraint name -> JSON Schema keyword
STRING_KEYWORDS = {"min": "minLength", "max": "maxLength", "format": "pattern"}
NUMBER_KEYWORDS = {
    "min": "minimum",
    "max": "maximum",
    "greater_than": "exclusiveMinimum",
    "less_than": "exclusiveMaximum",
}
ARRAY_KEYWORDS = {"min": "minItems", "max": "maxItems"}


class JsonSchemaEmitter:
    """Converts AST dicts to JSON Schema dicts."""

    def emit(self, ast: dict[str, Any]) -> dict[str, Any]:
        """
        Convert one AST node to a JSON Schema node.

        Args:
            ast: AST dict

        Returns:
            JSON Schema dict

        Raises:
            UnsupportedSchemaError: If the AST carries an unknown kind
        """
        kind = ast.get(k.TYPE)
        handler = getattr(self, f"_emit_{kind}", None) if kind in k.ALL_KINDS else None
        if handler is None:
            raise UnsupportedSchemaError(f"Unsupported AST kind: {kind!r}")
        return handler(ast)

    def _emit_string(self, ast: dict[str, Any]) -> dict[str, Any]:
        return {"type": "string", **_keywords(ast, STRING_KEYWORDS)}

    def _emit_number(self, ast: dict[str, Any]) -> dict[str, Any]:
        return {"type": "number", **_keywords(ast, NUMBER_KEYWORDS)}

    def _emit_integer(self, ast: dict[str, Any]) -> dict[str, Any]:
        return {"type": "integer", **_keywords(ast, NUMBER_KEYWORDS)}

    def _emit_boolean(self, ast: dict[str, Any]) -> dict[str, Any]:
        return {"type": "boolean"}

    def _emit_null(self, ast: dict[str, Any]) -> dict[str, Any]:
        return {"type": "null"}

    def _emit_symbol(self, ast: dict[str, Any]) -> dict[str, Any]:
        # No symbol type in JSON
        return {"type": "string"}

    def _emit_literal(self, ast: dict[str, Any]) -> dict[str, Any]:
        values = list(ast[k.VALUES])
        if len(values) == 1:
            return {"const": values[0]}
        return {"enum": values}

    def _emit_array(self, ast: dict[str, Any]) -> dict[str, Any]:
        schema = {"type": "array", "items": self.emit(ast[k.ITEM_TYPE])}
        schema.update(_keywords(ast, ARRAY_KEYWORDS))

        constraints = ast.get(k.CONSTRAINTS) or {}
        if "length" in constraints:
            schema.setdefault("minItems", constraints["length"])
            schema.setdefault("maxItems", constraints["length"])
        if constraints.get("unique"):
            schema["uniqueItems"] = True
        return schema

    def _emit_tuple(self, ast: dict[str, Any]) -> dict[str, Any]:
        elements = [self.emit(element) for element in ast[k.ELEMENTS]]
        return {
            "type": "array",
            "prefixItems": elements,
            "minItems": len(elements),
            "maxItems": len(elements),
        }

    def _emit_struct(self, ast: dict[str, Any]) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "object"}
        fields = ast.get(k.FIELDS) or {}
        if fields:
            schema["properties"] = {name: self.emit(field) for name, field in fields.items()}
        required = list(ast.get(k.REQUIRED) or [])
        if required:
            schema["required"] = required
        schema["additionalProperties"] = False
        return schema

    def _emit_record(self, ast: dict[str, Any]) -> dict[str, Any]:
        return {"type": "object", "additionalProperties": self.emit(ast[k.VALUE_TYPE])}

    def _emit_union(self, ast: dict[str, Any]) -> dict[str, Any]:
        members = [self.emit(member) for member in ast[k.MEMBERS]]
        nullable = _collapse_nullable(members)
        if nullable is not None:
            return nullable
        return {"anyOf": members}

    def _emit_discriminated_union(self, ast: dict[str, Any]) -> dict[str, Any]:
        return {"oneOf": [self.emit(variant) for variant in ast[k.VARIANTS].values()]}

    def _emit_optional(self, ast: dict[str, Any]) -> dict[str, Any]:
        schema = self.emit(ast[k.INNER_TYPE])
        if k.DEFAULT_VALUE in ast:
            schema["default"] = copy.deepcopy(ast[k.DEFAULT_VALUE])
        return schema

    def _emit_transform(self, ast: dict[str, Any]) -> dict[str, Any]:
        return self.emit(ast[k.INNER_TYPE])

    def _emit_lazy(self, ast: dict[str, Any]) -> dict[str, Any]:
        if k.is_back_reference(ast):
            kind = ast[k.INNER_TYPE][k.TYPE]
            logger.debug("Emitting back-reference to %s as a bare type", kind)
            json_type = BACK_REFERENCE_TYPES.get(kind)
            return {"type": json_type} if json_type else {}
        return self.emit(ast[k.INNER_TYPE])


def _keywords(ast: dict[str, Any], mapping: dict[str, str]) -> dict[str, Any]:
    constraints = ast.get(k.CONSTRAINTS) or {}
    return {keyword: constraints[name] for name, keyword in mapping.items() if name in constraints}


def _collapse_nullable(members: list[dict[str, Any]]) -> dict[str, Any] | None:
    """``[T, {"type": "null"}]`` -> T with ``type`` widened to ``[T, "null"]``."""
    if len(members) != 2:
        return None
    null = {"type": "null"}
    if members[1] == null:
        other = members[0]
    elif members[0] == null:
        other = members[1]
    else:
        return None
    if not isinstance(other.get("type"), str) or other["type"] == "null":
        return None
    return {**other, "type": [other["type"], "null"]}


def ast_to_json_schema(ast: dict[str, Any]) -> dict[str, Any]:
    """Convert an AST to a JSON Schema document body."""
    return JsonSchemaEmitter().emit(ast)
