"""
JSON Schema -> AST.

The inverse of the emitter, for the subset of JSON Schema the emitter
produces plus a few common spellings (draft-04 boolean exclusive bounds,
single-element ``type`` lists). Anything else fails with
UnsupportedSchemaError naming the location in the document.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from ..config import DEFAULT_CONFIG, CodecConfig
from ..errors import UnsupportedSchemaError
from ..schema_ast import kinds as k

logger = logging.getLogger(__name__)


class JsonSchemaParser:
    """Parses a JSON Schema document into an AST."""

    PRIMITIVE_TYPES = {"string", "number", "integer", "boolean", "null"}

    def __init__(self, config: CodecConfig | None = None):
        self.config = config or DEFAULT_CONFIG

    def parse(self, schema: dict[str, Any]) -> dict[str, Any]:
        """
        Parse a JSON Schema document into an AST.

        Args:
            schema: The JSON Schema dictionary

        Returns:
            AST dict for the root schema

        Raises:
            UnsupportedSchemaError: If the document uses a construct with no AST counterpart
        """
        return self._parse_schema_node(schema, "#")

    def _parse_schema_node(self, schema: Any, path: str) -> dict[str, Any]:
        """
        Parse a schema node recursively.

        Args:
            schema: The schema dictionary
            path: Current path in schema (for error messages)

        Returns:
            AST dict
        """
        if not isinstance(schema, dict):
            raise UnsupportedSchemaError(f"Expected a schema object at {path}, got {schema!r}")

        if "oneOf" in schema:
            return self._parse_one_of_node(schema, path)

        if "anyOf" in schema:
            members = [self._parse_schema_node(member, f"{path}/anyOf/{i}") for i, member in enumerate(schema["anyOf"])]
            return {k.TYPE: k.UNION, k.MEMBERS: members}

        if "const" in schema:
            return {k.TYPE: k.LITERAL, k.VALUES: [schema["const"]]}

        if "enum" in schema:
            return {k.TYPE: k.LITERAL, k.VALUES: list(schema["enum"])}

        if "$ref" in schema:
            raise UnsupportedSchemaError(f"$ref is not supported (at {path}: {schema['$ref']})")

        if "type" in schema:
            return self._parse_type_node(schema, schema["type"], path)

        # Object with properties but no type
        if "properties" in schema:
            return self._parse_object_node(schema, path)

        raise UnsupportedSchemaError(f"Unsupported schema at {path}: no type, const, enum, anyOf or oneOf")

    def _parse_type_node(self, schema: dict[str, Any], type_value: Any, path: str) -> dict[str, Any]:
        """Parse a node by its ``type`` keyword."""
        if isinstance(type_value, list):
            return self._parse_type_list(schema, type_value, path)

        if type_value == "string":
            return {k.TYPE: k.STRING, k.CONSTRAINTS: self._string_constraints(schema)}

        if type_value in ("number", "integer"):
            return {k.TYPE: type_value, k.CONSTRAINTS: self._number_constraints(schema)}

        if type_value == "boolean":
            return {k.TYPE: k.BOOLEAN}

        if type_value == "null":
            return {k.TYPE: k.NULL}

        if type_value == "array":
            return self._parse_array_node(schema, path)

        if type_value == "object":
            return self._parse_object_node(schema, path)

        raise UnsupportedSchemaError(f"Unsupported type {type_value!r} at {path}")

    def _parse_type_list(self, schema: dict[str, Any], types: list[Any], path: str) -> dict[str, Any]:
        """Parse ``"type": [...]``: a single type, or one type plus "null"."""
        if len(types) == 1:
            return self._parse_type_node(schema, types[0], path)

        others = [t for t in types if t != "null"]
        if len(types) == 2 and len(others) == 1:
            inner = self._parse_type_node(schema, others[0], path)
            return {k.TYPE: k.UNION, k.MEMBERS: [inner, {k.TYPE: k.NULL}]}

        raise UnsupportedSchemaError(f"Unsupported type {types!r} at {path}")

    def _string_constraints(self, schema: dict[str, Any]) -> dict[str, Any]:
        constraints = {}
        if "minLength" in schema:
            constraints["min"] = schema["minLength"]
        if "maxLength" in schema:
            constraints["max"] = schema["maxLength"]
        if "pattern" in schema:
            constraints["format"] = schema["pattern"]
        return constraints

    def _number_constraints(self, schema: dict[str, Any]) -> dict[str, Any]:
        constraints = {}
        if "minimum" in schema:
            constraints["min"] = schema["minimum"]
        if "maximum" in schema:
            constraints["max"] = schema["maximum"]

        # Draft-04 spelling: boolean flag turning minimum/maximum exclusive
        exclusive_minimum = schema.get("exclusiveMinimum")
        if isinstance(exclusive_minimum, bool):
            if exclusive_minimum and "min" in constraints:
                constraints["greater_than"] = constraints.pop("min")
        elif exclusive_minimum is not None:
            constraints["greater_than"] = exclusive_minimum

        exclusive_maximum = schema.get("exclusiveMaximum")
        if isinstance(exclusive_maximum, bool):
            if exclusive_maximum and "max" in constraints:
                constraints["less_than"] = constraints.pop("max")
        elif exclusive_maximum is not None:
            constraints["less_than"] = exclusive_maximum

        return constraints

    def _parse_array_node(self, schema: dict[str, Any], path: str) -> dict[str, Any]:
        """Parse an array node: tuple when ``prefixItems`` is present."""
        if "prefixItems" in schema:
            elements = [
                self._parse_schema_node(element, f"{path}/prefixItems/{i}") for i, element in enumerate(schema["prefixItems"])
            ]
            return {k.TYPE: k.TUPLE, k.ELEMENTS: elements}

        if "items" in schema:
            item_type = self._parse_schema_node(schema["items"], f"{path}/items")
        else:
            item_type = self._default_item_type(path)

        constraints = {}
        if "minItems" in schema:
            constraints["min"] = schema["minItems"]
        if "maxItems" in schema:
            constraints["max"] = schema["maxItems"]
        if schema.get("uniqueItems"):
            constraints["unique"] = True

        return {k.TYPE: k.ARRAY, k.ITEM_TYPE: item_type, k.CONSTRAINTS: constraints}

    def _default_item_type(self, path: str) -> dict[str, Any]:
        kind = self.config.default_item_type
        if kind not in self.PRIMITIVE_TYPES:
            raise UnsupportedSchemaError(f"Invalid default item type {kind!r} (needed at {path})")
        logger.debug("No items at %s, defaulting to %s", path, kind)
        return self._parse_type_node({}, kind, path)

    def _parse_object_node(self, schema: dict[str, Any], path: str) -> dict[str, Any]:
        """Parse an object node: record for ``additionalProperties`` alone, struct otherwise."""
        additional = schema.get("additionalProperties")
        if "properties" not in schema and additional is not None and additional is not False:
            if additional is True:
                value_type = {k.TYPE: k.STRING, k.CONSTRAINTS: {}}
            else:
                value_type = self._parse_schema_node(additional, f"{path}/additionalProperties")
            return {
                k.TYPE: k.RECORD,
                k.KEY_TYPE: {k.TYPE: k.STRING, k.CONSTRAINTS: {}},
                k.VALUE_TYPE: value_type,
            }

        required = list(schema.get("required", []))
        fields = {}
        for name, prop_schema in (schema.get("properties") or {}).items():
            prop_path = f"{path}/properties/{name}"
            field = self._parse_schema_node(prop_schema, prop_path)
            if name not in required and isinstance(prop_schema, dict) and "default" in prop_schema:
                field = {
                    k.TYPE: k.OPTIONAL,
                    k.INNER_TYPE: field,
                    k.DEFAULT_VALUE: copy.deepcopy(prop_schema["default"]),
                }
            fields[name] = field

        return {k.TYPE: k.STRUCT, k.FIELDS: fields, k.REQUIRED: required}

    def _parse_one_of_node(self, schema: dict[str, Any], path: str) -> dict[str, Any]:
        """
        Parse ``oneOf`` as a discriminated union.

        Each alternative is tagged by its first const-valued property; the
        discriminator is that property's name, which all tagged alternatives
        must share. Untagged alternatives are labelled ``variant_<index>``.
        """
        discriminator = None
        variants: dict[str, Any] = {}

        for i, alternative in enumerate(schema["oneOf"]):
            alt_path = f"{path}/oneOf/{i}"
            variant = self._parse_schema_node(alternative, alt_path)
            tag_field = _first_const_property(alternative)

            if tag_field is None:
                tag = f"variant_{i}"
            else:
                name, value = tag_field
                if discriminator is None:
                    discriminator = name
                elif name != discriminator:
                    raise UnsupportedSchemaError(
                        f"Alternatives of oneOf at {path} disagree on the discriminator: '{discriminator}' and '{name}'"
                    )
                tag = str(value)

            if tag in variants:
                raise UnsupportedSchemaError(f"Duplicate discriminator value '{tag}' in oneOf at {path}")
            variants[tag] = variant

        if discriminator is None:
            discriminator = self.config.default_discriminator
            logger.debug("No const property in oneOf at %s, using discriminator '%s'", path, discriminator)

        return {k.TYPE: k.DISCRIMINATED_UNION, k.DISCRIMINATOR: discriminator, k.VARIANTS: variants}


def _first_const_property(schema: Any) -> tuple[str, Any] | None:
    if not isinstance(schema, dict):
        return None
    for name, prop_schema in (schema.get("properties") or {}).items():
        if isinstance(prop_schema, dict) and "const" in prop_schema:
            return name, prop_schema["const"]
    return None


def json_schema_to_ast(document: dict[str, Any], config: CodecConfig | None = None) -> dict[str, Any]:
    """Convert a JSON Schema document to an AST."""
    return JsonSchemaParser(config).parse(document)
