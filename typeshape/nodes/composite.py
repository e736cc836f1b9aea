"""
Composite type nodes: nodes that hold other nodes.

- ArrayType: a single item type (homogeneous, variable length)
- TupleType: one type per position (fixed length)
- StructType: named fields, each required or optional
- RecordType: key type and value type (dynamic keys)
- UnionType: ordered alternatives
- DiscriminatedUnionType: alternatives selected by a literal field
- OptionalType: marks a struct field as optional, with an optional default
- TransformType: a source type plus decode/encode functions
- LazyType: deferred reference, the only way to build recursive schemas

Errors raised by children are wrapped with the index, field name or key they
came from, then returned immediately: siblings are not visited once one fails.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable, Hashable, Mapping
from enum import Enum
from typing import Any

from ..config import CodecConfig
from ..errors import (
    AggregateUnionError,
    ConstraintViolationError,
    InvalidDefaultError,
    MissingDiscriminatorError,
    RequiredValueError,
    SchemaDefinitionError,
    TypeMismatchError,
    UnexpectedKeysError,
    UnknownDiscriminatorError,
)
from ..result import Err, Ok, Result
from .base import DecodeContext, TypeNode, key_name, type_name
from .primitive import LiteralType, literal_equals

logger = logging.getLogger(__name__)


class _Missing:
    """Sentinel for "no default value", so that None and False stay usable as defaults."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def as_node(value: Any) -> TypeNode:
    """Coerce a child declaration into a TypeNode.

    Accepts a TypeNode or a declared schema class exposing ``schema_type``.
    """
    if isinstance(value, TypeNode):
        return value
    schema_type = getattr(value, "schema_type", None)
    if isinstance(schema_type, TypeNode):
        return schema_type
    raise SchemaDefinitionError(f"Expected a type node, got {value!r}")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _all_unique(items: list | tuple) -> bool:
    try:
        return len({_tag_key(item) for item in items}) == len(items)
    except TypeError:
        # Unhashable items (dicts, lists): compare pairwise
        seen: list[Any] = []
        for item in items:
            if any(literal_equals(item, other) for other in seen):
                return False
            seen.append(item)
        return True


def _tag_key(tag: Any) -> tuple[bool, Any]:
    # True and 1 hash alike; keep booleans apart from integers
    return (isinstance(tag, bool), tag)


def _same_container(original: list | tuple, items: list) -> list | tuple:
    return items if isinstance(original, list) else tuple(items)


class ArrayType(TypeNode):
    """Homogeneous sequence with ``min``/``max``/``length``/``unique`` constraints."""

    kind = "array"

    def __init__(self, item_type: Any, **constraints: Any):
        super().__init__(**constraints)
        self.item_type = as_node(item_type)

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        if not _is_sequence(value):
            return Err(TypeMismatchError(f"Expected array, got {type_name(value)}"))

        minimum = self.constraints.get("min")
        if minimum is not None and len(value) < minimum:
            return Err(ConstraintViolationError(f"Array length must be at least {minimum}"))

        maximum = self.constraints.get("max")
        if maximum is not None and len(value) > maximum:
            return Err(ConstraintViolationError(f"Array length must be at most {maximum}"))

        length = self.constraints.get("length")
        if length is not None and len(value) != length:
            return Err(ConstraintViolationError(f"Array length must be exactly {length}"))

        if self.constraints.get("unique") and not _all_unique(value):
            return Err(ConstraintViolationError("Array items must be unique"))

        items = []
        for index, item in enumerate(value):
            result = self.item_type.run(item, ctx.deeper())
            if not result.ok:
                return Err(result.error.wrap(f"Array item at index {index}", index))
            items.append(result.value)
        return Ok(_same_container(value, items))

    def _encode(self, value: Any) -> Any:
        if not _is_sequence(value):
            return value
        return _same_container(value, [self.item_type.encode(item) for item in value])

    def owns(self, value: Any) -> bool:
        return _is_sequence(value) and all(self.item_type.owns(item) for item in value)

    def __repr__(self) -> str:
        return f"ArrayType({self.item_type!r})"


class TupleType(TypeNode):
    """Fixed-length sequence with one type per position."""

    kind = "tuple"

    def __init__(self, *elements: Any):
        super().__init__()
        self.elements = tuple(as_node(element) for element in elements)

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        if not _is_sequence(value):
            return Err(TypeMismatchError(f"Expected array, got {type_name(value)}"))

        if len(value) != len(self.elements):
            return Err(ConstraintViolationError(f"Expected exactly {len(self.elements)} elements, got {len(value)}"))

        items = []
        for index, (element_type, item) in enumerate(zip(self.elements, value)):
            result = element_type.run(item, ctx.deeper())
            if not result.ok:
                return Err(result.error.wrap(f"Tuple element at index {index}", index))
            items.append(result.value)
        return Ok(_same_container(value, items))

    def _encode(self, value: Any) -> Any:
        if not _is_sequence(value):
            return value
        items = [element_type.encode(item) for element_type, item in zip(self.elements, value)]
        return _same_container(value, items)

    def owns(self, value: Any) -> bool:
        if not _is_sequence(value) or len(value) != len(self.elements):
            return False
        return all(element_type.owns(item) for element_type, item in zip(self.elements, value))

    def __repr__(self) -> str:
        return f"TupleType({', '.join(repr(e) for e in self.elements)})"


class ExtraKeys(Enum):
    """What a struct does with input keys it does not declare."""

    REJECT = "reject"  # Fail with UnexpectedKeysError
    ALLOW = "allow"  # Drop them from the result
    INCLUDE = "include"  # Copy them into the result verbatim


class OptionalType(TypeNode):
    """Marks a struct field as optional.

    The containing StructType consults this marker: an absent optional field
    is filled with the default when one is declared, and omitted otherwise.
    Reached directly, null passes through and any other value is delegated to
    the wrapped type.

    Raises:
        InvalidDefaultError: If the default does not decode against the wrapped type
    """

    kind = "optional"

    def __init__(self, inner_type: Any, default: Any = MISSING, check_default: bool = True):
        super().__init__()
        self.inner_type = as_node(inner_type)
        self.default_value = default
        self._decoded_default: Any = MISSING
        if check_default:
            self.check_default()

    def check_default(self, config: CodecConfig | None = None) -> None:
        """Decode the default against the wrapped type.

        Called from the constructor unless ``check_default=False``, which
        lets a builder postpone it until lazy references can resolve.
        """
        if not self.has_default:
            return
        result = self.try_decode(self.default_value, config)
        if not result.ok:
            raise InvalidDefaultError(f"Invalid default value: {result.error.message}")
        self._decoded_default = result.value

    @property
    def has_default(self) -> bool:
        return self.default_value is not MISSING

    @property
    def accepts_null(self) -> bool:
        return True

    def default_for_decode(self) -> Any:
        """A fresh copy of the decoded default, so mutable defaults are never shared."""
        return copy.deepcopy(self._decoded_default)

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        if value is None:
            return Ok(None)
        return self.inner_type.run(value, ctx)

    def _encode(self, value: Any) -> Any:
        return self.inner_type.encode(value)

    def owns(self, value: Any) -> bool:
        return value is None or self.inner_type.owns(value)

    def __repr__(self) -> str:
        if self.has_default:
            return f"OptionalType({self.inner_type!r}, default={self.default_value!r})"
        return f"OptionalType({self.inner_type!r})"


class StructType(TypeNode):
    """Mapping with declared fields.

    Attributes:
        fields: Field name -> node; fields wrapped in OptionalType are optional
        extra_keys: Policy for undeclared input keys
    """

    kind = "struct"

    def __init__(self, fields: Mapping[str, Any], extra_keys: ExtraKeys | str = ExtraKeys.REJECT, **constraints: Any):
        super().__init__(**constraints)
        self.fields = {key_name(name): as_node(node) for name, node in fields.items()}
        self.extra_keys = ExtraKeys(extra_keys)

    @property
    def required(self) -> tuple[str, ...]:
        """Names of the fields that are not wrapped in OptionalType."""
        return tuple(name for name, node in self.fields.items() if not isinstance(node, OptionalType))

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        if not isinstance(value, Mapping):
            return Err(TypeMismatchError(f"Expected mapping, got {type_name(value)}"))

        keys = {key_name(key): key for key in value}

        if self.extra_keys is ExtraKeys.REJECT:
            extra = [name for name in keys if name not in self.fields]
            if extra:
                return Err(UnexpectedKeysError(f"Unexpected keys: {extra!r}", keys=tuple(extra)))

        decoded = {}
        for name, node in self.fields.items():
            if name not in keys:
                if not isinstance(node, OptionalType):
                    return Err(RequiredValueError(f"Field '{name}' is required", (name,)))
                if node.has_default:
                    decoded[name] = node.default_for_decode()
                continue

            result = node.run(value[keys[name]], ctx.deeper())
            if not result.ok:
                return Err(result.error.wrap(f"Field '{name}'", name))
            decoded[name] = result.value

        if self.extra_keys is ExtraKeys.INCLUDE:
            for name, key in keys.items():
                if name not in self.fields:
                    decoded[name] = value[key]

        return Ok(decoded)

    def _encode(self, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return value

        keys = {key_name(key): key for key in value}
        encoded = {}
        for name, node in self.fields.items():
            if name in keys:
                encoded[name] = node.encode(value[keys[name]])

        if self.extra_keys is ExtraKeys.INCLUDE:
            for name, key in keys.items():
                if name not in self.fields:
                    encoded[name] = value[key]
        return encoded

    def owns(self, value: Any) -> bool:
        if not isinstance(value, Mapping):
            return False

        keys = {key_name(key): key for key in value}
        if self.extra_keys is ExtraKeys.REJECT and any(name not in self.fields for name in keys):
            return False

        for name, node in self.fields.items():
            if name not in keys:
                if not isinstance(node, OptionalType):
                    return False
            elif not node.owns(value[keys[name]]):
                return False
        return True

    def __repr__(self) -> str:
        fields = ", ".join(f"{name!r}: {node!r}" for name, node in self.fields.items())
        return f"StructType({{{fields}}})"


class RecordType(TypeNode):
    """Open-ended mapping; every key and value is checked against one type."""

    kind = "record"

    def __init__(self, key_type: Any, value_type: Any):
        super().__init__()
        self.key_type = as_node(key_type)
        self.value_type = as_node(value_type)

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        if not isinstance(value, Mapping):
            return Err(TypeMismatchError(f"Expected mapping, got {type_name(value)}"))

        decoded = {}
        for key, item in value.items():
            key_result = self.key_type.run(key_name(key), ctx.deeper())
            if not key_result.ok:
                return Err(key_result.error.wrap(f"Invalid key {key!r}", key))

            value_result = self.value_type.run(item, ctx.deeper())
            if not value_result.ok:
                return Err(value_result.error.wrap(f"Invalid value for key {key!r}", key))

            decoded[key_result.value] = value_result.value
        return Ok(decoded)

    def _encode(self, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return value
        return {self.key_type.encode(key): self.value_type.encode(item) for key, item in value.items()}

    def owns(self, value: Any) -> bool:
        if not isinstance(value, Mapping):
            return False
        return all(self.key_type.owns(key_name(key)) and self.value_type.owns(item) for key, item in value.items())

    def __repr__(self) -> str:
        return f"RecordType({self.key_type!r}, {self.value_type!r})"


class UnionType(TypeNode):
    """Ordered alternatives; the first member that decodes wins."""

    kind = "union"

    def __init__(self, *members: Any):
        super().__init__()
        if not members:
            raise SchemaDefinitionError("Union requires at least one member")
        self.members = tuple(as_node(member) for member in members)

    @property
    def accepts_null(self) -> bool:
        return any(member.accepts_null for member in self.members)

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        errors = []
        for member in self.members:
            result = member.run(value, ctx.deeper())
            if result.ok:
                return result
            errors.append(result.error)

        details = "\n".join(f"  - {error.message}" for error in errors)
        return Err(AggregateUnionError(f"Union decoding failed:\n{details}", errors=errors))

    def _encode(self, value: Any) -> Any:
        for member in self.members:
            if member.owns(value):
                return member.encode(value)
        return value

    def owns(self, value: Any) -> bool:
        return any(member.owns(value) for member in self.members)

    def __repr__(self) -> str:
        return f"UnionType({', '.join(repr(m) for m in self.members)})"


class DiscriminatedUnionType(TypeNode):
    """Tagged union: a literal discriminator field selects the variant.

    Every variant must be a StructType whose discriminator field is a
    LiteralType holding exactly the tag the variant is registered under.

    Raises:
        SchemaDefinitionError: If a variant breaks that rule
    """

    kind = "discriminated_union"

    def __init__(self, discriminator: Any, variants: Mapping[Any, Any]):
        super().__init__()
        self.discriminator = key_name(discriminator)
        if not variants:
            raise SchemaDefinitionError("Discriminated union requires at least one variant")
        self.variants = {key_name(tag): as_node(variant) for tag, variant in variants.items()}
        for tag, variant in self.variants.items():
            self._check_variant(tag, variant)
        self._index = {_tag_key(tag): variant for tag, variant in self.variants.items()}

    def _check_variant(self, tag: Any, variant: TypeNode) -> None:
        if not isinstance(variant, StructType):
            raise SchemaDefinitionError(f"Variant '{tag}' must be a struct type")

        field = variant.fields.get(self.discriminator)
        if field is None:
            raise SchemaDefinitionError(f"Variant '{tag}' must include discriminator field '{self.discriminator}'")

        if not isinstance(field, LiteralType):
            raise SchemaDefinitionError(f"Discriminator field '{self.discriminator}' in variant '{tag}' must be a literal type")

        if len(field.values) != 1 or not literal_equals(field.values[0], tag):
            raise SchemaDefinitionError(f"Discriminator field '{self.discriminator}' in variant '{tag}' must include literal value '{tag}' only")

    def variant_for(self, tag: Any) -> TypeNode | None:
        tag = key_name(tag)
        if not isinstance(tag, Hashable):
            return None
        return self._index.get(_tag_key(tag))

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        if not isinstance(value, Mapping):
            return Err(TypeMismatchError(f"Expected mapping, got {type_name(value)}"))

        keys = {key_name(key): key for key in value}
        if self.discriminator not in keys:
            return Err(MissingDiscriminatorError(f"Missing discriminator field '{self.discriminator}'"))

        tag = value[keys[self.discriminator]]
        variant = self.variant_for(tag)
        if variant is None:
            expected = ", ".join(str(known) for known in self.variants)
            return Err(
                UnknownDiscriminatorError(
                    f"Unknown discriminator value {key_name(tag)!r}, expected one of: {expected}",
                    value=tag,
                    expected=tuple(self.variants),
                )
            )
        return variant.run(value, ctx.deeper())

    def _encode(self, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return value
        keys = {key_name(key): key for key in value}
        if self.discriminator not in keys:
            return value
        variant = self.variant_for(value[keys[self.discriminator]])
        return variant.encode(value) if variant is not None else value

    def owns(self, value: Any) -> bool:
        if not isinstance(value, Mapping):
            return False
        keys = {key_name(key): key for key in value}
        if self.discriminator not in keys:
            return False
        variant = self.variant_for(value[keys[self.discriminator]])
        return variant is not None and variant.owns(value)

    def __repr__(self) -> str:
        return f"DiscriminatedUnionType({self.discriminator!r}, {list(self.variants)!r})"


class TransformType(TypeNode):
    """Source type plus a pair of conversion functions.

    Decoding runs the source type and then ``decode``; encoding runs
    ``encode`` and then the source type's encoder. Exceptions raised by the
    functions are not caught.

    Attributes:
        source: Node describing the external representation
        target: Identity of the in-memory representation; when it is a class,
            union encoding dispatches on ``isinstance``, otherwise the
            transform claims every value
    """

    kind = "transform"

    def __init__(self, source: Any, target: Any, decode: Callable[[Any], Any], encode: Callable[[Any], Any]):
        super().__init__()
        self.source = as_node(source)
        self.target = target
        self.decode_fn = decode
        self.encode_fn = encode

    @property
    def accepts_null(self) -> bool:
        return self.source.accepts_null

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        result = self.source.run(value, ctx)
        if not result.ok:
            return result
        return Ok(self.decode_fn(result.value))

    def _encode(self, value: Any) -> Any:
        return self.source.encode(self.encode_fn(value))

    def owns(self, value: Any) -> bool:
        # Without a target class any value may be a decoded target
        if isinstance(self.target, type):
            return isinstance(value, self.target)
        return True

    def __repr__(self) -> str:
        target = getattr(self.target, "__name__", self.target)
        return f"TransformType({self.source!r} -> {target})"


class LazyType(TypeNode):
    """Deferred reference resolved once, on first use.

    The target is a TypeNode, a zero-argument callable returning one, or a
    declared schema class exposing ``schema_type``. Resolution is guarded by a
    per-node lock, so concurrent first uses resolve exactly once and every
    caller observes the same node.
    """

    kind = "lazy"

    def __init__(self, target: Any):
        super().__init__()
        self.target = target
        self._resolved: TypeNode | None = None
        self._lock = threading.Lock()

    @property
    def is_resolved(self) -> bool:
        return self._resolved is not None

    def resolve(self) -> TypeNode:
        resolved = self._resolved
        if resolved is not None:
            return resolved
        with self._lock:
            if self._resolved is None:
                self._resolved = self._resolve_target()
                logger.debug("Resolved lazy reference %r to %r", self.target, type(self._resolved).__name__)
            return self._resolved

    def _resolve_target(self) -> TypeNode:
        target = self.target
        if isinstance(target, TypeNode):
            return target
        schema_type = getattr(target, "schema_type", None)
        if isinstance(schema_type, TypeNode):
            return schema_type
        if callable(target) and not isinstance(target, type):
            return as_node(target())
        raise SchemaDefinitionError(f"Cannot resolve lazy reference to {target!r}")

    @property
    def accepts_null(self) -> bool:
        return self.resolve().accepts_null

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        return self.resolve().run(value, ctx.deeper())

    def _encode(self, value: Any) -> Any:
        return self.resolve().encode(value)

    def owns(self, value: Any) -> bool:
        return self.resolve().owns(value)

    def __repr__(self) -> str:
        if self._resolved is None:
            return f"LazyType({self.target!r})"
        return f"LazyType(<resolved {type(self._resolved).__name__}>)"
