"""
Leaf type nodes: string, number, integer, boolean, null, symbol and literal.

Each leaf checks the value's kind first and then its constraints in a fixed
order; the first failing check wins.
"""

from __future__ import annotations

import enum
import math
import numbers
import re
import sys
from decimal import Decimal
from typing import Any

from ..errors import ConstraintViolationError, SchemaDefinitionError, TypeMismatchError
from ..result import Err, Ok, Result
from .base import DecodeContext, TypeNode, type_name


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (numbers.Real, Decimal))


def _is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


BOUNDS = ("greater_than", "less_than", "min", "max")


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Integral):
        return True
    if isinstance(value, float):
        return value.is_integer()
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    return False


class StringType(TypeNode):
    """String with optional ``min``/``max`` length and ``format`` pattern."""

    kind = "string"

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        if not isinstance(value, str):
            return Err(TypeMismatchError(f"Expected string, got {type_name(value)}"))

        minimum = self.constraints.get("min")
        if minimum is not None and len(value) < minimum:
            return Err(ConstraintViolationError(f"String length must be at least {minimum}"))

        maximum = self.constraints.get("max")
        if maximum is not None and len(value) > maximum:
            return Err(ConstraintViolationError(f"String length must be at most {maximum}"))

        pattern = self.constraints.get("format")
        if pattern is not None and not re.search(pattern, value):
            return Err(ConstraintViolationError(f"String must match format {self.pattern_source!r}"))

        return Ok(value)

    @property
    def pattern_source(self) -> str | None:
        """The ``format`` constraint as a regular expression source string."""
        pattern = self.constraints.get("format")
        if isinstance(pattern, re.Pattern):
            return pattern.pattern
        return pattern


class NumberType(TypeNode):
    """Any real number (bool excluded)."""

    kind = "number"
    expected = "number"

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        if not self._accepts(value):
            return Err(TypeMismatchError(f"Expected {self.expected}, got {type_name(value)}"))
        return self._check_constraints(value)

    def _accepts(self, value: Any) -> bool:
        return _is_number(value)

    def _check_constraints(self, value: Any) -> Result:
        # NaN compares false against every bound
        if _is_nan(value) and any(self.constraints.get(name) is not None for name in BOUNDS):
            return Err(ConstraintViolationError("Number must not be NaN"))

        greater_than = self.constraints.get("greater_than")
        if greater_than is not None and value <= greater_than:
            return Err(ConstraintViolationError(f"Number must be greater than {greater_than}"))

        less_than = self.constraints.get("less_than")
        if less_than is not None and value >= less_than:
            return Err(ConstraintViolationError(f"Number must be less than {less_than}"))

        minimum = self.constraints.get("min")
        if minimum is not None and value < minimum:
            return Err(ConstraintViolationError(f"Number must be at least {minimum}"))

        maximum = self.constraints.get("max")
        if maximum is not None and value > maximum:
            return Err(ConstraintViolationError(f"Number must be at most {maximum}"))

        return Ok(value)


class IntegerType(NumberType):
    """Integral number; floats are accepted only when they hold a whole value."""

    kind = "integer"
    expected = "integer"

    def _accepts(self, value: Any) -> bool:
        return _is_integral(value)


class BooleanType(TypeNode):
    kind = "boolean"

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        if not isinstance(value, bool):
            return Err(TypeMismatchError(f"Expected boolean, got {type_name(value)}"))
        return Ok(value)


class NullType(TypeNode):
    kind = "null"

    @property
    def accepts_null(self) -> bool:
        return True

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        if value is not None:
            return Err(TypeMismatchError(f"Expected null, got {type_name(value)}"))
        return Ok(None)


class SymbolType(TypeNode):
    """Symbol: an Enum member or an identifier-shaped string.

    Decoding yields the interned symbol name; encoding yields a plain string.
    """

    kind = "symbol"

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        if isinstance(value, enum.Enum):
            name = value.value if isinstance(value.value, str) else value.name
            return Ok(sys.intern(name))
        if isinstance(value, str) and value.isidentifier():
            return Ok(sys.intern(value))
        return Err(TypeMismatchError(f"Expected symbol, got {type_name(value)}"))

    def _encode(self, value: Any) -> Any:
        if isinstance(value, enum.Enum):
            return value.value if isinstance(value.value, str) else value.name
        return str(value)


def literal_equals(left: Any, right: Any) -> bool:
    """Value equality that never treats booleans as the integers 0 and 1."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    return left == right


class LiteralType(TypeNode):
    """One of an ordered list of permitted scalar values."""

    kind = "literal"

    def __init__(self, *values: Any):
        super().__init__()
        if not values:
            raise SchemaDefinitionError("Literal requires at least one value")
        for value in values:
            if value is not None and not isinstance(value, (str, int, float, bool)):
                raise SchemaDefinitionError(f"Literal values must be strings, numbers, booleans or null, got {type_name(value)}")
        self.values = tuple(values)

    @property
    def accepts_null(self) -> bool:
        return any(value is None for value in self.values)

    def includes(self, value: Any) -> bool:
        return any(literal_equals(value, permitted) for permitted in self.values)

    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        if self.includes(value):
            return Ok(value)
        return Err(ConstraintViolationError(f"Expected one of {list(self.values)!r}, got {value!r}"))

    def __repr__(self) -> str:
        return f"LiteralType({', '.join(repr(v) for v in self.values)})"
