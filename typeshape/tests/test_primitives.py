import enum
import json
import math
import re
from decimal import Decimal
from pathlib import Path

import pytest

from typeshape import builder, errors
from typeshape.builder import literal, number, string, symbol
from typeshape.errors import ConstraintViolationError, SchemaDefinitionError, TypeMismatchError


def load_test_data():
    """Load primitive decode cases from JSON file"""
    test_data_path = Path(__file__).parent / "test_data" / "primitive_cases.json"
    with open(test_data_path) as f:
        return json.load(f)


def build(test_case):
    factory = getattr(builder, test_case["type"])
    return factory(**test_case.get("constraints", {}))


@pytest.mark.parametrize("test_case", load_test_data(), ids=lambda case: case["name"])
def test_primitive_decode(test_case):
    node = build(test_case)

    if "error" not in test_case:
        assert node.decode(test_case["value"]) == test_case["expected"]
        assert node.validate(test_case["value"]) is None
        return

    error_class = getattr(errors, test_case["error"])
    with pytest.raises(error_class) as exc_info:
        node.decode(test_case["value"])
    assert exc_info.value.message == test_case["message"]
    assert exc_info.value.path == ()

    result = node.try_decode(test_case["value"])
    assert not result.ok
    assert isinstance(result.error, error_class)


def test_validate_returns_error_without_raising():
    error = number(min=0).validate(-1)
    assert isinstance(error, ConstraintViolationError)
    assert error.message == "Number must be at least 0"


def test_compiled_format():
    node = string(format=re.compile("^[0-9]+$"))
    assert node.decode("123") == "123"
    with pytest.raises(ConstraintViolationError) as exc_info:
        node.decode("12a")
    assert exc_info.value.message == "String must match format '^[0-9]+$'"


def test_format_matches_anywhere():
    assert string(format="b").decode("abc") == "abc"


def test_number_accepts_decimal_and_int():
    assert number().decode(Decimal("1.5")) == Decimal("1.5")
    assert number(greater_than=0).decode(3) == 3


@pytest.mark.parametrize("value", [math.nan, Decimal("NaN")], ids=["float", "decimal"])
def test_nan_fails_bounds(value):
    error = number(min=0, max=1).validate(value)
    assert isinstance(error, ConstraintViolationError)
    assert error.message == "Number must not be NaN"
    assert number(less_than=1).validate(value) is not None


def test_nan_without_bounds():
    assert math.isnan(number().decode(math.nan))
    assert number(max=1).decode(-math.inf) == -math.inf


class Color(enum.Enum):
    RED = "red"
    GREEN = 2


class TestSymbol:
    def test_enum_member_with_string_value(self):
        assert symbol().decode(Color.RED) == "red"

    def test_enum_member_with_other_value(self):
        assert symbol().decode(Color.GREEN) == "GREEN"

    def test_encode_gives_plain_string(self):
        assert symbol().encode(Color.RED) == "red"
        assert symbol().encode("pending") == "pending"

    def test_rejects_numbers(self):
        with pytest.raises(TypeMismatchError, match="Expected symbol, got int"):
            symbol().decode(3)


class TestLiteral:
    def test_accepts_listed_values(self):
        node = literal("a", "b")
        assert node.decode("b") == "b"

    def test_rejects_other_values(self):
        with pytest.raises(ConstraintViolationError) as exc_info:
            literal("a", "b").decode("c")
        assert exc_info.value.message == "Expected one of ['a', 'b'], got 'c'"

    def test_single_list_argument_is_spread(self):
        assert literal(["a", "b"]).values == ("a", "b")

    def test_booleans_never_equal_integers(self):
        assert literal(1).validate(True) is not None
        assert literal(True).validate(1) is not None
        assert literal(0).validate(False) is not None
        assert literal(True).decode(True) is True

    def test_null_value(self):
        node = literal(None, "a")
        assert node.decode(None) is None
        assert literal("a").validate(None) is not None

    def test_requires_values(self):
        with pytest.raises(SchemaDefinitionError):
            literal()

    def test_rejects_non_scalar_values(self):
        with pytest.raises(SchemaDefinitionError):
            literal({"a": 1})


def test_encode_none_is_none():
    assert string().encode(None) is None
    assert number().encode(None) is None


if __name__ == "__main__":
    pytest.main([__file__])
