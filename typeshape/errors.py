"""
Error taxonomy for schema declaration, validation and JSON Schema conversion.

Validation errors carry a human-readable, path-qualified message. Every level
of recursion wraps the error it received with its own positional or nominal
context, so the final message reads like a path:

    Field 'parcel': Field 'weight': Number must be greater than 0
"""

from __future__ import annotations

from typing import Any


class SchemaError(Exception):
    """Base class for every error raised by typeshape."""

    pass


class ValidationError(SchemaError):
    """Raised when a value does not satisfy a schema.

    Attributes:
        message: Path-qualified, human-readable message
        path: Keys and indexes from the outermost node down to the failure
    """

    def __init__(self, message: str, path: tuple[Any, ...] = ()):
        super().__init__(message)
        self.message = message
        self.path = tuple(path)

    def wrap(self, label: str, key: Any) -> ValidationError:
        """Return a copy of this error prefixed with one level of context.

        The copy keeps the concrete class so callers can still catch the
        specific kind of failure after any amount of nesting.

        Args:
            label: Context prefix, e.g. "Field 'age'" or "Array item at index 2"
            key: Field name or index prepended to the error path

        Returns:
            New error of the same class
        """
        wrapped = self._copy(f"{label}: {self.message}")
        wrapped.path = (key, *self.path)
        return wrapped

    def _copy(self, message: str) -> ValidationError:
        return type(self)(message, self.path)


class TypeMismatchError(ValidationError):
    """The value has the wrong shape or kind."""

    pass


class ConstraintViolationError(ValidationError):
    """The value has the right shape but a constraint failed."""

    pass


class RequiredValueError(ValidationError):
    """A required field is missing, or null was given where it is not allowed."""

    pass


class UnknownDiscriminatorError(ValidationError):
    """The discriminator value does not select any variant."""

    def __init__(self, message: str, path: tuple[Any, ...] = (), value: Any = None, expected: tuple[Any, ...] = ()):
        super().__init__(message, path)
        self.value = value
        self.expected = tuple(expected)

    def _copy(self, message: str) -> ValidationError:
        return type(self)(message, self.path, self.value, self.expected)


class MissingDiscriminatorError(ValidationError):
    """The discriminator field is absent from the value."""

    pass


class UnexpectedKeysError(ValidationError):
    """A struct that rejects extra keys received some."""

    def __init__(self, message: str, path: tuple[Any, ...] = (), keys: tuple[Any, ...] = ()):
        super().__init__(message, path)
        self.keys = tuple(keys)

    def _copy(self, message: str) -> ValidationError:
        return type(self)(message, self.path, self.keys)


class AggregateUnionError(ValidationError):
    """No member of a union accepted the value.

    Attributes:
        errors: The failure of every member, in declaration order
    """

    def __init__(self, message: str, path: tuple[Any, ...] = (), errors: list[ValidationError] | None = None):
        super().__init__(message, path)
        self.errors = list(errors or [])

    def _copy(self, message: str) -> ValidationError:
        return type(self)(message, self.path, self.errors)


class RecursionLimitError(ValidationError):
    """The value nests deeper than the configured maximum depth."""

    pass


class SchemaDefinitionError(SchemaError, ValueError):
    """A schema was declared with inconsistent arguments.

    Raised at construction time, e.g. a discriminated union variant that is
    not a struct or a literal discriminator that does not match its key.
    """

    pass


class InvalidDefaultError(SchemaDefinitionError):
    """A declared default value fails validation against its own type."""

    pass


class UnsupportedSchemaError(SchemaError, ValueError):
    """An AST or JSON Schema document uses a shape the codec cannot represent."""

    pass
