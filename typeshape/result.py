"""
Result values returned by the validation engine.

Decoding never uses exceptions for control flow internally: every node
returns either ``Ok`` or ``Err`` and composite nodes inspect the result.
The public ``TypeNode.decode`` turns an ``Err`` into a raised exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import ValidationError


@dataclass(frozen=True)
class Ok:
    """Successful decode."""

    value: Any

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed decode."""

    error: ValidationError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


Result = Ok | Err
