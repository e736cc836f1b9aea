"""
Base class shared by every type node.

A schema is a tree of ``TypeNode`` instances built once at declaration time
and read-only afterwards. Each node implements ``_decode`` (returning a
``Result``) and ``_encode``; the public ``decode``/``try_decode``/
``validate``/``encode`` methods are defined here once.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from ..config import DEFAULT_CONFIG, CodecConfig
from ..errors import RecursionLimitError, RequiredValueError, ValidationError
from ..result import Err, Result


@dataclass(frozen=True)
class DecodeContext:
    """Per-call state threaded through a decode."""

    config: CodecConfig = field(default_factory=lambda: DEFAULT_CONFIG)
    depth: int = 0

    def deeper(self) -> DecodeContext:
        return DecodeContext(self.config, self.depth + 1)


def key_name(key: Any) -> Any:
    """Normalise a symbol-like mapping key to its string form.

    Enum members stand in for symbols: a member with a string value becomes
    that value, any other member becomes its name. Other keys are returned
    unchanged.
    """
    if isinstance(key, enum.Enum):
        return key.value if isinstance(key.value, str) else key.name
    return key


def type_name(value: Any) -> str:
    return type(value).__name__


class TypeNode(ABC):
    """Base class for all schema nodes.

    Attributes:
        constraints: Constraint name -> value. Names a node does not know
            are kept but ignored when decoding.
    """

    # AST "_type" tag of this kind
    kind: ClassVar[str] = ""

    def __init__(self, **constraints: Any):
        self.constraints = dict(constraints)

    @property
    def accepts_null(self) -> bool:
        """Whether ``None`` reaches ``_decode`` instead of failing up front."""
        return False

    def decode(self, value: Any, config: CodecConfig | None = None) -> Any:
        """Decode untrusted input into a validated value.

        Raises:
            ValidationError: If the value does not satisfy the schema
        """
        return self.try_decode(value, config).unwrap()

    def try_decode(self, value: Any, config: CodecConfig | None = None) -> Result:
        """Decode without raising; returns ``Ok`` or ``Err``."""
        return self.run(value, DecodeContext(config or DEFAULT_CONFIG))

    def validate(self, value: Any, config: CodecConfig | None = None) -> ValidationError | None:
        """Return the validation error for ``value``, or None if it is valid."""
        result = self.try_decode(value, config)
        return None if result.ok else result.error

    def encode(self, value: Any) -> Any:
        """Convert an in-memory value to its external representation."""
        if value is None:
            return None
        return self._encode(value)

    def run(self, value: Any, ctx: DecodeContext) -> Result:
        """Decode one level; composite nodes call this on their children."""
        if ctx.depth > ctx.config.max_depth:
            return Err(RecursionLimitError(f"Maximum nesting depth of {ctx.config.max_depth} exceeded"))
        if value is None and not self.accepts_null:
            return Err(RequiredValueError("Value cannot be null"))
        return self._decode(value, ctx)

    def owns(self, value: Any) -> bool:
        """Whether an in-memory value belongs to this node (used by union encode).

        Leaves check by validation. Composite nodes override this to check
        the container shape and ask their children, since a decoded value
        holds transform targets rather than sources.
        """
        return self.validate(value) is None

    @abstractmethod
    def _decode(self, value: Any, ctx: DecodeContext) -> Result:
        pass

    def _encode(self, value: Any) -> Any:
        return value

    def __repr__(self) -> str:
        if self.constraints:
            args = ", ".join(f"{k}={v!r}" for k, v in self.constraints.items())
            return f"{type(self).__name__}({args})"
        return f"{type(self).__name__}()"
