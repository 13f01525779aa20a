"""
Constant registry queried during evaluation.

A context is an explicitly owned name -> float mapping passed into
``InfixExpression.evaluate``. There is no process-wide instance; share one
read-only across evaluations, and synchronize writers externally.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from decimal import Decimal
from fractions import Fraction
from typing import Any, Protocol

from infixexpr.errors import runtime_error, syntax_error

_NUMERIC_STRING_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*")


class ConstantResolver(Protocol):
    """What the reducer needs from a context."""

    def resolve(self, name: str) -> float: ...


def to_number(value: Any) -> float:
    """Convert a numeric value or numeric string to float.

    Raises:
        ExpressionError: SYNTAX kind if ``value`` is not numeric.
    """
    if isinstance(value, bool):
        raise syntax_error(f"Value must be numeric, got {value!r}")
    if isinstance(value, (int, float, Decimal, Fraction)) or (
        isinstance(value, str) and _NUMERIC_STRING_RE.fullmatch(value)
    ):
        try:
            return float(value)
        except (OverflowError, ValueError) as e:
            raise syntax_error(f"Value must be numeric, got {value!r}: {e}") from e
    raise syntax_error(f"Value must be numeric, got {value!r}")


class ExpressionContext:
    """
    Name -> value store for constants referenced by expressions.

    Usage:
        ctx = ExpressionContext()
        ctx.define("rate", 0.2)
        ctx.resolve("rate")  # 0.2
    """

    def __init__(self, constants: Mapping[str, Any] | None = None) -> None:
        self._constants: dict[str, float] = {}
        if constants:
            self.update(constants)

    @classmethod
    def from_mapping(cls, constants: Mapping[str, Any]) -> ExpressionContext:
        return cls(constants)

    def define(self, name: str, value: Any) -> None:
        """Define (or redefine) a constant. Non-numeric values are a syntax error."""
        self._constants[name] = to_number(value)

    def update(self, constants: Mapping[str, Any]) -> None:
        for name, value in constants.items():
            self.define(name, value)

    def resolve(self, name: str) -> float:
        if name not in self._constants:
            raise runtime_error(f'Undefined constant "{name}"')
        return self._constants[name]

    def missing(self, names: Iterable[str]) -> list[str]:
        """Names from ``names`` that are not defined, in the given order."""
        return [name for name in names if name not in self._constants]

    @property
    def names(self) -> list[str]:
        return sorted(self._constants)

    def __contains__(self, name: object) -> bool:
        return name in self._constants

    def __len__(self) -> int:
        return len(self._constants)

    def __iter__(self) -> Iterator[str]:
        return iter(self._constants)

    def __repr__(self) -> str:
        return f"ExpressionContext({self._constants!r})"
