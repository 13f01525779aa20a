"""
Error types for infix expression scanning, conversion, and evaluation.

All failures raise a single exception type, ``ExpressionError``, tagged with
an ``ErrorKind``. Callers branch on ``error.kind`` instead of catching
separate subclasses:

    try:
        value = InfixExpression("a / b").evaluate(ctx)
    except ExpressionError as e:
        match e.kind:
            case ErrorKind.SYNTAX | ErrorKind.PARSE:
                ...
            case ErrorKind.RUNTIME:
                ...
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# Number of characters of remaining input quoted in error messages
SNIPPET_LENGTH = 10


class ErrorKind(StrEnum):
    """Failure tiers."""

    SYNTAX = "syntax"  # lexical: unmatched input, empty group, bad constant value
    PARSE = "parse"  # structural: mismatched parentheses, grammar violations
    RUNTIME = "runtime"  # evaluation: undefined constant, operand count, division by zero


@dataclass
class ErrorContext:
    """
    Source location of an error.

    Attributes:
        source: The full expression text
        pos: 0-indexed character offset of the offending input
    """

    source: str
    pos: int

    @property
    def column(self) -> int:
        """1-indexed column."""
        return self.pos + 1

    def format(self) -> str:
        """
        Format the context as the source line with a marker under the error.

        Returns:
            Two lines like:
                "   1 | 1 + $x"
                "           ^^^"
        """
        prefix = "   1 | "
        marker = " " * (len(prefix) + self.pos) + "^^^"
        return f"{prefix}{self.source}\n{marker}"


class ExpressionError(Exception):
    """Base exception for all expression errors, tagged with its kind."""

    def __init__(self, kind: ErrorKind, message: str, context: ErrorContext | None = None):
        self.kind = kind
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.context:
            return f"{self.kind} error at column {self.context.column}: {self.message}"
        return f"{self.kind} error: {self.message}"

    @property
    def pos(self) -> int | None:
        return self.context.pos if self.context else None

    def describe(self) -> str:
        """Message followed by the source marker, when a location is known."""
        if self.context:
            return f"{self}\n{self.context.format()}"
        return str(self)


def _make(kind: ErrorKind, message: str, source: str | None, pos: int | None) -> ExpressionError:
    if source is not None and pos is not None:
        return ExpressionError(kind, message, ErrorContext(source=source, pos=pos))
    return ExpressionError(kind, message)


def syntax_error(message: str, source: str | None = None, pos: int | None = None) -> ExpressionError:
    """
    Helper to create a syntax error, with a location if both source and pos are given.

    Args:
        message: Error description
        source: Optional full expression text
        pos: Optional 0-indexed offset into ``source``

    Returns:
        ExpressionError of kind SYNTAX
    """
    return _make(ErrorKind.SYNTAX, message, source, pos)


def parse_error(message: str, source: str | None = None, pos: int | None = None) -> ExpressionError:
    """Helper to create a parse error (see ``syntax_error``)."""
    return _make(ErrorKind.PARSE, message, source, pos)


def runtime_error(message: str, source: str | None = None, pos: int | None = None) -> ExpressionError:
    """Helper to create a runtime error (see ``syntax_error``)."""
    return _make(ErrorKind.RUNTIME, message, source, pos)


class ConfigError(ValueError):
    """Raised when a configuration file or environment value is invalid."""
