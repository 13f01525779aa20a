"""
Token model for infix expressions.

Tokens are immutable once classified by the scanner. Operator metadata
(precedence, associativity, arity) lives in one table keyed by kind.
"""

from __future__ import annotations

from enum import StrEnum, auto
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class TokenKind(StrEnum):
    """Token types for infix expressions."""

    # Operands
    NUMBER = auto()
    IDENT = auto()

    # Grouping
    LPAREN = auto()
    RPAREN = auto()

    # Binary operators
    PLUS = auto()
    MINUS = auto()
    TIMES = auto()
    DIV = auto()

    # Unary operators (sign)
    UNARY_PLUS = auto()
    UNARY_MINUS = auto()


class Associativity(StrEnum):
    LEFT = "left"
    RIGHT = "right"


class OperatorInfo(NamedTuple):
    symbol: str
    precedence: int
    associativity: Associativity
    arity: int


# Higher precedence binds tighter; 3 is reserved.
OPERATORS: dict[TokenKind, OperatorInfo] = {
    TokenKind.PLUS: OperatorInfo("+", 1, Associativity.LEFT, 2),
    TokenKind.MINUS: OperatorInfo("-", 1, Associativity.LEFT, 2),
    TokenKind.TIMES: OperatorInfo("*", 2, Associativity.LEFT, 2),
    TokenKind.DIV: OperatorInfo("/", 2, Associativity.LEFT, 2),
    TokenKind.UNARY_PLUS: OperatorInfo("+", 4, Associativity.RIGHT, 1),
    TokenKind.UNARY_MINUS: OperatorInfo("-", 4, Associativity.RIGHT, 1),
}

# Literal text -> kind, before unary reclassification
SYMBOLS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.TIMES,
    "/": TokenKind.DIV,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

UNARY_FORMS: dict[TokenKind, TokenKind] = {
    TokenKind.PLUS: TokenKind.UNARY_PLUS,
    TokenKind.MINUS: TokenKind.UNARY_MINUS,
}


class Token(BaseModel):
    """
    A single classified token.

    ``value`` is a float for NUMBER tokens and the matched text otherwise.
    ``pos`` is the 0-indexed offset of the token in the source expression.
    """

    kind: TokenKind = Field(description="Token classification")
    value: float | str = Field(description="Numeric value or matched text")
    pos: int = Field(default=0, description="Offset in the source expression")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if isinstance(self.value, float):
            # Whole numbers print without ".0"; everything else keeps full precision
            if self.value.is_integer() and abs(self.value) < 1e16:
                return str(int(self.value))
            return repr(self.value)
        if self.kind in (TokenKind.UNARY_PLUS, TokenKind.UNARY_MINUS):
            return f"u{self.value}"
        return str(self.value)

    @property
    def is_operand(self) -> bool:
        return self.kind in (TokenKind.NUMBER, TokenKind.IDENT)

    @property
    def is_paren(self) -> bool:
        return self.kind in (TokenKind.LPAREN, TokenKind.RPAREN)


def is_operator(token: Token) -> bool:
    """True for binary and unary arithmetic operators."""
    return token.kind in OPERATORS


def is_unary(token: Token) -> bool:
    return token.kind in (TokenKind.UNARY_PLUS, TokenKind.UNARY_MINUS)


def operator_info(token: Token) -> OperatorInfo:
    """Look up precedence, associativity and arity for an operator token."""
    return OPERATORS[token.kind]
