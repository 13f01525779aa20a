"""
Shunting-yard conversion from infix to postfix.

Operands go straight to the output queue; operators wait on a stack until an
operator of lower precedence (or equal precedence, for left-associative
operators) arrives. Parentheses never reach the output.

A small state machine tracks whether the next token should be an operand or
an operator. In the default lenient mode the state is only recorded, and
malformed operand/operator sequences are left for the reducer to reject. In
strict mode any token without a legal transition is a parse error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import StrEnum

from infixexpr.errors import parse_error
from infixexpr.tokens import Associativity, Token, TokenKind, is_operator, is_unary, operator_info

logger = logging.getLogger(__name__)


class ParserState(StrEnum):
    EXPECT_OPERAND = "expect_operand"
    EXPECT_OPERATOR = "expect_operator"


class TokenCategory(StrEnum):
    OPERAND = "operand"
    UNARY = "unary operator"
    BINARY = "operator"
    LPAREN = "'('"
    RPAREN = "')'"


# Legal (state, category) -> next state
TRANSITIONS: dict[tuple[ParserState, TokenCategory], ParserState] = {
    (ParserState.EXPECT_OPERAND, TokenCategory.OPERAND): ParserState.EXPECT_OPERATOR,
    (ParserState.EXPECT_OPERAND, TokenCategory.UNARY): ParserState.EXPECT_OPERAND,
    (ParserState.EXPECT_OPERAND, TokenCategory.LPAREN): ParserState.EXPECT_OPERAND,
    (ParserState.EXPECT_OPERATOR, TokenCategory.BINARY): ParserState.EXPECT_OPERAND,
    (ParserState.EXPECT_OPERATOR, TokenCategory.RPAREN): ParserState.EXPECT_OPERATOR,
}

# Lenient mode: the state a category leads to, whatever the current state
_LENIENT_NEXT: dict[TokenCategory, ParserState] = {
    TokenCategory.OPERAND: ParserState.EXPECT_OPERATOR,
    TokenCategory.UNARY: ParserState.EXPECT_OPERAND,
    TokenCategory.BINARY: ParserState.EXPECT_OPERAND,
    TokenCategory.LPAREN: ParserState.EXPECT_OPERAND,
    TokenCategory.RPAREN: ParserState.EXPECT_OPERATOR,
}


def categorize(token: Token) -> TokenCategory:
    if token.is_operand:
        return TokenCategory.OPERAND
    if is_unary(token):
        return TokenCategory.UNARY
    if is_operator(token):
        return TokenCategory.BINARY
    if token.kind == TokenKind.LPAREN:
        return TokenCategory.LPAREN
    return TokenCategory.RPAREN


class Converter:
    """
    Converts one infix token sequence to postfix on construction.

    Args:
        tokens: Infix tokens, consumed once in order.
        strict: Reject tokens that have no legal grammar transition.
        source: Original expression text, for error locations.

    Raises:
        ExpressionError: PARSE kind for mismatched parentheses or, in strict
            mode, malformed operand/operator sequences.
    """

    def __init__(
        self, tokens: Iterable[Token], *, strict: bool = False, source: str | None = None
    ) -> None:
        self.strict = strict
        self.source = source
        self.state = ParserState.EXPECT_OPERAND
        self.queue: list[Token] = []
        self.stack: list[Token] = []

        for token in tokens:
            self._advance_state(token)
            self._handle(token)
        self._drain()

        if self.strict and self.state == ParserState.EXPECT_OPERAND:
            raise parse_error("Unexpected end of expression", source, len(source or ""))

        logger.debug("Converted to postfix: %s", " ".join(str(t) for t in self.queue))

    @property
    def postfix(self) -> tuple[Token, ...]:
        return tuple(self.queue)

    def _advance_state(self, token: Token) -> None:
        category = categorize(token)
        next_state = TRANSITIONS.get((self.state, category))
        if next_state is None:
            if self.strict:
                raise parse_error(
                    f'Unexpected {category} "{token.value}"', self.source, token.pos
                )
            next_state = _LENIENT_NEXT[category]
        self.state = next_state

    def _handle(self, token: Token) -> None:
        if token.is_operand:
            self.queue.append(token)
        elif is_operator(token):
            self._push_operator(token)
        elif token.kind == TokenKind.LPAREN:
            self.stack.append(token)
        else:
            self._close_group(token)

    def _push_operator(self, token: Token) -> None:
        op1 = operator_info(token)
        while self.stack and is_operator(self.stack[-1]):
            op2 = operator_info(self.stack[-1])
            left = op1.associativity == Associativity.LEFT
            if not ((left and op1.precedence <= op2.precedence) or op1.precedence < op2.precedence):
                break
            self.queue.append(self.stack.pop())
        self.stack.append(token)

    def _close_group(self, token: Token) -> None:
        while self.stack:
            top = self.stack.pop()
            if top.kind == TokenKind.LPAREN:
                return
            self.queue.append(top)
        raise parse_error("Mismatched parentheses: unexpected ')'", self.source, token.pos)

    def _drain(self) -> None:
        while self.stack:
            top = self.stack.pop()
            if top.is_paren:
                raise parse_error(
                    f"Mismatched parentheses: unclosed '{top.value}'", self.source, top.pos
                )
            self.queue.append(top)


def to_postfix(
    tokens: Iterable[Token], *, strict: bool = False, source: str | None = None
) -> tuple[Token, ...]:
    """Convert infix tokens to a postfix tuple."""
    return Converter(tokens, strict=strict, source=source).postfix
