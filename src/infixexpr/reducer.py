"""
Postfix reduction.

Walks a postfix token sequence with an operand stack. With a context the
result is computed; without one the reducer only validates structure, and
every operand and intermediate result stands in as 1.0.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable, Sequence

from infixexpr.context import ConstantResolver
from infixexpr.errors import ExpressionError, runtime_error
from infixexpr.tokens import Token, TokenKind, is_operator, operator_info

logger = logging.getLogger(__name__)

# Stand-in for every value in validation mode
VALIDATION_VALUE = 1.0

_BINARY: dict[TokenKind, Callable[[float, float], float]] = {
    TokenKind.PLUS: operator.add,
    TokenKind.MINUS: operator.sub,
    TokenKind.TIMES: operator.mul,
    TokenKind.DIV: operator.truediv,
}

_UNARY: dict[TokenKind, Callable[[float], float]] = {
    TokenKind.UNARY_PLUS: operator.pos,
    TokenKind.UNARY_MINUS: operator.neg,
}


def reduce(
    postfix: Sequence[Token],
    context: ConstantResolver | None = None,
    *,
    source: str | None = None,
) -> float:
    """Reduce a postfix sequence to a single value.

    Args:
        postfix: Tokens in postfix order, as produced by the converter.
        context: Constant lookup. None selects validation mode.
        source: Original expression text, for error locations.

    Returns:
        The computed value, or 1.0 in validation mode.

    Raises:
        ExpressionError: RUNTIME kind for undefined constants, operators
            without enough operands, division by zero, or a final operand
            count other than one.
    """
    validating = context is None
    stack: list[float] = []

    for token in postfix:
        if token.kind == TokenKind.NUMBER:
            stack.append(VALIDATION_VALUE if validating else float(token.value))
        elif token.kind == TokenKind.IDENT:
            if context is None:
                stack.append(VALIDATION_VALUE)
            else:
                stack.append(_resolve(context, token, source))
        elif is_operator(token):
            info = operator_info(token)
            if len(stack) < info.arity:
                raise runtime_error(
                    f'Not enough operands for operator "{info.symbol}" '
                    f"({info.arity} required, {len(stack)} available)",
                    source,
                    token.pos,
                )
            rhs = stack.pop()
            lhs = stack.pop() if info.arity == 2 else None
            stack.append(VALIDATION_VALUE if validating else _apply(token, lhs, rhs, source))
        else:
            raise runtime_error(f'Invalid token "{token.value}"', source, token.pos)

    if len(stack) == 1:
        logger.debug("Reduced %r to %s", source, stack[0])
        return stack[0]
    if not stack:
        raise runtime_error("Too few operands: nothing to evaluate")
    raise runtime_error(f"Too many operands: {len(stack)} values left after evaluation")


def _resolve(context: ConstantResolver, token: Token, source: str | None) -> float:
    try:
        return context.resolve(str(token.value))
    except ExpressionError as e:
        raise runtime_error(e.message, source, token.pos) from e


def _apply(token: Token, lhs: float | None, rhs: float, source: str | None) -> float:
    if lhs is None:
        return _UNARY[token.kind](rhs)
    if token.kind == TokenKind.DIV and rhs == 0:
        raise runtime_error("Division by zero", source, token.pos)
    return _BINARY[token.kind](lhs, rhs)
