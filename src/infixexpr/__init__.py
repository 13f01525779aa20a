"""
infixexpr - arithmetic infix expression evaluation.

Scanner, shunting-yard converter, and postfix reducer for expressions made of
numbers, named constants, ``+ - * /``, unary signs, and parentheses.

Usage:
    from infixexpr import ExpressionContext, InfixExpression

    expr = InfixExpression("a + 1")
    result = expr.evaluate(ExpressionContext({"a": 5}))
    # result == 6.0
"""

from __future__ import annotations

from ._version import get_version
from .context import ExpressionContext
from .errors import ConfigError, ErrorKind, ExpressionError
from .expression import InfixExpression, evaluate
from .tokens import Token, TokenKind

__version__ = get_version()

__all__ = [
    "__version__",
    "ConfigError",
    "ErrorKind",
    "ExpressionContext",
    "ExpressionError",
    "InfixExpression",
    "Token",
    "TokenKind",
    "evaluate",
]
