"""
Public facade: construct once, evaluate many times.

Usage:
    from infixexpr import ExpressionContext, InfixExpression

    expr = InfixExpression("price * (1 + tax_rate)")
    expr.referenced_identifiers()  # frozenset({"price", "tax_rate"})
    expr.evaluate(ExpressionContext({"price": 100, "tax_rate": 0.2}))  # 120.0
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from infixexpr.config import EvaluatorConfig, ProjectConfig, resolve_strict
from infixexpr.context import ConstantResolver, ExpressionContext
from infixexpr.converter import Converter
from infixexpr.reducer import reduce
from infixexpr.scanner import Scanner
from infixexpr.tokens import Token


class InfixExpression:
    """
    An infix expression scanned and converted to postfix on construction.

    Args:
        expression: Source text, e.g. ``"-(a + 2) * 3"``.
        pattern: Custom token regex (group 1 is the token text).
        syntax_only: Always evaluate in validation mode.
        strict: Reject malformed operand/operator sequences at parse time.
            None defers to ``config`` and then to INFIXEXPR_STRICT.
        config: Evaluator defaults for ``pattern`` and ``strict``.

    Raises:
        ExpressionError: SYNTAX or PARSE kind if the expression is malformed.
    """

    def __init__(
        self,
        expression: str,
        pattern: str | re.Pattern[str] | None = None,
        syntax_only: bool = False,
        *,
        strict: bool | None = None,
        config: EvaluatorConfig | ProjectConfig | None = None,
    ) -> None:
        if isinstance(config, ProjectConfig):
            config = config.evaluator
        if config is not None:
            pattern = pattern if pattern is not None else config.pattern
            strict = strict if strict is not None else config.strict

        self.source = expression
        self.syntax_only = syntax_only
        self.strict = resolve_strict(strict)

        scanner = Scanner(expression, pattern)
        self._tokens = scanner.tokens
        self._identifiers = frozenset(scanner.identifiers)
        self._postfix = Converter(scanner, strict=self.strict, source=expression).postfix

    def evaluate(self, context: ConstantResolver | None = None) -> float:
        """Compute the value of the expression.

        Without a context, or when constructed with ``syntax_only=True``, the
        expression is only validated and the result is always 1.0.

        Raises:
            ExpressionError: RUNTIME kind on evaluation failure.
        """
        if self.syntax_only:
            context = None
        return reduce(self._postfix, context, source=self.source)

    def validate(self) -> float:
        """Check operand/operator structure without resolving any constant."""
        return reduce(self._postfix, None, source=self.source)

    def referenced_identifiers(self) -> frozenset[str]:
        """Constant names that must be defined before evaluation."""
        return self._identifiers

    @property
    def tokens(self) -> tuple[Token, ...]:
        """The infix token sequence, parentheses included."""
        return self._tokens

    @property
    def postfix(self) -> tuple[Token, ...]:
        return self._postfix

    def to_postfix_string(self) -> str:
        """Postfix notation, e.g. ``"1 2 3 * +"``; unary signs render as ``u-``/``u+``."""
        return " ".join(str(token) for token in self._postfix)

    def __repr__(self) -> str:
        return f"InfixExpression({self.source!r})"


def evaluate(
    expression: str,
    context: ConstantResolver | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> float:
    """Construct and evaluate an expression in one call.

    ``context`` may be a plain mapping of constant names to numbers.
    Extra keyword arguments are passed to ``InfixExpression``.
    """
    if isinstance(context, Mapping):
        context = ExpressionContext(context)
    return InfixExpression(expression, **kwargs).evaluate(context)
