"""Tests for the InfixExpression facade.

Covers the end-to-end behavior callers rely on: precedence, associativity,
unary signs, constants, validation mode, repeat evaluation, and the error
kind raised for each failure.
"""

from __future__ import annotations

import pytest

from infixexpr import (
    ErrorKind,
    ExpressionContext,
    ExpressionError,
    InfixExpression,
    evaluate,
)
from infixexpr.config import STRICT_ENV_VAR, EvaluatorConfig, parse_config

# ============================================================================
# Evaluation
# ============================================================================


class TestEvaluate:
    """End-to-end arithmetic."""

    def test_precedence(self, empty_context: ExpressionContext) -> None:
        assert InfixExpression("1+2*3").evaluate(empty_context) == 7.0
        assert InfixExpression("(1+2)*3").evaluate(empty_context) == 9.0
        assert InfixExpression("2*3+4*5").evaluate(empty_context) == 26.0

    def test_left_associative(self, empty_context: ExpressionContext) -> None:
        assert InfixExpression("1-2-3").evaluate(empty_context) == -4.0

    def test_unary(self, empty_context: ExpressionContext) -> None:
        assert InfixExpression("-3+4").evaluate(empty_context) == 1.0
        assert InfixExpression("--3").evaluate(empty_context) == 3.0

    def test_constants(self) -> None:
        assert InfixExpression("a+1").evaluate(ExpressionContext({"a": 5})) == 6.0

    def test_realistic(self, pricing_context: ExpressionContext) -> None:
        expr = InfixExpression("price * (1 + tax_rate) - discount")
        assert expr.evaluate(pricing_context) == pytest.approx(104.5)

    def test_repeat_evaluation(self) -> None:
        expr = InfixExpression("x * x - 1")
        ctx = ExpressionContext({"x": 4})
        first = expr.evaluate(ctx)
        assert expr.evaluate(ctx) == first == 15.0
        ctx.define("x", 2)
        assert expr.evaluate(ctx) == 3.0

    def test_one_shot_with_mapping(self) -> None:
        assert evaluate("a / b", {"a": 1, "b": 4}) == 0.25

    def test_one_shot_validation(self) -> None:
        assert evaluate("a / b") == 1.0


class TestValidation:
    """Validation mode ignores constant values."""

    def test_syntax_only_ignores_context(self, empty_context: ExpressionContext) -> None:
        expr = InfixExpression("a+b*c", syntax_only=True)
        assert expr.evaluate(empty_context) == 1.0
        assert expr.evaluate() == 1.0

    def test_no_context_validates(self) -> None:
        assert InfixExpression("a+b*c").evaluate() == 1.0

    def test_validate_method(self) -> None:
        assert InfixExpression("x / 0").validate() == 1.0


# ============================================================================
# Errors
# ============================================================================


class TestErrors:
    def test_division_by_zero(self, empty_context: ExpressionContext) -> None:
        with pytest.raises(ExpressionError, match="Division by zero") as exc_info:
            InfixExpression("2/0").evaluate(empty_context)
        assert exc_info.value.kind == ErrorKind.RUNTIME

    def test_undefined_constant(self, empty_context: ExpressionContext) -> None:
        with pytest.raises(ExpressionError, match="Undefined constant") as exc_info:
            InfixExpression("a+1").evaluate(empty_context)
        assert exc_info.value.kind == ErrorKind.RUNTIME

    @pytest.mark.parametrize(
        ("source", "kind"),
        [
            ("(1+2", ErrorKind.PARSE),
            ("1+2)", ErrorKind.PARSE),
            ("()", ErrorKind.SYNTAX),
            ("1 ? 2", ErrorKind.SYNTAX),
        ],
    )
    def test_construction_fails(self, source: str, kind: ErrorKind) -> None:
        with pytest.raises(ExpressionError) as exc_info:
            InfixExpression(source)
        assert exc_info.value.kind == kind

    def test_describe_points_at_error(self) -> None:
        with pytest.raises(ExpressionError) as exc_info:
            InfixExpression("1 + 2)")
        assert exc_info.value.describe().endswith(" " * 12 + "^^^")


# ============================================================================
# Introspection
# ============================================================================


class TestIntrospection:
    def test_referenced_identifiers(self) -> None:
        expr = InfixExpression("price * qty + price")
        assert expr.referenced_identifiers() == frozenset({"price", "qty"})

    def test_precheck_missing_constants(self) -> None:
        expr = InfixExpression("a + b")
        ctx = ExpressionContext({"a": 1})
        assert ctx.missing(sorted(expr.referenced_identifiers())) == ["b"]

    def test_postfix_string(self) -> None:
        assert InfixExpression("-(1 + 2.5) * x").to_postfix_string() == "1 2.5 + u- x *"

    def test_postfix_string_keeps_precision(self) -> None:
        expr = InfixExpression("1.2345678 + 1000000 * 0.1")
        assert expr.to_postfix_string() == "1.2345678 1000000 0.1 * +"

    def test_postfix_drops_parens(self) -> None:
        expr = InfixExpression("((a) + (b * (c)))")
        parens = sum(1 for t in expr.tokens if t.is_paren)
        assert len(expr.postfix) == len(expr.tokens) - parens

    def test_repr(self) -> None:
        assert repr(InfixExpression("1 + 1")) == "InfixExpression('1 + 1')"


# ============================================================================
# Strict grammar and configuration
# ============================================================================


class TestStrictMode:
    def test_lenient_by_default(self) -> None:
        expr = InfixExpression("1 2")
        assert expr.strict is False
        with pytest.raises(ExpressionError) as exc_info:
            expr.evaluate(ExpressionContext())
        assert exc_info.value.kind == ErrorKind.RUNTIME

    def test_strict_flag(self) -> None:
        with pytest.raises(ExpressionError, match="Unexpected operand") as exc_info:
            InfixExpression("1 2", strict=True)
        assert exc_info.value.kind == ErrorKind.PARSE

    def test_strict_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(STRICT_ENV_VAR, "1")
        with pytest.raises(ExpressionError, match="Unexpected end"):
            InfixExpression("1 +")

    def test_explicit_flag_beats_config(self) -> None:
        expr = InfixExpression("1 2", strict=False, config=EvaluatorConfig(strict=True))
        assert expr.strict is False

    def test_config_pattern_and_strict(self) -> None:
        config = parse_config(
            {
                "evaluator": {"strict": True, "pattern": r"^(\d+|\$[a-z]+|[-+*/()]|\s+)"},
                "constants": {"$x": 3},
            }
        )
        expr = InfixExpression("$x * 2", config=config)
        assert expr.strict is True
        assert expr.referenced_identifiers() == frozenset({"$x"})
        assert expr.evaluate(config.build_context()) == 6.0
