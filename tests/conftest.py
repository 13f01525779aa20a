"""Shared pytest fixtures for infixexpr tests."""

import pytest

from infixexpr import ExpressionContext
from infixexpr.config import STRICT_ENV_VAR


@pytest.fixture(autouse=True)
def _clear_strict_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep INFIXEXPR_STRICT from the outer environment out of tests."""
    monkeypatch.delenv(STRICT_ENV_VAR, raising=False)


@pytest.fixture
def empty_context() -> ExpressionContext:
    return ExpressionContext()


@pytest.fixture
def pricing_context() -> ExpressionContext:
    """Return a context with a few typical constants."""
    return ExpressionContext({"price": 100, "tax_rate": "0.2", "discount": 15.5})
