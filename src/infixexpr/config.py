"""
Configuration for infixexpr.

Two sources, in the same spirit as a project manifest plus an environment
switch:

- A TOML file with optional ``[evaluator]`` and ``[constants]`` tables:

      [evaluator]
      strict = true
      pattern = '^(\\d+|[a-z]+|[-+*/()]|\\s+)'

      [constants]
      pi = 3.14159
      tax_rate = "0.2"

- The ``INFIXEXPR_STRICT`` environment variable, consulted when strict
  grammar checking is not set explicitly.

Usage:
    from infixexpr.config import load_config

    config = load_config(Path("infixexpr.toml"))
    expr = InfixExpression("pi * r * r", config=config)
    expr.evaluate(config.build_context())
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from infixexpr.context import ExpressionContext, to_number
from infixexpr.errors import ConfigError, ExpressionError
from infixexpr.scanner import compile_pattern

logger = logging.getLogger(__name__)

STRICT_ENV_VAR = "INFIXEXPR_STRICT"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class EvaluatorConfig:
    """Evaluator behavior."""

    strict: bool = False  # reject malformed operand/operator sequences at parse time
    pattern: str | None = None  # custom token regex; group 1 is the token text


@dataclass
class ProjectConfig:
    """Everything loaded from a configuration file."""

    evaluator: EvaluatorConfig = field(default_factory=EvaluatorConfig)
    constants: dict[str, float] = field(default_factory=dict)

    def build_context(self) -> ExpressionContext:
        return ExpressionContext(self.constants)


def load_config(path: Path) -> ProjectConfig:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    return parse_config(data, source=str(path))


def parse_config(data: dict[str, Any], source: str = "<config>") -> ProjectConfig:
    """Build a ProjectConfig from already-parsed TOML data."""
    evaluator_data = data.get("evaluator", {})
    constants_data = data.get("constants", {})
    if not isinstance(evaluator_data, dict):
        raise ConfigError(f"{source}: [evaluator] must be a table")
    if not isinstance(constants_data, dict):
        raise ConfigError(f"{source}: [constants] must be a table")

    evaluator = EvaluatorConfig()
    for key, value in evaluator_data.items():
        if key == "strict":
            if not isinstance(value, bool):
                raise ConfigError(f"{source}: evaluator.strict must be a boolean")
            evaluator.strict = value
        elif key == "pattern":
            if not isinstance(value, str):
                raise ConfigError(f"{source}: evaluator.pattern must be a string")
            try:
                compile_pattern(value)
            except ValueError as e:
                raise ConfigError(f"{source}: evaluator.pattern: {e}") from e
            evaluator.pattern = value
        else:
            logger.warning("Ignoring unknown evaluator setting '%s' in %s", key, source)

    constants: dict[str, float] = {}
    for name, value in constants_data.items():
        try:
            constants[name] = to_number(value)
        except ExpressionError as e:
            raise ConfigError(f"{source}: constant '{name}': {e.message}") from e

    return ProjectConfig(evaluator=evaluator, constants=constants)


def get_strict_env() -> bool | None:
    """Read INFIXEXPR_STRICT.

    Returns:
        True/False when set to a recognized value, None when unset or invalid.
    """
    env_value = os.environ.get(STRICT_ENV_VAR, "").lower().strip()
    if env_value in _TRUE_VALUES:
        return True
    if env_value in _FALSE_VALUES:
        return False
    if env_value:
        logger.warning(
            "Unknown %s value '%s'. Valid values: %s. Ignoring.",
            STRICT_ENV_VAR,
            env_value,
            ", ".join(sorted(_TRUE_VALUES | _FALSE_VALUES)),
        )
    return None


def resolve_strict(override: bool | None = None) -> bool:
    """Decide whether strict grammar checking applies.

    Resolution order:
    1. ``override`` if explicitly True/False
    2. the INFIXEXPR_STRICT environment variable
    3. False
    """
    if override is not None:
        return override
    env = get_strict_env()
    return env if env is not None else False
