"""
Scanner for infix expressions.

Converts an expression string into an ordered sequence of classified tokens
in a single forward pass. Whitespace is matched and dropped; ``+``/``-`` are
reclassified as unary when they follow an operator, an opening parenthesis,
or the start of input.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from infixexpr.errors import SNIPPET_LENGTH, syntax_error
from infixexpr.tokens import SYMBOLS, UNARY_FORMS, Token, TokenKind, is_operator

logger = logging.getLogger(__name__)

# Group 1 is the token text: operator/paren | decimal | integer | identifier | whitespace
DEFAULT_PATTERN = re.compile(
    r"^([\+\-\*\/\(\)]|\d*\.\d+|\d+\.\d*|\d+|[a-z_A-Z]+[a-z_A-Z0-9]*|[ \t]+)"
)

# Finite numeric literals only; "inf" and "nan" stay identifiers
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def compile_pattern(pattern: str | re.Pattern[str] | None) -> re.Pattern[str]:
    """Compile a custom token pattern, falling back to the default one.

    Raises:
        ValueError: If the pattern does not compile or has no capture group.
    """
    if pattern is None:
        return DEFAULT_PATTERN
    try:
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    except re.error as e:
        raise ValueError(f"Invalid token pattern {pattern!r}: {e}") from e
    if compiled.groups < 1:
        raise ValueError("Token pattern must capture the token text in group 1")
    return compiled


def is_numeric_literal(text: str) -> bool:
    return _NUMBER_RE.fullmatch(text) is not None


class Scanner:
    """
    Tokenizes an expression on construction and yields its tokens once.

    Usage:
        scanner = Scanner("-a * (2 + b)")
        tokens = list(scanner)
        scanner.identifiers  # ("a", "b")
    """

    def __init__(self, source: str, pattern: str | re.Pattern[str] | None = None) -> None:
        self.source = source
        self.pattern = compile_pattern(pattern)
        self._identifiers: dict[str, None] = {}
        self._tokens = self._scan()
        self._iter = iter(self._tokens)
        logger.debug("Scanned %d tokens from %r", len(self._tokens), source)

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        return next(self._iter)

    @property
    def tokens(self) -> tuple[Token, ...]:
        """All scanned tokens, regardless of how many have been consumed."""
        return self._tokens

    @property
    def identifiers(self) -> tuple[str, ...]:
        """Distinct identifier names, in order of first appearance."""
        return tuple(self._identifiers)

    def _scan(self) -> tuple[Token, ...]:
        tokens: list[Token] = []
        prev: Token | None = None
        rest = self.source
        pos = 0

        while rest.strip():
            m = self.pattern.match(rest)
            if m is None:
                raise syntax_error(
                    f'Unrecognized input "{rest[:SNIPPET_LENGTH]}"', self.source, pos
                )

            text = m.group(1)
            if not text:
                raise syntax_error(f'Empty match at "{rest[:SNIPPET_LENGTH]}"', self.source, pos)

            start = pos + len(text) - len(text.lstrip())
            rest = rest[len(text) :]
            pos += len(text)

            value = text.strip()
            if not value:
                continue

            if is_numeric_literal(value):
                prev = Token(kind=TokenKind.NUMBER, value=float(value), pos=start)
                tokens.append(prev)
                continue

            kind = SYMBOLS.get(value, TokenKind.IDENT)
            if kind in UNARY_FORMS and _starts_operand(prev):
                kind = UNARY_FORMS[kind]
            elif kind == TokenKind.RPAREN and prev is not None and prev.kind == TokenKind.LPAREN:
                snippet = self.source[prev.pos : prev.pos + SNIPPET_LENGTH]
                raise syntax_error(f'Empty parentheses "{snippet}"', self.source, prev.pos)
            elif kind == TokenKind.IDENT:
                self._identifiers.setdefault(value)

            prev = Token(kind=kind, value=value, pos=start)
            tokens.append(prev)

        return tuple(tokens)


def _starts_operand(prev: Token | None) -> bool:
    """Whether a sign at this point prefixes an operand rather than joining two."""
    return prev is None or is_operator(prev) or prev.kind == TokenKind.LPAREN


def tokenize(source: str, pattern: str | re.Pattern[str] | None = None) -> list[Token]:
    """Tokenize an expression string into a list of tokens."""
    return list(Scanner(source, pattern))
