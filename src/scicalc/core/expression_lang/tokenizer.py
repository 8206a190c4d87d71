"""
Tokenizer for SciCalc expressions.

Converts an expression string into typed tokens, one at a time, on demand.
Identifiers are classified against the registry while lexing, so an unknown
name is a lexical error rather than a parse or evaluation error.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from enum import StrEnum, auto

from scicalc.core.errors import make_token_error
from scicalc.core.registry import Registry, default_registry

DEFAULT_NAME_MAX_LENGTH = 31


class TokenKind(StrEnum):
    """Token types for the expression language."""

    NUMBER = auto()
    OPERATOR = auto()
    FUNCTION = auto()
    CONSTANT = auto()
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()

    # End of input
    END = auto()


class Token:
    """A single token from the expression lexer."""

    __slots__ = ("kind", "value", "pos", "number")

    def __init__(self, kind: TokenKind, value: str, pos: int, number: float | None = None) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos
        self.number = number

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


_WHITESPACE = " \t\n\r"
_NUMBER_START = "0123456789."
_OPERATORS = "+-*/^"
_PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}

# Digits and dots, validated by float() afterwards
_NUMBER_RE = re.compile(r"[0-9.]+")
# Identifier: ASCII letter followed by ASCII alphanumerics
_IDENT_RE = re.compile(r"[A-Za-z][A-Za-z0-9]*")


class Lexer:
    """Pull-based lexer over a single expression string."""

    def __init__(
        self,
        source: str,
        registry: Registry | None = None,
        name_max_length: int = DEFAULT_NAME_MAX_LENGTH,
    ) -> None:
        self.source = source
        self.registry = registry or default_registry()
        self.name_max_length = name_max_length
        self.pos = 0

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including END."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.kind == TokenKind.END:
                return

    def next_token(self) -> Token:
        """Scan and return the next token, advancing the cursor.

        Raises:
            ExpressionTokenError: On an unknown character, a malformed
                number, or an identifier the registry does not know.
        """
        source = self.source
        n = len(source)

        while self.pos < n and source[self.pos] in _WHITESPACE:
            self.pos += 1

        if self.pos >= n:
            return Token(TokenKind.END, "", n)

        start = self.pos
        c = source[start]

        if c in _NUMBER_START:
            m = _NUMBER_RE.match(source, start)
            assert m is not None
            text = m.group(0)
            self.pos = m.end()
            try:
                number = float(text)
            except ValueError:
                raise make_token_error(f"Malformed number: {text!r}", source, start) from None
            return Token(TokenKind.NUMBER, text, start, number)

        if c.isascii() and c.isalpha():
            m = _IDENT_RE.match(source, start)
            assert m is not None
            self.pos = m.end()
            name = m.group(0)[: self.name_max_length]
            if self.registry.is_constant(name):
                return Token(TokenKind.CONSTANT, name, start)
            if self.registry.is_function(name):
                return Token(TokenKind.FUNCTION, name, start)
            raise make_token_error(f"Unknown identifier: {name!r}", source, start)

        if c in _OPERATORS:
            self.pos += 1
            return Token(TokenKind.OPERATOR, c, start)

        if c in _PUNCTUATION:
            self.pos += 1
            return Token(_PUNCTUATION[c], c, start)

        raise make_token_error(f"Unknown character: {c!r}", source, start)


def tokenize(
    source: str,
    registry: Registry | None = None,
    name_max_length: int = DEFAULT_NAME_MAX_LENGTH,
) -> list[Token]:
    """Tokenize an expression string into a list of tokens ending with END."""
    return list(Lexer(source, registry, name_max_length))
