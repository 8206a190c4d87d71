"""
Error types for SciCalc expression lexing, parsing, and evaluation.

Every stage raises a subclass of CalcError. The class-level ``kind`` tells the
caller which stage failed without an isinstance ladder.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    """Which stage of the pipeline produced an error."""

    LEXICAL = "lexical"
    SYNTAX = "syntax"
    EVALUATION = "evaluation"
    CONFIG = "config"


class CalcError(Exception):
    """Base exception for all SciCalc errors."""

    kind: ErrorKind = ErrorKind.EVALUATION

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message

    @property
    def pos(self) -> int | None:
        """Character offset of the offending input, if known."""
        return self.context.pos if self.context else None


class ExpressionTokenError(CalcError):
    """
    Raised when the lexer cannot produce a token.

    Examples:
    - Unknown character ("2 $ 3")
    - Malformed number ("1.2.3")
    - Unknown identifier ("foo(1)")
    """

    kind = ErrorKind.LEXICAL


class ExpressionParseError(CalcError):
    """
    Raised when the token stream does not match the grammar.

    Examples:
    - Unexpected token
    - Missing '(' or ')'
    - Trailing input after a complete expression
    - Nesting deeper than the configured limit
    """

    kind = ErrorKind.SYNTAX


class ExpressionEvalError(CalcError):
    """
    Raised when a parsed expression cannot be evaluated.

    Examples:
    - Unknown constant or function
    - Division by zero
    """

    kind = ErrorKind.EVALUATION


class ArityError(ExpressionEvalError):
    """A function was called with an unsupported number of arguments."""

    def __init__(self, name: str, given: int, min_args: int, max_args: int):
        self.name = name
        self.given = given
        self.min_args = min_args
        self.max_args = max_args
        if min_args == max_args:
            expected = f"exactly {min_args}"
        else:
            expected = f"{min_args} to {max_args}"
        plural = "" if max_args == 1 else "s"
        super().__init__(f"{name}() takes {expected} argument{plural}, got {given}")


class DomainError(ExpressionEvalError):
    """A function argument lies outside the function's mathematical domain."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(f"{name}(): {message}")


class ConfigError(CalcError):
    """Raised when scicalc.toml holds an invalid value."""

    kind = ErrorKind.CONFIG


@dataclass
class ErrorContext:
    """
    Location of an error within the expression source.

    Attributes:
        source: The full expression text
        pos: Character offset (0-indexed) of the offending input
    """

    source: str
    pos: int

    def format(self) -> str:
        """
        Format the source with a caret marker under the error position.

        Returns:
            Two lines, e.g. "  2 + $" and "      ^"
        """
        line = self.source.replace("\n", " ").replace("\r", " ").replace("\t", " ")
        marker = " " * min(self.pos, len(line)) + "^"
        return f"  {line}\n  {marker}"


def make_token_error(message: str, source: str, pos: int) -> ExpressionTokenError:
    """Helper to create an ExpressionTokenError with context attached."""
    return ExpressionTokenError(message, ErrorContext(source=source, pos=pos))


def make_parse_error(message: str, source: str, pos: int) -> ExpressionParseError:
    """Helper to create an ExpressionParseError with context attached."""
    return ExpressionParseError(message, ErrorContext(source=source, pos=pos))
