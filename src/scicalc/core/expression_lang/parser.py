"""
Recursive descent parser for SciCalc expressions.

Default grammar (precedence low to high):
    expression → term (("+"|"-") term)*
    term       → factor (("*"|"/"|"^") factor)*
    factor     → NUMBER
               | CONSTANT
               | FUNCTION "(" (expression ("," expression)*)? ")"
               | ("+"|"-") factor
               | "(" expression ")"

"*", "/" and "^" share one tier and associate left-to-right, so "2^3*2" is
(2^3)*2. With ``conventional_power`` enabled, "^" moves to its own tier
above "*" and "/" and associates right-to-left:
    term       → power (("*"|"/") power)*
    power      → factor ("^" power)?
"""

from __future__ import annotations

from scicalc.core.errors import ExpressionParseError, make_parse_error
from scicalc.core.expression_lang.tokenizer import Lexer, Token, TokenKind
from scicalc.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    ConstantRef,
    Expr,
    FuncCall,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
)
from scicalc.core.manifest import EngineConfig
from scicalc.core.registry import Registry


class _Parser:
    """Recursive descent parser over a pull-based lexer."""

    def __init__(self, lexer: Lexer, config: EngineConfig) -> None:
        self.lexer = lexer
        self.source = lexer.source
        self.max_depth = config.max_nesting_depth
        self.conventional_power = config.conventional_power
        self.depth = 0
        self.current: Token = lexer.next_token()

    def advance(self) -> Token:
        tok = self.current
        if tok.kind != TokenKind.END:
            self.current = self.lexer.next_token()
        return tok

    def at_operator(self, *symbols: str) -> bool:
        return self.current.kind == TokenKind.OPERATOR and self.current.value in symbols

    def error(self, message: str) -> ExpressionParseError:
        return make_parse_error(message, self.source, self.current.pos)

    def enter(self) -> None:
        """Descend one nesting level."""
        self.depth += 1
        if self.depth > self.max_depth:
            raise self.error(f"Expression nested too deeply (limit {self.max_depth})")

    def leave(self) -> None:
        self.depth -= 1

    # -- Grammar rules --

    def parse_expression(self) -> Expr:
        """term (('+' | '-') term)*"""
        left = self.parse_term()
        while self.at_operator("+", "-"):
            op = BinaryOp(self.advance().value)
            right = self.parse_term()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_term(self) -> Expr:
        """factor (('*' | '/' | '^') factor)*"""
        if self.conventional_power:
            operand, symbols = self.parse_power, ("*", "/")
        else:
            operand, symbols = self.parse_factor, ("*", "/", "^")

        left = operand()
        while self.at_operator(*symbols):
            op = BinaryOp(self.advance().value)
            right = operand()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_power(self) -> Expr:
        """factor ('^' power)?"""
        base = self.parse_factor()
        if not self.at_operator("^"):
            return base
        self.advance()
        self.enter()
        try:
            exponent = self.parse_power()
        finally:
            self.leave()
        return BinaryExpr(op=BinaryOp.POW, left=base, right=exponent)

    def parse_factor(self) -> Expr:
        """NUMBER | CONSTANT | func_call | ('+'|'-') factor | '(' expression ')'"""
        tok = self.current

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            assert tok.number is not None
            return NumberLiteral(value=tok.number)

        if tok.kind == TokenKind.CONSTANT:
            self.advance()
            return ConstantRef(name=tok.value)

        if tok.kind == TokenKind.FUNCTION:
            return self._parse_func_call()

        if self.at_operator("+", "-"):
            self.advance()
            self.enter()
            try:
                operand = self.parse_factor()
            finally:
                self.leave()
            return UnaryExpr(op=UnaryOp(tok.value), operand=operand)

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            self.enter()
            try:
                expr = self.parse_expression()
            finally:
                self.leave()
            if self.current.kind != TokenKind.RPAREN:
                raise self.error(f"Expected ')' to close '(' at position {tok.pos}")
            self.advance()
            return expr

        if tok.kind == TokenKind.END:
            raise self.error("Unexpected end of expression")

        raise self.error(f"Unexpected token: {tok.value!r}")

    def _parse_func_call(self) -> FuncCall:
        """FUNCTION '(' (expression (',' expression)*)? ')'"""
        name_tok = self.advance()
        name = name_tok.value
        if self.current.kind != TokenKind.LPAREN:
            raise self.error(f"Expected '(' after function {name!r}")
        self.advance()

        args: list[Expr] = []
        self.enter()
        try:
            if self.current.kind != TokenKind.RPAREN:
                args.append(self.parse_expression())
                while self.current.kind == TokenKind.COMMA:
                    self.advance()
                    args.append(self.parse_expression())
        finally:
            self.leave()

        if self.current.kind != TokenKind.RPAREN:
            raise self.error(f"Expected ')' to close arguments of {name!r}")
        self.advance()
        return FuncCall(name=name, args=tuple(args))


def parse_expr(
    source: str,
    registry: Registry | None = None,
    config: EngineConfig | None = None,
) -> Expr:
    """Parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "sqrt(16) + log(100)")
        registry: Names the lexer may resolve. Defaults to the built-ins.
        config: Engine limits and grammar options.

    Returns:
        Parsed expression AST.

    Raises:
        ExpressionParseError: If the expression is invalid.
        ExpressionTokenError: If tokenization fails.
    """
    config = config or EngineConfig()
    lexer = Lexer(source, registry, config.name_max_length)
    parser = _Parser(lexer, config)
    try:
        expr = parser.parse_expression()
    except RecursionError:
        # max_nesting_depth set above what the interpreter stack can hold
        raise parser.error(
            f"Expression nested too deeply to parse (limit {config.max_nesting_depth})"
        ) from None

    # Ensure all tokens consumed
    if parser.current.kind != TokenKind.END:
        raise parser.error(f"Unexpected token after expression: {parser.current.value!r}")

    return expr
