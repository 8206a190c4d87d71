"""
SciCalc arithmetic expression language.

Lexer, parser, and evaluator for single arithmetic expressions over
numbers, named constants, and built-in functions.

Usage:
    from scicalc.core.expression_lang import evaluate_expression, parse_expr, evaluate

    evaluate_expression("sqrt(16) + log(100)")
    # 6.0

    expr = parse_expr("2 ^ 3 * 2")
    evaluate(expr)
    # 16.0
"""

from scicalc.core.expression_lang.engine import evaluate_expression
from scicalc.core.expression_lang.evaluator import evaluate
from scicalc.core.expression_lang.parser import parse_expr
from scicalc.core.expression_lang.tokenizer import Lexer, Token, TokenKind, tokenize

__all__ = [
    "Lexer",
    "Token",
    "TokenKind",
    "evaluate",
    "evaluate_expression",
    "parse_expr",
    "tokenize",
]
