"""
SciCalc Intermediate Representation (IR) types.

The expression AST produced by the parser and consumed by the evaluator.
"""

from .expressions import (
    BinaryExpr,
    BinaryOp,
    ConstantRef,
    Expr,
    FuncCall,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
)

__all__ = [
    "BinaryExpr",
    "BinaryOp",
    "ConstantRef",
    "Expr",
    "FuncCall",
    "NumberLiteral",
    "UnaryExpr",
    "UnaryOp",
]
