"""
Expression evaluator for SciCalc.

Evaluates expression AST nodes against a registry of constants and functions.
Pure evaluation with no I/O. Does NOT use Python's eval().
Children are evaluated before their parent; the first error aborts the walk.
The left spine of a binary chain is walked in a loop, so depth grows only
with real nesting: right operands, unary operands and call arguments.
"""

from __future__ import annotations

from dataclasses import dataclass

from scicalc.core.errors import ArityError, ExpressionEvalError
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
from scicalc.core.registry import Registry, default_registry, power

DEFAULT_MAX_DEPTH = 300


@dataclass(frozen=True)
class _Context:
    registry: Registry
    max_depth: int


def evaluate(
    expr: Expr,
    registry: Registry | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> float:
    """Evaluate an expression tree to a float.

    This is a safe tree-walking interpreter. It does NOT use Python's
    eval(). Only the closed set of AST node types are handled.

    Args:
        expr: Parsed expression AST.
        registry: Constants and functions to resolve names against.
        max_depth: Deepest nesting the walk will descend into. A flat
            chain such as "1 + 2 + 3" does not count towards it.

    Returns:
        The computed value. NaN and infinities from '^' are passed through.

    Raises:
        ExpressionEvalError: If evaluation fails. ArityError and DomainError
            are the subclasses raised for bad function calls.
    """
    ctx = _Context(registry=registry or default_registry(), max_depth=max_depth)
    try:
        return _interpret(expr, ctx, 1)
    except RecursionError:
        # max_depth set above what the interpreter stack can hold
        raise ExpressionEvalError(
            f"Expression nested too deeply to evaluate (limit {max_depth})"
        ) from None


def _interpret(expr: Expr, ctx: _Context, depth: int) -> float:
    """Dispatch evaluation to the appropriate handler."""
    if depth > ctx.max_depth:
        raise ExpressionEvalError(f"Expression exceeds maximum depth of {ctx.max_depth}")

    if isinstance(expr, NumberLiteral):
        return expr.value

    if isinstance(expr, ConstantRef):
        if not ctx.registry.is_constant(expr.name):
            raise ExpressionEvalError(f"Unknown constant: {expr.name}")
        return ctx.registry.constant_value(expr.name)

    if isinstance(expr, BinaryExpr):
        return _interpret_binary(expr, ctx, depth)

    if isinstance(expr, UnaryExpr):
        return _interpret_unary(expr, ctx, depth)

    if isinstance(expr, FuncCall):
        return _interpret_func_call(expr, ctx, depth)

    raise ExpressionEvalError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_binary(expr: BinaryExpr, ctx: _Context, depth: int) -> float:
    """Evaluate a binary expression and any binary chain on its left spine."""
    spine: list[BinaryExpr] = [expr]
    while isinstance(spine[-1].left, BinaryExpr):
        spine.append(spine[-1].left)

    value = _interpret(spine[-1].left, ctx, depth + 1)
    for node in reversed(spine):
        right = _interpret(node.right, ctx, depth + 1)
        value = _apply_binary(node.op, value, right)
    return value


def _apply_binary(op: BinaryOp, left: float, right: float) -> float:
    if op == BinaryOp.ADD:
        return left + right
    if op == BinaryOp.SUB:
        return left - right
    if op == BinaryOp.MUL:
        return left * right
    if op == BinaryOp.DIV:
        if right == 0.0:
            raise ExpressionEvalError("Division by zero")
        return left / right
    if op == BinaryOp.POW:
        return power(left, right)

    raise ExpressionEvalError(f"Unknown binary op: {op}")


def _interpret_unary(expr: UnaryExpr, ctx: _Context, depth: int) -> float:
    """Evaluate a unary expression."""
    val = _interpret(expr.operand, ctx, depth + 1)
    if expr.op == UnaryOp.POS:
        return val
    if expr.op == UnaryOp.NEG:
        return -val
    raise ExpressionEvalError(f"Unknown unary op: {expr.op}")


def _interpret_func_call(expr: FuncCall, ctx: _Context, depth: int) -> float:
    """Evaluate a registry function call (closed set, no user-defined functions)."""
    args = [_interpret(a, ctx, depth + 1) for a in expr.args]

    name = expr.name
    if not ctx.registry.is_function(name):
        raise ExpressionEvalError(f"Unknown function: {name}()")

    min_args, max_args = ctx.registry.function_arity(name)
    if not min_args <= len(args) <= max_args:
        raise ArityError(name, len(args), min_args, max_args)

    return ctx.registry.invoke_function(name, args)
