"""
Single entry point for evaluating expression text.

Runs lex -> parse -> evaluate. Any stage's failure surfaces as a CalcError
whose ``kind`` names the stage; no state is kept between calls.
"""

from __future__ import annotations

import logging

from scicalc.core.errors import CalcError
from scicalc.core.expression_lang.evaluator import evaluate
from scicalc.core.expression_lang.parser import parse_expr
from scicalc.core.manifest import EngineConfig
from scicalc.core.registry import Registry, default_registry

logger = logging.getLogger(__name__)


def evaluate_expression(
    text: str,
    registry: Registry | None = None,
    config: EngineConfig | None = None,
) -> float:
    """Evaluate an arithmetic expression string.

    Args:
        text: Expression such as "2 + 3 * 4" or "sin(pi / 2)".
        registry: Constants and functions. Defaults to the built-ins.
        config: Engine limits and grammar options.

    Returns:
        The numeric result.

    Raises:
        CalcError: ExpressionTokenError, ExpressionParseError or
            ExpressionEvalError, depending on the failing stage.
    """
    registry = registry or default_registry()
    config = config or EngineConfig()
    logger.debug("Evaluating %r", text)
    try:
        expr = parse_expr(text, registry, config)
        result = evaluate(expr, registry, config.max_tree_depth)
    except CalcError as e:
        logger.debug("Evaluation of %r failed (%s): %s", text, e.kind, e.message)
        raise
    logger.debug("%r = %r", text, result)
    return result
