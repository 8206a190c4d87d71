"""
SciCalc - a scientific calculator expression engine.

Lexes, parses, and evaluates single arithmetic expressions with named
constants and built-in math functions.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core import ir
from .core.errors import (
    CalcError,
    ErrorKind,
    ExpressionEvalError,
    ExpressionParseError,
    ExpressionTokenError,
)
from .core.expression_lang import evaluate, evaluate_expression, parse_expr, tokenize
from .core.registry import Registry, default_registry


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    # In editable mode, read directly from pyproject.toml for live updates
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    # Fall back to installed metadata
    try:
        return _metadata_version("scicalc")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "CalcError",
    "ErrorKind",
    "ExpressionEvalError",
    "ExpressionParseError",
    "ExpressionTokenError",
    "Registry",
    "default_registry",
    "evaluate",
    "evaluate_expression",
    "parse_expr",
    "tokenize",
]
