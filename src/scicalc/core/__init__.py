"""Core SciCalc functionality: expression IR, lexer, parser, evaluator, registry, configuration."""

from . import ir
from .errors import (
    ArityError,
    CalcError,
    ConfigError,
    DomainError,
    ErrorContext,
    ErrorKind,
    ExpressionEvalError,
    ExpressionParseError,
    ExpressionTokenError,
)
from .manifest import CalcConfig, DisplayConfig, EngineConfig, find_config, load_config
from .registry import FunctionSpec, Registry, default_registry

__all__ = [
    "ir",
    "ArityError",
    "CalcError",
    "ConfigError",
    "DomainError",
    "ErrorContext",
    "ErrorKind",
    "ExpressionEvalError",
    "ExpressionParseError",
    "ExpressionTokenError",
    "CalcConfig",
    "DisplayConfig",
    "EngineConfig",
    "find_config",
    "load_config",
    "FunctionSpec",
    "Registry",
    "default_registry",
]
