"""
Constant and function registry for SciCalc.

The registry is the lookup table the lexer and evaluator query by name. It is
built once, never mutated, and safe to share between threads.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType

from .errors import DomainError

FunctionImpl = Callable[[Sequence[float]], float]


@dataclass(frozen=True)
class FunctionSpec:
    """A built-in function with its arity constraint."""

    name: str
    min_args: int
    max_args: int
    impl: FunctionImpl
    summary: str = ""

    def accepts(self, count: int) -> bool:
        """Whether *count* arguments satisfy the arity constraint."""
        return self.min_args <= count <= self.max_args

    @property
    def signature(self) -> str:
        """Human-readable arity, e.g. '1' or '1-2'."""
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args}-{self.max_args}"


@dataclass(frozen=True, eq=False)
class Registry:
    """Immutable name -> constant / function lookup."""

    constants: Mapping[str, float] = field(default_factory=dict)
    functions: Mapping[str, FunctionSpec] = field(default_factory=dict)

    def __post_init__(self) -> None:
        overlap = set(self.constants) & set(self.functions)
        if overlap:
            raise ValueError(f"Names registered as both constant and function: {sorted(overlap)}")
        object.__setattr__(self, "constants", MappingProxyType(dict(self.constants)))
        object.__setattr__(self, "functions", MappingProxyType(dict(self.functions)))

    def is_constant(self, name: str) -> bool:
        return name in self.constants

    def constant_value(self, name: str) -> float:
        """Value of a registered constant. Caller checks is_constant first."""
        return self.constants[name]

    def is_function(self, name: str) -> bool:
        return name in self.functions

    def function_arity(self, name: str) -> tuple[int, int]:
        """Inclusive (min, max) argument count of a registered function."""
        spec = self.functions[name]
        return spec.min_args, spec.max_args

    def invoke_function(self, name: str, args: Sequence[float]) -> float:
        """Call a registered function.

        The caller is responsible for checking the arity first.

        Raises:
            DomainError: If an argument lies outside the function's domain.
        """
        return self.functions[name].impl(args)

    def with_constants(self, extra: Mapping[str, float]) -> Registry:
        """Return a new registry with *extra* constants added."""
        clashes = sorted(n for n in extra if n in self.constants or n in self.functions)
        if clashes:
            raise ValueError(f"Names already registered: {clashes}")
        return Registry(
            constants={**self.constants, **{k: float(v) for k, v in extra.items()}},
            functions=self.functions,
        )


# ---------------------------------------------------------------------------
# Power semantics shared by the '^' operator and pow()
# ---------------------------------------------------------------------------


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value.is_integer() and abs(value) % 2 == 1


def power(base: float, exponent: float) -> float:
    """Raise *base* to *exponent* with C ``pow`` semantics.

    Overflow yields +/-inf and domain failures yield inf or nan instead of
    raising, so '^' never rejects a result.
    """
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        # zero to a negative power, or a negative base to a fractional power
        if base == 0.0:
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


# ---------------------------------------------------------------------------
# Built-in functions
# ---------------------------------------------------------------------------


def _math1(name: str, fn: Callable[[float], float]) -> FunctionImpl:
    """Wrap a one-argument math function, mapping math errors to DomainError."""

    def impl(args: Sequence[float]) -> float:
        try:
            return fn(args[0])
        except OverflowError:
            return math.inf
        except ValueError as e:
            raise DomainError(name, f"argument {args[0]!r} is outside the domain") from e

    return impl


def _log10(args: Sequence[float]) -> float:
    if args[0] <= 0:
        raise DomainError("log", "argument must be greater than 0")
    return math.log10(args[0])


def _ln(args: Sequence[float]) -> float:
    if args[0] <= 0:
        raise DomainError("ln", "argument must be greater than 0")
    return math.log(args[0])


def _sqrt(args: Sequence[float]) -> float:
    if args[0] < 0:
        raise DomainError("sqrt", "argument must not be negative")
    return math.sqrt(args[0])


def _pow(args: Sequence[float]) -> float:
    return power(args[0], args[1])


def _round(args: Sequence[float]) -> float:
    ndigits = args[1] if len(args) > 1 else 0.0
    if not ndigits.is_integer():
        raise DomainError("round", "number of digits must be an integer")
    return float(round(args[0], int(ndigits)))


_BUILTIN_CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}

_BUILTIN_FUNCTIONS: tuple[FunctionSpec, ...] = (
    FunctionSpec("sin", 1, 1, _math1("sin", math.sin), "Sine (radians)"),
    FunctionSpec("cos", 1, 1, _math1("cos", math.cos), "Cosine (radians)"),
    FunctionSpec("tan", 1, 1, _math1("tan", math.tan), "Tangent (radians)"),
    FunctionSpec("log", 1, 1, _log10, "Base-10 logarithm"),
    FunctionSpec("ln", 1, 1, _ln, "Natural logarithm"),
    FunctionSpec("exp", 1, 1, _math1("exp", math.exp), "e raised to x"),
    FunctionSpec("sqrt", 1, 1, _sqrt, "Square root"),
    FunctionSpec("abs", 1, 1, _math1("abs", math.fabs), "Absolute value"),
    FunctionSpec("pow", 2, 2, _pow, "x raised to y"),
    FunctionSpec("round", 1, 2, _round, "Round x to n decimal places (default 0)"),
)


@lru_cache(maxsize=1)
def default_registry() -> Registry:
    """The process-wide built-in registry, built on first use."""
    return Registry(
        constants=_BUILTIN_CONSTANTS,
        functions={spec.name: spec for spec in _BUILTIN_FUNCTIONS},
    )
