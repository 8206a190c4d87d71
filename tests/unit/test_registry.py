"""Tests for the constant/function registry and power semantics."""

from __future__ import annotations

import dataclasses
import math

import pytest

from scicalc.core.errors import DomainError
from scicalc.core.registry import FunctionSpec, Registry, default_registry, power


class TestDefaultRegistry:
    def test_memoized(self) -> None:
        assert default_registry() is default_registry()

    def test_constants(self, registry: Registry) -> None:
        assert registry.is_constant("pi")
        assert registry.is_constant("e")
        assert not registry.is_constant("sin")
        assert registry.constant_value("pi") == math.pi
        assert registry.constant_value("e") == math.e

    def test_functions(self, registry: Registry) -> None:
        expected = {"sin", "cos", "tan", "log", "ln", "exp", "sqrt", "abs", "pow", "round"}
        assert set(registry.functions) == expected
        assert all(registry.is_function(name) for name in expected)
        assert not registry.is_function("pi")

    def test_arity(self, registry: Registry) -> None:
        assert registry.function_arity("sin") == (1, 1)
        assert registry.function_arity("pow") == (2, 2)
        assert registry.function_arity("round") == (1, 2)

    def test_invoke(self, registry: Registry) -> None:
        assert registry.invoke_function("sqrt", [16.0]) == 4.0
        assert registry.invoke_function("log", [1000.0]) == pytest.approx(3.0)
        assert registry.invoke_function("abs", [-2.5]) == 2.5
        assert registry.invoke_function("pow", [3.0, 2.0]) == 9.0
        assert registry.invoke_function("round", [1.25, 1.0]) == pytest.approx(1.2)

    def test_domain_errors(self, registry: Registry) -> None:
        with pytest.raises(DomainError, match="sqrt"):
            registry.invoke_function("sqrt", [-1.0])
        with pytest.raises(DomainError, match="greater than 0"):
            registry.invoke_function("ln", [0.0])
        with pytest.raises(DomainError, match="sin"):
            registry.invoke_function("sin", [math.inf])

    def test_nan_passes_through(self, registry: Registry) -> None:
        assert math.isnan(registry.invoke_function("sqrt", [math.nan]))
        assert math.isnan(registry.invoke_function("log", [math.nan]))


class TestRegistryImmutability:
    def test_tables_are_read_only(self, registry: Registry) -> None:
        with pytest.raises(TypeError):
            registry.constants["tau"] = 6.28  # type: ignore[index]
        with pytest.raises(TypeError):
            registry.functions["sin"] = registry.functions["cos"]  # type: ignore[index]

    def test_fields_are_frozen(self, registry: Registry) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            registry.constants = {}  # type: ignore[misc]

    def test_source_mapping_copied(self) -> None:
        source = {"k": 1.0}
        reg = Registry(constants=source)
        source["k"] = 2.0
        assert reg.constant_value("k") == 1.0

    def test_with_constants_returns_new_registry(self, registry: Registry) -> None:
        extended = registry.with_constants({"tau": 2 * math.pi})
        assert extended is not registry
        assert extended.is_constant("tau")
        assert extended.is_function("sin")
        assert not registry.is_constant("tau")

    def test_with_constants_rejects_clashes(self, registry: Registry) -> None:
        with pytest.raises(ValueError, match="pi"):
            registry.with_constants({"pi": 3.0})
        with pytest.raises(ValueError, match="sin"):
            registry.with_constants({"sin": 1.0})

    def test_name_cannot_be_both_kinds(self) -> None:
        spec = FunctionSpec("x", 1, 1, lambda args: args[0])
        with pytest.raises(ValueError, match="both constant and function"):
            Registry(constants={"x": 1.0}, functions={"x": spec})


class TestFunctionSpec:
    def test_accepts(self) -> None:
        spec = FunctionSpec("f", 1, 2, lambda args: 0.0)
        assert not spec.accepts(0)
        assert spec.accepts(1)
        assert spec.accepts(2)
        assert not spec.accepts(3)

    def test_signature(self, registry: Registry) -> None:
        assert registry.functions["sin"].signature == "1"
        assert registry.functions["round"].signature == "1-2"


class TestPower:
    def test_regular(self) -> None:
        assert power(2.0, 10.0) == 1024.0
        assert power(9.0, 0.5) == 3.0
        assert power(2.0, -2.0) == 0.25

    def test_zero_base_negative_exponent(self) -> None:
        assert power(0.0, -1.0) == math.inf
        assert power(-0.0, -1.0) == -math.inf
        assert power(-0.0, -2.0) == math.inf

    def test_negative_base_fractional_exponent(self) -> None:
        assert math.isnan(power(-8.0, 1.0 / 3.0))

    def test_overflow(self) -> None:
        assert power(10.0, 400.0) == math.inf
        assert power(-10.0, 401.0) == -math.inf
        assert power(-10.0, 400.0) == math.inf
