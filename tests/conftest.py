"""Shared pytest fixtures for SciCalc tests."""

import math
from pathlib import Path

import pytest

from scicalc.core.registry import FunctionSpec, Registry, default_registry


@pytest.fixture
def registry() -> Registry:
    """Return the built-in registry."""
    return default_registry()


@pytest.fixture
def tau_registry(registry: Registry) -> Registry:
    """Return the built-in registry extended with tau."""
    return registry.with_constants({"tau": 2 * math.pi})


@pytest.fixture
def probe_registry() -> tuple[Registry, list[list[float]]]:
    """Return a registry whose 'probe' function records every argument list it receives."""
    calls: list[list[float]] = []

    def probe(args):
        calls.append(list(args))
        return sum(args)

    reg = Registry(
        constants={"one": 1.0},
        functions={"probe": FunctionSpec("probe", 0, 5, probe, "Records its arguments")},
    )
    return reg, calls


@pytest.fixture
def write_config(tmp_path: Path):
    """Return a helper that writes scicalc.toml into tmp_path."""

    def _write(content: str, directory: Path | None = None) -> Path:
        target = (directory or tmp_path) / "scicalc.toml"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    return _write
