"""Tests for scicalc.toml configuration loading."""

from __future__ import annotations

import logging
import math
from pathlib import Path

import pytest

from scicalc.core.errors import ConfigError, ErrorKind
from scicalc.core.manifest import (
    CalcConfig,
    EngineConfig,
    default_config,
    find_config,
    load_config,
)
from scicalc.core.registry import default_registry


class TestLoadConfig:
    def test_empty_file_gives_defaults(self, write_config) -> None:
        config = load_config(write_config(""))
        assert config.engine == EngineConfig()
        assert config.display.precision == 10
        assert config.constants == {}

    def test_full_file(self, write_config) -> None:
        path = write_config(
            """
[engine]
max_nesting_depth = 20
max_tree_depth = 50
name_max_length = 8
conventional_power = true

[display]
precision = 4

[constants]
tau = 6.283185307179586
g = 9
"""
        )
        config = load_config(path)
        assert config.engine == EngineConfig(
            max_nesting_depth=20,
            max_tree_depth=50,
            name_max_length=8,
            conventional_power=True,
        )
        assert config.display.precision == 4
        assert config.constants == {"tau": 6.283185307179586, "g": 9.0}
        assert config.path == path

    @pytest.mark.parametrize(
        "content, match",
        [
            ("[display]\nprecision = 0", "display.precision"),
            ('[engine]\nmax_nesting_depth = "deep"', "engine.max_nesting_depth"),
            ("[engine]\nmax_tree_depth = true", "engine.max_tree_depth"),
            ('[engine]\nconventional_power = "yes"', "engine.conventional_power"),
            ('[constants]\ntau = "six"', "constants.tau"),
            ("[constants]\nmy_const = 1.0", "constants.my_const"),
            ("[engine\n", "scicalc.toml"),
            ("engine = 3", r"\[engine\] must be a table"),
            ("[engine]\nmax_nesting_depth = 100000", "engine.max_nesting_depth must be at most 150"),
            ("[engine]\nmax_tree_depth = 301", "engine.max_tree_depth must be at most 300"),
        ],
    )
    def test_invalid_values(self, write_config, content: str, match: str) -> None:
        with pytest.raises(ConfigError, match=match) as exc:
            load_config(write_config(content))
        assert exc.value.kind == ErrorKind.CONFIG

    def test_constant_longer_than_name_cap(self, write_config) -> None:
        path = write_config("[engine]\nname_max_length = 3\n\n[constants]\nfour = 4.0\n")
        with pytest.raises(ConfigError, match="at most 3 characters"):
            load_config(path)

    def test_shadowing_constant_skipped(self, write_config, caplog: pytest.LogCaptureFixture) -> None:
        path = write_config("[constants]\npi = 3.0\nsqrt = 2.0\ntau = 6.28\n")
        with caplog.at_level(logging.WARNING, logger="scicalc.core.manifest"):
            config = load_config(path)
        assert config.constants == {"tau": 6.28}
        assert "Ignoring constant 'pi'" in caplog.text
        assert "Ignoring constant 'sqrt'" in caplog.text

    def test_depth_limits_at_ceiling(self, write_config) -> None:
        path = write_config("[engine]\nmax_nesting_depth = 150\nmax_tree_depth = 300\n")
        config = load_config(path)
        assert config.engine.max_nesting_depth == 150
        assert config.engine.max_tree_depth == 300

    def test_not_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "scicalc.toml"
        path.write_bytes(b"[constants]\ntau = 6.28 # \xff\xfe\n")
        with pytest.raises(ConfigError, match="cannot read file"):
            load_config(path)

    def test_unreadable_path(self, tmp_path: Path) -> None:
        directory = tmp_path / "scicalc.toml"
        directory.mkdir()
        with pytest.raises(ConfigError, match="cannot read file"):
            load_config(directory)


class TestBuildRegistry:
    def test_default_config_uses_builtins(self) -> None:
        assert default_config().build_registry() is default_registry()

    def test_configured_constants_added(self) -> None:
        registry = CalcConfig(constants={"tau": 2 * math.pi}).build_registry()
        assert registry.constant_value("tau") == 2 * math.pi
        assert registry.constant_value("pi") == math.pi


class TestFindConfig:
    def test_found_in_start_directory(self, tmp_path: Path, write_config) -> None:
        path = write_config("")
        assert find_config(tmp_path) == path.resolve()

    def test_found_in_parent(self, tmp_path: Path, write_config) -> None:
        path = write_config("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == path.resolve()

    def test_nearest_wins(self, tmp_path: Path, write_config) -> None:
        write_config("")
        inner = write_config("", directory=tmp_path / "inner")
        assert find_config(tmp_path / "inner") == inner.resolve()

    def test_defaults_to_cwd(self, tmp_path: Path, write_config, monkeypatch) -> None:
        path = write_config("")
        monkeypatch.chdir(tmp_path)
        assert find_config() == path.resolve()
