"""
SciCalc configuration loaded from scicalc.toml.

Example scicalc.toml:

    [engine]
    max_nesting_depth = 100
    max_tree_depth = 300
    name_max_length = 31
    conventional_power = false

    [display]
    precision = 10

    [constants]
    tau = 6.283185307179586
"""

import logging
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .registry import Registry, default_registry

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "scicalc.toml"

_CONSTANT_NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9]*")

# Highest depth limits that fit the default interpreter recursion limit (1000).
# One nesting level costs the parser up to five frames and the evaluator three.
MAX_NESTING_DEPTH_CEILING = 150
MAX_TREE_DEPTH_CEILING = 300


# =============================================================================
# Engine Configuration
# =============================================================================


@dataclass(frozen=True)
class EngineConfig:
    """Limits and grammar options for parsing and evaluation."""

    max_nesting_depth: int = 100  # parens, unary signs, call arguments
    max_tree_depth: int = 300  # evaluator nesting bound; flat chains are free
    name_max_length: int = 31  # longer identifiers are truncated
    conventional_power: bool = False  # '^' binds tighter and right-associates


@dataclass(frozen=True)
class DisplayConfig:
    """How results are rendered by the CLI."""

    precision: int = 10  # significant digits, "%.10g"


@dataclass(frozen=True)
class CalcConfig:
    """Top-level configuration."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    constants: dict[str, float] = field(default_factory=dict)
    path: Path | None = None

    def build_registry(self) -> Registry:
        """The built-in registry extended with configured constants."""
        base = default_registry()
        if not self.constants:
            return base
        return base.with_constants(self.constants)


def default_config() -> CalcConfig:
    return CalcConfig()


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* looking for scicalc.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table")
    return section


def _positive_int(
    section: dict[str, Any], key: str, default: int, where: str, maximum: int | None = None
) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{where}.{key} must be a positive integer, got {value!r}")
    if maximum is not None and value > maximum:
        raise ConfigError(f"{where}.{key} must be at most {maximum}, got {value}")
    return value


def _parse_constants(data: dict[str, Any], engine: EngineConfig) -> dict[str, float]:
    builtins = default_registry()
    constants: dict[str, float] = {}
    for name, value in data.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"constants.{name} must be a number, got {value!r}")
        if not _CONSTANT_NAME_RE.fullmatch(name) or len(name) > engine.name_max_length:
            raise ConfigError(
                f"constants.{name}: names must be letters followed by letters or digits, "
                f"at most {engine.name_max_length} characters"
            )
        if builtins.is_constant(name) or builtins.is_function(name):
            logger.warning("Ignoring constant %r: it shadows a built-in name", name)
            continue
        constants[name] = float(value)
    return constants


def load_config(path: Path) -> CalcConfig:
    """Load and validate a scicalc.toml file.

    Raises:
        ConfigError: If the file cannot be read, is not valid TOML, or holds
            invalid values.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"{path}: cannot read file: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e

    engine_data = _section(data, "engine")
    display_data = _section(data, "display")
    constants_data = _section(data, "constants")

    conventional_power = engine_data.get("conventional_power", False)
    if not isinstance(conventional_power, bool):
        raise ConfigError(
            f"engine.conventional_power must be true or false, got {conventional_power!r}"
        )

    engine = EngineConfig(
        max_nesting_depth=_positive_int(
            engine_data, "max_nesting_depth", 100, "engine", MAX_NESTING_DEPTH_CEILING
        ),
        max_tree_depth=_positive_int(
            engine_data, "max_tree_depth", 300, "engine", MAX_TREE_DEPTH_CEILING
        ),
        name_max_length=_positive_int(engine_data, "name_max_length", 31, "engine"),
        conventional_power=conventional_power,
    )
    display = DisplayConfig(
        precision=_positive_int(display_data, "precision", 10, "display"),
    )

    config = CalcConfig(
        engine=engine,
        display=display,
        constants=_parse_constants(constants_data, engine),
        path=path,
    )
    logger.debug("Loaded configuration from %s", path)
    return config
