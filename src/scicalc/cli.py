"""
SciCalc CLI.

One-shot evaluation of expressions plus listings of the available constants
and functions. Use ``--`` before an expression that starts with a minus
sign: ``scicalc eval -- "-2 ^ 2"``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from scicalc import __version__
from scicalc.core.errors import CalcError
from scicalc.core.expression_lang import evaluate_expression
from scicalc.core.manifest import CalcConfig, default_config, find_config, load_config

app = typer.Typer(
    help="SciCalc: scientific calculator expression engine",
    no_args_is_help=True,
)

console = Console()

# Module-level config path set by the callback
_config_path_override: Path | None = None


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"scicalc {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            envvar="SCICALC_CONFIG",
            help="Path to scicalc.toml. Defaults to the nearest one above the current directory",
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """SciCalc CLI main callback for global options."""
    global _config_path_override
    _config_path_override = config
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config() -> CalcConfig:
    """Resolve the active configuration, exiting with code 1 if it is invalid."""
    path = _config_path_override or find_config()
    if path is None:
        return default_config()
    if not path.is_file():
        console.print(f"[red]Config file not found: {escape(str(path))}[/red]")
        raise typer.Exit(code=1)
    try:
        return load_config(path)
    except CalcError as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(e.message)}")
        raise typer.Exit(code=1) from e


def format_result(value: float, precision: int) -> str:
    """Render a result with *precision* significant digits."""
    return f"{value:.{precision}g}"


# =============================================================================
# Commands
# =============================================================================


@app.command(name="eval")
def eval_command(
    expression: Annotated[str, typer.Argument(help="Expression to evaluate, e.g. 'sin(pi/2)'")],
    precision: Annotated[
        int | None,
        typer.Option("--precision", "-p", min=1, help="Significant digits to display"),
    ] = None,
    conventional_power: Annotated[
        bool,
        typer.Option(
            "--conventional-power",
            help="Give '^' its own precedence tier above '*' and '/' (right-associative)",
        ),
    ] = False,
) -> None:
    """Evaluate a single arithmetic expression."""
    config = _load_config()
    engine = config.engine
    if conventional_power:
        engine = replace(engine, conventional_power=True)

    try:
        result = evaluate_expression(expression, config.build_registry(), engine)
    except CalcError as e:
        console.print(f"[red]{e.kind.value.capitalize()} error:[/red] {escape(e.message)}")
        if e.context:
            console.print(e.context.format(), markup=False, highlight=False)
        raise typer.Exit(code=1) from e

    digits = precision or config.display.precision
    console.print(f"= {format_result(result, digits)}", markup=False, highlight=False)


@app.command(name="functions")
def functions_command() -> None:
    """List the built-in functions and their arity."""
    registry = _load_config().build_registry()
    table = Table(title="Functions")
    table.add_column("Name", style="cyan")
    table.add_column("Arguments", justify="right")
    table.add_column("Description")
    for spec in sorted(registry.functions.values(), key=lambda s: s.name):
        table.add_row(spec.name, spec.signature, spec.summary)
    console.print(table)


@app.command(name="constants")
def constants_command() -> None:
    """List the named constants, including any from scicalc.toml."""
    config = _load_config()
    registry = config.build_registry()
    table = Table(title="Constants")
    table.add_column("Name", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Source")
    for name, value in sorted(registry.constants.items()):
        source = "config" if name in config.constants else "built-in"
        table.add_row(name, format_result(value, config.display.precision), source)
    console.print(table)


def main() -> None:
    app()
