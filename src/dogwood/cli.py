"""
Dogwood CLI.

    dogwood repl               interactive calculator
    dogwood eval "1 + 2 * 3"   evaluate a single line
"""

from __future__ import annotations

import dataclasses
import logging
import platform
import sys
from pathlib import Path

import typer

from dogwood._version import get_version
from dogwood.core.config import ReplConfig, load_config
from dogwood.core.errors import ConfigError
from dogwood.parsing import DefaultParserService
from dogwood.repl import Repl, run_turn

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"

app = typer.Typer(
    help="""Dogwood – checked u64 calculator

Every step is checked: overflow, underflow and division by zero are
reported against the source line instead of wrapping.
""",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"Dogwood version {get_version()}")
        typer.echo(f"  Python:        {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, stream=sys.stderr, format=LOG_FORMAT)
    logging.getLogger("dogwood").setLevel(level)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="TOML config file (default: ./dogwood.toml if present)"
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Shortcut for --log-level DEBUG"),
    color: str | None = typer.Option(None, "--color", help="Color output: auto, always or never"),
) -> None:
    """Dogwood CLI main callback for global options."""
    try:
        config = load_config(config_path)
        overrides: dict[str, str] = {}
        if log_level is not None:
            overrides["log_level"] = log_level
        if verbose:
            overrides["log_level"] = "DEBUG"
        if color is not None:
            overrides["color"] = color
        config = dataclasses.replace(config, **overrides)
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2) from e

    configure_logging(config.log_level)
    ctx.obj = config


def _config(ctx: typer.Context, no_rpn: bool) -> ReplConfig:
    config: ReplConfig = ctx.obj or ReplConfig()
    if no_rpn:
        config = dataclasses.replace(config, show_rpn=False)
    return config


@app.command("repl")
def repl_command(
    ctx: typer.Context,
    no_rpn: bool = typer.Option(False, "--no-rpn", help="Do not echo the postfix form"),
) -> None:
    """Start the interactive calculator. Exit with Ctrl-D."""
    Repl(DefaultParserService(), _config(ctx, no_rpn)).run()


@app.command("eval")
def eval_command(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression to evaluate, e.g. '3 + 5 ** 2'"),
    no_rpn: bool = typer.Option(False, "--no-rpn", help="Do not echo the postfix form"),
) -> None:
    """Evaluate a single expression. Exits with status 1 if anything was reported."""
    config = _config(ctx, no_rpn)
    repl = Repl(DefaultParserService(), config)
    result = run_turn(expression, repl.service)
    repl.show(result)
    if result.reports:
        raise typer.Exit(code=1)


def main() -> None:
    app(standalone_mode=True)


if __name__ == "__main__":
    main()
