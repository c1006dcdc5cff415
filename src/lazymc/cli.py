"""Typer-powered command line for inspecting lazymc configuration.

Only configuration inspection lives here: ``config test`` validates the
configuration the proxy would start with and ``config show`` renders it.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import DEFAULT_CONFIG_FILE, Config, ConfigError, load
from .errors import err_console, render_error
from .exit_codes import ExitCode

console = Console()

app = typer.Typer(help="Inspect the lazymc proxy configuration.", no_args_is_help=True)
config_app = typer.Typer(help="Validate and display configuration.", no_args_is_help=True)
app.add_typer(config_app, name="config")

CONFIG_FILE_OPTION = typer.Option(
    Path(DEFAULT_CONFIG_FILE),
    "--config",
    "-c",
    help="Path to the lazymc configuration file. Environment variables are "
    "used when the file does not exist.",
)

_REDACTED = "********"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _config_error(error: ConfigError) -> NoReturn:
    """Emit the error with its hints and terminate the command."""
    render_error(error)
    raise typer.Exit(code=ExitCode.CONFIG)


def _load(config_file: Path) -> Config:
    try:
        return load(config_file)
    except ConfigError as exc:
        _config_error(exc)


def _redacted(data: dict[str, object]) -> dict[str, object]:
    rcon = data.get("rcon")
    if isinstance(rcon, dict) and rcon.get("password"):
        data["rcon"] = {**rcon, "password": _REDACTED}
    return data


@app.callback(invoke_without_command=True)
def _root(  # noqa: D401 - Typer displays help for us, docstring optional.
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show the lazymc version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging.",
    ),
) -> None:
    """Entry point callback invoked for every CLI execution."""
    if version:
        console.print(f"lazymc {__version__}")
        raise typer.Exit(code=ExitCode.OK)
    _setup_logging(verbose)


@config_app.command("test")
def config_test(config_file: Path = CONFIG_FILE_OPTION) -> None:
    """Load the configuration and report whether it is valid."""
    config = _load(config_file)
    source = str(config.path) if config.path is not None else "environment variables"
    console.print(
        f"[green]Config loaded successfully[/green] from {escape(source)}.", highlight=False
    )


@config_app.command("show")
def config_show(
    config_file: Path = CONFIG_FILE_OPTION,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit configuration as JSON instead of a table.",
    ),
    show_secrets: bool = typer.Option(
        False,
        "--show-secrets",
        help="Include the RCON password in the output.",
    ),
) -> None:
    """Display the effective configuration."""
    config = _load(config_file)
    data = config.to_dict()
    data["server_directory"] = str(config.server_directory())
    if not show_secrets:
        data = _redacted(data)

    if json_output:
        console.print(
            json.dumps(data, indent=2, ensure_ascii=False),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Key", style="bold")
    table.add_column("Value")

    for key, value in data.items():
        if isinstance(value, dict):
            rendered = json.dumps(value, indent=2, ensure_ascii=False)
        else:
            rendered = str(value)
        table.add_row(key, Text(rendered))

    console.print(table)


def main() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "main"]
