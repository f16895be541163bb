#!/usr/bin/env python3
"""
Rock Plugin Tool CLI Main Application

Typer-based command-line interface for scaffolding plugins and keeping
manifest versions in sync.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from rockplugin.cli import __version__
from rockplugin.cli.commands import create, version
from rockplugin.cli.utils import setup_logging

console = Console()

app = typer.Typer(
    name="rockplugin",
    help="Rock RMS plugin developer tool",
    context_settings={"help_option_names": ["-h", "--help"]},
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.command(name="create", help="Create a new Rock plugin project")(create.create)
app.add_typer(version.app, name="version", help="Synchronize and verify manifest versions")


def version_callback(value: bool):
    """Show version information."""
    if value:
        console.print(f"[bold cyan]rockplugin[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def app_callback(
    ctx: typer.Context,
    show_version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version information and exit"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file to load"),
):
    """
    Rock RMS plugin developer tool

    [bold]Quick Start:[/bold]

    • New plugin: [cyan]rockplugin create[/cyan]
    • Release prep: [cyan]rockplugin version sync[/cyan]
    • CI gate: [cyan]rockplugin version check[/cyan]
    """
    setup_logging(verbose)
    ctx.obj = {"verbose": verbose, "config_file": config}


def main():
    """Entry point for the rockplugin console script."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
