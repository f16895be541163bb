"""
CLI Utilities

Shared helpers for CLI commands: console output, logging setup and
configuration loading.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from rockplugin.core.config import ConfigManager, ToolConfig

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration for the application."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True
    )


def print_header(title: str, subtitle: Optional[str] = None) -> None:
    """Print a formatted header for CLI output."""
    if subtitle:
        header_text = f"[bold cyan]{title}[/bold cyan]\n[dim]{subtitle}[/dim]"
    else:
        header_text = f"[bold cyan]{title}[/bold cyan]"

    console.print(Panel(header_text, border_style="cyan"))


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_configuration_summary(values: Dict[str, Any]) -> None:
    """Print the scaffold answers before generating files."""
    lines = [f"{key}: [cyan]{value}[/cyan]" for key, value in values.items()]
    console.print(Panel(
        "\n".join(lines),
        title="[bold]Configuration[/bold]",
        border_style="green"
    ))


def get_global_options(ctx: Optional[typer.Context]) -> Dict[str, Any]:
    """Options set on the top-level command, empty when run standalone."""
    if ctx is None:
        return {}
    root = ctx.find_root()
    return dict(root.obj or {}) if isinstance(root.obj, dict) else {}


def load_tool_config(ctx: Optional[typer.Context], **cli_args: Any) -> ToolConfig:
    """
    Load the tool configuration for a command.

    The current directory is read once here; everything below the CLI gets
    explicit paths.
    """
    options = get_global_options(ctx)
    cli_args.setdefault('verbose', options.get('verbose') or None)
    manager = ConfigManager(base_dir=Path.cwd(), config_file=options.get('config_file'))
    config = manager.load_config(cli_args=cli_args)
    if config.verbose and not options.get('verbose'):
        setup_logging(True)
    return config
