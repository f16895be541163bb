import logging

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.padding import Padding

from rockplugin.core.exceptions import RockPluginError

console = Console(stderr=True)
logger = logging.getLogger(__name__)


def report_error(err: RockPluginError) -> None:
    """Formats a RockPluginError and prints it to stderr."""
    logger.debug(f"{type(err).__name__}: {err.get_debug_info()}")

    console.print()
    error_panel = Panel(
        Text(err.message),
        title=f"[bold red]Error: {type(err).__name__}[/bold red]",
        border_style="red",
        expand=False
    )
    console.print(error_panel)

    if err.suggestions:
        console.print("\n[bold green]Suggested solutions:[/bold green]")
        for i, suggestion in enumerate(err.suggestions, 1):
            suggestion_text = Text(f"{i}. {suggestion.action}: {suggestion.description}\n")
            if suggestion.command:
                suggestion_text.append("   Run: ", style="bold")
                suggestion_text.append(f"{suggestion.command}", style="cyan")
            console.print(Padding(suggestion_text, (0, 1)))


def handle_error(err: RockPluginError):
    """Reports a RockPluginError and terminates the command with exit status 1."""
    report_error(err)
    raise typer.Exit(code=1)
