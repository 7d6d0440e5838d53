"""
StarBook CLI - Main Application

This is the main entry point for the StarBook command-line interface.
"""

import logging

import typer
from click import Context
from dotenv import load_dotenv
from rich.console import Console
from typer.core import TyperGroup

from starbook.cli.commands import goto, mount, move, screen
from starbook.cli.utils.state import set_cli_state


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


app = typer.Typer(
    name="starbook",
    help="Vixen StarBook Mount Control CLI",
    add_completion=True,
    rich_markup_mode="rich",
    cls=SortedCommandsGroup,
)

console = Console()


@app.callback()
def main(
    host: str | None = typer.Option(
        None,
        "--host",
        "-H",
        help="StarBook IP address or host name",
        envvar="STARBOOK_HOST",
    ),
    simulate: bool = typer.Option(
        False,
        "--simulate",
        "-s",
        help="Use a simulated StarBook",
        envvar="STARBOOK_SIMULATE",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
) -> None:
    """
    Vixen StarBook Mount Control CLI

    Control a telescope mount driven by a Vixen StarBook from the command line.

    [bold green]Examples:[/bold green]

        starbook --host 169.254.1.1 mount connect
        starbook mount status
        starbook goto radec --ra 5h35m17s --dec -5:23:28
        starbook goto object M31

    [bold blue]Environment Variables:[/bold blue]

        STARBOOK_HOST     - StarBook address (default 169.254.1.1)
        STARBOOK_SIMULATE - Use a simulated StarBook
        STARBOOK_TIMEOUT  - HTTP timeout in seconds
    """
    load_dotenv()

    set_cli_state("host", host)
    set_cli_state("simulate", simulate)
    set_cli_state("verbose", verbose)

    if verbose:
        logging.basicConfig(level=logging.DEBUG)
        console.print("[dim]Verbose mode enabled[/dim]")
        if host:
            console.print(f"[dim]Using StarBook at: {host}[/dim]")


@app.command(rich_help_panel="Utilities")
def version() -> None:
    """Show the CLI version."""
    from starbook.cli import __version__

    console.print(f"[bold]StarBook CLI[/bold] version [cyan]{__version__}[/cyan]")


# Register command groups organized by category

# Mount Control
app.add_typer(
    mount.app,
    name="mount",
    help="Connection, status and mount settings",
    rich_help_panel="Mount Control",
)
app.add_typer(
    goto.app,
    name="goto",
    help="Slew (goto) commands",
    rich_help_panel="Mount Control",
)
app.add_typer(
    move.app,
    name="move",
    help="Manual movement commands",
    rich_help_panel="Mount Control",
)

# Display
app.add_typer(
    screen.app,
    name="screen",
    help="StarBook screen commands",
    rich_help_panel="Display",
)


if __name__ == "__main__":
    app()
