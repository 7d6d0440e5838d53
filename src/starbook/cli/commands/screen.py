"""
Screen Commands

Commands for capturing the StarBook display.
"""

from __future__ import annotations

from pathlib import Path

import typer
from click import Context
from typer.core import TyperGroup

from starbook.api.telescope.screen import save_screen
from starbook.cli.utils.output import print_error, print_success, print_warning
from starbook.cli.utils.state import ensure_connected


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


app = typer.Typer(help="StarBook screen commands", cls=SortedCommandsGroup)


@app.command(rich_help_panel="Capture")
def save(
    path: Path = typer.Argument(Path("starbook.png"), help="Destination image file"),
) -> None:
    """
    Save the current StarBook screen (320x240) to an image file.

    Example:
        starbook screen save
        starbook screen save capture.png
    """
    mount = ensure_connected()
    if mount.simulate:
        print_warning("No screen available in simulate mode")
        raise typer.Exit(code=1) from None

    raster = mount.get_screen()
    if raster is None:
        print_error("Could not read the StarBook screen")
        raise typer.Exit(code=1) from None

    try:
        written = save_screen(raster, path)
    except OSError as e:
        print_error(f"Could not write {path}: {e}")
        raise typer.Exit(code=1) from e
    print_success(f"Saved StarBook screen to {written}")
