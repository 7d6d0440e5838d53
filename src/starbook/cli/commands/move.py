"""
Move Commands

Commands for manual mount movement.
"""

from __future__ import annotations

import time

import typer
from click import Context
from typer.core import TyperGroup

from starbook.api.core.enums import Direction
from starbook.api.core.exceptions import StarBookError
from starbook.cli.utils.output import print_error, print_info, print_success
from starbook.cli.utils.state import ensure_connected


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


app = typer.Typer(help="Manual movement commands", cls=SortedCommandsGroup)


@app.command("direction", rich_help_panel="Movement")
def move_direction(
    direction: str = typer.Argument(..., help="north/south/east/west, n/s/e/w, up/down/left/right or ra+/ra-/dec+/dec-"),
    duration: float | None = typer.Option(None, help="Duration in seconds (if specified, auto-stops)"),
    speed: int | None = typer.Option(None, min=0, max=8, help="Speed to use (0-8)"),
) -> None:
    """
    Move the mount continuously in a direction.

    Without a duration the mount keeps moving until 'starbook move stop'.

    Example:
        starbook move direction north --duration 2.0
        starbook move direction ra+ --speed 4
    """
    try:
        resolved = Direction.parse(direction)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    mount = ensure_connected()
    try:
        if speed is not None:
            mount.setspeed(speed)
        reply = mount.move_direction(resolved)
        if reply != "OK":
            print_error(f"StarBook answered: {reply}")
            raise typer.Exit(code=1) from None

        if duration is None:
            print_info(f"Moving {resolved.value} at speed {mount.getspeed()} (use 'starbook move stop' to stop)")
            return

        time.sleep(duration)
        mount.stop()
        print_success(f"Moved {resolved.value} for {duration:.1f} seconds at speed {mount.getspeed()}")
    except StarBookError as e:
        print_error(f"Move failed: {e}")
        raise typer.Exit(code=1) from e


@app.command(rich_help_panel="Movement")
def stop() -> None:
    """
    Stop any mount movement, including a goto in progress.

    Example:
        starbook move stop
    """
    mount = ensure_connected()
    try:
        reply = mount.stop()
    except StarBookError as e:
        print_error(f"Stop failed: {e}")
        raise typer.Exit(code=1) from e
    if reply == "OK":
        print_success("Stopped all motion")
    else:
        print_error(f"StarBook answered: {reply}")
        raise typer.Exit(code=1) from None
