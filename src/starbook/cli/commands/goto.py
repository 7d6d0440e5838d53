"""
Goto Commands

Commands for slewing the mount to coordinates or named objects.
"""

from __future__ import annotations

import time

import typer
from click import Context
from typer.core import TyperGroup

from starbook.api.core.coordinates import format_dec, format_ra, parse_dec, parse_ra
from starbook.api.core.exceptions import InvalidCoordinateError, StarBookError
from starbook.api.telescope.telescope import StarBookMount
from starbook.cli.utils.output import (
    console,
    print_error,
    print_grid_table,
    print_info,
    print_success,
    print_warning,
)
from starbook.cli.utils.state import ensure_connected


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


app = typer.Typer(help="Slew (goto) commands", cls=SortedCommandsGroup)


def _finish_goto(mount: StarBookMount, reply: str | None, wait: bool) -> None:
    if reply is None:
        print_error("Target could not be resolved")
        raise typer.Exit(code=1) from None
    if reply != "OK":
        print_error(f"StarBook answered: {reply}")
        raise typer.Exit(code=1) from None

    if not wait:
        print_success("Slew initiated")
        return
    with console.status("[bold blue]Slewing to target...", spinner="dots"):
        done = mount.wait_for()
    if done:
        print_success(f"Arrived at {mount.target}")
    else:
        print_warning("Timed out while waiting for the slew to complete")


@app.command(rich_help_panel="Slew to Coordinates")
def radec(
    ra: str = typer.Option(..., "--ra", help="Right Ascension: 5.5, 5:35:17, 5h35m17s"),
    dec: str = typer.Option(..., "--dec", help="Declination: -5.4, -5:23:28, -5d23m28s"),
    wait: bool = typer.Option(True, help="Wait for slew to complete"),
) -> None:
    """
    Slew the mount to RA/Dec coordinates.

    Example:
        starbook goto radec --ra 5h35m17s --dec -5:23:28
        starbook goto radec --ra 2.5303 --dec 89.2641 --no-wait
    """
    try:
        # Numbers typed on the command line are decimal hours / degrees
        ra_value = parse_ra(_as_number(ra))
        dec_value = parse_dec(_as_number(dec))
    except InvalidCoordinateError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    mount = ensure_connected()
    print_info(f"Slewing to RA {format_ra(ra_value)}, Dec {format_dec(dec_value)}")
    try:
        _finish_goto(mount, mount.goto(ra_value, dec_value), wait)
    except StarBookError as e:
        print_error(f"Slew failed: {e}")
        raise typer.Exit(code=1) from e


@app.command("object", rich_help_panel="Slew to Object")
def goto_object(
    name: str = typer.Argument(..., help="Object name, e.g. M31, Vega, 'Orion Nebula'"),
    wait: bool = typer.Option(True, help="Wait for slew to complete"),
) -> None:
    """
    Slew the mount to a named object.

    Example:
        starbook goto object M42
        starbook goto object "Andromeda Galaxy" --no-wait
    """
    mount = ensure_connected()
    print_info(f"Slewing to {name}")
    try:
        _finish_goto(mount, mount.goto(name), wait)
    except StarBookError as e:
        print_error(f"Slew failed: {e}")
        raise typer.Exit(code=1) from e


@app.command(rich_help_panel="Mosaic")
def grid(
    name: str | None = typer.Argument(None, help="Object at the center; omit to use --ra/--dec or the last target"),
    ra: str | None = typer.Option(None, "--ra", help="Right Ascension of the center"),
    dec: str | None = typer.Option(None, "--dec", help="Declination of the center"),
    size: int = typer.Option(3, "--size", "-n", help="Cells per axis"),
    step: float = typer.Option(0.75, "--step", help="Step between cells in degrees (camera field of view)"),
    run: bool = typer.Option(False, "--run", help="Slew to every cell in turn"),
    dwell: float = typer.Option(0.0, "--dwell", help="Seconds to stay on each cell with --run"),
) -> None:
    """
    Build a mosaic grid around an object and optionally visit every cell.

    Example:
        starbook goto grid M51 --size 3 --step 0.75
        starbook goto grid --ra 13.5 --dec 47.2 --run --dwell 1800
    """
    if name is None and (ra is None) != (dec is None):
        print_error("Give both --ra and --dec, or an object name")
        raise typer.Exit(code=1)

    mount = ensure_connected()
    try:
        if name is not None:
            cells = mount.grid(name, size=size, step=step)
        elif ra is not None:
            cells = mount.grid(_as_number(ra), _as_number(dec), size=size, step=step)
        else:
            cells = mount.grid(size=size, step=step)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    if not cells:
        print_error("Grid center could not be resolved")
        raise typer.Exit(code=1)

    print_grid_table(cells)
    if not run:
        return
    try:
        for index, cell in enumerate(cells, start=1):
            print_info(f"Cell {index}/{len(cells)}: {cell.name}")
            _finish_goto(mount, mount.goto(cell), wait=True)
            if dwell > 0:
                time.sleep(dwell)
    except StarBookError as e:
        print_error(f"Mosaic failed: {e}")
        raise typer.Exit(code=1) from e


def _as_number(text: str) -> float | str:
    try:
        return float(text)
    except ValueError:
        return text
