"""
CLI Output Utilities

Rich console formatting utilities for CLI output.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from starbook.api.catalogs.catalogs import CelestialObject
from starbook.api.core.coordinates import dec_from_degrees, format_dec, format_ra, ra_from_degrees
from starbook.api.core.enums import MountStatus
from starbook.api.core.types import MountStatusSummary, SitePlacement


# Create console with unicode detection
# If terminal doesn't support unicode properly, Rich will use ASCII alternatives
console = Console()

_use_unicode = console.is_terminal and not console.legacy_windows

_STATUS_STYLES: dict[MountStatus, str] = {
    MountStatus.INIT: "dim",
    MountStatus.SCOPE: "green",
    MountStatus.GOTO: "yellow",
    MountStatus.USER: "magenta",
    MountStatus.CHART: "cyan",
}


def print_success(message: str) -> None:
    """Print success message in green."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print error message in red."""
    console.print(f"[red]✗[/red] {message}", style="red")


def print_warning(message: str) -> None:
    """Print warning message in yellow."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str) -> None:
    """Print info message in blue."""
    info_icon = "ℹ" if _use_unicode else "i"
    console.print(f"[blue]{info_icon}[/blue] {message}")


def print_json(data: dict[str, Any]) -> None:
    """Print data as JSON."""
    console.print_json(json.dumps(data))


def status_table(summary: MountStatusSummary, speed: int | None = None, title: str = "Mount Status") -> Table:
    """
    Build a table describing a status snapshot.

    Args:
        summary: Snapshot returned by refresh_status()
        speed: Current speed, shown when given
        title: Table title
    """
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    style = _STATUS_STYLES.get(summary.status, "white")
    table.add_row("Status", f"[{style}]{summary.status.name}[/{style}] ({summary.status.value})")
    table.add_row("Right Ascension", f"{format_ra(summary.ra)} ({summary.ra.decimal:.4f}h)")
    table.add_row("Declination", f"{format_dec(summary.dec)} ({summary.dec.decimal:+.4f}°)")
    if summary.target is not None:
        label = summary.target.name or "RA/DEC"
        table.add_row("Target", f"{label}: {format_ra(summary.target.ra)} {format_dec(summary.target.dec)}")
    if speed is not None:
        table.add_row("Speed", str(speed))
    if summary.encoders is not None:
        encoders = summary.encoders
        table.add_row("Encoders", str(encoders.sample))
        table.add_row("RA margin", f"{encoders.ra_margin * 100:+.3f}% ({encoders.ra_margin * 1800:+.1f} min)")
        table.add_row("DEC margin", f"{encoders.dec_margin:.3f}")
        if encoders.rate is not None:
            table.add_row("RA rate", f"{encoders.rate.sidereal_ratio:.2f}x sidereal")
    return table


def print_status_table(summary: MountStatusSummary, speed: int | None = None) -> None:
    """Print a status snapshot as a table."""
    console.print(status_table(summary, speed))


def print_mount_info(version: str, place: SitePlacement | None, simulate: bool, host: str) -> None:
    """Print controller information after connecting."""
    table = Table(title="StarBook", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Address", "simulate" if simulate else host)
    table.add_row("Version", version)
    if place is not None:
        table.add_row("Site", str(place))
    console.print(table)


def print_grid_table(cells: list[CelestialObject]) -> None:
    """Print mosaic grid cells with their coordinates."""
    table = Table(title="Mosaic Grid", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Right Ascension", style="green")
    table.add_column("Declination", style="green")
    for index, cell in enumerate(cells, start=1):
        table.add_row(
            str(index),
            format_ra(ra_from_degrees(cell.ra_degrees)),
            format_dec(dec_from_degrees(cell.dec_degrees)),
        )
    console.print(table)
