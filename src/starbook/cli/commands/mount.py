"""
Mount Commands

Commands for connecting to the StarBook, querying its status and managing
the mount (speed, alignment, home, reversal, monitoring).
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any

import typer
from click import Context
from rich.live import Live
from typer.core import TyperGroup

from starbook.api.core.enums import MountEvent
from starbook.api.core.exceptions import StarBookError
from starbook.cli.utils.output import (
    console,
    print_error,
    print_info,
    print_json,
    print_mount_info,
    print_status_table,
    print_success,
    print_warning,
    status_table,
)
from starbook.cli.utils.state import ensure_connected
from starbook.cli.utils.view import FileScreenView


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


app = typer.Typer(help="Mount connection, status and settings", cls=SortedCommandsGroup)


def _check_reply(reply: str | None, success: str) -> None:
    """Print the outcome of a device command; device errors exit with code 1."""
    if reply == "OK":
        print_success(success)
        return
    print_error(f"StarBook answered: {reply}")
    raise typer.Exit(code=1) from None


@app.command(rich_help_panel="Connection")
def connect() -> None:
    """
    Connect to the StarBook and show controller information.

    Falls back to simulate mode when the controller does not answer.

    Example:
        starbook --host 169.254.1.1 mount connect
        starbook --simulate mount connect
    """
    mount = ensure_connected()
    if mount.simulate:
        print_info("Running in simulate mode")
    else:
        print_success(f"Connected to StarBook at {mount.config.host}")
    print_mount_info(mount.version, mount.place, mount.simulate, mount.config.host)
    if mount.start_time is not None:
        print_info(f"StarBook time: {mount.start_time:%Y-%m-%d %H:%M:%S}")


@app.command(rich_help_panel="Query")
def status(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    watch: bool = typer.Option(False, "--watch", "-w", help="Continuously update status"),
    interval: float = typer.Option(5.0, help="Update interval for watch mode (seconds)"),
) -> None:
    """
    Show the mount position, status and encoder margins.

    Example:
        starbook mount status
        starbook mount status --json
        starbook mount status --watch --interval 2.0
    """
    mount = ensure_connected()
    try:
        if watch:
            try:
                with Live(console=console, refresh_per_second=4) as live:
                    while True:
                        summary = mount.refresh_status()
                        live.update(status_table(summary, mount.getspeed(), title="Mount Status (Live)"))
                        time.sleep(interval)
            except KeyboardInterrupt:
                console.print("\n[yellow]Stopped watching status[/yellow]")
                return

        summary = mount.refresh_status()
        if json_output:
            data: dict[str, Any] = {
                "status": summary.status.value,
                "ra_hours": summary.ra.decimal,
                "dec_degrees": summary.dec.decimal,
                "speed": mount.getspeed(),
                "simulate": mount.simulate,
                "target": None,
                "encoders": None,
            }
            if summary.target is not None:
                data["target"] = {
                    "name": summary.target.name,
                    "ra_hours": summary.target.ra.decimal,
                    "dec_degrees": summary.target.dec.decimal,
                }
            if summary.encoders is not None:
                data["encoders"] = {
                    "x": summary.encoders.sample.x,
                    "y": summary.encoders.sample.y,
                    "ra_margin": summary.encoders.ra_margin,
                    "dec_margin": summary.encoders.dec_margin,
                }
            print_json(data)
        else:
            print_status_table(summary, mount.getspeed())
    except StarBookError as e:
        print_error(f"Failed to get status: {e}")
        raise typer.Exit(code=1) from e


@app.command(rich_help_panel="Settings")
def speed(
    level: int | None = typer.Argument(None, help="Speed from 0 (stop) to 8 (fast); omit to show it"),
) -> None:
    """
    Show or set the mount speed.

    Example:
        starbook mount speed
        starbook mount speed 4
    """
    mount = ensure_connected()
    if level is None:
        print_info(f"Speed: {mount.getspeed()}")
        return
    if not 0 <= level <= 8:
        print_warning(f"Speed {level} is out of range and will be clamped to 0-8")
    try:
        _check_reply(mount.setspeed(level), f"Speed set to {mount.getspeed()}")
    except StarBookError as e:
        print_error(f"Failed to set speed: {e}")
        raise typer.Exit(code=1) from e


@app.command(rich_help_panel="Settings")
def zoom(
    level: str | None = typer.Argument(None, help="'in', 'out', 'reset' or a level 0-8; omit to show it"),
) -> None:
    """
    Show or change the zoom (speed) level.

    Example:
        starbook mount zoom in
        starbook mount zoom reset
    """
    mount = ensure_connected()
    try:
        value: int | str | None = int(level) if level is not None and level.lstrip("-").isdigit() else level
        print_info(f"Zoom: {mount.zoom(value)}")
    except StarBookError as e:
        print_error(f"Failed to change zoom: {e}")
        raise typer.Exit(code=1) from e


@app.command(rich_help_panel="Mount")
def align() -> None:
    """
    Align the mount on the last goto target.

    Center the target by hand (starbook move ...) before aligning.

    Example:
        starbook mount align
    """
    mount = ensure_connected()
    try:
        _check_reply(mount.align(), "Mount aligned")
    except StarBookError as e:
        print_error(f"Align failed: {e}")
        raise typer.Exit(code=1) from e


@app.command(rich_help_panel="Mount")
def home(
    wait: bool = typer.Option(False, help="Wait until the mount has stopped"),
) -> None:
    """
    Send the mount to its home position.

    Example:
        starbook mount home --wait
    """
    mount = ensure_connected()
    try:
        _check_reply(mount.home(), "Going home")
        if wait:
            with console.status("[bold blue]Slewing to home...", spinner="dots"):
                done = mount.wait_for()
            if done:
                print_success("Mount is home")
            else:
                print_warning("Mount still slewing")
    except StarBookError as e:
        print_error(f"Home failed: {e}")
        raise typer.Exit(code=1) from e


@app.command(rich_help_panel="Mount")
def revert() -> None:
    """
    Trigger a meridian reversal now.

    Only accepted when the mount is idle in scope mode.

    Example:
        starbook mount revert
    """
    mount = ensure_connected()
    try:
        mount.refresh_status()
        with console.status("[bold blue]Reverting mount...", spinner="dots"):
            reverted = mount.revert()
        if reverted:
            print_success("Mount reversal done")
        else:
            print_warning(f"Reversal not possible in state {mount.status.name}")
    except StarBookError as e:
        print_error(f"Reversal failed: {e}")
        raise typer.Exit(code=1) from e


@app.command(rich_help_panel="Mount")
def reset() -> None:
    """
    Return the StarBook to its start-up screen (park).

    Usually issued after 'starbook mount home --wait'.

    Example:
        starbook mount reset
    """
    mount = ensure_connected()
    try:
        mount.reset()
        print_success("StarBook reset")
    except StarBookError as e:
        print_error(f"Reset failed: {e}")
        raise typer.Exit(code=1) from e


@app.command(rich_help_panel="Query")
def monitor(
    interval: float = typer.Option(5.0, help="Polling interval (seconds)"),
    screen: Path | None = typer.Option(None, "--screen", help="Keep the StarBook screen in this PNG file"),
    no_revert: bool = typer.Option(False, "--no-revert", help="Do not reverse the mount automatically"),
) -> None:
    """
    Poll the mount in the background and show its status live.

    Mount events (goto start/reached, moving, idle) are printed as they occur.
    Press Ctrl+C to stop.

    Example:
        starbook mount monitor
        starbook mount monitor --screen starbook.png --interval 2
    """
    mount = ensure_connected()
    mount.poller.interval = interval
    mount.auto_revert = not no_revert
    if screen is not None:
        mount.attach_view(FileScreenView(screen))

    def on_event(event: MountEvent, source: Any) -> None:
        if event is not MountEvent.UPDATED:
            console.print(f"[dim]{time.strftime('%H:%M:%S')}[/dim] [bold]{event.value}[/bold] {source}")

    mount.subscribe(on_event)
    mount.start_polling()
    try:
        with Live(status_table(mount.summary(), mount.getspeed()), console=console, refresh_per_second=2) as live:
            while True:
                time.sleep(1.0)
                live.update(status_table(mount.summary(), mount.getspeed(), title="Mount Status (Live)"))
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped monitoring[/yellow]")
    finally:
        mount.unsubscribe(on_event)
        mount.stop_polling()


@app.command(rich_help_panel="Web")
def web() -> None:
    """
    Show the current position on sky-map.org in the browser.

    Example:
        starbook mount web
    """
    mount = ensure_connected()
    url = mount.open_sky_map()
    print_info(f"Opened {url}")


@app.command(rich_help_panel="Web")
def location() -> None:
    """
    Show the observing site stored in the StarBook on a map.

    Example:
        starbook mount location
    """
    mount = ensure_connected()
    if mount.place is not None:
        print_info(f"Site: {mount.place}")
    url = mount.open_location()
    print_info(f"Opened {url}")
