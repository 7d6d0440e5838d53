"""
CLI State Management

Holds the global CLI options and the mount session shared by commands.
"""

from __future__ import annotations

import contextlib
from typing import Any

import typer

from starbook.api.catalogs.catalogs import StaticCatalog
from starbook.api.core.exceptions import ConfigurationError, StarBookError
from starbook.api.core.types import StarBookConfig
from starbook.api.telescope.telescope import StarBookMount
from starbook.cli.utils.output import console, print_error, print_warning


# Global mount instance
_mount: StarBookMount | None = None
_cli_state: dict[str, Any] = {}


def get_mount() -> StarBookMount | None:
    """Get the current mount instance."""
    return _mount


def set_mount(mount: StarBookMount) -> None:
    """Set the mount instance."""
    global _mount
    _mount = mount


def clear_mount() -> None:
    """Close and forget the mount instance."""
    global _mount
    if _mount is not None:
        with contextlib.suppress(StarBookError):
            _mount.close()
    _mount = None


def build_config() -> StarBookConfig:
    """
    Build the session configuration from the environment and the global CLI options.

    Raises:
        typer.Exit: If an environment variable holds an invalid value
    """
    try:
        config = StarBookConfig.from_env()
    except ConfigurationError as e:
        print_error(f"Invalid configuration: {e}")
        raise typer.Exit(code=1) from e

    host = get_cli_state_value("host")
    if host:
        config.host = host
    if get_cli_state_value("simulate", False):
        config.simulate = True
    if get_cli_state_value("verbose", False):
        config.verbose = True
    return config


def ensure_connected() -> StarBookMount:
    """
    Ensure the mount is connected, creating the session if needed.

    Returns:
        Connected mount instance

    Raises:
        typer.Exit: If the connection fails
    """
    global _mount
    if _mount is not None and _mount.connected:
        return _mount

    config = build_config()
    target = "simulated StarBook" if config.simulate else f"StarBook at {config.host}"
    try:
        with console.status(f"[bold blue]Connecting to {target}...", spinner="dots"):
            mount = StarBookMount(config, resolver=StaticCatalog())
            live = mount.connect()
    except StarBookError as e:
        print_error(f"Failed to connect: {e}")
        _mount = None
        raise typer.Exit(code=1) from e

    if not live and not config.simulate:
        print_warning(f"Can not connect to {config.host}. Using simulate mode.")
    _mount = mount
    return mount


def get_cli_state() -> dict[str, Any]:
    """Get CLI state dictionary."""
    return _cli_state


def set_cli_state(key: str, value: Any) -> None:
    """Set CLI state value."""
    _cli_state[key] = value


def get_cli_state_value(key: str, default: Any = None) -> Any:
    """Get CLI state value with default."""
    return _cli_state.get(key, default)
