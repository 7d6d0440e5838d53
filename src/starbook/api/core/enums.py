"""
Common Enums

Enumerations used throughout the StarBook API.
"""

from __future__ import annotations

from enum import StrEnum


__all__ = [
    "Direction",
    "MountEvent",
    "MountStatus",
]


class MountStatus(StrEnum):
    """
    Controller states as reported by ``getstatus``.

    The device reports 4-character codes; ``GOTO`` is also forced whenever
    the goto flag of the status reply is set.
    """

    INIT = "INIT"  # Power on, not yet in scope mode
    SCOPE = "SCOP"  # Idle or tracking
    GOTO = "GOTO"  # Slewing to a target
    USER = "USER"  # In a menu, awaiting physical input
    CHART = "CHAR"  # Chart mode entered from the device menu

    @classmethod
    def from_code(cls, code: str) -> MountStatus:
        """
        Map a device state code to a status.

        Only the first four characters are significant, so both ``SCOP`` and
        ``SCOPE`` map to :attr:`SCOPE`.

        Raises:
            ValueError: If the code is unknown
        """
        return cls(code.strip().upper()[:4])

    @property
    def is_idle(self) -> bool:
        """True when the mount accepts a reversal (scope mode, not moving)."""
        return self is MountStatus.SCOPE

    @property
    def is_tracking(self) -> bool:
        """True for states in which the RA motor should run at sidereal rate."""
        return self in (MountStatus.SCOPE, MountStatus.USER)


class MountEvent(StrEnum):
    """Notifications raised by the mount session."""

    GOTO_START = "goto-start"
    GOTO_REACHED = "goto-reached"
    MOVING = "moving"
    IDLE = "idle"
    UPDATED = "updated"


class Direction(StrEnum):
    """Movement directions for manual motion."""

    NORTH = "north"  # DEC+
    SOUTH = "south"  # DEC-
    EAST = "east"  # RA+
    WEST = "west"  # RA-

    @classmethod
    def parse(cls, name: str) -> Direction:
        """
        Accept the aliases used on the hand controller and in scripts.

        Raises:
            ValueError: If the name is not a known direction
        """
        key = name.strip().lower()
        for direction, aliases in _DIRECTION_ALIASES.items():
            if key in aliases:
                return direction
        raise ValueError(f"Invalid direction: {name}. Use north/south/east/west, up/down/left/right or ra+/ra-/dec+/dec-")


_DIRECTION_ALIASES: dict[Direction, tuple[str, ...]] = {
    Direction.NORTH: ("north", "n", "up", "dec+"),
    Direction.SOUTH: ("south", "s", "down", "dec-"),
    Direction.EAST: ("east", "e", "left", "ra+"),
    Direction.WEST: ("west", "w", "right", "ra-"),
}
