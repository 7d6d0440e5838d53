"""
Device and Astronomical Constants

Constants describing the StarBook controller and the thresholds used by the
mount session.
"""

from typing import Final


__all__ = [
    "DEC_HAZARD_MARGIN",
    "DEC_WARNING_MARGIN",
    "DEFAULT_HOST",
    "DEFAULT_ROUND",
    "DEFAULT_SPEED",
    "DEGREES_PER_HOUR_ANGLE",
    "FRAMEBUFFER_SIZE",
    "GRID_SIZE",
    "GRID_STEP",
    "MAX_SPEED",
    "MIN_SPEED",
    "RA_HAZARD_PERCENT",
    "RA_WARNING_PERCENT",
    "RATE_MIN_WINDOW",
    "RATE_RESET_WINDOW",
    "SCREEN_HEIGHT",
    "SCREEN_WIDTH",
    "SIDEREAL_DAY_SECONDS",
    "SIM_DEC_STEP",
    "SIM_GOTO_TOLERANCE",
    "SIM_RA_STEP",
    "SLOW_RATE_RATIO",
]


# Connection
DEFAULT_HOST: Final[str] = "169.254.1.1"
"""Address the StarBook uses out of the box (see 'About STAR BOOK' menu)."""

# Motor encoders
DEFAULT_ROUND: Final[int] = 8640000
"""Encoder count for one full revolution of either axis."""

SIDEREAL_DAY_SECONDS: Final[float] = 86400.0
"""Seconds used to normalize the RA encoder rate to one revolution per day."""

# Meridian reversal thresholds. Warnings fire earlier than the auto-reversal trigger.
RA_WARNING_PERCENT: Final[float] = -0.2
"""RA margin (percent of a revolution) at or below which a warning is logged."""

RA_HAZARD_PERCENT: Final[float] = -0.3
"""RA margin (percent of a revolution) at or below which a reversal is required."""

DEC_WARNING_MARGIN: Final[float] = 0.10
"""DEC margin (fraction of a revolution) below which a warning is logged."""

DEC_HAZARD_MARGIN: Final[float] = 0.01
"""DEC margin (fraction of a revolution) below which a reversal is required."""

# Tracking rate estimation
RATE_MIN_WINDOW: Final[float] = 10.0
"""Seconds of samples needed before a tracking rate is estimated."""

RATE_RESET_WINDOW: Final[float] = 60.0
"""Seconds after which the rate estimation window restarts."""

SLOW_RATE_RATIO: Final[float] = 0.5
"""Sidereal ratio below which RA tracking is considered stalled."""

# Speed / zoom
MIN_SPEED: Final[int] = 0
MAX_SPEED: Final[int] = 8
DEFAULT_SPEED: Final[int] = 6

# Mosaic grids
GRID_SIZE: Final[int] = 3
"""Default number of grid cells on each axis."""

GRID_STEP: Final[float] = 0.75
"""Default angular step between grid cells, in degrees (about one APS-C field at 1200 mm)."""

# Simulation
SIM_RA_STEP: Final[float] = 1.0
"""Maximum RA change per simulated poll, in hours."""

SIM_DEC_STEP: Final[float] = 4.0
"""Maximum DEC change per simulated poll, in degrees."""

SIM_GOTO_TOLERANCE: Final[float] = 0.01
"""Remaining distance (hours or degrees) above which a simulated goto is still moving."""

# Screen
SCREEN_WIDTH: Final[int] = 320
SCREEN_HEIGHT: Final[int] = 240
FRAMEBUFFER_SIZE: Final[int] = SCREEN_WIDTH * SCREEN_HEIGHT * 12 // 8
"""Size in bytes of the 12-bit packed framebuffer (115200)."""

# Astronomical constants
DEGREES_PER_HOUR_ANGLE: Final[float] = 15.0
"""Degrees of sky rotation per hour of Right Ascension."""
