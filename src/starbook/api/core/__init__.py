"""Core subpackage for coordinates, shared types, enums, constants and exceptions."""

from starbook.api.core.coordinates import (
    format_dec,
    format_ra,
    format_wire,
    parse_dec,
    parse_ra,
    to_decimal_degrees,
    to_decimal_hours,
)
from starbook.api.core.enums import Direction, MountEvent, MountStatus
from starbook.api.core.types import (
    Declination,
    EncoderSample,
    EncoderStatus,
    MountStatusSummary,
    RateEstimate,
    RightAscension,
    SitePlacement,
    StarBookConfig,
    Target,
)


__all__ = [
    "Declination",
    "Direction",
    "EncoderSample",
    "EncoderStatus",
    "MountEvent",
    "MountStatus",
    "MountStatusSummary",
    "RateEstimate",
    "RightAscension",
    "SitePlacement",
    "StarBookConfig",
    "Target",
    "format_dec",
    "format_ra",
    "format_wire",
    "parse_dec",
    "parse_ra",
    "to_decimal_degrees",
    "to_decimal_hours",
]
