"""
Vixen StarBook Mount Control Library

A Python library for controlling telescope mounts driven by a Vixen StarBook
controller over its HTTP command interface.

StarBook facts:
- Default address: 169.254.1.1 (plain HTTP, no authentication)
- Speed / zoom: 0 (stop) to 8 (fast)
- Screen: 320x240, 12-bit packed RGB
- Automatic meridian reversal when the RA motor runs past the meridian

Example:
    >>> from starbook import StarBookMount, StarBookConfig
    >>> config = StarBookConfig(host='169.254.1.1')
    >>> mount = StarBookMount(config)
    >>> mount.connect()
    >>> mount.goto("M42")
    >>> print(mount.refresh_status())
    >>> mount.close()
"""

# Catalogs
from starbook.api.catalogs.catalogs import CelestialObject, ObjectResolver, StaticCatalog

# Coordinate parsing and formatting
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

# Exceptions
from starbook.api.core.exceptions import (
    CommunicationError,
    ConfigurationError,
    InvalidCoordinateError,
    NotConnectedError,
    ObjectNotFoundError,
    ProtocolError,
    StarBookError,
    UnsupportedFormatError,
)

# Type definitions
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

# Screen decoding
from starbook.api.telescope.screen import decode_framebuffer, save_screen, unpack_framebuffer

# Main mount class
from starbook.api.telescope.telescope import StarBookMount


__version__ = "0.1.0"

__all__ = [
    "CelestialObject",
    "CommunicationError",
    "ConfigurationError",
    "Declination",
    "Direction",
    "EncoderSample",
    "EncoderStatus",
    "InvalidCoordinateError",
    "MountEvent",
    "MountStatus",
    "MountStatusSummary",
    "NotConnectedError",
    "ObjectNotFoundError",
    "ObjectResolver",
    "ProtocolError",
    "RateEstimate",
    "RightAscension",
    "SitePlacement",
    "StarBookConfig",
    "StarBookError",
    "StarBookMount",
    "StaticCatalog",
    "Target",
    "UnsupportedFormatError",
    "decode_framebuffer",
    "format_dec",
    "format_ra",
    "format_wire",
    "parse_dec",
    "parse_ra",
    "save_screen",
    "to_decimal_degrees",
    "to_decimal_hours",
    "unpack_framebuffer",
]
