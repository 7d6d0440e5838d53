"""
Coordinate parsing and wire encoding.

The StarBook encodes Right Ascension as ``<hours>+<minutes>`` and Declination
as ``<degrees>+<minutes>``. Users and scripts give coordinates in many shapes,
which are all normalized here:

- a single number (decimal hours or degrees): ``12.5``
- a sequence ``[unit, minutes]`` or ``[unit, minutes, seconds]``
- a string: ``"12h34m56s"``, ``"12:34:56"``, ``"12.34"``, ``"-05°23'28\\""``

Inputs are first classified into a closed set of shapes (:class:`Scalar`,
:class:`Pair`, :class:`Triple`, :class:`Text`) and then converted by a single
normalization function per axis.
"""

from __future__ import annotations

import math
import numbers
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import deal

from starbook.api.core.constants import DEGREES_PER_HOUR_ANGLE
from starbook.api.core.exceptions import InvalidCoordinateError
from starbook.api.core.types import Declination, RightAscension


__all__ = [
    "Pair",
    "Scalar",
    "Text",
    "Triple",
    "classify",
    "dec_from_degrees",
    "format_dec",
    "format_ra",
    "format_wire",
    "parse_dec",
    "parse_ra",
    "ra_from_degrees",
    "to_decimal_degrees",
    "to_decimal_hours",
]


@dataclass(frozen=True)
class Scalar:
    """Decimal hours or degrees."""

    value: float
    negative: bool


@dataclass(frozen=True)
class Pair:
    """Primary unit and minutes."""

    unit: float
    minutes: float
    negative: bool


@dataclass(frozen=True)
class Triple:
    """Primary unit, minutes and seconds."""

    unit: float
    minutes: float
    seconds: float
    negative: bool


@dataclass(frozen=True)
class Text:
    """Unparsed string input."""

    text: str


CoordinateInput = Scalar | Pair | Triple | Text

# Unit markers replaced by spaces before the numbers are read. 'deg' must go before 'd'.
_MARKERS = ("h", "m", "s", ":", "°", "deg", "d", "'", '"', ",")
_NUMBER = re.compile(r"^[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?$")


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_negative(value: float) -> bool:
    # copysign keeps the sign of -0.0
    return math.copysign(1.0, value) < 0


def classify(value: Any) -> CoordinateInput:
    """
    Classify a raw coordinate input into one of the supported shapes.

    Args:
        value: Number, 1-3 element sequence of numbers, or string

    Returns:
        Scalar, Pair, Triple or Text

    Raises:
        InvalidCoordinateError: If the input has none of the supported shapes
    """
    if _is_number(value):
        number = float(value)
        if not math.isfinite(number):
            raise InvalidCoordinateError(f"Coordinate must be finite, got {value!r}")
        return Scalar(number, _is_negative(number))

    if isinstance(value, str):
        return Text(value)

    if isinstance(value, Sequence) or hasattr(value, "__array__"):
        try:
            items = list(value)
        except TypeError:
            raise InvalidCoordinateError(f"Unsupported coordinate input: {value!r}") from None
        if not all(_is_number(item) and math.isfinite(float(item)) for item in items):
            raise InvalidCoordinateError(f"Coordinate sequence must hold finite numbers, got {value!r}")
        parts = [float(item) for item in items]
        match len(parts):
            case 1:
                return Scalar(parts[0], _is_negative(parts[0]))
            case 2:
                return Pair(parts[0], parts[1], _is_negative(parts[0]))
            case 3:
                return Triple(parts[0], parts[1], parts[2], _is_negative(parts[0]))
            case _:
                raise InvalidCoordinateError(f"Coordinate sequence must have 1 to 3 elements, got {len(parts)}")

    raise InvalidCoordinateError(f"Unsupported coordinate input: {value!r}")


def _parse_text(text: str) -> Scalar | Pair | Triple:
    """Strip unit markers from a string and read the numbers left."""
    cleaned = text.strip().lower()
    for marker in _MARKERS:
        cleaned = cleaned.replace(marker, " ")
    tokens = cleaned.split()
    if not tokens or not all(_NUMBER.match(token) for token in tokens):
        raise InvalidCoordinateError(f"Cannot parse coordinate string: {text!r}")

    # The sign is read from the text so that "-0 30" stays negative
    negative = tokens[0].startswith("-")
    values = [float(token) for token in tokens]
    match values:
        case [value]:
            return Scalar(value, negative)
        case [unit, minutes]:
            return Pair(unit, minutes, negative)
        case [unit, minutes, seconds]:
            return Triple(unit, minutes, seconds, negative)
        case _:
            raise InvalidCoordinateError(f"Coordinate string has too many fields: {text!r}")


def _integral(unit: float) -> int:
    if unit != math.trunc(unit):
        raise InvalidCoordinateError(f"Hours/degrees must be an integer when minutes are given, got {unit}")
    return int(unit)


def _normalize(shape: CoordinateInput) -> tuple[int, float, bool]:
    """Return (primary unit, minutes, negative) for any input shape."""
    match shape:
        case Text(text=text):
            return _normalize(_parse_text(text))
        case Scalar(value=value, negative=negative):
            primary = math.trunc(value)
            minutes = abs(value - primary) * 60.0
        case Pair(unit=unit, minutes=minutes_, negative=negative):
            primary = _integral(unit)
            minutes = abs(minutes_)
        case Triple(unit=unit, minutes=minutes_, seconds=seconds, negative=negative):
            primary = _integral(unit)
            minutes = abs(minutes_) + abs(seconds) / 60.0

    if minutes >= 60.0:
        raise InvalidCoordinateError(f"Minutes must be below 60, got {minutes}")
    return int(primary), minutes, negative


@deal.raises(InvalidCoordinateError)
def parse_ra(value: Any) -> RightAscension:
    """
    Convert any supported input into a Right Ascension.

    Args:
        value: Decimal hours, [h, m], [h, m, s], a string such as
               "12h34m56s" / "12:34:56" / "12.5", or a RightAscension

    Returns:
        RightAscension with integer hours and fractional minutes

    Raises:
        InvalidCoordinateError: If the input cannot be parsed or is outside 0-24h

    Example:
        >>> parse_ra("12h34m56s")
        RightAscension(hours=12, minutes=34.93333333333333)
    """
    if isinstance(value, RightAscension):
        return value
    hours, minutes, negative = _normalize(classify(value))
    if negative or not 0 <= hours < 24:
        raise InvalidCoordinateError(f"RA must be within 0-24 hours, got {value!r}")
    return RightAscension(hours=hours, minutes=minutes)


@deal.raises(InvalidCoordinateError)
def parse_dec(value: Any) -> Declination:
    """
    Convert any supported input into a Declination.

    The sign is taken from the degrees. When the degrees are zero, the sign
    of the input (negative number, -0.0 or a leading '-' in a string) is kept
    in the ``negative`` flag.

    Args:
        value: Decimal degrees, [d, m], [d, m, s], a string such as
               "-12°30'15\\"" / "-12:30:15" / "45.5", or a Declination

    Returns:
        Declination with integer degrees, fractional minutes and sign flag

    Raises:
        InvalidCoordinateError: If the input cannot be parsed or is outside -90..+90
    """
    if isinstance(value, Declination):
        return value
    degrees, minutes, negative = _normalize(classify(value))
    if degrees != 0:
        negative = degrees < 0
    if abs(degrees) > 90 or (abs(degrees) == 90 and minutes > 0):
        raise InvalidCoordinateError(f"Dec must be within -90 to +90 degrees, got {value!r}")
    return Declination(degrees=degrees, minutes=minutes, negative=negative)


def to_decimal_hours(ra: RightAscension) -> float:
    """Decimal hours of a Right Ascension."""
    return ra.hours + ra.minutes / 60.0


def to_decimal_degrees(dec: Declination) -> float:
    """Signed decimal degrees of a Declination."""
    value = abs(dec.degrees) + dec.minutes / 60.0
    return -value if dec.negative else value


def ra_from_degrees(ra_degrees: float) -> RightAscension:
    """Right Ascension from degrees (0-360), as catalogs often store it."""
    return parse_ra((ra_degrees % 360.0) / DEGREES_PER_HOUR_ANGLE)


def dec_from_degrees(dec_degrees: float) -> Declination:
    """Declination from signed decimal degrees."""
    return parse_dec(dec_degrees)


def format_wire(value: RightAscension | Declination) -> str:
    """
    Render a coordinate as the StarBook query-string field.

    Example:
        >>> format_wire(parse_ra("12h34m56s"))
        '12+34.933333'
        >>> format_wire(parse_dec(-0.5))
        '-0+30.000000'
    """
    if isinstance(value, Declination):
        degrees = f"-{abs(value.degrees)}" if value.negative else f"{value.degrees}"
        return f"{degrees}+{value.minutes:.6f}"
    return f"{value.hours}+{value.minutes:.6f}"


def format_ra(ra: RightAscension) -> str:
    """
    Format Right Ascension for display.

    Returns:
        Formatted string (e.g., "12h34m56.0s")
    """
    minutes = int(ra.minutes)
    seconds = (ra.minutes - minutes) * 60
    return f"{ra.hours:02d}h{minutes:02d}m{seconds:04.1f}s"


def format_dec(dec: Declination) -> str:
    """
    Format Declination for display.

    Returns:
        Formatted string (e.g., "-12°30'15.0\\"")
    """
    sign = "-" if dec.negative else "+"
    minutes = int(dec.minutes)
    seconds = (dec.minutes - minutes) * 60
    return f"{sign}{abs(dec.degrees):02d}°{minutes:02d}'{seconds:04.1f}\""
