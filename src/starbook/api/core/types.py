"""
Type definitions for StarBook mount control.

This module contains the dataclasses used throughout the library: coordinate
values, mount targets, encoder samples and the connection configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from starbook.api.core.constants import DEFAULT_HOST, DEFAULT_ROUND
from starbook.api.core.enums import MountStatus
from starbook.api.core.exceptions import ConfigurationError


__all__ = [
    "Declination",
    "EncoderSample",
    "EncoderStatus",
    "MountStatusSummary",
    "RateEstimate",
    "RightAscension",
    "SitePlacement",
    "StarBookConfig",
    "Target",
]


@dataclass(frozen=True)
class RightAscension:
    """
    Right Ascension as the device encodes it.

    Attributes:
        hours: Integer hours (0-23)
        minutes: Fractional minutes (0-60)
    """

    hours: int
    minutes: float

    @property
    def decimal(self) -> float:
        """Decimal hours."""
        return self.hours + self.minutes / 60.0

    def __str__(self) -> str:
        return f"{self.hours}h{self.minutes:.4f}m"


@dataclass(frozen=True)
class Declination:
    """
    Declination as the device encodes it.

    The sign lives in ``negative`` so that declinations between -1° and 0°
    (zero degrees, negative sign) can be represented.

    Attributes:
        degrees: Integer degrees (-90 to +90)
        minutes: Fractional arc minutes (0-60)
        negative: True for southern declinations
    """

    degrees: int
    minutes: float
    negative: bool = False

    @property
    def decimal(self) -> float:
        """Signed decimal degrees."""
        value = abs(self.degrees) + self.minutes / 60.0
        return -value if self.negative else value

    def __str__(self) -> str:
        sign = "-" if self.negative else "+"
        return f"{sign}{abs(self.degrees)}°{self.minutes:.4f}'"


@dataclass(frozen=True)
class Target:
    """
    The most recently commanded goto position.

    Attributes:
        ra: Target Right Ascension
        dec: Target Declination
        name: Optional display name (object name for catalog gotos)
    """

    ra: RightAscension
    dec: Declination
    name: str | None = None

    def __str__(self) -> str:
        label = f"{self.name} " if self.name else ""
        return f"{label}RA {self.ra}, Dec {self.dec}"


@dataclass(frozen=True)
class EncoderSample:
    """
    Raw motor encoder counts.

    X is the RA axis and ranges from about -round/4 (east) to +round/4 (west).
    Y is the DEC axis. (0, 0) is the power-on position.

    Attributes:
        x: RA axis count
        y: DEC axis count
        round: Count for one full revolution
    """

    x: int
    y: int
    round: int = DEFAULT_ROUND

    def __str__(self) -> str:
        return f"X={self.x} Y={self.y}"


@dataclass(frozen=True)
class RateEstimate:
    """
    RA motor rate derived from two encoder samples.

    Attributes:
        sidereal_ratio: RA motor speed divided by the sidereal rate (about 1.0 while tracking)
        meridian_minutes: Distance to the RA reversal point in minutes (negative once past it)
        elapsed: Seconds between the two samples
    """

    sidereal_ratio: float
    meridian_minutes: float
    elapsed: float


@dataclass(frozen=True)
class EncoderStatus:
    """
    Summary of one encoder refresh.

    Attributes:
        sample: The encoder counts read
        ra_margin: (round/4 - |X|) / round; negative once the RA axis passed the meridian
        dec_margin: ||Y| - round| / round
        rate: Tracking rate estimate, when the sampling window allows one
    """

    sample: EncoderSample
    ra_margin: float
    dec_margin: float
    rate: RateEstimate | None = None

    def __str__(self) -> str:
        text = f"{self.sample} RA margin {self.ra_margin * 100:.3f}% DEC margin {self.dec_margin:.3f}"
        if self.rate is not None:
            text += f" rate {self.rate.sidereal_ratio:.2f}x sidereal"
        return text


@dataclass(frozen=True)
class SitePlacement:
    """
    Observing site as stored in the StarBook.

    Attributes:
        longitude_hemisphere: 'E' or 'W'
        longitude_degrees: Integer degrees of longitude
        longitude_minutes: Minutes of longitude
        latitude_hemisphere: 'N' or 'S'
        latitude_degrees: Integer degrees of latitude
        latitude_minutes: Minutes of latitude
        timezone: UTC offset in hours
    """

    longitude_hemisphere: str
    longitude_degrees: int
    longitude_minutes: int
    latitude_hemisphere: str
    latitude_degrees: int
    latitude_minutes: int
    timezone: int = 0

    @property
    def longitude(self) -> float:
        """Signed decimal longitude (positive east)."""
        value = self.longitude_degrees + self.longitude_minutes / 60.0
        return -value if self.longitude_hemisphere.upper() == "W" else value

    @property
    def latitude(self) -> float:
        """Signed decimal latitude (positive north)."""
        value = self.latitude_degrees + self.latitude_minutes / 60.0
        return -value if self.latitude_hemisphere.upper() == "S" else value

    def __str__(self) -> str:
        return (
            f"{self.latitude_degrees}°{self.latitude_minutes:02d}'{self.latitude_hemisphere.upper()}, "
            f"{self.longitude_degrees}°{self.longitude_minutes:02d}'{self.longitude_hemisphere.upper()} "
            f"(UTC{self.timezone:+d})"
        )


@dataclass(frozen=True)
class MountStatusSummary:
    """
    Snapshot of the mount returned by a status refresh.

    Attributes:
        ra: Current Right Ascension
        dec: Current Declination
        status: Mount status after the refresh
        target: Last commanded target, if any
        encoders: Last encoder summary, if any
    """

    ra: RightAscension
    dec: Declination
    status: MountStatus
    target: Target | None = None
    encoders: EncoderStatus | None = None

    def __str__(self) -> str:
        dec_deg = f"-{abs(self.dec.degrees)}" if self.dec.negative else f"{self.dec.degrees}"
        return f"RA={self.ra.hours}+{self.ra.minutes:f} DEC={dec_deg}+{self.dec.minutes:f} [{self.status.value}]"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class StarBookConfig:
    """
    Configuration for a StarBook session.

    Attributes:
        host: StarBook IP address or host name
        timeout: HTTP timeout for commands in seconds
        connect_timeout: Short timeout used to decide between live and simulate mode
        simulate: Force simulate mode (no device traffic at all)
        poll_interval: Status poller period in seconds
        auto_screen: Refresh the attached screen view after each poll
        auto_revert: Trigger a meridian reversal automatically when required
        verbose: Enable verbose logging
    """

    host: str = DEFAULT_HOST
    timeout: float = 5.0
    connect_timeout: float = 1.0
    simulate: bool = False
    poll_interval: float = 5.0
    auto_screen: bool = True
    auto_revert: bool = True
    verbose: bool = False

    @classmethod
    def from_env(cls) -> StarBookConfig:
        """
        Build a configuration from ``STARBOOK_*`` environment variables.

        Recognized variables: STARBOOK_HOST, STARBOOK_TIMEOUT, STARBOOK_SIMULATE,
        STARBOOK_POLL_INTERVAL, STARBOOK_AUTO_REVERT, STARBOOK_VERBOSE.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        config = cls(
            host=os.environ.get("STARBOOK_HOST") or DEFAULT_HOST,
            timeout=_env_float("STARBOOK_TIMEOUT", cls.timeout),
            simulate=_env_bool("STARBOOK_SIMULATE", cls.simulate),
            poll_interval=_env_float("STARBOOK_POLL_INTERVAL", cls.poll_interval),
            auto_revert=_env_bool("STARBOOK_AUTO_REVERT", cls.auto_revert),
            verbose=_env_bool("STARBOOK_VERBOSE", cls.verbose),
        )
        if config.timeout <= 0:
            raise ConfigurationError("STARBOOK_TIMEOUT must be positive")
        if config.poll_interval <= 0:
            raise ConfigurationError("STARBOOK_POLL_INTERVAL must be positive")
        return config
