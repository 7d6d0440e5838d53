"""
Simulated StarBook

Offline stand-in used when no controller answers. Each poll moves the
current position toward the target by a bounded step (1 hour in RA,
4 degrees in DEC) and synthesizes encoder counts, so that every session
operation can run without hardware.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable

from starbook.api.core.constants import (
    DEFAULT_ROUND,
    SIDEREAL_DAY_SECONDS,
    SIM_DEC_STEP,
    SIM_GOTO_TOLERANCE,
    SIM_RA_STEP,
)
from starbook.api.core.coordinates import parse_dec, parse_ra
from starbook.api.core.enums import MountStatus
from starbook.api.core.types import Declination, EncoderSample, RightAscension


__all__ = ["MountSimulator"]


logger = logging.getLogger(__name__)


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


class MountSimulator:
    """
    Deterministic kinematic model of the mount.

    The RA encoder advances at the sidereal rate from the last anchor
    (connection or goto); the DEC encoder follows the declination.
    """

    def __init__(self, round: int = DEFAULT_ROUND, clock: Callable[[], float] = time.monotonic):
        self.round = round
        self._clock = clock
        self._anchor = clock()

    def reset_encoders(self) -> None:
        """Restart the RA encoder from zero, as after a repositioning."""
        self._anchor = self._clock()

    def step(
        self, ra: RightAscension, dec: Declination, target_ra: RightAscension, target_dec: Declination
    ) -> tuple[RightAscension, Declination, bool]:
        """
        Advance one poll toward the target.

        Returns:
            (new RA, new DEC, goto flag); the flag stays set while the remaining
            distance on either axis exceeds the tolerance
        """
        ra_hours = ra.decimal
        dec_degrees = dec.decimal
        d_ra = _clamp(target_ra.decimal - ra_hours, SIM_RA_STEP)
        d_dec = _clamp(target_dec.decimal - dec_degrees, SIM_DEC_STEP)

        new_ra = parse_ra((ra_hours + d_ra) % 24.0)
        new_dec = parse_dec(max(-90.0, min(90.0, dec_degrees + d_dec)))

        remaining_ra = target_ra.decimal - new_ra.decimal
        remaining_dec = target_dec.decimal - new_dec.decimal
        goto = abs(remaining_ra) > SIM_GOTO_TOLERANCE or abs(remaining_dec) > SIM_GOTO_TOLERANCE
        logger.debug(f"SIMU: step dRA={d_ra:.4f}h dDEC={d_dec:.4f}deg goto={goto}")
        return new_ra, new_dec, goto

    def state_code(self) -> str:
        """State code reported with every simulated status."""
        return MountStatus.SCOPE.value

    def encoders(self, dec: Declination, slewing: bool = False) -> EncoderSample:
        """Encoder counts for the current simulated pointing."""
        if slewing:
            self.reset_encoders()
        elapsed = self._clock() - self._anchor
        x = math.floor(elapsed * self.round / SIDEREAL_DAY_SECONDS)
        y = math.floor(self.round * dec.decimal / 360.0)
        return EncoderSample(x=x, y=y, round=self.round)
