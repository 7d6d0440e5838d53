"""
Vixen StarBook Mount API

Provides a high-level Python interface for controlling a telescope mount
through a Vixen StarBook controller.

This module wraps the low-level StarBookProtocol (or, when no controller
answers, the MountSimulator) and keeps the session state: current and target
coordinates, controller status, motor encoders and the meridian reversal
logic.

StarBook facts:
- Speed / zoom: 0 (stop) to 8 (fast), 6 on start-up
- Motor encoders: one revolution is 'round' counts (8640000 by default);
  X (RA) ranges from -round/4 (east) to +round/4 (west)
- Status: INIT, SCOP(E), GOTO, USER, CHAR(T)
"""

from __future__ import annotations

import logging
import math
import threading
import time
import webbrowser
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from typing import Any, Final, Literal

import deal

from starbook.api.catalogs.catalogs import CelestialObject, ObjectResolver
from starbook.api.core.constants import (
    DEC_HAZARD_MARGIN,
    DEC_WARNING_MARGIN,
    DEFAULT_ROUND,
    DEFAULT_SPEED,
    DEGREES_PER_HOUR_ANGLE,
    GRID_SIZE,
    GRID_STEP,
    MAX_SPEED,
    MIN_SPEED,
    RA_HAZARD_PERCENT,
    RA_WARNING_PERCENT,
    RATE_MIN_WINDOW,
    RATE_RESET_WINDOW,
    SIDEREAL_DAY_SECONDS,
    SLOW_RATE_RATIO,
)
from starbook.api.core.coordinates import dec_from_degrees, format_wire, parse_dec, parse_ra, ra_from_degrees
from starbook.api.core.enums import Direction, MountEvent, MountStatus
from starbook.api.core.exceptions import (
    CommunicationError,
    InvalidCoordinateError,
    NotConnectedError,
    ObjectNotFoundError,
    ProtocolError,
)
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
from starbook.api.telescope.events import EventBus, Observer
from starbook.api.telescope.protocol import ILLEGAL_STATE, StarBookProtocol
from starbook.api.telescope.screen import Raster, decode_framebuffer
from starbook.api.telescope.simulator import MountSimulator
from starbook.api.telescope.tracking import ScreenView, StatusPoller


__all__ = ["BrowserLauncher", "StarBookMount"]


logger = logging.getLogger(__name__)


BrowserLauncher = Callable[[str], object]

SIMULATED_VERSION: Final[str] = "simulated"

# DEC degrees are kept as text: '-0' carries the sign of southern declinations above -1 deg
STATUS_FORMAT: Final[str] = "RA=%d+%f&DEC=%[^+]+%f&GOTO=%d&STATE=%4s"
PLACE_FORMAT: Final[str] = "longitude=%c%d+%d&latitude=%c%d+%d&timezone=%d"
TIME_FORMAT: Final[str] = "time=%d+%d+%d+%d+%d+%d"
XY_FORMAT: Final[str] = "X=%d&Y=%d"
ROUND_FORMAT: Final[str] = "ROUND=%d"

SKY_MAP_URL: Final[str] = (
    "http://www.sky-map.org/?ra={ra:f}&de={dec:f}&zoom={zoom:d}"
    "&show_grid=1&show_constellation_lines=1"
    "&show_constellation_boundaries=1&show_const_names=0&show_galaxies=1"
)
LOCATION_URL: Final[str] = "https://maps.google.fr/?q={latitude:f},{longitude:f}"


def _reply_text(reply: Any) -> str:
    """Render a checked reply for callers; the ILLEGAL STATE sentinel becomes the device text."""
    if reply == ILLEGAL_STATE:
        return "ERROR:ILLEGAL STATE"
    return str(reply)


class StarBookMount:
    """
    High-level interface for a telescope mount driven by a Vixen StarBook.

    Every operation runs under a single re-entrant lock, so the background
    status poller and caller operations never mutate the session at the same
    time. When no controller answers at connection time, the session falls
    back to simulate mode and all operations run against a kinematic model.

    Example:
        >>> from starbook import StarBookMount, StarBookConfig
        >>> mount = StarBookMount(StarBookConfig(host="169.254.1.1"))
        >>> mount.connect()
        True
        >>> mount.goto("5h35m17s", "-5:23:28")
        'OK'
        >>> mount.wait_for()
        True
        >>> print(mount.refresh_status())
        RA=5+35.283333 DEC=-5+23.466667 [SCOP]
        >>> mount.close()
    """

    def __init__(
        self,
        config: StarBookConfig | str | None = None,
        resolver: ObjectResolver | None = None,
        browser: BrowserLauncher = webbrowser.open,
        clock: Callable[[], float] = time.monotonic,
        protocol: StarBookProtocol | None = None,
    ) -> None:
        """
        Initialize the mount session.

        Args:
            config: StarBookConfig object or host string.
                    The string 'simulate' (or any string starting with 'sim')
                    forces simulate mode. If None, uses the default configuration.
            resolver: Object name lookup used by named gotos
            browser: Callable opening a URL (default: webbrowser.open)
            clock: Monotonic clock in seconds, used for rate estimation
            protocol: Pre-built protocol handler (default: built from config)
        """
        # Handle different config input types
        if config is None:
            self.config = StarBookConfig()
        elif isinstance(config, str):
            if config.lower().startswith("sim"):
                self.config = StarBookConfig(simulate=True)
            else:
                self.config = StarBookConfig(host=config)
        else:
            self.config = config

        # Set up logging based on verbosity
        if self.config.verbose:
            logging.basicConfig(level=logging.DEBUG)

        self.protocol = protocol or StarBookProtocol(
            host=self.config.host,
            timeout=self.config.timeout,
            connect_timeout=self.config.connect_timeout,
        )
        self.resolver = resolver
        self.browser = browser
        self._clock = clock

        self.lock = threading.RLock()
        self.events = EventBus()
        self.poller = StatusPoller(self, interval=self.config.poll_interval)
        self.poller.auto_screen = self.config.auto_screen
        self._polling_requested = False

        # Session state
        self.simulate = self.config.simulate
        self.connected = False
        self.ra = RightAscension(hours=0, minutes=0.0)
        self.dec = Declination(degrees=0, minutes=0.0)
        self.target: Target | None = None
        self.status = MountStatus.INIT
        self.encoders: EncoderSample | None = None
        self.encoder_status: EncoderStatus | None = None
        self.rate: RateEstimate | None = None
        self._rate_anchor: tuple[float, int] | None = None
        self.speed = MAX_SPEED
        self.auto_revert = self.config.auto_revert
        self.reverting = False

        # Cached at connection time
        self.version = SIMULATED_VERSION
        self.place: SitePlacement | None = None
        self.start_time: datetime | None = None
        self.round = DEFAULT_ROUND
        self.simulator = MountSimulator(round=self.round, clock=clock)

    def __str__(self) -> str:
        text = str(self.summary())
        if self.target is not None and self.target.name:
            text += f" {self.target.name}"
        return text

    # ========== Connection ==========

    @deal.post(lambda result: isinstance(result, bool), message="Must return boolean")
    @deal.raises(CommunicationError, NotConnectedError, ProtocolError)
    def connect(self) -> bool:
        """
        Connect to the StarBook, or fall back to simulate mode.

        Live mode probes ``getversion`` with the short timeout; if nothing
        answers, a warning is logged and the session switches to simulate
        mode. The site placement, device time and encoder round are then
        cached, the status refreshed, the mount started and the speed set to 6.

        Returns:
            True when a live controller is connected, False in simulate mode
        """
        with self.lock:
            if not self.simulate:
                logger.info(f"Connecting to {self.config.host}")
                try:
                    self.version = self.protocol.probe()
                except (CommunicationError, ProtocolError) as e:
                    logger.warning(f"Can not connect to {self.config.host}: {e}. Using simulate mode.")
                    self.simulate = True

            if not self.simulate:
                self.place = SitePlacement(*self.protocol.send_and_scan("getplace", PLACE_FORMAT))
                self.start_time = self.device_time()
                self.round = int(self.protocol.send_and_scan("getround", ROUND_FORMAT))
            else:
                self.version = SIMULATED_VERSION
                self.place = SitePlacement("E", 0, 0, "N", 0, 0, 0)
                self.start_time = datetime.now()
                self.round = DEFAULT_ROUND
            self.simulator = MountSimulator(round=self.round, clock=self._clock)
            self.connected = True

            self.refresh_status()
            self.start()
            self.setspeed(DEFAULT_SPEED)
            logger.info(f"Welcome to StarBook {self.version}")
            return not self.simulate

    def close(self) -> None:
        """Stop polling and release the HTTP session."""
        self.stop_polling()
        self.protocol.close()
        self.connected = False
        logger.info("Disconnected from StarBook")

    def __enter__(self) -> StarBookMount:
        self.connect()
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: Any | None) -> Literal[False]:
        self.close()
        return False

    # ========== Status ==========

    def summary(self) -> MountStatusSummary:
        """Snapshot of the current session state."""
        with self.lock:
            return MountStatusSummary(
                ra=self.ra,
                dec=self.dec,
                status=self.status,
                target=self.target,
                encoders=self.encoder_status,
            )

    def refresh_status(self) -> MountStatusSummary:
        """
        Update the position and status, then check the encoders.

        Called by the status poller every few seconds. In simulate mode the
        position advances one bounded step toward the target. A GOTO to SCOPE
        transition notifies ``goto-reached`` and ``idle``. When the encoders
        report a reversal hazard and auto-reversal is on, the mount is
        reverted. Observers always receive ``updated``.

        A communication failure halts the poller and leaves the state
        unchanged; a malformed reply is logged and ignored.

        Returns:
            Snapshot of the session after the refresh
        """
        with self.lock:
            previous = self.status
            if not self.simulate:
                try:
                    reply = self.protocol.send_and_scan("getstatus", STATUS_FORMAT)
                except CommunicationError as e:
                    logger.error(f"Halting monitoring: {e}. Restart it with start().")
                    self.poller.stop()
                    return self.summary()
                except ProtocolError as e:
                    logger.warning(f"Ignoring status reply: {e}")
                    return self.summary()

                ra_hours, ra_minutes, dec_text, dec_minutes, goto, state = reply
                dec_text = str(dec_text).strip()
                try:
                    dec_degrees = int(dec_text)
                except ValueError:
                    logger.warning(f"Ignoring status reply with DEC degrees {dec_text!r}")
                    return self.summary()
                self.ra = RightAscension(hours=int(ra_hours), minutes=float(ra_minutes))
                self.dec = Declination(
                    degrees=dec_degrees, minutes=abs(float(dec_minutes)), negative=dec_text.startswith("-")
                )
                try:
                    status = MountStatus.from_code(state)
                except ValueError:
                    logger.warning(f"Unknown StarBook state {state!r}, keeping {previous.value}")
                    status = previous
            else:
                target = self.target or Target(self.ra, self.dec)
                self.ra, self.dec, goto = self.simulator.step(self.ra, self.dec, target.ra, target.dec)
                status = MountStatus.from_code(self.simulator.state_code())

            if goto:
                status = MountStatus.GOTO
            self.status = status

            if previous is MountStatus.GOTO and status is MountStatus.SCOPE:
                self.events.notify(MountEvent.GOTO_REACHED, self)
                self.events.notify(MountEvent.IDLE, self)

            encoder_status, hazard = self.refresh_encoders()
            if hazard and self.auto_revert and not self.reverting:
                logger.warning(f"{self.summary()} {encoder_status}")
                self.revert()

            self.events.notify(MountEvent.UPDATED, self)
            return self.summary()

    def refresh_encoders(self) -> tuple[EncoderStatus | None, bool]:
        """
        Read the motor encoders and check how close the mount is to a reversal.

        On RA, X can reach +/- round/4; past it the tube would hit the mount.
        On DEC, Y can reach +/- round. The tracking rate is estimated from two
        samples at least 10 s apart while the mount tracks.

        Returns:
            (encoder summary, reversal hazard flag)
        """
        with self.lock:
            if self.simulate:
                sample = self.simulator.encoders(self.dec, slewing=self.status is MountStatus.GOTO)
            else:
                try:
                    x, y = self.protocol.send_and_scan("getxy", XY_FORMAT)
                except CommunicationError as e:
                    logger.error(f"Halting monitoring: {e}. Restart it with start().")
                    self.poller.stop()
                    return self.encoder_status, False
                except ProtocolError as e:
                    logger.warning(f"Ignoring encoder reply: {e}")
                    return self.encoder_status, False
                sample = EncoderSample(x=int(x), y=int(y), round=self.round)
            self.encoders = sample

            full = float(sample.round)
            ra_margin = (full / 4 - abs(sample.x)) / full
            # Rounded so that a margin of exactly -0.3 % compares as such
            ra_percent = round(ra_margin * 100, 9)
            dec_margin = abs(abs(sample.y) - full) / full

            if ra_percent <= RA_WARNING_PERCENT:
                logger.warning(
                    f"Mount is close to revert on X (east-west=RA) motor. "
                    f"Delta={ra_percent}% i.e. {abs(ra_margin) * 1800:.1f} min after meridian."
                )
            if dec_margin < DEC_WARNING_MARGIN:
                logger.warning(
                    f"Mount is close to revert on Y (north-south=DEC) motor. "
                    f"Delta={dec_margin * 100:.2f}% i.e. {dec_margin * 360:.1f} deg"
                )

            hazard = ra_percent <= RA_HAZARD_PERCENT or dec_margin < DEC_HAZARD_MARGIN

            if self._estimate_rate(sample, ra_margin) and ra_margin < 0:
                # Stuck past the meridian: try a reversal
                hazard = True

            self.encoder_status = EncoderStatus(sample=sample, ra_margin=ra_margin, dec_margin=dec_margin, rate=self.rate)
            return self.encoder_status, hazard

    def _estimate_rate(self, sample: EncoderSample, ra_margin: float) -> bool:
        """Update the RA rate estimate; return True when RA is slow while idle in scope mode."""
        now = self._clock()
        elapsed = now - self._rate_anchor[0] if self._rate_anchor is not None else 0.0

        if not self.status.is_tracking:
            self._rate_anchor = None
            self.rate = None
            return False
        if self._rate_anchor is None or elapsed > RATE_RESET_WINDOW:
            self._rate_anchor = (now, sample.x)
            self.rate = None
            return False
        if elapsed < RATE_MIN_WINDOW:
            return False

        counts_per_second = abs(sample.x - self._rate_anchor[1]) / elapsed
        ratio = counts_per_second / (sample.round / SIDEREAL_DAY_SECONDS)
        self.rate = RateEstimate(sidereal_ratio=ratio, meridian_minutes=ra_margin * 1800, elapsed=elapsed)

        if ratio < SLOW_RATE_RATIO and self.status is MountStatus.SCOPE:
            logger.warning(
                f"SLOW RA move: rate={ratio:.3f} [sidereal] delta={ra_margin * 1800:.1f} [min wrt meridian] "
                f"{sample}. Check cables and tube. RA (X) is stuck?"
            )
            return True
        return False

    @deal.post(lambda result: isinstance(result, bool), message="Must return boolean")
    def wait_for(self, timeout: float = 300.0, interval: float = 2.0) -> bool:
        """
        Block until the mount has stopped slewing.

        Args:
            timeout: Maximum wait in seconds
            interval: Delay between status refreshes in seconds

        Returns:
            True when the mount is no longer in GOTO, False on timeout
        """
        deadline = self._clock() + timeout
        while True:
            self.refresh_status()
            if self.status is not MountStatus.GOTO:
                return True
            if self._clock() >= deadline:
                logger.warning(f"Mount still slewing after {timeout:.0f}s")
                return False
            time.sleep(interval)

    def update(self) -> MountStatusSummary:
        """Refresh the status, then the attached screen view."""
        summary = self.refresh_status()
        view = self.poller.view
        if self.poller.auto_screen and view is not None:
            raster = self.get_screen()
            if raster is not None:
                view.show(raster)
        return summary

    def get_ra(self, target: bool = False, degrees: bool = False) -> RightAscension | float | None:
        """
        Current (or target) Right Ascension.

        Args:
            target: Return the last goto target instead of the mount position
            degrees: Return decimal degrees instead of hours and minutes

        Returns:
            RightAscension, degrees, or None when target is asked and none is set
        """
        if target:
            if self.target is None:
                return None
            ra = self.target.ra
        else:
            ra = self.ra
        return ra.decimal * DEGREES_PER_HOUR_ANGLE if degrees else ra

    def get_dec(self, target: bool = False, degrees: bool = False) -> Declination | float | None:
        """Current (or target) Declination; see get_ra()."""
        if target:
            if self.target is None:
                return None
            dec = self.target.dec
        else:
            dec = self.dec
        return dec.decimal if degrees else dec

    def device_time(self) -> datetime:
        """Date and time of the StarBook (local time in simulate mode)."""
        if self.simulate:
            return datetime.now()
        year, month, day, hour, minute, second = self.protocol.send_and_scan("gettime", TIME_FORMAT)
        return datetime(year, month, day, hour, minute, second)

    # ========== Goto ==========

    def _resolve_target(self, target: Any, dec: Any, name: str | None) -> Target:
        if isinstance(target, Target):
            return target if name is None else replace(target, name=name)
        if isinstance(target, CelestialObject):
            return Target(ra_from_degrees(target.ra_degrees), dec_from_degrees(target.dec_degrees), name or target.name)
        if isinstance(target, str) and dec is None:
            found = self.resolver.find_object(target) if self.resolver is not None and target.strip() else None
            if found is None:
                raise ObjectNotFoundError(f"Can not find object {target}")
            logger.info(f"Found object {target} as {found.name} ({found.object_type}, mag {found.magnitude})")
            return Target(ra_from_degrees(found.ra_degrees), dec_from_degrees(found.dec_degrees), found.name)
        if dec is None:
            raise InvalidCoordinateError("Declination is required with a Right Ascension")
        return Target(parse_ra(target), parse_dec(dec), name)

    @deal.raises(CommunicationError, NotConnectedError)
    def goto(self, target: Any, dec: Any = None, name: str | None = None) -> str | None:
        """
        Send the mount to a target.

        Args:
            target: Object name, Target, CelestialObject, or a Right Ascension in
                    any supported form (decimal hours, [h, m], [h, m, s],
                    "12h34m56s", "12:34:56", ...)
            dec: Declination in any supported form (required with an RA)
            name: Optional display name for the target

        Returns:
            'OK', the device error (e.g. 'ERROR:BELOW HORIZON'), or None when the
            target could not be resolved

        Example:
            >>> mount.goto("M31")
            'OK'
            >>> mount.goto(5.5, -5.4)
            'OK'
        """
        with self.lock:
            try:
                resolved = self._resolve_target(target, dec, name)
            except (ObjectNotFoundError, InvalidCoordinateError) as e:
                logger.error(f"goto: {e}")
                return None

            self.target = resolved
            command = f"gotoradec?RA={format_wire(resolved.ra)}&DEC={format_wire(resolved.dec)}"
            logger.info(f"Slewing to {resolved}: {command}")
            if self.simulate:
                logger.debug(f"SIMU: {command}")
                self.simulator.reset_encoders()
                reply = "OK"
            else:
                reply = _reply_text(self.protocol.send_and_scan(command, "OK"))

            if reply == "OK":
                self.events.notify(MountEvent.GOTO_START, self)
                self.events.notify(MountEvent.MOVING, self)
            return reply

    def revert(self) -> bool:
        """
        Trigger a mount reversal by sending the mount to its current position.

        Only runs in scope mode and when no reversal is already in progress.

        Returns:
            True if a reversal was attempted
        """
        with self.lock:
            if self.status is not MountStatus.SCOPE or self.reverting:
                return False
            logger.warning("Reverting mount...")
            self.reverting = True
            try:
                name = self.target.name if self.target is not None else None
                if self.goto(Target(self.ra, self.dec, name)) == "OK":
                    self.wait_for()
            finally:
                self.reverting = False
            return True

    @deal.raises(CommunicationError, NotConnectedError)
    def home(self) -> str:
        """Send the mount to its home position."""
        with self.lock:
            logger.info("Going home")
            if self.simulate:
                logger.debug("SIMU: gohome?home=0")
                return self.goto(0.0, 0.0, name="Home") or "OK"
            return _reply_text(self.protocol.send_and_scan("gohome?home=0", "OK"))

    def park(self) -> str:
        """Send the mount to its reference park position (home)."""
        return self.home()

    def grid(
        self,
        target: Any = None,
        dec: Any = None,
        size: int | tuple[int, int] = GRID_SIZE,
        step: float | tuple[float, float] = GRID_STEP,
    ) -> list[CelestialObject]:
        """
        Build a mosaic of targets around an object or position.

        The cells are ordered row by row, from the lowest declination up, and
        from the lowest Right Ascension within a row. Each cell can be passed
        to goto(). Use the camera field of view as step to build a panorama:
        FOV = sensor size / focal length * 57.3 degrees.

        Args:
            target: Object name, Target, CelestialObject or Right Ascension.
                    None centers the grid on the last goto target (or the
                    current position when there is none).
            dec: Declination, when target is a Right Ascension
            size: Number of cells per axis, or (DEC cells, RA cells)
            step: Angular step in degrees, or (DEC step, RA step)

        Returns:
            Grid cells, or an empty list when the center cannot be resolved

        Raises:
            ValueError: If a size is below 1 or a step is not finite

        Example:
            >>> for cell in mount.grid("M51", size=3, step=0.75):
            ...     mount.goto(cell)
            ...     mount.wait_for()
        """
        n_dec, n_ra = (size, size) if isinstance(size, int) else size
        step_dec, step_ra = (step, step) if isinstance(step, (int, float)) else step
        if n_dec < 1 or n_ra < 1:
            raise ValueError(f"Grid size must be at least 1, got {size}")
        if not (math.isfinite(step_dec) and math.isfinite(step_ra)):
            raise ValueError(f"Grid step must be finite, got {step}")

        with self.lock:
            if target is None:
                center = self.target or Target(self.ra, self.dec)
            else:
                try:
                    center = self._resolve_target(target, dec, None)
                except (ObjectNotFoundError, InvalidCoordinateError) as e:
                    logger.error(f"grid: {e}")
                    return []

        cells = []
        for row in range(n_dec):
            cell_dec = center.dec.decimal + step_dec * (row - (n_dec - 1) / 2)
            cell_dec = max(-90.0, min(90.0, cell_dec))
            for column in range(n_ra):
                offset = step_ra / DEGREES_PER_HOUR_ANGLE * (column - (n_ra - 1) / 2)
                cell_ra = (center.ra.decimal + offset) % 24.0
                cells.append(
                    CelestialObject(
                        name=f"RA={cell_ra:.2f} DEC={cell_dec:.2f}",
                        ra_degrees=cell_ra * DEGREES_PER_HOUR_ANGLE,
                        dec_degrees=cell_dec,
                        object_type="grid",
                        catalog="grid",
                    )
                )
        logger.info(f"Grid of {n_dec}x{n_ra} cells around {center}")
        return cells

    # ========== Motion ==========

    @deal.raises(CommunicationError, NotConnectedError)
    def move(self, north: bool = False, south: bool = False, east: bool = False, west: bool = False) -> str:
        """
        Start (or stop) continuous motion; runs until stop() or an all-false move.

        Args:
            north: Move DEC+
            south: Move DEC-
            east: Move RA+
            west: Move RA-

        Observers receive ``moving``, or ``idle`` when every direction is released.

        Returns:
            'OK' or the device error
        """
        with self.lock:
            reply = self._send_move(north, south, east, west)
            moving = any((north, south, east, west))
            self.events.notify(MountEvent.MOVING if moving else MountEvent.IDLE, self)
            return reply

    def _send_move(self, north: bool, south: bool, east: bool, west: bool) -> str:
        command = f"move?north={int(bool(north))}&south={int(bool(south))}&east={int(bool(east))}&west={int(bool(west))}"
        if self.simulate:
            logger.debug(f"SIMU: {command}")
            return "OK"
        logger.info(command)
        return _reply_text(self.protocol.send_and_scan(command, "OK"))

    @deal.raises(ValueError, CommunicationError, NotConnectedError)
    def move_direction(self, direction: Direction | str) -> str:
        """
        Start continuous motion in one direction.

        Args:
            direction: Direction or alias ('north', 'n', 'up', 'dec+', 'ra-', ...)

        Raises:
            ValueError: If the direction is unknown
        """
        resolved = direction if isinstance(direction, Direction) else Direction.parse(direction)
        return self.move(
            north=resolved is Direction.NORTH,
            south=resolved is Direction.SOUTH,
            east=resolved is Direction.EAST,
            west=resolved is Direction.WEST,
        )

    @deal.raises(CommunicationError, NotConnectedError)
    def stop(self) -> str:
        """Stop any movement and cancel a reversal in progress."""
        with self.lock:
            if self.simulate:
                logger.debug("SIMU: stop")
                reply = "OK"
            else:
                reply = _reply_text(self.protocol.send_and_scan("stop", "OK"))
            self._send_move(False, False, False, False)
            self.reverting = False
            self.events.notify(MountEvent.IDLE, self)
            return reply

    @deal.raises(CommunicationError, NotConnectedError)
    def start(self) -> None:
        """Clear any error, put the mount in move mode and resume polling if it was halted."""
        with self.lock:
            if self.simulate:
                logger.debug("SIMU: start")
            else:
                self.protocol.send_and_scan("start")
            self.reverting = False
        if self._polling_requested and not self.poller.is_running():
            self.poller.start()

    @deal.raises(CommunicationError, NotConnectedError)
    def align(self) -> str:
        """Align the mount on the last goto target (after centering it by hand)."""
        with self.lock:
            logger.info(f"Aligning on {self.target}")
            if self.simulate:
                logger.debug("SIMU: align")
                return "OK"
            return _reply_text(self.protocol.send_and_scan("align", "OK"))

    def sync(self) -> str:
        """Tell the mount its current position is the last goto target (same as align())."""
        return self.align()

    @deal.raises(CommunicationError, NotConnectedError)
    def reset(self) -> None:
        """
        Return the StarBook to its start-up screen (park), e.g. after home().

        Polling is halted and any motion stopped; use start() to restart.
        The controller does not answer the reset request with a status.
        """
        self.poller.stop()
        with self.lock:
            self.stop()
            if self.simulate:
                logger.debug("SIMU: reset?reset")
            else:
                logger.info("Reset (park). Use start() to restart.")
                self.protocol.send("reset?reset")

    # ========== Speed / Zoom ==========

    @deal.raises(ValueError, CommunicationError, NotConnectedError)
    def setspeed(self, speed: float) -> str:
        """
        Set the mount speed (zoom factor) from 0 (stop) to 8 (fast).

        Values are clamped to the range and rounded half up.

        Raises:
            ValueError: If the speed is NaN or infinite
        """
        if not math.isfinite(speed):
            raise ValueError(f"Speed must be a finite number, got {speed}")
        with self.lock:
            self.speed = math.floor(max(MIN_SPEED, min(MAX_SPEED, speed)) + 0.5)
            command = f"setspeed?speed={self.speed}"
            if self.simulate:
                logger.debug(f"SIMU: {command}")
                return "OK"
            return _reply_text(self.protocol.send_and_scan(command, "OK"))

    def getspeed(self) -> int:
        """Current speed (0-8)."""
        return self.speed

    @deal.post(lambda result: MIN_SPEED <= result <= MAX_SPEED, message="Speed must be 0-8")
    def zoom(self, level: float | str | None = None) -> int:
        """
        Get or set the zoom (speed) level.

        Args:
            level: None to read, 0-8, 'in', 'out' or 'reset' (6)

        Returns:
            Speed after the change
        """
        if level is None:
            return self.speed
        if isinstance(level, str):
            match level.strip().lower():
                case "in":
                    level = self.speed - 1
                case "out":
                    level = self.speed + 1
                case _:
                    level = DEFAULT_SPEED
        self.setspeed(level)
        return self.speed

    # ========== Screen ==========

    def get_screen(self) -> Raster | None:
        """
        Fetch and decode the StarBook screen (about 0.5 s).

        Returns:
            RGB raster, or None in simulate mode or when the screen is unavailable
        """
        if self.simulate:
            logger.debug("SIMU: getscreen.bin")
            return None
        try:
            raw = self.protocol.send_binary("getscreen.bin")
        except CommunicationError as e:
            logger.warning(f"Could not fetch StarBook screen: {e}")
            return None
        return decode_framebuffer(raw)

    def attach_view(self, view: ScreenView | None) -> None:
        """Attach the view refreshed by the poller and update()."""
        self.poller.view = view

    # ========== Polling / Events ==========

    def start_polling(self) -> None:
        """Start refreshing the status in the background."""
        self._polling_requested = True
        self.poller.start()

    def stop_polling(self) -> None:
        """Stop the background status refresh."""
        self._polling_requested = False
        self.poller.stop()

    def subscribe(self, observer: Observer) -> None:
        """Register a callable receiving (MountEvent, mount) notifications."""
        self.events.subscribe(observer)

    def unsubscribe(self, observer: Observer) -> None:
        self.events.unsubscribe(observer)

    # ========== Web ==========

    def sky_map_url(self) -> str:
        """sky-map.org view centered on the current position, zoomed from the speed."""
        return SKY_MAP_URL.format(ra=self.ra.decimal, dec=self.dec.decimal, zoom=9 - self.speed)

    def location_url(self) -> str:
        """Map of the observing site stored in the StarBook."""
        place = self.place or SitePlacement("E", 0, 0, "N", 0, 0, 0)
        return LOCATION_URL.format(latitude=place.latitude, longitude=place.longitude)

    def help_url(self) -> str:
        """Web interface served by the StarBook itself."""
        return self.protocol.base_url

    def open_sky_map(self) -> str:
        """Refresh the position and show it on sky-map.org in the browser."""
        self.refresh_status()
        url = self.sky_map_url()
        self.browser(url)
        return url

    def open_location(self) -> str:
        """Show the observing site on a map in the browser."""
        url = self.location_url()
        self.browser(url)
        return url
