"""
Status Poller for Background Mount Monitoring

This module provides the StatusPoller class, which refreshes the mount status
in a background thread at a fixed period and pushes the StarBook screen to an
attached view.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Protocol


if TYPE_CHECKING:
    from starbook.api.telescope.telescope import StarBookMount


__all__ = ["ScreenView", "StatusPoller"]


logger = logging.getLogger(__name__)


class ScreenView(Protocol):
    """Anything able to display a decoded StarBook screen."""

    def show(self, raster: Any) -> None: ...


class StatusPoller:
    """Background thread calling ``refresh_status`` on a mount."""

    def __init__(self, mount: StarBookMount, interval: float = 5.0, view: ScreenView | None = None) -> None:
        """Initialize the poller.

        Args:
            mount: Session to refresh
            interval: Period between refreshes in seconds
            view: Optional screen view updated after each refresh
        """
        self.mount = mount
        self.interval = interval
        self.view = view
        self.auto_screen = True
        self.error_count = 0
        self.tick_count = 0
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()

    def start(self) -> None:
        """Start background polling. Does nothing if already running."""
        with self._lock:
            if self.is_running():
                return
            # One event per thread: a loop stopped from its own tick stays stopped
            self._stop_event = threading.Event()
            self.error_count = 0
            self._thread = threading.Thread(
                target=self._poll_loop, args=(self._stop_event,), name="starbook-poller", daemon=True
            )
            self._thread.start()
        logger.info(f"Status polling started (interval: {self.interval}s)")

    def stop(self) -> None:
        """
        Stop background polling.

        Safe to call from a tick running on the poller thread; the loop exits
        after the current tick.
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_event.set()
            self._thread = None

        if thread is not threading.current_thread() and thread.is_alive():
            thread.join(timeout=self.interval + 1.0)
        logger.info("Status polling stopped")

    def is_running(self) -> bool:
        """Check if the poller thread is alive."""
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def tick(self) -> None:
        """Run one refresh, then push the screen to the view if enabled."""
        self.tick_count += 1
        self.mount.refresh_status()
        if self.auto_screen and self.view is not None:
            raster = self.mount.get_screen()
            if raster is not None:
                self.view.show(raster)

    def _poll_loop(self, stop_event: threading.Event) -> None:
        """Background polling loop."""
        while not stop_event.is_set():
            try:
                self.tick()
            except Exception:
                self.error_count += 1
                logger.exception(f"Error in status poll ({self.error_count} so far)")

            # Wait for next tick (allow early exit)
            stop_event.wait(self.interval)
