"""
Mount event notification.

Observers register a callable receiving the event and the mount session.
A failing observer is logged and does not prevent the others from running.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from starbook.api.core.enums import MountEvent


__all__ = ["EventBus", "Observer"]


logger = logging.getLogger(__name__)


Observer = Callable[[MountEvent, Any], None]


class EventBus:
    """Thread-safe list of observers for mount events."""

    def __init__(self) -> None:
        self._observers: list[Observer] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)

    def subscribe(self, observer: Observer) -> None:
        """Register an observer; registering twice has no effect."""
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def unsubscribe(self, observer: Observer) -> None:
        """Remove an observer if it is registered."""
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def notify(self, event: MountEvent, source: Any) -> None:
        """Call every observer with the event, in registration order."""
        with self._lock:
            observers = list(self._observers)

        logger.debug(f"Event {event.value} -> {len(observers)} observer(s)")
        for observer in observers:
            try:
                observer(event, source)
            except Exception:
                logger.exception(f"Observer {observer!r} failed on event {event.value}")
