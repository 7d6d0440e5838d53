"""
Unit tests for events.py
"""

import unittest
from unittest.mock import MagicMock

from starbook.api.core.enums import MountEvent
from starbook.api.telescope.events import EventBus


class TestEventBus(unittest.TestCase):
    """Test suite for EventBus class"""

    def setUp(self):
        """Set up test fixtures before each test"""
        self.bus = EventBus()

    def test_notify_in_order(self):
        """Test observers are called in registration order"""
        calls = []
        self.bus.subscribe(lambda event, source: calls.append(("first", event)))
        self.bus.subscribe(lambda event, source: calls.append(("second", event)))
        self.bus.notify(MountEvent.IDLE, None)
        self.assertEqual(calls, [("first", MountEvent.IDLE), ("second", MountEvent.IDLE)])

    def test_source_is_passed(self):
        """Test observers receive the notifying object"""
        observer = MagicMock()
        source = object()
        self.bus.subscribe(observer)
        self.bus.notify(MountEvent.UPDATED, source)
        observer.assert_called_once_with(MountEvent.UPDATED, source)

    def test_subscribe_twice(self):
        """Test duplicate subscriptions are ignored"""
        observer = MagicMock()
        self.bus.subscribe(observer)
        self.bus.subscribe(observer)
        self.assertEqual(len(self.bus), 1)
        self.bus.notify(MountEvent.MOVING, None)
        observer.assert_called_once()

    def test_unsubscribe(self):
        """Test unsubscribed observers are not called"""
        observer = MagicMock()
        self.bus.subscribe(observer)
        self.bus.unsubscribe(observer)
        self.bus.unsubscribe(observer)
        self.bus.notify(MountEvent.MOVING, None)
        observer.assert_not_called()

    def test_failing_observer_is_isolated(self):
        """Test a raising observer does not stop the others"""
        failing = MagicMock(side_effect=RuntimeError("boom"))
        healthy = MagicMock()
        self.bus.subscribe(failing)
        self.bus.subscribe(healthy)
        with self.assertLogs("starbook.api.telescope.events", level="ERROR"):
            self.bus.notify(MountEvent.GOTO_REACHED, None)
        healthy.assert_called_once()

    def test_unsubscribe_during_notify(self):
        """Test an observer may unsubscribe itself while being notified"""
        calls = []

        def once(event, source):
            calls.append(event)
            self.bus.unsubscribe(once)

        self.bus.subscribe(once)
        self.bus.notify(MountEvent.IDLE, None)
        self.bus.notify(MountEvent.IDLE, None)
        self.assertEqual(calls, [MountEvent.IDLE])


if __name__ == "__main__":
    unittest.main()
