# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Tests for StyleScheduler timer cleanup on close.

These tests use real threading.Timer objects to verify that the pending
re-evaluation is cancelled when the scheduler is closed, so callbacks never
run against a torn-down scheduler.
"""

import threading
import time
import unittest
from datetime import datetime, time as dt_time
from unittest.mock import MagicMock

import pytest


class ShortNightCalculator:
    """Sunrise a fraction of a second after now, so timers fire quickly."""

    def __init__(self, now):
        self.now = now

    def sunrise_sunset(self, date, location):
        return (
            datetime.combine(date, dt_time(self.now.hour, self.now.minute, self.now.second + 1)),
            datetime.combine(date, dt_time(23, 0)),
        )


@pytest.mark.slow
class TestSchedulerTimerCleanup(unittest.TestCase):
    """Tests for deferral cleanup with real timers."""

    NOW = datetime(2025, 6, 1, 3, 0, 0)

    def _make(self, guard=0.0):
        from sunswitch.config import SchedulerConfig
        from sunswitch.models import Location, Style, StyleType
        from sunswitch.scheduler import StyleScheduler

        fired = threading.Event()
        scheduler = StyleScheduler(
            lambda: Location(0.0, 0.0),
            [Style(StyleType.DAY, "day"), Style(StyleType.NIGHT, "night")],
            config=SchedulerConfig(boundary_guard_seconds=guard),
            sun_calculator=ShortNightCalculator(self.NOW),
            date=self.NOW,
        )
        original = scheduler.on_deferral_fired

        def on_fired():
            fired.set()
            original()

        # Route the timer through the recording wrapper
        scheduler._deferral._callback = on_fired
        return scheduler, fired

    def test_deferral_fires_on_real_timer(self):
        scheduler, fired = self._make()
        self.addCleanup(scheduler.close)

        self.assertEqual(scheduler.pending_interval, 1.0)
        self.assertTrue(fired.wait(2.0), "Deferred re-evaluation should have fired")

    def test_close_cancels_real_timer(self):
        """No callback runs after close()."""
        scheduler, fired = self._make(guard=0.2)
        self.assertTrue(scheduler.has_pending_deferral)

        scheduler.close()

        time.sleep(1.5)
        self.assertFalse(fired.is_set(), "Timer callback ran after close()")
        self.assertFalse(scheduler.has_pending_deferral)

    def test_close_without_pending_timer_does_not_raise(self):
        from sunswitch.scheduler import StyleScheduler

        scheduler = StyleScheduler(lambda: None, [], sun_calculator=MagicMock())
        scheduler.close()
        scheduler.close()

    def test_timer_threads_are_daemons(self):
        scheduler, _ = self._make(guard=30.0)
        self.addCleanup(scheduler.close)

        self.assertTrue(scheduler._deferral._timer.daemon)


if __name__ == '__main__':
    unittest.main()
