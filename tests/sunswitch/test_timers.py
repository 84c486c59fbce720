#!/usr/bin/python3
# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-

"""Tests for sunswitch.timers - Single-slot deferred call."""

import unittest
from unittest.mock import MagicMock

from fakes import FakeTimerFactory


class TestDeferredCall(unittest.TestCase):
    """Tests for DeferredCall arming and cancellation."""

    def _make(self, dispatch=None):
        from sunswitch.timers import DeferredCall

        callback = MagicMock()
        factory = FakeTimerFactory()
        return DeferredCall(callback, factory, dispatch), callback, factory

    def test_nothing_pending_initially(self):
        deferred, _, factory = self._make()
        self.assertFalse(deferred.pending)
        self.assertIsNone(deferred.interval)
        self.assertEqual(factory.timers, [])

    def test_arm_starts_daemon_timer(self):
        deferred, _, factory = self._make()
        deferred.arm(42.0)

        self.assertTrue(deferred.pending)
        self.assertEqual(deferred.interval, 42.0)
        timer = factory.last
        self.assertTrue(timer.started)
        self.assertTrue(timer.daemon)
        self.assertEqual(timer.interval, 42.0)

    def test_arm_cancels_previous_timer(self):
        """At most one timer is ever live."""
        deferred, _, factory = self._make()
        deferred.arm(10.0)
        deferred.arm(20.0)

        self.assertTrue(factory.timers[0].cancelled)
        self.assertEqual(len(factory.live), 1)
        self.assertEqual(deferred.interval, 20.0)

    def test_fire_runs_callback_and_clears_slot(self):
        deferred, callback, factory = self._make()
        deferred.arm(5.0)
        factory.last.fire()

        callback.assert_called_once_with()
        self.assertFalse(deferred.pending)

    def test_cancel_clears_slot(self):
        deferred, _, factory = self._make()
        deferred.arm(5.0)
        deferred.cancel()

        self.assertFalse(deferred.pending)
        self.assertTrue(factory.last.cancelled)

    def test_cancel_without_pending_is_noop(self):
        deferred, _, _ = self._make()
        deferred.cancel()
        deferred.cancel()
        self.assertFalse(deferred.pending)

    def test_stale_timer_does_not_run_callback(self):
        """A timer replaced or cancelled while waking up is ignored."""
        deferred, callback, factory = self._make()
        deferred.arm(5.0)
        stale = factory.last
        deferred.arm(6.0)

        stale.fire()
        callback.assert_not_called()
        self.assertTrue(deferred.pending)

        deferred.cancel()
        factory.last.fire()
        callback.assert_not_called()

    def test_dispatch_receives_callback(self):
        queued = []
        deferred, callback, factory = self._make(dispatch=queued.append)
        deferred.arm(5.0)
        factory.last.fire()

        callback.assert_not_called()
        self.assertEqual(queued, [callback])
        self.assertFalse(deferred.pending)


if __name__ == '__main__':
    unittest.main()
