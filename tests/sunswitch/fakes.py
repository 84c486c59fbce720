# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Deterministic stand-ins for timers, sun calculation and observers."""

from datetime import datetime, time as dt_time


class FakeTimer:
    """threading.Timer look-alike that only fires when told to."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.fired = True
        self.function(*self.args, **self.kwargs)


class FakeTimerFactory:
    """Records every timer created so tests can inspect or fire them."""

    def __init__(self):
        self.timers = []

    def __call__(self, interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args, kwargs)
        self.timers.append(timer)
        return timer

    @property
    def live(self):
        return [t for t in self.timers if t.started and not t.cancelled and not t.fired]

    @property
    def last(self):
        return self.timers[-1] if self.timers else None


class FakeSunCalculator:
    """Returns fixed naive sunrise/sunset times, or None when unavailable."""

    def __init__(self, sunrise=dt_time(6, 0), sunset=dt_time(18, 0), available=True):
        self.sunrise = sunrise
        self.sunset = sunset
        self.available = available
        self.calls = []

    def sunrise_sunset(self, date, location):
        self.calls.append((date, location))
        if not self.available:
            return None
        return datetime.combine(date, self.sunrise), datetime.combine(date, self.sunset)


class RecordingObserver:
    """Collects scheduler notifications."""

    def __init__(self):
        self.applied = []
        self.refreshes = 0

    def did_apply_style(self, scheduler, style):
        self.applied.append(style)

    def did_refresh_appearance(self, scheduler):
        self.refreshes += 1
