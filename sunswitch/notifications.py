# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Notification plumbing between the desktop and the style scheduler.

NotificationCenter is an in-process registry of named signals. The
scheduler observes two of them:
- SIGNIFICANT_TIME_CHANGE: the wall clock jumped (resume, zone change)
- CONTENT_SIZE_CHANGED: the preferred text size changed

GnomeSettingsBridge feeds both from the desktop via Gio when PyGObject is
installed.
"""

import logging
import threading
from typing import Callable, Dict, List, Optional

# Try to import Gio for desktop signals
try:
    from gi.repository import Gio, GLib
except ImportError:
    Gio = None
    GLib = None

logger = logging.getLogger(__name__)

SIGNIFICANT_TIME_CHANGE = "significant-time-change"
CONTENT_SIZE_CHANGED = "content-size-changed"

Observer = Callable[[], None]


class NotificationCenter:
    """Registry of callbacks keyed by signal name."""

    def __init__(self):
        self._lock = threading.Lock()
        self._observers: Dict[str, List[Observer]] = {}

    def add_observer(self, name: str, callback: Observer) -> None:
        with self._lock:
            self._observers.setdefault(name, []).append(callback)

    def remove_observer(self, name: str, callback: Observer) -> None:
        """Remove callback from name. Unknown callbacks are ignored."""
        with self._lock:
            callbacks = self._observers.get(name, [])
            if callback in callbacks:
                callbacks.remove(callback)
            if not callbacks:
                self._observers.pop(name, None)

    def observer_count(self, name: str) -> int:
        with self._lock:
            return len(self._observers.get(name, []))

    def post(self, name: str) -> int:
        """Call every observer of name.

        Returns:
            Number of observers notified.
        """
        with self._lock:
            callbacks = list(self._observers.get(name, []))
        logger.debug(f"Posting '{name}' to {len(callbacks)} observer(s)")
        for callback in callbacks:
            callback()
        return len(callbacks)


def glib_dispatch(callback: Callable[[], None]) -> None:
    """Run callback on the GLib main loop.

    Intended as the scheduler's dispatch so deferred re-evaluation happens
    on the UI thread rather than the timer thread.
    """
    if GLib is None:
        logger.debug("GLib not available, running callback directly")
        callback()
        return

    def _idle():
        callback()
        return False  # one-shot

    GLib.idle_add(_idle)


class GnomeSettingsBridge:
    """Posts desktop events into a NotificationCenter.

    - org.gnome.desktop.interface text-scaling-factor changes post
      CONTENT_SIZE_CHANGED.
    - logind PrepareForSleep(false), i.e. resume from suspend, posts
      SIGNIFICANT_TIME_CHANGE.
    """

    INTERFACE_SCHEMA = "org.gnome.desktop.interface"
    TEXT_SCALING_KEY = "text-scaling-factor"

    def __init__(self, center: NotificationCenter):
        self.center = center
        self._settings = None
        self._settings_handler: Optional[int] = None
        self._bus = None
        self._sleep_subscription: Optional[int] = None

    @property
    def active(self) -> bool:
        return self._settings_handler is not None or self._sleep_subscription is not None

    def start(self) -> bool:
        """Connect to the desktop.

        Returns:
            True if at least one desktop signal source was connected.
        """
        if Gio is None:
            logger.debug("Gio not available, desktop notifications disabled")
            return False

        try:
            self._settings = Gio.Settings.new(self.INTERFACE_SCHEMA)
            self._settings_handler = self._settings.connect(
                f"changed::{self.TEXT_SCALING_KEY}", self._on_text_scaling_changed
            )
        except Exception as e:
            logger.debug(f"Could not watch GNOME settings: {e}")
            self._settings = None
            self._settings_handler = None

        try:
            self._bus = Gio.bus_get_sync(Gio.BusType.SYSTEM, None)
            self._sleep_subscription = self._bus.signal_subscribe(
                "org.freedesktop.login1",
                "org.freedesktop.login1.Manager",
                "PrepareForSleep",
                "/org/freedesktop/login1",
                None,
                Gio.DBusSignalFlags.NONE,
                self._on_prepare_for_sleep,
            )
        except Exception as e:
            logger.debug(f"Could not subscribe to logind: {e}")
            self._bus = None
            self._sleep_subscription = None

        return self.active

    def stop(self) -> None:
        """Disconnect from the desktop. Safe to call more than once."""
        if self._settings is not None and self._settings_handler is not None:
            self._settings.disconnect(self._settings_handler)
        self._settings = None
        self._settings_handler = None

        if self._bus is not None and self._sleep_subscription is not None:
            self._bus.signal_unsubscribe(self._sleep_subscription)
        self._bus = None
        self._sleep_subscription = None

    def _on_text_scaling_changed(self, settings, key):
        logger.debug(f"GNOME {key} changed")
        self.center.post(CONTENT_SIZE_CHANGED)

    def _on_prepare_for_sleep(self, connection, sender, path, interface, signal, parameters):
        (going_to_sleep,) = parameters.unpack()
        if not going_to_sleep:
            logger.debug("Resumed from suspend")
            self.center.post(SIGNIFICANT_TIME_CHANGE)
