# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Style scheduler: keeps the style matching the time of day.

Selects a day or night style for the current location, applies it only
when it changes, and arms a single deferred re-evaluation for the next
sunrise or sunset instead of polling.
"""

import logging
import threading
from datetime import datetime, tzinfo as dt_tzinfo
from typing import Callable, Iterable, Optional, Union

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sunswitch.config import SchedulerConfig, StaticLocationProvider
from sunswitch.models import Location, Style, StyleType
from sunswitch.notifications import (
    CONTENT_SIZE_CHANGED,
    SIGNIFICANT_TIME_CHANGE,
    NotificationCenter,
)
from sunswitch.styles import StyleSet
from sunswitch.time_of_day import SunTimes, classify, make_sun_calculator, seconds_until_next_boundary
from sunswitch.timers import DeferredCall, Dispatch, TimerFactory

logger = logging.getLogger(__name__)

LocationProvider = Callable[[], Optional[Location]]


def _resolve_zone(name: Optional[str]) -> dt_tzinfo:
    if not name:
        return datetime.now().astimezone().tzinfo
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Invalid or unknown IANA timezone name: '{name}'") from e


class StyleScheduler:
    """Applies the style matching the time of day at the current location.

    All entry points are expected to run on one thread. The deferred
    re-evaluation fires on a timer thread; pass dispatch (for example
    sunswitch.notifications.glib_dispatch) to hand it back to the main loop.

    Attributes:
        config: SchedulerConfig in effect.
        date: Fixed reference instant used instead of the clock when set.
    """

    def __init__(
        self,
        location_provider: Union[LocationProvider, StaticLocationProvider, None],
        styles: Iterable[Style] = (),
        *,
        config: Optional[SchedulerConfig] = None,
        sun_calculator=None,
        refresher: Optional[Callable[[], None]] = None,
        observer=None,
        notification_center: Optional[NotificationCenter] = None,
        timer_factory: TimerFactory = threading.Timer,
        dispatch: Optional[Dispatch] = None,
        date: Optional[datetime] = None,
    ):
        """Initialize the scheduler.

        Args:
            location_provider: Callable returning a Location or None, or an
                               object with a current_location() method.
            styles: Styles in circulation. Applied immediately when given.
            config: SchedulerConfig. Default: SchedulerConfig().
            sun_calculator: Object with sunrise_sunset(date, location).
                            Default: built from config.time_method.
            refresher: Called after a forced style switch.
            observer: Object with optional did_apply_style(scheduler, style)
                      and did_refresh_appearance(scheduler) methods.
            notification_center: Source of time and content size signals.
            timer_factory: threading.Timer compatible factory (for testing).
            dispatch: Hands deferred re-evaluation to the owning loop.
            date: Fixed reference instant (for testing).

        Raises:
            ValueError: If config names an unknown timezone or time method.
        """
        self.config = config or SchedulerConfig()
        self.location_provider = location_provider
        self.refresher = refresher
        self.observer = observer
        self.date = date

        self._tz = _resolve_zone(self.config.timezone)
        self.sun_calculator = sun_calculator or make_sun_calculator(self.config, self._tz)

        self._styles = StyleSet()
        self._automatically_adjusts = self.config.automatically_adjusts
        self._current_style_type: Optional[StyleType] = None
        self._deferral = DeferredCall(self.on_deferral_fired, timer_factory, dispatch)

        self._notification_center = notification_center
        self._resume_notifications()

        if styles:
            self.on_styles_replaced(styles)
        else:
            self.reset_deferral()

    # -- Lifecycle ----------------------------------------------------------

    def _resume_notifications(self) -> None:
        if self._notification_center is None:
            return
        self._notification_center.add_observer(SIGNIFICANT_TIME_CHANGE, self.on_external_time_signal)
        self._notification_center.add_observer(CONTENT_SIZE_CHANGED, self.on_content_preference_changed)

    def _suspend_notifications(self) -> None:
        if self._notification_center is None:
            return
        self._notification_center.remove_observer(CONTENT_SIZE_CHANGED, self.on_content_preference_changed)
        self._notification_center.remove_observer(SIGNIFICANT_TIME_CHANGE, self.on_external_time_signal)

    def close(self) -> None:
        """Unsubscribe from notifications and cancel the pending deferral.

        Safe to call more than once.
        """
        self._suspend_notifications()
        self._deferral.cancel()

    def __enter__(self) -> 'StyleScheduler':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # -- State --------------------------------------------------------------

    @property
    def styles(self) -> StyleSet:
        return self._styles

    @styles.setter
    def styles(self, styles: Iterable[Style]) -> None:
        self.on_styles_replaced(styles)

    @property
    def automatically_adjusts(self) -> bool:
        return self._automatically_adjusts

    @automatically_adjusts.setter
    def automatically_adjusts(self, value: bool) -> None:
        self.on_auto_adjust_toggled(value)

    @property
    def current_style_type(self) -> Optional[StyleType]:
        return self._current_style_type

    @property
    def has_pending_deferral(self) -> bool:
        return self._deferral.pending

    @property
    def pending_interval(self) -> Optional[float]:
        """Delay of the armed re-evaluation in seconds, or None."""
        return self._deferral.interval

    # -- External entry points ---------------------------------------------

    def on_styles_replaced(self, styles: Iterable[Style]) -> None:
        self._styles = styles if isinstance(styles, StyleSet) else StyleSet(styles)
        logger.debug(f"Styles replaced: {len(self._styles)} in circulation")
        self.apply_style()
        self.reset_deferral()

    def on_auto_adjust_toggled(self, value: bool) -> None:
        self._automatically_adjusts = bool(value)
        self.reset_deferral()

    def on_location_available(self) -> None:
        self.apply_style()

    def on_content_preference_changed(self) -> None:
        self.apply_style()

    def on_external_time_signal(self) -> None:
        self.on_deferral_fired()

    def on_deferral_fired(self) -> None:
        """Re-evaluate at a sunrise/sunset boundary and arm the next one.

        The next boundary is armed even when applying a style raises.
        """
        try:
            self._refresh_if_needed()
        finally:
            self.reset_deferral()

    # -- Selection ----------------------------------------------------------

    def apply_style(self) -> None:
        """Apply the style for the current conditions if it changed.

        Always re-arms the deferred re-evaluation afterwards.
        """
        self._select_style()
        self.reset_deferral()

    def apply_style_type(self, style_type: StyleType) -> None:
        """Apply every style tagged style_type and force a refresh.

        No-op when style_type is already current or no style carries it.
        """
        if self._current_style_type == style_type:
            return

        matching = self._styles.styles_for(style_type)
        if not matching:
            logger.debug(f"No {style_type.value} style in circulation")
            return

        self._deferral.cancel()

        for style in matching:
            logger.info(f"Applying {style_type.value} style '{style}'")
            style.apply()
            # Only record the type once a payload has actually run
            self._current_style_type = style_type
            self._notify('did_apply_style', style)

        self.force_refresh()

    def reset_deferral(self) -> None:
        """Cancel the pending re-evaluation and arm one for the next boundary.

        Nothing is armed unless automatic adjustment is on, more than one
        style is in circulation, a location is known and sunrise/sunset
        can be calculated for it.
        """
        self._deferral.cancel()

        if not self._automatic_switching_active():
            return

        location = self._current_location()
        if location is None:
            logger.debug("No location, automatic style switching is idle")
            return

        now = self._now()
        sun_times = self._sun_times(location, now)
        interval = seconds_until_next_boundary(now, *sun_times) if sun_times else None
        if interval is None:
            logger.warning("Unable to get sunrise or sunset. Automatic style switching has been disabled.")
            return

        self._deferral.arm(interval + self.config.boundary_guard_seconds)

    def force_refresh(self) -> None:
        """Ask the refresher to redraw with the current appearance."""
        if self.refresher is not None:
            self.refresher()
        self._notify('did_refresh_appearance')

    def style_type_for(self, location: Location) -> Optional[StyleType]:
        """Classify the current instant at location, or None without sun data."""
        now = self._now()
        sun_times = self._sun_times(location, now)
        if sun_times is None:
            return None
        return classify(now, *sun_times)

    # -- Internals ----------------------------------------------------------

    def _select_style(self) -> None:
        location = self._current_location()
        if location is None:
            # Sunrise and sunset need a location, so just use the first style
            self._apply_first_style()
            return

        if not self._automatic_switching_active():
            self._apply_first_style()
            return

        style_type = self.style_type_for(location)
        if style_type is None:
            logger.warning("Sunrise/sunset unavailable, using the first style")
            self._apply_first_style()
            return

        if not self._styles.has_type(style_type):
            logger.debug(f"No {style_type.value} style in circulation, using the first style")
            self._apply_first_style()
            return

        self.apply_style_type(style_type)

    def _apply_first_style(self) -> None:
        style = self._styles.first
        if style is None:
            return
        if self._current_style_type == style.style_type:
            logger.debug(f"Style '{style}' already current")
            return

        logger.info(f"Applying {style.style_type.value} style '{style}'")
        style.apply()
        self._current_style_type = style.style_type
        self._notify('did_apply_style', style)

    def _refresh_if_needed(self) -> None:
        if self._automatic_switching_active():
            location = self._current_location()
            style_type = self.style_type_for(location) if location is not None else None
            if style_type is not None:
                if self._current_style_type == style_type:
                    return
                # Don't switch to a time of day no style covers
                if not self._styles.has_type(style_type):
                    logger.debug(f"No {style_type.value} style in circulation, skipping switch")
                    return

        # Degraded states use the same fallback as apply_style()
        self._select_style()

    def _automatic_switching_active(self) -> bool:
        return self._automatically_adjusts and self._styles.supports_automatic_switching

    def _current_location(self) -> Optional[Location]:
        provider = self.location_provider
        if provider is None:
            return None
        if hasattr(provider, 'current_location'):
            return provider.current_location()
        return provider()

    def _now(self) -> datetime:
        if self.date is not None:
            return self.date
        return datetime.now(self._tz)

    def _sun_times(self, location: Location, now: datetime) -> Optional[SunTimes]:
        sun_times = self.sun_calculator.sunrise_sunset(now.date(), location)
        if sun_times is None:
            return None
        sunrise, sunset = sun_times
        if sunrise is None or sunset is None:
            return None
        return sunrise, sunset

    def _notify(self, method: str, *args) -> None:
        callback = getattr(self.observer, method, None)
        if callback is not None:
            callback(self, *args)
