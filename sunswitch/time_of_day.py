# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Day/night classification for the style scheduler.

Decides whether an instant falls in the day or the night and how long it
is until the next sunrise or sunset, supporting:
- Sunrise/sunset calculation (via astral library)
- Fixed schedule (user-defined day/night times)

Only the time of day of each instant is compared; calendar dates are
discarded, so sunrise and sunset may come from a different day than now.
"""

import logging
from datetime import date as dt_date, datetime, time as dt_time, timezone, tzinfo as dt_tzinfo
from typing import Optional, Tuple, Union

from astral import Observer, sun

from sunswitch.config import SchedulerConfig, TIME_METHODS
from sunswitch.models import Location, StyleType

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 3600

Instant = Union[datetime, dt_time]
SunTimes = Tuple[datetime, datetime]


def parse_time_string(time_str: str) -> dt_time:
    """Parse a time string in HH:MM format.

    Args:
        time_str: Time string in "HH:MM" format (e.g., "07:00", "19:30").

    Returns:
        datetime.time object representing the time.

    Raises:
        ValueError: If the format is invalid or time is out of range.
    """
    if not time_str or ':' not in time_str:
        raise ValueError(f"Invalid time format: '{time_str}'. Expected HH:MM.")

    parts = time_str.strip().split(':')
    if len(parts) != 2:
        raise ValueError(f"Invalid time format: '{time_str}'. Expected HH:MM.")

    try:
        hour = int(parts[0])
        minute = int(parts[1])
    except ValueError as e:
        raise ValueError(f"Invalid time format: '{time_str}'. {e}") from e

    if not (0 <= hour <= 23):
        raise ValueError(f"Hour {hour} out of range (0-23).")
    if not (0 <= minute <= 59):
        raise ValueError(f"Minute {minute} out of range (0-59).")

    return dt_time(hour, minute)


def seconds_since_midnight(value: Instant, tz: Optional[dt_tzinfo] = None) -> int:
    """Wall-clock seconds elapsed since midnight.

    Args:
        value: A datetime or time. Sub-second precision is dropped.
        tz: If given and value is an aware datetime, value is first
            converted to this zone.

    Returns:
        Integer in [0, 86400).
    """
    if isinstance(value, datetime) and tz is not None and value.tzinfo is not None:
        value = value.astimezone(tz)
    return value.hour * 3600 + value.minute * 60 + value.second


def _reference_zone(now: Instant) -> Optional[dt_tzinfo]:
    return now.tzinfo if isinstance(now, datetime) else None


def is_night(now: Instant, sunrise: Instant, sunset: Instant) -> bool:
    """True if now is before sunrise or after sunset, by time of day.

    Aware sunrise/sunset values are read in now's zone so the comparison
    happens on the same wall clock.
    """
    tz = _reference_zone(now)
    current = seconds_since_midnight(now)
    rise = seconds_since_midnight(sunrise, tz)
    set_ = seconds_since_midnight(sunset, tz)
    return current < rise or current > set_


def classify(now: Instant, sunrise: Instant, sunset: Instant) -> StyleType:
    """Style type matching the time of day at now."""
    return StyleType.NIGHT if is_night(now, sunrise, sunset) else StyleType.DAY


def seconds_until_next_boundary(
    now: Instant,
    sunrise: Optional[Instant],
    sunset: Optional[Instant],
) -> Optional[float]:
    """Seconds until the time of day next flips between day and night.

    At night the target is sunrise, wrapping past midnight when sunrise
    already happened today. During the day the target is sunset, which
    cannot wrap.

    Returns:
        Seconds >= 0, or None if sunrise or sunset is unavailable.
    """
    if sunrise is None or sunset is None:
        return None

    tz = _reference_zone(now)
    current = seconds_since_midnight(now)

    if is_night(now, sunrise, sunset):
        interval = seconds_since_midnight(sunrise, tz) - current
        return float(interval if interval >= 0 else interval + SECONDS_PER_DAY)

    return float(seconds_since_midnight(sunset, tz) - current)


def get_sun_times(
    lat: float,
    lon: float,
    date: dt_date,
    tzinfo: Optional[dt_tzinfo] = None,
) -> Optional[SunTimes]:
    """Calculate sunrise and sunset times for a location and date.

    Uses the astral library for the astronomical calculation.

    Args:
        lat: Latitude of the location (-90 to 90).
        lon: Longitude of the location (-180 to 180).
        date: The date to calculate sun times for.
        tzinfo: Zone of the returned datetimes. Default: UTC.

    Returns:
        Tuple of (sunrise, sunset) as aware datetimes, or None when the sun
        does not rise or set on that date (polar day or night).
    """
    observer = Observer(latitude=lat, longitude=lon)
    tzinfo = tzinfo or timezone.utc
    # sunrise/sunset only; sun() also needs civil twilight, which is
    # missing for weeks of summer above about 60 degrees
    try:
        return (
            sun.sunrise(observer, date=date, tzinfo=tzinfo),
            sun.sunset(observer, date=date, tzinfo=tzinfo),
        )
    except ValueError as e:
        logger.warning(f"No sunrise/sunset at ({lat}, {lon}) on {date}: {e}")
        return None


class AstralSunCalculator:
    """Astronomical calculator backed by astral."""

    def __init__(self, tzinfo: Optional[dt_tzinfo] = None):
        self.tzinfo = tzinfo

    def sunrise_sunset(self, date: dt_date, location: Location) -> Optional[SunTimes]:
        return get_sun_times(location.latitude, location.longitude, date, self.tzinfo)


class FixedSunCalculator:
    """Calculator returning user-defined day and night start times.

    Ignores the location; useful where astronomical times are unwanted.
    """

    def __init__(self, day_start_time: str = '07:00', night_start_time: str = '19:00',
                 tzinfo: Optional[dt_tzinfo] = None):
        self.day_start = parse_time_string(day_start_time)
        self.night_start = parse_time_string(night_start_time)
        self.tzinfo = tzinfo

    def sunrise_sunset(self, date: dt_date, location: Optional[Location] = None) -> Optional[SunTimes]:
        return (
            datetime.combine(date, self.day_start, tzinfo=self.tzinfo),
            datetime.combine(date, self.night_start, tzinfo=self.tzinfo),
        )


def make_sun_calculator(config: SchedulerConfig, tzinfo: Optional[dt_tzinfo] = None):
    """Build the calculator selected by config.time_method.

    Raises:
        ValueError: If time_method is unknown or the fixed times are invalid.
    """
    method = config.time_method
    if method == 'sunrise_sunset':
        return AstralSunCalculator(tzinfo)
    if method == 'fixed':
        return FixedSunCalculator(config.day_start_time, config.night_start_time, tzinfo)
    raise ValueError(f"Unknown time method '{method}'. Expected one of {', '.join(TIME_METHODS)}.")
