# sunswitch
# Keeps a day or night presentation style applied according to sunrise
# and sunset at the current location, re-evaluating exactly at each boundary.

from sunswitch.models import (
    StyleType,
    Style,
    Location,
)
from sunswitch.styles import StyleSet
from sunswitch.config import (
    SchedulerConfig,
    StaticLocationProvider,
    load_config,
    DEFAULT_CONFIG_PATH,
)
from sunswitch.time_of_day import (
    parse_time_string,
    seconds_since_midnight,
    is_night,
    classify,
    seconds_until_next_boundary,
    get_sun_times,
    AstralSunCalculator,
    FixedSunCalculator,
    make_sun_calculator,
)
from sunswitch.timers import DeferredCall
from sunswitch.notifications import (
    NotificationCenter,
    GnomeSettingsBridge,
    glib_dispatch,
    SIGNIFICANT_TIME_CHANGE,
    CONTENT_SIZE_CHANGED,
)
from sunswitch.scheduler import StyleScheduler

__all__ = [
    # Models
    'StyleType',
    'Style',
    'Location',
    'StyleSet',
    # Config
    'SchedulerConfig',
    'StaticLocationProvider',
    'load_config',
    'DEFAULT_CONFIG_PATH',
    # Time of day
    'parse_time_string',
    'seconds_since_midnight',
    'is_night',
    'classify',
    'seconds_until_next_boundary',
    'get_sun_times',
    'AstralSunCalculator',
    'FixedSunCalculator',
    'make_sun_calculator',
    # Timers
    'DeferredCall',
    # Notifications
    'NotificationCenter',
    'GnomeSettingsBridge',
    'glib_dispatch',
    'SIGNIFICANT_TIME_CHANGE',
    'CONTENT_SIZE_CHANGED',
    # Scheduler
    'StyleScheduler',
]
