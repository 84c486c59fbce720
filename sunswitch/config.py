# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Configuration for the style scheduler.

Defines the parameters that control automatic day/night switching and
loads them from ~/.config/sunswitch/config.toml.
"""

import logging
import os
from dataclasses import dataclass, fields as dataclass_fields, asdict
from typing import Dict, Any, Optional

# TOML parsing - try stdlib first (Python 3.11+), then tomli
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from sunswitch.models import Location

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.expanduser('~/.config/sunswitch/config.toml')

TIME_METHODS = ('sunrise_sunset', 'fixed')


@dataclass
class SchedulerConfig:
    """Configuration for automatic style switching.

    Attributes:
        automatically_adjusts: Switch styles at sunrise and sunset.
            Needs at least two styles to have any effect. Default: True.
        latitude: Latitude used by StaticLocationProvider. Default: None.
        longitude: Longitude used by StaticLocationProvider. Default: None.
        timezone: IANA zone name for the wall clock, e.g. 'Europe/Oslo'.
            None uses the local zone. Default: None.
        time_method: 'sunrise_sunset' (astral) or 'fixed' (day_start_time
            and night_start_time). Default: 'sunrise_sunset'.
        day_start_time: "HH:MM" used as sunrise by the fixed method.
        night_start_time: "HH:MM" used as sunset by the fixed method.
        boundary_guard_seconds: Delay added past each boundary before
            re-evaluating. Default: 1 second.
    """
    automatically_adjusts: bool = True
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = None
    time_method: str = 'sunrise_sunset'
    day_start_time: str = '07:00'
    night_start_time: str = '19:00'
    boundary_guard_seconds: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a dictionary.

        Returns:
            Dictionary representation of the config.
        """
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SchedulerConfig':
        """Create a SchedulerConfig from a dictionary.

        Unknown keys are ignored. Missing keys use defaults.

        Args:
            data: Dictionary with config values.

        Returns:
            New SchedulerConfig instance.
        """
        valid_fields = {f.name for f in dataclass_fields(cls)}
        filtered_data = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered_data)

    def location(self) -> Optional[Location]:
        """Configured location, or None if either coordinate is unset."""
        return Location.from_optional(self.latitude, self.longitude)


class StaticLocationProvider:
    """Location provider backed by a fixed coordinate.

    Satisfies the scheduler's location provider interface for desktop use,
    where the location comes from configuration rather than a GPS fix.
    """

    def __init__(self, location: Optional[Location] = None):
        self._location = location

    @classmethod
    def from_config(cls, config: SchedulerConfig) -> 'StaticLocationProvider':
        return cls(config.location())

    def current_location(self) -> Optional[Location]:
        return self._location

    def set_location(self, location: Optional[Location]) -> None:
        self._location = location


def load_config(path: Optional[str] = None) -> SchedulerConfig:
    """Load scheduler configuration from a TOML file.

    Settings live in a [sunswitch] table:

        [sunswitch]
        latitude = 59.91
        longitude = 10.75
        timezone = "Europe/Oslo"

    Args:
        path: Path to the TOML file. If None, uses the default location.

    Returns:
        SchedulerConfig. Defaults are used when the file is missing or
        cannot be parsed.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    if not os.path.exists(path):
        logger.debug(f"No config file at {path}, using defaults")
        return SchedulerConfig()

    try:
        with open(path, 'rb') as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.error(f"Error parsing config {path}: {e}")
        return SchedulerConfig()

    section = data.get('sunswitch', {})
    if not isinstance(section, dict):
        logger.error(f"Invalid [sunswitch] section in {path}, using defaults")
        return SchedulerConfig()

    config = SchedulerConfig.from_dict(section)
    logger.debug(f"Loaded scheduler config from {path}: {config}")
    return config
