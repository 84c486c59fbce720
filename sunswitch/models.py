# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Value types shared by the style scheduler."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional


class StyleType(str, Enum):
    """Time-of-day tag carried by every style."""
    DAY = "day"
    NIGHT = "night"


def _noop() -> None:
    pass


@dataclass(frozen=True)
class Style:
    """A presentation style the scheduler can select.

    Attributes:
        style_type: Whether this style is meant for day or night.
        name: Human readable identifier, used in log messages.
        apply_fn: Appearance payload invoked when the style is applied.
    """
    style_type: StyleType
    name: str = ""
    apply_fn: Callable[[], None] = field(default=_noop, compare=False, repr=False)

    def apply(self) -> None:
        """Run the appearance payload."""
        self.apply_fn()

    def __str__(self) -> str:
        return self.name or self.style_type.value


@dataclass(frozen=True)
class Location:
    """Geographic coordinate used for sunrise/sunset calculation.

    Raises:
        ValueError: If latitude or longitude is out of range.
    """
    latitude: float
    longitude: float

    def __post_init__(self):
        if not (-90 <= self.latitude <= 90):
            raise ValueError(f"Latitude {self.latitude} out of range (-90 to 90).")
        if not (-180 <= self.longitude <= 180):
            raise ValueError(f"Longitude {self.longitude} out of range (-180 to 180).")

    @classmethod
    def from_optional(cls, latitude: Optional[float], longitude: Optional[float]) -> Optional['Location']:
        """Build a Location, or None when either coordinate is missing."""
        if latitude is None or longitude is None:
            return None
        return cls(latitude=float(latitude), longitude=float(longitude))
