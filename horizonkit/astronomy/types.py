from dataclasses import dataclass
import datetime
import enum
import math
from typing import Optional


@dataclass(frozen=True)
class Coordinate:
    latitude_deg: float
    longitude_deg: float

    def __post_init__(self):
        for name in ("latitude_deg", "longitude_deg"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value!r}")
        if not -90.0 <= self.latitude_deg <= 90.0:
            raise ValueError(f"Latitude out of range [-90, 90]: {self.latitude_deg}")
        if not -180.0 <= self.longitude_deg <= 180.0:
            raise ValueError(f"Longitude out of range [-180, 180]: {self.longitude_deg}")


@dataclass(frozen=True)
class AstroAltitude:
    time: datetime.datetime
    altitude_deg: float


@dataclass(frozen=True)
class RiseSetTimes:
    """Rise ("up") and set ("down") instants; either may be None."""

    up: Optional[datetime.datetime] = None
    down: Optional[datetime.datetime] = None


SunTimes = RiseSetTimes
MoonTimes = RiseSetTimes


class TwilightMode(enum.Enum):
    ACTUAL = "actual"
    CIVIL = "civil"
    NAUTICAL = "nautical"
    ASTRONOMICAL = "astronomical"

    @property
    def threshold_deg(self) -> float:
        return _TWILIGHT_THRESHOLDS_DEG[self]

    @classmethod
    def parse(cls, value: "str | TwilightMode") -> "TwilightMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown twilight mode: {value} (expected one of: {choices})") from None


# Sunrise/sunset uses the refraction + semi-diameter corrected horizon.
_TWILIGHT_THRESHOLDS_DEG = {
    TwilightMode.ACTUAL: -0.8333,
    TwilightMode.CIVIL: -6.0,
    TwilightMode.NAUTICAL: -12.0,
    TwilightMode.ASTRONOMICAL: -18.0,
}


class MoonTruePhase(enum.Enum):
    NEW = "new"
    WAXING_CRESCENT = "waxing_crescent"
    FIRST_QUARTER = "first_quarter"
    WAXING_GIBBOUS = "waxing_gibbous"
    FULL = "full"
    WANING_GIBBOUS = "waning_gibbous"
    THIRD_QUARTER = "third_quarter"
    WANING_CRESCENT = "waning_crescent"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


@dataclass(frozen=True)
class MoonPhase:
    phase: MoonTruePhase
    illumination: float
    angle_deg: float


class Tide(enum.Enum):
    SPRING = "spring"
    NEAP = "neap"
    NORMAL = "normal"

    @classmethod
    def from_phase(cls, phase: MoonTruePhase) -> "Tide":
        if phase in (MoonTruePhase.NEW, MoonTruePhase.FULL):
            return cls.SPRING
        if phase in (MoonTruePhase.FIRST_QUARTER, MoonTruePhase.THIRD_QUARTER):
            return cls.NEAP
        return cls.NORMAL
