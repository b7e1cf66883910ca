from .service import AstronomyService
from .types import (
    AstroAltitude,
    Coordinate,
    MoonPhase,
    MoonTimes,
    MoonTruePhase,
    RiseSetTimes,
    SunTimes,
    Tide,
    TwilightMode,
)

__all__ = [
    "AstronomyService",
    "AstroAltitude",
    "Coordinate",
    "MoonPhase",
    "MoonTimes",
    "MoonTruePhase",
    "RiseSetTimes",
    "SunTimes",
    "Tide",
    "TwilightMode",
]
