import datetime
import math

from horizonkit.ephemeris import Body, EphemerisProvider
from .types import MoonPhase, MoonTruePhase

# Ordered by phase angle; each bucket spans 45 degrees centred on
# 0, 45, 90, ... so the boundaries fall on odd multiples of 22.5.
_PHASE_BUCKETS = (
    MoonTruePhase.NEW,
    MoonTruePhase.WAXING_CRESCENT,
    MoonTruePhase.FIRST_QUARTER,
    MoonTruePhase.WAXING_GIBBOUS,
    MoonTruePhase.FULL,
    MoonTruePhase.WANING_GIBBOUS,
    MoonTruePhase.THIRD_QUARTER,
    MoonTruePhase.WANING_CRESCENT,
)
_BUCKET_WIDTH_DEG = 360.0 / len(_PHASE_BUCKETS)


def phase_bucket(angle_deg: float) -> MoonTruePhase:
    shifted = (angle_deg + _BUCKET_WIDTH_DEG / 2.0) % 360.0
    index = int(shifted // _BUCKET_WIDTH_DEG) % len(_PHASE_BUCKETS)
    return _PHASE_BUCKETS[index]


def illumination_fraction(angle_deg: float) -> float:
    illum = (1.0 - math.cos(math.radians(angle_deg))) / 2.0
    return max(0.0, min(1.0, illum))


class MoonPhaseCalculator:
    def __init__(self, ephemeris: EphemerisProvider):
        self._ephemeris = ephemeris

    def phase_angle_deg(self, instant: datetime.datetime) -> float:
        moon_lon = self._ephemeris.ecliptic_longitude_of(Body.MOON, instant)
        sun_lon = self._ephemeris.ecliptic_longitude_of(Body.SUN, instant)
        return (moon_lon - sun_lon) % 360.0

    def phase_at(self, instant: datetime.datetime) -> MoonPhase:
        angle = self.phase_angle_deg(instant)
        return MoonPhase(
            phase=phase_bucket(angle),
            illumination=illumination_fraction(angle),
            angle_deg=angle,
        )
