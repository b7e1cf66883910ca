import datetime
import logging
from typing import Optional, Sequence

from horizonkit.ephemeris import Body
from horizonkit.ephemeris.base import as_utc
from .altitude import AltitudeSampler, DEFAULT_STEP_MIN, ONE_DAY, local_midnight
from .types import AstroAltitude, Coordinate, MoonTimes, RiseSetTimes, SunTimes, TwilightMode

logger = logging.getLogger(__name__)

# Standard lunar rise/set altitude for a geocentric Moon (mean parallax
# minus refraction and semi-diameter).
MOON_THRESHOLD_DEG = 0.125
MOON_WINDOW_PADDING = datetime.timedelta(hours=1)


def _interpolate_crossing(a: AstroAltitude, b: AstroAltitude, threshold_deg: float) -> datetime.datetime:
    frac = (threshold_deg - a.altitude_deg) / (b.altitude_deg - a.altitude_deg)
    start = as_utc(a.time)
    return (start + (as_utc(b.time) - start) * frac).astimezone(a.time.tzinfo)


def find_crossings(
    samples: Sequence[AstroAltitude],
    threshold_deg: float,
) -> RiseSetTimes:
    """Walk consecutive samples for the first up- and down-crossing.

    The down-crossing is taken after the up-crossing when one exists,
    otherwise the first down-crossing from the start of the samples.
    """
    up: Optional[datetime.datetime] = None
    down_after_up: Optional[datetime.datetime] = None
    first_down: Optional[datetime.datetime] = None

    for a, b in zip(samples, samples[1:]):
        if up is None and a.altitude_deg < threshold_deg <= b.altitude_deg:
            up = _interpolate_crossing(a, b, threshold_deg)
        elif a.altitude_deg >= threshold_deg > b.altitude_deg:
            crossing = _interpolate_crossing(a, b, threshold_deg)
            if first_down is None:
                first_down = crossing
            if up is not None:
                down_after_up = crossing
                break

    down = down_after_up if up is not None else first_down
    return RiseSetTimes(up=up, down=down)


class RiseSetLocator:
    def __init__(self, sampler: AltitudeSampler, step_minutes: float = DEFAULT_STEP_MIN):
        self._sampler = sampler
        self._step_minutes = step_minutes

    def locate(
        self,
        body: Body,
        location: Coordinate,
        start: datetime.datetime,
        end: datetime.datetime,
        threshold_deg: float,
    ) -> RiseSetTimes:
        duration = as_utc(end) - as_utc(start)
        if duration <= datetime.timedelta(0):
            raise ValueError("Window end must be after window start")
        samples = self._sampler.sample(body, location, start, duration, self._step_minutes)
        times = find_crossings(samples, threshold_deg)
        if times.up is None and times.down is None:
            logger.debug(
                "No %s crossing of %.3f deg between %s and %s at (%.4f, %.4f)",
                body.value,
                threshold_deg,
                start.isoformat(),
                end.isoformat(),
                location.latitude_deg,
                location.longitude_deg,
            )
        return times


class SunTimesCalculator:
    def __init__(self, locator: RiseSetLocator, mode: TwilightMode = TwilightMode.ACTUAL):
        self._locator = locator
        self.mode = mode

    def calculate(self, location: Coordinate, date: datetime.date, tz: datetime.tzinfo) -> SunTimes:
        start = local_midnight(date, tz)
        return self._locator.locate(Body.SUN, location, start, start + ONE_DAY, self.mode.threshold_deg)


class MoonTimesCalculator:
    def __init__(self, locator: RiseSetLocator, threshold_deg: float = MOON_THRESHOLD_DEG):
        self._locator = locator
        self._threshold_deg = threshold_deg

    def calculate(self, location: Coordinate, date: datetime.date, tz: datetime.tzinfo) -> MoonTimes:
        midnight = local_midnight(date, tz)
        start = midnight - MOON_WINDOW_PADDING
        end = midnight + ONE_DAY + MOON_WINDOW_PADDING
        return self._locator.locate(Body.MOON, location, start, end, self._threshold_deg)
