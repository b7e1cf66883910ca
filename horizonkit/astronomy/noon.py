import datetime
from typing import Optional

from horizonkit.ephemeris import Body
from horizonkit.ephemeris.base import as_utc
from .altitude import AltitudeSampler
from .types import Coordinate, RiseSetTimes

NOON_SEARCH_HALF_WIDTH = datetime.timedelta(hours=1)
NOON_SEARCH_STEP_MIN = 1


class NoonLocator:
    """Time of maximum altitude between a rise and the following set.

    Linear scan of a two hour window around the rise/set midpoint at
    one-minute resolution.
    """

    def __init__(self, sampler: AltitudeSampler):
        self._sampler = sampler

    def locate(
        self,
        body: Body,
        location: Coordinate,
        times: RiseSetTimes,
    ) -> Optional[datetime.datetime]:
        if times.up is None or times.down is None:
            return None
        if not times.up < times.down:
            return None

        up = as_utc(times.up)
        midpoint = up + (as_utc(times.down) - up) / 2
        start = (midpoint - NOON_SEARCH_HALF_WIDTH).astimezone(times.up.tzinfo)
        samples = self._sampler.sample(
            body,
            location,
            start,
            2 * NOON_SEARCH_HALF_WIDTH,
            NOON_SEARCH_STEP_MIN,
        )
        best = samples[0]
        for sample in samples[1:]:
            if sample.altitude_deg > best.altitude_deg:
                best = sample
        return best.time
