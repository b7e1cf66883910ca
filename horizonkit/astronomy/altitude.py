import datetime

from horizonkit.ephemeris import Body, EphemerisProvider
from .types import AstroAltitude, Coordinate

DEFAULT_STEP_MIN = 10
ONE_DAY = datetime.timedelta(days=1)


def local_midnight(date: datetime.date, tz: datetime.tzinfo) -> datetime.datetime:
    return datetime.datetime.combine(date, datetime.time(0, 0), tzinfo=tz)


def sample_times(
    start: datetime.datetime,
    duration: datetime.timedelta,
    step_minutes: float,
) -> list[datetime.datetime]:
    """Evenly spaced instants from ``start`` to ``start + duration`` inclusive.

    Spacing is applied in UTC so that DST transitions do not stretch or
    shrink steps; each instant is returned in the tzinfo of ``start``.
    """
    if step_minutes <= 0:
        raise ValueError("Step must be positive")
    if start.tzinfo is None:
        start = start.replace(tzinfo=datetime.timezone.utc)
    tz = start.tzinfo
    step = datetime.timedelta(minutes=step_minutes)
    count = int(duration / step) + 1
    start_utc = start.astimezone(datetime.timezone.utc)
    return [(start_utc + step * i).astimezone(tz) for i in range(count)]


class AltitudeSampler:
    def __init__(self, ephemeris: EphemerisProvider):
        self._ephemeris = ephemeris

    def altitude_at(self, body: Body, location: Coordinate, instant: datetime.datetime) -> AstroAltitude:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=datetime.timezone.utc)
        position = self._ephemeris.position_of(body, location, instant)
        return AstroAltitude(time=instant, altitude_deg=position.altitude_deg)

    def azimuth_at(self, body: Body, location: Coordinate, instant: datetime.datetime) -> float:
        return self._ephemeris.position_of(body, location, instant).azimuth_deg

    def sample(
        self,
        body: Body,
        location: Coordinate,
        start: datetime.datetime,
        duration: datetime.timedelta,
        step_minutes: float = DEFAULT_STEP_MIN,
    ) -> list[AstroAltitude]:
        return [
            self.altitude_at(body, location, t)
            for t in sample_times(start, duration, step_minutes)
        ]

    def sample_day(
        self,
        body: Body,
        location: Coordinate,
        date: datetime.date,
        tz: datetime.tzinfo,
        step_minutes: float = DEFAULT_STEP_MIN,
    ) -> list[AstroAltitude]:
        return self.sample(body, location, local_midnight(date, tz), ONE_DAY, step_minutes)
