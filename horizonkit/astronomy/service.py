import datetime
import math
from typing import Iterable, Optional

from horizonkit.clock import Clock, SystemClock
from horizonkit.ephemeris import Body, EphemerisProvider, get_ephemeris_provider
from horizonkit.ephemeris.base import as_utc
from .altitude import AltitudeSampler, DEFAULT_STEP_MIN, ONE_DAY
from .noon import NoonLocator
from .phase import MoonPhaseCalculator
from .riseset import MoonTimesCalculator, RiseSetLocator, SunTimesCalculator
from .types import (
    AstroAltitude,
    Coordinate,
    MoonPhase,
    MoonTimes,
    SunTimes,
    Tide,
    TwilightMode,
)

CENTERED_WINDOW_HALF = datetime.timedelta(hours=12)
PHASE_REFERENCE_TIME = datetime.time(12, 0)


def round_to_nearest_minutes(instant: datetime.datetime, minutes: int = DEFAULT_STEP_MIN) -> datetime.datetime:
    """Round to the nearest multiple of ``minutes``, dropping seconds.

    Rounding is done in UTC so an instant in a repeated wall-clock hour stays
    on its own side of the clock change.
    """
    utc = as_utc(instant)
    base = utc.replace(minute=0, second=0, microsecond=0)
    rounded = minutes * math.floor(utc.minute / minutes + 0.5)
    result = base + datetime.timedelta(minutes=rounded)
    if instant.tzinfo is None:
        return result.replace(tzinfo=None)
    return result.astimezone(instant.tzinfo)


def closest_future_time(
    now: datetime.datetime,
    candidates: Iterable[Optional[datetime.datetime]],
) -> Optional[datetime.datetime]:
    future = [t for t in candidates if t is not None and t > now]
    if not future:
        return None
    return min(future)


class AstronomyService:
    """Sun and moon queries for a location, resolved against a reference clock."""

    def __init__(
        self,
        ephemeris: EphemerisProvider | None = None,
        clock: Clock | None = None,
    ):
        self._ephemeris = ephemeris or get_ephemeris_provider()
        self._clock = clock or SystemClock()
        self._sampler = AltitudeSampler(self._ephemeris)
        self._locator = RiseSetLocator(self._sampler)
        self._moon_times = MoonTimesCalculator(self._locator)
        self._phase = MoonPhaseCalculator(self._ephemeris)
        self._noon = NoonLocator(self._sampler)

    @classmethod
    def from_config(cls, config, clock: Clock | None = None) -> "AstronomyService":
        return cls(
            ephemeris=get_ephemeris_provider(config),
            clock=clock or SystemClock(config.timezone()),
        )

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def tz(self) -> datetime.tzinfo:
        return self._clock.tz

    def _today(self) -> datetime.date:
        return self._clock.today()

    # Moon

    def current_moon_phase(self) -> MoonPhase:
        return self._phase.phase_at(self._clock.now())

    def moon_phase(self, date: datetime.date | None = None) -> MoonPhase:
        """Phase at local noon of ``date``."""
        date = date or self._today()
        time = datetime.datetime.combine(date, PHASE_REFERENCE_TIME, tzinfo=self.tz)
        return self._phase.phase_at(time)

    def moon_times(self, location: Coordinate, date: datetime.date | None = None) -> MoonTimes:
        return self._moon_times.calculate(location, date or self._today(), self.tz)

    def moon_altitudes(self, location: Coordinate, date: datetime.date | None = None) -> list[AstroAltitude]:
        return self._sampler.sample_day(Body.MOON, location, date or self._today(), self.tz)

    def centered_moon_altitudes(self, location: Coordinate, time: datetime.datetime) -> list[AstroAltitude]:
        return self._centered_altitudes(Body.MOON, location, time)

    def moon_altitude(self, location: Coordinate, time: datetime.datetime) -> AstroAltitude:
        return self._sampler.altitude_at(Body.MOON, location, time)

    def moon_azimuth(self, location: Coordinate) -> float:
        return self._sampler.azimuth_at(Body.MOON, location, self._clock.now())

    def is_moon_up(self, location: Coordinate) -> bool:
        return self.moon_altitude(location, self._clock.now()).altitude_deg > 0

    def lunar_noon(self, location: Coordinate, date: datetime.date | None = None) -> Optional[datetime.datetime]:
        return self._noon.locate(Body.MOON, location, self.moon_times(location, date))

    def tides(self, date: datetime.date | None = None) -> Tide:
        return Tide.from_phase(self.moon_phase(date).phase)

    # Sun

    def sun_times(
        self,
        location: Coordinate,
        mode: TwilightMode = TwilightMode.ACTUAL,
        date: datetime.date | None = None,
    ) -> SunTimes:
        calculator = SunTimesCalculator(self._locator, TwilightMode.parse(mode))
        return calculator.calculate(location, date or self._today(), self.tz)

    def today_sun_times(self, location: Coordinate, mode: TwilightMode = TwilightMode.ACTUAL) -> SunTimes:
        return self.sun_times(location, mode, self._today())

    def tomorrow_sun_times(self, location: Coordinate, mode: TwilightMode = TwilightMode.ACTUAL) -> SunTimes:
        return self.sun_times(location, mode, self._today() + datetime.timedelta(days=1))

    def sun_altitudes(self, location: Coordinate, date: datetime.date | None = None) -> list[AstroAltitude]:
        return self._sampler.sample_day(Body.SUN, location, date or self._today(), self.tz)

    def centered_sun_altitudes(self, location: Coordinate, time: datetime.datetime) -> list[AstroAltitude]:
        return self._centered_altitudes(Body.SUN, location, time)

    def next_sunrise(self, location: Coordinate, mode: TwilightMode = TwilightMode.ACTUAL) -> Optional[datetime.datetime]:
        now = self._clock.now()
        today = self.today_sun_times(location, mode)
        tomorrow = self.tomorrow_sun_times(location, mode)
        return closest_future_time(now, [today.up, tomorrow.up])

    def next_sunset(self, location: Coordinate, mode: TwilightMode = TwilightMode.ACTUAL) -> Optional[datetime.datetime]:
        now = self._clock.now()
        today = self.today_sun_times(location, mode)
        tomorrow = self.tomorrow_sun_times(location, mode)
        return closest_future_time(now, [today.down, tomorrow.down])

    def is_sun_up(self, location: Coordinate) -> bool:
        return self.sun_altitude(location, self._clock.now()).altitude_deg > 0

    def sun_azimuth(self, location: Coordinate) -> float:
        return self._sampler.azimuth_at(Body.SUN, location, self._clock.now())

    def solar_noon(self, location: Coordinate, date: datetime.date | None = None) -> Optional[datetime.datetime]:
        times = self.sun_times(location, TwilightMode.ACTUAL, date)
        return self._noon.locate(Body.SUN, location, times)

    def sun_altitude(self, location: Coordinate, time: datetime.datetime) -> AstroAltitude:
        return self._sampler.altitude_at(Body.SUN, location, time)

    def _centered_altitudes(
        self,
        body: Body,
        location: Coordinate,
        time: datetime.datetime,
    ) -> list[AstroAltitude]:
        if time.tzinfo is None:
            time = time.replace(tzinfo=datetime.timezone.utc)
        center = round_to_nearest_minutes(time, DEFAULT_STEP_MIN)
        start = (as_utc(center) - CENTERED_WINDOW_HALF).astimezone(time.tzinfo)
        return self._sampler.sample(body, location, start, ONE_DAY, DEFAULT_STEP_MIN)
