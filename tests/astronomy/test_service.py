import datetime
import zoneinfo

import pytest

from horizonkit.astronomy import AstronomyService, Coordinate, Tide, TwilightMode
from horizonkit.astronomy.service import closest_future_time, round_to_nearest_minutes
from horizonkit.clock import FixedClock
from horizonkit.config import Config
from horizonkit.ephemeris import LowPrecisionEphemeris

UTC = datetime.timezone.utc
NEW_YORK = zoneinfo.ZoneInfo("America/New_York")
MASSACHUSETTS = Coordinate(latitude_deg=42.0, longitude_deg=-72.0)
SVALBARD = Coordinate(latitude_deg=78.22, longitude_deg=15.65)


def _service(now: datetime.datetime, tz=NEW_YORK) -> AstronomyService:
    return AstronomyService(ephemeris=LowPrecisionEphemeris(), clock=FixedClock(now, tz))


def _local(*args, tz=NEW_YORK):
    return datetime.datetime(*args, tzinfo=tz)


def test_summer_solstice_sun_times():
    service = _service(_local(2024, 6, 21, 9, 0))
    times = service.sun_times(MASSACHUSETTS, TwilightMode.ACTUAL, datetime.date(2024, 6, 21))
    assert abs(times.up - _local(2024, 6, 21, 5, 12)) < datetime.timedelta(minutes=10)
    assert abs(times.down - _local(2024, 6, 21, 20, 27)) < datetime.timedelta(minutes=10)


def test_twilight_ordering():
    service = _service(_local(2024, 3, 1, 9, 0))
    date = datetime.date(2024, 3, 1)
    ups = [service.sun_times(MASSACHUSETTS, mode, date).up for mode in TwilightMode]
    downs = [service.sun_times(MASSACHUSETTS, mode, date).down for mode in TwilightMode]
    assert ups == sorted(ups, reverse=True)
    assert downs == sorted(downs)


def test_sun_times_accepts_mode_name():
    service = _service(_local(2024, 3, 1, 9, 0))
    date = datetime.date(2024, 3, 1)
    assert service.sun_times(MASSACHUSETTS, "civil", date) == service.sun_times(
        MASSACHUSETTS, TwilightMode.CIVIL, date
    )


@pytest.mark.parametrize("mode", [TwilightMode.ACTUAL, TwilightMode.CIVIL])
def test_polar_night_has_no_sun_times(mode):
    service = _service(datetime.datetime(2024, 12, 21, 12, 0, tzinfo=UTC), tz=UTC)
    times = service.sun_times(SVALBARD, mode, datetime.date(2024, 12, 21))
    assert times.up is None
    assert times.down is None
    assert service.solar_noon(SVALBARD, datetime.date(2024, 12, 21)) is None


def test_midnight_sun_has_no_sun_times():
    service = _service(datetime.datetime(2024, 6, 21, 12, 0, tzinfo=UTC), tz=UTC)
    times = service.sun_times(SVALBARD, TwilightMode.ACTUAL, datetime.date(2024, 6, 21))
    assert times.up is None
    assert times.down is None


def test_white_nights_have_no_astronomical_twilight():
    helsinki = Coordinate(latitude_deg=60.17, longitude_deg=24.94)
    service = _service(datetime.datetime(2024, 6, 21, 12, 0, tzinfo=UTC), tz=UTC)
    times = service.sun_times(helsinki, TwilightMode.ASTRONOMICAL, datetime.date(2024, 6, 21))
    assert times.up is None and times.down is None
    actual = service.sun_times(helsinki, TwilightMode.ACTUAL, datetime.date(2024, 6, 21))
    assert actual.up is not None and actual.down is not None


def test_today_and_tomorrow_use_clock_date():
    service = _service(_local(2024, 6, 21, 23, 30))
    assert service.today_sun_times(MASSACHUSETTS) == service.sun_times(
        MASSACHUSETTS, TwilightMode.ACTUAL, datetime.date(2024, 6, 21)
    )
    assert service.tomorrow_sun_times(MASSACHUSETTS) == service.sun_times(
        MASSACHUSETTS, TwilightMode.ACTUAL, datetime.date(2024, 6, 22)
    )


def test_next_sunrise_after_todays_sunrise_is_tomorrows():
    date = datetime.date(2024, 6, 21)
    base = _service(_local(2024, 6, 21, 0, 0))
    today = base.sun_times(MASSACHUSETTS, TwilightMode.ACTUAL, date)
    tomorrow = base.sun_times(MASSACHUSETTS, TwilightMode.ACTUAL, date + datetime.timedelta(days=1))

    service = _service(today.up + datetime.timedelta(minutes=1))
    assert service.next_sunrise(MASSACHUSETTS) == tomorrow.up


def test_next_sunrise_before_todays_sunrise_is_todays():
    base = _service(_local(2024, 6, 21, 1, 0))
    today = base.today_sun_times(MASSACHUSETTS)
    assert base.next_sunrise(MASSACHUSETTS) == today.up


def test_next_sunset_is_in_the_future():
    for hour in (0, 6, 12, 18, 23):
        service = _service(_local(2024, 9, 1, hour, 0))
        sunset = service.next_sunset(MASSACHUSETTS, TwilightMode.CIVIL)
        assert sunset is not None
        assert sunset > service.clock.now()


def test_next_sunrise_absent_in_polar_night():
    service = _service(datetime.datetime(2024, 12, 21, 12, 0, tzinfo=UTC), tz=UTC)
    assert service.next_sunrise(SVALBARD) is None
    assert service.next_sunset(SVALBARD) is None


def test_closest_future_time_ignores_absent_and_past():
    now = datetime.datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
    later = now + datetime.timedelta(hours=1)
    much_later = now + datetime.timedelta(hours=5)
    assert closest_future_time(now, [None, much_later, later]) == later
    assert closest_future_time(now, [now, now - datetime.timedelta(hours=1)]) is None
    assert closest_future_time(now, [None, None]) is None


def test_solar_noon_near_transit():
    service = _service(_local(2024, 6, 21, 9, 0))
    noon = service.solar_noon(MASSACHUSETTS, datetime.date(2024, 6, 21))
    assert abs(noon - _local(2024, 6, 21, 12, 50)) < datetime.timedelta(minutes=3)
    times = service.sun_times(MASSACHUSETTS, TwilightMode.ACTUAL, datetime.date(2024, 6, 21))
    midpoint = times.up + (times.down - times.up) / 2
    assert midpoint - datetime.timedelta(hours=1) <= noon <= midpoint + datetime.timedelta(hours=1)


def test_lunar_noon_within_search_window():
    service = _service(_local(2024, 1, 1, 0, 0))
    found = 0
    for day in range(1, 29):
        date = datetime.date(2024, 1, day)
        times = service.moon_times(MASSACHUSETTS, date)
        noon = service.lunar_noon(MASSACHUSETTS, date)
        if times.up is None or times.down is None or not times.up < times.down:
            assert noon is None
            continue
        found += 1
        midpoint = times.up + (times.down - times.up) / 2
        assert midpoint - datetime.timedelta(hours=1) <= noon <= midpoint + datetime.timedelta(hours=1)
    assert found > 0


def test_moon_times_within_padded_window():
    service = _service(_local(2024, 1, 1, 0, 0))
    for day in range(1, 29):
        date = datetime.date(2024, 1, day)
        start = _local(2024, 1, day, 0, 0) - datetime.timedelta(hours=1)
        end = start + datetime.timedelta(hours=26)
        times = service.moon_times(MASSACHUSETTS, date)
        for t in (times.up, times.down):
            if t is not None:
                assert start <= t <= end
        if times.up is not None and times.down is not None:
            assert times.up < times.down


@pytest.mark.parametrize(
    "date, expected",
    [
        (datetime.date(2024, 1, 11), Tide.SPRING),  # new moon
        (datetime.date(2024, 1, 25), Tide.SPRING),  # full moon
        (datetime.date(2024, 1, 18), Tide.NEAP),  # first quarter
        (datetime.date(2024, 1, 4), Tide.NEAP),  # third quarter
        (datetime.date(2024, 1, 14), Tide.NORMAL),  # waxing crescent
        (datetime.date(2024, 1, 29), Tide.NORMAL),  # waning gibbous
    ],
)
def test_tides(date, expected):
    service = _service(_local(2024, 1, 1, 0, 0))
    assert service.tides(date) is expected


def test_tides_follow_noon_phase():
    service = _service(_local(2024, 1, 1, 0, 0))
    for day in range(1, 32):
        date = datetime.date(2024, 1, day)
        assert service.tides(date) is Tide.from_phase(service.moon_phase(date).phase)


def test_moon_phase_uses_local_noon():
    service = _service(_local(2024, 1, 1, 0, 0))
    phase = service.moon_phase(datetime.date(2024, 1, 11))
    direct = service._phase.phase_at(_local(2024, 1, 11, 12, 0))
    assert phase == direct


def test_current_moon_phase_uses_clock():
    now = _local(2024, 1, 25, 13, 0)
    service = _service(now)
    assert service.current_moon_phase() == service._phase.phase_at(now)
    assert service.current_moon_phase().illumination > 0.95


@pytest.mark.parametrize("body", ["sun", "moon"])
def test_centered_altitudes(body):
    service = _service(_local(2024, 1, 1, 0, 0))
    time = _local(2024, 3, 10, 12, 34, 56)
    samples = getattr(service, f"centered_{body}_altitudes")(MASSACHUSETTS, time)
    assert len(samples) == 145
    utc_times = [s.time.astimezone(UTC) for s in samples]
    assert {b - a for a, b in zip(utc_times, utc_times[1:])} == {datetime.timedelta(minutes=10)}
    assert samples[72].time == _local(2024, 3, 10, 12, 30)


def test_round_to_nearest_minutes():
    assert round_to_nearest_minutes(_local(2024, 1, 1, 12, 34, 56)) == _local(2024, 1, 1, 12, 30)
    assert round_to_nearest_minutes(_local(2024, 1, 1, 12, 35, 0)) == _local(2024, 1, 1, 12, 40)
    assert round_to_nearest_minutes(_local(2024, 1, 1, 12, 56, 0)) == _local(2024, 1, 1, 13, 0)


def test_centered_altitudes_in_repeated_hour():
    service = _service(_local(2024, 11, 1, 0, 0))
    # 01:56 EDT, the first pass through the repeated hour.
    time = datetime.datetime(2024, 11, 3, 1, 56, tzinfo=NEW_YORK)
    samples = service.centered_sun_altitudes(MASSACHUSETTS, time)
    center = samples[72].time.astimezone(UTC)
    assert center == datetime.datetime(2024, 11, 3, 6, 0, tzinfo=UTC)
    assert abs(center - time.astimezone(UTC)) <= datetime.timedelta(minutes=5)


def test_round_to_nearest_minutes_across_fall_back():
    first = datetime.datetime(2024, 11, 3, 1, 56, tzinfo=NEW_YORK)
    second = datetime.datetime(2024, 11, 3, 1, 56, fold=1, tzinfo=NEW_YORK)
    assert round_to_nearest_minutes(first).astimezone(UTC) == datetime.datetime(2024, 11, 3, 6, 0, tzinfo=UTC)
    assert round_to_nearest_minutes(second).astimezone(UTC) == datetime.datetime(2024, 11, 3, 7, 0, tzinfo=UTC)


def test_full_day_altitude_series():
    service = _service(_local(2024, 6, 21, 9, 0))
    sun = service.sun_altitudes(MASSACHUSETTS)
    moon = service.moon_altitudes(MASSACHUSETTS, datetime.date(2024, 6, 22))
    assert len(sun) == 145 and len(moon) == 145
    assert sun[0].time == _local(2024, 6, 21, 0, 0)
    assert moon[0].time == _local(2024, 6, 22, 0, 0)
    assert max(s.altitude_deg for s in sun) > 60.0


def test_up_and_azimuth_at_now():
    noon = _service(_local(2024, 6, 21, 12, 50))
    assert noon.is_sun_up(MASSACHUSETTS)
    assert 150.0 < noon.sun_azimuth(MASSACHUSETTS) < 210.0
    midnight = _service(_local(2024, 6, 21, 0, 50))
    assert not midnight.is_sun_up(MASSACHUSETTS)
    assert isinstance(midnight.is_moon_up(MASSACHUSETTS), bool)
    assert 0.0 <= midnight.moon_azimuth(MASSACHUSETTS) < 360.0


def test_single_altitudes_match_series():
    service = _service(_local(2024, 6, 21, 9, 0))
    t = _local(2024, 6, 21, 10, 0)
    series = service.sun_altitudes(MASSACHUSETTS, datetime.date(2024, 6, 21))
    assert service.sun_altitude(MASSACHUSETTS, t) == series[60]
    assert service.moon_altitude(MASSACHUSETTS, t).time == t


def test_results_are_deterministic():
    a = _service(_local(2024, 6, 21, 9, 0))
    b = _service(_local(2024, 6, 21, 9, 0))
    date = datetime.date(2024, 6, 21)
    assert a.sun_times(MASSACHUSETTS, TwilightMode.NAUTICAL, date) == b.sun_times(
        MASSACHUSETTS, TwilightMode.NAUTICAL, date
    )
    assert a.moon_times(MASSACHUSETTS, date) == b.moon_times(MASSACHUSETTS, date)
    assert a.solar_noon(MASSACHUSETTS, date) == b.solar_noon(MASSACHUSETTS, date)


def test_from_config_uses_timezone_and_backend():
    config = Config({"astronomy": {"timezone": "America/New_York"}, "ephemeris": {"backend": "lowprec"}})
    service = AstronomyService.from_config(config)
    assert service.tz == NEW_YORK
