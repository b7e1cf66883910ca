import datetime
import math

import pytest

from horizonkit.ephemeris import Body, EphemerisProvider

UTC = datetime.timezone.utc


def pytest_addoption(parser):
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run tests marked as integration",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--integration"):
        return

    for item in items:
        if "integration" in item.keywords:
            item.add_marker(
                pytest.mark.skip(
                    reason="need --integration option to run integration tests"
                )
            )


class SineEphemeris(EphemerisProvider):
    """Synthetic body whose altitude is a sine wave in time.

    With the defaults the body rises through 0 deg at ``epoch``, peaks a
    quarter period later and sets half a period after rising.
    """

    name = "sine"

    def __init__(
        self,
        amplitude_deg: float = 30.0,
        offset_deg: float = 0.0,
        period: datetime.timedelta = datetime.timedelta(days=1),
        epoch: datetime.datetime = datetime.datetime(2024, 1, 1, 6, 0, tzinfo=UTC),
        phase_angle_deg: float = 0.0,
    ):
        self.amplitude_deg = amplitude_deg
        self.offset_deg = offset_deg
        self.period = period
        self.epoch = epoch
        self.phase_angle_deg = phase_angle_deg
        self.calls = 0

    def altitude(self, instant: datetime.datetime) -> float:
        x = (instant - self.epoch) / self.period
        return self.offset_deg + self.amplitude_deg * math.sin(2.0 * math.pi * x)

    def _position(self, body, location, instant_utc):
        self.calls += 1
        x = (instant_utc - self.epoch) / self.period
        return self.altitude(instant_utc), 360.0 * x

    def _ecliptic_longitude(self, body, instant_utc):
        if body is Body.MOON:
            return 100.0 + self.phase_angle_deg
        return 100.0


@pytest.fixture
def sine_ephemeris():
    return SineEphemeris()


@pytest.fixture
def utc():
    return UTC


@pytest.fixture
def make_sine():
    return SineEphemeris
