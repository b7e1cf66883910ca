from abc import ABC, abstractmethod
from dataclasses import dataclass
import datetime
import enum
import math

from horizonkit.errors import EphemerisError


class Body(enum.Enum):
    SUN = "sun"
    MOON = "moon"


@dataclass(frozen=True)
class Position:
    altitude_deg: float
    azimuth_deg: float


def as_utc(instant: datetime.datetime) -> datetime.datetime:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=datetime.timezone.utc)
    return instant.astimezone(datetime.timezone.utc)


class EphemerisProvider(ABC):
    """Apparent positions of the Sun and Moon.

    Subclasses implement the raw model; the public methods normalise the
    instant to UTC and refuse non-finite output so that NaN never reaches
    the rise/set and noon searches.
    """

    name: str

    def position_of(self, body: Body, location, instant: datetime.datetime) -> Position:
        alt_deg, az_deg = self._position(body, location, as_utc(instant))
        if not (math.isfinite(alt_deg) and math.isfinite(az_deg)):
            raise EphemerisError(
                f"{self.name}: non-finite position for {body.value} at {instant.isoformat()} "
                f"(lat={location.latitude_deg}, lon={location.longitude_deg})"
            )
        return Position(altitude_deg=alt_deg, azimuth_deg=az_deg % 360.0)

    def ecliptic_longitude_of(self, body: Body, instant: datetime.datetime) -> float:
        lon_deg = self._ecliptic_longitude(body, as_utc(instant))
        if not math.isfinite(lon_deg):
            raise EphemerisError(
                f"{self.name}: non-finite ecliptic longitude for {body.value} at {instant.isoformat()}"
            )
        return lon_deg % 360.0

    @abstractmethod
    def _position(self, body: Body, location, instant_utc: datetime.datetime) -> tuple[float, float]:
        """Return (altitude_deg, azimuth_deg)."""

    @abstractmethod
    def _ecliptic_longitude(self, body: Body, instant_utc: datetime.datetime) -> float:
        pass
