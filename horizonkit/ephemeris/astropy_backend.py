import datetime

from .base import Body, EphemerisProvider


class AstropyEphemeris(EphemerisProvider):
    """Ephemeris backed by astropy's built-in solar system ephemeris.

    Requires the ``astropy`` extra. Altitudes are topocentric for the
    configured site elevation and exclude atmospheric refraction.
    """

    name = "astropy"

    def __init__(self, config=None):
        # Imported lazily so the default backend works without astropy.
        import astropy.units as u
        from astropy.coordinates import (
            AltAz,
            EarthLocation,
            GeocentricTrueEcliptic,
            get_body,
        )
        from astropy.time import Time

        self._u = u
        self._AltAz = AltAz
        self._EarthLocation = EarthLocation
        self._GeocentricTrueEcliptic = GeocentricTrueEcliptic
        self._get_body = get_body
        self._Time = Time
        elevation = config.site_elevation_m if config is not None else None
        self._height_m = float(elevation or 0.0)

    def _position(self, body: Body, location, instant_utc: datetime.datetime) -> tuple[float, float]:
        u = self._u
        t = self._Time(instant_utc)
        earth_location = self._EarthLocation(
            lat=location.latitude_deg * u.deg,
            lon=location.longitude_deg * u.deg,
            height=self._height_m * u.m,
        )
        coord = self._get_body(body.value, t, earth_location)
        altaz = coord.transform_to(self._AltAz(obstime=t, location=earth_location))
        return float(altaz.alt.deg), float(altaz.az.deg)

    def _ecliptic_longitude(self, body: Body, instant_utc: datetime.datetime) -> float:
        t = self._Time(instant_utc)
        coord = self._get_body(body.value, t)
        ecliptic = coord.transform_to(self._GeocentricTrueEcliptic(equinox=t))
        return float(ecliptic.lon.deg)
