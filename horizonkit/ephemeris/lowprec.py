import datetime
import math

from .base import Body, EphemerisProvider

J2000_JD = 2451545.0


def to_julian_date(dt: datetime.datetime) -> float:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    dt = dt.astimezone(datetime.timezone.utc)
    year = dt.year
    month = dt.month
    seconds = dt.second + dt.microsecond / 1e6
    day = dt.day + (dt.hour + (dt.minute + seconds / 60.0) / 60.0) / 24.0
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    return math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + b - 1524.5


def days_since_j2000(dt: datetime.datetime) -> float:
    return to_julian_date(dt) - J2000_JD


def _normalize_angle_rad(angle: float) -> float:
    return angle % (2.0 * math.pi)


def _gmst_rad(dt: datetime.datetime) -> float:
    d = days_since_j2000(dt)
    gmst_hours = 18.697374558 + 24.06570982441908 * d
    return _normalize_angle_rad(math.radians((gmst_hours % 24.0) * 15.0))


def local_sidereal_time_rad(dt: datetime.datetime, longitude_deg: float) -> float:
    return _normalize_angle_rad(_gmst_rad(dt) + math.radians(longitude_deg))


def _obliquity_rad(n: float) -> float:
    return math.radians(23.439 - 0.0000004 * n)


def ra_dec_to_alt_az(
    ra_rad: float,
    dec_rad: float,
    lat_rad: float,
    lon_deg: float,
    dt: datetime.datetime,
) -> tuple[float, float]:
    lst = local_sidereal_time_rad(dt, lon_deg)
    ha = _normalize_angle_rad(lst - ra_rad)
    sin_alt = math.sin(dec_rad) * math.sin(lat_rad) + math.cos(dec_rad) * math.cos(lat_rad) * math.cos(ha)
    alt = math.asin(max(-1.0, min(1.0, sin_alt)))
    # Azimuth measured from north through east.
    az = math.atan2(
        -math.cos(dec_rad) * math.sin(ha),
        math.sin(dec_rad) * math.cos(lat_rad) - math.cos(dec_rad) * math.sin(lat_rad) * math.cos(ha),
    )
    return alt, _normalize_angle_rad(az)


def ecliptic_to_ra_dec(lam: float, beta: float, eps: float) -> tuple[float, float]:
    sin_dec = math.sin(beta) * math.cos(eps) + math.cos(beta) * math.sin(eps) * math.sin(lam)
    dec = math.asin(max(-1.0, min(1.0, sin_dec)))
    ra = math.atan2(
        math.sin(lam) * math.cos(eps) - math.tan(beta) * math.sin(eps),
        math.cos(lam),
    )
    return _normalize_angle_rad(ra), dec


def sun_ecliptic_longitude_rad(dt: datetime.datetime) -> float:
    n = days_since_j2000(dt)
    l = math.radians((280.460 + 0.9856474 * n) % 360.0)
    g = math.radians((357.528 + 0.9856003 * n) % 360.0)
    lam = l + math.radians(1.915) * math.sin(g) + math.radians(0.020) * math.sin(2 * g)
    return _normalize_angle_rad(lam)


def sun_ra_dec_rad(dt: datetime.datetime) -> tuple[float, float]:
    n = days_since_j2000(dt)
    return ecliptic_to_ra_dec(sun_ecliptic_longitude_rad(dt), 0.0, _obliquity_rad(n))


def moon_ecliptic_rad(dt: datetime.datetime) -> tuple[float, float]:
    n = days_since_j2000(dt)
    l = math.radians((218.316 + 13.176396 * n) % 360.0)
    m = math.radians((134.963 + 13.064993 * n) % 360.0)
    f = math.radians((93.272 + 13.229350 * n) % 360.0)
    d = math.radians((297.850 + 12.190749 * n) % 360.0)
    ms = math.radians((357.528 + 0.9856003 * n) % 360.0)
    # Main periodic terms: equation of centre, evection, variation, annual equation.
    lam = l + math.radians(
        6.289 * math.sin(m)
        - 1.274 * math.sin(m - 2 * d)
        + 0.658 * math.sin(2 * d)
        - 0.186 * math.sin(ms)
        - 0.059 * math.sin(2 * m - 2 * d)
        - 0.057 * math.sin(m - 2 * d + ms)
        + 0.053 * math.sin(m + 2 * d)
        + 0.046 * math.sin(2 * d - ms)
        + 0.041 * math.sin(m - ms)
        - 0.035 * math.sin(d)
        - 0.031 * math.sin(m + ms)
    )
    beta = math.radians(
        5.128 * math.sin(f)
        + 0.281 * math.sin(m + f)
        + 0.278 * math.sin(m - f)
        + 0.173 * math.sin(2 * d - f)
    )
    return _normalize_angle_rad(lam), beta


def moon_ra_dec_rad(dt: datetime.datetime) -> tuple[float, float]:
    n = days_since_j2000(dt)
    lam, beta = moon_ecliptic_rad(dt)
    return ecliptic_to_ra_dec(lam, beta, _obliquity_rad(n))


class LowPrecisionEphemeris(EphemerisProvider):
    """Closed-form geocentric Sun/Moon model, good to a few arcminutes.

    Moon altitudes are geocentric; rise/set thresholds for the Moon are
    expected to absorb horizontal parallax.
    """

    name = "lowprec"

    def _position(self, body: Body, location, instant_utc: datetime.datetime) -> tuple[float, float]:
        if body is Body.SUN:
            ra, dec = sun_ra_dec_rad(instant_utc)
        elif body is Body.MOON:
            ra, dec = moon_ra_dec_rad(instant_utc)
        else:
            raise ValueError(f"Unsupported body: {body}")
        alt, az = ra_dec_to_alt_az(
            ra,
            dec,
            math.radians(location.latitude_deg),
            location.longitude_deg,
            instant_utc,
        )
        return math.degrees(alt), math.degrees(az)

    def _ecliptic_longitude(self, body: Body, instant_utc: datetime.datetime) -> float:
        if body is Body.SUN:
            return math.degrees(sun_ecliptic_longitude_rad(instant_utc))
        if body is Body.MOON:
            return math.degrees(moon_ecliptic_rad(instant_utc)[0])
        raise ValueError(f"Unsupported body: {body}")
