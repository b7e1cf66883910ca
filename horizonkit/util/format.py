import datetime
from typing import Optional, Tuple

_COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def _split_dms(angle_deg: float, precision: int) -> Tuple[int, int, int, float]:
    sign = -1 if angle_deg < 0 else 1
    a = abs(angle_deg)
    total_seconds = round(a * 3600.0, precision)
    deg = int(total_seconds // 3600)
    rem = total_seconds - deg * 3600
    minutes = int(rem // 60)
    seconds = rem - minutes * 60
    return sign, deg, minutes, seconds


def deg_to_dms(angle_deg: float, precision: int = 0) -> str:
    sign_val, d, m, s = _split_dms(angle_deg, precision)
    sign = "-" if sign_val < 0 else "+"
    width = 2 if precision == 0 else 3 + precision
    s_fmt = f"{s:0{width}.{precision}f}"
    return f"{sign}{d:02d}°{m:02d}'{s_fmt}\""


def compass_direction(azimuth_deg: float) -> str:
    index = int(((azimuth_deg % 360.0) + 11.25) // 22.5) % len(_COMPASS_POINTS)
    return _COMPASS_POINTS[index]


def format_angle(angle_deg: float, style: str = "deg", precision: int = 1) -> str:
    if style == "deg":
        return f"{angle_deg:.{precision}f}°"
    if style == "dms":
        return deg_to_dms(angle_deg, precision=precision)
    if style == "compass":
        return f"{angle_deg % 360.0:.{precision}f}° {compass_direction(angle_deg)}"
    raise ValueError(f"Unknown angle style: {style}")


def format_time(
    instant: Optional[datetime.datetime],
    tz: Optional[datetime.tzinfo] = None,
    seconds: bool = False,
) -> str:
    if instant is None:
        return "--:--"
    if tz is not None:
        instant = instant.astimezone(tz)
    return instant.strftime("%H:%M:%S" if seconds else "%H:%M")


def format_duration(delta: Optional[datetime.timedelta]) -> str:
    if delta is None:
        return "--"
    total_min = int(round(delta.total_seconds() / 60.0))
    sign = "-" if total_min < 0 else ""
    hours, minutes = divmod(abs(total_min), 60)
    return f"{sign}{hours}h {minutes:02d}m"
