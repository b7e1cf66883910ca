import datetime
import json
import logging
import sys
from pathlib import Path

from horizonkit.astronomy import AstronomyService, Coordinate, TwilightMode
from horizonkit.clock import SystemClock
from horizonkit.config import Config, load_config, parse_timezone
from horizonkit.errors import HorizonkitError
from horizonkit.util.format import format_angle, format_duration, format_time


def _json_envelope(command: str, ok: bool, data=None, error=None) -> dict:
    return {
        "ok": ok,
        "command": command,
        "timestamp_utc": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "data": data,
        "error": error,
    }


def _init_logging(level: str | None) -> None:
    if not level:
        return
    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warn": logging.WARNING,
        "error": logging.ERROR,
    }
    logging.basicConfig(level=level_map.get(level, logging.INFO))


def _config_path_from_args(args) -> Path | None:
    path = getattr(args, "config", None)
    return Path(path) if path else None


def _iso(value: datetime.datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_date_arg(value: str | None) -> datetime.date | None:
    if not value:
        return None
    return datetime.date.fromisoformat(value)


def _parse_location_args(args, config: Config) -> Coordinate:
    lat = getattr(args, "latitude_deg", None)
    lon = getattr(args, "longitude_deg", None)
    if lat is None and lon is None:
        site = config.site()
        if site is None:
            raise ValueError("Location is required (--lat/--lon or [site] in config)")
        return site
    if lat is None or lon is None:
        raise ValueError("Both latitude and longitude are required when specifying location")
    return Coordinate(latitude_deg=lat, longitude_deg=lon)


def _mode_from_args(args, config: Config) -> TwilightMode:
    mode = getattr(args, "mode", None)
    if mode:
        return TwilightMode.parse(mode)
    return config.twilight_mode()


def _build_service(args, config: Config) -> AstronomyService:
    tz_name = getattr(args, "tz", None)
    tz = parse_timezone(tz_name) if tz_name else config.timezone()
    return AstronomyService.from_config(config, clock=SystemClock(tz))


def _emit(command: str, args, data: dict, lines: list[str]) -> None:
    if getattr(args, "json", False):
        print(json.dumps(_json_envelope(command=command, ok=True, data=data), indent=2))
    else:
        print("\n".join(lines))


def _handle_error(command: str, args, exc: Exception) -> int:
    if getattr(args, "json", False):
        payload = _json_envelope(
            command=command,
            ok=False,
            data=None,
            error={
                "code": "invalid_input" if isinstance(exc, ValueError) else "error",
                "message": str(exc),
                "details": None,
            },
        )
        print(json.dumps(payload, indent=2))
    else:
        print(str(exc), file=sys.stderr)
    return 2


def _prepare(args):
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    service = _build_service(args, config)
    location = _parse_location_args(args, config)
    return config, service, location


def run_sun(args) -> int:
    try:
        config, service, location = _prepare(args)
        mode = _mode_from_args(args, config)
        date = _parse_date_arg(getattr(args, "date", None)) or service.clock.today()
        times = service.sun_times(location, mode, date)
        noon = service.solar_noon(location, date)
    except (ValueError, FileNotFoundError, HorizonkitError) as e:
        return _handle_error("sun", args, e)

    tz = service.tz
    day_length = None
    if times.up is not None and times.down is not None and times.up < times.down:
        day_length = times.down - times.up
    data = {
        "date": date.isoformat(),
        "mode": mode.value,
        "up": _iso(times.up),
        "down": _iso(times.down),
        "solar_noon": _iso(noon),
        "day_length_s": day_length.total_seconds() if day_length is not None else None,
    }
    lines = [
        f"Sun ({mode.value}) on {date.isoformat()}",
        f"Rise:       {format_time(times.up, tz)}",
        f"Set:        {format_time(times.down, tz)}",
        f"Solar noon: {format_time(noon, tz)}",
        f"Day length: {format_duration(day_length)}",
    ]
    _emit("sun", args, data, lines)
    return 0


def run_moon(args) -> int:
    try:
        _, service, location = _prepare(args)
        date = _parse_date_arg(getattr(args, "date", None)) or service.clock.today()
        times = service.moon_times(location, date)
        noon = service.lunar_noon(location, date)
        phase = service.moon_phase(date)
    except (ValueError, FileNotFoundError, HorizonkitError) as e:
        return _handle_error("moon", args, e)

    tz = service.tz
    data = {
        "date": date.isoformat(),
        "up": _iso(times.up),
        "down": _iso(times.down),
        "lunar_noon": _iso(noon),
        "phase": phase.phase.value,
        "phase_angle_deg": phase.angle_deg,
        "illumination": phase.illumination,
    }
    lines = [
        f"Moon on {date.isoformat()}",
        f"Rise:         {format_time(times.up, tz)}",
        f"Set:          {format_time(times.down, tz)}",
        f"Lunar noon:   {format_time(noon, tz)}",
        f"Phase:        {phase.phase.label} ({format_angle(phase.angle_deg)})",
        f"Illumination: {phase.illumination * 100.0:.0f}%",
    ]
    _emit("moon", args, data, lines)
    return 0


def run_tides(args) -> int:
    try:
        _init_logging(getattr(args, "log_level", None))
        config = load_config(_config_path_from_args(args))
        service = _build_service(args, config)
        date = _parse_date_arg(getattr(args, "date", None)) or service.clock.today()
        tide = service.tides(date)
        phase = service.moon_phase(date)
    except (ValueError, FileNotFoundError, HorizonkitError) as e:
        return _handle_error("tides", args, e)

    data = {"date": date.isoformat(), "tide": tide.value, "phase": phase.phase.value}
    lines = [f"Tide on {date.isoformat()}: {tide.value} ({phase.phase.label} moon)"]
    _emit("tides", args, data, lines)
    return 0


def run_next(args) -> int:
    try:
        config, service, location = _prepare(args)
        mode = _mode_from_args(args, config)
        sunrise = service.next_sunrise(location, mode)
        sunset = service.next_sunset(location, mode)
        sun_up = service.is_sun_up(location)
        moon_up = service.is_moon_up(location)
        sun_az = service.sun_azimuth(location)
        moon_az = service.moon_azimuth(location)
    except (ValueError, FileNotFoundError, HorizonkitError) as e:
        return _handle_error("next", args, e)

    tz = service.tz
    data = {
        "mode": mode.value,
        "next_sunrise": _iso(sunrise),
        "next_sunset": _iso(sunset),
        "sun_up": sun_up,
        "moon_up": moon_up,
        "sun_azimuth_deg": sun_az,
        "moon_azimuth_deg": moon_az,
    }
    lines = [
        f"Next sunrise: {format_time(sunrise, tz)}",
        f"Next sunset:  {format_time(sunset, tz)}",
        f"Sun:  {'up' if sun_up else 'down'}, azimuth {format_angle(sun_az, style='compass')}",
        f"Moon: {'up' if moon_up else 'down'}, azimuth {format_angle(moon_az, style='compass')}",
    ]
    _emit("next", args, data, lines)
    return 0
