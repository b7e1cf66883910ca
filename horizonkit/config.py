import datetime
from pathlib import Path
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from horizonkit.astronomy.types import Coordinate, TwilightMode
from horizonkit.errors import ConfigError

if TYPE_CHECKING:
    import tomli as tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:  # Python < 3.11
        import tomli as tomllib

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "horizonkit" / "config.toml"


def parse_timezone(name: str | None) -> datetime.tzinfo:
    if not name or name.upper() == "UTC":
        return datetime.timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Unknown timezone: {name}") from e


class Config:
    def __init__(self, data: dict):
        self._data = data

    @property
    def site_latitude_deg(self):
        return self._data.get("site", {}).get("latitude_deg", None)

    @property
    def site_longitude_deg(self):
        return self._data.get("site", {}).get("longitude_deg", None)

    @property
    def site_elevation_m(self):
        return self._data.get("site", {}).get("elevation_m", None)

    @property
    def timezone_name(self):
        return self._data.get("astronomy", {}).get("timezone", "UTC")

    @property
    def twilight_mode_name(self):
        return self._data.get("astronomy", {}).get("twilight_mode", "actual")

    @property
    def ephemeris_backend(self):
        return self._data.get("ephemeris", {}).get("backend", "lowprec")

    def site(self) -> Coordinate | None:
        lat = self.site_latitude_deg
        lon = self.site_longitude_deg
        if lat is None or lon is None:
            return None
        try:
            return Coordinate(latitude_deg=lat, longitude_deg=lon)
        except ValueError as e:
            raise ConfigError(f"Invalid site: {e}") from e

    def timezone(self) -> datetime.tzinfo:
        return parse_timezone(self.timezone_name)

    def twilight_mode(self) -> TwilightMode:
        try:
            return TwilightMode.parse(self.twilight_mode_name)
        except ValueError as e:
            raise ConfigError(str(e)) from e


def load_config(path: Path | None = None) -> Config:
    explicit_path = path
    path = path or DEFAULT_CONFIG_PATH

    if not path.exists():
        if explicit_path is not None:
            raise FileNotFoundError(f"Config file not found: {path}")
        # Return default config if default file missing
        return Config({})

    with open(path, "rb") as f:
        data = tomllib.load(f)

    return Config(data)
