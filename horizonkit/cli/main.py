import argparse
import sys

from horizonkit import __version__
from horizonkit.astronomy import TwilightMode
from horizonkit.cli.commands import run_moon, run_next, run_sun, run_tides


def _add_common_args(parser, location: bool = True):
    parser.add_argument("--config", help="Path to config TOML file")
    parser.add_argument("--tz", help="IANA timezone for local dates (default from config)")
    parser.add_argument("--json", action="store_true", help="Output result as JSON")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warn", "error"],
        help="Enable logging at the given level",
    )
    if location:
        parser.add_argument("--lat", dest="latitude_deg", type=float, help="Latitude in degrees")
        parser.add_argument("--lon", dest="longitude_deg", type=float, help="Longitude in degrees")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="horizonkit")
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")
    modes = [m.value for m in TwilightMode]

    sun_parser = subparsers.add_parser("sun", help="Sunrise, sunset and solar noon")
    _add_common_args(sun_parser)
    sun_parser.add_argument("--date", help="Local date (YYYY-MM-DD), default today")
    sun_parser.add_argument("--mode", choices=modes, help="Twilight definition")

    moon_parser = subparsers.add_parser("moon", help="Moonrise, moonset, lunar noon and phase")
    _add_common_args(moon_parser)
    moon_parser.add_argument("--date", help="Local date (YYYY-MM-DD), default today")

    tides_parser = subparsers.add_parser("tides", help="Tide type from the moon phase")
    _add_common_args(tides_parser, location=False)
    tides_parser.add_argument("--date", help="Local date (YYYY-MM-DD), default today")

    next_parser = subparsers.add_parser("next", help="Next sunrise/sunset and current sun/moon state")
    _add_common_args(next_parser)
    next_parser.add_argument("--mode", choices=modes, help="Twilight definition")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"horizonkit {__version__}")
        return 0

    if args.command == "sun":
        return run_sun(args)

    if args.command == "moon":
        return run_moon(args)

    if args.command == "tides":
        return run_tides(args)

    if args.command == "next":
        return run_next(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
