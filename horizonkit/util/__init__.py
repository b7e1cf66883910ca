from .format import (
    compass_direction,
    deg_to_dms,
    format_angle,
    format_duration,
    format_time,
)

__all__ = [
    "compass_direction",
    "deg_to_dms",
    "format_angle",
    "format_duration",
    "format_time",
]
