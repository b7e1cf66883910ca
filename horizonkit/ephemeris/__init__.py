import logging

from .base import Body, EphemerisProvider, Position
from .lowprec import LowPrecisionEphemeris

logger = logging.getLogger(__name__)


def get_ephemeris_provider(config=None) -> EphemerisProvider:
    backend = config.ephemeris_backend if config is not None else "lowprec"
    logger.debug("Using ephemeris backend: %s", backend)
    if backend == "lowprec":
        return LowPrecisionEphemeris()
    if backend == "astropy":
        from .astropy_backend import AstropyEphemeris

        return AstropyEphemeris(config)
    raise ValueError(f"Unsupported ephemeris backend: {backend}")


__all__ = [
    "Body",
    "EphemerisProvider",
    "Position",
    "LowPrecisionEphemeris",
    "get_ephemeris_provider",
]
