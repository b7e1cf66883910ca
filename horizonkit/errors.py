class HorizonkitError(Exception):
    """Base exception for horizonkit errors."""


class EphemerisError(HorizonkitError):
    """Raised when an ephemeris backend produces unusable output."""


class ConfigError(HorizonkitError):
    """Raised for invalid configuration values."""
