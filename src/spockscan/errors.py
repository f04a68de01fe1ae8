"""
spockscan.errors - Exceptions raised outside the parsing core.

The discovery and result parsers never raise for malformed input; these
are used by the configuration and command layers.
"""


class SpockscanError(Exception):
    """Base class for spockscan errors."""


class ConfigError(SpockscanError):
    """Configuration file could not be read or has invalid values."""
