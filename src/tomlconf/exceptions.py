# src/tomlconf/exceptions.py
"""
Custom exceptions for the tomlconf library.

This module defines the error hierarchy raised while locating, decoding
and generating configuration files, so applications can tell a broken
embedded default apart from a configuration that simply does not exist
yet.
"""

from typing import Sequence


class TomlConfError(Exception):
    """Base class for all tomlconf specific errors."""
    def __init__(self, message: str = "An unspecified error occurred in tomlconf."):
        super().__init__(message)

class ConfigError(TomlConfError):
    """Raised for errors related to configuration loading or decoding."""
    def __init__(self, message: str = "Configuration error."):
        super().__init__(message)

class ConfigDecodeError(ConfigError):
    """Raised when a TOML document cannot be parsed or applied to the config object."""
    def __init__(self, source: str = "<string>", reason: str = "Decode failed."):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to decode config from '{source}': {reason}")

class DefaultDecodeError(ConfigDecodeError):
    """
    Raised when the embedded default configuration is malformed.
    This indicates a packaging or programmer bug rather than a runtime condition.
    """
    def __init__(self, reason: str = "Decode failed."):
        super().__init__("<default config>", reason)

class ConfigNotFoundError(ConfigError):
    """Raised when none of the candidate paths yielded a readable and decodable config file."""
    def __init__(self, search_paths: Sequence[str] = (),
                 message: str = "No config files found at the configured locations."):
        self.search_paths = [p for p in search_paths if p]
        super().__init__(message)


class ConfigExit(SystemExit):
    """
    Raised by autoload when the process should terminate.

    Being a ``SystemExit``, an uncaught instance ends the interpreter with
    ``code``; library consumers can still intercept it explicitly.
    """
    def __init__(self, code: int = 0, message: str = ""):
        self.message = message
        super().__init__(code)
