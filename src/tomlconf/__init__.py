# src/tomlconf/__init__.py
"""
tomlconf: locate, load and generate TOML configuration files.

A :class:`ConfigManager` decodes an embedded default document into a
caller-owned configuration object, then overlays the first config file it
finds in a fixed list of locations (custom directory, working directory,
``~/.config``, ``/usr/local/etc``, ``/etc``).
"""

from .decoding import SupportsOverlay, decode, overlay, parse_document
from .exceptions import (
    ConfigDecodeError,
    ConfigError,
    ConfigExit,
    ConfigNotFoundError,
    DefaultDecodeError,
    TomlConfError,
)
from .manager import ConfigManager
from .paths import DEFAULT_FILE_MODE, SYSTEM_CONFIG_DIRS, build_search_paths

__version__ = "1.0.0"

__all__ = [
    "ConfigManager",
    "SupportsOverlay",
    "build_search_paths",
    "decode",
    "overlay",
    "parse_document",
    "DEFAULT_FILE_MODE",
    "SYSTEM_CONFIG_DIRS",
    "TomlConfError",
    "ConfigError",
    "ConfigDecodeError",
    "DefaultDecodeError",
    "ConfigNotFoundError",
    "ConfigExit",
]
