# src/tomlconf/manager.py
"""
Configuration manager: finds, reads and decodes TOML config files.

The manager first decodes an embedded default document into the caller's
configuration object, then overlays the first candidate file it can both
read and decode. Missing or unreadable candidates are expected and only
logged at DEBUG; a candidate that exists but cannot be decoded is logged
as a warning and skipped.

Example:
    DEFAULT_CONFIG = '''
    listen = ":8080"
    debug = false
    '''

    class AppConfig(BaseModel):
        listen: str = ""
        debug: bool = False

    conf = AppConfig()
    manager = ConfigManager(DEFAULT_CONFIG, "", "myapp.toml", conf, autoload=True)
    print(conf.listen)
"""

import logging
import os
from typing import Any, Sequence

from .decoding import decode
from .exceptions import (
    ConfigDecodeError,
    ConfigExit,
    ConfigNotFoundError,
    DefaultDecodeError,
)
from .logging_config import log_display
from .paths import (
    DEFAULT_FILE_MODE,
    SYSTEM_CONFIG_DIRS,
    build_search_paths,
    read_config_bytes,
    write_default_config,
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Finds and reads configuration files for a caller-owned config object.

    Args:
        default_config: The default configuration in TOML format. Fields a
            config file does not set keep the values from this document.
        config_dir: Custom directory searched first. Empty or None skips it.
        file_name: Name of the config file; only files with this name are
            tried.
        config: The object to decode into: a pydantic model, a dataclass
            instance, a mutable mapping or an object with an ``overlay()``
            method. It is mutated in place.
        autoload: Load a config file before returning. When none can be
            found a default one is written to the working directory and
            :class:`ConfigExit` is raised (code 0 on success, 1 if the file
            could not be written). Leave this off and call
            :meth:`load_config` to handle a missing config yourself.
        home: Home directory used for ``~/.config/<file_name>``. Defaults to
            ``$HOME`` as read at construction time.
        system_dirs: System-wide directories searched last.

    Raises:
        DefaultDecodeError: If ``default_config`` cannot be decoded into ``config``.
        ConfigExit: Only with ``autoload=True`` and no config file found.
    """

    def __init__(
        self,
        default_config: str,
        config_dir: str | None,
        file_name: str,
        config: Any,
        autoload: bool = False,
        *,
        home: str | None = None,
        system_dirs: Sequence[str] = SYSTEM_CONFIG_DIRS,
    ):
        if home is None:
            home = os.environ.get("HOME", "")

        self.search_paths: list[str] = build_search_paths(
            file_name, config_dir=config_dir, home=home, system_dirs=system_dirs
        )
        self.file_name = file_name
        self.default_config = default_config
        self.conf = config
        self.loaded_path: str | None = None

        # Values from a config file overwrite these
        try:
            decode(default_config, self.conf, source="<default config>")
        except ConfigDecodeError as e:
            raise DefaultDecodeError(e.reason) from e

        if not autoload:
            return

        try:
            self.load_config()
        except ConfigNotFoundError:
            self._generate_default_and_exit()

        log_display(logger, logging.INFO, f"Successfully loaded configuration file '{self.loaded_path}'")

    def load_config(self) -> str:
        """
        Try every candidate path until one can be read and decoded.

        Can be called repeatedly to reload the config from disk. Each call
        overlays onto the current values of the config object; it does not
        reset them to the defaults first.

        Returns:
            The path of the file that was loaded.

        Raises:
            ConfigNotFoundError: If no candidate could be read and decoded.
        """
        for path in self.search_paths:
            if not path:
                continue

            logger.debug(f"Trying configuration file '{path}'")
            try:
                content = read_config_bytes(path)
            except OSError as e:
                logger.debug(f"No config found at '{path}' ({e})")
                continue

            try:
                decode(content, self.conf, source=path)
            except ConfigDecodeError as e:
                logger.warning(f"Unable to decode config file at '{path}': {e.reason}")
                continue

            self.loaded_path = path
            return path

        raise ConfigNotFoundError(self.search_paths)

    def _generate_default_and_exit(self) -> None:
        log_display(
            logger,
            logging.INFO,
            "No configuration files were found, a new one will be generated "
            "in the present working directory",
        )
        try:
            write_default_config(self.file_name, self.default_config, mode=DEFAULT_FILE_MODE)
        except OSError as e:
            log_display(
                logger,
                logging.WARNING,
                f"A default config file could not be created in this directory for the "
                f"following reason: {e}.\n\nPlease manually create a configuration file "
                f"in one of the following places:",
            )
            for path in self.search_paths:
                if path:
                    print(path)
            raise ConfigExit(1, f"could not write default config '{self.file_name}': {e}") from e

        raise ConfigExit(0, f"default config written to '{self.file_name}'")

    def __repr__(self) -> str:
        return f"ConfigManager(file_name={self.file_name!r}, loaded_path={self.loaded_path!r})"
