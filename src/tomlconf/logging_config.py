# src/tomlconf/logging_config.py
"""
Logging setup for the tomlconf CLI and applications embedding tomlconf.

Library modules only call ``logging.getLogger(__name__)`` and never install
handlers. An application calls :func:`configure_logging` once.

The console handler is always installed. In quiet mode (the default) a
:class:`DisplayFilter` lets through only records flagged with
``extra={"display": True}``, which is how :func:`log_display` marks the
autoload notices a user has to see. Setting ``log_file`` adds a
``RotatingFileHandler`` that receives every record at ``file_level``.

Usage:
    from tomlconf.logging_config import configure_logging, log_display

    configure_logging(config={"log_file": "~/.local/state/myapp.log"})
    log_display(logger, logging.INFO, "Using config file %s", path)
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

DEFAULT_LOGGING_CONFIG: dict[str, Any] = {
    "console_enabled": False,
    "console_level": "WARNING",
    "console_format": "%(levelname)s - %(message)s",
    "display_min_level": "INFO",
    "log_file": None,
    "file_level": "DEBUG",
    "file_format": "%(asctime)s [%(levelname)-8s] %(name)s - %(message)s",
    "rotation_max_bytes": 5 * 1024 * 1024,
    "rotation_backup_count": 3,
    "components": {
        "tomlconf": "INFO",
    },
}


def _resolve_level(level: str | int, fallback: int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else fallback


class DisplayFilter(logging.Filter):
    """Console gate: everything when verbose, otherwise display records only."""

    def __init__(self, verbose: bool = False, display_min_level: int = logging.INFO) -> None:
        super().__init__()
        self.verbose = verbose
        self.display_min_level = display_min_level

    def filter(self, record: logging.LogRecord) -> bool:
        if self.verbose:
            return True
        return bool(getattr(record, "display", False)) and record.levelno >= self.display_min_level


class LoggingManager:
    """Process-wide holder of the installed handlers. Configures once unless forced."""

    _instance: Optional["LoggingManager"] = None
    _configured: bool = False
    _log_file_path: Path | None = None

    def __new__(cls) -> "LoggingManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured

    def configure(self, config: dict[str, Any] | None = None, force_reconfigure: bool = False) -> Path | None:
        """
        Install the console handler and, when ``log_file`` is set, the file handler.

        Args:
            config: Overrides for :data:`DEFAULT_LOGGING_CONFIG`
            force_reconfigure: Replace handlers installed by an earlier call

        Returns:
            The log file path, or None when no file handler is active
        """
        if LoggingManager._configured and not force_reconfigure:
            return LoggingManager._log_file_path

        settings = {**DEFAULT_LOGGING_CONFIG, **(config or {})}

        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        root.setLevel(logging.DEBUG)

        root.addHandler(self._console_handler(settings))

        log_file_path = None
        if settings.get("log_file"):
            file_handler, log_file_path = self._file_handler(settings)
            if file_handler is not None:
                root.addHandler(file_handler)

        for component, level in settings.get("components", {}).items():
            logging.getLogger(component).setLevel(_resolve_level(level, logging.INFO))

        LoggingManager._configured = True
        LoggingManager._log_file_path = log_file_path
        if log_file_path:
            logging.getLogger(__name__).debug(f"Logging to {log_file_path}")
        return log_file_path

    @staticmethod
    def _console_handler(settings: dict[str, Any]) -> logging.Handler:
        verbose = bool(settings.get("console_enabled"))
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(settings["console_format"]))
        # In quiet mode the filter alone decides
        handler.setLevel(
            _resolve_level(settings["console_level"], logging.WARNING) if verbose else logging.DEBUG
        )
        handler.addFilter(DisplayFilter(
            verbose=verbose,
            display_min_level=_resolve_level(settings["display_min_level"], logging.INFO),
        ))
        return handler

    @staticmethod
    def _file_handler(settings: dict[str, Any]) -> tuple[logging.Handler | None, Path | None]:
        path = Path(os.path.expanduser(str(settings["log_file"])))
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                path,
                maxBytes=settings["rotation_max_bytes"],
                backupCount=settings["rotation_backup_count"],
                encoding="utf-8",
            )
        except OSError as e:
            sys.stderr.write(f"Warning: Cannot open log file {path}: {e}\n")
            return None, None

        handler.setLevel(_resolve_level(settings["file_level"], logging.DEBUG))
        handler.setFormatter(logging.Formatter(settings["file_format"]))
        return handler, path


def configure_logging(config: dict[str, Any] | None = None, force_reconfigure: bool = False) -> Path | None:
    """Configure root logging. See :meth:`LoggingManager.configure`."""
    return LoggingManager().configure(config=config, force_reconfigure=force_reconfigure)


def log_display(logger: logging.Logger, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
    """``logger.log()`` with ``display`` set, so the record reaches a quiet console.

    A caller-supplied ``extra`` is kept.
    """
    extra = dict(kwargs.pop("extra", None) or {})
    extra["display"] = True
    logger.log(level, msg, *args, extra=extra, **kwargs)
