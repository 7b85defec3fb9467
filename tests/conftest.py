# tests/conftest.py
"""
Shared fixtures for tomlconf tests.

Every test gets an isolated filesystem layout standing in for the real
search locations, so nothing under the user's home, /usr/local/etc or /etc
is ever read:

    tmp_path/
        custom/           custom config directory
        work/             current working directory (chdir'd into)
        home/.config/     user config directory
        usr_local_etc/    replaces /usr/local/etc
        etc/              replaces /etc
"""

import logging
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import pytest
from pydantic import BaseModel, Field

from tomlconf.logging_config import LoggingManager
from tomlconf.manager import ConfigManager

FILE_NAME = "testapp.toml"

DEFAULT_CONFIG = textwrap.dedent(
    """\
    # Default configuration for testapp
    listen = ":8080"
    debug = false
    max_connections = 100

    [database]
    host = "localhost"
    port = 5432
    name = "testapp"
    """
)


class DatabaseConfig(BaseModel):
    host: str = ""
    port: int = 0
    name: str = ""


class AppConfig(BaseModel):
    listen: str = ""
    debug: bool = True
    max_conn: int = Field(0, alias="max_connections")
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)


# =============================================================================
# FILESYSTEM LAYOUT
# =============================================================================


@dataclass
class SearchLayout:
    """Temporary directories standing in for every candidate location."""

    custom: Path
    work: Path
    home: Path
    usr_local_etc: Path
    etc: Path

    @property
    def user_config(self) -> Path:
        return self.home / ".config"

    @property
    def system_dirs(self) -> tuple[str, str]:
        return (str(self.usr_local_etc), str(self.etc))

    def write(self, directory: Path, content: str, file_name: str = FILE_NAME) -> Path:
        """Write a config file into one of the candidate directories."""
        path = directory / file_name
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path


@pytest.fixture
def layout(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> SearchLayout:
    """Create the candidate directories and chdir into the working directory."""
    dirs = SearchLayout(
        custom=tmp_path / "custom",
        work=tmp_path / "work",
        home=tmp_path / "home",
        usr_local_etc=tmp_path / "usr_local_etc",
        etc=tmp_path / "etc",
    )
    for d in (dirs.custom, dirs.work, dirs.user_config, dirs.usr_local_etc, dirs.etc):
        d.mkdir(parents=True, exist_ok=True)

    monkeypatch.chdir(dirs.work)
    monkeypatch.setenv("HOME", str(dirs.home))
    return dirs


@pytest.fixture
def make_manager(layout: SearchLayout) -> Callable[..., ConfigManager]:
    """Factory building a ConfigManager wired to the temporary layout."""

    def _make(config=None, autoload: bool = False, default_config: str = DEFAULT_CONFIG,
              config_dir: str | None = None, file_name: str = FILE_NAME) -> ConfigManager:
        if config is None:
            config = AppConfig()
        return ConfigManager(
            default_config,
            str(layout.custom) if config_dir is None else config_dir,
            file_name,
            config,
            autoload=autoload,
            home=str(layout.home),
            system_dirs=layout.system_dirs,
        )

    return _make


# =============================================================================
# LOGGING
# =============================================================================


@pytest.fixture
def reset_logging_manager():
    """Reset the logging manager singleton and root handlers around a test."""

    def _reset():
        LoggingManager._instance = None
        LoggingManager._configured = False
        LoggingManager._log_file_path = None

        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        logging.getLogger("tomlconf").setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()
