# src/tomlconf/paths.py
"""
Candidate path resolution and file I/O for configuration files.

The search order is fixed, earlier entries win:

    1. <config_dir>/<file_name>     (only when a custom directory is given)
    2. <file_name>                  (current working directory)
    3. <home>/.config/<file_name>
    4. /usr/local/etc/<file_name>
    5. /etc/<file_name>

Entries that cannot be built (no custom directory, no home directory) are
kept as empty strings so the list always has the same shape; readers skip
them.
"""

import logging
import os
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)

SYSTEM_CONFIG_DIRS: tuple[str, ...] = ("/usr/local/etc", "/etc")
USER_CONFIG_SUBDIR = ".config"
DEFAULT_FILE_MODE = 0o644


def build_search_paths(
    file_name: str,
    config_dir: str | None = None,
    home: str | None = None,
    system_dirs: Sequence[str] = SYSTEM_CONFIG_DIRS,
) -> list[str]:
    """
    Build the ordered list of candidate config file paths.

    This function does not touch the filesystem or the environment; the
    home directory has to be passed in by the caller.

    Args:
        file_name: Name of the config file, e.g. ``"myapp.toml"``.
        config_dir: Optional custom directory searched before anything else.
        home: The user's home directory. Empty or None skips the user entry.
        system_dirs: System-wide directories searched last, in order.

    Returns:
        List of candidate paths in priority order (may contain empty entries).
    """
    if not file_name:
        raise ValueError("file_name must not be empty")

    paths = [
        os.path.join(config_dir, file_name) if config_dir else "",
        file_name,
        os.path.join(home, USER_CONFIG_SUBDIR, file_name) if home else "",
    ]
    paths.extend(os.path.join(d, file_name) for d in system_dirs)
    return paths


def read_config_bytes(path: str) -> bytes:
    """Read the full contents of a candidate file. Raises OSError on failure."""
    return Path(path).read_bytes()


def write_default_config(path: str, content: str, mode: int = DEFAULT_FILE_MODE) -> None:
    """
    Write the default document verbatim to ``path``.

    The file is created with ``mode`` (subject to the process umask) or
    truncated if it already exists. The write is not atomic: if it fails
    partway, a truncated or partial file is left at ``path``.

    Raises:
        OSError: If the file cannot be created or written.
    """
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as f:
        f.write(content.encode("utf-8"))
    logger.debug(f"Wrote default config to {path}")
