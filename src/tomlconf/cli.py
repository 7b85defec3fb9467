# src/tomlconf/cli.py
"""
Command line diagnostics for tomlconf.

Commands:
- ``tomlconf paths NAME``: list the candidate locations for a config file
  in priority order, marking the ones that exist.
- ``tomlconf check NAME``: run the same search an application would and
  report which file gets loaded.

Both accept ``--dir`` for the application's custom config directory.
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, List, Optional

from .exceptions import ConfigNotFoundError, DefaultDecodeError
from .logging_config import configure_logging
from .manager import ConfigManager
from .paths import build_search_paths


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

class OutputFormatter:
    """Formats CLI output in various styles."""

    def __init__(self, use_color: bool = True, json_output: bool = False):
        self.use_color = use_color and sys.stdout.isatty()
        self.json_output = json_output

    def _color(self, text: str, color: str) -> str:
        """Apply ANSI color to text."""
        if not self.use_color:
            return text

        colors = {
            'green': '\033[92m',
            'red': '\033[91m',
            'bold': '\033[1m',
            'reset': '\033[0m'
        }
        return f"{colors.get(color, '')}{text}{colors['reset']}"

    def success(self, text: str) -> str:
        return self._color(f"✓ {text}", 'green')

    def error(self, text: str) -> str:
        return self._color(f"✗ {text}", 'red')

    def header(self, text: str) -> str:
        return self._color(text, 'bold')


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_paths(file_name: str, config_dir: Optional[str] = None,
              formatter: Optional[OutputFormatter] = None) -> int:
    """
    Print the candidate config paths in priority order.

    Returns:
        Exit code (always 0)
    """
    formatter = formatter or OutputFormatter()
    paths = [p for p in build_search_paths(
        file_name, config_dir=config_dir, home=os.environ.get("HOME", "")
    ) if p]

    if formatter.json_output:
        output = [{"path": p, "exists": os.path.isfile(p)} for p in paths]
        print(json.dumps(output, indent=2))
        return 0

    print(formatter.header(f"Search paths for '{file_name}' (highest priority first)"))
    for i, path in enumerate(paths, 1):
        marker = formatter.success("found") if os.path.isfile(path) else "-"
        print(f"  {i}. {path}  {marker}")
    return 0


def cmd_check(file_name: str, config_dir: Optional[str] = None,
              defaults_path: Optional[str] = None,
              formatter: Optional[OutputFormatter] = None) -> int:
    """
    Load the config the way an application would and report the result.

    Returns:
        Exit code (0 = loaded, 1 = no config found, 2 = bad defaults file)
    """
    formatter = formatter or OutputFormatter()

    default_text = ""
    if defaults_path:
        try:
            default_text = Path(defaults_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(formatter.error(f"Cannot read defaults file {defaults_path}: {e}"))
            return 2

    conf: dict[str, Any] = {}
    try:
        manager = ConfigManager(default_text, config_dir, file_name, conf)
    except DefaultDecodeError as e:
        print(formatter.error(str(e)))
        return 2

    try:
        loaded = manager.load_config()
    except ConfigNotFoundError as e:
        if formatter.json_output:
            print(json.dumps({"loaded": None, "searched": e.search_paths, "config": conf},
                             indent=2, default=str))
        else:
            print(formatter.error(str(e)))
            for path in e.search_paths:
                print(f"  {path}")
        return 1

    if formatter.json_output:
        print(json.dumps({"loaded": loaded, "config": conf}, indent=2, default=str))
    else:
        print(formatter.success(f"Loaded {loaded}"))
        print(f"  {len(conf)} top-level key(s)")
    return 0


# =============================================================================
# ENTRY POINT
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the tomlconf CLI."""
    parser = argparse.ArgumentParser(
        prog="tomlconf",
        description="Inspect where TOML configuration files are looked up"
    )
    parser.add_argument(
        "--json",
        help="Output in JSON format",
        action="store_true"
    )
    parser.add_argument(
        "--no-color",
        help="Disable colored output",
        action="store_true"
    )
    parser.add_argument(
        "--verbose", "-v",
        help="Log every candidate tried",
        action="store_true"
    )
    parser.add_argument(
        "--log-file",
        help="Also write debug logs to this file",
        default=None
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    paths_parser = subparsers.add_parser("paths", help="List candidate config paths")
    paths_parser.add_argument("file_name", help="Config file name, e.g. myapp.toml")
    paths_parser.add_argument("--dir", "-d", dest="config_dir", default=None,
                              help="Custom config directory searched first")

    check_parser = subparsers.add_parser("check", help="Find and decode the config file")
    check_parser.add_argument("file_name", help="Config file name, e.g. myapp.toml")
    check_parser.add_argument("--dir", "-d", dest="config_dir", default=None,
                              help="Custom config directory searched first")
    check_parser.add_argument("--defaults", default=None,
                              help="TOML file with default values")

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for the tomlconf CLI.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    debug = parsed.verbose or bool(parsed.log_file)
    configure_logging(
        config={
            "console_enabled": parsed.verbose,
            "console_level": "DEBUG" if parsed.verbose else "WARNING",
            "log_file": parsed.log_file,
            "components": {"tomlconf": "DEBUG" if debug else "INFO"},
        },
        force_reconfigure=True,
    )

    formatter = OutputFormatter(
        use_color=not parsed.no_color,
        json_output=parsed.json
    )

    if parsed.command == "paths":
        return cmd_paths(parsed.file_name, config_dir=parsed.config_dir, formatter=formatter)
    elif parsed.command == "check":
        return cmd_check(
            parsed.file_name,
            config_dir=parsed.config_dir,
            defaults_path=parsed.defaults,
            formatter=formatter
        )
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
