# tests/test_cli.py
"""Tests for the tomlconf command line interface."""

import json
import logging
import os

import pytest

from tomlconf.cli import OutputFormatter, cmd_check, cmd_paths, create_parser, main

from conftest import DEFAULT_CONFIG, FILE_NAME


@pytest.fixture(autouse=True)
def _isolated_logging(reset_logging_manager):
    """main() configures logging; undo it after every test."""
    yield


@pytest.fixture
def plain():
    return OutputFormatter(use_color=False)


class TestParser:
    """Tests for argument parsing."""

    def test_paths_command(self):
        parsed = create_parser().parse_args(["paths", "app.toml", "--dir", "/opt/app"])
        assert parsed.command == "paths"
        assert parsed.file_name == "app.toml"
        assert parsed.config_dir == "/opt/app"

    def test_check_command_defaults(self):
        parsed = create_parser().parse_args(["--json", "check", "app.toml"])
        assert parsed.json is True
        assert parsed.defaults is None
        assert parsed.config_dir is None


class TestPathsCommand:
    """Tests for `tomlconf paths`."""

    def test_lists_paths_in_order(self, layout, plain, capsys):
        layout.write(layout.user_config, "a = 1")
        assert cmd_paths(FILE_NAME, config_dir=str(layout.custom), formatter=plain) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[1].strip().startswith(f"1. {os.path.join(str(layout.custom), FILE_NAME)}")
        assert lines[2].strip().startswith(f"2. {FILE_NAME}")
        user_line = lines[3]
        assert os.path.join(str(layout.home), ".config", FILE_NAME) in user_line
        assert "found" in user_line

    def test_json_output(self, layout, capsys):
        cmd_paths(FILE_NAME, formatter=OutputFormatter(use_color=False, json_output=True))
        entries = json.loads(capsys.readouterr().out)
        assert [e["path"] for e in entries][:2] == [
            FILE_NAME,
            os.path.join(str(layout.home), ".config", FILE_NAME),
        ]
        assert all(e["exists"] is False for e in entries[:2])


class TestCheckCommand:
    """Tests for `tomlconf check`."""

    def test_reports_loaded_file(self, layout, plain, capsys):
        layout.write(layout.work, 'listen = ":1"')
        assert cmd_check(FILE_NAME, formatter=plain) == 0
        assert f"Loaded {FILE_NAME}" in capsys.readouterr().out

    def test_not_found(self, layout, plain, capsys):
        assert cmd_check("does-not-exist-anywhere.toml", formatter=plain) == 1
        out = capsys.readouterr().out
        assert "no config files found" in out.lower()
        assert "does-not-exist-anywhere.toml" in out

    def test_json_merges_defaults(self, layout, capsys):
        defaults = layout.custom / "defaults.toml"
        defaults.write_text(DEFAULT_CONFIG, encoding="utf-8")
        layout.write(layout.work, "[database]\nport = 1")

        code = cmd_check(
            FILE_NAME,
            defaults_path=str(defaults),
            formatter=OutputFormatter(use_color=False, json_output=True),
        )

        assert code == 0
        result = json.loads(capsys.readouterr().out)
        assert result["loaded"] == FILE_NAME
        assert result["config"]["listen"] == ":8080"
        assert result["config"]["database"] == {"host": "localhost", "port": 1, "name": "testapp"}

    def test_bad_defaults_file(self, layout, plain, capsys):
        defaults = layout.custom / "defaults.toml"
        defaults.write_text("a = ", encoding="utf-8")
        assert cmd_check(FILE_NAME, defaults_path=str(defaults), formatter=plain) == 2

    def test_missing_defaults_file(self, layout, plain, capsys):
        assert cmd_check(FILE_NAME, defaults_path=str(layout.custom / "nope.toml"),
                         formatter=plain) == 2
        assert "Cannot read defaults file" in capsys.readouterr().out


class TestMain:
    """Tests for the main() entry point."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage:" in capsys.readouterr().out

    def test_check_via_main(self, layout, capsys):
        layout.write(layout.custom, 'listen = ":2"')
        assert main(["--no-color", "check", FILE_NAME, "--dir", str(layout.custom)]) == 0
        assert "Loaded" in capsys.readouterr().out

    def test_verbose_logs_candidates(self, layout, capsys):
        main(["--no-color", "-v", "check", FILE_NAME])
        err = capsys.readouterr().err
        assert "Trying configuration file" in err

    def test_log_file_receives_debug_records(self, layout, tmp_path, capsys):
        log_file = tmp_path / "logs" / "tomlconf.log"
        main(["--no-color", "--log-file", str(log_file), "check", FILE_NAME])
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "Trying configuration file" in log_file.read_text(encoding="utf-8")
        assert "Trying configuration file" not in capsys.readouterr().err
