"""Tests for argument parsing and the CLI entry point."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from liiga_teletext import cli
from liiga_teletext.app import ViewOptions
from liiga_teletext.config import read_config_file


class TestParser:
    """Tests for build_parser."""

    def test_defaults(self):
        args = cli.build_parser().parse_args([])
        assert args.once is False
        assert args.date is None
        assert args.config is None
        assert args.min_refresh_interval is None

    def test_flags(self):
        args = cli.build_parser().parse_args(["-o", "-p", "-w", "-d", "2024-01-15", "--min-refresh-interval", "45"])
        assert args.once and args.plain and args.wide
        assert args.date == "2024-01-15"
        assert args.min_refresh_interval == 45.0

    def test_compact_and_wide_are_exclusive(self, capsys):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["-c", "-w"])

    @pytest.mark.parametrize("argv", [["-d", "2024-13-01"], ["-d", "tomorrow"], ["--min-refresh-interval", "0"]])
    def test_invalid_values(self, argv, capsys):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(argv)

    def test_config_without_value(self):
        assert cli.build_parser().parse_args(["--config"]).config == ""
        assert cli.build_parser().parse_args(["--config", "api.example.com"]).config == "api.example.com"


class TestConfigCommands:
    """Tests for the config maintenance flags."""

    def test_config_with_domain(self, config_home, capsys):
        assert cli.main(["--config", "api.example.com"]) == 0
        assert read_config_file()["api_domain"] == "https://api.example.com"
        assert "Config saved to" in capsys.readouterr().out

    def test_config_prompts_for_domain(self, config_home, capsys):
        with patch("builtins.input", return_value=" prompted.example.com "):
            assert cli.main(["--config"]) == 0
        assert read_config_file()["api_domain"] == "https://prompted.example.com"

    def test_invalid_domain(self, config_home, capsys):
        assert cli.main(["--config", "placeholder"]) == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_list_config(self, config_home, capsys):
        assert cli.main(["--list-config"]) == 0
        assert "No config file found" in capsys.readouterr().out

    def test_set_and_clear_log_file(self, config_home, capsys):
        cli.main(["--config", "api.example.com", "--set-log-file", "/tmp/liiga.log"])
        assert read_config_file()["log_file_path"] == "/tmp/liiga.log"
        cli.main(["--clear-log-file"])
        assert "log_file_path" not in read_config_file()


class TestMain:
    """Tests for main."""

    def test_missing_domain_exits_with_error(self, config_home, monkeypatch, capsys):
        monkeypatch.setenv("LIIGA_API_DOMAIN", "unset")
        assert cli.main(["--once"]) == 1
        assert "--config" in capsys.readouterr().err

    def test_once_runs_the_app(self, config_home, tmp_path):
        run = AsyncMock(return_value=0)
        with patch("liiga_teletext.cli._run", run), patch("liiga_teletext.cli.configure_logging") as configure:
            assert cli.main(["--once", "--compact", "-d", "2024-01-15", "--log-file", str(tmp_path / "x.log")]) == 0

        options, once, settings = run.call_args.args
        assert options == ViewOptions(date="2024-01-15", compact=True)
        assert once is True
        assert settings.resolved_log_file == tmp_path / "x.log"
        configure.assert_called_once_with(tmp_path / "x.log", debug=False)
