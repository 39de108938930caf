"""Tests for settings loading and the config file commands."""

from __future__ import annotations

from pathlib import Path

import pytest

from liiga_teletext.config import (
    config_dir,
    config_path,
    describe_config,
    load_settings,
    normalize_api_domain,
    read_config_file,
    save_config,
)
from liiga_teletext.errors import ConfigError


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("api.example.com", "https://api.example.com"),
        (" api.example.com/ ", "https://api.example.com"),
        ("http://localhost:8080", "http://localhost:8080"),
        ("localhost:8080", "https://localhost:8080"),
        ("https://api.example.com//", "https://api.example.com"),
    ],
)
def test_normalize_api_domain(raw: str, expected: str) -> None:
    assert normalize_api_domain(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "placeholder", "test", "unset", "nodots"])
def test_normalize_rejects(raw: str) -> None:
    with pytest.raises(ValueError):
        normalize_api_domain(raw)


class TestLoadSettings:
    """Tests for load_settings precedence and validation."""

    def test_environment_variable(self, config_home, monkeypatch):
        monkeypatch.setenv("LIIGA_API_DOMAIN", "env.example.com")
        assert load_settings().api_domain == "https://env.example.com"

    def test_toml_file(self, config_home, monkeypatch):
        monkeypatch.delenv("LIIGA_API_DOMAIN", raising=False)
        save_config(api_domain="file.example.com")
        assert load_settings().api_domain == "https://file.example.com"

    def test_environment_beats_file(self, config_home, monkeypatch):
        save_config(api_domain="file.example.com")
        monkeypatch.setenv("LIIGA_API_DOMAIN", "env.example.com")
        assert load_settings().api_domain == "https://env.example.com"

    def test_missing_domain(self, config_home, monkeypatch):
        monkeypatch.delenv("LIIGA_API_DOMAIN", raising=False)
        with pytest.raises(ConfigError):
            load_settings()

    def test_placeholder_domain(self, config_home, monkeypatch):
        monkeypatch.setenv("LIIGA_API_DOMAIN", "placeholder")
        with pytest.raises(ConfigError, match="placeholder"):
            load_settings()

    def test_fetch_timeout_is_clamped(self, settings):
        assert load_settings(api_domain="api.example.com", api_fetch_timeout_seconds=99).api_fetch_timeout_seconds == 30
        assert settings.api_fetch_timeout_seconds == 5

    def test_default_log_file(self, settings, config_home):
        assert settings.resolved_log_file == config_home / "liiga_teletext" / "logs" / "liiga_teletext.log"

    def test_custom_log_file(self, config_home, monkeypatch, tmp_path):
        monkeypatch.setenv("LIIGA_LOG_FILE", str(tmp_path / "custom.log"))
        assert load_settings(api_domain="api.example.com").resolved_log_file == tmp_path / "custom.log"


class TestConfigFile:
    """Tests for save_config and describe_config."""

    def test_save_keeps_other_keys(self, config_home):
        save_config(api_domain="api.example.com", log_file_path="/tmp/liiga.log")
        save_config(api_domain="other.example.com")
        assert read_config_file() == {"api_domain": "https://other.example.com", "log_file_path": "/tmp/liiga.log"}

    def test_clear_log_file(self, config_home):
        save_config(api_domain="api.example.com", log_file_path="/tmp/liiga.log")
        save_config(clear_log_file=True)
        assert "log_file_path" not in read_config_file()

    def test_domain_required_for_new_file(self, config_home):
        with pytest.raises(ConfigError):
            save_config(log_file_path="/tmp/liiga.log")
        assert not config_path().exists()

    def test_invalid_domain_not_written(self, config_home):
        with pytest.raises(ConfigError):
            save_config(api_domain="placeholder")

    def test_describe_without_file(self, config_home):
        lines = describe_config()
        assert lines[0] == f"Config file: {config_path()}"
        assert "No config file found" in lines[1]

    def test_describe_with_file(self, config_home):
        save_config(api_domain="api.example.com")
        lines = describe_config()
        assert "API domain: https://api.example.com" in lines
        assert lines[-1].endswith("(default)")


class TestConfigDir:
    """Tests for the per-platform configuration directory."""

    def test_linux_uses_xdg_config_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        assert config_dir("linux") == tmp_path / "xdg" / "liiga_teletext"

    def test_linux_falls_back_to_dot_config(self, tmp_path, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert config_dir("linux") == tmp_path / ".config" / "liiga_teletext"

    def test_macos_uses_application_support(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert config_dir("darwin") == (
            tmp_path / "Library" / "Application Support" / "liiga_teletext"
        )

    def test_windows_uses_appdata(self, tmp_path, monkeypatch):
        monkeypatch.setenv("APPDATA", str(tmp_path / "Roaming"))
        assert config_dir("win32") == tmp_path / "Roaming" / "liiga_teletext"

    def test_windows_without_appdata(self, tmp_path, monkeypatch):
        monkeypatch.delenv("APPDATA", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert config_dir("win32") == (
            tmp_path / "AppData" / "Roaming" / "liiga_teletext"
        )

    def test_config_path_follows_current_platform(self, config_home, monkeypatch):
        monkeypatch.setattr("liiga_teletext.config.sys.platform", "linux")
        assert config_path() == config_home / "liiga_teletext" / "config.toml"
