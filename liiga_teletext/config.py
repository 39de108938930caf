"""
Typed settings for the Liiga teletext viewer.

Uses Pydantic Settings to load configuration from, in order of precedence,
explicit keyword arguments, ``LIIGA_*`` environment variables and the TOML file
at ``<config dir>/liiga_teletext/config.toml``.
"""

from __future__ import annotations

import json
import os
import sys
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from .constants import DEFAULT_API_FETCH_TIMEOUT_SECONDS, DEFAULT_HTTP_TIMEOUT_SECONDS
from .errors import ConfigError

APP_DIR_NAME = "liiga_teletext"
CONFIG_FILE_NAME = "config.toml"
LOG_FILE_NAME = "liiga_teletext.log"

# Values CI setups use to mean "no real API available"
PLACEHOLDER_DOMAINS = frozenset({"placeholder", "test", "unset"})


def normalize_api_domain(value: str) -> str:
    """Strip whitespace and trailing slashes; prepend https:// when no scheme is given."""
    domain = value.strip().rstrip("/")
    if not domain:
        raise ValueError("API domain cannot be empty")
    if domain in PLACEHOLDER_DOMAINS:
        raise ValueError(f"API domain '{domain}' is a placeholder")
    if domain.startswith(("http://", "https://")):
        return domain
    if "." not in domain and not domain.startswith("localhost"):
        raise ValueError("API domain must be a valid URL or domain name")
    return f"https://{domain}"


def config_dir(platform: str | None = None) -> Path:
    """Per-platform configuration directory for the application."""
    platform = platform or sys.platform
    if platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    elif platform == "win32":
        base = os.environ.get("APPDATA") or Path.home() / "AppData" / "Roaming"
    else:
        base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / APP_DIR_NAME


def config_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def default_log_path() -> Path:
    return config_dir() / "logs" / LOG_FILE_NAME


class Settings(BaseSettings):
    """
    Application settings.

    Field names are the TOML keys; aliases are the environment variable names.
    """

    model_config = SettingsConfigDict(
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )

    api_domain: str = Field(..., alias="LIIGA_API_DOMAIN")
    log_file_path: str | None = Field(None, alias="LIIGA_LOG_FILE")
    http_timeout_seconds: int = Field(DEFAULT_HTTP_TIMEOUT_SECONDS, alias="LIIGA_HTTP_TIMEOUT", gt=0)
    debug: bool = Field(False, alias="LIIGA_DEBUG")
    cache_size: int | None = Field(None, alias="LIIGA_CACHE_SIZE", gt=0)
    api_fetch_timeout_seconds: int = Field(DEFAULT_API_FETCH_TIMEOUT_SECONDS, alias="LIIGA_API_FETCH_TIMEOUT")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=config_path()),
        )

    @field_validator("api_domain", mode="before")
    @classmethod
    def normalize_domain(cls, v: str) -> str:
        if not isinstance(v, str):
            return v
        return normalize_api_domain(v)

    @field_validator("log_file_path")
    @classmethod
    def reject_empty_log_path(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Log file path cannot be empty")
        return v

    @field_validator("api_fetch_timeout_seconds")
    @classmethod
    def clamp_fetch_timeout(cls, v: int) -> int:
        return max(1, min(30, v))

    @property
    def resolved_log_file(self) -> Path:
        if self.log_file_path:
            return Path(self.log_file_path).expanduser()
        return default_log_path()


def load_settings(**overrides: object) -> Settings:
    """Build settings, converting validation failures into ``ConfigError``."""
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        problems = "; ".join(err["msg"] for err in exc.errors())
        raise ConfigError(f"Invalid configuration: {problems}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Settings are cached to avoid re-reading the TOML file and environment on
    every access. Tests call ``get_settings.cache_clear()``.
    """
    return load_settings()


# ---------------------------------------------------------------------------
# Config file maintenance (--config, --set-log-file, --clear-log-file)
# ---------------------------------------------------------------------------


def read_config_file(path: Path | None = None) -> dict[str, str]:
    target = path or config_path()
    if not target.exists():
        return {}
    try:
        with target.open("rb") as fh:
            data = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {target}: {exc}") from exc
    return {key: value for key, value in data.items() if isinstance(value, str)}


def save_config(
    api_domain: str | None = None,
    log_file_path: str | None = None,
    *,
    clear_log_file: bool = False,
    path: Path | None = None,
) -> Path:
    """Update the TOML config file, keeping keys that were not given.

    The domain is validated the same way ``Settings`` validates it before it
    is written.
    """
    target = path or config_path()
    data = read_config_file(target)
    if api_domain is not None:
        try:
            data["api_domain"] = normalize_api_domain(api_domain)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
    if clear_log_file:
        data.pop("log_file_path", None)
    elif log_file_path is not None:
        if not log_file_path.strip():
            raise ConfigError("Log file path cannot be empty")
        data["log_file_path"] = log_file_path
    if "api_domain" not in data:
        raise ConfigError("API domain is required")

    target.parent.mkdir(parents=True, exist_ok=True)
    # JSON string escapes are a subset of TOML basic-string escapes
    lines = [f"{key} = {json.dumps(value, ensure_ascii=False)}" for key, value in sorted(data.items())]
    target.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return target


def describe_config(path: Path | None = None) -> list[str]:
    """Lines printed by ``--list-config``."""
    target = path or config_path()
    lines = [f"Config file: {target}"]
    if not target.exists():
        lines.append("No config file found. Run with --config to create one.")
        return lines
    data = read_config_file(target)
    lines.append(f"API domain: {data.get('api_domain', '(not set)')}")
    log_path = data.get("log_file_path")
    lines.append(f"Log file: {log_path or f'{default_log_path()} (default)'}")
    return lines
