"""Configuration management for the Companion registries."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CompanionSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    companion_home: Path = Field(
        default=Path("~/.companion"), validation_alias="COMPANION_HOME"
    )
    log_level: str = Field(default="INFO", validation_alias="COMPANION_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "COMPANION_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("companion_home", mode="before")
    @classmethod
    def _default_home(cls, value):
        if value is None or value == "":
            return Path("~/.companion")
        return value


@lru_cache(maxsize=1)
def get_settings() -> CompanionSettings:
    """Return cached settings instance."""

    settings = CompanionSettings()
    settings.companion_home = settings.companion_home.expanduser().resolve()
    return settings


def resolve_home(root: Path | str | None = None) -> Path:
    """Return the configuration root, falling back to the configured default."""

    if root is not None:
        return Path(root).expanduser()
    return get_settings().companion_home


__all__ = ["CompanionSettings", "get_settings", "resolve_home"]
