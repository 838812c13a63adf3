"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.karaoke.value_objects import CodeAlphabet
from ..domain.shared.messages import ErrorMessages


class StorageSettings(BaseModel):
    """Snapshot database configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/karaoke.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: int = Field(
        default=5000,
        ge=1000,
        le=30000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: int = Field(
        default=10,
        ge=1,
        le=60,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith("sqlite://") and v != ":memory:":
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: str = Field(
        default="!",
        min_length=1,
        max_length=5,
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("guild_ids", "guilds")
    )
    sync_on_startup: bool = False

    @field_validator("guild_ids", mode="before")
    @classmethod
    def validate_guild_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate guild IDs and convert lists to tuples."""
        if isinstance(v, list):
            v = tuple(v)
        for guild_id in v:
            if int(guild_id) <= 0:
                raise ValueError("Guild IDs must be positive")
        return v


class SessionSettings(BaseModel):
    """Session store behaviour."""

    model_config = ConfigDict(frozen=True)

    code_length: int = Field(default=4, ge=4, le=12)
    code_alphabet: CodeAlphabet = CodeAlphabet.NUMERIC
    max_code_attempts: int = Field(default=100, ge=1, le=10_000)
    reject_duplicate_videos: bool = True
    detach_on_create: bool = False
    resolve_timeout_s: float = Field(default=15.0, gt=0.0, le=120.0)

    @model_validator(mode="after")
    def validate_code_space(self) -> SessionSettings:
        if self.code_length < self.code_alphabet.min_length:
            raise ValueError(ErrorMessages.ALPHANUMERIC_CODE_TOO_SHORT)
        return self


class YouTubeSettings(BaseModel):
    """YouTube Data API configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("api_key", "youtube_api_key"),
    )
    api_url: str = "https://www.googleapis.com/youtube/v3/videos"
    request_timeout_s: float = Field(default=10.0, gt=0.0, le=60.0)


class CastSettings(BaseModel):
    """Cast device configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    discovery_timeout_s: float = Field(default=10.0, gt=0.0, le=60.0)
    command_timeout_s: float = Field(default=10.0, gt=0.0, le=60.0)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__GUILD_IDS, etc. (nested with ``__``)
    - STORAGE__URL, SESSION__CODE_LENGTH, YOUTUBE__API_KEY, CAST__ENABLED, ...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    youtube: YouTubeSettings = Field(default_factory=YouTubeSettings)
    cast: CastSettings = Field(default_factory=CastSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
