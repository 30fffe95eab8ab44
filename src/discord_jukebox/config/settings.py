"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import (
    ColourComponent,
    CommandPrefixStr,
    HttpUrlStr,
    NonEmptyStr,
    PositiveFloat,
    PositiveInt,
    VolumeFloat,
)

DEFAULT_ICON_URL = (
    "https://cdn.discordapp.com/avatars/887241846869360641/70525dd8fab9290f78cc7ad2e26728a6.webp"
)


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    command_prefix: CommandPrefixStr = Field(
        default="~",
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    activity_name: NonEmptyStr = "the queue"
    embed_colour: tuple[ColourComponent, ColourComponent, ColourComponent] = Field(
        default=(253, 195, 213),
        validation_alias=AliasChoices("embed_colour", "embed_color", "colour"),
    )
    icon_url: HttpUrlStr = DEFAULT_ICON_URL

    @field_validator("embed_colour", mode="before")
    @classmethod
    def parse_embed_colour(
        cls, v: str | list[int] | tuple[int, ...]
    ) -> tuple[int, ...] | list[int]:
        """Accept ``"253,195,213"`` as well as a JSON array."""
        if isinstance(v, str):
            try:
                return tuple(int(part) for part in v.split(","))
            except ValueError as exc:
                raise ValueError(ErrorMessages.INVALID_EMBED_COLOUR) from exc
        return v


class AudioSettings(BaseModel):
    """Audio playback and media extraction configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    default_volume: VolumeFloat = 1.0
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            "options": "-vn",
        }
    )
    ytdlp_format: NonEmptyStr = "bestaudio/best"
    socket_timeout: PositiveInt = Field(
        default=15,
        validation_alias=AliasChoices("socket_timeout", "ytdlp_socket_timeout"),
    )


class PlaybackSettings(BaseModel):
    """Timings for the prebuffer pause and the fade-out ticker."""

    model_config = ConfigDict(frozen=True)

    prebuffer_seconds: PositiveFloat = 15.0
    fade_interval_seconds: PositiveFloat = 5.0
    fade_delay_seconds: PositiveFloat = 7.0


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - DISCORD_TOKEN, ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__COMMAND_PREFIX, DISCORD__EMBED_COLOUR, etc. (nested with ``__``)
    - AUDIO__DEFAULT_VOLUME, AUDIO__SOCKET_TIMEOUT, etc.
    - PLAYBACK__PREBUFFER_SECONDS, PLAYBACK__FADE_INTERVAL_SECONDS, etc.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    discord_token: SecretStr = SecretStr("")

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
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
