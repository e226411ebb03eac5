"""Configuration management for the dungeon crawler engine.

Configuration is centralized with pydantic-settings and read from
environment variables or a ``.env`` file. API keys are held as SecretStr.

Example:
    >>> from dungeon_crawler.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.game.max_depth
    10

Environment Variables:
    DUNGEON_CRAWLER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DUNGEON_CRAWLER_NARRATOR_API_KEY: API key for the text-generation service
    DUNGEON_CRAWLER_NARRATOR_MODEL: Model used for narration
    DUNGEON_CRAWLER_GAME_SEED: Optional seed for reproducible dice
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dungeon_crawler.core.exceptions import ConfigurationError


class NarratorSettings(BaseSettings):
    """Configuration for the text-generation narrator.

    Attributes:
        enabled: Whether to call the text-generation service at all.
        api_key: API key for the service. Without it the offline narrator is used.
        base_url: Optional alternative endpoint (OpenAI-compatible).
        model: Model identifier.
        room_temperature: Sampling temperature for room descriptions.
        combat_temperature: Sampling temperature for combat sentences.
        enemy_temperature: Sampling temperature for enemy generation.
        timeout_seconds: Per-request timeout.
        max_tokens: Response token cap.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWLER_NARRATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(
        default=True,
        description="Call the text-generation service",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Text-generation API key",
    )
    base_url: str | None = Field(
        default=None,
        description="OpenAI-compatible endpoint override",
    )
    model: str = Field(
        default="gpt-4o",
        description="Narration model",
    )
    room_temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    combat_temperature: float = Field(default=0.9, ge=0.0, le=2.0)
    enemy_temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        le=300,
        description="Narrator request timeout",
    )
    max_tokens: int = Field(
        default=300,
        ge=16,
        le=4096,
        description="Maximum tokens per narration",
    )

    @field_validator("model", mode="after")
    @classmethod
    def validate_model_name(cls, value: str) -> str:
        """Reject blank model identifiers.

        Args:
            value: The configured model name.

        Returns:
            The stripped model name.

        Raises:
            ConfigurationError: If the model name is blank.
        """
        value = value.strip()
        if not value:
            raise ConfigurationError("Narrator model must not be empty", config_key="model")
        return value

    @property
    def is_available(self) -> bool:
        """Whether the settings allow live narration."""
        return self.enabled and self.api_key is not None


class GameSettings(BaseSettings):
    """Configuration for game engine behavior.

    Attributes:
        max_party_size: Maximum number of party members.
        max_depth: Depth at which the dungeon is conquered.
        starting_morale: Party morale at character creation.
        theme: Dungeon theme label.
        apply_defend_bonus: Whether Defending raises the enemy's to-hit target.
        chain_level_ups: Whether one XP award may grant several levels.
        max_auto_turns: Safety bound for automatic turn processing.
        seed: Optional seed for reproducible dice.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWLER_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_party_size: int = Field(default=4, ge=1, le=8)
    max_depth: int = Field(default=10, ge=1, le=100)
    starting_morale: int = Field(default=75, ge=0, le=100)
    theme: str = Field(default="Ancient Catacombs")
    apply_defend_bonus: bool = Field(
        default=True,
        description="Defending adds +2 to the enemy's hit threshold",
    )
    chain_level_ups: bool = Field(
        default=True,
        description="Keep leveling while xp >= xp_to_next",
    )
    max_auto_turns: int = Field(default=500, ge=1)
    seed: int | None = Field(default=None, description="Random seed")


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Emit JSON log lines instead of console output.
        narrator: Narrator settings.
        game: Game engine settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWLER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="Dungeon Crawler", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="JSON log output")

    narrator: NarratorSettings = Field(default_factory=NarratorSettings)
    game: GameSettings = Field(default_factory=GameSettings)

    @model_validator(mode="after")
    def debug_forces_verbose_logging(self) -> "Settings":
        """Lower the log level to DEBUG when debug mode is on.

        Returns:
            Self with the adjusted log level.
        """
        if self.debug and self.log_level != "DEBUG":
            self.log_level = "DEBUG"
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "NarratorSettings",
    "GameSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
