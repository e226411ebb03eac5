"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        DungeonCrawlerError: Base exception for all engine errors.
        GameEngineError: Commands that cannot be applied to the game state.
        NarratorError: Text-generation failures.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from dungeon_crawler.core.config import (
    GameSettings,
    NarratorSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from dungeon_crawler.core.exceptions import (
    CombatError,
    ConfigurationError,
    ContentNotFoundError,
    DiceRollError,
    DungeonCrawlerError,
    GameEngineError,
    InsufficientGoldError,
    InvalidCommandError,
    InvalidGameStateError,
    NarratorConnectionError,
    NarratorError,
    NarratorRateLimitError,
    NarratorResponseError,
    RecruitmentError,
    TurnManagementError,
    ValidationError,
)
from dungeon_crawler.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "DungeonCrawlerError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    "ContentNotFoundError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "InvalidCommandError",
    "CombatError",
    "DiceRollError",
    "TurnManagementError",
    "InsufficientGoldError",
    "RecruitmentError",
    # Narrator exceptions
    "NarratorError",
    "NarratorConnectionError",
    "NarratorResponseError",
    "NarratorRateLimitError",
    # Configuration
    "Settings",
    "NarratorSettings",
    "GameSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
