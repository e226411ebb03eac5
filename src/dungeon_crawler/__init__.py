"""Dungeon Crawler - turn-based party dungeon engine.

A game-state engine for a party of adventurers descending a procedurally
generated dungeon.

NEURO-SYMBOLIC ARCHITECTURE:
- Python owns TRUTH (GameState, dice rolls via d20, rule resolution)
- The narrator handles FLAVOR (room descriptions, combat sentences, enemies)
- The narrator NEVER decides an outcome; every query has a fallback

Example:
    >>> from dungeon_crawler import GameController
    >>>
    >>> game = GameController()
    >>> game.create_character(
    ...     {"STR": 15, "DEX": 12, "CON": 14, "INT": 10, "WIS": 11, "CHA": 8},
    ...     "Warrior", "Sole Survivor", "Mara", "🗡️",
    ... )
    >>> game.search().success
    True

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 game-state models and content tables.
    engine: Dice, generation, combat, progression and the phase controller.
    narration: Narrator protocol, OpenAI narrator and offline fallback.
"""

from __future__ import annotations

# Core
from dungeon_crawler.core.config import Settings, get_settings
from dungeon_crawler.core.exceptions import DungeonCrawlerError
from dungeon_crawler.core.logging import configure_logging, get_logger

# Game State (The Source of Truth)
from dungeon_crawler.models import (
    Dungeon,
    Enemy,
    GamePhase,
    GameState,
    Item,
    Party,
    PartyMember,
    Room,
    StatBlock,
)

# Engine
from dungeon_crawler.engine import (
    CommandResult,
    DiceRoller,
    GameController,
    TurnResult,
    TurnStatus,
)

# Narration
from dungeon_crawler.narration import Narrator, OfflineNarrator, OpenAINarrator, create_narrator


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "DungeonCrawlerError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Game State
    "GamePhase",
    "GameState",
    "Party",
    "PartyMember",
    "StatBlock",
    "Dungeon",
    "Room",
    "Enemy",
    "Item",
    # Engine
    "GameController",
    "CommandResult",
    "DiceRoller",
    "TurnResult",
    "TurnStatus",
    # Narration
    "Narrator",
    "OfflineNarrator",
    "OpenAINarrator",
    "create_narrator",
]
