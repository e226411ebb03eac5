"""Game engine for the dungeon crawler.

The engines own every rule of the run: dice, dungeon generation, combat
scheduling and resolution, progression, recruitment, character creation
and exploration. The controller ties them to a single GameState.

Submodules:
    dice: Random generators (d20 library)
    dungeon: Room and dungeon generation
    policy: Ally combat decisions
    combat: Turn scheduler and action resolution
    progression: XP, level ups, death and resurrection
    recruitment: Hiring companions
    creation: Character creation
    exploration: Move, search, rest and items outside combat
    controller: Phase-aware command surface

Example:
    >>> from dungeon_crawler.engine import GameController
    >>>
    >>> game = GameController()
    >>> game.create_character(
    ...     {"STR": 15, "DEX": 14, "CON": 13, "INT": 12, "WIS": 10, "CHA": 8},
    ...     "Warrior", "Tomb Raider", "Aldric", "⚔️",
    ... )
    >>> result = game.move("N")
    >>> print(result.message)
"""

from __future__ import annotations

# =============================================================================
# Dice Rolling
# =============================================================================
from dungeon_crawler.engine.dice import (
    DiceExpression,
    DiceRoller,
    get_default_roller,
    roll,
)

# =============================================================================
# Dungeon Generation
# =============================================================================
from dungeon_crawler.engine.dungeon import (
    DungeonGenerator,
    enemy_chance,
    loot_chance,
    trap_chance,
)

# =============================================================================
# Combat
# =============================================================================
from dungeon_crawler.engine.policy import decide_ally_action
from dungeon_crawler.engine.combat import (
    CombatEngine,
    TurnResult,
    TurnStatus,
    attack_threshold,
    defense_threshold,
)

# =============================================================================
# Progression and Party
# =============================================================================
from dungeon_crawler.engine.progression import (
    ProgressionEngine,
    member_resurrection_cost,
    party_resurrection_cost,
)
from dungeon_crawler.engine.recruitment import (
    build_companion,
    check_recruitment,
    recruit,
)
from dungeon_crawler.engine.creation import (
    CharacterCreator,
    point_buy_cost,
    roll_stats,
    validate_point_buy,
)

# =============================================================================
# Exploration and Control
# =============================================================================
from dungeon_crawler.engine.exploration import ExplorationEngine, next_depth
from dungeon_crawler.engine.controller import (
    COMMAND_PHASES,
    CommandResult,
    GameController,
)


__all__ = [
    # Dice Rolling
    "DiceExpression",
    "DiceRoller",
    "get_default_roller",
    "roll",
    # Dungeon Generation
    "DungeonGenerator",
    "loot_chance",
    "trap_chance",
    "enemy_chance",
    # Combat
    "decide_ally_action",
    "CombatEngine",
    "TurnResult",
    "TurnStatus",
    "attack_threshold",
    "defense_threshold",
    # Progression and Party
    "ProgressionEngine",
    "party_resurrection_cost",
    "member_resurrection_cost",
    "build_companion",
    "check_recruitment",
    "recruit",
    "CharacterCreator",
    "roll_stats",
    "point_buy_cost",
    "validate_point_buy",
    # Exploration and Control
    "ExplorationEngine",
    "next_depth",
    "COMMAND_PHASES",
    "CommandResult",
    "GameController",
]
