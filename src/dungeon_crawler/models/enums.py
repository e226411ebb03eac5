"""Enumeration types for the dungeon crawler.

These enums give type-safe names to the string tags the game uses for
abilities, items, ally behavior, phases, combat states and log entries.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """The six attributes of a stat block.

    Values are the StatBlock field names; member names are the short
    labels used by the content tables.
    """

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"

    @property
    def abbreviation(self) -> str:
        """Get the three-letter abbreviation (e.g., 'STR')."""
        return self.name

    @classmethod
    def from_abbreviation(cls, label: str) -> "Ability":
        """Look up an ability by its short label.

        Args:
            label: Three-letter label, case-insensitive.

        Returns:
            The matching Ability.

        Raises:
            KeyError: If the label is unknown.
        """
        return cls[label.upper()]


class ItemType(StrEnum):
    """Item categories."""

    WEAPON = "weapon"
    ARMOR = "armor"
    CONSUMABLE = "consumable"
    TREASURE = "treasure"
    TOOL = "tool"


class CombatAIPolicy(StrEnum):
    """Decision policy of a computer-controlled ally."""

    AGGRESSIVE = "aggressive"
    """Always attacks."""

    DEFENSIVE = "defensive"
    """Defends when badly hurt."""

    SUPPORT = "support"
    """Heals wounded companions first."""

    BALANCED = "balanced"
    """Defends when near death, heals when a companion is, else attacks."""


class Direction(StrEnum):
    """Compass exits of a room."""

    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"


class GamePhase(StrEnum):
    """Top-level phase of a run."""

    CHARACTER_CREATION = "character-creation"
    DUNGEON = "dungeon"
    COMBAT = "combat"
    DEATH = "death"
    VICTORY = "victory"


class CombatState(StrEnum):
    """State of the combat turn scheduler."""

    AWAITING_PARTY_TURN = "awaiting-party-turn"
    AWAITING_ENEMY_TURN = "awaiting-enemy-turn"
    VICTORY = "combat-resolved-victory"
    DEFEAT = "combat-resolved-defeat"
    FLED = "combat-resolved-flee"

    @property
    def is_resolved(self) -> bool:
        """Whether the encounter is over."""
        return self in (CombatState.VICTORY, CombatState.DEFEAT, CombatState.FLED)


class CombatAction(StrEnum):
    """Actions an actor can take on its turn."""

    ATTACK = "attack"
    DEFEND = "defend"
    USE_ITEM = "use_item"
    FLEE = "flee"
    WAIT = "wait"


class LogCategory(StrEnum):
    """Category of a player-facing log entry."""

    COMBAT = "combat"
    NARRATIVE = "narrative"
    SYSTEM = "system"
    DICE = "dice"
    DEATH = "death"
    LEVEL = "level"
    AI = "ai"


__all__ = [
    "Ability",
    "ItemType",
    "CombatAIPolicy",
    "Direction",
    "GamePhase",
    "CombatState",
    "CombatAction",
    "LogCategory",
]
