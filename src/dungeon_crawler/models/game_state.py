"""The game-state aggregate.

GameState is the single owner of a run. Engines receive it, mutate it in
place and return plain result values; nothing else holds run state.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from dungeon_crawler.models.combat import CombatSession
from dungeon_crawler.models.dungeon import Dungeon, Enemy
from dungeon_crawler.models.enums import GamePhase, LogCategory
from dungeon_crawler.models.party import Party


class LogEntry(BaseModel):
    """A line of the player-facing adventure log."""

    model_config = ConfigDict(frozen=True)

    text: str
    category: LogCategory = LogCategory.SYSTEM
    timestamp: datetime = Field(default_factory=datetime.now)


class GameState(BaseModel):
    """Everything that makes up one run.

    Attributes:
        phase: Top-level phase.
        party: The party, once a character is created.
        dungeon: The dungeon, once a character is created.
        combat: The active encounter, if any.
        log: Append-only adventure log.
    """

    model_config = ConfigDict(validate_assignment=True)

    phase: GamePhase = GamePhase.CHARACTER_CREATION
    party: Party | None = None
    dungeon: Dungeon | None = None
    combat: CombatSession | None = None
    log: list[LogEntry] = Field(default_factory=list)

    @property
    def current_enemy(self) -> Enemy | None:
        """The enemy of the active encounter."""
        return self.combat.enemy if self.combat is not None else None

    def add_log(self, text: str, category: LogCategory = LogCategory.SYSTEM) -> LogEntry:
        """Append an entry to the adventure log."""
        entry = LogEntry(text=text, category=category)
        self.log.append(entry)
        return entry

    def require_party(self) -> Party:
        """Get the party, which must exist outside character creation."""
        if self.party is None:
            raise LookupError("no party has been created")
        return self.party

    def require_dungeon(self) -> Dungeon:
        """Get the dungeon, which must exist outside character creation."""
        if self.dungeon is None:
            raise LookupError("no dungeon has been generated")
        return self.dungeon

    def reset(self) -> None:
        """Discard the run and return to character creation."""
        self.combat = None
        self.dungeon = None
        self.party = None
        self.log = []
        self.phase = GamePhase.CHARACTER_CREATION


__all__ = [
    "LogEntry",
    "GameState",
]
