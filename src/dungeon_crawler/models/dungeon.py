"""Dungeon, room, enemy and narrator memory models."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from dungeon_crawler.core.constants import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_THEME,
    FALLBACK_ENEMY_NAME,
    FALLBACK_ENEMY_SYMBOLIC,
    MAX_MEMORY_EVENTS,
    NARRATOR_FOCUS,
    NARRATOR_TONE,
    PLACEHOLDER_ROOM_DESCRIPTION,
    PLACEHOLDER_ROOM_SYMBOLIC,
)
from dungeon_crawler.models.enums import Direction
from dungeon_crawler.models.items import Item


def make_room_id(depth: int, index: int) -> str:
    """Build the '{depth}_{index}' room handle."""
    return f"{depth}_{index}"


# =============================================================================
# Enemy
# =============================================================================


class Enemy(BaseModel):
    """A hostile creature occupying a room.

    Attributes:
        name: Display name.
        hp: Current hit points.
        max_hp: Maximum hit points.
        attack: Bonus added to the enemy's attack roll.
        defense: Added to the party's hit threshold.
        xp_reward: Experience split among the party on defeat.
        loot: Items carried.
        symbolic: Flavor text.
        ai_generated: Whether the narrator produced this enemy.
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(min_length=1)
    hp: int = Field(ge=0)
    max_hp: int = Field(ge=1)
    attack: int = 0
    defense: int = 0
    xp_reward: int = Field(default=0, ge=0)
    loot: list[Item] = Field(default_factory=list)
    symbolic: str = ""
    ai_generated: bool = False

    @model_validator(mode="after")
    def validate_hp_bounds(self) -> Self:
        if self.hp > self.max_hp:
            raise ValueError(f"hp ({self.hp}) exceeds max_hp ({self.max_hp})")
        return self

    @classmethod
    def fallback(cls, depth: int) -> "Enemy":
        """Build the deterministic enemy used when the narrator cannot.

        Args:
            depth: Dungeon depth of the room.

        Returns:
            A Shadow Wraith scaled to the depth.
        """
        hp = 8 + 2 * depth
        return cls(
            name=FALLBACK_ENEMY_NAME,
            hp=hp,
            max_hp=hp,
            attack=3 + depth,
            defense=depth // 2,
            xp_reward=20 + 15 * depth,
            symbolic=FALLBACK_ENEMY_SYMBOLIC,
            ai_generated=False,
        )

    @computed_field(description="Whether the enemy has been slain")
    @property
    def is_defeated(self) -> bool:
        return self.hp <= 0

    def take_damage(self, amount: int) -> int:
        """Apply damage, flooring hp at 0.

        Returns:
            The hit points actually lost.
        """
        if amount <= 0:
            return 0
        actual = min(self.hp, amount)
        self.hp = self.hp - actual
        return actual


# =============================================================================
# Room
# =============================================================================


class Room(BaseModel):
    """A generated room of the dungeon.

    The ascii layout is carried for presentation only.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(pattern=r"^\d+_\d+$")
    ascii: list[str] = Field(default_factory=list)
    exits: list[Direction] = Field(default_factory=list)
    description: str = PLACEHOLDER_ROOM_DESCRIPTION
    symbolic_text: str = PLACEHOLDER_ROOM_SYMBOLIC
    explored: bool = False
    has_loot: bool = False
    has_trap: bool = False
    has_enemy: bool = False
    loot: list[Item] = Field(default_factory=list)
    enemy: Enemy | None = None
    depth: int = Field(ge=1)
    room_type: str

    @model_validator(mode="after")
    def validate_contents(self) -> Self:
        """Ensure the content flags agree with the loot and enemy slots."""
        if self.has_loot and not self.loot:
            raise ValueError("room flagged with loot has no loot items")
        if self.has_enemy and self.enemy is None:
            raise ValueError("room flagged with an enemy has no enemy")
        return self

    def take_loot(self) -> Item | None:
        """Pop the first loot item, clearing has_loot when exhausted."""
        if not self.has_loot or not self.loot:
            return None
        item = self.loot.pop(0)
        if not self.loot:
            self.has_loot = False
        return item

    def disarm_trap(self) -> None:
        """Spend the room's single-use trap."""
        self.has_trap = False

    def clear_enemy(self) -> None:
        """Remove the room's enemy after it is slain."""
        self.has_enemy = False
        self.enemy = None


# =============================================================================
# Dungeon
# =============================================================================


class NarratorMemory(BaseModel):
    """Context accumulated during the run to enrich narration prompts."""

    tone: str = NARRATOR_TONE
    focus: list[str] = Field(default_factory=lambda: list(NARRATOR_FOCUS))
    memory_events: list[str] = Field(default_factory=list)

    def remember(self, event: str) -> None:
        """Append an event, keeping only the most recent ones."""
        self.memory_events.append(event)
        if len(self.memory_events) > MAX_MEMORY_EVENTS:
            del self.memory_events[:-MAX_MEMORY_EVENTS]

    def recent(self, count: int = 3) -> list[str]:
        """Get the last few events."""
        return self.memory_events[-count:]


class Dungeon(BaseModel):
    """The dungeon of a run: every room generated so far and the party's position.

    Attributes:
        rooms: Rooms by id.
        current_room_id: Id of the room the party stands in.
        depth: Current depth.
        max_depth: Depth at which the dungeon is conquered.
        theme: Theme label.
        narrator_memory: Narration context.
    """

    model_config = ConfigDict(validate_assignment=True)

    rooms: dict[str, Room] = Field(default_factory=dict)
    current_room_id: str
    depth: int = Field(default=1, ge=1)
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    theme: str = DEFAULT_THEME
    narrator_memory: NarratorMemory = Field(default_factory=NarratorMemory)

    @model_validator(mode="after")
    def validate_current_room(self) -> Self:
        if self.current_room_id not in self.rooms:
            raise ValueError(f"current room {self.current_room_id!r} not in dungeon")
        return self

    @property
    def current_room(self) -> Room:
        """The room the party stands in."""
        return self.rooms[self.current_room_id]

    def get_room(self, room_id: str) -> Room | None:
        """Look up a cached room."""
        return self.rooms.get(room_id)

    def add_room(self, room: Room) -> None:
        """Cache a generated room."""
        self.rooms[room.id] = room

    def enter(self, room: Room) -> None:
        """Make a cached room current and explored."""
        self.add_room(room)
        room.explored = True
        self.current_room_id = room.id
        self.depth = room.depth


__all__ = [
    "make_room_id",
    "Enemy",
    "Room",
    "NarratorMemory",
    "Dungeon",
]
