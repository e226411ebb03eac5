"""Procedural dungeon generation.

Rooms are built on demand from a uniformly chosen template, with loot,
trap and enemy placement drawn independently at depth-scaled odds. The
narrator is asked for enemies and descriptions when a party exists;
generation itself never fails because of the narrator.
"""

from __future__ import annotations

from dungeon_crawler.core.config import GameSettings, get_settings
from dungeon_crawler.core.constants import (
    ENEMY_BASE_CHANCE,
    ENEMY_DEPTH_CHANCE,
    FALLBACK_ROOM_DESCRIPTION,
    FALLBACK_ROOM_SYMBOLIC,
    LOOT_BASE_CHANCE,
    LOOT_DEPTH_CHANCE,
    SINGLE_LOOT_CHANCE,
    TRAP_BASE_CHANCE,
    TRAP_DEPTH_CHANCE,
)
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.engine.dice import DiceRoller
from dungeon_crawler.models.content import LOOT_ITEMS, ROOM_TEMPLATES
from dungeon_crawler.models.dungeon import Dungeon, Enemy, NarratorMemory, Room, make_room_id
from dungeon_crawler.models.items import Item
from dungeon_crawler.models.party import Party
from dungeon_crawler.narration.base import NarrationResult, Narrator, RoomDescription
from dungeon_crawler.narration.offline import OfflineNarrator


logger = get_logger(__name__)


def loot_chance(depth: int) -> float:
    return LOOT_BASE_CHANCE + LOOT_DEPTH_CHANCE * depth


def trap_chance(depth: int) -> float:
    return TRAP_BASE_CHANCE + TRAP_DEPTH_CHANCE * depth


def enemy_chance(depth: int) -> float:
    return ENEMY_BASE_CHANCE + ENEMY_DEPTH_CHANCE * depth


class DungeonGenerator:
    """Builds rooms and dungeons.

    Attributes:
        dice: Source of random draws.
        narrator: Flavor collaborator.
        settings: Game settings (max depth, theme).
    """

    def __init__(
        self,
        *,
        dice: DiceRoller | None = None,
        narrator: Narrator | None = None,
        settings: GameSettings | None = None,
    ) -> None:
        self.dice = dice or DiceRoller()
        self.narrator = narrator or OfflineNarrator()
        self.settings = settings or get_settings().game

    def roll_loot(self) -> list[Item]:
        """Draw one item (usually) or two, as fresh instances."""
        count = 1 if self.dice.chance(SINGLE_LOOT_CHANCE) else 2
        return [self.dice.choice(LOOT_ITEMS).instance() for _ in range(count)]

    def spawn_enemy(self, room_type: str, depth: int, party: Party | None) -> Enemy:
        """Get an enemy for a room, from the narrator or the fallback formula."""
        if party is None or not party.members:
            return Enemy.fallback(depth)
        try:
            result = self.narrator.generate_enemy(room_type, depth, party.player)
        except Exception:
            logger.exception("Enemy generation raised", depth=depth)
            result = NarrationResult.failure("narrator raised")
        if result.ok:
            return result.value
        logger.warning("Using fallback enemy", depth=depth, reason=result.error)
        return Enemy.fallback(depth)

    def describe(self, room: Room, party: Party | None, memory: NarratorMemory | None) -> None:
        """Fill in a room's description when a party exists."""
        if party is None or not party.members:
            return
        try:
            result = self.narrator.describe_room(room, party.player, memory)
        except Exception:
            logger.exception("Room narration raised", room_id=room.id)
            result = NarrationResult.failure("narrator raised")
        if result.ok:
            description = result.value
        else:
            logger.warning("Using fallback room description", room_id=room.id, reason=result.error)
            description = RoomDescription(FALLBACK_ROOM_DESCRIPTION, FALLBACK_ROOM_SYMBOLIC)
        room.description = description.description
        room.symbolic_text = description.symbolic

    def generate_room(
        self,
        depth: int,
        index: int,
        party: Party | None = None,
        *,
        allow_enemy: bool = True,
        memory: NarratorMemory | None = None,
    ) -> Room:
        """Generate a room.

        Args:
            depth: Depth of the room (>= 1).
            index: Generation index; with depth, forms the room id.
            party: The party, used to parameterize narration.
            allow_enemy: Whether an enemy may be placed.
            memory: Narrator memory to enrich the description prompt.

        Returns:
            A new Room. The caller inserts it into the dungeon.
        """
        template = self.dice.choice(ROOM_TEMPLATES)
        has_loot = self.dice.chance(loot_chance(depth))
        has_trap = self.dice.chance(trap_chance(depth))
        has_enemy = self.dice.chance(enemy_chance(depth)) and allow_enemy

        loot = self.roll_loot() if has_loot else []
        enemy = self.spawn_enemy(template.room_type, depth, party) if has_enemy else None

        room = Room(
            id=make_room_id(depth, index),
            ascii=list(template.ascii),
            exits=list(template.exits),
            has_loot=has_loot,
            has_trap=has_trap,
            has_enemy=has_enemy,
            loot=loot,
            enemy=enemy,
            depth=depth,
            room_type=template.room_type,
        )
        self.describe(room, party, memory)

        logger.debug(
            "Room generated",
            room_id=room.id,
            room_type=room.room_type,
            has_loot=has_loot,
            has_trap=has_trap,
            has_enemy=has_enemy,
        )
        return room

    def generate_dungeon(self, party: Party | None = None) -> Dungeon:
        """Create a dungeon with its explored, enemy-free starting room."""
        memory = NarratorMemory()
        start = self.generate_room(1, 0, party, allow_enemy=False, memory=memory)
        start.explored = True
        dungeon = Dungeon(
            rooms={start.id: start},
            current_room_id=start.id,
            depth=1,
            max_depth=self.settings.max_depth,
            theme=self.settings.theme,
            narrator_memory=memory,
        )
        logger.info("Dungeon generated", theme=dungeon.theme, max_depth=dungeon.max_depth)
        return dungeon


__all__ = [
    "loot_chance",
    "trap_chance",
    "enemy_chance",
    "DungeonGenerator",
]
