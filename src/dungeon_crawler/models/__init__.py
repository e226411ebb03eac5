"""Pydantic V2 schemas for the dungeon crawler engine.

This module provides the data model layer: the party, the dungeon and its
rooms, enemies, combat sessions, the game-state aggregate and the static
content tables.

Submodules:
    enums: Enumeration types (Ability, GamePhase, CombatState, etc.)
    items: Item value objects and status effects
    party: StatBlock, PartyMember, Party
    dungeon: Enemy, Room, NarratorMemory, Dungeon
    combat: CombatTurn, CombatSession
    game_state: LogEntry, GameState
    content: Classes, backgrounds, room templates, loot and companions

Example:
    >>> from dungeon_crawler.models import Enemy, GameState, GamePhase
    >>> state = GameState()
    >>> state.phase == GamePhase.CHARACTER_CREATION
    True
    >>> Enemy.fallback(3).max_hp
    14
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from dungeon_crawler.models.enums import (
    Ability,
    CombatAction,
    CombatAIPolicy,
    CombatState,
    Direction,
    GamePhase,
    ItemType,
    LogCategory,
)

# =============================================================================
# Entities
# =============================================================================
from dungeon_crawler.models.items import Item, StatusEffect, contains_item, remove_item
from dungeon_crawler.models.party import Party, PartyMember, StatBlock, calculate_modifier
from dungeon_crawler.models.dungeon import Dungeon, Enemy, NarratorMemory, Room, make_room_id
from dungeon_crawler.models.combat import CombatSession, CombatTurn
from dungeon_crawler.models.game_state import GameState, LogEntry

# =============================================================================
# Content
# =============================================================================
from dungeon_crawler.models.content import (
    BACKGROUNDS,
    CLASSES,
    LOOT_ITEMS,
    PORTRAITS,
    RECRUITABLE_NPCS,
    ROOM_TEMPLATES,
    STAT_ARRAYS,
    BackgroundTemplate,
    ClassTemplate,
    RecruitableNPC,
    RoomTemplate,
    StatArray,
    find_loot_item,
    get_background,
    get_class,
    get_npc,
    get_stat_array,
)


__all__ = [
    # Enums
    "Ability",
    "CombatAction",
    "CombatAIPolicy",
    "CombatState",
    "Direction",
    "GamePhase",
    "ItemType",
    "LogCategory",
    # Items
    "Item",
    "StatusEffect",
    "contains_item",
    "remove_item",
    # Party
    "StatBlock",
    "PartyMember",
    "Party",
    "calculate_modifier",
    # Dungeon
    "Enemy",
    "Room",
    "NarratorMemory",
    "Dungeon",
    "make_room_id",
    # Combat
    "CombatTurn",
    "CombatSession",
    # Game state
    "LogEntry",
    "GameState",
    # Content
    "ClassTemplate",
    "BackgroundTemplate",
    "StatArray",
    "RoomTemplate",
    "RecruitableNPC",
    "CLASSES",
    "BACKGROUNDS",
    "STAT_ARRAYS",
    "PORTRAITS",
    "ROOM_TEMPLATES",
    "LOOT_ITEMS",
    "RECRUITABLE_NPCS",
    "get_class",
    "get_background",
    "get_stat_array",
    "get_npc",
    "find_loot_item",
]
