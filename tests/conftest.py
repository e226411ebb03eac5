"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the dungeon crawler test suite. Random draws go through ScriptedDice so
every scenario is exact; narration goes through stub narrators so no
test touches the network.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

import pytest

from dungeon_crawler.core.config import GameSettings
from dungeon_crawler.engine.dice import DiceRoller
from dungeon_crawler.models.dungeon import Dungeon, Enemy, Room
from dungeon_crawler.models.enums import CombatAIPolicy, Direction, GamePhase, ItemType
from dungeon_crawler.models.game_state import GameState
from dungeon_crawler.models.items import Item
from dungeon_crawler.models.party import Party, PartyMember, StatBlock
from dungeon_crawler.narration.base import CombatOutcome, NarrationResult, RoomDescription


if TYPE_CHECKING:
    from collections.abc import Generator

    from dungeon_crawler.models.dungeon import NarratorMemory


T = TypeVar("T")


# =============================================================================
# Scripted Randomness
# =============================================================================


class ScriptedDice(DiceRoller):
    """A DiceRoller that replays scripted values.

    Each kind of draw has its own queue. When a queue runs dry the roller
    falls back to the lowest outcome: every die shows 1, chances fail,
    choices take the first option and integers take the low bound.

    Attributes:
        rolls: Totals returned by d(), in order.
        chances: Outcomes returned by chance(), in order.
        choices: Indices used by choice(), in order.
        ints: Values returned by randint(), in order.
        calls: Every d() call as (sides, count).
    """

    def __init__(
        self,
        rolls: Sequence[int] = (),
        *,
        chances: Sequence[bool] = (),
        choices: Sequence[int] = (),
        ints: Sequence[int] = (),
    ) -> None:
        super().__init__()
        self.rolls = list(rolls)
        self.chances = list(chances)
        self.choices = list(choices)
        self.ints = list(ints)
        self.calls: list[tuple[int, int]] = []

    def d(self, sides: int, count: int = 1) -> int:
        self.calls.append((sides, count))
        if self.rolls:
            return self.rolls.pop(0)
        return count

    def chance(self, probability: float) -> bool:
        if self.chances:
            return self.chances.pop(0)
        return False

    def choice(self, options: Sequence[T]) -> T:
        if self.choices:
            return options[self.choices.pop(0)]
        return options[0]

    def randint(self, low: int, high: int) -> int:
        if self.ints:
            return self.ints.pop(0)
        return low


# =============================================================================
# Stub Narrators
# =============================================================================


class ScriptedNarrator:
    """A narrator that always succeeds with fixed text.

    Attributes:
        enemy: Enemy returned by generate_enemy, or None to fail.
        combat_calls: Outcomes passed to narrate_combat.
    """

    description = "Bones line the walls of a narrow crypt."
    symbolic = "The dead keep their counsel."

    def __init__(self, enemy: Enemy | None = None) -> None:
        self.enemy = enemy
        self.combat_calls: list[CombatOutcome] = []
        self.room_calls = 0

    def describe_room(
        self,
        room: Room,
        character: PartyMember,
        memory: NarratorMemory | None = None,
    ) -> NarrationResult[RoomDescription]:
        self.room_calls += 1
        return NarrationResult.success(RoomDescription(self.description, self.symbolic))

    def narrate_combat(
        self,
        action: str,
        character: PartyMember,
        enemy: Enemy,
        outcome: CombatOutcome,
    ) -> NarrationResult[str]:
        self.combat_calls.append(outcome)
        verb = "strikes" if outcome.hit else "swings wide at"
        return NarrationResult.success(f"{character.name} {verb} the {enemy.name}.")

    def generate_enemy(
        self,
        room_type: str,
        depth: int,
        character: PartyMember,
    ) -> NarrationResult[Enemy]:
        if self.enemy is None:
            return NarrationResult.failure("no enemy scripted")
        return NarrationResult.success(self.enemy.model_copy(deep=True))


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dungeon_crawler.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of the settings."""
    for key in list(os.environ):
        if key.startswith("DUNGEON_CRAWLER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def game_settings() -> GameSettings:
    """Provide game settings with the defaults."""
    return GameSettings()


# =============================================================================
# Model Factories
# =============================================================================


def _make_member(
    member_id: str = "player",
    name: str = "Aldric",
    *,
    hp: int = 20,
    max_hp: int = 20,
    stats: dict[str, int] | None = None,
    inventory: list[Item] | None = None,
    is_player: bool | None = None,
    combat_ai: CombatAIPolicy = CombatAIPolicy.BALANCED,
    level: int = 1,
    **extra: Any,
) -> PartyMember:
    """Build a party member with readable defaults."""
    return PartyMember(
        id=member_id,
        name=name,
        character_class="Warrior",
        level=level,
        hp=hp,
        max_hp=max_hp,
        stats=StatBlock.from_short(stats or {}),
        inventory=inventory or [],
        is_player=member_id == "player" if is_player is None else is_player,
        combat_ai=combat_ai,
        **extra,
    )


def _make_enemy(
    name: str = "Grave Rat",
    *,
    hp: int = 10,
    attack: int = 2,
    defense: int = 2,
    xp_reward: int = 40,
    loot: list[Item] | None = None,
) -> Enemy:
    """Build an enemy with readable defaults."""
    return Enemy(
        name=name,
        hp=hp,
        max_hp=hp,
        attack=attack,
        defense=defense,
        xp_reward=xp_reward,
        loot=loot or [],
    )


def _make_room(
    depth: int = 1,
    index: int = 0,
    *,
    exits: Sequence[Direction] = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST),
    **fields: Any,
) -> Room:
    """Build a room with every exit open."""
    return Room(
        id=f"{depth}_{index}",
        exits=list(exits),
        depth=depth,
        room_type="chamber",
        **fields,
    )


def _make_state(
    *members: PartyMember,
    gold: int = 0,
    room: Room | None = None,
    max_depth: int = 10,
    phase: GamePhase = GamePhase.DUNGEON,
) -> GameState:
    """Build a game state standing in a single explored room."""
    room = room or _make_room(explored=True)
    party = Party(members=list(members) or [_make_member()], shared_gold=gold)
    dungeon = Dungeon(
        rooms={room.id: room},
        current_room_id=room.id,
        depth=room.depth,
        max_depth=max_depth,
    )
    return GameState(phase=phase, party=party, dungeon=dungeon)


def _healing_potion() -> Item:
    """A fresh Healing Potion instance."""
    return Item(name="Healing Potion", type=ItemType.CONSUMABLE, healing=15, value=25)


def _iron_sword() -> Item:
    """A fresh d8 weapon."""
    return Item(name="Iron Sword", type=ItemType.WEAPON, damage=8, value=50)


# =============================================================================
# Factory Fixtures
# =============================================================================


@pytest.fixture
def scripted_dice() -> type[ScriptedDice]:
    """The ScriptedDice class, for tests that script their own draws."""
    return ScriptedDice


@pytest.fixture
def narrator_class() -> type[ScriptedNarrator]:
    """The ScriptedNarrator class, for tests that need a custom enemy or subclass."""
    return ScriptedNarrator


@pytest.fixture
def make_member() -> Callable[..., PartyMember]:
    """Factory for party members with readable defaults."""
    return _make_member


@pytest.fixture
def make_enemy() -> Callable[..., Enemy]:
    """Factory for enemies with readable defaults."""
    return _make_enemy


@pytest.fixture
def make_room() -> Callable[..., Room]:
    """Factory for rooms with every exit open."""
    return _make_room


@pytest.fixture
def make_state() -> Callable[..., GameState]:
    """Factory for game states standing in a single explored room."""
    return _make_state


@pytest.fixture
def healing_potion() -> Callable[[], Item]:
    """Factory for fresh Healing Potion instances."""
    return _healing_potion


@pytest.fixture
def iron_sword() -> Callable[[], Item]:
    """Factory for fresh Iron Sword instances."""
    return _iron_sword


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Create a DiceRoller with a fixed seed for reproducible tests."""
    return DiceRoller(seed=42)


@pytest.fixture
def scripted_narrator() -> ScriptedNarrator:
    """A narrator that always succeeds."""
    return ScriptedNarrator()


@pytest.fixture
def player() -> PartyMember:
    """A sturdy player character: STR 14, DEX 10, 20/20 hp, iron sword."""
    return _make_member(stats={"STR": 14}, inventory=[_iron_sword()])


@pytest.fixture
def game_state(player: PartyMember) -> GameState:
    """A dungeon-phase state holding only the player."""
    return _make_state(player, gold=500)
