"""Out-of-combat commands: moving between rooms, searching, resting and
using items.
"""

from __future__ import annotations

from dungeon_crawler.core.config import GameSettings, get_settings
from dungeon_crawler.core.constants import (
    CURSE_DURATION,
    CURSE_EFFECT,
    HEALING_BONUS_DIE,
    LOOT_FIND_THRESHOLD,
    REST_CURSES,
    REST_FITFUL_FRACTION,
    REST_FITFUL_THRESHOLD,
    REST_GOOD_FRACTION,
    REST_GOOD_THRESHOLD,
    ROOM_INDEX_RANGE,
    SEARCH_NOTHING_THRESHOLD,
    TRAP_AVOID_THRESHOLD,
    TRAP_DAMAGE_DIE,
)
from dungeon_crawler.core.exceptions import InvalidCommandError, InvalidGameStateError
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.engine.combat import CombatEngine
from dungeon_crawler.engine.dice import DiceRoller
from dungeon_crawler.engine.dungeon import DungeonGenerator
from dungeon_crawler.engine.progression import ProgressionEngine
from dungeon_crawler.models.dungeon import Room, make_room_id
from dungeon_crawler.models.enums import Ability, Direction, GamePhase, LogCategory
from dungeon_crawler.models.game_state import GameState
from dungeon_crawler.models.items import Item, remove_item


logger = get_logger(__name__)


def next_depth(depth: int, direction: Direction, max_depth: int) -> int:
    """Depth reached by leaving a room in the given direction.

    North descends (capped at max_depth), south climbs (never above 1),
    east and west stay level.
    """
    if direction == Direction.NORTH:
        return min(max_depth, depth + 1)
    if direction == Direction.SOUTH:
        return max(1, depth - 1)
    return depth


def _coerce_direction(direction: Direction | str) -> Direction:
    try:
        return Direction(str(direction).upper())
    except ValueError as exc:
        raise InvalidCommandError(f"Unknown direction: {direction}", command="move") from exc


class ExplorationEngine:
    """Dungeon-phase commands.

    Attributes:
        dice: Source of random draws.
        generator: Builds newly entered rooms.
        combat: Starts encounters.
        progression: Death and victory transitions.
        settings: Game settings.
    """

    def __init__(
        self,
        *,
        dice: DiceRoller | None = None,
        generator: DungeonGenerator | None = None,
        combat: CombatEngine | None = None,
        progression: ProgressionEngine | None = None,
        settings: GameSettings | None = None,
    ) -> None:
        self.dice = dice or DiceRoller()
        self.settings = settings or get_settings().game
        self.generator = generator or DungeonGenerator(dice=self.dice, settings=self.settings)
        self.progression = progression or ProgressionEngine(dice=self.dice, settings=self.settings)
        self.combat = combat or CombatEngine(
            dice=self.dice,
            settings=self.settings,
            progression=self.progression,
        )

    def _require_dungeon_phase(self, state: GameState, command: str) -> None:
        if state.phase != GamePhase.DUNGEON:
            raise InvalidGameStateError(
                f"Cannot {command} now",
                current_state=state.phase.value,
                expected_states=[GamePhase.DUNGEON.value],
            )

    # -------------------------------------------------------------------------
    # Move
    # -------------------------------------------------------------------------

    def move(self, state: GameState, direction: Direction | str) -> Room:
        """Leave the current room through one of its exits.

        Returns:
            The room entered.

        Raises:
            InvalidGameStateError: Outside the dungeon phase.
            InvalidCommandError: If the room has no such exit.
        """
        self._require_dungeon_phase(state, "move")
        direction = _coerce_direction(direction)
        party = state.require_party()
        dungeon = state.require_dungeon()
        if direction not in dungeon.current_room.exits:
            raise InvalidCommandError(f"You cannot go {direction.value} from here.", command="move")

        depth = next_depth(dungeon.depth, direction, dungeon.max_depth)
        index = self.dice.randint(0, ROOM_INDEX_RANGE - 1)
        room = dungeon.get_room(make_room_id(depth, index))
        revisited = room is not None
        if room is None:
            room = self.generator.generate_room(depth, index, party, memory=dungeon.narrator_memory)
        dungeon.enter(room)

        state.add_log(f"You move {direction.name.lower()}...", LogCategory.SYSTEM)
        state.add_log(room.description, LogCategory.NARRATIVE)
        state.add_log(room.symbolic_text, LogCategory.AI)

        event = f"Moved {direction.value} to {room.room_type} at depth {depth}"
        for member in party.members:
            member.record_event(event)
        dungeon.narrator_memory.remember(event)
        logger.info("Party moved", room_id=room.id, depth=depth, revisited=revisited)

        if room.has_enemy and room.enemy is not None:
            state.add_log(f"A {room.enemy.name} blocks your party's path!", LogCategory.COMBAT)
            state.add_log(room.enemy.symbolic, LogCategory.AI)
            self.combat.initiate(state, room.enemy)
        elif depth >= dungeon.max_depth:
            self.progression.enter_victory(state)
        return room

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search(self, state: GameState) -> Item | None:
        """Search the current room for loot, risking its trap.

        Returns:
            The item found, if any.
        """
        self._require_dungeon_phase(state, "search")
        party = state.require_party()
        room = state.require_dungeon().current_room
        player = party.player

        natural = self.dice.d(20)
        roll = natural + player.modifier(Ability.INT)
        state.add_log(f"You rolled {roll} for Investigation.", LogCategory.DICE)

        if room.has_trap and roll < TRAP_AVOID_THRESHOLD:
            damage = self.dice.d(TRAP_DAMAGE_DIE)
            player.take_damage(damage)
            room.disarm_trap()
            player.record_event(f"Triggered trap for {damage} damage")
            state.add_log("You trigger a trap!", LogCategory.COMBAT)
            state.add_log(
                f"The trap's ancient mechanisms bite deep for {damage} damage!",
                LogCategory.COMBAT,
            )
            if not player.is_conscious:
                self.progression.handle_member_down(state, player)
                self.progression.enter_death(state, "Claimed by an ancient trap.")
                return None

        if room.has_loot and roll >= LOOT_FIND_THRESHOLD:
            item = room.take_loot()
            if item is not None:
                party.shared_inventory.append(item)
                player.record_event(f"Found {item.name}")
                state.add_log(f"You discover: {item.name}!", LogCategory.SYSTEM)
                return item

        if roll >= SEARCH_NOTHING_THRESHOLD:
            state.add_log("You find nothing of interest.", LogCategory.SYSTEM)
        else:
            state.add_log("Your search reveals only shadows and dust.", LogCategory.NARRATIVE)
        return None

    # -------------------------------------------------------------------------
    # Rest
    # -------------------------------------------------------------------------

    def rest(self, state: GameState) -> int:
        """Rest in the current room.

        Returns:
            Total hit points restored across the party.
        """
        self._require_dungeon_phase(state, "rest")
        party = state.require_party()
        player = party.player
        state.add_log("You rest in the shadows...", LogCategory.NARRATIVE)

        roll = self.dice.d(20) + player.modifier(Ability.WIS)
        state.add_log(f"You rolled {roll} for rest.", LogCategory.DICE)

        restored = 0
        if roll >= REST_GOOD_THRESHOLD:
            for member in party.members:
                healed = member.heal(int(member.max_hp * REST_GOOD_FRACTION) + self.dice.d(4))
                member.tick_status_effects()
                member.record_event(f"Rested successfully for {healed} HP")
                restored += healed
            state.add_log(f"The party recovers {restored} HP from rest.", LogCategory.SYSTEM)
            state.add_log("Peace finds you in this cursed place, if only for a moment.", LogCategory.AI)
        elif roll >= REST_FITFUL_THRESHOLD:
            for member in party.members:
                restored += member.heal(int(member.max_hp * REST_FITFUL_FRACTION))
                member.record_event("Rested poorly")
            state.add_log("Your rest is fitful but provides some relief.", LogCategory.NARRATIVE)
        else:
            curse = self.dice.choice(REST_CURSES)
            player.add_status(curse, CURSE_DURATION, CURSE_EFFECT)
            player.record_event(f"Became {curse} during rest")
            state.add_log("Your rest is disturbed by whispers in the dark.", LogCategory.NARRATIVE)
            state.add_log(f"{player.name} is {curse}.", LogCategory.SYSTEM)

        logger.info("Party rested", roll=roll, restored=restored)
        return restored

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def use_item(self, state: GameState, item: Item) -> int:
        """Use a healing consumable on the player outside combat.

        The item may come from the player's pack or the shared inventory.

        Returns:
            Hit points restored.

        Raises:
            InvalidCommandError: If the item is not carried or cannot be
                used outside combat.
        """
        self._require_dungeon_phase(state, "use items")
        party = state.require_party()
        player = party.player

        if player.carries(item):
            holder = player.inventory
        elif party.carries_shared(item):
            holder = party.shared_inventory
        else:
            raise InvalidCommandError(f"You do not carry {item.name}.", command="use_item")
        if not item.is_healing:
            raise InvalidCommandError(f"You cannot use {item.name} right now.", command="use_item")

        healed = player.heal(item.healing + self.dice.d(HEALING_BONUS_DIE))
        remove_item(holder, item)
        player.record_event(f"Used {item.name} for {healed} healing")
        state.add_log(f"You use {item.name} and recover {healed} HP.", LogCategory.SYSTEM)
        return healed


__all__ = [
    "next_depth",
    "ExplorationEngine",
]
