"""Experience, leveling, death and resurrection.

All operations take the GameState aggregate and mutate it in place. Gold
is checked before anything changes, so a failed resurrection leaves the
run exactly as it was.
"""

from __future__ import annotations

from dungeon_crawler.core.config import GameSettings, get_settings
from dungeon_crawler.core.constants import (
    LEVEL_UP_TAGS,
    RESURRECTION_COST_PER_LEVEL,
    RESURRECTION_TAG,
    WIPE_MORALE_PENALTY,
    XP_TO_NEXT_INCREMENT,
)
from dungeon_crawler.core.exceptions import InvalidGameStateError
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.engine.dice import DiceRoller
from dungeon_crawler.models.enums import Ability, GamePhase, LogCategory
from dungeon_crawler.models.game_state import GameState
from dungeon_crawler.models.party import Party, PartyMember


logger = get_logger(__name__)


def party_resurrection_cost(party: Party) -> int:
    """Gold needed to raise the whole party: 100 per member level."""
    return sum(member.level for member in party.members) * RESURRECTION_COST_PER_LEVEL


def member_resurrection_cost(member: PartyMember) -> int:
    """Gold needed to raise one member."""
    return member.level * RESURRECTION_COST_PER_LEVEL


class ProgressionEngine:
    """XP awards, level ups and the death/resurrection transitions.

    Attributes:
        dice: Source of hp-gain rolls and tag draws.
        settings: Game settings (level-up chaining).
    """

    def __init__(
        self,
        *,
        dice: DiceRoller | None = None,
        settings: GameSettings | None = None,
    ) -> None:
        self.dice = dice or DiceRoller()
        self.settings = settings or get_settings().game

    # -------------------------------------------------------------------------
    # Experience
    # -------------------------------------------------------------------------

    def award_xp(self, state: GameState, amount: int) -> dict[str, int]:
        """Give every member the same amount of xp.

        Args:
            state: The game state.
            amount: XP per member. Negative amounts are ignored.

        Returns:
            Levels gained, by member id.
        """
        party = state.require_party()
        gained: dict[str, int] = {}
        if amount <= 0:
            return gained
        for member in party.members:
            member.xp = member.xp + amount
            levels = self.check_level_up(state, member)
            if levels:
                gained[member.id] = levels
        return gained

    def check_level_up(self, state: GameState, member: PartyMember) -> int:
        """Apply pending level ups.

        Returns:
            Number of levels gained.
        """
        levels = 0
        while member.xp >= member.xp_to_next:
            hp_gain = max(0, self.dice.d(8) + member.modifier(Ability.CON))
            member.level = member.level + 1
            member.gain_max_hp(hp_gain)
            member.xp = member.xp - member.xp_to_next
            member.xp_to_next = member.xp_to_next + XP_TO_NEXT_INCREMENT
            tag = self.dice.choice(LEVEL_UP_TAGS)
            member.tags.append(tag)
            member.record_event(f"Reached level {member.level}")
            levels += 1

            state.add_log(
                f"{member.name} reaches level {member.level}! (+{hp_gain} max HP)",
                LogCategory.LEVEL,
            )
            state.add_log(f"{member.name} is now {tag}.", LogCategory.LEVEL)
            logger.info("Level up", member=member.id, level=member.level, hp_gain=hp_gain, tag=tag)

            if not self.settings.chain_level_ups:
                break
        return levels

    # -------------------------------------------------------------------------
    # Death
    # -------------------------------------------------------------------------

    def handle_member_down(self, state: GameState, member: PartyMember) -> bool:
        """Record a member dropping to 0 hp.

        Returns:
            Whether the whole party has fallen.
        """
        state.add_log(f"{member.name} falls unconscious!", LogCategory.DEATH)
        member.record_event("Fell unconscious")
        return state.require_party().is_wiped

    def enter_death(self, state: GameState, cause: str) -> None:
        """Move the run into the death phase."""
        party = state.require_party()
        player = party.player
        state.combat = None
        state.phase = GamePhase.DEATH
        player.record_event(f"Died: {cause}")
        state.add_log(f"{player.name} has fallen. {cause}", LogCategory.DEATH)
        state.add_log(
            f"Resurrection will cost {self.resurrection_cost(state)} gold.",
            LogCategory.SYSTEM,
        )
        logger.info("Run entered death phase", cause=cause, wiped=party.is_wiped)

    def enter_victory(self, state: GameState) -> None:
        """Move the run into the victory phase."""
        dungeon = state.require_dungeon()
        state.combat = None
        state.phase = GamePhase.VICTORY
        for member in state.require_party().members:
            member.record_event(f"Conquered the depths of {dungeon.theme}")
        state.add_log(
            f"The depths of {dungeon.theme} have been conquered!",
            LogCategory.NARRATIVE,
        )
        logger.info("Run won", depth=dungeon.depth)

    # -------------------------------------------------------------------------
    # Resurrection
    # -------------------------------------------------------------------------

    def resurrection_cost(self, state: GameState) -> int:
        """Cost of the resurrection that applies to the current death."""
        party = state.require_party()
        if party.is_wiped:
            return party_resurrection_cost(party)
        return member_resurrection_cost(party.player)

    def _require_death(self, state: GameState) -> None:
        if state.phase != GamePhase.DEATH:
            raise InvalidGameStateError(
                "Nobody needs resurrecting",
                current_state=state.phase.value,
                expected_states=[GamePhase.DEATH.value],
            )

    def resurrect_party(self, state: GameState) -> int:
        """Raise every member at half health.

        Returns:
            The gold spent.

        Raises:
            InvalidGameStateError: Outside the death phase.
            InsufficientGoldError: If the party cannot pay.
        """
        self._require_death(state)
        party = state.require_party()
        cost = party_resurrection_cost(party)
        party.debit_gold(cost)

        for member in party.members:
            member.set_hp(member.max_hp // 2)
            member.record_event("Returned from death")
        party.adjust_morale(-WIPE_MORALE_PENALTY)
        state.phase = GamePhase.DUNGEON

        state.add_log(
            f"Dark rites pull the party back from the void. ({cost} gold)",
            LogCategory.NARRATIVE,
        )
        logger.info("Party resurrected", cost=cost, morale=party.morale)
        return cost

    def resurrect_player(self, state: GameState) -> int:
        """Raise the player character at half health.

        Returns:
            The gold spent.

        Raises:
            InvalidGameStateError: Outside the death phase.
            InsufficientGoldError: If the party cannot pay.
        """
        self._require_death(state)
        party = state.require_party()
        player = party.player
        cost = member_resurrection_cost(player)
        party.debit_gold(cost)

        player.set_hp(player.max_hp // 2)
        player.add_tag(RESURRECTION_TAG)
        player.record_event("Returned from death")
        state.phase = GamePhase.DUNGEON

        state.add_log(
            f"{player.name} returns from death, forever marked. ({cost} gold)",
            LogCategory.NARRATIVE,
        )
        logger.info("Player resurrected", cost=cost)
        return cost

    def resurrect(self, state: GameState) -> int:
        """Resurrect the party after a wipe, otherwise the player alone."""
        self._require_death(state)
        if state.require_party().is_wiped:
            return self.resurrect_party(state)
        return self.resurrect_player(state)


__all__ = [
    "party_resurrection_cost",
    "member_resurrection_cost",
    "ProgressionEngine",
]
