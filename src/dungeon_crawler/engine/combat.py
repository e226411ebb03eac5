"""Combat turn scheduler and action resolution.

The scheduler walks a fixed turn order: the party formation followed by
the enemy. Fallen members keep their slot and are skipped. Allies act
through the ally policy, the enemy acts on its own, and the scheduler
suspends on the player's turn until the controller submits an action.

Mechanics are resolved before any narration is requested, so the narrator
can never change an outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from dungeon_crawler.core.config import GameSettings, get_settings
from dungeon_crawler.core.constants import (
    BASE_DEFENSE,
    CRITICAL_MULTIPLIER,
    CRITICAL_THRESHOLD,
    DEFENDING_BONUS,
    DEFENDING_EFFECT,
    DEFENDING_STATUS,
    ENEMY_ACTOR_ID,
    ENEMY_DAMAGE_DIE,
    FALLBACK_HIT_TEMPLATE,
    FALLBACK_MISS_TEMPLATE,
    FLEE_THRESHOLD,
    HEALED_STATUS,
    HEALING_BONUS_DIE,
    SPELL_SCROLL_NAME,
    UNARMED_DAMAGE_DIE,
)
from dungeon_crawler.core.exceptions import (
    CombatError,
    InvalidCommandError,
    InvalidGameStateError,
    TurnManagementError,
)
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.engine.dice import DiceRoller
from dungeon_crawler.engine.policy import decide_ally_action
from dungeon_crawler.engine.progression import ProgressionEngine
from dungeon_crawler.models.combat import CombatSession, CombatTurn
from dungeon_crawler.models.dungeon import Enemy
from dungeon_crawler.models.enums import Ability, CombatAction, CombatState, GamePhase, LogCategory
from dungeon_crawler.models.game_state import GameState
from dungeon_crawler.models.items import Item, remove_item
from dungeon_crawler.models.party import PartyMember
from dungeon_crawler.narration.base import CombatOutcome, NarrationResult, Narrator
from dungeon_crawler.narration.offline import OfflineNarrator


logger = get_logger(__name__)


# =============================================================================
# Turn Status
# =============================================================================


class TurnStatus(StrEnum):
    """Status of turn processing."""

    WAITING_FOR_PLAYER = "waiting_for_player"
    """The player character must choose an action."""

    AUTOMATED = "automated"
    """The current actor is resolved by the engine (enemy, ally or fallen member)."""

    TURN_COMPLETED = "turn_completed"
    """A turn was fully processed."""

    COMBAT_ENDED = "combat_ended"
    """The encounter is over."""

    NO_COMBAT = "no_combat"
    """There is no active encounter."""


@dataclass
class TurnResult:
    """Result of peeking at or processing a turn.

    Attributes:
        status: The turn status.
        actor_id: Id of the acting member, or 'enemy'.
        actor_name: Display name of the actor.
        action: Action taken, if any.
        message: Log text produced by the turn.
        combat_state: Scheduler state after the turn.
        round_number: Combat round.
        turn_index: Index into the turn order.
    """

    status: TurnStatus
    actor_id: str = ""
    actor_name: str = ""
    action: CombatAction | None = None
    message: str = ""
    combat_state: CombatState | None = None
    round_number: int = 0
    turn_index: int = 0


def attack_threshold(enemy: Enemy) -> int:
    """Roll a party member needs to hit the enemy."""
    return BASE_DEFENSE + enemy.defense


def defense_threshold(target: PartyMember, *, apply_defend_bonus: bool = True) -> int:
    """Roll the enemy needs to hit a party member."""
    threshold = BASE_DEFENSE + target.modifier(Ability.DEX)
    if apply_defend_bonus and target.has_status(DEFENDING_STATUS):
        threshold += DEFENDING_BONUS
    return threshold


# =============================================================================
# Combat Engine
# =============================================================================


class CombatEngine:
    """Runs encounters on a GameState.

    Attributes:
        dice: Source of every roll.
        narrator: Flavor collaborator for attack sentences.
        settings: Game settings.
        progression: XP and death handling.
    """

    def __init__(
        self,
        *,
        dice: DiceRoller | None = None,
        narrator: Narrator | None = None,
        settings: GameSettings | None = None,
        progression: ProgressionEngine | None = None,
    ) -> None:
        self.dice = dice or DiceRoller()
        self.narrator = narrator or OfflineNarrator()
        self.settings = settings or get_settings().game
        self.progression = progression or ProgressionEngine(dice=self.dice, settings=self.settings)

    # -------------------------------------------------------------------------
    # Scheduler
    # -------------------------------------------------------------------------

    def initiate(self, state: GameState, enemy: Enemy) -> CombatSession:
        """Start an encounter in the current room.

        Returns:
            The new session, also stored on the state.
        """
        party = state.require_party()
        dungeon = state.require_dungeon()
        session = CombatSession(
            enemy=enemy,
            room_id=dungeon.current_room_id,
            turn_order=[*party.formation, ENEMY_ACTOR_ID],
        )
        state.combat = session
        state.phase = GamePhase.COMBAT

        names = [self._actor_name(state, actor_id) for actor_id in session.turn_order]
        state.add_log(f"Combat begins! Turn order: {' → '.join(names)}", LogCategory.COMBAT)
        logger.info("Combat initiated", enemy=enemy.name, turn_order=session.turn_order)
        return session

    def _actor_name(self, state: GameState, actor_id: str) -> str:
        if actor_id == ENEMY_ACTOR_ID:
            return "Enemy"
        member = state.require_party().get_member(actor_id)
        return member.name if member is not None else actor_id

    def _require_session(self, state: GameState) -> CombatSession:
        if state.combat is None:
            raise InvalidGameStateError(
                "No active combat",
                current_state=state.phase.value,
                expected_states=[GamePhase.COMBAT.value],
            )
        return state.combat

    def peek_turn(self, state: GameState) -> TurnResult:
        """Report whose turn it is without acting."""
        session = state.combat
        if session is None:
            return TurnResult(status=TurnStatus.NO_COMBAT, message="No active combat.")
        if session.is_resolved:
            return TurnResult(
                status=TurnStatus.COMBAT_ENDED,
                combat_state=session.state,
                round_number=session.round_number,
            )

        actor_id = session.current_actor_id
        member = None if actor_id == ENEMY_ACTOR_ID else state.require_party().get_member(actor_id)
        waiting = member is not None and member.is_player and member.is_conscious
        return TurnResult(
            status=TurnStatus.WAITING_FOR_PLAYER if waiting else TurnStatus.AUTOMATED,
            actor_id=actor_id,
            actor_name=self._actor_name(state, actor_id),
            combat_state=session.state,
            round_number=session.round_number,
            turn_index=session.current_index,
        )

    def process_turn(self, state: GameState) -> TurnResult:
        """Resolve the current turn unless it belongs to the player.

        Returns:
            The result of the turn, or the peek result when the player
            must act or no combat is running.
        """
        peek = self.peek_turn(state)
        if peek.status != TurnStatus.AUTOMATED:
            return peek

        session = self._require_session(state)
        log_start = len(state.log)
        actor_id = session.current_actor_id

        if actor_id == ENEMY_ACTOR_ID:
            self._enemy_turn(state, session)
            return self._finish_turn(state, session, peek, CombatAction.ATTACK, log_start)

        member = state.require_party().get_member(actor_id)
        if member is None:
            raise CombatError(
                "Turn order names a member not in the party",
                combatant_id=actor_id,
                round_number=session.round_number,
            )
        if not member.is_conscious:
            logger.debug("Skipping fallen member", member=member.id)
            return self._finish_turn(state, session, peek, None, log_start)

        member.tick_status_effects()
        turn = decide_ally_action(member, state.require_party())
        self._execute(state, member, turn)
        return self._finish_turn(state, session, peek, turn.action, log_start)

    def submit_player_action(self, state: GameState, turn: CombatTurn) -> TurnResult:
        """Resolve the player's chosen action.

        Raises:
            InvalidGameStateError: If it is not the player's turn.
            CombatError: If the turn names a different actor.
            InvalidCommandError: If the action cannot be performed. The
                state is left unchanged.
        """
        peek = self.peek_turn(state)
        if peek.status != TurnStatus.WAITING_FOR_PLAYER:
            raise InvalidGameStateError(
                "It is not the player's turn",
                current_state=peek.status.value,
                expected_states=[TurnStatus.WAITING_FOR_PLAYER.value],
            )
        session = self._require_session(state)
        if turn.actor_id != session.current_actor_id:
            raise CombatError(
                f"Expected an action for {session.current_actor_id}",
                combatant_id=turn.actor_id,
                round_number=session.round_number,
            )

        member = state.require_party().get_member(turn.actor_id)
        self._validate_turn(state, member, turn)

        log_start = len(state.log)
        member.tick_status_effects()
        self._execute(state, member, turn)
        return self._finish_turn(state, session, peek, turn.action, log_start)

    def run_until_player_input(self, state: GameState) -> TurnResult:
        """Process automated turns until the player must act or combat ends.

        Raises:
            TurnManagementError: If the turn bound is exceeded.
        """
        for _ in range(self.settings.max_auto_turns):
            result = self.process_turn(state)
            if result.status in (
                TurnStatus.WAITING_FOR_PLAYER,
                TurnStatus.COMBAT_ENDED,
                TurnStatus.NO_COMBAT,
            ):
                return result
            logger.debug("Continuing to next turn", last_actor=result.actor_id)

        raise TurnManagementError(
            "Combat did not reach a player turn within the turn limit",
            details={"max_auto_turns": self.settings.max_auto_turns},
        )

    def _finish_turn(
        self,
        state: GameState,
        session: CombatSession,
        peek: TurnResult,
        action: CombatAction | None,
        log_start: int,
    ) -> TurnResult:
        if not session.is_resolved:
            session.advance()
        message = "\n".join(entry.text for entry in state.log[log_start:])
        if action is None and not message:
            message = f"{peek.actor_name} cannot act. Turn skipped."
        return TurnResult(
            status=TurnStatus.COMBAT_ENDED if session.is_resolved else TurnStatus.TURN_COMPLETED,
            actor_id=peek.actor_id,
            actor_name=peek.actor_name,
            action=action,
            message=message,
            combat_state=session.state,
            round_number=session.round_number,
            turn_index=session.current_index,
        )

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def _validate_turn(self, state: GameState, member: PartyMember, turn: CombatTurn) -> None:
        if turn.action != CombatAction.USE_ITEM:
            return
        self._item_holder(state, member, turn.item)
        if turn.target_id is not None and state.require_party().get_member(turn.target_id) is None:
            raise InvalidCommandError(f"No party member {turn.target_id}", command="use_item")

    def _execute(self, state: GameState, member: PartyMember, turn: CombatTurn) -> None:
        match turn.action:
            case CombatAction.ATTACK:
                self.attack(state, member)
            case CombatAction.DEFEND:
                self.defend(state, member)
            case CombatAction.USE_ITEM:
                self.use_item(state, member, turn.item, target_id=turn.target_id)
            case CombatAction.FLEE:
                self.flee(state, member)
            case CombatAction.WAIT:
                state.add_log(f"{member.name} waits.", LogCategory.COMBAT)

    def attack(self, state: GameState, member: PartyMember) -> CombatOutcome:
        """Resolve a member's attack on the enemy.

        Returns:
            The mechanical outcome.
        """
        session = self._require_session(state)
        enemy = session.enemy
        strength = member.modifier(Ability.STR)
        natural = self.dice.d(20)
        attack_roll = natural + strength
        threshold = attack_threshold(enemy)
        state.add_log(
            f"{member.name} attacks: d20 ({natural}) {strength:+d} = {attack_roll} vs {threshold}",
            LogCategory.DICE,
        )

        hit = attack_roll >= threshold
        damage = 0
        critical = False
        if hit:
            weapon = member.weapon
            die = weapon.damage if weapon is not None and weapon.damage else UNARMED_DAMAGE_DIE
            damage = max(0, self.dice.d(die) + strength)
            critical = attack_roll >= CRITICAL_THRESHOLD
            if critical:
                damage *= CRITICAL_MULTIPLIER
            enemy.take_damage(damage)
        defeated = enemy.is_defeated

        outcome = CombatOutcome(hit=hit, damage=damage, critical=critical)
        if critical:
            state.add_log("Critical hit!", LogCategory.COMBAT)
        state.add_log(self._narrate_attack(member, enemy, outcome), LogCategory.COMBAT)

        logger.debug(
            "Attack resolved",
            attacker=member.id,
            roll=attack_roll,
            hit=hit,
            damage=damage,
            critical=critical,
            enemy_hp=enemy.hp,
        )
        if defeated:
            self._resolve_victory(state, session)
        return outcome

    def _narrate_attack(self, member: PartyMember, enemy: Enemy, outcome: CombatOutcome) -> str:
        try:
            result = self.narrator.narrate_combat("attack", member, enemy, outcome)
        except Exception:
            logger.exception("Combat narration raised", attacker=member.id)
            result = NarrationResult.failure("narrator raised")
        if result.ok:
            return result.value
        logger.warning("Using fallback combat narration", reason=result.error)
        if outcome.hit:
            return FALLBACK_HIT_TEMPLATE.format(name=member.name, damage=outcome.damage)
        return FALLBACK_MISS_TEMPLATE.format(name=member.name)

    def defend(self, state: GameState, member: PartyMember) -> None:
        """Brace for the enemy's next attack."""
        member.add_status(DEFENDING_STATUS, 1, DEFENDING_EFFECT)
        state.add_log(f"{member.name} takes a defensive stance.", LogCategory.COMBAT)

    def _item_holder(self, state: GameState, member: PartyMember, item: Item | None) -> list[Item]:
        """Find which inventory holds the exact item, checking usability first."""
        if item is None:
            raise InvalidCommandError("No item chosen", command="use_item")
        if item.name != SPELL_SCROLL_NAME and not item.is_healing:
            raise InvalidCommandError(f"{item.name} cannot be used in combat", command="use_item")
        if member.carries(item):
            return member.inventory
        party = state.require_party()
        if member.is_player and party.carries_shared(item):
            return party.shared_inventory
        raise InvalidCommandError(f"{member.name} does not carry {item.name}", command="use_item")

    def use_item(
        self,
        state: GameState,
        member: PartyMember,
        item: Item | None,
        *,
        target_id: str | None = None,
    ) -> None:
        """Use a healing consumable on a member or a Spell Scroll on the enemy.

        Raises:
            InvalidCommandError: If the item is missing, not carried or
                not usable in combat.
        """
        session = self._require_session(state)
        holder = self._item_holder(state, member, item)
        party = state.require_party()

        if item.name == SPELL_SCROLL_NAME:
            enemy = session.enemy
            damage = self.dice.d(6, 3)
            enemy.take_damage(damage)
            defeated = enemy.is_defeated
            remove_item(holder, item)
            state.add_log(
                f"{member.name} reads the {item.name}! Arcane force strikes {enemy.name} "
                f"for {damage} damage.",
                LogCategory.COMBAT,
            )
            if defeated:
                self._resolve_victory(state, session)
            return

        target = party.get_member(target_id) if target_id else member
        if target is None:
            raise InvalidCommandError(f"No party member {target_id}", command="use_item")
        healed = target.heal(item.healing + self.dice.d(HEALING_BONUS_DIE))
        target.add_status(HEALED_STATUS, 1, f"+{healed} HP")
        remove_item(holder, item)
        state.add_log(
            f"{member.name} uses {item.name} on {target.name}, restoring {healed} HP.",
            LogCategory.COMBAT,
        )

    def flee(self, state: GameState, member: PartyMember) -> bool:
        """Attempt to escape. The enemy stays in its room.

        Returns:
            Whether the escape succeeded.
        """
        session = self._require_session(state)
        roll = self.dice.d(20)
        state.add_log(f"{member.name} tries to flee: d20 ({roll}) vs {FLEE_THRESHOLD}", LogCategory.DICE)
        if roll < FLEE_THRESHOLD:
            state.add_log(f"{member.name} fails to escape!", LogCategory.COMBAT)
            return False

        session.state = CombatState.FLED
        state.combat = None
        state.phase = GamePhase.DUNGEON
        state.add_log("The party escapes into the shadows!", LogCategory.COMBAT)
        logger.info("Party fled", enemy=session.enemy.name)
        return True

    def _enemy_turn(self, state: GameState, session: CombatSession) -> None:
        party = state.require_party()
        enemy = session.enemy
        living = party.living_members
        if not living:
            self._resolve_defeat(state, session)
            return

        target = self.dice.choice(living)
        natural = self.dice.d(20)
        attack_roll = natural + enemy.attack
        threshold = defense_threshold(target, apply_defend_bonus=self.settings.apply_defend_bonus)
        state.add_log(
            f"{enemy.name} attacks {target.name}: d20 ({natural}) {enemy.attack:+d} = "
            f"{attack_roll} vs {threshold}",
            LogCategory.DICE,
        )

        if attack_roll < threshold:
            state.add_log(f"{enemy.name}'s attack misses {target.name}!", LogCategory.COMBAT)
            return

        damage = max(0, self.dice.d(ENEMY_DAMAGE_DIE) + enemy.attack // 2)
        target.take_damage(damage)
        state.add_log(f"{enemy.name} strikes {target.name} for {damage} damage!", LogCategory.COMBAT)
        if not target.is_conscious:
            wiped = self.progression.handle_member_down(state, target)
            if wiped:
                self._resolve_defeat(state, session)

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def _resolve_victory(self, state: GameState, session: CombatSession) -> None:
        party = state.require_party()
        dungeon = state.require_dungeon()
        enemy = session.enemy

        room = dungeon.get_room(session.room_id)
        if room is not None:
            room.clear_enemy()
        session.state = CombatState.VICTORY
        state.combat = None

        share = enemy.xp_reward // party.size
        state.add_log(f"{enemy.name} is defeated!", LogCategory.COMBAT)
        for member in party.members:
            member.record_event(f"Defeated {enemy.name} at depth {dungeon.depth}")
        party.shared_inventory.extend(enemy.loot)
        state.add_log(f"Each party member gains {share} XP.", LogCategory.LEVEL)
        self.progression.award_xp(state, share)
        logger.info("Combat won", enemy=enemy.name, xp_share=share)

        if dungeon.depth >= dungeon.max_depth:
            self.progression.enter_victory(state)
        else:
            state.phase = GamePhase.DUNGEON

    def _resolve_defeat(self, state: GameState, session: CombatSession) -> None:
        session.state = CombatState.DEFEAT
        self.progression.enter_death(state, f"Slain by {session.enemy.name}.")
        logger.info("Combat lost", enemy=session.enemy.name)


__all__ = [
    "TurnStatus",
    "TurnResult",
    "attack_threshold",
    "defense_threshold",
    "CombatEngine",
]
