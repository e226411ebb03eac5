"""Game phase controller.

The controller owns one GameState and is the only entry point a front end
needs. Every command is checked against the phase table, dispatched to the
engine that implements it, and turned into a CommandResult. Engine errors
stop at this boundary: a rejected command adds one system line to the
adventure log and changes nothing else.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from dungeon_crawler.core.config import Settings, get_settings
from dungeon_crawler.core.exceptions import (
    ContentNotFoundError,
    GameEngineError,
    InvalidGameStateError,
    ValidationError,
)
from dungeon_crawler.core.logging import bind_context, clear_context, get_logger
from dungeon_crawler.engine.combat import CombatEngine, TurnResult, TurnStatus
from dungeon_crawler.engine.creation import CharacterCreator
from dungeon_crawler.engine.dice import DiceRoller
from dungeon_crawler.engine.dungeon import DungeonGenerator
from dungeon_crawler.engine.exploration import ExplorationEngine
from dungeon_crawler.engine.progression import ProgressionEngine
from dungeon_crawler.engine.recruitment import recruit
from dungeon_crawler.models.combat import CombatTurn
from dungeon_crawler.models.enums import CombatAction, Direction, GamePhase, LogCategory
from dungeon_crawler.models.game_state import GameState, LogEntry
from dungeon_crawler.models.items import Item
from dungeon_crawler.models.party import StatBlock
from dungeon_crawler.narration.base import Narrator
from dungeon_crawler.narration.factory import create_narrator


logger = get_logger(__name__)


ALL_PHASES = frozenset(GamePhase)

COMMAND_PHASES: dict[str, frozenset[GamePhase]] = {
    "create_character": frozenset({GamePhase.CHARACTER_CREATION}),
    "move": frozenset({GamePhase.DUNGEON}),
    "search": frozenset({GamePhase.DUNGEON}),
    "rest": frozenset({GamePhase.DUNGEON}),
    "recruit": frozenset({GamePhase.DUNGEON}),
    "use_item": frozenset({GamePhase.DUNGEON, GamePhase.COMBAT}),
    "attack": frozenset({GamePhase.COMBAT}),
    "defend": frozenset({GamePhase.COMBAT}),
    "flee": frozenset({GamePhase.COMBAT}),
    "surrender": frozenset({GamePhase.DUNGEON, GamePhase.COMBAT}),
    "resurrect": frozenset({GamePhase.DEATH}),
    "new_adventure": ALL_PHASES,
}
"""Phases in which each command is accepted."""


@dataclass
class CommandResult:
    """Outcome of one controller command.

    Attributes:
        success: Whether the command was applied.
        message: Short summary, or the rejection reason.
        phase: Phase after the command.
        entries: Adventure log entries added by the command.
        turn: Scheduler result after a combat command, if any.
    """

    success: bool
    message: str
    phase: GamePhase
    entries: list[LogEntry] = field(default_factory=list)
    turn: TurnResult | None = None


class GameController:
    """Phase-aware command surface over a single run.

    Attributes:
        state: The run's game state.
        settings: Application settings.
        dice: Random source shared by every engine.
        narrator: Text-generation collaborator.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        dice: DiceRoller | None = None,
        narrator: Narrator | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        game = self.settings.game
        self.dice = dice or DiceRoller(seed=game.seed)
        self.narrator = narrator or create_narrator(self.settings.narrator)
        self.state = GameState()

        self.progression = ProgressionEngine(dice=self.dice, settings=game)
        self.generator = DungeonGenerator(dice=self.dice, narrator=self.narrator, settings=game)
        self.combat = CombatEngine(
            dice=self.dice,
            narrator=self.narrator,
            settings=game,
            progression=self.progression,
        )
        self.creator = CharacterCreator(dice=self.dice, generator=self.generator, settings=game)
        self.exploration = ExplorationEngine(
            dice=self.dice,
            generator=self.generator,
            combat=self.combat,
            progression=self.progression,
            settings=game,
        )
        logger.info("GameController initialized", narrator=type(self.narrator).__name__)

    @property
    def phase(self) -> GamePhase:
        """Current phase of the run."""
        return self.state.phase

    # -------------------------------------------------------------------------
    # Command Boundary
    # -------------------------------------------------------------------------

    def _run(self, command: str, action: Callable[[], str | None]) -> CommandResult:
        """Check the phase, apply a command and package its result.

        Args:
            command: Command name, a key of COMMAND_PHASES.
            action: Applies the command and returns its summary message.

        Returns:
            The command result.
        """
        bind_context(phase=self.state.phase.value, command=command)
        log_start = len(self.state.log)
        try:
            allowed = COMMAND_PHASES[command]
            if self.state.phase not in allowed:
                raise InvalidGameStateError(
                    f"Cannot {command.replace('_', ' ')} during {self.state.phase.value}",
                    current_state=self.state.phase.value,
                    expected_states=sorted(phase.value for phase in allowed),
                )
            message = action()
        except (GameEngineError, ValidationError, ContentNotFoundError) as exc:
            self.state.add_log(exc.message, LogCategory.SYSTEM)
            logger.info("Command rejected", error=type(exc).__name__, reason=exc.message)
            return CommandResult(
                success=False,
                message=exc.message,
                phase=self.state.phase,
                entries=list(self.state.log[log_start:]),
            )

        entries = list(self.state.log[log_start:])
        if message is None:
            message = entries[-1].text if entries else ""
        logger.debug("Command applied", new_phase=self.state.phase.value, entries=len(entries))
        return CommandResult(
            success=True,
            message=message,
            phase=self.state.phase,
            entries=entries,
        )

    def _combat_command(self, command: str, turn_for: Callable[[str], CombatTurn]) -> CommandResult:
        outcome: dict[str, TurnResult] = {}

        def action() -> str | None:
            player = self.state.require_party().player
            result = self.combat.submit_player_action(self.state, turn_for(player.id))
            if result.status != TurnStatus.COMBAT_ENDED:
                result = self.combat.run_until_player_input(self.state)
            outcome["turn"] = result
            if result.status == TurnStatus.WAITING_FOR_PLAYER:
                return f"Your turn, round {result.round_number}."
            return None

        result = self._run(command, action)
        result.turn = outcome.get("turn")
        return result

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def create_character(
        self,
        stats: StatBlock | Mapping[str, int],
        class_name: str,
        background_name: str,
        name: str,
        portrait: str,
    ) -> CommandResult:
        """Create the player character and enter the dungeon."""

        def action() -> str:
            player = self.creator.create_character(
                self.state, stats, class_name, background_name, name, portrait
            )
            return f"{player.name} the {player.character_class} is ready."

        return self._run("create_character", action)

    # -------------------------------------------------------------------------
    # Exploration
    # -------------------------------------------------------------------------

    def move(self, direction: Direction | str) -> CommandResult:
        """Move through an exit of the current room."""
        return self._run("move", lambda: self._move(direction))

    def _move(self, direction: Direction | str) -> str | None:
        self.exploration.move(self.state, direction)
        if self.state.phase == GamePhase.COMBAT:
            result = self.combat.run_until_player_input(self.state)
            if result.status == TurnStatus.WAITING_FOR_PLAYER:
                return f"Combat! Your turn, round {result.round_number}."
        return None

    def search(self) -> CommandResult:
        """Search the current room."""

        def action() -> str:
            item = self.exploration.search(self.state)
            return f"Found {item.name}." if item is not None else self.state.log[-1].text

        return self._run("search", action)

    def rest(self) -> CommandResult:
        """Rest in the current room."""

        def action() -> str:
            restored = self.exploration.rest(self.state)
            return f"Recovered {restored} HP."

        return self._run("rest", action)

    def recruit(self, npc_id: str) -> CommandResult:
        """Hire a companion by id or name."""

        def action() -> str:
            member = recruit(self.state, npc_id, settings=self.settings.game)
            return f"{member.name} joins the party."

        return self._run("recruit", action)

    def use_item(self, item: Item, *, target_id: str | None = None) -> CommandResult:
        """Use an item: out of combat on the player, in combat as the player's action."""
        if self.state.phase == GamePhase.COMBAT:
            return self._combat_command(
                "use_item",
                lambda actor_id: CombatTurn(
                    actor_id=actor_id,
                    action=CombatAction.USE_ITEM,
                    target_id=target_id,
                    item=item,
                ),
            )

        def action() -> str:
            healed = self.exploration.use_item(self.state, item)
            return f"Recovered {healed} HP."

        return self._run("use_item", action)

    # -------------------------------------------------------------------------
    # Combat
    # -------------------------------------------------------------------------

    def attack(self) -> CommandResult:
        """Attack the enemy on the player's turn."""
        return self._combat_command(
            "attack", lambda actor_id: CombatTurn(actor_id=actor_id, action=CombatAction.ATTACK)
        )

    def defend(self) -> CommandResult:
        """Take a defensive stance on the player's turn."""
        return self._combat_command(
            "defend", lambda actor_id: CombatTurn(actor_id=actor_id, action=CombatAction.DEFEND)
        )

    def flee(self) -> CommandResult:
        """Try to escape the encounter on the player's turn."""
        return self._combat_command(
            "flee", lambda actor_id: CombatTurn(actor_id=actor_id, action=CombatAction.FLEE)
        )

    def current_turn(self) -> TurnResult:
        """Whose turn it is, without acting."""
        return self.combat.peek_turn(self.state)

    # -------------------------------------------------------------------------
    # Run Lifecycle
    # -------------------------------------------------------------------------

    def surrender(self) -> CommandResult:
        """Give up the fight and fall into the death phase."""

        def action() -> str:
            player = self.state.require_party().player
            self.state.add_log(f"{player.name} surrenders to the darkness...", LogCategory.DEATH)
            self.state.add_log("Sometimes wisdom lies in knowing when to yield.", LogCategory.AI)
            self.progression.enter_death(self.state, "Yielded to the darkness.")
            return "You have surrendered."

        return self._run("surrender", action)

    def resurrect(self) -> CommandResult:
        """Pay for resurrection and return to the dungeon."""

        def action() -> str:
            cost = self.progression.resurrect(self.state)
            return f"Resurrected for {cost} gold."

        return self._run("resurrect", action)

    def resurrection_cost(self) -> int:
        """Gold the current resurrection would cost."""
        return self.progression.resurrection_cost(self.state)

    def new_adventure(self) -> CommandResult:
        """Discard the run and return to character creation."""

        def action() -> str:
            self.state.reset()
            clear_context()
            logger.info("New adventure started")
            return "A new adventure awaits."

        return self._run("new_adventure", action)

    def snapshot(self) -> dict[str, Any]:
        """JSON-compatible dump of the game state."""
        return self.state.model_dump(mode="json")


__all__ = [
    "COMMAND_PHASES",
    "CommandResult",
    "GameController",
]
