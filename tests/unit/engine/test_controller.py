"""Tests for the game phase controller."""

from __future__ import annotations

import json

import pytest

from dungeon_crawler.core.config import Settings
from dungeon_crawler.engine.combat import TurnStatus
from dungeon_crawler.engine.controller import COMMAND_PHASES, GameController
from dungeon_crawler.engine.dice import DiceRoller
from dungeon_crawler.models.enums import GamePhase, LogCategory
from dungeon_crawler.narration.base import Narrator


BASE_STATS = {"STR": 14, "DEX": 12, "CON": 14, "INT": 10, "WIS": 10, "CHA": 10}


@pytest.fixture
def make_controller(scripted_dice, narrator_class, make_enemy):
    """Build a controller; by default gold rolls 10 and every enemy is a Grave Rat."""

    def build(dice: DiceRoller | None = None, narrator: Narrator | None = None) -> GameController:
        return GameController(
            Settings(),
            dice=dice or scripted_dice([10]),
            narrator=narrator or narrator_class(enemy=make_enemy()),
        )

    return build


@pytest.fixture
def dice(scripted_dice):
    """Gold roll of 10 (150 gold with Tomb Raider)."""
    return scripted_dice([10])


@pytest.fixture
def controller(dice, make_controller) -> GameController:
    """A controller whose Warrior (STR 17, DEX 13, 13 hp) stands in the first room."""
    game = make_controller(dice)
    result = game.create_character(BASE_STATS, "Warrior", "Tomb Raider", "Aldric", "⚔️")
    assert result.success
    return game


@pytest.fixture
def in_combat(controller: GameController, dice) -> GameController:
    """The controller after walking north into a Grave Rat."""
    dice.chances = [False, False, True]
    result = controller.move("N")
    assert result.phase == GamePhase.COMBAT
    return controller


class TestPhaseTable:
    """Tests for phase gating."""

    def test_every_command_has_phases(self) -> None:
        assert set(COMMAND_PHASES["new_adventure"]) == set(GamePhase)
        assert COMMAND_PHASES["attack"] == frozenset({GamePhase.COMBAT})

    def test_command_rejected_in_wrong_phase(self, make_controller) -> None:
        """Test a rejection adds one system line and nothing else."""
        game = make_controller()

        result = game.move("N")

        assert result.success is False
        assert result.message == "Cannot move during character-creation"
        assert result.phase == GamePhase.CHARACTER_CREATION
        assert len(result.entries) == 1
        assert result.entries[0].category == LogCategory.SYSTEM
        assert game.state.party is None

    def test_combat_command_outside_combat(self, controller: GameController) -> None:
        result = controller.attack()

        assert result.success is False
        assert result.turn is None
        assert controller.phase == GamePhase.DUNGEON


class TestCreation:
    """Tests for character creation through the controller."""

    def test_create_character(self, make_controller) -> None:
        game = make_controller()

        result = game.create_character(BASE_STATS, "Warrior", "Tomb Raider", "Aldric", "⚔️")

        assert result.success is True
        assert result.message == "Aldric the Warrior is ready."
        assert result.phase == GamePhase.DUNGEON
        assert result.entries[0].text == "Aldric the Warrior enters the dungeon..."
        assert game.state.party.shared_gold == 150

    def test_invalid_name_is_rejected(self, make_controller) -> None:
        game = make_controller()

        result = game.create_character(BASE_STATS, "Warrior", "Tomb Raider", "", "⚔️")

        assert result.success is False
        assert result.message == "Name must be 1-20 characters"
        assert game.phase == GamePhase.CHARACTER_CREATION
        assert game.state.party is None

    def test_unknown_background_is_rejected(self, make_controller) -> None:
        result = make_controller().create_character(BASE_STATS, "Warrior", "Pirate", "Aldric", "⚔️")

        assert result.success is False
        assert "Pirate" in result.message


class TestExploration:
    """Tests for dungeon commands through the controller."""

    def test_move(self, controller: GameController, narrator_class) -> None:
        result = controller.move("N")

        assert result.success is True
        assert result.message == narrator_class.symbolic
        assert controller.state.dungeon.depth == 2

    def test_move_through_wall(self, controller: GameController) -> None:
        result = controller.move("W")

        assert result.success is False
        assert result.message == "You cannot go W from here."
        assert controller.state.log[-1].text == "You cannot go W from here."
        assert controller.state.dungeon.current_room_id == "1_0"

    def test_move_into_combat(self, in_combat: GameController) -> None:
        turn = in_combat.current_turn()

        assert turn.status == TurnStatus.WAITING_FOR_PLAYER
        assert turn.actor_id == "player"
        assert in_combat.state.combat.enemy.name == "Grave Rat"

    def test_rest(self, controller: GameController, dice) -> None:
        dice.rolls = [8]

        result = controller.rest()

        assert result.success is True
        assert result.message == "Recovered 0 HP."

    def test_recruit_without_gold(self, controller: GameController) -> None:
        result = controller.recruit("kira_shadowbane")

        assert result.success is False
        assert "asks 200 gold" in result.message
        assert controller.state.party.size == 1
        assert controller.state.party.shared_gold == 150

    def test_recruit(self, controller: GameController) -> None:
        controller.state.party.shared_gold = 400

        result = controller.recruit("kira_shadowbane")

        assert result.success is True
        assert result.message == "Kira Shadowbane joins the party."
        assert controller.state.party.shared_gold == 200

    def test_use_item_outside_combat(
        self, controller: GameController, dice, healing_potion
    ) -> None:
        player = controller.state.party.player
        player.set_hp(2)
        potion = healing_potion()
        controller.state.party.shared_inventory.append(potion)
        dice.rolls = [1]

        result = controller.use_item(potion)

        assert result.success is True
        assert result.message == "Recovered 11 HP."
        assert player.hp == 13

    def test_unusable_item_outside_combat(self, controller: GameController) -> None:
        player = controller.state.party.player
        sword = player.inventory[0]

        result = controller.use_item(sword)

        assert result.success is False
        assert result.message == "You cannot use Iron Sword right now."
        assert player.inventory[0] is sword


class TestCombat:
    """Tests for combat commands through the controller."""

    def test_attack_kills_enemy(self, in_combat: GameController, dice) -> None:
        dice.rolls = [15, 8]

        result = in_combat.attack()

        assert result.success is True
        assert result.phase == GamePhase.DUNGEON
        assert result.turn is not None
        assert result.turn.status == TurnStatus.COMBAT_ENDED
        assert in_combat.state.party.player.xp == 40

    def test_attack_runs_enemy_turn(self, in_combat: GameController, dice) -> None:
        dice.rolls = [1, 1]

        result = in_combat.attack()

        assert result.success is True
        assert result.message == "Your turn, round 2."
        assert result.turn.status == TurnStatus.WAITING_FOR_PLAYER
        assert any(entry.text.startswith("Grave Rat attacks Aldric") for entry in result.entries)

    def test_invalid_item_in_combat(self, in_combat: GameController) -> None:
        sword = in_combat.state.party.player.inventory[0]

        result = in_combat.use_item(sword)

        assert result.success is False
        assert in_combat.phase == GamePhase.COMBAT
        assert in_combat.state.combat.current_index == 0

    def test_flee(self, in_combat: GameController, dice) -> None:
        dice.rolls = [20]

        result = in_combat.flee()

        assert result.success is True
        assert result.phase == GamePhase.DUNGEON
        assert in_combat.state.dungeon.current_room.has_enemy is True


class TestLifecycle:
    """Tests for surrender, resurrection and new adventures."""

    def test_surrender_and_resurrect(self, in_combat: GameController) -> None:
        player = in_combat.state.party.player

        surrendered = in_combat.surrender()

        assert surrendered.success is True
        assert surrendered.phase == GamePhase.DEATH
        assert player.hp == player.max_hp
        assert surrendered.entries[0].text == "Aldric surrenders to the darkness..."
        assert in_combat.state.combat is None
        assert in_combat.resurrection_cost() == 100

        result = in_combat.resurrect()

        assert result.success is True
        assert result.message == "Resurrected for 100 gold."
        assert result.phase == GamePhase.DUNGEON
        assert in_combat.state.party.shared_gold == 50

    def test_resurrect_without_gold(self, controller: GameController) -> None:
        controller.surrender()
        controller.state.party.shared_gold = 50

        result = controller.resurrect()

        assert result.success is False
        assert result.phase == GamePhase.DEATH
        assert controller.state.party.shared_gold == 50

    def test_new_adventure(self, controller: GameController) -> None:
        result = controller.new_adventure()

        assert result.success is True
        assert result.message == "A new adventure awaits."
        assert result.entries == []
        assert controller.phase == GamePhase.CHARACTER_CREATION
        assert controller.state.party is None
        assert controller.state.log == []

    def test_snapshot_is_json(self, controller: GameController) -> None:
        snapshot = controller.snapshot()

        assert snapshot["phase"] == "dungeon"
        assert snapshot["party"]["members"][0]["name"] == "Aldric"
        json.dumps(snapshot)
