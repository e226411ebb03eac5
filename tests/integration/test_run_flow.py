"""Integration tests for a whole run through the controller.

Each test drives the GameController the way a front end would: create a
character, explore, fight, die, pay and start over.
"""

from __future__ import annotations

import pytest

from dungeon_crawler.core.config import GameSettings, Settings
from dungeon_crawler.engine.combat import TurnStatus
from dungeon_crawler.engine.controller import GameController
from dungeon_crawler.engine.dice import DiceRoller
from dungeon_crawler.models.enums import GamePhase, LogCategory
from dungeon_crawler.models.game_state import GameState


STATS = {"STR": 14, "DEX": 12, "CON": 14, "INT": 10, "WIS": 10, "CHA": 10}


@pytest.fixture
def start_run(narrator_class, make_enemy):
    """Create a Tomb Raider warrior; the first roll sets the starting gold."""

    def build(dice: DiceRoller, **game: int) -> GameController:
        controller = GameController(
            Settings(game=GameSettings(**game)),
            dice=dice,
            narrator=narrator_class(enemy=make_enemy()),
        )
        result = controller.create_character(STATS, "Warrior", "Tomb Raider", "Aldric", "⚔️")
        assert result.success
        return controller

    return build


class TestRunFlow:
    """Test complete runs from creation to their end."""

    def test_descend_fight_and_conquer(self, scripted_dice, start_run) -> None:
        """Walk north into a fight, win it, then reach the final depth."""
        dice = scripted_dice([10, 15, 8], chances=[False, False, True])
        controller = start_run(dice, max_depth=3)
        player = controller.state.party.player

        # Depth 2 holds an enemy
        result = controller.move("N")

        assert result.phase == GamePhase.COMBAT
        assert result.message == "Combat! Your turn, round 1."
        assert controller.current_turn().status == TurnStatus.WAITING_FOR_PLAYER

        # One blow: d20 15 + 3 against 12, then 8 + 3 damage
        result = controller.attack()

        assert result.success
        assert result.turn.status == TurnStatus.COMBAT_ENDED
        assert result.phase == GamePhase.DUNGEON
        assert player.xp == 40
        assert controller.state.dungeon.current_room.enemy is None

        # Depth 3 is the bottom
        result = controller.move("N")

        assert result.phase == GamePhase.VICTORY
        assert controller.state.dungeon.depth == 3

        # Nothing but a new adventure is accepted now
        rejected = controller.move("S")
        assert rejected.success is False
        assert rejected.message == "Cannot move during victory"

        assert controller.new_adventure().phase == GamePhase.CHARACTER_CREATION
        assert controller.state.party is None

    def test_recruit_without_gold_changes_nothing(self, scripted_dice, start_run) -> None:
        """Brother Marcus asks 150 gold; a party holding 100 is refused."""
        controller = start_run(scripted_dice([5]))
        party = controller.state.party
        party.reputation = 25
        assert party.shared_gold == 100
        before = controller.snapshot()

        result = controller.recruit("brother_marcus")

        assert result.success is False
        assert result.message == "Brother Marcus asks 150 gold (the party has 100)"
        assert [entry.category for entry in result.entries] == [LogCategory.SYSTEM]
        after = controller.snapshot()
        after["log"] = after["log"][:-1]
        assert after == before

    def test_trap_kills_solo_player_then_party_resurrects(self, scripted_dice, start_run) -> None:
        """A fatal trap ends the run until the party pays to return."""
        controller = start_run(scripted_dice([10, 5, 6]))
        player = controller.state.party.player
        controller.state.dungeon.current_room.has_trap = True
        player.set_hp(2)

        result = controller.search()

        assert result.phase == GamePhase.DEATH
        assert controller.resurrection_cost() == 100

        # Resurrect at half of 13 max hp
        result = controller.resurrect()

        assert result.success
        assert result.message == "Resurrected for 100 gold."
        assert result.phase == GamePhase.DUNGEON
        assert player.hp == 6
        assert controller.state.party.shared_gold == 50

    def test_player_falls_while_companion_stands(self, scripted_dice, start_run) -> None:
        """Only the player is raised when a companion survives."""
        controller = start_run(scripted_dice([10, 5, 6]))
        party = controller.state.party
        party.shared_gold = 400

        assert controller.recruit("kira_shadowbane").success
        assert party.shared_gold == 200

        controller.state.dungeon.current_room.has_trap = True
        party.player.set_hp(2)
        controller.search()

        assert controller.phase == GamePhase.DEATH
        assert not party.is_wiped

        result = controller.resurrect()

        assert result.success
        assert party.shared_gold == 100
        assert party.player.hp == 6
        assert "Death-touched" in party.player.tags

    def test_snapshot_survives_a_fight(self, scripted_dice, start_run) -> None:
        """A mid-combat snapshot validates back into the same run."""
        dice = scripted_dice([10], chances=[False, False, True])
        controller = start_run(dice)
        controller.move("N")

        restored = GameState.model_validate(controller.snapshot())

        assert restored.phase == GamePhase.COMBAT
        assert restored.combat.enemy.name == "Grave Rat"
        assert restored.combat.turn_order == ["player", "enemy"]
        assert restored.party.player.name == "Aldric"
