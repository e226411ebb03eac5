"""Tests for XP, leveling, death and resurrection."""

from __future__ import annotations

import pytest

from dungeon_crawler.core.config import GameSettings
from dungeon_crawler.core.exceptions import InsufficientGoldError, InvalidGameStateError
from dungeon_crawler.engine.progression import (
    ProgressionEngine,
    member_resurrection_cost,
    party_resurrection_cost,
)
from dungeon_crawler.models.enums import GamePhase, LogCategory
from dungeon_crawler.models.party import Party


@pytest.fixture
def make_progression(scripted_dice):
    """Build a ProgressionEngine over scripted rolls and game settings."""

    def build(rolls=(), **settings) -> ProgressionEngine:
        return ProgressionEngine(dice=scripted_dice(rolls), settings=GameSettings(**settings))

    return build


class TestAwardXP:
    """Tests for XP awards and level ups."""

    def test_below_threshold(self, make_member, make_state, make_progression) -> None:
        member = make_member()
        state = make_state(member)

        gained = make_progression().award_xp(state, 40)

        assert gained == {}
        assert member.xp == 40
        assert member.level == 1

    def test_level_up(self, make_member, make_state, make_progression) -> None:
        """Test hp gain, xp carry, threshold growth and tag."""
        member = make_member()
        state = make_state(member)

        gained = make_progression([5]).award_xp(state, 110)

        assert gained == {"player": 1}
        assert member.level == 2
        assert member.max_hp == 25
        assert member.hp == 25
        assert member.xp == 10
        assert member.xp_to_next == 150
        assert member.tags == ["Ascendant"]
        assert "Reached level 2" in member.story_events
        level_lines = [entry.text for entry in state.log if entry.category == LogCategory.LEVEL]
        assert "Aldric reaches level 2! (+5 max HP)" in level_lines

    def test_chained_level_ups(self, make_member, make_state, make_progression) -> None:
        member = make_member()
        state = make_state(member)

        gained = make_progression([3, 4]).award_xp(state, 260)

        assert gained == {"player": 2}
        assert member.level == 3
        assert member.xp == 10
        assert member.xp_to_next == 200
        assert member.max_hp == 27

    def test_single_level_when_chaining_disabled(
        self, make_member, make_state, make_progression
    ) -> None:
        member = make_member()
        state = make_state(member)

        make_progression([3, 4], chain_level_ups=False).award_xp(state, 260)

        assert member.level == 2
        assert member.xp == 160

    def test_hp_gain_floored_at_zero(self, make_member, make_state, make_progression) -> None:
        member = make_member(stats={"CON": 3})
        state = make_state(member)

        make_progression([2]).award_xp(state, 100)

        assert member.level == 2
        assert member.max_hp == 20

    def test_every_member_gets_the_award(self, make_member, make_state, make_progression) -> None:
        player = make_member()
        ally = make_member("npc_1", "Kira")
        state = make_state(player, ally)

        make_progression().award_xp(state, 30)

        assert player.xp == ally.xp == 30

    def test_non_positive_award_ignored(self, make_member, make_state, make_progression) -> None:
        member = make_member()
        state = make_state(member)

        assert make_progression().award_xp(state, -5) == {}
        assert member.xp == 0


class TestDeath:
    """Tests for member down, death and victory transitions."""

    def test_member_down_with_survivors(self, make_member, make_state, make_progression) -> None:
        player = make_member(hp=0)
        state = make_state(player, make_member("npc_1", "Kira"))

        assert make_progression().handle_member_down(state, player) is False
        assert state.log[-1].text == "Aldric falls unconscious!"

    def test_member_down_wipes_party(self, make_member, make_state, make_progression) -> None:
        player = make_member(hp=0)
        state = make_state(player)

        assert make_progression().handle_member_down(state, player) is True

    def test_enter_death(self, make_member, make_state, make_progression) -> None:
        player = make_member(hp=0)
        state = make_state(player, phase=GamePhase.COMBAT)

        make_progression().enter_death(state, "Slain by a Grave Rat.")

        assert state.phase == GamePhase.DEATH
        assert state.combat is None
        assert state.log[-2].text == "Aldric has fallen. Slain by a Grave Rat."
        assert state.log[-1].text == "Resurrection will cost 100 gold."
        assert player.story_events[-1] == "Died: Slain by a Grave Rat."

    def test_enter_victory(self, make_member, make_state, make_progression) -> None:
        state = make_state(make_member())

        make_progression().enter_victory(state)

        assert state.phase == GamePhase.VICTORY
        assert state.log[-1].text == "The depths of Ancient Catacombs have been conquered!"


class TestResurrection:
    """Tests for resurrection costs and effects."""

    def test_costs(self, make_member) -> None:
        party = Party(members=[make_member(level=2), make_member("npc_1", "Kira", level=3)])

        assert party_resurrection_cost(party) == 500
        assert member_resurrection_cost(party.player) == 200

    def test_resurrect_party(self, make_member, make_state, make_progression) -> None:
        player = make_member(hp=0, level=2)
        ally = make_member("npc_1", "Kira", hp=0, max_hp=15)
        state = make_state(player, ally, gold=500, phase=GamePhase.DEATH)

        cost = make_progression().resurrect(state)

        assert cost == 300
        assert state.party.shared_gold == 200
        assert player.hp == 10
        assert ally.hp == 7
        assert state.party.morale == 50
        assert state.phase == GamePhase.DUNGEON

    def test_resurrect_player_only(self, make_member, make_state, make_progression) -> None:
        player = make_member(hp=0)
        ally = make_member("npc_1", "Kira", hp=12)
        state = make_state(player, ally, gold=150, phase=GamePhase.DEATH)

        cost = make_progression().resurrect(state)

        assert cost == 100
        assert state.party.shared_gold == 50
        assert player.hp == 10
        assert ally.hp == 12
        assert "Death-touched" in player.tags
        assert state.party.morale == 75
        assert state.phase == GamePhase.DUNGEON

    def test_insufficient_gold_changes_nothing(
        self, make_member, make_state, make_progression
    ) -> None:
        player = make_member(hp=0, level=2)
        ally = make_member("npc_1", "Kira", hp=0)
        state = make_state(player, ally, gold=100, phase=GamePhase.DEATH)

        with pytest.raises(InsufficientGoldError) as exc_info:
            make_progression().resurrect(state)

        assert exc_info.value.details == {"required": 300, "available": 100}
        assert state.party.shared_gold == 100
        assert player.hp == 0
        assert state.phase == GamePhase.DEATH

    def test_resurrect_outside_death(self, make_member, make_state, make_progression) -> None:
        state = make_state(make_member(), gold=1000)

        with pytest.raises(InvalidGameStateError):
            make_progression().resurrect(state)
