"""Tests for the ally combat policy."""

from __future__ import annotations

import pytest

from dungeon_crawler.engine.policy import decide_ally_action
from dungeon_crawler.models.enums import CombatAction, CombatAIPolicy
from dungeon_crawler.models.party import Party


@pytest.fixture
def party_with(make_member):
    """Build a party of the default player plus the given allies."""

    def build(*members):
        return Party(members=[make_member(), *members])

    return build


class TestAggressive:
    """Aggressive allies always attack."""

    def test_attacks_even_when_dying(self, make_member, party_with) -> None:
        ally = make_member("npc_1", "Kira", hp=1, combat_ai=CombatAIPolicy.AGGRESSIVE)
        turn = decide_ally_action(ally, party_with(ally))

        assert turn.action == CombatAction.ATTACK
        assert turn.actor_id == "npc_1"


class TestDefensive:
    """Defensive allies defend below 30% hp."""

    def test_defends_when_low(self, make_member, party_with) -> None:
        ally = make_member("npc_1", "Grimjaw", hp=5, max_hp=20, combat_ai=CombatAIPolicy.DEFENSIVE)

        assert decide_ally_action(ally, party_with(ally)).action == CombatAction.DEFEND

    def test_attacks_at_threshold(self, make_member, party_with) -> None:
        ally = make_member("npc_1", "Grimjaw", hp=6, max_hp=20, combat_ai=CombatAIPolicy.DEFENSIVE)

        assert decide_ally_action(ally, party_with(ally)).action == CombatAction.ATTACK


class TestSupport:
    """Support allies heal the first member below 50%."""

    def test_heals_wounded_member(self, make_member, party_with, healing_potion) -> None:
        potion = healing_potion()
        ally = make_member(
            "npc_1", "Marcus", inventory=[potion], combat_ai=CombatAIPolicy.SUPPORT
        )
        party = party_with(ally)
        party.player.hp = 9

        turn = decide_ally_action(ally, party)

        assert turn.action == CombatAction.USE_ITEM
        assert turn.target_id == "player"
        assert turn.item is potion

    def test_attacks_without_healing_item(self, make_member, party_with) -> None:
        ally = make_member("npc_1", "Marcus", combat_ai=CombatAIPolicy.SUPPORT)
        party = party_with(ally)
        party.player.hp = 2

        assert decide_ally_action(ally, party).action == CombatAction.ATTACK

    def test_attacks_when_nobody_is_wounded(self, make_member, party_with, healing_potion) -> None:
        ally = make_member(
            "npc_1", "Marcus", inventory=[healing_potion()], combat_ai=CombatAIPolicy.SUPPORT
        )

        assert decide_ally_action(ally, party_with(ally)).action == CombatAction.ATTACK

    def test_heals_fallen_player(self, make_member, party_with, healing_potion) -> None:
        potion = healing_potion()
        ally = make_member(
            "npc_1", "Marcus", inventory=[potion], combat_ai=CombatAIPolicy.SUPPORT
        )
        party = party_with(ally)
        party.player.hp = 0

        turn = decide_ally_action(ally, party)

        assert turn.action == CombatAction.USE_ITEM
        assert turn.target_id == "player"
        assert turn.item is potion


class TestBalanced:
    """Balanced allies defend below 20%, heal below 30%, else attack."""

    def test_defends_when_near_death(self, make_member, party_with, healing_potion) -> None:
        ally = make_member("npc_1", "Zara", hp=3, max_hp=20, inventory=[healing_potion()])

        assert decide_ally_action(ally, party_with(ally)).action == CombatAction.DEFEND

    def test_heals_member_below_thirty_percent(
        self, make_member, party_with, healing_potion
    ) -> None:
        ally = make_member("npc_1", "Zara", inventory=[healing_potion()])
        party = party_with(ally)
        party.player.hp = 5

        turn = decide_ally_action(ally, party)

        assert turn.action == CombatAction.USE_ITEM
        assert turn.target_id == "player"

    def test_heals_fallen_player(self, make_member, party_with, healing_potion) -> None:
        ally = make_member("npc_1", "Zara", inventory=[healing_potion()])
        party = party_with(ally)
        party.player.hp = 0

        turn = decide_ally_action(ally, party)

        assert turn.action == CombatAction.USE_ITEM
        assert turn.target_id == "player"

    def test_attacks_when_member_above_thirty_percent(
        self, make_member, party_with, healing_potion
    ) -> None:
        ally = make_member("npc_1", "Zara", inventory=[healing_potion()])
        party = party_with(ally)
        party.player.hp = 8

        assert decide_ally_action(ally, party).action == CombatAction.ATTACK
