"""Tests for the static content tables."""

from __future__ import annotations

import pytest

from dungeon_crawler.core.exceptions import ContentNotFoundError
from dungeon_crawler.engine.creation import validate_point_buy
from dungeon_crawler.models.content import (
    BACKGROUNDS,
    CLASSES,
    LOOT_ITEMS,
    PORTRAITS,
    RECRUITABLE_NPCS,
    ROOM_TEMPLATES,
    STAT_ARRAYS,
    find_loot_item,
    get_background,
    get_class,
    get_npc,
    get_stat_array,
)
from dungeon_crawler.models.enums import Ability, Direction


class TestCatalogs:
    """Tests for catalog contents."""

    def test_classes(self) -> None:
        assert [c.name for c in CLASSES] == ["Warrior", "Rogue", "Mage", "Cleric"]
        assert get_class("Rogue").bonuses == {Ability.DEX: 3, Ability.INT: 2, Ability.CHA: 1}

    def test_every_class_starts_armed(self) -> None:
        for character_class in CLASSES:
            assert any(item.damage for item in character_class.starting_items)

    def test_backgrounds(self) -> None:
        assert len(BACKGROUNDS) == 5
        assert get_background("Cursed Noble").gold == 100
        assert get_background("Death Cultist").hp == 5

    def test_background_items_exist_as_loot(self) -> None:
        for background in BACKGROUNDS:
            for name in background.items:
                assert find_loot_item(name).name == name

    def test_loot_table(self) -> None:
        assert len(LOOT_ITEMS) == 12
        assert find_loot_item("Steel Sword").damage == 10
        assert find_loot_item("Healing Potion").healing == 15

    def test_room_templates_have_exits(self) -> None:
        assert len(ROOM_TEMPLATES) == 6
        for template in ROOM_TEMPLATES:
            assert Direction.SOUTH in template.exits

    def test_portraits(self) -> None:
        assert len(PORTRAITS) == 12
        assert "⚔️" in PORTRAITS

    def test_stat_arrays(self) -> None:
        assert {array.name for array in STAT_ARRAYS} == {"Balanced", "Warrior", "Specialist", "Mystic"}
        assert get_stat_array("Warrior").stats.strength == 15

    def test_specialist_array_is_a_valid_point_buy(self) -> None:
        validate_point_buy(get_stat_array("Specialist").stats)


class TestCompanions:
    """Tests for recruitable companions."""

    def test_lookup_by_id_or_name(self) -> None:
        assert get_npc("zara_flameheart") is get_npc("Zara Flameheart")

    def test_costs_and_requirements(self) -> None:
        costs = {npc.id: (npc.recruitment_cost, npc.reputation_requirement) for npc in RECRUITABLE_NPCS}

        assert costs == {
            "kira_shadowbane": (200, 0),
            "brother_marcus": (150, 25),
            "zara_flameheart": (300, 50),
            "grimjaw_the_stalwart": (250, 30),
        }


class TestLookupErrors:
    """Tests for unknown keys."""

    @pytest.mark.parametrize(
        "lookup",
        [get_class, get_background, get_stat_array, get_npc, find_loot_item],
    )
    def test_unknown_key(self, lookup) -> None:
        with pytest.raises(ContentNotFoundError):
            lookup("Nonexistent")
