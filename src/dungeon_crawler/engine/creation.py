"""Character creation.

Stat generation (rolled, point buy or premade arrays), and the bootstrap
of the party and dungeon from the chosen class, background, name and
portrait.
"""

from __future__ import annotations

from collections.abc import Mapping

from dungeon_crawler.core.config import GameSettings, get_settings
from dungeon_crawler.core.constants import (
    BASE_HP,
    BASE_STAT_MAX,
    BASE_STAT_MIN,
    CREATION_TAGS,
    MAX_NAME_LENGTH,
    PLAYER_ID,
    PLAYER_LOYALTY,
    POINT_BUY_COSTS,
    POINT_BUY_MAX,
    POINT_BUY_MIN,
    POINT_BUY_TOTAL,
    STARTING_XP_TO_NEXT,
)
from dungeon_crawler.core.exceptions import (
    ContentNotFoundError,
    InvalidGameStateError,
    ValidationError,
)
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.engine.dice import DiceRoller
from dungeon_crawler.engine.dungeon import DungeonGenerator
from dungeon_crawler.models.content import (
    PORTRAITS,
    BackgroundTemplate,
    ClassTemplate,
    find_loot_item,
    get_background,
    get_class,
)
from dungeon_crawler.models.enums import Ability, CombatAIPolicy, GamePhase, ItemType, LogCategory
from dungeon_crawler.models.game_state import GameState
from dungeon_crawler.models.items import Item
from dungeon_crawler.models.party import Party, PartyMember, StatBlock


logger = get_logger(__name__)


# =============================================================================
# Stat Generation
# =============================================================================


def roll_stats(dice: DiceRoller | None = None) -> StatBlock:
    """Roll 3d6+3 for each attribute."""
    dice = dice or DiceRoller()
    return StatBlock(**{ability.value: dice.d(6, 3) + 3 for ability in Ability})


def point_buy_cost(stats: StatBlock) -> int:
    """Total point-buy cost of a stat block.

    Raises:
        ValidationError: If any score lies outside 8-15.
    """
    total = 0
    for ability in Ability:
        score = stats.score(ability)
        if not POINT_BUY_MIN <= score <= POINT_BUY_MAX:
            raise ValidationError(
                f"{ability.abbreviation} must be between {POINT_BUY_MIN} and {POINT_BUY_MAX}",
                field_name=ability.value,
                invalid_value=score,
            )
        total += POINT_BUY_COSTS[score]
    return total


def validate_point_buy(stats: StatBlock) -> StatBlock:
    """Check that a point-buy spread spends exactly the available points.

    Returns:
        The validated stat block.

    Raises:
        ValidationError: If a score is out of range or the total is wrong.
    """
    cost = point_buy_cost(stats)
    if cost != POINT_BUY_TOTAL:
        raise ValidationError(
            f"Point buy must spend exactly {POINT_BUY_TOTAL} points (spent {cost})",
            field_name="stats",
            invalid_value=cost,
        )
    return stats


def _coerce_stats(stats: StatBlock | Mapping[str, int]) -> StatBlock:
    if not isinstance(stats, StatBlock):
        try:
            stats = StatBlock.from_short(dict(stats))
        except (KeyError, ValueError) as exc:
            raise ValidationError(f"Invalid stats: {exc}", field_name="stats") from exc
    for ability in Ability:
        score = stats.score(ability)
        if not BASE_STAT_MIN <= score <= BASE_STAT_MAX:
            raise ValidationError(
                f"{ability.abbreviation} must be between {BASE_STAT_MIN} and {BASE_STAT_MAX}",
                field_name=ability.value,
                invalid_value=score,
            )
    return stats


def _background_item(name: str) -> Item:
    try:
        return find_loot_item(name).instance()
    except ContentNotFoundError:
        return Item(name=name, type=ItemType.TOOL, value=10, effect="Background item")


# =============================================================================
# Character Creator
# =============================================================================


class CharacterCreator:
    """Builds the player character, party and dungeon for a new run."""

    def __init__(
        self,
        *,
        dice: DiceRoller | None = None,
        generator: DungeonGenerator | None = None,
        settings: GameSettings | None = None,
    ) -> None:
        self.dice = dice or DiceRoller()
        self.settings = settings or get_settings().game
        self.generator = generator or DungeonGenerator(dice=self.dice, settings=self.settings)

    def build_player(
        self,
        stats: StatBlock,
        character_class: ClassTemplate,
        background: BackgroundTemplate,
        name: str,
        portrait: str,
    ) -> PartyMember:
        """Assemble the player character from validated choices."""
        final_stats = stats.with_bonuses(character_class.bonuses)
        max_hp = max(1, BASE_HP + final_stats.modifier(Ability.CON) + background.hp)
        inventory = [item.instance() for item in character_class.starting_items]
        inventory.extend(_background_item(item_name) for item_name in background.items)

        return PartyMember(
            id=PLAYER_ID,
            name=name,
            character_class=character_class.name,
            level=1,
            hp=max_hp,
            max_hp=max_hp,
            xp=background.xp,
            xp_to_next=STARTING_XP_TO_NEXT,
            stats=final_stats,
            inventory=inventory,
            tags=[*character_class.tags, *background.tags, self.dice.choice(CREATION_TAGS)],
            traits=[*character_class.traits, *background.traits],
            is_player=True,
            loyalty=PLAYER_LOYALTY,
            combat_ai=CombatAIPolicy.BALANCED,
            portrait=portrait,
            backstory=background.starting_lore,
            story_events=[f"Began as a {background.name}"],
        )

    def create_character(
        self,
        state: GameState,
        stats: StatBlock | Mapping[str, int],
        class_name: str,
        background_name: str,
        name: str,
        portrait: str,
    ) -> PartyMember:
        """Create the player character and start the run.

        Args:
            state: The game state, in character creation.
            stats: Base stats before class bonuses.
            class_name: Class name.
            background_name: Background name.
            name: Character name (1-20 characters after stripping).
            portrait: One of the portrait glyphs.

        Returns:
            The player character.

        Raises:
            InvalidGameStateError: Outside character creation.
            ValidationError: On a bad name, portrait or stats.
            ContentNotFoundError: On an unknown class or background.
        """
        if state.phase != GamePhase.CHARACTER_CREATION:
            raise InvalidGameStateError(
                "A character already exists for this run",
                current_state=state.phase.value,
                expected_states=[GamePhase.CHARACTER_CREATION.value],
            )

        name = name.strip()
        if not 1 <= len(name) <= MAX_NAME_LENGTH:
            raise ValidationError(
                f"Name must be 1-{MAX_NAME_LENGTH} characters",
                field_name="name",
                invalid_value=name,
            )
        if portrait not in PORTRAITS:
            raise ValidationError("Unknown portrait", field_name="portrait", invalid_value=portrait)

        base_stats = _coerce_stats(stats)
        character_class = get_class(class_name)
        background = get_background(background_name)

        player = self.build_player(base_stats, character_class, background, name, portrait)
        gold = self.dice.d(6, 3) * 10 + background.gold
        party = Party(
            members=[player],
            shared_gold=gold,
            morale=self.settings.starting_morale,
            reputation=0,
        )
        dungeon = self.generator.generate_dungeon(party)

        state.party = party
        state.dungeon = dungeon
        state.combat = None
        state.phase = GamePhase.DUNGEON

        state.add_log(f"{name} the {character_class.name} enters the dungeon...", LogCategory.NARRATIVE)
        state.add_log(background.starting_lore, LogCategory.AI)
        state.add_log("The narrator awakens, ready to weave your tale...", LogCategory.AI)
        state.add_log(dungeon.current_room.description, LogCategory.NARRATIVE)
        state.add_log(dungeon.current_room.symbolic_text, LogCategory.AI)

        logger.info(
            "Character created",
            name=name,
            character_class=character_class.name,
            background=background.name,
            gold=gold,
        )
        return player


__all__ = [
    "roll_stats",
    "point_buy_cost",
    "validate_point_buy",
    "CharacterCreator",
]
