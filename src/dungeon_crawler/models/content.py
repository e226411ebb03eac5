"""Static content tables.

Read-only catalogs of classes, backgrounds, stat arrays, portraits, room
templates, loot and recruitable companions. Engines copy items out of
these tables with ``Item.instance()`` and never mutate the templates.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dungeon_crawler.core.exceptions import ContentNotFoundError
from dungeon_crawler.models.enums import Ability, CombatAIPolicy, Direction, ItemType
from dungeon_crawler.models.items import Item
from dungeon_crawler.models.party import StatBlock


# =============================================================================
# Template Types
# =============================================================================


class ClassTemplate(BaseModel):
    """A playable class."""

    model_config = ConfigDict(frozen=True)

    name: str
    bonuses: dict[Ability, int]
    starting_items: tuple[Item, ...]
    tags: tuple[str, ...]
    traits: tuple[str, ...]
    description: str


class BackgroundTemplate(BaseModel):
    """A character background and its starting bonuses."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    gold: int = 0
    hp: int = 0
    xp: int = 0
    items: tuple[str, ...] = ()
    tags: tuple[str, ...]
    traits: tuple[str, ...]
    starting_lore: str


class StatArray(BaseModel):
    """A premade set of attribute scores."""

    model_config = ConfigDict(frozen=True)

    name: str
    stats: StatBlock


class RoomTemplate(BaseModel):
    """Layout and exits shared by every room of a type."""

    model_config = ConfigDict(frozen=True)

    room_type: str
    ascii: tuple[str, ...]
    exits: tuple[Direction, ...]


class RecruitableNPC(BaseModel):
    """A companion who can be hired in the dungeon.

    Attributes:
        id: Stable slug used by the recruit command.
        recruitment_cost: Gold debited on hire.
        reputation_requirement: Minimum party reputation.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    character_class: str
    portrait: str
    stats: StatBlock
    tags: tuple[str, ...]
    traits: tuple[str, ...]
    combat_ai: CombatAIPolicy
    backstory: str
    recruitment_cost: int = Field(ge=0)
    reputation_requirement: int = 0


# =============================================================================
# Classes
# =============================================================================


CLASSES: tuple[ClassTemplate, ...] = (
    ClassTemplate(
        name="Warrior",
        bonuses={Ability.STR: 3, Ability.CON: 2, Ability.DEX: 1},
        starting_items=(
            Item(name="Iron Sword", type=ItemType.WEAPON, damage=8, value=50, effect="A sturdy blade"),
            Item(name="Leather Armor", type=ItemType.ARMOR, value=30, effect="+2 Defense"),
        ),
        tags=("Battle-born", "Stalwart"),
        traits=("Determined", "Protective", "Honor-bound"),
        description="Masters of combat and endurance",
    ),
    ClassTemplate(
        name="Rogue",
        bonuses={Ability.DEX: 3, Ability.INT: 2, Ability.CHA: 1},
        starting_items=(
            Item(name="Curved Dagger", type=ItemType.WEAPON, damage=6, value=40, effect="Swift and silent"),
            Item(name="Lockpicks", type=ItemType.TOOL, value=20, effect="Opens locked doors"),
        ),
        tags=("Shadow-touched", "Cunning"),
        traits=("Cautious", "Opportunistic", "Independent"),
        description="Swift and cunning, masters of stealth",
    ),
    ClassTemplate(
        name="Mage",
        bonuses={Ability.INT: 3, Ability.WIS: 2, Ability.CHA: 1},
        starting_items=(
            Item(name="Wooden Staff", type=ItemType.WEAPON, damage=5, value=35, effect="Channels arcane power"),
            Item(name="Spell Scroll", type=ItemType.CONSUMABLE, value=60, effect="Casts Magic Missile"),
        ),
        tags=("Arcane-touched", "Seeker"),
        traits=("Curious", "Analytical", "Ambitious"),
        description="Wielders of ancient magical forces",
    ),
    ClassTemplate(
        name="Cleric",
        bonuses={Ability.WIS: 3, Ability.CON: 2, Ability.STR: 1},
        starting_items=(
            Item(name="Holy Mace", type=ItemType.WEAPON, damage=7, value=45, effect="Blessed weapon"),
            Item(
                name="Healing Potion",
                type=ItemType.CONSUMABLE,
                healing=15,
                value=25,
                effect="Restores health",
            ),
        ),
        tags=("Divine-blessed", "Protector"),
        traits=("Compassionate", "Faithful", "Resolute"),
        description="Champions of divine power and healing",
    ),
)


# =============================================================================
# Backgrounds
# =============================================================================


BACKGROUNDS: tuple[BackgroundTemplate, ...] = (
    BackgroundTemplate(
        name="Tomb Raider",
        description="You've plundered ancient sites before",
        gold=50,
        items=("Rope", "Torch"),
        tags=("Experienced", "Greedy"),
        traits=("Cautious", "Opportunistic"),
        starting_lore="The weight of gold has always called to you louder than the whispers of the dead.",
    ),
    BackgroundTemplate(
        name="Cursed Noble",
        description="Nobility stripped away by dark magic",
        gold=100,
        items=("Silver Ring",),
        tags=("Fallen", "Proud"),
        traits=("Arrogant", "Desperate"),
        starting_lore=(
            "Your bloodline carries both privilege and an ancient curse that drives you into darkness."
        ),
    ),
    BackgroundTemplate(
        name="Death Cultist",
        description="Servant of dark powers seeking enlightenment",
        hp=5,
        items=("Ritual Dagger",),
        tags=("Devoted", "Twisted"),
        traits=("Fanatical", "Fearless"),
        starting_lore=(
            "Death is not your enemy but your teacher, and these depths hold lessons yet unlearned."
        ),
    ),
    BackgroundTemplate(
        name="Lost Scholar",
        description="Academic driven mad by forbidden knowledge",
        xp=25,
        items=("Ancient Tome",),
        tags=("Learned", "Mad"),
        traits=("Obsessive", "Brilliant"),
        starting_lore="The texts spoke of power hidden in the deep places, and you must prove their truth.",
    ),
    BackgroundTemplate(
        name="Sole Survivor",
        description="Last of a failed expedition",
        hp=10,
        items=("Healing Potion", "Rope"),
        tags=("Haunted", "Resilient"),
        traits=("Paranoid", "Determined"),
        starting_lore=(
            "Your companions fell to the dungeon's hunger, but you carry their memory and their mission."
        ),
    ),
)


# =============================================================================
# Stat Arrays & Portraits
# =============================================================================


STAT_ARRAYS: tuple[StatArray, ...] = (
    StatArray(
        name="Balanced",
        stats=StatBlock.from_short({"STR": 13, "DEX": 13, "CON": 13, "INT": 13, "WIS": 13, "CHA": 13}),
    ),
    StatArray(
        name="Warrior",
        stats=StatBlock.from_short({"STR": 15, "DEX": 12, "CON": 14, "INT": 10, "WIS": 11, "CHA": 8}),
    ),
    StatArray(
        name="Specialist",
        stats=StatBlock.from_short({"STR": 8, "DEX": 15, "CON": 12, "INT": 14, "WIS": 13, "CHA": 10}),
    ),
    StatArray(
        name="Mystic",
        stats=StatBlock.from_short({"STR": 10, "DEX": 11, "CON": 12, "INT": 15, "WIS": 14, "CHA": 8}),
    ),
)

PORTRAITS: tuple[str, ...] = (
    "⚔️", "🗡️", "🏹", "🔮", "📿", "💀", "👑", "🌟", "🔥", "❄️", "⚡", "🌙",
)


# =============================================================================
# Room Templates
# =============================================================================


ROOM_TEMPLATES: tuple[RoomTemplate, ...] = (
    RoomTemplate(
        room_type="chamber",
        ascii=(
            "┌─────────┐",
            "│    N    │",
            "│         │",
            "│  ░░░    │",
            "│  ░@░  E │",
            "│  ░░░    │",
            "│         │",
            "│    S    │",
            "└─────────┘",
        ),
        exits=(Direction.NORTH, Direction.EAST, Direction.SOUTH),
    ),
    RoomTemplate(
        room_type="flooded",
        ascii=(
            "┌─────────┐",
            "│ W   N   │",
            "│         │",
            "│ ≈≈≈≈≈≈≈ │",
            "│ ≈≈≈@≈≈≈ │",
            "│ ≈≈≈≈≈≈≈ │",
            "│         │",
            "│    S    │",
            "└─────────┘",
        ),
        exits=(Direction.NORTH, Direction.WEST, Direction.SOUTH),
    ),
    RoomTemplate(
        room_type="trapped",
        ascii=(
            "┌─────────┐",
            "│         │",
            "│  ▲ ▲ ▲  │",
            "│ ▲▲▲▲▲▲▲ │",
            "│ ▲▲@▲▲▲▲ │",
            "│ ▲▲▲▲▲▲▲ │",
            "│  ▲ ▲ ▲  │",
            "│    S    │",
            "└─────────┘",
        ),
        exits=(Direction.SOUTH,),
    ),
    RoomTemplate(
        room_type="corridor",
        ascii=(
            "┌─────────┐",
            "│ W       │",
            "│ ████████│",
            "│ █    █ E│",
            "│ █ @  █  │",
            "│ █    █  │",
            "│ ████████│",
            "│    S    │",
            "└─────────┘",
        ),
        exits=(Direction.WEST, Direction.EAST, Direction.SOUTH),
    ),
    RoomTemplate(
        room_type="shrine",
        ascii=(
            "┌─────────┐",
            "│    N    │",
            "│ ◊◊◊◊◊◊◊ │",
            "│ ◊     ◊ │",
            "│ ◊  @  ◊ │",
            "│ ◊     ◊ │",
            "│ ◊◊◊◊◊◊◊ │",
            "│    S    │",
            "└─────────┘",
        ),
        exits=(Direction.NORTH, Direction.SOUTH),
    ),
    RoomTemplate(
        room_type="vault",
        ascii=(
            "┌─────────┐",
            "│    N    │",
            "│ ╔═════╗ │",
            "│ ║     ║ │",
            "│ ║  @  ║ │",
            "│ ║     ║ │",
            "│ ╚═════╝ │",
            "│    S    │",
            "└─────────┘",
        ),
        exits=(Direction.NORTH, Direction.SOUTH),
    ),
)


# =============================================================================
# Loot
# =============================================================================


LOOT_ITEMS: tuple[Item, ...] = (
    Item(name="Healing Potion", type=ItemType.CONSUMABLE, healing=15, value=25, effect="Restores health"),
    Item(name="Mana Potion", type=ItemType.CONSUMABLE, value=30, effect="Restores magical energy"),
    Item(name="Ancient Coin", type=ItemType.TREASURE, value=50),
    Item(name="Silver Ring", type=ItemType.TREASURE, value=75),
    Item(name="Mystic Gem", type=ItemType.TREASURE, value=120),
    Item(name="Iron Key", type=ItemType.TOOL, value=40, effect="Opens locked passages"),
    Item(name="Torch", type=ItemType.TOOL, value=10, effect="Illuminates dark places"),
    Item(name="Rope", type=ItemType.TOOL, value=15, effect="Useful for climbing"),
    Item(name="Enchanted Dagger", type=ItemType.WEAPON, damage=8, value=80, effect="Glows with magical power"),
    Item(name="Steel Sword", type=ItemType.WEAPON, damage=10, value=100, effect="A masterwork blade"),
    Item(name="Ritual Dagger", type=ItemType.WEAPON, damage=5, value=30, effect="Cursed blade"),
    Item(name="Ancient Tome", type=ItemType.TOOL, value=50, effect="Contains forbidden knowledge"),
)


# =============================================================================
# Recruitable Companions
# =============================================================================


RECRUITABLE_NPCS: tuple[RecruitableNPC, ...] = (
    RecruitableNPC(
        id="kira_shadowbane",
        name="Kira Shadowbane",
        character_class="Rogue",
        portrait="🗡️",
        stats=StatBlock.from_short({"STR": 12, "DEX": 16, "CON": 13, "INT": 14, "WIS": 11, "CHA": 10}),
        tags=("Shadow-touched", "Cunning", "Veteran"),
        traits=("Cautious", "Loyal", "Pragmatic"),
        combat_ai=CombatAIPolicy.AGGRESSIVE,
        backstory="A former guild assassin seeking redemption in the depths.",
        recruitment_cost=200,
        reputation_requirement=0,
    ),
    RecruitableNPC(
        id="brother_marcus",
        name="Brother Marcus",
        character_class="Cleric",
        portrait="📿",
        stats=StatBlock.from_short({"STR": 11, "DEX": 9, "CON": 15, "INT": 12, "WIS": 16, "CHA": 13}),
        tags=("Divine-blessed", "Protector", "Faithful"),
        traits=("Compassionate", "Stubborn", "Wise"),
        combat_ai=CombatAIPolicy.SUPPORT,
        backstory="A wandering priest drawn to cleanse this cursed place.",
        recruitment_cost=150,
        reputation_requirement=25,
    ),
    RecruitableNPC(
        id="zara_flameheart",
        name="Zara Flameheart",
        character_class="Mage",
        portrait="🔮",
        stats=StatBlock.from_short({"STR": 8, "DEX": 12, "CON": 11, "INT": 17, "WIS": 14, "CHA": 12}),
        tags=("Arcane-touched", "Seeker", "Ambitious"),
        traits=("Curious", "Reckless", "Brilliant"),
        combat_ai=CombatAIPolicy.BALANCED,
        backstory="A young mage seeking forbidden knowledge in the dungeon's depths.",
        recruitment_cost=300,
        reputation_requirement=50,
    ),
    RecruitableNPC(
        id="grimjaw_the_stalwart",
        name="Grimjaw the Stalwart",
        character_class="Warrior",
        portrait="⚔️",
        stats=StatBlock.from_short({"STR": 17, "DEX": 10, "CON": 16, "INT": 9, "WIS": 12, "CHA": 8}),
        tags=("Battle-born", "Stalwart", "Veteran"),
        traits=("Determined", "Protective", "Gruff"),
        combat_ai=CombatAIPolicy.DEFENSIVE,
        backstory="An old soldier who's seen too many battles, seeking one last glory.",
        recruitment_cost=250,
        reputation_requirement=30,
    ),
)


# =============================================================================
# Lookup Helpers
# =============================================================================


def _find(table: str, entries: tuple, key: str, attr: str = "name"):
    for entry in entries:
        if getattr(entry, attr) == key:
            return entry
    raise ContentNotFoundError(f"Unknown {table} entry: {key}", table=table, key=key)


def get_class(name: str) -> ClassTemplate:
    """Look up a class by name.

    Raises:
        ContentNotFoundError: If no class has this name.
    """
    return _find("classes", CLASSES, name)


def get_background(name: str) -> BackgroundTemplate:
    """Look up a background by name.

    Raises:
        ContentNotFoundError: If no background has this name.
    """
    return _find("backgrounds", BACKGROUNDS, name)


def get_stat_array(name: str) -> StatArray:
    """Look up a premade stat array by name."""
    return _find("stat_arrays", STAT_ARRAYS, name)


def get_npc(npc_id: str) -> RecruitableNPC:
    """Look up a recruitable companion by id or display name."""
    for npc in RECRUITABLE_NPCS:
        if npc_id in (npc.id, npc.name):
            return npc
    raise ContentNotFoundError(f"Unknown companion: {npc_id}", table="recruitable_npcs", key=npc_id)


def find_loot_item(name: str) -> Item:
    """Look up a loot template by name."""
    return _find("loot_items", LOOT_ITEMS, name)


__all__ = [
    "ClassTemplate",
    "BackgroundTemplate",
    "StatArray",
    "RoomTemplate",
    "RecruitableNPC",
    "CLASSES",
    "BACKGROUNDS",
    "STAT_ARRAYS",
    "PORTRAITS",
    "ROOM_TEMPLATES",
    "LOOT_ITEMS",
    "RECRUITABLE_NPCS",
    "get_class",
    "get_background",
    "get_stat_array",
    "get_npc",
    "find_loot_item",
]
