"""Rules constants and fixed narrative strings for the dungeon crawler.

Every number that shapes a roll or threshold lives here so the engines
read as formulas over named values.
"""

from __future__ import annotations

# =============================================================================
# Party & Character Constants
# =============================================================================

MAX_PARTY_SIZE = 4
"""Largest party the engine accepts (players plus recruits)."""

PLAYER_ID = "player"
"""Member id of the player character."""

ENEMY_ACTOR_ID = "enemy"
"""Synthetic actor id appended to every combat turn order."""

BASE_HP = 10
"""Starting hit points before the CON modifier and background bonus."""

STARTING_XP_TO_NEXT = 100
"""XP required for the first level up."""

XP_TO_NEXT_INCREMENT = 50
"""Added to xp_to_next on every level up."""

PLAYER_LOYALTY = 100
"""Loyalty of the player character."""

RECRUIT_LOYALTY = 60
"""Loyalty of a freshly recruited companion."""

NEUTRAL_RELATIONSHIP = 0
"""Starting affinity between two party members."""

MAX_NAME_LENGTH = 20
"""Longest accepted character name."""

STARTING_MORALE = 75
"""Party morale at character creation."""

RECRUIT_MORALE_BONUS = 10
"""Morale gained when a companion joins."""

WIPE_MORALE_PENALTY = 25
"""Morale lost when the whole party is pulled back from death."""

RESURRECTION_COST_PER_LEVEL = 100
"""Gold per member level charged for resurrection."""

MAX_MEMORY_EVENTS = 20
"""Narrator memory keeps only this many recent events."""

# =============================================================================
# Point Buy Constants
# =============================================================================

POINT_BUY_TOTAL = 27
"""Total points available for point buy character creation."""

POINT_BUY_MIN = 8
"""Minimum ability score in point buy."""

POINT_BUY_MAX = 15
"""Maximum ability score in point buy."""

BASE_STAT_MIN = 3
BASE_STAT_MAX = 21
"""Range of base scores accepted at creation (the span of 3d6+3)."""

# Cumulative cost of raising a score from 8
POINT_BUY_COSTS = {
    8: 0,
    9: 1,
    10: 2,
    11: 3,
    12: 4,
    13: 5,
    14: 7,
    15: 9,
}

# =============================================================================
# Dungeon Generation Constants
# =============================================================================

LOOT_BASE_CHANCE = 0.3
LOOT_DEPTH_CHANCE = 0.1
TRAP_BASE_CHANCE = 0.2
TRAP_DEPTH_CHANCE = 0.05
ENEMY_BASE_CHANCE = 0.4
ENEMY_DEPTH_CHANCE = 0.1

SINGLE_LOOT_CHANCE = 0.7
"""Chance that a looted room holds one item rather than two."""

ROOM_INDEX_RANGE = 1000
"""Room indices for newly entered rooms are drawn from [0, ROOM_INDEX_RANGE)."""

DEFAULT_THEME = "Ancient Catacombs"
DEFAULT_MAX_DEPTH = 10
NARRATOR_TONE = "mythic"
NARRATOR_FOCUS = ("character_growth", "symbolic_meaning")

# =============================================================================
# Combat Constants
# =============================================================================

BASE_DEFENSE = 10
"""Hit threshold before modifiers, for both sides."""

CRITICAL_THRESHOLD = 20
"""Attack totals at or above this value are critical hits."""

CRITICAL_MULTIPLIER = 2

UNARMED_DAMAGE_DIE = 4
"""Damage die used when the attacker carries no weapon."""

ENEMY_DAMAGE_DIE = 6

SPELL_SCROLL_NAME = "Spell Scroll"
SPELL_SCROLL_DICE = "3d6"

HEALING_BONUS_DIE = 4
"""Extra d4 rolled on top of an item's healing value."""

FLEE_THRESHOLD = 12
"""A d20 of at least this value lets the party escape."""

DEFENDING_STATUS = "Defending"
DEFENDING_EFFECT = "+2 Defense"
DEFENDING_BONUS = 2
HEALED_STATUS = "Healed"

DEFENSIVE_HP_THRESHOLD = 0.3
SUPPORT_HEAL_THRESHOLD = 0.5
BALANCED_DEFEND_THRESHOLD = 0.2
BALANCED_HEAL_THRESHOLD = 0.3

# =============================================================================
# Exploration Constants
# =============================================================================

TRAP_AVOID_THRESHOLD = 15
LOOT_FIND_THRESHOLD = 12
SEARCH_NOTHING_THRESHOLD = 10
TRAP_DAMAGE_DIE = 6

REST_GOOD_THRESHOLD = 12
REST_FITFUL_THRESHOLD = 8
REST_GOOD_FRACTION = 0.25
REST_FITFUL_FRACTION = 0.1
CURSE_DURATION = 3
CURSE_EFFECT = "The darkness clings to you"

# =============================================================================
# Narrative Pools
# =============================================================================

CREATION_TAGS = ("Cursed", "Blessed", "Witness", "Marked", "Chosen", "Forsaken", "Haunted")
LEVEL_UP_TAGS = ("Ascendant", "Evolved", "Transformed", "Awakened", "Enlightened")
REST_CURSES = ("Haunted", "Weakened", "Cursed", "Tormented")
RESURRECTION_TAG = "Death-touched"

# =============================================================================
# Narrator Fallback Text
# =============================================================================

FALLBACK_ROOM_DESCRIPTION = "A chamber carved from living stone, its walls bearing the weight of ages."
FALLBACK_ROOM_SYMBOLIC = "The darkness watches and remembers."
PLACEHOLDER_ROOM_DESCRIPTION = "A chamber awaiting description..."
PLACEHOLDER_ROOM_SYMBOLIC = "The narrator prepares to speak..."

FALLBACK_ENEMY_NAME = "Shadow Wraith"
FALLBACK_ENEMY_SYMBOLIC = "A fragment of darkness given malevolent form."

FALLBACK_HIT_TEMPLATE = "{name}'s strike finds its mark for {damage} damage!"
FALLBACK_MISS_TEMPLATE = "{name}'s attack misses!"
