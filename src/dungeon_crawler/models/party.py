"""Party member and party models.

The party is the player's side of the run: the player character, up to
three recruited companions, and the gold, shared inventory, formation,
morale and reputation they hold in common.

Party members are only mutated through the helpers defined here, which
the engines call. Each helper keeps the member invariants (hp within
[0, max_hp], non-negative xp) intact.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dungeon_crawler.core.constants import NEUTRAL_RELATIONSHIP
from dungeon_crawler.core.exceptions import InsufficientGoldError
from dungeon_crawler.models.enums import Ability, CombatAIPolicy
from dungeon_crawler.models.items import Item, StatusEffect, contains_item, remove_item


# =============================================================================
# Type Definitions
# =============================================================================


AbilityScore = Annotated[int, Field(ge=1, le=30, description="Attribute score (1-30)")]
Affinity = Annotated[int, Field(ge=-100, le=100)]


def calculate_modifier(score: int) -> int:
    """Calculate the modifier for an attribute score.

    Args:
        score: The attribute score.

    Returns:
        floor((score - 10) / 2).
    """
    return (score - 10) // 2


# =============================================================================
# Stat Block
# =============================================================================


class StatBlock(BaseModel):
    """The six attribute scores of a character."""

    model_config = ConfigDict(frozen=True)

    strength: AbilityScore = 10
    dexterity: AbilityScore = 10
    constitution: AbilityScore = 10
    intelligence: AbilityScore = 10
    wisdom: AbilityScore = 10
    charisma: AbilityScore = 10

    @classmethod
    def from_short(cls, scores: dict[str, int]) -> "StatBlock":
        """Build a stat block from short labels.

        Args:
            scores: Mapping like {"STR": 15, "DEX": 12, ...}. Missing
                attributes default to 10.

        Returns:
            The stat block.
        """
        return cls(**{Ability.from_abbreviation(k).value: v for k, v in scores.items()})

    def score(self, ability: Ability) -> int:
        """Get the raw score of an attribute."""
        return getattr(self, ability.value)

    def modifier(self, ability: Ability) -> int:
        """Get the modifier of an attribute."""
        return calculate_modifier(self.score(ability))

    def with_bonuses(self, bonuses: dict[Ability, int]) -> "StatBlock":
        """Return a new block with additive bonuses applied.

        Args:
            bonuses: Per-attribute bonus.

        Returns:
            A new StatBlock.
        """
        data = self.model_dump()
        for ability, bonus in bonuses.items():
            data[ability.value] += bonus
        return StatBlock(**data)

    def as_short(self) -> dict[str, int]:
        """Render as a {"STR": n, ...} mapping."""
        return {ability.abbreviation: self.score(ability) for ability in Ability}


# =============================================================================
# Party Member
# =============================================================================


class PartyMember(BaseModel):
    """A character in the party, player-controlled or companion.

    Attributes:
        id: Unique member id ('player' for the player character).
        name: Display name.
        character_class: Class name from the content tables.
        level: Character level.
        hp: Current hit points.
        max_hp: Maximum hit points.
        xp: Experience toward the next level.
        xp_to_next: Experience needed for the next level.
        stats: Attribute scores.
        inventory: Carried items, in pickup order.
        tags: Narrative labels.
        status_effects: Active temporary effects.
        traits: Personality traits.
        is_player: Whether this is the player character.
        loyalty: Loyalty to the party (0-100).
        relationships: Affinity toward other members by id.
        combat_ai: Decision policy when the engine acts for this member.
        portrait: Portrait glyph.
        joined_at: When the member joined.
        backstory: Background text.
        story_events: Append-only narrative history.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    character_class: str
    level: int = Field(default=1, ge=1)
    hp: int = Field(ge=0)
    max_hp: int = Field(ge=1)
    xp: int = Field(default=0, ge=0)
    xp_to_next: int = Field(default=100, ge=1)
    stats: StatBlock = Field(default_factory=StatBlock)
    inventory: list[Item] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    status_effects: list[StatusEffect] = Field(default_factory=list)
    traits: list[str] = Field(default_factory=list)
    is_player: bool = False
    loyalty: int = Field(default=60, ge=0, le=100)
    relationships: dict[str, Affinity] = Field(default_factory=dict)
    combat_ai: CombatAIPolicy = CombatAIPolicy.BALANCED
    portrait: str = ""
    joined_at: datetime = Field(default_factory=datetime.now)
    backstory: str = ""
    story_events: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_hp_bounds(self) -> Self:
        """Ensure hp never exceeds max_hp."""
        if self.hp > self.max_hp:
            raise ValueError(f"hp ({self.hp}) exceeds max_hp ({self.max_hp})")
        return self

    @property
    def is_conscious(self) -> bool:
        """Whether the member can act."""
        return self.hp > 0

    @property
    def hp_fraction(self) -> float:
        """Current hp as a fraction of max_hp."""
        return self.hp / self.max_hp

    def modifier(self, ability: Ability) -> int:
        """Get this member's modifier for an attribute."""
        return self.stats.modifier(ability)

    def take_damage(self, amount: int) -> int:
        """Apply damage, flooring hp at 0.

        Returns:
            The hit points actually lost.
        """
        if amount <= 0:
            return 0
        actual = min(self.hp, amount)
        self.hp = self.hp - actual
        return actual

    def heal(self, amount: int) -> int:
        """Restore hit points, capped at max_hp.

        Returns:
            The hit points actually restored.
        """
        if amount <= 0:
            return 0
        before = self.hp
        self.hp = min(self.max_hp, self.hp + amount)
        return self.hp - before

    def set_hp(self, value: int) -> None:
        """Set hp directly, clamped to [0, max_hp]."""
        self.hp = max(0, min(self.max_hp, value))

    def gain_max_hp(self, amount: int) -> None:
        """Raise max_hp and hp together (level up)."""
        self.max_hp = self.max_hp + amount
        self.hp = self.hp + amount

    # -------------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------------

    @property
    def weapon(self) -> Item | None:
        """The first weapon carried, used for attacks."""
        return next((item for item in self.inventory if item.type == "weapon"), None)

    @property
    def healing_item(self) -> Item | None:
        """The first healing consumable carried."""
        return next((item for item in self.inventory if item.is_healing), None)

    def carries(self, item: Item) -> bool:
        """Check whether this exact item instance is carried."""
        return contains_item(self.inventory, item)

    def remove_item(self, item: Item) -> bool:
        """Remove this exact item instance from the inventory."""
        return remove_item(self.inventory, item)

    # -------------------------------------------------------------------------
    # Status effects, tags, story
    # -------------------------------------------------------------------------

    def add_status(self, name: str, duration: int, effect: str = "") -> StatusEffect:
        """Attach a status effect."""
        status = StatusEffect(name=name, duration=duration, effect=effect)
        self.status_effects.append(status)
        return status

    def has_status(self, name: str) -> bool:
        """Check whether a status effect with this name is active."""
        return any(effect.name == name for effect in self.status_effects)

    def tick_status_effects(self) -> list[StatusEffect]:
        """Count down every status effect by one turn.

        Returns:
            The effects that expired and were removed.
        """
        expired: list[StatusEffect] = []
        remaining: list[StatusEffect] = []
        for effect in self.status_effects:
            effect.duration = max(0, effect.duration - 1)
            if effect.duration > 0:
                remaining.append(effect)
            else:
                expired.append(effect)
        self.status_effects = remaining
        return expired

    def add_tag(self, tag: str) -> None:
        """Append a narrative tag unless already present."""
        if tag not in self.tags:
            self.tags.append(tag)

    def record_event(self, text: str) -> None:
        """Append to the member's story."""
        self.story_events.append(text)


# =============================================================================
# Party
# =============================================================================


class Party(BaseModel):
    """The adventuring party.

    Attributes:
        members: Party members, player first.
        shared_gold: Gold held in common.
        shared_inventory: Items found while exploring.
        formation: Member ids in default turn priority.
        morale: Party morale (0-100).
        reputation: Standing that gates recruitment.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    members: list[PartyMember] = Field(default_factory=list)
    shared_gold: int = Field(default=0, ge=0)
    shared_inventory: list[Item] = Field(default_factory=list)
    formation: list[str] = Field(default_factory=list)
    morale: int = Field(default=75, ge=0, le=100)
    reputation: int = 0

    @model_validator(mode="after")
    def validate_roster(self) -> Self:
        """Ensure one player character and a formation matching the roster."""
        if self.members:
            players = [m for m in self.members if m.is_player]
            if len(players) != 1:
                raise ValueError(f"party must have exactly one player, found {len(players)}")
            ids = [m.id for m in self.members]
            if len(set(ids)) != len(ids):
                raise ValueError("party member ids must be unique")
            if not self.formation:
                self.formation = ids
            elif sorted(self.formation) != sorted(ids):
                raise ValueError("formation must list every member exactly once")
        return self

    @property
    def size(self) -> int:
        """Number of members."""
        return len(self.members)

    @property
    def player(self) -> PartyMember:
        """The player character."""
        for member in self.members:
            if member.is_player:
                return member
        raise LookupError("party has no player character")

    @property
    def living_members(self) -> list[PartyMember]:
        """Members with hp above 0, in roster order."""
        return [m for m in self.members if m.is_conscious]

    @property
    def is_wiped(self) -> bool:
        """Whether every member has fallen."""
        return bool(self.members) and not self.living_members

    def get_member(self, member_id: str) -> PartyMember | None:
        """Get a member by id."""
        for member in self.members:
            if member.id == member_id:
                return member
        return None

    def has_member_named(self, name: str) -> bool:
        """Check whether a member with this name is in the party."""
        return any(member.name == name for member in self.members)

    def add_member(self, member: PartyMember) -> None:
        """Add a member with neutral relationships toward everyone.

        Existing members gain a neutral entry for the newcomer, so the
        relationship map stays symmetric. The newcomer joins the end of
        the formation.
        """
        if self.get_member(member.id) is not None:
            raise ValueError(f"member id {member.id!r} already in party")
        for existing in self.members:
            existing.relationships[member.id] = NEUTRAL_RELATIONSHIP
            member.relationships[existing.id] = NEUTRAL_RELATIONSHIP
        self.members.append(member)
        self.formation.append(member.id)

    def remove_member(self, member_id: str) -> PartyMember | None:
        """Remove a member and every relationship pointing at them."""
        member = self.get_member(member_id)
        if member is None:
            return None
        self.members.remove(member)
        self.formation = [fid for fid in self.formation if fid != member_id]
        for other in self.members:
            other.relationships.pop(member_id, None)
        return member

    def debit_gold(self, amount: int) -> None:
        """Spend shared gold.

        Raises:
            InsufficientGoldError: If the party holds less than amount.
                Gold is left unchanged.
        """
        if amount > self.shared_gold:
            raise InsufficientGoldError(
                "The party lacks the gold",
                required=amount,
                available=self.shared_gold,
            )
        self.shared_gold = self.shared_gold - amount

    def adjust_morale(self, delta: int) -> None:
        """Change morale, clamped to 0-100."""
        self.morale = max(0, min(100, self.morale + delta))

    def carries_shared(self, item: Item) -> bool:
        """Check whether this exact item instance is in the shared inventory."""
        return contains_item(self.shared_inventory, item)

    def remove_shared_item(self, item: Item) -> bool:
        """Remove this exact item instance from the shared inventory."""
        return remove_item(self.shared_inventory, item)


__all__ = [
    "AbilityScore",
    "calculate_modifier",
    "StatBlock",
    "PartyMember",
    "Party",
]
