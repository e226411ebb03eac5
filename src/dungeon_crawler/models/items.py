"""Item and status effect models.

Items are immutable value objects copied out of the content tables.
Two potions with the same fields are still two potions, so inventories
remove items by identity and never by equality.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dungeon_crawler.models.enums import ItemType


class Item(BaseModel):
    """An item template or a concrete item instance.

    Attributes:
        name: Display name.
        type: Item category.
        damage: Damage die size for weapons.
        healing: Base hit points restored by consumables.
        value: Gold value.
        effect: Short rules text.
        symbolic: Flavor text.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    type: ItemType
    damage: int | None = Field(default=None, ge=1, description="Damage die size")
    healing: int | None = Field(default=None, ge=1, description="Base healing")
    value: int = Field(default=0, ge=0)
    effect: str = ""
    symbolic: str = ""

    def instance(self) -> "Item":
        """Create a distinct copy of this item.

        Returns:
            A new Item with the same fields.
        """
        return self.model_copy()

    @property
    def is_healing(self) -> bool:
        """Whether using this item restores hit points."""
        return self.type == ItemType.CONSUMABLE and bool(self.healing)


class StatusEffect(BaseModel):
    """A temporary condition on a party member.

    Attributes:
        name: Effect name (e.g., 'Defending').
        duration: Remaining turns.
        effect: Rules or flavor text.
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str
    duration: int = Field(ge=0)
    effect: str = ""


def contains_item(items: list[Item], item: Item) -> bool:
    """Check whether this exact item instance is in the list."""
    return any(candidate is item for candidate in items)


def remove_item(items: list[Item], item: Item) -> bool:
    """Remove this exact item instance from the list.

    Args:
        items: The inventory to modify in place.
        item: The instance to remove.

    Returns:
        True if the instance was found and removed.
    """
    for index, candidate in enumerate(items):
        if candidate is item:
            del items[index]
            return True
    return False


__all__ = [
    "Item",
    "StatusEffect",
    "contains_item",
    "remove_item",
]
