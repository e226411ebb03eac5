"""Narrator capability interface and result types.

A Narrator turns structured game facts into prose. It is best effort:
every query returns a NarrationResult holding either a value or the
reason it failed, and never raises. Callers build their own fallback
when a result is not ok.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar, runtime_checkable


if TYPE_CHECKING:
    from dungeon_crawler.models.dungeon import Enemy, NarratorMemory, Room
    from dungeon_crawler.models.party import PartyMember


T = TypeVar("T")


@dataclass(frozen=True)
class NarrationResult(Generic[T]):
    """Outcome of one narrator query.

    Attributes:
        value: The produced value, when the query succeeded.
        error: Why the query failed, when it did not.
    """

    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T) -> "NarrationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, reason: str) -> "NarrationResult[T]":
        return cls(error=reason)

    @property
    def ok(self) -> bool:
        """Whether the query produced a value."""
        return self.error is None and self.value is not None

    def value_or(self, default: T) -> T:
        """Get the value, or the given fallback when the query failed."""
        return self.value if self.ok else default


@dataclass(frozen=True)
class RoomDescription:
    """Two-part room text: what is there and what it means."""

    description: str
    symbolic: str


@dataclass(frozen=True)
class CombatOutcome:
    """Mechanical result of an attack, passed to combat narration."""

    hit: bool
    damage: int = 0
    critical: bool = False


@runtime_checkable
class Narrator(Protocol):
    """Text-generation collaborator consulted for flavor."""

    def describe_room(
        self,
        room: Room,
        character: PartyMember,
        memory: NarratorMemory | None = None,
    ) -> NarrationResult[RoomDescription]:
        """Describe a room for the given character."""
        ...

    def narrate_combat(
        self,
        action: str,
        character: PartyMember,
        enemy: Enemy,
        outcome: CombatOutcome,
    ) -> NarrationResult[str]:
        """Write one sentence about an attack."""
        ...

    def generate_enemy(
        self,
        room_type: str,
        depth: int,
        character: PartyMember,
    ) -> NarrationResult[Enemy]:
        """Invent an enemy suited to the room and depth."""
        ...


__all__ = [
    "NarrationResult",
    "RoomDescription",
    "CombatOutcome",
    "Narrator",
]
