"""Narrator used when no text-generation service is configured."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dungeon_crawler.narration.base import CombatOutcome, NarrationResult, RoomDescription


if TYPE_CHECKING:
    from dungeon_crawler.models.dungeon import Enemy, NarratorMemory, Room
    from dungeon_crawler.models.party import PartyMember


UNAVAILABLE = "narrator unavailable"


class OfflineNarrator:
    """A narrator that always fails, so every call site takes its fallback."""

    def describe_room(
        self,
        room: Room,
        character: PartyMember,
        memory: NarratorMemory | None = None,
    ) -> NarrationResult[RoomDescription]:
        return NarrationResult.failure(UNAVAILABLE)

    def narrate_combat(
        self,
        action: str,
        character: PartyMember,
        enemy: Enemy,
        outcome: CombatOutcome,
    ) -> NarrationResult[str]:
        return NarrationResult.failure(UNAVAILABLE)

    def generate_enemy(
        self,
        room_type: str,
        depth: int,
        character: PartyMember,
    ) -> NarrationResult[Enemy]:
        return NarrationResult.failure(UNAVAILABLE)


__all__ = [
    "UNAVAILABLE",
    "OfflineNarrator",
]
