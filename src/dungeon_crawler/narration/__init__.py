"""Narration for the dungeon crawler.

The narrator is a best-effort collaborator: it supplies room descriptions,
combat sentences and generated enemies, and every query reports failure
through its result instead of raising.

Submodules:
    base: Narrator protocol and NarrationResult
    prompts: Prompt templates
    openai_narrator: OpenAI-backed narrator
    offline: Always-unavailable narrator
    factory: Narrator selection from settings

Example:
    >>> from dungeon_crawler.narration import OfflineNarrator
    >>> result = OfflineNarrator().generate_enemy("vault", 2, member)
    >>> result.ok
    False
"""

from __future__ import annotations

from dungeon_crawler.narration.base import (
    CombatOutcome,
    NarrationResult,
    Narrator,
    RoomDescription,
)
from dungeon_crawler.narration.factory import create_narrator
from dungeon_crawler.narration.offline import UNAVAILABLE, OfflineNarrator
from dungeon_crawler.narration.openai_narrator import EnemyPayload, OpenAINarrator, RoomPayload


__all__ = [
    "CombatOutcome",
    "NarrationResult",
    "Narrator",
    "RoomDescription",
    "create_narrator",
    "UNAVAILABLE",
    "OfflineNarrator",
    "OpenAINarrator",
    "EnemyPayload",
    "RoomPayload",
]
