"""Combat session models.

A CombatSession tracks one encounter: the enemy, the fixed turn order and
where the scheduler stands in it. CombatTurn is the ephemeral action an
actor submits for a single turn.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dungeon_crawler.core.constants import ENEMY_ACTOR_ID
from dungeon_crawler.models.dungeon import Enemy
from dungeon_crawler.models.enums import CombatAction, CombatState
from dungeon_crawler.models.items import Item


@dataclass
class CombatTurn:
    """An action chosen for one actor's turn.

    Attributes:
        actor_id: Member id, or 'enemy'.
        action: The chosen action.
        target_id: Member id the action is aimed at, if any.
        item: The exact item instance to use, if any.
    """

    actor_id: str
    action: CombatAction
    target_id: str | None = None
    item: Item | None = None


class CombatSession(BaseModel):
    """State of the active encounter.

    Attributes:
        enemy: The enemy being fought.
        room_id: Room the fight takes place in.
        turn_order: Member ids in formation order, then 'enemy'.
        current_index: Position of the actor whose turn it is.
        round_number: Full passes through the order, starting at 1.
        state: Scheduler state.
    """

    model_config = ConfigDict(validate_assignment=True)

    enemy: Enemy
    room_id: str
    turn_order: list[str] = Field(min_length=2)
    current_index: int = Field(default=0, ge=0)
    round_number: int = Field(default=1, ge=1)
    state: CombatState = CombatState.AWAITING_PARTY_TURN

    @model_validator(mode="after")
    def validate_turn_order(self) -> Self:
        if self.turn_order[-1] != ENEMY_ACTOR_ID:
            raise ValueError("turn order must end with the enemy")
        if self.current_index >= len(self.turn_order):
            raise ValueError("current index outside the turn order")
        return self

    @property
    def current_actor_id(self) -> str:
        """Id of the actor whose turn it is."""
        return self.turn_order[self.current_index]

    @property
    def is_enemy_turn(self) -> bool:
        return self.current_actor_id == ENEMY_ACTOR_ID

    @property
    def is_resolved(self) -> bool:
        """Whether the encounter has ended."""
        return self.state.is_resolved

    def advance(self) -> None:
        """Move to the next actor, wrapping to a new round."""
        next_index = (self.current_index + 1) % len(self.turn_order)
        if next_index == 0:
            self.round_number = self.round_number + 1
        self.current_index = next_index
        if not self.state.is_resolved:
            self.state = (
                CombatState.AWAITING_ENEMY_TURN
                if self.is_enemy_turn
                else CombatState.AWAITING_PARTY_TURN
            )


__all__ = [
    "CombatTurn",
    "CombatSession",
]
