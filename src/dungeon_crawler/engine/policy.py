"""Decision policy for computer-controlled allies.

A pure function of the acting member and the party: no dice, no
mutation. The combat engine executes whatever turn it returns.
"""

from __future__ import annotations

from dungeon_crawler.core.constants import (
    BALANCED_DEFEND_THRESHOLD,
    BALANCED_HEAL_THRESHOLD,
    DEFENSIVE_HP_THRESHOLD,
    SUPPORT_HEAL_THRESHOLD,
)
from dungeon_crawler.models.combat import CombatTurn
from dungeon_crawler.models.enums import CombatAction, CombatAIPolicy
from dungeon_crawler.models.party import Party, PartyMember


def _attack(member: PartyMember) -> CombatTurn:
    return CombatTurn(actor_id=member.id, action=CombatAction.ATTACK)


def _defend(member: PartyMember) -> CombatTurn:
    return CombatTurn(actor_id=member.id, action=CombatAction.DEFEND)


def _wounded_member(party: Party, threshold: float) -> PartyMember | None:
    """First member below the hp fraction, in roster order. Fallen members count."""
    for candidate in party.members:
        if candidate.hp_fraction < threshold:
            return candidate
    return None


def _heal_or_none(member: PartyMember, party: Party, threshold: float) -> CombatTurn | None:
    item = member.healing_item
    if item is None:
        return None
    target = _wounded_member(party, threshold)
    if target is None:
        return None
    return CombatTurn(
        actor_id=member.id,
        action=CombatAction.USE_ITEM,
        target_id=target.id,
        item=item,
    )


def decide_ally_action(member: PartyMember, party: Party) -> CombatTurn:
    """Choose an ally's action from its combat policy.

    Args:
        member: The acting ally.
        party: The party, to find wounded companions.

    Returns:
        The turn to execute.
    """
    policy = member.combat_ai

    if policy == CombatAIPolicy.AGGRESSIVE:
        return _attack(member)

    if policy == CombatAIPolicy.DEFENSIVE:
        if member.hp_fraction < DEFENSIVE_HP_THRESHOLD:
            return _defend(member)
        return _attack(member)

    if policy == CombatAIPolicy.SUPPORT:
        return _heal_or_none(member, party, SUPPORT_HEAL_THRESHOLD) or _attack(member)

    # Balanced
    if member.hp_fraction < BALANCED_DEFEND_THRESHOLD:
        return _defend(member)
    return _heal_or_none(member, party, BALANCED_HEAL_THRESHOLD) or _attack(member)


__all__ = ["decide_ally_action"]
