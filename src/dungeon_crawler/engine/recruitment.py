"""Hiring companions into the party."""

from __future__ import annotations

from uuid import uuid4

from dungeon_crawler.core.config import GameSettings, get_settings
from dungeon_crawler.core.constants import BASE_HP, RECRUIT_LOYALTY, RECRUIT_MORALE_BONUS
from dungeon_crawler.core.exceptions import RecruitmentError
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.models.content import RecruitableNPC, get_npc
from dungeon_crawler.models.enums import Ability, LogCategory
from dungeon_crawler.models.game_state import GameState
from dungeon_crawler.models.party import PartyMember


logger = get_logger(__name__)


def build_companion(npc: RecruitableNPC) -> PartyMember:
    """Create a level 1 party member from a companion template."""
    max_hp = max(1, BASE_HP + npc.stats.modifier(Ability.CON))
    return PartyMember(
        id=f"npc_{uuid4().hex[:8]}",
        name=npc.name,
        character_class=npc.character_class,
        level=1,
        hp=max_hp,
        max_hp=max_hp,
        stats=npc.stats,
        tags=list(npc.tags),
        traits=list(npc.traits),
        is_player=False,
        loyalty=RECRUIT_LOYALTY,
        combat_ai=npc.combat_ai,
        portrait=npc.portrait,
        backstory=npc.backstory,
    )


def check_recruitment(state: GameState, npc: RecruitableNPC, *, max_party_size: int) -> None:
    """Raise if the companion cannot join right now.

    Raises:
        RecruitmentError: On a full party, a companion already travelling
            with the party, too little reputation, or too little gold.
    """
    party = state.require_party()
    if party.size >= max_party_size:
        raise RecruitmentError(
            f"The party is full ({party.size}/{max_party_size})",
            npc_id=npc.id,
        )
    if party.has_member_named(npc.name):
        raise RecruitmentError(f"{npc.name} already travels with the party", npc_id=npc.id)
    if party.reputation < npc.reputation_requirement:
        raise RecruitmentError(
            f"{npc.name} requires {npc.reputation_requirement} reputation "
            f"(the party has {party.reputation})",
            npc_id=npc.id,
        )
    if party.shared_gold < npc.recruitment_cost:
        raise RecruitmentError(
            f"{npc.name} asks {npc.recruitment_cost} gold (the party has {party.shared_gold})",
            npc_id=npc.id,
            details={"required": npc.recruitment_cost, "available": party.shared_gold},
        )


def recruit(
    state: GameState,
    npc_id: str,
    *,
    settings: GameSettings | None = None,
) -> PartyMember:
    """Hire a companion.

    Args:
        state: The game state.
        npc_id: Companion id or display name.
        settings: Game settings (party size limit).

    Returns:
        The new party member.

    Raises:
        ContentNotFoundError: If no such companion exists.
        RecruitmentError: If the companion cannot join. Nothing changes.
    """
    settings = settings or get_settings().game
    npc = get_npc(npc_id)
    check_recruitment(state, npc, max_party_size=settings.max_party_size)

    party = state.require_party()
    member = build_companion(npc)
    party.debit_gold(npc.recruitment_cost)
    party.add_member(member)
    party.adjust_morale(RECRUIT_MORALE_BONUS)
    member.record_event("Joined the party")

    state.add_log(f"{npc.name} joins the party! (-{npc.recruitment_cost} gold)", LogCategory.SYSTEM)
    state.add_log(npc.backstory, LogCategory.NARRATIVE)
    logger.info("Companion recruited", npc=npc.id, member=member.id, party_size=party.size)
    return member


__all__ = [
    "build_companion",
    "check_recruitment",
    "recruit",
]
