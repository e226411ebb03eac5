"""Narrator prompt templates."""

from __future__ import annotations


# =============================================================================
# System Prompt
# =============================================================================


NARRATOR_SYSTEM_PROMPT = """You are the narrator of a dark fantasy dungeon crawler.
Your tone is {tone}. You favor {focus}.
Never describe game mechanics, dice or numbers unless asked for JSON fields.
When asked for JSON, answer with a single JSON object and nothing else."""


# =============================================================================
# Query Prompts
# =============================================================================


ROOM_PROMPT = """Generate atmospheric descriptions for this room:

Room Type: {room_type}
Depth: {depth}
Character: {name} the {character_class} (Level {level})
Character Tags: {tags}
Recent Events: {recent_events}

Generate two descriptions:
1. A practical room description (2-3 sentences)
2. A symbolic/atmospheric description that reflects the character's journey (1-2 sentences)

Format as JSON: {{"description": "...", "symbolic": "..."}}"""


COMBAT_PROMPT = """Create a vivid combat description:

Action: {action}
Character: {name} the {character_class}
Enemy: {enemy_name}
Result: {result}

Write a single dramatic sentence (15-25 words) describing this combat moment.
Focus on visceral, atmospheric details."""


ENEMY_PROMPT = """Generate a dungeon enemy for this encounter:

Room Type: {room_type}
Depth: {depth}
Character Level: {level}
Character Class: {character_class}

Create an enemy appropriate for this depth and room type. Format as JSON:
{{
  "name": "Enemy Name",
  "hp": number ({hp_low}-{hp_high}),
  "max_hp": number (same as hp),
  "attack": number ({attack_low}-{attack_high}),
  "defense": number ({defense_low}-{defense_high}),
  "xp_reward": number ({xp_low}-{xp_high}),
  "symbolic": "One atmospheric sentence about this creature"
}}"""


def describe_combat_result(hit: bool, damage: int, critical: bool) -> str:
    """Render an attack outcome for the combat prompt."""
    if not hit:
        return "Missed"
    suffix = " (CRITICAL!)" if critical else ""
    return f"Hit for {damage} damage{suffix}"


__all__ = [
    "NARRATOR_SYSTEM_PROMPT",
    "ROOM_PROMPT",
    "COMBAT_PROMPT",
    "ENEMY_PROMPT",
    "describe_combat_result",
]
