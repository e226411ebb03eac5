"""OpenAI-backed narrator.

Each query is a single chat completion with no retry. Transport errors
are mapped onto the NarratorError hierarchy, then turned into failed
NarrationResults before leaving this module. JSON answers are validated
with pydantic, so a malformed payload is a failure like any other.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    OpenAI,
    OpenAIError,
    RateLimitError,
)
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from dungeon_crawler.core.config import NarratorSettings
from dungeon_crawler.core.exceptions import (
    NarratorConnectionError,
    NarratorError,
    NarratorRateLimitError,
    NarratorResponseError,
)
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.models.dungeon import Enemy
from dungeon_crawler.narration.base import CombatOutcome, NarrationResult, RoomDescription
from dungeon_crawler.narration.prompts import (
    COMBAT_PROMPT,
    ENEMY_PROMPT,
    NARRATOR_SYSTEM_PROMPT,
    ROOM_PROMPT,
    describe_combat_result,
)


if TYPE_CHECKING:
    from dungeon_crawler.models.dungeon import NarratorMemory, Room
    from dungeon_crawler.models.party import PartyMember


logger = get_logger(__name__)

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$")


# =============================================================================
# Response Payloads
# =============================================================================


class RoomPayload(BaseModel):
    """Expected JSON shape of a room description."""

    model_config = ConfigDict(extra="ignore")

    description: str = Field(min_length=1)
    symbolic: str = Field(min_length=1)


class EnemyPayload(BaseModel):
    """Expected JSON shape of a generated enemy.

    Every field is optional; gaps are filled from the fallback formula.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    hp: int | None = None
    max_hp: int | None = Field(default=None, validation_alias=AliasChoices("max_hp", "maxHp"))
    attack: int | None = None
    defense: int | None = None
    xp_reward: int | None = Field(
        default=None, validation_alias=AliasChoices("xp_reward", "xpReward")
    )
    symbolic: str | None = None

    def to_enemy(self, depth: int) -> Enemy:
        """Build an enemy, taking fallback values for missing fields."""
        fallback = Enemy.fallback(depth)
        max_hp = self.max_hp if self.max_hp and self.max_hp > 0 else fallback.max_hp
        hp = self.hp if self.hp and self.hp > 0 else max_hp
        return Enemy(
            name=self.name or fallback.name,
            hp=hp,
            max_hp=max(hp, max_hp),
            attack=self.attack if self.attack is not None else fallback.attack,
            defense=self.defense if self.defense is not None else fallback.defense,
            xp_reward=self.xp_reward if self.xp_reward and self.xp_reward > 0 else fallback.xp_reward,
            symbolic=self.symbolic or fallback.symbolic,
            ai_generated=True,
        )


def _strip_fences(text: str) -> str:
    return _FENCE_PATTERN.sub("", text.strip())


# =============================================================================
# Narrator
# =============================================================================


class OpenAINarrator:
    """Narrator backed by an OpenAI-compatible chat completion API.

    Attributes:
        settings: Narrator configuration.
    """

    def __init__(self, settings: NarratorSettings, *, client: Any = None) -> None:
        """Initialize the narrator.

        Args:
            settings: Narrator configuration (model, key, temperatures).
            client: Optional pre-built client.
        """
        self.settings = settings
        self._client = client
        logger.info("OpenAINarrator initialized", model=settings.model)

    def _get_client(self) -> Any:
        """Get or create the OpenAI client."""
        if self._client is None:
            api_key = self.settings.api_key
            self._client = OpenAI(
                api_key=api_key.get_secret_value() if api_key else None,
                base_url=self.settings.base_url,
                timeout=self.settings.timeout_seconds,
                max_retries=0,
            )
        return self._client

    def _system_prompt(self, memory: NarratorMemory | None) -> str:
        if memory is None:
            return NARRATOR_SYSTEM_PROMPT.format(tone="mythic", focus="symbolic meaning")
        return NARRATOR_SYSTEM_PROMPT.format(
            tone=memory.tone,
            focus=", ".join(tag.replace("_", " ") for tag in memory.focus),
        )

    def _complete(
        self,
        prompt: str,
        *,
        temperature: float,
        memory: NarratorMemory | None = None,
        json_mode: bool = False,
    ) -> str:
        """Run one chat completion.

        Returns:
            The stripped response text.

        Raises:
            NarratorError: On any transport or response failure.
        """
        kwargs: dict[str, Any] = {
            "model": self.settings.model,
            "messages": [
                {"role": "system", "content": self._system_prompt(memory)},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
            "max_tokens": self.settings.max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self._get_client().chat.completions.create(**kwargs)
        except RateLimitError as exc:
            raise NarratorRateLimitError(
                "Narrator rate limit exceeded", model=self.settings.model
            ) from exc
        except APITimeoutError as exc:
            raise NarratorConnectionError(
                "Narrator request timed out", model=self.settings.model
            ) from exc
        except APIConnectionError as exc:
            raise NarratorConnectionError(
                f"Failed to connect to narrator: {exc}", model=self.settings.model
            ) from exc
        except APIStatusError as exc:
            raise NarratorError(
                f"Narrator API error: {exc}",
                model=self.settings.model,
                details={"status_code": exc.status_code},
            ) from exc
        except OpenAIError as exc:
            raise NarratorError(f"Narrator client error: {exc}", model=self.settings.model) from exc
        except Exception as exc:
            raise NarratorError(f"Narrator request failed: {exc}", model=self.settings.model) from exc

        try:
            choices = list(response.choices or [])
            text = str(choices[0].message.content or "").strip() if choices else ""
        except (AttributeError, TypeError) as exc:
            raise NarratorResponseError(
                f"Unreadable narrator response: {exc}", model=self.settings.model
            ) from exc
        if not choices:
            raise NarratorResponseError("Narrator returned no choices", model=self.settings.model)
        if not text:
            raise NarratorResponseError("Narrator returned empty text", model=self.settings.model)
        return text

    def describe_room(
        self,
        room: Room,
        character: PartyMember,
        memory: NarratorMemory | None = None,
    ) -> NarrationResult[RoomDescription]:
        recent = memory.recent() if memory is not None else character.story_events[-3:]
        prompt = ROOM_PROMPT.format(
            room_type=room.room_type,
            depth=room.depth,
            name=character.name,
            character_class=character.character_class,
            level=character.level,
            tags=", ".join(character.tags),
            recent_events=", ".join(recent) or "None yet",
        )
        try:
            text = self._complete(
                prompt,
                temperature=self.settings.room_temperature,
                memory=memory,
                json_mode=True,
            )
            payload = RoomPayload.model_validate_json(_strip_fences(text))
        except NarratorError as exc:
            logger.warning("Room narration failed", room_id=room.id, error=str(exc))
            return NarrationResult.failure(str(exc))
        except PydanticValidationError as exc:
            logger.warning("Room narration malformed", room_id=room.id, errors=exc.error_count())
            return NarrationResult.failure(f"malformed room payload: {exc.error_count()} errors")

        return NarrationResult.success(
            RoomDescription(description=payload.description, symbolic=payload.symbolic)
        )

    def narrate_combat(
        self,
        action: str,
        character: PartyMember,
        enemy: Enemy,
        outcome: CombatOutcome,
    ) -> NarrationResult[str]:
        prompt = COMBAT_PROMPT.format(
            action=action,
            name=character.name,
            character_class=character.character_class,
            enemy_name=enemy.name,
            result=describe_combat_result(outcome.hit, outcome.damage, outcome.critical),
        )
        try:
            text = self._complete(prompt, temperature=self.settings.combat_temperature)
        except NarratorError as exc:
            logger.warning("Combat narration failed", actor=character.id, error=str(exc))
            return NarrationResult.failure(str(exc))
        return NarrationResult.success(text)

    def generate_enemy(
        self,
        room_type: str,
        depth: int,
        character: PartyMember,
    ) -> NarrationResult[Enemy]:
        prompt = ENEMY_PROMPT.format(
            room_type=room_type,
            depth=depth,
            level=character.level,
            character_class=character.character_class,
            hp_low=8 + depth * 2,
            hp_high=15 + depth * 2,
            attack_low=2 + depth,
            attack_high=5 + depth,
            defense_low=depth // 2,
            defense_high=3 + depth // 2,
            xp_low=15 + depth * 10,
            xp_high=30 + depth * 10,
        )
        try:
            text = self._complete(
                prompt,
                temperature=self.settings.enemy_temperature,
                json_mode=True,
            )
            payload = EnemyPayload.model_validate_json(_strip_fences(text))
            enemy = payload.to_enemy(depth)
        except NarratorError as exc:
            logger.warning("Enemy generation failed", depth=depth, error=str(exc))
            return NarrationResult.failure(str(exc))
        except PydanticValidationError as exc:
            logger.warning("Enemy payload malformed", depth=depth, errors=exc.error_count())
            return NarrationResult.failure(f"malformed enemy payload: {exc.error_count()} errors")

        logger.debug("Enemy generated", name=enemy.name, depth=depth)
        return NarrationResult.success(enemy)


__all__ = [
    "RoomPayload",
    "EnemyPayload",
    "OpenAINarrator",
]
