"""Narrator selection from settings."""

from __future__ import annotations

from dungeon_crawler.core.config import NarratorSettings, get_settings
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.narration.base import Narrator
from dungeon_crawler.narration.offline import OfflineNarrator
from dungeon_crawler.narration.openai_narrator import OpenAINarrator


logger = get_logger(__name__)


def create_narrator(settings: NarratorSettings | None = None) -> Narrator:
    """Build the narrator the configuration allows.

    Args:
        settings: Narrator settings. Defaults to the application settings.

    Returns:
        An OpenAINarrator when narration is enabled and an API key is
        set, otherwise an OfflineNarrator.
    """
    settings = settings or get_settings().narrator
    if settings.is_available:
        return OpenAINarrator(settings)
    logger.info(
        "Narration offline, using fallback text",
        enabled=settings.enabled,
        has_api_key=settings.api_key is not None,
    )
    return OfflineNarrator()


__all__ = ["create_narrator"]
