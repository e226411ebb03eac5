"""Structured diagnostic logging for the dungeon crawler engine.

Engine modules log through structlog with key-value events. This is not
the adventure log the player reads; that lives on GameState and is
written by the engines themselves.

Example:
    >>> from dungeon_crawler.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Room generated", room_id="3_7", has_enemy=True)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from dungeon_crawler.core.config import Settings


# Loggers of the narrator's HTTP stack, which report every request at INFO
NOISY_LOGGERS = ("openai", "httpx", "httpcore")


def _app_stamp(app_name: str, app_version: str) -> Processor:
    """Build a processor that stamps each event with the application."""

    def stamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("version", app_version)
        return event_dict

    return stamp


def _renderer(json_format: bool) -> list[Processor]:
    if json_format:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def configure_logging(
    settings: Settings | None = None,
    *,
    level: str | None = None,
    json_format: bool | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Explicit arguments win over the values in settings.

    Args:
        settings: Application settings; loaded with get_settings() when omitted.
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Emit one JSON object per line instead of console output.

    Example:
        >>> configure_logging(level="DEBUG")
    """
    if settings is None:
        from dungeon_crawler.core.config import get_settings

        settings = get_settings()

    level_name = (level or settings.log_level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    use_json = settings.json_logs if json_format is None else json_format

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _app_stamp(settings.app_name, settings.app_version),
            structlog.processors.StackInfoRenderer(),
            *_renderer(use_json),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=numeric_level,
        stream=sys.stdout,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key-value pairs onto every later log entry of this context.

    Example:
        >>> bind_context(phase="combat", command="attack")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop everything bound with bind_context."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
