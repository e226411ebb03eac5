"""Custom exception hierarchy for the dungeon crawler engine.

All exceptions inherit from DungeonCrawlerError so callers can handle
every engine failure at a single boundary while keeping the
domain-specific context each subclass records in ``details``.

Example:
    >>> from dungeon_crawler.core.exceptions import InsufficientGoldError
    >>> raise InsufficientGoldError("Not enough gold", required=150, available=100)
"""

from __future__ import annotations

from typing import Any


class DungeonCrawlerError(Exception):
    """Base exception for all dungeon crawler errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(DungeonCrawlerError):
    """Base exception for all game engine errors.

    Raised when a command cannot be applied to the current game state.
    The phase controller turns these into rejected commands.
    """


class InvalidGameStateError(GameEngineError):
    """Raised when a command is issued in a phase that does not allow it."""

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid game state error with state context.

        Args:
            message: Human-readable error description.
            current_state: The current state identifier.
            expected_states: States in which the command would be valid.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_state:
            combined_details["current_state"] = current_state
        if expected_states:
            combined_details["expected_states"] = expected_states
        super().__init__(message, details=combined_details)


class InvalidCommandError(GameEngineError):
    """Raised when a player command is malformed for the current situation.

    Examples are moving toward a wall or using an item nobody carries.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid command error.

        Args:
            message: Human-readable error description.
            command: Name of the rejected command.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if command:
            combined_details["command"] = command
        super().__init__(message, details=combined_details)


class CombatError(GameEngineError):
    """Raised when combat resolution encounters an error."""

    def __init__(
        self,
        message: str,
        *,
        combatant_id: str | None = None,
        round_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize combat error with combat context.

        Args:
            message: Human-readable error description.
            combatant_id: Identifier of the actor involved.
            round_number: Current combat round when the error occurred.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if combatant_id:
            combined_details["combatant_id"] = combatant_id
        if round_number is not None:
            combined_details["round_number"] = round_number
        super().__init__(message, details=combined_details)


class DiceRollError(GameEngineError):
    """Raised when a dice expression cannot be parsed or rolled."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class TurnManagementError(GameEngineError):
    """Raised when the turn scheduler cannot make progress."""


class InsufficientGoldError(GameEngineError):
    """Raised when the party cannot pay for an action."""

    def __init__(
        self,
        message: str,
        *,
        required: int | None = None,
        available: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize insufficient gold error.

        Args:
            message: Human-readable error description.
            required: Gold the action costs.
            available: Gold the party holds.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if required is not None:
            combined_details["required"] = required
        if available is not None:
            combined_details["available"] = available
        super().__init__(message, details=combined_details)


class RecruitmentError(GameEngineError):
    """Raised when a companion refuses or cannot join the party."""

    def __init__(
        self,
        message: str,
        *,
        npc_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize recruitment error.

        Args:
            message: Human-readable error description.
            npc_id: Identifier of the companion involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if npc_id:
            combined_details["npc_id"] = npc_id
        super().__init__(message, details=combined_details)


# =============================================================================
# Narrator Domain Exceptions
# =============================================================================


class NarratorError(DungeonCrawlerError):
    """Base exception for text-generation failures.

    These never escape the narration package; they are converted into
    failed narration results there.
    """

    def __init__(
        self,
        message: str,
        *,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize narrator error with model context.

        Args:
            message: Human-readable error description.
            model: Name of the text-generation model involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if model:
            combined_details["model"] = model
        super().__init__(message, details=combined_details)


class NarratorConnectionError(NarratorError):
    """Raised when the text-generation service cannot be reached."""


class NarratorResponseError(NarratorError):
    """Raised when a narrator response is empty or malformed."""


class NarratorRateLimitError(NarratorError):
    """Raised when the text-generation service rejects a call for rate limits."""


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(DungeonCrawlerError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(DungeonCrawlerError):
    """Raised when player-supplied data fails validation.

    Character names, stat blocks and portraits chosen during creation
    are checked before any state is built from them.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


class ContentNotFoundError(DungeonCrawlerError):
    """Raised when a content table lookup misses."""

    def __init__(
        self,
        message: str,
        *,
        table: str | None = None,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize content lookup error.

        Args:
            message: Human-readable error description.
            table: Name of the content table searched.
            key: The key that was not found.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if table:
            combined_details["table"] = table
        if key:
            combined_details["key"] = key
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "DungeonCrawlerError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "InvalidCommandError",
    "CombatError",
    "DiceRollError",
    "TurnManagementError",
    "InsufficientGoldError",
    "RecruitmentError",
    # Narrator exceptions
    "NarratorError",
    "NarratorConnectionError",
    "NarratorResponseError",
    "NarratorRateLimitError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    "ContentNotFoundError",
]
