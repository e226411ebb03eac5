"""Dice rolling and random draws.

Every random decision the engines make goes through a DiceRoller so a
run can be seeded for reproducibility and tests can substitute a scripted
roller. Dice expressions are parsed and rolled with the d20 library.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

import d20

from dungeon_crawler.core.exceptions import DiceRollError
from dungeon_crawler.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DiceExpression:
    """The outcome of rolling a dice expression.

    Attributes:
        expression: The original dice expression string.
        total: The total result of the roll.
        dice: Individual kept dice results.
        modifier: Static modifier applied.
    """

    expression: str
    total: int
    dice: list[int]
    modifier: int


class DiceRoller:
    """Source of every random value in the engine.

    Example:
        >>> roller = DiceRoller(seed=7)
        >>> 1 <= roller.d(20) <= 20
        True
        >>> roller.roll("3d6+3").total >= 6
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible runs. chance,
                choice and randint draw from a private generator built
                from it. The d20 library only draws from the global
                generator, so a seeded roller also seeds that one for d().
        """
        self._seed = seed
        self._rng = random.Random(seed)
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll(self, expression: str) -> DiceExpression:
        """Roll dice according to the given expression.

        Args:
            expression: Dice expression (e.g., '1d20+5', '3d6').

        Returns:
            DiceExpression containing roll results.

        Raises:
            DiceRollError: If the expression is invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(f"Invalid dice expression: {exc}", expression=expression) from exc

        dice_values = self._extract_dice_values(result.expr)
        rolled = DiceExpression(
            expression=expression,
            total=result.total,
            dice=dice_values,
            modifier=result.total - sum(dice_values),
        )
        logger.debug("Dice rolled", expression=expression, total=rolled.total)
        return rolled

    def _extract_dice_values(self, expr: Any) -> list[int]:
        values: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                for die in node.values:
                    if die.kept:
                        values.append(die.number)
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return values

    def d(self, sides: int, count: int = 1) -> int:
        """Roll count dice of the given size and sum them.

        Raises:
            DiceRollError: If sides or count is below 1.
        """
        if sides < 1 or count < 1:
            raise DiceRollError(
                "Dice need at least one side and one die",
                expression=f"{count}d{sides}",
            )
        return self.roll(f"{count}d{sides}").total

    def chance(self, probability: float) -> bool:
        """Bernoulli draw. Probabilities of 1 or more always succeed."""
        return self._rng.random() < probability

    def choice(self, options: Sequence[T]) -> T:
        """Pick one option uniformly."""
        if not options:
            raise DiceRollError("Cannot choose from an empty sequence")
        return self._rng.choice(options)

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high]."""
        return self._rng.randint(low, high)


# Module-level convenience roller
_default_roller: DiceRoller | None = None


def get_default_roller() -> DiceRoller:
    """Get the shared unseeded roller."""
    global _default_roller  # noqa: PLW0603
    if _default_roller is None:
        _default_roller = DiceRoller()
    return _default_roller


def roll(expression: str) -> DiceExpression:
    """Convenience function to roll dice.

    Example:
        >>> result = roll("1d20+5")
        >>> 6 <= result.total <= 25
        True
    """
    return get_default_roller().roll(expression)


__all__ = [
    "DiceExpression",
    "DiceRoller",
    "get_default_roller",
    "roll",
]
