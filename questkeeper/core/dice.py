"""
Dice module for the rules engine.

All randomness in the engine flows through Dice.roll(). Tests replace the
module-level instance (or pass their own) to make outcomes deterministic.
"""

import random
import re
from collections import deque
from typing import Any

from catchery import log_debug
from pydantic import BaseModel, Field

from questkeeper.core.constants import DICE_HISTORY_LIMIT
from questkeeper.core.error_handling import invalid_argument

DICE_PATTERN = re.compile(r"^(\d*)d(\d+)([+-]\d+)?$", re.IGNORECASE)

# Reasonable limits for parsed notation.
MAX_DICE_COUNT = 100
MAX_DICE_SIDES = 1000


class RollBreakdown(BaseModel):
    """Class to hold roll breakdown information."""

    notation: str = Field(
        description="The notation that was rolled",
    )
    rolls: list[int] = Field(
        default_factory=list,
        description="List of individual dice rolls",
    )
    modifier: int = Field(
        default=0,
        description="Flat modifier added to the dice",
    )

    @property
    def value(self) -> int:
        """Returns the total roll value."""
        return sum(self.rolls) + self.modifier

    def is_critical(self) -> bool:
        """
        Determines if the roll is a natural 20 on a single d20.
        """
        return len(self.rolls) == 1 and self.rolls[0] == 20

    def is_fumble(self) -> bool:
        """
        Determines if the roll is a natural 1 on a single d20.
        """
        return len(self.rolls) == 1 and self.rolls[0] == 1

    def __str__(self) -> str:
        detail = "+".join(str(r) for r in self.rolls)
        if self.modifier:
            detail += f"{self.modifier:+d}"
        return f"{self.notation} → {detail} = {self.value}"


class Dice:
    """
    Die-rolling primitive backed by random.Random.

    Only roll() touches the random source, so overriding it is enough to
    script every outcome produced by the other helpers.
    """

    def __init__(
        self,
        seed: int | None = None,
        rng: random.Random | None = None,
        history_limit: int = DICE_HISTORY_LIMIT,
    ) -> None:
        """
        Initializes the dice.

        Args:
            seed (int | None): Optional seed for a fresh random source.
            rng (random.Random | None): Random source to use instead of a fresh one.
            history_limit (int): Number of rolls kept in the history.

        """
        self._rng: random.Random = rng if rng is not None else random.Random(seed)
        self._history: deque[int] = deque(maxlen=max(1, history_limit))
        self._last_d20: int = 0

    # ============================================================================
    # PRIMITIVE
    # ============================================================================

    def roll(self, sides: int) -> int:
        """
        Rolls a single die.

        Args:
            sides (int): Number of sides, at least 1.

        Returns:
            int: A uniformly distributed value in [1, sides].

        Raises:
            InvalidArgumentError: If sides is lower than 1.

        """
        if sides < 1:
            raise invalid_argument(f"Die must have at least 1 side, got {sides}", {"sides": sides})
        result = self._rng.randint(1, sides)
        self._history.append(result)
        return result

    # ============================================================================
    # COMPOSITE ROLLS
    # ============================================================================

    def roll_multiple(self, count: int, sides: int) -> int:
        """Rolls `count` dice of `sides` sides and returns their sum."""
        if count < 0:
            raise invalid_argument(f"Dice count cannot be negative, got {count}", {"count": count})
        return sum(self.roll(sides) for _ in range(count))

    def roll_with_modifier(self, sides: int, modifier: int) -> int:
        """Rolls one die and adds a flat modifier."""
        return self.roll(sides) + modifier

    def roll_d20(self) -> int:
        """Rolls a d20 and remembers the natural result."""
        self._last_d20 = self.roll(20)
        return self._last_d20

    def roll_with_advantage(self, modifier: int = 0) -> int:
        """Rolls two d20s, keeps the higher one and adds the modifier."""
        first = self.roll(20)
        second = self.roll(20)
        self._last_d20 = max(first, second)
        return self._last_d20 + modifier

    def roll_with_disadvantage(self, modifier: int = 0) -> int:
        """Rolls two d20s, keeps the lower one and adds the modifier."""
        first = self.roll(20)
        second = self.roll(20)
        self._last_d20 = min(first, second)
        return self._last_d20 + modifier

    def check_against_dc(self, modifier: int, dc: int) -> bool:
        """
        Makes a d20 check.

        Args:
            modifier (int): Modifier added to the d20.
            dc (int): Difficulty class to meet or beat.

        Returns:
            bool: True if d20 + modifier >= dc.

        """
        return self.roll_d20() + modifier >= dc

    # ============================================================================
    # NOTATION
    # ============================================================================

    def describe(self, notation: str) -> RollBreakdown:
        """
        Rolls dice notation such as "2d6+3", "d8" or "4" and keeps every die.

        Args:
            notation (str): The notation to roll.

        Returns:
            RollBreakdown: The individual dice and the modifier.

        Raises:
            InvalidArgumentError: If the notation is malformed.

        """
        count, sides, modifier = parse_notation(notation)
        rolls = [self.roll(sides) for _ in range(count)]
        breakdown = RollBreakdown(notation=notation.strip(), rolls=rolls, modifier=modifier)
        log_debug(f"Rolled {breakdown}", {"notation": notation})
        return breakdown

    def parse(self, notation: str) -> int:
        """Rolls dice notation and returns the total."""
        return self.describe(notation).value

    # ============================================================================
    # HISTORY
    # ============================================================================

    @property
    def history(self) -> list[int]:
        """Returns the remembered rolls, oldest first."""
        return list(self._history)

    @property
    def last_roll(self) -> int:
        """Returns the most recent roll, or 0 if nothing was rolled."""
        return self._history[-1] if self._history else 0

    def was_natural_20(self) -> bool:
        """Returns True if the last d20 check came up 20."""
        return self._last_d20 == 20

    def was_natural_1(self) -> bool:
        """Returns True if the last d20 check came up 1."""
        return self._last_d20 == 1

    def clear_history(self) -> None:
        self._history.clear()
        self._last_d20 = 0


def parse_notation(notation: str) -> tuple[int, int, int]:
    """
    Splits dice notation into (count, sides, modifier).

    A bare integer is returned as zero dice with that modifier.

    Args:
        notation (str): Notation such as "1d8", "2D6+3", "d4-1" or "5".

    Returns:
        tuple[int, int, int]: Number of dice, sides per die and flat modifier.

    Raises:
        InvalidArgumentError: If the notation is malformed or out of bounds.

    """
    if not isinstance(notation, str) or not notation.strip():
        raise invalid_argument("Dice notation cannot be empty", {"notation": notation})
    expr = notation.strip().replace(" ", "")
    if expr.lstrip("-").isdigit():
        return 0, 1, int(expr)
    match = DICE_PATTERN.match(expr)
    if not match:
        raise invalid_argument(f"Invalid dice notation: '{notation}'", {"notation": notation})
    count_str, sides_str, modifier_str = match.groups()
    count = int(count_str) if count_str else 1
    sides = int(sides_str)
    modifier = int(modifier_str) if modifier_str else 0
    context: dict[str, Any] = {"notation": notation, "count": count, "sides": sides}
    if count <= 0 or count > MAX_DICE_COUNT:
        raise invalid_argument(f"Dice count must be between 1 and {MAX_DICE_COUNT}", context)
    if sides <= 0 or sides > MAX_DICE_SIDES:
        raise invalid_argument(f"Dice sides must be between 1 and {MAX_DICE_SIDES}", context)
    return count, sides, modifier


def is_valid_notation(notation: str) -> bool:
    """Returns True if the notation can be rolled."""
    if not isinstance(notation, str) or not notation.strip():
        return False
    expr = notation.strip().replace(" ", "")
    if expr.lstrip("-").isdigit():
        return True
    match = DICE_PATTERN.match(expr)
    if not match:
        return False
    count = int(match.group(1)) if match.group(1) else 1
    sides = int(match.group(2))
    return 0 < count <= MAX_DICE_COUNT and 0 < sides <= MAX_DICE_SIDES


def average_roll(notation: str) -> int:
    """
    Returns the rounded-down average of dice notation.

    Args:
        notation (str): The notation to average.

    Returns:
        int: The average result.

    """
    count, sides, modifier = parse_notation(notation)
    return (count * (sides + 1)) // 2 + modifier


# ---- Module default ----

_default_dice = Dice()


def get_dice() -> Dice:
    """Returns the dice used when a caller does not pass its own."""
    return _default_dice


def set_dice(dice: Dice) -> Dice:
    """
    Replaces the default dice and returns the previous instance.

    Args:
        dice (Dice): The dice to use from now on.

    Returns:
        Dice: The dice that were in place before.

    """
    global _default_dice
    previous = _default_dice
    _default_dice = dice
    return previous


def resolve_dice(dice: Dice | None) -> Dice:
    """Returns the given dice, or the default ones when None."""
    return dice if dice is not None else _default_dice
