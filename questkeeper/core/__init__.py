"""
Core module for the QuestKeeper rules engine.

Contains game constants, the dice primitive, the error taxonomy and the
logging and console helpers shared by every other package.
"""

from .constants import Ability, Behavior, DamageType, NiceEnum, Size, Skill
from .dice import Dice, RollBreakdown, get_dice, resolve_dice, set_dice
from .error_handling import IllegalStateError, InvalidArgumentError, QuestKeeperError

__all__ = [
    "Ability",
    "Behavior",
    "DamageType",
    "Dice",
    "IllegalStateError",
    "InvalidArgumentError",
    "NiceEnum",
    "QuestKeeperError",
    "RollBreakdown",
    "Size",
    "Skill",
    "get_dice",
    "resolve_dice",
    "set_dice",
]
