"""
Usage policies and the shared charge bookkeeping for item effects.

Every effect kind goes through these helpers, so the activation and reset
contract is the same whatever the effect does once it fires.
"""

from typing import TYPE_CHECKING

from questkeeper.core.constants import NiceEnum

if TYPE_CHECKING:
    from .base_effect import BaseItemEffect

UNLIMITED_CHARGES = -1


class UsageType(NiceEnum):
    """How often an effect can be used and what restores it."""

    DAILY = "DAILY"
    LONG_REST = "LONG_REST"
    CHARGES = "CHARGES"
    CONSUMABLE = "CONSUMABLE"
    UNLIMITED = "UNLIMITED"
    PASSIVE = "PASSIVE"

    @property
    def description(self) -> str:
        return {
            UsageType.DAILY: "Resets at dawn",
            UsageType.LONG_REST: "Resets after a long rest",
            UsageType.CHARGES: "Limited charges",
            UsageType.CONSUMABLE: "Destroyed when used",
            UsageType.UNLIMITED: "No usage limit",
            UsageType.PASSIVE: "Always active",
        }[self]

    @property
    def is_limited(self) -> bool:
        """True for policies that track charges."""
        return self not in (UsageType.UNLIMITED, UsageType.PASSIVE)


def initial_charges(usage_type: UsageType, max_charges: int) -> int:
    """
    Normalizes the charge count for a usage policy.

    Args:
        usage_type (UsageType): The usage policy.
        max_charges (int): Requested number of charges.

    Returns:
        int: -1 for unlimited policies, otherwise at least 1.

    """
    if not usage_type.is_limited:
        return UNLIMITED_CHARGES
    return max(1, max_charges)


def is_usable(effect: "BaseItemEffect") -> bool:
    """Returns True if the effect can be activated right now."""
    if effect.consumed:
        return False
    if not effect.usage_type.is_limited:
        return True
    return effect.current_charges > 0


def consume_charge(effect: "BaseItemEffect") -> None:
    """
    Spends one charge, flagging consumables once they are empty.

    Unlimited and passive effects are left untouched.
    """
    if not effect.usage_type.is_limited:
        return
    effect.current_charges = max(0, effect.current_charges - 1)
    if effect.usage_type == UsageType.CONSUMABLE and effect.current_charges <= 0:
        effect.consumed = True


def recharge(effect: "BaseItemEffect") -> None:
    """
    Restores charges, fully or by the effect's recharge amount.

    Consumed consumables never come back.
    """
    if effect.consumed or not effect.usage_type.is_limited:
        return
    if effect.recharge_amount == 0:
        effect.current_charges = effect.max_charges
    else:
        effect.current_charges = min(
            effect.max_charges, effect.current_charges + effect.recharge_amount
        )


def reset_on_long_rest(effect: "BaseItemEffect") -> None:
    """Handles the long-rest signal: LONG_REST and CHARGES effects recharge."""
    if effect.usage_type in (UsageType.LONG_REST, UsageType.CHARGES):
        recharge(effect)


def reset_daily(effect: "BaseItemEffect") -> None:
    """Handles the dawn signal: DAILY effects recharge, and a new day implies a rest."""
    if effect.usage_type == UsageType.DAILY:
        recharge(effect)
    reset_on_long_rest(effect)


def add_charges(effect: "BaseItemEffect", amount: int) -> None:
    """Adds charges up to the maximum."""
    if effect.max_charges > 0 and not effect.consumed:
        effect.current_charges = min(effect.max_charges, effect.current_charges + amount)


def set_current_charges(effect: "BaseItemEffect", charges: int) -> None:
    """Sets the remaining charges, clamped to [0, max]."""
    if effect.max_charges > 0:
        effect.current_charges = max(0, min(effect.max_charges, charges))


def charge_display(effect: "BaseItemEffect") -> str:
    """
    Describes the remaining uses, e.g. "2/3 uses" or "Passive".
    """
    if not effect.usage_type.is_limited:
        return effect.usage_type.display_name
    noun = "use" if effect.max_charges == 1 else "uses"
    return f"{effect.current_charges}/{effect.max_charges} {noun}"
