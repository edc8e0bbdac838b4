"""
Activation and rest-cycle entry points for item effects.
"""

from typing import Any, Iterable

from catchery import log_debug

from .base_effect import BaseItemEffect, EffectResult
from .usage import consume_charge, is_usable, reset_daily, reset_on_long_rest


def use_effect(effect: BaseItemEffect, user: Any, target: Any | None = None) -> EffectResult:
    """
    Activates an effect on behalf of a user.

    Limited effects spend one charge; passive and unlimited effects never do.
    An exhausted effect is reported as an error result and left untouched.

    Args:
        effect (BaseItemEffect): The effect to activate.
        user (Any): The creature using the effect, anything with a `name`.
        target (Any | None): Optional target, only used for the log context.

    Returns:
        EffectResult: The outcome, carrying the activation message.

    """
    if not is_usable(effect):
        return EffectResult.error(
            f"Effect '{effect.name}' cannot be used: no charges remaining",
            effect.id,
        )
    consume_charge(effect)
    message = effect.activation_message(user.name)
    log_debug(
        f"{user.name} used {effect.name}",
        {
            "effect": effect.id,
            "charges": effect.current_charges,
            "target": getattr(target, "name", None),
        },
    )
    return EffectResult(
        success=True,
        message=message,
        effect_id=effect.id,
        charges_remaining=effect.current_charges,
    )


def long_rest_effects(effects: Iterable[BaseItemEffect]) -> None:
    """Sends the long-rest signal to every effect."""
    for effect in effects:
        reset_on_long_rest(effect)


def new_day_effects(effects: Iterable[BaseItemEffect]) -> None:
    """Sends the dawn signal to every effect."""
    for effect in effects:
        reset_daily(effect)
