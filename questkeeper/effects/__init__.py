"""
Item effects for the QuestKeeper rules engine.

Effects share one charge policy (see `usage.py`) and differ only in what
they do once activated: resistances scale incoming damage, teleports move
their user and description effects only report flavour text.
"""

from .activation import long_rest_effects, new_day_effects, use_effect
from .base_effect import BaseItemEffect, EffectResult
from .description_effect import DescriptionEffect
from .effect_serializer import AnyItemEffect, EffectDeserializer, effect_from_dict, effect_to_dict
from .resistance_effect import (
    ResistanceEffect,
    ResistanceLevel,
    apply_resistances,
    armor_of_invulnerability,
    brooch_of_shielding,
    periapt_of_proof_against_poison,
    ring_of_cold_resistance,
    ring_of_fire_resistance,
    ring_of_lightning_resistance,
)
from .teleport_effect import TeleportEffect, blinkstep_spark, misty_step
from .usage import (
    UsageType,
    add_charges,
    charge_display,
    consume_charge,
    is_usable,
    reset_daily,
    reset_on_long_rest,
    set_current_charges,
)

__all__ = [
    "AnyItemEffect",
    "BaseItemEffect",
    "DescriptionEffect",
    "EffectDeserializer",
    "EffectResult",
    "ResistanceEffect",
    "ResistanceLevel",
    "TeleportEffect",
    "UsageType",
    "add_charges",
    "apply_resistances",
    "armor_of_invulnerability",
    "blinkstep_spark",
    "brooch_of_shielding",
    "charge_display",
    "consume_charge",
    "effect_from_dict",
    "effect_to_dict",
    "is_usable",
    "long_rest_effects",
    "misty_step",
    "new_day_effects",
    "periapt_of_proof_against_poison",
    "reset_daily",
    "reset_on_long_rest",
    "ring_of_cold_resistance",
    "ring_of_fire_resistance",
    "ring_of_lightning_resistance",
    "set_current_charges",
    "use_effect",
]
