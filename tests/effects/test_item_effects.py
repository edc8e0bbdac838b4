"""
Tests for effect usage policies, activation and resistances.
"""

import pytest

from questkeeper.core.constants import DamageType
from questkeeper.effects.activation import long_rest_effects, new_day_effects, use_effect
from questkeeper.effects.description_effect import DescriptionEffect
from questkeeper.effects.resistance_effect import (
    ResistanceEffect,
    ResistanceLevel,
    apply_resistances,
    armor_of_invulnerability,
    brooch_of_shielding,
    periapt_of_proof_against_poison,
    ring_of_fire_resistance,
)
from questkeeper.effects.teleport_effect import TeleportEffect, blinkstep_spark
from questkeeper.effects.usage import (
    UsageType,
    add_charges,
    charge_display,
    is_usable,
    set_current_charges,
)


class User:
    name = "Elara"


def test_effect_requires_id_and_name():
    with pytest.raises(ValueError):
        DescriptionEffect(id="", name="Nameless")
    with pytest.raises(ValueError):
        DescriptionEffect(id="x", name=" ")


def test_unlimited_and_passive_effects_never_run_out():
    effect = DescriptionEffect(id="glow", name="Glow", usage_type=UsageType.UNLIMITED)
    assert effect.max_charges == -1
    for _ in range(5):
        assert use_effect(effect, User()).success
    assert effect.current_charges == -1
    assert charge_display(effect) == "Unlimited"


def test_charges_are_spent_and_recharged_partially():
    wand = DescriptionEffect(
        id="wand", name="Wand of Sparks", usage_type=UsageType.CHARGES,
        max_charges=3, recharge_amount=2,
    )
    for _ in range(3):
        assert use_effect(wand, User()).success
    result = use_effect(wand, User())
    assert not result.success
    assert "no charges remaining" in result.message
    long_rest_effects([wand])
    assert wand.current_charges == 2
    long_rest_effects([wand])
    assert wand.current_charges == 3


def test_consumables_are_gone_for_good():
    potion = DescriptionEffect(
        id="potion", name="Potion of Heroism", usage_type=UsageType.CONSUMABLE,
    )
    assert use_effect(potion, User()).success
    assert potion.consumed
    assert not is_usable(potion)
    new_day_effects([potion])
    long_rest_effects([potion])
    add_charges(potion, 1)
    assert not is_usable(potion)


def test_daily_effects_reset_at_dawn():
    omen = DescriptionEffect(id="omen", name="Omen", activation_text="The stars align.")
    result = use_effect(omen, User())
    assert result.message == "The stars align."
    assert result.charges_remaining == 0
    long_rest_effects([omen])
    assert omen.current_charges == 0
    new_day_effects([omen])
    assert omen.current_charges == 1


def test_charge_setters_clamp():
    wand = DescriptionEffect(id="wand", name="Wand", usage_type=UsageType.CHARGES, max_charges=5)
    set_current_charges(wand, 9)
    assert wand.current_charges == 5
    set_current_charges(wand, -2)
    assert wand.current_charges == 0
    add_charges(wand, 2)
    assert wand.current_charges == 2


def test_initial_charges_are_clamped():
    wand = DescriptionEffect(
        id="wand", name="Wand", usage_type=UsageType.CHARGES, max_charges=3, current_charges=10
    )
    assert wand.current_charges == 3


def test_teleport_effect():
    spark = blinkstep_spark()
    assert spark.usage_type == UsageType.LONG_REST
    assert spark.distance_feet == 10
    message = use_effect(spark, User()).message
    assert "Elara vanishes" in message
    assert "10 feet" in message
    assert TeleportEffect(id="hop", name="Hop", distance_feet=1).distance_feet == 5


# ============================================================================
# RESISTANCES
# ============================================================================


def test_resistance_levels_scale_damage():
    assert ResistanceLevel.RESISTANCE.apply(7) == 3
    assert ResistanceLevel.VULNERABILITY.apply(7) == 14
    assert ResistanceLevel.IMMUNITY.apply(7) == 0
    assert ResistanceLevel.NORMAL.apply(7) == 7


def test_apply_resistances():
    effects = [ring_of_fire_resistance(), periapt_of_proof_against_poison()]
    assert apply_resistances(11, DamageType.FIRE, False, effects) == 5
    assert apply_resistances(11, DamageType.POISON, True, effects) == 0
    assert apply_resistances(11, DamageType.COLD, False, effects) == 11
    assert apply_resistances(0, DamageType.FIRE, False, effects) == 0


def test_resistance_and_vulnerability_apply_once_each():
    effects = [
        ring_of_fire_resistance(),
        ResistanceEffect(id="second", name="Second Ring", damage_type=DamageType.FIRE),
        ResistanceEffect(
            id="curse", name="Curse", damage_type=DamageType.FIRE,
            resistance_level=ResistanceLevel.VULNERABILITY,
        ),
    ]
    assert apply_resistances(9, DamageType.FIRE, False, effects) == 8


def test_nonmagical_physical_immunity():
    armor = [armor_of_invulnerability()]
    assert apply_resistances(10, DamageType.SLASHING, False, armor) == 0
    assert apply_resistances(10, DamageType.SLASHING, True, armor) == 10
    assert apply_resistances(10, DamageType.FIRE, False, armor) == 10


def test_resistance_descriptions():
    brooch = brooch_of_shielding()
    assert brooch.is_passive
    ring = ring_of_fire_resistance()
    assert "resistance to Fire damage" in ring.description
    ring.set_resistance(DamageType.COLD, ResistanceLevel.IMMUNITY)
    assert ring.description == "You are immune to Cold damage."
    assert ring.applies_to(DamageType.COLD, False)
