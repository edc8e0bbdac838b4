"""
Tests for short rests, long rests and the dawn reset.
"""

import pytest

from questkeeper.character.character_class import CharacterClass
from questkeeper.character.character_race import Race
from questkeeper.character.character_rest import (
    RestType,
    long_rest,
    new_day,
    short_rest,
    would_benefit_from_long_rest,
    would_benefit_from_short_rest,
)
from questkeeper.character.main import Character
from questkeeper.core.constants import Ability
from questkeeper.effects.activation import use_effect
from questkeeper.effects.description_effect import DescriptionEffect
from questkeeper.effects.teleport_effect import misty_step
from questkeeper.features import ACTION_SURGE_ID, SECOND_WIND_ID, ActivatedFeature, ResetType
from questkeeper.items.magic_item import MagicItem


@pytest.fixture
def veteran():
    """Level 2 Dwarf Fighter with 22 HP and 2 hit dice."""
    return Character(
        "Thorin",
        Race.DWARF,
        CharacterClass.FIGHTER,
        scores={Ability.STRENGTH: 16, Ability.CONSTITUTION: 14},
        level=2,
    )


def test_short_rest_spends_hit_dice(veteran, scripted):
    veteran.take_damage(15)
    result = short_rest(veteran, 2, scripted(4, 4))
    assert result.type == RestType.SHORT
    assert result.hit_dice_used == 2
    assert result.hp_restored == 14
    assert veteran.current_hit_points == 21
    assert veteran.available_hit_dice == 0
    assert result.was_successful
    assert "Short Rest" in result.message


def test_short_rest_stops_at_full_health(veteran, scripted):
    veteran.take_damage(5)
    result = short_rest(veteran, 2, scripted(10, 10))
    assert result.hit_dice_used == 1
    assert result.hp_restored == 5
    assert veteran.available_hit_dice == 1


def test_short_rest_without_hit_dice(veteran, scripted):
    veteran.take_damage(5)
    veteran.set_available_hit_dice(0)
    result = short_rest(veteran, 3, scripted(10))
    assert result.hit_dice_used == 0
    assert result.hp_restored == 0
    assert not result.was_successful


def test_long_rest_restores_everything(veteran):
    veteran.take_damage(10)
    veteran.set_temporary_hit_points(4)
    veteran.set_available_hit_dice(0)
    result = long_rest(veteran)
    assert result.type == RestType.LONG
    assert veteran.current_hit_points == veteran.max_hit_points
    assert veteran.temporary_hit_points == 0
    assert result.hit_dice_restored == 1
    assert veteran.available_hit_dice == 1
    assert not result.spell_slots_restored
    assert result.was_successful


def test_long_rest_restores_spell_slots(wizard):
    wizard.spellbook.slots.expend_slot(1)
    wizard.spellbook.slots.expend_slot(1)
    assert not wizard.spellbook.slots.has_slot(1)
    result = long_rest(wizard)
    assert result.spell_slots_restored
    assert wizard.spellbook.slots.slots_remaining(1) == 2


def test_only_pact_magic_returns_on_short_rest(wizard):
    warlock = Character("Hex", Race.TIEFLING, CharacterClass.WARLOCK)
    warlock.spellbook.slots.expend_slot(1)
    assert short_rest(warlock, 0).spell_slots_restored
    assert warlock.spellbook.slots.has_slot(1)

    wizard.spellbook.slots.expend_slot(1)
    assert not short_rest(wizard, 0).spell_slots_restored
    assert wizard.spellbook.slots.slots_remaining(1) == 1


def test_short_rest_restores_fighter_features(veteran, scripted):
    veteran.use_feature(SECOND_WIND_ID, scripted(1))
    veteran.use_feature(ACTION_SURGE_ID)
    result = short_rest(veteran, 0)
    assert result.features_restored == ["Second Wind", "Action Surge"]
    assert veteran.can_use_feature(SECOND_WIND_ID)
    assert veteran.can_use_feature(ACTION_SURGE_ID)
    assert result.was_successful
    assert "Second Wind recovered, Action Surge recovered" in result.message


def test_short_rest_leaves_long_rest_features_spent(veteran):
    veteran.features.features.append(
        ActivatedFeature(id="reserve", name="Reserve", reset_type=ResetType.LONG_REST)
    )
    veteran.use_feature("reserve")
    assert short_rest(veteran, 0).features_restored == []
    assert not veteran.can_use_feature("reserve")
    assert long_rest(veteran).features_restored == ["Reserve"]
    assert veteran.can_use_feature("reserve")


def test_long_rest_restores_short_rest_features(veteran, scripted):
    veteran.use_feature(SECOND_WIND_ID, scripted(1))
    assert long_rest(veteran).features_restored == ["Second Wind"]
    assert veteran.get_feature(SECOND_WIND_ID).current_uses == 1


def test_long_rest_recharges_item_effects_but_not_daily_ones(veteran):
    blink = misty_step()
    omen = DescriptionEffect(id="omen", name="Omen", description="You glimpse the future.")
    veteran.attune(MagicItem(id="cloak", name="Cloak of Whispers", effects=[blink, omen]))
    use_effect(blink, veteran)
    use_effect(omen, veteran)
    assert blink.current_charges == 0
    assert omen.current_charges == 0

    long_rest(veteran)
    assert blink.current_charges == 1
    assert omen.current_charges == 0

    new_day(veteran.item_effects())
    assert omen.current_charges == 1


def test_rest_benefit_predicates(veteran):
    assert not would_benefit_from_short_rest(veteran)
    assert not would_benefit_from_long_rest(veteran)
    veteran.take_damage(3)
    assert would_benefit_from_short_rest(veteran)
    veteran.set_available_hit_dice(0)
    assert not would_benefit_from_short_rest(veteran)
    assert would_benefit_from_long_rest(veteran)
