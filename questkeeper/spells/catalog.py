"""
Factories for the spells the engine ships with.
"""

from questkeeper.core.constants import Ability, DamageType

from .spell import (
    AttackSpell,
    BuffSpell,
    HealingSpell,
    MissileSpell,
    SaveSpell,
    Spell,
)
from .spell_enums import CastingTime, SpellComponent, SpellDuration, SpellSchool

_VS = frozenset({SpellComponent.VERBAL, SpellComponent.SOMATIC})


def feet(distance: int) -> tuple[int, str]:
    """Returns the (range_feet, range_description) pair for a ranged spell."""
    return distance, f"{distance} feet"


def touch() -> tuple[int, str]:
    return 5, "Touch"


def self_range() -> tuple[int, str]:
    return 0, "Self"


def fire_bolt() -> AttackSpell:
    range_feet, range_description = feet(120)
    return AttackSpell(
        id="fire_bolt",
        name="Fire Bolt",
        description=(
            "You hurl a mote of fire at a creature or object within range. Make a "
            "ranged spell attack against the target. On a hit, the target takes 1d10 "
            "fire damage.\n\nThe spell's damage increases by 1d10 when you reach 5th "
            "level (2d10), 11th level (3d10), and 17th level (4d10)."
        ),
        level=0,
        school=SpellSchool.EVOCATION,
        range_feet=range_feet,
        range_description=range_description,
        components=_VS,
        damage_type=DamageType.FIRE,
        damage_die=10,
    )


def sacred_flame() -> SaveSpell:
    range_feet, range_description = feet(60)
    return SaveSpell(
        id="sacred_flame",
        name="Sacred Flame",
        description=(
            "Flame-like radiance descends on a creature that you can see within range. "
            "The target must succeed on a Dexterity saving throw or take 1d8 radiant "
            "damage. The target gains no benefit from cover for this saving throw.\n\n"
            "The spell's damage increases by 1d8 when you reach 5th level (2d8), 11th "
            "level (3d8), and 17th level (4d8)."
        ),
        level=0,
        school=SpellSchool.EVOCATION,
        range_feet=range_feet,
        range_description=range_description,
        components=_VS,
        save_ability=Ability.DEXTERITY,
        damage_type=DamageType.RADIANT,
        damage_die=8,
        half_on_save=False,
    )


def burning_hands() -> SaveSpell:
    range_feet, range_description = 15, "Self (15-foot cone)"
    return SaveSpell(
        id="burning_hands",
        name="Burning Hands",
        description=(
            "A thin sheet of flames shoots forth from your outstretched fingertips. "
            "Each creature in a 15-foot cone must make a Dexterity saving throw. A "
            "creature takes 3d6 fire damage on a failed save, or half as much damage "
            "on a successful one.\n\nAt Higher Levels: the damage increases by 1d6 "
            "for each slot level above 1st."
        ),
        level=1,
        school=SpellSchool.EVOCATION,
        range_feet=range_feet,
        range_description=range_description,
        components=_VS,
        save_ability=Ability.DEXTERITY,
        damage_type=DamageType.FIRE,
        damage_die=6,
        damage_dice_count=3,
        dice_per_slot_level=1,
        half_on_save=True,
    )


def cure_wounds() -> HealingSpell:
    range_feet, range_description = touch()
    return HealingSpell(
        id="cure_wounds",
        name="Cure Wounds",
        description=(
            "A creature you touch regains a number of hit points equal to 1d8 + your "
            "spellcasting ability modifier. This spell has no effect on undead or "
            "constructs.\n\nAt Higher Levels: the healing increases by 1d8 for each "
            "slot level above 1st."
        ),
        level=1,
        school=SpellSchool.EVOCATION,
        range_feet=range_feet,
        range_description=range_description,
        components=_VS,
        heal_die=8,
    )


def magic_missile() -> MissileSpell:
    range_feet, range_description = feet(120)
    return MissileSpell(
        id="magic_missile",
        name="Magic Missile",
        description=(
            "You create three glowing darts of magical force. Each dart hits a creature "
            "of your choice that you can see within range. A dart deals 1d4+1 force "
            "damage to its target. The darts all strike simultaneously.\n\nAt Higher "
            "Levels: the spell creates one more dart for each slot level above 1st."
        ),
        level=1,
        school=SpellSchool.EVOCATION,
        range_feet=range_feet,
        range_description=range_description,
        components=_VS,
        base_darts=3,
        dart_damage="1d4+1",
    )


def shield() -> BuffSpell:
    range_feet, range_description = self_range()
    return BuffSpell(
        id="shield",
        name="Shield",
        description=(
            "An invisible barrier of magical force appears and protects you. Until the "
            "start of your next turn, you have a +5 bonus to AC, including against the "
            "triggering attack, and you take no damage from magic missile."
        ),
        level=1,
        school=SpellSchool.ABJURATION,
        casting_time=CastingTime.REACTION,
        range_feet=range_feet,
        range_description=range_description,
        components=_VS,
        duration=SpellDuration.ONE_ROUND,
        can_target_ally=True,
    )


def all_spells() -> list[Spell]:
    """Every spell the engine ships with."""
    return [
        fire_bolt(),
        sacred_flame(),
        burning_hands(),
        cure_wounds(),
        magic_missile(),
        shield(),
    ]
