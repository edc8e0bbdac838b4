"""
Tests for the character model: ability scores, hit points, experience,
armor class and attacks.
"""

import pytest

from questkeeper.character.character_class import CharacterClass
from questkeeper.character.character_race import Race
from questkeeper.character.main import Character
from questkeeper.core.constants import Ability, DamageType, Skill
from questkeeper.core.error_handling import IllegalStateError, InvalidArgumentError
from questkeeper.effects.resistance_effect import ring_of_fire_resistance
from questkeeper.items.armor import Armor
from questkeeper.items.magic_item import MagicItem
from questkeeper.items.weapon import Weapon


def test_dwarf_fighter_derived_stats(fighter):
    """STR 16, DEX 12, CON 14 +2 racial gives 13 HP, AC 11 and a +5 STR save."""
    assert fighter.ability_score(Ability.CONSTITUTION) == 16
    assert fighter.max_hit_points == 13
    assert fighter.current_hit_points == 13
    assert fighter.armor_class == 11
    assert fighter.proficiency_bonus == 2
    assert fighter.saving_throw_modifier(Ability.STRENGTH) == 5
    assert fighter.saving_throw_modifier(Ability.CONSTITUTION) == 5
    assert fighter.saving_throw_modifier(Ability.DEXTERITY) == 1
    assert fighter.initiative_modifier == 1
    assert fighter.speed == 25


def test_missing_scores_default_to_ten():
    hero = Character("Ana", Race.ELF, CharacterClass.MONK)
    assert hero.stats.base_score(Ability.WISDOM) == 10
    assert hero.ability_score(Ability.DEXTERITY) == 12
    assert hero.speed == 30


def test_human_gets_one_to_everything():
    hero = Character("Tom", Race.HUMAN, CharacterClass.BARD)
    assert all(hero.ability_score(a) == 11 for a in Ability)


def test_scores_are_clamped(fighter):
    fighter.set_ability_score(Ability.STRENGTH, 25)
    assert fighter.stats.base_score(Ability.STRENGTH) == 20
    fighter.set_ability_score(Ability.CONSTITUTION, 20)
    # The racial bonus cannot push the score past 20.
    assert fighter.ability_score(Ability.CONSTITUTION) == 20
    fighter.set_ability_score(Ability.WISDOM, 0)
    assert fighter.ability_score(Ability.WISDOM) == 1


def test_level_is_clamped():
    assert Character("Old", Race.HUMAN, CharacterClass.FIGHTER, level=25).level == 20
    assert Character("New", Race.HUMAN, CharacterClass.FIGHTER, level=0).level == 1


def test_invalid_construction():
    with pytest.raises(InvalidArgumentError):
        Character("", Race.HUMAN, CharacterClass.FIGHTER)
    with pytest.raises(InvalidArgumentError):
        Character("Nobody", "HUMAN", CharacterClass.FIGHTER)


# ============================================================================
# HALF-ELF
# ============================================================================


def test_half_elf_bonus_abilities():
    hero = Character("Lia", Race.HALF_ELF, CharacterClass.BARD)
    hero.set_half_elf_bonus_abilities(Ability.STRENGTH, Ability.CONSTITUTION)
    assert hero.ability_score(Ability.STRENGTH) == 11
    assert hero.ability_score(Ability.CONSTITUTION) == 11
    assert hero.ability_score(Ability.CHARISMA) == 12
    assert hero.ability_score(Ability.DEXTERITY) == 10


def test_half_elf_bonus_rules(fighter):
    hero = Character("Lia", Race.HALF_ELF, CharacterClass.BARD)
    with pytest.raises(InvalidArgumentError):
        hero.set_half_elf_bonus_abilities(Ability.CHARISMA, Ability.STRENGTH)
    with pytest.raises(InvalidArgumentError):
        hero.set_half_elf_bonus_abilities(Ability.STRENGTH, Ability.STRENGTH)
    with pytest.raises(IllegalStateError):
        fighter.set_half_elf_bonus_abilities(Ability.STRENGTH, Ability.DEXTERITY)


def test_half_elf_constitution_bonus_raises_hit_points():
    hero = Character(
        "Lia", Race.HALF_ELF, CharacterClass.FIGHTER, scores={Ability.CONSTITUTION: 13}
    )
    assert hero.max_hit_points == 11
    hero.set_half_elf_bonus_abilities(Ability.CONSTITUTION, Ability.STRENGTH)
    assert hero.max_hit_points == 12


# ============================================================================
# SKILLS
# ============================================================================


def test_skill_modifiers(fighter):
    fighter.stats.add_skill_proficiency(Skill.ATHLETICS)
    assert fighter.skill_modifier(Skill.ATHLETICS) == 5
    assert fighter.skill_modifier(Skill.STEALTH) == 1
    assert fighter.passive_perception == 10


def test_expertise_doubles_proficiency():
    rogue = Character("Vex", Race.HUMAN, CharacterClass.ROGUE, scores={Ability.DEXTERITY: 15})
    rogue.stats.add_skill_proficiency(Skill.STEALTH)
    rogue.stats.add_expertise(Skill.STEALTH)
    assert rogue.skill_modifier(Skill.STEALTH) == 3 + 4
    with pytest.raises(InvalidArgumentError):
        rogue.stats.add_expertise(Skill.ARCANA)


def test_only_rogues_get_expertise(fighter):
    fighter.stats.add_skill_proficiency(Skill.ATHLETICS)
    with pytest.raises(IllegalStateError):
        fighter.stats.add_expertise(Skill.ATHLETICS)


def test_checks_use_the_given_dice(fighter, scripted):
    assert fighter.stats.make_saving_throw_against_dc(Ability.STRENGTH, 15, scripted(10))
    assert not fighter.stats.make_saving_throw_against_dc(Ability.STRENGTH, 15, scripted(9))
    assert fighter.stats.make_ability_check(Ability.DEXTERITY, scripted(7)) == 8


# ============================================================================
# HIT POINTS
# ============================================================================


def test_temporary_hit_points_absorb_damage_first():
    hero = Character(
        "Thorin",
        Race.DWARF,
        CharacterClass.FIGHTER,
        scores={Ability.STRENGTH: 16, Ability.CONSTITUTION: 14},
        level=2,
    )
    hero.set_current_hit_points(20)
    hero.set_temporary_hit_points(5)
    lost = hero.take_damage(8)
    assert lost == 3
    assert hero.temporary_hit_points == 0
    assert hero.current_hit_points == 17


def test_temporary_hit_points_do_not_stack(fighter):
    fighter.set_temporary_hit_points(5)
    fighter.set_temporary_hit_points(3)
    assert fighter.temporary_hit_points == 5
    fighter.set_temporary_hit_points(8)
    assert fighter.temporary_hit_points == 8


def test_heal_is_capped_at_maximum(fighter):
    fighter.take_damage(5)
    assert fighter.heal(100) == 5
    assert fighter.current_hit_points == fighter.max_hit_points
    assert fighter.heal(0) == 0
    assert fighter.heal(-3) == 0


def test_unconscious_at_exactly_zero(fighter):
    fighter.take_damage(12)
    assert fighter.is_alive()
    fighter.take_damage(1)
    assert fighter.current_hit_points == 0
    assert fighter.is_unconscious()
    assert not fighter.is_alive()


def test_overkill_damage_stops_at_zero(fighter):
    assert fighter.take_damage(50) == 13
    assert fighter.current_hit_points == 0
    assert fighter.take_damage(0) == 0


def test_bloodied_at_half(fighter):
    fighter.take_damage(6)
    assert not fighter.is_bloodied()
    fighter.take_damage(1)
    assert fighter.is_bloodied()


def test_constitution_change_recalculates_hit_points(fighter):
    fighter.set_ability_score(Ability.CONSTITUTION, 10)
    assert fighter.max_hit_points == 11
    assert fighter.current_hit_points == 11


def test_typed_damage_goes_through_resistances(fighter):
    ring = MagicItem(
        id="ring", name="Ring of Fire Resistance", requires_attunement=True,
        effects=[ring_of_fire_resistance()],
    )
    fighter.attune(ring)
    assert fighter.take_typed_damage(10, DamageType.FIRE) == 5
    assert fighter.take_typed_damage(3, DamageType.COLD) == 3


# ============================================================================
# HIT DICE
# ============================================================================


def test_hit_die_heals_roll_plus_constitution(fighter, scripted):
    assert fighter.use_hit_die(scripted(6)) == 0
    assert fighter.available_hit_dice == 1
    fighter.take_damage(10)
    assert fighter.use_hit_die(scripted(6)) == 9
    assert fighter.current_hit_points == 12
    assert fighter.available_hit_dice == 0
    assert fighter.use_hit_die(scripted(6)) == -1


def test_restore_hit_dice_regains_half():
    hero = Character("Kara", Race.HUMAN, CharacterClass.FIGHTER, level=5)
    hero.set_available_hit_dice(0)
    assert hero.restore_hit_dice() == 2
    hero.set_available_hit_dice(4)
    assert hero.restore_hit_dice() == 1
    assert hero.available_hit_dice == 5


# ============================================================================
# EXPERIENCE
# ============================================================================


def test_level_up_from_experience(fighter):
    assert fighter.add_experience(300) == 1
    assert fighter.level == 2
    assert fighter.max_hit_points == 22
    assert fighter.current_hit_points == 22
    assert fighter.available_hit_dice == 2


def test_multiple_levels_at_once(fighter):
    assert fighter.add_experience(2700) == 3
    assert fighter.level == 4
    assert fighter.xp_for_next_level == 6500
    assert fighter.add_experience(0) == 0


def test_level_up_keeps_damage(fighter):
    fighter.take_damage(5)
    fighter.add_experience(300)
    assert fighter.current_hit_points == fighter.max_hit_points - 5


def test_level_cap():
    hero = Character("Max", Race.HUMAN, CharacterClass.FIGHTER, level=20)
    assert hero.xp_for_next_level == -1
    assert hero.add_experience(1_000_000) == 0
    assert hero.level == 20


# ============================================================================
# ARMOR CLASS AND ATTACKS
# ============================================================================


def test_armor_class_components(fighter):
    fighter.equip_armor(Armor(id="chain_shirt", name="Chain Shirt", armor_bonus=3))
    fighter.equip_armor(Armor(id="shield", name="Shield", shield_bonus=2))
    assert fighter.armor_class == 16
    fighter.add_temporary_ac_bonus(5)
    assert fighter.armor_class == 21
    fighter.clear_temporary_ac_bonus()
    assert fighter.armor_class == 16


def test_unarmed_attack_profile(fighter):
    profile = fighter.attack_profile()
    assert profile.attack_bonus == 5
    assert profile.damage_dice == "1"
    assert profile.damage_modifier == 3
    assert profile.damage_type == DamageType.BLUDGEONING


def test_weapon_attack_profiles(fighter):
    fighter.equip_weapon(Weapon(id="longsword", name="Longsword", damage_dice="1d8"))
    profile = fighter.attack_profile()
    assert (profile.attack_bonus, profile.damage_dice, profile.damage_modifier) == (5, "1d8", 3)
    assert not profile.magical

    fighter.equip_weapon(
        Weapon(id="bow", name="Longbow", damage_dice="1d8", damage_type=DamageType.PIERCING,
               ranged=True, magic_bonus=1)
    )
    profile = fighter.attack_profile()
    assert profile.attack_bonus == 1 + 2 + 1
    assert profile.damage_modifier == 2
    assert profile.magical


def test_finesse_uses_better_ability(wizard):
    wizard.equip_weapon(
        Weapon(id="dagger", name="Dagger", damage_dice="1d4",
               damage_type=DamageType.PIERCING, finesse=True)
    )
    assert wizard.attack_profile().damage_modifier == 2


def test_attunement_slots(fighter):
    for index in range(3):
        fighter.attune(MagicItem(id=f"item{index}", name=f"Item {index}", requires_attunement=True))
    with pytest.raises(IllegalStateError):
        fighter.attune(MagicItem(id="item3", name="Item 3", requires_attunement=True))
    # Items without attunement do not use a slot.
    fighter.attune(MagicItem(id="plain", name="Plain Item"))
    assert fighter.attunement_slots_used == 3
