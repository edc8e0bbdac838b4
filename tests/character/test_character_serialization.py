"""
Tests for saving and loading characters and monsters.
"""

import json

import pytest

from questkeeper.character.character_class import CharacterClass
from questkeeper.character.character_race import Race
from questkeeper.character.character_serialization import (
    SAVE_FORMAT_VERSION,
    character_from_dict,
    character_to_dict,
    load_character,
    load_monsters,
    monster_from_dict,
    monster_to_dict,
    save_character,
)
from questkeeper.character.main import Character
from questkeeper.core.constants import Ability, Behavior, DamageType, Size, Skill
from questkeeper.core.error_handling import InvalidArgumentError
from questkeeper.effects.resistance_effect import ring_of_fire_resistance
from questkeeper.effects.teleport_effect import blinkstep_spark
from questkeeper.features.fighter import ACTION_SURGE_ID, SECOND_WIND_ID
from questkeeper.items.magic_item import MagicItem
from questkeeper.items.weapon import Weapon


@pytest.fixture
def adventurer():
    """A level 3 Half-Elf Wizard who has been through a fight."""
    character = Character(
        name="Elara",
        race=Race.HALF_ELF,
        character_class=CharacterClass.WIZARD,
        scores={Ability.DEXTERITY: 14, Ability.CONSTITUTION: 13, Ability.INTELLIGENCE: 16},
        level=3,
    )
    character.set_half_elf_bonus_abilities(Ability.CONSTITUTION, Ability.INTELLIGENCE)
    character.stats.add_skill_proficiency(Skill.ARCANA)
    character.equip_weapon(Weapon(id="dagger", name="Dagger", damage_dice="1d4", finesse=True))
    character.attune(
        MagicItem(
            id="spark", name="Blinkstep Spark", requires_attunement=True, effects=[blinkstep_spark()]
        )
    )
    character.attuned_items[0].effects[0].current_charges = 0
    character.set_experience_points(1000)
    character.take_damage(4)
    character.set_temporary_hit_points(3)
    character.set_available_hit_dice(1)
    character.spellbook.add_known_spell("burning_hands")
    character.spellbook.cast("shield")
    return character


def test_record_shape(adventurer):
    record = character_to_dict(adventurer)
    assert record["version"] == SAVE_FORMAT_VERSION
    assert record["race"] == "HALF_ELF"
    assert record["class"] == "WIZARD"
    assert record["ability_scores"]["INTELLIGENCE"] == 16
    assert record["half_elf_bonus"] == ["CONSTITUTION", "INTELLIGENCE"]
    assert record["spellbook"]["slots"][:2] == [3, 2]
    assert record["spellbook"]["prepared"] == ["magic_missile", "shield"]
    json.dumps(record)


def test_round_trip_restores_the_character(adventurer):
    restored = character_from_dict(json.loads(json.dumps(character_to_dict(adventurer))))
    assert restored.name == "Elara"
    assert restored.race == Race.HALF_ELF
    assert restored.level == 3
    assert restored.experience_points == 1000
    assert restored.ability_score(Ability.INTELLIGENCE) == adventurer.ability_score(Ability.INTELLIGENCE)
    assert restored.skill_modifier(Skill.ARCANA) == adventurer.skill_modifier(Skill.ARCANA)
    assert restored.max_hit_points == adventurer.max_hit_points
    assert restored.current_hit_points == adventurer.current_hit_points
    assert restored.temporary_hit_points == 3
    assert restored.available_hit_dice == 1
    assert restored.equipped_weapon == adventurer.equipped_weapon
    assert restored.attuned_items[0].attuned_to == "Elara"
    assert restored.attuned_items[0].effects[0].current_charges == 0
    assert restored.spellbook.known_spell_ids == adventurer.spellbook.known_spell_ids
    assert restored.spellbook.prepared_spell_ids == adventurer.spellbook.prepared_spell_ids
    assert restored.spellbook.slots.current_slots == adventurer.spellbook.slots.current_slots


def test_tolerant_loading_corrects_bad_fields():
    character = character_from_dict(
        {
            "name": "Bob",
            "race": "half-elf",
            "class": "wizard",
            "level": 99,
            "experience_points": -5,
            "ability_scores": {"STR": 30, "DEX": "high", "LUCK": 5},
            "skill_proficiencies": ["arcana", "juggling"],
            "armor_bonus": "heavy",
            "spellbook": "nope",
        }
    )
    assert character.race == Race.HALF_ELF
    assert character.level == 20
    assert character.experience_points == 0
    assert character.stats.base_score(Ability.STRENGTH) == 20
    assert character.stats.base_score(Ability.DEXTERITY) == 10
    assert Skill.ARCANA in character.stats.proficient_skills
    assert character.armor_bonus == 0
    assert character.current_hit_points == character.max_hit_points
    assert "fire_bolt" in character.spellbook.cantrip_ids


def test_spent_feature_uses_survive_a_save():
    fighter = Character("Thorin", Race.DWARF, CharacterClass.FIGHTER, level=2)
    fighter.use_feature(ACTION_SURGE_ID)
    record = character_to_dict(fighter)
    assert record["feature_uses"] == {SECOND_WIND_ID: 1, ACTION_SURGE_ID: 0}

    restored = character_from_dict(json.loads(json.dumps(record)))
    assert not restored.can_use_feature(ACTION_SURGE_ID)
    assert restored.can_use_feature(SECOND_WIND_ID)


@pytest.mark.parametrize(
    "feature_uses, surges",
    [("spent", 1), (None, 1), ({"action_surge": -3, "second_wind": True}, 0)],
)
def test_bad_feature_uses_are_tolerated(feature_uses, surges):
    record = {"name": "Thorin", "race": "DWARF", "class": "FIGHTER", "level": 2}
    record["feature_uses"] = feature_uses
    fighter = character_from_dict(record)
    assert fighter.can_use_feature(SECOND_WIND_ID)
    assert fighter.get_feature(ACTION_SURGE_ID).current_uses == surges


def test_unknown_race_and_legacy_class_key():
    character = character_from_dict(
        {"name": "Grom", "race": "Orc", "character_class": "CLERIC", "stats": {"WISDOM": 15}}
    )
    assert character.race == Race.HUMAN
    assert character.character_class == CharacterClass.CLERIC
    assert character.stats.base_score(Ability.WISDOM) == 15


def test_unknown_spells_and_bad_items_are_skipped():
    character = character_from_dict(
        {
            "name": "Mira",
            "class": "SORCERER",
            "equipped_weapon": {"id": "bad", "name": "Bad", "damage_dice": "lots"},
            "attuned_items": ["ring", {"id": "", "name": "Nameless"}],
            "spellbook": {"known": ["magic_missile", "wish"], "cantrips": ["prestidigitation"]},
        }
    )
    assert character.equipped_weapon is None
    assert character.attuned_items == []
    assert "wish" not in character.spellbook.known_spell_ids
    assert "prestidigitation" not in character.spellbook.cantrip_ids
    assert character.spellbook.has_spell_ready("magic_missile")


@pytest.mark.parametrize("data", [None, [], {"race": "ELF"}, {"name": "   "}])
def test_unusable_records_raise(data):
    with pytest.raises(InvalidArgumentError):
        character_from_dict(data)


# =============================================================================
# Monsters
# =============================================================================


def test_monster_from_short_keys():
    monster = monster_from_dict(
        {
            "name": "Fire Imp",
            "ac": 12,
            "hit_points": 10,
            "damage": "1d4+1",
            "damage_type": "fire",
            "xp": 75,
            "behavior": "cowardly",
            "size": "tiny",
            "save_bonuses": {"CON": 4, "LUCK": 2},
            "immunities": ["fire", "banana"],
        }
    )
    assert monster.armor_class == 12
    assert monster.max_hit_points == 10
    assert monster.current_hit_points == 10
    assert monster.damage_dice == "1d4+1"
    assert monster.damage_type == DamageType.FIRE
    assert monster.experience_value == 75
    assert monster.behavior == Behavior.COWARDLY
    assert monster.size == Size.TINY
    assert monster.save_bonuses == {Ability.CONSTITUTION: 4}
    assert monster.immunities == [DamageType.FIRE]


def test_monster_round_trip():
    original = monster_from_dict(
        {"name": "Ogre", "armor_class": 11, "max_hit_points": 59, "current_hit_points": 30,
         "resistances": ["COLD"], "save_bonuses": {"STR": 6}}
    )
    restored = monster_from_dict(monster_to_dict(original))
    assert monster_to_dict(restored) == monster_to_dict(original)
    assert restored.current_hit_points == 30


@pytest.mark.parametrize(
    "data",
    [None, {"ac": 12}, {"name": "Blob", "damage_dice": "xyz"}, {"name": ""}],
)
def test_unusable_monster_records_raise(data):
    with pytest.raises(InvalidArgumentError):
        monster_from_dict(data)


# =============================================================================
# Files
# =============================================================================


def test_save_and_load_character(adventurer, tmp_path):
    path = tmp_path / "elara.json"
    save_character(adventurer, path)
    loaded = load_character(path)
    assert loaded is not None
    assert character_to_dict(loaded) == character_to_dict(adventurer)


def test_load_character_failures_return_none(tmp_path):
    assert load_character(tmp_path / "missing.json") is None
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_character(broken) is None
    nameless = tmp_path / "nameless.json"
    nameless.write_text(json.dumps({"race": "ELF"}), encoding="utf-8")
    assert load_character(nameless) is None


def test_load_monsters_skips_bad_records(tmp_path):
    path = tmp_path / "monsters.json"
    path.write_text(
        json.dumps([{"name": "Goblin", "ac": 13, "hit_points": 7}, {"ac": 3}, {"name": "Rat"}]),
        encoding="utf-8",
    )
    monsters = load_monsters(path)
    assert sorted(monsters) == ["Goblin", "Rat"]
    assert monsters["Goblin"].armor_class == 13

    listing = tmp_path / "object.json"
    listing.write_text("{}", encoding="utf-8")
    assert load_monsters(listing) == {}
    assert load_monsters(tmp_path / "missing.json") == {}
