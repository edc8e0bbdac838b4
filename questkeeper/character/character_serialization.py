"""
Character and monster serialization.

Records are plain JSON-friendly dictionaries. Loading is tolerant: a field
that is missing, mistyped or written in an older shape is replaced by its
default and a warning is logged, so a damaged save still produces a usable
character.
"""

import json
from pathlib import Path
from typing import Any

from catchery import log_warning
from pydantic import ValidationError

from questkeeper.combat.monster import Monster
from questkeeper.core.constants import (
    MAX_LEVEL,
    MIN_LEVEL,
    Ability,
    Behavior,
    DamageType,
    Size,
    Skill,
)
from questkeeper.core.error_handling import (
    InvalidArgumentError,
    QuestKeeperError,
    coerce_enum,
    ensure_int_in_range,
    ensure_non_negative_int,
    invalid_argument,
)
from questkeeper.core.logging import log_error
from questkeeper.effects.effect_serializer import effect_from_dict
from questkeeper.items.magic_item import MagicItem
from questkeeper.items.weapon import Weapon

from .character_class import CharacterClass
from .character_race import Race
from .main import Character

SAVE_FORMAT_VERSION = 1


# ============================================================================
# CHARACTER -> RECORD
# ============================================================================


def character_to_dict(character: Character) -> dict[str, Any]:
    """
    Serializes a character to a plain record.

    Args:
        character (Character): The character to serialize.

    Returns:
        dict[str, Any]: A record accepted by `character_from_dict`.

    """
    stats = character.stats
    spellbook = character.spellbook
    return {
        "version": SAVE_FORMAT_VERSION,
        "name": character.name,
        "race": character.race.name,
        "class": character.character_class.name,
        "level": character.level,
        "experience_points": character.experience_points,
        "ability_scores": {a.name: stats.base_score(a) for a in Ability},
        "half_elf_bonus": sorted(a.name for a in stats.half_elf_bonus),
        "skill_proficiencies": sorted(s.name for s in stats.proficient_skills),
        "expertise": sorted(s.name for s in stats.expertise_skills),
        "current_hit_points": character.current_hit_points,
        "temporary_hit_points": character.temporary_hit_points,
        "available_hit_dice": character.available_hit_dice,
        "armor_bonus": character.armor_bonus,
        "shield_bonus": character.shield_bonus,
        "equipped_weapon": (
            character.equipped_weapon.model_dump(mode="json")
            if character.equipped_weapon is not None
            else None
        ),
        "attuned_items": [item.model_dump(mode="json") for item in character.attuned_items],
        "spellbook": {
            "cantrips": sorted(spellbook.cantrip_ids),
            "known": sorted(spellbook.known_spell_ids),
            "prepared": sorted(spellbook.prepared_spell_ids),
            "slots": spellbook.slots.current_slots if spellbook.slots is not None else [],
        },
        "feature_uses": character.features.remaining_uses(),
    }


# ============================================================================
# RECORD -> CHARACTER
# ============================================================================


def character_from_dict(data: dict[str, Any]) -> Character:
    """
    Creates a Character from a record produced by `character_to_dict`.

    Only the name is mandatory. Unknown races and classes fall back to
    Human and Fighter; everything else falls back to the value a fresh
    character would have.

    Args:
        data (dict[str, Any]): The character record.

    Returns:
        Character: The restored character.

    Raises:
        InvalidArgumentError: If the record is not a dict or has no name.

    """
    if not isinstance(data, dict):
        raise invalid_argument(
            f"Character data must be an object, got {type(data).__name__}"
        )
    name = data.get("name")
    context = {"name": name, "context": "character_from_dict"}

    race = coerce_enum(data.get("race"), Race, "race", Race.HUMAN, context)
    # Older saves used "character_class".
    class_value = data.get("class", data.get("character_class"))
    character_class = coerce_enum(
        class_value, CharacterClass, "class", CharacterClass.FIGHTER, context
    )
    level = ensure_int_in_range(
        data.get("level", MIN_LEVEL), "level", MIN_LEVEL, MAX_LEVEL, MIN_LEVEL, context
    )

    character = Character(
        name=name,
        race=race,
        character_class=character_class,
        scores=_load_scores(data.get("ability_scores", data.get("stats")), context),
        level=level,
    )
    character.set_experience_points(
        ensure_non_negative_int(data.get("experience_points", 0), "experience_points", 0, context)
    )

    _load_half_elf_bonus(character, data.get("half_elf_bonus"), context)
    _load_skills(character, data, context)
    _load_equipment(character, data, context)

    if "current_hit_points" in data:
        character.set_current_hit_points(
            ensure_non_negative_int(
                data["current_hit_points"],
                "current_hit_points",
                character.max_hit_points,
                context,
            )
        )
    else:
        character.full_heal()
    character.set_temporary_hit_points(
        ensure_non_negative_int(data.get("temporary_hit_points", 0), "temporary_hit_points", 0, context)
    )
    character.set_available_hit_dice(
        ensure_non_negative_int(
            data.get("available_hit_dice", character.level),
            "available_hit_dice",
            character.level,
            context,
        )
    )
    _load_spellbook(character, data.get("spellbook"), context)
    feature_uses = data.get("feature_uses")
    if isinstance(feature_uses, dict):
        character.features.restore_uses(feature_uses)
    elif feature_uses is not None:
        log_warning("feature_uses must be an object, keeping full uses", context)
    return character


def _load_scores(raw: Any, context: dict[str, Any]) -> dict[Ability, int]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        log_warning("ability_scores must be an object, using defaults", context)
        return {}
    scores: dict[Ability, int] = {}
    for key, value in raw.items():
        # Full names or three-letter keys ("STR").
        ability = coerce_enum(key, Ability, "ability_scores", None, context)
        if ability is None:
            continue
        scores[ability] = ensure_int_in_range(value, f"ability_scores.{key}", 1, 20, 10, context)
    return scores


def _load_half_elf_bonus(character: Character, raw: Any, context: dict[str, Any]) -> None:
    if not raw:
        return
    if not isinstance(raw, list) or len(raw) != 2:
        log_warning("half_elf_bonus must list exactly two abilities, ignoring", context)
        return
    first, second = (coerce_enum(v, Ability, "half_elf_bonus", None, context) for v in raw)
    if first is None or second is None:
        return
    try:
        character.set_half_elf_bonus_abilities(first, second)
    except QuestKeeperError as e:
        log_warning(f"Ignoring half_elf_bonus: {e}", context)


def _load_skills(character: Character, data: dict[str, Any], context: dict[str, Any]) -> None:
    for value in data.get("skill_proficiencies", []) or []:
        skill = coerce_enum(value, Skill, "skill_proficiencies", None, context)
        if skill is not None:
            character.stats.add_skill_proficiency(skill)
    for value in data.get("expertise", []) or []:
        skill = coerce_enum(value, Skill, "expertise", None, context)
        if skill is None:
            continue
        try:
            character.stats.add_expertise(skill)
        except QuestKeeperError as e:
            log_warning(f"Ignoring expertise in {skill.display_name}: {e}", context)


def _load_equipment(character: Character, data: dict[str, Any], context: dict[str, Any]) -> None:
    character.set_armor_bonus(
        ensure_non_negative_int(data.get("armor_bonus", 0), "armor_bonus", 0, context)
    )
    character.set_shield_bonus(
        ensure_non_negative_int(data.get("shield_bonus", 0), "shield_bonus", 0, context)
    )

    weapon_data = data.get("equipped_weapon")
    if weapon_data:
        try:
            character.equip_weapon(Weapon.model_validate(weapon_data))
        except (ValidationError, InvalidArgumentError) as e:
            log_warning(f"Skipping invalid equipped weapon: {e}", context)

    for item_data in data.get("attuned_items", []) or []:
        item = _magic_item_from_dict(item_data, context)
        if item is None:
            continue
        try:
            character.attune(item)
        except QuestKeeperError as e:
            log_warning(f"Could not attune {item.name}: {e}", context)


def _magic_item_from_dict(data: Any, context: dict[str, Any]) -> MagicItem | None:
    """Rebuilds an item; effect records keep their remaining charges."""
    if not isinstance(data, dict):
        log_warning("Skipping attuned item that is not an object", context)
        return None
    effects = []
    for record in data.get("effects", []) or []:
        effect = effect_from_dict(record) if isinstance(record, dict) else None
        if effect is not None:
            effects.append(effect)
    fields = {k: v for k, v in data.items() if k not in ("effects", "attuned_to")}
    try:
        return MagicItem(**fields, effects=effects)
    except (ValidationError, InvalidArgumentError, TypeError) as e:
        log_warning(f"Skipping invalid attuned item: {e}", {**context, "item": data.get("id")})
        return None


def _load_spellbook(character: Character, raw: Any, context: dict[str, Any]) -> None:
    if not raw:
        return
    if not isinstance(raw, dict):
        log_warning("spellbook must be an object, keeping class defaults", context)
        return
    spellbook = character.spellbook
    for spell_id in raw.get("cantrips", []) or []:
        if spell_id in spellbook.registry:
            spellbook.add_cantrip(spell_id)
        else:
            log_warning(f"Unknown cantrip '{spell_id}', ignoring", context)
    for spell_id in raw.get("known", []) or []:
        if spell_id in spellbook.registry:
            spellbook.add_known_spell(spell_id)
        else:
            log_warning(f"Unknown spell '{spell_id}', ignoring", context)
    if "prepared" in raw and spellbook.uses_prepared_spells:
        spellbook.prepared_spell_ids.clear()
        for spell_id in raw.get("prepared", []) or []:
            if not spellbook.prepare_spell(spell_id):
                log_warning(f"Cannot prepare '{spell_id}', ignoring", context)
    slots = raw.get("slots")
    if slots and spellbook.slots is not None:
        if isinstance(slots, list):
            spellbook.slots.set_current_slots(
                [ensure_non_negative_int(s, "spell slot", 0, context) for s in slots]
            )
        else:
            log_warning("spellbook.slots must be a list, keeping full slots", context)


# ============================================================================
# MONSTERS
# ============================================================================


def monster_from_dict(data: dict[str, Any]) -> Monster:
    """
    Builds a monster from a content record.

    Accepts both "armor_class" and the short "ac" key, and both
    "hit_points" and "max_hit_points". Damage lists and save bonuses with
    unknown entries keep their valid entries.

    Raises:
        InvalidArgumentError: If the record has no name or the stat block
            is unusable.

    """
    if not isinstance(data, dict):
        raise invalid_argument(f"Monster data must be an object, got {type(data).__name__}")
    name = data.get("name")
    context = {"name": name, "context": "monster_from_dict"}

    damage_dice = data.get("damage_dice", data.get("damage"))
    fields: dict[str, Any] = {
        "name": name,
        "base_armor_class": ensure_non_negative_int(
            data.get("armor_class", data.get("ac", 10)), "armor_class", 10, context
        ),
        "max_hit_points": ensure_int_in_range(
            data.get("max_hit_points", data.get("hit_points", 1)), "max_hit_points", 1, None, 1, context
        ),
        "attack_bonus": _int_or_default(data.get("attack_bonus", 0), "attack_bonus", context),
        "damage_type": coerce_enum(
            data.get("damage_type"), DamageType, "damage_type", DamageType.BLUDGEONING, context
        ),
        "attack_name": str(data.get("attack_name") or "Attack"),
        "dexterity_modifier": _int_or_default(data.get("dexterity_modifier", 0), "dexterity_modifier", context),
        "strength_modifier": _int_or_default(data.get("strength_modifier", 0), "strength_modifier", context),
        "save_bonuses": _load_save_bonuses(data.get("save_bonuses"), context),
        "experience_value": ensure_non_negative_int(
            data.get("experience_value", data.get("xp", 0)), "experience_value", 0, context
        ),
        "behavior": coerce_enum(data.get("behavior"), Behavior, "behavior", Behavior.AGGRESSIVE, context),
        "size": coerce_enum(data.get("size"), Size, "size", Size.MEDIUM, context),
        "special_ability": data.get("special_ability") or None,
        "resistances": _load_damage_types(data.get("resistances"), "resistances", context),
        "immunities": _load_damage_types(data.get("immunities"), "immunities", context),
        "vulnerabilities": _load_damage_types(data.get("vulnerabilities"), "vulnerabilities", context),
    }
    if damage_dice is not None:
        fields["damage_dice"] = str(damage_dice)
    if "current_hit_points" in data:
        fields["current_hit_points"] = _int_or_default(
            data["current_hit_points"], "current_hit_points", context, -1
        )
    try:
        return Monster(**fields)
    except ValidationError as e:
        raise invalid_argument(f"Invalid monster record: {e}", context) from e


def monster_to_dict(monster: Monster) -> dict[str, Any]:
    """Serializes a monster to a record accepted by `monster_from_dict`."""
    record = monster.model_dump(mode="json", exclude={"temporary_ac_bonus", "base_armor_class"})
    record["armor_class"] = monster.base_armor_class
    return record


def _int_or_default(value: Any, param_name: str, context: dict[str, Any], default: int = 0) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    log_warning(f"{param_name} must be an integer, got: {value!r}, using {default}", context)
    return default


def _load_save_bonuses(raw: Any, context: dict[str, Any]) -> dict[Ability, int]:
    if not raw:
        return {}
    if not isinstance(raw, dict):
        log_warning("save_bonuses must be an object, ignoring", context)
        return {}
    bonuses: dict[Ability, int] = {}
    for key, value in raw.items():
        ability = coerce_enum(key, Ability, "save_bonuses", None, context)
        if ability is not None:
            bonuses[ability] = _int_or_default(value, f"save_bonuses.{key}", context, 2)
    return bonuses


def _load_damage_types(raw: Any, param_name: str, context: dict[str, Any]) -> list[DamageType]:
    if not raw:
        return []
    if not isinstance(raw, list):
        log_warning(f"{param_name} must be a list, ignoring", context)
        return []
    types = [coerce_enum(v, DamageType, param_name, None, context) for v in raw]
    return [t for t in types if t is not None]


# ============================================================================
# FILES
# ============================================================================


def save_character(character: Character, file_path: Path | str) -> None:
    """Writes a character to a JSON file, replacing any existing file."""
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(character_to_dict(character), f, indent=2)


def load_character(file_path: Path | str) -> Character | None:
    """
    Loads a character from a JSON file.

    Args:
        file_path (Path | str): The path to the JSON file.

    Returns:
        Character | None: The character, or None if the file cannot be read.

    """
    try:
        with open(file_path, encoding="utf-8") as f:
            return character_from_dict(json.load(f))
    except (FileNotFoundError, json.JSONDecodeError, InvalidArgumentError) as e:
        log_error(
            f"Failed to load character from {file_path}: {e}",
            {"file_path": str(file_path), "context": "character_file_loading"},
        )
        return None


def load_monsters(file_path: Path | str) -> dict[str, Monster]:
    """
    Loads a list of monster records from a JSON file, keyed by name.

    Invalid records are skipped with a warning.
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            records = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        log_error(
            f"Failed to load monsters from {file_path}: {e}",
            {"file_path": str(file_path), "context": "monster_file_loading"},
        )
        return {}
    if not isinstance(records, list):
        log_error(f"Monster data in {file_path} is not a list.", {"file_path": str(file_path)})
        return {}
    monsters: dict[str, Monster] = {}
    for record in records:
        try:
            monster = monster_from_dict(record)
        except InvalidArgumentError as e:
            log_warning(f"Skipping invalid monster record: {e}", {"file_path": str(file_path)})
            continue
        monsters[monster.name] = monster
    return monsters
