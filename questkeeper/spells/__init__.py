"""
Spell system: immutable spell definitions, shared resolution helpers,
spell slots and the per-character spellbook.
"""

from .catalog import (
    all_spells,
    burning_hands,
    cure_wounds,
    fire_bolt,
    magic_missile,
    sacred_flame,
    shield,
)
from .registry import SpellRegistry
from .resolution import (
    cantrip_dice_count,
    deal_spell_damage,
    resolve_saving_throw,
    resolve_spell_attack,
    roll_damage_dice,
    validate_target,
)
from .spell import (
    AttackSpell,
    BuffSpell,
    CastContext,
    HealingSpell,
    MissileSpell,
    SaveSpell,
    Spell,
    cast_spell,
)
from .spell_enums import CastingTime, SpellComponent, SpellDuration, SpellSchool
from .spell_result import SpellResult, SpellResultType
from .spell_slots import CasterType, SpellSlots, max_slots_for
from .spellbook import Spellbook

__all__ = [
    "AttackSpell",
    "BuffSpell",
    "CastContext",
    "CasterType",
    "CastingTime",
    "HealingSpell",
    "MissileSpell",
    "SaveSpell",
    "Spell",
    "SpellComponent",
    "SpellDuration",
    "SpellRegistry",
    "SpellResult",
    "SpellResultType",
    "SpellSchool",
    "SpellSlots",
    "Spellbook",
    "all_spells",
    "burning_hands",
    "cantrip_dice_count",
    "cast_spell",
    "cure_wounds",
    "deal_spell_damage",
    "fire_bolt",
    "magic_missile",
    "max_slots_for",
    "resolve_saving_throw",
    "resolve_spell_attack",
    "roll_damage_dice",
    "sacred_flame",
    "shield",
    "validate_target",
]
