"""
Shared steps of spell resolution: target validation, attack rolls, saving
throws and damage dice.
"""

from typing import TYPE_CHECKING

from questkeeper.core.constants import Ability, DamageType
from questkeeper.core.dice import Dice, resolve_dice
from questkeeper.effects.resistance_effect import apply_resistances

from .spell_result import SpellResult

if TYPE_CHECKING:
    from questkeeper.combat.combatant import Combatant


def validate_target(spell_name: str, target: "Combatant | None") -> SpellResult | None:
    """
    Checks that a spell that needs a target has a living one.

    Returns:
        SpellResult | None: An ERROR result, or None if the target is fine.

    """
    if target is None:
        return SpellResult.error(f"{spell_name} requires a target.")
    if not target.is_alive():
        return SpellResult.error("Target is already dead.")
    return None


def cantrip_dice_count(caster_level: int) -> int:
    """Cantrip damage dice: 1, then 2 at level 5, 3 at 11 and 4 at 17."""
    if caster_level >= 17:
        return 4
    if caster_level >= 11:
        return 3
    if caster_level >= 5:
        return 2
    return 1


def roll_damage_dice(count: int, sides: int, critical: bool = False, dice: Dice | None = None) -> int:
    """Rolls `count` dice, twice as many on a critical hit."""
    rolls = count * 2 if critical else count
    return resolve_dice(dice).roll_multiple(rolls, sides)


def resolve_spell_attack(
    attack_bonus: int, target_ac: int, dice: Dice | None = None
) -> tuple[bool, bool, int]:
    """
    Makes a spell attack roll.

    A natural 1 always misses and a natural 20 always hits as a critical.

    Args:
        attack_bonus (int): The caster's spell attack bonus.
        target_ac (int): The target's armor class.
        dice (Dice | None): Dice to roll with.

    Returns:
        tuple[bool, bool, int]: Whether it hit, whether it was a critical,
        and the attack total.

    """
    natural = resolve_dice(dice).roll_d20()
    total = natural + attack_bonus
    if natural == 1:
        return False, False, total
    if natural == 20:
        return True, True, total
    return total >= target_ac, False, total


def resolve_saving_throw(
    target: "Combatant", ability: Ability, save_dc: int, dice: Dice | None = None
) -> tuple[bool, int]:
    """
    Rolls the target's saving throw against a spell.

    Characters add only the ability modifier; monsters add their save
    bonus for that ability (+2 unless the stat block says otherwise).

    Returns:
        tuple[bool, int]: Whether the save succeeded (total >= DC) and the total.

    """
    total = resolve_dice(dice).roll_d20() + target.spell_save_modifier(ability)
    return total >= save_dc, total


def deal_spell_damage(target: "Combatant", amount: int, damage_type: DamageType) -> int:
    """
    Applies magical damage through the target's resistances.

    Returns:
        int: The damage after resistances, as reported to the player.

    """
    damage = apply_resistances(amount, damage_type, True, target.damage_modifiers())
    target.take_damage(damage)
    return damage
