"""
Spell definitions.

A spell is an immutable definition plus a resolution rule. The kinds below
cover the resolution rules the engine supports (attack roll, saving throw,
healing, auto-hit missiles and buffs); concrete spells are built from them
by the factories in `catalog.py`.
"""

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from questkeeper.core.constants import (
    MAX_SPELL_LEVEL,
    SHIELD_AC_BONUS,
    Ability,
    DamageType,
)
from questkeeper.core.dice import Dice, parse_notation, resolve_dice
from questkeeper.core.error_handling import invalid_argument

from .resolution import (
    cantrip_dice_count,
    deal_spell_damage,
    resolve_saving_throw,
    resolve_spell_attack,
    roll_damage_dice,
    validate_target,
)
from .spell_enums import CastingTime, SpellComponent, SpellDuration, SpellSchool
from .spell_result import SpellResult

if TYPE_CHECKING:
    from questkeeper.combat.combatant import Combatant


class CastContext(BaseModel):
    """Everything a spell needs to know about its caster."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    caster: Any = Field(
        description="The creature casting the spell.",
    )
    caster_level: int = Field(
        default=1,
        description="Character level, used for cantrip scaling.",
    )
    spell_attack_bonus: int = Field(
        default=0,
        description="Proficiency plus spellcasting modifier.",
    )
    spell_save_dc: int = Field(
        default=10,
        description="8 plus the spell attack bonus.",
    )
    spellcasting_modifier: int = Field(
        default=0,
        description="Modifier of the spellcasting ability.",
    )


class Spell(BaseModel):
    """
    Base definition shared by every spell kind.

    Range is in feet with 0 for self and 5 for touch. Leveled spells can
    be cast with a higher slot; casting below the spell's level is an error.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="Unique identifier, e.g. 'fire_bolt'.",
    )
    name: str = Field(
        description="Display name of the spell.",
    )
    description: str = Field(
        default="",
        description="Rules text shown on the spell card.",
    )
    level: int = Field(
        default=0,
        description="Spell level, 0 for cantrips.",
    )
    school: SpellSchool = Field(
        default=SpellSchool.EVOCATION,
        description="School of magic.",
    )
    casting_time: CastingTime = Field(
        default=CastingTime.ACTION,
        description="Time needed to cast.",
    )
    range_feet: int = Field(
        default=0,
        description="Range in feet.",
    )
    range_description: str = Field(
        default="Self",
        description="Range as shown to the player.",
    )
    components: frozenset[SpellComponent] = Field(
        default_factory=frozenset,
        description="Verbal, somatic and material components.",
    )
    material: str | None = Field(
        default=None,
        description="Material component text, when M is required.",
    )
    duration: SpellDuration = Field(
        default=SpellDuration.INSTANTANEOUS,
        description="How long the spell lasts.",
    )
    concentration: bool = False
    ritual: bool = False
    can_target_enemy: bool = False
    can_target_ally: bool = False
    requires_attack_roll: bool = False
    save_ability: Ability | None = None
    damage_type: DamageType | None = None

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.id or not self.id.strip():
            raise invalid_argument("Spell id cannot be empty", {"name": self.name})
        if not self.name or not self.name.strip():
            raise invalid_argument("Spell name cannot be empty", {"id": self.id})
        if not 0 <= self.level <= MAX_SPELL_LEVEL:
            raise invalid_argument(
                f"Spell level must be between 0 and {MAX_SPELL_LEVEL}, got {self.level}",
                {"id": self.id},
            )
        if self.range_feet < 0:
            raise invalid_argument("Spell range cannot be negative", {"id": self.id})
        if SpellComponent.MATERIAL in self.components and not self.material:
            raise invalid_argument(
                "Material component requires a description", {"id": self.id}
            )

    # ============================================================================
    # PROPERTIES
    # ============================================================================

    @property
    def is_cantrip(self) -> bool:
        return self.level == 0

    @property
    def allows_saving_throw(self) -> bool:
        return self.save_ability is not None

    @property
    def is_self_range(self) -> bool:
        return self.range_feet == 0

    @property
    def components_string(self) -> str:
        """Returns e.g. 'V, S, M (a pinch of salt)'."""
        parts = []
        if SpellComponent.VERBAL in self.components:
            parts.append("V")
        if SpellComponent.SOMATIC in self.components:
            parts.append("S")
        if SpellComponent.MATERIAL in self.components:
            parts.append(f"M ({self.material})" if self.material else "M")
        return ", ".join(parts)

    @property
    def spell_card(self) -> str:
        if self.is_cantrip:
            header = f"{self.name} ({self.school.display_name} cantrip)"
        else:
            header = f"{self.name} (Level {self.level} {self.school.display_name.lower()})"
        duration = self.duration.display_name
        if self.concentration:
            duration += " (concentration)"
        return (
            f"{header}\n"
            f"Casting Time: {self.casting_time.display_name}\n"
            f"Range: {self.range_description}\n"
            f"Components: {self.components_string}\n"
            f"Duration: {duration}\n\n"
            f"{self.description}"
        )

    # ============================================================================
    # CASTING
    # ============================================================================

    def cast(
        self, context: CastContext, target: "Combatant | None" = None, dice: Dice | None = None
    ) -> SpellResult:
        """Casts the spell at its own level."""
        return self.cast_at_level(context, target, self.level, dice)

    def cast_at_level(
        self,
        context: CastContext,
        target: "Combatant | None",
        slot_level: int,
        dice: Dice | None = None,
    ) -> SpellResult:
        """
        Casts the spell with a slot of the given level.

        Args:
            context (CastContext): The caster's spellcasting numbers.
            target (Combatant | None): The target, if the spell needs one.
            slot_level (int): Slot level, at least the spell's level.
            dice (Dice | None): Dice to roll with.

        Returns:
            SpellResult: The outcome; ERROR for an invalid slot level.

        """
        if slot_level < self.level or slot_level > MAX_SPELL_LEVEL:
            return SpellResult.error(f"Cannot cast {self.name} with a level {slot_level} slot.")
        return self.resolve(context, target, slot_level, resolve_dice(dice))

    def resolve(
        self, context: CastContext, target: "Combatant | None", slot_level: int, dice: Dice
    ) -> SpellResult:
        return SpellResult.success(self.name, f"{context.caster.name} casts {self.name}.")

    def __str__(self) -> str:
        return self.name


class _DamageSpell(Spell):
    """Fields shared by spells that roll damage dice."""

    damage_die: int = Field(
        default=6,
        description="Sides of the damage die.",
    )
    damage_dice_count: int = Field(
        default=1,
        description="Dice rolled at the spell's base level.",
    )
    dice_per_slot_level: int = Field(
        default=1,
        description="Extra dice for each slot level above the base level.",
    )

    def dice_count(self, context: CastContext, slot_level: int) -> int:
        """Cantrips scale with caster level, leveled spells with the slot."""
        if self.is_cantrip:
            return self.damage_dice_count * cantrip_dice_count(context.caster_level)
        return self.damage_dice_count + self.dice_per_slot_level * (slot_level - self.level)


class AttackSpell(_DamageSpell):
    """Spell attack roll; on a hit, damage dice (doubled on a critical)."""

    spell_type: Literal["attack"] = "attack"
    requires_attack_roll: bool = True
    can_target_enemy: bool = True

    def resolve(
        self, context: CastContext, target: "Combatant | None", slot_level: int, dice: Dice
    ) -> SpellResult:
        error = validate_target(self.name, target)
        if error is not None:
            return error
        target_ac = target.armor_class
        hit, critical, total = resolve_spell_attack(context.spell_attack_bonus, target_ac, dice)
        if not hit:
            return SpellResult.miss(self.name, target, total, target_ac)
        rolled = roll_damage_dice(self.dice_count(context, slot_level), self.damage_die, critical, dice)
        damage_type = self.damage_type or DamageType.FORCE
        damage = deal_spell_damage(target, rolled, damage_type)
        return SpellResult.hit(self.name, target, total, target_ac, damage, damage_type, critical)


class SaveSpell(_DamageSpell):
    """Target saves against the caster's DC; full damage on a failure."""

    spell_type: Literal["save"] = "save"
    can_target_enemy: bool = True
    save_ability: Ability | None = Ability.DEXTERITY
    half_on_save: bool = Field(
        default=False,
        description="Whether a successful save still takes half damage.",
    )

    def resolve(
        self, context: CastContext, target: "Combatant | None", slot_level: int, dice: Dice
    ) -> SpellResult:
        error = validate_target(self.name, target)
        if error is not None:
            return error
        ability = self.save_ability or Ability.DEXTERITY
        saved, roll = resolve_saving_throw(target, ability, context.spell_save_dc, dice)
        damage_type = self.damage_type or DamageType.FORCE
        if saved and not self.half_on_save:
            return SpellResult.save_success(
                self.name, target, roll, context.spell_save_dc, 0, damage_type
            )
        rolled = roll_damage_dice(self.dice_count(context, slot_level), self.damage_die, False, dice)
        if saved:
            damage = deal_spell_damage(target, rolled // 2, damage_type)
            return SpellResult.save_success(
                self.name, target, roll, context.spell_save_dc, damage, damage_type
            )
        damage = deal_spell_damage(target, rolled, damage_type)
        return SpellResult.save_failed(
            self.name, target, roll, context.spell_save_dc, damage, damage_type
        )


class HealingSpell(Spell):
    """Heals a living creature, the caster when no target is given."""

    spell_type: Literal["healing"] = "healing"
    can_target_ally: bool = True
    heal_die: int = Field(
        default=8,
        description="Sides of the healing die, one die per slot level.",
    )

    def resolve(
        self, context: CastContext, target: "Combatant | None", slot_level: int, dice: Dice
    ) -> SpellResult:
        target = target if target is not None else context.caster
        if not target.is_alive():
            return SpellResult.error("Cannot heal a dead creature.")
        amount = dice.roll_multiple(max(1, slot_level), self.heal_die)
        amount += max(0, context.spellcasting_modifier)
        return SpellResult.healed(self.name, target, target.heal(amount))


class MissileSpell(Spell):
    """Darts that always hit: base darts at the spell's level, one more per slot level."""

    spell_type: Literal["missile"] = "missile"
    can_target_enemy: bool = True
    damage_type: DamageType | None = DamageType.FORCE
    base_darts: int = Field(
        default=3,
        description="Darts at the spell's base level.",
    )
    dart_damage: str = Field(
        default="1d4+1",
        description="Damage notation of a single dart.",
    )

    def darts(self, slot_level: int) -> int:
        return self.base_darts + (slot_level - self.level)

    def resolve(
        self, context: CastContext, target: "Combatant | None", slot_level: int, dice: Dice
    ) -> SpellResult:
        error = validate_target(self.name, target)
        if error is not None:
            return error
        count, sides, modifier = parse_notation(self.dart_damage)
        darts = self.darts(slot_level)
        rolled = sum(dice.roll_multiple(count, sides) + modifier for _ in range(darts))
        damage_type = self.damage_type or DamageType.FORCE
        damage = deal_spell_damage(target, rolled, damage_type)
        result = SpellResult.hit(self.name, target, 0, target.armor_class, damage, damage_type, False)
        return result.model_copy(
            update={
                "message": (
                    f"{darts} glowing darts of {self.name} strike {target.name} "
                    f"for {damage} {damage_type.display_name.lower()} damage!"
                )
            }
        )


class BuffSpell(Spell):
    """
    Grants a temporary AC bonus to the caster without rolling.

    The bonus lasts until the start of the caster's next turn; the combat
    loop clears it.
    """

    spell_type: Literal["buff"] = "buff"
    ac_bonus: int = Field(
        default=SHIELD_AC_BONUS,
        description="Armor class granted while the spell lasts.",
    )
    effect_text: str = Field(
        default="",
        description="Short description of the benefit.",
    )

    def would_block_attack(self, attack_roll: int, armor_class: int) -> bool:
        """True if an attack that hits `armor_class` would miss with the bonus."""
        return armor_class <= attack_roll < armor_class + self.ac_bonus

    def resolve(
        self, context: CastContext, target: "Combatant | None", slot_level: int, dice: Dice
    ) -> SpellResult:
        recipient = context.caster
        recipient.add_temporary_ac_bonus(self.ac_bonus)
        effect = self.effect_text or f"+{self.ac_bonus} AC until start of next turn"
        return SpellResult.buff(self.name, recipient, effect, self.ac_bonus)


def cast_spell(
    spell: Spell,
    context: CastContext,
    target: "Combatant | None" = None,
    slot_level: int | None = None,
    dice: Dice | None = None,
) -> SpellResult:
    """Casts `spell`, at its own level unless a slot level is given."""
    if slot_level is None:
        return spell.cast(context, target, dice)
    return spell.cast_at_level(context, target, slot_level, dice)
