"""
Monster stat blocks.

A monster is a plain stat block as supplied by the content loader. It
implements the combatant capability directly: no ability scores, only the
modifiers and bonuses combat needs.
"""

from typing import Any

from pydantic import BaseModel, Field

from questkeeper.core.constants import (
    DEFAULT_MONSTER_SAVE_BONUS,
    DEFAULT_WEAPON_DICE,
    Ability,
    Behavior,
    DamageType,
    Size,
)
from questkeeper.core.dice import Dice, is_valid_notation, parse_notation, resolve_dice
from questkeeper.core.error_handling import invalid_argument
from questkeeper.effects.resistance_effect import ResistanceEffect, ResistanceLevel

from .combatant import AttackProfile


class Monster(BaseModel):
    """
    A hostile creature.

    `current_hit_points` defaults to the maximum. Saving throws use the
    listed bonus, or a flat +2 for abilities without one.
    """

    name: str = Field(
        description="Display name of the monster.",
    )
    base_armor_class: int = Field(
        default=10,
        description="Armor class before temporary bonuses.",
    )
    max_hit_points: int = Field(
        default=1,
        description="Hit points at full health.",
    )
    current_hit_points: int = Field(
        default=-1,
        description="Current hit points; negative means full.",
    )
    attack_bonus: int = Field(
        default=0,
        description="Bonus added to attack rolls.",
    )
    damage_dice: str = Field(
        default=DEFAULT_WEAPON_DICE,
        description="Damage notation of the monster's attack, e.g. '1d6+2'.",
    )
    damage_type: DamageType = Field(
        default=DamageType.BLUDGEONING,
        description="Damage type of the monster's attack.",
    )
    attack_name: str = Field(
        default="Attack",
        description="Name of the monster's attack.",
    )
    dexterity_modifier: int = 0
    strength_modifier: int = 0
    save_bonuses: dict[Ability, int] = Field(
        default_factory=dict,
        description="Saving throw bonuses by ability.",
    )
    experience_value: int = Field(
        default=0,
        description="Experience awarded when the monster is defeated.",
    )
    behavior: Behavior = Behavior.AGGRESSIVE
    size: Size = Size.MEDIUM
    special_ability: str | None = None
    resistances: list[DamageType] = Field(default_factory=list)
    immunities: list[DamageType] = Field(default_factory=list)
    vulnerabilities: list[DamageType] = Field(default_factory=list)
    temporary_ac_bonus: int = 0

    def model_post_init(self, _: Any) -> None:
        if not self.name or not self.name.strip():
            raise invalid_argument("Monster name cannot be empty")
        if self.max_hit_points < 1:
            raise invalid_argument(
                "Monster max hit points must be positive",
                {"name": self.name, "max_hit_points": self.max_hit_points},
            )
        if not is_valid_notation(self.damage_dice):
            raise invalid_argument(
                f"Invalid damage dice: {self.damage_dice}", {"name": self.name}
            )
        if self.experience_value < 0:
            raise invalid_argument("Experience value cannot be negative", {"name": self.name})
        if self.current_hit_points < 0:
            self.current_hit_points = self.max_hit_points
        self.current_hit_points = min(self.current_hit_points, self.max_hit_points)

    # ============================================================================
    # HIT POINTS
    # ============================================================================

    @property
    def armor_class(self) -> int:
        return self.base_armor_class + self.temporary_ac_bonus

    @property
    def initiative_modifier(self) -> int:
        return self.dexterity_modifier

    def is_alive(self) -> bool:
        return self.current_hit_points > 0

    def is_unconscious(self) -> bool:
        return self.current_hit_points <= 0

    def is_bloodied(self) -> bool:
        return self.current_hit_points <= self.max_hit_points // 2

    def hp_percentage(self) -> float:
        return self.current_hit_points * 100.0 / self.max_hit_points

    def take_damage(self, amount: int) -> int:
        if amount <= 0:
            return 0
        lost = min(amount, self.current_hit_points)
        self.current_hit_points -= lost
        return lost

    def heal(self, amount: int) -> int:
        if amount <= 0 or not self.is_alive():
            return 0
        healed = min(amount, self.max_hit_points - self.current_hit_points)
        self.current_hit_points += healed
        return healed

    def reset_hit_points(self) -> None:
        self.current_hit_points = self.max_hit_points
        self.temporary_ac_bonus = 0

    # ============================================================================
    # MODIFIERS
    # ============================================================================

    def ability_modifier(self, ability: Ability) -> int:
        if ability == Ability.DEXTERITY:
            return self.dexterity_modifier
        if ability == Ability.STRENGTH:
            return self.strength_modifier
        return 0

    def saving_throw_modifier(self, ability: Ability) -> int:
        return self.save_bonuses.get(ability, DEFAULT_MONSTER_SAVE_BONUS)

    def spell_save_modifier(self, ability: Ability) -> int:
        return self.saving_throw_modifier(ability)

    def add_temporary_ac_bonus(self, bonus: int) -> None:
        self.temporary_ac_bonus += bonus

    def clear_temporary_ac_bonus(self) -> None:
        self.temporary_ac_bonus = 0

    def damage_modifiers(self) -> list[ResistanceEffect]:
        """The stat block's resistances, immunities and vulnerabilities as effects."""
        levels = (
            (self.immunities, ResistanceLevel.IMMUNITY),
            (self.resistances, ResistanceLevel.RESISTANCE),
            (self.vulnerabilities, ResistanceLevel.VULNERABILITY),
        )
        return [
            ResistanceEffect(
                id=f"{self.name.lower().replace(' ', '_')}_{level.name.lower()}_{damage_type.name.lower()}",
                name=f"{self.name} {level.display_name}",
                damage_type=damage_type,
                resistance_level=level,
            )
            for types, level in levels
            for damage_type in types
        ]

    # ============================================================================
    # ROLLS
    # ============================================================================

    def roll_initiative(self, dice: Dice | None = None) -> int:
        return resolve_dice(dice).roll_d20() + self.initiative_modifier

    def roll_attack(self, dice: Dice | None = None) -> int:
        return resolve_dice(dice).roll_d20() + self.attack_bonus

    def roll_damage(self, critical: bool = False, dice: Dice | None = None) -> int:
        """Rolls attack damage; a critical doubles the dice, not the modifier."""
        count, sides, modifier = parse_notation(self.damage_dice)
        rolls = count * 2 if critical else count
        return max(0, resolve_dice(dice).roll_multiple(rolls, sides) + modifier)

    def attack_profile(self) -> AttackProfile:
        count, sides, modifier = parse_notation(self.damage_dice)
        dice_part = f"{count}d{sides}" if count > 0 else "0"
        return AttackProfile(
            attack_bonus=self.attack_bonus,
            damage_dice=dice_part,
            damage_modifier=modifier,
            damage_type=self.damage_type,
            weapon_name=self.attack_name,
        )

    def __str__(self) -> str:
        return f"{self.name} (HP: {self.current_hit_points}/{self.max_hit_points}, AC: {self.armor_class})"
