"""
Resistance effects: damage multipliers granted by magic items.
"""

from typing import Literal

from pydantic import Field

from questkeeper.core.constants import DamageType, NiceEnum

from .base_effect import BaseItemEffect
from .usage import UsageType


class ResistanceLevel(NiceEnum):
    """How strongly a combatant is affected by a damage type."""

    VULNERABILITY = "VULNERABILITY"
    NORMAL = "NORMAL"
    RESISTANCE = "RESISTANCE"
    IMMUNITY = "IMMUNITY"

    @property
    def multiplier(self) -> float:
        return {
            ResistanceLevel.VULNERABILITY: 2.0,
            ResistanceLevel.NORMAL: 1.0,
            ResistanceLevel.RESISTANCE: 0.5,
            ResistanceLevel.IMMUNITY: 0.0,
        }[self]

    def apply(self, damage: int) -> int:
        """Scales damage by this level, rounding down."""
        if self == ResistanceLevel.VULNERABILITY:
            return damage * 2
        if self == ResistanceLevel.RESISTANCE:
            return damage // 2
        if self == ResistanceLevel.IMMUNITY:
            return 0
        return damage


def describe_resistance(damage_type: DamageType, level: ResistanceLevel) -> str:
    name = damage_type.display_name
    return {
        ResistanceLevel.VULNERABILITY: f"You are vulnerable to {name} damage (take double damage).",
        ResistanceLevel.NORMAL: f"You take normal {name} damage.",
        ResistanceLevel.RESISTANCE: f"You have resistance to {name} damage (take half damage).",
        ResistanceLevel.IMMUNITY: f"You are immune to {name} damage.",
    }[level]


class ResistanceEffect(BaseItemEffect):
    """
    Passive effect that scales incoming damage of one type.

    The NONMAGICAL_PHYSICAL category covers bludgeoning, piercing and
    slashing damage from nonmagical sources; ALL covers every type.
    """

    effect_type: Literal["resistance"] = "resistance"
    usage_type: UsageType = UsageType.PASSIVE
    damage_type: DamageType = Field(
        description="The damage type or category this effect covers.",
    )
    resistance_level: ResistanceLevel = Field(
        default=ResistanceLevel.RESISTANCE,
        description="The multiplier applied to matching damage.",
    )
    requires_attunement: bool = Field(
        default=False,
        description="Whether the item must be attuned for the effect to work.",
    )
    only_nonmagical: bool = Field(
        default=False,
        description="If set, magical damage ignores this effect.",
    )

    def model_post_init(self, context) -> None:
        if not self.description:
            self.description = describe_resistance(self.damage_type, self.resistance_level)
        super().model_post_init(context)

    def applies_to(self, damage_type: DamageType, is_magical: bool) -> bool:
        """
        Checks whether this effect covers incoming damage.

        Args:
            damage_type (DamageType): The type of the incoming damage.
            is_magical (bool): Whether the damage comes from a magical source.

        Returns:
            bool: True if calculate_modified_damage should be applied.

        """
        if self.damage_type == DamageType.ALL:
            return not (self.only_nonmagical and is_magical)
        if self.damage_type == DamageType.NONMAGICAL_PHYSICAL:
            return not is_magical and damage_type.is_physical
        if self.only_nonmagical and is_magical:
            return False
        return self.damage_type == damage_type

    def calculate_modified_damage(self, incoming: int, is_magical: bool) -> int:
        """
        Applies the resistance multiplier to incoming damage.

        Args:
            incoming (int): Damage before the effect.
            is_magical (bool): Whether the damage comes from a magical source.

        Returns:
            int: Damage after the effect, rounded down.

        """
        if self.only_nonmagical and is_magical:
            return incoming
        return self.resistance_level.apply(incoming)

    def activation_message(self, user_name: str) -> str:
        return (
            f"{user_name} has {self.resistance_level.display_name.lower()} to "
            f"{self.damage_type.display_name} damage!"
        )

    def set_resistance(self, damage_type: DamageType, level: ResistanceLevel) -> None:
        """Changes what this effect covers and refreshes its description."""
        self.damage_type = damage_type
        self.resistance_level = level
        self.description = describe_resistance(damage_type, level)


def apply_resistances(
    incoming: int,
    damage_type: DamageType,
    is_magical: bool,
    effects: list[ResistanceEffect],
) -> int:
    """
    Runs incoming damage through every matching resistance effect.

    Immunity wins outright, then resistance and vulnerability are applied
    once each regardless of how many effects grant them.

    Args:
        incoming (int): Damage before resistances.
        damage_type (DamageType): Type of the damage.
        is_magical (bool): Whether the source is magical.
        effects (list[ResistanceEffect]): Effects active on the target.

    Returns:
        int: The damage to apply.

    """
    if incoming <= 0:
        return 0
    matching = [e for e in effects if e.applies_to(damage_type, is_magical)]
    levels = {e.resistance_level for e in matching}
    if ResistanceLevel.IMMUNITY in levels:
        return 0
    damage = incoming
    if ResistanceLevel.RESISTANCE in levels:
        damage = ResistanceLevel.RESISTANCE.apply(damage)
    if ResistanceLevel.VULNERABILITY in levels:
        damage = ResistanceLevel.VULNERABILITY.apply(damage)
    return damage


# ==============================================================================
# ITEM EFFECT FACTORIES
# ==============================================================================


def ring_of_fire_resistance() -> ResistanceEffect:
    return ResistanceEffect(
        id="ring_fire_resist_effect",
        name="Fire Resistance",
        damage_type=DamageType.FIRE,
        requires_attunement=True,
    )


def ring_of_cold_resistance() -> ResistanceEffect:
    return ResistanceEffect(
        id="ring_cold_resist_effect",
        name="Cold Resistance",
        damage_type=DamageType.COLD,
        requires_attunement=True,
    )


def ring_of_lightning_resistance() -> ResistanceEffect:
    return ResistanceEffect(
        id="ring_lightning_resist_effect",
        name="Lightning Resistance",
        damage_type=DamageType.LIGHTNING,
        requires_attunement=True,
    )


def periapt_of_proof_against_poison() -> ResistanceEffect:
    return ResistanceEffect(
        id="periapt_poison_effect",
        name="Poison Immunity",
        description="You are immune to poison damage and the poisoned condition.",
        damage_type=DamageType.POISON,
        resistance_level=ResistanceLevel.IMMUNITY,
    )


def armor_of_invulnerability() -> ResistanceEffect:
    return ResistanceEffect(
        id="armor_invuln_effect",
        name="Invulnerability",
        description="You are immune to nonmagical damage.",
        damage_type=DamageType.NONMAGICAL_PHYSICAL,
        resistance_level=ResistanceLevel.IMMUNITY,
        requires_attunement=True,
        only_nonmagical=True,
    )


def brooch_of_shielding() -> ResistanceEffect:
    return ResistanceEffect(
        id="brooch_shielding_force_effect",
        name="Force Resistance",
        description="You have resistance to force damage and are immune to Magic Missile.",
        damage_type=DamageType.FORCE,
    )
