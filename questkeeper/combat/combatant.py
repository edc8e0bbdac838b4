"""
The capability shared by everything that takes part in combat.

Combat and spell resolution only talk to combatants through this protocol,
so characters and monsters are interchangeable as attackers and targets.
"""

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from questkeeper.core.constants import Ability, Behavior, DamageType
from questkeeper.core.dice import Dice
from questkeeper.effects.resistance_effect import ResistanceEffect


class AttackProfile(BaseModel):
    """What a combatant's basic attack looks like right now."""

    attack_bonus: int = Field(
        description="Bonus added to the d20 attack roll.",
    )
    damage_dice: str = Field(
        description="Damage notation; a flat value such as '1' has no dice.",
    )
    damage_modifier: int = Field(
        default=0,
        description="Flat damage added on top of the dice, never doubled.",
    )
    damage_type: DamageType = Field(
        default=DamageType.BLUDGEONING,
        description="The type of damage dealt.",
    )
    magical: bool = Field(
        default=False,
        description="Whether the damage counts as magical for resistances.",
    )
    weapon_name: str = Field(
        default="Unarmed Strike",
        description="Name shown in combat messages.",
    )
    critical_threshold: int = Field(
        default=20,
        description="Lowest natural d20 roll that scores a critical hit.",
    )


@runtime_checkable
class Combatant(Protocol):
    """Anything with hit points that can attack and be attacked."""

    name: str

    @property
    def current_hit_points(self) -> int: ...

    @property
    def max_hit_points(self) -> int: ...

    @property
    def armor_class(self) -> int:
        """Armor class including any temporary bonus."""
        ...

    @property
    def initiative_modifier(self) -> int: ...

    def is_alive(self) -> bool: ...

    def is_unconscious(self) -> bool: ...

    def is_bloodied(self) -> bool: ...

    def take_damage(self, amount: int) -> int:
        """Applies untyped damage and returns the hit points actually lost."""
        ...

    def heal(self, amount: int) -> int:
        """Restores hit points up to the maximum and returns the amount restored."""
        ...

    def roll_initiative(self, dice: Dice | None = None) -> int: ...

    def ability_modifier(self, ability: Ability) -> int: ...

    def saving_throw_modifier(self, ability: Ability) -> int: ...

    def spell_save_modifier(self, ability: Ability) -> int:
        """Modifier added to the d20 when resisting a spell with `ability`."""
        ...

    def attack_profile(self) -> AttackProfile: ...

    def damage_modifiers(self) -> list[ResistanceEffect]:
        """Resistance effects that apply to damage this combatant takes."""
        ...

    def add_temporary_ac_bonus(self, bonus: int) -> None: ...

    def clear_temporary_ac_bonus(self) -> None: ...


@runtime_checkable
class PlayerCombatant(Combatant, Protocol):
    """The player side: gains experience from victories."""

    def add_experience(self, amount: int) -> int: ...


@runtime_checkable
class EnemyCombatant(Combatant, Protocol):
    """The hostile side: driven by a behaviour and worth experience."""

    behavior: Behavior
    experience_value: int

    def hp_percentage(self) -> float: ...

    def reset_hit_points(self) -> None: ...
