"""
Weapon templates read by the attack resolution logic.
"""

from typing import Any

from pydantic import BaseModel, Field

from questkeeper.core.constants import DEFAULT_WEAPON_DICE, DamageType
from questkeeper.core.dice import is_valid_notation
from questkeeper.core.error_handling import invalid_argument


class Weapon(BaseModel):
    """
    A weapon a character can wield.

    Ranged weapons attack with Dexterity, finesse weapons with the better of
    Strength and Dexterity, everything else with Strength.
    """

    id: str = Field(
        description="Unique identifier of the weapon template.",
    )
    name: str = Field(
        description="The name of the weapon.",
    )
    damage_dice: str = Field(
        default=DEFAULT_WEAPON_DICE,
        description="Damage dice notation, e.g. '1d8'.",
    )
    damage_type: DamageType = Field(
        default=DamageType.SLASHING,
        description="The type of damage dealt on a hit.",
    )
    finesse: bool = Field(
        default=False,
        description="Whether the weapon can use Dexterity for attacks.",
    )
    ranged: bool = Field(
        default=False,
        description="Whether the weapon attacks at range, using Dexterity.",
    )
    two_handed: bool = Field(
        default=False,
        description="Whether the weapon needs both hands.",
    )
    magic_bonus: int = Field(
        default=0,
        ge=0,
        description="Bonus to attack and damage rolls, e.g. 1 for a +1 weapon.",
    )

    def model_post_init(self, _: Any) -> None:
        if not self.id or not self.name:
            raise invalid_argument("Weapon id and name cannot be empty", {"id": self.id})
        if not is_valid_notation(self.damage_dice):
            raise invalid_argument(
                f"Invalid damage dice for weapon '{self.name}': {self.damage_dice}",
                {"id": self.id, "damage_dice": self.damage_dice},
            )
        if self.damage_type.is_category:
            raise invalid_argument(
                f"Weapon '{self.name}' needs a concrete damage type",
                {"id": self.id, "damage_type": self.damage_type},
            )

    @property
    def is_magical(self) -> bool:
        return self.magic_bonus > 0

    @property
    def colored_name(self) -> str:
        return self.damage_type.colorize(self.name)
