"""
Armor templates supplying the armor and shield bonuses used for AC.
"""

from typing import Any

from pydantic import BaseModel, Field

from questkeeper.core.error_handling import invalid_argument


class Armor(BaseModel):
    """A body armor or a shield."""

    id: str = Field(
        description="Unique identifier of the armor template.",
    )
    name: str = Field(
        description="The name of the armor piece.",
    )
    armor_bonus: int = Field(
        default=0,
        ge=0,
        description="AC bonus granted when worn as body armor.",
    )
    shield_bonus: int = Field(
        default=0,
        ge=0,
        description="AC bonus granted when carried as a shield.",
    )

    def model_post_init(self, _: Any) -> None:
        if not self.id or not self.name:
            raise invalid_argument("Armor id and name cannot be empty", {"id": self.id})
        if self.armor_bonus and self.shield_bonus:
            raise invalid_argument(
                f"Armor '{self.name}' cannot be both armor and shield",
                {"id": self.id},
            )

    @property
    def is_shield(self) -> bool:
        return self.shield_bonus > 0
