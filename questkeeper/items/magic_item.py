"""
Magic items: named containers of item effects with attunement.
"""

from typing import Any

from pydantic import BaseModel, Field

from questkeeper.core.constants import NiceEnum
from questkeeper.core.error_handling import invalid_argument
from questkeeper.effects.activation import use_effect
from questkeeper.effects.base_effect import BaseItemEffect, EffectResult
from questkeeper.effects.effect_serializer import AnyItemEffect
from questkeeper.effects.resistance_effect import ResistanceEffect

MAX_ATTUNEMENT_SLOTS = 3


class Rarity(NiceEnum):
    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    VERY_RARE = "VERY_RARE"
    LEGENDARY = "LEGENDARY"

    @property
    def color(self) -> str:
        return {
            Rarity.COMMON: "white",
            Rarity.UNCOMMON: "green",
            Rarity.RARE: "blue",
            Rarity.VERY_RARE: "magenta",
            Rarity.LEGENDARY: "bold yellow",
        }[self]


class MagicItem(BaseModel):
    """
    A magic item carrying one or more effects.

    Effects of an item that requires attunement are only active while the
    item is attuned.
    """

    id: str = Field(
        description="Unique identifier of the item.",
    )
    name: str = Field(
        description="The name of the item.",
    )
    description: str = Field(
        default="",
        description="A description of the item.",
    )
    rarity: Rarity = Field(
        default=Rarity.UNCOMMON,
        description="The item rarity.",
    )
    requires_attunement: bool = Field(
        default=False,
        description="Whether the item must be attuned to work.",
    )
    attuned_to: str | None = Field(
        default=None,
        description="Name of the creature attuned to the item, if any.",
    )
    effects: list[AnyItemEffect] = Field(
        default_factory=list,
        description="The effects granted by the item.",
    )

    def model_post_init(self, _: Any) -> None:
        if not self.id or not self.name:
            raise invalid_argument("Magic item id and name cannot be empty", {"id": self.id})

    @property
    def is_attuned(self) -> bool:
        return self.attuned_to is not None

    @property
    def is_active(self) -> bool:
        return not self.requires_attunement or self.is_attuned

    @property
    def colored_name(self) -> str:
        return f"[{self.rarity.color}]{self.name}[/]"

    def active_effects(self) -> list[BaseItemEffect]:
        return list(self.effects) if self.is_active else []

    def resistance_effects(self) -> list[ResistanceEffect]:
        return [e for e in self.active_effects() if isinstance(e, ResistanceEffect)]

    def get_effect(self, effect_id: str) -> BaseItemEffect | None:
        return next((e for e in self.effects if e.id == effect_id), None)

    def use(self, user: Any, effect_id: str | None = None, target: Any | None = None) -> EffectResult:
        """
        Activates one of the item's effects.

        Args:
            user (Any): The creature using the item.
            effect_id (str | None): Effect to use, the first usable one if None.
            target (Any | None): Optional target of the effect.

        Returns:
            EffectResult: The outcome of the activation.

        """
        if not self.is_active:
            return EffectResult.error(f"{self.name} must be attuned before it can be used.")
        candidates = [e for e in self.effects if not e.is_passive]
        if effect_id is not None:
            candidates = [e for e in candidates if e.id == effect_id]
        if not candidates:
            return EffectResult.error(f"{self.name} has no effect that can be activated.")
        return use_effect(candidates[0], user, target)
