"""
Short and long rests.

Rests are free functions over a character: they spend or restore hit dice,
heal, restore spell slots and class features, and send the rest signal to
item effects.
"""

from typing import TYPE_CHECKING, Any, Iterable

from catchery import log_debug
from pydantic import BaseModel, Field

from questkeeper.core.constants import NiceEnum
from questkeeper.core.dice import Dice
from questkeeper.effects.activation import long_rest_effects, new_day_effects
from questkeeper.effects.base_effect import BaseItemEffect

if TYPE_CHECKING:
    from .main import Character


class RestType(NiceEnum):
    SHORT = "SHORT"
    LONG = "LONG"

    @property
    def display_name(self) -> str:
        return f"{self.name.title()} Rest"


class RestResult(BaseModel):
    """What a rest gave back to the character."""

    type: RestType = Field(
        description="Short or long rest.",
    )
    hp_restored: int = 0
    hit_dice_used: int = 0
    hit_dice_restored: int = 0
    spell_slots_restored: bool = False
    features_restored: list[str] = Field(
        default_factory=list,
        description="Names of class features whose uses came back.",
    )
    current_hp: int = Field(
        default=0,
        description="Hit points after the rest.",
    )
    max_hp: int = 0
    available_hit_dice: int = 0
    max_hit_dice: int = 0

    @property
    def was_successful(self) -> bool:
        return (
            self.hp_restored > 0
            or self.hit_dice_restored > 0
            or bool(self.features_restored)
            or self.type == RestType.LONG
        )

    @property
    def message(self) -> str:
        parts = [f"{self.type.display_name}: restored {self.hp_restored} HP"]
        if self.hit_dice_used:
            parts.append(f"spent {self.hit_dice_used} hit dice")
        if self.hit_dice_restored:
            parts.append(f"recovered {self.hit_dice_restored} hit dice")
        if self.spell_slots_restored:
            parts.append("spell slots restored")
        parts.extend(f"{name} recovered" for name in self.features_restored)
        return ", ".join(parts) + f". (HP: {self.current_hp}/{self.max_hp})"


def _result(character: "Character", rest_type: RestType, **fields: Any) -> RestResult:
    return RestResult(
        type=rest_type,
        current_hp=character.current_hit_points,
        max_hp=character.max_hit_points,
        available_hit_dice=character.available_hit_dice,
        max_hit_dice=character.max_hit_dice,
        **fields,
    )


def short_rest(
    character: "Character",
    hit_dice_to_spend: int,
    dice: Dice | None = None,
) -> RestResult:
    """
    Spends up to `hit_dice_to_spend` hit dice, stopping once at full HP.

    Warlock pact slots and short-rest class features come back. Item
    effects are left alone: none of the usage policies recharge on a short
    rest.

    Args:
        character (Character): The resting character.
        hit_dice_to_spend (int): Most hit dice to spend.
        dice (Dice | None): Dice to roll hit dice with.

    Returns:
        RestResult: HP restored and hit dice spent.

    """
    start_hp = character.current_hit_points
    used = 0
    for _ in range(min(max(0, hit_dice_to_spend), character.available_hit_dice)):
        healed = character.use_hit_die(dice)
        if healed <= 0:
            break
        used += 1
    slots_restored = character.spellbook.on_short_rest()
    features_restored = character.features.on_short_rest()
    log_debug(f"{character.name} took a short rest", {"hit_dice_used": used})
    return _result(
        character,
        RestType.SHORT,
        hp_restored=character.current_hit_points - start_hp,
        hit_dice_used=used,
        spell_slots_restored=slots_restored,
        features_restored=features_restored,
    )


def long_rest(
    character: "Character", effects: Iterable[BaseItemEffect] | None = None
) -> RestResult:
    """
    Heals fully, clears temporary HP and restores hit dice, spell slots and
    every limited class feature.

    Long-rest and charge effects are recharged; daily effects wait for
    `new_day`.
    """
    start_hp = character.current_hit_points
    character.full_heal()
    character.clear_temporary_hit_points()
    restored = character.restore_hit_dice()
    character.spellbook.on_long_rest()
    features_restored = character.features.on_long_rest()
    long_rest_effects(character.item_effects() if effects is None else effects)
    log_debug(f"{character.name} took a long rest", {"hit_dice_restored": restored})
    return _result(
        character,
        RestType.LONG,
        hp_restored=character.current_hit_points - start_hp,
        hit_dice_restored=restored,
        spell_slots_restored=character.spellbook.slots is not None,
        features_restored=features_restored,
    )


def new_day(effects: Iterable[BaseItemEffect]) -> None:
    """Dawn: daily effects (and long-rest ones) get their charges back."""
    new_day_effects(effects)


def would_benefit_from_short_rest(character: "Character") -> bool:
    return (
        character.current_hit_points < character.max_hit_points
        and character.available_hit_dice > 0
    )


def would_benefit_from_long_rest(character: "Character") -> bool:
    return (
        character.current_hit_points < character.max_hit_points
        or character.available_hit_dice < character.max_hit_dice
    )
