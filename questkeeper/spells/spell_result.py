"""
Structured outcome of casting a spell.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from questkeeper.core.constants import DamageType, NiceEnum


class SpellResultType(NiceEnum):
    SUCCESS = "SUCCESS"
    HIT = "HIT"
    MISS = "MISS"
    SAVE_FAILED = "SAVE_FAILED"
    SAVE_SUCCESS = "SAVE_SUCCESS"
    HEALING = "HEALING"
    BUFF = "BUFF"
    CONDITION = "CONDITION"
    ERROR = "ERROR"


class SpellResult(BaseModel):
    """
    What happened when a spell was cast.

    Numeric fields that do not apply to the outcome stay at 0.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: SpellResultType = Field(
        description="The kind of outcome.",
    )
    message: str = Field(
        description="Human-readable outcome for the display layer.",
    )
    spell_name: str | None = Field(
        default=None,
        description="Name of the spell that produced the result.",
    )
    target: Any | None = Field(
        default=None,
        exclude=True,
        description="The combatant the spell resolved against.",
    )
    damage: int = 0
    healing: int = 0
    damage_type: DamageType | None = None
    attack_roll: int = 0
    target_ac: int = 0
    save_roll: int = 0
    save_dc: int = 0
    critical: bool = False
    ac_bonus: int = 0

    @property
    def is_success(self) -> bool:
        return self.type not in (SpellResultType.ERROR, SpellResultType.MISS)

    @property
    def deals_damage(self) -> bool:
        return self.damage > 0

    @property
    def heals(self) -> bool:
        return self.healing > 0

    # ============================================================================
    # FACTORIES
    # ============================================================================

    @classmethod
    def hit(
        cls,
        spell_name: str,
        target: Any,
        attack_roll: int,
        target_ac: int,
        damage: int,
        damage_type: DamageType,
        critical: bool,
    ) -> "SpellResult":
        crit = " (CRITICAL!)" if critical else ""
        return cls(
            type=SpellResultType.HIT,
            message=f"{spell_name} hits {target.name} for {damage} {_noun(damage_type)} damage!{crit}",
            spell_name=spell_name,
            target=target,
            attack_roll=attack_roll,
            target_ac=target_ac,
            damage=damage,
            damage_type=damage_type,
            critical=critical,
        )

    @classmethod
    def miss(cls, spell_name: str, target: Any, attack_roll: int, target_ac: int) -> "SpellResult":
        return cls(
            type=SpellResultType.MISS,
            message=f"{spell_name} misses {target.name}. (Rolled {attack_roll} vs AC {target_ac})",
            spell_name=spell_name,
            target=target,
            attack_roll=attack_roll,
            target_ac=target_ac,
        )

    @classmethod
    def save_failed(
        cls,
        spell_name: str,
        target: Any,
        save_roll: int,
        save_dc: int,
        damage: int,
        damage_type: DamageType,
    ) -> "SpellResult":
        return cls(
            type=SpellResultType.SAVE_FAILED,
            message=(
                f"{target.name} fails their save against {spell_name}! "
                f"({save_roll} vs DC {save_dc}) Takes {damage} {_noun(damage_type)} damage."
            ),
            spell_name=spell_name,
            target=target,
            save_roll=save_roll,
            save_dc=save_dc,
            damage=damage,
            damage_type=damage_type,
        )

    @classmethod
    def save_success(
        cls,
        spell_name: str,
        target: Any,
        save_roll: int,
        save_dc: int,
        damage: int,
        damage_type: DamageType,
    ) -> "SpellResult":
        prefix = f"{target.name} saves against {spell_name}! ({save_roll} vs DC {save_dc})"
        if damage > 0:
            message = f"{prefix} Takes {damage} {_noun(damage_type)} damage (half)."
        else:
            message = f"{prefix} No effect."
        return cls(
            type=SpellResultType.SAVE_SUCCESS,
            message=message,
            spell_name=spell_name,
            target=target,
            save_roll=save_roll,
            save_dc=save_dc,
            damage=damage,
            damage_type=damage_type,
        )

    @classmethod
    def healed(cls, spell_name: str, target: Any, amount: int) -> "SpellResult":
        return cls(
            type=SpellResultType.HEALING,
            message=f"{spell_name} heals {target.name} for {amount} HP!",
            spell_name=spell_name,
            target=target,
            healing=amount,
        )

    @classmethod
    def buff(cls, spell_name: str, target: Any, effect: str, ac_bonus: int = 0) -> "SpellResult":
        return cls(
            type=SpellResultType.BUFF,
            message=f"{spell_name} affects {target.name}: {effect}",
            spell_name=spell_name,
            target=target,
            ac_bonus=ac_bonus,
        )

    @classmethod
    def success(cls, spell_name: str, message: str) -> "SpellResult":
        return cls(type=SpellResultType.SUCCESS, message=message, spell_name=spell_name)

    @classmethod
    def error(cls, message: str) -> "SpellResult":
        return cls(type=SpellResultType.ERROR, message=message)


def _noun(damage_type: DamageType) -> str:
    return damage_type.display_name.lower()
