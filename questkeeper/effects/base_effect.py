"""
Base effect module for the rules engine.

Defines the fields every item effect carries (identity, usage policy and
charges) and the result returned when an effect is activated.
"""

from typing import Any

from pydantic import BaseModel, Field

from questkeeper.core.error_handling import invalid_argument

from .usage import UsageType, charge_display, initial_charges


class EffectResult(BaseModel):
    """Outcome of activating an item effect."""

    success: bool = Field(
        description="Whether the effect fired.",
    )
    message: str = Field(
        description="Human-readable outcome for the display layer.",
    )
    effect_id: str | None = Field(
        default=None,
        description="Identifier of the effect that was activated.",
    )
    charges_remaining: int = Field(
        default=-1,
        description="Charges left after activation, -1 for unlimited.",
    )

    @classmethod
    def error(cls, message: str, effect_id: str | None = None) -> "EffectResult":
        return cls(success=False, message=message, effect_id=effect_id)


class BaseItemEffect(BaseModel):
    """
    Shared data for all item effects.

    Concrete kinds add an `effect_type` tag and their own parameters; the
    usage helpers in `usage.py` own the charge bookkeeping.
    """

    id: str = Field(
        description="Unique identifier of the effect.",
    )
    name: str = Field(
        description="Display name of the effect.",
    )
    description: str = Field(
        default="",
        description="Description shown to the player.",
    )
    usage_type: UsageType = Field(
        default=UsageType.UNLIMITED,
        description="How often the effect can be used.",
    )
    max_charges: int = Field(
        default=-1,
        description="Maximum charges, -1 for unlimited.",
    )
    current_charges: int | None = Field(
        default=None,
        description="Remaining charges. Starts full when not given.",
    )
    recharge_amount: int = Field(
        default=0,
        description="Charges restored on reset, 0 restores all.",
    )
    consumed: bool = Field(
        default=False,
        description="Whether a consumable has been used up.",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.id or not self.id.strip():
            raise invalid_argument("Effect ID cannot be empty", {"name": self.name})
        if not self.name or not self.name.strip():
            raise invalid_argument("Effect name cannot be empty", {"id": self.id})
        self.max_charges = initial_charges(self.usage_type, self.max_charges)
        if self.current_charges is None or not self.usage_type.is_limited:
            self.current_charges = self.max_charges
        else:
            self.current_charges = max(0, min(self.current_charges, self.max_charges))
        self.recharge_amount = max(0, self.recharge_amount)

    def activation_message(self, user_name: str) -> str:
        """Returns the message shown when `user_name` activates the effect."""
        return f"{user_name} uses {self.name}."

    def detailed_info(self) -> str:
        return f"{self.name}\n{self.description}\nUsage: {self.charge_display}"

    @property
    def is_passive(self) -> bool:
        return self.usage_type == UsageType.PASSIVE

    @property
    def charge_display(self) -> str:
        return charge_display(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseItemEffect):
            return NotImplemented
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f"{type(self).__name__}[id={self.id}, usage={self.usage_type.display_name}, charges={self.charge_display}]"
