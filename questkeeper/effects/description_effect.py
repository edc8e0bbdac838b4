"""
Flavour-only effects: they track charges and report a message but change
no game state.
"""

from typing import Any, Literal

from pydantic import Field

from .base_effect import BaseItemEffect
from .usage import UsageType


class DescriptionEffect(BaseItemEffect):
    """An effect whose only outcome is narrative text."""

    effect_type: Literal["description"] = "description"
    usage_type: UsageType = UsageType.DAILY
    max_charges: int = 1
    activation_text: str = Field(
        default="",
        description="Message shown when the effect is used, the description if empty.",
    )

    def model_post_init(self, context: Any) -> None:
        if not self.activation_text:
            self.activation_text = self.description
        super().model_post_init(context)

    def activation_message(self, user_name: str) -> str:
        return self.activation_text or f"{user_name} uses {self.name}."
