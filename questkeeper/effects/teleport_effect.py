"""
Teleport effects granted by items such as the Blinkstep Spark.
"""

from typing import Any, Literal

from pydantic import Field

from .base_effect import BaseItemEffect
from .usage import UsageType

MIN_TELEPORT_DISTANCE = 5


class TeleportEffect(BaseItemEffect):
    """Short-range teleport to an unoccupied space."""

    effect_type: Literal["teleport"] = "teleport"
    usage_type: UsageType = UsageType.LONG_REST
    max_charges: int = 1
    distance_feet: int = Field(
        default=30,
        description="Maximum teleport distance in feet, at least 5.",
    )
    requires_sight: bool = Field(
        default=True,
        description="Whether the destination must be visible.",
    )

    def model_post_init(self, context: Any) -> None:
        self.distance_feet = max(MIN_TELEPORT_DISTANCE, self.distance_feet)
        if not self.description:
            self.description = self.default_description()
        super().model_post_init(context)

    def default_description(self) -> str:
        where = "an unoccupied space you can see" if self.requires_sight else "an unoccupied space"
        return f"Teleport up to {self.distance_feet} feet to {where}."

    def activation_message(self, user_name: str) -> str:
        return f"{user_name} vanishes in a flash and reappears up to {self.distance_feet} feet away!"


def blinkstep_spark() -> TeleportEffect:
    return TeleportEffect(
        id="blinkstep_spark_effect",
        name="Blinkstep",
        distance_feet=10,
    )


def misty_step() -> TeleportEffect:
    return TeleportEffect(
        id="misty_step_effect",
        name="Misty Step",
        description="Briefly surrounded by silvery mist, teleport up to 30 feet to an unoccupied space you can see.",
        distance_feet=30,
    )
