"""
Class features: the abilities a character gains from its class and level.

Passive features are always on and only change numbers elsewhere (such as
the critical range). Activated features have a pool of uses that comes back
on a short rest, on a long rest, or never runs out.
"""

from typing import Any

from pydantic import BaseModel, Field

from questkeeper.core.constants import MAX_LEVEL, MIN_LEVEL, NiceEnum
from questkeeper.core.dice import Dice
from questkeeper.core.error_handling import invalid_argument


class ResetType(NiceEnum):
    """What brings an activated feature's uses back."""

    SHORT_REST = "SHORT_REST"
    LONG_REST = "LONG_REST"
    UNLIMITED = "UNLIMITED"


class FeatureResult(BaseModel):
    """Outcome of using a class feature."""

    success: bool = Field(
        description="Whether the feature was used.",
    )
    message: str = Field(
        description="Human-readable outcome for the display layer.",
    )
    feature_id: str | None = Field(
        default=None,
        description="Identifier of the feature that was used.",
    )
    healing: int = Field(
        default=0,
        description="Hit points restored by the feature.",
    )
    uses_remaining: int = Field(
        default=-1,
        description="Uses left afterwards, -1 for unlimited.",
    )

    @classmethod
    def error(cls, message: str, feature_id: str | None = None) -> "FeatureResult":
        return cls(success=False, message=message, feature_id=feature_id)


class ClassFeature(BaseModel):
    """
    Fields shared by every class feature.

    Subclasses bind `id`, `name` and `level_required` through defaults, so a
    feature is created with no arguments and adjusted with `update_for_level`.
    """

    id: str = Field(
        description="Unique identifier of the feature.",
    )
    name: str = Field(
        description="Display name of the feature.",
    )
    description: str = Field(
        default="",
        description="Rules text shown to the player.",
    )
    level_required: int = Field(
        default=MIN_LEVEL,
        description="Class level at which the feature is gained.",
    )
    available_in_combat: bool = Field(
        default=True,
        description="Whether the feature can be used during combat.",
    )
    available_out_of_combat: bool = Field(
        default=True,
        description="Whether the feature can be used outside combat.",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.id or not self.id.strip():
            raise invalid_argument("Feature ID cannot be empty", {"name": self.name})
        if not self.name or not self.name.strip():
            raise invalid_argument("Feature name cannot be empty", {"id": self.id})
        if not MIN_LEVEL <= self.level_required <= MAX_LEVEL:
            raise invalid_argument(
                f"Feature level must be between {MIN_LEVEL} and {MAX_LEVEL}",
                {"id": self.id, "level_required": self.level_required},
            )

    @property
    def is_passive(self) -> bool:
        return True

    def update_for_level(self, level: int) -> None:
        """Hook for features that scale with class level."""

    def usage_status(self) -> str:
        return f"{self.name} (passive)"

    def __str__(self) -> str:
        return f"{self.name} (Level {self.level_required})"


class PassiveFeature(ClassFeature):
    """A feature that is always active."""


class ActivatedFeature(ClassFeature):
    """
    A feature the character chooses to use.

    Each use spends one charge unless the feature is UNLIMITED. A long rest
    restores both long-rest and short-rest features.
    """

    reset_type: ResetType = Field(
        default=ResetType.LONG_REST,
        description="What restores the feature's uses.",
    )
    max_uses: int = Field(
        default=1,
        description="Uses available after a reset.",
    )
    current_uses: int | None = Field(
        default=None,
        description="Uses left. Starts full when not given.",
    )

    def model_post_init(self, context: Any) -> None:
        super().model_post_init(context)
        if self.max_uses < 1:
            raise invalid_argument(
                "A feature needs at least one use", {"id": self.id, "max_uses": self.max_uses}
            )
        if self.current_uses is None:
            self.current_uses = self.max_uses
        else:
            self.current_uses = max(0, min(self.current_uses, self.max_uses))

    @property
    def is_passive(self) -> bool:
        return False

    def can_use(self) -> bool:
        return self.reset_type == ResetType.UNLIMITED or self.current_uses > 0

    def use(self, user: Any, dice: Dice | None = None) -> FeatureResult:
        """
        Spends a use and applies the feature.

        Args:
            user (Any): The character using the feature.
            dice (Dice | None): Dice for any roll the feature makes.

        Returns:
            FeatureResult: The outcome, or an error if no uses are left.

        """
        if not self.can_use():
            return FeatureResult.error(
                f"You have no uses of {self.name} remaining. Rest to recover it.", self.id
            )
        if self.reset_type != ResetType.UNLIMITED:
            self.current_uses -= 1
        result = self.activate(user, dice)
        result.feature_id = self.id
        result.uses_remaining = (
            -1 if self.reset_type == ResetType.UNLIMITED else self.current_uses
        )
        return result

    def activate(self, user: Any, dice: Dice | None = None) -> FeatureResult:
        return FeatureResult(success=True, message=f"{user.name} uses {self.name}.")

    def set_max_uses(self, max_uses: int) -> None:
        """Changes the pool size; new uses are granted straight away."""
        max_uses = max(1, max_uses)
        if max_uses > self.max_uses:
            self.current_uses += max_uses - self.max_uses
        self.max_uses = max_uses
        self.current_uses = min(self.current_uses, self.max_uses)

    def set_current_uses(self, uses: int) -> None:
        self.current_uses = max(0, min(uses, self.max_uses))

    def restore(self) -> bool:
        """Refills the pool; returns whether any use came back."""
        restored = self.current_uses < self.max_uses
        self.current_uses = self.max_uses
        return restored

    def reset_on_short_rest(self) -> bool:
        if self.reset_type != ResetType.SHORT_REST:
            return False
        return self.restore()

    def reset_on_long_rest(self) -> bool:
        if self.reset_type not in (ResetType.SHORT_REST, ResetType.LONG_REST):
            return False
        return self.restore()

    def usage_status(self) -> str:
        if self.reset_type == ResetType.UNLIMITED:
            return f"{self.name}: at will"
        return f"{self.name}: {self.current_uses}/{self.max_uses} uses ({self.reset_type.display_name})"
