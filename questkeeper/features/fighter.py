"""
Fighter class features.
"""

from typing import Any

from questkeeper.core.dice import Dice, resolve_dice

from .class_feature import ActivatedFeature, FeatureResult, PassiveFeature, ResetType

SECOND_WIND_ID = "second_wind"
ACTION_SURGE_ID = "action_surge"
IMPROVED_CRITICAL_ID = "improved_critical"


class SecondWind(ActivatedFeature):
    """Bonus action: regain 1d10 + fighter level hit points."""

    id: str = SECOND_WIND_ID
    name: str = "Second Wind"
    description: str = (
        "On your turn, you can use a bonus action to regain hit points equal to "
        "1d10 + your fighter level. Once you use this feature, you must finish a "
        "short or long rest before you can use it again."
    )
    level_required: int = 1
    reset_type: ResetType = ResetType.SHORT_REST

    def activate(self, user: Any, dice: Dice | None = None) -> FeatureResult:
        roll = resolve_dice(dice).roll(10)
        healing = roll + user.level
        restored = user.heal(healing)
        return FeatureResult(
            success=True,
            message=(
                f"Rolled d10: {roll} + {user.level} (level) = {healing} healing. "
                f"Restored {restored} HP. (Now at {user.current_hit_points}/{user.max_hit_points} HP)"
            ),
            healing=restored,
        )


class ActionSurge(ActivatedFeature):
    """One extra action on the current turn; a second use per rest from level 17."""

    id: str = ACTION_SURGE_ID
    name: str = "Action Surge"
    description: str = (
        "On your turn, you can take one additional action. Once you use this "
        "feature, you must finish a short or long rest before you can use it again."
    )
    level_required: int = 2
    reset_type: ResetType = ResetType.SHORT_REST
    available_out_of_combat: bool = False

    def activate(self, user: Any, dice: Dice | None = None) -> FeatureResult:
        return FeatureResult(
            success=True, message="You can take an additional action this turn."
        )

    def update_for_level(self, level: int) -> None:
        self.set_max_uses(2 if level >= 17 else 1)


class ImprovedCritical(PassiveFeature):
    """Champion archetype: weapon attacks crit on 19 or 20."""

    id: str = IMPROVED_CRITICAL_ID
    name: str = "Improved Critical"
    description: str = "Your weapon attacks score a critical hit on a roll of 19 or 20."
    level_required: int = 3

    critical_threshold: int = 19
