"""
Rogue class features.
"""

from typing import Any

from questkeeper.core.constants import Skill
from questkeeper.core.dice import Dice, resolve_dice

from .class_feature import ActivatedFeature, FeatureResult, ResetType

CUNNING_ACTION_ID = "cunning_action"


class CunningAction(ActivatedFeature):
    """
    Bonus action every turn: Dash, Disengage or Hide.

    Combat keeps track of the bonus action; the feature itself never runs
    out of uses. Each option returns only the effect text, the caller adds
    who used it.
    """

    id: str = CUNNING_ACTION_ID
    name: str = "Cunning Action"
    description: str = (
        "You can take a bonus action on each of your turns in combat to take the "
        "Dash, Disengage, or Hide action."
    )
    level_required: int = 2
    reset_type: ResetType = ResetType.UNLIMITED
    available_out_of_combat: bool = False

    def activate(self, user: Any, dice: Dice | None = None) -> FeatureResult:
        return FeatureResult(
            success=True, message="Cunning Action ready. Choose: dash, disengage, or hide."
        )

    def dash(self, user: Any) -> FeatureResult:
        return FeatureResult(
            success=True, message="Movement speed doubled this turn.", feature_id=self.id
        )

    def disengage(self, user: Any) -> FeatureResult:
        return FeatureResult(
            success=True,
            message="Moving away won't provoke opportunity attacks this turn.",
            feature_id=self.id,
        )

    def hide(self, user: Any, dice: Dice | None = None) -> FeatureResult:
        """Rolls a Stealth check: d20 + the user's Stealth modifier."""
        modifier = user.skill_modifier(Skill.STEALTH)
        total = resolve_dice(dice).roll_with_modifier(20, modifier)
        return FeatureResult(
            success=True,
            message=f"Stealth check: {total} (d20 {modifier:+d})",
            feature_id=self.id,
        )
