"""
The class features one character has.

The owner is any object exposing `name`, `level` and `character_class`; the
features themselves may also need `heal`, the hit point fields and
`skill_modifier`.
"""

from typing import Any, Callable

from questkeeper.core.dice import Dice
from questkeeper.core.logging import log_debug

from .class_feature import ActivatedFeature, ClassFeature, FeatureResult
from .fighter import ActionSurge, ImprovedCritical, SecondWind
from .rogue import CunningAction

DEFAULT_CRITICAL_THRESHOLD = 20

# Keyed by CharacterClass member name; each factory builds a fresh feature.
_CLASS_FEATURES: dict[str, list[Callable[[], ClassFeature]]] = {
    "FIGHTER": [SecondWind, ActionSurge, ImprovedCritical],
    "ROGUE": [CunningAction],
}


def features_for_level(class_key: str, level: int) -> list[ClassFeature]:
    """
    Builds every feature a class has at the given level.

    Args:
        class_key (str): CharacterClass member name, e.g. "FIGHTER".
        level (int): The class level.

    Returns:
        list[ClassFeature]: Fresh feature instances, in the order gained.

    """
    features = []
    for factory in _CLASS_FEATURES.get(class_key.upper(), []):
        feature = factory()
        if feature.level_required <= level:
            feature.update_for_level(level)
            features.append(feature)
    return features


class FeatureSet:
    """
    Tracks a character's class features and their remaining uses.

    Attributes:
        owner (Any):
            The character the features belong to.
        features (list[ClassFeature]):
            Features gained so far, in the order gained.
    """

    def __init__(self, owner: Any) -> None:
        self.owner = owner
        self.features: list[ClassFeature] = []
        self.on_level_up()

    def _class_key(self) -> str:
        character_class = getattr(self.owner, "character_class", None)
        return getattr(character_class, "name", str(character_class)).upper()

    def on_level_up(self) -> None:
        """Adds newly gained features and rescales the ones already owned."""
        for feature in features_for_level(self._class_key(), self.owner.level):
            current = self.get(feature.id)
            if current is None:
                self.features.append(feature)
                log_debug(f"{self.owner.name} gained {feature.name}", {"level": self.owner.level})
            else:
                current.update_for_level(self.owner.level)

    # ============================================================================
    # LOOKUP
    # ============================================================================

    def get(self, feature_id: str) -> ClassFeature | None:
        return next((f for f in self.features if f.id == feature_id), None)

    def has(self, feature_id: str) -> bool:
        return self.get(feature_id) is not None

    def find(self, reference: str) -> ClassFeature | None:
        """Looks a feature up by id, then by case-insensitive name."""
        feature = self.get(reference)
        if feature is not None:
            return feature
        wanted = reference.strip().lower()
        return next((f for f in self.features if f.name.lower() == wanted), None)

    @property
    def activated(self) -> list[ActivatedFeature]:
        return [f for f in self.features if isinstance(f, ActivatedFeature)]

    @property
    def passive(self) -> list[ClassFeature]:
        return [f for f in self.features if f.is_passive]

    @property
    def critical_threshold(self) -> int:
        """Lowest natural d20 roll that scores a critical hit."""
        thresholds = [f.critical_threshold for f in self.features if isinstance(f, ImprovedCritical)]
        return min(thresholds, default=DEFAULT_CRITICAL_THRESHOLD)

    # ============================================================================
    # USE
    # ============================================================================

    def can_use(self, feature_id: str) -> bool:
        feature = self.get(feature_id)
        return isinstance(feature, ActivatedFeature) and feature.can_use()

    def use(self, feature_id: str, dice: Dice | None = None) -> FeatureResult:
        """
        Uses an activated feature.

        Returns:
            FeatureResult: The outcome; an error for unknown or passive
            features, or when no uses are left.

        """
        feature = self.get(feature_id)
        if feature is None:
            return FeatureResult.error("You don't have that ability.", feature_id)
        if not isinstance(feature, ActivatedFeature):
            return FeatureResult.error(
                f"{feature.name} is a passive ability that is always active.", feature_id
            )
        result = feature.use(self.owner, dice)
        if result.success:
            log_debug(
                f"{self.owner.name} used {feature.name}",
                {"uses_remaining": result.uses_remaining},
            )
        return result

    # ============================================================================
    # RESTS AND PERSISTENCE
    # ============================================================================

    def on_short_rest(self) -> list[str]:
        """Restores short-rest features; returns the names of those that recovered."""
        return [f.name for f in self.activated if f.reset_on_short_rest()]

    def on_long_rest(self) -> list[str]:
        """Restores short- and long-rest features; returns the names of those that recovered."""
        return [f.name for f in self.activated if f.reset_on_long_rest()]

    def remaining_uses(self) -> dict[str, int]:
        """Uses left per activated feature id, for save files."""
        return {f.id: f.current_uses for f in self.activated}

    def restore_uses(self, uses: dict[str, Any]) -> None:
        """Applies saved remaining uses; unknown ids and non-integers are ignored."""
        for feature_id, count in uses.items():
            feature = self.get(feature_id)
            if isinstance(feature, ActivatedFeature) and isinstance(count, int) and not isinstance(count, bool):
                feature.set_current_uses(count)

    def status(self) -> str:
        if not self.features:
            return "Class Features: none"
        return "Class Features: " + "; ".join(f.usage_status() for f in self.features)
