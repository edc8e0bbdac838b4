"""
Class features for the QuestKeeper rules engine.

Features come from a character's class and level. Passive features adjust
numbers used elsewhere; activated features have uses restored by rests.
"""

from .class_feature import (
    ActivatedFeature,
    ClassFeature,
    FeatureResult,
    PassiveFeature,
    ResetType,
)
from .feature_set import DEFAULT_CRITICAL_THRESHOLD, FeatureSet, features_for_level
from .fighter import (
    ACTION_SURGE_ID,
    IMPROVED_CRITICAL_ID,
    SECOND_WIND_ID,
    ActionSurge,
    ImprovedCritical,
    SecondWind,
)
from .rogue import CUNNING_ACTION_ID, CunningAction

__all__ = [
    # Import from class_feature.py
    "ActivatedFeature",
    "ClassFeature",
    "FeatureResult",
    "PassiveFeature",
    "ResetType",
    # Import from feature_set.py
    "DEFAULT_CRITICAL_THRESHOLD",
    "FeatureSet",
    "features_for_level",
    # Import from fighter.py
    "ACTION_SURGE_ID",
    "IMPROVED_CRITICAL_ID",
    "SECOND_WIND_ID",
    "ActionSurge",
    "ImprovedCritical",
    "SecondWind",
    # Import from rogue.py
    "CUNNING_ACTION_ID",
    "CunningAction",
]
