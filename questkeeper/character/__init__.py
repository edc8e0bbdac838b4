"""
Character system module for the QuestKeeper rules engine.

This module handles character creation and management: races, classes,
ability scores and skills, hit points, resting and serialization.
"""

from .character_class import CharacterClass
from .character_race import Race
from .character_rest import (
    RestResult,
    RestType,
    long_rest,
    new_day,
    short_rest,
    would_benefit_from_long_rest,
    would_benefit_from_short_rest,
)
from .character_serialization import (
    character_from_dict,
    character_to_dict,
    load_character,
    load_monsters,
    monster_from_dict,
    monster_to_dict,
    save_character,
)
from .character_stats import CharacterStats
from .main import Character

__all__ = [
    # Import from character_class.py
    "CharacterClass",
    # Import from character_race.py
    "Race",
    # Import from character_rest.py
    "RestResult",
    "RestType",
    "long_rest",
    "new_day",
    "short_rest",
    "would_benefit_from_long_rest",
    "would_benefit_from_short_rest",
    # Import from character_serialization.py
    "character_from_dict",
    "character_to_dict",
    "load_character",
    "load_monsters",
    "monster_from_dict",
    "monster_to_dict",
    "save_character",
    # Import from character_stats.py
    "CharacterStats",
    # Import from main.py
    "Character",
]
