"""
Tests for ability math, formatting helpers and validation helpers.
"""

import pytest

from questkeeper.core.constants import Ability, Behavior, DamageType, Size, Skill
from questkeeper.core.error_handling import (
    IllegalStateError,
    InvalidArgumentError,
    QuestKeeperError,
    coerce_enum,
    ensure_int_in_range,
    ensure_non_negative_int,
    illegal_state,
    invalid_argument,
    require_enum_type,
    require_non_empty_string,
)
from questkeeper.core.utils import (
    ccapture,
    clamp,
    format_modifier,
    get_proficiency_bonus,
    get_stat_modifier,
    make_bar,
    ordinal,
)


@pytest.mark.parametrize(
    "score, modifier",
    [(1, -5), (8, -1), (9, -1), (10, 0), (11, 0), (12, 1), (15, 2), (20, 5)],
)
def test_stat_modifier_rounds_down(score, modifier):
    assert get_stat_modifier(score) == modifier


@pytest.mark.parametrize(
    "level, bonus",
    [(1, 2), (4, 2), (5, 3), (8, 3), (9, 4), (13, 5), (16, 5), (17, 6), (20, 6)],
)
def test_proficiency_bonus_by_level(level, bonus):
    assert get_proficiency_bonus(level) == bonus


def test_formatting_helpers():
    assert format_modifier(3) == "+3"
    assert format_modifier(0) == "+0"
    assert format_modifier(-1) == "-1"
    assert [ordinal(n) for n in (1, 2, 3, 4, 11, 12, 13, 21)] == [
        "1st", "2nd", "3rd", "4th", "11th", "12th", "13th", "21st",
    ]
    assert clamp(25, 1, 20) == 20
    assert clamp(-3, 0, 5) == 0


def test_make_bar_fills_proportionally():
    bar = make_bar(5, 10, length=10)
    assert bar.count("▮") == 5
    assert bar.count("▯") == 5
    assert "▯" not in make_bar(10, 10)


def test_ccapture_renders_markup_as_text():
    assert "hello" in ccapture("[bold]hello[/]")


def test_skills_are_bound_to_abilities():
    assert Skill.ATHLETICS.ability == Ability.STRENGTH
    assert Skill.STEALTH.ability == Ability.DEXTERITY
    assert Skill.ARCANA.ability == Ability.INTELLIGENCE
    assert Skill.PERCEPTION.ability == Ability.WISDOM
    assert Skill.PERSUASION.ability == Ability.CHARISMA
    assert len(Skill) == 18


def test_enum_display():
    assert str(Ability.STRENGTH) == "STRENGTH"
    assert Ability.STRENGTH.abbreviation == "STR"
    assert Behavior.COWARDLY.display_name == "Cowardly"
    assert DamageType.NONMAGICAL_PHYSICAL.display_name == "Nonmagical Weapons"
    assert Size.TINY.space == 2.5
    assert Size.GARGANTUAN.space == 20.0


def test_error_taxonomy():
    assert issubclass(InvalidArgumentError, QuestKeeperError)
    assert issubclass(InvalidArgumentError, ValueError)
    assert issubclass(IllegalStateError, RuntimeError)
    with pytest.raises(InvalidArgumentError, match="bad value"):
        raise invalid_argument("bad value", {"value": 3})
    with pytest.raises(IllegalStateError):
        raise illegal_state("not now")


def test_require_helpers():
    assert require_non_empty_string("Elara", "name") == "Elara"
    with pytest.raises(InvalidArgumentError):
        require_non_empty_string("   ", "name")
    with pytest.raises(InvalidArgumentError):
        require_non_empty_string(None, "name")
    assert require_enum_type(Ability.WISDOM, Ability, "ability") == Ability.WISDOM
    with pytest.raises(InvalidArgumentError):
        require_enum_type("WISDOM", Ability, "ability")


def test_ensure_helpers_correct_bad_values():
    assert ensure_non_negative_int(4, "count") == 4
    assert ensure_non_negative_int(-2, "count", 1) == 1
    assert ensure_non_negative_int("3", "count", 0) == 0
    assert ensure_int_in_range(12, "score", 1, 20) == 12
    assert ensure_int_in_range(25, "score", 1, 20, 10) == 20
    assert ensure_int_in_range(-5, "score", 1, 20, 10) == 1
    assert ensure_int_in_range("high", "score", 1, 20, 10) == 10
    assert ensure_int_in_range(500, "hp", 1) == 500


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("strength", Ability.STRENGTH),
        ("STR", Ability.STRENGTH),
        (Ability.WISDOM, Ability.WISDOM),
        ("sleight of hand", Skill.SLEIGHT_OF_HAND),
        ("Sleight of Hand", Skill.SLEIGHT_OF_HAND),
        ("half-elf", None),
    ],
)
def test_coerce_enum_accepts_loose_spellings(raw, expected):
    enum_class = type(expected) if expected is not None else Ability
    assert coerce_enum(raw, enum_class, "value", None) == expected


def test_coerce_enum_falls_back_to_default():
    assert coerce_enum(None, Behavior, "behavior", Behavior.AGGRESSIVE) == Behavior.AGGRESSIVE
    assert coerce_enum("berserk", Behavior, "behavior", Behavior.AGGRESSIVE) == Behavior.AGGRESSIVE
    assert coerce_enum(42, Size, "size", Size.MEDIUM) == Size.MEDIUM
