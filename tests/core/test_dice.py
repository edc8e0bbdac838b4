"""
Tests for the dice primitive and dice notation.
"""

import pytest

from questkeeper.core.dice import (
    Dice,
    RollBreakdown,
    average_roll,
    get_dice,
    is_valid_notation,
    parse_notation,
    resolve_dice,
    set_dice,
)
from questkeeper.core.error_handling import InvalidArgumentError


def test_roll_stays_within_bounds():
    """Every roll of a die lands between 1 and its number of sides."""
    dice = Dice(seed=42)
    for sides in (1, 4, 6, 20, 100):
        for _ in range(200):
            assert 1 <= dice.roll(sides) <= sides


@pytest.mark.parametrize("sides", [1, 2, 4, 6, 8, 10, 12, 20])
def test_every_face_is_reachable(sides):
    dice = Dice(seed=sides)
    assert {dice.roll(sides) for _ in range(2000)} == set(range(1, sides + 1))


def test_same_seed_gives_same_rolls():
    first, second = Dice(seed=7), Dice(seed=7)
    assert [first.roll(20) for _ in range(20)] == [second.roll(20) for _ in range(20)]


def test_roll_rejects_dice_without_sides():
    with pytest.raises(InvalidArgumentError):
        Dice(seed=1).roll(0)


def test_roll_multiple_sums_scripted_rolls(scripted):
    assert scripted(3, 4, 5).roll_multiple(3, 6) == 12


def test_roll_multiple_rejects_negative_count():
    with pytest.raises(InvalidArgumentError):
        Dice(seed=1).roll_multiple(-1, 6)


def test_check_against_dc_meets_or_beats(scripted):
    """A check succeeds when d20 + modifier equals the DC."""
    assert scripted(10).check_against_dc(2, 12) is True
    assert scripted(9).check_against_dc(2, 12) is False


def test_advantage_and_disadvantage(scripted):
    assert scripted(5, 17).roll_with_advantage(1) == 18
    assert scripted(5, 17).roll_with_disadvantage(1) == 6


def test_natural_results_are_remembered(scripted):
    dice = scripted(20, 1)
    dice.roll_d20()
    assert dice.was_natural_20()
    dice.roll_d20()
    assert dice.was_natural_1()
    dice.clear_history()
    assert not dice.was_natural_1()
    assert dice.history == []


def test_history_is_capped():
    dice = Dice(seed=3, history_limit=5)
    for _ in range(10):
        dice.roll(6)
    assert len(dice.history) == 5
    assert dice.last_roll == dice.history[-1]


@pytest.mark.parametrize(
    "notation, expected",
    [
        ("2d6+3", (2, 6, 3)),
        ("d8", (1, 8, 0)),
        ("1D4-1", (1, 4, -1)),
        ("5", (0, 1, 5)),
        (" 3d10 ", (3, 10, 0)),
    ],
)
def test_parse_notation(notation, expected):
    assert parse_notation(notation) == expected


@pytest.mark.parametrize("notation", ["", "2x6", "0d6", "1d0", "d", "abc", "101d6"])
def test_parse_notation_rejects_malformed_input(notation):
    with pytest.raises(InvalidArgumentError):
        parse_notation(notation)
    assert not is_valid_notation(notation)


def test_describe_keeps_every_die(scripted):
    breakdown = scripted(4, 5).describe("2d6+3")
    assert breakdown.rolls == [4, 5]
    assert breakdown.modifier == 3
    assert breakdown.value == 12
    assert scripted(2, 6).parse("2d6") == 8


def test_roll_breakdown_flags_natural_results():
    assert RollBreakdown(notation="1d20", rolls=[20]).is_critical()
    assert RollBreakdown(notation="1d20", rolls=[1]).is_fumble()
    assert not RollBreakdown(notation="2d20", rolls=[20, 20]).is_critical()


def test_average_roll():
    assert average_roll("2d6+3") == 10
    assert average_roll("1d8") == 4
    assert average_roll("7") == 7


def test_default_dice_can_be_replaced(scripted):
    replacement = scripted(6)
    previous = set_dice(replacement)
    try:
        assert get_dice() is replacement
        assert resolve_dice(None) is replacement
        assert get_dice().roll(6) == 6
    finally:
        set_dice(previous)
    assert get_dice() is previous
