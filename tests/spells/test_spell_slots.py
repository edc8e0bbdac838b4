"""
Tests for the spell slot tables and slot bookkeeping.
"""

import pytest

from questkeeper.spells.spell_slots import CasterType, SpellSlots, max_slots_for


@pytest.mark.parametrize(
    "caster_type, level, expected",
    [
        (CasterType.FULL, 1, (2, 0, 0)),
        (CasterType.FULL, 3, (4, 2, 0)),
        (CasterType.FULL, 5, (4, 3, 2)),
        (CasterType.HALF, 1, (0, 0, 0)),
        (CasterType.HALF, 2, (2, 0, 0)),
        (CasterType.HALF, 9, (4, 3, 2)),
        (CasterType.THIRD, 2, (0, 0, 0)),
        (CasterType.THIRD, 3, (2, 0, 0)),
        (CasterType.THIRD, 13, (4, 3, 2)),
    ],
)
def test_slot_tables(caster_type, level, expected):
    assert max_slots_for(caster_type, level)[:3] == expected


def test_full_caster_at_twenty_has_ninth_level_slot():
    assert max_slots_for(CasterType.FULL, 20) == (4, 3, 3, 3, 3, 2, 2, 1, 1)


@pytest.mark.parametrize("level", [0, 21, -3])
def test_levels_outside_range_have_no_slots(level):
    assert not any(max_slots_for(CasterType.FULL, level))


@pytest.mark.parametrize(
    "level, slot_level, count",
    [(1, 1, 1), (2, 1, 2), (3, 2, 2), (5, 3, 2), (7, 4, 2), (9, 5, 2), (11, 5, 3), (17, 5, 4)],
)
def test_pact_magic_slots_share_one_level(level, slot_level, count):
    slots = max_slots_for(CasterType.WARLOCK, level)
    assert slots[slot_level - 1] == count
    assert sum(slots) == count


def test_expend_and_query():
    slots = SpellSlots(CasterType.FULL, 3)
    assert slots.current_slots[:2] == [4, 2]
    assert slots.highest_available_slot == 2
    assert slots.lowest_available_slot == 1
    assert slots.max_spell_level == 2

    assert slots.expend_slot(2)
    assert slots.expend_slot(2)
    assert not slots.expend_slot(2)
    assert slots.slots_remaining(2) == 0
    assert slots.max_slots(2) == 2
    assert slots.highest_available_slot == 1


def test_invalid_slot_levels_are_never_available():
    slots = SpellSlots(CasterType.FULL, 20)
    assert not slots.has_slot(0)
    assert not slots.has_slot(10)
    assert not slots.expend_slot(10)
    assert slots.slots_remaining(0) == 0
    assert slots.max_slots(12) == 0


def test_empty_slots_report_zero():
    slots = SpellSlots(CasterType.HALF, 1)
    assert not slots.can_cast_spells()
    assert not slots.has_any_slots()
    assert slots.highest_available_slot == 0
    assert slots.lowest_available_slot == 0
    assert slots.status() == "Spell Slots: None"


def test_set_current_slots_clamps_to_maximum():
    slots = SpellSlots(CasterType.FULL, 3)
    slots.set_current_slots([9, -1])
    assert slots.current_slots[:2] == [4, 0]


def test_short_rest_only_restores_pact_magic():
    wizard_slots = SpellSlots(CasterType.FULL, 1)
    wizard_slots.expend_slot(1)
    assert not wizard_slots.restore_on_short_rest()
    assert wizard_slots.slots_remaining(1) == 1

    warlock_slots = SpellSlots(CasterType.WARLOCK, 1)
    warlock_slots.expend_slot(1)
    assert warlock_slots.restore_on_short_rest()
    assert warlock_slots.slots_remaining(1) == 1


def test_long_rest_restores_everything():
    slots = SpellSlots(CasterType.FULL, 5)
    for level in (1, 2, 3):
        slots.expend_slot(level)
    slots.restore_on_long_rest()
    assert slots.current_slots[:3] == [4, 3, 2]


def test_level_change_caps_but_does_not_refill():
    slots = SpellSlots(CasterType.FULL, 1)
    slots.expend_slot(1)
    slots.set_caster_level(3)
    assert slots.max_slots(1) == 4
    assert slots.slots_remaining(1) == 1
    assert slots.slots_remaining(2) == 0

    slots.restore_all()
    slots.set_caster_level(1)
    assert slots.current_slots[:2] == [2, 0]


def test_status_lists_levels_with_slots():
    slots = SpellSlots(CasterType.FULL, 3)
    slots.expend_slot(1)
    assert str(slots) == "Spell Slots: 1st: 3/4, 2nd: 2/2"
