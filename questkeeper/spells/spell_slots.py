"""
Spell slot tracking for the four casting progressions.
"""

from questkeeper.core.constants import MAX_SPELL_LEVEL, NiceEnum
from questkeeper.core.utils import clamp, ordinal


class CasterType(NiceEnum):
    """How quickly a class gains spell slots."""

    FULL = "FULL"
    HALF = "HALF"
    THIRD = "THIRD"
    WARLOCK = "WARLOCK"


_NO_SLOTS: tuple[int, ...] = (0,) * MAX_SPELL_LEVEL

# Index is caster level - 1.
_FULL_CASTER_SLOTS: tuple[tuple[int, ...], ...] = (
    (2, 0, 0, 0, 0, 0, 0, 0, 0),
    (3, 0, 0, 0, 0, 0, 0, 0, 0),
    (4, 2, 0, 0, 0, 0, 0, 0, 0),
    (4, 3, 0, 0, 0, 0, 0, 0, 0),
    (4, 3, 2, 0, 0, 0, 0, 0, 0),
    (4, 3, 3, 0, 0, 0, 0, 0, 0),
    (4, 3, 3, 1, 0, 0, 0, 0, 0),
    (4, 3, 3, 2, 0, 0, 0, 0, 0),
    (4, 3, 3, 3, 1, 0, 0, 0, 0),
    (4, 3, 3, 3, 2, 0, 0, 0, 0),
    (4, 3, 3, 3, 2, 1, 0, 0, 0),
    (4, 3, 3, 3, 2, 1, 0, 0, 0),
    (4, 3, 3, 3, 2, 1, 1, 0, 0),
    (4, 3, 3, 3, 2, 1, 1, 0, 0),
    (4, 3, 3, 3, 2, 1, 1, 1, 0),
    (4, 3, 3, 3, 2, 1, 1, 1, 0),
    (4, 3, 3, 3, 2, 1, 1, 1, 1),
    (4, 3, 3, 3, 3, 1, 1, 1, 1),
    (4, 3, 3, 3, 3, 2, 1, 1, 1),
    (4, 3, 3, 3, 3, 2, 2, 1, 1),
)

_HALF_CASTER_SLOTS: tuple[tuple[int, ...], ...] = (
    _NO_SLOTS,
    (2, 0, 0, 0, 0, 0, 0, 0, 0),
    (3, 0, 0, 0, 0, 0, 0, 0, 0),
    (3, 0, 0, 0, 0, 0, 0, 0, 0),
    (4, 2, 0, 0, 0, 0, 0, 0, 0),
    (4, 2, 0, 0, 0, 0, 0, 0, 0),
    (4, 3, 0, 0, 0, 0, 0, 0, 0),
    (4, 3, 0, 0, 0, 0, 0, 0, 0),
    (4, 3, 2, 0, 0, 0, 0, 0, 0),
    (4, 3, 2, 0, 0, 0, 0, 0, 0),
    (4, 3, 3, 0, 0, 0, 0, 0, 0),
    (4, 3, 3, 0, 0, 0, 0, 0, 0),
    (4, 3, 3, 1, 0, 0, 0, 0, 0),
    (4, 3, 3, 1, 0, 0, 0, 0, 0),
    (4, 3, 3, 2, 0, 0, 0, 0, 0),
    (4, 3, 3, 2, 0, 0, 0, 0, 0),
    (4, 3, 3, 3, 1, 0, 0, 0, 0),
    (4, 3, 3, 3, 1, 0, 0, 0, 0),
    (4, 3, 3, 3, 2, 0, 0, 0, 0),
    (4, 3, 3, 3, 2, 0, 0, 0, 0),
)

_THIRD_CASTER_SLOTS: tuple[tuple[int, ...], ...] = (
    _NO_SLOTS,
    _NO_SLOTS,
    (2, 0, 0, 0, 0, 0, 0, 0, 0),
    (3, 0, 0, 0, 0, 0, 0, 0, 0),
    (3, 0, 0, 0, 0, 0, 0, 0, 0),
    (3, 0, 0, 0, 0, 0, 0, 0, 0),
    (4, 2, 0, 0, 0, 0, 0, 0, 0),
    (4, 2, 0, 0, 0, 0, 0, 0, 0),
    (4, 2, 0, 0, 0, 0, 0, 0, 0),
    (4, 3, 0, 0, 0, 0, 0, 0, 0),
    (4, 3, 0, 0, 0, 0, 0, 0, 0),
    (4, 3, 0, 0, 0, 0, 0, 0, 0),
    (4, 3, 2, 0, 0, 0, 0, 0, 0),
    (4, 3, 2, 0, 0, 0, 0, 0, 0),
    (4, 3, 2, 0, 0, 0, 0, 0, 0),
    (4, 3, 3, 0, 0, 0, 0, 0, 0),
    (4, 3, 3, 0, 0, 0, 0, 0, 0),
    (4, 3, 3, 0, 0, 0, 0, 0, 0),
    (4, 3, 3, 1, 0, 0, 0, 0, 0),
    (4, 3, 3, 1, 0, 0, 0, 0, 0),
)


def _warlock_slots(level: int) -> tuple[int, ...]:
    """Pact magic: every slot is of the same level."""
    if level >= 17:
        count = 4
    elif level >= 11:
        count = 3
    elif level >= 2:
        count = 2
    else:
        count = 1
    if level >= 9:
        slot_level = 5
    elif level >= 7:
        slot_level = 4
    elif level >= 5:
        slot_level = 3
    elif level >= 3:
        slot_level = 2
    else:
        slot_level = 1
    slots = [0] * MAX_SPELL_LEVEL
    slots[slot_level - 1] = count
    return tuple(slots)


def max_slots_for(caster_type: CasterType, level: int) -> tuple[int, ...]:
    """
    Returns the maximum slots per spell level (index 0 is 1st level).

    Levels outside 1-20 have no slots.
    """
    if not 1 <= level <= 20:
        return _NO_SLOTS
    if caster_type == CasterType.FULL:
        return _FULL_CASTER_SLOTS[level - 1]
    if caster_type == CasterType.HALF:
        return _HALF_CASTER_SLOTS[level - 1]
    if caster_type == CasterType.THIRD:
        return _THIRD_CASTER_SLOTS[level - 1]
    return _warlock_slots(level)


class SpellSlots:
    """Current and maximum spell slots of one caster."""

    def __init__(self, caster_type: CasterType, caster_level: int) -> None:
        self.caster_type: CasterType = caster_type
        self.caster_level: int = caster_level
        self._max: list[int] = list(max_slots_for(caster_type, caster_level))
        self._current: list[int] = list(self._max)

    @staticmethod
    def _valid(slot_level: int) -> bool:
        return 1 <= slot_level <= MAX_SPELL_LEVEL

    def has_slot(self, slot_level: int) -> bool:
        return self._valid(slot_level) and self._current[slot_level - 1] > 0

    def slots_remaining(self, slot_level: int) -> int:
        return self._current[slot_level - 1] if self._valid(slot_level) else 0

    def max_slots(self, slot_level: int) -> int:
        return self._max[slot_level - 1] if self._valid(slot_level) else 0

    def expend_slot(self, slot_level: int) -> bool:
        """Uses one slot of the given level; False if none is left."""
        if not self.has_slot(slot_level):
            return False
        self._current[slot_level - 1] -= 1
        return True

    @property
    def current_slots(self) -> list[int]:
        return list(self._current)

    @property
    def highest_available_slot(self) -> int:
        """Highest level with a slot left, 0 if none."""
        for index in range(MAX_SPELL_LEVEL - 1, -1, -1):
            if self._current[index] > 0:
                return index + 1
        return 0

    @property
    def lowest_available_slot(self) -> int:
        for index in range(MAX_SPELL_LEVEL):
            if self._current[index] > 0:
                return index + 1
        return 0

    @property
    def max_spell_level(self) -> int:
        """Highest level the caster has slots for at all."""
        for index in range(MAX_SPELL_LEVEL - 1, -1, -1):
            if self._max[index] > 0:
                return index + 1
        return 0

    def has_any_slots(self) -> bool:
        return any(self._current)

    def can_cast_spells(self) -> bool:
        return any(self._max)

    def set_current_slots(self, slots: list[int]) -> None:
        """Restores saved slot counts, each clamped to its maximum."""
        for index in range(MAX_SPELL_LEVEL):
            value = slots[index] if index < len(slots) else self._max[index]
            self._current[index] = clamp(int(value), 0, self._max[index])

    def restore_all(self) -> None:
        self._current = list(self._max)

    def restore_on_short_rest(self) -> bool:
        """Pact magic slots come back on a short rest; others do not."""
        if self.caster_type == CasterType.WARLOCK:
            self.restore_all()
            return True
        return False

    def restore_on_long_rest(self) -> None:
        self.restore_all()

    def set_caster_level(self, level: int) -> None:
        """Recomputes the maximum; current slots are capped, never refilled."""
        self.caster_level = level
        self._max = list(max_slots_for(self.caster_type, level))
        self._current = [min(cur, mx) for cur, mx in zip(self._current, self._max)]

    def status(self) -> str:
        parts = [
            f"{ordinal(index + 1)}: {self._current[index]}/{self._max[index]}"
            for index in range(MAX_SPELL_LEVEL)
            if self._max[index] > 0
        ]
        if not parts:
            return "Spell Slots: None"
        return "Spell Slots: " + ", ".join(parts)

    def __str__(self) -> str:
        return self.status()
