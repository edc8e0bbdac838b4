"""
Read-only registry of spell definitions.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from questkeeper.core.error_handling import invalid_argument

from .catalog import all_spells
from .spell import Spell
from .spell_enums import SpellSchool


def _by_level_then_name(spell: Spell) -> tuple[int, str]:
    return spell.level, spell.name


class SpellRegistry:
    """
    Spell definitions keyed by id.

    Spells are frozen, so lookups hand out the shared definitions directly.
    """

    def __init__(self, spells: Iterable[Spell]) -> None:
        table: dict[str, Spell] = {}
        for spell in spells:
            if spell.id in table:
                raise invalid_argument(f"Duplicate spell id: {spell.id}", {"name": spell.name})
            table[spell.id] = spell
        self._spells: Mapping[str, Spell] = MappingProxyType(table)

    @classmethod
    def default(cls) -> "SpellRegistry":
        """A registry holding every built-in spell."""
        return cls(all_spells())

    @property
    def spells(self) -> Mapping[str, Spell]:
        return self._spells

    def get(self, spell_id: str) -> Spell | None:
        return self._spells.get(spell_id)

    def get_by_name(self, name: str) -> Spell | None:
        """Finds a spell by exact name, then by partial match, ignoring case."""
        wanted = name.strip().lower()
        if not wanted:
            return None
        for spell in self._spells.values():
            if spell.name.lower() == wanted:
                return spell
        for spell in self._spells.values():
            candidate = spell.name.lower()
            if wanted in candidate or candidate in wanted:
                return spell
        return None

    def by_school(self, school: SpellSchool) -> list[Spell]:
        return sorted(
            (s for s in self._spells.values() if s.school == school), key=_by_level_then_name
        )

    def by_level(self, level: int) -> list[Spell]:
        return sorted((s for s in self._spells.values() if s.level == level), key=lambda s: s.name)

    def cantrips(self) -> list[Spell]:
        return self.by_level(0)

    def up_to_level(self, max_level: int) -> list[Spell]:
        return sorted(
            (s for s in self._spells.values() if s.level <= max_level), key=_by_level_then_name
        )

    def __contains__(self, spell_id: object) -> bool:
        return spell_id in self._spells

    def __len__(self) -> int:
        return len(self._spells)

    def __iter__(self):
        return iter(sorted(self._spells.values(), key=_by_level_then_name))
