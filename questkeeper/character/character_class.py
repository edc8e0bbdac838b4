"""
Character classes: hit die and saving throw proficiencies.
"""

from questkeeper.core.constants import Ability, NiceEnum


class CharacterClass(NiceEnum):
    """A character class."""

    BARBARIAN = "BARBARIAN"
    BARD = "BARD"
    CLERIC = "CLERIC"
    DRUID = "DRUID"
    FIGHTER = "FIGHTER"
    MONK = "MONK"
    PALADIN = "PALADIN"
    RANGER = "RANGER"
    ROGUE = "ROGUE"
    SORCERER = "SORCERER"
    WARLOCK = "WARLOCK"
    WIZARD = "WIZARD"

    @property
    def hit_die(self) -> int:
        """Sides of the class hit die."""
        return _CLASS_TABLE[self][0]

    @property
    def saving_throws(self) -> tuple[Ability, Ability]:
        """The two saving throws the class is proficient in."""
        return _CLASS_TABLE[self][1]

    @property
    def primary_save(self) -> Ability:
        return self.saving_throws[0]

    @property
    def secondary_save(self) -> Ability:
        return self.saving_throws[1]


_STR, _DEX, _CON = Ability.STRENGTH, Ability.DEXTERITY, Ability.CONSTITUTION
_INT, _WIS, _CHA = Ability.INTELLIGENCE, Ability.WISDOM, Ability.CHARISMA

_CLASS_TABLE: dict[CharacterClass, tuple[int, tuple[Ability, Ability]]] = {
    CharacterClass.BARBARIAN: (12, (_STR, _CON)),
    CharacterClass.BARD: (8, (_DEX, _CHA)),
    CharacterClass.CLERIC: (8, (_WIS, _CHA)),
    CharacterClass.DRUID: (8, (_INT, _WIS)),
    CharacterClass.FIGHTER: (10, (_STR, _CON)),
    CharacterClass.MONK: (8, (_STR, _DEX)),
    CharacterClass.PALADIN: (10, (_WIS, _CHA)),
    CharacterClass.RANGER: (10, (_STR, _DEX)),
    CharacterClass.ROGUE: (8, (_DEX, _INT)),
    CharacterClass.SORCERER: (6, (_CON, _CHA)),
    CharacterClass.WARLOCK: (8, (_WIS, _CHA)),
    CharacterClass.WIZARD: (6, (_INT, _WIS)),
}
