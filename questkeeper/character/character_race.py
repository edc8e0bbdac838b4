"""
Playable races and their ability score bonuses.
"""

from questkeeper.core.constants import Ability, NiceEnum

DEFAULT_SPEED = 30


class Race(NiceEnum):
    """A playable race, with fixed racial bonuses and walking speed."""

    HUMAN = "HUMAN"
    DWARF = "DWARF"
    ELF = "ELF"
    HALFLING = "HALFLING"
    DRAGONBORN = "DRAGONBORN"
    GNOME = "GNOME"
    HALF_ELF = "HALF_ELF"
    HALF_ORC = "HALF_ORC"
    TIEFLING = "TIEFLING"

    @property
    def display_name(self) -> str:
        return self.name.replace("_", "-").title()

    @property
    def speed(self) -> int:
        """Walking speed in feet."""
        return 25 if self in (Race.DWARF, Race.HALFLING, Race.GNOME) else DEFAULT_SPEED

    @property
    def ability_bonuses(self) -> dict[Ability, int]:
        """Returns the fixed racial bonuses, without any chosen Half-Elf bonus."""
        if self == Race.HUMAN:
            return {ability: 1 for ability in Ability}
        return dict(_RACIAL_BONUSES.get(self, {}))

    def ability_bonus(self, ability: Ability) -> int:
        return self.ability_bonuses.get(ability, 0)


_RACIAL_BONUSES: dict[Race, dict[Ability, int]] = {
    Race.DWARF: {Ability.CONSTITUTION: 2},
    Race.ELF: {Ability.DEXTERITY: 2},
    Race.HALFLING: {Ability.DEXTERITY: 2},
    Race.DRAGONBORN: {Ability.STRENGTH: 2, Ability.CHARISMA: 1},
    Race.GNOME: {Ability.INTELLIGENCE: 2},
    Race.HALF_ELF: {Ability.CHARISMA: 2},
    Race.HALF_ORC: {Ability.STRENGTH: 2, Ability.CONSTITUTION: 1},
    Race.TIEFLING: {Ability.INTELLIGENCE: 1, Ability.CHARISMA: 2},
}
