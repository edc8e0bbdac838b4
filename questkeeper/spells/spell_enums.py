"""
Enumerations describing spells: school, casting time, duration and
components.
"""

from questkeeper.core.constants import NiceEnum


class SpellSchool(NiceEnum):
    ABJURATION = "ABJURATION"
    CONJURATION = "CONJURATION"
    DIVINATION = "DIVINATION"
    ENCHANTMENT = "ENCHANTMENT"
    EVOCATION = "EVOCATION"
    ILLUSION = "ILLUSION"
    NECROMANCY = "NECROMANCY"
    TRANSMUTATION = "TRANSMUTATION"

    @property
    def description(self) -> str:
        return {
            SpellSchool.ABJURATION: "Protective magic that blocks, banishes, or protects",
            SpellSchool.CONJURATION: "Magic that produces objects or creatures out of thin air",
            SpellSchool.DIVINATION: "Magic that reveals information",
            SpellSchool.ENCHANTMENT: "Magic that affects the minds of others",
            SpellSchool.EVOCATION: "Magic that manipulates energy to produce a desired effect",
            SpellSchool.ILLUSION: "Magic that deceives the senses or minds of others",
            SpellSchool.NECROMANCY: "Magic that manipulates life force",
            SpellSchool.TRANSMUTATION: "Magic that changes the properties of creatures or objects",
        }[self]


class CastingTime(NiceEnum):
    ACTION = "1 action"
    BONUS_ACTION = "1 bonus action"
    REACTION = "1 reaction"
    ONE_MINUTE = "1 minute"
    TEN_MINUTES = "10 minutes"
    ONE_HOUR = "1 hour"
    EIGHT_HOURS = "8 hours"
    TWELVE_HOURS = "12 hours"
    TWENTY_FOUR_HOURS = "24 hours"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def usable_in_combat(self) -> bool:
        return self in (CastingTime.ACTION, CastingTime.BONUS_ACTION, CastingTime.REACTION)


class SpellDuration(NiceEnum):
    """Spell durations; `rounds` is -1 until dispelled and -2 for special."""

    INSTANTANEOUS = "Instantaneous"
    ONE_ROUND = "1 round"
    ONE_MINUTE = "1 minute"
    TEN_MINUTES = "10 minutes"
    ONE_HOUR = "1 hour"
    EIGHT_HOURS = "8 hours"
    TWENTY_FOUR_HOURS = "24 hours"
    UNTIL_DISPELLED = "Until dispelled"
    SPECIAL = "Special"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def rounds(self) -> int:
        return {
            SpellDuration.INSTANTANEOUS: 0,
            SpellDuration.ONE_ROUND: 1,
            SpellDuration.ONE_MINUTE: 10,
            SpellDuration.TEN_MINUTES: 100,
            SpellDuration.ONE_HOUR: 600,
            SpellDuration.EIGHT_HOURS: 4800,
            SpellDuration.TWENTY_FOUR_HOURS: 14400,
            SpellDuration.UNTIL_DISPELLED: -1,
            SpellDuration.SPECIAL: -2,
        }[self]

    @property
    def is_instantaneous(self) -> bool:
        return self == SpellDuration.INSTANTANEOUS


class SpellComponent(NiceEnum):
    VERBAL = "V"
    SOMATIC = "S"
    MATERIAL = "M"

    @property
    def abbreviation(self) -> str:
        return self.value
