"""
Constants and enumerations for the rules engine.

Defines global game constants, the six abilities, skills, damage types and
the monster size and behaviour enumerations used throughout the engine.
"""

from enum import Enum

# ==============================================================================
# GAME CONSTANTS
# ==============================================================================

MIN_ABILITY_SCORE = 1
MAX_ABILITY_SCORE = 20
DEFAULT_ABILITY_SCORE = 10
BASE_ARMOR_CLASS = 10
MIN_LEVEL = 1
MAX_LEVEL = 20

# Experience needed to reach level N is XP_THRESHOLDS[N - 1].
XP_THRESHOLDS: tuple[int, ...] = (
    0, 300, 900, 2700, 6500, 14000, 23000, 34000, 48000, 64000,
    85000, 100000, 120000, 140000, 165000, 195000, 225000, 265000, 305000, 355000,
)

# Combat tunables, overridable per encounter through CombatConfig.
FLEE_DC = 10
ENEMY_FLEE_DC = 12
DEFAULT_WEAPON_DICE = "1d8"

# Save modifier assumed for combatants without a full save table.
DEFAULT_MONSTER_SAVE_BONUS = 2

# Number of rolls remembered by a Dice instance.
DICE_HISTORY_LIMIT = 1000

# Spell constraints.
MAX_SPELL_LEVEL = 9
SHIELD_AC_BONUS = 5


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()


class Ability(NiceEnum):
    """The six ability scores."""

    STRENGTH = "STR"
    DEXTERITY = "DEX"
    CONSTITUTION = "CON"
    INTELLIGENCE = "INT"
    WISDOM = "WIS"
    CHARISMA = "CHA"

    @property
    def abbreviation(self) -> str:
        return self.value

    @property
    def full_name(self) -> str:
        return self.display_name


class Skill(NiceEnum):
    """Skills, each bound to the ability that drives it."""

    ATHLETICS = "Athletics"
    ACROBATICS = "Acrobatics"
    SLEIGHT_OF_HAND = "Sleight of Hand"
    STEALTH = "Stealth"
    ARCANA = "Arcana"
    HISTORY = "History"
    INVESTIGATION = "Investigation"
    NATURE = "Nature"
    RELIGION = "Religion"
    ANIMAL_HANDLING = "Animal Handling"
    INSIGHT = "Insight"
    MEDICINE = "Medicine"
    PERCEPTION = "Perception"
    SURVIVAL = "Survival"
    DECEPTION = "Deception"
    INTIMIDATION = "Intimidation"
    PERFORMANCE = "Performance"
    PERSUASION = "Persuasion"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def ability(self) -> Ability:
        """Returns the ability this skill is based on."""
        return _SKILL_ABILITIES[self]


_SKILL_ABILITIES: dict[Skill, Ability] = {
    Skill.ATHLETICS: Ability.STRENGTH,
    Skill.ACROBATICS: Ability.DEXTERITY,
    Skill.SLEIGHT_OF_HAND: Ability.DEXTERITY,
    Skill.STEALTH: Ability.DEXTERITY,
    Skill.ARCANA: Ability.INTELLIGENCE,
    Skill.HISTORY: Ability.INTELLIGENCE,
    Skill.INVESTIGATION: Ability.INTELLIGENCE,
    Skill.NATURE: Ability.INTELLIGENCE,
    Skill.RELIGION: Ability.INTELLIGENCE,
    Skill.ANIMAL_HANDLING: Ability.WISDOM,
    Skill.INSIGHT: Ability.WISDOM,
    Skill.MEDICINE: Ability.WISDOM,
    Skill.PERCEPTION: Ability.WISDOM,
    Skill.SURVIVAL: Ability.WISDOM,
    Skill.DECEPTION: Ability.CHARISMA,
    Skill.INTIMIDATION: Ability.CHARISMA,
    Skill.PERFORMANCE: Ability.CHARISMA,
    Skill.PERSUASION: Ability.CHARISMA,
}


class DamageType(NiceEnum):
    """
    Defines the types of damage that can be inflicted.

    NONMAGICAL_PHYSICAL and ALL are categories used only by resistance
    effects; attacks and spells always carry a concrete type.
    """

    BLUDGEONING = "BLUDGEONING"
    PIERCING = "PIERCING"
    SLASHING = "SLASHING"
    ACID = "ACID"
    COLD = "COLD"
    FIRE = "FIRE"
    LIGHTNING = "LIGHTNING"
    THUNDER = "THUNDER"
    FORCE = "FORCE"
    NECROTIC = "NECROTIC"
    POISON = "POISON"
    PSYCHIC = "PSYCHIC"
    RADIANT = "RADIANT"
    NONMAGICAL_PHYSICAL = "NONMAGICAL_PHYSICAL"
    ALL = "ALL"

    @property
    def display_name(self) -> str:
        if self == DamageType.NONMAGICAL_PHYSICAL:
            return "Nonmagical Weapons"
        if self == DamageType.ALL:
            return "All Damage"
        return self.name.capitalize()

    @property
    def is_physical(self) -> bool:
        return self in (DamageType.BLUDGEONING, DamageType.PIERCING, DamageType.SLASHING)

    @property
    def is_category(self) -> bool:
        return self in (DamageType.NONMAGICAL_PHYSICAL, DamageType.ALL)

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this damage type."""
        return {
            DamageType.PIERCING: "🗡️",
            DamageType.SLASHING: "🪓",
            DamageType.BLUDGEONING: "🔨",
            DamageType.FIRE: "🔥",
            DamageType.COLD: "❄️",
            DamageType.LIGHTNING: "⚡",
            DamageType.THUNDER: "🌩️",
            DamageType.POISON: "☠️",
            DamageType.NECROTIC: "🖤",
            DamageType.RADIANT: "✨",
            DamageType.PSYCHIC: "💫",
            DamageType.FORCE: "🌀",
            DamageType.ACID: "🧪",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the rich color string associated with this damage type."""
        return {
            DamageType.FIRE: "bold red",
            DamageType.COLD: "bold cyan",
            DamageType.LIGHTNING: "bold yellow",
            DamageType.THUNDER: "yellow",
            DamageType.POISON: "green",
            DamageType.NECROTIC: "magenta",
            DamageType.RADIANT: "bold white",
            DamageType.PSYCHIC: "bright_magenta",
            DamageType.FORCE: "bright_blue",
            DamageType.ACID: "bright_green",
        }.get(self, "dim white")

    def colorize(self, message: str) -> str:
        """Applies damage type color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class Size(NiceEnum):
    """Creature sizes with the space they occupy, in feet."""

    TINY = "TINY"
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"
    HUGE = "HUGE"
    GARGANTUAN = "GARGANTUAN"

    @property
    def space(self) -> float:
        """Returns the side of the square the creature controls, in feet."""
        return {
            Size.TINY: 2.5,
            Size.SMALL: 5.0,
            Size.MEDIUM: 5.0,
            Size.LARGE: 10.0,
            Size.HUGE: 15.0,
            Size.GARGANTUAN: 20.0,
        }[self]


class Behavior(NiceEnum):
    """How a hostile combatant behaves in battle."""

    AGGRESSIVE = "AGGRESSIVE"
    DEFENSIVE = "DEFENSIVE"
    COWARDLY = "COWARDLY"
    TACTICAL = "TACTICAL"

    @property
    def description(self) -> str:
        return {
            Behavior.AGGRESSIVE: "Fights to the death",
            Behavior.DEFENSIVE: "Flees when badly wounded",
            Behavior.COWARDLY: "Flees once bloodied",
            Behavior.TACTICAL: "Focuses the weakest target",
        }[self]
