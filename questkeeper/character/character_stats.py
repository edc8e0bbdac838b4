"""
Character stats module for the rules engine.

Handles ability scores and everything derived from them: modifiers, skill
and saving throw bonuses, passive perception and d20 checks.
"""

from typing import Any

from questkeeper.core.constants import (
    DEFAULT_ABILITY_SCORE,
    MAX_ABILITY_SCORE,
    MIN_ABILITY_SCORE,
    Ability,
    Skill,
)
from questkeeper.core.dice import Dice, resolve_dice
from questkeeper.core.error_handling import illegal_state, invalid_argument
from questkeeper.core.utils import clamp, format_modifier, get_stat_modifier

from .character_class import CharacterClass
from .character_race import Race


class CharacterStats:
    """
    Handles the ability scores of a Character and the modifiers derived from
    them.

    Attributes:
        owner (Any):
            The Character instance that owns this CharacterStats.
        base_scores (dict[Ability, int]):
            Scores before racial bonuses, each in [1, 20].
        half_elf_bonus (set[Ability]):
            The two abilities chosen for the Half-Elf +1 bonus.
        proficient_skills (set[Skill]):
            Skills the character is proficient in.
        expertise_skills (set[Skill]):
            Proficient skills whose proficiency bonus is doubled.

    """

    def __init__(self, owner: Any, scores: dict[Ability, int] | None = None) -> None:
        """
        Initializes the CharacterStats with a reference to its owner.

        Args:
            owner (Any):
                The Character instance that owns this CharacterStats.
            scores (dict[Ability, int] | None):
                Initial base scores, 10 for any ability left out.

        """
        self.owner: Any = owner
        self.base_scores: dict[Ability, int] = {
            ability: _clamp_score((scores or {}).get(ability, DEFAULT_ABILITY_SCORE))
            for ability in Ability
        }
        self.half_elf_bonus: set[Ability] = set()
        self.proficient_skills: set[Skill] = set()
        self.expertise_skills: set[Skill] = set()

    # ============================================================================
    # ABILITY SCORES
    # ============================================================================

    def base_score(self, ability: Ability) -> int:
        return self.base_scores[ability]

    def score(self, ability: Ability) -> int:
        """
        Returns the effective score: base plus racial bonuses, clamped.

        Args:
            ability (Ability): The ability to look up.

        Returns:
            int: The effective score in [1, 20].

        """
        race: Race = self.owner.race
        bonus = race.ability_bonus(ability)
        if race == Race.HALF_ELF and ability in self.half_elf_bonus:
            bonus += 1
        return _clamp_score(self.base_scores[ability] + bonus)

    def modifier(self, ability: Ability) -> int:
        return get_stat_modifier(self.score(ability))

    def set_score(self, ability: Ability, score: int) -> None:
        """Sets one base score, clamped to [1, 20]."""
        self.base_scores[ability] = _clamp_score(score)
        if ability == Ability.CONSTITUTION:
            self.owner.recalculate_hit_points()

    def set_scores(self, scores: dict[Ability, int]) -> None:
        """Sets several base scores at once, recomputing hit points once."""
        for ability, score in scores.items():
            self.base_scores[ability] = _clamp_score(score)
        self.owner.recalculate_hit_points()

    def set_half_elf_bonus_abilities(self, first: Ability, second: Ability) -> None:
        """
        Chooses the two abilities that receive the Half-Elf +1 bonus.

        Args:
            first (Ability): First ability, not Charisma.
            second (Ability): Second ability, not Charisma and not `first`.

        Raises:
            IllegalStateError: If the character is not a Half-Elf.
            InvalidArgumentError: If Charisma is chosen or the choices repeat.

        """
        if self.owner.race != Race.HALF_ELF:
            raise illegal_state(
                "Only Half-Elf characters can set bonus abilities",
                {"name": self.owner.name, "race": self.owner.race},
            )
        if Ability.CHARISMA in (first, second):
            raise invalid_argument(
                "Half-Elf bonus abilities cannot include Charisma (already +2)",
                {"name": self.owner.name},
            )
        if first == second:
            raise invalid_argument(
                "Half-Elf bonus abilities must be different",
                {"name": self.owner.name, "ability": first},
            )
        touches_con = Ability.CONSTITUTION in self.half_elf_bonus | {first, second}
        self.half_elf_bonus = {first, second}
        if touches_con:
            self.owner.recalculate_hit_points()

    # ============================================================================
    # ABILITY SCORE MODIFIERS
    # ============================================================================

    @property
    def STR(self) -> int:
        return self.modifier(Ability.STRENGTH)

    @property
    def DEX(self) -> int:
        return self.modifier(Ability.DEXTERITY)

    @property
    def CON(self) -> int:
        return self.modifier(Ability.CONSTITUTION)

    @property
    def INT(self) -> int:
        return self.modifier(Ability.INTELLIGENCE)

    @property
    def WIS(self) -> int:
        return self.modifier(Ability.WISDOM)

    @property
    def CHA(self) -> int:
        return self.modifier(Ability.CHARISMA)

    # ============================================================================
    # SKILLS AND SAVES
    # ============================================================================

    def add_skill_proficiency(self, skill: Skill) -> None:
        self.proficient_skills.add(skill)

    def remove_skill_proficiency(self, skill: Skill) -> None:
        self.proficient_skills.discard(skill)
        self.expertise_skills.discard(skill)

    def is_proficient_in(self, skill: Skill) -> bool:
        return skill in self.proficient_skills

    def has_expertise(self, skill: Skill) -> bool:
        return skill in self.expertise_skills

    def add_expertise(self, skill: Skill) -> None:
        """
        Grants expertise in a proficient skill.

        Raises:
            IllegalStateError: If the character is not a Rogue.
            InvalidArgumentError: If the character is not proficient in the skill.

        """
        self._check_expertise(skill)
        self.expertise_skills.add(skill)

    def set_expertise_skills(self, skills: set[Skill]) -> None:
        """Replaces the expertise set; every skill must pass add_expertise's checks."""
        for skill in skills:
            self._check_expertise(skill)
        self.expertise_skills = set(skills)

    def _check_expertise(self, skill: Skill) -> None:
        if self.owner.character_class != CharacterClass.ROGUE:
            raise illegal_state("Only Rogues can have Expertise", {"name": self.owner.name})
        if skill not in self.proficient_skills:
            raise invalid_argument(
                f"Cannot have expertise in {skill.display_name} - not proficient",
                {"name": self.owner.name, "skill": skill},
            )

    def skill_modifier(self, skill: Skill) -> int:
        """Ability modifier plus proficiency, doubled with expertise."""
        modifier = self.modifier(skill.ability)
        if skill in self.proficient_skills:
            multiplier = 2 if skill in self.expertise_skills else 1
            modifier += self.owner.proficiency_bonus * multiplier
        return modifier

    def has_saving_throw_proficiency(self, ability: Ability) -> bool:
        return ability in self.owner.character_class.saving_throws

    def saving_throw_modifier(self, ability: Ability) -> int:
        modifier = self.modifier(ability)
        if self.has_saving_throw_proficiency(ability):
            modifier += self.owner.proficiency_bonus
        return modifier

    @property
    def passive_perception(self) -> int:
        return 10 + self.skill_modifier(Skill.PERCEPTION)

    # ============================================================================
    # CHECKS
    # ============================================================================

    def make_ability_check(self, ability: Ability, dice: Dice | None = None) -> int:
        return resolve_dice(dice).roll_with_modifier(20, self.modifier(ability))

    def make_skill_check(self, skill: Skill, dice: Dice | None = None) -> int:
        return resolve_dice(dice).roll_with_modifier(20, self.skill_modifier(skill))

    def make_saving_throw(self, ability: Ability, dice: Dice | None = None) -> int:
        return resolve_dice(dice).roll_with_modifier(20, self.saving_throw_modifier(ability))

    def make_ability_check_against_dc(
        self, ability: Ability, dc: int, dice: Dice | None = None
    ) -> bool:
        return resolve_dice(dice).check_against_dc(self.modifier(ability), dc)

    def make_skill_check_against_dc(self, skill: Skill, dc: int, dice: Dice | None = None) -> bool:
        return resolve_dice(dice).check_against_dc(self.skill_modifier(skill), dc)

    def make_saving_throw_against_dc(
        self, ability: Ability, dc: int, dice: Dice | None = None
    ) -> bool:
        return resolve_dice(dice).check_against_dc(self.saving_throw_modifier(ability), dc)

    def scores_string(self) -> str:
        """Returns e.g. 'STR: 16 (+3)  DEX: 12 (+1)  ...'."""
        return "  ".join(
            f"{a.abbreviation}: {self.score(a)} ({format_modifier(self.modifier(a))})"
            for a in Ability
        )


def _clamp_score(score: int) -> int:
    return clamp(score, MIN_ABILITY_SCORE, MAX_ABILITY_SCORE)
