"""
Character management module for the rules engine.

Defines the Character class: identity, level and experience, hit points and
hit dice, armor class and attack profile. Ability scores and the modifiers
derived from them live in the CharacterStats module; spellcasting lives in
the Spellbook module; class features live in the FeatureSet module.
"""

from questkeeper.combat.combatant import AttackProfile
from questkeeper.core.constants import (
    BASE_ARMOR_CLASS,
    MAX_LEVEL,
    MIN_LEVEL,
    XP_THRESHOLDS,
    Ability,
    DamageType,
    Skill,
)
from questkeeper.core.dice import Dice, resolve_dice
from questkeeper.core.error_handling import (
    illegal_state,
    require_enum_type,
    require_non_empty_string,
)
from questkeeper.core.logging import log_debug
from questkeeper.core.utils import clamp, get_proficiency_bonus
from questkeeper.effects.base_effect import BaseItemEffect
from questkeeper.effects.resistance_effect import ResistanceEffect, apply_resistances
from questkeeper.features.class_feature import ClassFeature, FeatureResult
from questkeeper.features.feature_set import FeatureSet
from questkeeper.items.armor import Armor
from questkeeper.items.magic_item import MAX_ATTUNEMENT_SLOTS, MagicItem
from questkeeper.items.weapon import Weapon
from questkeeper.spells.spellbook import Spellbook

from .character_class import CharacterClass
from .character_race import Race
from .character_stats import CharacterStats


class Character:
    """
    Represents the player character, including stats, hit points, equipment
    and all related management modules.

    Attributes:
        name (str):
            The name of the character.
        race (Race):
            The race of the character.
        character_class (CharacterClass):
            The class of the character.
        level (int):
            The character level, 1 to 20.
        experience_points (int):
            Total experience earned.
        temporary_hit_points (int):
            Hit points lost before real ones; they do not stack.
        available_hit_dice (int):
            Hit dice left to spend on short rests, at most the level.

    """

    # === Management Modules ===

    stats: CharacterStats
    spellbook: Spellbook
    features: FeatureSet

    def __init__(
        self,
        name: str,
        race: Race,
        character_class: CharacterClass,
        scores: dict[Ability, int] | None = None,
        level: int = MIN_LEVEL,
    ) -> None:
        self.name: str = require_non_empty_string(name, "Character name")
        self.race: Race = require_enum_type(race, Race, "race", {"name": name})
        self.character_class: CharacterClass = require_enum_type(
            character_class, CharacterClass, "character_class", {"name": name}
        )
        self.level: int = clamp(level, MIN_LEVEL, MAX_LEVEL)
        self.experience_points: int = 0

        self.max_hit_points: int = 1
        self.current_hit_points: int = 1
        self.temporary_hit_points: int = 0
        self.available_hit_dice: int = self.level

        self.armor_bonus: int = 0
        self.shield_bonus: int = 0
        self.temporary_ac_bonus: int = 0
        self.equipped_weapon: Weapon | None = None
        self.attuned_items: list[MagicItem] = []

        # Initialize modules.
        self.stats = CharacterStats(owner=self, scores=scores)
        self.max_hit_points = self.calculate_max_hit_points()
        self.current_hit_points = self.max_hit_points
        self.spellbook = Spellbook(owner=self)
        self.features = FeatureSet(owner=self)

    # ============================================================================
    # DELEGATED STAT PROPERTIES
    # ============================================================================

    @property
    def proficiency_bonus(self) -> int:
        return get_proficiency_bonus(self.level)

    @property
    def speed(self) -> int:
        return self.race.speed

    @property
    def initiative_modifier(self) -> int:
        return self.stats.DEX

    @property
    def passive_perception(self) -> int:
        return self.stats.passive_perception

    @property
    def hit_die(self) -> int:
        return self.character_class.hit_die

    @property
    def max_hit_dice(self) -> int:
        return self.level

    def ability_score(self, ability: Ability) -> int:
        return self.stats.score(ability)

    def ability_modifier(self, ability: Ability) -> int:
        return self.stats.modifier(ability)

    def set_ability_score(self, ability: Ability, score: int) -> None:
        self.stats.set_score(ability, score)

    def set_ability_scores(self, scores: dict[Ability, int]) -> None:
        self.stats.set_scores(scores)

    def set_half_elf_bonus_abilities(self, first: Ability, second: Ability) -> None:
        self.stats.set_half_elf_bonus_abilities(first, second)

    def skill_modifier(self, skill: Skill) -> int:
        return self.stats.skill_modifier(skill)

    def saving_throw_modifier(self, ability: Ability) -> int:
        return self.stats.saving_throw_modifier(ability)

    def spell_save_modifier(self, ability: Ability) -> int:
        """Spell saves use the bare ability modifier, without proficiency."""
        return self.stats.modifier(ability)

    def roll_initiative(self, dice: Dice | None = None) -> int:
        return resolve_dice(dice).roll_with_modifier(20, self.initiative_modifier)

    # ============================================================================
    # HIT POINTS
    # ============================================================================

    def calculate_max_hit_points(self) -> int:
        """
        Computes max HP: the full hit die at level 1, then the fixed average
        (hit_die // 2 + 1) per level after that, always at least 1 per level.
        """
        con = self.stats.CON
        hp = self.hit_die + con
        for _ in range(2, self.level + 1):
            hp += max(1, self.hit_die // 2 + 1 + con)
        return max(1, hp)

    def recalculate_hit_points(self) -> None:
        """Re-derives max HP and clamps current HP, keeping damage taken."""
        self.max_hit_points = self.calculate_max_hit_points()
        self.current_hit_points = max(0, min(self.current_hit_points, self.max_hit_points))

    def set_current_hit_points(self, hit_points: int) -> None:
        self.current_hit_points = clamp(hit_points, 0, self.max_hit_points)

    def take_damage(self, amount: int) -> int:
        """
        Applies damage, spending temporary hit points first.

        Args:
            amount (int): Incoming damage; zero or less does nothing.

        Returns:
            int: Real hit points lost, not counting absorbed damage.

        """
        if amount <= 0:
            return 0
        remaining = amount
        if self.temporary_hit_points > 0:
            absorbed = min(self.temporary_hit_points, remaining)
            self.temporary_hit_points -= absorbed
            remaining -= absorbed
        actual = min(remaining, self.current_hit_points)
        self.current_hit_points -= actual
        log_debug(
            f"{self.name} takes {actual} damage",
            {"incoming": amount, "hp": self.current_hit_points, "temp_hp": self.temporary_hit_points},
        )
        return actual

    def take_typed_damage(
        self, amount: int, damage_type: DamageType, magical: bool = False
    ) -> int:
        """Applies damage after running it through attuned resistance effects."""
        return self.take_damage(apply_resistances(amount, damage_type, magical, self.damage_modifiers()))

    def heal(self, amount: int) -> int:
        """
        Restores hit points up to the maximum.

        Args:
            amount (int): Healing to apply; zero or less does nothing.

        Returns:
            int: The hit points actually restored.

        """
        if amount <= 0:
            return 0
        before = self.current_hit_points
        self.current_hit_points = min(self.current_hit_points + amount, self.max_hit_points)
        return self.current_hit_points - before

    def full_heal(self) -> None:
        self.current_hit_points = self.max_hit_points

    def set_temporary_hit_points(self, amount: int) -> None:
        """Grants temporary hit points; they keep the higher of old and new."""
        self.temporary_hit_points = max(self.temporary_hit_points, amount)

    def clear_temporary_hit_points(self) -> None:
        self.temporary_hit_points = 0

    def is_alive(self) -> bool:
        return self.current_hit_points > 0

    def is_unconscious(self) -> bool:
        return self.current_hit_points <= 0

    def is_bloodied(self) -> bool:
        return self.current_hit_points <= self.max_hit_points // 2

    # ============================================================================
    # HIT DICE
    # ============================================================================

    def set_available_hit_dice(self, dice_count: int) -> None:
        self.available_hit_dice = clamp(dice_count, 0, self.level)

    def use_hit_die(self, dice: Dice | None = None) -> int:
        """
        Spends one hit die to heal.

        Returns:
            int: Hit points healed, 0 if already at full health, -1 if no
            hit dice are left.

        """
        if self.available_hit_dice <= 0:
            return -1
        if self.current_hit_points >= self.max_hit_points:
            return 0
        self.available_hit_dice -= 1
        roll = resolve_dice(dice).roll(self.hit_die)
        return self.heal(max(1, roll + self.stats.CON))

    def restore_hit_dice(self) -> int:
        """Regains half the maximum hit dice (at least 1); returns the number regained."""
        before = self.available_hit_dice
        self.available_hit_dice = min(self.level, self.available_hit_dice + max(1, self.level // 2))
        return self.available_hit_dice - before

    # ============================================================================
    # EXPERIENCE AND LEVEL
    # ============================================================================

    @property
    def xp_for_next_level(self) -> int:
        """Experience needed for the next level, -1 at the level cap."""
        if self.level >= len(XP_THRESHOLDS):
            return -1
        return XP_THRESHOLDS[self.level]

    def set_experience_points(self, xp: int) -> None:
        self.experience_points = max(0, xp)

    def add_experience(self, xp: int) -> int:
        """
        Adds experience and levels up as many times as the table allows.

        Args:
            xp (int): Experience to add; zero or less does nothing.

        Returns:
            int: The number of levels gained.

        """
        if xp <= 0:
            return 0
        self.experience_points += xp
        gained = 0
        while self.level < len(XP_THRESHOLDS) and self.experience_points >= XP_THRESHOLDS[self.level]:
            self._level_up()
            gained += 1
        return gained

    def _level_up(self) -> None:
        self.level += 1
        old_max = self.max_hit_points
        self.max_hit_points = self.calculate_max_hit_points()
        self.current_hit_points += self.max_hit_points - old_max
        self.available_hit_dice += 1
        self.spellbook.on_level_up()
        self.features.on_level_up()
        log_debug(f"{self.name} reached level {self.level}", {"max_hp": self.max_hit_points})

    def set_level(self, level: int) -> None:
        """Sets the level directly, clamped to 1-20, without healing."""
        self.level = clamp(level, MIN_LEVEL, MAX_LEVEL)
        self.recalculate_hit_points()
        self.available_hit_dice = min(self.available_hit_dice, self.level)
        self.spellbook.on_level_up()
        self.features.on_level_up()

    # ============================================================================
    # CLASS FEATURES
    # ============================================================================

    def get_feature(self, feature_id: str) -> ClassFeature | None:
        return self.features.get(feature_id)

    def has_feature(self, feature_id: str) -> bool:
        return self.features.has(feature_id)

    def can_use_feature(self, feature_id: str) -> bool:
        return self.features.can_use(feature_id)

    def use_feature(self, feature_id: str, dice: Dice | None = None) -> FeatureResult:
        return self.features.use(feature_id, dice)

    @property
    def critical_threshold(self) -> int:
        return self.features.critical_threshold

    # ============================================================================
    # ARMOR CLASS AND EQUIPMENT
    # ============================================================================

    @property
    def armor_class(self) -> int:
        return (
            BASE_ARMOR_CLASS
            + self.stats.DEX
            + self.armor_bonus
            + self.shield_bonus
            + self.temporary_ac_bonus
        )

    def set_armor_bonus(self, bonus: int) -> None:
        self.armor_bonus = max(0, bonus)

    def set_shield_bonus(self, bonus: int) -> None:
        self.shield_bonus = max(0, bonus)

    def equip_armor(self, armor: Armor) -> None:
        """Reads the bonus of a body armor or shield into the matching slot."""
        if armor.is_shield:
            self.set_shield_bonus(armor.shield_bonus)
        else:
            self.set_armor_bonus(armor.armor_bonus)

    def add_temporary_ac_bonus(self, bonus: int) -> None:
        self.temporary_ac_bonus += max(0, bonus)

    def clear_temporary_ac_bonus(self) -> None:
        self.temporary_ac_bonus = 0

    def equip_weapon(self, weapon: Weapon | None) -> None:
        self.equipped_weapon = weapon

    def attack_profile(self) -> AttackProfile:
        """
        Builds the basic attack: ranged weapons use DEX, finesse weapons the
        better of STR and DEX, everything else STR. Unarmed strikes deal a
        flat 1 damage plus the modifier.
        """
        weapon = self.equipped_weapon
        if weapon is None:
            return AttackProfile(
                attack_bonus=self.stats.STR + self.proficiency_bonus,
                damage_dice="1",
                damage_modifier=self.stats.STR,
                critical_threshold=self.critical_threshold,
            )
        if weapon.ranged:
            ability_mod = self.stats.DEX
        elif weapon.finesse:
            ability_mod = max(self.stats.STR, self.stats.DEX)
        else:
            ability_mod = self.stats.STR
        return AttackProfile(
            attack_bonus=ability_mod + self.proficiency_bonus + weapon.magic_bonus,
            damage_dice=weapon.damage_dice,
            damage_modifier=ability_mod + weapon.magic_bonus,
            damage_type=weapon.damage_type,
            magical=weapon.is_magical,
            weapon_name=weapon.name,
            critical_threshold=self.critical_threshold,
        )

    # ============================================================================
    # MAGIC ITEMS
    # ============================================================================

    def attune(self, item: MagicItem) -> None:
        """
        Attunes a magic item, activating its effects.

        Raises:
            IllegalStateError: If all attunement slots are taken.

        """
        if item in self.attuned_items:
            return
        if item.requires_attunement and self.attunement_slots_used >= MAX_ATTUNEMENT_SLOTS:
            raise illegal_state(
                f"{self.name} cannot attune more than {MAX_ATTUNEMENT_SLOTS} items",
                {"item": item.id},
            )
        item.attuned_to = self.name if item.requires_attunement else None
        self.attuned_items.append(item)

    def unattune(self, item: MagicItem) -> None:
        if item in self.attuned_items:
            self.attuned_items.remove(item)
            item.attuned_to = None

    @property
    def attunement_slots_used(self) -> int:
        return sum(1 for item in self.attuned_items if item.requires_attunement)

    def item_effects(self) -> list[BaseItemEffect]:
        """Every effect granted by the character's active magic items."""
        return [effect for item in self.attuned_items for effect in item.active_effects()]

    def damage_modifiers(self) -> list[ResistanceEffect]:
        return [effect for item in self.attuned_items for effect in item.resistance_effects()]

    # ============================================================================
    # DISPLAY
    # ============================================================================

    def __str__(self) -> str:
        return (
            f"{self.name} - Level {self.level} {self.race.display_name} "
            f"{self.character_class.display_name} "
            f"(HP: {self.current_hit_points}/{self.max_hit_points}, AC: {self.armor_class})"
        )

    def __repr__(self) -> str:
        return f"Character(name={self.name!r}, level={self.level})"
