"""
Shared fixtures for the QuestKeeper tests.
"""

from collections import deque

import pytest

from questkeeper.character.character_class import CharacterClass
from questkeeper.character.character_race import Race
from questkeeper.character.main import Character
from questkeeper.combat.monster import Monster
from questkeeper.core.constants import Ability, DamageType
from questkeeper.core.dice import Dice


class ScriptedDice(Dice):
    """
    Dice that return queued values instead of random ones.

    Values are clamped to the die being rolled. Once the queue is empty
    every roll returns `fallback`.
    """

    def __init__(self, *rolls: int, fallback: int = 1) -> None:
        super().__init__(seed=0)
        self.script: deque[int] = deque(rolls)
        self.fallback = fallback
        self.sides_rolled: list[int] = []

    def queue(self, *rolls: int) -> "ScriptedDice":
        self.script.extend(rolls)
        return self

    def roll(self, sides: int) -> int:
        value = self.script.popleft() if self.script else self.fallback
        value = max(1, min(sides, value))
        self.sides_rolled.append(sides)
        self._history.append(value)
        return value


@pytest.fixture
def scripted():
    """Factory for scripted dice: `scripted(20, 3, 4)`."""
    return ScriptedDice


@pytest.fixture
def fighter():
    """Level 1 Dwarf Fighter: STR 16, DEX 12, CON 14 (16 with the racial bonus)."""
    return Character(
        name="Thorin",
        race=Race.DWARF,
        character_class=CharacterClass.FIGHTER,
        scores={
            Ability.STRENGTH: 16,
            Ability.DEXTERITY: 12,
            Ability.CONSTITUTION: 14,
        },
    )


@pytest.fixture
def wizard():
    """Level 1 Human Wizard with INT 16 (17 with the racial bonus)."""
    return Character(
        name="Elara",
        race=Race.HUMAN,
        character_class=CharacterClass.WIZARD,
        scores={
            Ability.DEXTERITY: 14,
            Ability.CONSTITUTION: 12,
            Ability.INTELLIGENCE: 16,
        },
    )


@pytest.fixture
def goblin():
    return Monster(
        name="Goblin",
        base_armor_class=13,
        max_hit_points=7,
        attack_bonus=4,
        damage_dice="1d6+2",
        damage_type=DamageType.SLASHING,
        dexterity_modifier=2,
        experience_value=50,
    )
