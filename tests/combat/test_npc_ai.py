"""
Tests for enemy decision making.
"""

import pytest

from questkeeper.combat.monster import Monster
from questkeeper.combat.npc_ai import choose_target, lowest_hp_target, should_flee
from questkeeper.core.constants import Behavior


def monster(name="Foe", behavior=Behavior.AGGRESSIVE, hp=20, current=-1):
    return Monster(name=name, max_hit_points=hp, current_hit_points=current, behavior=behavior)


@pytest.mark.parametrize(
    "behavior, current, expected",
    [
        (Behavior.AGGRESSIVE, 1, False),
        (Behavior.TACTICAL, 1, False),
        (Behavior.COWARDLY, 11, False),
        (Behavior.COWARDLY, 10, True),
        (Behavior.DEFENSIVE, 6, False),
        (Behavior.DEFENSIVE, 5, True),
    ],
)
def test_should_flee(behavior, current, expected):
    assert should_flee(monster(behavior=behavior, current=current)) is expected


def test_lowest_hp_target_ignores_the_fallen():
    a, b, c = monster("A", current=8), monster("B", current=3), monster("C", current=3)
    assert lowest_hp_target([a, b, c]) is b
    b.take_damage(3)
    assert lowest_hp_target([a, b, c]) is c
    assert lowest_hp_target([]) is None


def test_last_attacker_draws_attention(fighter, wizard):
    enemy = monster()
    assert choose_target(enemy, fighter, [fighter, wizard], {id(enemy): wizard}) is wizard


def test_dead_last_attacker_is_ignored(fighter, wizard):
    enemy = monster()
    wizard.take_damage(100)
    assert choose_target(enemy, fighter, [fighter, wizard], {id(enemy): wizard}) is fighter


def test_tactical_enemies_pick_the_weakest(fighter, wizard):
    enemy = monster(behavior=Behavior.TACTICAL)
    assert wizard.current_hit_points < fighter.current_hit_points
    assert choose_target(enemy, fighter, [fighter, wizard], {}) is wizard
    assert choose_target(monster(), fighter, [fighter, wizard], {}) is fighter


def test_no_target_when_player_is_down(fighter):
    fighter.take_damage(100)
    assert choose_target(monster(), fighter, [fighter], {}) is None
