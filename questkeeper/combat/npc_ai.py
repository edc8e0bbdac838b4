"""
Decision helpers for hostile combatants.
"""

from typing import Any, Mapping, Sequence

from questkeeper.core.constants import Behavior

# =============================================================================
# Support Functions
# =============================================================================

DEFENSIVE_FLEE_THRESHOLD = 25.0


def should_flee(enemy: Any) -> bool:
    """
    Decides whether an enemy tries to leave the fight this turn.

    Cowardly enemies run once bloodied, defensive ones at a quarter of
    their hit points or less; the others never run.

    Args:
        enemy (Any): The enemy combatant, with a `behavior`.

    Returns:
        bool: True if the enemy should attempt to flee.

    """
    if enemy.behavior == Behavior.COWARDLY:
        return enemy.is_bloodied()
    if enemy.behavior == Behavior.DEFENSIVE:
        return enemy.hp_percentage() <= DEFENSIVE_FLEE_THRESHOLD
    return False


def lowest_hp_target(candidates: Sequence[Any]) -> Any | None:
    """The living candidate with the fewest hit points; earlier wins ties."""
    living = [c for c in candidates if c.is_alive()]
    if not living:
        return None
    return min(living, key=lambda c: c.current_hit_points)


def choose_target(
    enemy: Any,
    player: Any,
    candidates: Sequence[Any],
    last_attacker: Mapping[int, Any],
) -> Any | None:
    """
    Picks who an enemy attacks.

    Whoever last hit the enemy draws its attention. Tactical enemies
    otherwise go for the weakest living opponent, everybody else for the
    player.

    Args:
        enemy (Any): The acting enemy.
        player (Any): The player character.
        candidates (Sequence[Any]): The enemy's possible opponents.
        last_attacker (Mapping[int, Any]): Who last damaged each combatant,
            keyed by `id()` of the damaged combatant.

    Returns:
        Any | None: The chosen target, or None if nobody is left standing.

    """
    attacker = last_attacker.get(id(enemy))
    if attacker is not None and attacker.is_alive():
        return attacker
    if enemy.behavior == Behavior.TACTICAL:
        target = lowest_hp_target(candidates)
        if target is not None:
            return target
    return player if player is not None and player.is_alive() else None
