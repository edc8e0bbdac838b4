"""
Combat system module for the QuestKeeper rules engine.

This module handles turn-based combat between the player and monsters:
initiative, attack resolution, enemy behaviour and combat outcomes.
"""

from .combat_manager import CombatConfig, CombatState, CombatSystem
from .combat_result import CombatResult, CombatResultType
from .combatant import AttackProfile, Combatant, EnemyCombatant, PlayerCombatant
from .monster import Monster
from .npc_ai import choose_target, lowest_hp_target, should_flee

__all__ = [
    # Import from combat_manager.py
    "CombatConfig",
    "CombatState",
    "CombatSystem",
    # Import from combat_result.py
    "CombatResult",
    "CombatResultType",
    # Import from combatant.py
    "AttackProfile",
    "Combatant",
    "EnemyCombatant",
    "PlayerCombatant",
    # Import from monster.py
    "Monster",
    # Import from npc_ai.py
    "choose_target",
    "lowest_hp_target",
    "should_flee",
]
