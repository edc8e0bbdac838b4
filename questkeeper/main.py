"""
Demo entry point for the QuestKeeper rules engine.

Builds a small party-of-one adventure out of the engine's pieces:
- Creates a character, equips a weapon and attunes a magic item
- Loads a pack of monsters from plain records
- Runs a full combat, casting spells while slots last
- Rests afterwards and shows the saved character record
"""

import json
import logging

from questkeeper.character import (
    Character,
    CharacterClass,
    Race,
    character_to_dict,
    long_rest,
    monster_from_dict,
    short_rest,
)
from questkeeper.combat import CombatResultType, CombatSystem, Monster
from questkeeper.core.constants import Ability, DamageType, Skill
from questkeeper.core.logging import setup_logging
from questkeeper.core.utils import cprint, crule, make_bar
from questkeeper.effects import ring_of_fire_resistance
from questkeeper.items import MagicItem, Rarity, Weapon

# Safety cap for the demo loop.
MAX_DEMO_TURNS = 200

MONSTER_RECORDS = [
    {
        "name": "Goblin Scout",
        "ac": 13,
        "hit_points": 7,
        "attack_bonus": 4,
        "damage_dice": "1d6+2",
        "damage_type": "slashing",
        "dexterity_modifier": 2,
        "experience_value": 50,
        "behavior": "cowardly",
        "size": "small",
    },
    {
        "name": "Fire Imp",
        "armor_class": 12,
        "max_hit_points": 10,
        "attack_bonus": 3,
        "damage_dice": "1d4+1",
        "damage_type": "fire",
        "dexterity_modifier": 1,
        "experience_value": 75,
        "behavior": "tactical",
        "size": "tiny",
        "immunities": ["fire"],
    },
]


def build_player() -> Character:
    player = Character(
        name="Elara",
        race=Race.HALF_ELF,
        character_class=CharacterClass.WIZARD,
        scores={
            Ability.STRENGTH: 8,
            Ability.DEXTERITY: 14,
            Ability.CONSTITUTION: 13,
            Ability.INTELLIGENCE: 16,
            Ability.WISDOM: 12,
            Ability.CHARISMA: 10,
        },
        level=3,
    )
    player.set_half_elf_bonus_abilities(Ability.CONSTITUTION, Ability.INTELLIGENCE)
    player.stats.add_skill_proficiency(Skill.ARCANA)
    player.stats.add_skill_proficiency(Skill.PERCEPTION)
    player.equip_weapon(
        Weapon(id="dagger", name="Dagger", damage_dice="1d4", damage_type=DamageType.PIERCING, finesse=True)
    )
    player.attune(
        MagicItem(
            id="ring_of_fire_resistance",
            name="Ring of Fire Resistance",
            rarity=Rarity.RARE,
            requires_attunement=True,
            effects=[ring_of_fire_resistance()],
        )
    )
    return player


def print_status(player: Character, enemies: list[Monster]) -> None:
    cprint(
        f"  {player.name:<14} {make_bar(player.current_hit_points, player.max_hit_points, color='green')} "
        f"{player.current_hit_points}/{player.max_hit_points}"
    )
    for enemy in enemies:
        cprint(
            f"  {enemy.name:<14} {make_bar(enemy.current_hit_points, enemy.max_hit_points, color='red')} "
            f"{enemy.current_hit_points}/{enemy.max_hit_points}"
        )


def choose_action(player: Character, combat: CombatSystem) -> dict[str, str]:
    """A tiny scripted player: missiles while slots last, then the dagger."""
    if player.spellbook.can_cast("magic_missile"):
        target = min(combat.living_enemies, key=lambda e: e.current_hit_points)
        return {"action": "cast", "spell": "magic_missile", "target": target.name}
    if player.spellbook.can_cast("fire_bolt"):
        # Prefer a target that is not immune to fire.
        candidates = [e for e in combat.living_enemies if DamageType.FIRE not in e.immunities]
        if candidates:
            return {"action": "cast", "spell": "fire_bolt", "target": candidates[0].name}
    return {"action": "attack"}


def run_combat(player: Character, enemies: list[Monster]) -> None:
    combat = CombatSystem(player)
    result = combat.start_combat(enemies)
    cprint(result.format(), style="bold")

    for _ in range(MAX_DEMO_TURNS):
        result = combat.execute_turn()
        if result.type == CombatResultType.TURN_START:
            crule(f"Round {combat.round_number}: {player.name}", style="cyan", characters="-")
            print_status(player, enemies)
            result = combat.player_turn(**choose_action(player, combat))
        cprint(result.message, style="red" if result.is_error else None)
        if result.is_combat_over:
            break

    crule(f"Combat over: {result.type.display_name}", style="bold green")


def main() -> None:
    setup_logging(logging.INFO)

    crule("QuestKeeper", style="bold green")
    player = build_player()
    cprint(str(player), style="bold blue")
    cprint(player.stats.scores_string())
    cprint(player.spellbook.status())
    cprint(player.features.status())

    crule("Monsters", style="bold red")
    enemies = [monster_from_dict(record) for record in MONSTER_RECORDS]
    for enemy in enemies:
        cprint(str(enemy))

    crule("Combat", style="bold green")
    run_combat(player, enemies)

    crule("Rest", style="bold green")
    if player.is_alive():
        cprint(short_rest(player, 1).message)
        cprint(long_rest(player).message)
        cprint(player.spellbook.status())

    crule("Saved Character", style="bold green")
    cprint(json.dumps(character_to_dict(player), indent=2))


if __name__ == "__main__":
    main()
