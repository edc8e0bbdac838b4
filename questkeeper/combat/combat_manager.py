"""
Turn-based combat between the player and a group of enemies.

The combat system owns the initiative order and the turn pointer. Every
public operation returns a `CombatResult`; invalid requests come back as
ERROR results and leave the turn untouched.
"""

from typing import Any

from catchery import log_debug, log_warning
from pydantic import BaseModel, Field

from questkeeper.core.constants import (
    DEFAULT_WEAPON_DICE,
    ENEMY_FLEE_DC,
    FLEE_DC,
    Ability,
    NiceEnum,
)
from questkeeper.core.dice import Dice, is_valid_notation, parse_notation, resolve_dice
from questkeeper.core.error_handling import ensure_non_negative_int
from questkeeper.effects.activation import use_effect
from questkeeper.effects.resistance_effect import apply_resistances
from questkeeper.effects.usage import UsageType
from questkeeper.features.fighter import ACTION_SURGE_ID, SECOND_WIND_ID
from questkeeper.features.rogue import CUNNING_ACTION_ID
from questkeeper.spells.spell_enums import CastingTime
from questkeeper.spells.spell_result import SpellResultType

from .combat_result import CombatResult, CombatResultType
from .combatant import AttackProfile, Combatant, EnemyCombatant, PlayerCombatant
from .npc_ai import choose_target, should_flee

SHIELD_SPELL_ID = "shield"
STILL_HAVE_ACTION = "(You can still take your action this turn.)"
ACTION_SURGE_NOTE = "[Action Surge: You can take another action!]"


class CombatState(NiceEnum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    ENDED = "ENDED"


class CombatConfig(BaseModel):
    """Per-encounter tunables."""

    flee_dc: int = Field(
        default=FLEE_DC,
        description="DC of the player's DEX check to escape.",
    )
    enemy_flee_dc: int = Field(
        default=ENEMY_FLEE_DC,
        description="DC of an enemy's DEX check to escape.",
    )
    default_weapon_dice: str = Field(
        default=DEFAULT_WEAPON_DICE,
        description="Damage rolled when an attack profile has unusable dice.",
    )
    auto_shield_reaction: bool = Field(
        default=True,
        description="Whether the player casts Shield automatically when it would turn a hit into a miss.",
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "CombatConfig":
        """Builds a config from a plain record, correcting bad values with a warning."""
        data = data or {}
        context = {"source": "CombatConfig.from_dict"}
        dice = data.get("default_weapon_dice", DEFAULT_WEAPON_DICE)
        if not is_valid_notation(dice):
            log_warning(
                f"Invalid default weapon dice '{dice}', using {DEFAULT_WEAPON_DICE}", context
            )
            dice = DEFAULT_WEAPON_DICE
        return cls(
            flee_dc=ensure_non_negative_int(data.get("flee_dc", FLEE_DC), "flee_dc", FLEE_DC, context),
            enemy_flee_dc=ensure_non_negative_int(
                data.get("enemy_flee_dc", ENEMY_FLEE_DC), "enemy_flee_dc", ENEMY_FLEE_DC, context
            ),
            default_weapon_dice=dice,
            auto_shield_reaction=bool(data.get("auto_shield_reaction", True)),
        )


class CombatSystem:
    """
    Runs one encounter at a time.

    Unconscious combatants keep their place in the initiative order and are
    skipped when their turn comes up. Enemies that flee are removed from it.

    Bonus actions (Second Wind, Cunning Action) and Action Surge never end
    the player's turn. The per-turn flags tracking them are cleared whenever
    the turn advances.
    """

    def __init__(
        self,
        player: PlayerCombatant,
        config: CombatConfig | None = None,
        dice: Dice | None = None,
    ) -> None:
        """
        Initialize the combat system.

        Args:
            player (PlayerCombatant): The character controlled by the user.
            config (CombatConfig | None): Encounter tunables.
            dice (Dice | None): Dice for every roll made by the system.

        """
        self.player: PlayerCombatant = player
        self.config: CombatConfig = config or CombatConfig()
        self.dice: Dice = resolve_dice(dice)
        self.state: CombatState = CombatState.NOT_STARTED
        self.enemies: list[EnemyCombatant] = []
        self.fled_enemies: list[EnemyCombatant] = []
        self.initiative: list[Combatant] = []
        self.initiative_rolls: dict[int, int] = {}
        # Keyed by id() of the damaged combatant.
        self.last_attacker: dict[int, Combatant] = {}
        self.current_turn: int = 0
        self.round_number: int = 0
        self.player_fled: bool = False
        self.bonus_action_used: bool = False
        self.action_surge_active: bool = False
        self.disengage_active: bool = False

    # ============================================================================
    # LIFECYCLE
    # ============================================================================

    @property
    def in_combat(self) -> bool:
        return self.state == CombatState.IN_PROGRESS

    def start_combat(self, enemies: list[EnemyCombatant]) -> CombatResult:
        """
        Starts an encounter: resets the enemies and rolls initiative.

        Initiative is d20 + DEX modifier, highest first. Ties go to the higher
        DEX modifier, then to the earlier position (player first, then the
        enemies in the order given).
        """
        if self.in_combat:
            return CombatResult.error("Combat is already in progress.")
        if not enemies:
            return CombatResult.error("No enemies to fight.")
        self.enemies = list(enemies)
        self.fled_enemies = []
        self.last_attacker = {}
        self.player_fled = False
        self._reset_turn_flags()
        for enemy in self.enemies:
            enemy.reset_hit_points()
        participants: list[Combatant] = [self.player, *self.enemies]
        self.initiative_rolls = {id(c): c.roll_initiative(self.dice) for c in participants}
        ordered = sorted(
            enumerate(participants),
            key=lambda item: (
                -self.initiative_rolls[id(item[1])],
                -item[1].initiative_modifier,
                item[0],
            ),
        )
        self.initiative = [combatant for _, combatant in ordered]
        self.current_turn = 0
        self.round_number = 1
        self.state = CombatState.IN_PROGRESS
        log_debug(
            "Combat started",
            {"order": [c.name for c in self.initiative], "enemies": len(self.enemies)},
        )
        return CombatResult.combat_start(
            self.initiative, [self.initiative_rolls[id(c)] for c in self.initiative]
        )

    def end_combat(self) -> CombatResult:
        """Aborts the encounter without awarding experience."""
        if not self.in_combat:
            return CombatResult.error("Not in combat.")
        self.state = CombatState.ENDED
        return CombatResult.info("Combat ended.")

    # ============================================================================
    # STATE ACCESSORS
    # ============================================================================

    @property
    def current_combatant(self) -> Combatant | None:
        if not self.initiative or not 0 <= self.current_turn < len(self.initiative):
            return None
        return self.initiative[self.current_turn]

    @property
    def living_enemies(self) -> list[EnemyCombatant]:
        return [e for e in self.enemies if e.is_alive() and not self._has_fled(e)]

    def initiative_roll(self, combatant: Combatant) -> int:
        return self.initiative_rolls.get(id(combatant), 0)

    def last_attacker_of(self, combatant: Combatant) -> Combatant | None:
        return self.last_attacker.get(id(combatant))

    def is_enemy(self, combatant: Combatant) -> bool:
        return any(combatant is e for e in self.enemies)

    def _has_fled(self, enemy: Combatant) -> bool:
        return any(enemy is e for e in self.fled_enemies)

    def _reset_turn_flags(self) -> None:
        self.bonus_action_used = False
        self.action_surge_active = False
        self.disengage_active = False

    def _advance_turn(self) -> None:
        self._reset_turn_flags()
        if not self.initiative:
            return
        self.current_turn = (self.current_turn + 1) % len(self.initiative)
        if self.current_turn == 0:
            self.round_number += 1

    # ============================================================================
    # TURNS
    # ============================================================================

    def execute_turn(self) -> CombatResult:
        """
        Starts the next turn.

        Unconscious combatants are skipped. The acting combatant loses any
        temporary AC bonus; enemies then act on their own, while for the
        player a TURN_START result is returned and `player_turn` is expected.
        """
        if not self.in_combat:
            return CombatResult.error("Not in combat.")
        end = self._check_end_conditions()
        if end is not None:
            return end
        for _ in range(len(self.initiative)):
            current = self.current_combatant
            if current is not None and current.is_alive():
                break
            self._advance_turn()
        current = self.current_combatant
        if current is None or not current.is_alive():
            return self._check_end_conditions() or CombatResult.error("No combatant can act.")
        current.clear_temporary_ac_bonus()
        if self.is_enemy(current):
            return self.enemy_turn()
        return CombatResult.turn_start(current)

    def player_turn(
        self,
        action: str,
        target: str | None = None,
        spell: str | None = None,
        slot_level: int | None = None,
        effect: str | None = None,
    ) -> CombatResult:
        """
        Resolves the player's action for this turn.

        Args:
            action (str): One of attack, cast, use or flee (with aliases),
                or a class feature: second wind, action surge, dash,
                disengage or hide.
            target (str | None): Name of the enemy to act against; the first
                living enemy when omitted.
            spell (str | None): Spell id or name, for `cast`.
            slot_level (int | None): Slot to cast with; the spell's level
                when omitted.
            effect (str | None): Item effect id or name, for `use`.

        Returns:
            CombatResult: The outcome. ERROR results and class features do
            not end the turn.

        """
        if not self.in_combat:
            return CombatResult.error("Not in combat.")
        current = self.current_combatant
        if current is None or current is not self.player:
            return CombatResult.error("It's not your turn.")
        if action is None or not action.strip():
            return CombatResult.error("What do you want to do? (attack, cast, use, flee)")
        normalized = " ".join(action.strip().lower().split())
        if normalized in ("attack", "hit", "strike"):
            return self._handle_attack(target)
        if normalized in ("cast", "spell"):
            return self._handle_cast(spell, target, slot_level)
        if normalized in ("use", "activate"):
            return self._handle_use(effect)
        if normalized in ("flee", "run", "escape"):
            return self._handle_flee()
        if normalized in ("second wind", "second_wind", "secondwind"):
            return self._handle_second_wind()
        if normalized in ("surge", "action surge", "action_surge", "actionsurge"):
            return self._handle_action_surge()
        if normalized in ("dash", "disengage", "hide"):
            return self._handle_cunning_action(normalized)
        return CombatResult.error(
            f"Unknown action: {action}. Try: attack, cast, use, flee, "
            "second wind, surge, dash, disengage, or hide"
        )

    def enemy_turn(self) -> CombatResult:
        """Runs the AI for the enemy whose turn it is."""
        if not self.in_combat:
            return CombatResult.error("Not in combat.")
        enemy = self.current_combatant
        if enemy is None or not self.is_enemy(enemy):
            return CombatResult.error("It's not an enemy's turn.")

        if should_flee(enemy):
            fled = self._attempt_enemy_flee(enemy)
            if fled is not None:
                return fled

        candidates = [self.player]
        target = choose_target(enemy, self.player, candidates, self.last_attacker)
        if target is None:
            return self._check_end_conditions() or CombatResult.error("No target to attack.")

        result = self.process_attack(enemy, target)
        self._advance_turn()
        if target is self.player and not self.player.is_alive():
            self.state = CombatState.ENDED
            log_debug("Player defeated", {"enemy": enemy.name})
            return CombatResult.defeat(self.player, result.message)
        return result

    # ============================================================================
    # PLAYER ACTIONS
    # ============================================================================

    def _find_enemy(self, name: str | None) -> tuple[EnemyCombatant | None, CombatResult | None]:
        """Resolves a target name to a living enemy, or an ERROR result."""
        living = self.living_enemies
        if not name or not name.strip():
            return living[0], None
        wanted = name.strip().lower()
        for enemy in living:
            if enemy.name.lower() == wanted or wanted in enemy.name.lower():
                return enemy, None
        for enemy in self.enemies:
            if wanted in enemy.name.lower() and not enemy.is_alive():
                return None, CombatResult.error(f"{enemy.name} is already defeated.")
        names = ", ".join(e.name for e in living)
        return None, CombatResult.error(f"No enemy named '{name}'. Enemies: {names}")

    def _end_player_action(self, result: CombatResult) -> CombatResult:
        """Ends the turn, unless an active Action Surge grants another action."""
        if self.action_surge_active:
            self.action_surge_active = False
            result.message = f"{result.message}\n{ACTION_SURGE_NOTE}"
            return result
        self._advance_turn()
        return result

    def _after_player_damage(self, target: Combatant, result: CombatResult) -> CombatResult:
        """Ends the action and reports a kill or victory if the target went down."""
        if target.is_alive() or not self.is_enemy(target):
            return self._end_player_action(result)
        if not self.living_enemies:
            self._advance_turn()
            return self._victory(result.message)
        return self._end_player_action(CombatResult.enemy_defeated(target, result.message))

    def _handle_attack(self, target_name: str | None) -> CombatResult:
        if not self.living_enemies:
            return self._check_end_conditions() or CombatResult.error("No enemies left.")
        enemy, error = self._find_enemy(target_name)
        if error is not None:
            return error
        result = self.process_attack(self.player, enemy)
        if result.is_error:
            return result
        return self._after_player_damage(enemy, result)

    def _handle_cast(
        self, spell_ref: str | None, target_name: str | None, slot_level: int | None
    ) -> CombatResult:
        spellbook = getattr(self.player, "spellbook", None)
        if spellbook is None or not spellbook.can_cast_spells():
            return CombatResult.error("You cannot cast spells.")
        if not spell_ref or not spell_ref.strip():
            return CombatResult.error("Which spell do you want to cast?")
        spell = spellbook.find(spell_ref.strip())
        if spell is None:
            return CombatResult.error(f"Unknown spell: {spell_ref}")
        if not spell.casting_time.usable_in_combat:
            return CombatResult.error(f"{spell.name} takes too long to cast in combat.")
        if spell.casting_time == CastingTime.REACTION:
            return CombatResult.error(f"{spell.name} can only be cast as a reaction.")

        target: Combatant | None = None
        if spell.can_target_enemy:
            if not self.living_enemies:
                return self._check_end_conditions() or CombatResult.error("No enemies left.")
            target, error = self._find_enemy(target_name)
            if error is not None:
                return error
        elif spell.can_target_ally:
            target = self.player

        if slot_level is None:
            outcome = spellbook.cast(spell.id, target, self.dice)
        else:
            outcome = spellbook.cast_at_level(spell.id, target, slot_level, self.dice)
        if outcome.type == SpellResultType.ERROR:
            return CombatResult.error(outcome.message)
        if target is not None and outcome.deals_damage:
            self.last_attacker[id(target)] = self.player
        result = CombatResult.spell(
            self.player, target, f"{self.player.name} casts {spell.name}! {outcome.message}", outcome.damage
        )
        if target is None:
            return self._end_player_action(result)
        return self._after_player_damage(target, result)

    def _handle_use(self, effect_ref: str | None) -> CombatResult:
        effects = getattr(self.player, "item_effects", None)
        available = effects() if effects is not None else []
        if not effect_ref or not effect_ref.strip():
            return CombatResult.error("Which item effect do you want to use?")
        wanted = effect_ref.strip().lower()
        effect = next(
            (e for e in available if e.id.lower() == wanted or e.name.lower() == wanted),
            None,
        ) or next((e for e in available if wanted in e.name.lower()), None)
        if effect is None:
            return CombatResult.error(f"You have no item effect named '{effect_ref}'.")
        if effect.usage_type == UsageType.PASSIVE:
            return CombatResult.error(f"{effect.name} is always active.")
        outcome = use_effect(effect, self.player)
        if not outcome.success:
            return CombatResult.error(outcome.message)
        return self._end_player_action(CombatResult.item(self.player, outcome.message))

    def _handle_flee(self) -> CombatResult:
        """
        Opportunity attacks from every living enemy, then a DEX check.

        Disengage this turn skips the opportunity attacks. A failed check
        ends the turn.
        """
        messages = []
        threats = [] if self.disengage_active else self.living_enemies
        for enemy in threats:
            attack = self.process_attack(enemy, self.player, prefix="Opportunity Attack! ")
            messages.append(attack.message)
            if not self.player.is_alive():
                self.state = CombatState.ENDED
                return CombatResult.defeat(self.player, "\n".join(messages))

        dex_mod = self.player.ability_modifier(Ability.DEXTERITY)
        if self.dice.check_against_dc(dex_mod, self.config.flee_dc):
            self.player_fled = True
            self.state = CombatState.ENDED
            messages.append("You fled from combat!")
            log_debug("Player fled", {"dc": self.config.flee_dc})
            return CombatResult.fled("\n".join(messages))
        self._advance_turn()
        messages.append(f"Failed to flee! [DEX check vs DC {self.config.flee_dc}]")
        return CombatResult.info("\n".join(messages))

    # ============================================================================
    # CLASS FEATURES
    # ============================================================================

    def _player_feature(self, feature_id: str, name: str) -> tuple[Any, CombatResult | None]:
        """Looks up one of the player's features, or an ERROR result."""
        features = getattr(self.player, "features", None)
        feature = features.get(feature_id) if features is not None else None
        if feature is None:
            return None, CombatResult.error(f"You don't have the {name} ability.")
        return features, None

    def _handle_second_wind(self) -> CombatResult:
        if self.bonus_action_used:
            return CombatResult.error("You've already used your bonus action this turn.")
        features, error = self._player_feature(SECOND_WIND_ID, "Second Wind")
        if error is not None:
            return error
        if not features.can_use(SECOND_WIND_ID):
            return CombatResult.error(
                "You have no uses of Second Wind remaining. Take a short rest to recover it."
            )
        outcome = features.use(SECOND_WIND_ID, self.dice)
        self.bonus_action_used = True
        return CombatResult.special_ability(
            self.player, "Second Wind", f"{outcome.message}\n{STILL_HAVE_ACTION}"
        )

    def _handle_action_surge(self) -> CombatResult:
        if self.action_surge_active:
            return CombatResult.error("Action Surge is already active this turn.")
        features, error = self._player_feature(ACTION_SURGE_ID, "Action Surge")
        if error is not None:
            return error
        if not features.can_use(ACTION_SURGE_ID):
            return CombatResult.error(
                "You have no uses of Action Surge remaining. Take a short rest to recover it."
            )
        outcome = features.use(ACTION_SURGE_ID, self.dice)
        self.action_surge_active = True
        log_debug("Action Surge active", {"uses_remaining": outcome.uses_remaining})
        return CombatResult.special_ability(self.player, "Action Surge", outcome.message)

    def _handle_cunning_action(self, option: str) -> CombatResult:
        """Dash, Disengage or Hide as a bonus action."""
        if self.bonus_action_used:
            return CombatResult.error("You've already used your bonus action this turn.")
        features, error = self._player_feature(CUNNING_ACTION_ID, "Cunning Action")
        if error is not None:
            return error
        cunning_action = features.get(CUNNING_ACTION_ID)
        if option == "dash":
            outcome = cunning_action.dash(self.player)
        elif option == "disengage":
            outcome = cunning_action.disengage(self.player)
            self.disengage_active = True
        else:
            outcome = cunning_action.hide(self.player, self.dice)
        self.bonus_action_used = True
        return CombatResult.special_ability(
            self.player,
            f"Cunning Action to {option.title()}",
            f"{outcome.message}\n{STILL_HAVE_ACTION}",
        )

    # ============================================================================
    # ATTACK RESOLUTION
    # ============================================================================

    def process_attack(
        self, attacker: Combatant, target: Combatant, prefix: str = ""
    ) -> CombatResult:
        """
        Resolves a basic attack.

        A natural roll at or above the attacker's critical threshold (20
        unless a feature lowers it) always hits and doubles the damage dice;
        a natural 1 always misses. Otherwise the attack hits if the total meets the
        target's AC. Weapon damage is at least 1 before the target's
        resistances apply.

        Args:
            attacker (Combatant): Who attacks.
            target (Combatant): Who is attacked.
            prefix (str): Text put in front of the message.

        Returns:
            CombatResult: ATTACK_HIT, ATTACK_MISS or ERROR.

        """
        if attacker is None or target is None:
            return CombatResult.error("Invalid attacker or target.")
        if not attacker.is_alive():
            return CombatResult.error(f"{attacker.name} cannot attack while unconscious.")
        if not target.is_alive():
            return CombatResult.error(f"{target.name} is already defeated.")

        profile = attacker.attack_profile()
        natural = self.dice.roll_d20()
        total = natural + profile.attack_bonus
        critical = natural >= profile.critical_threshold
        hit = natural != 1 and (critical or total >= target.armor_class)

        if hit and not critical and target is self.player and self._try_shield(total):
            prefix = f"{prefix}[{self.player.name} casts Shield! +5 AC] "
            hit = False

        target_ac = target.armor_class
        if not hit:
            return CombatResult.attack_miss(attacker, target, total, target_ac, prefix)

        raw = max(1, self._roll_damage(profile, critical))
        damage = apply_resistances(raw, profile.damage_type, profile.magical, target.damage_modifiers())
        target.take_damage(damage)
        self.last_attacker[id(target)] = attacker
        log_debug(
            f"{attacker.name} hit {target.name}",
            {"roll": total, "ac": target_ac, "damage": damage, "critical": critical},
        )
        return CombatResult.attack_hit(attacker, target, total, target_ac, damage, critical, prefix)

    def _roll_damage(self, profile: AttackProfile, critical: bool) -> int:
        notation = profile.damage_dice
        if not is_valid_notation(notation):
            log_warning(
                f"Invalid damage dice '{notation}', using {self.config.default_weapon_dice}",
                {"weapon": profile.weapon_name},
            )
            notation = self.config.default_weapon_dice
        count, sides, flat = parse_notation(notation)
        if count == 0:
            base = flat * 2 if critical else flat
        else:
            base = self.dice.roll_multiple(count * 2 if critical else count, sides) + flat
        return base + profile.damage_modifier

    def _try_shield(self, attack_total: int) -> bool:
        """Casts Shield as a reaction if it would turn this hit into a miss."""
        if not self.config.auto_shield_reaction:
            return False
        spellbook = getattr(self.player, "spellbook", None)
        if spellbook is None or not spellbook.can_cast(SHIELD_SPELL_ID):
            return False
        spell = spellbook.registry.get(SHIELD_SPELL_ID)
        if not spell.would_block_attack(attack_total, self.player.armor_class):
            return False
        outcome = spellbook.cast(SHIELD_SPELL_ID, None, self.dice)
        return outcome.type == SpellResultType.BUFF

    # ============================================================================
    # ENEMY HELPERS AND END CONDITIONS
    # ============================================================================

    def _attempt_enemy_flee(self, enemy: EnemyCombatant) -> CombatResult | None:
        """Removes the enemy from combat on a successful DEX check."""
        dex_mod = enemy.ability_modifier(Ability.DEXTERITY)
        if not self.dice.check_against_dc(dex_mod, self.config.enemy_flee_dc):
            return None
        self.fled_enemies.append(enemy)
        index = next(i for i, c in enumerate(self.initiative) if c is enemy)
        del self.initiative[index]
        if self.current_turn >= len(self.initiative):
            self.current_turn = 0
            self.round_number += 1
        result = CombatResult.enemy_fled(enemy, self.config.enemy_flee_dc)
        if not self.living_enemies:
            return self._victory(result.message)
        return result

    def _victory(self, message: str = "") -> CombatResult:
        xp = sum(e.experience_value for e in self.enemies if not e.is_alive())
        self.state = CombatState.ENDED
        if xp > 0:
            self.player.add_experience(xp)
        log_debug("Combat won", {"xp": xp})
        return CombatResult.victory(xp, message)

    def _check_end_conditions(self) -> CombatResult | None:
        """Returns the terminal result if the encounter is over, else None."""
        if self.player_fled:
            self.state = CombatState.ENDED
            return CombatResult.fled()
        if not self.living_enemies:
            return self._victory()
        if not self.player.is_alive():
            self.state = CombatState.ENDED
            return CombatResult.defeat(self.player)
        return None

    def is_over(self) -> bool:
        return self.state == CombatState.ENDED

    def outcome_type(self) -> CombatResultType | None:
        """VICTORY, DEFEAT or FLED once the encounter has ended."""
        if not self.is_over():
            return None
        if self.player_fled:
            return CombatResultType.FLED
        if not self.player.is_alive():
            return CombatResultType.DEFEAT
        return CombatResultType.VICTORY
