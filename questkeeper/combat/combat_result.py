"""
Structured outcome of a combat step.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from questkeeper.core.constants import NiceEnum


class CombatResultType(NiceEnum):
    COMBAT_START = "COMBAT_START"
    TURN_START = "TURN_START"
    ATTACK_HIT = "ATTACK_HIT"
    ATTACK_MISS = "ATTACK_MISS"
    SPELL = "SPELL"
    ITEM = "ITEM"
    SPECIAL_ABILITY = "SPECIAL_ABILITY"
    ENEMY_DEFEATED = "ENEMY_DEFEATED"
    ENEMY_FLED = "ENEMY_FLED"
    VICTORY = "VICTORY"
    DEFEAT = "DEFEAT"
    FLED = "FLED"
    INFO = "INFO"
    ERROR = "ERROR"


_TERMINAL = frozenset({CombatResultType.VICTORY, CombatResultType.DEFEAT, CombatResultType.FLED})


class CombatResult(BaseModel):
    """
    What happened during one combat step.

    Combatants are carried for the display layer and excluded from dumps.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: CombatResultType = Field(
        description="The kind of outcome.",
    )
    message: str = Field(
        description="Human-readable outcome for the display layer.",
    )
    attacker: Any | None = Field(default=None, exclude=True)
    defender: Any | None = Field(default=None, exclude=True)
    attack_roll: int = 0
    target_ac: int = 0
    damage: int = 0
    critical: bool = False
    xp_gained: int = 0
    turn_order: list[Any] = Field(default_factory=list, exclude=True)
    initiative_rolls: list[int] = Field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.type != CombatResultType.ERROR

    @property
    def is_error(self) -> bool:
        return self.type == CombatResultType.ERROR

    @property
    def is_combat_over(self) -> bool:
        return self.type in _TERMINAL

    def format(self) -> str:
        """The message, followed by the initiative order for a combat start."""
        if self.type != CombatResultType.COMBAT_START or not self.turn_order:
            return self.message
        lines = [self.message, "", "Initiative Order:"]
        for position, combatant in enumerate(self.turn_order, start=1):
            lines.append(
                f"  {position}. {combatant.name} "
                f"(HP: {combatant.current_hit_points}/{combatant.max_hit_points})"
            )
        return "\n".join(lines)

    def __str__(self) -> str:
        return f"CombatResult[type={self.type}, message={self.message[:50]}]"

    # ============================================================================
    # FACTORIES
    # ============================================================================

    @classmethod
    def combat_start(cls, turn_order: list[Any], rolls: list[int]) -> "CombatResult":
        lines = ["Combat begins!", "", "Initiative Rolls:"]
        lines += [f"  {c.name}: {roll}" for c, roll in zip(turn_order, rolls)]
        return cls(
            type=CombatResultType.COMBAT_START,
            message="\n".join(lines),
            turn_order=list(turn_order),
            initiative_rolls=list(rolls),
        )

    @classmethod
    def turn_start(cls, combatant: Any) -> "CombatResult":
        return cls(
            type=CombatResultType.TURN_START,
            message=f"{combatant.name}'s turn!",
            attacker=combatant,
        )

    @classmethod
    def attack_hit(
        cls,
        attacker: Any,
        defender: Any,
        attack_roll: int,
        target_ac: int,
        damage: int,
        critical: bool = False,
        prefix: str = "",
    ) -> "CombatResult":
        message = (
            f"{prefix}{attacker.name} attacks {defender.name}! "
            f"[Roll: {attack_roll} vs AC {target_ac}] HIT! [Damage: {damage}] "
            f"({defender.name}: {defender.current_hit_points}/{defender.max_hit_points} HP)"
        )
        if critical:
            message += " [CRITICAL HIT!]"
        return cls(
            type=CombatResultType.ATTACK_HIT,
            message=message,
            attacker=attacker,
            defender=defender,
            attack_roll=attack_roll,
            target_ac=target_ac,
            damage=damage,
            critical=critical,
        )

    @classmethod
    def attack_miss(
        cls, attacker: Any, defender: Any, attack_roll: int, target_ac: int, prefix: str = ""
    ) -> "CombatResult":
        return cls(
            type=CombatResultType.ATTACK_MISS,
            message=(
                f"{prefix}{attacker.name} attacks {defender.name}! "
                f"[Roll: {attack_roll} vs AC {target_ac}] MISS!"
            ),
            attacker=attacker,
            defender=defender,
            attack_roll=attack_roll,
            target_ac=target_ac,
        )

    @classmethod
    def spell(cls, caster: Any, target: Any | None, message: str, damage: int = 0) -> "CombatResult":
        return cls(
            type=CombatResultType.SPELL,
            message=message,
            attacker=caster,
            defender=target,
            damage=damage,
        )

    @classmethod
    def item(cls, user: Any, message: str) -> "CombatResult":
        return cls(type=CombatResultType.ITEM, message=message, attacker=user)

    @classmethod
    def special_ability(cls, user: Any, ability_name: str, effect: str) -> "CombatResult":
        return cls(
            type=CombatResultType.SPECIAL_ABILITY,
            message=f"{user.name} uses {ability_name}! {effect}",
            attacker=user,
        )

    @classmethod
    def enemy_defeated(cls, enemy: Any, message: str = "") -> "CombatResult":
        text = f"{enemy.name} has been defeated!"
        return cls(
            type=CombatResultType.ENEMY_DEFEATED,
            message=f"{message}\n{text}" if message else text,
            defender=enemy,
        )

    @classmethod
    def enemy_fled(cls, enemy: Any, dc: int) -> "CombatResult":
        return cls(
            type=CombatResultType.ENEMY_FLED,
            message=f"{enemy.name} flees from combat! [DEX check vs DC {dc} - SUCCESS]",
            attacker=enemy,
        )

    @classmethod
    def victory(cls, xp_gained: int, message: str = "") -> "CombatResult":
        text = f"Victory! You gained {xp_gained} XP."
        return cls(
            type=CombatResultType.VICTORY,
            message=f"{message}\n{text}" if message else text,
            xp_gained=xp_gained,
        )

    @classmethod
    def defeat(cls, player: Any, message: str = "") -> "CombatResult":
        text = f"{player.name} has fallen..."
        return cls(
            type=CombatResultType.DEFEAT,
            message=f"{message}\n{text}" if message else text,
            defender=player,
        )

    @classmethod
    def fled(cls, message: str = "You fled from combat!") -> "CombatResult":
        return cls(type=CombatResultType.FLED, message=message)

    @classmethod
    def info(cls, message: str) -> "CombatResult":
        return cls(type=CombatResultType.INFO, message=message)

    @classmethod
    def error(cls, message: str) -> "CombatResult":
        return cls(type=CombatResultType.ERROR, message=message)
