"""
Spellbook module for the simplified character system.

Tracks the cantrips, known spells and prepared spells of one character,
its spell slots and the spell it is concentrating on. The owner is any
object exposing `name`, `level`, `character_class`, `proficiency_bonus`
and `ability_modifier(ability)`.
"""

from typing import TYPE_CHECKING, Any

from questkeeper.core.constants import Ability
from questkeeper.core.dice import Dice
from questkeeper.core.logging import log_debug

from .registry import SpellRegistry
from .spell import CastContext, Spell
from .spell_result import SpellResult, SpellResultType
from .spell_slots import CasterType, SpellSlots

if TYPE_CHECKING:
    from questkeeper.combat.combatant import Combatant


# Keyed by CharacterClass member name.
_CASTER_TYPES: dict[str, CasterType] = {
    "WIZARD": CasterType.FULL,
    "SORCERER": CasterType.FULL,
    "CLERIC": CasterType.FULL,
    "DRUID": CasterType.FULL,
    "BARD": CasterType.FULL,
    "PALADIN": CasterType.HALF,
    "RANGER": CasterType.HALF,
    "WARLOCK": CasterType.WARLOCK,
}

_SPELLCASTING_ABILITIES: dict[str, Ability] = {
    "WIZARD": Ability.INTELLIGENCE,
    "SORCERER": Ability.CHARISMA,
    "BARD": Ability.CHARISMA,
    "WARLOCK": Ability.CHARISMA,
    "PALADIN": Ability.CHARISMA,
    "CLERIC": Ability.WISDOM,
    "DRUID": Ability.WISDOM,
    "RANGER": Ability.WISDOM,
}

_PREPARED_CASTERS = frozenset({"WIZARD", "CLERIC", "DRUID", "PALADIN"})

# (minimum level, cantrips, leveled spells)
_DEFAULT_SPELLS: dict[str, list[tuple[int, tuple[str, ...], tuple[str, ...]]]] = {
    "WIZARD": [(1, ("fire_bolt",), ("magic_missile", "shield"))],
    "SORCERER": [(1, ("fire_bolt",), ("magic_missile",))],
    "CLERIC": [(1, ("sacred_flame",), ("cure_wounds",))],
    "DRUID": [(1, (), ("cure_wounds",))],
    "BARD": [(1, (), ("cure_wounds",))],
    "PALADIN": [(2, (), ("cure_wounds",))],
    "RANGER": [(2, (), ("cure_wounds",))],
}


class Spellbook:
    """
    Manages a character's spells.

    Attributes:
        owner (Any):
            The character who owns this spellbook.
        registry (SpellRegistry):
            Where spell ids are looked up.
        slots (SpellSlots | None):
            Spell slots, or None for classes without spellcasting.
        spellcasting_ability (Ability):
            Ability used for attack bonus and save DC.
        uses_prepared_spells (bool):
            Whether known spells must also be prepared to be cast.
        cantrip_ids (set[str]):
            Known cantrips.
        known_spell_ids (set[str]):
            Known leveled spells.
        prepared_spell_ids (set[str]):
            Leveled spells that can be cast.
        concentrating_on (Spell | None):
            The concentration spell currently maintained.
    """

    def __init__(self, owner: Any, registry: SpellRegistry | None = None) -> None:
        self.owner = owner
        self.registry: SpellRegistry = registry if registry is not None else SpellRegistry.default()
        class_key = self._class_key()
        caster_type = _CASTER_TYPES.get(class_key)
        self.slots: SpellSlots | None = (
            SpellSlots(caster_type, owner.level) if caster_type is not None else None
        )
        self.spellcasting_ability: Ability = _SPELLCASTING_ABILITIES.get(
            class_key, Ability.INTELLIGENCE
        )
        self.uses_prepared_spells: bool = class_key in _PREPARED_CASTERS
        self.cantrip_ids: set[str] = set()
        self.known_spell_ids: set[str] = set()
        self.prepared_spell_ids: set[str] = set()
        self.concentrating_on: Spell | None = None
        self._add_default_spells()

    def _class_key(self) -> str:
        character_class = getattr(self.owner, "character_class", None)
        return getattr(character_class, "name", str(character_class)).upper()

    def _add_default_spells(self) -> None:
        for min_level, cantrips, spells in _DEFAULT_SPELLS.get(self._class_key(), []):
            if self.owner.level < min_level:
                continue
            for spell_id in cantrips:
                self.add_cantrip(spell_id)
            for spell_id in spells:
                self.add_known_spell(spell_id)
                self.prepare_spell(spell_id)

    # ============================================================================
    # SPELL LISTS
    # ============================================================================

    def add_cantrip(self, spell_id: str) -> None:
        self.cantrip_ids.add(spell_id)

    def add_known_spell(self, spell_id: str) -> None:
        """Learns a spell; casters who do not prepare can cast it at once."""
        self.known_spell_ids.add(spell_id)
        if not self.uses_prepared_spells:
            self.prepared_spell_ids.add(spell_id)

    def prepare_spell(self, spell_id: str) -> bool:
        """Prepares a known spell. Returns False if the spell is not known."""
        if spell_id in self.known_spell_ids or not self.uses_prepared_spells:
            self.prepared_spell_ids.add(spell_id)
            return True
        return False

    def unprepare_spell(self, spell_id: str) -> None:
        if self.uses_prepared_spells:
            self.prepared_spell_ids.discard(spell_id)

    def _resolve_ids(self, ids: set[str], key=None) -> list[Spell]:
        spells = [spell for spell in map(self.registry.get, ids) if spell is not None]
        return sorted(spells, key=key or (lambda s: (s.level, s.name)))

    @property
    def known_cantrips(self) -> list[Spell]:
        return self._resolve_ids(self.cantrip_ids, key=lambda s: s.name)

    @property
    def known_spells(self) -> list[Spell]:
        return self._resolve_ids(self.known_spell_ids)

    @property
    def prepared_spells(self) -> list[Spell]:
        return self._resolve_ids(self.prepared_spell_ids)

    def find(self, spell_ref: str) -> Spell | None:
        """Looks a spell up by id, then by name."""
        return self.registry.get(spell_ref) or self.registry.get_by_name(spell_ref)

    def has_spell_ready(self, spell_id: str) -> bool:
        """True if the spell is a known cantrip or a prepared spell."""
        return spell_id in self.cantrip_ids or spell_id in self.prepared_spell_ids

    def can_cast_spells(self) -> bool:
        return bool(self.cantrip_ids or self.known_spell_ids)

    # ============================================================================
    # SPELLCASTING NUMBERS
    # ============================================================================

    @property
    def spellcasting_modifier(self) -> int:
        return self.owner.ability_modifier(self.spellcasting_ability)

    @property
    def spell_attack_bonus(self) -> int:
        return self.owner.proficiency_bonus + self.spellcasting_modifier

    @property
    def spell_save_dc(self) -> int:
        return 8 + self.spell_attack_bonus

    def cast_context(self) -> CastContext:
        return CastContext(
            caster=self.owner,
            caster_level=self.owner.level,
            spell_attack_bonus=self.spell_attack_bonus,
            spell_save_dc=self.spell_save_dc,
            spellcasting_modifier=self.spellcasting_modifier,
        )

    # ============================================================================
    # CASTING
    # ============================================================================

    def can_cast(self, spell_id: str) -> bool:
        spell = self.registry.get(spell_id)
        if spell is None:
            return False
        return self.can_cast_at_level(spell_id, spell.level)

    def can_cast_at_level(self, spell_id: str, slot_level: int) -> bool:
        spell = self.registry.get(spell_id)
        if spell is None:
            return False
        if spell.is_cantrip:
            return spell_id in self.cantrip_ids
        if spell_id not in self.prepared_spell_ids or slot_level < spell.level:
            return False
        return self.slots is not None and self.slots.has_slot(slot_level)

    def cast(
        self, spell_id: str, target: "Combatant | None" = None, dice: Dice | None = None
    ) -> SpellResult:
        spell = self.registry.get(spell_id)
        if spell is None:
            return SpellResult.error(f"Unknown spell: {spell_id}")
        return self.cast_at_level(spell_id, target, spell.level, dice)

    def cast_at_level(
        self,
        spell_id: str,
        target: "Combatant | None",
        slot_level: int,
        dice: Dice | None = None,
    ) -> SpellResult:
        """
        Casts a spell, expending a slot of the given level.

        Cantrips never expend slots. Nothing is expended when the cast is
        rejected or the spell reports an error.

        Args:
            spell_id (str): Id of the spell to cast.
            target (Combatant | None): The target, if the spell needs one.
            slot_level (int): Slot level to use; ignored for cantrips.
            dice (Dice | None): Dice to roll with.

        Returns:
            SpellResult: The outcome of the cast.

        """
        spell = self.registry.get(spell_id)
        if spell is None:
            return SpellResult.error(f"Unknown spell: {spell_id}")
        context = self.cast_context()
        if spell.is_cantrip:
            if spell_id not in self.cantrip_ids:
                return SpellResult.error("You don't know that cantrip.")
            return spell.cast(context, target, dice)
        if spell_id not in self.prepared_spell_ids:
            return SpellResult.error("That spell is not prepared.")
        if self.slots is None or not self.slots.has_slot(slot_level):
            return SpellResult.error(f"No spell slot available at level {slot_level}.")
        if slot_level < spell.level:
            return SpellResult.error(f"Cannot cast {spell.name} with a level {slot_level} slot.")
        result = spell.cast_at_level(context, target, slot_level, dice)
        if result.type == SpellResultType.ERROR:
            return result
        self.slots.expend_slot(slot_level)
        if spell.concentration:
            self.start_concentration(spell)
        log_debug(
            f"{self.owner.name} cast {spell.name}",
            {"slot_level": slot_level, "result": result.type.name},
        )
        return result

    # ============================================================================
    # CONCENTRATION
    # ============================================================================

    @property
    def is_concentrating(self) -> bool:
        return self.concentrating_on is not None

    def start_concentration(self, spell: Spell) -> Spell | None:
        """Begins concentrating on `spell`; returns the spell that was dropped."""
        dropped = self.concentrating_on
        self.concentrating_on = spell
        return dropped

    def break_concentration(self) -> Spell | None:
        dropped = self.concentrating_on
        self.concentrating_on = None
        return dropped

    # ============================================================================
    # RESTS AND LEVELS
    # ============================================================================

    def on_short_rest(self) -> bool:
        """Returns True if any slots came back."""
        return self.slots is not None and self.slots.restore_on_short_rest()

    def on_long_rest(self) -> None:
        if self.slots is not None:
            self.slots.restore_on_long_rest()
        self.break_concentration()

    def on_level_up(self) -> None:
        if self.slots is not None:
            self.slots.set_caster_level(self.owner.level)
        self._add_default_spells()

    def status(self) -> str:
        lines = []
        if self.slots is not None and self.slots.can_cast_spells():
            lines.append(self.slots.status())
        if self.cantrip_ids:
            lines.append("Cantrips: " + ", ".join(s.name for s in self.known_cantrips))
        prepared = self.prepared_spells
        if prepared:
            lines.append("Prepared: " + ", ".join(s.name for s in prepared))
        if self.concentrating_on is not None:
            lines.append(f"Concentrating on: {self.concentrating_on.name}")
        return "\n".join(lines)
