"""
Equipment templates and the registry that serves them.
"""

from .armor import Armor
from .magic_item import MAX_ATTUNEMENT_SLOTS, MagicItem, Rarity
from .registry import EquipmentRegistry
from .weapon import Weapon

__all__ = [
    "Armor",
    "EquipmentRegistry",
    "MAX_ATTUNEMENT_SLOTS",
    "MagicItem",
    "Rarity",
    "Weapon",
]
