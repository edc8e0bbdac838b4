"""
Read-only registry of equipment templates.

The registry is built explicitly from plain records or a JSON file and
hands out deep copies, so equipping or using an item never alters the
template shared by other characters.
"""

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping, TypeVar

from catchery import log_debug, log_warning
from pydantic import BaseModel, ValidationError

from questkeeper.core.error_handling import InvalidArgumentError, invalid_argument
from questkeeper.effects.effect_serializer import effect_from_dict

from .armor import Armor
from .magic_item import MagicItem
from .weapon import Weapon

T = TypeVar("T", bound=BaseModel)


class EquipmentRegistry:
    """Holds weapon, armor and magic item templates keyed by id."""

    def __init__(
        self,
        weapons: list[Weapon] | None = None,
        armors: list[Armor] | None = None,
        magic_items: list[MagicItem] | None = None,
    ) -> None:
        self._weapons: Mapping[str, Weapon] = MappingProxyType(
            {w.id: w for w in weapons or []}
        )
        self._armors: Mapping[str, Armor] = MappingProxyType({a.id: a for a in armors or []})
        self._magic_items: Mapping[str, MagicItem] = MappingProxyType(
            {m.id: m for m in magic_items or []}
        )

    # ============================================================================
    # LOOKUP
    # ============================================================================

    @property
    def weapons(self) -> Mapping[str, Weapon]:
        return self._weapons

    @property
    def armors(self) -> Mapping[str, Armor]:
        return self._armors

    @property
    def magic_items(self) -> Mapping[str, MagicItem]:
        return self._magic_items

    def get_weapon(self, weapon_id: str) -> Weapon | None:
        return _copy_of(self._weapons.get(weapon_id))

    def get_armor(self, armor_id: str) -> Armor | None:
        return _copy_of(self._armors.get(armor_id))

    def get_magic_item(self, item_id: str) -> MagicItem | None:
        return _copy_of(self._magic_items.get(item_id))

    def __len__(self) -> int:
        return len(self._weapons) + len(self._armors) + len(self._magic_items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._weapons or item_id in self._armors or item_id in self._magic_items

    # ============================================================================
    # LOADING
    # ============================================================================

    @classmethod
    def from_records(cls, data: dict[str, list[dict[str, Any]]]) -> "EquipmentRegistry":
        """
        Builds a registry from plain records.

        Args:
            data (dict[str, list[dict[str, Any]]]): Lists under the keys
                "weapons", "armor" and "magic_items".

        Returns:
            EquipmentRegistry: The registry. Bad records are skipped with a warning.

        """
        return cls(
            weapons=_load_records(data.get("weapons", []), Weapon.model_validate, "weapon"),
            armors=_load_records(data.get("armor", []), Armor.model_validate, "armor"),
            magic_items=_load_records(data.get("magic_items", []), _build_magic_item, "magic item"),
        )

    @classmethod
    def from_json_file(cls, filepath: Path | str) -> "EquipmentRegistry":
        """
        Loads a registry from a JSON file holding the same shape as from_records.

        Args:
            filepath (Path | str): Path to the JSON file.

        Returns:
            EquipmentRegistry: The loaded registry.

        Raises:
            InvalidArgumentError: If the file is missing or not a JSON object.

        """
        path = Path(filepath)
        if not path.is_file():
            raise invalid_argument(f"File not found: {path}", {"path": str(path)})
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise invalid_argument(f"File {path} is not valid JSON: {e}", {"path": str(path)}) from e
        if not isinstance(data, dict):
            raise invalid_argument(
                f"Expected an object in {path}, got {type(data).__name__}", {"path": str(path)}
            )
        log_debug(f"Loading equipment from {path}", {"path": str(path)})
        return cls.from_records(data)


def _copy_of(template: T | None) -> T | None:
    return template.model_copy(deep=True) if template is not None else None


def _build_magic_item(record: dict[str, Any]) -> MagicItem:
    effects = [effect_from_dict(e) for e in record.get("effects", [])]
    return MagicItem(
        **{k: v for k, v in record.items() if k != "effects"},
        effects=[e for e in effects if e is not None],
    )


def _load_records(
    records: list[dict[str, Any]], builder: Callable[[dict[str, Any]], T], description: str
) -> list[T]:
    loaded: list[T] = []
    for record in records:
        try:
            loaded.append(builder(record))
        except (ValidationError, InvalidArgumentError, TypeError, AttributeError) as e:
            log_warning(
                f"Skipping invalid {description} record: {e}",
                {"id": record.get("id") if isinstance(record, dict) else None},
            )
    return loaded
