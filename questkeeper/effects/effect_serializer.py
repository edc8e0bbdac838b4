"""
Conversion between item effects and plain data records.

Records come from already-validated content or save files, but they may be
partial or legacy-shaped: missing fields fall back to defaults with a
logged warning instead of an exception.
"""

from typing import Annotated, Any

from catchery import log_warning
from pydantic import Field

from questkeeper.core.constants import DamageType
from questkeeper.core.error_handling import coerce_enum, ensure_non_negative_int

from .base_effect import BaseItemEffect
from .description_effect import DescriptionEffect
from .resistance_effect import ResistanceEffect, ResistanceLevel
from .teleport_effect import TeleportEffect
from .usage import UsageType

# Any concrete effect, discriminated by its effect_type tag.
AnyItemEffect = Annotated[
    ResistanceEffect | TeleportEffect | DescriptionEffect,
    Field(discriminator="effect_type"),
]


class EffectDeserializer:
    """Builds effect instances from records keyed by `effect_type`."""

    @staticmethod
    def deserialize(data: dict[str, Any]) -> BaseItemEffect | None:
        """
        Creates the effect described by a record.

        Args:
            data (dict[str, Any]): The record, with an `effect_type` field.

        Returns:
            BaseItemEffect | None: The effect, or None if the type is unknown.

        """
        effect_type = str(data.get("effect_type", "description")).lower()
        if effect_type == "resistance":
            return EffectDeserializer._deserialize_resistance(data)
        if effect_type == "teleport":
            return EffectDeserializer._deserialize_teleport(data)
        if effect_type == "description":
            return EffectDeserializer._deserialize_description(data)
        log_warning(
            f"Unknown effect type '{effect_type}', skipping",
            {"effect_type": effect_type, "id": data.get("id")},
        )
        return None

    @staticmethod
    def _common_fields(data: dict[str, Any], default_usage: UsageType) -> dict[str, Any]:
        name = str(data.get("name") or "Unnamed Effect")
        effect_id = data.get("id")
        if not effect_id:
            base = data.get("item_id") or name.lower().replace(" ", "_")
            effect_id = f"{base}_effect"
        context = {"id": effect_id}
        fields: dict[str, Any] = {
            "id": effect_id,
            "name": name,
            "description": str(data.get("description") or data.get("effect_description") or ""),
            "usage_type": coerce_enum(
                data.get("usage_type"), UsageType, "usage_type", default_usage, context
            ),
            "consumed": bool(data.get("consumed", False)),
            "recharge_amount": ensure_non_negative_int(
                data.get("recharge_amount", 0), "recharge_amount", 0, context
            ),
        }
        charges = data.get("max_charges", data.get("charges"))
        if charges is not None:
            fields["max_charges"] = charges if isinstance(charges, int) else 1
        if isinstance(data.get("current_charges"), int):
            fields["current_charges"] = data["current_charges"]
        return fields

    @staticmethod
    def _deserialize_resistance(data: dict[str, Any]) -> ResistanceEffect | None:
        fields = EffectDeserializer._common_fields(data, UsageType.PASSIVE)
        context = {"id": fields["id"]}
        # A missing or unknown damage type drops the whole record.
        damage_type = coerce_enum(data.get("damage_type"), DamageType, "damage_type", None, context)
        if damage_type is None:
            log_warning(
                f"Resistance effect '{fields['id']}' has no usable damage type, skipping",
                {**context, "damage_type": data.get("damage_type")},
            )
            return None
        return ResistanceEffect(
            **fields,
            damage_type=damage_type,
            resistance_level=coerce_enum(
                data.get("resistance_level"),
                ResistanceLevel,
                "resistance_level",
                ResistanceLevel.RESISTANCE,
                context,
            ),
            requires_attunement=bool(data.get("requires_attunement", False)),
            only_nonmagical=bool(data.get("only_nonmagical", False)),
        )

    @staticmethod
    def _deserialize_teleport(data: dict[str, Any]) -> TeleportEffect:
        fields = EffectDeserializer._common_fields(data, UsageType.LONG_REST)
        distance = data.get("distance_feet", data.get("distance", 30))
        return TeleportEffect(
            **fields,
            distance_feet=distance if isinstance(distance, int) else 30,
            requires_sight=bool(data.get("requires_sight", True)),
        )

    @staticmethod
    def _deserialize_description(data: dict[str, Any]) -> DescriptionEffect:
        fields = EffectDeserializer._common_fields(data, UsageType.DAILY)
        return DescriptionEffect(
            **fields,
            activation_text=str(data.get("activation_text") or ""),
        )


def effect_from_dict(data: dict[str, Any]) -> BaseItemEffect | None:
    """Shortcut for EffectDeserializer.deserialize."""
    return EffectDeserializer.deserialize(data)


def effect_to_dict(effect: BaseItemEffect) -> dict[str, Any]:
    """
    Serializes an effect to a JSON-friendly record.

    Args:
        effect (BaseItemEffect): The effect to serialize.

    Returns:
        dict[str, Any]: A record accepted by effect_from_dict.

    """
    return effect.model_dump(mode="json")
