"""
Error taxonomy and validation helpers for the rules engine.

Invalid arguments and illegal states are raised at the call site. Soft
failures during play are never raised here: they travel back to the caller
as ERROR results (see CombatResult, SpellResult and EffectResult).
"""

from enum import Enum
from typing import Any, Optional

from typing_extensions import TypeVar

from questkeeper.core.logging import log_error, log_warning

E = TypeVar("E", bound=Enum)


class QuestKeeperError(Exception):
    """Base class for all errors raised by the rules engine."""


class InvalidArgumentError(QuestKeeperError, ValueError):
    """Raised when a constructor or setter receives malformed input."""


class IllegalStateError(QuestKeeperError, RuntimeError):
    """Raised when an operation is not valid for the current configuration."""


def invalid_argument(
    message: str, context: Optional[dict[str, Any]] = None
) -> InvalidArgumentError:
    """
    Logs and builds an InvalidArgumentError, ready to be raised.

    Args:
        message (str): The error message.
        context (Optional[dict[str, Any]]): Additional context for logging.

    Returns:
        InvalidArgumentError: The exception instance.

    """
    log_error(message, context)
    return InvalidArgumentError(message)


def illegal_state(
    message: str, context: Optional[dict[str, Any]] = None
) -> IllegalStateError:
    """
    Logs and builds an IllegalStateError, ready to be raised.

    Args:
        message (str): The error message.
        context (Optional[dict[str, Any]]): Additional context for logging.

    Returns:
        IllegalStateError: The exception instance.

    """
    log_error(message, context)
    return IllegalStateError(message)


# ==============================================================================
# VALIDATION HELPERS
# ==============================================================================
# require_* raise on bad input. coerce_enum and ensure_* log a warning and
# hand back a usable value so loaders can keep going with partial data.


def _with_param(context: Optional[dict[str, Any]], param_name: str, **extra: Any) -> dict[str, Any]:
    return {**(context or {}), "param_name": param_name, **extra}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def require_non_empty_string(
    value: Any, param_name: str, context: Optional[dict[str, Any]] = None
) -> str:
    """
    Returns the value if it is a string with visible characters.

    Raises:
        InvalidArgumentError: For blank strings and non-strings.
    """
    if isinstance(value, str) and value.strip():
        return value
    raise invalid_argument(
        f"{param_name} cannot be blank (got {value!r})",
        _with_param(context, param_name, type=type(value).__name__),
    )


def require_enum_type(
    value: Any, enum_class: type[E], param_name: str, context: Optional[dict[str, Any]] = None
) -> E:
    """Returns the value if it already is a member of `enum_class`, raises otherwise."""
    if isinstance(value, enum_class):
        return value
    raise invalid_argument(
        f"{param_name} expects a {enum_class.__name__}, got {type(value).__name__}",
        _with_param(context, param_name, value=value),
    )


def coerce_enum(
    value: Any,
    enum_class: type[E],
    param_name: str,
    default: E,
    context: Optional[dict[str, Any]] = None,
) -> E:
    """
    Converts loosely spelled data ("half-elf", "Long Rest") to an enum member.

    Member names are matched with spaces and dashes folded to
    underscores, then member values are tried. Anything else logs a
    warning and falls back to the default.

    Args:
        value (Any): The raw value from a data record.
        enum_class (type[E]): The target enum class.
        param_name (str): Field name used in the warning.
        default (E): Member returned when the value cannot be converted.
        context (Optional[dict[str, Any]]): Additional context for logging.

    Returns:
        E: The matching enum member, or the default.

    """
    if value is None:
        return default
    if isinstance(value, enum_class):
        return value
    if isinstance(value, str):
        value = value.strip()
        key = value.upper().replace("-", "_").replace(" ", "_")
        if key in enum_class.__members__:
            return enum_class[key]
    try:
        return enum_class(value)
    except (ValueError, TypeError):
        log_warning(
            f"Unrecognized {param_name} {value!r}, falling back to {default}",
            _with_param(context, param_name, enum=enum_class.__name__),
        )
        return default


def ensure_non_negative_int(
    value: Any, param_name: str, default: int = 0, context: Optional[dict[str, Any]] = None
) -> int:
    """Returns the value if it is an int >= 0, otherwise warns and returns `default`."""
    if _is_int(value) and value >= 0:
        return value
    log_warning(
        f"{param_name} should be a non-negative integer, got {value!r}; using {default}",
        _with_param(context, param_name, corrected_to=default),
    )
    return default


def ensure_int_in_range(
    value: Any,
    param_name: str,
    min_val: int,
    max_val: Optional[int] = None,
    default: Optional[int] = None,
    context: Optional[dict[str, Any]] = None,
) -> int:
    """
    Keeps an integer inside [min_val, max_val].

    Numbers outside the range are clamped to it; anything that is not a
    number becomes the default (min_val when no default is given). A
    warning is logged for every correction.
    """
    in_range = _is_int(value) and value >= min_val and (max_val is None or value <= max_val)
    if in_range:
        return value
    bounds = f"[{min_val}, {'inf' if max_val is None else max_val}]"
    log_warning(f"{param_name} {value!r} is outside {bounds}", _with_param(context, param_name))
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return min_val if default is None else default
    number = max(min_val, int(value))
    return number if max_val is None else min(max_val, number)
