"""
Shared helpers for the rules engine.

Console output goes through a single rich console so the demo and the
status screens agree on width and markup. The rest of the module holds
the small pieces of ability math and text formatting that several
packages need.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.rule import Rule

CONSOLE_WIDTH = 120

_console = Console(markup=True, width=CONSOLE_WIDTH, force_terminal=True, force_jupyter=False)


def cprint(*args: Any, **kwargs: Any) -> None:
    """Prints to the shared console; arguments go straight to `Console.print`."""
    _console.print(*args, **kwargs)


def crule(title: str = "", **kwargs: Any) -> None:
    """Prints a horizontal rule, optionally titled."""
    _console.print(Rule(title, **kwargs))


def ccapture(content: Any) -> str:
    """
    Renders content through the shared console and returns it as text.

    Args:
        content (Any): A string with markup, or any rich renderable.

    Returns:
        str: The rendered output, without a trailing newline.

    """
    with _console.capture() as capture:
        _console.print(content, markup=True, end="")
    return capture.get()


# ---- Ability math ----
def get_stat_modifier(score: int) -> int:
    """
    Calculates the D&D ability score modifier, rounding down.

    Args:
        score (int): The ability score.

    Returns:
        int: The modifier for the given ability score.

    """
    return (score - 10) // 2


def get_proficiency_bonus(level: int) -> int:
    """
    Calculates the proficiency bonus for a character level.

    Args:
        level (int): The character level, 1 to 20.

    Returns:
        int: +2 at levels 1-4, rising by one every four levels.

    """
    return (level - 1) // 4 + 2


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


# ---- Formatting ----
def format_modifier(value: int) -> str:
    """Formats a modifier with an explicit sign, e.g. +3 or -1."""
    return f"{value:+d}"


def ordinal(number: int) -> str:
    """Returns the number with its English ordinal suffix (1st, 2nd, 11th)."""
    if 11 <= number % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def make_bar(current: int, maximum: int, length: int = 10, color: str = "white") -> str:
    """
    Renders a gauge such as an HP bar as rich markup.

    The filled share is rounded down and kept within [0, length], so
    overhealed or negative values still draw a bar of the right size.
    """
    if maximum <= 0:
        filled = 0
    else:
        filled = clamp(current * length // maximum, 0, length)
    gauge = f"[{color}]{'▮' * filled}[/]"
    if filled < length:
        gauge += f"[dim white]{'▯' * (length - filled)}[/]"
    return gauge
