"""
Logging setup for the rules engine.

Everything the engine logs goes through the `questkeeper` logger, rendered
with rich. Messages can carry a context dictionary, appended to the message
as `key=value` pairs so that log lines stay greppable.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

ENGINE_LOGGER_NAME = "questkeeper"


def setup_logging(level: int | str = logging.INFO, width: int = 120) -> None:
    """
    Routes log records through a rich handler.

    Args:
        level (int | str): Level name or number. Defaults to logging.INFO.
        width (int): Console width used by the handler.

    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = RichHandler(
        console=Console(width=width, force_terminal=True, force_jupyter=False),
        show_time=True,
        show_level=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s", datefmt="[%X]"))
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def get_logger(name: str | None = None) -> logging.Logger:
    """Returns the engine logger, or one of its children when `name` is given."""
    if not name:
        return logging.getLogger(ENGINE_LOGGER_NAME)
    if name.startswith(ENGINE_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ENGINE_LOGGER_NAME}.{name}")


logger = get_logger()


def format_context(message: str, context: dict[str, Any] | None = None) -> str:
    """
    Appends a context dictionary to a message.

    Args:
        message (str): The log message.
        context (dict[str, Any] | None): Extra fields, if any.

    Returns:
        str: e.g. `Spell cast [spell=shield slot=1]`.

    """
    if not context:
        return message
    fields = " ".join(f"{key}={value}" for key, value in context.items())
    return f"{message} [{fields}]"


def log_error(message: str, context: dict[str, Any] | None = None) -> None:
    logger.error(format_context(message, context))


def log_warning(message: str, context: dict[str, Any] | None = None) -> None:
    logger.warning(format_context(message, context))


def log_info(message: str, context: dict[str, Any] | None = None) -> None:
    logger.info(format_context(message, context))


def log_debug(message: str, context: dict[str, Any] | None = None) -> None:
    logger.debug(format_context(message, context))
