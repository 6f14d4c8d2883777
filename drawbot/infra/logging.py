"""Standardized logging utilities for the contest bot."""
from __future__ import annotations

import logging
from typing import Any

# Root logger name for all drawbot components
ROOT_LOGGER_NAME = "drawbot"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a hierarchical logger under the drawbot namespace.

    Args:
        name: Module or component name. If None, returns the root logger.
              The name is prefixed with "drawbot." unless it already is.

    Example::

        from drawbot.infra.logging import get_logger
        log = get_logger("contest.podium")  # -> "drawbot.contest.podium"
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    clean_name = name
    if clean_name.startswith(f"{ROOT_LOGGER_NAME}."):
        clean_name = clean_name[len(ROOT_LOGGER_NAME) + 1 :]

    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{clean_name}")


def get_cog_logger(cog_name: str) -> logging.Logger:
    """Return a logger under "drawbot.cogs.<cog_name>"."""
    return get_logger(f"cogs.{cog_name}")


def structured_log(
    logger: logging.Logger,
    level: int,
    message: str,
    **fields: Any,
) -> None:
    """Log a message with structured key=value fields appended.

    Example::

        structured_log(log, logging.INFO, "Round finished",
                      guild_id=123, status="announced")
        # Logs: "Round finished guild_id=123 status=announced"
    """
    if fields:
        field_str = " ".join(f"{k}={v}" for k, v in fields.items())
        message = f"{message} {field_str}"
    logger.log(level, message)
