"""Consume a winner's staged theme into the next round."""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Protocol

from .models import NONE_ID, StagedTheme

log = logging.getLogger(f"drawbot.{__name__}")

CLEARED_THEME = {"theme_title": None, "theme_description": None, "theme_staged_at": None}

RoundCreator = Callable[[str, str], Awaitable["str | None"]]


class ThemeStore(Protocol):
    async def get(self, user_id: str, guild_id: str) -> StagedTheme | None: ...

    async def update(self, user_id: str, guild_id: str, fields: dict) -> bool: ...


def build_theme_post(theme: StagedTheme, winner_id: str, rules: str) -> str:
    return f"Theme by: <@{winner_id}>\n\n{theme.description or ''}\n\n{rules}"


async def rollover(
    winner_id: str,
    guild_id: str,
    themes: ThemeStore,
    create_round: RoundCreator,
    rules: str = "",
) -> str | None:
    """Open the next round from the winner's staged theme.

    Returns the new round's id, or None when the winner staged nothing or
    the post could not be created. Once a staged theme is found it is
    cleared exactly once, whether or not the post was created.
    """
    if not winner_id or winner_id == NONE_ID:
        return None
    try:
        theme = await themes.get(winner_id, guild_id)
    except Exception:
        log.exception("Failed to load staged theme for user %s in guild %s", winner_id, guild_id)
        return None
    if theme is None or not theme.is_staged:
        return None

    new_round_ref: str | None = None
    try:
        new_round_ref = await create_round(theme.title, build_theme_post(theme, winner_id, rules))
        if new_round_ref:
            log.info("Created forum post for saved theme '%s' in guild %s", theme.title, guild_id)
        else:
            log.info("No forum post created for saved theme '%s' in guild %s", theme.title, guild_id)
    except Exception:
        log.exception("Failed to create forum post for theme in guild %s", guild_id)
        new_round_ref = None

    try:
        cleared = await themes.update(winner_id, guild_id, dict(CLEARED_THEME))
        if cleared:
            log.info("Cleared saved theme for user %s in guild %s", winner_id, guild_id)
        else:
            log.warning("No saved theme row cleared for user %s in guild %s", winner_id, guild_id)
    except Exception:
        log.exception("Failed to clear saved theme for user %s in guild %s", winner_id, guild_id)
    return new_round_ref
