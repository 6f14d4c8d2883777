"""Postgres-backed stores for guild settings and staged themes.

Both stores do plain read-modify-write by primary key. Writes are per guild
or per user and are not contended in practice, so there is no optimistic
locking.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

import asyncpg

from .contest.models import CommunitySettings, StagedTheme
from .infra.config import ContestConfig, get_config
from .util import rows_from_tag

log = logging.getLogger(f"drawbot.{__name__}")

SETTINGS_COLUMNS = frozenset(
    {
        "name",
        "bot_enabled",
        "ping_users",
        "theme_saving_enabled",
        "rules_enabled",
        "forum_channel_name",
        "chat_channel_name",
        "mod_roles",
    }
)
THEME_COLUMNS = frozenset(
    {"username", "theme_title", "theme_description", "theme_staged_at"}
)


def _assignments(fields: Mapping[str, Any], allowed: frozenset[str], start: int) -> tuple[str, list[Any]]:
    unknown = set(fields) - allowed
    if unknown:
        raise ValueError(f"unknown columns: {', '.join(sorted(unknown))}")
    keys = sorted(fields)
    parts = [f"{key} = ${start + i}" for i, key in enumerate(keys)]
    return ", ".join(parts), [fields[k] for k in keys]


class SettingsStore:
    """Per-guild ``CommunitySettings`` in ``drawbot.guild_settings``."""

    def __init__(self, pool: asyncpg.Pool, config: ContestConfig | None = None) -> None:
        self.pool = pool
        self.config = config or get_config()

    def defaults(self, guild_id: str, name: str | None = None) -> CommunitySettings:
        return CommunitySettings(
            guild_id=str(guild_id),
            name=name,
            bot_enabled=self.config.bot_enabled_default,
            ping_users=self.config.ping_users_default,
            theme_saving_enabled=self.config.theme_saving_default,
            rules_enabled=self.config.rules_enabled_default,
        )

    async def get(self, guild_id: str) -> CommunitySettings | None:
        row = await self.pool.fetchrow(
            "SELECT * FROM drawbot.guild_settings WHERE guild_id = $1",
            int(guild_id),
        )
        if row is None:
            return None
        return CommunitySettings.from_row(row, self.defaults(guild_id))

    async def get_or_create(self, guild_id: str, name: str | None = None) -> CommunitySettings:
        existing = await self.get(guild_id)
        if existing is not None:
            return existing
        defaults = self.defaults(guild_id, name or "Unknown Guild")
        await self.pool.execute(
            """
            INSERT INTO drawbot.guild_settings
                (guild_id, name, bot_enabled, ping_users, theme_saving_enabled, rules_enabled)
            VALUES ($1, $2, $3, $4, $5, $6)
            ON CONFLICT (guild_id) DO NOTHING
            """,
            int(guild_id),
            defaults.name,
            defaults.bot_enabled,
            defaults.ping_users,
            defaults.theme_saving_enabled,
            defaults.rules_enabled,
        )
        log.info("Created settings for guild %s", guild_id)
        return await self.get(guild_id) or defaults

    async def update(self, guild_id: str, fields: Mapping[str, Any]) -> bool:
        """Apply a partial update; ``None`` values clear the column."""
        if not fields:
            return False
        sets, values = _assignments(fields, SETTINGS_COLUMNS, 2)
        tag = await self.pool.execute(
            f"UPDATE drawbot.guild_settings SET {sets}, updated_at = now() WHERE guild_id = $1",
            int(guild_id),
            *values,
        )
        return rows_from_tag(tag) > 0


class StagedThemeStore:
    """Per-user ``StagedTheme`` in ``drawbot.staged_theme``."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get(self, user_id: str, guild_id: str) -> StagedTheme | None:
        row = await self.pool.fetchrow(
            "SELECT * FROM drawbot.staged_theme WHERE user_id = $1 AND guild_id = $2",
            int(user_id),
            int(guild_id),
        )
        return StagedTheme.from_row(row) if row else None

    async def get_or_create(self, user_id: str, guild_id: str, username: str | None = None) -> StagedTheme:
        existing = await self.get(user_id, guild_id)
        if existing is not None:
            return existing
        await self.pool.execute(
            """
            INSERT INTO drawbot.staged_theme (user_id, guild_id, username)
            VALUES ($1, $2, $3)
            ON CONFLICT (user_id, guild_id) DO NOTHING
            """,
            int(user_id),
            int(guild_id),
            username,
        )
        return await self.get(user_id, guild_id) or StagedTheme(
            user_id=str(user_id), guild_id=str(guild_id), username=username
        )

    async def update(self, user_id: str, guild_id: str, fields: Mapping[str, Any]) -> bool:
        """Apply a partial update; ``None`` values clear the column."""
        if not fields:
            return False
        sets, values = _assignments(fields, THEME_COLUMNS, 3)
        tag = await self.pool.execute(
            f"UPDATE drawbot.staged_theme SET {sets}, updated_at = now() "
            "WHERE user_id = $1 AND guild_id = $2",
            int(user_id),
            int(guild_id),
            *values,
        )
        return rows_from_tag(tag) > 0
