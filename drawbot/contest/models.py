"""Plain data types shared by the contest pipeline.

Nothing here talks to Discord or the database. Platform adapters build
``Submission`` objects from whatever their message objects look like and the
stores build ``CommunitySettings`` / ``StagedTheme`` from table rows.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Mapping, Sequence

log = logging.getLogger(f"drawbot.{__name__}")

NONE_ID = "none"


@dataclass(frozen=True)
class Attachment:
    content_type: str | None = None
    filename: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class EmbedMedia:
    """The image-relevant parts of a rich embed."""

    type: str | None = None
    url: str | None = None
    image_url: str | None = None
    thumbnail_url: str | None = None


@dataclass(frozen=True)
class Reactor:
    id: str
    bot: bool = False


@dataclass
class Reaction:
    """One reaction symbol on a submission and the users who applied it.

    ``emoji`` is the reaction's name: the glyph itself for unicode emoji, the
    text name for custom emoji. Reactors are either given up front or
    resolved lazily through ``fetch_users`` (a network call on Discord).
    """

    emoji: str
    users: Sequence[Reactor] | None = None
    fetch_users: Callable[[], Awaitable[Sequence[Reactor]]] | None = None

    async def resolve_users(self) -> list[Reactor]:
        if self.users is None:
            if self.fetch_users is None:
                return []
            self.users = list(await self.fetch_users())
        return list(self.users)


@dataclass
class Submission:
    """A candidate entry in a contest round, rebuilt from history every round."""

    author_id: str
    author_display_name: str
    content: str = ""
    attachments: Sequence[Attachment] = ()
    embeds: Sequence[EmbedMedia] = ()
    reactions: Sequence[Reaction] = ()
    message_id: str | None = None


@dataclass(frozen=True)
class PodiumEntry:
    id: str
    username: str
    votes: int

    @property
    def is_sentinel(self) -> bool:
        return self.id == NONE_ID


SENTINEL = PodiumEntry(id=NONE_ID, username=NONE_ID, votes=0)


@dataclass(frozen=True)
class StagedTheme:
    user_id: str
    guild_id: str
    title: str | None = None
    description: str | None = None
    staged_at: datetime | None = None
    username: str | None = None

    @property
    def is_staged(self) -> bool:
        return bool(self.title)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "StagedTheme":
        return cls(
            user_id=str(row["user_id"]),
            guild_id=str(row["guild_id"]),
            title=row.get("theme_title"),
            description=row.get("theme_description"),
            staged_at=row.get("theme_staged_at"),
            username=row.get("username"),
        )


def _coerce_bool(value: Any, default: bool, column: str) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "yes", "y", "on", "t"}:
        return True
    if normalized in {"0", "false", "no", "n", "off", "f"}:
        return False
    log.warning("Unreadable value for %s: %r; using %s", column, value, default)
    return default


def _coerce_text(value: Any, default: str | None, column: str) -> str | None:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip() or default
    log.warning("Unreadable value for %s: %r; using %s", column, value, default)
    return default


@dataclass(frozen=True)
class CommunitySettings:
    """Per-guild toggles and channel bindings.

    ``None`` channel names mean "use the env default".
    """

    guild_id: str
    name: str | None = None
    bot_enabled: bool = True
    ping_users: bool = False
    theme_saving_enabled: bool = True
    rules_enabled: bool = True
    forum_channel_name: str | None = None
    chat_channel_name: str | None = None
    mod_roles: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_row(
        cls, row: Mapping[str, Any], defaults: "CommunitySettings | None" = None
    ) -> "CommunitySettings":
        """Build settings from a stored row, falling back on unreadable values."""
        base = defaults or cls(guild_id=str(row["guild_id"]))
        raw_roles = row.get("mod_roles")
        if raw_roles is None:
            mod_roles = base.mod_roles
        elif isinstance(raw_roles, str):
            mod_roles = tuple(r.strip() for r in raw_roles.split(",") if r.strip())
        else:
            log.warning("Unreadable value for mod_roles: %r; using defaults", raw_roles)
            mod_roles = base.mod_roles
        return cls(
            guild_id=str(row["guild_id"]),
            name=_coerce_text(row.get("name"), base.name, "name"),
            bot_enabled=_coerce_bool(row.get("bot_enabled"), base.bot_enabled, "bot_enabled"),
            ping_users=_coerce_bool(row.get("ping_users"), base.ping_users, "ping_users"),
            theme_saving_enabled=_coerce_bool(
                row.get("theme_saving_enabled"),
                base.theme_saving_enabled,
                "theme_saving_enabled",
            ),
            rules_enabled=_coerce_bool(
                row.get("rules_enabled"), base.rules_enabled, "rules_enabled"
            ),
            forum_channel_name=_coerce_text(
                row.get("forum_channel_name"), base.forum_channel_name, "forum_channel_name"
            ),
            chat_channel_name=_coerce_text(
                row.get("chat_channel_name"), base.chat_channel_name, "chat_channel_name"
            ),
            mod_roles=mod_roles,
        )


@dataclass(frozen=True)
class Announcement:
    text: str
    mention_ids: frozenset[str] = frozenset()


class RoundStatus(enum.Enum):
    ANNOUNCED = "announced"
    DISABLED = "disabled"
    NO_FORUM = "no_forum"
    NO_ROUND = "no_round"
    NO_RESULTS = "no_results"
    NO_CHANNEL = "no_channel"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


@dataclass(frozen=True)
class RoundOutcome:
    status: RoundStatus
    podium: tuple[PodiumEntry, ...] = ()
    announcement: Announcement | None = None
    new_round_ref: str | None = None
