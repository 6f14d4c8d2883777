from __future__ import annotations

import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

import pytest

os.environ.setdefault("env", "TEST")
os.environ.setdefault("DISCORD_TOKEN", "dummy")
os.environ["DATABASE_URL"] = ""
os.environ.pop("PG_DSN", None)
os.environ.pop("PG_USER", None)
os.environ.pop("PG_PASSWORD", None)
os.environ.pop("PG_DB", None)

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from drawbot.contest.models import (  # noqa: E402
    Attachment,
    CommunitySettings,
    Reaction,
    Reactor,
    StagedTheme,
    Submission,
)
from drawbot.infra.config import ContestConfig  # noqa: E402

FIRE = "\U0001f525"
TIMER = "⏲️"


def voters(*ids: str, bot: bool = False) -> list[Reactor]:
    return [Reactor(id=i, bot=bot) for i in ids]


def drawing(
    author: str,
    name: str | None = None,
    *,
    fire: list[Reactor] | None = None,
    reactions: list[Reaction] | None = None,
    content: str | None = None,
    message_id: str | None = None,
) -> Submission:
    """An image reply by *author* with the given fire voters."""
    all_reactions = list(reactions or [])
    if fire is not None:
        all_reactions.append(Reaction(emoji=FIRE, users=fire))
    return Submission(
        author_id=author,
        author_display_name=name or author,
        content=content if content is not None else f"https://example.com/{author}.png",
        reactions=all_reactions,
        message_id=message_id,
    )


def image_attachment_drawing(author: str, fire: list[Reactor]) -> Submission:
    return Submission(
        author_id=author,
        author_display_name=author,
        attachments=[Attachment(content_type="image/png", filename="art.png")],
        reactions=[Reaction(emoji=FIRE, users=fire)],
    )


class FakeThemeStore:
    """In-memory staged themes keyed by (user_id, guild_id)."""

    def __init__(self, fail_update: bool = False) -> None:
        self.rows: dict[tuple[str, str], dict[str, Any]] = {}
        self.updates: list[tuple[str, str, dict]] = []
        self.fail_update = fail_update

    def stage(self, user_id: str, guild_id: str, title: str, description: str | None = None) -> None:
        self.rows[(user_id, guild_id)] = {
            "user_id": user_id,
            "guild_id": guild_id,
            "theme_title": title,
            "theme_description": description,
            "theme_staged_at": None,
            "username": user_id,
        }

    async def get(self, user_id: str, guild_id: str) -> StagedTheme | None:
        row = self.rows.get((user_id, guild_id))
        return StagedTheme.from_row(row) if row else None

    async def get_or_create(self, user_id: str, guild_id: str, username: str | None = None) -> StagedTheme:
        self.rows.setdefault(
            (user_id, guild_id),
            {"user_id": user_id, "guild_id": guild_id, "username": username},
        )
        return await self.get(user_id, guild_id)

    async def update(self, user_id: str, guild_id: str, fields: dict) -> bool:
        self.updates.append((user_id, guild_id, dict(fields)))
        if self.fail_update:
            raise RuntimeError("database is gone")
        row = self.rows.get((user_id, guild_id))
        if row is None:
            return False
        row.update(fields)
        return True


class FakeSettingsStore:
    def __init__(self, settings: CommunitySettings | None = None) -> None:
        self.settings: dict[str, CommunitySettings] = {}
        if settings is not None:
            self.settings[settings.guild_id] = settings
        self.updates: list[tuple[str, dict]] = []

    async def get(self, guild_id: str) -> CommunitySettings | None:
        return self.settings.get(guild_id)

    async def get_or_create(self, guild_id: str, name: str | None = None) -> CommunitySettings:
        return self.settings.setdefault(guild_id, CommunitySettings(guild_id=guild_id, name=name))

    async def update(self, guild_id: str, fields: dict) -> bool:
        self.updates.append((guild_id, dict(fields)))
        current = self.settings.get(guild_id)
        if current is None:
            return False
        if "mod_roles" in fields:
            roles = fields["mod_roles"]
            fields = dict(fields, mod_roles=tuple(r.strip() for r in roles.split(",")) if roles else ())
        self.settings[guild_id] = replace(current, **fields)
        return True


class FakePlatform:
    """Scripted ``ContestPlatform`` that records what it was asked to do."""

    def __init__(
        self,
        submissions: list[Submission] | None = None,
        *,
        last_is_op: bool = False,
        has_round: bool = True,
        moderators: set[str] | None = None,
        create_result: str | None = "999",
        chat_missing: bool = False,
        forum_missing: bool = False,
        guild_id: str = "1",
    ) -> None:
        self.guild_id = guild_id
        self.submissions = submissions or []
        self.last_is_op = last_is_op
        self.has_round = has_round
        self.moderators = moderators or set()
        self.create_result = create_result
        self.chat_missing = chat_missing
        self.forum_missing = forum_missing
        self.created: list[tuple[str, str]] = []
        self.announced: list[tuple[str, frozenset]] = []

    async def latest_round(self):
        from drawbot.contest.platform import MissingChannel

        if self.forum_missing:
            raise MissingChannel("forum", "daily-drawings")
        return "thread" if self.has_round else None

    async def fetch_submissions(self, round_ref):
        return list(self.submissions), self.last_is_op

    async def is_moderator(self, user_id: str) -> bool:
        return user_id in self.moderators

    async def create_round(self, title: str, body: str) -> str | None:
        self.created.append((title, body))
        return self.create_result

    async def announce(self, text: str, mention_ids) -> None:
        from drawbot.contest.platform import MissingChannel

        if self.chat_missing:
            raise MissingChannel("chat", "general")
        self.announced.append((text, frozenset(mention_ids)))


@pytest.fixture()
def contest_config() -> ContestConfig:
    return ContestConfig(round_timeout_seconds=5)


@pytest.fixture()
def theme_store() -> FakeThemeStore:
    return FakeThemeStore()
