"""Chat platform capabilities the contest needs, and the Discord adapter.

The pipeline only talks to a ``ContestPlatform``. ``DiscordPlatform`` maps a
single guild onto that interface and is the only place that touches
discord.py message, reaction and thread objects.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Protocol, Sequence

import discord

from ..permissions import user_has_mod_permission
from ..util import user_name
from .models import Attachment, EmbedMedia, Reaction, Reactor, Submission
from .podium import select_latest_round

log = logging.getLogger(f"drawbot.{__name__}")


class MissingChannel(LookupError):
    """Raised when a configured channel does not exist in the guild."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind} channel '{name}' not found")
        self.kind = kind
        self.name = name


class ContestPlatform(Protocol):
    guild_id: str

    async def latest_round(self) -> Any | None: ...

    async def fetch_submissions(self, round_ref: Any) -> tuple[list[Submission], bool]: ...

    async def is_moderator(self, user_id: str) -> bool: ...

    async def create_round(self, title: str, body: str) -> str | None: ...

    async def announce(self, text: str, mention_ids: Iterable[str]) -> None: ...


def _emoji_name(emoji: Any) -> str:
    if isinstance(emoji, str):
        return emoji
    return getattr(emoji, "name", None) or str(emoji)


def reaction_from_discord(reaction: discord.Reaction) -> Reaction:
    async def _fetch() -> list[Reactor]:
        return [Reactor(id=str(u.id), bot=bool(u.bot)) async for u in reaction.users()]

    return Reaction(emoji=_emoji_name(reaction.emoji), fetch_users=_fetch)


def _embed_from_discord(embed: discord.Embed) -> EmbedMedia:
    return EmbedMedia(
        type=getattr(embed, "type", None),
        url=getattr(embed, "url", None),
        image_url=getattr(getattr(embed, "image", None), "url", None),
        thumbnail_url=getattr(getattr(embed, "thumbnail", None), "url", None),
    )


def submission_from_message(message: discord.Message) -> Submission:
    """Convert a thread reply into a ``Submission``."""
    author = message.author
    return Submission(
        author_id=str(author.id) if author else "",
        author_display_name=user_name(author),
        content=message.content or "",
        attachments=[
            Attachment(content_type=a.content_type, filename=a.filename, url=a.url)
            for a in message.attachments
        ],
        embeds=[_embed_from_discord(e) for e in message.embeds],
        reactions=[reaction_from_discord(r) for r in message.reactions],
        message_id=str(message.id),
    )


class DiscordPlatform:
    """``ContestPlatform`` for one guild, bound to its channel names and mod roles."""

    def __init__(
        self,
        guild: discord.Guild,
        forum_channel_name: str,
        chat_channel_name: str,
        mod_roles: Sequence[str] = (),
        history_limit: int = 100,
    ) -> None:
        self.guild = guild
        self.guild_id = str(guild.id)
        self.forum_channel_name = forum_channel_name
        self.chat_channel_name = chat_channel_name
        self.mod_roles = tuple(mod_roles)
        self.history_limit = history_limit
        self._mod_cache: dict[str, bool] = {}

    def find_forum(self) -> discord.ForumChannel | None:
        return discord.utils.get(self.guild.forums, name=self.forum_channel_name)

    def find_chat(self) -> discord.TextChannel | None:
        return discord.utils.get(self.guild.text_channels, name=self.chat_channel_name)

    async def latest_round(self) -> discord.Thread | None:
        forum = self.find_forum()
        if forum is None:
            raise MissingChannel("forum", self.forum_channel_name)
        threads = {t.id: t for t in forum.threads}
        for thread in await self.guild.active_threads():
            if thread.parent_id == forum.id:
                threads[thread.id] = thread
        return select_latest_round(t for t in threads.values() if not t.archived)

    async def fetch_submissions(self, round_ref: discord.Thread) -> tuple[list[Submission], bool]:
        """Return the round's messages newest first and whether the last is the seed post."""
        messages = [m async for m in round_ref.history(limit=self.history_limit)]
        last_is_op = bool(messages) and messages[-1].id == round_ref.id
        return [submission_from_message(m) for m in messages], last_is_op

    async def is_moderator(self, user_id: str) -> bool:
        if user_id in self._mod_cache:
            return self._mod_cache[user_id]
        member = self.guild.get_member(int(user_id))
        if member is None:
            try:
                member = await self.guild.fetch_member(int(user_id))
            except discord.HTTPException:
                member = None
        result = user_has_mod_permission(member, self.mod_roles)
        self._mod_cache[user_id] = result
        return result

    async def create_round(self, title: str, body: str) -> str | None:
        forum = self.find_forum()
        if forum is None:
            log.info(
                "Forum channel '%s' not found in guild %s while creating theme post.",
                self.forum_channel_name,
                self.guild_id,
            )
            return None
        created = await forum.create_thread(
            name=title[:100],
            content=body[:2000],
            allowed_mentions=discord.AllowedMentions.none(),
        )
        return str(created.thread.id)

    async def announce(self, text: str, mention_ids: Iterable[str]) -> None:
        chat = self.find_chat()
        if chat is None:
            raise MissingChannel("chat", self.chat_channel_name)
        allowed = discord.AllowedMentions(
            everyone=False,
            roles=False,
            users=[discord.Object(id=int(uid)) for uid in mention_ids],
        )
        await chat.send(text, allowed_mentions=allowed)
