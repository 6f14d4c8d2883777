"""Decide whether a submission is a contest entry and whether it ran overtime."""
from __future__ import annotations

import logging
import re
from typing import Awaitable, Callable

from .models import Reaction, Submission

log = logging.getLogger(f"drawbot.{__name__}")

IMAGE_EXTENSIONS = ("png", "jpg", "jpeg", "gif", "webp", "bmp", "tiff", "svg")

_EXT_PATTERN = "(" + "|".join(IMAGE_EXTENSIONS) + ")"
_FILENAME_RE = re.compile(rf"\.{_EXT_PATTERN}$", re.IGNORECASE)
_URL_RE = re.compile(rf"https?://\S+\.{_EXT_PATTERN}(?:\?\S*)?", re.IGNORECASE)

TIMER_GLYPHS = frozenset({"⏱️", "⏱", "⏲️", "⏲"})

ModeratorCheck = Callable[[str], Awaitable[bool]]


def _has_image_attachment(submission: Submission) -> bool:
    for att in submission.attachments:
        if (att.content_type or "").lower().startswith("image/"):
            return True
        name = att.filename or att.url or ""
        if _FILENAME_RE.search(name):
            return True
    return False


def _has_image_embed(submission: Submission) -> bool:
    for embed in submission.embeds:
        if embed.image_url or embed.thumbnail_url:
            return True
        if embed.type == "image" and embed.url:
            return True
    return False


def is_qualifying_submission(submission: Submission) -> bool:
    """Return True if the submission carries an image.

    Any error while inspecting the submission counts as "not an image".
    """
    try:
        if _has_image_attachment(submission) or _has_image_embed(submission):
            return True
        content = submission.content
        if isinstance(content, str) and content and _URL_RE.search(content):
            return True
    except Exception:
        log.debug("Image check failed for message %s", submission.message_id, exc_info=True)
    return False


def is_timer_reaction(emoji: str | None) -> bool:
    if not emoji:
        return False
    if emoji in TIMER_GLYPHS:
        return True
    lowered = emoji.lower()
    return "timer" in lowered or "stopwatch" in lowered


async def _reactor_is_moderator(is_moderator: ModeratorCheck, user_id: str) -> bool:
    try:
        return bool(await is_moderator(user_id))
    except Exception:
        log.debug("Moderator lookup failed for %s", user_id, exc_info=True)
        return False


async def _marks_overtime(
    reaction: Reaction, author_id: str, is_moderator: ModeratorCheck | None
) -> bool:
    users = await reaction.resolve_users()
    if any(user.id == author_id for user in users):
        return True
    if is_moderator is None:
        return False
    for user in users:
        if await _reactor_is_moderator(is_moderator, user.id):
            return True
    return False


async def is_disqualified(
    submission: Submission, is_moderator: ModeratorCheck | None = None
) -> bool:
    """Return True if the submission was marked overtime.

    A timer or stopwatch reaction counts when applied by the submission's
    author or by any reactor for whom ``is_moderator`` returns True. A
    reaction whose reactors cannot be resolved is skipped.
    """
    try:
        for reaction in submission.reactions:
            if not is_timer_reaction(reaction.emoji):
                continue
            try:
                if await _marks_overtime(reaction, submission.author_id, is_moderator):
                    return True
            except Exception:
                log.debug(
                    "Skipping unresolvable %s reaction on message %s",
                    reaction.emoji,
                    submission.message_id,
                    exc_info=True,
                )
    except Exception:
        log.exception("Error checking overtime marker on message %s", submission.message_id)
    return False
