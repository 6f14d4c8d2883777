"""Count distinct fire votes on a single submission."""
from __future__ import annotations

import asyncio
import logging

from .models import Submission

log = logging.getLogger(f"drawbot.{__name__}")

FIRE_GLYPH = "\U0001f525"


def is_fire_reaction(emoji: str | None) -> bool:
    if not emoji:
        return False
    return emoji == FIRE_GLYPH or emoji.lower() == "fire"


async def count_qualifying_votes(submission: Submission) -> int:
    """Return how many distinct humans other than the author voted fire.

    Fire reactions are resolved concurrently; a reaction whose reactors
    cannot be fetched is skipped and the rest still count.
    """
    fire = [r for r in submission.reactions if is_fire_reaction(r.emoji)]
    if not fire:
        return 0
    results = await asyncio.gather(
        *(r.resolve_users() for r in fire), return_exceptions=True
    )
    voters: set[str] = set()
    for reaction, users in zip(fire, results):
        if isinstance(users, BaseException):
            log.debug(
                "Skipping unresolvable %s reaction on message %s: %s",
                reaction.emoji,
                submission.message_id,
                users,
            )
            continue
        for user in users:
            if user.bot or user.id == submission.author_id:
                continue
            voters.add(user.id)
    return len(voters)
