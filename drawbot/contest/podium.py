"""Turn a round's submissions into a three-place podium."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Sequence, TypeVar

from .eligibility import ModeratorCheck, is_disqualified, is_qualifying_submission
from .models import SENTINEL, PodiumEntry, Submission
from .tally import count_qualifying_votes

log = logging.getLogger(f"drawbot.{__name__}")

PODIUM_SIZE = 3

T = TypeVar("T")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _created_at(thread: object) -> datetime:
    created = getattr(thread, "created_at", None)
    if created is None:
        return _EPOCH
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


def select_latest_round(threads: Iterable[T]) -> T | None:
    """Return the most recently created thread, or None if there are none.

    Threads without a creation time sort as the oldest.
    """
    ordered = sorted(threads, key=_created_at, reverse=True)
    return ordered[0] if ordered else None


def aggregate_best(entries: Iterable[PodiumEntry]) -> list[PodiumEntry]:
    """Collapse entries per author, keeping each author's best single score.

    Authors keep the position of their first entry, so the later stable sort
    breaks ties by discovery order.
    """
    best: dict[str, PodiumEntry] = {}
    for entry in entries:
        prev = best.get(entry.id)
        if prev is None or entry.votes > prev.votes:
            best[entry.id] = PodiumEntry(
                id=entry.id,
                username=prev.username if prev else entry.username,
                votes=entry.votes,
            )
    return list(best.values())


def rank_podium(entries: Iterable[PodiumEntry]) -> list[PodiumEntry]:
    """Aggregate, sort by votes descending and pad to exactly three places."""
    ranked = sorted(aggregate_best(entries), key=lambda e: e.votes, reverse=True)
    top = ranked[:PODIUM_SIZE]
    return top + [SENTINEL] * (PODIUM_SIZE - len(top))


async def compute_podium(
    submissions: Sequence[Submission],
    last_is_original_post: bool,
    is_moderator: ModeratorCheck | None = None,
) -> list[PodiumEntry]:
    """Return the round's top three by distinct fire votes.

    ``last_is_original_post`` says the final item is the round's own seed
    post, which is never a candidate. Non-image and overtime submissions are
    skipped entirely. Never raises: on an unexpected error the entries scored
    so far are ranked and padded.
    """
    scored: list[PodiumEntry] = []
    try:
        candidates = list(submissions)
        if last_is_original_post and candidates:
            candidates = candidates[:-1]
        for submission in candidates:
            if not submission.author_id:
                continue
            if not is_qualifying_submission(submission):
                continue
            if await is_disqualified(submission, is_moderator):
                log.debug(
                    "Message %s from %s marked overtime",
                    submission.message_id,
                    submission.author_id,
                )
                continue
            votes = await count_qualifying_votes(submission)
            scored.append(
                PodiumEntry(
                    id=submission.author_id,
                    username=submission.author_display_name or "Unknown",
                    votes=votes,
                )
            )
    except Exception:
        log.exception("Error calculating top three drawings")
    return rank_podium(scored)
