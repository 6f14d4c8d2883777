"""Message templates: the results announcement and the round rules."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Sequence

from .models import Announcement, PodiumEntry

DEFAULT_TITLE = "15 Minute Daily Drawing Results"
FIRE = "\U0001f525"


def long_date(moment: datetime) -> str:
    """Return e.g. ``October 17, 2026``."""
    return f"{moment:%B} {moment.day}, {moment.year}"


def _render_entrant(entry: PodiumEntry) -> str:
    return entry.username if entry.is_sentinel else f"<@{entry.id}>"


def format_announcement(
    podium: Sequence[PodiumEntry],
    new_round_ref: str | None = None,
    *,
    now: datetime | None = None,
    title: str = DEFAULT_TITLE,
) -> Announcement:
    """Render the podium as a results message.

    The winner is pinged only when real and no new round was created from
    their staged theme; in that case the new-round pointer already names
    them in the new post.
    """
    now = now or datetime.now(timezone.utc)
    yesterday = now.astimezone(timezone.utc) - timedelta(days=1)
    winner = podium[0]

    lines = [f"## {title}", f"-# {long_date(yesterday)}"]
    for entry in podium[:3]:
        lines.append(f"### `{FIRE} {entry.votes:>2}` {_render_entrant(entry)}")
    content = "\n".join(lines) + "\n\n"

    mention_ids: set[str] = set()
    if not winner.is_sentinel:
        content += f"Congratulations <@{winner.id}>!\n"
        if new_round_ref:
            content += f"The new theme for today is here: <#{new_round_ref}>\n\n"
        else:
            content += "Please create a forum post with a new theme!\n\n"
            mention_ids.add(winner.id)

    content += "-# Type `/daily-theme` at any time to save your own theme!\n"
    return Announcement(text=content, mention_ids=frozenset(mention_ids))


def build_rules_message(now: datetime, deadline: datetime | None = None) -> str:
    """Return the rules posted at the top of every round."""
    lines = [
        f"Welcome to the daily drawing thread for {long_date(now.astimezone(timezone.utc))}!",
        "- Please only post images in this thread",
        "- React an image with \\:fire\\: :fire: to vote for it to win, "
        "you may vote as much as you'd like",
        "- If your drawing went over time, react on it with \\:timer\\: :timer: "
        "and it won't be counted",
        "- You can post multiple drawings, just keep them as separate replies in the thread",
    ]
    if deadline is not None:
        deadline_utc = deadline.astimezone(timezone.utc)
        lines.append(
            f"- The deadline is: {deadline_utc:%H:%M} UTC / "
            f"<t:{int(deadline_utc.timestamp())}:t> your local time"
        )
    return "\n".join(lines) + "\n"
