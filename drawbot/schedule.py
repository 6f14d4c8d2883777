"""Cron helpers for the daily deadline job (five-field expressions, UTC)."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import pytz
from apscheduler.triggers.cron import CronTrigger
from croniter import croniter


def _ensure_aware(timestamp: datetime) -> datetime:
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def is_valid_cron(expr: str) -> bool:
    return len(expr.split()) == 5 and croniter.is_valid(expr)


def build_trigger(expr: str) -> CronTrigger:
    """Return an APScheduler trigger for *expr* evaluated in UTC.

    Raises ValueError for anything but a valid five-field expression.
    """
    if not is_valid_cron(expr):
        raise ValueError(f"invalid cron expression: {expr!r}")
    return CronTrigger.from_crontab(expr, timezone=pytz.UTC)


def next_run(expr: str, reference: datetime | None = None) -> datetime:
    """Return the next UTC fire time strictly after *reference*."""
    reference = _ensure_aware(reference or datetime.now(timezone.utc))
    return croniter(expr, reference).get_next(datetime).astimezone(timezone.utc)


@dataclass(frozen=True)
class ScheduleSummary:
    cron: str
    next_utc: datetime
    hours: int
    minutes: int

    @property
    def discord_local(self) -> str:
        return f"<t:{int(self.next_utc.timestamp())}>"

    @property
    def utc_str(self) -> str:
        return self.next_utc.strftime("%Y-%m-%d %H:%M UTC")


def summarize(expr: str, now: datetime | None = None) -> ScheduleSummary | str:
    """Return the next-run summary, or an error line for an invalid expression."""
    if not is_valid_cron(expr):
        return f"Configured cron expression '{expr}' is invalid."
    now = _ensure_aware(now or datetime.now(timezone.utc))
    upcoming = next_run(expr, now)
    remaining = max(0, int((upcoming - now).total_seconds()))
    return ScheduleSummary(
        cron=expr,
        next_utc=upcoming,
        hours=remaining // 3600,
        minutes=(remaining % 3600) // 60,
    )
