"""One contest round end to end: tally, roll over, announce.

``run_round`` is the single entry point used by both the scheduled job and
the ``/daily-deadline`` command. It never raises; every way a round can end
is reported as a ``RoundOutcome``.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from ..infra.config import ContestConfig, get_config
from ..infra.logging import structured_log
from ..schedule import is_valid_cron, next_run
from .announce import build_rules_message, format_announcement
from .models import CommunitySettings, RoundOutcome, RoundStatus
from .platform import ContestPlatform, MissingChannel
from .podium import compute_podium
from .rollover import ThemeStore, rollover

log = logging.getLogger(f"drawbot.{__name__}")


def rules_for(config: ContestConfig, now: datetime) -> str:
    deadline = next_run(config.cron_schedule, now) if is_valid_cron(config.cron_schedule) else None
    return build_rules_message(now, deadline)


async def _tally(platform: ContestPlatform):
    round_ref = await platform.latest_round()
    if round_ref is None:
        return None
    submissions, last_is_op = await platform.fetch_submissions(round_ref)
    return await compute_podium(submissions, last_is_op, platform.is_moderator)


async def _run(
    platform: ContestPlatform,
    settings: CommunitySettings,
    themes: ThemeStore,
    config: ContestConfig,
    now: datetime,
) -> RoundOutcome:
    if not settings.bot_enabled:
        return RoundOutcome(RoundStatus.DISABLED)

    try:
        podium = await asyncio.wait_for(_tally(platform), timeout=config.round_timeout_seconds)
    except MissingChannel as exc:
        log.info("%s in guild %s", exc, platform.guild_id)
        return RoundOutcome(RoundStatus.NO_FORUM)
    except asyncio.TimeoutError:
        log.warning(
            "Round tally exceeded %ss in guild %s; no results this round",
            config.round_timeout_seconds,
            platform.guild_id,
        )
        return RoundOutcome(RoundStatus.TIMED_OUT)

    if podium is None:
        log.info("No round found in guild %s", platform.guild_id)
        return RoundOutcome(RoundStatus.NO_ROUND)
    podium = tuple(podium)
    winner = podium[0]
    if winner.is_sentinel:
        log.info("No drawing entries found for guild %s", platform.guild_id)
        return RoundOutcome(RoundStatus.NO_RESULTS, podium=podium)

    new_round_ref = None
    if settings.theme_saving_enabled:
        new_round_ref = await rollover(
            winner.id,
            platform.guild_id,
            themes,
            platform.create_round,
            rules_for(config, now),
        )

    announcement = format_announcement(podium, new_round_ref, now=now, title=config.contest_title)
    mention_ids = announcement.mention_ids if settings.ping_users else frozenset()
    try:
        await platform.announce(announcement.text, mention_ids)
    except MissingChannel as exc:
        log.info("%s in guild %s", exc, platform.guild_id)
        return RoundOutcome(
            RoundStatus.NO_CHANNEL,
            podium=podium,
            announcement=announcement,
            new_round_ref=new_round_ref,
        )
    return RoundOutcome(
        RoundStatus.ANNOUNCED,
        podium=podium,
        announcement=announcement,
        new_round_ref=new_round_ref,
    )


async def run_round(
    platform: ContestPlatform,
    settings: CommunitySettings,
    themes: ThemeStore,
    *,
    config: ContestConfig | None = None,
    now: datetime | None = None,
) -> RoundOutcome:
    """Run one round for one guild and report how it ended."""
    config = config or get_config()
    now = now or datetime.now(timezone.utc)
    try:
        outcome = await _run(platform, settings, themes, config, now)
    except Exception:
        log.exception("Error running daily round for guild %s", platform.guild_id)
        outcome = RoundOutcome(RoundStatus.FAILED)
    structured_log(
        log,
        logging.INFO,
        "Daily round finished",
        guild_id=platform.guild_id,
        status=outcome.status.value,
        winner=outcome.podium[0].id if outcome.podium else "none",
        new_round=outcome.new_round_ref or "none",
    )
    return outcome
