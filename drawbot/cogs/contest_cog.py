"""Daily drawing contest: scheduled deadline, `/daily-deadline` and round rules.

At the configured cron time (UTC) every guild the bot is in is processed in
turn: the newest post in the contest forum is tallied, the podium is
announced in the chat channel, and a winner's staged theme becomes the next
post. New forum posts opened by members get the rules message.
"""
from __future__ import annotations

from datetime import datetime, timezone

import discord
import pytz
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from discord import app_commands
from discord.ext import commands

from ..contest.models import CommunitySettings, RoundOutcome, RoundStatus
from ..contest.pipeline import rules_for, run_round
from ..contest.platform import DiscordPlatform
from ..infra import (
    ContestConfig,
    PoolAwareCog,
    get_cog_logger,
    get_config,
    log_errors,
    require_pool,
)
from ..permissions import ensure_moderator, merged_mod_roles
from ..schedule import build_trigger
from ..store import SettingsStore, StagedThemeStore
from ..util import guild_name, user_name

log = get_cog_logger("contest")

OUTCOME_MESSAGES = {
    RoundStatus.ANNOUNCED: "Deadline results processed.",
    RoundStatus.DISABLED: "Daily drawing bot is currently OFF.",
    RoundStatus.NO_FORUM: "Forum channel '{forum}' not found.",
    RoundStatus.NO_ROUND: "No post found in forum channel '{forum}'.",
    RoundStatus.NO_RESULTS: "No results to report for the most recent post.",
    RoundStatus.NO_CHANNEL: "Chat channel '{chat}' not found.",
    RoundStatus.TIMED_OUT: "Counting the votes took too long; no results this round.",
    RoundStatus.FAILED: "An error occurred while computing the deadline results.",
}


class DailyContestCog(PoolAwareCog):
    """Runs the daily vote tally on a cron schedule and on demand."""

    def __init__(self, bot: commands.Bot, config: ContestConfig | None = None) -> None:
        super().__init__(bot)
        self.config = config or get_config()
        self.scheduler: AsyncIOScheduler | None = None
        self.settings_store: SettingsStore | None = None
        self.theme_store: StagedThemeStore | None = None

    async def cog_load(self) -> None:
        await super().cog_load()
        if self.pool:
            self.settings_store = SettingsStore(self.pool, self.config)
            self.theme_store = StagedThemeStore(self.pool)
        try:
            trigger = build_trigger(self.config.cron_schedule)
        except ValueError:
            log.error(
                "CRON_SCHEDULE '%s' is not a valid cron expression; skipping scheduler.",
                self.config.cron_schedule,
            )
            return
        self.scheduler = AsyncIOScheduler(timezone=pytz.UTC)
        self.scheduler.add_job(self._run_scheduled, trigger)
        self.scheduler.start()
        log.info("Scheduled daily job with cron expression '%s' (UTC)", self.config.cron_schedule)

    async def cog_unload(self) -> None:
        if self.scheduler:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None
        await super().cog_unload()

    # ── Round helpers ─────────────────────────────────────────────────────

    def forum_name(self, settings: CommunitySettings) -> str:
        return settings.forum_channel_name or self.config.forum_channel_name

    def chat_name(self, settings: CommunitySettings) -> str:
        return settings.chat_channel_name or self.config.chat_channel_name

    def platform_for(self, guild: discord.Guild, settings: CommunitySettings) -> DiscordPlatform:
        return DiscordPlatform(
            guild,
            forum_channel_name=self.forum_name(settings),
            chat_channel_name=self.chat_name(settings),
            mod_roles=merged_mod_roles(settings.mod_roles, self.config.mod_roles),
            history_limit=self.config.message_history_limit,
        )

    async def run_for_guild(
        self, guild: discord.Guild, settings: CommunitySettings | None = None
    ) -> RoundOutcome:
        if settings is None:
            settings = await self.settings_store.get_or_create(str(guild.id), guild.name)
        return await run_round(
            self.platform_for(guild, settings),
            settings,
            self.theme_store,
            config=self.config,
        )

    @log_errors("Scheduled daily deadline job failed")
    @require_pool
    async def _run_scheduled(self) -> None:
        await self.bot.wait_until_ready()
        log.info("Running scheduled daily deadline job (%s UTC)", self.config.cron_schedule)
        for guild in list(self.bot.guilds):
            try:
                outcome = await self.run_for_guild(guild)
            except Exception:
                log.exception("Error running scheduled job for guild %s", guild.id)
                continue
            if outcome.status is RoundStatus.DISABLED:
                log.info("Skipping guild %s because the bot is OFF", guild.id)

    # ── Commands ──────────────────────────────────────────────────────────

    @app_commands.command(
        name="daily-deadline",
        description="Announce voting deadline and post winner, 2nd and 3rd place (by fire reactions).",
    )
    @app_commands.guild_only()
    @app_commands.default_permissions(kick_members=True)
    async def daily_deadline(self, interaction: discord.Interaction) -> None:
        guild = interaction.guild
        if guild is None:
            await interaction.response.send_message("Guild not found.", ephemeral=True)
            return
        if not self.has_pool:
            await interaction.response.send_message("Database unavailable.", ephemeral=True)
            return
        settings = await self.settings_store.get_or_create(str(guild.id), guild.name)
        if not await ensure_moderator(
            interaction, merged_mod_roles(settings.mod_roles, self.config.mod_roles)
        ):
            return
        log.info("/daily-deadline invoked by %s in %s", user_name(interaction.user), guild_name(guild))
        await interaction.response.defer(thinking=True, ephemeral=True)
        outcome = await self.run_for_guild(guild, settings)
        message = OUTCOME_MESSAGES[outcome.status].format(
            forum=self.forum_name(settings), chat=self.chat_name(settings)
        )
        await interaction.followup.send(message, ephemeral=True)

    # ── Events ────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    @log_errors("Posting round rules failed")
    @require_pool
    async def on_thread_create(self, thread: discord.Thread) -> None:
        """Post the rules into new posts in the contest forum."""
        if thread.guild is None:
            return
        me = self.bot.user
        if me is not None and thread.owner_id == me.id:
            return
        settings = await self.settings_store.get_or_create(str(thread.guild.id), thread.guild.name)
        parent = thread.parent
        if parent is None or parent.name != self.forum_name(settings):
            return
        if not settings.bot_enabled or not settings.rules_enabled:
            return
        await thread.send(rules_for(self.config, datetime.now(timezone.utc)))
        log.info("Posted rules in new thread under '%s': %s", parent.name, thread.id)


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(DailyContestCog(bot))
