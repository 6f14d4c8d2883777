"""`/daily-bot-status`: show and toggle the per-guild contest switches."""
from __future__ import annotations


import discord
from discord import app_commands
from discord.ext import commands

from ..contest.models import CommunitySettings
from ..infra import ContestConfig, PoolAwareCog, get_cog_logger, get_config
from ..permissions import ensure_moderator, merged_mod_roles
from ..schedule import summarize
from ..store import SettingsStore
from ..util import user_name

log = get_cog_logger("status")

TOGGLES = {
    "bot_enabled": "Bot",
    "ping_users": "Ping Users",
    "theme_saving_enabled": "Theme Saving",
}


def _on_off(flag: bool) -> str:
    return "ON" if flag else "OFF"


def build_status_embed(settings: CommunitySettings, cron_schedule: str) -> discord.Embed:
    embed = discord.Embed(
        title="Daily Bot Status",
        description=f"The daily drawing bot is currently **{_on_off(settings.bot_enabled)}**.",
        colour=0x00FF00 if settings.bot_enabled else 0xFF0000,
    )
    embed.add_field(name="Ping Users", value=_on_off(settings.ping_users))
    embed.add_field(name="Theme Saving", value=_on_off(settings.theme_saving_enabled))
    schedule = summarize(cron_schedule)
    if isinstance(schedule, str):
        embed.add_field(name="Schedule", value=schedule, inline=False)
    else:
        embed.add_field(
            name="Schedule",
            value=(
                f"Next run (UTC): {schedule.utc_str}\n"
                f"Next run (local time): {schedule.discord_local}\n"
                f"Time until next run: {schedule.hours}h {schedule.minutes}m"
            ),
            inline=False,
        )
    return embed


class StatusView(discord.ui.View):
    """Toggle buttons under the status panel."""

    def __init__(self, cog: "StatusCog", settings: CommunitySettings):
        super().__init__(timeout=300)
        self.cog = cog
        self.toggle_bot.label = "Turn Bot OFF" if settings.bot_enabled else "Turn Bot ON"
        self.toggle_ping.label = (
            "Disable Ping Users" if settings.ping_users else "Enable Ping Users"
        )
        self.toggle_theme.label = (
            "Disable Theme Saving" if settings.theme_saving_enabled else "Enable Theme Saving"
        )

    @discord.ui.button(label="Turn Bot OFF", style=discord.ButtonStyle.primary)
    async def toggle_bot(self, interaction: discord.Interaction, _: discord.ui.Button):
        await self.cog.toggle(interaction, "bot_enabled")

    @discord.ui.button(label="Enable Ping Users", style=discord.ButtonStyle.secondary)
    async def toggle_ping(self, interaction: discord.Interaction, _: discord.ui.Button):
        await self.cog.toggle(interaction, "ping_users")

    @discord.ui.button(label="Enable Theme Saving", style=discord.ButtonStyle.secondary)
    async def toggle_theme(self, interaction: discord.Interaction, _: discord.ui.Button):
        await self.cog.toggle(interaction, "theme_saving_enabled")


class StatusCog(PoolAwareCog):
    """Moderator panel for the per-guild ON/OFF switches."""

    def __init__(self, bot: commands.Bot, config: ContestConfig | None = None) -> None:
        super().__init__(bot)
        self.config = config or get_config()
        self.settings_store: SettingsStore | None = None

    async def cog_load(self) -> None:
        await super().cog_load()
        if self.pool:
            self.settings_store = SettingsStore(self.pool, self.config)

    async def _authorized_settings(self, interaction: discord.Interaction) -> CommunitySettings | None:
        guild = interaction.guild
        if guild is None:
            await interaction.response.send_message("Guild not found.", ephemeral=True)
            return None
        if not self.has_pool:
            await interaction.response.send_message("Database unavailable.", ephemeral=True)
            return None
        settings = await self.settings_store.get_or_create(str(guild.id), guild.name)
        if not await ensure_moderator(
            interaction, merged_mod_roles(settings.mod_roles, self.config.mod_roles)
        ):
            return None
        return settings

    @app_commands.command(
        name="daily-bot-status",
        description="Show the current daily-bot status and toggle it (interactive).",
    )
    @app_commands.guild_only()
    @app_commands.default_permissions(kick_members=True)
    async def daily_bot_status(self, interaction: discord.Interaction) -> None:
        settings = await self._authorized_settings(interaction)
        if settings is None:
            return
        await interaction.response.send_message(
            embed=build_status_embed(settings, self.config.cron_schedule),
            view=StatusView(self, settings),
            ephemeral=True,
        )

    async def toggle(self, interaction: discord.Interaction, column: str) -> None:
        settings = await self._authorized_settings(interaction)
        if settings is None:
            return
        new_value = not getattr(settings, column)
        await self.settings_store.update(str(interaction.guild.id), {column: new_value})
        log.info(
            "%s toggled to %s for guild %s by %s",
            TOGGLES[column],
            _on_off(new_value),
            interaction.guild.id,
            user_name(interaction.user),
        )
        updated = await self.settings_store.get(str(interaction.guild.id)) or settings
        await interaction.response.edit_message(
            embed=build_status_embed(updated, self.config.cron_schedule),
            view=StatusView(self, updated),
        )


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(StatusCog(bot))
