"""`/daily-theme`: members stage a theme that becomes the next post if they win."""
from __future__ import annotations

from datetime import datetime, timezone

import discord
from discord import app_commands
from discord.ext import commands

from ..contest.models import StagedTheme
from ..contest.rollover import CLEARED_THEME
from ..infra import ContestConfig, PoolAwareCog, get_cog_logger, get_config
from ..store import SettingsStore, StagedThemeStore
from ..util import user_name

log = get_cog_logger("theme")

NO_THEME = "(no saved theme)"


def build_theme_embed(theme: StagedTheme | None) -> discord.Embed:
    embed = discord.Embed(
        title="Daily Drawing Theme",
        description="Save a daily drawing theme that will automatically be posted if you win",
        colour=0x0099FF,
    )
    title = theme.title if theme and theme.title else NO_THEME
    description = theme.description if theme and theme.description else "(none)"
    embed.add_field(name="Title", value=title, inline=False)
    embed.add_field(name="Description", value=description, inline=False)
    return embed


class ThemeModal(discord.ui.Modal, title="Submit Daily Theme"):
    theme_title = discord.ui.TextInput(label="Daily theme title", max_length=100)
    theme_description = discord.ui.TextInput(
        label="More details (optional)",
        style=discord.TextStyle.paragraph,
        required=False,
        max_length=400,
    )

    def __init__(self, cog: "ThemeCog", theme: StagedTheme | None):
        super().__init__(timeout=300)
        self.cog = cog
        if theme and theme.title:
            self.theme_title.default = theme.title
            self.theme_description.default = theme.description or ""

    async def on_submit(self, interaction: discord.Interaction):
        await self.cog.save_theme(
            interaction, str(self.theme_title).strip(), str(self.theme_description).strip()
        )


class ThemeView(discord.ui.View):
    def __init__(self, cog: "ThemeCog"):
        super().__init__(timeout=300)
        self.cog = cog

    @discord.ui.button(label="Update Theme", style=discord.ButtonStyle.primary)
    async def update_theme(self, interaction: discord.Interaction, _: discord.ui.Button):
        theme = await self.cog.current_theme(interaction)
        await interaction.response.send_modal(ThemeModal(self.cog, theme))

    @discord.ui.button(label="Clear Theme", style=discord.ButtonStyle.danger)
    async def clear_theme(self, interaction: discord.Interaction, _: discord.ui.Button):
        await self.cog.clear_theme(interaction)


class ThemeCog(PoolAwareCog):
    """Lets members save, update and clear their staged theme."""

    def __init__(self, bot: commands.Bot, config: ContestConfig | None = None) -> None:
        super().__init__(bot)
        self.config = config or get_config()
        self.settings_store: SettingsStore | None = None
        self.theme_store: StagedThemeStore | None = None

    async def cog_load(self) -> None:
        await super().cog_load()
        if self.pool:
            self.settings_store = SettingsStore(self.pool, self.config)
            self.theme_store = StagedThemeStore(self.pool)

    async def _ready(self, interaction: discord.Interaction) -> bool:
        guild = interaction.guild
        if guild is None:
            await interaction.response.send_message("Guild not found.", ephemeral=True)
            return False
        if not self.has_pool:
            await interaction.response.send_message("Database unavailable.", ephemeral=True)
            return False
        settings = await self.settings_store.get_or_create(str(guild.id), guild.name)
        if not settings.theme_saving_enabled:
            await interaction.response.send_message(
                "Theme saving is disabled on this server.", ephemeral=True
            )
            return False
        return True

    async def current_theme(self, interaction: discord.Interaction) -> StagedTheme | None:
        if not self.has_pool or interaction.guild is None:
            return None
        return await self.theme_store.get(str(interaction.user.id), str(interaction.guild.id))

    async def _ensure_record(self, interaction: discord.Interaction) -> StagedTheme:
        return await self.theme_store.get_or_create(
            str(interaction.user.id), str(interaction.guild.id), user_name(interaction.user)
        )

    @app_commands.command(
        name="daily-theme",
        description="Save a theme that is posted automatically if you win.",
    )
    @app_commands.guild_only()
    async def daily_theme(self, interaction: discord.Interaction) -> None:
        if not await self._ready(interaction):
            return
        theme = await self._ensure_record(interaction)
        await interaction.response.send_message(
            embed=build_theme_embed(theme), view=ThemeView(self), ephemeral=True
        )

    async def save_theme(self, interaction: discord.Interaction, title: str, description: str) -> None:
        if not await self._ready(interaction):
            return
        if not title:
            await interaction.response.send_message("A theme title is required.", ephemeral=True)
            return
        await self._ensure_record(interaction)
        await self.theme_store.update(
            str(interaction.user.id),
            str(interaction.guild.id),
            {
                "theme_title": title,
                "theme_description": description or None,
                "theme_staged_at": datetime.now(timezone.utc),
                "username": user_name(interaction.user),
            },
        )
        log.info(
            "Saved theme '%s' for %s in guild %s",
            title,
            user_name(interaction.user),
            interaction.guild.id,
        )
        theme = await self.current_theme(interaction)
        await interaction.response.send_message(
            embed=build_theme_embed(theme), view=ThemeView(self), ephemeral=True
        )

    async def clear_theme(self, interaction: discord.Interaction) -> None:
        if not await self._ready(interaction):
            return
        await self._ensure_record(interaction)
        await self.theme_store.update(
            str(interaction.user.id), str(interaction.guild.id), dict(CLEARED_THEME)
        )
        log.info("Cleared theme for %s in guild %s", user_name(interaction.user), interaction.guild.id)
        theme = await self.current_theme(interaction)
        await interaction.response.edit_message(embed=build_theme_embed(theme), view=ThemeView(self))


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(ThemeCog(bot))
