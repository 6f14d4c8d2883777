"""`/daily-bot-config`: moderator roles, channel bindings and the rules post."""
from __future__ import annotations


import discord
from discord import app_commands
from discord.ext import commands

from ..contest.models import CommunitySettings
from ..infra import ContestConfig, PoolAwareCog, get_cog_logger, get_config
from ..permissions import ensure_moderator, merged_mod_roles
from ..store import SettingsStore
from ..util import split_csv, user_name

log = get_cog_logger("config")


def build_config_embed(settings: CommunitySettings, config: ContestConfig) -> discord.Embed:
    embed = discord.Embed(
        title="Daily Bot Configuration",
        description="Configure moderator roles and contest channels for this server.",
        colour=0x0099FF,
    )
    embed.add_field(
        name="Moderator Roles",
        value=", ".join(settings.mod_roles) if settings.mod_roles else "None set",
        inline=False,
    )
    embed.add_field(
        name="Contest Forum",
        value=settings.forum_channel_name or f"{config.forum_channel_name} (default)",
    )
    embed.add_field(
        name="Results Channel",
        value=settings.chat_channel_name or f"{config.chat_channel_name} (default)",
    )
    embed.add_field(name="Rules Post", value="ON" if settings.rules_enabled else "OFF")
    return embed


class ConfigModal(discord.ui.Modal, title="Edit Contest Settings"):
    mod_roles = discord.ui.TextInput(
        label="Moderator Roles (comma-separated)",
        style=discord.TextStyle.paragraph,
        placeholder="Enter role IDs or names, separated by commas",
        required=False,
        max_length=400,
    )
    forum_channel = discord.ui.TextInput(
        label="Contest forum channel name",
        required=False,
        max_length=100,
    )
    chat_channel = discord.ui.TextInput(
        label="Results channel name",
        required=False,
        max_length=100,
    )

    def __init__(self, cog: "ConfigCog", settings: CommunitySettings):
        super().__init__(timeout=300)
        self.cog = cog
        self.mod_roles.default = ", ".join(settings.mod_roles)
        self.forum_channel.default = settings.forum_channel_name or ""
        self.chat_channel.default = settings.chat_channel_name or ""

    async def on_submit(self, interaction: discord.Interaction):
        await self.cog.save(
            interaction,
            mod_roles=str(self.mod_roles),
            forum_channel=str(self.forum_channel),
            chat_channel=str(self.chat_channel),
        )


class ConfigView(discord.ui.View):
    def __init__(self, cog: "ConfigCog", settings: CommunitySettings):
        super().__init__(timeout=300)
        self.cog = cog
        self.toggle_rules.label = (
            "Disable Rules Post" if settings.rules_enabled else "Enable Rules Post"
        )

    @discord.ui.button(label="Edit Settings", style=discord.ButtonStyle.primary)
    async def edit(self, interaction: discord.Interaction, _: discord.ui.Button):
        settings = await self.cog.authorized_settings(interaction)
        if settings is None:
            return
        await interaction.response.send_modal(ConfigModal(self.cog, settings))

    @discord.ui.button(label="Disable Rules Post", style=discord.ButtonStyle.secondary)
    async def toggle_rules(self, interaction: discord.Interaction, _: discord.ui.Button):
        await self.cog.toggle_rules(interaction)


class ConfigCog(PoolAwareCog):
    """Moderator panel for the guild's contest configuration."""

    def __init__(self, bot: commands.Bot, config: ContestConfig | None = None) -> None:
        super().__init__(bot)
        self.config = config or get_config()
        self.settings_store: SettingsStore | None = None

    async def cog_load(self) -> None:
        await super().cog_load()
        if self.pool:
            self.settings_store = SettingsStore(self.pool, self.config)

    async def authorized_settings(self, interaction: discord.Interaction) -> CommunitySettings | None:
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

    def _panel(self, settings: CommunitySettings) -> dict:
        return {
            "embed": build_config_embed(settings, self.config),
            "view": ConfigView(self, settings),
        }

    @app_commands.command(
        name="daily-bot-config",
        description="Show and edit moderator roles and contest channels.",
    )
    @app_commands.guild_only()
    @app_commands.default_permissions(kick_members=True)
    async def daily_bot_config(self, interaction: discord.Interaction) -> None:
        settings = await self.authorized_settings(interaction)
        if settings is None:
            return
        await interaction.response.send_message(**self._panel(settings), ephemeral=True)

    async def save(
        self,
        interaction: discord.Interaction,
        *,
        mod_roles: str,
        forum_channel: str,
        chat_channel: str,
    ) -> None:
        settings = await self.authorized_settings(interaction)
        if settings is None:
            return
        guild_id = str(interaction.guild.id)
        cleaned_roles = ", ".join(split_csv(mod_roles))
        await self.settings_store.update(
            guild_id,
            {
                "mod_roles": cleaned_roles or None,
                "forum_channel_name": forum_channel.strip() or None,
                "chat_channel_name": chat_channel.strip() or None,
            },
        )
        log.info(
            'Contest settings updated for guild %s by %s: mod_roles="%s" forum="%s" chat="%s"',
            guild_id,
            user_name(interaction.user),
            cleaned_roles,
            forum_channel.strip(),
            chat_channel.strip(),
        )
        updated = await self.settings_store.get(guild_id) or settings
        await interaction.response.send_message(**self._panel(updated), ephemeral=True)

    async def toggle_rules(self, interaction: discord.Interaction) -> None:
        settings = await self.authorized_settings(interaction)
        if settings is None:
            return
        guild_id = str(interaction.guild.id)
        await self.settings_store.update(guild_id, {"rules_enabled": not settings.rules_enabled})
        log.info(
            "Rules post toggled to %s for guild %s by %s",
            not settings.rules_enabled,
            guild_id,
            user_name(interaction.user),
        )
        updated = await self.settings_store.get(guild_id) or settings
        await interaction.response.edit_message(**self._panel(updated))


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(ConfigCog(bot))
