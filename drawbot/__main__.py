"""Entry point to run the daily drawing contest bot."""
import asyncio
import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import discord
from discord.ext import commands

from . import bot_config as cfg
from .db import close_pool

# ─── Logging Setup ─────────────────────────────────────────────────────────
logger = logging.getLogger("drawbot")
level_name = os.getenv("LOG_LEVEL", "INFO").upper()
level = getattr(logging, level_name, logging.INFO)
logger.setLevel(level)
log_format = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

console_handler = logging.StreamHandler()
console_handler.setFormatter(log_format)
# Limit console output to INFO and above even when file logging is DEBUG
console_handler.setLevel(logging.INFO)

root_logger = logging.getLogger()
root_logger.setLevel(level)
root_logger.addHandler(console_handler)

logger.info(
    "Starting drawbot in %s environment with level %s",
    getattr(cfg, "env", "PROD"),
    level_name,
)

intents = discord.Intents.default()
intents.message_content = True
intents.members = True  # moderator lookups for overtime markers
intents.reactions = True


class DrawBot(commands.Bot):
    async def setup_hook(self) -> None:
        cog_dir = Path(__file__).resolve().parent / "cogs"
        for file in sorted(cog_dir.glob("*_cog.py")):
            await self.load_extension(f"drawbot.cogs.{file.stem}")


bot = DrawBot(command_prefix="!", intents=intents)

_synced = False


@bot.event
async def on_ready() -> None:
    global _synced
    logger.info("Logged in as %s", bot.user)
    if not _synced:
        try:
            cmds = await bot.tree.sync()
            logger.info("Synced %d commands.", len(cmds))
            _synced = True
        except Exception as e:
            logger.exception("Failed to sync commands: %s", e)


@bot.event
async def on_error(event: str, *args, **kwargs) -> None:
    logger.exception("Unhandled exception in event %s", event)


@bot.tree.error
async def on_app_command_error(
    interaction: discord.Interaction, exc: discord.app_commands.AppCommandError
) -> None:
    cmd_name = getattr(interaction.command, "name", "unknown")
    logger.exception("Error in slash command '%s'", cmd_name, exc_info=exc)
    if interaction.response.is_done():
        await interaction.followup.send("An error occurred.", ephemeral=True)
    else:
        await interaction.response.send_message("An error occurred.", ephemeral=True)


async def main() -> None:
    if not cfg.TOKEN:
        raise SystemExit("DISCORD_TOKEN is not set")
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(exist_ok=True)
    file_handler = TimedRotatingFileHandler(
        log_dir / "bot.log", when="midnight", backupCount=30
    )
    file_handler.setFormatter(log_format)
    root_logger.addHandler(file_handler)

    try:
        async with bot:
            await bot.start(cfg.TOKEN)
    finally:
        file_handler.close()
        await close_pool()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
