"""
Source of truth for tokens & contest defaults
======================================================
Every value can be injected via env-vars (a git-ignored ``.env`` is loaded
first). Per-guild settings stored in the database override the channel
names, toggles and moderator roles below; these are only the defaults a new
guild starts with.

Usage
-----
$ export DISCORD_TOKEN=xxx
$ export FORUM_CHANNEL_NAME=daily-drawings CHAT_CHANNEL_NAME=general
$ python -m drawbot
"""
from __future__ import annotations
import os
import logging
from .util import bool_env, int_env, split_csv
from dotenv import load_dotenv
load_dotenv()

# ─── Select env ────────────────────────────────────────────────────────────
env = os.getenv("env", "prod").upper()

# ─── Tokens ───────────────────────────────────────────────────────────────
TOKEN = os.getenv("DISCORD_TOKEN")

# ─── Channels ─────────────────────────────────────────────────────────────
FORUM_CHANNEL_NAME = os.getenv("FORUM_CHANNEL_NAME", "daily-drawings")
CHAT_CHANNEL_NAME = os.getenv("CHAT_CHANNEL_NAME", "general")

# ─── Schedule (five-field cron, evaluated in UTC) ─────────────────────────
CRON_SCHEDULE = os.getenv("CRON_SCHEDULE", "0 4 * * *")
ROUND_TIMEOUT_SECONDS = int_env("ROUND_TIMEOUT_SECONDS", 120)
MESSAGE_HISTORY_LIMIT = int_env("MESSAGE_HISTORY_LIMIT", 100)

# ─── Per-guild defaults ───────────────────────────────────────────────────
BOT_ENABLED_DEFAULT = bool_env("BOT_ENABLED_DEFAULT", True)
PING_USERS = bool_env("PING_USERS", False)
THEME_SAVING_ENABLED = bool_env("THEME_SAVING_ENABLED", True)
RULES_ENABLED = bool_env("RULES_ENABLED", True)
MOD_ROLES = split_csv(os.getenv("MOD_ROLES"))

# ─── Presentation ─────────────────────────────────────────────────────────
CONTEST_TITLE = os.getenv("CONTEST_TITLE", "15 Minute Daily Drawing Results")

# Helper: convenience log line
logging.getLogger(__name__).info(
    "Loaded %s env; forum=%s chat=%s cron=%s",
    env,
    FORUM_CHANNEL_NAME,
    CHAT_CHANNEL_NAME,
    CRON_SCHEDULE,
)
