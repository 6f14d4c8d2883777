"""Centralized configuration snapshot for the contest pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field

from .. import bot_config as cfg


@dataclass(frozen=True)
class ContestConfig:
    """Env-level defaults used when a guild has no stored override."""

    forum_channel_name: str = "daily-drawings"
    chat_channel_name: str = "general"
    cron_schedule: str = "0 4 * * *"
    round_timeout_seconds: int = 120
    message_history_limit: int = 100
    contest_title: str = "15 Minute Daily Drawing Results"
    bot_enabled_default: bool = True
    ping_users_default: bool = False
    theme_saving_default: bool = True
    rules_enabled_default: bool = True
    mod_roles: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_env(cls) -> "ContestConfig":
        """Create config from the values loaded by ``bot_config``."""
        return cls(
            forum_channel_name=cfg.FORUM_CHANNEL_NAME,
            chat_channel_name=cfg.CHAT_CHANNEL_NAME,
            cron_schedule=cfg.CRON_SCHEDULE,
            round_timeout_seconds=cfg.ROUND_TIMEOUT_SECONDS,
            message_history_limit=cfg.MESSAGE_HISTORY_LIMIT,
            contest_title=cfg.CONTEST_TITLE,
            bot_enabled_default=cfg.BOT_ENABLED_DEFAULT,
            ping_users_default=cfg.PING_USERS,
            theme_saving_default=cfg.THEME_SAVING_ENABLED,
            rules_enabled_default=cfg.RULES_ENABLED,
            mod_roles=tuple(cfg.MOD_ROLES),
        )


# Global default configuration instance
_default_config: ContestConfig | None = None


def get_config() -> ContestConfig:
    """Return the global configuration instance, creating it on first access."""
    global _default_config
    if _default_config is None:
        _default_config = ContestConfig.from_env()
    return _default_config


def set_config(config: ContestConfig) -> None:
    """Set the global configuration instance.

    Useful for testing or when you need to override defaults.
    """
    global _default_config
    _default_config = config


def reset_config() -> None:
    """Reset the global configuration to reload from environment."""
    global _default_config
    _default_config = None
