"""Base classes and mixins for Discord cogs."""
from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any, Callable, TypeVar

import asyncpg
from discord.ext import commands

from ..db import get_pool
from .logging import get_logger

if TYPE_CHECKING:
    from discord.ext.commands import Bot

log = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class PoolAwareCog(commands.Cog):
    """Mixin providing standardized database pool initialization.

    Subclasses get a ``self.pool`` attribute that is initialized during
    ``cog_load()`` and cleared during ``cog_unload()``. The pool is shared
    across all cogs via ``get_pool()``.

    If the database URL is missing, the cog logs a warning and leaves
    ``self.pool`` as ``None``; subclasses check this to disable
    database-dependent functionality.
    """

    pool: asyncpg.Pool | None = None

    def __init__(self, bot: "Bot") -> None:
        self.bot = bot
        self.pool = None

    async def cog_load(self) -> None:
        """Initialize the database pool.

        Subclasses that override this method should call ``await super().cog_load()``.
        """
        try:
            self.pool = await get_pool()
        except RuntimeError:
            self.pool = None
            log.warning(
                "%s: database pool unavailable (PG_DSN missing)",
                self.__class__.__name__,
            )

    async def cog_unload(self) -> None:
        self.pool = None

    @property
    def has_pool(self) -> bool:
        """Return True if the database pool is available."""
        return self.pool is not None


def require_pool(func: F) -> F:
    """Decorator that skips execution if the cog has no database pool."""

    @functools.wraps(func)
    async def wrapper(self: PoolAwareCog, *args: Any, **kwargs: Any) -> Any:
        if not getattr(self, "pool", None):
            return None
        return await func(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def log_errors(message: str = "Operation failed") -> Callable[[F], F]:
    """Decorator that logs exceptions with consistent formatting and returns None.

    Example::

        @log_errors("Scheduled contest pass failed")
        async def _run_scheduled(self):
            ...
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except Exception:
                get_logger(func.__module__).exception("%s in %s", message, func.__name__)
                return None

        return wrapper  # type: ignore[return-value]

    return decorator
