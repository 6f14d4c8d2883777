"""Infrastructure utilities for the contest bot."""
from .cog_base import PoolAwareCog, log_errors, require_pool
from .config import (
    ContestConfig,
    get_config,
    reset_config,
    set_config,
)
from .logging import (
    get_cog_logger,
    get_logger,
    structured_log,
)

__all__ = [
    # Cog base classes
    "PoolAwareCog",
    "log_errors",
    "require_pool",
    # Configuration
    "ContestConfig",
    "get_config",
    "reset_config",
    "set_config",
    # Logging
    "get_cog_logger",
    "get_logger",
    "structured_log",
]
