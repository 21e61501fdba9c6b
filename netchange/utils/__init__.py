"""netchange utilities - shared helper functions."""

from netchange.utils.env import (
    EnvVarError,
    EnvVarTypeError,
    env_is_set,
    get_env,
)
from netchange.utils.logger import (
    Logger,
    LoggerNotConfiguredError,
    LogLevel,
)

__all__ = [
    # Env
    "EnvVarError",
    "EnvVarTypeError",
    "LogLevel",
    # Logger
    "Logger",
    "LoggerNotConfiguredError",
    "env_is_set",
    "get_env",
]
