"""Logging setup for the ``netchange`` namespace.

Library modules only ever call ``logging.getLogger(__name__)``; records stay
silent until an application attaches a handler here. The CLI does so once at
startup through ``Logger.configure_from_env()``.

Usage:
    from netchange.utils.logger import Logger

    Logger.configure(level="INFO", output="stderr")
    log = Logger.get("watch")
    log.info("Watching for network changes...")
"""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import TextIO

from netchange.utils.env import get_env


class LogLevel(str, Enum):
    """Log levels accepted by ``Logger``."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @classmethod
    def parse(cls, level: "str | LogLevel") -> "LogLevel":
        """Accept a level name in any case, e.g. ``"debug"``."""
        if isinstance(level, cls):
            return level
        try:
            return cls(str(level).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown log level: {level!r}") from None

    @property
    def numeric(self) -> int:
        level: int = logging.getLevelName(self.value)
        return level


class LoggerNotConfiguredError(Exception):
    """Raised when ``Logger.get()`` runs before ``Logger.configure()``."""

    def __init__(self) -> None:
        super().__init__(
            "Logger not configured. Call Logger.configure() at application startup."
        )


def _make_handler(output: str | Path | TextIO | None) -> logging.Handler:
    if output is None or output == "stderr":
        return logging.StreamHandler(sys.stderr)
    if output == "stdout":
        return logging.StreamHandler(sys.stdout)
    if isinstance(output, str | Path):
        return logging.FileHandler(str(output))
    if hasattr(output, "write"):
        return logging.StreamHandler(output)
    raise ValueError(f"Invalid output: {type(output)}")


def _default_format(timestamps: bool, include_location: bool) -> str:
    fields = ["%(levelname)s", "[%(name)s]", "%(message)s"]
    if include_location:
        fields.insert(2, "[%(filename)s:%(lineno)d]")
    if timestamps:
        fields.insert(0, "%(asctime)s")
    return " ".join(fields)


class Logger:
    """Owns the single handler of the ``netchange`` logger.

    Example:
        >>> Logger.configure(level="DEBUG", output="stderr")
        >>> Logger.get("observer").debug("Seeding baseline")
    """

    _configured: bool = False
    _root_name: str = "netchange"

    @classmethod
    def configure(
        cls,
        level: str | LogLevel = "INFO",
        output: str | Path | TextIO | None = None,
        timestamps: bool = True,
        include_location: bool = False,
        format_string: str | None = None,
    ) -> None:
        """Attach a fresh handler to the ``netchange`` logger.

        Reconfiguring replaces (and closes) the previous handler.

        Args:
            level: Level name such as "DEBUG" or "warning", or a LogLevel.
            output: Where records go:
                - None or "stderr": sys.stderr (keeps command output clean)
                - "stdout": sys.stdout
                - str/Path: log file path
                - TextIO: any writable stream
            timestamps: Prefix records with the time.
            include_location: Add [filename:lineno].
            format_string: Full format string; overrides the two flags above.
        """
        log_level = LogLevel.parse(level)
        handler = _make_handler(output)
        handler.setLevel(log_level.numeric)
        handler.setFormatter(
            logging.Formatter(
                format_string or _default_format(timestamps, include_location)
            )
        )

        root = logging.getLogger(cls._root_name)
        for previous in root.handlers[:]:
            root.removeHandler(previous)
            previous.close()
        root.addHandler(handler)
        root.setLevel(log_level.numeric)
        root.propagate = False

        cls._configured = True

    @classmethod
    def configure_from_env(cls, default_level: str = "WARNING") -> None:
        """Configure from ``NETCHANGE_LOG_LEVEL`` and ``NETCHANGE_LOG_FILE``."""
        cls.configure(
            level=get_env("NETCHANGE_LOG_LEVEL", default=default_level),
            output=get_env("NETCHANGE_LOG_FILE"),
        )

    @classmethod
    def get(cls, name: str | None = None) -> logging.Logger:
        """Return a logger inside the ``netchange`` namespace.

        Args:
            name: Child name such as "watch", or a full dotted module name
                already under ``netchange``. None returns the namespace root.

        Raises:
            LoggerNotConfiguredError: If configure() hasn't been called.
        """
        if not cls._configured:
            raise LoggerNotConfiguredError()
        if not name or name == cls._root_name:
            return logging.getLogger(cls._root_name)
        if name.startswith(f"{cls._root_name}."):
            return logging.getLogger(name)
        return logging.getLogger(f"{cls._root_name}.{name}")

    @classmethod
    def set_level(cls, level: str | LogLevel) -> None:
        """Change the level of the configured logger and its handlers.

        Raises:
            LoggerNotConfiguredError: If configure() hasn't been called.
        """
        if not cls._configured:
            raise LoggerNotConfiguredError()

        numeric = LogLevel.parse(level).numeric
        root = logging.getLogger(cls._root_name)
        root.setLevel(numeric)
        for handler in root.handlers:
            handler.setLevel(numeric)

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured
