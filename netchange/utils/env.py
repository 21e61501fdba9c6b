"""Typed access to ``NETCHANGE_*`` environment variables.

Usage:
    from netchange.utils.env import get_env

    persist = get_env("NETCHANGE_PERSIST", default=False, as_type=bool)
    state_dir = get_env("NETCHANGE_STATE_DIR", as_type=Path)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast, overload

T = TypeVar("T")

logger = logging.getLogger(__name__)

FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})


class EnvVarError(Exception):
    """Base exception for environment variable errors."""

    pass


class EnvVarTypeError(EnvVarError):
    """Raised when an environment variable does not parse as the requested type."""

    def __init__(self, name: str, value: str, expected_type: type) -> None:
        self.name = name
        self.value = value
        self.expected_type = expected_type
        super().__init__(f"Cannot convert {name}='{value}' to {expected_type.__name__}")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() not in FALSE_VALUES


def _parse_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_path(value: str) -> Path:
    if not value.strip():
        raise ValueError("empty path")
    return Path(value).expanduser()


_PARSERS: dict[Any, Callable[[str], Any]] = {
    bool: _parse_bool,
    int: lambda value: int(value.strip()),
    float: lambda value: float(value.strip()),
    str: str,
    list: _parse_list,
    Path: _parse_path,
}


def _coerce_type(name: str, value: str, as_type: type) -> Any:
    parser = _PARSERS.get(as_type) or _PARSERS.get(getattr(as_type, "__origin__", None))
    try:
        return parser(value) if parser else as_type(value)
    except (ValueError, TypeError) as e:
        raise EnvVarTypeError(name, value, as_type) from e


@overload
def get_env(name: str, *, default: T, as_type: type[T], log: bool = ...) -> T:
    ...


@overload
def get_env(name: str, *, default: T, log: bool = ...) -> T:
    ...


@overload
def get_env(name: str, *, as_type: type[T], log: bool = ...) -> T | None:
    ...


@overload
def get_env(name: str, *, log: bool = ...) -> str | None:
    ...


def get_env(
    name: str,
    *,
    default: T | None = None,
    as_type: type[T] | None = None,
    log: bool = False,
) -> T | str | None:
    """Read an environment variable, optionally converting it.

    Args:
        name: Variable name.
        default: Returned as-is when the variable is unset.
        as_type: Conversion to apply. Supported:
            - bool: "", "0", "false", "no", "off" (any case) are False
            - int, float, str
            - list: comma-separated values, blanks dropped
            - Path: user-expanded path; empty values are rejected
        log: Log the lookup at DEBUG level.

    Raises:
        EnvVarTypeError: If the value does not convert to ``as_type``.

    Examples:
        >>> get_env("NETCHANGE_EXPIRE_TIME", default=3600, as_type=int)
        3600
    """
    value = os.environ.get(name)
    if log:
        logger.debug(f"ENV GET {name}={value}")

    if value is None:
        return default
    if as_type is None:
        return value
    return cast(T, _coerce_type(name, value, as_type))


def env_is_set(name: str) -> bool:
    """Return True when the variable is set to a non-empty value."""
    return bool(os.environ.get(name))
