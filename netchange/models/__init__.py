"""Pydantic models for network state."""

from netchange.models.network_models import (
    InterfaceInfo,
    Interfaces,
    InterfacesDiff,
    NetworkChange,
    Route,
)

__all__ = [
    "InterfaceInfo",
    "Interfaces",
    "InterfacesDiff",
    "NetworkChange",
    "Route",
]
