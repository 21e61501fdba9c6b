"""Pydantic models for network interfaces, routes and change kinds."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from ipaddress import IPv4Address, IPv6Address
from typing import Any

from pydantic import (
    BaseModel,
    Field,
    IPvAnyAddress,
    RootModel,
    ValidationInfo,
    model_validator,
)

# Validation context key: every field must be present in the input
REQUIRE_ALL_FIELDS = "require_all_fields"


class PersistedModel(BaseModel):
    """Base for models written to the state file.

    Validated with ``context={REQUIRE_ALL_FIELDS: True}``, a missing key is an
    error even when the field has a default, so data from another schema
    version is rejected instead of silently filled in.
    """

    @model_validator(mode="before")
    @classmethod
    def _require_all_fields(cls, data: Any, info: ValidationInfo) -> Any:
        if info.context and info.context.get(REQUIRE_ALL_FIELDS) and isinstance(
            data, dict
        ):
            missing = [name for name in cls.model_fields if name not in data]
            if missing:
                raise ValueError(f"Missing fields: {', '.join(missing)}")
        return data


class InterfaceInfo(PersistedModel):
    """Information about a single network interface."""

    name: str = Field(..., description="Interface name (e.g., 'eth0', 'en0')")
    index: int | None = Field(None, description="OS interface index")
    addresses: list[str] = Field(
        default_factory=list, description="IPv4 addresses bound to this interface"
    )
    ipv6_addresses: list[str] = Field(
        default_factory=list, description="IPv6 addresses bound to this interface"
    )
    mac_address: str | None = Field(None, description="MAC address (if available)")
    is_up: bool = Field(False, description="Whether interface is currently up")
    is_loopback: bool = Field(False, description="Whether this is a loopback interface")
    mtu: int | None = Field(None, description="Maximum transmission unit")
    speed_mbps: int | None = Field(
        None, description="Link speed in Mbps (if available)"
    )
    flags: str = Field("", description="Comma-separated OS interface flags")

    class Config:
        """Pydantic config."""

        frozen = True
        extra = "forbid"


class Route(PersistedModel):
    """A route in the local IPv4 or IPv6 routing table.

    ``0.0.0.0/0`` (or ``::/0``) is considered a default route.
    """

    destination: IPvAnyAddress = Field(
        ..., description="Network address of the destination"
    )
    prefix: int = Field(
        ..., ge=0, le=128, description="Length of network prefix in the destination"
    )
    gateway: IPvAnyAddress | None = Field(
        None, description="Address of the next hop of this route"
    )
    ifindex: int | None = Field(
        None, description="Index of the local interface reaching the next hop"
    )

    class Config:
        """Pydantic config."""

        frozen = True
        extra = "forbid"

    def mask(self) -> IPv4Address | IPv6Address:
        """Return the netmask covering the network portion of the destination."""
        bits = 32 if self.destination.version == 4 else 128
        prefix = min(self.prefix, bits)
        value = ((1 << prefix) - 1) << (bits - prefix)
        return IPv4Address(value) if bits == 32 else IPv6Address(value)

    def is_default(self) -> bool:
        """Return True for a zero-length prefix."""
        return self.prefix == 0


class InterfacesDiff(BaseModel):
    """Result of comparing two interface sets.

    ``updated`` carries the new descriptor for names present on both sides.
    """

    added: dict[str, InterfaceInfo] = Field(default_factory=dict)
    removed: dict[str, InterfaceInfo] = Field(default_factory=dict)
    updated: dict[str, InterfaceInfo] = Field(default_factory=dict)

    def is_empty(self) -> bool:
        """Return True when no interface was added, removed or updated."""
        return not (self.added or self.removed or self.updated)


class Interfaces(RootModel[dict[str, InterfaceInfo]]):
    """Interfaces keyed by name. Insertion order is irrelevant."""

    root: dict[str, InterfaceInfo] = Field(default_factory=dict)

    class Config:
        """Pydantic config."""

        frozen = True

    @classmethod
    def from_list(cls, interfaces: Iterable[InterfaceInfo]) -> Interfaces:
        """Build the keyed set. Later duplicates by name win."""
        keyed: dict[str, InterfaceInfo] = {}
        for interface in interfaces:
            keyed[interface.name] = interface
        return cls(keyed)

    def diff(self, other: Interfaces) -> InterfacesDiff:
        """Compare this (old) set against ``other`` (new).

        Parameters
        ----------
        other : Interfaces
            The newer interface set.

        Returns
        -------
        InterfacesDiff
            Disjoint added, removed and updated mappings.
        """
        old = self.root
        new = other.root

        removed = {name: info for name, info in old.items() if name not in new}
        added: dict[str, InterfaceInfo] = {}
        updated: dict[str, InterfaceInfo] = {}
        for name, info in new.items():
            previous = old.get(name)
            if previous is None:
                added[name] = info
            elif previous != info:
                updated[name] = info

        return InterfacesDiff(added=added, removed=removed, updated=updated)

    def get(self, name: str) -> InterfaceInfo | None:
        """Return the interface called ``name``, if present."""
        return self.root.get(name)

    def names(self) -> list[str]:
        """Return interface names in sorted order."""
        return sorted(self.root)

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __contains__(self, name: object) -> bool:
        return name in self.root


class NetworkChange(str, Enum):
    """Kinds of network change, in the priority order they are checked."""

    NONE = "none"
    EXPIRED = "expired"
    DEFAULT_INTERFACE = "default_interface"
    SECONDARY_INTERFACE = "secondary_interface"
    DEFAULT_ROUTE = "default_route"
    ROUTING_TABLE = "routing_table"
    PUBLIC_ADDRESS = "public_address"

    @property
    def label(self) -> str:
        """Human-readable name (e.g. 'Default interface')."""
        return self.value.replace("_", " ").capitalize()
