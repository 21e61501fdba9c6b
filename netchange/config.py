"""Observer configuration."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING

from netchange.utils.env import env_is_set, get_env

if TYPE_CHECKING:
    from netchange.models.network_models import NetworkChange
    from netchange.state import NetworkState

DEFAULT_EXPIRE_TIME = 3600

ChangeListener = Callable[["NetworkChange", "NetworkState", "NetworkState"], None]


@dataclass(frozen=True)
class ObserverConfig:
    """Which observations a ``NetworkObserver`` collects, and how it persists.

    The default interface is always observed. The builder methods return a
    new config, so instances can be shared freely::

        config = (
            ObserverConfig()
            .enable_observe_default_route(True)
            .enable_observe_public_address(True)
            .set_on_change(print_change)
        )

    Attributes
    ----------
    expire_time : int
        Seconds after which the stored snapshot is reported as expired.
    persist : bool
        Load the last snapshot on start and save it on close.
    observe_all_interfaces : bool
        Track the full interface set.
    observe_default_route : bool
        Track the default route.
    observe_all_routes : bool
        Track the full routing table.
    observe_public_address : bool
        Track the externally observed public address.
    encrypt : bool
        Encrypt the persisted snapshot.
    public_ip_timeout : float
        Per-provider timeout for the public address lookup, in seconds.
    public_ip_ttl : float
        Seconds a public address lookup is reused (0 disables caching).
    state_dir : Path | None
        Directory for the persisted snapshot; resolved per platform if None.
    on_change : ChangeListener | None
        Called with ``(change, old, new)`` whenever a change is detected.
        Never persisted and ignored by equality.
    """

    expire_time: int = DEFAULT_EXPIRE_TIME
    persist: bool = False
    observe_all_interfaces: bool = False
    observe_default_route: bool = False
    observe_all_routes: bool = False
    observe_public_address: bool = False
    encrypt: bool = True
    public_ip_timeout: float = 10.0
    public_ip_ttl: float = 0.0
    state_dir: Path | None = None
    on_change: ChangeListener | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.expire_time < 0:
            raise ValueError("expire_time must not be negative")
        if self.public_ip_timeout <= 0:
            raise ValueError("public_ip_timeout must be greater than zero")
        if self.public_ip_ttl < 0:
            raise ValueError("public_ip_ttl must not be negative")

    @classmethod
    def from_env(cls, prefix: str = "NETCHANGE_") -> ObserverConfig:
        """Build a config from ``<prefix>*`` environment variables.

        Unset variables keep their defaults.
        """
        defaults = cls()
        state_dir = None
        if env_is_set(f"{prefix}STATE_DIR"):
            state_dir = get_env(f"{prefix}STATE_DIR", as_type=Path, log=True)
        return cls(
            expire_time=get_env(
                f"{prefix}EXPIRE_TIME", default=defaults.expire_time, as_type=int
            ),
            persist=get_env(f"{prefix}PERSIST", default=defaults.persist, as_type=bool),
            observe_all_interfaces=get_env(
                f"{prefix}OBSERVE_ALL_INTERFACES",
                default=defaults.observe_all_interfaces,
                as_type=bool,
            ),
            observe_default_route=get_env(
                f"{prefix}OBSERVE_DEFAULT_ROUTE",
                default=defaults.observe_default_route,
                as_type=bool,
            ),
            observe_all_routes=get_env(
                f"{prefix}OBSERVE_ALL_ROUTES",
                default=defaults.observe_all_routes,
                as_type=bool,
            ),
            observe_public_address=get_env(
                f"{prefix}OBSERVE_PUBLIC_ADDRESS",
                default=defaults.observe_public_address,
                as_type=bool,
            ),
            encrypt=get_env(f"{prefix}ENCRYPT", default=defaults.encrypt, as_type=bool),
            state_dir=state_dir,
        )

    def set_expire_time(self, expire_time: int) -> ObserverConfig:
        return replace(self, expire_time=expire_time)

    def enable_persist(self, persist: bool) -> ObserverConfig:
        return replace(self, persist=persist)

    def enable_observe_all_interfaces(self, enabled: bool) -> ObserverConfig:
        return replace(self, observe_all_interfaces=enabled)

    def enable_observe_default_route(self, enabled: bool) -> ObserverConfig:
        return replace(self, observe_default_route=enabled)

    def enable_observe_all_routes(self, enabled: bool) -> ObserverConfig:
        return replace(self, observe_all_routes=enabled)

    def enable_observe_public_address(self, enabled: bool) -> ObserverConfig:
        return replace(self, observe_public_address=enabled)

    def enable_encryption(self, encrypt: bool) -> ObserverConfig:
        return replace(self, encrypt=encrypt)

    def set_state_dir(self, state_dir: Path | None) -> ObserverConfig:
        return replace(self, state_dir=state_dir)

    def set_on_change(self, listener: ChangeListener | None) -> ObserverConfig:
        return replace(self, on_change=listener)
