"""Facade over the OS and remote collaborators a snapshot is built from."""

from __future__ import annotations

from collections.abc import Sequence

from netchange.backends import routes
from netchange.backends.network import Network
from netchange.backends.public_ip import (
    DEFAULT_PROVIDERS,
    DEFAULT_TIMEOUT,
    CachedLookup,
    IPAddress,
    LookupProvider,
)
from netchange.models.network_models import InterfaceInfo, Route


class NetworkProbe:
    """Collects the raw observations behind a ``NetworkState``.

    Every method may raise or return None; ``NetworkState.capture`` treats
    both as "field absent". Substitute a probe with the same methods to
    drive an observer from canned data.

    Parameters
    ----------
    providers : Sequence[LookupProvider]
        Public address services, tried in order.
    timeout : float
        Per-provider request timeout in seconds.
    public_ip_ttl : float
        Seconds a successful public address lookup is reused. 0 disables
        caching so every capture queries the providers.
    """

    def __init__(
        self,
        providers: Sequence[LookupProvider] = DEFAULT_PROVIDERS,
        timeout: float = DEFAULT_TIMEOUT,
        public_ip_ttl: float = 0.0,
    ) -> None:
        self._network = Network()
        self._public_ip = CachedLookup(providers, ttl=public_ip_ttl, timeout=timeout)

    def get_default_interface(self) -> InterfaceInfo | None:
        """Return the default interface; raises LookupError if none qualifies."""
        return self._network.get_default_interface(
            routes.get_default_route(quiet=True)
        )

    def get_interfaces(self) -> list[InterfaceInfo]:
        return self._network.get_interfaces()

    def get_default_route(self) -> Route | None:
        return routes.get_default_route()

    def get_all_routes(self) -> list[Route] | None:
        return routes.get_all_routes()

    def get_public_address(self) -> IPAddress | None:
        return self._public_ip.lookup()
