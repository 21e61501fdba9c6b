"""Backends that observe the host's network configuration."""

from netchange.backends.network import Network
from netchange.backends.probe import NetworkProbe
from netchange.backends.public_ip import LookupProvider, lookup_public_address
from netchange.backends.routes import get_all_routes, get_default_route

__all__ = [
    "LookupProvider",
    "Network",
    "NetworkProbe",
    "get_all_routes",
    "get_default_route",
    "lookup_public_address",
]
