"""Network backend - enumerates interfaces using psutil and socket."""

from __future__ import annotations

import logging
import socket

import psutil

from netchange.models.network_models import InterfaceInfo, Route

logger = logging.getLogger(__name__)

_LOOPBACK_PREFIXES = ("lo", "lo0")


class Network:
    """Interface enumeration backend using psutil and socket.

    The interface list comes back in whatever order the OS reports it and
    may contain several entries for one name; callers key it by name.
    """

    def get_interfaces(self) -> list[InterfaceInfo]:
        """Detect all network interfaces on the system.

        Returns
        -------
            List of InterfaceInfo objects for all detected interfaces.
        """
        interfaces = []
        stats = psutil.net_if_stats()
        addrs = psutil.net_if_addrs()

        for interface_name, interface_addrs in addrs.items():
            if_stats = stats.get(interface_name)
            is_up = if_stats.isup if if_stats else False
            speed_mbps = if_stats.speed if if_stats else None
            mtu = if_stats.mtu if if_stats else None
            flags = getattr(if_stats, "flags", "") if if_stats else ""

            ipv4_addrs = []
            ipv6_addrs = []
            mac_address = None
            for addr in interface_addrs:
                if addr.family == socket.AF_INET:
                    ipv4_addrs.append(addr.address)
                elif addr.family == socket.AF_INET6:
                    ipv6_addrs.append(addr.address)
                elif addr.family == psutil.AF_LINK:
                    mac_address = addr.address

            is_loopback = interface_name.startswith(_LOOPBACK_PREFIXES)

            interfaces.append(
                InterfaceInfo(
                    name=interface_name,
                    index=self._interface_index(interface_name),
                    addresses=ipv4_addrs,
                    ipv6_addresses=ipv6_addrs,
                    mac_address=mac_address,
                    is_up=is_up,
                    is_loopback=is_loopback,
                    mtu=mtu,
                    speed_mbps=speed_mbps or None,
                    flags=flags,
                )
            )

        return interfaces

    def get_default_interface(
        self, default_route: Route | None = None
    ) -> InterfaceInfo:
        """Return the interface the host uses by default.

        The interface carrying the default route wins. Without a usable
        route, the first active non-loopback interface is used.

        Args:
            default_route: The current default route, if known.

        Returns
        -------
            InterfaceInfo for the default interface.

        Raises
        ------
            LookupError: If no interface qualifies.
        """
        try:
            interfaces = self.get_interfaces()
        except (AttributeError, OSError) as e:
            raise LookupError(f"Cannot enumerate interfaces: {e}") from e

        if default_route is not None and default_route.ifindex is not None:
            for interface in interfaces:
                if interface.index == default_route.ifindex:
                    return interface
            logger.debug(
                f"No interface with index {default_route.ifindex} for default route"
            )

        for interface in sorted(interfaces, key=lambda i: i.name):
            if interface.is_up and not interface.is_loopback:
                return interface

        raise LookupError("No active non-loopback interface found")

    def get_interface_by_name(self, name: str) -> InterfaceInfo | None:
        """Get information about a specific network interface.

        Args:
            name: Interface name (e.g., 'eth0', 'en0')

        Returns
        -------
            InterfaceInfo or None if interface not found.
        """
        for interface in self.get_interfaces():
            if interface.name == name:
                return interface

        return None

    @staticmethod
    def _interface_index(name: str) -> int | None:
        try:
            return socket.if_nametoindex(name)
        except (OSError, AttributeError):
            return None
