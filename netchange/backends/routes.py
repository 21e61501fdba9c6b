"""Routing table backend.

Linux hosts read ``/proc/net/route`` and ``/proc/net/ipv6_route`` directly;
other POSIX hosts (macOS, BSD) parse the output of ``netstat -rn``. The
parsers are pure functions over text so they can be exercised without a
live routing table.
"""

from __future__ import annotations

import logging
import shutil
import socket
import struct
import subprocess
import sys
from collections.abc import Callable
from ipaddress import IPv4Address, IPv6Address, ip_address
from pathlib import Path

from netchange.models.network_models import Route

logger = logging.getLogger(__name__)

PROC_ROUTE = Path("/proc/net/route")
PROC_IPV6_ROUTE = Path("/proc/net/ipv6_route")

# Kernel route flags (linux/route.h)
RTF_UP = 0x0001
RTF_REJECT = 0x0200

IndexResolver = Callable[[str], int | None]

# (metric, route) pairs; metric orders default route candidates
RouteEntry = tuple[int, Route]


def interface_index(name: str) -> int | None:
    """Resolve an interface name to its OS index, or None."""
    try:
        return socket.if_nametoindex(name)
    except (OSError, AttributeError):
        return None


def parse_proc_route(
    text: str, index_of: IndexResolver = interface_index
) -> list[RouteEntry]:
    """Parse the contents of ``/proc/net/route`` (IPv4).

    Addresses are little-endian hex words; the prefix is the bit count
    of the mask. Routes that are down or rejecting are skipped.
    """
    entries: list[RouteEntry] = []
    for line in text.splitlines()[1:]:
        fields = line.split()
        if len(fields) < 8:
            continue
        try:
            iface = fields[0]
            destination = _hex_to_ipv4(fields[1])
            gateway = _hex_to_ipv4(fields[2])
            flags = int(fields[3], 16)
            metric = int(fields[6])
            prefix = bin(int(fields[7], 16)).count("1")
        except ValueError:
            logger.debug(f"Skipping malformed route line: {line!r}")
            continue

        if not flags & RTF_UP or flags & RTF_REJECT:
            continue

        entries.append(
            (
                metric,
                Route(
                    destination=destination,
                    prefix=prefix,
                    gateway=None if gateway == IPv4Address(0) else gateway,
                    ifindex=index_of(iface),
                ),
            )
        )
    return entries


def parse_proc_ipv6_route(
    text: str, index_of: IndexResolver = interface_index
) -> list[RouteEntry]:
    """Parse the contents of ``/proc/net/ipv6_route``."""
    entries: list[RouteEntry] = []
    for line in text.splitlines():
        fields = line.split()
        if len(fields) < 10:
            continue
        try:
            destination = IPv6Address(bytes.fromhex(fields[0]))
            prefix = int(fields[1], 16)
            gateway = IPv6Address(bytes.fromhex(fields[4]))
            metric = int(fields[5], 16)
            flags = int(fields[8], 16)
        except ValueError:
            logger.debug(f"Skipping malformed route line: {line!r}")
            continue

        if not flags & RTF_UP or flags & RTF_REJECT:
            continue

        entries.append(
            (
                metric,
                Route(
                    destination=destination,
                    prefix=prefix,
                    gateway=None if gateway == IPv6Address(0) else gateway,
                    ifindex=index_of(fields[9]),
                ),
            )
        )
    return entries


def parse_netstat_routes(
    text: str, index_of: IndexResolver = interface_index
) -> list[RouteEntry]:
    """Parse BSD-style ``netstat -rn`` output (macOS, FreeBSD).

    Each section (``Internet:`` / ``Internet6:``) has the columns
    ``Destination Gateway Flags Netif [Expire]``. Link-layer gateways
    (``link#6``, MAC addresses) become routes without a gateway.
    """
    entries: list[RouteEntry] = []
    version: int | None = None
    for line in text.splitlines():
        stripped = line.strip()
        if stripped == "Internet:":
            version = 4
            continue
        if stripped == "Internet6:":
            version = 6
            continue
        fields = stripped.split()
        if version is None or len(fields) < 4 or fields[0] == "Destination":
            continue

        try:
            destination, prefix = _parse_netstat_destination(
                fields[0], version, host="H" in fields[2]
            )
        except ValueError:
            logger.debug(f"Skipping unparseable destination: {fields[0]!r}")
            continue

        entries.append(
            (
                0,
                Route(
                    destination=destination,
                    prefix=prefix,
                    gateway=_parse_gateway(fields[1]),
                    ifindex=index_of(fields[3]),
                ),
            )
        )
    return entries


def select_default_route(entries: list[RouteEntry]) -> Route | None:
    """Pick the zero-prefix route with the lowest metric, IPv4 first."""
    defaults = [
        (route.destination.version, metric, position, route)
        for position, (metric, route) in enumerate(entries)
        if route.is_default()
    ]
    if not defaults:
        return None
    return min(defaults, key=lambda item: item[:3])[3]


def get_default_route(quiet: bool = False) -> Route | None:
    """Return the host's default route, or None if unavailable.

    Args:
        quiet: Report a missing route or unreadable table at DEBUG instead
            of WARNING, for callers that only use the route as a hint.
    """
    report = logger.debug if quiet else logger.warning
    entries = _read_route_entries()
    if entries is None:
        report("Failed to read routing table")
        return None

    route = select_default_route(entries)
    if route is None:
        report("No default route")
    else:
        logger.debug(f"Default route: {route}")
    return route


def get_all_routes() -> list[Route] | None:
    """Return every route in the routing table, or None if unavailable."""
    entries = _read_route_entries()
    if entries is None:
        logger.warning("Failed to get all routes")
        return None

    routes = [route for _, route in entries]
    logger.debug(f"All routes: {len(routes)} entries")
    return routes


def _read_route_entries() -> list[RouteEntry] | None:
    if sys.platform.startswith("linux"):
        return _read_proc_routes()
    return _read_netstat_routes()


def _read_proc_routes() -> list[RouteEntry] | None:
    try:
        entries = parse_proc_route(PROC_ROUTE.read_text())
    except OSError as e:
        logger.debug(f"Cannot read {PROC_ROUTE}: {e}")
        return None

    try:
        entries.extend(parse_proc_ipv6_route(PROC_IPV6_ROUTE.read_text()))
    except OSError:
        # IPv6 disabled
        pass
    return entries


def _read_netstat_routes() -> list[RouteEntry] | None:
    netstat = shutil.which("netstat")
    if netstat is None:
        logger.debug("netstat not found")
        return None

    try:
        result = subprocess.run(
            [netstat, "-rn"],
            check=False,
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug(f"netstat -rn failed: {e}")
        return None

    if result.returncode != 0:
        logger.debug(f"netstat -rn exited with {result.returncode}")
        return None

    return parse_netstat_routes(result.stdout)


def _hex_to_ipv4(value: str) -> IPv4Address:
    return IPv4Address(struct.pack("<I", int(value, 16)))


def _parse_netstat_destination(
    value: str, version: int, host: bool = False
) -> tuple[IPv4Address | IPv6Address, int]:
    if value == "default":
        return (IPv4Address(0) if version == 4 else IPv6Address(0)), 0

    address, _, prefix_text = value.partition("/")
    address = address.split("%", 1)[0]

    if version == 6:
        prefix = int(prefix_text) if prefix_text else 128
        return IPv6Address(address), prefix

    # netstat abbreviates networks: "10" is 10.0.0.0/8, "192.168.1" a /24
    octets = address.split(".")
    if len(octets) > 4:
        raise ValueError(f"Invalid IPv4 destination: {value}")
    padded = ".".join(octets + ["0"] * (4 - len(octets)))
    if prefix_text:
        prefix = int(prefix_text)
    elif host or len(octets) == 4:
        prefix = 32
    else:
        prefix = 8 * len(octets)
    return IPv4Address(padded), prefix


def _parse_gateway(value: str) -> IPv4Address | IPv6Address | None:
    try:
        return ip_address(value.split("%", 1)[0])
    except ValueError:
        return None
