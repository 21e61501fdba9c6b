"""State command - prints one network snapshot."""

from __future__ import annotations

import json
from datetime import datetime

from netchange.backends.probe import NetworkProbe
from netchange.config import ObserverConfig
from netchange.models.network_models import InterfaceInfo, Route
from netchange.state import NetworkState


def run_state(
    config: ObserverConfig, as_json: bool = False, probe: NetworkProbe | None = None
) -> NetworkState:
    """Capture the current network state and print it.

    Args:
        config: Selects the observations to collect.
        as_json: Print the encoded JSON instead of the text summary.
        probe: Collaborator facade (built from config when omitted).

    Returns
    -------
        The captured snapshot.
    """
    state = NetworkState.capture(config, probe=probe)
    if as_json:
        print(json.dumps(json.loads(state.encode()), indent=2))
    else:
        print(format_state(state))
    return state


def format_state(state: NetworkState) -> str:
    """Render a snapshot as a multi-line string for CLI output."""
    timestamp = datetime.fromtimestamp(state.captured_at).strftime("%Y-%m-%d %H:%M:%S")
    lines = [f"Captured at: {timestamp}"]

    lines.append(f"Default interface: {_format_interface(state.default_interface)}")

    if state.all_interfaces is not None:
        lines.append(f"Interfaces ({len(state.all_interfaces)}):")
        for name in state.all_interfaces.names():
            lines.append(f"  {_format_interface(state.all_interfaces.get(name))}")

    if state.default_route is not None:
        lines.append(f"Default route: {format_route(state.default_route)}")

    if state.all_routes is not None:
        lines.append(f"Routes ({len(state.all_routes)}):")
        for route in state.all_routes:
            lines.append(f"  {format_route(route)}")

    if state.public_address is not None:
        lines.append(f"Public address: {state.public_address}")

    return "\n".join(lines)


def format_route(route: Route | None) -> str:
    """Render a route as ``destination/prefix via gateway dev ifindex``."""
    if route is None:
        return "None"
    text = f"{route.destination}/{route.prefix}"
    if route.gateway is not None:
        text += f" via {route.gateway}"
    if route.ifindex is not None:
        text += f" dev #{route.ifindex}"
    return text


def _format_interface(interface: InterfaceInfo | None) -> str:
    if interface is None:
        return "None"
    status = "up" if interface.is_up else "down"
    addresses = ", ".join(interface.addresses + interface.ipv6_addresses) or "-"
    return f"{interface.name} ({status}) {addresses}"
