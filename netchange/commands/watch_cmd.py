"""Watch command - polls the observer and prints each detected change."""

from __future__ import annotations

import time
from datetime import datetime

from netchange.backends.probe import NetworkProbe
from netchange.commands.state_cmd import format_route
from netchange.config import ObserverConfig
from netchange.models.network_models import NetworkChange
from netchange.observer import NetworkObserver
from netchange.persistence.store import StateStore
from netchange.state import NetworkState


def run_watch(
    config: ObserverConfig,
    interval_seconds: float,
    duration_seconds: float | None = None,
    probe: NetworkProbe | None = None,
    store: StateStore | None = None,
) -> int:
    """Watch for network changes until interrupted or duration elapses.

    Args:
        config: Observation settings. Its ``on_change`` listener is replaced
            by one that prints the change.
        interval_seconds: Polling interval in seconds. Must be positive.
        duration_seconds: Optional time limit in seconds. If None, runs until
            interrupted by the user.
        probe: Collaborator facade (built from config when omitted).
        store: State storage (built from config when omitted).

    Returns
    -------
        Number of changes reported.
    """
    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be greater than zero")

    changes = 0

    def print_change(change: NetworkChange, old: NetworkState, new: NetworkState) -> None:
        nonlocal changes
        changes += 1
        print(format_change(change, old, new), flush=True)

    config = config.set_on_change(print_change)
    start_time = time.monotonic()

    with NetworkObserver(config, probe=probe, store=store) as observer:
        try:
            while True:
                observer.state_change()

                if duration_seconds is not None:
                    elapsed = time.monotonic() - start_time
                    if elapsed >= duration_seconds:
                        break

                time.sleep(interval_seconds)

        except KeyboardInterrupt:
            print("\nStopping watch...")

    return changes


def format_change(change: NetworkChange, old: NetworkState, new: NetworkState) -> str:
    """Render a timestamped one-line description of a change."""
    timestamp = datetime.fromtimestamp(new.captured_at).strftime("%H:%M:%S")
    line = f"{timestamp} - Network changed: {change.label}"
    detail = describe_change(change, old, new)
    if detail:
        line += f" ({detail})"
    return line


def describe_change(change: NetworkChange, old: NetworkState, new: NetworkState) -> str:
    """Explain what changed between two snapshots for a given change kind.

    Returns
    -------
        A short description, or an empty string when there is nothing to add.
    """
    if change is NetworkChange.EXPIRED:
        elapsed = max(new.captured_at - old.captured_at, 0.0)
        return f"{elapsed:.0f} seconds"

    if change is NetworkChange.DEFAULT_INTERFACE:
        old_name = old.default_interface.name if old.default_interface else "None"
        new_name = new.default_interface.name if new.default_interface else "None"
        return f"{old_name} -> {new_name}"

    if change is NetworkChange.SECONDARY_INTERFACE:
        if old.all_interfaces is None or new.all_interfaces is None:
            return ""
        diff = old.all_interfaces.diff(new.all_interfaces)
        updated = ", ".join(sorted(diff.updated))
        added = ", ".join(sorted(diff.added))
        removed = ", ".join(sorted(diff.removed))
        return f"~[{updated}], +[{added}], -[{removed}]"

    if change is NetworkChange.DEFAULT_ROUTE:
        return f"{format_route(old.default_route)} -> {format_route(new.default_route)}"

    if change is NetworkChange.ROUTING_TABLE:
        old_routes = set(map(format_route, old.all_routes or []))
        new_routes = set(map(format_route, new.all_routes or []))
        return f"+{len(new_routes - old_routes)} -{len(old_routes - new_routes)} routes"

    if change is NetworkChange.PUBLIC_ADDRESS:
        return f"{old.public_address} -> {new.public_address}"

    return ""
