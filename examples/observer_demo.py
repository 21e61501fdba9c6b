#!/usr/bin/env python3
"""Demo script showing network change detection with a listener.

This script demonstrates:
1. Building an observer configuration
2. Registering a change listener that keeps its own state
3. Polling for changes inside the observer's context manager
4. Persisting the last snapshot across runs

Run with: python examples/observer_demo.py

Try switching Wi-Fi networks, plugging in a cable or connecting a VPN
while it runs. Press Ctrl+C to stop.
"""

from __future__ import annotations

import time


class ChangeLog:
    """Listener that remembers every change it has seen."""

    def __init__(self) -> None:
        self.entries: list[str] = []

    def __call__(self, change, old, new) -> None:
        from netchange.commands.watch_cmd import describe_change

        entry = f"{change.label}: {describe_change(change, old, new)}"
        self.entries.append(entry)
        print(f"[{len(self.entries)}] {entry}")


def main() -> None:
    """Run network observer demo."""
    from netchange import NetworkObserver, ObserverConfig

    print("=" * 60)
    print("Network Observer Demo")
    print("=" * 60)
    print()

    log = ChangeLog()
    config = (
        ObserverConfig()
        .set_expire_time(300)
        .enable_observe_all_interfaces(True)
        .enable_observe_default_route(True)
        .enable_persist(True)
        .set_on_change(log)
    )

    print("Watching: default interface, all interfaces, default route")
    print(f"Expire time: {config.expire_time}s")
    print()

    with NetworkObserver(config) as observer:
        state = observer.last_state
        if state.default_interface is not None:
            print(f"Baseline default interface: {state.default_interface.name}")
        print()

        try:
            while True:
                observer.state_change()
                time.sleep(2)
        except KeyboardInterrupt:
            print()

    print(f"Recorded {len(log.entries)} change(s); last state persisted.")


if __name__ == "__main__":
    main()
