#!/usr/bin/env python3
"""Demo script showing snapshot capture, comparison and storage.

This script demonstrates:
1. Capturing a snapshot with selected observations
2. Encoding it to JSON
3. Comparing two snapshots
4. Writing an encrypted state file and reading it back

Run with: python examples/state_serialization_demo.py
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path


def main() -> None:
    """Run state serialization demo."""
    from netchange import NetworkState, ObserverConfig
    from netchange.commands.state_cmd import format_state

    print("=" * 60)
    print("Network State Serialization Demo")
    print("=" * 60)
    print()

    config = ObserverConfig().enable_observe_default_route(True)

    # 1. Capture
    state = NetworkState.capture(config)
    print(format_state(state))
    print()

    # 2. Encode
    encoded = state.encode()
    print(f"Encoded size: {len(encoded)} bytes")
    print(json.dumps(json.loads(encoded), indent=2)[:400])
    print()

    # 3. Compare
    again = NetworkState.capture(config)
    print(f"Compared with a second capture: {state.compare(again, config).value}")
    aged = state.expired_copy(config.expire_time)
    print(f"Compared with an aged copy:     {aged.compare(again, config).value}")
    print()

    # 4. Encrypted round-trip in a scratch directory
    with tempfile.TemporaryDirectory() as scratch:
        stored = config.set_state_dir(Path(scratch))
        state.save(stored)
        raw = (Path(scratch) / "network_state").read_bytes()
        print(f"State file holds {len(raw)} encrypted bytes")
        print(f"Loaded back equal: {NetworkState.load(stored) == state}")


if __name__ == "__main__":
    main()
