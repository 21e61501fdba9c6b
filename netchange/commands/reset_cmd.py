"""Reset command - forgets the persisted network state."""

from __future__ import annotations

from netchange.config import ObserverConfig
from netchange.persistence.store import StateStore


def run_reset(config: ObserverConfig) -> bool:
    """Delete the persisted state file.

    Returns
    -------
        True if a state file was removed.
    """
    store = StateStore.for_config(config.state_dir, encrypt=False)
    removed = store.clear()
    if removed:
        print(f"Removed {store.path}")
    else:
        print(f"No persisted state at {store.path}")
    return removed
