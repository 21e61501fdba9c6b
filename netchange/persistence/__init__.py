"""Persistence of the last observed network state."""

from netchange.persistence.crypto import StateCipher
from netchange.persistence.paths import resolve_state_dir, state_file_path
from netchange.persistence.store import StateStore

__all__ = ["StateCipher", "StateStore", "resolve_state_dir", "state_file_path"]
