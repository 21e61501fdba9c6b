"""Exceptions raised by netchange."""

from __future__ import annotations


class NetChangeError(Exception):
    """Base exception for netchange errors."""

    pass


class SerializationError(NetChangeError):
    """Raised when a network state cannot be encoded or decoded."""

    pass


class StorageError(NetChangeError):
    """Raised when the state file cannot be created, opened, read or written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"State file error at {path}: {reason}")


class EncryptionError(NetChangeError):
    """Raised on key derivation, authentication or cipher failures."""

    pass
