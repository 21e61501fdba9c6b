"""File storage for the persisted network state."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from netchange.errors import StorageError
from netchange.persistence.crypto import StateCipher
from netchange.persistence.paths import state_file_path

logger = logging.getLogger(__name__)


class StateStore:
    """Persist an encoded network state as a single file.

    Writes go to a temporary file in the same directory that then replaces
    the state file, so readers never observe a half-written state.

    Parameters
    ----------
    path : Path | None
        State file location. Resolved through the platform fallback chain
        when None.
    cipher : StateCipher | None
        Encrypts on write and decrypts on read. None stores plaintext.
    """

    def __init__(
        self, path: Path | None = None, cipher: StateCipher | None = None
    ) -> None:
        self._path = path
        self._cipher = cipher

    @classmethod
    def for_config(cls, state_dir: Path | None, encrypt: bool) -> StateStore:
        """Build the store an observer config describes."""
        return cls(
            path=state_file_path(state_dir),
            cipher=StateCipher.default() if encrypt else None,
        )

    @property
    def path(self) -> Path:
        if self._path is None:
            self._path = state_file_path()
        return self._path

    @property
    def encrypted(self) -> bool:
        return self._cipher is not None

    def exists(self) -> bool:
        return self.path.exists()

    def write(self, data: bytes) -> None:
        """Encrypt (if configured) and atomically write ``data``.

        Raises
        ------
        StorageError
            If the file cannot be created or written.
        EncryptionError
            If encryption fails.
        """
        if self._cipher is not None:
            data = self._cipher.encrypt(data)

        path = self.path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(str(path), str(e)) from e

        logger.debug(f"Wrote {len(data)} bytes to {path}")

    def read(self) -> bytes:
        """Read and decrypt (if configured) the state file.

        Raises
        ------
        StorageError
            If the file is missing or unreadable.
        EncryptionError
            If decryption or authentication fails.
        """
        path = self.path
        try:
            data = path.read_bytes()
        except OSError as e:
            raise StorageError(str(path), str(e)) from e

        if self._cipher is not None:
            data = self._cipher.decrypt(data)
        return data

    def clear(self) -> bool:
        """Delete the state file. Returns False if there was none."""
        path = self.path
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise StorageError(str(path), str(e)) from e
        return True
