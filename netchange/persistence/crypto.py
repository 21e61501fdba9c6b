"""At-rest encryption of the persisted network state.

Tokens are ``salt || Fernet token``; the Fernet key is derived from a
secret with PBKDF2-HMAC-SHA256 and the per-file random salt.
"""

from __future__ import annotations

import base64
import os
import uuid
from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from netchange.errors import EncryptionError
from netchange.utils.env import get_env

SALT_SIZE = 16
DEFAULT_ITERATIONS = 480_000
WEAK_ITERATIONS = 1_000

MACHINE_ID_PATHS = (Path("/etc/machine-id"), Path("/var/lib/dbus/machine-id"))
APP_SECRET = b"netchange.state.v1"


def machine_secret() -> bytes:
    """Return a secret that is stable for this machine and application."""
    for path in MACHINE_ID_PATHS:
        try:
            machine_id = path.read_text().strip()
        except OSError:
            continue
        if machine_id:
            return APP_SECRET + b":" + machine_id.encode()
    return APP_SECRET + b":" + format(uuid.getnode(), "012x").encode()


class StateCipher:
    """Symmetric cipher for state files.

    Parameters
    ----------
    secret : bytes
        Password material the key is derived from.
    iterations : int
        PBKDF2 iteration count.
    """

    def __init__(self, secret: bytes, iterations: int = DEFAULT_ITERATIONS) -> None:
        if not secret:
            raise ValueError("secret must not be empty")
        if iterations < 1:
            raise ValueError("iterations must be at least 1")
        self._secret = secret
        self.iterations = iterations

    @classmethod
    def default(cls) -> StateCipher:
        """Cipher keyed by the machine secret.

        ``NETCHANGE_WEAK_KDF=1`` selects a cheap key derivation for
        development and test runs.
        """
        weak = get_env("NETCHANGE_WEAK_KDF", default=False, as_type=bool)
        return cls(
            machine_secret(),
            iterations=WEAK_ITERATIONS if weak else DEFAULT_ITERATIONS,
        )

    def _fernet(self, salt: bytes) -> Fernet:
        try:
            kdf = PBKDF2HMAC(
                algorithm=hashes.SHA256(),
                length=32,
                salt=salt,
                iterations=self.iterations,
            )
            key = base64.urlsafe_b64encode(kdf.derive(self._secret))
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise EncryptionError(f"Key derivation failed: {e}") from e
        return Fernet(key)

    def encrypt(self, data: bytes) -> bytes:
        """Encrypt ``data``; the result embeds its salt."""
        salt = os.urandom(SALT_SIZE)
        return salt + self._fernet(salt).encrypt(data)

    def decrypt(self, data: bytes) -> bytes:
        """Decrypt a blob produced by ``encrypt``.

        Raises
        ------
        EncryptionError
            On a wrong key, tampered or truncated data, or plaintext input.
        """
        if len(data) <= SALT_SIZE:
            raise EncryptionError("Encrypted state is truncated")
        salt, token = data[:SALT_SIZE], data[SALT_SIZE:]
        try:
            return self._fernet(salt).decrypt(token)
        except InvalidToken as e:
            raise EncryptionError("Cannot authenticate encrypted state") from e
