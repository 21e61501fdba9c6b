"""Version information for netchange."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

RELEASE = "0.3.0"
RELEASE_DATE = datetime(2026, 10, 18)

PACKAGE_DIR = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class Version:
    """Semantic version plus a fingerprint of the installed sources."""

    major: int
    minor: int
    patch: int
    hash: str
    date: datetime

    @classmethod
    def parse(cls, release: str, hash: str, date: datetime) -> Version:
        """Build from a ``MAJOR.MINOR.PATCH`` string."""
        parts = release.strip().split(".")
        if len(parts) != 3 or not all(part.isdigit() for part in parts):
            raise ValueError(f"Not a MAJOR.MINOR.PATCH version: {release!r}")
        major, minor, patch = (int(part) for part in parts)
        return cls(major=major, minor=minor, patch=patch, hash=hash, date=date)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def full_version(self) -> str:
        """e.g. ``0.3.0 (hash: 1a2b3c4d, date: 2026-10-18)``."""
        return f"{self} (hash: {self.hash_short()}, date: {self.date:%Y-%m-%d})"

    def semver(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def hash_short(self, length: int = 8) -> str:
        return self.hash[:length]


def _compute_package_hash(package_dir: Path = PACKAGE_DIR) -> str:
    """SHA256 over the package's ``.py`` sources and their relative paths."""
    hasher = hashlib.sha256()
    for source in sorted(package_dir.rglob("*.py")):
        if "__pycache__" in source.parts:
            continue
        hasher.update(source.relative_to(package_dir).as_posix().encode())
        try:
            hasher.update(source.read_bytes())
        except OSError:
            continue
    return hasher.hexdigest()


NETCHANGE_VERSION = Version.parse(
    RELEASE, hash=_compute_package_hash(), date=RELEASE_DATE
)
