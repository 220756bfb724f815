"""File-backed implementation of ICredentialStore."""

from __future__ import annotations

import os
from pathlib import Path

from profiles.ports.repositories import ICredentialStore


class FileCredentialStore(ICredentialStore):
    """Stores the serialized token cache in a single file.

    Writes go to a sibling temporary file that is then renamed over the
    target, so a reader never sees a partially written cache.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> bytes | None:
        """Load the cache bytes, or None when nothing was saved yet."""
        try:
            return self._path.read_bytes()
        except FileNotFoundError:
            return None

    def save(self, data: bytes) -> None:
        """Atomically replace the stored cache with ``data``."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        # Token caches hold refresh tokens; the file is private from creation
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self._path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
