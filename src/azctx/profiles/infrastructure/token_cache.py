"""MSAL-backed implementation of ITokenCache."""

from __future__ import annotations

import json
import threading

import msal

from profiles.ports.exceptions import TokenCacheCorruptedError
from profiles.ports.repositories import ITokenCache


class MsalTokenCache(ITokenCache):
    """Token cache shared by every MSAL application the client creates.

    MSAL calls run on worker threads, so merge and serialize are guarded
    by a lock. Merging is per entry: a snapshot's entries replace entries
    with the same key and every other entry is kept.
    """

    def __init__(self, cache: msal.SerializableTokenCache | None = None) -> None:
        self._cache = cache or msal.SerializableTokenCache()
        self._lock = threading.Lock()

    def merge_from(self, data: bytes) -> None:
        """Merge a serialized snapshot into this cache.

        Raises:
            TokenCacheCorruptedError: If ``data`` is not a JSON object
        """
        if not data:
            return

        try:
            incoming = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise TokenCacheCorruptedError(f"Token cache is not readable: {e}") from e
        if not isinstance(incoming, dict):
            raise TokenCacheCorruptedError(
                f"Token cache must be a JSON object, got {type(incoming).__name__}"
            )

        with self._lock:
            merged = json.loads(self._cache.serialize() or "{}")
            for section, entries in incoming.items():
                if isinstance(entries, dict):
                    merged.setdefault(section, {}).update(entries)
                else:
                    merged[section] = entries
            self._cache.deserialize(json.dumps(merged))

    def serialize(self) -> bytes:
        """Serialize the whole cache to UTF-8 JSON bytes."""
        with self._lock:
            return self._cache.serialize().encode("utf-8")
