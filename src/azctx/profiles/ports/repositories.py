"""Storage protocols (ports) for the profiles bounded context.

The profile store holds the one active context and the environment
registry; the token cache and credential store hold the opaque credential
cache in memory and on disk respectively.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from profiles.domain.aggregates import Context, Environment


@runtime_checkable
class ITokenCache(Protocol):
    """Shared in-memory credential cache.

    One instance is shared by every acquisition a profile client makes.
    Implementations must be safe to call from worker threads.
    """

    def merge_from(self, data: bytes) -> None:
        """Merge a serialized cache snapshot into this cache.

        Args:
            data: Bytes previously produced by serialize()

        Raises:
            TokenCacheCorruptedError: If the snapshot cannot be decoded
        """
        ...

    def serialize(self) -> bytes:
        """Serialize the whole cache to opaque bytes."""
        ...


@runtime_checkable
class ICredentialStore(Protocol):
    """Persistence for the serialized credential cache."""

    def load(self) -> bytes | None:
        """Load the persisted cache bytes, or None if nothing was saved."""
        ...

    def save(self, data: bytes) -> None:
        """Persist cache bytes, replacing any previous snapshot."""
        ...


@runtime_checkable
class IProfileStore(Protocol):
    """Holder of the active context and the environment registry.

    Replacing the context is a single atomic swap: readers observe either
    the previous or the new context, never a mix of both.
    """

    @property
    def context(self) -> Context | None:
        """The active context, or None before the first login."""
        ...

    def set_context(self, context: Context) -> Context:
        """Replace the active context.

        Args:
            context: The new context

        Returns:
            The context now active
        """
        ...

    def get_environment(self, name: str) -> Environment | None:
        """Look up an environment by name (case-insensitive)."""
        ...

    def put_environment(self, environment: Environment) -> Environment:
        """Insert or replace an environment under its name."""
        ...

    def remove_environment(self, name: str) -> Environment | None:
        """Remove an environment by name, returning it if it existed."""
        ...

    def list_environments(self) -> list[Environment]:
        """List all known environments in insertion order."""
        ...
