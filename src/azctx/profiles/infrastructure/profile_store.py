"""In-memory implementation of IProfileStore."""

from __future__ import annotations

import threading

from profiles.domain.aggregates import PUBLIC_ENVIRONMENTS, Context, Environment
from profiles.ports.repositories import IProfileStore


class InMemoryProfileStore(IProfileStore):
    """Holds the active context and the environment registry in memory.

    The registry starts with the public environments. Names are matched
    case-insensitively while the stored environment keeps its own casing.
    """

    def __init__(
        self,
        context: Context | None = None,
        environments: list[Environment] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._context = context
        self._environments: dict[str, Environment] = {}
        for environment in PUBLIC_ENVIRONMENTS.values():
            self._environments[environment.name.casefold()] = environment
        for environment in environments or []:
            self._environments[environment.name.casefold()] = environment

    @property
    def context(self) -> Context | None:
        return self._context

    def set_context(self, context: Context) -> Context:
        with self._lock:
            self._context = context
        return context

    def get_environment(self, name: str) -> Environment | None:
        with self._lock:
            return self._environments.get(name.casefold())

    def put_environment(self, environment: Environment) -> Environment:
        with self._lock:
            self._environments[environment.name.casefold()] = environment
        return environment

    def remove_environment(self, name: str) -> Environment | None:
        with self._lock:
            return self._environments.pop(name.casefold(), None)

    def list_environments(self) -> list[Environment]:
        with self._lock:
            return list(self._environments.values())
