"""Environment registry service for the profiles bounded context."""

from __future__ import annotations

from profiles.application.observability import (
    DefaultEnvironmentServiceProbe,
    EnvironmentServiceProbe,
)
from profiles.domain.aggregates import Environment, is_public_environment
from profiles.domain.exceptions import (
    EnvironmentPolicyViolationError,
    InvalidArgumentError,
)
from profiles.ports.exceptions import EnvironmentNotFoundError
from profiles.ports.repositories import IProfileStore


class EnvironmentService:
    """Application service for registering custom environments.

    The public environments are seeded by the profile store and can be
    neither replaced nor removed. Re-adding a custom environment merges the
    new endpoints over the stored ones.
    """

    def __init__(
        self,
        profile_store: IProfileStore,
        probe: EnvironmentServiceProbe | None = None,
    ):
        self._profile_store = profile_store
        self._probe = probe or DefaultEnvironmentServiceProbe()

    def add_or_set_environment(self, environment: Environment | None) -> Environment:
        """Register an environment, merging it into an existing definition.

        Args:
            environment: The environment to register

        Returns:
            The environment as stored

        Raises:
            InvalidArgumentError: If no environment is given
            EnvironmentPolicyViolationError: If it names a public environment
        """
        if environment is None:
            raise InvalidArgumentError("Environment needs to be specified")

        if is_public_environment(environment.name):
            self._probe.public_environment_change_rejected(
                name=environment.name, operation="set"
            )
            raise EnvironmentPolicyViolationError(
                f"Cannot change built-in environment '{environment.name}'"
            )

        previous = self._profile_store.get_environment(environment.name)
        if previous is not None:
            stored = self._profile_store.put_environment(environment.merge(previous))
            self._probe.environment_merged(name=stored.name)
            return stored

        stored = self._profile_store.put_environment(environment)
        self._probe.environment_added(name=stored.name)
        return stored

    def list_environments(self, name: str | None = None) -> list[Environment]:
        """List every environment, or only the one called ``name``."""
        if not name or not name.strip():
            return self._profile_store.list_environments()

        environment = self._profile_store.get_environment(name.strip())
        return [environment] if environment is not None else []

    def get_environment(self, name: str) -> Environment | None:
        """Look up an environment by name (case-insensitive)."""
        return self._profile_store.get_environment(name)

    def remove_environment(self, name: str) -> Environment:
        """Remove a custom environment.

        Args:
            name: Name of the environment to remove

        Returns:
            The removed environment

        Raises:
            InvalidArgumentError: If the name is blank
            EnvironmentPolicyViolationError: If it names a public environment
            EnvironmentNotFoundError: If no such environment is registered
        """
        if not name or not name.strip():
            raise InvalidArgumentError("Environment name needs to be specified")
        name = name.strip()

        if is_public_environment(name):
            self._probe.public_environment_change_rejected(
                name=name, operation="remove"
            )
            raise EnvironmentPolicyViolationError(
                f"Cannot remove built-in environment '{name}'"
            )

        removed = self._profile_store.remove_environment(name)
        if removed is None:
            raise EnvironmentNotFoundError(f"Environment '{name}' was not found")

        self._probe.environment_removed(name=removed.name)
        return removed
