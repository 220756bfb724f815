"""Protocol for environment service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class EnvironmentServiceProbe(Protocol):
    """Domain probe for environment registry operations."""

    def environment_added(self, name: str) -> None:
        """Record that a new environment was registered."""
        ...

    def environment_merged(self, name: str) -> None:
        """Record that an environment was merged into an existing one."""
        ...

    def environment_removed(self, name: str) -> None:
        """Record that an environment was removed."""
        ...

    def public_environment_change_rejected(self, name: str, operation: str) -> None:
        """Record that changing a public environment was refused."""
        ...

    def with_context(self, context: ObservationContext) -> EnvironmentServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultEnvironmentServiceProbe:
    """Default implementation of EnvironmentServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultEnvironmentServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultEnvironmentServiceProbe(logger=self._logger, context=context)

    def environment_added(self, name: str) -> None:
        self._logger.info(
            "environment_added",
            name=name,
            **self._get_context_kwargs(),
        )

    def environment_merged(self, name: str) -> None:
        self._logger.info(
            "environment_merged",
            name=name,
            **self._get_context_kwargs(),
        )

    def environment_removed(self, name: str) -> None:
        self._logger.info(
            "environment_removed",
            name=name,
            **self._get_context_kwargs(),
        )

    def public_environment_change_rejected(self, name: str, operation: str) -> None:
        self._logger.warning(
            "public_environment_change_rejected",
            name=name,
            operation=operation,
            **self._get_context_kwargs(),
        )
