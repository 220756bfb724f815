"""Domain probes for profiles infrastructure adapters.

Following Domain-Oriented Observability patterns, these probes capture
credential acquisition against the directory and calls made to the
subscription management API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class CredentialServiceProbe(Protocol):
    """Domain probe for credential acquisition."""

    def credential_acquired(self, account_id: str, tenant_id: str, flow: str) -> None:
        """Record that a token was obtained, and by which flow."""
        ...

    def credential_acquisition_failed(
        self, account_id: str, tenant_id: str, error: str
    ) -> None:
        """Record that the directory refused to issue a token."""
        ...

    def with_context(self, context: ObservationContext) -> CredentialServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class SubscriptionClientProbe(Protocol):
    """Domain probe for subscription management API calls."""

    def subscriptions_listed(self, tenant_id: str, count: int) -> None:
        """Record that subscriptions were listed for a tenant."""
        ...

    def tenants_listed(self, count: int) -> None:
        """Record that tenants were listed."""
        ...

    def request_failed(self, operation: str, status_code: int | None) -> None:
        """Record that a management API call failed."""
        ...

    def with_context(self, context: ObservationContext) -> SubscriptionClientProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCredentialServiceProbe:
    """Default implementation of CredentialServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultCredentialServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultCredentialServiceProbe(logger=self._logger, context=context)

    def credential_acquired(self, account_id: str, tenant_id: str, flow: str) -> None:
        """Record that a token was obtained, and by which flow."""
        self._logger.debug(
            "credential_acquired",
            account_id=account_id,
            tenant_id=tenant_id,
            flow=flow,
            **self._get_context_kwargs(),
        )

    def credential_acquisition_failed(
        self, account_id: str, tenant_id: str, error: str
    ) -> None:
        """Record that the directory refused to issue a token."""
        self._logger.warning(
            "credential_acquisition_failed",
            account_id=account_id,
            tenant_id=tenant_id,
            error=error,
            **self._get_context_kwargs(),
        )


class DefaultSubscriptionClientProbe:
    """Default implementation of SubscriptionClientProbe using structlog."""

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
    ) -> DefaultSubscriptionClientProbe:
        """Create a new probe with observation context bound."""
        return DefaultSubscriptionClientProbe(logger=self._logger, context=context)

    def subscriptions_listed(self, tenant_id: str, count: int) -> None:
        self._logger.debug(
            "subscriptions_listed",
            tenant_id=tenant_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def tenants_listed(self, count: int) -> None:
        self._logger.debug(
            "tenants_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def request_failed(self, operation: str, status_code: int | None) -> None:
        self._logger.warning(
            "management_request_failed",
            operation=operation,
            status_code=status_code,
            **self._get_context_kwargs(),
        )
