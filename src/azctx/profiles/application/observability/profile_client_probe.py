"""Protocol for profile client observability.

Defines the interface for domain probes that capture login, tenant search
and context switching events of the profile client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class ProfileClientProbe(Protocol):
    """Domain probe for profile client operations."""

    def login_started(
        self,
        account_id: str,
        environment: str,
        tenant_id: str | None,
        subscription_id: str | None,
        subscription_name: str | None,
    ) -> None:
        """Record that a login began."""
        ...

    def tenants_enumerated(self, account_id: str, count: int) -> None:
        """Record how many tenants the account can see."""
        ...

    def tenant_authentication_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that a tenant was skipped because authentication failed."""
        ...

    def tenant_resolved(self, tenant_id: str, subscription_id: str | None) -> None:
        """Record the tenant selected by a login."""
        ...

    def subscription_not_found(self, account_id: str, identifier: str) -> None:
        """Record that an explicitly requested subscription was not found."""
        ...

    def context_committed(
        self,
        account_id: str,
        tenant_id: str | None,
        subscription_id: str | None,
    ) -> None:
        """Record that a new active context was committed."""
        ...

    def credential_cache_loaded(self, size: int) -> None:
        """Record that a persisted credential cache was restored."""
        ...

    def credential_cache_discarded(self, source: str, reason: str) -> None:
        """Record that an unreadable credential cache snapshot was ignored."""
        ...

    def credential_cache_saved(self, size: int) -> None:
        """Record that the credential cache was persisted."""
        ...

    def advisory_emitted(self, message: str) -> None:
        """Record a non-fatal advisory surfaced to the caller."""
        ...

    def with_context(self, context: ObservationContext) -> ProfileClientProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultProfileClientProbe:
    """Default implementation of ProfileClientProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultProfileClientProbe:
        """Create a new probe with observation context bound."""
        return DefaultProfileClientProbe(logger=self._logger, context=context)

    def login_started(
        self,
        account_id: str,
        environment: str,
        tenant_id: str | None,
        subscription_id: str | None,
        subscription_name: str | None,
    ) -> None:
        """Record that a login began."""
        self._logger.info(
            "login_started",
            account_id=account_id,
            environment=environment,
            tenant_id=tenant_id,
            subscription_id=subscription_id,
            subscription_name=subscription_name,
            **self._get_context_kwargs(),
        )

    def tenants_enumerated(self, account_id: str, count: int) -> None:
        """Record how many tenants the account can see."""
        self._logger.debug(
            "tenants_enumerated",
            account_id=account_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def tenant_authentication_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that a tenant was skipped because authentication failed."""
        self._logger.warning(
            "tenant_authentication_failed",
            tenant_id=tenant_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def tenant_resolved(self, tenant_id: str, subscription_id: str | None) -> None:
        """Record the tenant selected by a login."""
        self._logger.debug(
            "tenant_resolved",
            tenant_id=tenant_id,
            subscription_id=subscription_id,
            **self._get_context_kwargs(),
        )

    def subscription_not_found(self, account_id: str, identifier: str) -> None:
        """Record that an explicitly requested subscription was not found."""
        self._logger.warning(
            "subscription_not_found",
            account_id=account_id,
            identifier=identifier,
            **self._get_context_kwargs(),
        )

    def context_committed(
        self,
        account_id: str,
        tenant_id: str | None,
        subscription_id: str | None,
    ) -> None:
        """Record that a new active context was committed."""
        self._logger.info(
            "context_committed",
            account_id=account_id,
            tenant_id=tenant_id,
            subscription_id=subscription_id,
            **self._get_context_kwargs(),
        )

    def credential_cache_loaded(self, size: int) -> None:
        """Record that a persisted credential cache was restored."""
        self._logger.debug(
            "credential_cache_loaded",
            size=size,
            **self._get_context_kwargs(),
        )

    def credential_cache_discarded(self, source: str, reason: str) -> None:
        """Record that an unreadable credential cache snapshot was ignored."""
        self._logger.warning(
            "credential_cache_discarded",
            source=source,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def credential_cache_saved(self, size: int) -> None:
        """Record that the credential cache was persisted."""
        self._logger.debug(
            "credential_cache_saved",
            size=size,
            **self._get_context_kwargs(),
        )

    def advisory_emitted(self, message: str) -> None:
        """Record a non-fatal advisory surfaced to the caller."""
        self._logger.warning(
            "advisory_emitted",
            message=message,
            **self._get_context_kwargs(),
        )
