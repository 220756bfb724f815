"""Protocol for tenant subscription resolver observability.

Defines the interface for domain probes that capture how a subscription
was (or was not) selected within one tenant.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class SubscriptionResolverProbe(Protocol):
    """Domain probe for per-tenant subscription resolution."""

    def subscription_resolved(self, tenant_id: str, subscription_id: str) -> None:
        """Record that a subscription was selected in a tenant."""
        ...

    def default_subscription_selected(
        self, tenant_id: str, subscription_id: str, candidates: int
    ) -> None:
        """Record that the first of several subscriptions was picked."""
        ...

    def subscription_lookup_failed(
        self, tenant_id: str, subscription_id: str, error: Exception
    ) -> None:
        """Record that fetching a subscription by id failed remotely."""
        ...

    def no_subscription_matched(self, tenant_id: str) -> None:
        """Record that a tenant yielded no subscription."""
        ...

    def with_context(self, context: ObservationContext) -> SubscriptionResolverProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSubscriptionResolverProbe:
    """Default implementation of SubscriptionResolverProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultSubscriptionResolverProbe:
        """Create a new probe with observation context bound."""
        return DefaultSubscriptionResolverProbe(logger=self._logger, context=context)

    def subscription_resolved(self, tenant_id: str, subscription_id: str) -> None:
        """Record that a subscription was selected in a tenant."""
        self._logger.debug(
            "subscription_resolved",
            tenant_id=tenant_id,
            subscription_id=subscription_id,
            **self._get_context_kwargs(),
        )

    def default_subscription_selected(
        self, tenant_id: str, subscription_id: str, candidates: int
    ) -> None:
        """Record that the first of several subscriptions was picked."""
        self._logger.info(
            "default_subscription_selected",
            tenant_id=tenant_id,
            subscription_id=subscription_id,
            candidates=candidates,
            **self._get_context_kwargs(),
        )

    def subscription_lookup_failed(
        self, tenant_id: str, subscription_id: str, error: Exception
    ) -> None:
        """Record that fetching a subscription by id failed remotely."""
        self._logger.warning(
            "subscription_lookup_failed",
            tenant_id=tenant_id,
            subscription_id=subscription_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def no_subscription_matched(self, tenant_id: str) -> None:
        """Record that a tenant yielded no subscription."""
        self._logger.debug(
            "no_subscription_matched",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )
