"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures operation-scoped metadata that should be included with all
    instrumentation events, so that the advisories and failures emitted
    while resolving one login can be correlated.

    Attributes:
        operation_id: Unique identifier for the current operation.
        account_id: Account the operation runs for (if applicable).
        environment: Name of the cloud environment targeted (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(
            operation_id="login-123",
            account_id="alice@contoso.com",
            environment="AzureCloud",
        )
        probe = DefaultProfileClientProbe().with_context(context)
    """

    operation_id: str | None = None
    account_id: str | None = None
    environment: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.operation_id is not None:
            result["operation_id"] = self.operation_id
        if self.account_id is not None:
            result["account_id"] = self.account_id
        if self.environment is not None:
            result["environment"] = self.environment
        result.update(self.extra)
        return result

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return ObservationContext(
            operation_id=self.operation_id,
            account_id=self.account_id,
            environment=self.environment,
            extra={**self.extra, **kwargs},
        )
