"""Application-layer value objects for the profiles bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from profiles.domain.aggregates import Account, Subscription, Tenant

# Receives human-readable advisories (non-fatal warnings) for the caller.
WarningSink = Callable[[str], None]


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving a subscription within one tenant.

    Attributes:
        found: Whether a usable tenant (and possibly subscription) was found
        subscription: The selected subscription, None for tenant-only results
        tenant: The tenant the credential was issued for
        account: The account, re-affiliated with the tenant on a match
    """

    found: bool
    subscription: Subscription | None = None
    tenant: Tenant | None = None
    account: Account | None = None

    @classmethod
    def not_found(cls) -> ResolutionResult:
        """Result for a tenant that offered no usable credential."""
        return cls(found=False)

    @property
    def has_subscription(self) -> bool:
        """Whether a subscription was selected."""
        return self.subscription is not None
