"""Context aggregate for the profiles context."""

from __future__ import annotations

from dataclasses import dataclass, replace

from profiles.domain.aggregates.account import Account
from profiles.domain.aggregates.environment import Environment
from profiles.domain.aggregates.subscription import Subscription
from profiles.domain.aggregates.tenant import Tenant


@dataclass(frozen=True)
class Context:
    """The (account, environment, subscription, tenant) tuple in effect.

    Contexts are immutable: every change builds a new Context which then
    replaces the active one in a single swap, so readers never observe a
    half-updated context.

    Business rules:
    - Subscription may be absent (account-only context)
    - Tenant may be absent when no tenant could be resolved
    - A subscription's tenant affiliation must name the context tenant

    Attributes:
        account: The logged-in account
        environment: Cloud environment targeted
        subscription: Selected subscription, if any
        tenant: Selected tenant, if any
        token_cache: Serialized credential cache taken at commit time
    """

    account: Account
    environment: Environment
    subscription: Subscription | None = None
    tenant: Tenant | None = None
    token_cache: bytes = b""

    def __post_init__(self) -> None:
        if (
            self.subscription is not None
            and self.tenant is not None
            and self.subscription.tenant_affiliation
            and not self.tenant.matches(self.subscription.tenant_affiliation)
        ):
            raise ValueError(
                f"Subscription {self.subscription.id} is affiliated with tenant "
                f"'{self.subscription.tenant_affiliation}', not '{self.tenant}'"
            )

    def __repr__(self) -> str:
        return (
            f"Context(account={self.account!r}, environment={self.environment.name!r}, "
            f"subscription={self.subscription!r}, tenant={self.tenant!r}, "
            f"token_cache=<{len(self.token_cache)} bytes>)"
        )

    @property
    def tenant_id(self) -> str | None:
        """Id of the context tenant, falling back to its domain."""
        if self.tenant is None:
            return None
        return self.tenant.id or self.tenant.domain

    def with_token_cache(self, token_cache: bytes) -> Context:
        """Return a copy carrying a new credential cache snapshot."""
        return replace(self, token_cache=token_cache)
