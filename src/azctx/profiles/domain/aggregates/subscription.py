"""Subscription record for the profiles context."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Subscription:
    """A billing and resource boundary the account operates against.

    The tenant affiliation is derived: it is written by whoever resolved the
    subscription (from the tenant of the credential that listed it), not
    read from the remote listing.

    Attributes:
        id: Subscription GUID
        name: Display name
        account_id: Account that resolved the subscription
        environment_name: Environment the subscription lives in
        tenant_affiliation: Tenant id (or domain) the subscription belongs to
    """

    id: str
    name: str | None = None
    account_id: str | None = None
    environment_name: str | None = None
    tenant_affiliation: str | None = None

    def __str__(self) -> str:
        return f"{self.name} ({self.id})" if self.name else self.id

    def with_tenant(self, tenant_id: str | None) -> Subscription:
        """Return a copy affiliated with the given tenant."""
        return replace(self, tenant_affiliation=tenant_id)

    def has_id(self, subscription_id: str | None) -> bool:
        """Check whether this subscription has the given id (case-insensitive)."""
        return (
            subscription_id is not None
            and self.id.casefold() == subscription_id.strip().casefold()
        )

    def has_name(self, name: str | None) -> bool:
        """Check whether this subscription has the given display name (case-insensitive)."""
        return (
            name is not None
            and self.name is not None
            and self.name.casefold() == name.casefold()
        )
