"""Tenant record for the profiles context."""

from __future__ import annotations

from dataclasses import dataclass

from profiles.domain.value_objects import is_guid


@dataclass(frozen=True)
class Tenant:
    """An identity directory, known by GUID id, domain name, or both.

    Tenants are rebuilt on every resolution and never persisted on their
    own. At least one of id and domain must be known.
    """

    id: str | None = None
    domain: str | None = None

    def __post_init__(self) -> None:
        if not self.id and not self.domain:
            raise ValueError("Tenant requires an id or a domain")

    def __str__(self) -> str:
        return self.id or self.domain or ""

    @classmethod
    def from_id_or_domain(cls, value: str) -> Tenant:
        """Build a tenant from a string that is either a GUID or a domain.

        Args:
            value: Tenant id (GUID) or domain name such as contoso.onmicrosoft.com

        Returns:
            Tenant with id set for GUIDs, domain set otherwise
        """
        value = value.strip()
        if is_guid(value):
            return cls(id=value)
        return cls(domain=value)

    def matches(self, identifier: str | None) -> bool:
        """Check whether ``identifier`` names this tenant by id or domain."""
        if not identifier:
            return False
        folded = identifier.strip().casefold()
        return (self.id is not None and self.id.casefold() == folded) or (
            self.domain is not None and self.domain.casefold() == folded
        )
