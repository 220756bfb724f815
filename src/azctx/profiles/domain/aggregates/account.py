"""Account aggregate for the profiles context."""

from __future__ import annotations

from dataclasses import dataclass, replace

from profiles.domain.value_objects import AccountType


@dataclass(frozen=True)
class Account:
    """The identity a caller logs in as.

    Instead of a free-form property bag the account carries the handful of
    optional attributes the login flow reads. Updating one of them builds a
    new Account so a context that is already committed never changes.

    Attributes:
        id: User principal name, application id or other account identifier
        type: Kind of identity
        tenant_affiliation: Tenant the account was last resolved against
        certificate_thumbprint: Thumbprint for certificate-bound principals
        certificate_path: PEM file holding the certificate private key
        access_token: Raw token for ACCESS_TOKEN accounts
    """

    id: str
    type: AccountType = AccountType.USER
    tenant_affiliation: str | None = None
    certificate_thumbprint: str | None = None
    certificate_path: str | None = None
    access_token: str | None = None

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError("Account id must not be empty")

    def __repr__(self) -> str:
        return (
            f"Account(id={self.id!r}, type={self.type.value!r}, "
            f"tenant_affiliation={self.tenant_affiliation!r})"
        )

    def __str__(self) -> str:
        return self.id

    @property
    def is_certificate_bound(self) -> bool:
        """Whether the account authenticates with a certificate thumbprint."""
        return bool(self.certificate_thumbprint)

    def with_tenant(self, tenant_id: str | None) -> Account:
        """Return a copy affiliated with the given tenant.

        Args:
            tenant_id: Tenant id or domain to record on the account

        Returns:
            A new Account with tenant_affiliation set (or overwritten)
        """
        return replace(self, tenant_affiliation=tenant_id)
