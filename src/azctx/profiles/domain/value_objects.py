"""Value objects for the profiles domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import StrEnum

# Well-known tenant used to discover the tenants an account belongs to.
COMMON_TENANT = "common"


def is_guid(value: str | None) -> bool:
    """Check whether a string parses as a GUID.

    Args:
        value: Candidate string (braces and hyphen-less forms are accepted)

    Returns:
        True if the value is a GUID, False otherwise
    """
    if not value:
        return False
    try:
        uuid.UUID(value.strip())
    except ValueError:
        return False
    return True


class AccountType(StrEnum):
    """Kinds of identity a caller can log in with."""

    USER = "user"
    SERVICE_PRINCIPAL = "service_principal"
    CERTIFICATE = "certificate"
    ACCESS_TOKEN = "access_token"


class PromptBehavior(StrEnum):
    """Whether credential acquisition may interact with the user.

    ALWAYS forces an interactive prompt, AUTO prompts only when no cached
    credential can be used silently, NEVER fails instead of prompting.
    """

    ALWAYS = "always"
    AUTO = "auto"
    NEVER = "never"


class Endpoint(StrEnum):
    """Service endpoints a cloud environment can define."""

    ACTIVE_DIRECTORY = "active_directory"
    ACTIVE_DIRECTORY_RESOURCE_ID = "active_directory_resource_id"
    RESOURCE_MANAGER = "resource_manager"
    GALLERY = "gallery"
    GRAPH = "graph"
    MANAGEMENT_PORTAL = "management_portal"


@dataclass(frozen=True)
class SubscriptionInfo:
    """A subscription as reported by the subscription service.

    Carries only what the remote listing returns; tenant affiliation and
    ownership are added when a Subscription is built from it.
    """

    subscription_id: str
    display_name: str
    state: str | None = None


@dataclass(frozen=True)
class Credential:
    """Proof of identity for one (account, tenant) pair.

    Attributes:
        access_token: Raw bearer token material
        user_id: Identifier of the signed-in user or principal
        tenant_id: Tenant the token was issued for
        expires_on: Expiry as a POSIX timestamp, when known
    """

    access_token: str
    user_id: str | None
    tenant_id: str | None
    expires_on: int | None = None

    def __repr__(self) -> str:
        """Keep token material out of logs and tracebacks."""
        return (
            f"Credential(user_id={self.user_id!r}, tenant_id={self.tenant_id!r}, "
            f"expires_on={self.expires_on!r})"
        )

    @property
    def domain(self) -> str | None:
        """Domain of the user identifier (text after the last '@')."""
        if not self.user_id or "@" not in self.user_id:
            return None
        return self.user_id.rsplit("@", 1)[1] or None

    @property
    def strict_domain(self) -> str | None:
        """Domain only when the user identifier is exactly ``name@domain``."""
        if not self.user_id:
            return None
        parts = [part for part in self.user_id.split("@") if part]
        if len(parts) == 2:
            return parts[1]
        return None
