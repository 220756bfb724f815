"""Ports for the profiles bounded context.

Protocols for the remote services and stores the application layer
depends on, plus the exceptions they raise.
"""

from profiles.ports.exceptions import (
    AuthenticationFailedError,
    EnvironmentNotFoundError,
    NoActiveContextError,
    RemoteServiceError,
    SubscriptionNotFoundError,
    TokenCacheCorruptedError,
)
from profiles.ports.repositories import ICredentialStore, IProfileStore, ITokenCache
from profiles.ports.services import (
    ICredentialService,
    IDirectoryService,
    ISubscriptionService,
)

__all__ = [
    "AuthenticationFailedError",
    "EnvironmentNotFoundError",
    "ICredentialService",
    "ICredentialStore",
    "IDirectoryService",
    "IProfileStore",
    "ISubscriptionService",
    "ITokenCache",
    "NoActiveContextError",
    "RemoteServiceError",
    "SubscriptionNotFoundError",
    "TokenCacheCorruptedError",
]
