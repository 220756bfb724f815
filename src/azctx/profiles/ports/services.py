"""Remote service protocols (ports) for the profiles bounded context.

These protocols describe the remote collaborators the profile client needs:
credential acquisition, tenant discovery and subscription lookup. Their
implementations own transport, retries and timeouts; cancelling the
awaiting task must abort the remote call.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from profiles.domain.aggregates import Account, Environment
from profiles.domain.value_objects import Credential, PromptBehavior, SubscriptionInfo
from profiles.ports.repositories import ITokenCache


@runtime_checkable
class ICredentialService(Protocol):
    """Acquires credentials for one (account, tenant) pair.

    Successful acquisitions are merged into the token cache passed in, so
    a later acquisition for a tenant already proven can complete silently.
    """

    async def acquire(
        self,
        account: Account,
        environment: Environment,
        tenant_id: str,
        *,
        secret: str | None,
        prompt_behavior: PromptBehavior,
        token_cache: ITokenCache,
    ) -> Credential:
        """Acquire a credential scoped to ``tenant_id``.

        Args:
            account: The account to authenticate
            environment: Environment whose authority issues the credential
            tenant_id: Tenant id, domain, or the common tenant
            secret: Password or client secret, when the caller supplied one
            prompt_behavior: Whether user interaction is allowed or forced
            token_cache: Shared cache read from and merged into

        Returns:
            The acquired Credential

        Raises:
            AuthenticationFailedError: If the directory rejects the
                account/tenant/secret combination
        """
        ...


@runtime_checkable
class IDirectoryService(Protocol):
    """Discovers the tenants visible to an account."""

    async def list_tenants(
        self, credential: Credential, environment: Environment
    ) -> list[str]:
        """List the ids of every tenant the credential's account can see.

        Args:
            credential: Credential issued for the common (home) tenant
            environment: Environment whose resource manager is queried

        Returns:
            Tenant ids in the order the service reports them

        Raises:
            RemoteServiceError: On transport or authorization failure
        """
        ...


@runtime_checkable
class ISubscriptionService(Protocol):
    """Lists and fetches subscriptions within one tenant."""

    async def list_subscriptions(
        self, credential: Credential, environment: Environment
    ) -> list[SubscriptionInfo]:
        """List the subscriptions in the credential's tenant.

        Args:
            credential: Credential scoped to a single tenant
            environment: Environment whose resource manager is queried

        Returns:
            Subscriptions in the order the service reports them

        Raises:
            RemoteServiceError: On transport or authorization failure
        """
        ...

    async def get_subscription(
        self,
        credential: Credential,
        environment: Environment,
        subscription_id: str,
    ) -> SubscriptionInfo | None:
        """Fetch one subscription by id.

        Args:
            credential: Credential scoped to a single tenant
            environment: Environment whose resource manager is queried
            subscription_id: The subscription GUID

        Returns:
            The subscription, or None if the service reports it does not exist

        Raises:
            RemoteServiceError: On transport or authorization failure
        """
        ...
