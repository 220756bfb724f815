"""Azure Resource Manager implementations of the directory and subscription ports.

Both adapters call the subscription management API with a credential the
profile client already acquired, wrapped as a static bearer token.
"""

from __future__ import annotations

import time

from azure.core.credentials import AccessToken
from azure.core.exceptions import AzureError, HttpResponseError, ResourceNotFoundError
from azure.mgmt.subscription.aio import SubscriptionClient

from profiles.domain.aggregates import Environment
from profiles.domain.value_objects import Credential, Endpoint, SubscriptionInfo
from profiles.infrastructure.observability import (
    DefaultSubscriptionClientProbe,
    SubscriptionClientProbe,
)
from profiles.ports.exceptions import RemoteServiceError
from profiles.ports.services import IDirectoryService, ISubscriptionService

# Used when the credential carries no expiry of its own
_DEFAULT_TOKEN_LIFETIME = 3600


class StaticTokenCredential:
    """AsyncTokenCredential returning one already-acquired access token."""

    def __init__(self, credential: Credential) -> None:
        self._credential = credential

    async def get_token(self, *scopes: str, **kwargs) -> AccessToken:
        expires_on = self._credential.expires_on
        if expires_on is None:
            expires_on = int(time.time()) + _DEFAULT_TOKEN_LIFETIME
        return AccessToken(self._credential.access_token, expires_on)

    async def close(self) -> None:
        pass

    async def __aenter__(self) -> StaticTokenCredential:
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()


def _create_client(credential: Credential, environment: Environment) -> SubscriptionClient:
    base_url = environment.get_endpoint(Endpoint.RESOURCE_MANAGER)
    if not base_url:
        raise RemoteServiceError(
            f"Environment '{environment.name}' has no resource manager endpoint"
        )

    resource = environment.get_endpoint(Endpoint.ACTIVE_DIRECTORY_RESOURCE_ID) or base_url
    return SubscriptionClient(
        StaticTokenCredential(credential),
        base_url=base_url.rstrip("/"),
        credential_scopes=[resource.rstrip("/") + "/.default"],
    )


def _to_info(subscription) -> SubscriptionInfo:
    state = subscription.state
    return SubscriptionInfo(
        subscription_id=subscription.subscription_id,
        display_name=subscription.display_name,
        state=getattr(state, "value", state),
    )


def _status_code(error: AzureError) -> int | None:
    if isinstance(error, HttpResponseError):
        return error.status_code
    return None


def _to_remote_error(operation: str, error: AzureError) -> RemoteServiceError:
    return RemoteServiceError(
        f"{operation} failed: {error.message or error}",
        status_code=_status_code(error),
    )


class AzureSubscriptionService(ISubscriptionService):
    """Lists and fetches subscriptions through the management API."""

    def __init__(self, probe: SubscriptionClientProbe | None = None) -> None:
        self._probe = probe or DefaultSubscriptionClientProbe()

    async def list_subscriptions(
        self, credential: Credential, environment: Environment
    ) -> list[SubscriptionInfo]:
        try:
            async with _create_client(credential, environment) as client:
                subscriptions = [
                    _to_info(s) async for s in client.subscriptions.list()
                ]
        except AzureError as e:
            self._probe.request_failed(
                operation="list_subscriptions", status_code=_status_code(e)
            )
            raise _to_remote_error("Listing subscriptions", e) from e

        self._probe.subscriptions_listed(
            tenant_id=credential.tenant_id or "", count=len(subscriptions)
        )
        return subscriptions

    async def get_subscription(
        self,
        credential: Credential,
        environment: Environment,
        subscription_id: str,
    ) -> SubscriptionInfo | None:
        try:
            async with _create_client(credential, environment) as client:
                s = await client.subscriptions.get(subscription_id)
        except ResourceNotFoundError:
            return None
        except AzureError as e:
            self._probe.request_failed(
                operation="get_subscription", status_code=_status_code(e)
            )
            raise _to_remote_error(
                f"Fetching subscription '{subscription_id}'", e
            ) from e

        return _to_info(s)


class AzureDirectoryService(IDirectoryService):
    """Lists the tenants visible to a credential through the management API."""

    def __init__(self, probe: SubscriptionClientProbe | None = None) -> None:
        self._probe = probe or DefaultSubscriptionClientProbe()

    async def list_tenants(
        self, credential: Credential, environment: Environment
    ) -> list[str]:
        try:
            async with _create_client(credential, environment) as client:
                tenant_ids = [t.tenant_id async for t in client.tenants.list()]
        except AzureError as e:
            self._probe.request_failed(
                operation="list_tenants", status_code=_status_code(e)
            )
            raise _to_remote_error("Listing tenants", e) from e

        self._probe.tenants_listed(count=len(tenant_ids))
        return tenant_ids
