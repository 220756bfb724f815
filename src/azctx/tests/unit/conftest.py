"""Unit test fixtures with mocked collaborators."""

from unittest.mock import AsyncMock, Mock

import pytest

from profiles.domain.aggregates import PUBLIC_ENVIRONMENTS, Account
from profiles.domain.value_objects import COMMON_TENANT, Credential, SubscriptionInfo
from profiles.infrastructure.profile_store import InMemoryProfileStore
from profiles.ports.exceptions import AuthenticationFailedError
from profiles.ports.repositories import ICredentialStore, ITokenCache
from profiles.ports.services import (
    ICredentialService,
    IDirectoryService,
    ISubscriptionService,
)

HOME_TENANT = "00000000-0000-0000-0000-0000000000a0"
T1 = "11111111-1111-1111-1111-111111111111"
T2 = "22222222-2222-2222-2222-222222222222"
T3 = "33333333-3333-3333-3333-333333333333"
S1 = "aaaaaaaa-0000-0000-0000-000000000001"
S2 = "aaaaaaaa-0000-0000-0000-000000000002"
S3 = "aaaaaaaa-0000-0000-0000-000000000003"


def make_credential_service(
    failing_tenants: set[str] | None = None,
    home_tenant: str = HOME_TENANT,
) -> Mock:
    """Credential service issuing one credential per requested tenant.

    The common tenant resolves to ``home_tenant``; tenants listed in
    ``failing_tenants`` raise AuthenticationFailedError.
    """
    failing = failing_tenants or set()
    service = Mock(spec=ICredentialService)

    async def acquire(account, environment, tenant_id, **kwargs):
        if tenant_id in failing:
            raise AuthenticationFailedError(
                f"rejected for {tenant_id}", tenant_id=tenant_id
            )
        issued_for = home_tenant if tenant_id == COMMON_TENANT else tenant_id
        return Credential(
            access_token=f"token-{issued_for}",
            user_id=account.id,
            tenant_id=issued_for,
        )

    service.acquire = AsyncMock(side_effect=acquire)
    return service


def make_directory_service(tenant_ids: list[str]) -> Mock:
    service = Mock(spec=IDirectoryService)
    service.list_tenants = AsyncMock(return_value=list(tenant_ids))
    return service


def make_subscription_service(
    by_tenant: dict[str, list[SubscriptionInfo]],
) -> Mock:
    """Subscription service answering from a per-tenant table."""
    service = Mock(spec=ISubscriptionService)

    async def list_subscriptions(credential, environment):
        return list(by_tenant.get(credential.tenant_id, []))

    async def get_subscription(credential, environment, subscription_id):
        return next(
            (
                s
                for s in by_tenant.get(credential.tenant_id, [])
                if s.subscription_id == subscription_id
            ),
            None,
        )

    service.list_subscriptions = AsyncMock(side_effect=list_subscriptions)
    service.get_subscription = AsyncMock(side_effect=get_subscription)
    return service


@pytest.fixture
def environment():
    """The public Azure cloud."""
    return PUBLIC_ENVIRONMENTS["AzureCloud"]


@pytest.fixture
def alice():
    """A user account."""
    return Account(id="alice@contoso.com")


@pytest.fixture
def profile_store():
    return InMemoryProfileStore()


@pytest.fixture
def mock_token_cache():
    cache = Mock(spec=ITokenCache)
    cache.serialize.return_value = b"cache-bytes"
    return cache


@pytest.fixture
def mock_credential_store():
    store = Mock(spec=ICredentialStore)
    store.load.return_value = None
    return store


@pytest.fixture
def warnings():
    """Collects advisories passed to the warning sink."""
    return []
