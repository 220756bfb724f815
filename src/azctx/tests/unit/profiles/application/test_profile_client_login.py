"""Unit tests for ProfileClient.login()."""

import asyncio
import json
from unittest.mock import AsyncMock, Mock

import pytest

from conftest import (
    HOME_TENANT,
    S1,
    S2,
    S3,
    T1,
    T2,
    T3,
    make_credential_service,
    make_directory_service,
    make_subscription_service,
)
from profiles.application.observability import ProfileClientProbe
from profiles.application.services import ProfileClient
from profiles.domain.aggregates import Account, Context, Tenant
from profiles.domain.value_objects import (
    COMMON_TENANT,
    AccountType,
    Credential,
    PromptBehavior,
    SubscriptionInfo,
)
from profiles.infrastructure.credential_store import FileCredentialStore
from profiles.infrastructure.token_cache import MsalTokenCache
from profiles.ports.exceptions import (
    AuthenticationFailedError,
    SubscriptionNotFoundError,
)
from profiles.ports.services import ICredentialService, ISubscriptionService

DEV = SubscriptionInfo(subscription_id=S1, display_name="Dev")
PROD = SubscriptionInfo(subscription_id=S2, display_name="Prod")
OTHER = SubscriptionInfo(subscription_id=S3, display_name="Other")


@pytest.fixture
def build_client(profile_store, mock_token_cache, mock_credential_store, warnings):
    """Factory for a ProfileClient over fake remote services."""

    def _build(
        tenants=None,
        by_tenant=None,
        credential_service=None,
        subscription_service=None,
        max_concurrent_tenant_lookups=1,
        probe=None,
    ):
        return ProfileClient(
            profile_store=profile_store,
            credential_service=credential_service or make_credential_service(),
            directory_service=make_directory_service(tenants or []),
            subscription_service=subscription_service
            or make_subscription_service(by_tenant or {}),
            token_cache=mock_token_cache,
            credential_store=mock_credential_store,
            max_concurrent_tenant_lookups=max_concurrent_tenant_lookups,
            warning_log=warnings.append,
            probe=probe,
        )

    return _build


def acquired_tenants(credential_service: Mock) -> list[str]:
    return [c.args[2] for c in credential_service.acquire.await_args_list]


class TestLoginWithTenant:
    """Tests for login when the caller names a tenant."""

    @pytest.mark.asyncio
    async def test_resolves_single_tenant(self, build_client, alice, environment):
        credentials = make_credential_service()
        client = build_client(
            tenants=[T1, T2], by_tenant={T1: [DEV]}, credential_service=credentials
        )

        context = await client.login(alice, environment, tenant_id=T1)

        assert context.subscription.id == S1
        assert context.tenant == Tenant(id=T1, domain="contoso.com")
        assert context.account.tenant_affiliation == T1
        assert acquired_tenants(credentials) == [T1]

    @pytest.mark.asyncio
    async def test_prompts_when_no_secret(self, build_client, alice, environment):
        credentials = make_credential_service()
        client = build_client(by_tenant={T1: [DEV]}, credential_service=credentials)

        await client.login(alice, environment, tenant_id=T1)

        kwargs = credentials.acquire.await_args.kwargs
        assert kwargs["prompt_behavior"] == PromptBehavior.ALWAYS
        assert kwargs["secret"] is None

    @pytest.mark.asyncio
    async def test_never_prompts_with_secret(self, build_client, environment):
        credentials = make_credential_service()
        client = build_client(by_tenant={T1: [DEV]}, credential_service=credentials)
        principal = Account(id="app-id", type=AccountType.SERVICE_PRINCIPAL)

        await client.login(principal, environment, tenant_id=T1, secret="s3cret")

        kwargs = credentials.acquire.await_args.kwargs
        assert kwargs["prompt_behavior"] == PromptBehavior.NEVER
        assert kwargs["secret"] == "s3cret"

    @pytest.mark.asyncio
    async def test_never_prompts_for_certificate_account(
        self, build_client, environment
    ):
        credentials = make_credential_service()
        client = build_client(by_tenant={T1: [DEV]}, credential_service=credentials)
        principal = Account(
            id="app-id",
            type=AccountType.CERTIFICATE,
            certificate_thumbprint="ABC",
            certificate_path="/tmp/cert.pem",
        )

        await client.login(principal, environment, tenant_id=T1)

        kwargs = credentials.acquire.await_args.kwargs
        assert kwargs["prompt_behavior"] == PromptBehavior.NEVER

    @pytest.mark.asyncio
    async def test_access_token_account_bypasses_credential_service(
        self, build_client, environment
    ):
        credentials = make_credential_service()
        client = build_client(by_tenant={T1: [DEV]}, credential_service=credentials)
        account = Account(
            id="alice@contoso.com",
            type=AccountType.ACCESS_TOKEN,
            access_token="raw",
        )

        context = await client.login(account, environment, tenant_id=T1)

        assert context.subscription.id == S1
        credentials.acquire.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_authentication_failure_propagates(
        self, build_client, alice, environment
    ):
        client = build_client(credential_service=make_credential_service({T1}))

        with pytest.raises(AuthenticationFailedError):
            await client.login(alice, environment, tenant_id=T1)

    @pytest.mark.asyncio
    async def test_unmatched_id_raises_not_found(
        self, build_client, alice, environment
    ):
        client = build_client(by_tenant={T1: [DEV]})

        with pytest.raises(SubscriptionNotFoundError) as exc_info:
            await client.login(alice, environment, tenant_id=T1, subscription_id=S3)

        assert exc_info.value.account_id == "alice@contoso.com"
        assert exc_info.value.identifier == S3

    @pytest.mark.asyncio
    async def test_no_hint_and_no_subscription_is_account_only(
        self, build_client, alice, environment
    ):
        client = build_client(by_tenant={T1: []})

        context = await client.login(alice, environment, tenant_id=T1)

        assert context.subscription is None
        assert context.tenant == Tenant(id=T1, domain="contoso.com")


class TestLoginAcrossTenants:
    """Tests for login without a tenant."""

    @pytest.mark.asyncio
    async def test_lists_tenants_with_common_credential(
        self, build_client, alice, environment
    ):
        credentials = make_credential_service()
        client = build_client(
            tenants=[T1], by_tenant={T1: [DEV]}, credential_service=credentials
        )

        await client.login(alice, environment)

        first_call = credentials.acquire.await_args_list[0]
        assert first_call.args[2] == COMMON_TENANT
        assert first_call.kwargs["prompt_behavior"] == PromptBehavior.ALWAYS
        later_prompts = {
            c.kwargs["prompt_behavior"] for c in credentials.acquire.await_args_list[1:]
        }
        assert later_prompts == {PromptBehavior.AUTO}

    @pytest.mark.asyncio
    async def test_prod_is_found_in_first_tenant(
        self, build_client, alice, environment
    ):
        """alice has Dev and Prod in T1 and nothing in T2."""
        credentials = make_credential_service()
        client = build_client(
            tenants=[T1, T2],
            by_tenant={T1: [DEV, PROD], T2: []},
            credential_service=credentials,
        )

        context = await client.login(alice, environment, subscription_name="Prod")

        assert context.subscription.id == S2
        assert context.tenant.id == T1
        assert acquired_tenants(credentials) == [COMMON_TENANT, T1, T2]

    @pytest.mark.asyncio
    async def test_first_tenant_in_enumeration_order_wins(
        self, build_client, alice, environment
    ):
        client = build_client(
            tenants=[T1, T2, T3],
            by_tenant={T1: [], T2: [DEV], T3: [OTHER]},
        )

        context = await client.login(alice, environment)

        assert context.subscription.id == S1
        assert context.tenant.id == T2

    @pytest.mark.asyncio
    async def test_enumeration_order_holds_under_concurrency(
        self, build_client, alice, environment
    ):
        """T3 completes first but T2 precedes it in enumeration order."""
        delays = {T1: 0.0, T2: 0.05, T3: 0.0}
        tables = {T1: [], T2: [DEV], T3: [OTHER]}
        service = Mock(spec=ISubscriptionService)

        async def list_subscriptions(credential, environment):
            await asyncio.sleep(delays[credential.tenant_id])
            return tables[credential.tenant_id]

        service.list_subscriptions = Mock(side_effect=list_subscriptions)
        client = build_client(
            tenants=[T1, T2, T3],
            subscription_service=service,
            max_concurrent_tenant_lookups=3,
        )

        context = await client.login(alice, environment)

        assert context.subscription.id == S1
        assert context.tenant.id == T2

    @pytest.mark.asyncio
    async def test_acquisitions_never_overlap_under_concurrency(
        self, build_client, alice, environment
    ):
        """Tenants are resolved in parallel but share one token cache."""
        in_flight = 0
        peak = 0
        credentials = Mock(spec=ICredentialService)

        async def acquire(account, environment, tenant_id, **kwargs):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return Credential(
                access_token=f"token-{tenant_id}",
                user_id=account.id,
                tenant_id=HOME_TENANT if tenant_id == COMMON_TENANT else tenant_id,
            )

        credentials.acquire = AsyncMock(side_effect=acquire)
        client = build_client(
            tenants=[T1, T2, T3],
            by_tenant={T3: [DEV]},
            credential_service=credentials,
            max_concurrent_tenant_lookups=3,
        )

        await client.login(alice, environment)

        assert credentials.acquire.await_count == 4
        assert peak == 1

    @pytest.mark.asyncio
    async def test_skips_tenants_that_fail_authentication(
        self, build_client, alice, environment, warnings
    ):
        probe = Mock(spec=ProfileClientProbe)
        client = build_client(
            tenants=[T1, T2],
            by_tenant={T2: [DEV]},
            credential_service=make_credential_service({T1}),
            probe=probe,
        )

        context = await client.login(alice, environment)

        assert context.tenant.id == T2
        assert any(T1 in w and "skipped" in w for w in warnings)
        probe.tenant_authentication_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_common_tenant_failure_propagates(
        self, build_client, alice, environment
    ):
        client = build_client(
            tenants=[T1], credential_service=make_credential_service({COMMON_TENANT})
        )

        with pytest.raises(AuthenticationFailedError):
            await client.login(alice, environment)

    @pytest.mark.asyncio
    async def test_name_missing_everywhere_raises_not_found(
        self, build_client, alice, environment
    ):
        client = build_client(tenants=[T1, T2], by_tenant={T1: [DEV], T2: []})

        with pytest.raises(SubscriptionNotFoundError) as exc_info:
            await client.login(alice, environment, subscription_name="Prod")

        assert exc_info.value.by_name is True
        assert "Prod" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_no_subscription_anywhere_is_account_only(
        self, build_client, alice, environment
    ):
        client = build_client(tenants=[T1, T2], by_tenant={})

        context = await client.login(alice, environment)

        assert context.subscription is None
        assert context.tenant.id == T1

    @pytest.mark.asyncio
    async def test_no_tenants_yields_context_without_tenant(
        self, build_client, alice, environment
    ):
        client = build_client(tenants=[])

        context = await client.login(alice, environment)

        assert context.subscription is None
        assert context.tenant is None
        assert context.account == alice


class TestLoginCommit:
    """Tests for committing the resolved context."""

    @pytest.mark.asyncio
    async def test_commit_snapshots_token_cache(
        self,
        build_client,
        alice,
        environment,
        profile_store,
        mock_credential_store,
    ):
        client = build_client(tenants=[T1], by_tenant={T1: [DEV]})

        context = await client.login(alice, environment)

        assert context.token_cache == b"cache-bytes"
        assert profile_store.context is context
        mock_credential_store.save.assert_called_once_with(b"cache-bytes")

    def test_restores_cache_from_store_on_construction(
        self, profile_store, mock_token_cache, mock_credential_store
    ):
        mock_credential_store.load.return_value = b"persisted"

        ProfileClient(
            profile_store=profile_store,
            credential_service=make_credential_service(),
            directory_service=make_directory_service([]),
            subscription_service=make_subscription_service({}),
            token_cache=mock_token_cache,
            credential_store=mock_credential_store,
        )

        mock_token_cache.merge_from.assert_called_once_with(b"persisted")

    @pytest.mark.parametrize(
        "stored",
        [b"\xff\xfe garbage", b"{truncated", b"[]"],
        ids=["not-utf8", "truncated-json", "json-array"],
    )
    @pytest.mark.asyncio
    async def test_unreadable_cache_file_is_discarded_then_replaced(
        self, profile_store, tmp_path, alice, environment, stored
    ):
        cache_path = tmp_path / "cache.bin"
        cache_path.write_bytes(stored)
        probe = Mock(spec=ProfileClientProbe)

        client = ProfileClient(
            profile_store=profile_store,
            credential_service=make_credential_service(),
            directory_service=make_directory_service([T1]),
            subscription_service=make_subscription_service({T1: [DEV]}),
            token_cache=MsalTokenCache(),
            credential_store=FileCredentialStore(cache_path),
            probe=probe,
        )

        probe.credential_cache_discarded.assert_called_once()
        assert (
            probe.credential_cache_discarded.call_args.kwargs["source"]
            == "credential_store"
        )
        probe.credential_cache_loaded.assert_not_called()

        await client.login(alice, environment)

        assert isinstance(json.loads(cache_path.read_bytes()), dict)

    def test_unreadable_context_snapshot_is_discarded(
        self, profile_store, alice, environment
    ):
        profile_store.set_context(
            Context(account=alice, environment=environment, token_cache=b"{bad")
        )
        probe = Mock(spec=ProfileClientProbe)

        ProfileClient(
            profile_store=profile_store,
            credential_service=make_credential_service(),
            directory_service=make_directory_service([]),
            subscription_service=make_subscription_service({}),
            token_cache=MsalTokenCache(),
            probe=probe,
        )

        probe.credential_cache_discarded.assert_called_once()
        assert probe.credential_cache_discarded.call_args.kwargs["source"] == "context"

    @pytest.mark.asyncio
    async def test_home_tenant_is_used_for_credential_issued_for_common(
        self, build_client, alice, environment
    ):
        """Only enumerated tenants are resolved, never the common tenant."""
        client = build_client(tenants=[T1], by_tenant={HOME_TENANT: [DEV]})

        context = await client.login(alice, environment)

        assert context.subscription is None
        assert context.tenant.id == T1

    def test_rejects_non_positive_concurrency(
        self, profile_store, mock_token_cache
    ):
        with pytest.raises(ValueError):
            ProfileClient(
                profile_store=profile_store,
                credential_service=make_credential_service(),
                directory_service=make_directory_service([]),
                subscription_service=make_subscription_service({}),
                token_cache=mock_token_cache,
                max_concurrent_tenant_lookups=0,
            )
