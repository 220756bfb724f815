"""Profile client application service for the profiles bounded context.

Drives login (tenant and subscription resolution plus credential
acquisition), context switching, and the tenant and subscription queries
that run against the active context.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace

from profiles.application.observability import (
    DefaultProfileClientProbe,
    ProfileClientProbe,
    SubscriptionResolverProbe,
)
from profiles.application.services.tenant_subscription_resolver import (
    TenantSubscriptionResolver,
)
from profiles.application.value_objects import ResolutionResult, WarningSink
from profiles.domain.aggregates import (
    Account,
    Context,
    Environment,
    Subscription,
    Tenant,
)
from profiles.domain.exceptions import InvalidArgumentError
from profiles.domain.value_objects import (
    COMMON_TENANT,
    AccountType,
    Credential,
    PromptBehavior,
    is_guid,
)
from profiles.ports.exceptions import (
    AuthenticationFailedError,
    NoActiveContextError,
    SubscriptionNotFoundError,
    TokenCacheCorruptedError,
)
from profiles.ports.repositories import ICredentialStore, IProfileStore, ITokenCache
from profiles.ports.services import (
    ICredentialService,
    IDirectoryService,
    ISubscriptionService,
)


class ProfileClient:
    """Application service owning the active context.

    One caller drives one ProfileClient. Every acquired credential is
    merged into the shared token cache; whenever a context is committed the
    cache is serialized onto the context and written to the credential
    store, so the persisted bytes always reflect the latest acquisition.

    Advisories (ambiguous default subscription, tenants skipped because
    authentication failed) are passed to ``warning_log`` when it is set.
    """

    def __init__(
        self,
        profile_store: IProfileStore,
        credential_service: ICredentialService,
        directory_service: IDirectoryService,
        subscription_service: ISubscriptionService,
        token_cache: ITokenCache,
        credential_store: ICredentialStore | None = None,
        *,
        max_concurrent_tenant_lookups: int = 1,
        warning_log: WarningSink | None = None,
        probe: ProfileClientProbe | None = None,
        resolver_probe: SubscriptionResolverProbe | None = None,
    ):
        """Initialize ProfileClient with dependencies.

        Restores the token cache from the credential store and from the
        active context, when either holds a snapshot.

        Args:
            profile_store: Holder of the active context and environments
            credential_service: Acquires credentials per (account, tenant)
            directory_service: Lists the tenants visible to an account
            subscription_service: Lists and fetches subscriptions
            token_cache: Shared credential cache
            credential_store: Optional persistence for the token cache
            max_concurrent_tenant_lookups: Tenants resolved in parallel
                while a login searches every tenant
            warning_log: Receives advisories for the caller
            probe: Optional domain probe for observability
            resolver_probe: Optional probe for the subscription resolver
        """
        if max_concurrent_tenant_lookups < 1:
            raise InvalidArgumentError("max_concurrent_tenant_lookups must be >= 1")

        self._profile_store = profile_store
        self._credential_service = credential_service
        self._directory_service = directory_service
        self._subscription_service = subscription_service
        self._token_cache = token_cache
        self._credential_store = credential_store
        self._max_concurrent_tenant_lookups = max_concurrent_tenant_lookups
        self._probe = probe or DefaultProfileClientProbe()
        self._resolver = TenantSubscriptionResolver(
            subscription_service,
            warning_sink=self._warn,
            probe=resolver_probe,
        )
        # Acquisitions merge into the shared token cache one at a time
        self._acquire_lock = asyncio.Lock()
        self.warning_log = warning_log

        self._restore_token_cache()

    @property
    def context(self) -> Context | None:
        """The active context, or None before the first login."""
        return self._profile_store.context

    async def login(
        self,
        account: Account,
        environment: Environment,
        tenant_id: str | None = None,
        subscription_id: str | None = None,
        subscription_name: str | None = None,
        secret: str | None = None,
    ) -> Context:
        """Resolve and commit a new active context for ``account``.

        With a tenant, one credential is acquired for it and resolved once.
        Without one, every tenant the account can see is tried: the first
        tenant in enumeration order holding a matching subscription wins,
        and tenants whose authentication fails are skipped with an advisory.

        Args:
            account: The account to log in
            environment: Environment to log in to
            tenant_id: Tenant id or domain to restrict the login to
            subscription_id: Subscription to select, takes precedence over name
            subscription_name: Subscription display name to select
            secret: Password or client secret; disables interactive prompts

        Returns:
            The committed Context

        Raises:
            SubscriptionNotFoundError: If a subscription id or name was given
                and no tenant holds it
            AuthenticationFailedError: If authentication against the given
                tenant, or the common tenant, fails
        """
        self._probe.login_started(
            account_id=account.id,
            environment=environment.name,
            tenant_id=tenant_id,
            subscription_id=subscription_id,
            subscription_name=subscription_name,
        )

        if (
            secret is None
            and account.type != AccountType.ACCESS_TOKEN
            and not account.is_certificate_bound
        ):
            prompt_behavior = PromptBehavior.ALWAYS
        else:
            prompt_behavior = PromptBehavior.NEVER

        if tenant_id:
            credential = await self._acquire_access_token(
                account, environment, tenant_id, secret, prompt_behavior
            )
            result = await self._resolver.resolve(
                credential,
                account,
                environment,
                tenant_id,
                subscription_id,
                subscription_name,
            )
        else:
            result = await self._search_tenants(
                account,
                environment,
                secret,
                prompt_behavior,
                subscription_id,
                subscription_name,
            )

        if result.subscription is None:
            if subscription_id is not None:
                self._probe.subscription_not_found(
                    account_id=account.id, identifier=subscription_id
                )
                raise SubscriptionNotFoundError(account.id, subscription_id)
            if subscription_name is not None:
                self._probe.subscription_not_found(
                    account_id=account.id, identifier=subscription_name
                )
                raise SubscriptionNotFoundError(
                    account.id, subscription_name, by_name=True
                )

            context = Context(
                account=result.account or account,
                environment=environment,
                tenant=result.tenant,
            )
        else:
            context = Context(
                account=result.account or account,
                environment=environment,
                subscription=result.subscription,
                tenant=result.tenant,
            )

        return self._commit(context)

    async def set_current_tenant(self, tenant_id: str) -> Context:
        """Switch the active context to a tenant.

        Selects the first subscription reachable in the tenant; when there is
        none the context becomes tenant-only, keeping account and environment.

        Args:
            tenant_id: Tenant id or domain

        Returns:
            The committed Context
        """
        if not tenant_id or not tenant_id.strip():
            raise InvalidArgumentError("Please provide a tenant id or domain")
        tenant_id = tenant_id.strip()

        subscriptions = await self.list_subscriptions(tenant_id)
        if subscriptions:
            return self.switch_subscription(subscriptions[0])

        current = self._require_context()
        context = Context(
            account=current.account.with_tenant(tenant_id),
            environment=current.environment,
            tenant=Tenant.from_id_or_domain(tenant_id),
        )
        return self._commit(context)

    async def set_current_context(
        self,
        tenant_id: str | None,
        subscription_id: str | None = None,
        subscription_name: str | None = None,
    ) -> Context:
        """Switch the active context to a subscription given by id or name.

        Exactly one of ``subscription_id`` and ``subscription_name`` must be
        given. The lookup reuses the standing account and environment and
        never prompts.

        Args:
            tenant_id: Tenant to search, or None to search every tenant
            subscription_id: Subscription id to select
            subscription_name: Subscription display name to select

        Returns:
            The committed Context

        Raises:
            InvalidArgumentError: If not exactly one selector is given, or the
                subscription does not exist
        """
        has_id = bool(subscription_id and subscription_id.strip())
        has_name = bool(subscription_name and subscription_name.strip())
        if has_id == has_name:
            raise InvalidArgumentError(
                "Please provide either subscription_id or subscription_name"
            )

        if has_id:
            subscription = await self.try_get_subscription_by_id(
                tenant_id, subscription_id
            )
            subscription_filter = subscription_id
        else:
            subscription = await self.try_get_subscription_by_name(
                tenant_id, subscription_name
            )
            subscription_filter = subscription_name

        if subscription is None:
            raise InvalidArgumentError(
                f"Provided subscription {subscription_filter} does not exist"
            )

        return self.switch_subscription(subscription)

    def switch_subscription(self, subscription: Subscription) -> Context:
        """Make ``subscription`` the active subscription without a remote fetch.

        The new subscription is copied from the current one with the target's
        id and name, so ownership fields are not refreshed from the server.

        Args:
            subscription: Target subscription; must carry a tenant affiliation

        Returns:
            The committed Context
        """
        tenant_id = subscription.tenant_affiliation
        if not tenant_id:
            raise InvalidArgumentError(
                f"Subscription {subscription.id} is not affiliated with a tenant"
            )

        current = self._require_context()

        if current.subscription is not None:
            new_subscription = replace(
                current.subscription,
                id=subscription.id,
                name=subscription.name,
                tenant_affiliation=tenant_id,
            )
        else:
            new_subscription = subscription.with_tenant(tenant_id)

        context = Context(
            account=current.account.with_tenant(tenant_id),
            environment=current.environment,
            subscription=new_subscription,
            tenant=Tenant.from_id_or_domain(tenant_id),
        )
        return self._commit(context)

    async def list_tenants(self, tenant_filter: str | None = None) -> list[Tenant]:
        """List the tenants of the active account.

        Args:
            tenant_filter: Tenant id or domain to keep (case-insensitive)

        Returns:
            Tenants in the order the directory reports them
        """
        current = self._require_context()
        tenants = await self._list_account_tenants(
            current.account, current.environment, None, PromptBehavior.AUTO
        )
        if tenant_filter is None:
            return tenants
        return [t for t in tenants if t.matches(tenant_filter)]

    async def list_subscriptions(
        self, tenant_id: str | None = None
    ) -> list[Subscription]:
        """List subscriptions of the active account.

        Args:
            tenant_id: Tenant to list, or None (or blank) for every tenant.
                When listing every tenant, tenants whose authentication fails
                are skipped with an advisory.

        Returns:
            Subscriptions affiliated with the tenant they were listed in
        """
        current = self._require_context()

        if tenant_id and tenant_id.strip():
            return await self._list_subscriptions_for_tenant(
                current.account, current.environment, tenant_id.strip()
            )

        subscriptions: list[Subscription] = []
        tenants = await self._list_account_tenants(
            current.account, current.environment, None, PromptBehavior.NEVER
        )
        for tenant in tenants:
            tenant_key = str(tenant)
            try:
                subscriptions.extend(
                    await self._list_subscriptions_for_tenant(
                        current.account, current.environment, tenant_key
                    )
                )
            except AuthenticationFailedError as e:
                self._probe.tenant_authentication_failed(tenant_id=tenant_key, error=e)
                self._warn(
                    f"Could not authenticate user account {current.account} with "
                    f"tenant {tenant_key}. Subscriptions in this tenant will not "
                    "be listed. Please log in again to view the subscriptions in "
                    "this tenant."
                )
        return subscriptions

    async def try_get_subscription_by_id(
        self, tenant_id: str | None, subscription_id: str
    ) -> Subscription | None:
        """Find a subscription by id, or None.

        Ids that are not GUIDs never match and cause no remote call.
        """
        if not is_guid(subscription_id):
            return None
        subscriptions = await self.list_subscriptions(tenant_id)
        return next((s for s in subscriptions if s.has_id(subscription_id)), None)

    async def try_get_subscription_by_name(
        self, tenant_id: str | None, subscription_name: str
    ) -> Subscription | None:
        """Find a subscription by display name (case-insensitive), or None."""
        subscriptions = await self.list_subscriptions(tenant_id)
        return next(
            (s for s in subscriptions if s.has_name(subscription_name)), None
        )

    async def acquire_access_token(self, tenant_id: str) -> Credential:
        """Acquire a credential for the active account in another tenant.

        Prompts only when no cached credential can be used silently.
        """
        current = self._require_context()
        return await self._acquire_access_token(
            current.account, current.environment, tenant_id, None, PromptBehavior.AUTO
        )

    async def _search_tenants(
        self,
        account: Account,
        environment: Environment,
        secret: str | None,
        prompt_behavior: PromptBehavior,
        subscription_id: str | None,
        subscription_name: str | None,
    ) -> ResolutionResult:
        """Resolve against every tenant of the account, first tenant wins.

        Up to ``max_concurrent_tenant_lookups`` tenants are resolved at once.
        The result kept is the one at the lowest enumeration index holding a
        subscription, falling back to the lowest index that found a tenant.
        Every tenant still gets a credential, which warms the token cache,
        but resolution is skipped once an earlier tenant produced a
        subscription since it could not change the outcome.
        """
        tenants = await self._list_account_tenants(
            account, environment, secret, prompt_behavior
        )
        results: list[ResolutionResult | None] = [None] * len(tenants)
        semaphore = asyncio.Semaphore(self._max_concurrent_tenant_lookups)

        async def attempt(index: int, tenant_id: str) -> None:
            async with semaphore:
                try:
                    credential = await self._acquire_access_token(
                        account, environment, tenant_id, secret, PromptBehavior.AUTO
                    )
                except AuthenticationFailedError as e:
                    self._probe.tenant_authentication_failed(tenant_id=tenant_id, error=e)
                    self._warn(
                        f"Could not authenticate account {account} with tenant "
                        f"{tenant_id}; the tenant was skipped. {e}"
                    )
                    return
                if any(r is not None and r.has_subscription for r in results[:index]):
                    return
                results[index] = await self._resolver.resolve(
                    credential,
                    account,
                    environment,
                    tenant_id,
                    subscription_id,
                    subscription_name,
                )

        outcomes = await asyncio.gather(
            *(attempt(i, str(t)) for i, t in enumerate(tenants)),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

        found = [r for r in results if r is not None and r.found]
        selected = next((r for r in found if r.has_subscription), None)
        if selected is None:
            selected = found[0] if found else ResolutionResult.not_found()

        if selected.tenant is not None:
            self._probe.tenant_resolved(
                tenant_id=str(selected.tenant),
                subscription_id=selected.subscription.id if selected.subscription else None,
            )
        return selected

    async def _list_account_tenants(
        self,
        account: Account,
        environment: Environment,
        secret: str | None,
        prompt_behavior: PromptBehavior,
    ) -> list[Tenant]:
        """List tenants using a credential for the common tenant."""
        credential = await self._acquire_access_token(
            account, environment, COMMON_TENANT, secret, prompt_behavior
        )
        tenant_ids = await self._directory_service.list_tenants(credential, environment)
        self._probe.tenants_enumerated(account_id=account.id, count=len(tenant_ids))
        return [Tenant(id=tid, domain=credential.domain) for tid in tenant_ids]

    async def _list_subscriptions_for_tenant(
        self,
        account: Account,
        environment: Environment,
        tenant_id: str,
    ) -> list[Subscription]:
        credential = await self._acquire_access_token(
            account, environment, tenant_id, None, PromptBehavior.NEVER
        )
        infos = await self._subscription_service.list_subscriptions(
            credential, environment
        )
        return [
            Subscription(
                id=info.subscription_id,
                name=info.display_name,
                account_id=account.id,
                environment_name=environment.name,
                tenant_affiliation=tenant_id,
            )
            for info in infos
        ]

    async def _acquire_access_token(
        self,
        account: Account,
        environment: Environment,
        tenant_id: str | None,
        secret: str | None,
        prompt_behavior: PromptBehavior,
    ) -> Credential:
        """Acquire a credential, wrapping raw tokens of ACCESS_TOKEN accounts."""
        tenant_id = tenant_id or COMMON_TENANT

        if account.type == AccountType.ACCESS_TOKEN:
            if not account.access_token:
                raise AuthenticationFailedError(
                    f"Account '{account.id}' has no access token", tenant_id=tenant_id
                )
            return Credential(
                access_token=account.access_token,
                user_id=account.id,
                tenant_id=tenant_id,
            )

        async with self._acquire_lock:
            return await self._credential_service.acquire(
                account,
                environment,
                tenant_id,
                secret=secret,
                prompt_behavior=prompt_behavior,
                token_cache=self._token_cache,
            )

    def _commit(self, context: Context) -> Context:
        """Snapshot the token cache onto ``context`` and make it active."""
        data = self._token_cache.serialize()
        committed = self._profile_store.set_context(context.with_token_cache(data))

        if self._credential_store is not None:
            self._credential_store.save(data)
            self._probe.credential_cache_saved(size=len(data))

        self._probe.context_committed(
            account_id=committed.account.id,
            tenant_id=committed.tenant_id,
            subscription_id=committed.subscription.id if committed.subscription else None,
        )
        return committed

    def _restore_token_cache(self) -> None:
        snapshots: list[tuple[str, bytes]] = []
        if self._credential_store is not None:
            stored = self._credential_store.load()
            if stored:
                snapshots.append(("credential_store", stored))

        current = self._profile_store.context
        if current is not None and current.token_cache:
            snapshots.append(("context", current.token_cache))

        # An unreadable snapshot is treated as absent; the next commit overwrites it
        for source, data in snapshots:
            try:
                self._token_cache.merge_from(data)
            except TokenCacheCorruptedError as e:
                self._probe.credential_cache_discarded(source=source, reason=str(e))
                continue
            self._probe.credential_cache_loaded(size=len(data))

    def _require_context(self) -> Context:
        current = self._profile_store.context
        if current is None:
            raise NoActiveContextError(
                "No active context; log in before switching or listing"
            )
        return current

    def _warn(self, message: str) -> None:
        self._probe.advisory_emitted(message=message)
        if self.warning_log is not None:
            self.warning_log(message)
