"""Tenant subscription resolver for the profiles bounded context.

Given a credential scoped to one tenant, selects the subscription a login
should use in that tenant and builds the resulting tenant and subscription
records.
"""

from __future__ import annotations

from profiles.application.observability import (
    DefaultSubscriptionResolverProbe,
    SubscriptionResolverProbe,
)
from profiles.application.value_objects import ResolutionResult, WarningSink
from profiles.domain.aggregates import Account, Environment, Subscription, Tenant
from profiles.domain.value_objects import Credential, SubscriptionInfo
from profiles.ports.exceptions import RemoteServiceError
from profiles.ports.services import ISubscriptionService


class TenantSubscriptionResolver:
    """Selects one subscription within one tenant.

    Selection rules, in priority order:
    1. An explicit subscription id is fetched directly
    2. An explicit display name is matched case-insensitively, first match wins
    3. Otherwise the first subscription listed is taken, with an advisory
       when the tenant holds more than one

    Remote failures are not fatal here: they are reported as an advisory
    and the tenant is treated as having no matching subscription.
    """

    def __init__(
        self,
        subscription_service: ISubscriptionService,
        warning_sink: WarningSink | None = None,
        probe: SubscriptionResolverProbe | None = None,
    ):
        """Initialize TenantSubscriptionResolver with dependencies.

        Args:
            subscription_service: Remote subscription lookup
            warning_sink: Receives advisories for the caller
            probe: Optional domain probe for observability
        """
        self._subscription_service = subscription_service
        self._warning_sink = warning_sink
        self._probe = probe or DefaultSubscriptionResolverProbe()

    async def resolve(
        self,
        credential: Credential | None,
        account: Account,
        environment: Environment,
        tenant_id: str,
        subscription_id: str | None = None,
        subscription_name: str | None = None,
    ) -> ResolutionResult:
        """Resolve the tenant and subscription reachable with ``credential``.

        Args:
            credential: Credential scoped to the tenant, None if none was obtained
            account: The account being resolved
            environment: Environment the subscription lives in
            tenant_id: Tenant the credential was requested for
            subscription_id: Explicit subscription id, takes precedence over name
            subscription_name: Explicit subscription display name

        Returns:
            ResolutionResult. ``found`` is True with a subscription on a match,
            True without one when only the tenant is known, False when the
            credential is unusable.
        """
        if credential is None:
            return ResolutionResult.not_found()

        selected = await self._select(
            credential, environment, tenant_id, subscription_id, subscription_name
        )

        if selected is not None:
            affiliation = credential.tenant_id or tenant_id
            subscription = Subscription(
                id=selected.subscription_id,
                name=selected.display_name,
                account_id=account.id,
                environment_name=environment.name,
                tenant_affiliation=affiliation,
            )
            if credential.tenant_id:
                tenant = Tenant(id=credential.tenant_id, domain=credential.domain)
            else:
                tenant = Tenant.from_id_or_domain(tenant_id)

            self._probe.subscription_resolved(
                tenant_id=affiliation, subscription_id=subscription.id
            )
            return ResolutionResult(
                found=True,
                subscription=subscription,
                tenant=tenant,
                account=account.with_tenant(affiliation),
            )

        self._probe.no_subscription_matched(tenant_id=tenant_id)

        if credential.tenant_id:
            return ResolutionResult(
                found=True,
                tenant=Tenant(id=credential.tenant_id, domain=credential.strict_domain),
                account=account,
            )

        return ResolutionResult.not_found()

    async def _select(
        self,
        credential: Credential,
        environment: Environment,
        tenant_id: str,
        subscription_id: str | None,
        subscription_name: str | None,
    ) -> SubscriptionInfo | None:
        """Pick the subscription from the remote service, or None."""
        try:
            if subscription_id is not None:
                return await self._subscription_service.get_subscription(
                    credential, environment, subscription_id
                )

            subscriptions = await self._subscription_service.list_subscriptions(
                credential, environment
            )
        except RemoteServiceError as e:
            self._probe.subscription_lookup_failed(
                tenant_id=tenant_id,
                subscription_id=subscription_id or subscription_name or "",
                error=e,
            )
            self._warn(str(e))
            return None

        if not subscriptions:
            return None

        if subscription_name is not None:
            folded = subscription_name.casefold()
            return next(
                (s for s in subscriptions if s.display_name.casefold() == folded),
                None,
            )

        first = subscriptions[0]
        if len(subscriptions) > 1:
            self._probe.default_subscription_selected(
                tenant_id=tenant_id,
                subscription_id=first.subscription_id,
                candidates=len(subscriptions),
            )
            self._warn(
                f"Tenant '{tenant_id}' contains more than one subscription. "
                "First one will be selected for further use. To select another "
                "subscription, set the current context explicitly."
            )
        return first

    def _warn(self, message: str) -> None:
        if self._warning_sink is not None:
            self._warning_sink(message)
