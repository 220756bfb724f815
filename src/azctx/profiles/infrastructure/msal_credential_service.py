"""MSAL implementation of ICredentialService.

User accounts authenticate through a public client application: silently
from the token cache when possible, otherwise with the supplied password
or an interactive browser login. Service principals and certificate-bound
principals authenticate through a confidential client application.

MSAL is synchronous, so every acquisition runs on a worker thread.
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Any

import msal

from profiles.domain.aggregates import Account, Environment
from profiles.domain.value_objects import (
    COMMON_TENANT,
    AccountType,
    Credential,
    Endpoint,
    PromptBehavior,
)
from profiles.infrastructure.observability import (
    CredentialServiceProbe,
    DefaultCredentialServiceProbe,
)
from profiles.ports.exceptions import AuthenticationFailedError
from profiles.ports.repositories import ITokenCache
from profiles.ports.services import ICredentialService


class MsalCredentialService(ICredentialService):
    """Acquires credentials from the environment's directory using MSAL."""

    def __init__(
        self,
        client_id: str,
        interactive_timeout: int | None = None,
        probe: CredentialServiceProbe | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            client_id: Public client id used for user logins
            interactive_timeout: Seconds to wait for an interactive login
            probe: Optional domain probe for observability
        """
        self._client_id = client_id
        self._interactive_timeout = interactive_timeout
        self._probe = probe or DefaultCredentialServiceProbe()

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
        return await asyncio.to_thread(
            self._acquire_sync,
            account,
            environment,
            tenant_id,
            secret,
            prompt_behavior,
            token_cache,
        )

    def _acquire_sync(
        self,
        account: Account,
        environment: Environment,
        tenant_id: str,
        secret: str | None,
        prompt_behavior: PromptBehavior,
        token_cache: ITokenCache,
    ) -> Credential:
        authority = self._authority(environment, tenant_id)
        scopes = [self._scope(environment)]

        # MSAL works on its own cache; bridge through the shared one
        msal_cache = msal.SerializableTokenCache()
        msal_cache.deserialize(token_cache.serialize().decode("utf-8"))

        if account.type == AccountType.USER:
            result, flow = self._acquire_for_user(
                account, tenant_id, authority, scopes, secret, prompt_behavior, msal_cache
            )
        else:
            result, flow = self._acquire_for_principal(
                account, tenant_id, authority, scopes, secret, msal_cache
            )

        if not result or "access_token" not in result:
            error = _describe_error(result)
            self._probe.credential_acquisition_failed(
                account_id=account.id, tenant_id=tenant_id, error=error
            )
            raise AuthenticationFailedError(
                f"Authentication of '{account.id}' with tenant '{tenant_id}' "
                f"failed: {error}",
                tenant_id=tenant_id,
            )

        if msal_cache.has_state_changed:
            token_cache.merge_from(msal_cache.serialize().encode("utf-8"))

        self._probe.credential_acquired(
            account_id=account.id, tenant_id=tenant_id, flow=flow
        )
        return _to_credential(result, account, tenant_id)

    def _acquire_for_user(
        self,
        account: Account,
        tenant_id: str,
        authority: str,
        scopes: list[str],
        secret: str | None,
        prompt_behavior: PromptBehavior,
        msal_cache: msal.SerializableTokenCache,
    ) -> tuple[dict[str, Any] | None, str]:
        try:
            app = msal.PublicClientApplication(
                self._client_id, authority=authority, token_cache=msal_cache
            )
        except ValueError as e:
            raise _authority_rejected(account, tenant_id, e) from e

        if prompt_behavior != PromptBehavior.ALWAYS:
            cached = app.get_accounts(username=account.id)
            if cached:
                result = app.acquire_token_silent(scopes, account=cached[0])
                if result and "access_token" in result:
                    return result, "silent"

        if secret is not None:
            return (
                app.acquire_token_by_username_password(account.id, secret, scopes),
                "username_password",
            )

        if prompt_behavior == PromptBehavior.NEVER:
            return (
                {
                    "error": "interaction_required",
                    "error_description": "No cached credential and prompting is disabled",
                },
                "silent",
            )

        return (
            app.acquire_token_interactive(
                scopes,
                login_hint=account.id,
                prompt=(
                    msal.Prompt.SELECT_ACCOUNT
                    if prompt_behavior == PromptBehavior.ALWAYS
                    else None
                ),
                timeout=self._interactive_timeout,
            ),
            "interactive",
        )

    def _acquire_for_principal(
        self,
        account: Account,
        tenant_id: str,
        authority: str,
        scopes: list[str],
        secret: str | None,
        msal_cache: msal.SerializableTokenCache,
    ) -> tuple[dict[str, Any] | None, str]:
        if account.is_certificate_bound:
            if not account.certificate_path:
                raise AuthenticationFailedError(
                    f"Certificate account '{account.id}' has no certificate path",
                    tenant_id=tenant_id,
                )
            client_credential: Any = {
                "thumbprint": account.certificate_thumbprint,
                "private_key": Path(account.certificate_path).read_text(),
            }
        elif secret is not None:
            client_credential = secret
        else:
            raise AuthenticationFailedError(
                f"Service principal '{account.id}' requires a client secret",
                tenant_id=tenant_id,
            )

        try:
            app = msal.ConfidentialClientApplication(
                account.id,
                client_credential=client_credential,
                authority=authority,
                token_cache=msal_cache,
            )
        except ValueError as e:
            raise _authority_rejected(account, tenant_id, e) from e
        return app.acquire_token_for_client(scopes), "client_credentials"

    @staticmethod
    def _authority(environment: Environment, tenant_id: str) -> str:
        base = environment.get_endpoint(Endpoint.ACTIVE_DIRECTORY)
        if not base:
            raise AuthenticationFailedError(
                f"Environment '{environment.name}' has no active directory endpoint",
                tenant_id=tenant_id,
            )
        return base.rstrip("/") + "/" + (tenant_id or COMMON_TENANT)

    @staticmethod
    def _scope(environment: Environment) -> str:
        resource = environment.get_endpoint(
            Endpoint.ACTIVE_DIRECTORY_RESOURCE_ID
        ) or environment.get_endpoint(Endpoint.RESOURCE_MANAGER)
        if not resource:
            raise AuthenticationFailedError(
                f"Environment '{environment.name}' has no resource id to request"
            )
        return resource.rstrip("/") + "/.default"


def _authority_rejected(
    account: Account, tenant_id: str, error: ValueError
) -> AuthenticationFailedError:
    # MSAL validates the authority on construction and raises ValueError for
    # a tenant the directory does not know
    return AuthenticationFailedError(
        f"Tenant '{tenant_id}' rejected account '{account.id}': {error}",
        tenant_id=tenant_id,
    )


def _describe_error(result: dict[str, Any] | None) -> str:
    if not result:
        return "no token returned"
    error = result.get("error", "unknown_error")
    description = result.get("error_description")
    return f"{error}: {description}" if description else error


def _to_credential(
    result: dict[str, Any], account: Account, tenant_id: str
) -> Credential:
    claims = result.get("id_token_claims") or {}
    user_id = claims.get("preferred_username") or claims.get("upn") or account.id

    resolved_tenant = claims.get("tid")
    if resolved_tenant is None and tenant_id != COMMON_TENANT:
        resolved_tenant = tenant_id

    expires_in = result.get("expires_in")
    expires_on = int(time.time()) + int(expires_in) if expires_in else None

    return Credential(
        access_token=result["access_token"],
        user_id=user_id,
        tenant_id=resolved_tenant,
        expires_on=expires_on,
    )
