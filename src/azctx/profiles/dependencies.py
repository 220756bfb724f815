"""Composition root for the profiles bounded context.

Wires settings, stores and the Azure adapters into the application
services. Callers that need different collaborators construct
ProfileClient directly.
"""

from __future__ import annotations

from functools import lru_cache

from infrastructure.logging import configure_logging
from infrastructure.settings import ProfileSettings, get_profile_settings
from profiles.application.services import EnvironmentService, ProfileClient
from profiles.application.value_objects import WarningSink
from profiles.domain.aggregates import Environment
from profiles.ports.exceptions import EnvironmentNotFoundError
from profiles.infrastructure.credential_store import FileCredentialStore
from profiles.infrastructure.msal_credential_service import MsalCredentialService
from profiles.infrastructure.profile_store import InMemoryProfileStore
from profiles.infrastructure.subscription_client import (
    AzureDirectoryService,
    AzureSubscriptionService,
)
from profiles.infrastructure.token_cache import MsalTokenCache


@lru_cache
def get_profile_store() -> InMemoryProfileStore:
    """Get the process-wide profile store."""
    return InMemoryProfileStore()


def get_environment_service() -> EnvironmentService:
    """Get an EnvironmentService over the shared profile store."""
    return EnvironmentService(get_profile_store())


def get_default_environment(settings: ProfileSettings | None = None) -> Environment:
    """Get the environment named by settings.

    Raises:
        EnvironmentNotFoundError: If no environment with that name is registered
    """
    settings = settings or get_profile_settings()
    environment = get_environment_service().get_environment(
        settings.default_environment
    )
    if environment is None:
        raise EnvironmentNotFoundError(
            f"Default environment '{settings.default_environment}' is not registered"
        )
    return environment


def get_profile_client(
    settings: ProfileSettings | None = None,
    warning_log: WarningSink | None = None,
) -> ProfileClient:
    """Build a ProfileClient backed by MSAL and Azure Resource Manager.

    Configures logging, restores the token cache from the configured file
    and shares the process-wide profile store.

    Args:
        settings: Settings to use instead of the cached environment settings
        warning_log: Receives advisories for the caller
    """
    settings = settings or get_profile_settings()
    configure_logging()

    return ProfileClient(
        profile_store=get_profile_store(),
        credential_service=MsalCredentialService(
            client_id=settings.client_id,
            interactive_timeout=settings.interactive_login_timeout,
        ),
        directory_service=AzureDirectoryService(),
        subscription_service=AzureSubscriptionService(),
        token_cache=MsalTokenCache(),
        credential_store=FileCredentialStore(settings.token_cache_path),
        max_concurrent_tenant_lookups=settings.max_concurrent_tenant_lookups,
        warning_log=warning_log,
    )
