"""Application services for the profiles bounded context."""

from profiles.application.services.environment_service import EnvironmentService
from profiles.application.services.profile_client import ProfileClient
from profiles.application.services.tenant_subscription_resolver import (
    TenantSubscriptionResolver,
)

__all__ = [
    "EnvironmentService",
    "ProfileClient",
    "TenantSubscriptionResolver",
]
