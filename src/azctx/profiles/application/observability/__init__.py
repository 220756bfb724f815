"""Domain-Oriented Observability for the profiles application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from profiles.application.observability.environment_service_probe import (
    DefaultEnvironmentServiceProbe,
    EnvironmentServiceProbe,
)
from profiles.application.observability.profile_client_probe import (
    DefaultProfileClientProbe,
    ProfileClientProbe,
)
from profiles.application.observability.subscription_resolver_probe import (
    DefaultSubscriptionResolverProbe,
    SubscriptionResolverProbe,
)

__all__ = [
    "EnvironmentServiceProbe",
    "DefaultEnvironmentServiceProbe",
    "ProfileClientProbe",
    "DefaultProfileClientProbe",
    "SubscriptionResolverProbe",
    "DefaultSubscriptionResolverProbe",
]
