"""Domain-Oriented Observability for profiles infrastructure.

Probes for adapter operations following Domain-Oriented Observability patterns.
"""

from profiles.infrastructure.observability.adapter_probe import (
    CredentialServiceProbe,
    DefaultCredentialServiceProbe,
    DefaultSubscriptionClientProbe,
    SubscriptionClientProbe,
)

__all__ = [
    "CredentialServiceProbe",
    "DefaultCredentialServiceProbe",
    "SubscriptionClientProbe",
    "DefaultSubscriptionClientProbe",
]
