"""Aggregates for the profiles domain."""

from profiles.domain.aggregates.account import Account
from profiles.domain.aggregates.context import Context
from profiles.domain.aggregates.environment import (
    PUBLIC_ENVIRONMENTS,
    Environment,
    is_public_environment,
)
from profiles.domain.aggregates.subscription import Subscription
from profiles.domain.aggregates.tenant import Tenant

__all__ = [
    "Account",
    "Context",
    "Environment",
    "PUBLIC_ENVIRONMENTS",
    "Subscription",
    "Tenant",
    "is_public_environment",
]
