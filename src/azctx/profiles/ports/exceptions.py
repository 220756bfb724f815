"""Port exceptions for the profiles bounded context.

These exceptions are raised by remote service adapters and by the
application services when a request cannot be fulfilled. Rule violations
detected by domain objects live in profiles.domain.exceptions.
"""

from profiles.domain.exceptions import InvalidArgumentError


class SubscriptionNotFoundError(Exception):
    """Raised when an explicitly requested subscription matches nothing.

    Carries the account that searched and the id or name it asked for so
    the caller can report both.
    """

    def __init__(self, account_id: str, identifier: str, *, by_name: bool = False):
        self.account_id = account_id
        self.identifier = identifier
        self.by_name = by_name
        kind = "name" if by_name else "id"
        super().__init__(
            f"Subscription {kind} '{identifier}' was not found "
            f"for account '{account_id}'"
        )


class AuthenticationFailedError(Exception):
    """Raised when the directory rejects an account for a tenant.

    During the multi-tenant search of a login this is recovered locally
    (the tenant is skipped with an advisory); everywhere else it aborts
    the operation.
    """

    def __init__(self, message: str, *, tenant_id: str | None = None):
        self.tenant_id = tenant_id
        super().__init__(message)


class RemoteServiceError(Exception):
    """Raised on transport or authorization failures of a remote service.

    Best-effort lookups treat this as "not found"; it propagates when the
    failing call is the only way to satisfy the request.
    """

    def __init__(self, message: str, *, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class NoActiveContextError(Exception):
    """Raised when an operation needs the active context before any login."""

    pass


class EnvironmentNotFoundError(InvalidArgumentError):
    """Raised when removing an environment that is not registered."""

    pass


class TokenCacheCorruptedError(Exception):
    """Raised when a serialized token cache snapshot cannot be read.

    The snapshot is not UTF-8 JSON, or its top level is not an object.
    """

    pass
