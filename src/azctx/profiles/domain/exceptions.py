"""Domain exceptions for the profiles bounded context.

These exceptions represent violations of domain rules. They are raised by
domain objects and application services and should be surfaced to the
caller with the offending identifier in the message.
"""


class InvalidArgumentError(ValueError):
    """Raised when a caller supplies missing or conflicting arguments.

    Examples are switching context without naming a subscription, or
    merging two environments whose names differ.
    """

    pass


class EnvironmentPolicyViolationError(Exception):
    """Raised when attempting to replace or remove a public environment.

    Public environments are well-known cloud deployments shipped with the
    client. They can be read but never redefined or deleted.
    """

    pass
