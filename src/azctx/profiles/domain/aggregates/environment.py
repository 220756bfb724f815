"""Environment aggregate for the profiles context.

An environment names one cloud deployment (public cloud, sovereign clouds,
Azure Stack instances) and the endpoints used to talk to it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from profiles.domain.exceptions import InvalidArgumentError
from profiles.domain.value_objects import Endpoint


@dataclass(frozen=True)
class Environment:
    """A named set of service endpoints.

    The name is the identity of an environment and is compared
    case-insensitively. Endpoint maps are replaced, never mutated: merging
    builds a new Environment.
    """

    name: str
    endpoints: dict[Endpoint, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidArgumentError("Environment name must not be empty")

    def __str__(self) -> str:
        return self.name

    def get_endpoint(self, endpoint: Endpoint) -> str | None:
        """Get an endpoint URL, or None if the environment does not define it."""
        return self.endpoints.get(endpoint)

    def has_name(self, name: str | None) -> bool:
        """Check whether this environment is identified by ``name``."""
        return name is not None and self.name.casefold() == name.casefold()

    @property
    def is_public(self) -> bool:
        """Whether this is one of the well-known public environments."""
        return is_public_environment(self.name)

    def merge(self, previous: Environment) -> Environment:
        """Merge this environment's endpoints over a previous definition.

        For every endpoint the value from ``self`` wins; endpoints only the
        previous definition knows are kept, so merging never drops one.

        Args:
            previous: The stored definition with the same name

        Returns:
            A new Environment carrying this environment's name

        Raises:
            InvalidArgumentError: If the environment names differ
        """
        if not self.has_name(previous.name):
            raise InvalidArgumentError(
                f"Environment names do not match: '{self.name}' and '{previous.name}'"
            )

        merged: dict[Endpoint, str] = {}
        for endpoint in Endpoint:
            value = self.get_endpoint(endpoint)
            if value is None:
                value = previous.get_endpoint(endpoint)
            if value is not None:
                merged[endpoint] = value

        return Environment(name=self.name, endpoints=merged)


AZURE_CLOUD = "AzureCloud"
AZURE_CHINA_CLOUD = "AzureChinaCloud"
AZURE_US_GOVERNMENT = "AzureUSGovernment"
AZURE_GERMAN_CLOUD = "AzureGermanCloud"

PUBLIC_ENVIRONMENTS: dict[str, Environment] = {
    AZURE_CLOUD: Environment(
        name=AZURE_CLOUD,
        endpoints={
            Endpoint.ACTIVE_DIRECTORY: "https://login.microsoftonline.com/",
            Endpoint.ACTIVE_DIRECTORY_RESOURCE_ID: "https://management.core.windows.net/",
            Endpoint.RESOURCE_MANAGER: "https://management.azure.com/",
            Endpoint.GALLERY: "https://gallery.azure.com/",
            Endpoint.GRAPH: "https://graph.windows.net/",
            Endpoint.MANAGEMENT_PORTAL: "https://portal.azure.com/",
        },
    ),
    AZURE_CHINA_CLOUD: Environment(
        name=AZURE_CHINA_CLOUD,
        endpoints={
            Endpoint.ACTIVE_DIRECTORY: "https://login.chinacloudapi.cn/",
            Endpoint.ACTIVE_DIRECTORY_RESOURCE_ID: "https://management.core.chinacloudapi.cn/",
            Endpoint.RESOURCE_MANAGER: "https://management.chinacloudapi.cn/",
            Endpoint.GALLERY: "https://gallery.chinacloudapi.cn/",
            Endpoint.GRAPH: "https://graph.chinacloudapi.cn/",
            Endpoint.MANAGEMENT_PORTAL: "https://portal.azure.cn/",
        },
    ),
    AZURE_US_GOVERNMENT: Environment(
        name=AZURE_US_GOVERNMENT,
        endpoints={
            Endpoint.ACTIVE_DIRECTORY: "https://login.microsoftonline.us/",
            Endpoint.ACTIVE_DIRECTORY_RESOURCE_ID: "https://management.core.usgovcloudapi.net/",
            Endpoint.RESOURCE_MANAGER: "https://management.usgovcloudapi.net/",
            Endpoint.GALLERY: "https://gallery.usgovcloudapi.net/",
            Endpoint.GRAPH: "https://graph.windows.net/",
            Endpoint.MANAGEMENT_PORTAL: "https://portal.azure.us/",
        },
    ),
    AZURE_GERMAN_CLOUD: Environment(
        name=AZURE_GERMAN_CLOUD,
        endpoints={
            Endpoint.ACTIVE_DIRECTORY: "https://login.microsoftonline.de/",
            Endpoint.ACTIVE_DIRECTORY_RESOURCE_ID: "https://management.core.cloudapi.de/",
            Endpoint.RESOURCE_MANAGER: "https://management.microsoftazure.de/",
            Endpoint.GALLERY: "https://gallery.cloudapi.de/",
            Endpoint.GRAPH: "https://graph.cloudapi.de/",
            Endpoint.MANAGEMENT_PORTAL: "https://portal.microsoftazure.de/",
        },
    ),
}


def is_public_environment(name: str | None) -> bool:
    """Check whether ``name`` identifies a public environment (case-insensitive)."""
    if not name:
        return False
    folded = name.casefold()
    return any(key.casefold() == folded for key in PUBLIC_ENVIRONMENTS)
