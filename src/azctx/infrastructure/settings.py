"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for interactive use. Automation should set all values explicitly.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Public client id registered for Azure PowerShell; usable by any first-party
# style login that has no app registration of its own.
AZURE_POWERSHELL_CLIENT_ID = "1950a258-227b-4e31-a9cf-717495945fc2"


def _default_token_cache_path() -> Path:
    return Path.home() / ".azure" / "azctx" / "token_cache.bin"


class ProfileSettings(BaseSettings):
    """Profile client settings.

    Environment variables:
        AZCTX_CLIENT_ID: Public client id used for user logins
            (default: Azure PowerShell client id)
        AZCTX_DEFAULT_ENVIRONMENT: Environment name used when none is given
            (default: AzureCloud)
        AZCTX_TOKEN_CACHE_PATH: File holding the serialized token cache
            (default: ~/.azure/azctx/token_cache.bin)
        AZCTX_MAX_CONCURRENT_TENANT_LOOKUPS: Tenants resolved in parallel
            while searching for a subscription during login (default: 1)
        AZCTX_INTERACTIVE_LOGIN_TIMEOUT: Seconds to wait for an interactive
            browser login to complete (default: 300)
    """

    model_config = SettingsConfigDict(
        env_prefix="AZCTX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    client_id: str = Field(
        default=AZURE_POWERSHELL_CLIENT_ID,
        description="Public client id used for user logins",
    )
    default_environment: str = Field(
        default="AzureCloud",
        description="Environment name used when none is given",
    )
    token_cache_path: Path = Field(
        default_factory=_default_token_cache_path,
        description="File holding the serialized token cache",
    )
    max_concurrent_tenant_lookups: int = Field(
        default=1,
        description="Tenants resolved in parallel while searching during login",
        ge=1,
        le=32,
    )
    interactive_login_timeout: int = Field(
        default=300,
        description="Seconds to wait for an interactive login",
        gt=0,
    )

    @field_validator("client_id", "default_environment")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        """Reject empty or whitespace-only values."""
        if not value.strip():
            raise ValueError("value must not be blank")
        return value.strip()


@lru_cache
def get_profile_settings() -> ProfileSettings:
    """Get cached profile settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return ProfileSettings()
