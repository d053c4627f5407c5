"""Identity provider configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

IdentityBackendType = Literal["inmemory", "gotrue"]


class IdentityConfig(BaseModel):
    """Identity provider configuration.

    Note: the API key should come from WARDEN_IDENTITY__API_KEY or
    WARDEN_IDENTITY_API_KEY, not from config files.
    """

    backend: IdentityBackendType = Field(
        default="inmemory",
        description="Identity provider backend",
    )
    url: str | None = Field(
        default=None,
        description="Base URL of the GoTrue-compatible auth service",
    )
    api_key: str | None = Field(
        default=None,
        description="Public API key sent with every auth request",
    )
    timeout: float = Field(
        default=10.0,
        gt=0,
        description="Request timeout in seconds",
    )
