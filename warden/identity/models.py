"""Identity domain models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SessionState(str, Enum):
    """What is currently known about the caller's session."""

    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class Identity(BaseModel):
    """An authenticated principal as reported by the identity provider."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Stable user identifier")
    email: str = Field(..., description="Sign-in email")
    attributes: dict[str, Any] = Field(
        default_factory=dict, description="Profile attributes given at sign-up"
    )


class Session(BaseModel):
    """A signed-in session bound to an identity."""

    model_config = ConfigDict(frozen=True)

    identity: Identity
    access_token: str = Field(..., repr=False)
    refresh_token: str | None = Field(default=None, repr=False)
    expires_at: datetime | None = None
