"""Profile domain models."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class ProfileField(str, Enum):
    """Mutable profile attributes.

    Declaration order is the order in which changes are audited.
    """

    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    PHONE_NUMBER = "phone_number"


class Profile(BaseModel):
    """One row per identity.

    The id equals the identity provider's user id. Rows are provisioned
    when the identity is created and only ever updated by their owner.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Owning identity")
    first_name: str = Field(..., description="Given name")
    last_name: str = Field(..., description="Family name")
    phone_number: str | None = Field(default=None, description="Optional phone")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update")

    def value_of(self, field: ProfileField) -> str | None:
        """Current value of a mutable field."""
        return getattr(self, field.value)


class ProfileUpdate(BaseModel):
    """The single partial update issued per profile submission."""

    model_config = ConfigDict(frozen=True)

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone_number: str | None = None
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("first_name", "last_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value
