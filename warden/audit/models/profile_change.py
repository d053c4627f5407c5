"""ProfileChangeRecord model for audit domain."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from warden.profile.models import ProfileField


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class ProfileChangeRecord(BaseModel):
    """Immutable record of a single-field profile change.

    A submission that changes K fields yields K of these. None on either
    side means the field was empty.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    subject_id: str = Field(..., min_length=1, description="Whose profile changed")
    field: ProfileField = Field(..., description="Changed attribute")
    old_value: str | None = Field(default=None, description="Value before")
    new_value: str | None = Field(default=None, description="Value after")
    timestamp: datetime = Field(default_factory=utc_now, description="Change time")
    changed_by: str = Field(..., min_length=1, description="Acting identity")
