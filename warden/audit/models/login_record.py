"""LoginHistoryRecord model for audit domain."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class LoginHistoryRecord(BaseModel):
    """Immutable record of one sign-in attempt.

    subject_id is the resolved identity for a successful attempt and the
    submitted email for a failed one. ip_address is attributed by the
    store from connection metadata and is never taken from the client.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    subject_id: str = Field(..., min_length=1, description="Attempted or resolved identity")
    timestamp: datetime = Field(default_factory=utc_now, description="Attempt time")
    ip_address: str | None = Field(default=None, description="Client network address")
    device_info: str | None = Field(default=None, description="Client descriptor")
    success: bool = Field(..., description="Outcome of the attempt")
    failure_reason: str | None = Field(
        default=None, description="Provider message for a failed attempt"
    )

    @model_validator(mode="after")
    def _reason_only_on_failure(self) -> "LoginHistoryRecord":
        if self.success and self.failure_reason is not None:
            raise ValueError("failure_reason is only allowed on failed attempts")
        return self
