"""AuditStore abstract interface."""

from abc import ABC, abstractmethod

from warden.audit.models import LoginHistoryRecord, ProfileChangeRecord


class AuditStore(ABC):
    """Abstract interface for the history tables.

    Records are append-only: there are no update or delete operations.
    Every call is scoped to a caller identity. Reads and profile-change
    inserts require caller == subject; login-history inserts also accept
    an anonymous (None) caller so failed sign-ins can be recorded.
    """

    # Login history
    @abstractmethod
    async def save_login_attempt(
        self, caller_id: str | None, record: LoginHistoryRecord
    ) -> LoginHistoryRecord:
        """Append a login-history row and return it as stored."""
        pass

    @abstractmethod
    async def list_login_attempts(
        self,
        caller_id: str,
        subject_id: str,
        *,
        limit: int = 100,
    ) -> list[LoginHistoryRecord]:
        """List login attempts for a subject, most recent first."""
        pass

    # Profile changes
    @abstractmethod
    async def save_profile_change(
        self, caller_id: str, record: ProfileChangeRecord
    ) -> ProfileChangeRecord:
        """Append a profile-change row and return it as stored."""
        pass

    @abstractmethod
    async def list_profile_changes(
        self,
        caller_id: str,
        subject_id: str,
        *,
        limit: int = 100,
    ) -> list[ProfileChangeRecord]:
        """List profile changes for a subject, most recent first."""
        pass
