"""In-memory implementation of AuditStore."""

from uuid import UUID

from warden.audit.models import LoginHistoryRecord, ProfileChangeRecord
from warden.audit.store import AuditStore
from warden.db.errors import AuthorizationError, ConflictError


class InMemoryAuditStore(AuditStore):
    """In-memory implementation of AuditStore for testing and development.

    Uses simple dict storage with linear scan for queries and applies the
    same row-level rules as the database policies. Login rows get the
    store's client_address, standing in for connection metadata.
    """

    def __init__(self, client_address: str | None = "127.0.0.1") -> None:
        self._client_address = client_address
        self._logins: dict[UUID, LoginHistoryRecord] = {}
        self._changes: dict[UUID, ProfileChangeRecord] = {}

    # Login history
    async def save_login_attempt(
        self, caller_id: str | None, record: LoginHistoryRecord
    ) -> LoginHistoryRecord:
        """Append a login-history row and return it as stored."""
        if caller_id is not None and caller_id != record.subject_id:
            raise AuthorizationError(
                f"Caller {caller_id} may not record logins for {record.subject_id}"
            )
        if record.id in self._logins:
            raise ConflictError(f"Login record already exists: {record.id}")

        stored = record.model_copy(update={"ip_address": self._client_address})
        self._logins[stored.id] = stored
        return stored

    async def list_login_attempts(
        self,
        caller_id: str,
        subject_id: str,
        *,
        limit: int = 100,
    ) -> list[LoginHistoryRecord]:
        """List login attempts for a subject, most recent first."""
        self._check_reader(caller_id, subject_id)
        results = [r for r in self._logins.values() if r.subject_id == subject_id]
        results.sort(key=lambda x: x.timestamp, reverse=True)
        return results[:limit]

    # Profile changes
    async def save_profile_change(
        self, caller_id: str, record: ProfileChangeRecord
    ) -> ProfileChangeRecord:
        """Append a profile-change row and return it as stored."""
        if caller_id != record.subject_id:
            raise AuthorizationError(
                f"Caller {caller_id} may not record changes for {record.subject_id}"
            )
        if record.id in self._changes:
            raise ConflictError(f"Profile change already exists: {record.id}")

        self._changes[record.id] = record
        return record

    async def list_profile_changes(
        self,
        caller_id: str,
        subject_id: str,
        *,
        limit: int = 100,
    ) -> list[ProfileChangeRecord]:
        """List profile changes for a subject, most recent first."""
        self._check_reader(caller_id, subject_id)
        results = [r for r in self._changes.values() if r.subject_id == subject_id]
        results.sort(key=lambda x: x.timestamp, reverse=True)
        return results[:limit]

    def _check_reader(self, caller_id: str, subject_id: str) -> None:
        if caller_id != subject_id:
            raise AuthorizationError(
                f"Caller {caller_id} may not read history of {subject_id}"
            )
