"""Best-effort writer for audit records.

Audit logging must never block the action it describes. Every write is
attempted at most once; a failure is logged, counted and returned inside
an AuditWriteResult instead of being raised. Callers that do not care
about the outcome discard the result.
"""

from dataclasses import dataclass
from uuid import UUID

from warden.audit.models import LoginHistoryRecord, ProfileChangeRecord
from warden.audit.store import AuditStore
from warden.errors import AuditWriteFailure
from warden.observability.logging import get_logger
from warden.observability.metrics import AUDIT_WRITE_FAILURES, AUDIT_WRITES
from warden.profile.models import ProfileField

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuditWriteResult:
    """Outcome of a single audit write."""

    success: bool
    record_id: UUID | None = None
    error: AuditWriteFailure | None = None


class AuditRecorder:
    """Appends login-history and profile-change rows through an AuditStore."""

    def __init__(self, store: AuditStore) -> None:
        self._store = store

    async def record_login_attempt(
        self,
        subject_id: str,
        success: bool,
        client_descriptor: str | None,
        failure_reason: str | None = None,
        *,
        caller_id: str | None = None,
    ) -> AuditWriteResult:
        """Record one sign-in attempt.

        Args:
            subject_id: Resolved identity, or the submitted email on failure
            success: Whether the provider accepted the credentials
            client_descriptor: Free-text device/agent string
            failure_reason: Provider message, only for failed attempts
            caller_id: Authenticated identity performing the insert, None
                when the attempt failed and there is no session
        """
        try:
            record = LoginHistoryRecord(
                subject_id=subject_id,
                success=success,
                device_info=client_descriptor,
                failure_reason=None if success else failure_reason,
            )
            stored = await self._store.save_login_attempt(caller_id, record)
        except Exception as e:
            return self._failed("login_history", e)

        AUDIT_WRITES.labels(record_type="login_history").inc()
        logger.info(
            "login_attempt_recorded",
            record_id=str(stored.id),
            success=success,
        )
        return AuditWriteResult(success=True, record_id=stored.id)

    async def record_profile_field_change(
        self,
        subject_id: str,
        actor_id: str,
        field: ProfileField,
        old_value: str | None,
        new_value: str | None,
    ) -> AuditWriteResult:
        """Record one changed profile field.

        The actor performs the insert, so the store only accepts it when
        actor and subject are the same identity.
        """
        try:
            record = ProfileChangeRecord(
                subject_id=subject_id,
                field=ProfileField(field),
                old_value=old_value,
                new_value=new_value,
                changed_by=actor_id,
            )
            stored = await self._store.save_profile_change(actor_id, record)
        except Exception as e:
            return self._failed(
                "profile_change", e, field=str(getattr(field, "value", field))
            )

        AUDIT_WRITES.labels(record_type="profile_change").inc()
        logger.info(
            "profile_change_recorded",
            record_id=str(stored.id),
            subject_id=subject_id,
            field=stored.field.value,
        )
        return AuditWriteResult(success=True, record_id=stored.id)

    def _failed(self, record_type: str, error: Exception, **context: str) -> AuditWriteResult:
        AUDIT_WRITE_FAILURES.labels(record_type=record_type).inc()
        logger.warning(
            "audit_write_failed",
            record_type=record_type,
            error=str(error),
            error_type=type(error).__name__,
            **context,
        )
        failure = AuditWriteFailure(f"Failed to write {record_type} record: {error}")
        failure.__cause__ = error
        return AuditWriteResult(success=False, error=failure)
