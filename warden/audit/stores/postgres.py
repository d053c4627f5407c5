"""PostgreSQL implementation of AuditStore.

Uses asyncpg for async database access. Inserts run inside caller-scoped
transactions so the insert policies apply; ip_address is left to its
column default, which reads the connection's client address.
"""

from typing import Any

from warden.audit.models import LoginHistoryRecord, ProfileChangeRecord
from warden.audit.store import AuditStore
from warden.db.errors import AuthorizationError, ConnectionError, StoreError
from warden.db.pool import PostgresPool
from warden.observability.logging import get_logger
from warden.profile.models import ProfileField

logger = get_logger(__name__)

_INSERT_LOGIN = """
    INSERT INTO public.login_history (
        id, user_id, login_timestamp, device_info, success, failure_reason
    ) VALUES ($1, $2, $3, $4, $5, $6)
"""


class PostgresAuditStore(AuditStore):
    """PostgreSQL implementation of AuditStore.

    All records are immutable once written.
    """

    def __init__(self, pool: PostgresPool) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
        """
        self._pool = pool

    # Login history
    async def save_login_attempt(
        self, caller_id: str | None, record: LoginHistoryRecord
    ) -> LoginHistoryRecord:
        """Append a login-history row and return it as stored."""
        if caller_id is not None and caller_id != record.subject_id:
            raise AuthorizationError(
                f"Caller {caller_id} may not record logins for {record.subject_id}"
            )
        values = (
            record.id,
            record.subject_id,
            record.timestamp,
            record.device_info,
            record.success,
            record.failure_reason,
        )
        ip_address = None
        try:
            async with self._pool.acquire_as(caller_id) as conn:
                if caller_id is None:
                    # anon has no read policy, so RETURNING would be rejected
                    await conn.execute(_INSERT_LOGIN, *values)
                else:
                    ip_address = await conn.fetchval(
                        _INSERT_LOGIN + " RETURNING ip_address", *values
                    )
        except StoreError:
            raise
        except Exception as e:
            logger.error(
                "postgres_save_login_attempt_error", record_id=str(record.id), error=str(e)
            )
            raise ConnectionError(f"Failed to save login attempt: {e}", cause=e) from e

        logger.debug("login_attempt_saved", record_id=str(record.id))
        return record.model_copy(update={"ip_address": ip_address})

    async def list_login_attempts(
        self,
        caller_id: str,
        subject_id: str,
        *,
        limit: int = 100,
    ) -> list[LoginHistoryRecord]:
        """List login attempts for a subject, most recent first."""
        self._check_reader(caller_id, subject_id)
        try:
            async with self._pool.acquire_as(caller_id) as conn:
                rows = await conn.fetch(
                    """
                    SELECT id, user_id, login_timestamp, ip_address,
                           device_info, success, failure_reason
                    FROM public.login_history
                    WHERE user_id = $1
                    ORDER BY login_timestamp DESC
                    LIMIT $2
                    """,
                    subject_id,
                    limit,
                )
        except StoreError:
            raise
        except Exception as e:
            logger.error("postgres_list_login_attempts_error", error=str(e))
            raise ConnectionError(f"Failed to list login attempts: {e}", cause=e) from e

        return [self._row_to_login(row) for row in rows]

    # Profile changes
    async def save_profile_change(
        self, caller_id: str, record: ProfileChangeRecord
    ) -> ProfileChangeRecord:
        """Append a profile-change row and return it as stored."""
        if caller_id != record.subject_id:
            raise AuthorizationError(
                f"Caller {caller_id} may not record changes for {record.subject_id}"
            )
        try:
            async with self._pool.acquire_as(caller_id) as conn:
                await conn.execute(
                    """
                    INSERT INTO public.profile_changes (
                        id, user_id, field_changed, old_value,
                        new_value, change_timestamp, changed_by
                    ) VALUES ($1, $2, $3, $4, $5, $6, $7)
                    """,
                    record.id,
                    record.subject_id,
                    record.field.value,
                    record.old_value,
                    record.new_value,
                    record.timestamp,
                    record.changed_by,
                )
        except StoreError:
            raise
        except Exception as e:
            logger.error(
                "postgres_save_profile_change_error", record_id=str(record.id), error=str(e)
            )
            raise ConnectionError(f"Failed to save profile change: {e}", cause=e) from e

        logger.debug("profile_change_saved", record_id=str(record.id), field=record.field.value)
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
        try:
            async with self._pool.acquire_as(caller_id) as conn:
                rows = await conn.fetch(
                    """
                    SELECT id, user_id, field_changed, old_value,
                           new_value, change_timestamp, changed_by
                    FROM public.profile_changes
                    WHERE user_id = $1
                    ORDER BY change_timestamp DESC
                    LIMIT $2
                    """,
                    subject_id,
                    limit,
                )
        except StoreError:
            raise
        except Exception as e:
            logger.error("postgres_list_profile_changes_error", error=str(e))
            raise ConnectionError(f"Failed to list profile changes: {e}", cause=e) from e

        return [self._row_to_change(row) for row in rows]

    def _check_reader(self, caller_id: str, subject_id: str) -> None:
        if caller_id != subject_id:
            raise AuthorizationError(
                f"Caller {caller_id} may not read history of {subject_id}"
            )

    def _row_to_login(self, row: Any) -> LoginHistoryRecord:
        return LoginHistoryRecord(
            id=row["id"],
            subject_id=row["user_id"],
            timestamp=row["login_timestamp"],
            ip_address=row["ip_address"],
            device_info=row["device_info"],
            success=row["success"],
            failure_reason=row["failure_reason"],
        )

    def _row_to_change(self, row: Any) -> ProfileChangeRecord:
        return ProfileChangeRecord(
            id=row["id"],
            subject_id=row["user_id"],
            field=ProfileField(row["field_changed"]),
            old_value=row["old_value"],
            new_value=row["new_value"],
            timestamp=row["change_timestamp"],
            changed_by=row["changed_by"],
        )
