"""Tests for AuditRecorder."""

import pytest

from warden.audit import AuditRecorder
from warden.audit.models import LoginHistoryRecord, ProfileChangeRecord
from warden.audit.store import AuditStore
from warden.audit.stores import InMemoryAuditStore
from warden.db.errors import ConnectionError
from warden.errors import AuditWriteFailure
from warden.profile.models import ProfileField


class UnavailableAuditStore(AuditStore):
    """Audit store whose every write fails."""

    def __init__(self) -> None:
        self.attempts = 0

    async def save_login_attempt(self, caller_id, record) -> LoginHistoryRecord:
        self.attempts += 1
        raise ConnectionError("audit table unavailable")

    async def list_login_attempts(self, caller_id, subject_id, *, limit=100):
        return []

    async def save_profile_change(self, caller_id, record) -> ProfileChangeRecord:
        self.attempts += 1
        raise ConnectionError("audit table unavailable")

    async def list_profile_changes(self, caller_id, subject_id, *, limit=100):
        return []


@pytest.fixture
def store() -> InMemoryAuditStore:
    return InMemoryAuditStore()


@pytest.fixture
def recorder(store: InMemoryAuditStore) -> AuditRecorder:
    return AuditRecorder(store)


class TestRecordLoginAttempt:
    """Tests for recording sign-in attempts."""

    @pytest.mark.asyncio
    async def test_failed_attempt_for_email_subject(
        self, recorder: AuditRecorder, store: InMemoryAuditStore
    ) -> None:
        result = await recorder.record_login_attempt(
            "a@b.com", False, "Linux - tests", "Invalid login credentials"
        )

        assert result.success is True
        rows = await store.list_login_attempts("a@b.com", "a@b.com")
        assert len(rows) == 1
        assert rows[0].id == result.record_id
        assert rows[0].success is False
        assert rows[0].failure_reason == "Invalid login credentials"
        assert rows[0].device_info == "Linux - tests"

    @pytest.mark.asyncio
    async def test_success_drops_failure_reason(
        self, recorder: AuditRecorder, store: InMemoryAuditStore
    ) -> None:
        result = await recorder.record_login_attempt(
            "U1", True, None, "ignored", caller_id="U1"
        )

        assert result.success is True
        rows = await store.list_login_attempts("U1", "U1")
        assert rows[0].failure_reason is None

    @pytest.mark.asyncio
    async def test_rejected_insert_is_returned_not_raised(self, recorder: AuditRecorder) -> None:
        result = await recorder.record_login_attempt("U1", True, None, caller_id="U2")

        assert result.success is False
        assert result.record_id is None
        assert isinstance(result.error, AuditWriteFailure)

    @pytest.mark.asyncio
    async def test_store_failure_is_single_attempt(self) -> None:
        store = UnavailableAuditStore()
        recorder = AuditRecorder(store)

        result = await recorder.record_login_attempt("a@b.com", False, None, "bad")

        assert result.success is False
        assert isinstance(result.error.__cause__, ConnectionError)
        assert store.attempts == 1


class TestRecordProfileFieldChange:
    """Tests for recording profile field changes."""

    @pytest.mark.asyncio
    async def test_records_change(
        self, recorder: AuditRecorder, store: InMemoryAuditStore
    ) -> None:
        result = await recorder.record_profile_field_change(
            "U1", "U1", ProfileField.PHONE_NUMBER, None, "555"
        )

        assert result.success is True
        rows = await store.list_profile_changes("U1", "U1")
        assert len(rows) == 1
        assert rows[0].field is ProfileField.PHONE_NUMBER
        assert rows[0].old_value is None
        assert rows[0].new_value == "555"
        assert rows[0].changed_by == "U1"

    @pytest.mark.asyncio
    async def test_actor_other_than_subject_is_rejected(
        self, recorder: AuditRecorder, store: InMemoryAuditStore
    ) -> None:
        result = await recorder.record_profile_field_change(
            "U1", "U2", ProfileField.FIRST_NAME, "Ada", "Grace"
        )

        assert result.success is False
        assert await store.list_profile_changes("U1", "U1") == []

    @pytest.mark.asyncio
    async def test_store_failure_does_not_raise(self) -> None:
        recorder = AuditRecorder(UnavailableAuditStore())

        result = await recorder.record_profile_field_change(
            "U1", "U1", ProfileField.LAST_NAME, "A", "B"
        )

        assert result.success is False
        assert "profile_change" in str(result.error)
