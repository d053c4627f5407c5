"""Profile mutation coordinator.

Runs one edit-submit cycle at a time against the last loaded snapshot:

    diff -> audit each changed field -> commit one update -> reload

Audit rows for a submission are always attempted before the update is
issued, so a crash between the two can leave history describing a change
that was never committed. Audit writes are best-effort and never stop
the cycle; a failed commit aborts it and leaves the snapshot untouched.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from warden.accounts.forms import ProfileForm
from warden.audit.models import LoginHistoryRecord, ProfileChangeRecord
from warden.audit.recorder import AuditRecorder, AuditWriteResult
from warden.audit.store import AuditStore
from warden.config.models.accounts import AccountsConfig
from warden.db.errors import StoreError
from warden.errors import LoadFailure, PrimaryCommitFailure, ProfileNotLoadedError
from warden.identity.session import SessionContext
from warden.observability.logging import get_logger
from warden.observability.metrics import PROFILE_CHANGES, PROFILE_COMMITS
from warden.profile.models import Profile, ProfileField, ProfileUpdate
from warden.profile.store import ProfileStore

logger = get_logger(__name__)


class MutationState(str, Enum):
    """Where the coordinator is in the edit-submit cycle."""

    IDLE = "idle"
    LOADED = "loaded"
    DIFFING = "diffing"
    AUDITING = "auditing"
    COMMITTING = "committing"
    RELOADING = "reloading"


@dataclass(frozen=True)
class Notice:
    """User-facing feedback produced by a load or submit."""

    level: Literal["success", "error"]
    message: str


@dataclass(frozen=True)
class FieldChange:
    """A single differing field between snapshot and submission."""

    field: ProfileField
    old_value: str | None
    new_value: str | None


@dataclass
class ProfileView:
    """Loaded profile plus both history lists."""

    profile: Profile | None = None
    changes: list[ProfileChangeRecord] = field(default_factory=list)
    logins: list[LoginHistoryRecord] = field(default_factory=list)
    notices: list[Notice] = field(default_factory=list)


@dataclass
class MutationOutcome:
    """Result of one submission."""

    saved: bool
    changes: list[FieldChange] = field(default_factory=list)
    audit_results: list[AuditWriteResult] = field(default_factory=list)
    notices: list[Notice] = field(default_factory=list)
    error: PrimaryCommitFailure | None = None


def _blank_to_none(value: str | None) -> str | None:
    return value if value else None


def diff_profile(
    snapshot: Profile,
    form: ProfileForm,
    *,
    treat_empty_phone_as_absent: bool = True,
) -> list[FieldChange]:
    """Compare a submission with the snapshot, in ProfileField order.

    Names use exact equality. With treat_empty_phone_as_absent, an empty
    phone number equals no phone number and both sides are recorded as
    None; otherwise the raw values are compared and recorded.
    """
    changes: list[FieldChange] = []
    for profile_field in ProfileField:
        old = snapshot.value_of(profile_field)
        new = getattr(form, profile_field.value)
        if profile_field is ProfileField.PHONE_NUMBER and treat_empty_phone_as_absent:
            old, new = _blank_to_none(old), _blank_to_none(new)
        if old != new:
            changes.append(FieldChange(field=profile_field, old_value=old, new_value=new))
    return changes


class ProfileMutationCoordinator:
    """Loads a caller's profile and history and applies profile edits."""

    def __init__(
        self,
        session: SessionContext,
        profile_store: ProfileStore,
        audit_store: AuditStore,
        recorder: AuditRecorder,
        *,
        policy: AccountsConfig | None = None,
    ) -> None:
        self._session = session
        self._profiles = profile_store
        self._audit = audit_store
        self._recorder = recorder
        self._policy = policy or AccountsConfig()
        self._state = MutationState.IDLE
        self._view = ProfileView()

    @property
    def state(self) -> MutationState:
        return self._state

    @property
    def snapshot(self) -> Profile | None:
        """Last successfully loaded profile; source of old values."""
        return self._view.profile

    @property
    def view(self) -> ProfileView:
        return self._view

    async def load(self) -> ProfileView:
        """Fetch the profile and both history lists.

        Each part is loaded independently. A part that fails keeps its
        previous value and adds an error notice.

        Raises:
            AuthorizationFailure: If there is no authenticated session
        """
        caller_id = self._session.require_identity().id
        notices: list[Notice] = []

        try:
            self._view.profile = await self._fetch_profile(caller_id)
        except LoadFailure as e:
            notices.append(Notice("error", e.user_message))

        try:
            self._view.changes = await self._fetch_changes(caller_id)
        except LoadFailure as e:
            notices.append(Notice("error", e.user_message))

        try:
            self._view.logins = await self._fetch_logins(caller_id)
        except LoadFailure as e:
            notices.append(Notice("error", e.user_message))

        self._view.notices = notices
        self._state = MutationState.LOADED if self._view.profile else MutationState.IDLE
        return self._view

    async def submit(self, form: ProfileForm | Mapping[str, Any]) -> MutationOutcome:
        """Run one edit-submit cycle.

        The submission is fully validated, including the update that will
        be committed, before any audit row is written. The coordinator is
        back in LOADED once the cycle ends, however it ends.

        Raises:
            AuthorizationFailure: If there is no authenticated session
            ProfileNotLoadedError: If no snapshot has been loaded yet
            pydantic.ValidationError: If the submitted names are invalid
        """
        actor_id = self._session.require_identity().id
        snapshot = self._view.profile
        if snapshot is None:
            raise ProfileNotLoadedError("Load the profile before submitting changes")
        if not isinstance(form, ProfileForm):
            form = ProfileForm.model_validate(form, context={"policy": self._policy})

        phone = form.phone_number
        if self._policy.treat_empty_phone_as_absent:
            phone = _blank_to_none(phone)
        update = ProfileUpdate(
            first_name=form.first_name,
            last_name=form.last_name,
            phone_number=phone,
            updated_at=datetime.now(UTC),
        )

        try:
            return await self._run_cycle(actor_id, snapshot, form, update)
        finally:
            self._state = MutationState.LOADED

    async def _run_cycle(
        self,
        actor_id: str,
        snapshot: Profile,
        form: ProfileForm,
        update: ProfileUpdate,
    ) -> MutationOutcome:
        self._state = MutationState.DIFFING
        changes = diff_profile(
            snapshot,
            form,
            treat_empty_phone_as_absent=self._policy.treat_empty_phone_as_absent,
        )

        self._state = MutationState.AUDITING
        audit_results: list[AuditWriteResult] = []
        for change in changes:
            PROFILE_CHANGES.labels(field=change.field.value).inc()
            audit_results.append(
                await self._recorder.record_profile_field_change(
                    snapshot.id,
                    actor_id,
                    change.field,
                    change.old_value,
                    change.new_value,
                )
            )

        self._state = MutationState.COMMITTING
        try:
            await self._profiles.update(actor_id, snapshot.id, update)
        except StoreError as e:
            PROFILE_COMMITS.labels(status="failed").inc()
            logger.error(
                "profile_commit_failed",
                profile_id=snapshot.id,
                audited=len(audit_results),
                error=str(e),
            )
            failure = PrimaryCommitFailure(f"Failed to update profile {snapshot.id}: {e}")
            failure.__cause__ = e
            return MutationOutcome(
                saved=False,
                changes=changes,
                audit_results=audit_results,
                notices=[Notice("error", failure.user_message)],
                error=failure,
            )

        PROFILE_COMMITS.labels(status="saved").inc()
        logger.info(
            "profile_committed",
            profile_id=snapshot.id,
            changed_fields=[c.field.value for c in changes],
        )

        self._state = MutationState.RELOADING
        notices = [Notice("success", "Profile updated successfully")]
        try:
            self._view.profile = await self._fetch_profile(actor_id)
        except LoadFailure as e:
            notices.append(Notice("error", e.user_message))
        try:
            self._view.changes = await self._fetch_changes(actor_id)
        except LoadFailure as e:
            notices.append(Notice("error", e.user_message))

        return MutationOutcome(
            saved=True,
            changes=changes,
            audit_results=audit_results,
            notices=notices,
        )

    async def _fetch_profile(self, caller_id: str) -> Profile:
        try:
            profile = await self._profiles.get(caller_id, caller_id)
        except StoreError as e:
            logger.warning("profile_load_failed", error=str(e))
            raise LoadFailure(f"Failed to load profile: {e}", view="profile") from e
        if profile is None:
            logger.warning("profile_missing", profile_id=caller_id)
            raise LoadFailure(f"No profile for {caller_id}", view="profile")
        return profile

    async def _fetch_changes(self, caller_id: str) -> list[ProfileChangeRecord]:
        try:
            return await self._audit.list_profile_changes(
                caller_id, caller_id, limit=self._policy.history_limit
            )
        except StoreError as e:
            logger.warning("profile_changes_load_failed", error=str(e))
            raise LoadFailure(
                f"Failed to load profile changes: {e}", view="profile changes"
            ) from e

    async def _fetch_logins(self, caller_id: str) -> list[LoginHistoryRecord]:
        try:
            return await self._audit.list_login_attempts(
                caller_id, caller_id, limit=self._policy.history_limit
            )
        except StoreError as e:
            logger.warning("login_history_load_failed", error=str(e))
            raise LoadFailure(
                f"Failed to load login history: {e}", view="login history"
            ) from e
