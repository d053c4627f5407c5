"""Audit trails: login history and profile change history."""

from warden.audit.models import LoginHistoryRecord, ProfileChangeRecord
from warden.audit.recorder import AuditRecorder, AuditWriteResult

__all__ = [
    "AuditRecorder",
    "AuditWriteResult",
    "LoginHistoryRecord",
    "ProfileChangeRecord",
]
