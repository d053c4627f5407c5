"""Audit domain models.

Append-only records:
- LoginHistoryRecord, one per sign-in attempt
- ProfileChangeRecord, one per changed profile field
"""

from warden.audit.models.login_record import LoginHistoryRecord
from warden.audit.models.profile_change import ProfileChangeRecord

__all__ = [
    "LoginHistoryRecord",
    "ProfileChangeRecord",
]
