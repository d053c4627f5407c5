"""Test factories for creating test data."""

from tests.factories.accounts import AuditRecordFactory, ProfileFactory, SessionFactory

__all__ = [
    "AuditRecordFactory",
    "ProfileFactory",
    "SessionFactory",
]
