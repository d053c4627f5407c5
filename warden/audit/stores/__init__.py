"""Audit stores for login history and profile changes."""

from warden.audit.store import AuditStore
from warden.audit.stores.inmemory import InMemoryAuditStore
from warden.audit.stores.postgres import PostgresAuditStore

__all__ = [
    "AuditStore",
    "InMemoryAuditStore",
    "PostgresAuditStore",
]
