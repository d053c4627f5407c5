"""Database infrastructure: connection pool, errors and migrations."""

from warden.db.errors import (
    AuthorizationError,
    ConflictError,
    ConnectionError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from warden.db.pool import PostgresPool

__all__ = [
    "AuthorizationError",
    "ConflictError",
    "ConnectionError",
    "NotFoundError",
    "PostgresPool",
    "StoreError",
    "ValidationError",
]
