"""PostgreSQL connection pool management.

Provides a centralized connection pool for the profile and audit stores,
including caller-scoped transactions for row-level security.
"""

import json
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from warden.db.errors import AuthorizationError, ConflictError, ConnectionError
from warden.observability.logging import get_logger

logger = get_logger(__name__)


class PostgresPool:
    """Manages asyncpg connection pool with health checks.

    Usage:
        pool = PostgresPool(dsn="postgresql://...")
        await pool.connect()
        try:
            async with pool.acquire_as(user_id) as conn:
                row = await conn.fetchrow("SELECT * FROM profiles ...")
        finally:
            await pool.close()
    """

    def __init__(
        self,
        dsn: str | None = None,
        min_size: int = 2,
        max_size: int = 10,
        max_inactive_connection_lifetime: float = 300.0,
        command_timeout: float = 60.0,
    ) -> None:
        """Initialize pool configuration.

        Args:
            dsn: Database connection string. Falls back to environment variables.
            min_size: Minimum number of connections to keep open.
            max_size: Maximum number of connections in the pool.
            max_inactive_connection_lifetime: Close connections idle longer than this (seconds).
            command_timeout: Default timeout for queries (seconds).
        """
        self._dsn = dsn or self._get_dsn_from_env()
        self._min_size = min_size
        self._max_size = max_size
        self._max_inactive_connection_lifetime = max_inactive_connection_lifetime
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    @property
    def dsn(self) -> str:
        """Connection string this pool connects with."""
        return self._dsn

    @staticmethod
    def _get_dsn_from_env() -> str:
        """Get database DSN from environment variables."""
        dsn = os.environ.get("WARDEN_DATABASE_URL")
        if dsn:
            return dsn

        dsn = os.environ.get("DATABASE_URL")
        if dsn:
            return dsn

        host = os.environ.get("POSTGRES_HOST", "localhost")
        port = os.environ.get("POSTGRES_PORT", "5432")
        user = os.environ.get("POSTGRES_USER", "postgres")
        password = os.environ.get("POSTGRES_PASSWORD", "postgres")
        database = os.environ.get("POSTGRES_DB", "postgres")

        return f"postgresql://{user}:{password}@{host}:{port}/{database}"

    async def connect(self) -> None:
        """Initialize the connection pool."""
        if self._pool is not None:
            return

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                max_inactive_connection_lifetime=self._max_inactive_connection_lifetime,
                command_timeout=self._command_timeout,
            )
            logger.info(
                "postgres_pool_connected",
                min_size=self._min_size,
                max_size=self._max_size,
            )
        except Exception as e:
            logger.error("postgres_pool_connection_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e

    async def close(self) -> None:
        """Close the connection pool gracefully."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("postgres_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Acquire a connection from the pool.

        Note: Auto-connects if not already connected.
        """
        if self._pool is None:
            await self.connect()

        try:
            async with self._pool.acquire() as connection:
                yield connection
        except asyncpg.InsufficientPrivilegeError as e:
            logger.warning("postgres_policy_rejected", error=str(e))
            raise AuthorizationError(f"Row-level policy rejected operation: {e}", cause=e) from e
        except asyncpg.UniqueViolationError as e:
            raise ConflictError(f"Duplicate row: {e}", cause=e) from e
        except asyncpg.PostgresError as e:
            logger.error("postgres_connection_error", error=str(e))
            raise ConnectionError(f"PostgreSQL error: {e}", cause=e) from e

    @asynccontextmanager
    async def acquire_as(self, caller_id: str | None) -> AsyncIterator[asyncpg.Connection]:
        """Acquire a connection inside a transaction scoped to a caller.

        Sets the JWT claims and database role that the row-level security
        policies read through auth.uid(). A None caller runs as 'anon'.
        Both settings are transaction-local and reset on exit.
        """
        async with self.acquire() as conn:
            async with conn.transaction():
                claims = json.dumps({"sub": caller_id} if caller_id else {})
                await conn.execute(
                    "SELECT set_config('request.jwt.claims', $1, true)", claims
                )
                if caller_id:
                    await conn.execute(
                        "SELECT set_config('request.jwt.claim.sub', $1, true)",
                        caller_id,
                    )
                role = "authenticated" if caller_id else "anon"
                await conn.execute(f"SET LOCAL ROLE {role}")
                yield conn

    async def health_check(self) -> bool:
        """Check if the pool is connected and responsive."""
        if self._pool is None:
            return False

        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except Exception as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return False

    @property
    def is_connected(self) -> bool:
        """Check if pool is initialized."""
        return self._pool is not None
