"""Pytest fixtures for store integration tests.

Runs against a managed Postgres that provides the auth schema, the
anon/authenticated roles and auth.uid(), with migrations applied.
Tests skip gracefully when no such database is available.
"""

import json
import os
from collections.abc import AsyncIterator, Awaitable, Callable
from uuid import uuid4

import pytest
import pytest_asyncio

from warden.db.pool import PostgresPool


@pytest.fixture(scope="session")
def postgres_dsn() -> str | None:
    """Get PostgreSQL DSN for tests."""
    return os.environ.get("TEST_DATABASE_URL")


@pytest_asyncio.fixture(scope="function")
async def postgres_pool(postgres_dsn: str | None) -> AsyncIterator[PostgresPool]:
    """Create PostgreSQL connection pool for tests.

    Skips tests if PostgreSQL is not available.
    Uses function scope to avoid event loop issues across tests.
    """
    if not postgres_dsn:
        pytest.skip("TEST_DATABASE_URL not set")

    pool = PostgresPool(dsn=postgres_dsn, min_size=1, max_size=3)
    try:
        await pool.connect()
    except Exception as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    healthy = await pool.health_check()
    if not healthy:
        await pool.close()
        pytest.skip("PostgreSQL health check failed")

    yield pool

    await pool.close()


@pytest_asyncio.fixture
async def create_auth_user(
    postgres_pool: PostgresPool,
) -> AsyncIterator[Callable[..., Awaitable[str]]]:
    """Insert auth users directly; the trigger provisions their profiles."""
    created: list[str] = []

    async def _create(**attributes: str) -> str:
        user_id = str(uuid4())
        async with postgres_pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO auth.users (id, email, raw_user_meta_data)
                VALUES ($1::uuid, $2, $3::jsonb)
                """,
                user_id,
                f"{user_id}@mail.org",
                json.dumps(attributes),
            )
        created.append(user_id)
        return user_id

    yield _create

    async with postgres_pool.acquire() as conn:
        for user_id in created:
            await conn.execute("DELETE FROM public.login_history WHERE user_id = $1", user_id)
            await conn.execute("DELETE FROM public.profile_changes WHERE user_id = $1", user_id)
            await conn.execute("DELETE FROM auth.users WHERE id = $1::uuid", user_id)
