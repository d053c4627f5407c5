"""Alembic environment for the account schema.

The database is resolved exactly as the application resolves it:
storage.postgres.dsn from the layered settings, then the variables
PostgresPool falls back to. Migrations run over asyncpg.

The account tables reference auth.users and the anon/authenticated
roles, so the target must be a managed Postgres that already provides
them; the environment refuses to run otherwise.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from warden.config import get_settings
from warden.db.pool import PostgresPool

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Migrations are raw SQL; there is no metadata to autogenerate from
target_metadata = None


def get_database_url() -> str:
    """SQLAlchemy URL for the database the account stores use."""
    dsn = PostgresPool(dsn=get_settings().storage.postgres.dsn).dsn
    if dsn.startswith("postgresql://"):
        dsn = dsn.replace("postgresql://", "postgresql+asyncpg://", 1)
    return dsn


def check_auth_schema(connection: Connection) -> None:
    """Fail early when the identity backend's objects are missing."""
    has_users = connection.execute(
        text("SELECT to_regclass('auth.users') IS NOT NULL")
    ).scalar()
    roles = connection.execute(
        text("SELECT count(*) FROM pg_roles WHERE rolname IN ('anon', 'authenticated')")
    ).scalar()
    if not has_users or roles != 2:
        raise RuntimeError(
            "Target database lacks auth.users or the anon/authenticated roles"
        )


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    check_auth_schema(connection)
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = get_database_url()

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
