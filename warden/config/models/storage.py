"""Record store backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "postgres"]


class PostgresConfig(BaseModel):
    """PostgreSQL connection pool configuration.

    The DSN is normally supplied by WARDEN_DATABASE_URL or DATABASE_URL
    rather than committed to a config file.
    """

    dsn: str | None = Field(
        default=None,
        description="Connection string (falls back to environment variables)",
    )
    min_pool_size: int = Field(
        default=2,
        gt=0,
        description="Minimum connections to keep open",
    )
    max_pool_size: int = Field(
        default=10,
        gt=0,
        description="Maximum connections in pool",
    )
    max_inactive_connection_lifetime: float = Field(
        default=300.0,
        gt=0,
        description="Close connections idle longer than this (seconds)",
    )
    command_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Default timeout for queries (seconds)",
    )


class StorageConfig(BaseModel):
    """Configuration for the profile and audit record stores."""

    backend: BackendType = Field(
        default="inmemory",
        description="Backend used for profiles and history tables",
    )
    postgres: PostgresConfig = Field(
        default_factory=PostgresConfig,
        description="PostgreSQL settings, used when backend is 'postgres'",
    )
    inmemory_client_address: str = Field(
        default="127.0.0.1",
        description="Network address the in-memory store attributes to login rows",
    )
