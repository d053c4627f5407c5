"""Configuration model exports.

    from warden.config.models import StorageConfig, AccountsConfig
"""

from warden.config.models.accounts import AccountsConfig
from warden.config.models.identity import IdentityConfig
from warden.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from warden.config.models.storage import PostgresConfig, StorageConfig

__all__ = [
    "AccountsConfig",
    "IdentityConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "PostgresConfig",
    "StorageConfig",
]
