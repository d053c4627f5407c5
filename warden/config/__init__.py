"""Warden configuration.

Settings are layered, lowest to highest priority: model defaults,
config/default.toml, config/{WARDEN_ENV}.toml, then WARDEN_* variables
(nested with "__", e.g. WARDEN_STORAGE__BACKEND=postgres).

    from warden.config import get_settings

    settings = get_settings()
"""

from functools import lru_cache
from pathlib import Path

from warden.config.loader import load_config
from warden.config.settings import Settings, set_toml_config


def load_settings(
    environment: str | None = None,
    config_dir: Path | None = None,
) -> Settings:
    """Build Settings for an environment without touching the cache."""
    set_toml_config(load_config(environment=environment, config_dir=config_dir))
    return Settings()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings for the active environment, cached for the process."""
    return load_settings()


def reload_settings() -> Settings:
    """Drop the cached settings and load them again."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "get_settings", "load_settings", "reload_settings"]
