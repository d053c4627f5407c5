"""Shared test fixtures for the Warden test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from warden.config import get_settings
from warden.config.settings import set_toml_config

# Host variables that would leak into Settings or PostgresPool
HOST_CONFIG_VARS = (
    "DATABASE_URL",
    "POSTGRES_HOST",
    "POSTGRES_PORT",
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "POSTGRES_DB",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run each test without host WARDEN_* variables or cached settings."""
    for name in list(os.environ):
        if name.startswith("WARDEN_") or name in HOST_CONFIG_VARS:
            monkeypatch.delenv(name)

    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Write TOML files into the test config directory.

    Usage:
        mock_toml_files({
            "default.toml": "[storage]\\nbackend = 'inmemory'",
            "staging.toml": "[storage]\\nbackend = 'postgres'",
        })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


@pytest.fixture
def warden_env(
    test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Callable[..., None]:
    """Point configuration at the test config directory.

    Usage:
        warden_env("staging", ACCOUNTS__HISTORY_LIMIT="5")

    sets WARDEN_CONFIG_DIR, WARDEN_ENV=staging and
    WARDEN_ACCOUNTS__HISTORY_LIMIT=5 for the rest of the test.
    """

    def _apply(environment: str = "test", **overrides: str) -> None:
        monkeypatch.setenv("WARDEN_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("WARDEN_ENV", environment)
        for key, value in overrides.items():
            monkeypatch.setenv(f"WARDEN_{key.upper()}", value)

    return _apply
