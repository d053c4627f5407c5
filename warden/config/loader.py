"""Layered TOML configuration for Warden.

config/default.toml is required and config/{WARDEN_ENV}.toml is merged
over it when present. Secrets such as the identity API key are only
accepted from the environment, never from these files.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_VAR = "WARDEN_CONFIG_DIR"
ENVIRONMENT_VAR = "WARDEN_ENV"
DEFAULT_ENVIRONMENT = "development"

# (section, key) pairs that must come from WARDEN_* variables
SECRET_KEYS: tuple[tuple[str, str], ...] = (("identity", "api_key"),)


def get_config_dir() -> Path:
    """Locate the directory holding default.toml.

    WARDEN_CONFIG_DIR wins when set. Otherwise the current directory and
    its parents are searched for config/default.toml, so commands run
    from anywhere inside the repository pick up the same files.
    """
    override = os.environ.get(CONFIG_DIR_VAR)
    if override:
        path = Path(override)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {override}")
        return path

    current = Path.cwd()
    for directory in (current, *current.parents):
        candidate = directory / "config"
        if (candidate / "default.toml").exists():
            return candidate

    return Path("config")


def get_environment() -> str:
    """Name of the active environment, from WARDEN_ENV."""
    return os.environ.get(ENVIRONMENT_VAR, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base; nested tables merge key by key."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def check_no_secrets(config: dict[str, Any], source: Path) -> None:
    """Reject secrets committed to a configuration file.

    Raises:
        ValueError: If source sets any of SECRET_KEYS
    """
    for section, key in SECRET_KEYS:
        table = config.get(section)
        if isinstance(table, dict) and key in table:
            env_name = f"WARDEN_{section.upper()}__{key.upper()}"
            raise ValueError(
                f"{section}.{key} must not be set in {source.name}; use {env_name}"
            )


def load_config(
    environment: str | None = None,
    config_dir: Path | None = None,
) -> dict[str, Any]:
    """Load default.toml and merge the environment file over it.

    Args:
        environment: Environment name; defaults to WARDEN_ENV
        config_dir: Directory to read; defaults to get_config_dir()
    """
    config_dir = config_dir or get_config_dir()
    environment = environment or get_environment()

    default_path = config_dir / "default.toml"
    if not default_path.exists():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            f"Create config/default.toml or set {CONFIG_DIR_VAR}."
        )

    config = load_toml(default_path)
    check_no_secrets(config, default_path)

    env_path = config_dir / f"{environment}.toml"
    if env_path.exists():
        overrides = load_toml(env_path)
        check_no_secrets(overrides, env_path)
        config = deep_merge(config, overrides)

    return config
