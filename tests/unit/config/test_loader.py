"""Unit tests for TOML configuration loader."""

import tomllib
from pathlib import Path

import pytest

from warden.config.loader import (
    check_no_secrets,
    deep_merge,
    get_config_dir,
    get_environment,
    load_config,
    load_toml,
)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_flat_dicts(self) -> None:
        """Flat dictionaries are merged correctly."""
        result = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
        assert result == {"a": 1, "b": 3, "c": 4}

    def test_merge_nested_dicts(self) -> None:
        """Nested dictionaries are merged recursively."""
        base = {"storage": {"backend": "inmemory", "postgres": {"min_pool_size": 2}}}
        override = {"storage": {"postgres": {"min_pool_size": 5}}}
        result = deep_merge(base, override)
        assert result == {
            "storage": {"backend": "inmemory", "postgres": {"min_pool_size": 5}}
        }

    def test_override_replaces_non_dict(self) -> None:
        """Non-dict values in override replace base values."""
        assert deep_merge({"a": {"x": 1}}, {"a": "replaced"}) == {"a": "replaced"}

    def test_base_unmodified(self) -> None:
        """Original base dictionary is not modified."""
        base = {"a": 1}
        deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadToml:
    """Tests for load_toml function."""

    def test_loads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "x.toml"
        path.write_text("[accounts]\nname_min_length = 3\n")
        assert load_toml(path) == {"accounts": {"name_min_length": 3}}

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_toml(tmp_path / "missing.toml")

    def test_invalid_syntax_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("this is = = not toml")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_toml(path)


class TestEnvironment:
    """Tests for environment and config directory resolution."""

    def test_default_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("WARDEN_ENV", raising=False)
        assert get_environment() == "development"

    def test_environment_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WARDEN_ENV", "production")
        assert get_environment() == "production"

    def test_config_dir_from_env(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("WARDEN_CONFIG_DIR", str(test_config_dir))
        assert get_config_dir() == test_config_dir

    def test_config_dir_missing_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("WARDEN_CONFIG_DIR", str(tmp_path / "nope"))
        with pytest.raises(FileNotFoundError):
            get_config_dir()

    def test_config_dir_found_from_subdirectory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "default.toml").write_text("debug = false\n")
        nested = tmp_path / "warden" / "db"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        assert get_config_dir() == tmp_path / "config"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_environment_file_overrides_default(self, mock_toml_files, warden_env) -> None:
        mock_toml_files({
            "default.toml": "debug = false\n[storage]\nbackend = 'inmemory'\n",
            "staging.toml": "debug = true\n",
        })
        warden_env("staging")

        config = load_config()

        assert config["debug"] is True
        assert config["storage"]["backend"] == "inmemory"

    def test_explicit_environment_and_directory(
        self, test_config_dir: Path, mock_toml_files
    ) -> None:
        mock_toml_files({
            "default.toml": "[identity]\nbackend = 'inmemory'\n",
            "production.toml": "[identity]\nbackend = 'gotrue'\n",
        })

        config = load_config(environment="production", config_dir=test_config_dir)

        assert config["identity"]["backend"] == "gotrue"

    def test_missing_default_raises(self, warden_env) -> None:
        warden_env()
        with pytest.raises(FileNotFoundError, match="default.toml"):
            load_config()

    def test_secret_in_environment_file_rejected(self, mock_toml_files, warden_env) -> None:
        mock_toml_files({
            "default.toml": "[identity]\nbackend = 'gotrue'\n",
            "production.toml": "[identity]\napi_key = 'anon-key'\n",
        })
        warden_env("production")

        with pytest.raises(ValueError, match="WARDEN_IDENTITY__API_KEY"):
            load_config()


class TestCheckNoSecrets:
    """Tests for check_no_secrets function."""

    def test_allows_non_secret_keys(self) -> None:
        check_no_secrets({"identity": {"url": "https://auth.example.test"}}, Path("x.toml"))

    def test_rejects_api_key(self) -> None:
        with pytest.raises(ValueError, match="identity.api_key must not be set in x.toml"):
            check_no_secrets({"identity": {"api_key": "k"}}, Path("x.toml"))
