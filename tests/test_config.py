"""Tests for settings resolution."""

from pathlib import Path

import pytest

from perseform.config import (
    ConfigError,
    Settings,
    get_config_path,
    get_perseform_home,
    load_config_file,
    load_settings,
    write_config_file,
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point PERSEFORM_HOME at a temp directory and clear store overrides."""
    home = tmp_path / "home"
    monkeypatch.setenv("PERSEFORM_HOME", str(home))
    monkeypatch.delenv("PERSEFORM_STORE_BACKEND", raising=False)
    monkeypatch.delenv("PERSEFORM_STORE_PATH", raising=False)
    return home


class TestPaths:
    """Tests for home and config paths."""

    def test_home_from_env(self, isolated_home: Path) -> None:
        """Test that PERSEFORM_HOME selects the home directory."""
        assert get_perseform_home() == isolated_home
        assert get_config_path() == isolated_home / "config.yaml"

    def test_default_home(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the default home directory."""
        monkeypatch.delenv("PERSEFORM_HOME")

        assert get_perseform_home() == Path.home() / ".config" / "perseform"


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults(self, isolated_home: Path) -> None:
        """Test settings with no file and no environment."""
        settings = load_settings()

        assert settings.store_backend == "json"
        assert settings.store_path is None
        assert settings.resolved_store_path() == isolated_home / "store"

    def test_config_file(self, isolated_home: Path) -> None:
        """Test reading settings from config.yaml."""
        isolated_home.mkdir()
        (isolated_home / "config.yaml").write_text("store_backend: memory\n")

        assert load_settings().store_backend == "memory"

    def test_env_overrides_file(self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that environment variables win over the file."""
        isolated_home.mkdir()
        (isolated_home / "config.yaml").write_text("store_backend: memory\nstore_path: /from/file\n")
        monkeypatch.setenv("PERSEFORM_STORE_BACKEND", "json")
        monkeypatch.setenv("PERSEFORM_STORE_PATH", "/from/env")

        settings = load_settings()

        assert settings.store_backend == "json"
        assert settings.store_path == Path("/from/env")

    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that explicit overrides win over the environment."""
        monkeypatch.setenv("PERSEFORM_STORE_PATH", "/from/env")

        assert load_settings(store_path=Path("/explicit")).store_path == Path("/explicit")

    def test_none_override_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a None override does not clear a configured value."""
        monkeypatch.setenv("PERSEFORM_STORE_PATH", "/from/env")

        assert load_settings(store_path=None).store_path == Path("/from/env")

    def test_invalid_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an unknown backend is a config error."""
        monkeypatch.setenv("PERSEFORM_STORE_BACKEND", "redis")

        with pytest.raises(ConfigError, match="Invalid perseform settings"):
            load_settings()


class TestConfigFile:
    """Tests for reading and writing config.yaml."""

    def test_missing_file_is_empty(self) -> None:
        """Test that a missing config file yields no values."""
        assert load_config_file() == {}

    def test_empty_file_is_empty(self, isolated_home: Path) -> None:
        """Test that an empty config file yields no values."""
        isolated_home.mkdir()
        (isolated_home / "config.yaml").write_text("")

        assert load_config_file() == {}

    def test_invalid_yaml(self, isolated_home: Path) -> None:
        """Test that malformed YAML is a config error."""
        isolated_home.mkdir()
        (isolated_home / "config.yaml").write_text("store_backend: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config_file()

    def test_non_mapping(self, isolated_home: Path) -> None:
        """Test that a YAML list is a config error."""
        isolated_home.mkdir()
        (isolated_home / "config.yaml").write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config_file()

    def test_write_then_load(self, isolated_home: Path) -> None:
        """Test that written settings load back."""
        path = write_config_file(Settings(store_backend="json", store_path=Path("/data/store")))

        assert path == isolated_home / "config.yaml"
        assert load_settings() == Settings(store_backend="json", store_path=Path("/data/store"))
