"""Tests for configuration management."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from photoport.config import DEFAULT_DAYBOOK_URL, DaybookSettings, Settings, StateSettings


class TestDaybookSettings:
    """Test DaybookSettings validation."""

    def test_default_values(self):
        settings = DaybookSettings()
        assert settings.base_url == DEFAULT_DAYBOOK_URL
        assert settings.timeout_seconds == 30.0

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError, match="greater than 0"):
            DaybookSettings(timeout_seconds=0)

    def test_base_url_must_be_http(self):
        with pytest.raises(ValidationError, match="http"):
            DaybookSettings(base_url="ftp://daybook.example.com")


class TestStateSettings:
    """Test StateSettings validation."""

    def test_default_values(self):
        settings = StateSettings()
        assert settings.backend == "sqlite"
        assert settings.db_path == Path("./photoport_state.sqlite3")

    def test_string_path_converted(self):
        settings = StateSettings(db_path="/tmp/state.db")
        assert isinstance(settings.db_path, Path)

    def test_invalid_backend(self):
        with pytest.raises(ValidationError, match="Input should be"):
            StateSettings(backend="redis")


class TestSettings:
    """Test main Settings loading."""

    def test_defaults(self):
        settings = Settings()
        assert settings.log_level == "INFO"
        assert settings.daybook.base_url == DEFAULT_DAYBOOK_URL

    def test_from_yaml(self, temp_dir: Path):
        config_path = temp_dir / "config.yaml"
        config_path.write_text(
            yaml.safe_dump(
                {
                    "log_level": "DEBUG",
                    "daybook": {"base_url": "https://daybook.example.com/albums"},
                    "state": {"backend": "memory"},
                }
            )
        )

        settings = Settings.from_yaml(config_path)

        assert settings.log_level == "DEBUG"
        assert settings.daybook.base_url == "https://daybook.example.com/albums"
        assert settings.state.backend == "memory"

    def test_from_yaml_missing_file(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Settings.from_yaml(temp_dir / "missing.yaml")

    def test_from_yaml_invalid(self, temp_dir: Path):
        config_path = temp_dir / "config.yaml"
        config_path.write_text(yaml.safe_dump({"log_level": "LOUD"}))

        with pytest.raises(ValueError):
            Settings.from_yaml(config_path)

    def test_from_yaml_unparseable(self, temp_dir: Path):
        """Broken YAML is reported as ValueError, not a parser error."""
        config_path = temp_dir / "config.yaml"
        config_path.write_text("daybook: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            Settings.from_yaml(config_path)

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("PHOTOPORT_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("PHOTOPORT_DAYBOOK__TIMEOUT_SECONDS", "5")

        settings = Settings()

        assert settings.log_level == "WARNING"
        assert settings.daybook.timeout_seconds == 5.0

    def test_to_yaml_round_trip(self, temp_dir: Path):
        original = Settings(state={"db_path": str(temp_dir / "state.db")})
        path = temp_dir / "out.yaml"

        original.to_yaml(path)
        loaded = Settings.from_yaml(path)

        assert loaded.state.db_path == temp_dir / "state.db"
        assert loaded.daybook == original.daybook
