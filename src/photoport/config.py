"""
Configuration management using Pydantic for validation.

Supports loading from:
- YAML files (primary)
- Environment variables with PHOTOPORT_ prefix
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DAYBOOK_URL = "https://us-central1-diary-a77f6.cloudfunctions.net/post-daybook-dtp"


class DaybookSettings(BaseModel):
    """Daybook destination configuration."""

    base_url: str = Field(
        default=DEFAULT_DAYBOOK_URL,
        description="Endpoint that album creation requests are POSTed to",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout for calls to Daybook",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got: {v}")
        return v


class StateSettings(BaseModel):
    """Where the idempotent executor keeps imported item ids."""

    backend: Literal["memory", "sqlite"] = Field(
        default="sqlite",
        description="Result store: 'sqlite' (durable, safe to retry) or 'memory'",
    )
    db_path: Path = Field(
        default=Path("./photoport_state.sqlite3"),
        description="Path to SQLite database for recorded import results",
    )

    @field_validator("db_path", mode="before")
    @classmethod
    def parse_db_path(cls, v):
        """Convert string path to Path object."""
        if isinstance(v, str):
            return Path(v)
        return v


class Settings(BaseSettings):
    """
    Main application settings.

    Can be loaded from:
    - YAML file: Settings.from_yaml("config.yaml")
    - Environment variables: PHOTOPORT_LOG_LEVEL=DEBUG, PHOTOPORT_DAYBOOK__BASE_URL=...
    """

    model_config = SettingsConfigDict(
        env_prefix="PHOTOPORT_",
        env_nested_delimiter="__",
        extra="ignore",  # Ignore unknown fields for forward compatibility
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    daybook: DaybookSettings = Field(
        default_factory=DaybookSettings,
        description="Daybook destination settings",
    )
    state: StateSettings = Field(
        default_factory=StateSettings,
        description="Import state settings",
    )

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Settings":
        """
        Load settings from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Settings instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

        return cls(**data)

    def to_yaml(self, path: Path | str) -> None:
        """Save settings to a YAML file."""
        data = self.model_dump(mode="json")

        with open(Path(path), "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
