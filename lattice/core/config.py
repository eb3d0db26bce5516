"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
No hardcoded endpoints in code. All configuration comes from these sources.

Secrets (.env):
    RECEPTOR_USERNAME, RECEPTOR_PASSWORD

Settings (YAML):
    application.yaml   - Identity, system domain, receptor, loggregator, startup
    logging.yaml       - Logging configuration

The project root is the nearest ancestor of the working directory holding a
.project_root marker, unless LATTICE_PROJECT_ROOT points somewhere else.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from lattice.core.config_schema import ApplicationSchema, LoggingSchema

PROJECT_ROOT_ENV_VAR = "LATTICE_PROJECT_ROOT"


def find_project_root() -> Path:
    """Find project root from LATTICE_PROJECT_ROOT or the .project_root marker file."""
    override = os.environ.get(PROJECT_ROOT_ENV_VAR)
    if override:
        root = Path(override).expanduser()
        if not (root / ".project_root").exists():
            raise RuntimeError(
                f"Project root not found at {root} ({PROJECT_ROOT_ENV_VAR}). "
                "Ensure .project_root file exists."
            )
        return root

    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env. Receptor credentials are optional."""

    receptor_username: str = ""
    receptor_password: str = ""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def receptor_auth(self) -> tuple[str, str] | None:
        """Basic auth pair for the receptor, or None when no username is set."""
        if not self.receptor_username:
            return None
        return self.receptor_username, self.receptor_password


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_receptor_settings() -> tuple[str, float]:
    """
    Get the receptor base URL and request timeout from application.yaml.

    Returns:
        Tuple of (base_url, timeout_seconds).
    """
    receptor = get_app_config().application.receptor
    return receptor.url.rstrip("/"), float(receptor.timeout)


def get_loggregator_settings() -> tuple[str, float]:
    """
    Get the log stream base URL and connect timeout from application.yaml.

    Returns:
        Tuple of (base_url, connect_timeout_seconds).
    """
    loggregator = get_app_config().application.loggregator
    return loggregator.url.rstrip("/"), float(loggregator.connect_timeout)
