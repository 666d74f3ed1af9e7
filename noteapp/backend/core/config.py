"""
Configuration Management.

Loads optional overrides from config/.env and settings from
config/settings/*.yaml. No hardcoded values in code: all configuration
comes from these sources.

Overrides (.env or environment, prefix NOTEAPP_):
    NOTEAPP_DATABASE_PATH, NOTEAPP_PREFERENCES_PATH

Settings (YAML):
    application.yaml   - App identity, live query and editor timing, theme
    database.yaml      - Notes database and preference file locations
    logging.yaml       - Logging configuration
    concurrency.yaml   - Thread pool size, shutdown timing
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from noteapp.backend.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    DatabaseSchema,
    LoggingSchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Per-machine overrides loaded from config/.env or the environment."""

    database_path: str | None = None
    preferences_path: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="NOTEAPP_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


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
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of causing cryptic KeyErrors later.

    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._concurrency = _load_validated(ConcurrencySchema, "concurrency.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Database settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def concurrency(self) -> ConcurrencySchema:
        """Concurrency settings (thread pool, shutdown)."""
        return self._concurrency


@lru_cache
def get_settings() -> Settings:
    """Get cached overrides instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def _resolve_data_path(configured: str) -> Path:
    path = Path(configured).expanduser()
    if path.is_absolute():
        return path
    return find_project_root() / path


def get_database_path() -> Path:
    """Location of the notes SQLite file (env override wins over YAML)."""
    override = get_settings().database_path
    return _resolve_data_path(override or get_app_config().database.path)


def get_preferences_path() -> Path:
    """Location of the theme preference file (env override wins over YAML)."""
    override = get_settings().preferences_path
    return _resolve_data_path(override or get_app_config().database.preferences_path)


def get_database_url(path: Path | None = None) -> str:
    """
    Construct the async SQLite URL for the notes database.

    Args:
        path: Explicit database file. Defaults to get_database_path().

    Returns:
        Database connection URL string.
    """
    db_path = path if path is not None else get_database_path()
    return f"sqlite+aiosqlite:///{db_path}"
