"""
Configuration Management.

Secrets come from config/.env (or the process environment) and everything
else from the YAML files under config/settings/, one file per section:

    application.yaml   identity, server, cors, timeouts
    database.yaml      database and Redis connections
    logging.yaml       log level, format, optional JSONL file
    features.yaml      feature flags (docs, change relay, live publications)
    security.yaml      JWT, password policy, admin bootstrap emails
    events.yaml        change relay channels, resilience, publication buffers

Each file is validated against its schema in config_schema.py when the
configuration is first loaded. A DATABASE_URL environment variable, when
set, replaces the database.yaml connection for the app and for Alembic.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notehub.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    EventsSchema,
    FeaturesSchema,
    LoggingSchema,
    SecuritySchema,
)

PROJECT_MARKER = ".project_root"

# AppConfig attribute -> (file under config/settings, schema)
CONFIG_SECTIONS: dict[str, tuple[str, type[BaseModel]]] = {
    "application": ("application.yaml", ApplicationSchema),
    "database": ("database.yaml", DatabaseSchema),
    "logging": ("logging.yaml", LoggingSchema),
    "features": ("features.yaml", FeaturesSchema),
    "security": ("security.yaml", SecuritySchema),
    "events": ("events.yaml", EventsSchema),
}

_ASYNC_DRIVERS = {"+asyncpg": "", "+aiosqlite": ""}


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from start (default: cwd) to the directory holding .project_root."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        if (directory / PROJECT_MARKER).exists():
            return directory
    raise RuntimeError(f"Project root not found. Ensure {PROJECT_MARKER} file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load one YAML file from config/settings/ as a dict ({} when empty)."""
    config_path = find_project_root() / "config" / "settings" / filename
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def _load_validated(filename: str, schema_cls: type[BaseModel]) -> Any:
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class Settings(BaseSettings):
    """Secrets only: passwords and the token signing key."""

    db_password: str = ""
    redis_password: str = ""
    jwt_secret: str

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AppConfig:
    """Validated YAML configuration, one typed attribute per section."""

    application: ApplicationSchema
    database: DatabaseSchema
    logging: LoggingSchema
    features: FeaturesSchema
    security: SecuritySchema
    events: EventsSchema

    def __init__(self) -> None:
        for section, (filename, schema_cls) in CONFIG_SECTIONS.items():
            setattr(self, section, _load_validated(filename, schema_cls))

    def is_admin_email(self, email: str) -> bool:
        """Whether a signing-up account is bootstrapped with the admin role."""
        return email.lower() in {e.lower() for e in self.security.admin_emails}

    @property
    def relay_enabled(self) -> bool:
        """Whether any change traffic goes through Redis."""
        return self.features.events_enabled or self.features.events_publish_enabled


@lru_cache
def get_settings() -> Settings:
    """Cached secrets, read from <project root>/config/.env and the environment."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig()


def normalize_database_url(url: str, async_driver: bool = True) -> str:
    """
    Bring a connection URL to the driver the caller needs.

    Hosting platforms hand out postgres:// URLs; the app needs asyncpg and
    offline tooling needs the plain dialect.
    """
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]

    scheme, sep, rest = url.partition("://")
    for driver in _ASYNC_DRIVERS:
        scheme = scheme.replace(driver, "")
    if async_driver:
        scheme += "+aiosqlite" if scheme == "sqlite" else "+asyncpg"
    return f"{scheme}{sep}{rest}"


def get_database_url(async_driver: bool = True) -> str:
    """
    Database connection URL.

    Precedence: DATABASE_URL environment variable, then `url` in
    database.yaml, then the host/port/name fields plus DB_PASSWORD.
    """
    explicit = os.environ.get("DATABASE_URL") or get_app_config().database.url
    if explicit:
        return normalize_database_url(explicit, async_driver)

    db = get_app_config().database
    password = get_settings().db_password
    driver = "postgresql+asyncpg" if async_driver else "postgresql"
    return f"{driver}://{db.user}:{password}@{db.host}:{db.port}/{db.name}"


def get_redis_url() -> str:
    """Redis URL for the change relay; credentials only when a password is set."""
    redis = get_app_config().database.redis
    password = get_settings().redis_password
    auth = f":{password}@" if password else ""
    return f"redis://{auth}{redis.host}:{redis.port}/{redis.db}"
