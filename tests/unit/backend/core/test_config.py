"""
Unit tests for configuration loading.

Most tests read the YAML files shipped in config/settings; the failure
cases build a throwaway project under tmp_path and chdir into it.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from notehub.backend.core.config import (
    CONFIG_SECTIONS,
    AppConfig,
    Settings,
    find_project_root,
    get_app_config,
    get_database_url,
    get_redis_url,
    get_settings,
    load_yaml_config,
    normalize_database_url,
)
from notehub.backend.core.config_schema import (
    ApplicationSchema,
    EventsSchema,
    LoggingSchema,
    SecuritySchema,
)

@pytest.fixture(autouse=True)
def _fresh_config():
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()

@pytest.fixture
def tmp_settings(tmp_path, monkeypatch):
    """An empty config/settings directory inside a marked project root."""
    (tmp_path / ".project_root").touch()
    settings = tmp_path / "config" / "settings"
    settings.mkdir(parents=True)
    monkeypatch.chdir(tmp_path)
    return settings

def with_value(data: dict, dotted: str, value) -> dict:
    """Set a nested key such as "server.port" in a loaded YAML dict."""
    *parents, leaf = dotted.split(".")
    target = data
    for key in parents:
        target = target[key]
    target[leaf] = value
    return data


class TestProjectRoot:
    def test_repository_root(self):
        root = find_project_root()
        assert (root / "config" / "settings" / "application.yaml").exists()

    def test_found_from_nested_directory(self, tmp_path):
        (tmp_path / ".project_root").touch()
        nested = tmp_path / "notehub" / "backend" / "services"
        nested.mkdir(parents=True)

        assert find_project_root(nested) == tmp_path.resolve()

    def test_missing_marker(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(RuntimeError, match="Project root not found"):
            find_project_root()


class TestYamlFiles:
    @pytest.mark.parametrize("section", sorted(CONFIG_SECTIONS))
    def test_every_section_validates(self, section):
        filename, schema_cls = CONFIG_SECTIONS[section]
        assert isinstance(schema_cls(**load_yaml_config(filename)), schema_cls)

    def test_unknown_file(self):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_yaml_config("courses.yaml")

    def test_empty_file_is_empty_dict(self, tmp_settings):
        (tmp_settings / "features.yaml").write_text("")
        assert load_yaml_config("features.yaml") == {}

    def test_incomplete_file_names_itself(self, tmp_settings):
        (tmp_settings / "application.yaml").write_text("name: NoteHub\n")

        with pytest.raises(ValueError, match="Invalid configuration in application.yaml"):
            AppConfig()

    def test_unknown_key_rejected(self):
        data = load_yaml_config("events.yaml")
        data["channel_suffix"] = "x"

        with pytest.raises(PydanticValidationError, match="Extra inputs are not permitted"):
            EventsSchema(**data)

    @pytest.mark.parametrize("filename, schema_cls, dotted, bad_value", [
        ("logging.yaml", LoggingSchema, "level", "VERBOSE"),
        ("security.yaml", SecuritySchema, "passwords.min_length", 100),
        ("application.yaml", ApplicationSchema, "server.port", 70000),
        ("events.yaml", EventsSchema, "publications.subscriber_queue_size", 0),
    ])
    def test_out_of_range_rejected(self, filename, schema_cls, dotted, bad_value):
        data = with_value(load_yaml_config(filename), dotted, bad_value)

        with pytest.raises(PydanticValidationError):
            schema_cls(**data)


class TestShippedSettings:
    def test_feature_defaults(self):
        config = AppConfig()
        assert config.features.events_publish_enabled is False
        assert config.features.publications_live_enabled is True
        assert config.relay_enabled is False

    def test_publication_queue_size(self):
        assert AppConfig().events.publications.subscriber_queue_size == 1000

    @pytest.mark.parametrize("email, expected", [
        ("admin@foo.com", True),
        ("Admin@Foo.com", True),
        ("student@foo.com", False),
    ])
    def test_admin_emails(self, email, expected):
        assert AppConfig().is_admin_email(email) is expected


class TestCachedAccessors:
    def test_settings_cached(self):
        assert isinstance(get_settings(), Settings)
        assert get_settings() is get_settings()

    def test_app_config_cached(self):
        assert isinstance(get_app_config(), AppConfig)
        assert get_app_config() is get_app_config()

    def test_jwt_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "from-the-environment")
        assert get_settings().jwt_secret == "from-the-environment"


class TestGetDatabaseUrl:
    """Tests for database URL construction."""

    @pytest.fixture(autouse=True)
    def _no_url_override(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

    def test_async_url_uses_asyncpg_driver(self):
        assert get_database_url(async_driver=True).startswith("postgresql+asyncpg://")

    def test_sync_url_uses_postgresql_driver(self):
        assert get_database_url(async_driver=False).startswith("postgresql://")

    def test_url_contains_config_values(self):
        db = get_app_config().database
        url = get_database_url()
        assert db.host in url
        assert str(db.port) in url
        assert url.endswith(f"/{db.name}")

    def test_yaml_url_wins_over_fields(self):
        get_app_config().database.url = "sqlite+aiosqlite:///./data/notehub.db"

        assert get_database_url() == "sqlite+aiosqlite:///./data/notehub.db"
        assert get_database_url(async_driver=False) == "sqlite:///./data/notehub.db"

    def test_environment_url_wins_over_yaml(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db.internal:5432/notehub")
        get_app_config().database.url = "sqlite+aiosqlite:///./data/notehub.db"

        assert get_database_url() == "postgresql+asyncpg://u:p@db.internal:5432/notehub"


class TestNormalizeDatabaseUrl:
    @pytest.mark.parametrize("url, async_driver, expected", [
        ("postgres://u:p@h/db", True, "postgresql+asyncpg://u:p@h/db"),
        ("postgresql://u:p@h/db", True, "postgresql+asyncpg://u:p@h/db"),
        ("postgresql+asyncpg://u:p@h/db", False, "postgresql://u:p@h/db"),
        ("sqlite:///notes.db", True, "sqlite+aiosqlite:///notes.db"),
        ("sqlite+aiosqlite:///notes.db", True, "sqlite+aiosqlite:///notes.db"),
    ])
    def test_driver_conversion(self, url, async_driver, expected):
        assert normalize_database_url(url, async_driver) == expected


class TestGetRedisUrl:
    def test_url_contains_config_values(self):
        redis = get_app_config().database.redis
        url = get_redis_url()
        assert url.startswith("redis://")
        assert url.endswith(f"{redis.host}:{redis.port}/{redis.db}")

    def test_password_from_secrets(self, monkeypatch):
        monkeypatch.setenv("REDIS_PASSWORD", "s3cret")

        assert get_redis_url().startswith("redis://:s3cret@")
