import pytest

from tide.config import DatabaseConfig, SystemConfig, TideConfig
from tide.core.env import reload_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop every variable the config reads so host settings cannot leak in."""

    for model in (DatabaseConfig, SystemConfig):
        for info in model.model_fields.values():
            monkeypatch.delenv(info.validation_alias, raising=False)
            monkeypatch.delenv(info.validation_alias.lower(), raising=False)
    return monkeypatch


def test_defaults_use_local_sqlite_file():
    settings = TideConfig.load(env_file=None)

    assert settings.database.url == "sqlite+aiosqlite:///./data/tide.db"
    assert settings.database.is_postgres is False
    assert settings.database.uses_sqlite_file is True
    assert settings.system.port == 8000
    assert settings.system.event_history == 1000


def test_explicit_database_url_wins(clean_env):
    clean_env.setenv("TIDE_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    clean_env.setenv("TIDE_DB_BACKEND", "postgres")

    settings = TideConfig.load(env_file=None)

    assert settings.database.url == "sqlite+aiosqlite:///:memory:"
    assert settings.database.uses_sqlite_file is False


@pytest.mark.parametrize("backend", ["postgres", "postgresql", " PostgreSQL "])
def test_postgres_backend_builds_psycopg_url(clean_env, backend):
    clean_env.setenv("TIDE_DB_BACKEND", backend)
    clean_env.setenv("POSTGRES_USER", "keeper")
    clean_env.setenv("POSTGRES_PASSWORD", "secret")
    clean_env.setenv("POSTGRES_HOST", "db")
    clean_env.setenv("POSTGRES_PORT", "6543")
    clean_env.setenv("POSTGRES_DB", "worlds")

    settings = TideConfig.load(env_file=None)

    assert settings.database.is_postgres is True
    assert settings.database.uses_sqlite_file is False
    assert settings.database.url == "postgresql+psycopg://keeper:secret@db:6543/worlds"


def test_lowercase_and_typed_values(clean_env):
    clean_env.setenv("tide_sqlite_path", "/tmp/w.db")
    clean_env.setenv("PORT", "9001")
    clean_env.setenv("TIDE_DB_ECHO", "true")

    settings = TideConfig.load(env_file=None)

    assert settings.database.sqlite_url == "sqlite+aiosqlite:////tmp/w.db"
    assert settings.system.port == 9001
    assert settings.database.echo is True


def test_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("TIDE_LOG_LEVEL=DEBUG\nTIDE_EVENT_HISTORY=50\nUNRELATED=1\n")

    settings = reload_config(str(env_file))

    assert settings.system.log_level == "DEBUG"
    assert settings.system.event_history == 50


def test_process_environment_beats_env_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("TIDE_HOST=0.0.0.0\n")
    clean_env.setenv("TIDE_HOST", "10.0.0.5")

    assert TideConfig.load(str(env_file)).system.host == "10.0.0.5"


def test_sections_accept_field_names():
    database = DatabaseConfig(_env_file=None, sqlite_path="/srv/tide.db")

    assert database.url == "sqlite+aiosqlite:////srv/tide.db"
