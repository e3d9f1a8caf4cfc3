# src/tide/config/config.py
"""Configuration system for Tide.

Each section is a ``BaseSettings`` model reading its fields from the process
environment and a local ``.env`` file. Variable names are matched without
regard to case.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

POSTGRES_BACKENDS = frozenset({"postgres", "postgresql"})


def _settings_config() -> SettingsConfigDict:
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


class DatabaseConfig(BaseSettings):
    """Database configuration settings."""

    model_config = _settings_config()

    database_url: str = Field("", validation_alias="TIDE_DATABASE_URL")
    backend: str = Field("sqlite", validation_alias="TIDE_DB_BACKEND")
    sqlite_path: str = Field("./data/tide.db", validation_alias="TIDE_SQLITE_PATH")
    postgres_user: str = Field("tide", validation_alias="POSTGRES_USER")
    postgres_password: str = Field("tide_password", validation_alias="POSTGRES_PASSWORD")
    postgres_db: str = Field("tide", validation_alias="POSTGRES_DB")
    postgres_host: str = Field("localhost", validation_alias="POSTGRES_HOST")
    postgres_port: str = Field("5432", validation_alias="POSTGRES_PORT")
    echo: bool = Field(False, validation_alias="TIDE_DB_ECHO")

    @property
    def is_postgres(self) -> bool:
        """True when ``backend`` names PostgreSQL in any accepted spelling."""
        return self.backend.strip().lower() in POSTGRES_BACKENDS

    @property
    def uses_sqlite_file(self) -> bool:
        """True when the URL is built from ``sqlite_path``."""
        return not self.database_url and not self.is_postgres

    @property
    def postgres_url(self) -> str:
        """Generate PostgreSQL connection URL with psycopg driver."""
        return (
            f"postgresql+psycopg://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def sqlite_url(self) -> str:
        """Generate the aiosqlite URL for the local data file."""
        return f"sqlite+aiosqlite:///{self.sqlite_path}"

    @property
    def url(self) -> str:
        """Resolve the effective SQLAlchemy URL."""
        if self.database_url:
            return self.database_url
        if self.is_postgres:
            return self.postgres_url
        return self.sqlite_url


class SystemConfig(BaseSettings):
    """System configuration settings."""

    model_config = _settings_config()

    log_level: str = Field("INFO", validation_alias="TIDE_LOG_LEVEL")
    log_format: str = Field("", validation_alias="TIDE_LOG_FORMAT")
    log_include_trace: bool = Field(False, validation_alias="TIDE_LOG_INCLUDE_TRACE")
    host: str = Field("127.0.0.1", validation_alias="TIDE_HOST")
    port: int = Field(8000, validation_alias="PORT")
    event_history: int = Field(1000, validation_alias="TIDE_EVENT_HISTORY")


class TideConfig(BaseModel):
    """Main configuration class."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    @classmethod
    def load(cls, env_file: str | None = ".env") -> TideConfig:
        """Read every section from the environment and ``env_file``.

        Pass ``env_file=None`` to read the process environment only.
        """
        return cls(
            database=DatabaseConfig(_env_file=env_file),
            system=SystemConfig(_env_file=env_file),
        )


# Global configuration instance
config = TideConfig.load()
