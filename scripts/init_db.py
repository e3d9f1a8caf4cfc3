# scripts/init_db.py
"""Bring the configured database up to the latest schema revision."""

from __future__ import annotations

import argparse
from pathlib import Path

from alembic import command as alembic_command  # type: ignore[attr-defined]
from alembic.config import Config

from tide.core.env import reload_config
from tide.core.logging import get_logger, init_logging

logger = get_logger(__name__)

ROOT = Path(__file__).resolve().parents[1]


def alembic_config(url: str) -> Config:
    """Return the project's alembic config pointed at ``url``."""
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


def init_db(revision: str = "head") -> None:
    """Apply migrations up to ``revision`` on the configured database."""
    settings = reload_config().database
    if settings.uses_sqlite_file:
        Path(settings.sqlite_path).parent.mkdir(parents=True, exist_ok=True)

    logger.info("Upgrading %s to %s", settings.backend, revision)
    try:
        alembic_command.upgrade(alembic_config(settings.url), revision)  # type: ignore[arg-type]
    except Exception as e:
        logger.exception("Failed to apply Alembic migrations: %s", e)
        raise
    logger.info("Database is at revision %s", revision)


if __name__ == "__main__":  # pragma: no cover - CLI execution
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("revision", nargs="?", default="head")
    args = parser.parse_args()

    init_logging()
    init_db(args.revision)
