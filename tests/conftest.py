"""Test configuration for the world-details service."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import asyncio
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.pool import NullPool

from tide.canon import Database, WorldDetailsService
from tide.core.logs import get_event_logger
from tide.web import create_app


@pytest.fixture(autouse=True)
def _reset_event_log() -> Iterator[None]:
    get_event_logger().clear()
    yield
    get_event_logger().clear()


@pytest.fixture
def database(tmp_path: Path) -> Iterator[Database]:
    """A throwaway SQLite file; ``NullPool`` keeps connections off the event loop."""

    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'tide.db'}", poolclass=NullPool)
    asyncio.run(db.ensure_schema())
    yield db
    asyncio.run(db.dispose())


@pytest.fixture
def service(database: Database) -> WorldDetailsService:
    return WorldDetailsService(database)


@pytest.fixture
def world_id(service: WorldDetailsService) -> int:
    return asyncio.run(service.create_world("Aerth", "A drowned continent")).id


@pytest.fixture
def catalog_ids(service: WorldDetailsService) -> dict[str, int]:
    """Seed a few races and creatures and return their ids by name."""

    async def _seed() -> dict[str, int]:
        ids = {}
        for name in ("Elf", "Dwarf", "Human"):
            ids[name] = (await service.create_catalog_entry("races", name)).id
        for name in ("Wolf", "Wyvern"):
            ids[name] = (await service.create_catalog_entry("creatures", name)).id
        return ids

    return asyncio.run(_seed())


@pytest.fixture
def count_rows(database: Database):
    """Return a function counting rows of ``model`` for one world."""

    def _count(model, world_id: int | None = None) -> int:
        async def _run() -> int:
            stmt = select(func.count()).select_from(model)
            if world_id is not None:
                stmt = stmt.where(model.world_id == world_id)
            async with database.session() as session:
                return (await session.execute(stmt)).scalar_one()

        return asyncio.run(_run())

    return _count


@pytest.fixture
def client(database: Database) -> Iterator[TestClient]:
    with TestClient(create_app(database)) as test_client:
        yield test_client
