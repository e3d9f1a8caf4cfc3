# scripts/seed_catalogs.py
"""Seed the shared race and creature catalogs from a YAML file."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from tide.canon import WorldDetailsService, create_database, load_catalog_file
from tide.core.env import reload_config
from tide.core.logging import get_logger, init_logging

logger = get_logger(__name__)

DEFAULT_FILE = Path(__file__).resolve().parents[1] / "seeds" / "catalogs.yaml"


async def seed(path: Path) -> dict[str, int]:
    database = create_database(reload_config().database)
    try:
        await database.ensure_schema()
        counts = await load_catalog_file(WorldDetailsService(database), path)
    finally:
        await database.dispose()
    for catalog, count in counts.items():
        logger.info("Seeded %d %s from %s", count, catalog, path)
    return counts


if __name__ == "__main__":  # pragma: no cover - CLI execution
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", nargs="?", type=Path, default=DEFAULT_FILE)
    args = parser.parse_args()

    init_logging()
    asyncio.run(seed(args.path))
