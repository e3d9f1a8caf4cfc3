import asyncio
from pathlib import Path

import pytest

from tide.canon import ValidationError, load_catalog_file

CATALOG_YAML = """
races:
  - name: Elf
    description: Long memory.
  - Dwarf
  - name: ""
creatures:
  - name: Kraken
"""


def test_load_catalog_file_inserts_entries(service, tmp_path):
    path = tmp_path / "catalogs.yaml"
    path.write_text(CATALOG_YAML, encoding="utf-8")

    counts = asyncio.run(load_catalog_file(service, path))

    assert counts == {"races": 2, "creatures": 1}
    assert [e.name for e in asyncio.run(service.list_catalog("races"))] == ["Dwarf", "Elf"]


def test_load_catalog_file_is_idempotent(service, tmp_path):
    path = tmp_path / "catalogs.yaml"
    path.write_text(CATALOG_YAML, encoding="utf-8")

    asyncio.run(load_catalog_file(service, path))
    asyncio.run(load_catalog_file(service, path))

    assert len(asyncio.run(service.list_catalog("races"))) == 2
    assert len(asyncio.run(service.list_catalog("creatures"))) == 1


def test_load_catalog_file_rejects_unknown_catalog(service, tmp_path):
    path = tmp_path / "catalogs.yaml"
    path.write_text("spells:\n  - Fireball\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        asyncio.run(load_catalog_file(service, path))


def test_shipped_seed_file_loads(service):
    seed_file = Path(__file__).resolve().parents[1] / "seeds" / "catalogs.yaml"

    counts = asyncio.run(load_catalog_file(service, seed_file))

    assert counts["races"] >= 1
    assert counts["creatures"] >= 1
