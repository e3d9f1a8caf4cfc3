import asyncio

import pytest

from tide.canon import PersistenceError, ValidationError
from tide.models import WorldRaceCatalogSQL


def _names(entries):
    return [entry.name for entry in entries]


def test_names_resolve_exactly_and_unknown_names_drop(service, world_id, catalog_ids):
    aggregate = asyncio.run(
        service.replace_catalog(world_id, "races", names=["Elf", "Nonexistent"])
    )

    assert [(e.id, e.name) for e in aggregate.race_catalog] == [(catalog_ids["Elf"], "Elf")]


def test_name_match_is_case_sensitive(service, world_id, catalog_ids):
    aggregate = asyncio.run(service.replace_catalog(world_id, "races", names=["elf", "DWARF"]))

    assert aggregate.race_catalog == []


def test_ids_and_names_are_deduplicated(service, world_id, catalog_ids, count_rows):
    elf = catalog_ids["Elf"]

    aggregate = asyncio.run(
        service.replace_catalog(world_id, "races", ids=[elf, elf, float(elf)], names=["Elf", "Human"])
    )

    assert _names(aggregate.race_catalog) == ["Elf", "Human"]
    assert count_rows(WorldRaceCatalogSQL, world_id) == 2


def test_non_numeric_ids_are_ignored(service, world_id, catalog_ids):
    aggregate = asyncio.run(
        service.replace_catalog(world_id, "creatures", ids=[True, "2", 1.5, None])
    )

    assert aggregate.creature_catalog == []


def test_replace_catalog_replaces_membership(service, world_id, catalog_ids):
    asyncio.run(service.replace_catalog(world_id, "creatures", names=["Wolf", "Wyvern"]))
    aggregate = asyncio.run(service.replace_catalog(world_id, "creatures", names=["Wyvern"]))

    assert _names(aggregate.creature_catalog) == ["Wyvern"]


def test_unknown_catalog_id_rolls_back(service, world_id, catalog_ids):
    asyncio.run(service.replace_catalog(world_id, "races", names=["Dwarf"]))

    with pytest.raises(PersistenceError):
        asyncio.run(service.replace_catalog(world_id, "races", ids=[catalog_ids["Elf"], 987654]))

    aggregate = asyncio.run(service.read(world_id))
    assert _names(aggregate.race_catalog) == ["Dwarf"]


def test_unknown_catalog_is_rejected(service, world_id):
    with pytest.raises(ValidationError):
        asyncio.run(service.replace_catalog(world_id, "spells", names=["Fireball"]))


def test_add_and_remove_entries_are_idempotent(service, world_id, catalog_ids):
    elf = catalog_ids["Elf"]

    asyncio.run(service.add_catalog_entry(world_id, "races", entry_id=elf))
    aggregate = asyncio.run(service.add_catalog_entry(world_id, "races", name="Elf"))
    assert _names(aggregate.race_catalog) == ["Elf"]

    asyncio.run(service.remove_catalog_entry(world_id, "races", entry_id=elf))
    aggregate = asyncio.run(service.remove_catalog_entry(world_id, "races", entry_id=elf))
    assert aggregate.race_catalog == []


def test_add_unresolvable_entry_is_a_no_op(service, world_id, catalog_ids):
    aggregate = asyncio.run(service.add_catalog_entry(world_id, "races", entry_id=987654))
    assert aggregate.race_catalog == []

    aggregate = asyncio.run(service.add_catalog_entry(world_id, "races", name="Gnome"))
    assert aggregate.race_catalog == []


def test_list_catalog_is_ordered_by_name(service, catalog_ids):
    entries = asyncio.run(service.list_catalog("races"))

    assert _names(entries) == ["Dwarf", "Elf", "Human"]


def test_create_catalog_entry_is_idempotent_by_name(service, catalog_ids):
    again = asyncio.run(service.create_catalog_entry("races", "Elf", "Pointy ears"))

    assert again.id == catalog_ids["Elf"]
    assert len(asyncio.run(service.list_catalog("races"))) == 3
