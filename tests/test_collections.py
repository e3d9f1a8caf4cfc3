import asyncio

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError

from tide.canon import PersistenceError, ValidationError
from tide.canon.registry import COLLECTIONS
from tide.models import WorldMoonSQL, WorldTagSQL


def _names(rows):
    return [row.name for row in rows]


def test_ordered_collection_keeps_input_order(service, world_id):
    moons = [{"name": "Zeta"}, {"name": "Alpha", "cycle_days": 28}, {"name": "Mid"}]

    aggregate = asyncio.run(service.replace_collection(world_id, "moons", moons))

    assert _names(aggregate.moons) == ["Zeta", "Alpha", "Mid"]
    assert [m.order_index for m in aggregate.moons] == [0, 1, 2]
    assert aggregate.moons[1].cycle_days == 28


def test_skipped_items_leave_order_gaps(service, world_id):
    moons = [{"name": "A"}, {"name": "   "}, "not a moon", {"name": "C"}]

    aggregate = asyncio.run(service.replace_collection(world_id, "moons", moons))

    assert _names(aggregate.moons) == ["A", "C"]
    assert [m.order_index for m in aggregate.moons] == [0, 3]


def test_oversized_number_does_not_abort_replace(service, world_id):
    moons = [{"name": "Luna"}, {"name": "Big", "cycle_days": 10**19}, {"name": "Charon"}]

    aggregate = asyncio.run(service.replace_collection(world_id, "moons", moons))

    assert _names(aggregate.moons) == ["Luna", "Big", "Charon"]
    assert aggregate.moons[1].cycle_days is None


def test_oversized_month_days_fall_back_to_default(service, world_id):
    aggregate = asyncio.run(
        service.replace_collection(world_id, "months", [{"name": "Deepwinter", "days": 10**19}])
    )

    assert aggregate.months[0].days == 30


def test_replace_is_idempotent(service, world_id, count_rows):
    realms = [
        {"name": "Feywild", "type": "Echo", "travel": "Mushroom rings"},
        {"name": "Shadowfell", "bleed": "Grey fog"},
    ]

    first = asyncio.run(service.replace_collection(world_id, "realms", realms))
    second = asyncio.run(service.replace_collection(world_id, "realms", realms))

    assert first.realms == second.realms
    assert second.realms[0].travel == "Mushroom rings"
    assert second.realms[1].bleed == "Grey fog"


def test_replace_drops_previous_rows(service, world_id, count_rows):
    asyncio.run(service.replace_collection(world_id, "tags", ["grim", "coastal", "old"]))
    aggregate = asyncio.run(service.replace_collection(world_id, "tags", ["new"]))

    assert aggregate.tags == ["new"]
    assert count_rows(WorldTagSQL, world_id) == 1


def test_unordered_collection_sorted_by_value(service, world_id):
    aggregate = asyncio.run(
        service.replace_collection(world_id, "tags", ["storm", {"value": "ash"}, "  ", None, "moor"])
    )

    assert aggregate.tags == ["ash", "moor", "storm"]


def test_strings_are_truncated_to_column_length(service, world_id):
    aggregate = asyncio.run(
        service.replace_collection(world_id, "weekdays", ["Moonsday-and-then-some-more"])
    )

    assert aggregate.weekdays[0].value == "Moonsday-and-then-so"
    assert len(aggregate.weekdays[0].value) == 20


def test_month_days_default_and_clamp(service, world_id):
    months = [{"name": "Frost", "days": 99}, {"name": "Thaw"}, {"name": "Ember", "days": "0"}]

    aggregate = asyncio.run(service.replace_collection(world_id, "months", months))

    assert [(m.name, m.days) for m in aggregate.months] == [
        ("Frost", 60),
        ("Thaw", 30),
        ("Ember", 1),
    ]


def test_magic_collections_surface_under_magic(service, world_id):
    asyncio.run(service.replace_collection(world_id, "magic_builtins", ["Runes", "Arcane"]))
    aggregate = asyncio.run(service.replace_collection(world_id, "magic_customs", ["Tidecalling"]))

    assert aggregate.magic.builtins == ["Arcane", "Runes"]
    assert aggregate.magic.customs == ["Tidecalling"]


def test_unknown_collection_is_rejected(service, world_id):
    with pytest.raises(ValidationError):
        asyncio.run(service.replace_collection(world_id, "dragons", ["Smaug"]))


def test_failed_insert_rolls_back_replace(service, database, world_id):
    asyncio.run(service.replace_collection(world_id, "moons", [{"name": "Old"}, {"name": "Older"}]))

    inserts = []

    def fail_third_moon(conn, cursor, statement, parameters, context, executemany):
        if statement.startswith("INSERT INTO world_moons"):
            inserts.append(statement)
            if len(inserts) == 3:
                raise OperationalError(statement, parameters, Exception("disk full"))

    engine = database.engine.sync_engine
    event.listen(engine, "before_cursor_execute", fail_third_moon)
    try:
        with pytest.raises(PersistenceError):
            asyncio.run(
                service.replace_collection(
                    world_id, "moons", [{"name": n} for n in ("W", "X", "Y", "Z")]
                )
            )
    finally:
        event.remove(engine, "before_cursor_execute", fail_third_moon)

    aggregate = asyncio.run(service.read(world_id))
    assert _names(aggregate.moons) == ["Old", "Older"]


def test_save_applies_sections_together(service, world_id):
    aggregate = asyncio.run(
        service.save(
            world_id,
            {
                "details": {"pitch": "Islands adrift"},
                "tags": ["archipelago"],
                "magic": {"builtins": ["Runes"]},
                "unbreakables": ["The dead stay dead", "No gods walk"],
            },
        )
    )

    assert aggregate.details.pitch == "Islands adrift"
    assert aggregate.tags == ["archipelago"]
    assert aggregate.magic.builtins == ["Runes"]
    assert [u.value for u in aggregate.unbreakables] == ["The dead stay dead", "No gods walk"]


def test_save_leaves_absent_collections_alone(service, world_id):
    asyncio.run(service.replace_collection(world_id, "bans", ["Resurrection"]))
    aggregate = asyncio.run(service.save(world_id, {"tags": ["grim"]}))

    assert aggregate.bans == ["Resurrection"]


def test_save_failure_rolls_back_every_section(service, world_id):
    asyncio.run(service.save(world_id, {"details": {"pitch": "Before"}, "tags": ["before"]}))

    with pytest.raises(PersistenceError):
        asyncio.run(
            service.save(
                world_id,
                {"details": {"pitch": "After"}, "tags": ["after"], "race_ids": [987654]},
            )
        )

    aggregate = asyncio.run(service.read(world_id))
    assert aggregate.details.pitch == "Before"
    assert aggregate.tags == ["before"]


def test_every_collection_is_in_the_aggregate(service, world_id):
    aggregate = asyncio.run(service.read(world_id)).model_dump()

    for name in COLLECTIONS:
        if name.startswith("magic_"):
            assert name.removeprefix("magic_") in aggregate["magic"]
        else:
            assert aggregate[name] == []


def test_collection_rows_count_matches_valid_items(service, world_id, count_rows):
    asyncio.run(service.replace_collection(world_id, "moons", [{"name": "A"}, {}, {"name": "B"}]))

    assert count_rows(WorldMoonSQL, world_id) == 2
