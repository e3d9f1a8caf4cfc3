import asyncio
import json
import logging

import pytest

from tide.core.logging import JsonFormatter, init_logging
from tide.core.logs import EventLogger, EventType, Priority, get_event_logger, log_calls


def test_event_logger_keeps_bounded_history():
    logger = EventLogger(max_events=2)
    for i in range(3):
        logger.log(EventType.SYSTEM, f"event {i}")

    assert [e.message for e in logger.get_events()] == ["event 1", "event 2"]


def test_get_events_filters_by_type_and_limit():
    logger = EventLogger()
    logger.log(EventType.REQUEST, "one")
    logger.log(EventType.DATABASE_OPERATION, "two", Priority.HIGH, metadata={"table": "worlds"})
    logger.log(EventType.DATABASE_OPERATION, "three")

    events = logger.get_events(EventType.DATABASE_OPERATION)
    assert [e.message for e in events] == ["two", "three"]
    assert logger.get_events(limit=1)[0].message == "three"
    assert events[0].to_dict()["priority_name"] == "HIGH"


def test_error_handling_event_carries_error_details():
    logger = EventLogger()
    event = logger.log_error_handling_start("KeyError", "boom", "Loading", {"table": "worlds"})

    assert event.event_type is EventType.ERROR_HANDLING_START
    assert event.priority is Priority.CRITICAL
    assert event.metadata == {"table": "worlds", "error_type": "KeyError", "error_message": "boom"}
    assert json.loads(event.to_json())["event_type"] == "error_handling_start"


def test_events_are_forwarded_to_standard_logging(caplog):
    with caplog.at_level(logging.INFO, logger="tide.events"):
        EventLogger().log(
            EventType.DATABASE_OPERATION, "Saved", metadata={"operation": "insert", "rows": 2}
        )

    assert "[database_operation] Saved <operation=insert | rows=2>" in caplog.text


def test_log_calls_records_async_failures():
    @log_calls
    async def explode():
        raise RuntimeError("nope")

    with pytest.raises(RuntimeError):
        asyncio.run(explode())

    errors = get_event_logger().get_events(EventType.ERROR)
    assert errors[-1].metadata["error_type"] == "RuntimeError"


def test_log_calls_wraps_sync_functions():
    @log_calls
    def add(a, b):
        return a + b

    assert add(2, 3) == 5
    assert get_event_logger().get_events(EventType.SYSTEM)[-1].message.startswith("Exiting")


def test_database_writes_emit_events(service, world_id):
    asyncio.run(service.replace_collection(world_id, "tags", ["grim"]))

    messages = [e.message for e in get_event_logger().get_events(EventType.DATABASE_OPERATION)]
    assert f"Replaced tags for world {world_id}" in messages
    assert "Committed apply replace_collection" in messages


def test_json_formatter_emits_one_object():
    record = logging.LogRecord("tide.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.world_id = 3

    data = json.loads(JsonFormatter().format(record))

    assert data["message"] == "hello world"
    assert data["level"] == "INFO"
    assert data["world_id"] == 3


def test_init_logging_installs_json_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        init_logging(level="DEBUG", format="json", force=True)

        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[-1].formatter, JsonFormatter)
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
