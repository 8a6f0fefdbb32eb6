"""Structured logging helpers."""
from __future__ import annotations

import json
import logging

from entity_counter.base.log_support import JsonFormatter
from entity_counter.base.logging import (
    BASE_LOGGER_NAME,
    LogContext,
    configure_logger,
    get_logger,
    log_event,
)


def test_child_loggers_propagate_to_base():
    logger = get_logger("entity_counter.tests.child")
    assert logger.propagate is True  # nosec B101
    assert logger.handlers == []  # nosec B101
    assert get_logger().name == BASE_LOGGER_NAME  # nosec B101


def test_log_event_payload_drops_none_unless_kept(log_events):
    logger = get_logger("entity_counter.tests.events")
    ctx = LogContext(counter="EntityCounter_Item_Counts").for_entity("Item")

    log_event(logger, "limit.updated", ctx, old_limit=None, new_limit=3)
    log_event(logger, "limit.updated", ctx, keep_none=True, old_limit=None, new_limit=3)

    first, second = log_events.named("limit.updated")
    assert "old_limit" not in first  # nosec B101
    assert second["old_limit"] is None  # nosec B101
    assert second["counter"] == "EntityCounter_Item_Counts" and second["entity"] == "Item"  # nosec B101


def test_log_event_respects_level(log_events):
    logger = get_logger("entity_counter.tests.levels")
    log_event(logger, "limit.exceeded", level=logging.WARNING, count=3)
    assert log_events.named("limit.exceeded")[0]["_level"] == "WARNING"  # nosec B101


def test_log_context_prunes_none_and_merges_extra():
    ctx = LogContext(counter="c", extra={"store": "s", "skip": None})
    assert ctx.to_dict() == {"counter": "c", "store": "s"}  # nosec B101


def test_json_formatter_hoists_json_message():
    formatter = JsonFormatter()
    record = logging.LogRecord(
        name="entity_counter.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=json.dumps({"event": "count.changed", "count": 4}),
        args=(),
        exc_info=None,
    )
    data = json.loads(formatter.format(record))
    assert data["event"] == "count.changed" and data["count"] == 4  # nosec B101
    assert "msg" not in data  # nosec B101
    assert data["level"] == "INFO" and data["logger"] == "entity_counter.test"  # nosec B101


def test_json_formatter_keeps_plain_message():
    formatter = JsonFormatter()
    record = logging.LogRecord("entity_counter.test", logging.ERROR, __file__, 1, "plain %s", ("text",), None)
    data = json.loads(formatter.format(record))
    assert data["msg"] == "plain text"  # nosec B101


def test_configure_logger_attaches_and_removes_file_handler(tmp_path):
    base = logging.getLogger(BASE_LOGGER_NAME)
    previous = base.level
    path = tmp_path / "logs" / "counter.log"
    try:
        logger = configure_logger(level="DEBUG", file_path=str(path))
        assert logger.level == logging.DEBUG  # nosec B101
        log_event(get_logger("entity_counter.tests.file"), "store.saved", store="s", receivers=1)
        for h in logger.handlers:
            h.flush()
        line = path.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["event"] == "store.saved"  # nosec B101
    finally:
        configure_logger(level=previous, file_path=None)
    assert not any(getattr(h, "_entity_counter_file_handler", False) for h in base.handlers)  # nosec B101
