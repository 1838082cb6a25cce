"""Tests for logging setup."""

import json
import logging

from agroconnect.logging_config import JsonFormatter, get_logger


def test_json_formatter_includes_context():
    record = logging.LogRecord("agroconnect.search", logging.INFO, __file__, 1, "matched %d", (3,), None)
    record.context = {"buyer_id": "b-1"}

    data = json.loads(JsonFormatter("agroconnect").format(record))

    assert data["message"] == "matched 3"
    assert data["level"] == "INFO"
    assert data["service"] == "agroconnect"
    assert data["buyer_id"] == "b-1"


def test_get_logger_attaches_context(caplog):
    logger = get_logger("agroconnect.test", {"request_id": "r-42"})

    with caplog.at_level(logging.INFO, logger="agroconnect.test"):
        logger.info("hello")

    assert caplog.records[0].context == {"request_id": "r-42"}
