"""Tests for the JSON console log formatter."""

from __future__ import annotations

import json
import logging

from pweather.log_setup import JsonConsoleFormatter, setup_logger


def test_formatter_redacts_message_and_keeps_extra_fields() -> None:
    record = logging.makeLogRecord(
        {
            "name": "pweather",
            "levelname": "WARNING",
            "msg": "GET /v1/forecast.json?key=abc123&q=%s failed",
            "args": ("Bern",),
            "city_id": "bern_46.9480_7.4474",
            "category": "http_status",
        }
    )

    event = json.loads(JsonConsoleFormatter().format(record))

    assert event["level"] == "WARNING"
    assert event["logger"] == "pweather"
    assert "abc123" not in event["message"]
    assert "q=Bern" in event["message"]
    assert event["city_id"] == "bern_46.9480_7.4474"
    assert event["category"] == "http_status"
    assert "exception" not in event
    assert "msg" not in event


def test_setup_logger_installs_one_handler() -> None:
    first = setup_logger("pweather.test_log_setup")
    second = setup_logger("pweather.test_log_setup")

    assert first is second
    assert len(second.handlers) == 1
    assert isinstance(second.handlers[0].formatter, JsonConsoleFormatter)
    assert not second.propagate
