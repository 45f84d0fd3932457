"""Unit tests for the logging utilities."""

from __future__ import annotations

import json
import logging

from flask import g

from auth_service.core.logger import JSONFormatter, configure_logging, ensure_request_id


def test_configure_logging_sets_level() -> None:
    configure_logging("DEBUG")
    try:
        assert logging.getLogger().level == logging.DEBUG
    finally:
        configure_logging("WARNING")


def test_json_formatter_renders_one_object() -> None:
    record = logging.LogRecord("auth_service.test", logging.INFO, __file__, 1, "hello %s", ("x",), None)
    record.request_id = "req-1"
    record.elapsed_ms = 1.5

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "hello x"
    assert payload["level"] == "INFO"
    assert payload["request_id"] == "req-1"
    assert payload["elapsed_ms"] == 1.5


def test_request_id_reuses_inbound_header(app) -> None:
    with app.test_request_context("/", headers={"X-Correlation-ID": "corr-9"}):
        g.pop("request_id", None)
        assert ensure_request_id() == "corr-9"
        assert ensure_request_id() == "corr-9"


def test_request_id_generated_outside_requests() -> None:
    assert ensure_request_id() != ensure_request_id()
