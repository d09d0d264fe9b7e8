"""Tests for the JSON log formatter and logger naming."""

from __future__ import annotations

import json
import logging

from backend.app.infra.logging import JsonLogFormatter, configure_logging, get_logger


def test_get_logger_nests_under_project_root():
    logger = get_logger("backend.app.client.sync_cache")

    assert logger.name == "gallery.client.sync_cache"


def test_formatter_flattens_extra_context():
    record = logging.LogRecord(
        "gallery.uploads", logging.WARNING, __file__, 1, "upload_blob_store_failed", None, None
    )
    record.reason = "quota exceeded"

    payload = json.loads(JsonLogFormatter().format(record))

    assert payload["event"] == "upload_blob_store_failed"
    assert payload["level"] == "warning"
    assert payload["reason"] == "quota exceeded"
    assert "msg" not in payload


def test_configure_logging_installs_one_handler():
    root = configure_logging("debug")
    configure_logging("info")

    json_handlers = [h for h in root.handlers if isinstance(h.formatter, JsonLogFormatter)]
    assert len(json_handlers) == 1
    assert root.level == logging.INFO
