"""Unit tests for structured logging."""

import json
import logging

from storyai.api.logging import BookLogger, JSONFormatter


def _record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("book_generation", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_base_fields(self):
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "book_generation"
        assert data["message"] == "hello"
        assert data["timestamp"].endswith("Z")

    def test_includes_known_extras_only(self):
        data = json.loads(JSONFormatter().format(_record(book_id="b1", page_number=3, secret="x")))

        assert data["book_id"] == "b1"
        assert data["page_number"] == 3
        assert "secret" not in data


class TestBookLogger:
    def test_batch_progress_percentage(self, caplog):
        with caplog.at_level(logging.INFO, logger="book_generation"):
            BookLogger().batch_progress("b1", 1, 4)

        record = caplog.records[-1]
        assert record.percentage == 25
        assert record.book_id == "b1"
        assert "1/4" in record.getMessage()

    def test_step_failed_is_a_warning(self, caplog):
        with caplog.at_level(logging.INFO, logger="book_generation"):
            BookLogger().step_failed("b1", "illustration", RuntimeError("boom"), page_number=2)

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.page_number == 2
        assert record.error_type == "RuntimeError"
