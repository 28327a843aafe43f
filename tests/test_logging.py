"""Tests for structured logging and sensitive data redaction."""

from __future__ import annotations

import json
import logging

from folio.core.logging import (
    SensitiveDataFilter,
    StructuredFormatter,
    TextFormatter,
    get_logger,
    request_id_var,
)


def _record(msg: str, *args, **extra) -> logging.LogRecord:
    record = logging.LogRecord("folio.test", logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSensitiveDataFilter:
    """Tests for SensitiveDataFilter."""

    def test_redacts_token_in_query_string(self):
        """A Tiingo token in a URL is masked while other params survive."""
        record = _record("GET /tiingo/daily/AAPL/prices?token=abc123&startDate=2024-03-01")
        SensitiveDataFilter().filter(record)

        message = record.getMessage()
        assert "abc123" not in message
        assert "token=[REDACTED]" in message
        assert "startDate=2024-03-01" in message

    def test_redacts_formatted_args(self):
        record = _record("config %s", "api_key=s3cr3t")
        SensitiveDataFilter().filter(record)
        assert "s3cr3t" not in record.getMessage()

    def test_leaves_plain_messages(self):
        record = _record("Holding added: %s", "AAPL")
        assert SensitiveDataFilter().filter(record) is True
        assert record.getMessage() == "Holding added: AAPL"


class TestFormatters:
    """Tests for JSON and text formatters."""

    def test_json_includes_extra_fields(self):
        output = StructuredFormatter().format(_record("done", holding_id=7))
        data = json.loads(output)

        assert data["message"] == "done"
        assert data["level"] == "INFO"
        assert data["logger"] == "folio.test"
        assert data["holding_id"] == 7

    def test_json_includes_request_id(self):
        token = request_id_var.set("req-42")
        try:
            data = json.loads(StructuredFormatter().format(_record("hello")))
        finally:
            request_id_var.reset(token)
        assert data["request_id"] == "req-42"

    def test_text_format(self):
        line = TextFormatter().format(_record("hello"))
        assert "INFO" in line
        assert "folio.test: hello" in line


def test_get_logger_prefix():
    assert get_logger("jobs.scheduler").name == "folio.jobs.scheduler"
