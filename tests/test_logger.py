"""Tests for structured logging."""

import json
import logging

from web_article_summarizer.logger import JSONFormatter, get_logger, setup_logging


def test_formatter_includes_extra_fields():
    record = logging.LogRecord("web_article_summarizer", logging.INFO, __file__, 1, "Fetch failed", None, None)
    record.url = "http://example/x"
    record.kind = "timeout"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Fetch failed"
    assert payload["level"] == "INFO"
    assert payload["url"] == "http://example/x"
    assert payload["kind"] == "timeout"
    assert "msg" not in payload


def test_setup_logging_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")

    logger = setup_logging()

    assert logger is get_logger()
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert get_logger("cli").name == "web_article_summarizer.cli"
