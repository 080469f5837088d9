"""Structured Logging — JSONFormatter fields and idempotent setup."""

import json
import logging

import pytest

from blog_api.infrastructure.observability import JSONFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(**extra):
    record = logging.LogRecord(
        "blog_api.test", logging.INFO, __file__, 1, "Blog created", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "blog_api.test"
    assert payload["message"] == "Blog created"
    assert "timestamp" in payload


def test_json_formatter_includes_known_extras_only():
    payload = json.loads(JSONFormatter().format(
        _record(user_id="u-1", blog_id="b-2", password="hunter2"),
    ))
    assert payload["user_id"] == "u-1"
    assert payload["blog_id"] == "b-2"
    assert "password" not in payload


def test_setup_logging_does_not_stack_handlers(restore_root_logger):
    root = logging.getLogger()
    setup_logging("INFO", "json")
    setup_logging("DEBUG", "text")
    named = [h for h in root.handlers if h.get_name() == "blog_api"]
    assert len(named) == 1
    assert root.level == logging.DEBUG
