import json
import sys
import logging

from flask import Flask

from users_api.core.logging import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.makeLogRecord({"name": "users_api.test", "levelname": "INFO", "msg": "hello %s", "args": ("jane",)})
    record.created = 1767625445.5  # 2026-01-05 15:04:05.500 UTC
    record.__dict__.update(extra)
    return record


def test_formats_record_time_and_extras():
    entry = json.loads(JSONFormatter().format(_record(bucket="avatars")))

    assert entry == {
        "timestamp": "2026-01-05T15:04:05.500Z",
        "level": "INFO",
        "logger": "users_api.test",
        "message": "hello jane",
        "bucket": "avatars",
    }


def test_adds_request_context():
    app = Flask(__name__)

    with app.test_request_context("/users/7", method="PUT"):
        entry = json.loads(JSONFormatter().format(_record()))

    assert entry["method"] == "PUT"
    assert entry["path"] == "/users/7"


def test_includes_exception_text():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record(exc_info=sys.exc_info())

    entry = json.loads(JSONFormatter().format(record))

    assert "RuntimeError: boom" in entry["exception"]
