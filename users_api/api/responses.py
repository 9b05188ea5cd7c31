# users_api/api/responses.py
from typing import Any

from flask import jsonify


def envelope(
    *,
    success: bool,
    message: str | None = None,
    data: Any = None,
    error: str | None = None,
    **extra: Any,
) -> dict:
    body: dict[str, Any] = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    body.update(extra)
    return body


def ok(data: Any = None, *, message: str | None = None, status: int = 200, **extra: Any):
    return jsonify(envelope(success=True, message=message, data=data, **extra)), status


def fail(message: str, *, status: int, error: str | None = None, **extra: Any):
    return jsonify(envelope(success=False, message=message, error=error, **extra)), status
