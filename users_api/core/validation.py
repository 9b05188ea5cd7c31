# users_api/core/validation.py
from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic

from users_api.core.exceptions import ValidationError

TSchema = TypeVar("TSchema", bound=pydantic.BaseModel)

_FIELD_MESSAGES = {
    "fullName": "Full name must be between 2 and 100 characters long",
    "email": "Invalid email format",
    "password": "Password must be between 6 and 255 characters long",
    "role": 'Role must be either "admin" or "user"',
    "avatar": "Avatar must be a valid http(s) URL",
}


def describe_validation_error(err: pydantic.ValidationError) -> str:
    errors = err.errors()
    missing = [str(e["loc"][-1]) for e in errors if e["type"] == "missing" and e["loc"]]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"

    first = errors[0] if errors else None
    if first is None:
        return "Invalid input"

    field = str(first["loc"][-1]) if first["loc"] else ""
    return _FIELD_MESSAGES.get(field) or f"{field or 'body'}: {first['msg']}"


def validate_fields(schema: type[TSchema], data: Mapping[str, Any] | TSchema) -> TSchema:
    """Validate `data` against `schema`, raising the API's ValidationError."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(dict(data))
    except pydantic.ValidationError as e:
        raise ValidationError(describe_validation_error(e)) from e
