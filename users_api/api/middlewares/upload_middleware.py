# users_api/api/middlewares/upload_middleware.py
from functools import wraps
from typing import Any, Callable, TypeVar

from flask import current_app, g, request

from users_api.api.responses import fail
from users_api.core.exceptions import ValidationError
from users_api.services.upload_service import UploadPipeline

F = TypeVar("F", bound=Callable[..., Any])

UPLOAD_PIPELINE_KEY = "upload_pipeline"


def get_upload_pipeline() -> UploadPipeline:
    return current_app.extensions[UPLOAD_PIPELINE_KEY]


def accepts_avatar(fn: F) -> F:
    """Validate and buffer the optional avatar file into `g.avatar_upload`.

    Rejections answer 400 before the view runs; no storage call happens here.
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):
        pipeline = get_upload_pipeline()
        try:
            g.avatar_upload = pipeline.accept(request.files.items(multi=True))
        except ValidationError as err:
            return fail(str(err), status=err.status_code, maxSize=pipeline.max_size_label)

        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
