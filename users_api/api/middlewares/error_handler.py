# users_api/api/middlewares/error_handler.py
import logging

import pydantic
from flask import Flask, request
from werkzeug.exceptions import HTTPException, NotFound, RequestEntityTooLarge

from users_api.api.responses import fail
from users_api.config.settings import Settings, settings as default_settings
from users_api.core.exceptions import AppError, InternalError, StorageError
from users_api.core.validation import describe_validation_error

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask, settings: Settings = default_settings) -> None:
    @app.errorhandler(StorageError)
    def handle_storage_error(err: StorageError):
        logger.error(f"Storage failure on {request.method} {request.path}: {err}")
        return fail(
            "Failed to upload file to storage",
            status=err.status_code,
            error=str(err) if settings.expose_error_details else None,
        )

    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status_code >= 500:
            logger.error(f"{type(err).__name__} on {request.method} {request.path}: {err}")
        return fail(str(err), status=err.status_code)

    @app.errorhandler(pydantic.ValidationError)
    def handle_validation_error(err: pydantic.ValidationError):
        return fail(describe_validation_error(err), status=400)

    @app.errorhandler(NotFound)
    def handle_not_found(err: NotFound):
        return fail("Route not found", status=404, requestedUrl=request.full_path.rstrip("?"))

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(err: RequestEntityTooLarge):
        return fail("Request body too large", status=413)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return fail(err.description or err.name, status=err.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.path}")

        internal = InternalError("Internal Server Error")
        return fail(
            str(internal),
            status=internal.status_code,
            error=str(err) if settings.expose_error_details else "Something went wrong",
        )
