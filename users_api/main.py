# users_api/main.py
from __future__ import annotations

import logging

from flask import Flask
from flask_cors import CORS

from users_api.api.middlewares.error_handler import register_error_handlers
from users_api.api.middlewares.upload_middleware import UPLOAD_PIPELINE_KEY
from users_api.api.routes import register_routes
from users_api.api.routes.user_routes import JWT_PROVIDER_KEY, OBJECT_STORAGE_KEY, PASSWORD_HASHER_KEY
from users_api.config.flask_config import configure_app
from users_api.config.settings import Settings, settings as default_settings
from users_api.core.logging import configure_logging
from users_api.infrastructure.database.session import configure_engine, init_db
from users_api.infrastructure.security.jwt_provider import JwtProvider
from users_api.infrastructure.security.password_hasher import PasswordHasher
from users_api.infrastructure.storage.object_storage import ObjectStorage
from users_api.infrastructure.storage.s3_object_storage import S3ObjectStorage, S3ObjectStorageConfig
from users_api.services.upload_service import UploadPipeline

logger = logging.getLogger(__name__)


def create_app(
    *,
    settings: Settings = default_settings,
    storage: ObjectStorage | None = None,
) -> Flask:
    configure_logging(settings.log_level)

    app = Flask(__name__)

    CORS(
        app,
        resources={r"/*": {"origins": settings.cors_origins}},
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    )

    configure_app(app, settings)

    # colaboradores construídos uma vez e injetados (testes trocam o storage)
    if storage is None:
        storage = S3ObjectStorage(config=S3ObjectStorageConfig.from_settings(settings))

    app.extensions[OBJECT_STORAGE_KEY] = storage
    app.extensions[UPLOAD_PIPELINE_KEY] = UploadPipeline(
        storage=storage,
        folder=settings.avatar_folder,
        max_bytes=settings.avatar_max_bytes,
    )
    app.extensions[JWT_PROVIDER_KEY] = JwtProvider(settings)
    app.extensions[PASSWORD_HASHER_KEY] = PasswordHasher.from_settings(settings)

    register_routes(app, api_prefix=settings.api_prefix)
    register_error_handlers(app, settings)

    configure_engine(settings)
    if settings.db_auto_create:
        init_db()

    logger.info(f"Users API ready (environment={settings.environment}, bucket={settings.storage_bucket})")
    return app


if __name__ == "__main__":
    # em produção: gunicorn "users_api.main:create_app()"
    create_app().run(host="0.0.0.0", port=3000, debug=default_settings.debug)
