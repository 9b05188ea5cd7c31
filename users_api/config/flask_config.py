from flask import Flask

from users_api.config.settings import Settings, settings as default_settings


def configure_app(app: Flask, settings: Settings = default_settings) -> None:
    app.config["ENV"] = settings.environment
    app.config["DEBUG"] = settings.debug
    app.config["MAX_CONTENT_LENGTH"] = max(1, settings.max_content_length_mb) * 1024 * 1024
    app.json.sort_keys = False
