# users_api/api/routes/__init__.py

from flask import Flask

from users_api.api.routes.health_routes import bp_health
from users_api.api.routes.index_routes import bp_index
from users_api.api.routes.user_routes import bp_users


def register_routes(app: Flask, *, api_prefix: str) -> None:
    app.config["API_PREFIX"] = api_prefix

    app.register_blueprint(bp_index)
    app.register_blueprint(bp_health, url_prefix=f"{api_prefix}/health")
    app.register_blueprint(bp_users, url_prefix=f"{api_prefix}/users")
