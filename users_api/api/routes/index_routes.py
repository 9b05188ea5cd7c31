from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

bp_index = Blueprint("index", __name__)


@bp_index.get("/")
def index():
    prefix = current_app.config.get("API_PREFIX", "")
    return jsonify(
        {
            "success": True,
            "message": "Users API is running",
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "storage": "Avatars are stored in the object storage bucket",
            "endpoints": {
                "health": f"GET {prefix}/health",
                "users": {
                    "register": f"POST {prefix}/users/register",
                    "login": f"POST {prefix}/users/login",
                    "getAll": f"GET {prefix}/users",
                    "getById": f"GET {prefix}/users/:id",
                    "update": f"PUT {prefix}/users/:id",
                    "delete": f"DELETE {prefix}/users/:id",
                },
            },
        }
    ), 200
