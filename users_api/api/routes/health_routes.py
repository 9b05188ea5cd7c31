import time
from datetime import datetime, timezone

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from users_api.core.exceptions import InternalError
from users_api.infrastructure.database.session import db_session

bp_health = Blueprint("health", __name__)

_STARTED_AT = time.monotonic()


@bp_health.get("")
def health():
    return jsonify(
        {
            "success": True,
            "status": "OK",
            "message": "Backend server is healthy",
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "uptime": round(time.monotonic() - _STARTED_AT, 3),
        }
    ), 200


@bp_health.get("/db")
def health_db():
    try:
        with db_session() as session:
            session.execute(text("select 1"))
    except SQLAlchemyError as e:
        raise InternalError("Database unavailable") from e
    return jsonify({"success": True, "db": "ok"}), 200
