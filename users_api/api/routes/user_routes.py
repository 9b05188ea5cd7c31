# users_api/api/routes/user_routes.py

from __future__ import annotations

from flask import Blueprint, current_app, g, request

from users_api.api.middlewares.upload_middleware import accepts_avatar, get_upload_pipeline
from users_api.api.responses import ok
from users_api.api.schemas.user_schema import UserResponse
from users_api.infrastructure.database.session import db_session
from users_api.repositories.user_repository import UserRepository
from users_api.services.user_service import UserService

bp_users = Blueprint("users", __name__)

OBJECT_STORAGE_KEY = "object_storage"
JWT_PROVIDER_KEY = "jwt_provider"
PASSWORD_HASHER_KEY = "password_hasher"


# -------------------------
# Helpers
# -------------------------

def _build_service(session) -> UserService:
    return UserService(
        UserRepository(session, hasher=current_app.extensions[PASSWORD_HASHER_KEY]),
        uploads=get_upload_pipeline(),
        storage=current_app.extensions[OBJECT_STORAGE_KEY],
        tokens=current_app.extensions[JWT_PROVIDER_KEY],
    )


def _payload() -> dict:
    # JSON ou multipart/form-data (quando há arquivo)
    if request.is_json:
        body = request.get_json(silent=True)
        return body if isinstance(body, dict) else {}
    return request.form.to_dict()


def _user_json(user) -> dict:
    return UserResponse.from_entity(user).to_json()


# -------------------------
# Autenticação
# -------------------------

@bp_users.post("/register")
@accepts_avatar
def register():
    payload = _payload()

    with db_session() as session:
        service = _build_service(session)
        user, token = service.register(payload, avatar=g.avatar_upload)

    return ok(
        {"user": _user_json(user), "token": token},
        message="User registered successfully",
        status=201,
    )


@bp_users.post("/login")
def login():
    payload = _payload()

    with db_session() as session:
        service = _build_service(session)
        user, token = service.login(payload)

    return ok({"user": _user_json(user), "token": token}, message="Login successful")


# -------------------------
# CRUD
# -------------------------

@bp_users.get("")
def list_users():
    with db_session() as session:
        users = _build_service(session).list_users()

    return ok([_user_json(u) for u in users], count=len(users))


@bp_users.get("/<int:user_id>")
def get_user(user_id: int):
    with db_session() as session:
        user = _build_service(session).get_user(user_id)

    return ok(_user_json(user))


@bp_users.put("/<int:user_id>")
@accepts_avatar
def update_user(user_id: int):
    payload = _payload()

    with db_session() as session:
        service = _build_service(session)
        updated = service.update_user(user_id, payload, avatar=g.avatar_upload)

    return ok(_user_json(updated), message="User updated successfully")


@bp_users.delete("/<int:user_id>")
def delete_user(user_id: int):
    with db_session() as session:
        _build_service(session).delete_user(user_id)

    return ok(message="User deleted successfully")
