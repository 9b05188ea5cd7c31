# users_api/repositories/user_repository.py

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from users_api.api.schemas.user_schema import UserCreate, UserUpdate
from users_api.core.base_repository import BaseRepository
from users_api.core.exceptions import ConflictError, NotFoundError
from users_api.core.validation import validate_fields
from users_api.entities.user import PasswordCredentials, User
from users_api.infrastructure.database.models.user_model import UserModel
from users_api.infrastructure.security.password_hasher import PasswordHasher

EMAIL_TAKEN = "User already exists with this email"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _to_entity(model: UserModel, *, include_hash: bool = False) -> User:
    credentials = None
    if include_hash:
        credentials = PasswordCredentials(
            password_hash=model.password_hash,
            password_salt=model.password_salt,
            algo=model.password_algo,
            iterations=model.password_iterations,
        )
    return User(
        id=model.id,
        full_name=model.full_name,
        email=model.email,
        role=model.role,
        avatar=model.avatar,
        created_at=model.created_at,
        updated_at=model.updated_at,
        last_login=model.last_login,
        credentials=credentials,
    )


class UserRepository(BaseRepository[UserModel]):
    def __init__(self, session: Session, hasher: PasswordHasher | None = None) -> None:
        super().__init__(session)
        self._hasher = hasher or PasswordHasher.from_settings()

    def _get_model(self, user_id: int) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        return self._session.execute(stmt).scalar_one_or_none()

    def _get_model_by_email(self, email: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.email == email.strip().lower())
        return self._session.execute(stmt).scalar_one_or_none()

    def _flush(self) -> None:
        # duas requisições simultâneas com o mesmo email: a constraint decide
        try:
            self._session.flush()
        except IntegrityError as e:
            raise ConflictError(EMAIL_TAKEN) from e

    # -------------------------
    # Leitura
    # -------------------------

    def get_by_email(self, email: str, *, include_hash: bool = False) -> User | None:
        model = self._get_model_by_email(email)
        return _to_entity(model, include_hash=include_hash) if model is not None else None

    def get_by_id(self, user_id: int) -> User | None:
        model = self._get_model(user_id)
        return _to_entity(model) if model is not None else None

    def list_all(self) -> list[User]:
        stmt = select(UserModel).order_by(UserModel.created_at.desc(), UserModel.id.desc())
        return [_to_entity(m) for m in self._session.execute(stmt).scalars().all()]

    # -------------------------
    # Escrita
    # -------------------------

    def create(self, fields: Mapping[str, Any] | UserCreate) -> User:
        data = validate_fields(UserCreate, fields)

        if self._get_model_by_email(data.email) is not None:
            raise ConflictError(EMAIL_TAKEN)

        credentials = self._hasher.hash_password(data.password)

        model = UserModel(
            full_name=data.full_name,
            email=data.email,
            role=data.role,
            avatar=str(data.avatar) if data.avatar is not None else None,
            password_algo=credentials.algo,
            password_iterations=credentials.iterations,
            password_hash=credentials.password_hash,
            password_salt=credentials.password_salt,
            created_at=_utcnow(),
            updated_at=None,
            last_login=None,
        )
        self._session.add(model)
        self._flush()
        return _to_entity(model)

    def update(self, user_id: int, fields: Mapping[str, Any] | UserUpdate) -> User:
        model = self._get_model(user_id)
        if model is None:
            raise NotFoundError("User not found")

        data = validate_fields(UserUpdate, fields)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in changes and changes["email"] != model.email:
            existing = self._get_model_by_email(changes["email"])
            if existing is not None and existing.id != model.id:
                raise ConflictError("Email already exists")

        if "full_name" in changes:
            model.full_name = changes["full_name"]
        if "email" in changes:
            model.email = changes["email"]
        if "role" in changes:
            model.role = changes["role"]
        if "avatar" in changes:
            model.avatar = str(changes["avatar"])
        if "password" in changes:
            credentials = self._hasher.hash_password(changes["password"])
            model.password_hash = credentials.password_hash
            model.password_salt = credentials.password_salt
            model.password_algo = credentials.algo
            model.password_iterations = credentials.iterations

        model.updated_at = _utcnow()
        self._flush()
        return _to_entity(model)

    def delete(self, user_id: int) -> None:
        model = self._get_model(user_id)
        if model is None:
            raise NotFoundError("User not found")

        self._session.delete(model)
        self._session.flush()

    # -------------------------
    # Autenticação
    # -------------------------

    def verify_password(self, user: User, candidate: str) -> bool:
        if user.credentials is None:
            return False
        return self._hasher.verify_password(candidate, user.credentials)

    def record_login(self, user: User) -> User:
        model = self._get_model(user.id)
        if model is None:
            raise NotFoundError("User not found")

        now = _utcnow()
        # lastLogin estritamente crescente, mesmo com relógio empatado
        if model.last_login is not None and now <= model.last_login:
            now = model.last_login + timedelta(microseconds=1)

        model.last_login = now
        self._session.flush()
        return _to_entity(model)
