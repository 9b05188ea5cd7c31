# users_api/services/user_service.py

import logging
from collections.abc import Mapping
from typing import Any

from users_api.api.schemas.user_schema import LoginRequest, UserCreate, UserUpdate
from users_api.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from users_api.core.validation import validate_fields
from users_api.entities.user import User
from users_api.infrastructure.security.jwt_provider import JwtProvider
from users_api.infrastructure.storage.object_storage import ObjectStorage, StoredAsset
from users_api.repositories.user_repository import EMAIL_TAKEN, UserRepository
from users_api.services.upload_service import AvatarUpload, UploadPipeline

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class UserService:
    def __init__(
        self,
        user_repository: UserRepository,
        *,
        uploads: UploadPipeline,
        storage: ObjectStorage,
        tokens: JwtProvider,
    ) -> None:
        self._user_repository = user_repository
        self._uploads = uploads
        self._storage = storage
        self._tokens = tokens

    # -------------------------
    # Helpers
    # -------------------------

    def _get_or_404(self, user_id: int) -> User:
        user = self._user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _discard_asset(self, path: str | None, *, reason: str) -> None:
        """Best-effort removal; an orphaned blob is acceptable, a failed mutation is not."""
        if not path:
            return
        try:
            self._storage.delete(path)
        except Exception as e:
            logger.warning(f"Could not delete {reason} '{path}' from storage: {e}")

    def _discard_avatar_url(self, url: str | None, *, reason: str) -> None:
        if not url:
            return
        path = self._storage.path_from_url(url)
        if path is None:
            logger.info(f"Skipping storage cleanup for {reason}: URL outside the bucket")
            return
        self._discard_asset(path, reason=reason)

    # -------------------------
    # Operações
    # -------------------------

    def register(self, payload: Mapping[str, Any], *, avatar: AvatarUpload | None = None) -> tuple[User, str]:
        data = validate_fields(UserCreate, {k: v for k, v in payload.items() if k != "avatar"})

        if self._user_repository.get_by_email(data.email) is not None:
            raise ConflictError(EMAIL_TAKEN)

        stored: StoredAsset | None = None
        if avatar is not None:
            stored = self._uploads.store(avatar)
            data = validate_fields(UserCreate, {**data.model_dump(), "avatar": stored.url})

        try:
            user = self._user_repository.create(data)
        except Exception:
            if stored is not None:
                self._discard_asset(stored.path, reason="uploaded avatar")
            raise

        token = self._tokens.issue_access_token(user_id=user.id)
        return user, token

    def login(self, payload: Mapping[str, Any]) -> tuple[User, str]:
        try:
            data = validate_fields(LoginRequest, payload)
        except ValidationError as e:
            raise ValidationError("Email and password are required") from e

        user = self._user_repository.get_by_email(data.email, include_hash=True)
        if user is None:
            raise AuthError(INVALID_CREDENTIALS)

        if not self._user_repository.verify_password(user, data.password):
            raise AuthError(INVALID_CREDENTIALS)

        user = self._user_repository.record_login(user)
        token = self._tokens.issue_access_token(user_id=user.id)
        return user, token

    def list_users(self) -> list[User]:
        return self._user_repository.list_all()

    def get_user(self, user_id: int) -> User:
        return self._get_or_404(user_id)

    def update_user(
        self,
        user_id: int,
        payload: Mapping[str, Any],
        *,
        avatar: AvatarUpload | None = None,
    ) -> User:
        user = self._get_or_404(user_id)

        # avatar só muda via arquivo
        data = validate_fields(UserUpdate, {k: v for k, v in payload.items() if k != "avatar"})

        if data.email is not None and data.email != user.email:
            existing = self._user_repository.get_by_email(data.email)
            if existing is not None and existing.id != user.id:
                raise ConflictError("Email already exists")

        stored: StoredAsset | None = None
        if avatar is not None:
            stored = self._uploads.store(avatar, owner_id=user.id)
            data = validate_fields(UserUpdate, {**data.model_dump(exclude_unset=True), "avatar": stored.url})

        try:
            updated = self._user_repository.update(user_id, data)
        except Exception:
            if stored is not None:
                self._discard_asset(stored.path, reason="uploaded avatar")
            raise

        if stored is not None:
            self._discard_avatar_url(user.avatar, reason="old avatar")

        return updated

    def delete_user(self, user_id: int) -> None:
        user = self._get_or_404(user_id)
        self._discard_avatar_url(user.avatar, reason="avatar")
        self._user_repository.delete(user_id)
