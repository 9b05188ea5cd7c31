# users_api/api/schemas/user_schema.py
from datetime import datetime

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from users_api.api.schemas._datetime_serializer import format_display_datetime
from users_api.entities.user import User, UserRole


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class UserCreate(CamelModel):
    full_name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=255)
    role: UserRole = UserRole.USER
    avatar: AnyHttpUrl | None = None

    @field_validator("full_name", "email", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("role", mode="before")
    @classmethod
    def default_role(cls, v):
        # campo vazio em multipart equivale a ausente
        return UserRole.USER if v in (None, "") else v


class UserUpdate(CamelModel):
    full_name: str | None = Field(default=None, min_length=2, max_length=100)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6, max_length=255)
    role: UserRole | None = None
    avatar: AnyHttpUrl | None = None

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else None

    @field_validator("full_name", "email", "password", "role", mode="before")
    @classmethod
    def blank_as_missing(cls, v):
        # campo vazio em multipart equivale a ausente
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("full_name", "email", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class LoginRequest(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserResponse(CamelModel):
    id: int
    full_name: str
    email: str
    avatar: str | None = None
    role: UserRole
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None

    @field_serializer("last_login", "updated_at")
    def _fmt_with_seconds(self, dt: datetime | None) -> str | None:
        return format_display_datetime(dt)

    @field_serializer("created_at")
    def _fmt_created(self, dt: datetime) -> str | None:
        return format_display_datetime(dt, with_seconds=False)

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            full_name=user.full_name,
            email=user.email,
            avatar=user.avatar,
            role=user.role,
            last_login=user.last_login,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
