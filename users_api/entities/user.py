# users_api/entities/user.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class PasswordCredentials:
    password_hash: str
    password_salt: str
    algo: str
    iterations: int


@dataclass(frozen=True)
class User:
    id: int
    full_name: str
    email: str
    role: UserRole
    avatar: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]
    last_login: Optional[datetime]
    # só carregado quando pedido explicitamente (login)
    credentials: Optional[PasswordCredentials] = field(default=None, repr=False, compare=False)
