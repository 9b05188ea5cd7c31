import base64
import binascii
import hashlib
import hmac
import os

from users_api.config.settings import Settings, settings as default_settings
from users_api.entities.user import PasswordCredentials


class PasswordHasher:
    DEFAULT_ALGO = "pbkdf2_sha256"
    DEFAULT_ITERATIONS = 600_000
    SALT_BYTES = 16
    MIN_LENGTH = 6
    MAX_LENGTH = 255

    def __init__(self, iterations: int = DEFAULT_ITERATIONS) -> None:
        self.iterations = iterations

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "PasswordHasher":
        return cls(iterations=settings.password_iterations)

    def hash_password(self, password: str, *, iterations: int | None = None) -> PasswordCredentials:
        if not password or not (self.MIN_LENGTH <= len(password) <= self.MAX_LENGTH):
            raise ValueError(
                f"Password must be between {self.MIN_LENGTH} and {self.MAX_LENGTH} characters long"
            )

        it = iterations or self.iterations
        salt = os.urandom(self.SALT_BYTES)

        dk = hashlib.pbkdf2_hmac(
            "sha256",
            password.encode("utf-8"),
            salt,
            it,
        )

        return PasswordCredentials(
            password_hash=base64.b64encode(dk).decode("utf-8"),
            password_salt=base64.b64encode(salt).decode("utf-8"),
            algo=self.DEFAULT_ALGO,
            iterations=it,
        )

    @classmethod
    def verify_password(cls, password: str, credentials: PasswordCredentials) -> bool:
        # usa as iterações gravadas junto do hash, não as atuais
        if credentials.algo not in (cls.DEFAULT_ALGO, "pbkdf2"):
            return False

        try:
            salt = base64.b64decode(credentials.password_salt.encode("utf-8"), validate=True)
            expected = base64.b64decode(credentials.password_hash.encode("utf-8"), validate=True)
        except (binascii.Error, ValueError):
            return False

        dk = hashlib.pbkdf2_hmac(
            "sha256",
            (password or "").encode("utf-8"),
            salt,
            credentials.iterations,
        )
        # comparação em tempo constante
        return hmac.compare_digest(dk, expected)
