# users_api/infrastructure/security/jwt_provider.py

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt

from users_api.config.settings import Settings, settings as default_settings
from users_api.core.exceptions import AuthError


class JwtProvider:
    def __init__(self, settings: Settings = default_settings) -> None:
        self._secret = settings.jwt_secret
        self._issuer = settings.jwt_issuer
        self._audience = settings.jwt_audience
        self._expiration = timedelta(days=settings.jwt_expiration_days)
        self._algorithm = "HS256"

    def issue_token(self, *, subject: str, payload: dict, ttl: timedelta, token_type: str) -> str:
        now = datetime.now(tz=timezone.utc)
        exp = now + ttl

        claims = {
            "iss": self._issuer,
            "aud": self._audience,
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "jti": uuid4().hex,
            "typ": token_type,
        }
        claims.update(payload)
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def issue_access_token(self, *, user_id: int, ttl: timedelta | None = None) -> str:
        # sem ttl explícito vale jwt_expiration_days (7 dias)
        return self.issue_token(
            subject=str(user_id),
            payload={},
            ttl=ttl if ttl is not None else self._expiration,
            token_type="access",
        )

    def decode(self, token: str) -> dict:
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": ["exp", "iat", "sub", "jti", "typ"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthError("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise AuthError("Invalid token") from e
