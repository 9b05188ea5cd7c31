# users_api/config/settings.py
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    # Banco principal (PostgreSQL); DB_URL tem precedência quando definido
    db_url: str | None = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "users"
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_auto_create: bool = True

    environment: str = "development"
    debug: bool = False
    # Expõe a mensagem interna de erros 500 no corpo da resposta
    expose_error_details: bool = False
    log_level: str = "INFO"

    api_prefix: str = ""
    cors_origins_raw: str = "*"
    max_content_length_mb: int = 10

    jwt_secret: str = "dev-secret-change-me"
    jwt_issuer: str = "users-api"
    jwt_audience: str = "users-api-clients"
    jwt_expiration_days: int = 7

    password_iterations: int = 600_000

    # Object storage (S3-compatible: Supabase Storage, R2, MinIO, AWS)
    storage_bucket: str = "avatars"
    storage_endpoint_url: str | None = None
    storage_region: str = "us-east-1"
    storage_access_key_id: str | None = None
    storage_secret_access_key: str | None = None
    storage_public_base_url: str | None = None
    storage_timeout_seconds: float = 15.0
    storage_max_attempts: int = 3

    avatar_folder: str = "avatars"
    avatar_max_bytes: int = 2 * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("db_host", "db_name", "db_user", "db_password", "jwt_secret", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip().strip('"').strip("'")
        return v

    @field_validator("api_prefix", mode="after")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url

        user = quote_plus(self.db_user)
        password = quote_plus(self.db_password)
        host = self.db_host
        port = self.db_port
        db = self.db_name

        return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{db}"

    @property
    def cors_origins(self) -> list[str] | str:
        raw = (self.cors_origins_raw or "").strip()
        if raw == "*":
            return "*"
        return [p.strip() for p in raw.split(",") if p.strip()]

    @property
    def resolved_public_base_url(self) -> str:
        if self.storage_public_base_url:
            return self.storage_public_base_url.rstrip("/")

        endpoint = (self.storage_endpoint_url or "").rstrip("/")
        # Supabase: https://<ref>.supabase.co/storage/v1/s3 -> .../storage/v1/object/public/<bucket>
        if endpoint.endswith("/storage/v1/s3"):
            return f"{endpoint[: -len('/s3')]}/object/public/{self.storage_bucket}"
        if endpoint:
            return f"{endpoint}/{self.storage_bucket}"

        return f"https://{self.storage_bucket}.s3.{self.storage_region}.amazonaws.com"


settings = Settings()
