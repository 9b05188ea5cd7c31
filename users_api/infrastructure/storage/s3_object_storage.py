# users_api/infrastructure/storage/s3_object_storage.py
from __future__ import annotations

import logging
import mimetypes
import posixpath
from dataclasses import dataclass

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from users_api.config.settings import Settings
from users_api.core.exceptions import StorageError
from users_api.infrastructure.storage.object_storage import (
    AssetInfo,
    ObjectStorage,
    PublicUrlScheme,
    StoredAsset,
    build_object_path,
    is_valid_object_path,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class S3ObjectStorageConfig:
    bucket: str
    public_base_url: str
    endpoint_url: str | None = None
    region: str = "us-east-1"
    access_key_id: str | None = None
    secret_access_key: str | None = None
    timeout_seconds: float = 15.0
    max_attempts: int = 3
    cache_control: str = "max-age=3600"

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStorageConfig":
        return cls(
            bucket=settings.storage_bucket,
            public_base_url=settings.resolved_public_base_url,
            endpoint_url=settings.storage_endpoint_url,
            region=settings.storage_region,
            access_key_id=settings.storage_access_key_id,
            secret_access_key=settings.storage_secret_access_key,
            timeout_seconds=settings.storage_timeout_seconds,
            max_attempts=settings.storage_max_attempts,
        )


class S3ObjectStorage(ObjectStorage):
    """Bucket S3-compatível (Supabase Storage, Cloudflare R2, MinIO, AWS S3)."""

    def __init__(self, *, config: S3ObjectStorageConfig, client=None) -> None:
        raw = (config.bucket or "").strip()
        if not raw:
            raise StorageError("Object storage not configured (STORAGE_BUCKET is empty).")

        self._config = config
        self._bucket = raw
        self._urls = PublicUrlScheme(config.public_base_url)
        self._client = client

    def _get_client(self):
        # cliente criado sob demanda: nenhuma chamada de rede na inicialização
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=self._config.endpoint_url,
                region_name=self._config.region,
                aws_access_key_id=self._config.access_key_id,
                aws_secret_access_key=self._config.secret_access_key,
                config=Config(
                    signature_version="s3v4",
                    connect_timeout=self._config.timeout_seconds,
                    read_timeout=self._config.timeout_seconds,
                    retries={"max_attempts": max(1, self._config.max_attempts), "mode": "standard"},
                ),
            )
        return self._client

    def put(
        self,
        data: bytes,
        *,
        content_type: str | None,
        folder: str,
        owner_id: int | None = None,
        filename: str | None = None,
    ) -> StoredAsset:
        path = build_object_path(
            folder, owner_id=owner_id, filename=filename, content_type=content_type
        )

        extra = {"CacheControl": self._config.cache_control}
        if content_type:
            extra["ContentType"] = content_type

        try:
            self._get_client().put_object(
                Bucket=self._bucket,
                Key=path,
                Body=data,
                ContentLength=len(data),
                **extra,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Upload failed (bucket={self._bucket}, key={path}): {e}")
            raise StorageError(f"Upload failed: {e}") from e

        logger.info(f"Uploaded {len(data)} bytes to {path}")
        return StoredAsset(
            url=self.public_url_for(path),
            path=path,
            content_type=content_type,
            size_bytes=len(data),
        )

    def delete(self, path: str) -> None:
        if not is_valid_object_path(path):
            raise StorageError(f"Invalid object path: '{path}'")

        try:
            self._get_client().delete_object(Bucket=self._bucket, Key=path)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Delete failed: {e}") from e

        logger.info(f"Deleted {path} from bucket {self._bucket}")

    def list_assets(self, folder: str) -> list[AssetInfo]:
        prefix = folder.strip("/") + "/" if folder.strip("/") else ""
        assets: list[AssetInfo] = []

        try:
            paginator = self._get_client().get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    key = obj["Key"]
                    if key.endswith("/"):
                        continue
                    assets.append(
                        AssetInfo(
                            name=posixpath.basename(key),
                            path=key,
                            url=self.public_url_for(key),
                            size_bytes=obj.get("Size"),
                            content_type=mimetypes.guess_type(key)[0],
                            last_modified=obj.get("LastModified"),
                        )
                    )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"List files failed: {e}") from e

        return assets

    def public_url_for(self, path: str) -> str:
        return self._urls.url_for(path)

    def path_from_url(self, url: str | None) -> str | None:
        return self._urls.path_for(url)
