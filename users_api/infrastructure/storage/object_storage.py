# users_api/infrastructure/storage/object_storage.py
from __future__ import annotations

import mimetypes
import posixpath
import secrets
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from urllib.parse import quote, unquote, urlsplit


@dataclass(frozen=True)
class StoredAsset:
    url: str
    path: str
    content_type: str | None
    size_bytes: int


@dataclass(frozen=True)
class AssetInfo:
    name: str
    path: str
    url: str
    size_bytes: int | None
    content_type: str | None
    last_modified: datetime | None


class ObjectStorage(Protocol):
    def put(
        self,
        data: bytes,
        *,
        content_type: str | None,
        folder: str,
        owner_id: int | None = None,
        filename: str | None = None,
    ) -> StoredAsset:
        """Envia o conteúdo para o bucket, sem alterar os bytes. Falha com StorageError."""
        raise NotImplementedError

    def delete(self, path: str) -> None:
        """Remove o objeto do bucket. Falha com StorageError."""
        raise NotImplementedError

    def list_assets(self, folder: str) -> list[AssetInfo]:
        raise NotImplementedError

    def public_url_for(self, path: str) -> str:
        raise NotImplementedError

    def path_from_url(self, url: str | None) -> str | None:
        raise NotImplementedError


def file_extension(filename: str | None, content_type: str | None) -> str:
    """Extension (with dot) from the original filename, else from the MIME type."""
    if filename:
        ext = posixpath.splitext(filename.replace("\\", "/"))[1].lower()
        if ext and len(ext) <= 10 and ext[1:].isalnum():
            return ext

    if content_type:
        guessed = mimetypes.guess_extension(content_type.split(";")[0].strip())
        if guessed:
            return ".jpg" if guessed == ".jpe" else guessed

    return ".bin"


def build_object_path(
    folder: str,
    *,
    owner_id: int | None = None,
    filename: str | None = None,
    content_type: str | None = None,
) -> str:
    """`<folder>/[<owner_id>-]<epoch_ms>-<random>.<ext>`"""
    folder = folder.strip("/")
    stamp = int(time.time() * 1000)
    random_id = secrets.token_hex(8)
    prefix = f"{owner_id}-" if owner_id is not None else ""
    name = f"{prefix}{stamp}-{random_id}{file_extension(filename, content_type)}"
    return f"{folder}/{name}" if folder else name


def is_valid_object_path(path: str | None) -> bool:
    if not path or path.startswith("/") or path.endswith("/"):
        return False
    segments = path.split("/")
    return all(seg and seg not in (".", "..") for seg in segments)


class PublicUrlScheme:
    """Maps object paths to public URLs under one base URL and back.

    The inverse is strict: anything that is not `<base>/<path>` with a clean
    path (no query, no fragment, no empty or dot segments) maps to None.
    """

    def __init__(self, base_url: str) -> None:
        self._base = base_url.rstrip("/")
        parts = urlsplit(self._base)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"Invalid public base URL: '{base_url}'")
        self._scheme = parts.scheme.lower()
        self._netloc = parts.netloc.lower()
        self._base_path = parts.path.rstrip("/")

    @property
    def base_url(self) -> str:
        return self._base

    def url_for(self, path: str) -> str:
        return f"{self._base}/{quote(path, safe='/')}"

    def path_for(self, url: str | None) -> str | None:
        if not url or not isinstance(url, str):
            return None

        parts = urlsplit(url.strip())
        if parts.scheme.lower() != self._scheme or parts.netloc.lower() != self._netloc:
            return None
        if parts.query or parts.fragment:
            return None

        prefix = self._base_path + "/"
        if not parts.path.startswith(prefix):
            return None

        path = unquote(parts.path[len(prefix):])
        if not is_valid_object_path(path):
            return None
        return path
