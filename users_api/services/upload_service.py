# users_api/services/upload_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Protocol

from users_api.core.exceptions import StorageError, ValidationError
from users_api.infrastructure.storage.object_storage import ObjectStorage, StoredAsset

logger = logging.getLogger(__name__)

AVATAR_FIELD = "avatar"
DEFAULT_MAX_BYTES = 2 * 1024 * 1024


class IncomingFile(Protocol):
    """Subset of werkzeug's FileStorage used by the pipeline."""

    filename: str | None
    mimetype: str | None
    stream: BinaryIO


@dataclass(frozen=True)
class AvatarUpload:
    """A validated file, fully buffered in memory."""

    data: bytes
    content_type: str
    filename: str | None

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class UploadPipeline:
    def __init__(
        self,
        *,
        storage: ObjectStorage,
        folder: str = "avatars",
        field_name: str = AVATAR_FIELD,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ) -> None:
        self._storage = storage
        self._folder = folder
        self._field_name = field_name
        self._max_bytes = max_bytes

    @property
    def max_size_label(self) -> str:
        return f"{self._max_bytes / (1024 * 1024):g}MB"

    def accept(self, files: Iterable[tuple[str, IncomingFile]]) -> AvatarUpload | None:
        """Validate the multipart files of one request.

        `files` holds (field name, file) pairs as yielded by
        `request.files.items(multi=True)`. Returns None when nothing was sent.
        Nothing reaches the storage here.
        """
        received = [(name, f) for name, f in files if f is not None and (f.filename or "").strip()]
        if not received:
            return None

        if len(received) > 1:
            raise ValidationError("Too many files. Only one file allowed")

        name, incoming = received[0]
        if name != self._field_name:
            raise ValidationError(f'Unexpected field name. Use "{self._field_name}" as the field name')

        mimetype = (incoming.mimetype or "").lower()
        if not mimetype.startswith("image/"):
            raise ValidationError("Only image files are allowed")

        # lê no máximo limite+1 bytes para detectar excesso sem bufferizar tudo
        data = incoming.stream.read(self._max_bytes + 1)
        if len(data) > self._max_bytes:
            raise ValidationError(f"File too large. Maximum size allowed is {self.max_size_label}")

        return AvatarUpload(data=data, content_type=mimetype, filename=incoming.filename)

    def store(self, upload: AvatarUpload, *, owner_id: int | None = None) -> StoredAsset:
        logger.info(
            f"Uploading {upload.filename or 'file'} ({upload.size_bytes / 1024:.2f}KB) to {self._folder}/"
        )
        try:
            return self._storage.put(
                upload.data,
                content_type=upload.content_type,
                folder=self._folder,
                owner_id=owner_id,
                filename=upload.filename,
            )
        except StorageError:
            raise
        except Exception as e:
            # qualquer falha do gateway aborta a operação
            raise StorageError(f"Upload failed: {e}") from e
