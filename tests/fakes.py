"""In-memory ObjectStorage for tests."""

from datetime import datetime, timezone
import posixpath

from users_api.core.exceptions import StorageError
from users_api.infrastructure.storage.object_storage import (
    AssetInfo,
    PublicUrlScheme,
    StoredAsset,
    build_object_path,
)

PUBLIC_BASE_URL = "https://demo-project.supabase.co/storage/v1/object/public/avatars-bucket"


class FakeObjectStorage:
    def __init__(self, base_url: str = PUBLIC_BASE_URL):
        self._urls = PublicUrlScheme(base_url)
        self.objects: dict[str, tuple[bytes, str | None]] = {}
        self.put_calls: list[str] = []
        self.delete_calls: list[str] = []
        self.fail_on_put = False
        self.fail_on_delete = False

    def put(self, data, *, content_type, folder, owner_id=None, filename=None):
        if self.fail_on_put:
            raise StorageError("Upload failed: bucket unavailable")

        path = build_object_path(folder, owner_id=owner_id, filename=filename, content_type=content_type)
        self.put_calls.append(path)
        self.objects[path] = (bytes(data), content_type)
        return StoredAsset(
            url=self.public_url_for(path),
            path=path,
            content_type=content_type,
            size_bytes=len(data),
        )

    def delete(self, path):
        self.delete_calls.append(path)
        if self.fail_on_delete:
            raise StorageError("Delete failed: bucket unavailable")
        self.objects.pop(path, None)

    def list_assets(self, folder):
        prefix = folder.strip("/") + "/"
        return [
            AssetInfo(
                name=posixpath.basename(path),
                path=path,
                url=self.public_url_for(path),
                size_bytes=len(data),
                content_type=content_type,
                last_modified=datetime.now(timezone.utc),
            )
            for path, (data, content_type) in self.objects.items()
            if path.startswith(prefix)
        ]

    def public_url_for(self, path):
        return self._urls.url_for(path)

    def path_from_url(self, url):
        return self._urls.path_for(url)
