"""Tests for S3ObjectStorage with a mocked boto3 client."""

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from botocore.exceptions import ClientError, ReadTimeoutError

from users_api.core.exceptions import StorageError
from users_api.infrastructure.storage.s3_object_storage import S3ObjectStorage, S3ObjectStorageConfig

BASE = "https://demo-project.supabase.co/storage/v1/object/public/avatars-bucket"


def _client_error(operation: str) -> ClientError:
    return ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, operation)


class TestS3ObjectStorage(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.storage = S3ObjectStorage(
            config=S3ObjectStorageConfig(bucket="avatars-bucket", public_base_url=BASE),
            client=self.client,
        )

    def test_put_uploads_exact_bytes(self):
        data = b"\x89PNG" + b"\x01" * 100

        asset = self.storage.put(data, content_type="image/png", folder="avatars", owner_id=3, filename="a.png")

        kwargs = self.client.put_object.call_args.kwargs
        self.assertEqual(kwargs["Bucket"], "avatars-bucket")
        self.assertEqual(kwargs["Key"], asset.path)
        self.assertEqual(kwargs["Body"], data)
        self.assertEqual(kwargs["ContentType"], "image/png")
        self.assertTrue(asset.path.startswith("avatars/3-"))
        self.assertEqual(asset.url, f"{BASE}/{asset.path}")
        self.assertEqual(asset.size_bytes, len(data))

    def test_put_client_error_raises_storage_error(self):
        self.client.put_object.side_effect = _client_error("PutObject")

        with self.assertRaises(StorageError):
            self.storage.put(b"x", content_type="image/png", folder="avatars")

    def test_put_timeout_raises_storage_error(self):
        self.client.put_object.side_effect = ReadTimeoutError(endpoint_url="https://s3.example.com")

        with self.assertRaises(StorageError):
            self.storage.put(b"x", content_type="image/png", folder="avatars")

    def test_delete(self):
        self.storage.delete("avatars/a.png")

        self.client.delete_object.assert_called_once_with(Bucket="avatars-bucket", Key="avatars/a.png")

    def test_delete_failure_raises_storage_error(self):
        self.client.delete_object.side_effect = _client_error("DeleteObject")

        with self.assertRaises(StorageError):
            self.storage.delete("avatars/a.png")

    def test_delete_rejects_invalid_path(self):
        with self.assertRaises(StorageError):
            self.storage.delete("../etc/passwd")
        self.client.delete_object.assert_not_called()

    def test_list_assets(self):
        modified = datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc)
        paginator = MagicMock()
        paginator.paginate.return_value = [
            {"Contents": [{"Key": "avatars/a.png", "Size": 10, "LastModified": modified}, {"Key": "avatars/"}]},
            {},
        ]
        self.client.get_paginator.return_value = paginator

        assets = self.storage.list_assets("avatars")

        paginator.paginate.assert_called_once_with(Bucket="avatars-bucket", Prefix="avatars/")
        self.assertEqual(len(assets), 1)
        self.assertEqual(assets[0].name, "a.png")
        self.assertEqual(assets[0].content_type, "image/png")
        self.assertEqual(assets[0].url, f"{BASE}/avatars/a.png")
        self.assertEqual(assets[0].last_modified, modified)

    def test_path_from_url_round_trip(self):
        path = "avatars/3-1700000000000-abcdef.png"

        self.assertEqual(self.storage.path_from_url(self.storage.public_url_for(path)), path)
        self.assertIsNone(self.storage.path_from_url("https://elsewhere.example.com/avatars/x.png"))

    @patch("users_api.infrastructure.storage.s3_object_storage.boto3")
    def test_client_is_created_lazily_with_timeouts(self, mock_boto3):
        storage = S3ObjectStorage(
            config=S3ObjectStorageConfig(
                bucket="avatars-bucket",
                public_base_url=BASE,
                endpoint_url="https://demo-project.supabase.co/storage/v1/s3",
                timeout_seconds=12,
                max_attempts=2,
            )
        )
        mock_boto3.client.assert_not_called()

        storage.delete("avatars/a.png")

        mock_boto3.client.assert_called_once()
        config = mock_boto3.client.call_args.kwargs["config"]
        self.assertEqual(config.connect_timeout, 12)
        self.assertEqual(config.read_timeout, 12)
        self.assertEqual(config.retries, {"max_attempts": 2, "mode": "standard"})

    def test_empty_bucket_is_rejected(self):
        with self.assertRaises(StorageError):
            S3ObjectStorage(config=S3ObjectStorageConfig(bucket=" ", public_base_url=BASE))


if __name__ == "__main__":
    unittest.main()
