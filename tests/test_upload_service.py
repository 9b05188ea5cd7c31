import io
from dataclasses import dataclass
from typing import BinaryIO

import pytest

from users_api.core.exceptions import StorageError, ValidationError
from users_api.services.upload_service import AvatarUpload, UploadPipeline

from fakes import FakeObjectStorage

MiB = 1024 * 1024


@dataclass
class _File:
    filename: str | None
    mimetype: str | None
    stream: BinaryIO


def _file(data=b"img", name="me.png", mimetype="image/png"):
    return _File(filename=name, mimetype=mimetype, stream=io.BytesIO(data))


@pytest.fixture
def storage():
    return FakeObjectStorage()


@pytest.fixture
def pipeline(storage):
    return UploadPipeline(storage=storage)


def test_no_file_is_pass_through(pipeline):
    assert pipeline.accept([]) is None
    assert pipeline.accept([("avatar", _File(filename="", mimetype=None, stream=io.BytesIO()))]) is None


def test_accepts_image_at_the_limit(pipeline, storage):
    upload = pipeline.accept([("avatar", _file(b"x" * (2 * MiB)))])

    assert upload.size_bytes == 2 * MiB
    assert upload.content_type == "image/png"
    assert storage.put_calls == []


@pytest.mark.parametrize(
    "files, message",
    [
        ([("avatar", _file(b"x" * (3 * MiB)))], "File too large. Maximum size allowed is 2MB"),
        ([("avatar", _file(mimetype="text/plain"))], "Only image files are allowed"),
        ([("avatar", _file(mimetype=None))], "Only image files are allowed"),
        ([("avatar", _file()), ("avatar", _file())], "Too many files. Only one file allowed"),
        ([("picture", _file())], 'Unexpected field name. Use "avatar" as the field name'),
    ],
)
def test_rejections_never_touch_storage(pipeline, storage, files, message):
    with pytest.raises(ValidationError) as exc:
        pipeline.accept(files)

    assert str(exc.value) == message
    assert storage.put_calls == []


def test_store_puts_bytes_unchanged(pipeline, storage):
    data = bytes(range(256)) * 10
    upload = AvatarUpload(data=data, content_type="image/png", filename="face.png")

    asset = pipeline.store(upload, owner_id=12)

    assert asset.path.startswith("avatars/12-")
    assert storage.objects[asset.path][0] == data
    assert asset.url == storage.public_url_for(asset.path)


def test_store_failure_propagates(pipeline, storage):
    storage.fail_on_put = True

    with pytest.raises(StorageError):
        pipeline.store(AvatarUpload(data=b"x", content_type="image/png", filename=None))


def test_store_wraps_unexpected_gateway_errors():
    class Broken(FakeObjectStorage):
        def put(self, *args, **kwargs):
            raise TimeoutError("read timed out")

    pipeline = UploadPipeline(storage=Broken())

    with pytest.raises(StorageError):
        pipeline.store(AvatarUpload(data=b"x", content_type="image/png", filename=None))
