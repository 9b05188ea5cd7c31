import io
import os
import tempfile

import pytest

# configuração precisa existir antes de importar users_api (settings é lido no import)
_DB_DIR = tempfile.mkdtemp(prefix="users-api-tests-")
os.environ["DB_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["PASSWORD_ITERATIONS"] = "1000"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["API_PREFIX"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from users_api.infrastructure.database.base_model import BaseModel  # noqa: E402
from users_api.infrastructure.database.session import db_session, get_engine, init_db  # noqa: E402
from users_api.main import create_app  # noqa: E402

from fakes import FakeObjectStorage  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(autouse=True)
def _schema():
    init_db()
    yield
    BaseModel.metadata.drop_all(get_engine())


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def app(storage):
    app = create_app(storage=storage)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session():
    with db_session() as s:
        yield s


@pytest.fixture
def png_file():
    def _make(name: str = "me.png", data: bytes = PNG_BYTES, mimetype: str = "image/png"):
        return (io.BytesIO(data), name, mimetype)

    return _make


@pytest.fixture
def register_user(client):
    def _register(**overrides):
        body = {"fullName": "Jane Doe", "email": "jane@x.com", "password": "secret1"}
        body.update(overrides)
        response = client.post("/users/register", json=body)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]

    return _register
