import pytest
from fastapi.testclient import TestClient
from rootle.main import app
from rootle.core.deps import get_user_store, get_file_store, get_blob_store
from rootle.core.db import build_user_store, build_file_store
from rootle.core.storage import BlobStore
from rootle.core.security import hash_password, create_access_token
from rootle.core.settings import settings
from rootle.models.User import User


@pytest.fixture(scope="session", autouse=True)
def setup_secret():
    settings.JWT_SECRET = "test-secret-for-rootle-unit-tests-0123456789"


@pytest.fixture(name="user_store")
def user_store_fixture(tmp_path):
    store = build_user_store(tmp_path / "data" / "users.json")
    store.init()
    return store


@pytest.fixture(name="file_store")
def file_store_fixture(tmp_path):
    store = build_file_store(tmp_path / "data" / "files.json")
    store.init()
    return store


@pytest.fixture(name="blob_store")
def blob_store_fixture(tmp_path):
    blobs = BlobStore(tmp_path / "uploads")
    blobs.init()
    return blobs


@pytest.fixture(name="client")
def client_fixture(user_store, file_store, blob_store):
    app.dependency_overrides[get_user_store] = lambda: user_store
    app.dependency_overrides[get_file_store] = lambda: file_store
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def create_user(user_store, username: str, password: str = "password") -> str:
    hashed_password, salt = hash_password(password)
    user_store.append_one(User(username=username, password_hash=hashed_password, salt=salt))
    return create_access_token(username)


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="alice_token")
def alice_token_fixture(user_store):
    return create_user(user_store, "alice")


@pytest.fixture(name="bob_token")
def bob_token_fixture(user_store):
    return create_user(user_store, "bob")
