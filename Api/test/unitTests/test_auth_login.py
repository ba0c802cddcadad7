import jwt
import pytest
from datetime import timedelta
from fastapi.testclient import TestClient
from rootle.core.security import create_access_token, decode_access_token, ALGORITHM
from rootle.core.settings import settings
from rootle.core.errors import ExpiredToken, InvalidCredentials
from rootle.models.User import UserCredentials
from rootle.services import UserService as user_service_module
from conftest import create_user


def test_login_success(client: TestClient, user_store):
    create_user(user_store, "test_login_user", "password123")

    response = client.post(
        "/api/login",
        json={"username": "test_login_user", "password": "password123"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Logged in successfully"
    assert decode_access_token(data["token"]) == "test_login_user"


def test_login_token_expires_after_one_hour(client: TestClient, user_store):
    create_user(user_store, "alice", "pw1")
    token = client.post("/api/login", json={"username": "alice", "password": "pw1"}).json()["token"]

    payload = jwt.decode(token, settings.token_secret, algorithms=[ALGORITHM])
    assert payload["exp"] - payload["iat"] == 3600
    assert payload["username"] == "alice"


def test_login_invalid_password(client: TestClient, user_store):
    create_user(user_store, "test_login_fail", "password123")

    response = client.post(
        "/api/login",
        json={"username": "test_login_fail", "password": "wrongpassword"}
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid credentials"


def test_login_invalid_username(client: TestClient):
    response = client.post(
        "/api/login",
        json={"username": "nonexistent", "password": "password123"}
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid credentials"


def test_login_failures_are_indistinguishable(client: TestClient, user_store):
    create_user(user_store, "alice", "pw1")

    wrong_password = client.post("/api/login", json={"username": "alice", "password": "nope"})
    unknown_user = client.post("/api/login", json={"username": "mallory", "password": "pw1"})
    assert wrong_password.status_code == unknown_user.status_code == 400
    assert wrong_password.json() == unknown_user.json()


def test_login_missing_fields(client: TestClient):
    response = client.post("/api/login", json={"username": "alice"})
    assert response.status_code == 400
    assert response.json()["message"] == "Username and password are required"


def test_login_malformed_body(client: TestClient):
    response = client.post("/api/login", content="not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidInput"


def test_register_then_login(client: TestClient):
    assert client.post("/api/register", json={"username": "carol", "password": "s3cret"}).status_code == 201
    response = client.post("/api/login", json={"username": "carol", "password": "s3cret"})
    assert response.status_code == 200
    assert decode_access_token(response.json()["token"]) == "carol"


def test_protected_route_with_bearer_token(client: TestClient):
    token = create_access_token("alice")
    response = client.get("/api/protected", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert "alice" in response.json()["message"]


def test_protected_route_with_x_auth_token(client: TestClient):
    token = create_access_token("alice")
    response = client.get("/api/protected", headers={"x-auth-token": token})
    assert response.status_code == 200
    assert "alice" in response.json()["message"]


def test_x_auth_token_is_preferred_over_bearer(client: TestClient):
    headers = {
        "x-auth-token": create_access_token("alice"),
        "Authorization": f"Bearer {create_access_token('bob')}",
    }
    response = client.get("/api/protected", headers=headers)
    assert response.status_code == 200
    assert "alice" in response.json()["message"]


def test_protected_route_without_token(client: TestClient):
    response = client.get("/api/protected")
    assert response.status_code == 401
    assert response.json()["kind"] == "MissingToken"
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_protected_route_with_garbage_token(client: TestClient):
    response = client.get("/api/protected", headers={"x-auth-token": "not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["kind"] == "InvalidToken"


def test_protected_route_with_foreign_signature(client: TestClient):
    token = jwt.encode({"username": "alice", "sub": "alice", "exp": 9999999999}, "another-secret-of-sufficient-length-000", algorithm=ALGORITHM)
    response = client.get("/api/protected", headers={"x-auth-token": token})
    assert response.status_code == 401
    assert response.json()["kind"] == "InvalidToken"


def test_protected_route_with_expired_token(client: TestClient):
    token = create_access_token("alice", expires_delta=timedelta(seconds=-1))
    response = client.get("/api/protected", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["kind"] == ExpiredToken.__name__


def test_non_bearer_authorization_is_ignored(client: TestClient):
    token = create_access_token("alice")
    response = client.get("/api/protected", headers={"Authorization": f"Basic {token}"})
    assert response.status_code == 401
    assert response.json()["kind"] == "MissingToken"


def test_unknown_user_still_runs_password_hash(user_store, monkeypatch):
    calls = []
    original = user_service_module.verify_password

    def recording_verify(password, salt, hashed):
        calls.append(salt)
        return original(password, salt, hashed)

    monkeypatch.setattr(user_service_module, "verify_password", recording_verify)
    service = user_service_module.UserService()
    with pytest.raises(InvalidCredentials):
        service.verify(store=user_store, credentials=UserCredentials(username="ghost", password="pw"))
    assert calls == [user_service_module.DUMMY_SALT]
