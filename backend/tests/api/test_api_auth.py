# tests/api/test_api_auth.py
from __future__ import annotations

import pytest

from tests.factories.client import DEFAULT_PASSWORD, ClientFactory
from tests.helpers.auth import LOGIN_URL, bearer, login


@pytest.fixture()
def ana(app):
    return ClientFactory(name="Ana", email="a@b.com")


def test_login_returns_token_and_user(client, ana):
    response = client.post(LOGIN_URL, json={"email": "a@b.com", "password": DEFAULT_PASSWORD})

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["access_token"]
    assert data["token_type"] == "Bearer"
    assert data["expires_in"] == 86400
    assert data["user"] == {"id": ana.id, "name": "Ana", "email": "a@b.com"}
    assert response.headers.get("X-Request-ID")


def test_login_with_wrong_password(client, ana):
    response = client.post(LOGIN_URL, json={"email": "a@b.com", "password": "nope-nope"})
    assert response.status_code == 401
    assert response.get_json() == {"error": "Invalid email or password"}


def test_login_without_body(client):
    response = client.post(LOGIN_URL)
    assert response.status_code == 400
    assert response.get_json() == {"error": "Request body is empty"}


def test_login_missing_field(client):
    response = client.post(LOGIN_URL, json={"email": "a@b.com"})
    assert response.status_code == 400
    assert response.get_json()["error"].startswith("Bad request: password")


def test_verify_echoes_identity(client, ana):
    token = login(client, "a@b.com")
    response = client.get("/api/v1/auth/verify", headers=bearer(token))
    assert response.status_code == 200
    assert response.get_json() == {
        "data": {"user": {"id": ana.id, "name": "Ana", "email": "a@b.com"}, "authenticated": True}
    }


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/v1/auth/verify"),
        ("post", "/api/v1/auth/logout"),
        ("post", "/api/v1/auth/refresh"),
        ("get", "/api/v1/products"),
    ],
)
@pytest.mark.parametrize("header", [None, "Token abc", "Bearer "])
def test_missing_or_malformed_header_is_401(client, method, path, header):
    headers = {"Authorization": header} if header is not None else {}
    response = getattr(client, method)(path, headers=headers)
    assert response.status_code == 401
    assert response.get_json() == {"error": "Bearer token required"}


def test_invalid_token_is_401_without_reason(client):
    response = client.get("/api/v1/auth/verify", headers=bearer("a.b.c"))
    assert response.status_code == 401
    assert response.get_json() == {"error": "Invalid or expired token"}


def test_logout_revokes_token(client, ana):
    token = login(client, "a@b.com")

    response = client.post("/api/v1/auth/logout", headers=bearer(token))
    assert response.status_code == 200
    assert response.get_json() == {"message": "Logged out successfully"}

    again = client.get("/api/v1/auth/verify", headers=bearer(token))
    assert again.status_code == 401


def test_refresh_rotates_token(client, ana):
    old = login(client, "a@b.com")

    response = client.post("/api/v1/auth/refresh", headers=bearer(old))

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert set(data) == {"access_token", "token_type", "expires_in"}
    new = data["access_token"]
    assert new != old
    assert client.get("/api/v1/auth/verify", headers=bearer(new)).status_code == 200
    assert client.get("/api/v1/auth/verify", headers=bearer(old)).status_code == 401
    assert client.post("/api/v1/auth/refresh", headers=bearer(old)).status_code == 401
