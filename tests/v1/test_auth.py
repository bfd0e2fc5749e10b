# mypy: ignore-errors
# tests/v1/test_auth.py
"""Tests for signup, login and the current-user endpoint."""

from fastapi import status

from tests.conftest import TEST_PASSWORD


def test_signup_creates_account_and_token(client) -> None:
    response = client.post(
        "/api/v1/auth/signup",
        json={"username": "  carol ", "password": "Secret123!"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["user"]["username"] == "carol"
    assert data["token_type"] == "bearer"

    me = client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["username"] == "carol"
    assert me.json()["is_guru"] is False


def test_signup_rejects_duplicate_username(client, test_user) -> None:
    response = client.post(
        "/api/v1/auth/signup",
        json={"username": test_user.username, "password": "Secret123!"},
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "Username already exists"


def test_signup_reports_every_password_problem(client) -> None:
    response = client.post("/api/v1/auth/signup", json={"username": "dave", "password": "weak"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["detail"] == data["errors"][0]
    assert len(data["errors"]) == 4


def test_signup_checks_username_length(client) -> None:
    response = client.post("/api/v1/auth/signup", json={"username": "x", "password": "Secret123!"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "between 2 and 20" in response.json()["detail"]


def test_login_success(client, test_user) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"username": test_user.username, "password": TEST_PASSWORD},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["id"] == test_user.id
    assert response.json()["access_token"]


def test_login_wrong_password(client, test_user) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"username": test_user.username, "password": "Wrong123!"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid username or password"


def test_login_unknown_user(client) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "nobody", "password": TEST_PASSWORD},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_requires_token(client) -> None:
    response = client.get("/api/v1/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Not authenticated"


def test_me_rejects_garbage_token(client) -> None:
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
