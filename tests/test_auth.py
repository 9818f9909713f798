"""Integration tests for authentication endpoints."""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from jose import jwt

from flashcards.config import settings
from flashcards.core.security import ALGORITHM, issue_access_token, read_identity


def test_user_registration_success(client: TestClient) -> None:
    payload = {
        "email": "Learner@Example.com",
        "password": "securepassword",
        "full_name": "Learner One",
    }

    response = client.post("/api/v1/auth/register", json=payload)

    assert response.status_code == 201
    data = response.json()
    assert uuid.UUID(data["id"])  # Valid UUID string
    assert data["email"] == "learner@example.com"
    assert data["full_name"] == "Learner One"
    assert data["is_active"] is True
    assert "hashed_password" not in data


def test_user_registration_duplicate_email(client: TestClient) -> None:
    payload = {"email": "duplicate@example.com", "password": "anothersecurepassword"}

    first_response = client.post("/api/v1/auth/register", json=payload)
    assert first_response.status_code == 201

    duplicate_response = client.post("/api/v1/auth/register", json=payload)
    assert duplicate_response.status_code == 400
    assert duplicate_response.json()["detail"] == "A user with this email already exists."


def test_user_registration_rejects_short_password(client: TestClient) -> None:
    response = client.post(
        "/api/v1/auth/register", json={"email": "short@example.com", "password": "short"}
    )

    assert response.status_code == 422


def test_user_login_success(client: TestClient) -> None:
    client.post(
        "/api/v1/auth/register", json={"email": "login@example.com", "password": "supersecure"}
    )

    response = client.post(
        "/api/v1/auth/login", json={"email": "login@example.com", "password": "supersecure"}
    )

    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"


def test_user_login_invalid_credentials(client: TestClient) -> None:
    response = client.post(
        "/api/v1/auth/login", json={"email": "unknown@example.com", "password": "wrongpassword"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect email or password"


def test_read_current_user(client: TestClient) -> None:
    client.post(
        "/api/v1/auth/register", json={"email": "me@example.com", "password": "supersecure"}
    )
    login = client.post(
        "/api/v1/auth/login", json={"email": "me@example.com", "password": "supersecure"}
    )
    token = login.json()["access_token"]

    response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["email"] == "me@example.com"


def test_read_current_user_requires_token(client: TestClient) -> None:
    response = client.get("/api/v1/users/me")

    assert response.status_code == 401


def test_login_token_carries_learner_identity(client: TestClient) -> None:
    register = client.post(
        "/api/v1/auth/register", json={"email": "id@example.com", "password": "supersecure"}
    )

    login = client.post(
        "/api/v1/auth/login", json={"email": "id@example.com", "password": "supersecure"}
    )

    data = login.json()
    assert data["identity"] == register.json()["id"]
    assert read_identity(data["access_token"]) == data["identity"]
    assert data["expires_in"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    assert "refresh_token" not in data


def test_non_access_token_is_rejected(client: TestClient) -> None:
    register = client.post(
        "/api/v1/auth/register", json={"email": "refresh@example.com", "password": "supersecure"}
    )
    claims = {
        "sub": register.json()["id"],
        "exp": datetime.now(timezone.utc) + timedelta(days=1),
        "type": "refresh",
    }
    token = jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)

    response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_expired_token_is_rejected(client: TestClient) -> None:
    register = client.post(
        "/api/v1/auth/register", json={"email": "late@example.com", "password": "supersecure"}
    )
    token, _ = issue_access_token(register.json()["id"], lifetime=timedelta(minutes=-5))

    response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
