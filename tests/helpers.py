"""Helpers shared by API tests."""
from __future__ import annotations

from fastapi.testclient import TestClient


def register_and_login(
    client: TestClient, email: str = "learner@example.com", password: str = "supersecure"
) -> tuple[dict[str, str], str]:
    """Register a learner and return ``(auth_headers, user_id)``."""

    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "full_name": "Learner"},
    )
    assert response.status_code == 201, response.text
    user_id = response.json()["id"]

    login = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert login.status_code == 200, login.text
    token = login.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}, user_id
