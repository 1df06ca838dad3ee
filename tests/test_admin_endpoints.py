"""Tests for admin endpoints."""

import asyncio

from fastapi.testclient import TestClient

from food_scanner.api.app import create_app
from tests.conftest import OATS_BARCODE


def _admin_client(container) -> TestClient:  # type: ignore[no-untyped-def]
    container.account_service.signup("ana@example.com", "secret1", "secret1")
    client = TestClient(create_app(container))
    client.post("/auth/login", json={"email": "admin", "password": "admin-pass"})
    return client


def test_admin_users_endpoint(container) -> None:
    client = _admin_client(container)

    response = client.get("/admin/users")

    assert response.status_code == 200
    assert response.json() == {"users": [{"email": "ana@example.com"}]}


def test_admin_health_requires_admin(container) -> None:
    client = TestClient(create_app(container))
    container.account_service.signup("ana@example.com", "secret1", "secret1")

    assert client.get("/admin/health").status_code == 401

    client.post(
        "/auth/login", json={"email": "ana@example.com", "password": "secret1"}
    )
    assert client.get("/admin/health").status_code == 403


def test_admin_cannot_scan(container) -> None:
    client = _admin_client(container)

    response = client.post("/scan", json={"barcode": OATS_BARCODE})

    assert response.status_code == 403


def test_admin_updates_user_and_moves_history(container) -> None:
    asyncio.run(
        container.scanner_service.scan(OATS_BARCODE, user_email="ana@example.com")
    )
    client = _admin_client(container)

    response = client.put(
        "/admin/users/ana@example.com",
        json={"email": "ana@work.example", "password": "secret2"},
    )

    assert response.status_code == 200
    assert response.json() == {"email": "ana@work.example"}
    assert container.account_service.list_users() == ["ana@work.example"]
    assert len(container.insights_service.history("ana@work.example")) == 1
    assert container.insights_service.history("ana@example.com") == []


def test_admin_update_rejects_invalid_email(container) -> None:
    client = _admin_client(container)

    response = client.put("/admin/users/ana@example.com", json={"email": "nope"})

    assert response.status_code == 422
    assert "email" in response.json()["errors"]


def test_admin_deletes_user(container) -> None:
    client = _admin_client(container)

    response = client.delete("/admin/users/ana@example.com")

    assert response.status_code == 200
    assert container.account_service.list_users() == []


def test_admin_unknown_user_is_404(container) -> None:
    client = _admin_client(container)

    response = client.delete("/admin/users/ghost@example.com")

    assert response.status_code == 404
