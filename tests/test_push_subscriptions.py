"""Tests for push subscription registration endpoints."""
from __future__ import annotations

from fastapi.testclient import TestClient

from akita_connect.db.models import PushSubscription

from tests.conftest import AUTH_STORED, AUTH_URLSAFE, P256DH_STORED, P256DH_URLSAFE

SUBSCRIPTION = {
    "endpoint": "https://fcm.googleapis.com/fcm/send/abc123",
    "keys": {"p256dh": P256DH_URLSAFE, "auth": AUTH_URLSAFE},
}


def test_public_key_is_served(client: TestClient) -> None:
    response = client.get("/api/push/vapid-public-key")

    assert response.status_code == 200
    assert response.json() == {"publicKey": P256DH_URLSAFE}


def test_subscribe_requires_auth(client: TestClient) -> None:
    response = client.post("/api/push/subscriptions", json=SUBSCRIPTION)
    assert response.status_code == 401

    response = client.post(
        "/api/push/subscriptions",
        json=SUBSCRIPTION,
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401


def test_subscribe_stores_keys_in_storage_encoding(client: TestClient, member, auth_headers, db_session) -> None:
    response = client.post(
        "/api/push/subscriptions",
        json=SUBSCRIPTION,
        headers={**auth_headers, "User-Agent": "Mozilla/5.0 (Akita test)"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["endpoint"] == SUBSCRIPTION["endpoint"]
    assert "p256dh" not in data

    stored = db_session.query(PushSubscription).filter_by(user_id=member.id).one()
    assert stored.p256dh == P256DH_STORED
    assert stored.auth == AUTH_STORED
    assert stored.user_agent == "Mozilla/5.0 (Akita test)"


def test_subscribe_is_an_upsert(client: TestClient, member, auth_headers, db_session) -> None:
    first = client.post("/api/push/subscriptions", json=SUBSCRIPTION, headers=auth_headers)
    second = client.post("/api/push/subscriptions", json=SUBSCRIPTION, headers=auth_headers)

    assert first.json()["id"] == second.json()["id"]
    assert db_session.query(PushSubscription).filter_by(user_id=member.id).count() == 1


def test_subscribe_rejects_bad_keys(client: TestClient, auth_headers) -> None:
    payload = {"endpoint": SUBSCRIPTION["endpoint"], "keys": {"p256dh": "AAAA", "auth": AUTH_URLSAFE}}

    response = client.post("/api/push/subscriptions", json=payload, headers=auth_headers)

    assert response.status_code == 422


def test_list_and_unsubscribe(client: TestClient, auth_headers) -> None:
    client.post("/api/push/subscriptions", json=SUBSCRIPTION, headers=auth_headers)

    listed = client.get("/api/push/subscriptions", headers=auth_headers)
    assert [item["endpoint"] for item in listed.json()] == [SUBSCRIPTION["endpoint"]]

    removed = client.post(
        "/api/push/unsubscribe", json={"endpoint": SUBSCRIPTION["endpoint"]}, headers=auth_headers
    )
    assert removed.json() == {"status": "success", "removed": True}

    again = client.post(
        "/api/push/unsubscribe", json={"endpoint": SUBSCRIPTION["endpoint"]}, headers=auth_headers
    )
    assert again.json() == {"status": "success", "removed": False}
    assert client.get("/api/push/subscriptions", headers=auth_headers).json() == []
