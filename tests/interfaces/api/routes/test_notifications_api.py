"""Integration tests for the notification API endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from notification_service.infrastructure.database import get_db
from notification_service.interfaces.api.dependencies import (
    get_email_sender,
    get_identity_client,
)
from notification_service.infrastructure.repositories import RecipientRepository

WINNER_BODY = {
    "toName": "Ivan",
    "company": "Fishstat",
    "companyLogo": "https://example.com/logo.png",
    "product": "Salmon",
    "auctionHref": "https://example.com/auction/1",
    "companyChat": "https://example.com/chat/1",
}


@pytest.fixture()
def client(session_factory, identity, email_sender):
    """Return a test client wired to the in-memory store and fakes."""

    from main import create_app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app = create_app()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_client] = lambda: identity
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    with TestClient(app) as test_client:
        yield test_client


def _create(client: TestClient, *, title: str = "Lot opened", recipients=("a", "b"), headers=None):
    return client.post(
        "/notifications/",
        json={
            "title": title,
            "body": "Join us",
            "type": "InApp",
            "subject": "AuctionJoin",
            "recipient_ids": list(recipients),
        },
        headers=headers or {},
    )


def test_notification_lifecycle(client: TestClient, identity) -> None:
    response = _create(client, headers={"X-User-Id": "owner"})
    assert response.status_code == 201
    created = response.json()
    notification_id = created["id"]

    assert [item["recipient_id"] for item in created["recipients"]] == ["a", "b"]
    assert [item["user"] for item in created["recipients"]] == [
        identity.profile("a"),
        identity.profile("b"),
    ]
    assert created["sender_id"] == "owner"
    assert created["sender"] == identity.profile("owner")
    assert created["action_payload"] == {}

    response = client.patch(f"/notifications/{notification_id}", json={"title": "T"})
    assert response.status_code == 200
    assert response.json()["title"] == "T"
    assert response.json()["subject"] == "AuctionJoin"

    response = client.delete(f"/notifications/{notification_id}")
    assert response.status_code == 204

    response = client.get(f"/notifications/{notification_id}")
    assert response.status_code == 200
    body = response.json()
    assert body["is_deleted"] is True
    assert body["deleted_at"] is not None
    assert body["title"] == "T"


def test_list_is_scoped_to_the_caller(client: TestClient) -> None:
    _create(client, title="For a", recipients=("a",))
    _create(client, title="For b", recipients=("b",))

    response = client.get(
        "/notifications/", params={"skip": 0, "take": 10}, headers={"X-User-Id": "a"}
    )

    assert response.status_code == 200
    page = response.json()
    assert page["count"] == 1
    assert [item["title"] for item in page["data"]] == ["For a"]


def test_list_search_term(client: TestClient) -> None:
    _create(client, title="Exact title")

    found = client.get("/notifications/", params={"search_term": "Exact title"}).json()
    missing = client.get("/notifications/", params={"search_term": "Exact"}).json()

    assert found["count"] == 1
    assert missing == {"count": 0, "data": []}


def test_unknown_notification_returns_404(client: TestClient) -> None:
    assert client.get("/notifications/missing").status_code == 404
    assert client.patch("/notifications/missing", json={"title": "T"}).status_code == 404
    assert client.delete("/notifications/missing").status_code == 404


def test_identity_failure_returns_502(client: TestClient, identity) -> None:
    identity.failing.add("b")

    response = _create(client)

    assert response.status_code == 502
    assert response.json()["detail"]["user_id"] == "b"
    assert client.get("/notifications/").json()["count"] == 0


def test_create_rejects_empty_recipient_list(client: TestClient) -> None:
    assert _create(client, recipients=()).status_code == 422


def test_send_winner_email(client: TestClient, email_sender) -> None:
    response = client.post(
        "/notifications/email",
        json={
            "email": "ivan@example.com",
            "type": "AUCTION_WINNER",
            "body": WINNER_BODY,
            "recipient_ids": ["buyer-1"],
        },
    )

    assert response.status_code == 200
    result = response.json()
    assert result["sent"] is True
    assert email_sender.sent == [("winner", "ivan@example.com", WINNER_BODY)]

    stored = client.get(f"/notifications/{result['notification_id']}").json()
    assert stored["subject"] == "AuctionWinner"
    assert stored["type"] == "InApp"


def test_send_email_validates_body_for_event(client: TestClient) -> None:
    body = {key: value for key, value in WINNER_BODY.items() if key != "companyChat"}

    response = client.post(
        "/notifications/email",
        json={
            "email": "ivan@example.com",
            "type": "AUCTION_WINNER",
            "body": body,
            "recipient_ids": ["buyer-1"],
        },
    )

    assert response.status_code == 422


def test_send_email_failure_reports_notification(client: TestClient, email_sender) -> None:
    email_sender.fail()

    response = client.post(
        "/notifications/email",
        json={
            "email": "ivan@example.com",
            "type": "AUCTION_THANX",
            "body": WINNER_BODY,
            "recipient_ids": ["buyer-1"],
        },
    )

    assert response.status_code == 502
    detail = response.json()["detail"]
    assert detail["error"] == "email_delivery_failed"
    assert client.get(f"/notifications/{detail['notification_id']}").status_code == 200


@pytest.mark.parametrize("path", ["/notifications/text", "/notifications/in-app"])
def test_acknowledgement_channels(client: TestClient, path: str) -> None:
    payload = (
        {"phone": "+70000000000", "message": "hi"}
        if path.endswith("text")
        else {"user_id": "a", "title": "hi", "message": "hello"}
    )

    response = client.post(path, json=payload)

    assert response.status_code == 200
    assert response.json() == {"acknowledged": True, "status": "OK", "transactionId": "test"}


def test_store_failure_returns_500(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_create_many(self, notification_id, recipient_ids):
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(RecipientRepository, "create_many", failing_create_many)

    response = _create(client)

    assert response.status_code == 500
    assert response.json()["detail"]["error"] == "store_failure"
    monkeypatch.undo()
    assert client.get("/notifications/").json()["count"] == 0
