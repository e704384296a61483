"""Integration tests for the notifications API endpoints."""

from __future__ import annotations

from uuid import uuid4

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from socialhub.config import Settings
from socialhub.container import build_container
from main import create_app


@pytest.fixture()
def container():
    return build_container(Settings(database_url="sqlite://", scheduler_enabled=False))


@pytest.fixture()
def client(container):
    app = create_app(container)
    with TestClient(app) as test_client:
        yield test_client


def _headers(user_id) -> dict[str, str]:
    return {"X-User-Id": str(user_id)}


def test_list_and_read_flow(client, container):
    alice, bob = uuid4(), uuid4()
    notifications = container.services.notifications
    post_id = uuid4()
    created = notifications.create_notification(
        alice, bob, "reply", "B replied to your comment", post_id=post_id
    )

    response = client.get("/notifications/", headers=_headers(alice), params={"limit": 10})
    assert response.status_code == 200
    body = response.json()
    assert body["unread_count"] == 1
    assert body["meta"] == {"total": 1, "offset": 0, "limit": 10}
    assert body["notifications"][0]["id"] == str(created.id)
    assert body["notifications"][0]["post_id"] == str(post_id)
    assert body["notifications"][0]["is_read"] is False

    assert client.put(f"/notifications/{created.id}/read", headers=_headers(alice)).status_code == 204
    count = client.get("/notifications/unread-count", headers=_headers(alice))
    assert count.json() == {"unread_count": 0}

    unread = client.get("/notifications/unread", headers=_headers(alice)).json()
    assert unread["notifications"] == []
    assert unread["meta"]["total"] == 0


def test_ownership_and_missing_notifications_map_to_status_codes(client, container):
    alice, mallory = uuid4(), uuid4()
    created = container.services.notifications.create_notification(
        alice, uuid4(), "mention", "you were mentioned"
    )

    assert client.get(f"/notifications/{created.id}", headers=_headers(mallory)).status_code == 403
    assert (
        client.put(f"/notifications/{created.id}/read", headers=_headers(mallory)).status_code
        == 403
    )
    assert client.delete(f"/notifications/{created.id}", headers=_headers(mallory)).status_code == 403
    assert client.get(f"/notifications/{uuid4()}", headers=_headers(alice)).status_code == 404

    detail = client.get(f"/notifications/{created.id}", headers=_headers(alice))
    assert detail.status_code == 200
    assert detail.json()["is_read"] is False


def test_requests_without_identity_are_rejected(client):
    assert client.get("/notifications/").status_code == 401
    assert client.get("/notifications/", headers={"X-User-Id": "nope"}).status_code == 401


def test_bulk_endpoints(client, container):
    alice = uuid4()
    for _ in range(3):
        container.services.notifications.create_notification(alice, uuid4(), "follow", "followed")

    assert client.put("/notifications/read-all", headers=_headers(alice)).status_code == 204
    assert client.get("/notifications/unread-count", headers=_headers(alice)).json() == {
        "unread_count": 0
    }

    assert client.delete("/notifications/", headers=_headers(alice)).status_code == 204
    assert client.get("/notifications/", headers=_headers(alice)).json()["meta"]["total"] == 0


def test_settings_endpoints(client):
    alice = uuid4()

    defaults = client.get("/notifications/settings", headers=_headers(alice))
    assert defaults.status_code == 200
    assert defaults.json()["votes"] is False
    assert defaults.json()["replies"] is True

    updated = client.put(
        "/notifications/settings", headers=_headers(alice), json={"votes": True}
    )
    assert updated.status_code == 200
    assert updated.json()["votes"] is True
    assert updated.json()["follows"] is True


def test_push_subscription_endpoints(client):
    alice = uuid4()

    created = client.post(
        "/notifications/push-subscriptions",
        headers=_headers(alice),
        json={"token": "device-token", "platform": "android"},
    )
    assert created.status_code == 201
    assert created.json()["platform"] == "android"

    listed = client.get("/notifications/push-subscriptions", headers=_headers(alice))
    assert [item["token"] for item in listed.json()] == ["device-token"]

    removed = client.delete(
        "/notifications/push-subscriptions",
        headers=_headers(alice),
        params={"token": "device-token"},
    )
    assert removed.status_code == 204
    missing = client.delete(
        "/notifications/push-subscriptions",
        headers=_headers(alice),
        params={"token": "device-token"},
    )
    assert missing.status_code == 404


def test_websocket_streams_pending_and_new_notifications(client, container):
    alice = uuid4()
    notifications = container.services.notifications
    pending = notifications.create_notification(alice, uuid4(), "reply", "pending reply")

    with client.websocket_connect(f"/notifications/ws?user_id={alice}") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert [item["id"] for item in init["data"]] == [str(pending.id)]

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        fresh = notifications.create_notification(alice, uuid4(), "follow", "new follower")
        message = websocket.receive_json()
        assert message["type"] == "notification"
        assert message["data"]["id"] == str(fresh.id)

        websocket.send_json({"type": "ack", "ids": [str(pending.id), str(fresh.id)]})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    assert notifications.get_unread_count(alice) == 0


class FailingStartContainer:
    """Container stand-in whose scheduler refuses to start."""

    def __init__(self) -> None:
        self.settings = Settings(database_url="sqlite://", scheduler_enabled=True)
        self.cleaned_up = False

    def start(self) -> None:
        raise RuntimeError("scheduler failed to start")

    def cleanup(self) -> None:
        self.cleaned_up = True


def test_failed_start_still_cleans_up_the_container():
    failing = FailingStartContainer()
    app = create_app(failing)

    with pytest.raises(RuntimeError, match="scheduler failed to start"):
        with TestClient(app):
            pass

    assert failing.cleaned_up is True


def test_given_container_settings_are_used_instead_of_the_environment(monkeypatch, container):
    import main

    def _unexpected_lookup():
        raise AssertionError("environment settings should not be read")

    monkeypatch.setattr(main, "get_settings", _unexpected_lookup)

    app = main.create_app(container)
    with TestClient(app) as test_client:
        assert test_client.get("/notifications/unread-count", headers=_headers(uuid4())).json() == {
            "unread_count": 0
        }
