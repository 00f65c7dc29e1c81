"""Integration tests for the notification and achievement endpoints."""

from __future__ import annotations

from uuid import uuid4

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from shopfeed.domain.errors import TransientStoreFailure
from shopfeed.infrastructure.database import get_db
from shopfeed.infrastructure.security import create_access_token
from shopfeed.interfaces.api.routes import notifications as notification_routes
from shopfeed.main import create_app


@pytest.fixture()
def client():
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def test_requests_without_token_are_rejected(client: TestClient) -> None:
    assert client.get("/notifications/").status_code == 401
    assert client.get(
        "/notifications/", headers={"Authorization": "Bearer garbage"}
    ).status_code == 401


def test_end_to_end_read_state_flow(client: TestClient, make_user) -> None:
    """Dispatch to A and B, then check that A's reads never affect B."""

    admin = make_user("Admin", role="admin")
    alice = make_user("Alice")
    bob = make_user("Bob")

    response = client.post(
        "/notifications/",
        json={
            "title": "Stocktake",
            "message": "Please count the register.",
            "recipient_ids": [alice.id, bob.id],
        },
        headers=_headers(admin),
    )
    assert response.status_code == 201
    notification_id = response.json()["id"]
    assert response.json()["recipient_count"] == 2

    def unread(user) -> int:
        result = client.get("/notifications/unread-count", headers=_headers(user))
        assert result.status_code == 200
        return result.json()["unread_count"]

    assert unread(alice) == 1
    assert unread(bob) == 1

    first = client.post(f"/notifications/{notification_id}/read", headers=_headers(alice))
    assert first.status_code == 200
    assert first.json() == {"updated": 1}
    assert unread(alice) == 0
    assert unread(bob) == 1

    again = client.post(f"/notifications/{notification_id}/read", headers=_headers(alice))
    assert again.status_code == 200
    assert again.json() == {"updated": 0}
    assert unread(alice) == 0

    listing = client.get("/notifications/", headers=_headers(alice)).json()
    assert listing[0]["id"] == notification_id
    assert listing[0]["read_at"] is not None
    assert listing[0]["type"] == "manual"

    detail = client.get(f"/notifications/{notification_id}", headers=_headers(bob))
    assert detail.status_code == 200
    assert detail.json()["read_at"] is None

    sent = client.get("/notifications/sent", headers=_headers(admin)).json()
    assert sent[0]["recipient_count"] == 2
    assert sent[0]["read_count"] == 1


def test_error_mapping(client: TestClient, make_user) -> None:
    leader = make_user("Leader", role="leader")
    member = make_user("Member")
    outsider = make_user("Outsider")
    make_user("Teammate", leader_id=leader.id)

    empty = client.post(
        "/notifications/",
        json={"title": "Hi", "message": "Hello", "target": "specific", "recipient_ids": []},
        headers=_headers(leader),
    )
    assert empty.status_code == 400

    forbidden = client.post(
        "/notifications/",
        json={"title": "Hi", "message": "Hello", "recipient_ids": [outsider.id]},
        headers=_headers(leader),
    )
    assert forbidden.status_code == 403

    member_send = client.post(
        "/notifications/",
        json={"title": "Hi", "message": "Hello", "target": "team"},
        headers=_headers(member),
    )
    assert member_send.status_code == 403

    missing = client.get(f"/notifications/{uuid4()}", headers=_headers(member))
    assert missing.status_code == 404

    malformed = client.post("/notifications/not-an-id/read", headers=_headers(member))
    assert malformed.status_code == 400


def test_mark_all_and_batch_read(client: TestClient, make_user) -> None:
    admin = make_user("Admin", role="admin")
    member = make_user("Member")
    ids = []
    for title in ("one", "two", "three"):
        response = client.post(
            "/notifications/",
            json={"title": title, "message": "body", "recipient_ids": [member.id]},
            headers=_headers(admin),
        )
        ids.append(response.json()["id"])

    batch = client.post(
        "/notifications/read", json={"ids": [ids[0], ids[0]]}, headers=_headers(member)
    )
    assert batch.json() == {"updated": 1}

    everything = client.post("/notifications/read-all", headers=_headers(member))
    assert everything.json() == {"updated": 2}
    assert client.get(
        "/notifications/", params={"unread_only": True}, headers=_headers(member)
    ).json() == []


def test_achievement_endpoints(client: TestClient, make_user) -> None:
    admin = make_user("Admin", role="admin")
    seller = make_user("Seller")

    tiers = [{"level": 1, "threshold": 1000}, {"level": 2, "threshold": 5000}]
    denied = client.put(
        "/achievements/thresholds", json={"tiers": tiers}, headers=_headers(seller)
    )
    assert denied.status_code == 403
    stored = client.put(
        "/achievements/thresholds", json={"tiers": tiers}, headers=_headers(admin)
    )
    assert stored.status_code == 200
    assert [tier["level"] for tier in stored.json()] == [1, 2]

    reached = client.post(
        "/achievements/evaluate",
        json={"previous_metric": 800, "current_metric": 1200},
        headers=_headers(seller),
    ).json()
    assert reached["reached"] == {"level": 1, "threshold": 1000.0}
    assert reached["notification_id"]

    unchanged = client.post(
        "/achievements/evaluate",
        json={"previous_metric": 1200, "current_metric": 1200},
        headers=_headers(seller),
    ).json()
    assert unchanged == {"reached": None, "notification_id": None}

    feed = client.get("/notifications/", headers=_headers(seller)).json()
    assert [item["type"] for item in feed] == ["achievement"]


def test_websocket_pushes_snapshots(client: TestClient, make_user) -> None:
    admin = make_user("Admin", role="admin")
    member = make_user("Member")
    token = create_access_token(member.id)

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        initial = websocket.receive_json()
        assert initial["type"] == "snapshot"
        assert initial["data"] == {"unread_count": 0, "notifications": []}

        response = client.post(
            "/notifications/",
            json={"title": "Live", "message": "Pushed", "recipient_ids": [member.id]},
            headers=_headers(admin),
        )
        notification_id = response.json()["id"]

        update = websocket.receive_json()
        assert update["data"]["unread_count"] == 1
        assert update["data"]["notifications"][0]["id"] == notification_id

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        websocket.send_json({"type": "ack", "ids": [notification_id]})
        acked = websocket.receive_json()
        assert acked["data"]["unread_count"] == 0


def test_websocket_rejects_missing_or_invalid_token(client: TestClient) -> None:
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/notifications/ws") as websocket:
            websocket.receive_json()
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/notifications/ws?token=garbage") as websocket:
            websocket.receive_json()


def test_store_outage_maps_to_service_unavailable(
    client: TestClient, make_user, unreachable_session_factory
) -> None:
    member = make_user("Member")

    def unreachable_db():
        db = unreachable_session_factory()
        try:
            yield db
        finally:
            db.close()

    client.app.dependency_overrides[get_db] = unreachable_db
    try:
        response = client.get("/notifications/unread-count", headers=_headers(member))
    finally:
        client.app.dependency_overrides.clear()

    assert response.status_code == 503


def test_evaluate_rejects_non_finite_metrics(client: TestClient, make_user) -> None:
    admin = make_user("Admin", role="admin")
    seller = make_user("Seller")
    client.put(
        "/achievements/thresholds",
        json={"tiers": [{"level": 1, "threshold": 1000}, {"level": 3, "threshold": 10000}]},
        headers=_headers(admin),
    )

    for body in (
        '{"previous_metric": 0, "current_metric": NaN}',
        '{"previous_metric": 0, "current_metric": Infinity}',
    ):
        response = client.post(
            "/achievements/evaluate",
            content=body,
            headers={**_headers(seller), "Content-Type": "application/json"},
        )
        assert response.status_code == 422

    assert client.get("/notifications/", headers=_headers(seller)).json() == []


def test_websocket_reports_errors_and_stays_open(
    client: TestClient, make_user, monkeypatch
) -> None:
    member = make_user("Member")
    token = create_access_token(member.id)

    def unavailable(*_args, **_kwargs):
        raise TransientStoreFailure("The notification store is unavailable")

    monkeypatch.setattr(notification_routes, "mark_all_read_uc", unavailable)

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        assert websocket.receive_json()["type"] == "snapshot"

        websocket.send_bytes(b"\x00\x01")
        assert websocket.receive_json()["type"] == "error"

        websocket.send_json({"type": "ack_all"})
        failure = websocket.receive_json()
        assert failure == {"type": "error", "detail": "The notification store is unavailable"}

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}
