"""HTTP tests for the notification and preference endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from notification_engine.infrastructure.database import get_db

HEADERS = {"X-User-Id": "u1"}


@pytest.fixture()
def client(session):
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_db] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_requests_without_user_header_are_rejected(client):
    response = client.get("/notifications/")

    assert response.status_code == 401


def test_create_list_and_paginate(client):
    for index in range(3):
        response = client.post(
            "/notifications/",
            json={"type": "alert", "message": f"Message {index}"},
            headers=HEADERS,
        )
        assert response.status_code == 201

    first = client.get("/notifications/", params={"limit": 2}, headers=HEADERS)
    assert first.status_code == 200
    body = first.json()
    assert len(body["items"]) == 2
    assert body["has_more"] is True

    second = client.get(
        "/notifications/",
        params={"limit": 2, "cursor": body["next_cursor"]},
        headers=HEADERS,
    )
    assert len(second.json()["items"]) == 1
    assert second.json()["next_cursor"] is None


def test_invalid_cursor_and_filters_map_to_bad_request(client, make_notification):
    make_notification()
    make_notification()
    page = client.get("/notifications/", params={"limit": 1}, headers=HEADERS).json()

    wrong_order = client.get(
        "/notifications/",
        params={"cursor": page["next_cursor"], "sort_by": "type"},
        headers=HEADERS,
    )
    assert wrong_order.status_code == 400

    assert (
        client.get("/notifications/", params={"status": "archived"}, headers=HEADERS).status_code
        == 400
    )
    assert (
        client.get("/notifications/", params={"limit": 500}, headers=HEADERS).status_code == 400
    )


def test_single_item_mutations(client, make_notification):
    notification = make_notification()
    foreign = make_notification(user_id="u2")

    read = client.post(f"/notifications/{notification.id}/read", headers=HEADERS)
    assert read.status_code == 200
    assert read.json()["read"] is True

    assert client.post(f"/notifications/{foreign.id}/read", headers=HEADERS).status_code == 404

    assert client.delete(f"/notifications/{notification.id}", headers=HEADERS).json() == {
        "affected": 1
    }
    assert client.delete(f"/notifications/{notification.id}", headers=HEADERS).json() == {
        "affected": 0
    }


def test_bulk_read_reports_batch_result(client, make_notification):
    ids = [make_notification().id for _ in range(12)]

    response = client.post(
        "/notifications/bulk/read", json={"ids": ids, "batch_size": 10}, headers=HEADERS
    )

    assert response.status_code == 200
    body = response.json()
    assert body["requested"] == 12
    assert body["succeeded"] == 12
    assert body["failures"] == []
    counts = client.get("/notifications/counts", headers=HEADERS).json()
    assert counts == {"total": 12, "unread": 0, "read": 12}


def test_csv_export_is_an_attachment(client, make_notification):
    make_notification()

    response = client.get("/notifications/export/csv", headers=HEADERS)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "notifications-u1-" in response.headers["content-disposition"]
    assert response.text.startswith("ID,Message,Type,Status")


def test_preferences_patch_only_changes_sent_fields(client):
    defaults = client.get("/preferences/", headers=HEADERS)
    assert defaults.status_code == 200
    assert defaults.json()["email_frequency"] == "immediate"

    patched = client.patch("/preferences/", json={"push_enabled": False}, headers=HEADERS)
    assert patched.status_code == 200
    body = patched.json()
    assert body["push_enabled"] is False
    assert body["email_enabled"] is True
    assert body["in_app_enabled"] is True

    invalid = client.patch(
        "/preferences/", json={"quiet_hours_start": "99:99"}, headers=HEADERS
    )
    assert invalid.status_code == 400

    decision = client.get(
        "/preferences/should-send",
        params={"type": "marketing", "channel": "email"},
        headers=HEADERS,
    )
    assert decision.json()["eligible"] is False
    assert decision.json()["reason"] == "marketing_opt_out"

    assert client.delete("/preferences/", headers=HEADERS).status_code == 204
