"""HTTP behaviour of the notification inbox, stream and admin endpoints."""

import json
import threading
import time

from app.application.use_cases.notifications import notify
from app.domain.entities import UserRole
from app.infrastructure import database
from app.infrastructure.notifications import (
    NotificationBroadcaster,
    get_notification_broadcaster,
)
from app.infrastructure.security import create_user_token


def parse_events(body: str) -> list[tuple[str, dict]]:
    events = []
    for frame in body.split("\n\n"):
        if not frame.strip() or frame.startswith(":"):
            continue
        lines = dict(line.split(": ", 1) for line in frame.split("\n"))
        events.append((lines["event"], json.loads(lines["data"])))
    return events


def test_stream_requires_a_token(client):
    response = client.get("/notifications/stream")

    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized"


def test_stream_rejects_an_invalid_token(client, broadcaster):
    response = client.get("/notifications/stream", params={"token": "not-a-jwt"})

    assert response.status_code == 401
    assert broadcaster.active_connection_count() == 0


def test_stream_at_capacity_reports_an_error_event(client, make_user, auth_headers):
    full = NotificationBroadcaster(max_connections_per_user=3, max_total_connections=2)
    full.subscribe("someone", lambda payload: None)
    full.subscribe("someone-else", lambda payload: None)
    client.app.dependency_overrides[get_notification_broadcaster] = lambda: full
    user = make_user()

    response = client.get("/notifications/stream", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache, no-transform"
    assert response.headers["x-accel-buffering"] == "no"
    assert parse_events(response.text) == [
        ("connected", {"userId": user.id}),
        ("error", {"error": "Too many active connections"}),
    ]
    assert full.active_connection_count() == 2


def test_stream_accepts_the_token_query_parameter(client, make_user):
    full = NotificationBroadcaster(max_connections_per_user=1, max_total_connections=1)
    full.subscribe("someone", lambda payload: None)
    client.app.dependency_overrides[get_notification_broadcaster] = lambda: full
    user = make_user()

    response = client.get("/notifications/stream", params={"token": create_user_token(user.id)})

    assert response.status_code == 200
    assert parse_events(response.text)[0] == ("connected", {"userId": user.id})


def test_stream_delivers_notifications_sent_while_connected(client, make_user, auth_headers):
    live = NotificationBroadcaster(max_connections_per_user=1, max_total_connections=10)
    client.app.dependency_overrides[get_notification_broadcaster] = lambda: live
    user = make_user()
    sent: list = []

    def send_then_replace_connection() -> None:
        deadline = time.monotonic() + 5
        while live.connection_count(user.id) == 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        session = database.SessionLocal()
        try:
            sent.extend(notify(session, user_id=user.id, title="Welcome", broadcaster=live))
        finally:
            session.close()
        # A newer connection of the same user evicts the open stream, which ends it.
        live.subscribe(user.id, lambda payload: None)

    worker = threading.Thread(target=send_then_replace_connection)
    worker.start()
    with client.stream("GET", "/notifications/stream", headers=auth_headers(user)) as response:
        body = "".join(response.iter_text())
    worker.join(timeout=5)

    assert response.status_code == 200
    events = parse_events(body)
    assert events[0] == ("connected", {"userId": user.id})
    assert events[1][0] == "notification"
    assert events[1][1]["id"] == sent[0].id
    assert events[1][1]["title"] == "Welcome"
    assert len(events) == 2


def test_list_and_mark_notifications(client, db_session, make_user, auth_headers):
    user = make_user()
    other = make_user()
    notify(db_session, user_ids=[user.id, user.id, user.id], title="Lesson added")
    notify(db_session, user_id=other.id, title="Not yours")
    headers = auth_headers(user)

    response = client.get("/notifications/", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["unread_count"] == 3
    assert len(body["notifications"]) == 3
    assert all(item["user_id"] == user.id for item in body["notifications"])

    first_id = body["notifications"][0]["id"]
    response = client.put(
        "/notifications/",
        json={"notification_ids": [first_id, first_id]},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json() == {"updated": 1}

    response = client.get("/notifications/", params={"unread_only": True}, headers=headers)
    assert response.json()["unread_count"] == 2
    assert first_id not in [item["id"] for item in response.json()["notifications"]]

    response = client.put("/notifications/", json={"mark_all": True}, headers=headers)
    assert response.json() == {"updated": 2}
    assert client.get("/notifications/", headers=headers).json()["unread_count"] == 0


def test_marking_someone_elses_notification_changes_nothing(
    client, db_session, make_user, auth_headers
):
    owner = make_user()
    intruder = make_user()
    sent = notify(db_session, user_id=owner.id, title="Private")

    response = client.put(
        "/notifications/",
        json={"notification_ids": [sent[0].id]},
        headers=auth_headers(intruder),
    )

    assert response.json() == {"updated": 0}
    assert client.get("/notifications/", headers=auth_headers(owner)).json()["unread_count"] == 1


def test_admin_endpoints_require_the_admin_role(client, make_user, auth_headers):
    student = make_user(UserRole.STUDENT)

    response = client.post(
        "/admin/notifications/", json={"title": "Hi"}, headers=auth_headers(student)
    )
    assert response.status_code == 403
    assert client.get("/admin/notifications/connections").status_code == 401


def test_admin_sends_to_a_role_and_streams_receive_it(
    client, broadcaster, make_user, auth_headers
):
    admin = make_user(UserRole.ADMIN)
    students = [make_user(UserRole.STUDENT), make_user(UserRole.STUDENT)]
    make_user(UserRole.INSTRUCTOR)
    received: list[dict] = []
    broadcaster.subscribe(students[0].id, received.append)

    response = client.post(
        "/admin/notifications/",
        json={
            "title": "Maintenance",
            "message": "Tonight",
            "type": "warning",
            "target_role": "student",
        },
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["sent_count"] == 2
    assert [payload["title"] for payload in received] == ["Maintenance"]
    assert received[0]["type"] == "warning"

    response = client.get(
        "/admin/notifications/connections", headers=auth_headers(admin)
    )
    assert response.json() == {"active_connections": 1}


def test_admin_send_without_recipients_is_rejected(client, make_user, auth_headers):
    admin = make_user(UserRole.ADMIN)

    response = client.post(
        "/admin/notifications/",
        json={"title": "Anyone?", "target_role": "instructor"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "No target users found"


def test_admin_send_validates_the_payload(client, make_user, auth_headers):
    admin = make_user(UserRole.ADMIN)

    response = client.post(
        "/admin/notifications/",
        json={"title": "", "target_role": "everyone"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 422


def test_admin_lists_notifications_with_pagination(
    client, db_session, make_user, auth_headers
):
    admin = make_user(UserRole.ADMIN)
    student = make_user(UserRole.STUDENT, email="learner@example.com")
    notify(db_session, user_ids=[student.id] * 3, title="Reminder")

    response = client.get(
        "/admin/notifications/", params={"page": 2, "limit": 2}, headers=auth_headers(admin)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "total_pages": 2}
    assert len(body["notifications"]) == 1
    assert body["notifications"][0]["user_email"] == "learner@example.com"
    assert body["notifications"][0]["user_name"] == "Test User"
