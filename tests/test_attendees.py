from __future__ import annotations

from fastapi.testclient import TestClient
from kombu.exceptions import OperationalError
from sqlalchemy import select

from localconnect.models import NotificationLog
from localconnect.models.notification_log import NotificationKind
from localconnect.worker.tasks import send_registration_confirmation
from tests.test_auth_rbac import auth_headers, make_admin, make_user
from tests.test_events_integration import approve, create_event


def attendee_payload(**overrides) -> dict:
    payload = {
        "name": "Jane Smith",
        "email": "jane@example.com",
        "phone_number": "555-123-7890",
        "additional_attendees": 2,
    }
    payload.update(overrides)
    return payload


def approved_event(client: TestClient, db_session, organizer_email: str = "org@example.com"):
    organizer = make_user(client, organizer_email)
    admin = make_admin(client, db_session, f"admin+{organizer_email}")
    event_id = create_event(client, organizer).json()["id"]
    assert approve(client, admin, event_id).status_code == 200
    return event_id, organizer, admin


def test_anonymous_registration(client: TestClient, db_session):
    event_id, _, _ = approved_event(client, db_session)

    resp = client.post(f"/v1/events/{event_id}/attendees", json=attendee_payload())
    assert resp.status_code == 201
    body = resp.json()
    assert body["event_id"] == event_id
    assert body["user_id"] is None
    assert body["additional_attendees"] == 2


def test_signed_in_registration_links_user(client: TestClient, db_session):
    event_id, _, _ = approved_event(client, db_session)
    token = make_user(client, "bob@example.com", name="Bob Johnson")

    resp = client.post(
        f"/v1/events/{event_id}/attendees",
        json=attendee_payload(name="Bob Johnson", email="bob@example.com", additional_attendees=0),
        headers=auth_headers(token),
    )
    assert resp.status_code == 201
    assert resp.json()["user_id"] is not None

    mine = client.get("/v1/me/registrations", headers=auth_headers(token))
    assert [r["event_id"] for r in mine.json()] == [event_id]


def test_duplicate_registration_rejected(client: TestClient, db_session):
    event_id, _, _ = approved_event(client, db_session)

    first = client.post(f"/v1/events/{event_id}/attendees", json=attendee_payload())
    assert first.status_code == 201

    second = client.post(
        f"/v1/events/{event_id}/attendees",
        json=attendee_payload(email="JANE@example.com", name="Jane S."),
    )
    assert second.status_code == 409
    assert second.json()["detail"]["code"] == "ATTENDEE_ALREADY_REGISTERED"


def test_registration_requires_approved_event(client: TestClient):
    organizer = make_user(client, "pending-org@example.com")
    event_id = create_event(client, organizer).json()["id"]

    # Invisible to the public
    anon = client.post(f"/v1/events/{event_id}/attendees", json=attendee_payload())
    assert anon.status_code == 404

    own = client.post(
        f"/v1/events/{event_id}/attendees",
        json=attendee_payload(),
        headers=auth_headers(organizer),
    )
    assert own.status_code == 409
    assert own.json()["detail"]["code"] == "EVENT_NOT_APPROVED"


def test_registration_validation(client: TestClient, db_session):
    event_id, _, _ = approved_event(client, db_session)

    cases = [
        attendee_payload(name="J"),
        attendee_payload(email="not-an-email"),
        attendee_payload(phone_number="555"),
        attendee_payload(additional_attendees=11),
        attendee_payload(additional_attendees=-1),
    ]
    for payload in cases:
        resp = client.post(f"/v1/events/{event_id}/attendees", json=payload)
        assert resp.status_code == 422, payload


def test_organizer_lists_attendees_with_headcount(client: TestClient, db_session):
    event_id, organizer, admin = approved_event(client, db_session)
    client.post(f"/v1/events/{event_id}/attendees", json=attendee_payload())
    client.post(
        f"/v1/events/{event_id}/attendees",
        json=attendee_payload(name="Bob Johnson", email="bob@example.com", additional_attendees=0),
    )

    for token in (organizer, admin):
        resp = client.get(f"/v1/events/{event_id}/attendees", headers=auth_headers(token))
        assert resp.status_code == 200
        body = resp.json()
        assert body["registrations"] == 2
        assert body["total_attendees"] == 4
        assert sorted(a["email"] for a in body["items"]) == ["bob@example.com", "jane@example.com"]

    stranger = make_user(client, "stranger@example.com")
    resp = client.get(f"/v1/events/{event_id}/attendees", headers=auth_headers(stranger))
    assert resp.status_code == 403


def test_registration_sends_confirmation(client: TestClient, db_session):
    event_id, _, _ = approved_event(client, db_session)
    attendee_id = client.post(
        f"/v1/events/{event_id}/attendees", json=attendee_payload()
    ).json()["id"]

    logs = db_session.scalars(select(NotificationLog)).all()
    assert len(logs) == 1
    assert logs[0].kind == NotificationKind.REGISTRATION
    assert logs[0].recipient_email == "jane@example.com"
    assert str(logs[0].attendee_id) == attendee_id


def test_event_notification_reaches_every_attendee(client: TestClient, db_session):
    event_id, organizer, _ = approved_event(client, db_session)
    client.post(f"/v1/events/{event_id}/attendees", json=attendee_payload())
    client.post(
        f"/v1/events/{event_id}/attendees",
        json=attendee_payload(name="Bob Johnson", email="bob@example.com"),
    )

    resp = client.post(
        f"/v1/events/{event_id}/notifications",
        json={"type": "reminder"},
        headers=auth_headers(organizer),
    )
    assert resp.status_code == 202
    assert resp.json() == {"status": "queued", "type": "reminder", "recipients": 2}

    reminders = db_session.scalars(
        select(NotificationLog).where(NotificationLog.kind == NotificationKind.REMINDER)
    ).all()
    assert sorted(n.recipient_email for n in reminders) == ["bob@example.com", "jane@example.com"]

    bad_type = client.post(
        f"/v1/events/{event_id}/notifications",
        json={"type": "registration"},
        headers=auth_headers(organizer),
    )
    assert bad_type.status_code == 422


def test_cancel_registration(client: TestClient, db_session):
    event_id, organizer, _ = approved_event(client, db_session)
    token = make_user(client, "bob@example.com", name="Bob Johnson")
    other = make_user(client, "mallory@example.com")

    own_id = client.post(
        f"/v1/events/{event_id}/attendees",
        json=attendee_payload(name="Bob Johnson", email="bob@example.com"),
        headers=auth_headers(token),
    ).json()["id"]
    anon_id = client.post(f"/v1/events/{event_id}/attendees", json=attendee_payload()).json()["id"]

    denied = client.delete(
        f"/v1/events/{event_id}/attendees/{own_id}", headers=auth_headers(other)
    )
    assert denied.status_code == 403

    own = client.delete(f"/v1/events/{event_id}/attendees/{own_id}", headers=auth_headers(token))
    assert own.status_code == 204

    by_organizer = client.delete(
        f"/v1/events/{event_id}/attendees/{anon_id}", headers=auth_headers(organizer)
    )
    assert by_organizer.status_code == 204

    missing = client.delete(
        f"/v1/events/{event_id}/attendees/{anon_id}", headers=auth_headers(organizer)
    )
    assert missing.status_code == 404
    assert missing.json()["detail"]["code"] == "ATTENDEE_NOT_FOUND"


def test_deleting_event_removes_registrations(client: TestClient, db_session):
    event_id, organizer, admin = approved_event(client, db_session)
    client.post(f"/v1/events/{event_id}/attendees", json=attendee_payload())

    assert client.delete(f"/v1/events/{event_id}", headers=auth_headers(organizer)).status_code == 204

    resp = client.get(f"/v1/events/{event_id}/attendees", headers=auth_headers(admin))
    assert resp.status_code == 404


def test_padded_name_is_rejected(client: TestClient, db_session):
    event_id, _, _ = approved_event(client, db_session)

    resp = client.post(f"/v1/events/{event_id}/attendees", json=attendee_payload(name="  J  "))
    assert resp.status_code == 422

    padded = client.post(
        f"/v1/events/{event_id}/attendees", json=attendee_payload(name="  Jane Smith  ")
    )
    assert padded.status_code == 201
    assert padded.json()["name"] == "Jane Smith"


def test_registration_survives_broker_outage(client: TestClient, db_session, monkeypatch):
    event_id, _, _ = approved_event(client, db_session)

    def _broker_down(*args, **kwargs):
        raise OperationalError("broker unreachable")

    monkeypatch.setattr(send_registration_confirmation, "delay", _broker_down)

    resp = client.post(f"/v1/events/{event_id}/attendees", json=attendee_payload())
    assert resp.status_code == 201
    assert db_session.scalars(select(NotificationLog)).all() == []
