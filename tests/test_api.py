from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from facility_booking.application.exceptions import StoreUnavailableError
from facility_booking.core.config import settings
from facility_booking.infrastructure.store.memory_store import MemoryBookingStore
from facility_booking.main import ContextFormatter, app
from facility_booking.wiring import dependencies

REQUESTER = {"X-User-Id": "user-1", "X-User-Email": "asha@example.edu", "X-User-Name": "Asha"}
APPROVER = {"X-User-Id": "admin-1", "X-User-Email": "admin@example.edu"}

DETAILS = {
    "event_title": "Tech Talk",
    "event_description": "Guest lecture",
    "attendees": 40,
    "department_category": "Engineering",
    "department": "Computer Science",
    "faculty_incharge": "Dr. Rao",
    "contact_number": "9876543210",
    "contact_email": "rao@example.edu",
}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(settings, "APPROVER_EMAILS", ["admin@example.edu"])
    monkeypatch.setattr(settings, "NOTIFY_WEBHOOK_URL", None)
    monkeypatch.setattr(dependencies, "_booking_store", MemoryBookingStore())
    dependencies.get_identity_provider.cache_clear()
    dependencies.get_notifier.cache_clear()
    yield TestClient(app)
    dependencies.get_identity_provider.cache_clear()
    dependencies.get_notifier.cache_clear()


def _open_session(client, headers=REQUESTER, date="2025-03-01") -> str:
    resp = client.post("/api/v1/sessions", headers=headers)
    assert resp.status_code == 201
    session_id = resp.json()["session_id"]
    resp = client.put(
        f"/api/v1/sessions/{session_id}/context",
        headers=headers,
        json={"resource": {"kind": "venue", "resource_id": "venue-main-hall", "name": "Main Hall"},
              "booking_date": date, "details": DETAILS},
    )
    assert resp.status_code == 200
    return session_id


def test_health_and_slots(client):
    assert client.get("/health").json()["status"] == "ok"
    data = client.get("/api/v1/slots").json()
    assert data["step_minutes"] == 30
    assert data["slots"][0] == "09:00"
    assert "13:30" not in data["slots"]


def test_booking_round_trip(client):
    session_id = _open_session(client)
    client.post(f"/api/v1/sessions/{session_id}/toggle", headers=REQUESTER, json={"slot": "14:00"})
    resp = client.post(f"/api/v1/sessions/{session_id}/toggle", headers=REQUESTER, json={"slot": "15:00"})
    assert resp.json()["selected_slots"] == ["14:00", "14:30", "15:00"]

    resp = client.post(f"/api/v1/sessions/{session_id}/submit", headers=REQUESTER)
    assert resp.status_code == 201
    booking = resp.json()["booking"]
    assert booking["status"] == "Pending"
    assert booking["end_time"] == "15:30"
    assert booking["time_display"] == "14:00 - 15:00"

    pending = client.get("/api/v1/bookings/pending", headers=APPROVER).json()
    assert [b["id"] for b in pending] == [booking["id"]]
    assert client.get("/api/v1/bookings/pending", headers=REQUESTER).status_code == 403

    resp = client.post(f"/api/v1/bookings/{booking['id']}/approve", headers=APPROVER)
    assert resp.status_code == 200
    assert resp.json()["booking"]["status"] == "Approved"

    calendar = client.get("/api/v1/calendar", params={"on_or_after": "2025-03-01"}).json()
    assert [b["id"] for b in calendar] == [booking["id"]]

    # A second requester sees the conflict immediately and cannot submit.
    other = {"X-User-Id": "user-2", "X-User-Email": "ravi@example.edu"}
    second = _open_session(client, headers=other)
    resp = client.post(f"/api/v1/sessions/{second}/toggle", headers=other, json={"slot": "15:00"})
    availability = resp.json()["availability"]
    assert availability["conflicts"][0]["event_title"] == "Tech Talk"
    assert "already booked" in availability["message"]

    resp = client.post(f"/api/v1/sessions/{second}/submit", headers=other)
    assert resp.status_code == 409

    stats = client.get("/api/v1/bookings/stats", headers=REQUESTER).json()
    assert stats == {"total": 1, "pending": 0, "approved": 1, "rejected": 0}


def test_invalid_slot_and_full_day_mode(client):
    session_id = _open_session(client)
    resp = client.post(f"/api/v1/sessions/{session_id}/toggle", headers=REQUESTER, json={"slot": "13:30"})
    assert resp.status_code == 422

    resp = client.post(f"/api/v1/sessions/{session_id}/full-duration", headers=REQUESTER)
    assert resp.json()["full_duration"] is True
    assert resp.json()["selected_slots"][-1] == "16:30"

    resp = client.post(f"/api/v1/sessions/{session_id}/toggle", headers=REQUESTER, json={"slot": "10:00"})
    assert resp.status_code == 400

    resp = client.delete(f"/api/v1/sessions/{session_id}/full-duration", headers=REQUESTER)
    assert resp.json()["selected_slots"] == []


def test_empty_submission_is_a_validation_error(client):
    session_id = _open_session(client)
    resp = client.post(f"/api/v1/sessions/{session_id}/submit", headers=REQUESTER)
    assert resp.status_code == 400
    assert "at least one time slot" in resp.json()["detail"]


def test_sessions_are_private(client):
    session_id = _open_session(client)
    resp = client.get(f"/api/v1/sessions/{session_id}", headers={"X-User-Id": "user-9", "X-User-Email": "x@example.edu"})
    assert resp.status_code == 404


def test_discarded_session_is_gone(client):
    session_id = _open_session(client)
    assert client.delete(f"/api/v1/sessions/{session_id}", headers=REQUESTER).status_code == 204
    assert client.get(f"/api/v1/sessions/{session_id}", headers=REQUESTER).status_code == 404


class OfflineReadStore(MemoryBookingStore):
    def find(self, resource_key, status_in):
        raise StoreUnavailableError("replica offline")


def test_submit_proceeds_unconfirmed_when_store_reads_fail(client, monkeypatch):
    monkeypatch.setattr(dependencies, "_booking_store", OfflineReadStore())
    session_id = _open_session(client)
    resp = client.post(f"/api/v1/sessions/{session_id}/toggle", headers=REQUESTER, json={"slot": "10:00"})
    assert resp.json()["availability"]["confirmed"] is False

    resp = client.post(f"/api/v1/sessions/{session_id}/submit", headers=REQUESTER)
    assert resp.status_code == 201
    assert "could not be confirmed" in resp.json()["warning"]
    assert resp.json()["booking"]["status"] == "Pending"


def test_log_lines_carry_booking_context():
    formatter = ContextFormatter("%(levelname)s:%(message)s")
    record = logging.LogRecord("facility_booking", logging.WARNING, __file__, 1, "Double booking committed", None, None)
    record.booking_id = "abc"
    record.overlapping = ["def"]
    record.conflicts = 2
    line = formatter.format(record)
    assert line.startswith("WARNING:Double booking committed | ")
    assert "booking_id=abc" in line
    assert "conflicts=2" in line
    assert "overlapping=['def']" in line
