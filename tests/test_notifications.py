"""
Tests for notification payloads and delivery.
"""

from __future__ import annotations

import json

import httpx
import pytest

from facility_booking.application.exceptions import NotificationError
from facility_booking.application.utils.notification import build_payload
from facility_booking.domain.entities.booking import BookingStatus
from facility_booking.domain.entities.notification import BookingAction, BookingEvent
from facility_booking.infrastructure.notify.webhook_notifier import WebhookNotifier

from conftest import seed


def test_request_payload_goes_to_approvers(store):
    record = seed(store, ("10:00", "10:30"), title="Robotics Expo")
    payload = build_payload(BookingEvent(action=BookingAction.requested, booking=record))

    assert payload["recipient"] is None
    assert payload["subject"].startswith("Booking Requested: Robotics Expo")
    assert payload["time"] == "10:00 - 10:30"
    assert payload["date"] == "Saturday, March 01, 2025"


def test_webhook_posts_json_payload(store):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"ok": True})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    record = seed(store, ("09:00",), BookingStatus.approved)
    WebhookNotifier(url="https://hooks.example.edu/booking", client=client).notify(
        BookingEvent(action=BookingAction.approved, booking=record)
    )

    assert seen[0]["action"] == "Approved"
    assert seen[0]["recipient"] == record.requester_email


def test_webhook_error_status_raises(store):
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(502, json={"error": "relay down"})))
    record = seed(store, ("09:00",))
    notifier = WebhookNotifier(url="https://hooks.example.edu/booking", client=client)

    with pytest.raises(NotificationError):
        notifier.notify(BookingEvent(action=BookingAction.requested, booking=record))


def test_webhook_requires_url():
    with pytest.raises(ValueError):
        WebhookNotifier(url="")
