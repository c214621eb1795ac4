from __future__ import annotations

import logging

import httpx

from facility_booking.application.exceptions import NotificationError
from facility_booking.application.ports.notifier import NotifierPort
from facility_booking.application.utils.notification import build_payload
from facility_booking.domain.entities.notification import BookingEvent


class WebhookNotifier(NotifierPort):
    """Posts lifecycle events as JSON to a mail relay or chat webhook."""

    def __init__(
        self,
        url: str,
        full_duration_label: str = "Full Day",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not url:
            raise ValueError("A webhook URL is required for WebhookNotifier")
        self._url = url
        self._full_duration_label = full_duration_label
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def notify(self, event: BookingEvent) -> None:
        payload = build_payload(event, self._full_duration_label)
        try:
            resp = self._client.post(self._url, json=payload)
        except httpx.HTTPError as e:
            raise NotificationError(f"Notification transport failed: {e}") from e

        if resp.status_code >= 400:
            try:
                error_message = resp.json().get("error")
            except Exception:
                error_message = resp.text
            self._logger.error(
                "Notification send failed",
                extra={
                    "status": resp.status_code,
                    "booking_id": event.booking.id,
                    "action": event.action.value,
                    "reason": error_message,
                },
            )
            raise NotificationError(f"Notification endpoint returned {resp.status_code}")

        self._logger.info("Notification sent", extra={"booking_id": event.booking.id, "action": event.action.value})
