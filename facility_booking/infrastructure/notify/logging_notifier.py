from __future__ import annotations

import logging

from facility_booking.application.ports.notifier import NotifierPort
from facility_booking.application.utils.notification import build_payload
from facility_booking.domain.entities.notification import BookingEvent


class LoggingNotifier(NotifierPort):
    def __init__(self, full_duration_label: str = "Full Day") -> None:
        self._full_duration_label = full_duration_label
        self._logger = logging.getLogger(__name__)
        self.sent: list[dict[str, object]] = []

    def notify(self, event: BookingEvent) -> None:
        payload = build_payload(event, self._full_duration_label)
        self.sent.append(payload)
        self._logger.info(
            "Mock booking notification",
            extra={"booking_id": event.booking.id, "action": event.action.value, "subject": payload["subject"]},
        )
