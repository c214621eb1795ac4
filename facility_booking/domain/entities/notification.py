from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from facility_booking.domain.entities.booking import BookingRecord


class BookingAction(str, Enum):
    requested = "Requested"
    approved = "Approved"
    rejected = "Rejected"
    cancelled = "Cancelled"


@dataclass(frozen=True)
class BookingEvent:
    action: BookingAction
    booking: BookingRecord
    reason: str | None = None

    @property
    def subject(self) -> str:
        # First 8 chars of the booking id.
        return f"Booking {self.action.value}: {self.booking.details.event_title} (#{self.booking.id[:8]})"
