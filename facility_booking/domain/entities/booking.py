from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from facility_booking.application.exceptions import InvalidTransitionError


class BookingStatus(str, Enum):
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"
    cancelled = "Cancelled"


# Rejected and Cancelled are terminal.
BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.pending: frozenset({BookingStatus.approved, BookingStatus.rejected}),
    BookingStatus.approved: frozenset({BookingStatus.cancelled}),
    BookingStatus.rejected: frozenset(),
    BookingStatus.cancelled: frozenset(),
}

# Statuses that hold their slots for scheduling purposes.
BLOCKING_STATUSES: frozenset[BookingStatus] = frozenset({BookingStatus.pending, BookingStatus.approved})


def assert_valid_transition(current: BookingStatus, target: BookingStatus) -> None:
    allowed = BOOKING_TRANSITIONS.get(current, frozenset())
    if not allowed:
        raise InvalidTransitionError(f"Booking is already in terminal status: {current.value}")
    if target not in allowed:
        raise InvalidTransitionError(f"Cannot transition booking from {current.value} to {target.value}")


class ResourceKind(str, Enum):
    venue = "venue"
    turf = "turf"
    bus = "bus"


@dataclass(frozen=True)
class ResourceRef:
    kind: ResourceKind
    resource_id: str | None = None
    sub_area: str | None = None
    name: str | None = None

    @property
    def resource_key(self) -> str:
        """Key used to compare bookings for overlap."""
        if self.kind == ResourceKind.turf:
            return "turf-" + re.sub(r"\s+", "-", (self.sub_area or "").strip().lower())
        return self.resource_id or ""

    @property
    def display_name(self) -> str:
        if self.kind == ResourceKind.turf:
            return f"{self.sub_area} Area"
        if self.name:
            return self.name
        return "Unknown Bus" if self.kind == ResourceKind.bus else "Unknown Venue"

    @property
    def conflict_label(self) -> str:
        """Noun used in "This ... is already booked" messages."""
        if self.kind == ResourceKind.turf:
            return f"{self.sub_area} area"
        return "resource"

    @property
    def facility(self) -> str:
        return {ResourceKind.turf: "Turf", ResourceKind.bus: "Bus"}.get(self.kind, "Venue")

    @property
    def is_complete(self) -> bool:
        if self.kind == ResourceKind.turf:
            return bool(self.sub_area and self.sub_area.strip())
        return bool(self.resource_id)


@dataclass(frozen=True)
class EventDetails:
    event_title: str
    event_description: str
    attendees: int
    department_category: str
    department: str
    faculty_incharge: str
    contact_number: str
    contact_email: str


@dataclass(frozen=True)
class BookingDraft:
    resource: ResourceRef
    booking_date: date
    start_time: str
    end_time: str
    selected_slots: tuple[str, ...]
    duration_type: str
    details: EventDetails
    requester_id: str
    requester_name: str
    requester_email: str
    status: BookingStatus = BookingStatus.pending


@dataclass(frozen=True)
class BookingRecord:
    id: str
    resource: ResourceRef
    booking_date: date
    status: BookingStatus
    start_time: str | None
    end_time: str | None
    selected_slots: tuple[str, ...]
    duration_type: str
    details: EventDetails
    requester_id: str
    requester_name: str
    requester_email: str
    created_at: datetime
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    rejection_reason: str | None = None
    cancelled_by: str | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None

    @property
    def is_full_duration(self) -> bool:
        return self.duration_type == "full-day"
