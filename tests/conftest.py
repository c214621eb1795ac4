from __future__ import annotations

from datetime import date

import pytest

from facility_booking.domain.entities.booking import (
    BookingDraft,
    BookingStatus,
    EventDetails,
    ResourceKind,
    ResourceRef,
)
from facility_booking.domain.entities.identity import Identity, Role
from facility_booking.domain.entities.slot_grid import SlotGrid
from facility_booking.infrastructure.store.memory_store import MemoryBookingStore

HALL = ResourceRef(kind=ResourceKind.venue, resource_id="venue-main-hall", name="Main Hall")


def make_details(title: str = "Tech Talk", department: str = "Computer Science") -> EventDetails:
    return EventDetails(
        event_title=title,
        event_description="Guest lecture",
        attendees=40,
        department_category="Engineering",
        department=department,
        faculty_incharge="Dr. Rao",
        contact_number="9876543210",
        contact_email="rao@example.edu",
    )


def make_draft(
    slots: tuple[str, ...],
    booking_date: date = date(2025, 3, 1),
    resource: ResourceRef = HALL,
    title: str = "Tech Talk",
    department: str = "Computer Science",
    requester_id: str = "user-1",
    duration_type: str = "custom",
) -> BookingDraft:
    return BookingDraft(
        resource=resource,
        booking_date=booking_date,
        start_time=slots[0] if slots else "",
        end_time="",
        selected_slots=slots,
        duration_type=duration_type,
        details=make_details(title, department),
        requester_id=requester_id,
        requester_name="Asha",
        requester_email=f"{requester_id}@example.edu",
    )


@pytest.fixture
def grid() -> SlotGrid:
    return SlotGrid.build("09:00", "17:00", 30, ["13:30-14:00"])


@pytest.fixture
def store() -> MemoryBookingStore:
    return MemoryBookingStore()


@pytest.fixture
def requester() -> Identity:
    return Identity(user_id="user-1", email="user-1@example.edu", name="Asha", role=Role.requester)


@pytest.fixture
def approver() -> Identity:
    return Identity(user_id="admin-1", email="admin@example.edu", name="Admin", role=Role.approver)


def seed(store: MemoryBookingStore, slots: tuple[str, ...], status: BookingStatus = BookingStatus.pending, **kwargs):
    """Insert a booking and move it to ``status`` directly through the store."""
    record = store.insert(make_draft(slots, **kwargs))
    if status != BookingStatus.pending:
        record = store.update_status(record.id, status, reviewer="admin@example.edu")
    return record
