from __future__ import annotations

import threading
import uuid
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

from facility_booking.application.exceptions import BookingNotFoundError
from facility_booking.application.ports.booking_store import BookingStorePort
from facility_booking.domain.entities.booking import BookingDraft, BookingRecord, BookingStatus


class MemoryBookingStore(BookingStorePort):
    def __init__(self) -> None:
        self._records: dict[str, BookingRecord] = {}
        self._lock = threading.Lock()

    def find(self, resource_key: str, status_in: Iterable[BookingStatus]) -> list[BookingRecord]:
        statuses = set(status_in)
        with self._lock:
            return [
                r for r in self._records.values()
                if r.resource.resource_key == resource_key and r.status in statuses
            ]

    def insert(self, draft: BookingDraft) -> BookingRecord:
        record = record_from_draft(draft)
        with self._lock:
            self._records[record.id] = record
        return record

    def update_status(
        self,
        booking_id: str,
        new_status: BookingStatus,
        reviewer: str,
        reason: str | None = None,
        reviewed_at: datetime | None = None,
    ) -> BookingRecord:
        with self._lock:
            current = self._records.get(booking_id)
            if current is None:
                raise BookingNotFoundError(f"Booking not found: {booking_id}")
            updated = apply_status(current, new_status, reviewer, reason, reviewed_at)
            self._records[booking_id] = updated
            return updated

    def get(self, booking_id: str) -> BookingRecord | None:
        with self._lock:
            return self._records.get(booking_id)

    def list(
        self,
        requester_id: str | None = None,
        status_in: Iterable[BookingStatus] | None = None,
    ) -> list[BookingRecord]:
        statuses = set(status_in) if status_in is not None else None
        with self._lock:
            return [
                r for r in self._records.values()
                if (requester_id is None or r.requester_id == requester_id)
                and (statuses is None or r.status in statuses)
            ]


def record_from_draft(draft: BookingDraft) -> BookingRecord:
    return BookingRecord(
        id=str(uuid.uuid4()),
        resource=draft.resource,
        booking_date=draft.booking_date,
        status=draft.status,
        start_time=draft.start_time,
        end_time=draft.end_time,
        selected_slots=tuple(draft.selected_slots),
        duration_type=draft.duration_type,
        details=draft.details,
        requester_id=draft.requester_id,
        requester_name=draft.requester_name,
        requester_email=draft.requester_email,
        created_at=datetime.now(),
    )


def apply_status(
    record: BookingRecord,
    new_status: BookingStatus,
    reviewer: str,
    reason: str | None,
    reviewed_at: datetime | None,
) -> BookingRecord:
    when = reviewed_at or datetime.now()
    changes: dict[str, object] = {"status": new_status}
    # Cancelling keeps the approval record intact.
    if new_status == BookingStatus.cancelled:
        changes.update(cancelled_by=reviewer, cancelled_at=when, cancellation_reason=reason)
    else:
        changes.update(reviewed_by=reviewer, reviewed_at=when)
        if new_status == BookingStatus.rejected:
            changes["rejection_reason"] = reason
    return replace(record, **changes)
