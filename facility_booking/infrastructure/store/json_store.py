from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path
from typing import Any

from facility_booking.application.exceptions import BookingNotFoundError, StoreUnavailableError
from facility_booking.application.ports.booking_store import BookingStorePort
from facility_booking.domain.entities.booking import (
    BookingDraft,
    BookingRecord,
    BookingStatus,
    EventDetails,
    ResourceKind,
    ResourceRef,
)
from facility_booking.infrastructure.store.memory_store import apply_status, record_from_draft


class JsonBookingStore(BookingStorePort):
    """Bookings kept in a single JSON document, rewritten atomically on every change."""

    def __init__(self, data_dir: str = "./data/bookings", file_name: str = "bookings.json") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._data_dir / file_name
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def find(self, resource_key: str, status_in: Iterable[BookingStatus]) -> list[BookingRecord]:
        statuses = set(status_in)
        with self._lock:
            records = self._load()
        return [r for r in records if r.resource.resource_key == resource_key and r.status in statuses]

    def insert(self, draft: BookingDraft) -> BookingRecord:
        record = record_from_draft(draft)
        with self._lock:
            records = self._load()
            records.append(record)
            self._save(records)
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
            records = self._load()
            for i, record in enumerate(records):
                if record.id == booking_id:
                    updated = apply_status(record, new_status, reviewer, reason, reviewed_at)
                    records[i] = updated
                    self._save(records)
                    return updated
        raise BookingNotFoundError(f"Booking not found: {booking_id}")

    def get(self, booking_id: str) -> BookingRecord | None:
        with self._lock:
            records = self._load()
        return next((r for r in records if r.id == booking_id), None)

    def list(
        self,
        requester_id: str | None = None,
        status_in: Iterable[BookingStatus] | None = None,
    ) -> list[BookingRecord]:
        statuses = set(status_in) if status_in is not None else None
        with self._lock:
            records = self._load()
        return [
            r for r in records
            if (requester_id is None or r.requester_id == requester_id)
            and (statuses is None or r.status in statuses)
        ]

    def _load(self) -> list[BookingRecord]:
        """Load all bookings. A missing file is an empty store; a corrupt one is a fault."""
        if not self._file_path.exists():
            return []
        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict) or not isinstance(data.get("bookings", []), list):
                raise ValueError("expected an object with a 'bookings' list")
            items = data.get("bookings", [])
            if not all(isinstance(item, dict) for item in items):
                raise ValueError("every booking entry must be an object")
            return [_deserialize_record(item) for item in items]
        except (json.JSONDecodeError, OSError, KeyError, ValueError, TypeError) as e:
            self._logger.error("Failed to read booking store", extra={"path": str(self._file_path), "reason": str(e)})
            raise StoreUnavailableError(f"Booking store unreadable: {e}") from e

    def _save(self, records: list[BookingRecord]) -> None:
        """Save bookings to the JSON file atomically."""
        temp_path = self._file_path.with_suffix(".json.tmp")
        payload = {"version": 1, "bookings": [_serialize_record(r) for r in records]}
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except OSError as e:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass
            raise StoreUnavailableError(f"Booking store not writable: {e}") from e


def _serialize_record(record: BookingRecord) -> dict[str, Any]:
    details = record.details
    return {
        "id": record.id,
        "resource_type": record.resource.kind.value,
        "resource_id": record.resource.resource_id,
        "resource_key": record.resource.resource_key,
        "resource_name": record.resource.name,
        "sub_area": record.resource.sub_area,
        "facility": record.resource.facility,
        "booking_date": record.booking_date.isoformat(),
        "status": record.status.value,
        "start_time": record.start_time,
        "end_time": record.end_time,
        "selected_slots": list(record.selected_slots),
        "duration_type": record.duration_type,
        "event_title": details.event_title,
        "event_description": details.event_description,
        "attendees": details.attendees,
        "department_category": details.department_category,
        "department": details.department,
        "faculty_incharge": details.faculty_incharge,
        "contact_number": details.contact_number,
        "contact_email": details.contact_email,
        "requester_id": record.requester_id,
        "requester_name": record.requester_name,
        "requester_email": record.requester_email,
        "created_at": record.created_at.isoformat(),
        "reviewed_by": record.reviewed_by,
        "reviewed_at": record.reviewed_at.isoformat() if record.reviewed_at else None,
        "rejection_reason": record.rejection_reason,
        "cancelled_by": record.cancelled_by,
        "cancelled_at": record.cancelled_at.isoformat() if record.cancelled_at else None,
        "cancellation_reason": record.cancellation_reason,
    }


def _deserialize_record(data: dict[str, Any]) -> BookingRecord:
    reviewed_at = data.get("reviewed_at")
    cancelled_at = data.get("cancelled_at")
    return BookingRecord(
        id=data["id"],
        resource=ResourceRef(
            kind=ResourceKind(data["resource_type"]),
            resource_id=data.get("resource_id"),
            sub_area=data.get("sub_area"),
            name=data.get("resource_name"),
        ),
        booking_date=date.fromisoformat(str(data["booking_date"]).split("T")[0]),
        status=BookingStatus(data["status"]),
        start_time=data.get("start_time"),
        end_time=data.get("end_time"),
        selected_slots=tuple(data.get("selected_slots") or ()),
        duration_type=data.get("duration_type", "custom"),
        details=EventDetails(
            event_title=data.get("event_title", ""),
            event_description=data.get("event_description", ""),
            attendees=int(data.get("attendees") or 0),
            department_category=data.get("department_category", ""),
            department=data.get("department", ""),
            faculty_incharge=data.get("faculty_incharge", ""),
            contact_number=data.get("contact_number", ""),
            contact_email=data.get("contact_email", ""),
        ),
        requester_id=data.get("requester_id", ""),
        requester_name=data.get("requester_name", ""),
        requester_email=data.get("requester_email", ""),
        created_at=datetime.fromisoformat(data["created_at"]),
        reviewed_by=data.get("reviewed_by"),
        reviewed_at=datetime.fromisoformat(reviewed_at) if reviewed_at else None,
        rejection_reason=data.get("rejection_reason"),
        cancelled_by=data.get("cancelled_by"),
        cancelled_at=datetime.fromisoformat(cancelled_at) if cancelled_at else None,
        cancellation_reason=data.get("cancellation_reason"),
    )
