from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from facility_booking.domain.entities.booking import BookingStatus


@dataclass(frozen=True)
class AvailabilityKey:
    resource_key: str
    booking_date: date
    slots: frozenset[str]


@dataclass(frozen=True)
class Conflict:
    booking_id: str
    event_title: str
    department: str
    slots: tuple[str, ...]
    status: BookingStatus


@dataclass(frozen=True)
class ConflictReport:
    key: AvailabilityKey | None = None
    conflicts: tuple[Conflict, ...] = ()
    confirmed: bool = True  # False when the store could not be read
    warning: str | None = None

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def message(self, resource_label: str = "resource") -> str | None:
        if not self.conflicts:
            return None
        listing = ", ".join(f'"{c.event_title}" ({c.department}) - {c.status.value}' for c in self.conflicts)
        when = self.key.booking_date.strftime("%B %d, %Y") if self.key else "this date"
        return f"This {resource_label} is already booked on {when} for: {listing}"
