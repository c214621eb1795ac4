from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from facility_booking.application.exceptions import EmptySelectionError
from facility_booking.domain.entities.booking import BookingRecord
from facility_booking.domain.entities.selection import SlotSelection
from facility_booking.domain.entities.slot_grid import SlotGrid, format_minutes, to_minutes

FULL_DURATION_LABEL = "Full Day"


@dataclass(frozen=True)
class NormalizedInterval:
    start: str
    end: str  # exclusive; may name a time that is not a grid slot
    ordered_slots: tuple[str, ...]


def normalize(selection: SlotSelection | Iterable[str], grid: SlotGrid, step: int | None = None) -> NormalizedInterval:
    """
    Convert a selection into the canonical (start, end, ordered_slots) triple.

    ``end`` is the last selected slot plus one step, computed in minutes and
    wrapped at midnight rather than looked up in the grid, so the last bookable
    slot still gets an end time.
    """
    labels = selection.slots if isinstance(selection, SlotSelection) else tuple(selection)
    if not labels:
        raise EmptySelectionError()

    step_minutes = grid.step_minutes if step is None else step
    ordered = grid.sort(labels)
    end = format_minutes(to_minutes(ordered[-1]) + step_minutes)
    return NormalizedInterval(start=ordered[0], end=end, ordered_slots=ordered)


def format_time_display(booking: BookingRecord, full_duration_label: str = FULL_DURATION_LABEL) -> str:
    """Human readable time span shared by notifications, listings and exports."""
    if booking.is_full_duration:
        return full_duration_label
    if booking.selected_slots:
        ordered = sorted(booking.selected_slots, key=to_minutes)
        if len(ordered) == 1:
            return ordered[0]
        return f"{ordered[0]} - {ordered[-1]}"
    return f"{booking.start_time or 'N/A'} - {booking.end_time or 'N/A'}"


def calendar_day(value: date | datetime | str) -> date:
    """Reduce a stored booking date to its calendar day, ignoring any time part."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).split("T")[0].strip())
