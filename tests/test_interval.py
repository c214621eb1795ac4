from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from facility_booking.application.exceptions import EmptySelectionError
from facility_booking.application.utils.interval import calendar_day, format_time_display, normalize
from facility_booking.domain.entities.selection import SlotSelection
from facility_booking.domain.entities.slot_grid import SlotGrid, format_minutes, to_minutes
from facility_booking.infrastructure.store.memory_store import record_from_draft

from conftest import make_draft


def test_last_slot_ends_outside_grid(grid):
    result = normalize(SlotSelection(slots=("16:30",)), grid, 30)
    assert result.start == "16:30"
    assert result.end == "17:00"
    assert result.ordered_slots == ("16:30",)


def test_normalize_orders_by_grid(grid):
    result = normalize(["10:30", "09:30", "10:00"], grid)
    assert result.ordered_slots == ("09:30", "10:00", "10:30")
    assert result.start == "09:30"
    assert result.end == "11:00"


def test_normalize_end_wraps_past_midnight():
    grid = SlotGrid(labels=("23:00", "23:30"), step_minutes=30)
    assert normalize(["23:30"], grid).end == "00:00"


def test_empty_selection_rejected(grid):
    with pytest.raises(EmptySelectionError):
        normalize(SlotSelection(), grid)


def test_minute_helpers():
    assert to_minutes("09:30") == 570
    assert format_minutes(570) == "09:30"
    assert format_minutes(24 * 60 + 15) == "00:15"
    with pytest.raises(ValueError):
        to_minutes("24:00")


def test_grid_rejects_unordered_labels():
    with pytest.raises(ValueError):
        SlotGrid(labels=("10:00", "09:30"))


def test_format_time_display_variants():
    record = record_from_draft(make_draft(("10:30", "10:00", "11:00")))
    assert format_time_display(record) == "10:00 - 11:00"

    single = replace(record, selected_slots=("14:00",))
    assert format_time_display(single) == "14:00"

    full = replace(record, duration_type="full-day")
    assert format_time_display(full) == "Full Day"
    assert format_time_display(full, "Full Day (9:00 AM - 4:30 PM)") == "Full Day (9:00 AM - 4:30 PM)"

    bare = replace(record, selected_slots=(), start_time="09:00", end_time=None)
    assert format_time_display(bare) == "09:00 - N/A"


def test_calendar_day_ignores_time_part():
    assert calendar_day("2025-03-01T18:30:00+00:00") == date(2025, 3, 1)
    assert calendar_day(datetime(2025, 3, 1, 23, 59)) == date(2025, 3, 1)
    assert calendar_day(date(2025, 3, 1)) == date(2025, 3, 1)
