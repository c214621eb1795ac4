"""
Tests for the slot selection rules: fill, trim, clear and full-day mode.
"""

from __future__ import annotations

import itertools

import pytest

from facility_booking.application.exceptions import FullDurationActiveError, InvalidSlotLabelError
from facility_booking.application.use_cases.selection import SelectionEngine
from facility_booking.domain.entities.selection import SlotSelection
from facility_booking.domain.entities.slot_grid import SlotGrid


def _sel(*slots: str) -> SlotSelection:
    return SlotSelection(slots=tuple(slots))


def test_default_grid_skips_lunch_break(grid):
    assert grid.labels[0] == "09:00"
    assert grid.labels[-1] == "16:30"
    assert "13:00" in grid
    assert "13:30" not in grid
    assert len(grid) == 15


def test_click_on_empty_selects_single_slot(grid):
    engine = SelectionEngine(grid)
    assert engine.toggle(SlotSelection(), "10:00").slots == ("10:00",)


def test_second_click_fills_gap(grid):
    engine = SelectionEngine(grid)
    assert engine.toggle(_sel("10:00"), "11:00").slots == ("10:00", "10:30", "11:00")


def test_second_click_before_first_fills_backwards(grid):
    engine = SelectionEngine(grid)
    assert engine.toggle(_sel("11:00"), "10:00").slots == ("10:00", "10:30", "11:00")


def test_click_inside_run_trims_to_click(grid):
    engine = SelectionEngine(grid)
    result = engine.toggle(_sel("09:00", "09:30", "10:00"), "09:30")
    assert result.slots == ("09:00", "09:30")


def test_click_run_start_keeps_only_start(grid):
    engine = SelectionEngine(grid)
    assert engine.toggle(_sel("09:00", "09:30", "10:00"), "09:00").slots == ("09:00",)


def test_click_sole_slot_clears(grid):
    engine = SelectionEngine(grid)
    once = engine.toggle(SlotSelection(), "09:00")
    twice = engine.toggle(once, "09:00")
    assert twice.is_empty
    assert twice == SlotSelection()


def test_click_outside_multi_slot_run_extends_envelope(grid):
    engine = SelectionEngine(grid)
    result = engine.toggle(_sel("09:00", "09:30", "10:00"), "12:00")
    assert result.slots == ("09:00", "09:30", "10:00", "10:30", "11:00", "11:30", "12:00")

    earlier = engine.toggle(_sel("11:00", "11:30"), "09:30")
    assert earlier.slots == ("09:30", "10:00", "10:30", "11:00", "11:30")


def test_fill_across_break_uses_grid_order(grid):
    engine = SelectionEngine(grid)
    result = engine.toggle(_sel("13:00"), "14:00")
    assert result.slots == ("13:00", "14:00")


def test_unknown_label_fails_loudly(grid):
    engine = SelectionEngine(grid)
    with pytest.raises(InvalidSlotLabelError):
        engine.toggle(SlotSelection(), "13:30")
    with pytest.raises(InvalidSlotLabelError):
        engine.toggle(_sel("10:00"), "25:00")


def test_full_duration_selects_whole_grid(grid):
    engine = SelectionEngine(grid)
    result = engine.set_full_duration()
    assert result.slots == grid.labels
    assert result.full_duration is True
    assert result.duration_type == "full-day"


def test_toggle_rejected_while_full_duration_active(grid):
    engine = SelectionEngine(grid)
    full = engine.set_full_duration()
    with pytest.raises(FullDurationActiveError):
        engine.toggle(full, "10:00")

    cleared = engine.clear_duration()
    assert cleared == SlotSelection()
    assert engine.toggle(cleared, "10:00").slots == ("10:00",)


def test_every_click_sequence_stays_contiguous():
    """Exhaustive over all 3-click sequences on a small grid."""
    grid = SlotGrid(labels=("09:00", "09:30", "10:00", "10:30", "11:00"))
    engine = SelectionEngine(grid)
    for clicks in itertools.product(grid.labels, repeat=3):
        selection = SlotSelection()
        for label in clicks:
            selection = engine.toggle(selection, label)
            if not selection.is_empty:
                assert grid.is_contiguous(selection.slots), (clicks, selection.slots)
                assert selection.slots == grid.sort(selection.slots)
