from __future__ import annotations

import logging

from facility_booking.application.exceptions import FullDurationActiveError
from facility_booking.domain.entities.selection import SlotSelection
from facility_booking.domain.entities.slot_grid import SlotGrid


class SelectionEngine:
    """Slot picking rules for one booking form.

    Every operation returns a fresh ``SlotSelection`` that callers must treat as
    the new state. Outputs are always empty, a single slot, or a contiguous grid
    range, whatever the input looked like.
    """

    def __init__(self, grid: SlotGrid) -> None:
        self._grid = grid
        self._logger = logging.getLogger(__name__)

    @property
    def grid(self) -> SlotGrid:
        return self._grid

    def toggle(self, current: SlotSelection, clicked: str) -> SlotSelection:
        clicked_idx = self._grid.index(clicked)
        if current.full_duration:
            raise FullDurationActiveError()

        indices = [self._grid.index(label) for label in current.slots]

        if clicked in current:
            # Deselect: clicking the only slot clears, otherwise trim the run
            # back to span from its start up to the clicked slot.
            if len(indices) == 1:
                return SlotSelection()
            run_start = min(indices)
            return SlotSelection(slots=self._grid.span(run_start, clicked_idx))

        if not indices:
            return SlotSelection(slots=(clicked,))

        if len(indices) == 1:
            return SlotSelection(slots=self._grid.span(indices[0], clicked_idx))

        # Two or more: re-derive the envelope so any gap up to the click is filled.
        envelope = indices + [clicked_idx]
        result = SlotSelection(slots=self._grid.span(min(envelope), max(envelope)))
        if len(result) - len(indices) > 1:
            self._logger.debug(
                "Selection envelope expanded",
                extra={"clicked": clicked, "before": len(indices), "after": len(result)},
            )
        return result

    def set_full_duration(self) -> SlotSelection:
        return SlotSelection(slots=self._grid.labels, full_duration=True)

    def clear_duration(self) -> SlotSelection:
        return SlotSelection()
