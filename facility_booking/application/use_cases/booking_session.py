from __future__ import annotations

import logging
import uuid
from datetime import date

from facility_booking.application.use_cases.availability import AvailabilityMonitor
from facility_booking.application.use_cases.selection import SelectionEngine
from facility_booking.domain.entities.booking import EventDetails, ResourceRef
from facility_booking.domain.entities.conflict import AvailabilityKey, ConflictReport
from facility_booking.domain.entities.identity import Identity
from facility_booking.domain.entities.selection import SlotSelection


class BookingSession:
    """
    One in-progress booking form.

    Any change to resource, date or selection re-runs the availability check
    once all three are known; until then the conflict report is cleared.
    """

    def __init__(
        self,
        identity: Identity,
        engine: SelectionEngine,
        monitor: AvailabilityMonitor,
        session_id: str | None = None,
    ) -> None:
        self.id = session_id or uuid.uuid4().hex
        self.identity = identity
        self.resource: ResourceRef | None = None
        self.booking_date: date | None = None
        self.details: EventDetails | None = None
        self.selection = SlotSelection()
        self._engine = engine
        self._monitor = monitor
        self._logger = logging.getLogger(__name__)

    @property
    def engine(self) -> SelectionEngine:
        return self._engine

    @property
    def monitor(self) -> AvailabilityMonitor:
        return self._monitor

    @property
    def report(self) -> ConflictReport:
        return self._monitor.current

    @property
    def availability_key(self) -> AvailabilityKey | None:
        if self.resource is None or not self.resource.is_complete or self.booking_date is None:
            return None
        if self.selection.is_empty:
            return None
        return AvailabilityKey(
            resource_key=self.resource.resource_key,
            booking_date=self.booking_date,
            slots=frozenset(self.selection.slots),
        )

    async def toggle(self, label: str) -> SlotSelection:
        self.selection = self._engine.toggle(self.selection, label)
        await self.recheck()
        return self.selection

    async def set_full_duration(self) -> SlotSelection:
        self.selection = self._engine.set_full_duration()
        await self.recheck()
        return self.selection

    async def clear_duration(self) -> SlotSelection:
        self.selection = self._engine.clear_duration()
        await self.recheck()
        return self.selection

    async def update_context(
        self,
        resource: ResourceRef | None = None,
        booking_date: date | None = None,
        details: EventDetails | None = None,
    ) -> None:
        if details is not None:
            self.details = details
        changed = False
        if resource is not None and resource != self.resource:
            self.resource = resource
            changed = True
        if booking_date is not None and booking_date != self.booking_date:
            self.booking_date = booking_date
            changed = True
        if changed:
            await self.recheck()

    async def recheck(self) -> ConflictReport:
        key = self.availability_key
        if key is None:
            self._monitor.reset()
            return self._monitor.current
        return await self._monitor.refresh(key.resource_key, key.booking_date, self.selection.slots)

    def reset(self) -> None:
        self.selection = self._engine.clear_duration()
        self.resource = None
        self.booking_date = None
        self.details = None
        self._monitor.reset()
