from __future__ import annotations

import asyncio
import itertools
import logging
import threading
from collections.abc import Iterable
from datetime import date

from facility_booking.application.exceptions import StoreUnavailableError
from facility_booking.application.ports.booking_store import BookingStorePort
from facility_booking.application.utils.interval import calendar_day
from facility_booking.domain.entities.booking import BLOCKING_STATUSES, BookingRecord
from facility_booking.domain.entities.conflict import AvailabilityKey, Conflict, ConflictReport

UNCONFIRMED_WARNING = "Availability could not be confirmed. You may continue, but the slot might already be taken."


class AvailabilityChecker:
    """Advisory overlap check against committed bookings. Never reserves anything."""

    def __init__(self, store: BookingStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def check_conflicts(self, resource_key: str, booking_date: date, candidate_slots: Iterable[str]) -> ConflictReport:
        key = AvailabilityKey(resource_key=resource_key, booking_date=booking_date, slots=frozenset(candidate_slots))
        if not key.slots:
            return ConflictReport(key=key)

        try:
            bookings = self._store.find(resource_key, BLOCKING_STATUSES)
        except StoreUnavailableError as e:
            # Fail open: the user may proceed, flagged as unconfirmed.
            self._logger.warning(
                "Availability check failed, continuing unconfirmed",
                extra={"resource_key": resource_key, "reason": str(e)},
            )
            return ConflictReport(key=key, confirmed=False, warning=UNCONFIRMED_WARNING)

        conflicts = [
            _to_conflict(booking)
            for booking in bookings
            if booking.status in BLOCKING_STATUSES
            and calendar_day(booking.booking_date) == booking_date
            and key.slots.intersection(booking.selected_slots)
        ]
        if conflicts:
            self._logger.info(
                "Booking conflict detected",
                extra={"resource_key": resource_key, "conflicts": len(conflicts)},
            )
        return ConflictReport(key=key, conflicts=tuple(conflicts))


def _to_conflict(booking: BookingRecord) -> Conflict:
    return Conflict(
        booking_id=booking.id,
        event_title=booking.details.event_title,
        department=booking.details.department,
        slots=tuple(booking.selected_slots),
        status=booking.status,
    )


class AvailabilityMonitor:
    """
    Holds the visible conflict report for one booking session.

    Each check takes a token from a monotonically increasing counter; a result
    is applied only if its token is still the latest one issued, so a slow
    response that was overtaken by a newer request is dropped.
    """

    def __init__(self, checker: AvailabilityChecker) -> None:
        self._checker = checker
        self._counter = itertools.count(1)
        self._latest_token = 0
        self._current = ConflictReport()
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @property
    def current(self) -> ConflictReport:
        return self._current

    def is_current_for(self, key: AvailabilityKey) -> bool:
        return self._current.key == key

    def begin(self) -> int:
        with self._lock:
            self._latest_token = next(self._counter)
            return self._latest_token

    def apply(self, token: int, report: ConflictReport) -> bool:
        with self._lock:
            if token != self._latest_token:
                self._logger.debug(
                    "Discarding stale availability result",
                    extra={"token": token, "latest": self._latest_token},
                )
                return False
            self._current = report
            return True

    def reset(self) -> None:
        """Clear the visible report and invalidate any check still in flight."""
        with self._lock:
            self._latest_token = next(self._counter)
            self._current = ConflictReport()

    async def refresh(self, resource_key: str, booking_date: date, slots: Iterable[str]) -> ConflictReport:
        token = self.begin()
        candidate = tuple(slots)
        report = await asyncio.to_thread(self._checker.check_conflicts, resource_key, booking_date, candidate)
        self.apply(token, report)
        return self._current
