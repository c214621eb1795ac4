from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

from facility_booking.application.exceptions import (
    BookingConflictError,
    BookingNotFoundError,
    BookingValidationError,
    PermissionDeniedError,
    StoreUnavailableError,
)
from facility_booking.application.ports.booking_store import BookingStorePort
from facility_booking.application.ports.notifier import NotifierPort
from facility_booking.application.use_cases.booking_session import BookingSession
from facility_booking.application.utils.interval import calendar_day, normalize
from facility_booking.domain.entities.booking import (
    BLOCKING_STATUSES,
    BookingDraft,
    BookingRecord,
    BookingStatus,
    assert_valid_transition,
)
from facility_booking.domain.entities.identity import Identity
from facility_booking.domain.entities.notification import BookingAction, BookingEvent

Reconciler = Callable[[BookingRecord], list[BookingRecord]]


@dataclass(frozen=True)
class SubmitResult:
    booking: BookingRecord
    notified: bool
    warning: str | None = None  # set when availability could not be confirmed


@dataclass(frozen=True)
class TransitionResult:
    booking: BookingRecord
    notified: bool


@dataclass(frozen=True)
class DashboardStats:
    total: int
    pending: int
    approved: int
    rejected: int


def find_double_bookings(store: BookingStorePort, record: BookingRecord) -> list[BookingRecord]:
    """Other blocking bookings for the same resource and day that share a slot with ``record``."""
    day = calendar_day(record.booking_date)
    slots = set(record.selected_slots)
    return [
        other
        for other in store.find(record.resource.resource_key, BLOCKING_STATUSES)
        if other.id != record.id
        and calendar_day(other.booking_date) == day
        and slots.intersection(other.selected_slots)
    ]


def _sort_time(record: BookingRecord) -> str:
    if record.start_time:
        return record.start_time
    return record.selected_slots[0] if record.selected_slots else "00:00"


class BookingUseCase:
    def __init__(
        self,
        store: BookingStorePort,
        notifier: NotifierPort,
        reconciler: Reconciler | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._reconciler = reconciler or (lambda record: find_double_bookings(store, record))
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def submit(self, session: BookingSession) -> SubmitResult:
        """
        Turn a session into a Pending booking.

        Refuses while the session's conflict report lists conflicts. If the
        report was computed for different inputs than the session now holds, a
        fresh check runs first. The check is advisory: another session can
        still commit an overlapping booking between check and insert.
        """
        self._validate(session)
        interval = normalize(session.selection, session.engine.grid)

        key = session.availability_key
        if key is not None and not session.monitor.is_current_for(key):
            await session.recheck()
        report = session.report
        if report.has_conflicts:
            self._logger.info(
                "Submission refused due to conflicts",
                extra={"resource_key": key.resource_key if key else None, "conflicts": len(report.conflicts)},
            )
            raise BookingConflictError(report, session.resource.conflict_label)

        identity = session.identity
        draft = BookingDraft(
            resource=session.resource,
            booking_date=session.booking_date,
            start_time=interval.start,
            end_time=interval.end,
            selected_slots=interval.ordered_slots,
            duration_type=session.selection.duration_type,
            details=session.details,
            requester_id=identity.user_id,
            requester_name=identity.name,
            requester_email=identity.email,
        )
        record = self._store.insert(draft)
        self._logger.info(
            "Booking created",
            extra={"booking_id": record.id, "resource_key": record.resource.resource_key, "status": record.status.value},
        )

        self._reconcile(record)
        notified = self._notify(BookingEvent(action=BookingAction.requested, booking=record))
        session.reset()
        return SubmitResult(booking=record, notified=notified, warning=report.warning)

    def approve(self, booking_id: str, reviewer: Identity) -> TransitionResult:
        self._require_approver(reviewer)
        return self._transition(booking_id, BookingStatus.approved, reviewer, None, BookingAction.approved)

    def reject(self, booking_id: str, reviewer: Identity, reason: str | None = None) -> TransitionResult:
        self._require_approver(reviewer)
        return self._transition(booking_id, BookingStatus.rejected, reviewer, reason, BookingAction.rejected)

    def cancel(self, booking_id: str, actor: Identity, reason: str | None = None) -> TransitionResult:
        booking = self._get(booking_id)
        if not actor.is_approver and booking.requester_id != actor.user_id:
            raise PermissionDeniedError("Only the requester or an approver can cancel this booking.")
        return self._transition(booking_id, BookingStatus.cancelled, actor, reason, BookingAction.cancelled)

    def pending_approvals(self, actor: Identity) -> list[BookingRecord]:
        self._require_approver(actor)
        records = self._store.list(status_in={BookingStatus.pending})
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def history(self, actor: Identity) -> list[BookingRecord]:
        records = self._store.list(requester_id=None if actor.is_approver else actor.user_id)
        return sorted(records, key=lambda r: calendar_day(r.booking_date), reverse=True)

    def dashboard_stats(self, actor: Identity) -> DashboardStats:
        records = self.history(actor)
        counts = {status: 0 for status in BookingStatus}
        for record in records:
            counts[record.status] += 1
        return DashboardStats(
            total=len(records),
            pending=counts[BookingStatus.pending],
            approved=counts[BookingStatus.approved],
            rejected=counts[BookingStatus.rejected],
        )

    def public_calendar(self, on_or_after: date) -> list[BookingRecord]:
        records = [
            r
            for r in self._store.list(status_in={BookingStatus.approved})
            if calendar_day(r.booking_date) >= on_or_after
        ]
        return sorted(records, key=lambda r: (calendar_day(r.booking_date), _sort_time(r)))

    def _transition(
        self,
        booking_id: str,
        target: BookingStatus,
        actor: Identity,
        reason: str | None,
        action: BookingAction,
    ) -> TransitionResult:
        booking = self._get(booking_id)
        assert_valid_transition(booking.status, target)
        updated = self._store.update_status(
            booking_id,
            target,
            reviewer=actor.email,
            reason=reason,
            reviewed_at=self._clock(),
        )
        self._logger.info(
            "Booking status changed",
            extra={"booking_id": booking_id, "status": target.value, "action": action.value},
        )
        notified = self._notify(BookingEvent(action=action, booking=updated, reason=reason))
        return TransitionResult(booking=updated, notified=notified)

    def _get(self, booking_id: str) -> BookingRecord:
        booking = self._store.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking not found: {booking_id}")
        return booking

    def _validate(self, session: BookingSession) -> None:
        if session.resource is None or not session.resource.is_complete:
            raise BookingValidationError("Please complete all required fields for the selected resource type.")
        if session.booking_date is None:
            raise BookingValidationError("Please select a booking date.")
        if session.details is None:
            raise BookingValidationError("Event details are required.")

    def _reconcile(self, record: BookingRecord) -> None:
        try:
            overlapping = self._reconciler(record)
        except StoreUnavailableError as e:
            self._logger.warning(
                "Double-booking reconciliation skipped, store unavailable",
                extra={"booking_id": record.id, "reason": str(e)},
            )
            return
        except Exception as e:
            self._logger.exception("Double-booking reconciliation failed", extra={"booking_id": record.id, "reason": str(e)})
            return
        if overlapping:
            self._logger.warning(
                "Double booking committed",
                extra={
                    "booking_id": record.id,
                    "resource_key": record.resource.resource_key,
                    "overlapping": [o.id for o in overlapping],
                },
            )

    def _notify(self, event: BookingEvent) -> bool:
        try:
            self._notifier.notify(event)
            return True
        except Exception as e:
            self._logger.exception(
                "Notification failed",
                extra={"booking_id": event.booking.id, "action": event.action.value, "reason": str(e)},
            )
            return False

    @staticmethod
    def _require_approver(actor: Identity) -> None:
        if not actor.is_approver:
            raise PermissionDeniedError("Approver role required.")
