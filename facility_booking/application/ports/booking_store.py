from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from facility_booking.domain.entities.booking import BookingDraft, BookingRecord, BookingStatus


class BookingStorePort(ABC):
    @abstractmethod
    def find(self, resource_key: str, status_in: Iterable[BookingStatus]) -> list[BookingRecord]:
        """Return bookings for a resource whose status is in ``status_in``.

        Date filtering is left to the caller.
        """
        raise NotImplementedError

    @abstractmethod
    def insert(self, draft: BookingDraft) -> BookingRecord:
        raise NotImplementedError

    @abstractmethod
    def update_status(
        self,
        booking_id: str,
        new_status: BookingStatus,
        reviewer: str,
        reason: str | None = None,
        reviewed_at: datetime | None = None,
    ) -> BookingRecord:
        """
        Persist a status change and return the updated record.
        Rejection stores ``reason`` as the rejection reason, cancellation as the
        cancellation reason.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: str) -> BookingRecord | None:
        raise NotImplementedError

    @abstractmethod
    def list(
        self,
        requester_id: str | None = None,
        status_in: Iterable[BookingStatus] | None = None,
    ) -> list[BookingRecord]:
        raise NotImplementedError
