from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from facility_booking.domain.entities.conflict import ConflictReport


class SchedulingError(ValueError):
    """Base class for contract violations inside the scheduling core."""
    pass


class InvalidSlotLabelError(SchedulingError):
    """Raised when a label outside the slot grid reaches the engine."""

    def __init__(self, label: str) -> None:
        super().__init__(f"Unknown time slot: {label!r}")
        self.label = label


class EmptySelectionError(SchedulingError):
    """Raised when an empty selection is normalized for submission."""

    def __init__(self, message: str = "Please select at least one time slot.") -> None:
        super().__init__(message)


class FullDurationActiveError(SchedulingError):
    """Raised when a manual toggle arrives while full-duration mode is on."""

    def __init__(self, message: str = "Clear the full-day duration before picking individual slots.") -> None:
        super().__init__(message)


class BookingValidationError(ValueError):
    """Raised when required booking form fields are missing or malformed."""
    pass


class BookingConflictError(RuntimeError):
    """Raised when submission is refused because the current report has conflicts."""

    def __init__(self, report: "ConflictReport", resource_label: str = "resource") -> None:
        super().__init__(report.message(resource_label) or "Booking conflict detected.")
        self.report = report
        self.resource_label = resource_label


class InvalidTransitionError(ValueError):
    """Raised when a booking status change is not allowed by the transition table."""
    pass


class PermissionDeniedError(PermissionError):
    pass


class BookingNotFoundError(LookupError):
    pass


class StoreUnavailableError(RuntimeError):
    """Raised when the booking store fails (I/O errors, corrupted files, network)."""
    pass


class NotificationError(RuntimeError):
    """Raised when a notifier transport fails to deliver an event."""
    pass
