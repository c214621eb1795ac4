from __future__ import annotations

from typing import Any

from facility_booking.application.utils.interval import FULL_DURATION_LABEL, calendar_day, format_time_display
from facility_booking.domain.entities.notification import BookingAction, BookingEvent

_HEADLINES = {
    BookingAction.requested: "A new booking request requires your approval.",
    BookingAction.approved: "Your booking request has been approved.",
    BookingAction.rejected: "Your booking request has been rejected.",
    BookingAction.cancelled: "Your booking has been cancelled.",
}


def build_payload(event: BookingEvent, full_duration_label: str = FULL_DURATION_LABEL) -> dict[str, Any]:
    """Flatten a lifecycle event into the message body handed to a notifier transport."""
    booking = event.booking
    details = booking.details
    # Requests go to approvers; decisions go back to the requester.
    recipient = None if event.action == BookingAction.requested else booking.requester_email
    return {
        "subject": event.subject,
        "action": event.action.value,
        "headline": _HEADLINES[event.action],
        "recipient": recipient,
        "booking_id": booking.id,
        "status": booking.status.value,
        "event_title": details.event_title,
        "resource": booking.resource.display_name,
        "facility": booking.resource.facility,
        "date": calendar_day(booking.booking_date).strftime("%A, %B %d, %Y"),
        "time": format_time_display(booking, full_duration_label),
        "attendees": details.attendees,
        "department": details.department,
        "faculty_incharge": details.faculty_incharge,
        "requester_name": booking.requester_name,
        "requester_email": booking.requester_email,
        "reason": event.reason,
    }
