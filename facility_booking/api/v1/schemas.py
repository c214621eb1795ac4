from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from facility_booking.application.utils.interval import format_time_display
from facility_booking.domain.entities.booking import (
    BookingRecord,
    BookingStatus,
    EventDetails,
    ResourceKind,
    ResourceRef,
)
from facility_booking.domain.entities.conflict import ConflictReport
from facility_booking.domain.entities.identity import Role


class SlotGridSchema(BaseModel):
    slots: list[str]
    step_minutes: int


class ResourceSchema(BaseModel):
    kind: ResourceKind
    resource_id: str | None = None
    sub_area: str | None = None
    name: str | None = None

    def to_entity(self) -> ResourceRef:
        return ResourceRef(kind=self.kind, resource_id=self.resource_id, sub_area=self.sub_area, name=self.name)


class EventDetailsSchema(BaseModel):
    event_title: str = Field(min_length=1)
    event_description: str = Field(min_length=1)
    attendees: int = Field(ge=1)
    department_category: str = Field(min_length=1)
    department: str = Field(min_length=1)
    faculty_incharge: str = Field(min_length=2)
    contact_number: str = Field(min_length=10, max_length=15)
    contact_email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

    def to_entity(self) -> EventDetails:
        return EventDetails(**self.model_dump())


class SessionContextSchema(BaseModel):
    resource: ResourceSchema | None = None
    booking_date: date | None = None
    details: EventDetailsSchema | None = None


class ToggleSchema(BaseModel):
    slot: str


class ReasonSchema(BaseModel):
    reason: str | None = None


class ConflictSchema(BaseModel):
    booking_id: str
    event_title: str
    department: str
    slots: list[str]
    status: BookingStatus


class ConflictReportSchema(BaseModel):
    conflicts: list[ConflictSchema] = Field(default_factory=list)
    confirmed: bool = True
    warning: str | None = None
    message: str | None = None

    @classmethod
    def from_report(cls, report: ConflictReport, resource_label: str = "resource") -> "ConflictReportSchema":
        return cls(
            conflicts=[
                ConflictSchema(
                    booking_id=c.booking_id,
                    event_title=c.event_title,
                    department=c.department,
                    slots=list(c.slots),
                    status=c.status,
                )
                for c in report.conflicts
            ],
            confirmed=report.confirmed,
            warning=report.warning,
            message=report.message(resource_label),
        )


class SessionSchema(BaseModel):
    session_id: str
    role: Role
    resource: ResourceSchema | None = None
    booking_date: date | None = None
    selected_slots: list[str] = Field(default_factory=list)
    duration_type: str = "custom"
    full_duration: bool = False
    availability: ConflictReportSchema = Field(default_factory=ConflictReportSchema)


class BookingSchema(BaseModel):
    id: str
    resource_type: ResourceKind
    resource_key: str
    resource_name: str
    facility: str
    booking_date: date
    status: BookingStatus
    start_time: str | None = None
    end_time: str | None = None
    selected_slots: list[str] = Field(default_factory=list)
    duration_type: str
    time_display: str
    event_title: str
    department: str
    attendees: int
    requester_name: str
    requester_email: str
    created_at: datetime
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    rejection_reason: str | None = None
    cancelled_by: str | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None

    @classmethod
    def from_record(cls, record: BookingRecord, full_duration_label: str) -> "BookingSchema":
        return cls(
            id=record.id,
            resource_type=record.resource.kind,
            resource_key=record.resource.resource_key,
            resource_name=record.resource.display_name,
            facility=record.resource.facility,
            booking_date=record.booking_date,
            status=record.status,
            start_time=record.start_time,
            end_time=record.end_time,
            selected_slots=list(record.selected_slots),
            duration_type=record.duration_type,
            time_display=format_time_display(record, full_duration_label),
            event_title=record.details.event_title,
            department=record.details.department,
            attendees=record.details.attendees,
            requester_name=record.requester_name,
            requester_email=record.requester_email,
            created_at=record.created_at,
            reviewed_by=record.reviewed_by,
            reviewed_at=record.reviewed_at,
            rejection_reason=record.rejection_reason,
            cancelled_by=record.cancelled_by,
            cancelled_at=record.cancelled_at,
            cancellation_reason=record.cancellation_reason,
        )


class SubmitResponseSchema(BaseModel):
    booking: BookingSchema
    notified: bool
    warning: str | None = None


class TransitionResponseSchema(BaseModel):
    booking: BookingSchema
    notified: bool


class DashboardStatsSchema(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int
