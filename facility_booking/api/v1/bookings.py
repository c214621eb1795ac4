from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from facility_booking.api.v1.schemas import (
    BookingSchema,
    ConflictReportSchema,
    DashboardStatsSchema,
    ReasonSchema,
    ResourceSchema,
    SessionContextSchema,
    SessionSchema,
    SlotGridSchema,
    SubmitResponseSchema,
    ToggleSchema,
    TransitionResponseSchema,
)
from facility_booking.application.exceptions import (
    BookingConflictError,
    BookingNotFoundError,
    BookingValidationError,
    InvalidSlotLabelError,
    InvalidTransitionError,
    PermissionDeniedError,
    SchedulingError,
    StoreUnavailableError,
)
from facility_booking.application.use_cases.booking import BookingUseCase
from facility_booking.application.use_cases.booking_session import BookingSession
from facility_booking.core.config import settings
from facility_booking.domain.entities.identity import Identity
from facility_booking.wiring.dependencies import (
    get_booking_use_case,
    get_identity_provider,
    get_session_store,
    get_slot_grid,
    new_booking_session,
)

router = APIRouter()


def get_identity(
    x_user_id: str = Header(...),
    x_user_email: str = Header(...),
    x_user_name: str | None = Header(None),
) -> Identity:
    return get_identity_provider().resolve(x_user_id, x_user_email, x_user_name)


def get_session(session_id: str, identity: Identity = Depends(get_identity)) -> BookingSession:
    session = get_session_store().get(session_id)
    if session is None or session.identity.user_id != identity.user_id:
        raise HTTPException(status_code=404, detail="Booking session not found")
    return session


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, InvalidSlotLabelError):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, (SchedulingError, BookingValidationError)):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, BookingConflictError):
        return HTTPException(
            status_code=409,
            detail=ConflictReportSchema.from_report(e.report, e.resource_label).model_dump(mode="json"),
        )
    if isinstance(e, InvalidTransitionError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, PermissionDeniedError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, BookingNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, StoreUnavailableError):
        return HTTPException(status_code=503, detail="Booking service temporarily unavailable. Please retry.")
    raise e


def _resource_label(session: BookingSession) -> str:
    return session.resource.conflict_label if session.resource is not None else "resource"


def _session_view(session: BookingSession) -> SessionSchema:
    resource = session.resource
    return SessionSchema(
        session_id=session.id,
        role=session.identity.role,
        resource=(
            ResourceSchema(kind=resource.kind, resource_id=resource.resource_id, sub_area=resource.sub_area, name=resource.name)
            if resource else None
        ),
        booking_date=session.booking_date,
        selected_slots=list(session.selection.slots),
        duration_type=session.selection.duration_type,
        full_duration=session.selection.full_duration,
        availability=ConflictReportSchema.from_report(session.report, _resource_label(session)),
    )


def _booking_view(record) -> BookingSchema:
    return BookingSchema.from_record(record, settings.FULL_DURATION_LABEL)


@router.get("/slots", response_model=SlotGridSchema)
def list_slots():
    grid = get_slot_grid()
    return SlotGridSchema(slots=list(grid.labels), step_minutes=grid.step_minutes)


@router.post("/sessions", response_model=SessionSchema, status_code=201)
def create_session(identity: Identity = Depends(get_identity)):
    return _session_view(new_booking_session(identity))


@router.get("/sessions/{session_id}", response_model=SessionSchema)
def read_session(session: BookingSession = Depends(get_session)):
    return _session_view(session)


@router.delete("/sessions/{session_id}", status_code=204)
def discard_session(session: BookingSession = Depends(get_session)):
    session.monitor.reset()
    get_session_store().discard(session.id)


@router.put("/sessions/{session_id}/context", response_model=SessionSchema)
async def update_context(req: SessionContextSchema, session: BookingSession = Depends(get_session)):
    await session.update_context(
        resource=req.resource.to_entity() if req.resource else None,
        booking_date=req.booking_date,
        details=req.details.to_entity() if req.details else None,
    )
    return _session_view(session)


@router.post("/sessions/{session_id}/toggle", response_model=SessionSchema)
async def toggle_slot(req: ToggleSchema, session: BookingSession = Depends(get_session)):
    try:
        await session.toggle(req.slot)
    except SchedulingError as e:
        raise _http_error(e)
    return _session_view(session)


@router.post("/sessions/{session_id}/full-duration", response_model=SessionSchema)
async def set_full_duration(session: BookingSession = Depends(get_session)):
    await session.set_full_duration()
    return _session_view(session)


@router.delete("/sessions/{session_id}/full-duration", response_model=SessionSchema)
async def clear_full_duration(session: BookingSession = Depends(get_session)):
    await session.clear_duration()
    return _session_view(session)


@router.post("/sessions/{session_id}/submit", response_model=SubmitResponseSchema, status_code=201)
async def submit_session(
    session: BookingSession = Depends(get_session),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        result = await uc.submit(session)
    except (SchedulingError, BookingValidationError, BookingConflictError, StoreUnavailableError) as e:
        raise _http_error(e)
    return SubmitResponseSchema(booking=_booking_view(result.booking), notified=result.notified, warning=result.warning)


@router.get("/bookings", response_model=list[BookingSchema])
def booking_history(
    identity: Identity = Depends(get_identity),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        return [_booking_view(r) for r in uc.history(identity)]
    except StoreUnavailableError as e:
        raise _http_error(e)


@router.get("/bookings/pending", response_model=list[BookingSchema])
def pending_bookings(
    identity: Identity = Depends(get_identity),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        return [_booking_view(r) for r in uc.pending_approvals(identity)]
    except (PermissionDeniedError, StoreUnavailableError) as e:
        raise _http_error(e)


@router.get("/bookings/stats", response_model=DashboardStatsSchema)
def booking_stats(
    identity: Identity = Depends(get_identity),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        stats = uc.dashboard_stats(identity)
    except StoreUnavailableError as e:
        raise _http_error(e)
    return DashboardStatsSchema(total=stats.total, pending=stats.pending, approved=stats.approved, rejected=stats.rejected)


@router.get("/calendar", response_model=list[BookingSchema])
def public_calendar(
    on_or_after: date | None = Query(None),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    start = on_or_after or datetime.now(ZoneInfo(settings.FACILITY_TIMEZONE)).date()
    try:
        return [_booking_view(r) for r in uc.public_calendar(start)]
    except StoreUnavailableError as e:
        raise _http_error(e)


@router.post("/bookings/{booking_id}/approve", response_model=TransitionResponseSchema)
def approve_booking(
    booking_id: str,
    identity: Identity = Depends(get_identity),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        result = uc.approve(booking_id, identity)
    except (PermissionDeniedError, BookingNotFoundError, InvalidTransitionError, StoreUnavailableError) as e:
        raise _http_error(e)
    return TransitionResponseSchema(booking=_booking_view(result.booking), notified=result.notified)


@router.post("/bookings/{booking_id}/reject", response_model=TransitionResponseSchema)
def reject_booking(
    booking_id: str,
    req: ReasonSchema,
    identity: Identity = Depends(get_identity),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        result = uc.reject(booking_id, identity, req.reason)
    except (PermissionDeniedError, BookingNotFoundError, InvalidTransitionError, StoreUnavailableError) as e:
        raise _http_error(e)
    return TransitionResponseSchema(booking=_booking_view(result.booking), notified=result.notified)


@router.post("/bookings/{booking_id}/cancel", response_model=TransitionResponseSchema)
def cancel_booking(
    booking_id: str,
    req: ReasonSchema,
    identity: Identity = Depends(get_identity),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        result = uc.cancel(booking_id, identity, req.reason)
    except (PermissionDeniedError, BookingNotFoundError, InvalidTransitionError, StoreUnavailableError) as e:
        raise _http_error(e)
    return TransitionResponseSchema(booking=_booking_view(result.booking), notified=result.notified)
