from functools import lru_cache
import logging

from facility_booking.core.config import settings
from facility_booking.application.ports.booking_store import BookingStorePort
from facility_booking.application.ports.identity_provider import IdentityProviderPort
from facility_booking.application.ports.notifier import NotifierPort
from facility_booking.application.ports.session_store import SessionStorePort
from facility_booking.application.use_cases.availability import AvailabilityChecker, AvailabilityMonitor
from facility_booking.application.use_cases.booking import BookingUseCase
from facility_booking.application.use_cases.booking_session import BookingSession
from facility_booking.application.use_cases.selection import SelectionEngine
from facility_booking.domain.entities.identity import Identity
from facility_booking.domain.entities.slot_grid import SlotGrid
from facility_booking.infrastructure.identity.static_identity import StaticIdentityProvider
from facility_booking.infrastructure.notify.logging_notifier import LoggingNotifier
from facility_booking.infrastructure.notify.webhook_notifier import WebhookNotifier
from facility_booking.infrastructure.store.json_store import JsonBookingStore
from facility_booking.infrastructure.store.memory_store import MemoryBookingStore
from facility_booking.infrastructure.store.session_store import MemorySessionStore


_booking_store: BookingStorePort | None = None


@lru_cache
def get_slot_grid() -> SlotGrid:
    return SlotGrid.build(
        open_time=settings.SLOT_OPEN_TIME,
        close_time=settings.SLOT_CLOSE_TIME,
        step_minutes=settings.SLOT_STEP_MINUTES,
        breaks=settings.SLOT_BREAKS,
    )


@lru_cache
def get_selection_engine() -> SelectionEngine:
    return SelectionEngine(get_slot_grid())


def get_booking_store() -> BookingStorePort:
    global _booking_store
    if _booking_store is None:
        if settings.STORE_PROVIDER.lower() == "json":
            _booking_store = JsonBookingStore(data_dir=settings.DATA_DIR)
        else:
            _booking_store = MemoryBookingStore()
    return _booking_store


@lru_cache
def get_session_store() -> SessionStorePort:
    return MemorySessionStore()


@lru_cache
def get_identity_provider() -> IdentityProviderPort:
    return StaticIdentityProvider(settings.APPROVER_EMAILS)


@lru_cache
def get_notifier() -> NotifierPort:
    logger = logging.getLogger(__name__)
    if settings.NOTIFY_ENABLED and settings.NOTIFY_WEBHOOK_URL:
        logger.info("Using WebhookNotifier")
        return WebhookNotifier(
            url=settings.NOTIFY_WEBHOOK_URL,
            full_duration_label=settings.FULL_DURATION_LABEL,
            timeout=settings.NOTIFY_TIMEOUT_SECONDS,
        )
    logger.info("Using LoggingNotifier (NOTIFY_ENABLED=%s, webhook configured=%s)",
                settings.NOTIFY_ENABLED, bool(settings.NOTIFY_WEBHOOK_URL))
    return LoggingNotifier(full_duration_label=settings.FULL_DURATION_LABEL)


def get_availability_checker() -> AvailabilityChecker:
    return AvailabilityChecker(get_booking_store())


def get_booking_use_case() -> BookingUseCase:
    return BookingUseCase(store=get_booking_store(), notifier=get_notifier())


def new_booking_session(identity: Identity) -> BookingSession:
    session = BookingSession(
        identity=identity,
        engine=get_selection_engine(),
        monitor=AvailabilityMonitor(get_availability_checker()),
    )
    get_session_store().put(session)
    return session
