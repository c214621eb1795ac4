import logging

from fastapi import FastAPI

from facility_booking.api.v1.bookings import router as bookings_router
from facility_booking.core.config import settings

# Every key passed through ``extra=`` somewhere in the package.
CONTEXT_KEYS = (
    "booking_id",
    "resource_key",
    "status",
    "action",
    "subject",
    "reason",
    "conflicts",
    "overlapping",
    "token",
    "latest",
    "clicked",
    "before",
    "after",
    "path",
)


class ContextFormatter(logging.Formatter):
    """Appends booking context fields as ``key=value`` pairs after the message."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = [
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_KEYS
            if getattr(record, key, None) not in (None, "")
        ]
        return f"{base} | {' '.join(extras)}" if extras else base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=f"{settings.FACILITY_NAME} Booking", version="1.0.0")
app.include_router(bookings_router, prefix="/api/v1", tags=["bookings"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "facility": settings.FACILITY_NAME}
