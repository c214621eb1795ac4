from __future__ import annotations

import threading

from facility_booking.application.ports.session_store import SessionStorePort
from facility_booking.application.use_cases.booking_session import BookingSession


class MemorySessionStore(SessionStorePort):
    def __init__(self, limit: int = 500) -> None:
        self._sessions: dict[str, BookingSession] = {}
        self._limit = limit
        self._lock = threading.Lock()

    def put(self, session: BookingSession) -> None:
        with self._lock:
            self._sessions[session.id] = session
            # Drop the oldest abandoned forms once over the limit.
            while len(self._sessions) > self._limit:
                self._sessions.pop(next(iter(self._sessions)))

    def get(self, session_id: str) -> BookingSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
