from __future__ import annotations

from collections.abc import Iterable

from facility_booking.application.ports.identity_provider import IdentityProviderPort
from facility_booking.domain.entities.identity import Identity, Role


class StaticIdentityProvider(IdentityProviderPort):
    """Grants the Approver role to a configured set of email addresses."""

    def __init__(self, approver_emails: Iterable[str] = ()) -> None:
        self._approvers = {e.strip().lower() for e in approver_emails if e and e.strip()}

    def resolve(self, user_id: str, email: str, name: str | None = None) -> Identity:
        normalized = (email or "").strip().lower()
        role = Role.approver if normalized in self._approvers else Role.requester
        display = (name or "").strip() or normalized.split("@")[0] or "Anonymous"
        return Identity(user_id=user_id, email=normalized, name=display, role=role)
