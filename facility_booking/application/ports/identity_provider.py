from abc import ABC, abstractmethod

from facility_booking.domain.entities.identity import Identity


class IdentityProviderPort(ABC):
    @abstractmethod
    def resolve(self, user_id: str, email: str, name: str | None = None) -> Identity:
        """Resolve the caller's identity and role. Called once per booking session."""
        raise NotImplementedError
