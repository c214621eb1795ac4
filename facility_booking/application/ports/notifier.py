from abc import ABC, abstractmethod

from facility_booking.domain.entities.notification import BookingEvent


class NotifierPort(ABC):
    @abstractmethod
    def notify(self, event: BookingEvent) -> None:
        raise NotImplementedError
