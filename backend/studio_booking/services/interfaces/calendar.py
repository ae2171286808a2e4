"""
Calendar interface. One booking maps to one event on a fixed calendar.
"""

from abc import ABC, abstractmethod
from typing import Optional

from studio_booking.schemas.booking import BookingData


class CalendarGateway(ABC):
    """
    Implementations:
    - GoogleCalendarClient: Google Calendar v3 REST API

    All methods raise CalendarError on failure; there are no retries.
    """

    @abstractmethod
    async def create_event(self, booking_id: str, booking: BookingData, user_email: Optional[str]) -> str:
        """Create the event and return its id."""

    @abstractmethod
    async def update_event(self, event_id: str, booking: BookingData, user_email: Optional[str]) -> None:
        pass

    @abstractmethod
    async def delete_event(self, event_id: str) -> None:
        pass
