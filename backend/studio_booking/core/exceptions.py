"""
API error taxonomy.

Every error the API reports deliberately is a subclass of ``BookingAPIError``.
Infrastructure adapters translate SDK exceptions into these types so routes
and services never deal with provider-specific errors. The handler in
``studio_booking.main`` renders them as ``{"error": message}``.
"""

from typing import Optional

from fastapi import status


class BookingAPIError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class UnauthorizedError(BookingAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(BookingAPIError):
    status_code = status.HTTP_403_FORBIDDEN


class InvalidRequestError(BookingAPIError):
    status_code = status.HTTP_400_BAD_REQUEST


class PaymentError(BookingAPIError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(BookingAPIError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(BookingAPIError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(BookingAPIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StorageError(InternalError):
    """Document store read/write failed."""


class CalendarError(InternalError):
    """Calendar API call failed."""


class IdentityProviderError(InternalError):
    """Identity provider call failed for a reason other than bad input."""
