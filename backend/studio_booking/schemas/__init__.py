from studio_booking.schemas.common import CamelModel, MessageResponse
from studio_booking.schemas.booking import (
    BookingData, EquipmentItem,
    ConfirmBookingRequest, AdminConfirmBookingRequest, AdminCreateBookingRequest,
    CancelBookingRequest, AdminCancelBookingRequest, ConfirmPaymentRequest,
    BookingConfirmResponse, BookedSlotsResponse,
)
from studio_booking.schemas.profile import (
    UpdateProfileRequest, CreateUserRequest, CreatedUserResponse, AddCreditsRequest,
)

__all__ = [
    "CamelModel", "MessageResponse",
    "BookingData", "EquipmentItem",
    "ConfirmBookingRequest", "AdminConfirmBookingRequest", "AdminCreateBookingRequest",
    "CancelBookingRequest", "AdminCancelBookingRequest", "ConfirmPaymentRequest",
    "BookingConfirmResponse", "BookedSlotsResponse",
    "UpdateProfileRequest", "CreateUserRequest", "CreatedUserResponse", "AddCreditsRequest",
]
