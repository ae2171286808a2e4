"""
Pydantic schemas for booking-related request/response validation.
"""

import datetime
from typing import Any, Literal, Optional

from pydantic import ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from studio_booking.schemas.common import CamelModel

EquipmentCategory = Literal["player", "mixer", "extra"]

PAYMENT_METHOD_CREDITS = "credits"
PAYMENT_STATUS_PAID = "paid"


class EquipmentItem(CamelModel):
    id: str = Field(..., min_length=1)
    name: Optional[str] = None
    category: EquipmentCategory

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    @property
    def label(self) -> str:
        return self.name or self.id


class BookingData(CamelModel):
    """
    Booking fields as sent by the client and stored on the booking document.
    Unknown fields are kept so the frontend can store its own extras.
    """

    date: datetime.date
    time: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    duration: float = Field(..., gt=0, le=24)
    equipment: list[EquipmentItem] = Field(default_factory=list)
    payment_method: Optional[str] = None
    payment_status: Optional[str] = None
    user_name: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    @property
    def start_time(self) -> datetime.time:
        return datetime.time.fromisoformat(self.time)

    def equipment_in(self, category: str) -> list[EquipmentItem]:
        return [item for item in self.equipment if item.category == category]

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ConfirmBookingRequest(CamelModel):
    booking_data: BookingData
    user_name: Optional[str] = None
    editing_booking_id: Optional[str] = None


class AdminConfirmBookingRequest(ConfirmBookingRequest):
    user_id: str = Field(..., min_length=1)


class AdminCreateBookingRequest(CamelModel):
    booking_data: BookingData
    user_name: Optional[str] = None
    user_email: EmailStr


class CancelBookingRequest(CamelModel):
    booking_id: str = Field(..., min_length=1)


class AdminCancelBookingRequest(CancelBookingRequest):
    user_id: str = Field(..., min_length=1)


class ConfirmPaymentRequest(CamelModel):
    booking_id: str = Field(..., min_length=1)


class BookingConfirmResponse(CamelModel):
    success: bool = True
    booking_id: str


class BookedSlotsResponse(CamelModel):
    booked_slots: list[dict[str, Any]]
