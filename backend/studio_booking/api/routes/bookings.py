"""
Booking endpoints for the signed-in user.
"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from studio_booking.api.dependencies import get_booking_service
from studio_booking.core.exceptions import InvalidRequestError
from studio_booking.core.security import get_current_user
from studio_booking.schemas.booking import (
    BookedSlotsResponse,
    BookingConfirmResponse,
    CancelBookingRequest,
    ConfirmBookingRequest,
    ConfirmPaymentRequest,
)
from studio_booking.schemas.common import MessageResponse
from studio_booking.services.booking_service import BookingService
from studio_booking.services.interfaces import IdentityUser

router = APIRouter(tags=["Bookings"])


@router.post("/confirm-booking", response_model=BookingConfirmResponse)
async def confirm_booking(
    data: ConfirmBookingRequest,
    background_tasks: BackgroundTasks,
    user: IdentityUser = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    """
    Create a booking, or edit one when editingBookingId is given.

    Paying with credits spends one credit from the caller's balance.
    Notification emails are sent after the response.
    """
    booking_id = await bookings.confirm_booking(user.uid, data, background_tasks, user_email=user.email)
    return BookingConfirmResponse(booking_id=booking_id)


@router.post("/cancel-booking", response_model=MessageResponse)
async def cancel_booking(
    data: CancelBookingRequest,
    background_tasks: BackgroundTasks,
    user: IdentityUser = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    """Delete one of the caller's bookings and its calendar event."""
    await bookings.cancel_booking(user.uid, data.booking_id, background_tasks, user_email=user.email)
    return MessageResponse(message="Booking cancelled successfully.")


@router.get("/check-booked-slots", response_model=BookedSlotsResponse)
async def check_booked_slots(
    date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    user: IdentityUser = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    """
    Booked slots for the booking calendar. Returns bookings for every date;
    the client filters by the date it asked for.
    """
    if not date:
        raise InvalidRequestError("Date parameter is required.")
    return BookedSlotsResponse(booked_slots=await bookings.list_booked_slots())


@router.post("/confirm-payment", response_model=MessageResponse)
async def confirm_payment(
    data: ConfirmPaymentRequest,
    user: IdentityUser = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    await bookings.confirm_payment(user.uid, data.booking_id)
    return MessageResponse(message="Payment confirmed successfully!")
