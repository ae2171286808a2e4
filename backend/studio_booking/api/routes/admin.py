"""
Administrator endpoints. Every route requires a profile with the admin role.
"""

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, status

from studio_booking.api.dependencies import get_account_service, get_booking_service
from studio_booking.core.logging import get_logger
from studio_booking.core.security import require_admin
from studio_booking.schemas.booking import (
    AdminCancelBookingRequest,
    AdminConfirmBookingRequest,
    AdminCreateBookingRequest,
    BookingConfirmResponse,
    ConfirmBookingRequest,
)
from studio_booking.schemas.common import MessageResponse
from studio_booking.schemas.profile import AddCreditsRequest, CreatedUserResponse, CreateUserRequest
from studio_booking.services.account_service import AccountService
from studio_booking.services.booking_service import BookingService
from studio_booking.services.interfaces import IdentityUser

logger = get_logger(__name__)
router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/bookings", response_model=list[dict[str, Any]])
async def list_all_bookings(
    admin: IdentityUser = Depends(require_admin),
    bookings: BookingService = Depends(get_booking_service),
):
    """All bookings of all users, newest date first."""
    return await bookings.list_all_bookings()


@router.get("/users", response_model=list[dict[str, Any]])
async def list_users(
    admin: IdentityUser = Depends(require_admin),
    accounts: AccountService = Depends(get_account_service),
):
    """All user profiles, for the admin user picker."""
    return await accounts.list_profiles()


@router.post("/bookings", response_model=BookingConfirmResponse)
async def create_booking_for_user(
    data: AdminCreateBookingRequest,
    background_tasks: BackgroundTasks,
    admin: IdentityUser = Depends(require_admin),
    bookings: BookingService = Depends(get_booking_service),
):
    """Create a booking for the user registered under userEmail."""
    request = ConfirmBookingRequest(booking_data=data.booking_data, user_name=data.user_name)
    target_uid, booking_id = await bookings.create_booking_for_email(str(data.user_email), request, background_tasks)
    logger.info("admin_booking_created", admin_id=admin.uid, target_user_id=target_uid, booking_id=booking_id)
    return BookingConfirmResponse(booking_id=booking_id)


@router.post("/add-credits", response_model=MessageResponse)
async def add_credits(
    data: AddCreditsRequest,
    admin: IdentityUser = Depends(require_admin),
    accounts: AccountService = Depends(get_account_service),
):
    """Adjust a user's credit balance by a signed amount."""
    await accounts.add_credits(data.user_id, data.amount)
    return MessageResponse(message=f"Added {data.amount} credits to user {data.user_id}.")


@router.post("/create-user", response_model=CreatedUserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: CreateUserRequest,
    background_tasks: BackgroundTasks,
    admin: IdentityUser = Depends(require_admin),
    accounts: AccountService = Depends(get_account_service),
):
    """
    Create an account for a new client. The client receives an email with a
    link to set their password.
    """
    user = await accounts.create_user(data, background_tasks)
    return CreatedUserResponse(uid=user.uid, email=user.email, display_name=user.display_name)


@router.post("/confirm-booking", response_model=BookingConfirmResponse)
async def confirm_booking_for_user(
    data: AdminConfirmBookingRequest,
    background_tasks: BackgroundTasks,
    admin: IdentityUser = Depends(require_admin),
    bookings: BookingService = Depends(get_booking_service),
):
    """Create or edit a booking owned by userId."""
    booking_id = await bookings.confirm_booking(data.user_id, data, background_tasks)
    return BookingConfirmResponse(booking_id=booking_id)


@router.post("/cancel-booking", response_model=MessageResponse)
async def cancel_booking_for_user(
    data: AdminCancelBookingRequest,
    background_tasks: BackgroundTasks,
    admin: IdentityUser = Depends(require_admin),
    bookings: BookingService = Depends(get_booking_service),
):
    await bookings.cancel_booking(data.user_id, data.booking_id, background_tasks)
    return MessageResponse(message="Booking cancelled successfully by admin.")
