"""
Profile endpoint for the signed-in user.
"""

from fastapi import APIRouter, Depends

from studio_booking.api.dependencies import get_account_service
from studio_booking.core.security import get_current_user
from studio_booking.schemas.common import MessageResponse
from studio_booking.schemas.profile import UpdateProfileRequest
from studio_booking.services.account_service import AccountService
from studio_booking.services.interfaces import IdentityUser

router = APIRouter(tags=["Profile"])


@router.post("/update-profile", response_model=MessageResponse)
async def update_profile(
    data: UpdateProfileRequest,
    user: IdentityUser = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    """Set the caller's display name in the identity provider and profile."""
    await accounts.update_profile(user.uid, data)
    return MessageResponse(message="User profile updated successfully!")
