"""
Pydantic schemas for profile and account administration.
"""

from typing import Optional

from pydantic import EmailStr, Field, StrictInt

from studio_booking.schemas.common import CamelModel

ROLE_ADMIN = "admin"


class UpdateProfileRequest(CamelModel):
    # Checked in the service so the error names the field the way clients expect
    display_name: Optional[str] = None
    email: Optional[str] = None


class CreateUserRequest(CamelModel):
    email: EmailStr
    display_name: Optional[str] = Field(None, max_length=255)


class CreatedUserResponse(CamelModel):
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class AddCreditsRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    amount: StrictInt
