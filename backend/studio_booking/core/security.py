"""
Request authentication and admin authorization dependencies.
"""

from typing import Optional

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from studio_booking.api.dependencies import get_account_service, get_identity
from studio_booking.core.exceptions import ForbiddenError, UnauthorizedError
from studio_booking.core.logging import get_logger
from studio_booking.services.account_service import AccountService
from studio_booking.services.interfaces import IdentityProvider, IdentityUser

logger = get_logger(__name__)

# auto_error=False so a missing header is reported as 401 in our error format
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: IdentityProvider = Depends(get_identity),
) -> IdentityUser:
    """Verify the bearer ID token and return the caller's identity."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Unauthorized")

    user = await identity.verify_token(credentials.credentials)
    structlog.contextvars.bind_contextvars(user_id=user.uid)
    return user


async def require_admin(
    user: IdentityUser = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
) -> IdentityUser:
    """Allow the request only if the caller's profile has the admin role."""
    if not await accounts.is_admin(user.uid):
        logger.warning("admin_access_denied", user_id=user.uid)
        raise ForbiddenError("Forbidden: Not an administrator.")
    return user
