"""
Firebase Auth implementation of the IdentityProvider interface.

firebase_admin.auth is synchronous (token verification may fetch Google's
public certificates), so every call runs in a worker thread.
"""

import asyncio
from typing import Optional

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from studio_booking.core.exceptions import (
    ConflictError,
    IdentityProviderError,
    NotFoundError,
    UnauthorizedError,
)
from studio_booking.core.logging import get_logger
from studio_booking.services.interfaces.identity import IdentityProvider, IdentityUser

logger = get_logger(__name__)


def _to_identity_user(record: firebase_auth.UserRecord) -> IdentityUser:
    return IdentityUser(uid=record.uid, email=record.email, display_name=record.display_name)


class FirebaseIdentityProvider(IdentityProvider):
    def __init__(self, app: Optional[firebase_admin.App] = None):
        self.app = app

    async def verify_token(self, token: str) -> IdentityUser:
        try:
            decoded = await asyncio.to_thread(firebase_auth.verify_id_token, token, self.app)
        except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.CertificateFetchError) as e:
            # Expired and revoked tokens are InvalidIdTokenError subclasses
            logger.warning("token_verification_failed", error=str(e))
            raise UnauthorizedError("Unauthorized") from e
        return IdentityUser(uid=decoded["uid"], email=decoded.get("email"), display_name=decoded.get("name"))

    async def get_user(self, uid: str) -> IdentityUser:
        try:
            record = await asyncio.to_thread(firebase_auth.get_user, uid, self.app)
        except firebase_auth.UserNotFoundError as e:
            raise NotFoundError("User not found.") from e
        except firebase_exceptions.FirebaseError as e:
            raise self._provider_error("get_user", e) from e
        return _to_identity_user(record)

    async def get_user_by_email(self, email: str) -> IdentityUser:
        try:
            record = await asyncio.to_thread(firebase_auth.get_user_by_email, email, self.app)
        except firebase_auth.UserNotFoundError as e:
            raise NotFoundError(f"No user found for email {email}.") from e
        except firebase_exceptions.FirebaseError as e:
            raise self._provider_error("get_user_by_email", e) from e
        return _to_identity_user(record)

    async def create_user(self, email: str, password: str, display_name: Optional[str] = None) -> IdentityUser:
        try:
            record = await asyncio.to_thread(
                firebase_auth.create_user,
                email=email,
                password=password,
                display_name=display_name,
                app=self.app,
            )
        except firebase_auth.EmailAlreadyExistsError as e:
            raise ConflictError("The email address is already in use by another account.") from e
        except firebase_exceptions.FirebaseError as e:
            raise self._provider_error("create_user", e) from e
        return _to_identity_user(record)

    async def update_display_name(self, uid: str, display_name: str) -> None:
        try:
            await asyncio.to_thread(firebase_auth.update_user, uid, display_name=display_name, app=self.app)
        except firebase_auth.UserNotFoundError as e:
            raise NotFoundError("User not found.") from e
        except firebase_exceptions.FirebaseError as e:
            raise self._provider_error("update_user", e) from e

    async def generate_password_reset_link(self, email: str) -> str:
        try:
            return await asyncio.to_thread(firebase_auth.generate_password_reset_link, email, app=self.app)
        except firebase_exceptions.FirebaseError as e:
            raise self._provider_error("generate_password_reset_link", e) from e

    @staticmethod
    def _provider_error(operation: str, error: Exception) -> IdentityProviderError:
        logger.error("identity_provider_failed", operation=operation, error=str(error))
        return IdentityProviderError("Identity provider request failed.", details=str(error))
