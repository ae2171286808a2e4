"""
Account service: user profiles, admin role lookup, credits, and
admin-initiated user creation.
"""

import secrets
import string
from typing import Any

from fastapi import BackgroundTasks

from studio_booking.core.exceptions import InvalidRequestError, NotFoundError
from studio_booking.core.logging import get_logger
from studio_booking.infrastructure.collections import COLLECTION_PROFILES, FirestorePaths
from studio_booking.schemas.profile import ROLE_ADMIN, CreateUserRequest, UpdateProfileRequest
from studio_booking.services.interfaces import DocumentStore, IdentityProvider, IdentityUser
from studio_booking.services.notification_service import NotificationService

logger = get_logger(__name__)

PASSWORD_CHARACTER_CLASSES = (
    string.ascii_lowercase,
    string.ascii_uppercase,
    string.digits,
    "!@#$%^&*()_+",
)


def generate_temporary_password(length: int = 16) -> str:
    """
    Random password with at least one character of every class.
    Used only to create the account; the user sets their own via the reset link.
    """
    rng = secrets.SystemRandom()
    alphabet = "".join(PASSWORD_CHARACTER_CLASSES)
    chars = [rng.choice(group) for group in PASSWORD_CHARACTER_CLASSES]
    chars += [rng.choice(alphabet) for _ in range(length - len(chars))]
    rng.shuffle(chars)
    return "".join(chars)


class AccountService:
    def __init__(
        self,
        store: DocumentStore,
        identity: IdentityProvider,
        notifier: NotificationService,
        paths: FirestorePaths,
    ):
        self.store = store
        self.identity = identity
        self.notifier = notifier
        self.paths = paths

    async def is_admin(self, uid: str) -> bool:
        profile = await self.store.get_document(self.paths.profile(uid))
        return profile is not None and profile.get("role") == ROLE_ADMIN

    async def update_profile(self, uid: str, data: UpdateProfileRequest) -> None:
        display_name = data.display_name.strip() if isinstance(data.display_name, str) else ""
        if not display_name:
            raise InvalidRequestError('The "displayName" argument is required and must be a non-empty string.')

        await self.identity.update_display_name(uid, display_name)
        await self.store.set_document(
            self.paths.profile(uid),
            {
                "userId": uid,
                "displayName": display_name,
                "email": data.email,
                "lastUpdated": self.store.server_timestamp(),
            },
            merge=True,
        )
        logger.info("profile_updated", user_id=uid)

    async def list_profiles(self) -> list[dict[str, Any]]:
        """Every profile, keyed by the uid taken from the document path."""
        documents = await self.store.query_collection_group(COLLECTION_PROFILES)
        return [{**doc.data, "id": doc.owner_id} for doc in documents]

    async def add_credits(self, user_id: str, amount: int) -> None:
        profile_path = self.paths.profile(user_id)
        if await self.store.get_document(profile_path) is None:
            raise NotFoundError(f"No profile found for user {user_id}.")

        # No floor: a negative amount can take the balance below zero
        await self.store.increment(profile_path, "credits", amount)
        logger.info("credits_adjusted", target_user_id=user_id, amount=amount)

    async def create_user(self, data: CreateUserRequest, tasks: BackgroundTasks) -> IdentityUser:
        """
        Create the identity account and its profile, then email a
        password-setup link in the background.
        """
        email = str(data.email)
        user = await self.identity.create_user(
            email=email,
            password=generate_temporary_password(),
            display_name=data.display_name,
        )
        reset_link = await self.identity.generate_password_reset_link(email)

        now = self.store.server_timestamp()
        await self.store.set_document(
            self.paths.profile(user.uid),
            {
                "userId": user.uid,
                "displayName": data.display_name or email,
                "email": email,
                "credits": 0,
                "createdAt": now,
                "lastUpdated": now,
            },
            merge=True,
        )

        tasks.add_task(self.notifier.send_account_setup_email, email, data.display_name, reset_link)
        logger.info("user_created_by_admin", new_user_id=user.uid)
        return user
