"""
Identity provider interface: token verification and user accounts.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class IdentityUser:
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class IdentityProvider(ABC):
    """
    Implementations:
    - FirebaseIdentityProvider: Firebase Auth through firebase-admin

    Errors are reported with the API taxonomy: UnauthorizedError for bad
    tokens, NotFoundError for unknown users, ConflictError for duplicate
    emails, IdentityProviderError for anything else.
    """

    @abstractmethod
    async def verify_token(self, token: str) -> IdentityUser:
        pass

    @abstractmethod
    async def get_user(self, uid: str) -> IdentityUser:
        pass

    @abstractmethod
    async def get_user_by_email(self, email: str) -> IdentityUser:
        pass

    @abstractmethod
    async def create_user(self, email: str, password: str, display_name: Optional[str] = None) -> IdentityUser:
        pass

    @abstractmethod
    async def update_display_name(self, uid: str, display_name: str) -> None:
        pass

    @abstractmethod
    async def generate_password_reset_link(self, email: str) -> str:
        pass
