"""
Service interfaces for dependency inversion.
Services depend on these; infrastructure provides the implementations.
"""

from .storage import DocumentStore, DocumentNotFound, StoredDocument
from .identity import IdentityProvider, IdentityUser
from .calendar import CalendarGateway
from .mailer import Mailer

__all__ = [
    'DocumentStore', 'DocumentNotFound', 'StoredDocument',
    'IdentityProvider', 'IdentityUser',
    'CalendarGateway',
    'Mailer',
]
