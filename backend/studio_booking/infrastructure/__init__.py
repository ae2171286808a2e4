"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .collections import FirestorePaths
from .firebase_app import init_firebase
from .firestore_store import FirestoreDocumentStore
from .firebase_identity import FirebaseIdentityProvider
from .google_calendar import GoogleCalendarClient, load_credentials
from .smtp_mailer import SmtpMailer

__all__ = [
    'FirestorePaths',
    'init_firebase',
    'FirestoreDocumentStore',
    'FirebaseIdentityProvider',
    'GoogleCalendarClient', 'load_credentials',
    'SmtpMailer',
]
