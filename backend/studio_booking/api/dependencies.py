"""
Dependency providers.

Clients are built once in the application lifespan and kept on
``app.state``; routes receive them (and the services built from them)
through ``Depends``. Tests override the leaf providers with fakes.
"""

from fastapi import Depends, Request

from studio_booking.core.config import get_settings
from studio_booking.infrastructure.collections import FirestorePaths
from studio_booking.services.account_service import AccountService
from studio_booking.services.booking_service import BookingService
from studio_booking.services.interfaces import CalendarGateway, DocumentStore, IdentityProvider
from studio_booking.services.notification_service import NotificationService


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_identity(request: Request) -> IdentityProvider:
    return request.app.state.identity


def get_calendar(request: Request) -> CalendarGateway:
    return request.app.state.calendar


def get_notifier(request: Request) -> NotificationService:
    return request.app.state.notifier


def get_paths() -> FirestorePaths:
    return FirestorePaths(get_settings().firestore_app_id)


def get_booking_service(
    store: DocumentStore = Depends(get_store),
    calendar: CalendarGateway = Depends(get_calendar),
    notifier: NotificationService = Depends(get_notifier),
    identity: IdentityProvider = Depends(get_identity),
    paths: FirestorePaths = Depends(get_paths),
) -> BookingService:
    return BookingService(store, calendar, notifier, identity, paths)


def get_account_service(
    store: DocumentStore = Depends(get_store),
    identity: IdentityProvider = Depends(get_identity),
    notifier: NotificationService = Depends(get_notifier),
    paths: FirestorePaths = Depends(get_paths),
) -> AccountService:
    return AccountService(store, identity, notifier, paths)
