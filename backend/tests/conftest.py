"""
Pytest fixtures: in-memory fakes for the injected clients, an HTTP client
wired to them, and authenticated users.

The fakes replace the store, identity provider, calendar and mailer through
FastAPI dependency overrides, so no Firebase, Google or SMTP access happens.
ASGITransport does not run the lifespan, so the real clients are never built.
"""

import copy
import itertools
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from studio_booking.main import app
from studio_booking.api.dependencies import get_calendar, get_identity, get_notifier, get_paths, get_store
from studio_booking.core.exceptions import CalendarError, ConflictError, NotFoundError, UnauthorizedError
from studio_booking.infrastructure.collections import FirestorePaths
from studio_booking.services.interfaces import (
    CalendarGateway,
    DocumentNotFound,
    DocumentStore,
    IdentityProvider,
    IdentityUser,
    Mailer,
    StoredDocument,
)
from studio_booking.services.notification_service import NotificationService

APP_ID = "test-app"
ADMIN_EMAILS = ["owner@studio.test", "desk@studio.test"]


class InMemoryDocumentStore(DocumentStore):
    def __init__(self):
        self.documents: dict[str, dict[str, Any]] = {}
        self._ids = itertools.count(1)

    def server_timestamp(self) -> Any:
        return datetime.now(timezone.utc)

    async def get_document(self, path: str) -> Optional[dict[str, Any]]:
        document = self.documents.get(path)
        return copy.deepcopy(document) if document is not None else None

    async def set_document(self, path: str, data: dict[str, Any], merge: bool = False) -> None:
        if merge and path in self.documents:
            self.documents[path].update(copy.deepcopy(data))
        else:
            self.documents[path] = copy.deepcopy(data)

    async def update_document(self, path: str, data: dict[str, Any]) -> None:
        if path not in self.documents:
            raise DocumentNotFound(path)
        self.documents[path].update(copy.deepcopy(data))

    async def delete_document(self, path: str) -> None:
        self.documents.pop(path, None)

    async def add_document(self, collection_path: str, data: dict[str, Any]) -> str:
        document_id = f"doc{next(self._ids)}"
        self.documents[f"{collection_path}/{document_id}"] = copy.deepcopy(data)
        return document_id

    async def query_collection_group(
        self,
        collection_id: str,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[StoredDocument]:
        matches = [
            StoredDocument(id=path.rsplit("/", 1)[1], path=path, data=copy.deepcopy(data))
            for path, data in self.documents.items()
            if path.split("/")[-2] == collection_id
        ]
        if order_by:
            matches.sort(key=lambda doc: str(doc.data.get(order_by, "")), reverse=descending)
        return matches

    async def increment(self, path: str, field_name: str, amount: int) -> None:
        document = self.documents.setdefault(path, {})
        document[field_name] = document.get(field_name, 0) + amount

    async def decrement_if_at_least(self, path: str, field_name: str, amount: int = 1) -> bool:
        current = self.documents.get(path, {}).get(field_name, 0)
        if current < amount:
            return False
        self.documents.setdefault(path, {})[field_name] = current - amount
        return True

    def bookings_of(self, uid: str) -> dict[str, dict[str, Any]]:
        prefix = f"artifacts/{APP_ID}/users/{uid}/bookings/"
        return {path[len(prefix):]: doc for path, doc in self.documents.items() if path.startswith(prefix)}


class FakeIdentityProvider(IdentityProvider):
    def __init__(self):
        self.users: dict[str, IdentityUser] = {}
        self.tokens: dict[str, str] = {}
        self.passwords: dict[str, str] = {}
        self._ids = itertools.count(1)

    def add_user(self, uid: str, email: str, display_name: str, token: Optional[str] = None) -> IdentityUser:
        user = IdentityUser(uid=uid, email=email, display_name=display_name)
        self.users[uid] = user
        if token:
            self.tokens[token] = uid
        return user

    async def verify_token(self, token: str) -> IdentityUser:
        if token not in self.tokens:
            raise UnauthorizedError("Unauthorized")
        return self.users[self.tokens[token]]

    async def get_user(self, uid: str) -> IdentityUser:
        if uid not in self.users:
            raise NotFoundError("User not found.")
        return self.users[uid]

    async def get_user_by_email(self, email: str) -> IdentityUser:
        for user in self.users.values():
            if user.email == email:
                return user
        raise NotFoundError(f"No user found for email {email}.")

    async def create_user(self, email: str, password: str, display_name: Optional[str] = None) -> IdentityUser:
        if any(user.email == email for user in self.users.values()):
            raise ConflictError("The email address is already in use by another account.")
        user = self.add_user(f"new-user-{next(self._ids)}", email, display_name)
        self.passwords[user.uid] = password
        return user

    async def update_display_name(self, uid: str, display_name: str) -> None:
        self.users[uid].display_name = display_name

    async def generate_password_reset_link(self, email: str) -> str:
        return f"https://auth.studio.test/reset?email={email}"


class FakeCalendar(CalendarGateway):
    def __init__(self):
        self.calls: list[tuple] = []
        self.failing: set[str] = set()
        self._ids = itertools.count(1)

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise CalendarError(f"Calendar {operation} failed.", details="503 Service Unavailable")

    def calls_for(self, operation: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == operation]

    async def create_event(self, booking_id, booking, user_email) -> str:
        self._check("create")
        event_id = f"event-{next(self._ids)}"
        self.calls.append(("create", booking_id, booking, user_email, event_id))
        return event_id

    async def update_event(self, event_id, booking, user_email) -> None:
        self._check("update")
        self.calls.append(("update", event_id, booking, user_email))

    async def delete_event(self, event_id) -> None:
        self._check("delete")
        self.calls.append(("delete", event_id))


class FakeMailer(Mailer):
    def __init__(self):
        self.sent: list[dict[str, Any]] = []
        self.failing_recipients: set[str] = set()

    async def send(self, to, subject, text=None, html=None) -> None:
        if to in self.failing_recipients:
            raise ConnectionRefusedError(f"SMTP relay refused {to}")
        self.sent.append({"to": to, "subject": subject, "text": text, "html": html})

    def recipients(self) -> list[str]:
        return [message["to"] for message in self.sent]


def make_booking_payload(**overrides) -> dict:
    data = {
        "date": "2025-06-01",
        "time": "14:00",
        "duration": 2,
        "equipment": [
            {"id": "p1", "name": "CDJ-3000", "category": "player"},
            {"id": "m1", "name": "DJM-V10", "category": "mixer"},
        ],
        "paymentMethod": "credits",
    }
    data.update(overrides)
    return data


@pytest.fixture
def booking_payload():
    """Factory for a valid bookingData body (credits payment)."""
    return make_booking_payload


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def calendar() -> FakeCalendar:
    return FakeCalendar()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def paths() -> FirestorePaths:
    return FirestorePaths(APP_ID)


@pytest.fixture
def notifier(mailer: FakeMailer) -> NotificationService:
    return NotificationService(
        mailer,
        admin_emails=ADMIN_EMAILS,
        admin_dashboard_url="http://dashboard.studio.test",
        frontend_url="http://app.studio.test",
    )


@pytest_asyncio.fixture
async def client(store, identity, calendar, notifier, paths) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with every external dependency replaced by a fake."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_identity] = lambda: identity
    app.dependency_overrides[get_calendar] = lambda: calendar
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_paths] = lambda: paths

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def test_user(identity: FakeIdentityProvider, store: InMemoryDocumentStore, paths: FirestorePaths) -> IdentityUser:
    """A regular client with one credit."""
    user = identity.add_user("user-1", "client@example.com", "Client One", token="user-token")
    store.documents[paths.profile(user.uid)] = {
        "userId": user.uid,
        "displayName": user.display_name,
        "email": user.email,
        "credits": 1,
    }
    return user


@pytest.fixture
def admin_user(identity: FakeIdentityProvider, store: InMemoryDocumentStore, paths: FirestorePaths) -> IdentityUser:
    user = identity.add_user("admin-1", "owner@studio.test", "Studio Owner", token="admin-token")
    store.documents[paths.profile(user.uid)] = {
        "userId": user.uid,
        "displayName": user.display_name,
        "email": user.email,
        "role": "admin",
        "credits": 0,
    }
    return user


@pytest.fixture
def auth_headers(test_user) -> dict:
    return {"Authorization": "Bearer user-token"}


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return {"Authorization": "Bearer admin-token"}


@pytest.fixture
def set_credits(store: InMemoryDocumentStore, paths: FirestorePaths):
    def _set(uid: str, credits: int) -> None:
        store.documents.setdefault(paths.profile(uid), {})["credits"] = credits

    return _set


@pytest.fixture
def credits_of(store: InMemoryDocumentStore, paths: FirestorePaths):
    def _get(uid: str) -> Optional[int]:
        return store.documents.get(paths.profile(uid), {}).get("credits")

    return _get
