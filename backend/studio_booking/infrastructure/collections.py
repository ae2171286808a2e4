"""Firestore document paths (schema-in-code).

Every user's data lives under ``artifacts/{app_id}/users/{uid}``. Firestore
creates collections on first write, so these helpers are the only place the
layout is spelled out.
"""

COLLECTION_ARTIFACTS = "artifacts"
COLLECTION_USERS = "users"
COLLECTION_PROFILES = "profiles"
COLLECTION_BOOKINGS = "bookings"

PROFILE_DOCUMENT_ID = "userProfile"


class FirestorePaths:
    def __init__(self, app_id: str):
        self.app_id = app_id

    def user(self, uid: str) -> str:
        return f"{COLLECTION_ARTIFACTS}/{self.app_id}/{COLLECTION_USERS}/{uid}"

    def profile(self, uid: str) -> str:
        return f"{self.user(uid)}/{COLLECTION_PROFILES}/{PROFILE_DOCUMENT_ID}"

    def bookings(self, uid: str) -> str:
        return f"{self.user(uid)}/{COLLECTION_BOOKINGS}"

    def booking(self, uid: str, booking_id: str) -> str:
        return f"{self.bookings(uid)}/{booking_id}"
