"""
Tests for authentication, admin authorization, and profile updates.
"""

import pytest
from httpx import AsyncClient

from studio_booking.core.exceptions import StorageError


@pytest.mark.asyncio
async def test_root_is_public(client: AsyncClient):
    """Health probe needs no token."""
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "online"}


@pytest.mark.asyncio
async def test_missing_token(client: AsyncClient):
    """No Authorization header returns 401 in the error envelope."""
    response = await client.get("/api/check-booked-slots?date=2025-06-01")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_invalid_token(client: AsyncClient, test_user):
    response = await client.get(
        "/api/check-booked-slots?date=2025-06-01",
        headers={"Authorization": "Bearer forged-token"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_non_bearer_scheme(client: AsyncClient, test_user):
    response = await client.get(
        "/api/check-booked-slots?date=2025-06-01",
        headers={"Authorization": "Basic user-token"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_route_forbidden_for_regular_user(client: AsyncClient, auth_headers):
    """Authenticated but not admin returns 403."""
    response = await client.get("/api/admin/bookings", headers=auth_headers)
    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden: Not an administrator."


@pytest.mark.asyncio
async def test_admin_route_forbidden_without_profile(client: AsyncClient, identity):
    """A user with no profile document is not an admin."""
    identity.add_user("ghost", "ghost@example.com", "Ghost", token="ghost-token")
    response = await client.get("/api/admin/users", headers={"Authorization": "Bearer ghost-token"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_route_allowed_for_admin(client: AsyncClient, admin_headers):
    response = await client.get("/api/admin/bookings", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_admin_check_store_failure_is_internal_error(client: AsyncClient, store, admin_headers, monkeypatch):
    """A failed profile read is a 500, never a silent 403."""

    async def failing_get(path):
        raise StorageError("Document store request failed.", details="deadline exceeded")

    monkeypatch.setattr(store, "get_document", failing_get)
    response = await client.get("/api/admin/bookings", headers=admin_headers)
    assert response.status_code == 500
    assert response.json() == {"error": "Document store request failed.", "details": "deadline exceeded"}


@pytest.mark.asyncio
async def test_update_profile(client: AsyncClient, auth_headers, store, identity, paths):
    """Display name is trimmed and written to both the identity provider and the profile."""
    response = await client.post(
        "/api/update-profile",
        json={"displayName": "  Client Renamed ", "email": "client@example.com"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "User profile updated successfully!"}

    profile = store.documents[paths.profile("user-1")]
    assert profile["displayName"] == "Client Renamed"
    assert profile["email"] == "client@example.com"
    assert profile["userId"] == "user-1"
    assert "lastUpdated" in profile
    # merge keeps the existing balance
    assert profile["credits"] == 1
    assert identity.users["user-1"].display_name == "Client Renamed"


@pytest.mark.asyncio
@pytest.mark.parametrize("display_name", [None, "", "   "])
async def test_update_profile_requires_display_name(client: AsyncClient, auth_headers, display_name):
    response = await client.post(
        "/api/update-profile",
        json={"displayName": display_name, "email": "client@example.com"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert "displayName" in response.json()["error"]


@pytest.mark.asyncio
async def test_request_id_header(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "abc123"
    assert response.json()["status"] == "healthy"
