"""
Google Calendar implementation of the CalendarGateway interface.

Talks to the Calendar v3 REST API with httpx. A service account (or the
ambient application default credentials) supplies the bearer token; token
refresh uses google-auth's blocking transport, so it runs in a worker thread.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Any, Optional
from urllib.parse import quote
from zoneinfo import ZoneInfo

import google.auth
import httpx
from google.auth import exceptions as google_auth_exceptions
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from studio_booking.core.exceptions import CalendarError
from studio_booking.core.logging import get_logger
from studio_booking.core.metrics import record_calendar_call
from studio_booking.schemas.booking import BookingData
from studio_booking.services.interfaces.calendar import CalendarGateway

logger = get_logger(__name__)

GOOGLE_CALENDAR_API = "https://www.googleapis.com/calendar/v3"
CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar"]


def format_equipment(booking: BookingData) -> str:
    if not booking.equipment:
        return "None"
    return ", ".join(item.label for item in booking.equipment)


def build_event_payload(
    booking: BookingData,
    user_email: Optional[str],
    timezone: str,
    booking_id: Optional[str] = None,
) -> dict[str, Any]:
    """Render a booking as a Calendar v3 event resource."""
    start = datetime.combine(booking.date, booking.start_time, tzinfo=ZoneInfo(timezone))
    end = start + timedelta(hours=booking.duration)

    lines = []
    if booking_id:
        lines.append(f"Booking ID: {booking_id}")
    lines += [
        f"User: {booking.user_name}",
        f"Email: {user_email}",
        f"Payment: {booking.payment_status or 'N/A'}",
        f"Equipment: {format_equipment(booking)}",
    ]

    return {
        "summary": f"Booking: {booking.user_name}",
        "description": "\n".join(lines),
        "start": {"dateTime": start.isoformat(), "timeZone": timezone},
        "end": {"dateTime": end.isoformat(), "timeZone": timezone},
    }


def load_credentials(credentials_file: Optional[str]):
    if credentials_file:
        return service_account.Credentials.from_service_account_file(credentials_file, scopes=CALENDAR_SCOPES)
    credentials, _ = google.auth.default(scopes=CALENDAR_SCOPES)
    return credentials


class GoogleCalendarClient(CalendarGateway):
    def __init__(
        self,
        calendar_id: str,
        credentials,
        timezone: str = "Asia/Makassar",
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.calendar_id = calendar_id
        self.timezone = timezone
        self._credentials = credentials
        self._http = http_client or httpx.AsyncClient(base_url=GOOGLE_CALENDAR_API, timeout=timeout)

    @property
    def _events_path(self) -> str:
        return f"/calendars/{quote(self.calendar_id, safe='')}/events"

    async def _auth_headers(self) -> dict[str, str]:
        if not self._credentials.valid:
            try:
                await asyncio.to_thread(self._credentials.refresh, GoogleAuthRequest())
            except google_auth_exceptions.GoogleAuthError as e:
                raise CalendarError("Calendar authorization failed.", details=str(e)) from e
        return {"Authorization": f"Bearer {self._credentials.token}"}

    async def _request(self, operation: str, method: str, path: str, json: Optional[dict] = None) -> httpx.Response:
        headers = await self._auth_headers()
        try:
            response = await self._http.request(method, path, headers=headers, json=json)
            response.raise_for_status()
        except httpx.HTTPError as e:
            record_calendar_call(operation, success=False)
            logger.error("calendar_request_failed", operation=operation, error=str(e))
            raise CalendarError(f"Calendar {operation} failed.", details=str(e)) from e
        record_calendar_call(operation, success=True)
        return response

    async def create_event(self, booking_id: str, booking: BookingData, user_email: Optional[str]) -> str:
        payload = build_event_payload(booking, user_email, self.timezone, booking_id=booking_id)
        response = await self._request("create", "POST", self._events_path, json=payload)
        event = response.json()
        logger.info("calendar_event_created", booking_id=booking_id, event_id=event.get("id"))
        return event["id"]

    async def update_event(self, event_id: str, booking: BookingData, user_email: Optional[str]) -> None:
        payload = build_event_payload(booking, user_email, self.timezone)
        await self._request("update", "PUT", f"{self._events_path}/{quote(event_id, safe='')}", json=payload)
        logger.info("calendar_event_updated", event_id=event_id)

    async def delete_event(self, event_id: str) -> None:
        await self._request("delete", "DELETE", f"{self._events_path}/{quote(event_id, safe='')}")
        logger.info("calendar_event_deleted", event_id=event_id)

    async def close(self) -> None:
        await self._http.aclose()
