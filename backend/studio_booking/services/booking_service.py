"""
Booking service: confirm (create/edit), cancel, payment, and listings.

CONSISTENCY MODEL
=================

The document store is the source of truth. The calendar event and the
notification emails are mirrors of it:

  1. Validate the request (equipment must include a player and a mixer).
  2. Edits: the booking must exist before anything is charged or written.
  3. Credits payment: one atomic conditional decrement on the profile
     (fails when the balance is below 1). The credit is NOT refunded if a
     later step fails.
  4. Write the booking document.
  5. Create or update the calendar event and store its id on the booking.
     A calendar failure fails the request even though step 4 already
     committed; the booking then has no (or a stale) googleEventId and the
     next edit creates the missing event.
  6. Schedule emails as a background task. Delivery failures never reach
     the caller.

Cancellation deletes the document first; the calendar delete and the owner
email lookup that follow are best-effort.
"""

from typing import Any, Optional

from fastapi import BackgroundTasks
from pydantic import ValidationError

from studio_booking.core.exceptions import BookingAPIError, CalendarError, InvalidRequestError, NotFoundError, PaymentError
from studio_booking.core.logging import get_logger
from studio_booking.core.metrics import record_booking_operation, record_credit_charge
from studio_booking.infrastructure.collections import COLLECTION_BOOKINGS, FirestorePaths
from studio_booking.schemas.booking import (
    PAYMENT_METHOD_CREDITS,
    PAYMENT_STATUS_PAID,
    BookingData,
    ConfirmBookingRequest,
)
from studio_booking.services.interfaces import CalendarGateway, DocumentNotFound, DocumentStore, IdentityProvider
from studio_booking.services.notification_service import NotificationService

logger = get_logger(__name__)

REQUIRED_EQUIPMENT_CATEGORIES = ("player", "mixer")
CREDITS_FIELD = "credits"
CREDITS_PER_BOOKING = 1

# Server-owned booking fields a client payload may not overwrite
SERVER_FIELDS = ("userId", "googleEventId", "timestamp", "lastUpdated")


def ensure_required_equipment(booking: BookingData) -> None:
    missing = [c for c in REQUIRED_EQUIPMENT_CATEGORIES if not booking.equipment_in(c)]
    if missing:
        raise InvalidRequestError(
            "Equipment must include at least one player and one mixer.",
            details=f"Missing categories: {', '.join(missing)}",
        )


def booking_from_document(document: dict[str, Any]) -> BookingData:
    """Parse a stored booking, tolerating documents written by older clients."""
    try:
        return BookingData.model_validate(document)
    except ValidationError:
        return BookingData.model_construct(
            date=document.get("date"),
            time=document.get("time"),
            duration=document.get("duration"),
            equipment=[],
            payment_status=document.get("paymentStatus"),
            user_name=document.get("userName"),
        )


class BookingService:
    def __init__(
        self,
        store: DocumentStore,
        calendar: CalendarGateway,
        notifier: NotificationService,
        identity: IdentityProvider,
        paths: FirestorePaths,
    ):
        self.store = store
        self.calendar = calendar
        self.notifier = notifier
        self.identity = identity
        self.paths = paths

    async def confirm_booking(
        self,
        user_id: str,
        request: ConfirmBookingRequest,
        tasks: BackgroundTasks,
        user_email: Optional[str] = None,
    ) -> str:
        """
        Create a booking, or edit one when ``request.editing_booking_id`` is set.
        Returns the booking id.
        """
        booking = request.booking_data
        if request.user_name:
            booking = booking.model_copy(update={"user_name": request.user_name})
        ensure_required_equipment(booking)

        editing_id = request.editing_booking_id
        existing = None
        if editing_id:
            existing = await self.store.get_document(self.paths.booking(user_id, editing_id))
            if existing is None:
                raise NotFoundError("Booking to update not found.")
            if booking.payment_status is None and existing.get("paymentStatus"):
                booking = booking.model_copy(update={"payment_status": existing["paymentStatus"]})

        email = user_email or (await self.identity.get_user(user_id)).email

        if booking.payment_method == PAYMENT_METHOD_CREDITS:
            already_paid = existing is not None and existing.get("paymentStatus") == PAYMENT_STATUS_PAID
            if not already_paid:
                await self._charge_credit(user_id)
            booking = booking.model_copy(update={"payment_status": PAYMENT_STATUS_PAID})

        kind = "update" if editing_id else "create"
        try:
            if editing_id:
                await self._apply_edit(user_id, editing_id, existing, booking, email)
                booking_id = editing_id
            else:
                booking_id = await self._create(user_id, booking, email)
        except Exception:
            record_booking_operation(kind, success=False)
            raise

        record_booking_operation(kind, success=True)
        tasks.add_task(self.notifier.send_booking_emails, kind, booking, email, booking_id)
        logger.info("booking_confirmed", booking_id=booking_id, user_id=user_id, kind=kind)
        return booking_id

    async def create_booking_for_email(
        self,
        email: str,
        request: ConfirmBookingRequest,
        tasks: BackgroundTasks,
    ) -> tuple[str, str]:
        """Create a booking for the user registered under ``email``. Returns (uid, booking id)."""
        target = await self.identity.get_user_by_email(email)
        booking_id = await self.confirm_booking(target.uid, request, tasks, user_email=target.email)
        return target.uid, booking_id

    async def cancel_booking(
        self,
        user_id: str,
        booking_id: str,
        tasks: BackgroundTasks,
        user_email: Optional[str] = None,
    ) -> None:
        path = self.paths.booking(user_id, booking_id)
        existing = await self.store.get_document(path)
        if existing is None:
            raise NotFoundError("Booking not found.")

        await self.store.delete_document(path)
        record_booking_operation("cancel", success=True)

        event_id = existing.get("googleEventId")
        if event_id:
            try:
                await self.calendar.delete_event(event_id)
            except CalendarError as e:
                logger.warning("calendar_event_delete_failed", booking_id=booking_id, event_id=event_id, error=e.details)

        # The owner's account may be gone; the cancellation still stands
        email = user_email
        if email is None:
            try:
                email = (await self.identity.get_user(user_id)).email
            except BookingAPIError as e:
                logger.warning("booking_owner_lookup_failed", booking_id=booking_id, user_id=user_id, error=e.message)

        tasks.add_task(self.notifier.send_booking_emails, "cancel", booking_from_document(existing), email, booking_id)
        logger.info("booking_cancelled", booking_id=booking_id, user_id=user_id, event_id=event_id)

    async def confirm_payment(self, user_id: str, booking_id: str) -> None:
        await self._update(self.paths.booking(user_id, booking_id), {"paymentStatus": PAYMENT_STATUS_PAID})
        record_booking_operation("payment", success=True)
        logger.info("booking_payment_confirmed", booking_id=booking_id, user_id=user_id)

    async def list_booked_slots(self) -> list[dict[str, Any]]:
        """
        Every booking of every user. The requested date is not applied here;
        the client filters the slots itself.
        """
        documents = await self.store.query_collection_group(COLLECTION_BOOKINGS)
        return [doc.data for doc in documents]

    async def list_all_bookings(self) -> list[dict[str, Any]]:
        documents = await self.store.query_collection_group(COLLECTION_BOOKINGS, order_by="date", descending=True)
        return [{"id": doc.id, **doc.data} for doc in documents]

    async def _charge_credit(self, user_id: str) -> None:
        charged = await self.store.decrement_if_at_least(
            self.paths.profile(user_id), CREDITS_FIELD, CREDITS_PER_BOOKING
        )
        record_credit_charge(charged)
        if not charged:
            logger.warning("credit_charge_rejected", user_id=user_id)
            raise PaymentError("Insufficient credits to pay for this booking.")
        logger.info("credit_charged", user_id=user_id, amount=CREDITS_PER_BOOKING)

    async def _create(self, user_id: str, booking: BookingData, email: Optional[str]) -> str:
        document = {
            **self._client_fields(booking),
            "userId": user_id,
            "timestamp": self.store.server_timestamp(),
        }
        booking_id = await self.store.add_document(self.paths.bookings(user_id), document)
        logger.info("booking_created", booking_id=booking_id, user_id=user_id)

        event_id = await self.calendar.create_event(booking_id, booking, email)
        await self._update(self.paths.booking(user_id, booking_id), {"googleEventId": event_id})
        return booking_id

    async def _apply_edit(
        self,
        user_id: str,
        booking_id: str,
        existing: dict[str, Any],
        booking: BookingData,
        email: Optional[str],
    ) -> None:
        path = self.paths.booking(user_id, booking_id)
        await self._update(path, {**self._client_fields(booking), "lastUpdated": self.store.server_timestamp()})

        event_id = existing.get("googleEventId")
        if event_id:
            await self.calendar.update_event(event_id, booking, email)
            return

        logger.info("calendar_event_missing", booking_id=booking_id, action="creating")
        event_id = await self.calendar.create_event(booking_id, booking, email)
        await self._update(path, {"googleEventId": event_id})

    async def _update(self, path: str, data: dict[str, Any]) -> None:
        try:
            await self.store.update_document(path, data)
        except DocumentNotFound as e:
            raise NotFoundError("Booking not found.") from e

    @staticmethod
    def _client_fields(booking: BookingData) -> dict[str, Any]:
        document = booking.to_document()
        for name in SERVER_FIELDS:
            document.pop(name, None)
        return document
