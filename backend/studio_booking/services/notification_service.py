"""
Booking and account notification emails.

Emails are a best-effort side effect: routes schedule these coroutines as
background tasks after the booking is committed, and every delivery failure
is logged and counted here instead of propagating.
"""

import html
from dataclasses import dataclass
from typing import Optional

from studio_booking.core.logging import get_logger
from studio_booking.core.metrics import record_email_delivery
from studio_booking.schemas.booking import BookingData
from studio_booking.services.interfaces.mailer import Mailer

logger = get_logger(__name__)

BOOKING_SUBJECTS = {
    "create": "Booking Creation Confirmed",
    "update": "Booking Edited",
    "cancel": "Booking Cancelled",
}
BOOKING_ACTIONS = {
    "create": "created",
    "update": "updated",
    "cancel": "cancelled",
}
ADMIN_SUBJECT_PREFIX = "Admin Notification: "
ACCOUNT_SETUP_SUBJECT = "Set Up Your Showroom Booking App Account"

EQUIPMENT_HEADINGS = (
    ("player", "Players"),
    ("mixer", "Mixers"),
    ("extra", "Extras"),
)


@dataclass
class OutgoingEmail:
    to: str
    subject: str
    text: Optional[str] = None
    html: Optional[str] = None


def render_booking_details(kind: str, booking: BookingData, booking_id: Optional[str]) -> str:
    lines = [
        f"Booking ID: {booking_id or 'N/A'}",
        f"User Name: {booking.user_name}",
        f"Date: {booking.date}",
        f"Time: {booking.time}",
    ]
    if kind == "cancel":
        return "\n".join(lines)

    lines.append(f"Duration: {booking.duration:g} hours")
    lines.append("Equipment:")
    for category, heading in EQUIPMENT_HEADINGS:
        items = booking.equipment_in(category)
        names = ", ".join(item.label for item in items) if items else "None"
        lines.append(f"  {heading}: {names}")
    if booking.payment_status:
        lines.append(f"Payment Status: {booking.payment_status}")
    return "\n".join(lines)


class NotificationService:
    def __init__(
        self,
        mailer: Mailer,
        admin_emails: list[str],
        admin_dashboard_url: Optional[str] = None,
        frontend_url: Optional[str] = None,
    ):
        self.mailer = mailer
        self.admin_emails = admin_emails
        self.admin_dashboard_url = admin_dashboard_url
        self.frontend_url = frontend_url

    def booking_emails(
        self,
        kind: str,
        booking: BookingData,
        client_email: Optional[str],
        booking_id: Optional[str],
    ) -> list[OutgoingEmail]:
        """One client copy (when the address is known) plus one per admin."""
        subject = BOOKING_SUBJECTS.get(kind, "Booking Notification")
        action = BOOKING_ACTIONS.get(kind, kind)
        details = render_booking_details(kind, booking, booking_id)

        emails = []
        if client_email:
            emails.append(OutgoingEmail(
                to=client_email,
                subject=subject,
                text=f"Dear {booking.user_name},\n\nYour booking has been {action}.\n\nDetails:\n{details}\n\nThank you.",
            ))
        else:
            logger.warning("client_email_missing", booking_id=booking_id, kind=kind)

        admin_text = f"A booking has been {action}.\n\nDetails:\n{details}"
        if kind != "cancel" and self.admin_dashboard_url:
            admin_text += f"\n\nGo to Admin Dashboard: {self.admin_dashboard_url}"
        for admin_email in self.admin_emails:
            emails.append(OutgoingEmail(to=admin_email, subject=ADMIN_SUBJECT_PREFIX + subject, text=admin_text))
        return emails

    def account_setup_email(self, email: str, display_name: Optional[str], reset_link: str) -> OutgoingEmail:
        app_link = html.escape(self.frontend_url or "[Link to App Here]")
        body = (
            f"<p>Hello {html.escape(display_name or email)},</p>"
            "<p>An account has been created for you to use the Showroom Booking App.</p>"
            "<p>To set up your password and log in, please click on the link below:</p>"
            f'<p><a href="{html.escape(reset_link)}">Set Your Password</a></p>'
            "<p>This link is valid for a single use and will expire after a short period.</p>"
            f'<p>You can access the app here: <a href="{app_link}">{app_link}</a></p>'
            "<p>Thank you,</p>"
        )
        return OutgoingEmail(to=email, subject=ACCOUNT_SETUP_SUBJECT, html=body)

    async def deliver(self, kind: str, email: OutgoingEmail) -> bool:
        try:
            await self.mailer.send(email.to, email.subject, text=email.text, html=email.html)
        except Exception as e:
            record_email_delivery(kind, sent=False)
            logger.error("email_delivery_failed", kind=kind, to=email.to, error=str(e), exc_info=True)
            return False
        record_email_delivery(kind, sent=True)
        return True

    async def send_booking_emails(
        self,
        kind: str,
        booking: BookingData,
        client_email: Optional[str],
        booking_id: Optional[str],
    ) -> int:
        """Send every copy; returns how many were delivered."""
        delivered = 0
        for email in self.booking_emails(kind, booking, client_email, booking_id):
            delivered += await self.deliver(kind, email)
        return delivered

    async def send_account_setup_email(self, email: str, display_name: Optional[str], reset_link: str) -> bool:
        return await self.deliver("account_setup", self.account_setup_email(email, display_name, reset_link))
