"""
SMTP implementation of the Mailer interface.

smtplib is blocking, so each message is sent from a worker thread with its
own connection.
"""

import asyncio
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from studio_booking.core.logging import get_logger
from studio_booking.services.interfaces.mailer import Mailer

logger = get_logger(__name__)


class SmtpMailer(Mailer):
    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        use_tls: bool = True,
        timeout: int = 30,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_tls = use_tls
        self.timeout = timeout

    def build_message(self, to: str, subject: str, text: Optional[str], html: Optional[str]) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        if text:
            msg.attach(MIMEText(text, "plain"))
        if html:
            msg.attach(MIMEText(html, "html"))
        return msg

    def _send_sync(self, to: str, msg: MIMEMultipart) -> None:
        context = ssl.create_default_context()
        if self.port == 465:
            server = smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        with server:
            if self.port != 465 and self.use_tls:
                server.starttls(context=context)
            if self.username:
                server.login(self.username, self.password)
            server.sendmail(self.sender, [to], msg.as_string())

    async def send(self, to: str, subject: str, text: Optional[str] = None, html: Optional[str] = None) -> None:
        msg = self.build_message(to, subject, text, html)
        await asyncio.to_thread(self._send_sync, to, msg)
        logger.info("email_sent", to=to, subject=subject, smtp_host=self.host)
