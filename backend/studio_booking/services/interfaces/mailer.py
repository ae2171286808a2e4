"""
Outgoing mail interface.
"""

from abc import ABC, abstractmethod
from typing import Optional


class Mailer(ABC):
    """
    Implementations:
    - SmtpMailer: SMTP relay via smtplib

    ``send`` raises on delivery failure; callers decide whether to absorb it.
    """

    @abstractmethod
    async def send(self, to: str, subject: str, text: Optional[str] = None, html: Optional[str] = None) -> None:
        pass
