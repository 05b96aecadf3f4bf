"""Mail sender interface."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EmailMessage:
    subject: str
    body: str

    @property
    def is_empty(self) -> bool:
        return not self.subject and not self.body


@dataclass
class NotificationResult:
    status: str
    reason: str


class MailSender:
    """Base interface for mail providers.

    Implementations raise ``MailDeliveryError`` on transport or provider failure
    and never retry; retry policy belongs to whatever triggers the batch run.
    """

    provider_name = "base"

    def send(self, *, to: str, subject: str, body: str) -> NotificationResult:
        raise NotImplementedError
