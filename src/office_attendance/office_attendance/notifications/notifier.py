from __future__ import annotations

import logging
import smtplib
import time
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import Optional, Protocol, Sequence, Union

from ..core.exceptions import NotificationDeliveryError

logger = logging.getLogger(__name__)

Recipients = Union[str, Sequence[str]]


def normalize_recipients(recipients: Recipients) -> list[str]:
    if isinstance(recipients, str):
        recipients = [recipients]
    out: list[str] = []
    for r in recipients or []:
        r = str(r or "").strip()
        if r and r not in out:
            out.append(r)
    return out


class Notifier(Protocol):
    def send(self, recipients: Recipients, subject: str, body_html: str) -> None:
        """Deliver one HTML e-mail. Raises NotificationDeliveryError on failure."""

        raise NotImplementedError


@dataclass
class SMTPSettings:
    host: str
    port: int = 587
    user: str = ""
    password: str = ""
    sender: str = ""
    use_tls: bool = True
    timeout: float = 10.0


@dataclass
class SMTPNotifier:
    """STARTTLS SMTP delivery with a small bounded retry."""

    settings: SMTPSettings
    attempts: int = 2
    retry_delay: float = 1.0
    sender_name: str = "Office Attendance Portal"

    def _build(self, recipients: list[str], subject: str, body_html: str) -> EmailMessage:
        msg = EmailMessage()
        sender = self.settings.sender or self.settings.user
        msg["From"] = f'"{self.sender_name}" <{sender}>'
        msg["To"] = ", ".join(recipients)
        msg["Subject"] = subject
        msg.set_content("This message requires an HTML-capable mail client.")
        msg.add_alternative(body_html, subtype="html")
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.settings.host, int(self.settings.port), timeout=self.settings.timeout) as smtp:
            if self.settings.use_tls:
                smtp.starttls()
            if self.settings.user:
                smtp.login(self.settings.user, self.settings.password)
            smtp.send_message(msg)

    def send(self, recipients: Recipients, subject: str, body_html: str) -> None:
        to = normalize_recipients(recipients)
        if not to:
            raise NotificationDeliveryError("No recipients")
        if not self.settings.host:
            raise NotificationDeliveryError("SMTP host is not configured")

        msg = self._build(to, subject, body_html)
        last_error: Optional[Exception] = None
        for attempt in range(1, max(1, self.attempts) + 1):
            try:
                self._deliver(msg)
                logger.info("Email sent to %s: %s", ", ".join(to), subject)
                return
            except (smtplib.SMTPException, OSError) as e:
                last_error = e
                logger.warning("Email attempt %s/%s to %s failed: %s", attempt, self.attempts, ", ".join(to), e)
                if attempt < self.attempts:
                    time.sleep(self.retry_delay)
        raise NotificationDeliveryError(f"Could not deliver '{subject}': {last_error}") from last_error


@dataclass
class OutboxNotifier:
    """Keeps messages in memory instead of sending them (tests, dry runs).

    Only the most recent `limit` messages are kept.
    """

    sent: list[dict] = field(default_factory=list)
    limit: int = 200

    def send(self, recipients: Recipients, subject: str, body_html: str) -> None:
        to = normalize_recipients(recipients)
        if not to:
            raise NotificationDeliveryError("No recipients")
        self.sent.append({"to": to, "subject": subject, "html": body_html})
        if len(self.sent) > self.limit:
            del self.sent[: len(self.sent) - self.limit]
        logger.info("Email queued for %s: %s", ", ".join(to), subject)
