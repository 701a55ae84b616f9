"""
Email notifications about found vaccine slots.

Уведомления по почте: одно письмо на каждую локацию со свободными слотами.
SMTP-сессия одна на весь процесс и переиспользуется между циклами.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Optional

from .config import EmailConfig
from .errors import SendError
from .models import Location, Portal

logger = logging.getLogger(__name__)


SUBJECT = "Vaccine slot found!"
FALLBACK_REFERRAL = "Visit turbovax.info for more information"


def compose_body(location: Location, portal: Optional[Portal]) -> str:
    """Build the plain-text email body for one location."""
    lines = [
        f"Found {location.appointments.count} vaccine appointment(s)! "
        f"The location is {location.name} in {location.area}."
    ]
    if location.appointments.summary:
        lines.append(location.appointments.summary)
    if portal is not None:
        lines.append(
            f"Appointments can be booked through the {portal.name} portal, at {portal.url}"
        )
    else:
        lines.append(FALLBACK_REFERRAL)
    return "\n".join(lines)


class EmailNotifier:
    """
    Sends alerts from the configured address to itself over SMTPS.

    Соединение открывается лениво при первой отправке и живёт до close().
    """

    def __init__(self, config: EmailConfig) -> None:
        self.config = config
        self._smtp: Optional[smtplib.SMTP] = None

    def _connect(self) -> smtplib.SMTP:
        logger.info(
            "Opening SMTP session to %s:%s", self.config.smtp_host, self.config.smtp_port
        )
        smtp = smtplib.SMTP_SSL(
            self.config.smtp_host,
            self.config.smtp_port,
            context=ssl.create_default_context(),
        )
        try:
            smtp.login(self.config.address, self.config.password)
        except (smtplib.SMTPException, OSError):
            smtp.close()
            raise
        return smtp

    def _session(self) -> smtplib.SMTP:
        if self._smtp is not None:
            # Gmail рвёт простаивающие соединения, проверяем перед отправкой
            try:
                status, _ = self._smtp.noop()
                if status == 250:
                    return self._smtp
            except smtplib.SMTPServerDisconnected:
                pass
            logger.info("SMTP session went stale, reconnecting")
            self._smtp.close()
            self._smtp = None
        self._smtp = self._connect()
        return self._smtp

    def build_message(self, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = SUBJECT
        msg["From"] = self.config.address
        msg["To"] = self.config.address
        msg.set_content(body)
        return msg

    def send(self, body: str) -> None:
        """Blocking send of one message. Transport failures raise SendError."""
        msg = self.build_message(body)
        try:
            self._session().send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise SendError(f"Failed to send alert to {self.config.address}: {e!r}") from e
        logger.info("Alert email sent to %s", self.config.address)

    async def notify(self, location: Location, portal: Optional[Portal]) -> None:
        """Compose and send one alert; smtplib blocks, so it runs in a worker thread."""
        body = compose_body(location, portal)
        await asyncio.to_thread(self.send, body)

    def close(self) -> None:
        if self._smtp is None:
            return
        try:
            self._smtp.quit()
        except smtplib.SMTPServerDisconnected:
            logger.debug("SMTP session already closed by server")
        finally:
            self._smtp = None

    def __enter__(self) -> "EmailNotifier":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["EmailNotifier", "compose_body", "SUBJECT", "FALLBACK_REFERRAL"]
