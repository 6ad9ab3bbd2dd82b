"""Email sending helpers."""

from __future__ import annotations

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage as MimeMessage

import httpx

from vinwatch.config import Settings

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"
SMTP_SSL_PORT = 465


@dataclass(slots=True)
class EmailMessage:
    to: str
    subject: str
    text: str
    html: str | None = None


class EmailProvider:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.provider = settings.esp_provider.lower()

    @property
    def recipient(self) -> str | None:
        return self.settings.mail_to

    @property
    def is_configured(self) -> bool:
        s = self.settings
        if not s.mail_to:
            return False
        if self.provider == "smtp":
            return bool(s.mail_from and s.smtp_host and s.smtp_port and s.smtp_user and s.smtp_pass)
        if self.provider == "resend":
            return bool(s.mail_from and s.resend_api_key)
        return self.provider == "log"

    async def send(self, message: EmailMessage) -> bool:
        """Send ``message``; returns False when the transport is not configured."""
        if not self.is_configured:
            logger.info("Mail transport (%s) not configured; skipping email", self.provider)
            return False
        if self.provider == "smtp":
            await asyncio.to_thread(self._send_smtp, message)
        elif self.provider == "resend":
            await self._send_resend(message)
        else:
            logger.info("Email (log) → %s: %s", message.to, message.subject)
        return True

    def _send_smtp(self, message: EmailMessage) -> None:
        s = self.settings
        mime = MimeMessage()
        mime["From"] = s.mail_from
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime.set_content(message.text)
        if message.html:
            mime.add_alternative(message.html, subtype="html")
        if s.smtp_port == SMTP_SSL_PORT:
            with smtplib.SMTP_SSL(s.smtp_host, s.smtp_port) as smtp:
                smtp.login(s.smtp_user, s.smtp_pass)
                smtp.send_message(mime)
            return
        with smtplib.SMTP(s.smtp_host, s.smtp_port) as smtp:
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls()
                smtp.ehlo()
            smtp.login(s.smtp_user, s.smtp_pass)
            smtp.send_message(mime)

    async def _send_resend(self, message: EmailMessage) -> None:
        payload = {
            "from": self.settings.mail_from,
            "to": [message.to],
            "subject": message.subject,
            "text": message.text,
        }
        if message.html:
            payload["html"] = message.html
        headers = {"Authorization": f"Bearer {self.settings.resend_api_key}"}
        async with httpx.AsyncClient(timeout=15.0) as client:
            response = await client.post(RESEND_URL, json=payload, headers=headers)
            response.raise_for_status()
