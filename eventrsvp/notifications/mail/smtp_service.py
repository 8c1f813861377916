import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import Protocol
from uuid import UUID

from eventrsvp.notifications.base import DeliveryResult
from eventrsvp.notifications.mail.rendering import RenderedEmail, TemplatedEmailService


class SMTPEmailConfig(Protocol):
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    emails_from: str
    app_url: str


class SMTPEmailService(TemplatedEmailService):
    def __init__(self, config: SMTPEmailConfig):
        self.host = config.smtp_host
        self.port = config.smtp_port
        self.username = config.smtp_user
        self.password = config.smtp_password
        self.from_address = config.emails_from
        self.app_url = config.app_url

    def _create_message(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_address
        msg["Message-ID"] = make_msgid()

        part1 = MIMEText(text_body, "plain")
        part2 = MIMEText(html_body, "html")
        msg.attach(part1)
        msg.attach(part2)

        return msg

    def _deliver(self, msg: MIMEMultipart) -> None:
        if self.username and self.password:
            with smtplib.SMTP(self.host, self.port) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.send_message(msg)
        else:
            with smtplib.SMTP(self.host, self.port) as server:
                server.send_message(msg)

    async def _send(
        self,
        to_address: str,
        email: RenderedEmail,
        email_type: str,
        guest_id: UUID | None = None,
    ) -> DeliveryResult:
        msg = self._create_message(
            to_address=to_address,
            subject=email.subject,
            html_body=email.html_body,
            text_body=email.text_body,
        )
        try:
            # smtplib blocks; keep the event loop free for the other channels
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            return DeliveryResult.failure(str(e))
        return DeliveryResult.success(msg["Message-ID"])
