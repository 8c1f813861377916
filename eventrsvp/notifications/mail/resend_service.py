import logging
from typing import Protocol
from uuid import UUID

import httpx

from eventrsvp.notifications.base import DeliveryResult, message_id_from
from eventrsvp.notifications.mail.email_logger import EmailLogger, NoOpEmailLogger
from eventrsvp.notifications.mail.rendering import RenderedEmail, TemplatedEmailService

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendEmailConfig(Protocol):
    resend_api_key: str
    emails_from: str
    app_url: str


class ResendEmailService(TemplatedEmailService):
    def __init__(
        self,
        config: ResendEmailConfig,
        email_logger: EmailLogger | None = None,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self.app_url = config.app_url
        self.email_logger = email_logger or NoOpEmailLogger()
        self._http_client_class = http_client_class

    async def _send(
        self,
        to_address: str,
        email: RenderedEmail,
        email_type: str,
        guest_id: UUID | None = None,
    ) -> DeliveryResult:
        """Send email via Resend and log via injected logger."""

        # Log attempt before sending
        log_uuid = await self.email_logger.log_email_attempt(
            to_address=to_address,
            from_address=self._config.emails_from,
            subject=email.subject,
            html_body=email.html_body,
            text_body=email.text_body,
            email_type=email_type,
            guest_id=guest_id,
        )

        try:
            async with self._http_client_class() as client:
                response = await client.post(
                    RESEND_API_URL,
                    headers={
                        "Authorization": f"Bearer {self._config.resend_api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": self._config.emails_from,
                        "to": [to_address],
                        "subject": email.subject,
                        "html": email.html_body,
                        "text": email.text_body,
                    },
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Resend rejected {email_type} email for guest {guest_id}: {e}")
            await self.email_logger.log_email_failure(log_uuid=log_uuid, error_message=str(e))
            return DeliveryResult.failure(str(e))

        # Accepted by Resend; the send counts as delivered even if recording it fails
        message_id = message_id_from(response)
        try:
            await self.email_logger.log_email_success(
                log_uuid=log_uuid,
                provider_message_id=message_id,
            )
        except Exception:
            logger.exception(f"Could not record sent {email_type} email for guest {guest_id}")
        return DeliveryResult.success(message_id)
