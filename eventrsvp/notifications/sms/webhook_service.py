import logging
from typing import Protocol

import httpx

from eventrsvp.notifications.base import DeliveryResult, SmsServiceBase, message_id_from

logger = logging.getLogger(__name__)


class WebhookSmsConfig(Protocol):
    sms_webhook_url: str
    app_url: str


class WebhookSmsService(SmsServiceBase):
    """Posts ``{"to": ..., "message": ...}`` to an operator-supplied gateway."""

    def __init__(
        self,
        config: WebhookSmsConfig,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        super().__init__(app_url=config.app_url)
        self._config = config
        self._http_client_class = http_client_class

    def is_configured(self) -> bool:
        return bool(self._config.sms_webhook_url)

    async def send_sms(self, to_number: str, message: str) -> DeliveryResult:
        if not self.is_configured():
            return DeliveryResult.failure("SMS_NOT_CONFIGURED")

        try:
            async with self._http_client_class() as client:
                response = await client.post(
                    self._config.sms_webhook_url,
                    json={"to": to_number, "message": message},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"SMS webhook error: {e}")
            return DeliveryResult.failure(str(e))

        message_id = None
        if response.headers.get("content-type", "").startswith("application/json"):
            message_id = message_id_from(response)
        return DeliveryResult.success(message_id)
