import logging
import re
from typing import Protocol

import httpx

from eventrsvp.notifications.base import DeliveryResult, SmsServiceBase, message_id_from

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json"


def format_phone_number(phone: str) -> str:
    """Best-effort E.164 normalization; ten-digit numbers are assumed to be North American."""
    digits = re.sub(r"\D", "", phone)

    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"
    if len(digits) == 10:
        return f"+1{digits}"
    if not phone.startswith("+"):
        return f"+{digits}"
    return phone


class TwilioConfig(Protocol):
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_from_number: str
    app_url: str


class TwilioSmsService(SmsServiceBase):
    def __init__(
        self,
        config: TwilioConfig,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        super().__init__(app_url=config.app_url)
        self._config = config
        self._http_client_class = http_client_class

    def is_configured(self) -> bool:
        return bool(
            self._config.twilio_account_sid
            and self._config.twilio_auth_token
            and self._config.twilio_from_number
        )

    async def send_sms(self, to_number: str, message: str) -> DeliveryResult:
        if not self.is_configured():
            return DeliveryResult.failure("SMS_NOT_CONFIGURED")

        try:
            async with self._http_client_class() as client:
                response = await client.post(
                    TWILIO_MESSAGES_URL.format(account_sid=self._config.twilio_account_sid),
                    auth=(self._config.twilio_account_sid, self._config.twilio_auth_token),
                    data={
                        "From": self._config.twilio_from_number,
                        "To": format_phone_number(to_number),
                        "Body": message,
                    },
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Twilio SMS error: {e}")
            return DeliveryResult.failure(str(e))

        return DeliveryResult.success(message_id_from(response, "sid"))
