from eventrsvp.config.settings import Settings, settings
from eventrsvp.notifications.base import (
    DeliveryResult,
    DisabledSmsService,
    EmailServiceBase,
    SmsServiceBase,
)
from eventrsvp.notifications.mail.email_logger import SQLEmailLogger
from eventrsvp.notifications.mail.resend_service import ResendEmailService
from eventrsvp.notifications.mail.smtp_service import SMTPEmailService
from eventrsvp.notifications.sms.twilio_service import TwilioSmsService
from eventrsvp.notifications.sms.webhook_service import WebhookSmsService


def get_email_service(config: Settings = settings) -> EmailServiceBase:
    if config.resend_api_key:
        return ResendEmailService(config=config, email_logger=SQLEmailLogger())
    return SMTPEmailService(config=config)


def get_sms_service(config: Settings = settings) -> SmsServiceBase:
    provider = config.sms_provider.strip().lower()
    if provider == "twilio":
        return TwilioSmsService(config=config)
    if provider == "webhook":
        return WebhookSmsService(config=config)
    return DisabledSmsService(app_url=config.app_url)


__all__ = [
    "DeliveryResult",
    "EmailServiceBase",
    "SmsServiceBase",
    "get_email_service",
    "get_sms_service",
]
