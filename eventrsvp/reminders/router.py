import logging
import secrets

from fastapi import APIRouter, Depends, Header, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from eventrsvp.config.settings import settings
from eventrsvp.notifications import get_email_service, get_sms_service
from eventrsvp.notifications.dispatcher import NotificationDispatcher
from eventrsvp.reminders.config import ReminderConfig
from eventrsvp.reminders.dtos import ReminderBatchInProgressError
from eventrsvp.reminders.repository.models import SqlReminderRepository
from eventrsvp.reminders.service import ReminderCronService

logger = logging.getLogger(__name__)

CRON_REMINDERS_URL = "/api/cron/reminders"

router = APIRouter()


class ReminderBatchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    emails_sent: int = Field(serialization_alias="emailsSent", validation_alias="emailsSent")
    sms_sent: int = Field(serialization_alias="smsSent", validation_alias="smsSent")
    errors: int


def get_reminder_config() -> ReminderConfig:
    return ReminderConfig.from_settings(settings)


def build_reminder_service(config: ReminderConfig) -> ReminderCronService:
    repository = SqlReminderRepository()
    dispatcher = NotificationDispatcher(
        email_service=get_email_service(),
        sms_service=get_sms_service(),
        marker_store=repository,
        config=config,
    )
    return ReminderCronService(repository=repository, dispatcher=dispatcher, config=config)


def get_reminder_service(
    config: ReminderConfig = Depends(get_reminder_config),
) -> ReminderCronService:
    """Dependency to get the reminder batch service."""
    return build_reminder_service(config)


def verify_cron_secret(
    authorization: str | None = Header(default=None),
    config: ReminderConfig = Depends(get_reminder_config),
) -> None:
    if not config.cron_secret:
        logger.warning("CRON_SECRET is not set; reminder endpoint is open to anyone")
        return

    expected = f"Bearer {config.cron_secret}"
    if not authorization or not secrets.compare_digest(authorization.encode(), expected.encode()):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.post(
    CRON_REMINDERS_URL,
    response_model=ReminderBatchResponse,
    dependencies=[Depends(verify_cron_secret)],
)
async def send_reminders(
    service: ReminderCronService = Depends(get_reminder_service),
) -> ReminderBatchResponse:
    """
    Run one reminder evaluation pass.
    Delivery failures are counted in ``errors``; they never fail the request.
    """
    try:
        result = await service.run()
    except ReminderBatchInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ReminderBatchResponse(
        success=True,
        emails_sent=result.emails_sent,
        sms_sent=result.sms_sent,
        errors=result.errors,
    )
