from dataclasses import dataclass
from typing import Protocol


class ReminderSettings(Protocol):
    app_url: str
    CRON_SECRET: str
    reminder_max_days_ahead: int
    reminder_max_hours_ahead: int
    reminder_max_concurrency: int


@dataclass(frozen=True)
class ReminderConfig:
    """Everything the reminder batch needs from configuration, resolved once at construction."""

    app_url: str
    # Empty or None leaves the trigger endpoint open
    cron_secret: str | None = None
    max_days_ahead: int = 14
    max_hours_ahead: int = 48
    max_concurrency: int = 10

    @classmethod
    def from_settings(cls, settings: ReminderSettings) -> "ReminderConfig":
        return cls(
            app_url=settings.app_url,
            cron_secret=settings.CRON_SECRET or None,
            max_days_ahead=settings.reminder_max_days_ahead,
            max_hours_ahead=settings.reminder_max_hours_ahead,
            max_concurrency=max(settings.reminder_max_concurrency, 1),
        )
