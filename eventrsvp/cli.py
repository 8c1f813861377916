"""CLI commands for event reminder management."""

import asyncio
from uuid import UUID

import typer

from eventrsvp.config.logging import setup_logging
from eventrsvp.config.settings import settings
from eventrsvp.events.dtos import ReminderEntry, ReminderType
from eventrsvp.events.evaluator import resolve_schedule
from eventrsvp.events.reminder_schedule import format_reminder, parse_reminder_schedule
from eventrsvp.events.repository.write_models import (
    EventNotFoundError,
    InvalidReminderScheduleError,
    SqlEventWriteModel,
)
from eventrsvp.reminders.config import ReminderConfig
from eventrsvp.reminders.dtos import (
    GuestAlreadyRespondedError,
    ReminderBatchInProgressError,
    ReminderGuestNotFoundError,
)
from eventrsvp.reminders.router import build_reminder_service

app = typer.Typer(help="CLI commands for event reminder management")


@app.callback()
def main() -> None:
    setup_logging()


def _parse_uuid(value: str, label: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        typer.secho(f"Invalid {label} id: {value}", fg=typer.colors.RED)
        raise typer.Exit(1)


@app.command()
def send_reminders():
    """Run one reminder batch, exactly like the cron endpoint does."""
    service = build_reminder_service(ReminderConfig.from_settings(settings))
    try:
        # Typer doesn't support async directly, so use asyncio.run
        result = asyncio.run(service.run())
    except ReminderBatchInProgressError as e:
        typer.secho(str(e), fg=typer.colors.YELLOW)
        raise typer.Exit(1)

    typer.secho("Reminder batch finished", fg=typer.colors.GREEN)
    typer.secho(f"  Events due: {result.events_due}", fg=typer.colors.BLUE)
    typer.secho(f"  Emails sent: {result.emails_sent}", fg=typer.colors.BLUE)
    typer.secho(f"  SMS sent: {result.sms_sent}", fg=typer.colors.BLUE)
    colour = typer.colors.RED if result.errors else typer.colors.BLUE
    typer.secho(f"  Errors: {result.errors}", fg=colour)


@app.command()
def remind_guest(
    guest_id: str = typer.Argument(..., help="Guest UUID to remind"),
):
    """Send a reminder to one pending guest now, even if one was sent before."""
    service = build_reminder_service(ReminderConfig.from_settings(settings))
    try:
        outcome = asyncio.run(service.remind_guest(_parse_uuid(guest_id, "guest")))
    except (ReminderGuestNotFoundError, GuestAlreadyRespondedError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    if not (outcome.emails_sent or outcome.sms_sent):
        typer.secho("No reminder could be delivered", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Reminder sent!", fg=typer.colors.GREEN)
    typer.secho(f"  Email: {'yes' if outcome.emails_sent else 'no'}", fg=typer.colors.BLUE)
    typer.secho(f"  SMS: {'yes' if outcome.sms_sent else 'no'}", fg=typer.colors.BLUE)


@app.command()
def set_reminders(
    event_id: str = typer.Argument(..., help="Event UUID"),
    day: list[int] | None = typer.Option(None, "--day", "-d", help="Days before the event"),
    hour: list[int] | None = typer.Option(None, "--hour", "-h", help="Hours before the event"),
    clear: bool = typer.Option(False, "--clear", help="Go back to the default schedule"),
):
    """Replace an event's reminder schedule."""
    entries = [ReminderEntry(type=ReminderType.DAY, value=value) for value in day or []]
    entries += [ReminderEntry(type=ReminderType.HOUR, value=value) for value in hour or []]
    if clear and entries:
        typer.secho("--clear cannot be combined with --day/--hour", fg=typer.colors.RED)
        raise typer.Exit(1)
    if not clear and not entries:
        typer.secho("Give at least one --day or --hour, or --clear", fg=typer.colors.RED)
        raise typer.Exit(1)

    write_model = SqlEventWriteModel()
    try:
        event = asyncio.run(write_model.set_reminder_schedule(_parse_uuid(event_id, "event"), entries))
    except (EventNotFoundError, InvalidReminderScheduleError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"Reminders updated for {event.title}", fg=typer.colors.GREEN)
    for entry in resolve_schedule(event.reminder_schedule):
        typer.secho(f"  - {format_reminder(entry)}", fg=typer.colors.BLUE)


@app.command()
def show_reminders(
    event_id: str = typer.Argument(..., help="Event UUID"),
):
    """Show the reminder schedule an event will use."""
    event = asyncio.run(SqlEventWriteModel().get_event(_parse_uuid(event_id, "event")))
    if event is None:
        typer.secho(f"Event {event_id} not found", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"{event.title} ({event.date.isoformat()})", fg=typer.colors.GREEN)
    if not parse_reminder_schedule(event.reminder_schedule):
        typer.secho("  Default schedule", fg=typer.colors.YELLOW)
    for entry in resolve_schedule(event.reminder_schedule):
        typer.secho(f"  - {format_reminder(entry)}", fg=typer.colors.BLUE)


if __name__ == "__main__":
    app()
