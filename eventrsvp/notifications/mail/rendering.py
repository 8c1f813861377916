from abc import abstractmethod
from dataclasses import dataclass
from html import escape
from uuid import UUID

from eventrsvp.events.dtos import EventDTO
from eventrsvp.guests.dtos import GuestStatus
from eventrsvp.guests.urls import quick_rsvp_url, rsvp_page_url
from eventrsvp.notifications.base import (
    STATUS_LABELS,
    DeliveryResult,
    EmailServiceBase,
    format_event_date,
)
from eventrsvp.notifications.mail.templates import EmailTemplates


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html_body: str
    text_body: str


def _event_context(event: EventDTO, guest_name: str | None) -> tuple[dict, dict]:
    greeting = f"Hi {guest_name}," if guest_name else "Hello,"
    location = event.location or ""
    html_context = {
        "greeting": escape(greeting),
        "event_title": escape(event.title),
        "event_date": format_event_date(event.date),
        "location_html": f"<p><strong>Where:</strong> {escape(location)}</p>" if location else "",
    }
    text_context = {
        "greeting": greeting,
        "event_title": event.title,
        "event_date": format_event_date(event.date),
        "location_text": f"- Where: {location}" if location else "",
    }
    return html_context, text_context


def render_reminder(
    app_url: str, guest_name: str | None, event: EventDTO, rsvp_token: str
) -> RenderedEmail:
    subject, html_template, text_template = EmailTemplates.get_reminder_templates()
    html_context, text_context = _event_context(event, guest_name)
    rsvp_url = rsvp_page_url(app_url, rsvp_token)

    html_body = html_template.format(
        **html_context,
        rsvp_url=rsvp_url,
        attending_url=quick_rsvp_url(app_url, rsvp_token, GuestStatus.ATTENDING.value),
        maybe_url=quick_rsvp_url(app_url, rsvp_token, GuestStatus.MAYBE.value),
        not_attending_url=quick_rsvp_url(app_url, rsvp_token, GuestStatus.NOT_ATTENDING.value),
    )
    text_body = text_template.format(**text_context, rsvp_url=rsvp_url)
    return RenderedEmail(subject.format(event_title=event.title), html_body, text_body)


def render_confirmation(
    app_url: str,
    guest_name: str | None,
    event: EventDTO,
    status: GuestStatus,
    rsvp_token: str,
) -> RenderedEmail:
    subject, html_template, text_template = EmailTemplates.get_confirmation_templates()
    html_context, text_context = _event_context(event, guest_name)
    rsvp_url = rsvp_page_url(app_url, rsvp_token)
    label = STATUS_LABELS[status]

    html_body = html_template.format(**html_context, rsvp_url=rsvp_url, status=label)
    text_body = text_template.format(**text_context, rsvp_url=rsvp_url, status=label)
    return RenderedEmail(subject.format(event_title=event.title), html_body, text_body)


class TemplatedEmailService(EmailServiceBase):
    """Renders the shared templates and leaves transport to subclasses."""

    app_url: str = ""

    @abstractmethod
    async def _send(
        self,
        to_address: str,
        email: RenderedEmail,
        email_type: str,
        guest_id: UUID | None = None,
    ) -> DeliveryResult:
        pass

    async def send_reminder(
        self,
        to_address: str,
        guest_name: str,
        event: EventDTO,
        rsvp_token: str,
        guest_id: UUID | None = None,
    ) -> DeliveryResult:
        email = render_reminder(self.app_url, guest_name, event, rsvp_token)
        return await self._send(to_address, email, "reminder", guest_id=guest_id)

    async def send_confirmation(
        self,
        to_address: str,
        guest_name: str,
        event: EventDTO,
        status: GuestStatus,
        rsvp_token: str,
        guest_id: UUID | None = None,
    ) -> DeliveryResult:
        email = render_confirmation(self.app_url, guest_name, event, status, rsvp_token)
        return await self._send(to_address, email, "confirmation", guest_id=guest_id)
