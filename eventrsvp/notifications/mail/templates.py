from dataclasses import dataclass


@dataclass
class EmailTemplates:
    REMINDER_SUBJECT = "Reminder: RSVP needed for {event_title}"
    REMINDER_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="text-align: center; margin-bottom: 30px;">
            <h1 style="color: #9d4edd;">Reminder: RSVP Needed</h1>
        </div>

        <p>{greeting}</p>

        <p>This is a friendly reminder that you haven't responded to the invitation for:</p>

        <div style="background-color: #f5f6fb; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h2 style="color: #0a0f2c; margin-top: 0;">{event_title}</h2>
            <p><strong>When:</strong> {event_date}</p>
            {location_html}
        </div>

        <p>Let us know with one click:</p>

        <div style="text-align: center; margin: 30px 0;">
            <a href="{attending_url}" style="background-color: #16a34a; color: white; padding: 12px 20px; text-decoration: none; border-radius: 5px;">Attending</a>
            <a href="{maybe_url}" style="background-color: #ca8a04; color: white; padding: 12px 20px; text-decoration: none; border-radius: 5px;">Maybe</a>
            <a href="{not_attending_url}" style="background-color: #dc2626; color: white; padding: 12px 20px; text-decoration: none; border-radius: 5px;">Can't make it</a>
        </div>

        <p>Or open your RSVP page to add guests and dietary notes:</p>
        <p style="word-break: break-all; color: #606c38;"><a href="{rsvp_url}">{rsvp_url}</a></p>
    </body>
    </html>
    """

    REMINDER_TEXT = """
    {greeting}

    This is a friendly reminder that you haven't responded to the invitation for:

    {event_title}
    - When: {event_date}
    {location_text}

    Please RSVP here:
    {rsvp_url}
    """

    CONFIRMATION_SUBJECT = "Your RSVP for {event_title}"
    CONFIRMATION_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="text-align: center; margin-bottom: 30px;">
            <h1 style="color: #9d4edd;">Thank You!</h1>
        </div>

        <p>{greeting}</p>

        <p>Your response has been recorded.</p>

        <div style="background-color: #f5f6fb; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h2 style="color: #0a0f2c; margin-top: 0;">{event_title}</h2>
            <p><strong>When:</strong> {event_date}</p>
            {location_html}
            <p><strong>Your response:</strong> {status}</p>
        </div>

        <p>Changed your mind? You can update your response here:</p>
        <p style="word-break: break-all; color: #606c38;"><a href="{rsvp_url}">{rsvp_url}</a></p>
    </body>
    </html>
    """

    CONFIRMATION_TEXT = """
    {greeting}

    Your response has been recorded.

    {event_title}
    - When: {event_date}
    {location_text}
    - Your response: {status}

    You can update your response here:
    {rsvp_url}
    """

    @classmethod
    def get_reminder_templates(cls) -> tuple[str, str, str]:
        return cls.REMINDER_SUBJECT, cls.REMINDER_HTML, cls.REMINDER_TEXT

    @classmethod
    def get_confirmation_templates(cls) -> tuple[str, str, str]:
        return cls.CONFIRMATION_SUBJECT, cls.CONFIRMATION_HTML, cls.CONFIRMATION_TEXT
