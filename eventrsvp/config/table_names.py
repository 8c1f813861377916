from enum import Enum


class TableNames(str, Enum):
    EVENTS = "events"
    GUESTS = "guests"
    ADDITIONAL_GUESTS = "additional_guests"
    EMAIL_LOGS = "email_logs"
