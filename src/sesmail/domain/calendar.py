"""Calendar invite value objects handed to and returned by the invite generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class CalendarPerson:
    """Organizer or attendee of a calendar event."""

    name: str
    email: str
    rsvp: bool = False
    partstat: str = "ACCEPTED"
    role: str = "REQ-PARTICIPANT"


def _default_alarms() -> tuple[int, ...]:
    return (60, 1440)


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    """Structured event fields used to generate an iCalendar invite.

    ``alarm_minutes_before`` lists display reminders relative to ``start``;
    the default reminds one hour and one day ahead.
    """

    title: str
    start: datetime
    duration_minutes: int
    organizer: CalendarPerson
    attendees: tuple[CalendarPerson, ...] = ()
    description: str = ""
    location: str = ""
    url: str | None = None
    alarm_minutes_before: tuple[int, ...] = field(default_factory=_default_alarms)
    method: str = "REQUEST"
    status: str = "CONFIRMED"
    uid: str | None = None


@dataclass(frozen=True, slots=True)
class CalendarAttachment:
    """Generated invite bytes plus the attachment metadata for the MIME part."""

    filename: str
    content: bytes
    mime_type: str = "text/calendar"
    method: str = "REQUEST"


__all__ = ["CalendarAttachment", "CalendarEvent", "CalendarPerson"]
