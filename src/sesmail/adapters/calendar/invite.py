"""iCalendar invite generation.

Renders a :class:`~sesmail.domain.calendar.CalendarEvent` into ``text/calendar``
bytes with the icalendar library. Generation failures are logged and reported
as ``None`` so the caller can fall back to an HTML-only message.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone

from icalendar import Alarm, Calendar, Event, vCalAddress, vText

from sesmail import __init__conf__
from sesmail.domain.calendar import CalendarAttachment, CalendarEvent, CalendarPerson

logger = logging.getLogger(__name__)

PRODID = f"-//{__init__conf__.name}//{__init__conf__.name} {__init__conf__.version}//EN"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _describe_offset(minutes: int) -> str:
    """Human phrasing for an alarm offset.

    Example:
        >>> _describe_offset(60), _describe_offset(1440), _describe_offset(90)
        ('in 1 hour', 'tomorrow', 'in 90 minutes')
    """
    if minutes == 1440:
        return "tomorrow"
    if minutes % 1440 == 0:
        return f"in {minutes // 1440} days"
    if minutes % 60 == 0:
        hours = minutes // 60
        return "in 1 hour" if hours == 1 else f"in {hours} hours"
    return f"in {minutes} minutes"


def _address(person: CalendarPerson) -> vCalAddress:
    address = vCalAddress(f"mailto:{person.email}")
    address.params["cn"] = vText(person.name)
    return address


def _attendee(person: CalendarPerson) -> vCalAddress:
    address = _address(person)
    address.params["rsvp"] = vText("TRUE" if person.rsvp else "FALSE")
    address.params["partstat"] = vText(person.partstat)
    address.params["role"] = vText(person.role)
    return address


def _alarm(title: str, minutes_before: int) -> Alarm:
    if minutes_before <= 0:
        raise ValueError(f"alarm offset must be positive, got {minutes_before}")
    alarm = Alarm()
    alarm.add("action", "DISPLAY")
    alarm.add("description", f"{title} {_describe_offset(minutes_before)}")
    alarm.add("trigger", timedelta(minutes=-minutes_before))
    return alarm


def _render(event: CalendarEvent, stamp: datetime) -> bytes:
    if event.duration_minutes <= 0:
        raise ValueError(f"duration must be positive, got {event.duration_minutes}")

    vevent = Event()
    vevent.add("uid", event.uid or f"{uuid.uuid4()}@{__init__conf__.name}")
    vevent.add("dtstamp", _as_utc(stamp))
    vevent.add("dtstart", _as_utc(event.start))
    vevent.add("duration", timedelta(minutes=event.duration_minutes))
    vevent.add("summary", event.title)
    if event.description:
        vevent.add("description", event.description)
    if event.location:
        vevent.add("location", event.location)
    if event.url:
        vevent.add("url", event.url)
    vevent.add("status", event.status)
    vevent["organizer"] = _address(event.organizer)
    for person in event.attendees:
        vevent.add("attendee", _attendee(person), encode=False)
    for minutes in event.alarm_minutes_before:
        vevent.add_component(_alarm(event.title, minutes))

    calendar = Calendar()
    calendar.add("prodid", PRODID)
    calendar.add("version", "2.0")
    calendar.add("calscale", "GREGORIAN")
    calendar.add("method", event.method)
    calendar.add_component(vevent)
    return calendar.to_ical()


def build_calendar_invite(
    event: CalendarEvent,
    *,
    filename: str = "invite.ics",
    stamp: datetime | None = None,
) -> CalendarAttachment | None:
    """Render ``event`` as a calendar attachment.

    Args:
        event: Structured event fields.
        filename: Attachment filename shown to the recipient.
        stamp: DTSTAMP value; defaults to the current UTC time.

    Returns:
        CalendarAttachment with the ``.ics`` bytes, or None when generation fails.

    Example:
        >>> from datetime import datetime, timezone
        >>> from sesmail.domain.calendar import CalendarPerson
        >>> tutor = CalendarPerson("Ana", "ana@example.com")
        >>> event = CalendarEvent("Oud lesson", datetime(2024, 5, 1, 18, tzinfo=timezone.utc), 60, tutor, uid="l-1")
        >>> invite = build_calendar_invite(event, filename="lesson.ics")
        >>> invite.filename, b"METHOD:REQUEST" in invite.content
        ('lesson.ics', True)
    """
    try:
        content = _render(event, stamp or datetime.now(timezone.utc))
    except (ValueError, TypeError) as exc:
        logger.error("Calendar invite generation failed", extra={"title": event.title, "error": str(exc)})
        return None

    logger.debug("Calendar invite generated", extra={"title": event.title, "bytes": len(content)})
    return CalendarAttachment(filename=filename, content=content, method=event.method)


__all__ = ["PRODID", "build_calendar_invite"]
