"""Calendar adapter - iCalendar invite generation via the icalendar library.

Contents:
    * :func:`.invite.build_calendar_invite` - Render a CalendarEvent as a ``.ics`` attachment
"""

from __future__ import annotations

from .invite import build_calendar_invite

__all__ = ["build_calendar_invite"]
