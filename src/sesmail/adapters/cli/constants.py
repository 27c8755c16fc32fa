"""Shared CLI constants.

Contents:
    * :data:`CLICK_CONTEXT_SETTINGS` - Shared Click settings for help display.
    * :data:`TRACEBACK_SUMMARY_LIMIT` / :data:`TRACEBACK_VERBOSE_LIMIT` - Traceback character budgets.
    * :data:`DEFAULT_INVITE_FILENAME` - Attachment name used by ``send-invite``.
    * :data:`SUBJECT_DATE_FORMAT` - strftime pattern for the default invite subject.
"""

from __future__ import annotations

from typing import Final

CLICK_CONTEXT_SETTINGS: Final[dict[str, list[str]]] = {"help_option_names": ["-h", "--help"]}

TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

DEFAULT_INVITE_FILENAME: Final[str] = "invite.ics"

#: Rendered in UTC, e.g. ``Wed, 01 May 2024 18:00 UTC``.
SUBJECT_DATE_FORMAT: Final[str] = "%a, %d %b %Y %H:%M UTC"

__all__ = [
    "CLICK_CONTEXT_SETTINGS",
    "DEFAULT_INVITE_FILENAME",
    "SUBJECT_DATE_FORMAT",
    "TRACEBACK_SUMMARY_LIMIT",
    "TRACEBACK_VERBOSE_LIMIT",
]
