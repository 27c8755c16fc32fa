"""Transactional notifications built on :func:`~.delivery.deliver_all`.

Two call sites share the delivery core:

* order confirmation - simple ``SendEmail`` to the buyer;
* booking confirmation - raw MIME with a ``lesson.ics`` invite to the
  student and the tutor.

Both return the per-recipient outcomes together with ready-to-persist
delivery log entries.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..adapters.ses.config import DEFAULT_ENDPOINT_DOMAIN
from ..domain.calendar import CalendarEvent
from ..domain.credentials import SigningCredentials, require_credentials
from ..domain.outcomes import DeliveryLogEntry, SendOutcome, build_log_entries
from .delivery import Clock, Transport, deliver_all, utc_now

if TYPE_CHECKING:
    from .ports import BuildCalendarInvite

logger = logging.getLogger(__name__)

DEFAULT_BRAND_NAME = "World Music Method"
DEFAULT_FROM_ADDRESS = f"{DEFAULT_BRAND_NAME} <info@worldmusicmethod.com>"
BOOKING_INVITE_FILENAME = "lesson.ics"


@dataclass(frozen=True, slots=True)
class NotificationResult:
    """Outcomes of one notification plus the matching log entries."""

    outcomes: tuple[SendOutcome, ...]
    log_entries: tuple[DeliveryLogEntry, ...]

    @property
    def all_sent(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    @property
    def sent_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)


def order_confirmation_subject(brand_name: str = DEFAULT_BRAND_NAME) -> str:
    """Subject line for an order confirmation.

    Example:
        >>> order_confirmation_subject()
        'Order Confirmed - World Music Method'
    """
    return f"Order Confirmed - {brand_name}"


def booking_confirmation_subject(lesson_title: str, formatted_date: str) -> str:
    """Subject line for a booking confirmation.

    Example:
        >>> booking_confirmation_subject("Oud Basics", "Wed, 1 May 2024")
        'Lesson Confirmed: Oud Basics — Wed, 1 May 2024'
    """
    return f"Lesson Confirmed: {lesson_title} — {formatted_date}"


def _present(recipients: Sequence[str | None]) -> list[str]:
    return [recipient.strip() for recipient in recipients if recipient and recipient.strip()]


def _finish(recipients: Sequence[str], subject: str, outcomes: list[SendOutcome], clock: Clock) -> NotificationResult:
    entries = build_log_entries(recipients, subject, outcomes, clock())
    return NotificationResult(outcomes=tuple(outcomes), log_entries=tuple(entries))


def send_order_confirmation(
    *,
    recipient: str,
    html_body: str,
    credentials: SigningCredentials | None,
    transport: Transport,
    from_address: str = DEFAULT_FROM_ADDRESS,
    brand_name: str = DEFAULT_BRAND_NAME,
    clock: Clock = utc_now,
    endpoint_domain: str = DEFAULT_ENDPOINT_DOMAIN,
    require_configured: bool = False,
) -> NotificationResult:
    """Send an order confirmation to a single buyer.

    Raises:
        ConfigurationError: Only when ``require_configured`` is set and
            ``credentials`` is None.
    """
    if require_configured:
        require_credentials(credentials)
    subject = order_confirmation_subject(brand_name)
    recipients = _present([recipient])
    outcomes = deliver_all(
        recipients=recipients,
        subject=subject,
        html_body=html_body,
        from_address=from_address,
        credentials=credentials,
        transport=transport,
        clock=clock,
        endpoint_domain=endpoint_domain,
    )
    return _finish(recipients, subject, outcomes, clock)


def send_booking_confirmation(
    *,
    recipients: Sequence[str | None],
    lesson_title: str,
    formatted_date: str,
    html_body: str,
    event: CalendarEvent,
    credentials: SigningCredentials | None,
    transport: Transport,
    build_invite: BuildCalendarInvite | None,
    from_address: str = DEFAULT_FROM_ADDRESS,
    clock: Clock = utc_now,
    endpoint_domain: str = DEFAULT_ENDPOINT_DOMAIN,
    require_configured: bool = False,
) -> NotificationResult:
    """Send a booking confirmation with a calendar invite.

    Blank or missing addresses (a student or tutor without an email on
    file) are skipped before delivery.

    Raises:
        ConfigurationError: Only when ``require_configured`` is set and
            ``credentials`` is None.
    """
    if require_configured:
        require_credentials(credentials)
    subject = booking_confirmation_subject(lesson_title, formatted_date)
    present = _present(recipients)
    if len(present) != len(recipients):
        logger.info("Skipping recipients without an address", extra={"skipped": len(recipients) - len(present)})
    outcomes = deliver_all(
        recipients=present,
        subject=subject,
        html_body=html_body,
        from_address=from_address,
        credentials=credentials,
        transport=transport,
        calendar_event=event,
        build_invite=build_invite,
        clock=clock,
        endpoint_domain=endpoint_domain,
        invite_filename=BOOKING_INVITE_FILENAME,
    )
    return _finish(present, subject, outcomes, clock)


__all__ = [
    "BOOKING_INVITE_FILENAME",
    "DEFAULT_BRAND_NAME",
    "DEFAULT_FROM_ADDRESS",
    "NotificationResult",
    "booking_confirmation_subject",
    "order_confirmation_subject",
    "send_booking_confirmation",
    "send_order_confirmation",
]
