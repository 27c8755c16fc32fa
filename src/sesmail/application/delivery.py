"""Per-recipient delivery orchestration.

Drives one independent send per recipient: compose the message (simple
``SendEmail`` form or raw MIME), sign it with a freshly captured timestamp,
hand it to the transport, and collect the outcome. A failure for one
recipient never stops the others, and outcomes come back in input order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from ..adapters.ses.config import DEFAULT_ENDPOINT_DOMAIN, endpoint_url
from ..adapters.ses.query import build_send_email_body, build_send_raw_email_body
from ..adapters.ses.validation import validate_recipient
from ..domain.calendar import CalendarAttachment, CalendarEvent
from ..domain.credentials import SigningCredentials
from ..domain.enums import SendMode
from ..domain.errors import InvalidRecipientError
from ..domain.message import build_raw_message, encode_raw_message
from ..domain.outcomes import NOT_CONFIGURED_MESSAGE, SendFailure, SendOutcome
from ..domain.signing import SignedRequest, build_signed_request

if TYPE_CHECKING:
    from .ports import BuildCalendarInvite

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

#: Any SendSignedRequest port; the timeout, if any, is bound by the caller.
Transport = Callable[[SignedRequest], SendOutcome]


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _request_body(
    mode: SendMode,
    *,
    recipient: str,
    subject: str,
    html_body: str,
    from_address: str,
    invite: CalendarAttachment | None,
) -> bytes:
    if mode is SendMode.SIMPLE:
        return build_send_email_body(from_address, [recipient], subject, html_body)
    message = build_raw_message(from_address, recipient, subject, html_body, invite)
    return build_send_raw_email_body(encode_raw_message(message))


def _generate_invite(
    calendar_event: CalendarEvent,
    build_invite: BuildCalendarInvite | None,
    filename: str,
) -> CalendarAttachment | None:
    if build_invite is None:
        logger.warning("No invite builder supplied, sending without calendar attachment")
        return None
    try:
        invite = build_invite(calendar_event, filename=filename)
    except Exception as exc:
        logger.error(
            "Calendar invite builder failed, sending HTML only",
            extra={"title": calendar_event.title, "error": str(exc)},
            exc_info=True,
        )
        return None
    if invite is None or not invite.content:
        logger.warning(
            "Calendar invite unavailable, sending HTML only",
            extra={"title": calendar_event.title},
        )
        return None
    return invite


def deliver_all(
    *,
    recipients: Sequence[str],
    subject: str,
    html_body: str,
    from_address: str,
    credentials: SigningCredentials | None,
    transport: Transport,
    calendar_event: CalendarEvent | None = None,
    build_invite: BuildCalendarInvite | None = None,
    clock: Clock = utc_now,
    endpoint_domain: str = DEFAULT_ENDPOINT_DOMAIN,
    invite_filename: str = "invite.ics",
) -> list[SendOutcome]:
    """Send one message per recipient and return the outcomes in order.

    Args:
        recipients: Addresses to send to, processed sequentially.
        subject: Subject line shared by every message.
        html_body: Rendered HTML shared by every message.
        from_address: Sender, ``Name <addr>`` allowed.
        credentials: Signing credentials, or None when the service is not configured.
        transport: Submits a signed request and returns a SendOutcome.
        calendar_event: When given, messages go out as raw MIME with an invite.
        build_invite: Invite generator used once for ``calendar_event``.
        clock: Source of the per-recipient signing timestamp.
        endpoint_domain: Provider domain for the regional endpoint.
        invite_filename: Attachment filename for the generated invite.

    Returns:
        Exactly one SendOutcome per recipient, in recipient order.

    Example:
        >>> outcomes = deliver_all(
        ...     recipients=["a@example.com", "b@example.com"],
        ...     subject="Hi",
        ...     html_body="<p>Hi</p>",
        ...     from_address="shop@example.com",
        ...     credentials=None,
        ...     transport=lambda request: None,
        ... )
        >>> [outcome.error_message for outcome in outcomes]
        ['email service not configured', 'email service not configured']
    """
    if credentials is None:
        logger.warning("Email service not configured", extra={"recipients": len(recipients)})
        return [SendFailure(NOT_CONFIGURED_MESSAGE) for _ in recipients]

    mode = SendMode.SIMPLE if calendar_event is None else SendMode.RAW
    invite = None if calendar_event is None else _generate_invite(calendar_event, build_invite, invite_filename)
    url = endpoint_url(credentials.region, endpoint_domain)

    logger.info(
        "Delivering message",
        extra={
            "action": mode.action,
            "recipients": len(recipients),
            "subject": subject,
            "with_invite": invite is not None,
        },
    )

    outcomes: list[SendOutcome] = []
    for recipient in recipients:
        try:
            address = validate_recipient(recipient)
        except InvalidRecipientError as exc:
            logger.warning("Skipping invalid recipient", extra={"recipient": recipient})
            outcomes.append(SendFailure(str(exc)))
            continue

        body = _request_body(
            mode,
            recipient=address,
            subject=subject,
            html_body=html_body,
            from_address=from_address,
            invite=invite,
        )
        request = build_signed_request(url, body, credentials, clock())
        outcome = transport(request)
        if isinstance(outcome, SendFailure):
            logger.warning("Email failed", extra={"recipient": recipient, "error": outcome.error_message})
        else:
            logger.info("Email sent", extra={"recipient": recipient, "message_id": outcome.message_id})
        outcomes.append(outcome)

    return outcomes


__all__ = ["Clock", "Transport", "deliver_all", "utc_now"]
