"""``send-invite`` command: HTML message plus an iCalendar invite via SendRawEmail."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from email.utils import parseaddr
from pathlib import Path

import lib_log_rich.runtime
import rich_click as click

from sesmail.application.delivery import deliver_all
from sesmail.application.notifications import booking_confirmation_subject
from sesmail.domain.calendar import CalendarEvent, CalendarPerson

from ...constants import CLICK_CONTEXT_SETTINGS, DEFAULT_INVITE_FILENAME, SUBJECT_DATE_FORMAT
from ...context import get_cli_context
from ._common import (
    bind_transport,
    guard_configuration,
    load_ses_config,
    report_outcomes,
    resolve_html,
    resolve_recipients,
    resolve_sender,
    ses_config_options,
)

logger = logging.getLogger(__name__)


def _parse_start(ctx: click.Context, param: click.Parameter, value: str) -> datetime:
    """Parse an ISO-8601 start time; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise click.BadParameter(f"not an ISO-8601 datetime: {value!r}") from exc
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=timezone.utc)


def _organizer(sender: str, name: str | None, email: str | None) -> CalendarPerson:
    sender_name, sender_email = parseaddr(sender)
    return CalendarPerson(name=name or sender_name or sender_email, email=email or sender_email, rsvp=False)


@click.command("send-invite", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--to", "recipients", multiple=True, help="Recipient address (repeatable; defaults to ses.recipients)")
@click.option("--title", required=True, help="Event title")
@click.option("--start", required=True, callback=_parse_start, help="Event start, ISO-8601 (naive = UTC)")
@click.option("--duration", type=click.IntRange(min=1), default=60, show_default=True, help="Duration in minutes")
@click.option("--subject", default=None, help="Subject line (defaults to 'Lesson Confirmed: <title> — <date>')")
@click.option("--html", default=None, help="Rendered HTML body")
@click.option(
    "--html-file",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Read the HTML body from a file",
)
@click.option("--description", default="", help="Event description")
@click.option("--location", default="", help="Event location")
@click.option("--url", default=None, help="Event URL (e.g. video room)")
@click.option("--organizer-name", default=None, help="Organizer name (defaults to the sender name)")
@click.option("--organizer-email", default=None, help="Organizer address (defaults to the sender address)")
@click.option(
    "--alarm",
    "alarms",
    type=click.IntRange(min=1),
    multiple=True,
    help="Reminder minutes before start (repeatable; default 60 and 1440)",
)
@click.option("--filename", default=DEFAULT_INVITE_FILENAME, show_default=True, help="Attachment filename")
@click.option("--from", "from_address", default=None, help="Sender (defaults to ses.from_address)")
@ses_config_options
@click.pass_context
def cli_send_invite(
    ctx: click.Context,
    recipients: tuple[str, ...],
    title: str,
    start: datetime,
    duration: int,
    subject: str | None,
    html: str | None,
    html_file: Path | None,
    description: str,
    location: str,
    url: str | None,
    organizer_name: str | None,
    organizer_email: str | None,
    alarms: tuple[int, ...],
    filename: str,
    from_address: str | None,
    region: str | None,
    endpoint_domain: str | None,
    timeout: float | None,
    output_format: str,
) -> None:
    """Send an HTML email with a calendar invite to each recipient.

    The invite is generated once and attached to every message; if it
    cannot be generated the messages go out as HTML only. Exit status as
    for send-email.
    """
    cli_ctx = get_cli_context(ctx)
    extra = {"command": "send-invite", "recipients": list(recipients), "title": title}

    with lib_log_rich.runtime.bind(job_id="cli-send-invite", extra=extra):
        ses_config = load_ses_config(cli_ctx, region=region, endpoint_domain=endpoint_domain, timeout=timeout)
        resolved = resolve_recipients(recipients, ses_config)
        sender = resolve_sender(from_address, ses_config)
        html_body = resolve_html(html, html_file)
        event = CalendarEvent(
            title=title,
            start=start,
            duration_minutes=duration,
            organizer=_organizer(sender, organizer_name, organizer_email),
            attendees=tuple(CalendarPerson(name=address, email=address, rsvp=True) for address in resolved),
            description=description,
            location=location,
            url=url,
            **({"alarm_minutes_before": alarms} if alarms else {}),
        )
        resolved_subject = subject or booking_confirmation_subject(
            title, start.astimezone(timezone.utc).strftime(SUBJECT_DATE_FORMAT)
        )

        def _send() -> None:
            outcomes = deliver_all(
                recipients=resolved,
                subject=resolved_subject,
                html_body=html_body,
                from_address=sender,
                credentials=ses_config.signing_credentials(),
                transport=bind_transport(cli_ctx, ses_config),
                calendar_event=event,
                build_invite=cli_ctx.services.build_calendar_invite,
                endpoint_domain=ses_config.endpoint_domain,
                invite_filename=filename,
            )
            report_outcomes(resolved, outcomes, output_format)

        logger.info("Sending invite", extra={"recipients": len(resolved), "title": title})
        guard_configuration(_send)


__all__ = ["cli_send_invite"]
