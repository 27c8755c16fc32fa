"""Delivery loop stories: per-recipient isolation, ordering, and mode selection.

The transport is a TransportSpy, so these tests observe exactly which
signed requests left the loop and in which order.
"""

from __future__ import annotations

import base64
import email
import email.policy
from collections.abc import Callable
from datetime import datetime
from email.message import EmailMessage

import pytest

from sesmail.adapters.memory import StaticInviteBuilder, TransportSpy
from sesmail.application.delivery import deliver_all
from sesmail.domain.calendar import CalendarAttachment, CalendarEvent
from sesmail.domain.credentials import SigningCredentials
from sesmail.domain.outcomes import SendFailure, SendSuccess

SENDER = "World Music Method <info@worldmusicmethod.com>"
THREE = ["a@example.com", "b@example.com", "c@example.com"]


def _attachments(spy: TransportSpy, index: int) -> list[EmailMessage]:
    raw = base64.b64decode(spy.form(index)["RawMessage.Data"])
    parsed = email.message_from_bytes(raw, policy=email.policy.default)
    assert isinstance(parsed, EmailMessage)
    return list(parsed.iter_attachments())


# ======================== Isolation and ordering ========================


@pytest.mark.os_agnostic
def test_one_failure_does_not_stop_the_others(
    credentials: SigningCredentials,
    fixed_clock: Callable[[], datetime],
) -> None:
    """Three recipients, the second rejected: three calls, outcomes in order."""
    spy = TransportSpy.scripted([SendSuccess("id-a"), SendFailure("Quota exceeded", "Throttling"), SendSuccess("id-c")])

    outcomes = deliver_all(
        recipients=THREE,
        subject="Hi",
        html_body="<p>Hi</p>",
        from_address=SENDER,
        credentials=credentials,
        transport=spy.send,
        clock=fixed_clock,
    )

    assert outcomes == [SendSuccess("id-a"), SendFailure("Quota exceeded", "Throttling"), SendSuccess("id-c")]
    assert len(spy.calls) == 3
    assert [spy.form(i)["Destination.ToAddresses.member.1"] for i in range(3)] == THREE


@pytest.mark.os_agnostic
def test_every_recipient_gets_a_fresh_signing_timestamp(
    credentials: SigningCredentials,
    fixed_clock: Callable[[], datetime],
    transport_spy: TransportSpy,
) -> None:
    """Each signed request carries its own X-Amz-Date."""
    deliver_all(
        recipients=THREE,
        subject="Hi",
        html_body="<p>Hi</p>",
        from_address=SENDER,
        credentials=credentials,
        transport=transport_spy.send,
        clock=fixed_clock,
    )

    dates = [call.headers["X-Amz-Date"] for call in transport_spy.calls]
    assert dates == ["20240501T120000Z", "20240501T120001Z", "20240501T120002Z"]
    assert len({call.headers["Authorization"] for call in transport_spy.calls}) == 3


@pytest.mark.os_agnostic
def test_requests_target_the_regional_endpoint(
    credentials: SigningCredentials,
    transport_spy: TransportSpy,
) -> None:
    deliver_all(
        recipients=["a@example.com"],
        subject="Hi",
        html_body="<p>Hi</p>",
        from_address=SENDER,
        credentials=credentials,
        transport=transport_spy.send,
        endpoint_domain="example.test",
    )

    assert transport_spy.calls[0].url == "https://email.eu-west-1.example.test/"
    assert transport_spy.calls[0].headers["Host"] == "email.eu-west-1.example.test"


@pytest.mark.os_agnostic
def test_empty_recipient_list_sends_nothing(credentials: SigningCredentials, transport_spy: TransportSpy) -> None:
    outcomes = deliver_all(
        recipients=[],
        subject="Hi",
        html_body="<p>Hi</p>",
        from_address=SENDER,
        credentials=credentials,
        transport=transport_spy.send,
    )

    assert outcomes == []
    assert transport_spy.calls == []


# ======================== Missing configuration ========================


@pytest.mark.os_agnostic
def test_missing_credentials_fail_every_recipient_without_network(transport_spy: TransportSpy) -> None:
    """No credentials means N not-configured failures and zero transport calls."""
    outcomes = deliver_all(
        recipients=THREE,
        subject="Hi",
        html_body="<p>Hi</p>",
        from_address=SENDER,
        credentials=None,
        transport=transport_spy.send,
    )

    assert outcomes == [SendFailure("email service not configured")] * 3
    assert transport_spy.calls == []


# ======================== Invalid recipients ========================


@pytest.mark.os_agnostic
def test_invalid_recipient_fails_locally_and_the_rest_are_sent(
    credentials: SigningCredentials,
    transport_spy: TransportSpy,
) -> None:
    outcomes = deliver_all(
        recipients=["a@example.com", "not-an-email", "c@example.com"],
        subject="Hi",
        html_body="<p>Hi</p>",
        from_address=SENDER,
        credentials=credentials,
        transport=transport_spy.send,
    )

    assert outcomes[0].ok and outcomes[2].ok
    assert outcomes[1] == SendFailure("Invalid recipient: not-an-email")
    assert len(transport_spy.calls) == 2


# ======================== Mode selection ========================


@pytest.mark.os_agnostic
def test_without_event_the_simple_action_carries_subject_and_body(
    credentials: SigningCredentials,
    transport_spy: TransportSpy,
) -> None:
    deliver_all(
        recipients=["a@example.com"],
        subject="Order Confirmed - World Music Method",
        html_body="<p>Thanks</p>",
        from_address=SENDER,
        credentials=credentials,
        transport=transport_spy.send,
    )

    form = transport_spy.form(0)
    assert form["Action"] == "SendEmail"
    assert form["Version"] == "2010-12-01"
    assert form["Source"] == SENDER
    assert form["Message.Subject.Data"] == "Order Confirmed - World Music Method"
    assert form["Message.Body.Html.Data"] == "<p>Thanks</p>"
    assert form["Message.Body.Html.Charset"] == "UTF-8"


@pytest.mark.os_agnostic
def test_with_event_every_recipient_gets_the_same_invite(
    credentials: SigningCredentials,
    transport_spy: TransportSpy,
    invite_builder: StaticInviteBuilder,
    lesson_event: CalendarEvent,
) -> None:
    """The invite is generated once and attached to each raw message."""
    deliver_all(
        recipients=["student@example.com", "tutor@example.com"],
        subject="Lesson",
        html_body="<p>See you</p>",
        from_address=SENDER,
        credentials=credentials,
        transport=transport_spy.send,
        calendar_event=lesson_event,
        build_invite=invite_builder,
        invite_filename="lesson.ics",
    )

    assert transport_spy.actions == ["SendRawEmail", "SendRawEmail"]
    assert invite_builder.events == [lesson_event]
    for index in range(2):
        attachments = _attachments(transport_spy, index)
        assert [part.get_filename() for part in attachments] == ["lesson.ics"]
        assert attachments[0].get_payload(decode=True) == invite_builder.content


@pytest.mark.os_agnostic
def test_raw_message_is_addressed_to_each_recipient(
    credentials: SigningCredentials,
    transport_spy: TransportSpy,
    invite_builder: StaticInviteBuilder,
    lesson_event: CalendarEvent,
) -> None:
    deliver_all(
        recipients=["student@example.com", "tutor@example.com"],
        subject="Lesson",
        html_body="<p>See you</p>",
        from_address=SENDER,
        credentials=credentials,
        transport=transport_spy.send,
        calendar_event=lesson_event,
        build_invite=invite_builder,
    )

    to_headers = [
        email.message_from_bytes(base64.b64decode(transport_spy.form(i)["RawMessage.Data"]))["To"] for i in range(2)
    ]
    assert to_headers == ["student@example.com", "tutor@example.com"]


@pytest.mark.os_agnostic
@pytest.mark.parametrize("content", [None, b""], ids=["generation-failed", "empty-invite"])
def test_unavailable_invite_degrades_to_html_only(
    content: bytes | None,
    credentials: SigningCredentials,
    transport_spy: TransportSpy,
    lesson_event: CalendarEvent,
) -> None:
    """Raw messages still go out, without an attachment."""
    outcomes = deliver_all(
        recipients=["student@example.com"],
        subject="Lesson",
        html_body="<p>See you</p>",
        from_address=SENDER,
        credentials=credentials,
        transport=transport_spy.send,
        calendar_event=lesson_event,
        build_invite=StaticInviteBuilder(content=content),
    )

    assert outcomes == [SendSuccess("spy-message-1")]
    assert transport_spy.actions == ["SendRawEmail"]
    assert _attachments(transport_spy, 0) == []


@pytest.mark.os_agnostic
def test_event_without_builder_still_sends_raw(
    credentials: SigningCredentials,
    transport_spy: TransportSpy,
    lesson_event: CalendarEvent,
) -> None:
    deliver_all(
        recipients=["student@example.com"],
        subject="Lesson",
        html_body="<p>See you</p>",
        from_address=SENDER,
        credentials=credentials,
        transport=transport_spy.send,
        calendar_event=lesson_event,
    )

    assert transport_spy.actions == ["SendRawEmail"]
    assert _attachments(transport_spy, 0) == []


@pytest.mark.os_agnostic
def test_invite_builder_that_raises_degrades_to_html_only(
    credentials: SigningCredentials,
    transport_spy: TransportSpy,
    lesson_event: CalendarEvent,
) -> None:
    """A crashing invite builder costs the attachment, never the batch."""

    def broken_builder(event: CalendarEvent, *, filename: str = "invite.ics") -> CalendarAttachment | None:
        raise RuntimeError("ics backend unavailable")

    outcomes = deliver_all(
        recipients=["a@example.com", "b@example.com"],
        subject="Lesson",
        html_body="<p>See you</p>",
        from_address=SENDER,
        credentials=credentials,
        transport=transport_spy.send,
        calendar_event=lesson_event,
        build_invite=broken_builder,
    )

    assert outcomes == [SendSuccess("spy-message-1"), SendSuccess("spy-message-2")]
    assert transport_spy.actions == ["SendRawEmail", "SendRawEmail"]
    assert _attachments(transport_spy, 0) == []
    assert _attachments(transport_spy, 1) == []
