"""MIME composition stories: structure, boundaries, encoding, and degradation.

Every composed document is read back with the standard library's email
parser so the tests check what a mail client would see.
"""

from __future__ import annotations

import base64
import email
import email.policy
from email.message import EmailMessage

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from sesmail.domain import message as message_mod
from sesmail.domain.calendar import CalendarAttachment
from sesmail.domain.message import (
    BASE64_LINE_LENGTH,
    build_raw_message,
    encode_raw_message,
    new_boundary_token,
    serialize_message,
    wrap_base64,
)

SENDER = "World Music Method <info@worldmusicmethod.com>"
ICS = b"BEGIN:VCALENDAR\r\nMETHOD:REQUEST\r\nBEGIN:VEVENT\r\nSUMMARY:Oud Basics\r\nEND:VEVENT\r\nEND:VCALENDAR\r\n"


def _parse(raw: bytes) -> EmailMessage:
    parsed = email.message_from_bytes(raw, policy=email.policy.default)
    assert isinstance(parsed, EmailMessage)
    return parsed


# ======================== Document structure ========================


@pytest.mark.os_agnostic
def test_html_only_message_has_one_part() -> None:
    """Without an attachment the multipart carries only the HTML body."""
    msg = build_raw_message(SENDER, "student@example.com", "Order Confirmed", "<p>Thanks</p>")

    parsed = _parse(serialize_message(msg))
    parts = list(parsed.iter_parts())

    assert parsed.get_content_type() == "multipart/mixed"
    assert len(parts) == 1
    assert parts[0].get_content_type() == "text/html"
    assert parts[0].get_content().strip() == "<p>Thanks</p>"


@pytest.mark.os_agnostic
def test_invite_attachment_round_trips_byte_for_byte() -> None:
    """The calendar part decodes back to the exact invite bytes."""
    invite = CalendarAttachment(filename="lesson.ics", content=ICS)
    msg = build_raw_message(SENDER, "student@example.com", "Lesson", "<p>See you</p>", invite)

    parts = list(_parse(serialize_message(msg)).iter_parts())

    assert len(parts) == 2
    calendar = parts[1]
    assert calendar.get_content_type() == "text/calendar"
    assert calendar.get_param("method") == "REQUEST"
    assert calendar.get_filename() == "lesson.ics"
    assert calendar.get_content_disposition() == "attachment"
    assert calendar.get_payload(decode=True) == ICS


@pytest.mark.os_agnostic
def test_headers_carry_addresses_and_mime_version() -> None:
    """From, To, and MIME-Version are present on the outer document."""
    msg = build_raw_message(SENDER, "student@example.com", "Hi", "<p>Hi</p>")

    parsed = _parse(serialize_message(msg))

    assert parsed["From"] == SENDER
    assert parsed["To"] == "student@example.com"
    assert parsed["MIME-Version"] == "1.0"
    assert parsed.get_param("boundary") == msg.boundary_token


@pytest.mark.os_agnostic
def test_non_ascii_subject_is_encoded_and_decodes_back() -> None:
    """Subjects with an em dash survive the RFC 2047 round trip."""
    subject = "Lesson Confirmed: Oud Basics — Wed, 1 May 2024"
    msg = build_raw_message(SENDER, "student@example.com", subject, "<p>x</p>")

    raw = serialize_message(msg)

    assert "—".encode() not in raw.split(b"\r\n\r\n", 1)[0]
    assert _parse(raw)["Subject"] == subject


@pytest.mark.os_agnostic
def test_line_breaks_in_subject_cannot_add_headers() -> None:
    """A subject carrying CRLF stays one Subject header and adds no Bcc."""
    msg = build_raw_message(SENDER, "student@example.com", "Lesson\r\nBcc: attacker@evil.test", "<p>x</p>")

    parsed = _parse(serialize_message(msg))

    assert parsed["Bcc"] is None
    assert parsed["Subject"] == "Lesson Bcc: attacker@evil.test"


@pytest.mark.os_agnostic
def test_line_breaks_in_addresses_cannot_add_headers() -> None:
    """Bare CR or LF inside From/To is folded into the same header line."""
    msg = build_raw_message(SENDER + "\nBcc: a@evil.test", "student@example.com\rCc: b@evil.test", "Hi", "<p>x</p>")

    parsed = _parse(serialize_message(msg))

    assert parsed["Bcc"] is None
    assert parsed["Cc"] is None


@pytest.mark.os_agnostic
def test_non_ascii_display_names_are_encoded_and_decode_back() -> None:
    """Display names outside ASCII are RFC 2047 encoded like the subject."""
    msg = build_raw_message("Müller Musik <shop@example.com>", "Zoë <zoe@example.com>", "Hi", "<p>x</p>")

    raw = serialize_message(msg)
    parsed = _parse(raw)

    assert "ü".encode() not in raw.split(b"\r\n\r\n", 1)[0]
    assert parsed["From"].addresses[0].display_name == "Müller Musik"
    assert parsed["From"].addresses[0].addr_spec == "shop@example.com"
    assert parsed["To"].addresses[0].display_name == "Zoë"


@pytest.mark.os_agnostic
def test_document_uses_crlf_line_endings() -> None:
    """Every line break in headers and structure is CRLF."""
    invite = CalendarAttachment(filename="lesson.ics", content=ICS)
    raw = serialize_message(build_raw_message(SENDER, "a@example.com", "Hi", "<p>Hi</p>", invite))

    assert raw.count(b"\n") == raw.count(b"\r\n")


@pytest.mark.os_agnostic
def test_document_ends_with_closing_delimiter() -> None:
    """The final line is ``--<boundary>--``."""
    msg = build_raw_message(SENDER, "a@example.com", "Hi", "<p>Hi</p>")

    assert serialize_message(msg).endswith(f"--{msg.boundary_token}--".encode())


@pytest.mark.os_agnostic
def test_encoded_message_is_base64_of_serialized_document() -> None:
    """``RawMessage.Data`` is the base64 form of the MIME document."""
    msg = build_raw_message(SENDER, "a@example.com", "Hi", "<p>Hi</p>")

    assert base64.b64decode(encode_raw_message(msg)) == serialize_message(msg)


# ======================== Attachment degradation ========================


@pytest.mark.os_agnostic
def test_empty_invite_content_is_dropped() -> None:
    """An invite with no bytes degrades to an HTML-only message."""
    invite = CalendarAttachment(filename="lesson.ics", content=b"")

    msg = build_raw_message(SENDER, "a@example.com", "Hi", "<p>Hi</p>", invite)

    assert msg.attachment_part is None
    assert len(list(msg.parts)) == 1


# ======================== Base64 wrapping ========================


@pytest.mark.os_agnostic
def test_base64_lines_never_exceed_76_characters() -> None:
    """Long payloads wrap at the MIME line limit."""
    wrapped = wrap_base64(bytes(range(256)) * 4)

    lines = wrapped.split("\r\n")

    assert all(len(line) <= BASE64_LINE_LENGTH for line in lines)
    assert all(len(line) == BASE64_LINE_LENGTH for line in lines[:-1])


@pytest.mark.os_agnostic
def test_base64_of_empty_bytes_is_empty() -> None:
    """Nothing in, nothing out."""
    assert wrap_base64(b"") == ""


# ======================== Boundary uniqueness ========================


@pytest.mark.os_agnostic
def test_boundary_is_regenerated_on_collision(monkeypatch: pytest.MonkeyPatch) -> None:
    """A token found inside a body is discarded and a fresh one drawn."""
    draws = iter(["a" * 32, "b" * 32])
    monkeypatch.setattr(message_mod.secrets, "token_hex", lambda _n: next(draws))

    token = new_boundary_token(f"<p>sesmail_{'a' * 32}</p>")

    assert token == f"sesmail_{'b' * 32}"


@pytest.mark.os_agnostic
@given(html=st.text(max_size=300), payload=st.binary(max_size=300))
@settings(max_examples=100)
def test_boundary_never_occurs_in_any_part(html: str, payload: bytes) -> None:
    """The chosen boundary appears in neither the HTML nor the base64 attachment."""
    invite = CalendarAttachment(filename="invite.ics", content=payload)

    msg = build_raw_message(SENDER, "a@example.com", "Hi", html, invite)

    assert msg.boundary_token not in msg.html_part.body
    if msg.attachment_part is not None:
        assert msg.boundary_token not in msg.attachment_part.body


@pytest.mark.os_agnostic
def test_each_message_gets_a_fresh_boundary() -> None:
    """Boundaries are random per composition."""
    first = build_raw_message(SENDER, "a@example.com", "Hi", "<p>Hi</p>")
    second = build_raw_message(SENDER, "a@example.com", "Hi", "<p>Hi</p>")

    assert first.boundary_token != second.boundary_token
