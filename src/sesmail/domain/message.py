"""Raw multipart/mixed message composition.

The message is held as a small structure (header block plus a list of
parts) and serialized in exactly one place, :func:`serialize_message`, so
the wire format can be tested independently of business content.

Contents:
    * :class:`MimePart` - One boundary-delimited body part.
    * :class:`RawEmailMessage` - Header fields, boundary, and parts.
    * :func:`build_raw_message` - Compose an HTML message with an optional calendar invite.
    * :func:`serialize_message` - Render the MIME document as bytes.
    * :func:`encode_raw_message` - Base64 the document for ``RawMessage.Data``.
"""

from __future__ import annotations

import base64
import secrets
from collections.abc import Iterator
from dataclasses import dataclass
from email.header import Header
from email.utils import formataddr, parseaddr
from typing import Final

from .calendar import CalendarAttachment

BOUNDARY_PREFIX: Final[str] = "sesmail_"
CRLF: Final[str] = "\r\n"
BASE64_LINE_LENGTH: Final[int] = 76


@dataclass(frozen=True, slots=True)
class MimePart:
    """A single body part: content type, transfer encoding, optional disposition, body text."""

    content_type: str
    encoding: str
    body: str
    disposition: str | None = None

    def header_lines(self) -> list[str]:
        lines = [f"Content-Type: {self.content_type}", f"Content-Transfer-Encoding: {self.encoding}"]
        if self.disposition is not None:
            lines.append(f"Content-Disposition: {self.disposition}")
        return lines


@dataclass(frozen=True, slots=True)
class RawEmailMessage:
    """A composed multipart/mixed message ready for serialization."""

    from_address: str
    to_address: str
    subject: str
    boundary_token: str
    html_part: MimePart
    attachment_part: MimePart | None = None

    @property
    def parts(self) -> Iterator[MimePart]:
        yield self.html_part
        if self.attachment_part is not None:
            yield self.attachment_part

    def header_lines(self) -> list[str]:
        return [
            f"From: {encode_address(self.from_address)}",
            f"To: {encode_address(self.to_address)}",
            f"Subject: {encode_header_value(self.subject)}",
            "MIME-Version: 1.0",
            f'Content-Type: multipart/mixed; boundary="{self.boundary_token}"',
        ]


def single_line(value: str) -> str:
    """Collapse CR/LF runs into single spaces so a value cannot start a new header.

    Example:
        >>> single_line("Lesson\\r\\nBcc: someone@example.com")
        'Lesson Bcc: someone@example.com'
    """
    return " ".join(line for line in value.splitlines() if line)


def encode_header_value(value: str) -> str:
    """Return ``value`` on one line when ASCII, else as an RFC 2047 encoded word.

    Example:
        >>> encode_header_value("Order Confirmed")
        'Order Confirmed'
        >>> encode_header_value("Lesson — Monday").startswith("=?utf-8?")
        True
    """
    value = single_line(value)
    if value.isascii():
        return value
    return Header(value, "utf-8").encode(linesep=CRLF)


def encode_address(value: str) -> str:
    """Return an address header value with a non-ASCII display name RFC 2047 encoded.

    Example:
        >>> encode_address("Shop <shop@example.com>")
        'Shop <shop@example.com>'
        >>> encoded = encode_address("Müller <m@example.com>")
        >>> encoded.startswith("=?utf-8?"), encoded.endswith(" <m@example.com>")
        (True, True)
    """
    value = single_line(value)
    name, address = parseaddr(value)
    if not address or name.isascii():
        return value
    return formataddr((name, address), charset="utf-8")


def wrap_base64(data: bytes, line_length: int = BASE64_LINE_LENGTH) -> str:
    """Base64-encode ``data`` and wrap it at ``line_length`` characters with CRLF.

    Example:
        >>> wrap_base64(b"x" * 60, line_length=40).split("\\r\\n")
        ['eHh4eHh4eHh4eHh4eHh4eHh4eHh4eHh4eHh4eHh4', 'eHh4eHh4eHh4eHh4eHh4eHh4eHh4eHh4eHh4eHh4']
    """
    encoded = base64.b64encode(data).decode("ascii")
    return CRLF.join(encoded[i : i + line_length] for i in range(0, len(encoded), line_length))


def new_boundary_token(*avoid: str) -> str:
    """Generate a random boundary that occurs in none of ``avoid``."""
    while True:
        token = f"{BOUNDARY_PREFIX}{secrets.token_hex(16)}"
        if not any(token in text for text in avoid):
            return token


def _html_part(html_body: str) -> MimePart:
    return MimePart(content_type="text/html; charset=UTF-8", encoding="7bit", body=html_body)


def _calendar_part(attachment: CalendarAttachment) -> MimePart:
    return MimePart(
        content_type=f"{attachment.mime_type}; charset=UTF-8; method={attachment.method}",
        encoding="base64",
        body=wrap_base64(attachment.content),
        disposition=f'attachment; filename="{single_line(attachment.filename)}"',
    )


def build_raw_message(
    from_address: str,
    to_address: str,
    subject: str,
    html_body: str,
    attachment: CalendarAttachment | None = None,
) -> RawEmailMessage:
    """Compose an HTML message with an optional base64 calendar attachment.

    An attachment without content is dropped and the message is sent as
    HTML only.

    Args:
        from_address: Sender, ``Name <addr>`` allowed.
        to_address: Single recipient.
        subject: Subject line; non-ASCII is RFC 2047 encoded on serialization.
        html_body: Rendered HTML.
        attachment: Calendar invite produced by the invite generator, or None.

    Returns:
        RawEmailMessage with a boundary absent from every part body.

    Example:
        >>> msg = build_raw_message("a@example.com", "b@example.com", "Hi", "<p>Hi</p>")
        >>> msg.boundary_token.startswith("sesmail_"), msg.attachment_part is None
        (True, True)
    """
    html_part = _html_part(html_body)
    attachment_part = _calendar_part(attachment) if attachment is not None and attachment.content else None
    bodies = [html_part.body] if attachment_part is None else [html_part.body, attachment_part.body]
    return RawEmailMessage(
        from_address=from_address,
        to_address=to_address,
        subject=subject,
        boundary_token=new_boundary_token(*bodies),
        html_part=html_part,
        attachment_part=attachment_part,
    )


def serialize_message(message: RawEmailMessage) -> bytes:
    """Render ``message`` as a CRLF-delimited MIME document encoded in UTF-8."""
    delimiter = f"--{message.boundary_token}"
    lines = [*message.header_lines(), ""]
    for part in message.parts:
        lines.append(delimiter)
        lines.extend(part.header_lines())
        lines.append("")
        lines.append(part.body)
        lines.append("")
    lines.append(f"{delimiter}--")
    return CRLF.join(lines).encode("utf-8")


def encode_raw_message(message: RawEmailMessage) -> str:
    """Base64-encode the serialized document for the ``RawMessage.Data`` field."""
    return base64.b64encode(serialize_message(message)).decode("ascii")


__all__ = [
    "BOUNDARY_PREFIX",
    "MimePart",
    "RawEmailMessage",
    "build_raw_message",
    "encode_address",
    "encode_header_value",
    "encode_raw_message",
    "new_boundary_token",
    "serialize_message",
    "single_line",
    "wrap_base64",
]
