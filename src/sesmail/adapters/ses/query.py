"""Form-encoded request bodies for the SES v1 query API."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final
from urllib.parse import urlencode

from sesmail.domain.enums import SendMode

API_VERSION: Final[str] = "2010-12-01"
CHARSET: Final[str] = "UTF-8"


def build_send_email_body(source: str, recipients: Sequence[str], subject: str, html_body: str) -> bytes:
    """Encode a ``SendEmail`` request with 1-indexed destination members.

    Example:
        >>> build_send_email_body("a@example.com", ["b@example.com"], "Hi there", "<p>x</p>").decode()[:60]
        'Action=SendEmail&Version=2010-12-01&Source=a%40example.com&D'
    """
    fields: list[tuple[str, str]] = [
        ("Action", SendMode.SIMPLE.action),
        ("Version", API_VERSION),
        ("Source", source),
    ]
    fields.extend((f"Destination.ToAddresses.member.{index}", address) for index, address in enumerate(recipients, 1))
    fields.extend(
        (
            ("Message.Subject.Data", subject),
            ("Message.Subject.Charset", CHARSET),
            ("Message.Body.Html.Data", html_body),
            ("Message.Body.Html.Charset", CHARSET),
        )
    )
    return urlencode(fields).encode("ascii")


def build_send_raw_email_body(raw_message_b64: str) -> bytes:
    """Encode a ``SendRawEmail`` request carrying a base64 MIME document.

    Example:
        >>> build_send_raw_email_body("SGk=")
        b'Action=SendRawEmail&Version=2010-12-01&RawMessage.Data=SGk%3D'
    """
    fields = [
        ("Action", SendMode.RAW.action),
        ("Version", API_VERSION),
        ("RawMessage.Data", raw_message_b64),
    ]
    return urlencode(fields).encode("ascii")


__all__ = ["API_VERSION", "build_send_email_body", "build_send_raw_email_body"]
