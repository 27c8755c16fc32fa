"""Recipient validation shared by the delivery loop and the CLI.

Addresses may carry a display name (``Sam Student <sam@example.com>``);
only the address part is checked, and the trimmed original is what goes
into ``Destination`` or the ``To`` header.
"""

from __future__ import annotations

from collections.abc import Iterable
from email.utils import parseaddr

from btx_lib_mail import validate_email_address

from sesmail.domain.errors import InvalidRecipientError


def validate_recipient(recipient: str) -> str:
    """Validate one recipient and return it trimmed.

    Raises:
        InvalidRecipientError: When the address part is missing or malformed.

    Example:
        >>> validate_recipient("  Sam <sam@example.com> ")
        'Sam <sam@example.com>'
        >>> validate_recipient("invalid")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        InvalidRecipientError: Invalid recipient: invalid
    """
    trimmed = recipient.strip()
    _, address = parseaddr(trimmed)
    try:
        validate_email_address(address or trimmed)
    except ValueError as exc:
        raise InvalidRecipientError(f"Invalid recipient: {recipient}") from exc
    return trimmed


def validate_recipients(recipients: Iterable[str]) -> list[str]:
    """Validate runtime recipients, dropping repeats while keeping first-seen order.

    Config-level recipients are validated by Pydantic; this covers the ones
    given at runtime (CLI ``--to`` values).

    Raises:
        InvalidRecipientError: On the first malformed address.

    Example:
        >>> validate_recipients(["a@example.com", " b@example.com", "a@example.com"])
        ['a@example.com', 'b@example.com']
    """
    seen: dict[str, None] = {}
    for recipient in recipients:
        seen.setdefault(validate_recipient(recipient), None)
    return list(seen)


__all__ = ["validate_recipient", "validate_recipients"]
