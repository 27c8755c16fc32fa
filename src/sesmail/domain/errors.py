"""Domain-specific exceptions for typed error handling at boundaries."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Missing, invalid, or incomplete configuration.

    Raised when the signing credentials are absent or partially populated.
    This is the only error kind that may reach the caller of the delivery
    pipeline; everything else is converted into a per-recipient failure.

    Example:
        >>> from sesmail.domain.errors import ConfigurationError
        >>> err = ConfigurationError("email service not configured")
        >>> str(err)
        'email service not configured'
    """


class TransportError(Exception):
    """Network-level failure for a single recipient (DNS, TLS, connection reset).

    Example:
        >>> from sesmail.domain.errors import TransportError
        >>> str(TransportError("Connection reset by peer"))
        'Connection reset by peer'
    """


class ProtocolError(Exception):
    """Non-2xx response carrying a parseable SES fault body.

    Attributes:
        code: The fault ``<Code>`` element, when present.

    Example:
        >>> from sesmail.domain.errors import ProtocolError
        >>> err = ProtocolError("Quota exceeded", code="Throttling")
        >>> str(err), err.code
        ('Quota exceeded', 'Throttling')
    """

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class MalformedResponseError(Exception):
    """Response body that does not match the expected XML shape.

    Example:
        >>> from sesmail.domain.errors import MalformedResponseError
        >>> str(MalformedResponseError("no MessageId element"))
        'no MessageId element'
    """


class InvalidRecipientError(ValueError):
    """Email address validation failure.

    Raised when a recipient address fails RFC 5321/5322 validation.
    Inherits from ValueError so ``except ValueError`` handlers at the CLI
    boundary map it to an invalid-argument exit code.

    Example:
        >>> from sesmail.domain.errors import InvalidRecipientError
        >>> err = InvalidRecipientError("Invalid recipient: not-an-email")
        >>> isinstance(err, ValueError)
        True
    """


__all__ = [
    "ConfigurationError",
    "InvalidRecipientError",
    "MalformedResponseError",
    "ProtocolError",
    "TransportError",
]
