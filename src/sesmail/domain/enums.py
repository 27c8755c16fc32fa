"""Type-safe domain enums for output formats, send modes, and delivery status."""

from __future__ import annotations

from enum import Enum


class OutputFormat(str, Enum):
    """Output format options for configuration display.

    Inherits from str to allow direct string comparison and Click integration.

    Example:
        >>> OutputFormat.HUMAN.value
        'human'
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


class SendMode(str, Enum):
    """SES query action used for a send.

    Attributes:
        SIMPLE: ``SendEmail`` with separate subject/body form fields.
        RAW: ``SendRawEmail`` carrying a pre-composed MIME document.

    Example:
        >>> SendMode.RAW.action
        'SendRawEmail'
    """

    SIMPLE = "simple"
    RAW = "raw"

    @property
    def action(self) -> str:
        return "SendEmail" if self is SendMode.SIMPLE else "SendRawEmail"


class DeliveryStatus(str, Enum):
    """Status recorded in a delivery log entry.

    Example:
        >>> DeliveryStatus.SENT == "sent"
        True
    """

    SENT = "sent"
    FAILED = "failed"


__all__ = [
    "DeliveryStatus",
    "OutputFormat",
    "SendMode",
]
