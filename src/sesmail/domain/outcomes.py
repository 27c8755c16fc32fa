"""Per-recipient send outcomes and delivery log entries."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from .enums import DeliveryStatus

NOT_CONFIGURED_MESSAGE = "email service not configured"
UNKNOWN_ERROR_MESSAGE = "unknown error"


@dataclass(frozen=True, slots=True)
class SendSuccess:
    """The provider accepted the message and assigned ``message_id``."""

    message_id: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class SendFailure:
    """The send did not go through; ``error_message`` is human-readable.

    ``error_code`` carries the provider fault code when one was returned.
    """

    error_message: str
    error_code: str | None = None

    @property
    def ok(self) -> bool:
        return False


SendOutcome = SendSuccess | SendFailure


@dataclass(frozen=True, slots=True)
class DeliveryLogEntry:
    """Row a caller persists for each attempted recipient."""

    recipient: str
    subject: str
    status: DeliveryStatus
    timestamp: datetime
    error_message: str | None = None


def build_log_entries(
    recipients: Sequence[str],
    subject: str,
    outcomes: Sequence[SendOutcome],
    timestamp: datetime,
) -> list[DeliveryLogEntry]:
    """Pair each recipient with its outcome as a DeliveryLogEntry.

    Raises:
        ValueError: When the two sequences differ in length.

    Example:
        >>> from datetime import datetime, timezone
        >>> when = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> entries = build_log_entries(["a@example.com"], "Hi", [SendFailure("boom")], when)
        >>> entries[0].status.value, entries[0].error_message
        ('failed', 'boom')
    """
    if len(recipients) != len(outcomes):
        raise ValueError(f"{len(recipients)} recipients but {len(outcomes)} outcomes")
    entries: list[DeliveryLogEntry] = []
    for recipient, outcome in zip(recipients, outcomes):
        if isinstance(outcome, SendSuccess):
            entries.append(DeliveryLogEntry(recipient, subject, DeliveryStatus.SENT, timestamp))
        else:
            entries.append(
                DeliveryLogEntry(recipient, subject, DeliveryStatus.FAILED, timestamp, outcome.error_message)
            )
    return entries


__all__ = [
    "NOT_CONFIGURED_MESSAGE",
    "UNKNOWN_ERROR_MESSAGE",
    "DeliveryLogEntry",
    "SendFailure",
    "SendOutcome",
    "SendSuccess",
    "build_log_entries",
]
