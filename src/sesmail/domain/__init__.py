"""Domain layer - pure business logic with no I/O or framework dependencies.

Contains the value objects and pure functions that make up the signing and
message-composition core.

Contents:
    * :mod:`.calendar` - Calendar event and attachment value objects
    * :mod:`.credentials` - SigningCredentials value object
    * :mod:`.enums` - Domain enumerations (OutputFormat, SendMode, DeliveryStatus)
    * :mod:`.errors` - Domain exception types
    * :mod:`.message` - MIME message structure and serialization
    * :mod:`.outcomes` - Per-recipient outcomes and delivery log entries
    * :mod:`.signing` - SigV4 canonical request and signature
"""

from __future__ import annotations

from .calendar import CalendarAttachment, CalendarEvent, CalendarPerson
from .credentials import SigningCredentials, require_credentials
from .enums import DeliveryStatus, OutputFormat, SendMode
from .errors import (
    ConfigurationError,
    InvalidRecipientError,
    MalformedResponseError,
    ProtocolError,
    TransportError,
)
from .message import MimePart, RawEmailMessage, build_raw_message, encode_raw_message, serialize_message
from .outcomes import DeliveryLogEntry, SendFailure, SendOutcome, SendSuccess, build_log_entries
from .signing import (
    CanonicalRequest,
    SignatureResult,
    SignedRequest,
    build_canonical_request,
    build_signed_request,
    derive_signing_key,
    sign,
)

__all__ = [
    # Calendar
    "CalendarAttachment",
    "CalendarEvent",
    "CalendarPerson",
    # Credentials
    "SigningCredentials",
    "require_credentials",
    # Enums
    "DeliveryStatus",
    "OutputFormat",
    "SendMode",
    # Errors
    "ConfigurationError",
    "InvalidRecipientError",
    "MalformedResponseError",
    "ProtocolError",
    "TransportError",
    # Message
    "MimePart",
    "RawEmailMessage",
    "build_raw_message",
    "encode_raw_message",
    "serialize_message",
    # Outcomes
    "DeliveryLogEntry",
    "SendFailure",
    "SendOutcome",
    "SendSuccess",
    "build_log_entries",
    # Signing
    "CanonicalRequest",
    "SignatureResult",
    "SignedRequest",
    "build_canonical_request",
    "build_signed_request",
    "derive_signing_key",
    "sign",
]
