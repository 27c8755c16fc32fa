"""Public package surface for signed transactional email over SES.

Routes imports through the architectural layers:

- Application: delivery orchestration and the notification call sites
- Domain: signing, MIME composition, outcomes, errors
- Composition: wired production adapters
- Metadata: package information
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Application exports
from .application.delivery import deliver_all
from .application.notifications import NotificationResult, send_booking_confirmation, send_order_confirmation

# Composition exports (wired adapters)
from .composition import build_calendar_invite, get_config, load_ses_config_from_dict, send_signed_request

# Domain exports
from .domain import (
    CalendarEvent,
    CalendarPerson,
    ConfigurationError,
    DeliveryLogEntry,
    SendFailure,
    SendOutcome,
    SendSuccess,
    SigningCredentials,
    build_log_entries,
    require_credentials,
)

__all__ = [
    "CalendarEvent",
    "CalendarPerson",
    "ConfigurationError",
    "DeliveryLogEntry",
    "NotificationResult",
    "SendFailure",
    "SendOutcome",
    "SendSuccess",
    "SigningCredentials",
    "build_calendar_invite",
    "build_log_entries",
    "deliver_all",
    "get_config",
    "load_ses_config_from_dict",
    "print_info",
    "require_credentials",
    "send_booking_confirmation",
    "send_order_confirmation",
    "send_signed_request",
]
