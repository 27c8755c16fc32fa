"""Application layer - use cases and port definitions.

Contains use cases that orchestrate domain logic and port protocols that
define the interfaces for adapter implementations.

Contents:
    * :mod:`.delivery` - Per-recipient delivery orchestration
    * :mod:`.notifications` - Order and booking confirmation call sites
    * :mod:`.ports` - Callable Protocol definitions for adapter functions
"""

from __future__ import annotations

from .delivery import Clock, Transport, deliver_all, utc_now
from .notifications import NotificationResult, send_booking_confirmation, send_order_confirmation
from .ports import (
    BuildCalendarInvite,
    DisplayConfig,
    GetConfig,
    InitLogging,
    LoadSesConfigFromDict,
    SendSignedRequest,
)

__all__ = [
    "BuildCalendarInvite",
    "Clock",
    "DisplayConfig",
    "GetConfig",
    "InitLogging",
    "LoadSesConfigFromDict",
    "NotificationResult",
    "SendSignedRequest",
    "Transport",
    "deliver_all",
    "send_booking_confirmation",
    "send_order_confirmation",
    "utc_now",
]
