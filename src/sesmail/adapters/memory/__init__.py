"""In-memory adapter implementations for testing.

Provides lightweight implementations of all application ports that operate
entirely in memory: no filesystem, no network, no logging runtime.

Contents:
    * :mod:`.config` - In-memory configuration adapters
    * :mod:`.transport` - In-memory SES transport (TransportSpy class)
    * :mod:`.logging` - Logging initializer that records its configs (LoggingInitSpy)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import (
    config_source_in_memory,
    display_config_in_memory,
    get_config_in_memory,
)
from .logging import LoggingInitSpy
from .transport import StaticInviteBuilder, TransportSpy

# Static conformance assertions
if TYPE_CHECKING:
    from sesmail.application.ports import (
        BuildCalendarInvite,
        DisplayConfig,
        GetConfig,
        InitLogging,
        SendSignedRequest,
    )

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_display_config: DisplayConfig = display_config_in_memory
    _assert_init_logging: InitLogging = LoggingInitSpy()
    _assert_send_signed_request: SendSignedRequest = TransportSpy().send
    _assert_build_invite: BuildCalendarInvite = StaticInviteBuilder()

__all__ = [
    "LoggingInitSpy",
    "StaticInviteBuilder",
    "TransportSpy",
    "config_source_in_memory",
    "display_config_in_memory",
    "get_config_in_memory",
]
