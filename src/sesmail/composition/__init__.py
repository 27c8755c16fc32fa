"""Composition root wiring adapters to application ports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

# Calendar services
from ..adapters.calendar.invite import build_calendar_invite

# Configuration services
from ..adapters.config.display import display_config
from ..adapters.config.loader import get_config

# Logging services
from ..adapters.logging.setup import init_logging

# SES services
from ..adapters.ses.config import load_ses_config_from_dict
from ..adapters.ses.transport import send_signed_request

# Static conformance assertions: pyright verifies that each adapter function
# structurally satisfies its corresponding Protocol at type-check time.
if TYPE_CHECKING:
    from ..adapters.memory.logging import LoggingInitSpy
    from ..adapters.memory.transport import StaticInviteBuilder, TransportSpy
    from ..application.ports import (
        BuildCalendarInvite,
        DisplayConfig,
        GetConfig,
        InitLogging,
        LoadSesConfigFromDict,
        SendSignedRequest,
    )

    _assert_get_config: GetConfig = get_config
    _assert_display_config: DisplayConfig = display_config
    _assert_send_signed_request: SendSignedRequest = send_signed_request
    _assert_build_calendar_invite: BuildCalendarInvite = build_calendar_invite
    _assert_load_ses_config_from_dict: LoadSesConfigFromDict = load_ses_config_from_dict
    _assert_init_logging: InitLogging = init_logging


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    display_config: DisplayConfig
    send_signed_request: SendSignedRequest
    build_calendar_invite: BuildCalendarInvite
    load_ses_config_from_dict: LoadSesConfigFromDict
    init_logging: InitLogging


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        display_config=display_config,
        send_signed_request=send_signed_request,
        build_calendar_invite=build_calendar_invite,
        load_ses_config_from_dict=load_ses_config_from_dict,
        init_logging=init_logging,
    )


def build_testing(
    *,
    spy: TransportSpy | None = None,
    invite_builder: StaticInviteBuilder | None = None,
    get_config: GetConfig | None = None,
    logging_spy: LoggingInitSpy | None = None,
) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    Args:
        spy: TransportSpy capturing signed requests. A fresh one is created
            when None; pass your own to assert on captured requests.
        invite_builder: Invite builder; defaults to a StaticInviteBuilder.
        get_config: Config source; defaults to an empty in-memory Config.
        logging_spy: Records the configs passed to init_logging; a fresh
            one is created when None.

    Returns:
        AppServices container with in-memory adapters. The SES config loader
        stays the real one so validation and env fallbacks are exercised.
    """
    from ..adapters.memory import (
        LoggingInitSpy,
        StaticInviteBuilder,
        TransportSpy,
        display_config_in_memory,
        get_config_in_memory,
    )

    transport_spy = spy if spy is not None else TransportSpy()

    return AppServices(
        get_config=get_config if get_config is not None else get_config_in_memory,
        display_config=display_config_in_memory,
        send_signed_request=transport_spy.send,
        build_calendar_invite=invite_builder if invite_builder is not None else StaticInviteBuilder(),
        load_ses_config_from_dict=load_ses_config_from_dict,
        init_logging=logging_spy if logging_spy is not None else LoggingInitSpy(),
    )


__all__ = [
    # Calendar
    "build_calendar_invite",
    # Configuration
    "get_config",
    "display_config",
    # SES
    "load_ses_config_from_dict",
    "send_signed_request",
    # Logging
    "init_logging",
    # Composition
    "AppServices",
    "build_production",
    "build_testing",
]
