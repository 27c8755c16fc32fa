"""Shared pytest fixtures for signing, delivery, and CLI tests.

Centralizes test infrastructure:
- All shared fixtures live here
- Tests import fixtures implicitly via pytest's conftest discovery
- Fixtures use descriptive names that read as plain English
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, fields, replace
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner
from lib_layered_config import Config

from sesmail.domain.calendar import CalendarEvent, CalendarPerson
from sesmail.domain.credentials import SigningCredentials

if TYPE_CHECKING:
    from sesmail.adapters.memory.transport import StaticInviteBuilder, TransportSpy
    from sesmail.composition import AppServices

ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(type(lib_cli_exit_tools.config)))

#: AWS documentation example secret; never a real credential.
EXAMPLE_SECRET = "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY"
EXAMPLE_ACCESS_KEY = "AKIDEXAMPLE"

#: A fully configured ``[ses]`` section for CLI tests.
CONFIGURED_SES: dict[str, Any] = {
    "access_key_id": EXAMPLE_ACCESS_KEY,
    "secret_access_key": EXAMPLE_SECRET,
    "region": "eu-west-1",
    "from_address": "World Music Method <info@worldmusicmethod.com>",
}

_INVITE_BYTES = b"BEGIN:VCALENDAR\r\nMETHOD:REQUEST\r\nEND:VCALENDAR\r\n"


def _remove_ansi_codes(text: str) -> str:
    """Return *text* stripped of ANSI escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    """Capture every attribute from ``lib_cli_exit_tools.config``."""
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    """Reapply a configuration snapshot captured by ``_snapshot_cli_config``."""
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


@pytest.fixture(autouse=True)
def isolated_ses_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove ``AWS_SES_*`` and ``SESMAIL___*`` variables so host settings never leak in."""
    for name in list(os.environ):
        if name.startswith(("AWS_SES_", "SESMAIL___")):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test."""
    return CliRunner()


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""
    return _remove_ansi_codes


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test."""
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config lru_cache before the test."""
    from sesmail.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real Config instances from test data dicts, without provenance."""

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


@pytest.fixture
def credentials() -> SigningCredentials:
    """Example credentials scoped to eu-west-1/ses."""
    return SigningCredentials(EXAMPLE_ACCESS_KEY, EXAMPLE_SECRET, "eu-west-1")


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that advances one second per call from 2024-05-01T12:00:00Z."""
    start = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    ticks: list[int] = []

    def _clock() -> datetime:
        ticks.append(1)
        return start + timedelta(seconds=len(ticks) - 1)

    return _clock


@pytest.fixture
def transport_spy() -> TransportSpy:
    """Fresh TransportSpy per test."""
    from sesmail.adapters.memory.transport import TransportSpy

    return TransportSpy()


@pytest.fixture
def invite_builder() -> StaticInviteBuilder:
    """Fresh StaticInviteBuilder returning a small VCALENDAR."""
    from sesmail.adapters.memory.transport import StaticInviteBuilder

    return StaticInviteBuilder()


@pytest.fixture
def lesson_event() -> CalendarEvent:
    """A one-hour lesson with a tutor organizer and a student attendee."""
    tutor = CalendarPerson("Ana Tutor", "tutor@example.com")
    student = CalendarPerson("Sam Student", "student@example.com", rsvp=True)
    return CalendarEvent(
        title="Oud Basics",
        start=datetime(2024, 5, 1, 18, 0, tzinfo=timezone.utc),
        duration_minutes=60,
        organizer=tutor,
        attendees=(student, tutor),
        description="Your first lesson",
        location="Online Video Call",
        url="https://video.example.com/room/1",
        uid="lesson-1@example.com",
    )


@dataclass(frozen=True, slots=True)
class SesCliContext:
    """Services factory wired to an in-memory config plus the spies it uses."""

    factory: Callable[[], AppServices]
    spy: TransportSpy
    invites: StaticInviteBuilder


@pytest.fixture
def ses_cli_context(clear_config_cache: None) -> Callable[..., SesCliContext]:
    """Build a CLI services factory around a ``[ses]`` section and a TransportSpy.

    Example:
        def test_send(cli_runner, ses_cli_context) -> None:
            ctx = ses_cli_context(CONFIGURED_SES)
            result = cli_runner.invoke(cli, ["send-email", ...], obj=ctx.factory)
            assert ctx.spy.actions == ["SendEmail"]
    """
    from sesmail.adapters.memory import StaticInviteBuilder, TransportSpy, config_source_in_memory
    from sesmail.composition import build_production, build_testing

    def _create(ses_data: dict[str, Any], *, invite_content: bytes | None = _INVITE_BYTES) -> SesCliContext:
        spy = TransportSpy()
        invites = StaticInviteBuilder(content=invite_content)
        services = replace(
            build_testing(spy=spy, invite_builder=invites, get_config=config_source_in_memory({"ses": ses_data})),
            init_logging=build_production().init_logging,
        )
        return SesCliContext(factory=lambda: services, spy=spy, invites=invites)

    return _create


@pytest.fixture
def config_cli_context(clear_config_cache: None) -> Callable[[dict[str, Any]], Callable[[], AppServices]]:
    """Services factory with an injected Config and the real (redacting) display."""
    from sesmail.composition import AppServices, build_production, build_testing

    def _create(config_data: dict[str, Any]) -> Callable[[], AppServices]:
        config = Config(config_data, {})
        base = build_testing()
        prod = build_production()

        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        services = AppServices(
            get_config=_fake_get_config,
            display_config=prod.display_config,
            send_signed_request=base.send_signed_request,
            build_calendar_invite=base.build_calendar_invite,
            load_ses_config_from_dict=base.load_ses_config_from_dict,
            init_logging=prod.init_logging,
        )
        return lambda: services

    return _create


@pytest.fixture
def production_factory(clear_config_cache: None) -> Callable[[], AppServices]:
    """Return the production services factory."""
    from sesmail.composition import build_production

    return build_production
