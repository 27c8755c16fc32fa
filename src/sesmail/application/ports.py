"""Application ports: callable Protocol definitions for adapter functions.

Each Protocol class defines a ``__call__`` method whose signature exactly
matches the corresponding adapter function.  Existing module-level functions
satisfy these protocols automatically via structural subtyping (PEP 544).

System Role:
    Sits between domain and adapters.  Infrastructure types (``Config``,
    ``SesConfig``) are imported under ``TYPE_CHECKING`` only.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

from ..domain.calendar import CalendarAttachment, CalendarEvent
from ..domain.enums import OutputFormat
from ..domain.outcomes import SendOutcome
from ..domain.signing import SignedRequest

if TYPE_CHECKING:
    from lib_layered_config import Config

    from ..adapters.ses.config import SesConfig


class GetConfig(Protocol):
    """Load layered configuration with application defaults."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class DisplayConfig(Protocol):
    """Display the provided configuration in the requested format."""

    def __call__(
        self, config: Config, *, output_format: OutputFormat = ..., section: str | None = ..., profile: str | None = ...
    ) -> None: ...


class SendSignedRequest(Protocol):
    """Submit one signed request and classify the response."""

    def __call__(self, request: SignedRequest, *, timeout: float = ...) -> SendOutcome: ...


class BuildCalendarInvite(Protocol):
    """Render a calendar event as an attachment, or None on failure."""

    def __call__(self, event: CalendarEvent, *, filename: str = ...) -> CalendarAttachment | None: ...


class LoadSesConfigFromDict(Protocol):
    """Load SesConfig from a configuration dictionary."""

    def __call__(self, config_dict: Mapping[str, Any]) -> SesConfig: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


__all__ = [
    "BuildCalendarInvite",
    "DisplayConfig",
    "GetConfig",
    "InitLogging",
    "LoadSesConfigFromDict",
    "SendSignedRequest",
]
