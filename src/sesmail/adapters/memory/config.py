"""In-memory configuration adapters for testing.

Provides configuration functions that satisfy the same Protocols as
production adapters but operate entirely in memory -- no filesystem,
no lib_layered_config file discovery.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from lib_layered_config import Config

from ...domain.enums import OutputFormat

if TYPE_CHECKING:
    from ...application.ports import GetConfig


def get_config_in_memory(
    *,
    profile: str | None = None,
    start_dir: str | None = None,
) -> Config:
    """Return an empty in-memory Config."""
    return Config({}, {})


def config_source_in_memory(data: Mapping[str, Any]) -> GetConfig:
    """Return a GetConfig implementation that always yields ``data``.

    Example:
        >>> get_config = config_source_in_memory({"ses": {"region": "us-east-1"}})
        >>> get_config().get("ses", default={})["region"]
        'us-east-1'
    """
    frozen = {key: value for key, value in data.items()}

    def _get_config(*, profile: str | None = None, start_dir: str | None = None) -> Config:
        return Config(frozen, {})

    return _get_config


def display_config_in_memory(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    profile: str | None = None,
) -> None:
    """No-op display -- satisfies the DisplayConfig protocol."""


__all__ = [
    "config_source_in_memory",
    "display_config_in_memory",
    "get_config_in_memory",
]
